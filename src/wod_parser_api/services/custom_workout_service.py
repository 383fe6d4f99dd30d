"""Build insert payloads for custom workouts found by the parser."""
import logging
from typing import Optional

from wod_parser_api.models import SCORE_FORMATS, CustomWorkoutRecord, ParsedWorkoutEntity

logger = logging.getLogger(__name__)


def build_custom_workout_record(
    entity: ParsedWorkoutEntity,
    user_id: str,
    community_id: Optional[int] = None,
) -> CustomWorkoutRecord:
    """
    Turn a parsed custom entity into a record for the persistence layer.

    Community workouts carry the community id and ``created_by``; personal
    workouts carry ``user_id``. Scoring falls back to the standard format for
    the workout type.

    Raises:
        ValueError: If the entity is a clone of a catalogue benchmark. Those
            are logged against the catalogue row, not stored as custom.
    """
    if entity.source_table is not None or entity.category not in ("custom_user", "custom_community"):
        raise ValueError(
            f"'{entity.name}' is a {entity.category} benchmark; log it against the catalogue row instead"
        )
    if not user_id:
        raise ValueError("user_id is required")

    scoring = entity.scoring or SCORE_FORMATS[entity.type]

    if community_id is not None:
        record = CustomWorkoutRecord(
            name=entity.name,
            category="custom_community",
            workout_type=entity.type,
            scoring=scoring,
            time_cap_seconds=entity.time_cap_seconds,
            workout_description=entity.workout_description,
            related_benchmark=entity.related_benchmark,
            community_id=community_id,
            created_by=user_id,
        )
    else:
        record = CustomWorkoutRecord(
            name=entity.name,
            category="custom_user",
            workout_type=entity.type,
            scoring=scoring,
            time_cap_seconds=entity.time_cap_seconds,
            workout_description=entity.workout_description,
            related_benchmark=entity.related_benchmark,
            user_id=user_id,
        )

    logger.debug(f"Built {record.category} record '{record.name}' ({record.workout_type})")
    return record
