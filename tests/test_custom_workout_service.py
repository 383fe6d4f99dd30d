"""Tests for custom workout record building."""
import pytest

from wod_parser_api.models import SCORE_FORMATS, ParsedWorkoutEntity
from wod_parser_api.services.custom_workout_service import build_custom_workout_record


@pytest.fixture
def custom_entity():
    return ParsedWorkoutEntity(
        name="Summer Sweat",
        workout_description="AMRAP 20 minutes:\n10 Burpees\n15 KB Swings",
        type="amrap",
        time_cap_seconds=1200,
        confidence=80,
    )


class TestBuildCustomWorkoutRecord:
    """Test cases for build_custom_workout_record."""

    def test_personal_workout(self, custom_entity):
        """Test a workout owned by the requesting user."""
        record = build_custom_workout_record(custom_entity, "user-1")
        assert record.category == "custom_user"
        assert record.user_id == "user-1"
        assert record.community_id is None
        assert record.created_by is None
        assert record.workout_type == "amrap"
        assert record.time_cap_seconds == 1200

    def test_community_workout(self, custom_entity):
        """Test a workout shared with a community."""
        record = build_custom_workout_record(custom_entity, "user-1", community_id=42)
        assert record.category == "custom_community"
        assert record.community_id == 42
        assert record.created_by == "user-1"
        assert record.user_id is None

    def test_default_scoring(self, custom_entity):
        record = build_custom_workout_record(custom_entity, "user-1")
        assert record.scoring == SCORE_FORMATS["amrap"]

    def test_stated_scoring_kept(self, custom_entity):
        entity = custom_entity.model_copy(update={"scoring": "Total reps"})
        assert build_custom_workout_record(entity, "user-1").scoring == "Total reps"

    def test_related_benchmark_carried(self, custom_entity):
        entity = custom_entity.model_copy(update={"related_benchmark": "Cindy"})
        assert build_custom_workout_record(entity, "user-1").related_benchmark == "Cindy"

    def test_rejects_benchmark_clone(self):
        fran = ParsedWorkoutEntity(
            name="Fran",
            workout_description="21-15-9",
            category="girls",
            source_table="girl_wods",
            database_id=7,
        )
        with pytest.raises(ValueError, match="benchmark"):
            build_custom_workout_record(fran, "user-1")

    def test_requires_user(self, custom_entity):
        with pytest.raises(ValueError):
            build_custom_workout_record(custom_entity, "")

    def test_from_parser_output(self, parser):
        """Records can be built straight from parser entities."""
        result = parser.parse("Summer Sweat\nAMRAP 20 minutes:\n10 Burpees", "user-1", community_id=9)
        record = build_custom_workout_record(result.workout_entities[0], "user-1", community_id=9)
        assert record.name == "Summer Sweat"
        assert record.category == "custom_community"
