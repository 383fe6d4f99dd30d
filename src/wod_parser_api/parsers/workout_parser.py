"""
Workout parser

Runs the pipeline over pasted text and aggregates the per-segment results:

    segment -> match benchmark -> classify type -> extract details -> entity

The date is read once from the whole input. The catalogue is injected and
never modified, so one parser instance serves every request.
"""
import logging
from typing import List, Optional

from wod_parser_api.catalogue import BenchmarkCatalogue, CatalogueNotLoadedError
from wod_parser_api.config import DEFAULT_SUGGESTION_LIMIT
from wod_parser_api.models import MultiEntityParseResult, ParsedWorkoutEntity
from wod_parser_api.parsers.benchmark_matcher import BenchmarkMatcher, MatchOutcome
from wod_parser_api.parsers.date_extractor import extract_date
from wod_parser_api.parsers.detail_extractor import DetailExtractor, SegmentDetails
from wod_parser_api.parsers.segmenter import Segment, segment_text
from wod_parser_api.parsers.type_classifier import TypeClassifier

logger = logging.getLogger(__name__)

NO_INPUT_ERROR = "no input provided"
NO_WORKOUT_ERROR = "no workout found in input"

# Entities need at least this many of {name, type signal, body}
MIN_STRUCTURE_ELEMENTS = 2


class WorkoutParser:
    """Turns freeform workout text into a MultiEntityParseResult."""

    def __init__(
        self,
        catalogue: Optional[BenchmarkCatalogue],
        suggestion_limit: int = DEFAULT_SUGGESTION_LIMIT,
    ):
        if catalogue is None:
            raise CatalogueNotLoadedError("WorkoutParser requires a loaded catalogue")
        self.catalogue = catalogue
        self.suggestion_limit = suggestion_limit
        self.matcher = BenchmarkMatcher(catalogue, suggestion_limit=suggestion_limit)
        self.extractor = DetailExtractor(lift.name for lift in catalogue.lifts)

    def parse(
        self,
        raw_text: Optional[str],
        requesting_user_id: Optional[str] = None,
        community_id: Optional[int] = None,
    ) -> MultiEntityParseResult:
        """
        Parse pasted workout text.

        Args:
            raw_text: The text as pasted by the user.
            requesting_user_id: Identity of the caller, used for logging only.
            community_id: When set, custom entities are community workouts.

        Returns:
            MultiEntityParseResult. Content problems are reported in
            ``errors``; this method does not raise on malformed text.
        """
        if raw_text is None or not raw_text.strip():
            return MultiEntityParseResult(
                success=False,
                workout_found=False,
                workout_entities=[],
                confidence=0,
                errors=[NO_INPUT_ERROR],
            )

        segments = segment_text(raw_text)
        extracted_date = extract_date(raw_text)
        logger.debug(f"Parsing {len(raw_text)} chars for user {requesting_user_id}: {len(segments)} segment(s)")

        entities: List[ParsedWorkoutEntity] = []
        diagnostics: List[str] = []
        notices: List[str] = []
        suggestions: List[str] = []

        for segment in segments:
            outcome = self.matcher.match(segment.name_line)
            if segment.name_line is None and segment.header:
                # "FRAN:" written as a section label
                header_outcome = self.matcher.match(segment.header)
                if header_outcome.is_exact:
                    outcome = header_outcome
            workout_type, has_signal = TypeClassifier.classify(segment.text)
            details = self.extractor.extract(segment.text)

            if outcome.is_exact:
                entity = self._benchmark_entity(segment, outcome, details)
            elif outcome.is_near_miss:
                entity = None
                suggestions.extend(outcome.suggestions)
                diagnostics.append(
                    f"segment {segment.index}: '{segment.name_line}' is not a known benchmark; "
                    f"did you mean {', '.join(outcome.suggestions)}?"
                )
            else:
                present = sum((segment.has_name, has_signal, segment.has_body))
                if present >= MIN_STRUCTURE_ELEMENTS:
                    entity = self._custom_entity(
                        segment, outcome, details, workout_type, has_signal,
                        community_id, extracted_date,
                    )
                else:
                    entity = None
                    diagnostics.append(
                        f"segment {segment.index}: not enough workout structure to parse"
                    )

            if entity is not None:
                entities.append(entity)
                notices.extend(f"{notice} in segment {segment.index}" for notice in details.notices)

            logger.debug(
                f"Segment {segment.index}: match={outcome.kind} type={workout_type} "
                f"signal={has_signal} entity={'yes' if entity else 'no'}"
            )

        workout_found = bool(entities)
        result = MultiEntityParseResult(
            success=workout_found,
            workout_found=workout_found,
            workout_entities=entities,
            extracted_date=extracted_date,
            confidence=max((e.confidence for e in entities), default=0),
        )

        if workout_found:
            errors = notices + diagnostics
            result.errors = errors or None
        else:
            result.errors = diagnostics or [NO_WORKOUT_ERROR]
            merged = list(dict.fromkeys(suggestions))[:self.suggestion_limit]
            result.suggested_workouts = merged or None

        logger.info(
            f"Parsed {len(segments)} segment(s) into {len(entities)} workout(s), "
            f"confidence={result.confidence}"
        )
        return result

    def _benchmark_entity(
        self,
        segment: Segment,
        outcome: MatchOutcome,
        details: SegmentDetails,
    ) -> ParsedWorkoutEntity:
        benchmark = outcome.benchmark
        time_cap = details.time_cap_seconds if details.time_cap_explicit else benchmark.time_cap_seconds
        total_effort = details.total_effort if details.total_effort_explicit else benchmark.total_effort
        lifts = details.barbell_lifts or list(benchmark.barbell_lifts)

        return ParsedWorkoutEntity(
            name=benchmark.name,
            workout_description=segment.body or benchmark.canonical_description,
            type=benchmark.workout_type,
            scoring=benchmark.scoring,
            time_cap_seconds=time_cap,
            total_effort=total_effort,
            barbell_lifts=lifts or None,
            category=benchmark.category,
            source_table=benchmark.source_table,
            database_id=benchmark.id,
            confidence=BenchmarkMatcher.confidence(outcome, True, True, True),
        )

    def _custom_entity(
        self,
        segment: Segment,
        outcome: MatchOutcome,
        details: SegmentDetails,
        workout_type: str,
        has_signal: bool,
        community_id: Optional[int],
        extracted_date: Optional[str] = None,
    ) -> ParsedWorkoutEntity:
        if segment.name_line:
            name = segment.name_line
        elif segment.header:
            name = f"{segment.header.title()} Work"
            if extracted_date:
                name = f"{name} - {extracted_date}"
        else:
            name = f"Workout {segment.index}"

        return ParsedWorkoutEntity(
            name=name,
            workout_description=segment.body or segment.name_line,
            type=workout_type,
            scoring=details.scoring,
            time_cap_seconds=details.time_cap_seconds,
            total_effort=details.total_effort,
            barbell_lifts=details.barbell_lifts or None,
            related_benchmark=self.matcher.related_benchmark(segment.name_line, segment.body),
            category="custom_community" if community_id is not None else "custom_user",
            confidence=BenchmarkMatcher.confidence(
                outcome, segment.has_name, has_signal, segment.has_body,
            ),
        )
