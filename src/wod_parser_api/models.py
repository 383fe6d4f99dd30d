"""Data models for workout parsing."""
from typing import List, Literal, Optional, get_args

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

WorkoutType = Literal[
    'for_time',
    'amrap',
    'emom',
    'tabata',
    'strength',
    'interval',
    'endurance',
    'chipper',
    'ladder',
    'unbroken',
]

BenchmarkCategory = Literal['girls', 'heroes', 'notables']

WorkoutCategory = Literal['girls', 'heroes', 'notables', 'custom_community', 'custom_user']

WORKOUT_TYPES = get_args(WorkoutType)
BENCHMARK_CATEGORIES = get_args(BenchmarkCategory)

# Standard score format per workout type, used when a custom workout states none
SCORE_FORMATS = {
    'for_time': "Time (minutes:seconds)",
    'amrap': "Rounds + Reps",
    'emom': "Rounds completed",
    'tabata': "Lowest round score or total reps",
    'strength': "Weight (lbs/kg)",
    'interval': "Work completed per interval",
    'endurance': "Time or distance",
    'chipper': "Time (minutes:seconds)",
    'ladder': "Highest rung completed",
    'unbroken': "Time (minutes:seconds)",
}


class CamelModel(BaseModel):
    """Base model that serializes with camelCase keys and accepts either spelling."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ParseWorkoutRequest(CamelModel):
    """Request model for POST /workouts/parse"""
    raw_text: str = Field(..., max_length=50000, description="Pasted workout text")
    requesting_user_id: str = Field(..., min_length=1, max_length=255)
    community_id: Optional[int] = Field(
        default=None,
        description="When set, custom workouts are attributed to this community",
    )


class ParsedWorkoutEntity(CamelModel):
    """One structured workout extracted from a segment of the input."""
    name: str
    workout_description: str = Field(..., min_length=1, description="Body text, passed through")
    type: WorkoutType = 'for_time'
    scoring: Optional[str] = None
    time_cap_seconds: Optional[int] = Field(default=None, ge=0)
    total_effort: Optional[int] = Field(default=None, ge=0)
    barbell_lifts: Optional[List[str]] = None
    related_benchmark: Optional[str] = None
    category: WorkoutCategory = 'custom_user'

    # Set only for direct clones of a catalogue row
    source_table: Optional[str] = None
    database_id: Optional[int] = None

    confidence: int = Field(default=0, ge=0, le=100)


class MultiEntityParseResult(CamelModel):
    """Top-level response for a parse call."""
    success: bool = False
    workout_found: bool = False
    workout_entities: List[ParsedWorkoutEntity] = Field(default_factory=list)
    extracted_date: Optional[str] = Field(default=None, description="ISO date string")
    confidence: int = Field(default=0, ge=0, le=100)
    suggested_workouts: Optional[List[str]] = None
    errors: Optional[List[str]] = None


class CustomWorkoutRecord(CamelModel):
    """Insert payload for a custom user or community workout."""
    name: str
    category: Literal['custom_community', 'custom_user']
    workout_type: WorkoutType
    scoring: str
    time_cap_seconds: Optional[int] = None
    workout_description: str
    related_benchmark: Optional[str] = None
    user_id: Optional[str] = None
    community_id: Optional[int] = None
    created_by: Optional[str] = None
