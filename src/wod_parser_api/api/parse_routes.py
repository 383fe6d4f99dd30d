"""
Workout parse endpoints

Provides POST /workouts/parse for pasted workout text, plus read-only catalogue
lookups used by the logging UI (benchmark listing and name suggestions).
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from wod_parser_api.catalogue import BenchmarkWorkout, CatalogueNotLoadedError
from wod_parser_api.models import BENCHMARK_CATEGORIES, CamelModel, ParseWorkoutRequest
from wod_parser_api.parsers.workout_parser import WorkoutParser

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_SUGGESTION_LIMIT = 50


# ---------------------------------------------------------------------------
# Response Models
# ---------------------------------------------------------------------------

class BenchmarkWorkoutResponse(CamelModel):
    """One catalogue entry as listed by GET /workouts/benchmarks"""
    id: int
    name: str
    category: str
    workout_type: str
    scoring: str
    time_cap_seconds: Optional[int] = None
    total_effort: Optional[int] = None
    workout_description: str
    barbell_lifts: List[str] = []
    source_table: str

    @classmethod
    def from_benchmark(cls, entry: BenchmarkWorkout) -> "BenchmarkWorkoutResponse":
        return cls(
            id=entry.id,
            name=entry.name,
            category=entry.category,
            workout_type=entry.workout_type,
            scoring=entry.scoring,
            time_cap_seconds=entry.time_cap_seconds,
            total_effort=entry.total_effort,
            workout_description=entry.canonical_description,
            barbell_lifts=list(entry.barbell_lifts),
            source_table=entry.source_table,
        )


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

def get_parser(request: Request) -> WorkoutParser:
    """Return the parser built at startup."""
    parser = getattr(request.app.state, "parser", None)
    if parser is None:
        raise CatalogueNotLoadedError(
            "Workout parser is not initialized; the benchmark catalogue was never loaded"
        )
    return parser


# ---------------------------------------------------------------------------
# API Endpoints
# ---------------------------------------------------------------------------

@router.post("/workouts/parse")
def parse_workout(
    request: ParseWorkoutRequest,
    parser: WorkoutParser = Depends(get_parser),
) -> JSONResponse:
    """
    Parse pasted workout text into structured workout entities.

    ## Request Body
    - **rawText**: The text to parse (a day's training log, a single WOD, ...)
    - **requestingUserId**: Who is asking
    - **communityId**: Optional; custom workouts become community workouts

    ## Response
    A MultiEntityParseResult. Content problems (unknown names, too little
    structure) are reported in `errors` with a 200 status.
    """
    result = parser.parse(
        request.raw_text,
        requesting_user_id=request.requesting_user_id,
        community_id=request.community_id,
    )
    return JSONResponse(result.model_dump(by_alias=True, exclude_none=True))


@router.get("/workouts/benchmarks")
def list_benchmarks(
    category: Optional[str] = Query(default=None, description="girls, heroes or notables"),
    parser: WorkoutParser = Depends(get_parser),
):
    """List catalogue benchmark workouts, optionally for one category."""
    catalogue = parser.catalogue
    if category is None:
        entries = catalogue.all_entries()
    else:
        key = category.strip().lower()
        if key not in BENCHMARK_CATEGORIES:
            raise HTTPException(
                status_code=400,
                detail=f"Unknown category '{category}'. Expected one of: {', '.join(BENCHMARK_CATEGORIES)}",
            )
        entries = catalogue.by_category(key)

    return JSONResponse([
        BenchmarkWorkoutResponse.from_benchmark(entry).model_dump(by_alias=True, exclude_none=True)
        for entry in entries
    ])


@router.get("/workouts/suggestions")
def suggest_workouts(
    q: str = Query(default="", max_length=100, description="Partial workout name"),
    limit: int = Query(default=10, ge=1, le=MAX_SUGGESTION_LIMIT),
    parser: WorkoutParser = Depends(get_parser),
):
    """Catalogue names containing the partial query (at least two characters)."""
    return {"query": q, "suggestions": parser.catalogue.search(q, limit=limit)}


@router.get("/health")
def health(request: Request):
    """Health check endpoint."""
    parser = getattr(request.app.state, "parser", None)
    if parser is None:
        return JSONResponse({"status": "starting", "catalogue": None}, status_code=503)
    return {"status": "ok", "catalogue": parser.catalogue.counts()}
