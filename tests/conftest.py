"""
Test fixtures for wod-parser-api.

Provides the packaged benchmark catalogue, a parser built on it, and FastAPI
test clients that run the app lifespan (which loads the catalogue).
"""

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Repo root: .../wod-parser-api
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make src/ importable so tests can do `import wod_parser_api...`
for p in {ROOT, SRC}:
    p_str = str(p)
    if p_str not in sys.path:
        sys.path.insert(0, p_str)

from wod_parser_api.main import app
from wod_parser_api.catalogue import BenchmarkCatalogue, load_catalogue
from wod_parser_api.parsers.workout_parser import WorkoutParser


TEST_USER_ID = "test-user-123"


@pytest.fixture
def user_id() -> str:
    """The requesting user sent with every parse call."""
    return TEST_USER_ID


# ---------------------------------------------------------------------------
# Catalogue / Parser
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def catalogue() -> BenchmarkCatalogue:
    """The packaged benchmark catalogue."""
    return load_catalogue()


@pytest.fixture
def parser(catalogue) -> WorkoutParser:
    """Parser over the packaged catalogue with the default suggestion limit."""
    return WorkoutParser(catalogue)


# ---------------------------------------------------------------------------
# Core Test Client
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def api_client():
    """Shared FastAPI TestClient for wod-parser-api."""
    with TestClient(app) as c:
        yield c


@pytest.fixture
def client():
    """Per-test FastAPI TestClient (for tests needing fresh state)."""
    with TestClient(app) as c:
        yield c


# ---------------------------------------------------------------------------
# Sample Text Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fran_text() -> str:
    """Fran with an explicit time cap."""
    return (
        "Fran\n"
        "21-15-9 reps for time of:\n"
        "Thrusters (95/65 lb)\n"
        "Pull-ups\n"
        "Time cap: 8 minutes"
    )


@pytest.fixture
def daily_log_text() -> str:
    """A coach's daily post: date, strength piece and a named metcon."""
    return (
        "27-June-2025 | Friday\n"
        "\n"
        "STRENGTH\n"
        "Back Squat 5x3 @85%\n"
        "\n"
        "CONDITIONING\n"
        "Fran\n"
        "21-15-9 reps for time:\n"
        "Thrusters (95/65 lb)\n"
        "Pull-ups"
    )
