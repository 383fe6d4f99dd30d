"""
Benchmark catalogue

Read-only lookup tables for the published benchmark workouts (Girls, Heroes,
Notables) and the barbell lift dictionary. Loaded once at startup and shared
by every parse call.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator, Mapping

from wod_parser_api.models import BENCHMARK_CATEGORIES, WORKOUT_TYPES
from wod_parser_api.utils import normalize_name

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"
DEFAULT_CATALOGUE_PATH = DATA_DIR / "benchmark_workouts.json"
DEFAULT_LIFTS_PATH = DATA_DIR / "barbell_lifts.json"

# Storage table each benchmark category is cloned from
SOURCE_TABLES = MappingProxyType({
    "girls": "girl_wods",
    "heroes": "hero_wods",
    "notables": "notables",
})

MIN_SEARCH_LENGTH = 2
DEFAULT_SEARCH_LIMIT = 10


class CatalogueError(RuntimeError):
    """Raised when a catalogue file is missing or malformed."""


class CatalogueNotLoadedError(RuntimeError):
    """Raised when the parser is used before a catalogue was loaded."""


@dataclass(frozen=True)
class BenchmarkWorkout:
    """A named workout with a fixed definition."""
    id: int
    name: str
    category: str
    canonical_description: str
    workout_type: str
    scoring: str
    time_cap_seconds: int | None = None
    total_effort: int | None = None
    barbell_lifts: tuple[str, ...] = ()
    normalized_name: str = field(default="", compare=False, repr=False)

    def __post_init__(self):
        if not self.normalized_name:
            object.__setattr__(self, "normalized_name", normalize_name(self.name))

    @property
    def source_table(self) -> str:
        return SOURCE_TABLES[self.category]


@dataclass(frozen=True)
class BarbellLift:
    """An entry in the barbell lift dictionary."""
    name: str
    category: str
    lift_type: str


class BenchmarkCatalogue:
    """Immutable benchmark and lift tables.

    Entries are kept in catalogue order (girls, heroes, notables, each in
    list order), which is also the tie-break order for fuzzy matching.
    """

    def __init__(
        self,
        girls: tuple[BenchmarkWorkout, ...] = (),
        heroes: tuple[BenchmarkWorkout, ...] = (),
        notables: tuple[BenchmarkWorkout, ...] = (),
        lifts: tuple[BarbellLift, ...] = (),
    ):
        self._by_category: Mapping[str, tuple[BenchmarkWorkout, ...]] = MappingProxyType({
            "girls": tuple(girls),
            "heroes": tuple(heroes),
            "notables": tuple(notables),
        })
        self._entries = tuple(girls) + tuple(heroes) + tuple(notables)
        self.lifts = tuple(lifts)

        # First entry wins when two categories share a name
        index: dict[str, BenchmarkWorkout] = {}
        for entry in self._entries:
            index.setdefault(entry.normalized_name, entry)
        self._index = MappingProxyType(index)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[BenchmarkWorkout]:
        return iter(self._entries)

    def all_entries(self) -> tuple[BenchmarkWorkout, ...]:
        """All benchmark entries in catalogue order."""
        return self._entries

    def by_category(self, category: str) -> tuple[BenchmarkWorkout, ...]:
        if category not in self._by_category:
            raise ValueError(f"Unknown benchmark category: {category!r}")
        return self._by_category[category]

    def find_exact(self, normalized: str) -> BenchmarkWorkout | None:
        """Look up an entry by its normalized name."""
        return self._index.get(normalized)

    def search(self, partial: str, limit: int = DEFAULT_SEARCH_LIMIT) -> list[str]:
        """
        Names containing the partial string, in catalogue order.

        Matching ignores case and punctuation. Queries shorter than two
        characters return nothing.
        """
        query = normalize_name(partial or "")
        if len(query) < MIN_SEARCH_LENGTH or limit <= 0:
            return []

        names: list[str] = []
        for entry in self._entries:
            if query in entry.normalized_name:
                names.append(entry.name)
                if len(names) >= limit:
                    break
        return names

    def counts(self) -> dict[str, int]:
        counts = {category: len(entries) for category, entries in self._by_category.items()}
        counts["lifts"] = len(self.lifts)
        return counts


def _read_json(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise CatalogueError(f"Catalogue file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise CatalogueError(f"Catalogue file is not valid JSON: {path}: {e}") from e

    if not isinstance(data, dict):
        raise CatalogueError(f"Catalogue file must contain a JSON object: {path}")
    return data


def _build_benchmark(row: dict[str, Any], category: str) -> BenchmarkWorkout:
    try:
        name = str(row["name"]).strip()
        workout_type = row.get("workout_type") or "for_time"
        if workout_type not in WORKOUT_TYPES:
            raise CatalogueError(f"{category}/{name}: unknown workout_type {workout_type!r}")
        return BenchmarkWorkout(
            id=int(row["id"]),
            name=name,
            category=category,
            canonical_description=str(row["workout_description"]),
            workout_type=workout_type,
            scoring=str(row.get("scoring") or "Time"),
            time_cap_seconds=row.get("time_cap_seconds"),
            total_effort=row.get("total_effort"),
            barbell_lifts=tuple(row.get("barbell_lifts") or ()),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise CatalogueError(f"Malformed {category} entry {row!r}: {e}") from e


def load_catalogue(
    catalogue_path: str | Path | None = None,
    lifts_path: str | Path | None = None,
) -> BenchmarkCatalogue:
    """
    Build the catalogue from JSON files.

    Args:
        catalogue_path: Benchmark workouts file. Defaults to the packaged data.
        lifts_path: Barbell lift dictionary. Defaults to the packaged data.

    Raises:
        CatalogueError: If a file is missing or malformed.
    """
    catalogue_file = Path(catalogue_path) if catalogue_path else DEFAULT_CATALOGUE_PATH
    lifts_file = Path(lifts_path) if lifts_path else DEFAULT_LIFTS_PATH

    raw = _read_json(catalogue_file)
    tables: dict[str, tuple[BenchmarkWorkout, ...]] = {}
    for category in BENCHMARK_CATEGORIES:
        rows = raw.get(category) or []
        if not isinstance(rows, list):
            raise CatalogueError(f"{catalogue_file}: '{category}' must be a list")
        entries = tuple(_build_benchmark(row, category) for row in rows)

        ids = [e.id for e in entries]
        if len(ids) != len(set(ids)):
            raise CatalogueError(f"{catalogue_file}: duplicate ids in '{category}'")
        names = [e.normalized_name for e in entries]
        if len(names) != len(set(names)):
            raise CatalogueError(f"{catalogue_file}: duplicate names in '{category}'")
        tables[category] = entries

    raw_lifts = _read_json(lifts_file).get("lifts") or []
    try:
        lifts = tuple(
            BarbellLift(
                name=str(row["name"]).strip(),
                category=str(row.get("category") or "other"),
                lift_type=str(row.get("lift_type") or ""),
            )
            for row in raw_lifts
        )
    except (KeyError, TypeError, AttributeError) as e:
        raise CatalogueError(f"Malformed lift dictionary {lifts_file}: {e}") from e

    catalogue = BenchmarkCatalogue(
        girls=tables["girls"],
        heroes=tables["heroes"],
        notables=tables["notables"],
        lifts=lifts,
    )
    logger.info(
        f"Loaded benchmark catalogue from {catalogue_file.name}: "
        f"{len(tables['girls'])} girls, {len(tables['heroes'])} heroes, "
        f"{len(tables['notables'])} notables, {len(lifts)} lifts"
    )
    return catalogue
