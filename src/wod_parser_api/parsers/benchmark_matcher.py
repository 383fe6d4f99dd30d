"""
Benchmark matching.

Compares a segment's name line against the catalogue. Outcomes:

- exact: the normalized name equals a catalogue name
- suggestion: no exact match, but one or more names are near misses
- none: nothing close

Near miss means Levenshtein distance of at most 1 for catalogue names up to
five characters and at most 2 for longer ones, or a single token
substitution in a multi-word name ("Fight Gone Good" -> "Fight Gone Bad").
"""
import logging
import re
from dataclasses import dataclass
from typing import FrozenSet, List, Literal, Optional, Tuple

from wod_parser_api.catalogue import BenchmarkCatalogue, BenchmarkWorkout, CatalogueNotLoadedError
from wod_parser_api.config import DEFAULT_SUGGESTION_LIMIT
from wod_parser_api.utils import levenshtein, normalize_name

logger = logging.getLogger(__name__)

# Fixed scores, not computed from signal strength
EXACT_MATCH_CONFIDENCE = 90
CUSTOM_WORKOUT_CONFIDENCE = 80
PARTIAL_STRUCTURE_CONFIDENCE = 25

SHORT_NAME_LENGTH = 5
SHORT_NAME_MAX_EDITS = 1
LONG_NAME_MAX_EDITS = 2

RELATED_SIMILARITY_THRESHOLD = 0.7

STOPWORDS = frozenset({
    "a", "an", "and", "the", "of", "for", "in", "on", "with", "to", "at", "by",
    "wod", "workout", "day",
})
# Words that describe the format or the load, not the movement
NON_MOVEMENT_WORDS = frozenset({
    "time", "reps", "rep", "rounds", "round", "minutes", "minute", "min", "mins",
    "seconds", "second", "sec", "secs", "rest", "between", "each", "max", "lb", "lbs",
    "kg", "kgs", "in", "ft", "cal", "cals", "calories", "bodyweight", "amrap", "emom",
    "mile", "miles", "km", "box", "vest", "plate", "total",
})

MatchKind = Literal["exact", "suggestion", "none"]


@dataclass(frozen=True)
class MatchOutcome:
    """Result of matching one name line against the catalogue."""
    kind: MatchKind = "none"
    benchmark: Optional[BenchmarkWorkout] = None
    suggestions: Tuple[str, ...] = ()

    @property
    def is_exact(self) -> bool:
        return self.kind == "exact"

    @property
    def is_near_miss(self) -> bool:
        return self.kind == "suggestion"


NO_MATCH = MatchOutcome()


def _stem(token: str) -> str:
    if len(token) > 3 and token.endswith("s"):
        return token[:-1]
    return token


def movement_vocabulary(text: str) -> FrozenSet[str]:
    """Movement words in a workout text, with numbers, units and filler removed."""
    words = set()
    for token in normalize_name(text or "").split():
        if not token.isalpha() or len(token) < 2:
            continue
        if token in STOPWORDS or token in NON_MOVEMENT_WORDS:
            continue
        words.add(_stem(token))
    return frozenset(words)


def jaccard(a: FrozenSet[str], b: FrozenSet[str]) -> float:
    if not a or not b:
        return 0.0
    return len(a & b) / len(a | b)


def max_edits_for(name: str) -> int:
    return SHORT_NAME_MAX_EDITS if len(name) <= SHORT_NAME_LENGTH else LONG_NAME_MAX_EDITS


def is_token_substitution(candidate: str, target: str) -> bool:
    """Exactly one differing word, with at least one shared non-stopword."""
    a, b = candidate.split(), target.split()
    if len(a) < 2 or len(a) != len(b):
        return False
    differing = [i for i, (x, y) in enumerate(zip(a, b)) if x != y]
    if len(differing) != 1:
        return False
    shared = [w for i, w in enumerate(a) if i not in differing]
    return any(w not in STOPWORDS for w in shared)


class BenchmarkMatcher:
    """Exact and near-miss lookup of workout names in a benchmark catalogue."""

    def __init__(
        self,
        catalogue: BenchmarkCatalogue,
        suggestion_limit: int = DEFAULT_SUGGESTION_LIMIT,
    ):
        if catalogue is None:
            raise CatalogueNotLoadedError("BenchmarkMatcher requires a loaded catalogue")
        self.catalogue = catalogue
        self.suggestion_limit = suggestion_limit
        self._entries = catalogue.all_entries()
        self._vocabularies = {
            entry: movement_vocabulary(entry.canonical_description) for entry in self._entries
        }
        self._name_patterns = [
            (entry, re.compile(r"\b" + re.escape(entry.normalized_name) + r"\b"))
            for entry in self._entries
            if entry.normalized_name
        ]

    def near_misses(self, normalized: str) -> List[Tuple[int, int, BenchmarkWorkout]]:
        """(distance, catalogue position, entry) for every near-miss entry, best first."""
        misses = []
        for position, entry in enumerate(self._entries):
            target = entry.normalized_name
            if not target or target == normalized:
                continue
            limit = max_edits_for(target)
            if abs(len(target) - len(normalized)) <= limit:
                distance = levenshtein(normalized, target)
                if distance <= limit:
                    misses.append((distance, position, entry))
                    continue
            if is_token_substitution(normalized, target):
                misses.append((levenshtein(normalized, target), position, entry))
        misses.sort(key=lambda m: (m[0], m[1]))
        return misses

    def match(self, name: Optional[str]) -> MatchOutcome:
        """Match a candidate name line."""
        if not name:
            return NO_MATCH
        normalized = normalize_name(name)
        if not normalized:
            return NO_MATCH

        entry = self.catalogue.find_exact(normalized)
        if entry is not None:
            logger.debug(f"Exact benchmark match: {name!r} -> {entry.category}/{entry.name}")
            return MatchOutcome(kind="exact", benchmark=entry)

        misses = self.near_misses(normalized)
        if misses:
            names = tuple(entry.name for _, _, entry in misses[:self.suggestion_limit])
            logger.debug(f"Near miss for {name!r}: {list(names)}")
            return MatchOutcome(kind="suggestion", suggestions=names)

        return NO_MATCH

    def related_benchmark(self, name: Optional[str], body: str = "") -> Optional[str]:
        """
        Catalogue entry a custom workout resembles.

        A catalogue name written as a whole word or phrase ("Murph prep",
        "Fran-style couplet") wins. Otherwise the body's movement vocabulary
        must overlap an entry's description by at least 0.7 Jaccard.
        """
        haystacks = [normalize_name(part) for part in (name, body) if part]
        for entry, pattern in self._name_patterns:
            if any(pattern.search(h) for h in haystacks):
                return entry.name

        vocabulary = movement_vocabulary(body)
        if not vocabulary:
            return None
        for entry in self._entries:
            if jaccard(vocabulary, self._vocabularies[entry]) >= RELATED_SIMILARITY_THRESHOLD:
                return entry.name
        return None

    @staticmethod
    def confidence(outcome: MatchOutcome, has_name: bool, has_signal: bool, has_body: bool) -> int:
        """Per-entity confidence for a segment."""
        if outcome.is_exact:
            return EXACT_MATCH_CONFIDENCE
        if has_name and has_signal and has_body:
            return CUSTOM_WORKOUT_CONFIDENCE
        return PARTIAL_STRUCTURE_CONFIDENCE * sum((has_name, has_signal, has_body))
