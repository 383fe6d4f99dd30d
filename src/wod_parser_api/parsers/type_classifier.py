"""
Workout type classification.

Assigns one of the ten workout types to a segment body by keyword and rep
scheme. Checks run in priority order and the first signal wins:

    amrap > emom > tabata > for_time (ladder / chipper) > strength
    > unbroken > interval > endurance

A body with none of these signals is for_time with has_signal=False.
"""
import logging
import re
from typing import List, Optional, Tuple

from wod_parser_api.utils import to_int

logger = logging.getLogger(__name__)

DEFAULT_TYPE = "for_time"

MIN_LADDER_LINES = 3
MIN_CHIPPER_MOVEMENTS = 5
MAX_STRENGTH_SET_REPS = 10
MIN_ENDURANCE_MINUTES = 20

AMRAP_PATTERN = re.compile(
    r"\bamrap\b|\bas\s+many\s+(?:rounds|reps)(?:\s+(?:and|\+|&)\s+reps)?\s+as\s+possible\b",
    re.IGNORECASE,
)
EMOM_PATTERN = re.compile(r"\be\d*mom\b|\bevery\s+minute\s+on\s+the\s+minute\b", re.IGNORECASE)
TABATA_PATTERN = re.compile(r"\btabata\b", re.IGNORECASE)
FOR_TIME_PATTERN = re.compile(r"\bfor\s+time\b|\brft\b", re.IGNORECASE)
ROUNDS_PATTERN = re.compile(r"\brounds?\b", re.IGNORECASE)

# 5-5-3-3-1-1
SET_SEQUENCE_PATTERN = re.compile(r"(?<![\d-])\d{1,2}(?:\s*-\s*\d{1,2}){2,}(?![\d-])")
# 5x3, 5 x 3, but not 4x400m or 3x10 min
SETS_X_REPS_PATTERN = re.compile(
    r"\b\d+\s*[x×]\s*\d+\b"
    r"(?!\s*(?:m\b|meters?\b|metres?\b|km\b|mi\b|miles?\b|min\b|mins\b|minutes?\b"
    r"|s\b|sec\b|secs\b|seconds?\b|cal\b|cals\b|calories\b))",
    re.IGNORECASE,
)
PERCENT_LOAD_PATTERN = re.compile(r"@\s*\d+(?:\.\d+)?\s*%", re.IGNORECASE)
REP_MAX_PATTERN = re.compile(r"\b\d+\s*rm\b", re.IGNORECASE)
BUILD_TO_PATTERN = re.compile(
    r"\bbuild(?:ing)?\s+(?:up\s+)?to\b|\bwork(?:ing)?\s+up\s+to\b",
    re.IGNORECASE,
)

UNBROKEN_PATTERN = re.compile(r"\bunbroken\b", re.IGNORECASE)

_SHORT_TIME = r"(?:s|sec|secs|seconds?|min|mins|minutes?|[\"'])"
WORK_REST_PATTERN = re.compile(
    rf"\b\d+\s*{_SHORT_TIME}?\s*(?:on|work)\s*[/,]?\s*\d+\s*{_SHORT_TIME}?\s*(?:off|rest)\b",
    re.IGNORECASE,
)
EVERY_N_MINUTES_PATTERN = re.compile(
    r"\bevery\s+\d+(?::\d{2})?\s*(?:min|mins|minutes?)\b",
    re.IGNORECASE,
)
ROUNDS_REST_PATTERN = re.compile(
    rf"\b\d+\s+rounds?\b[\s\S]*?(?:\brest\s*:?\s*\d+|\b\d+\s*{_SHORT_TIME}\s+rest\b)",
    re.IGNORECASE,
)
INTERVAL_WORD_PATTERN = re.compile(r"\bintervals?\b", re.IGNORECASE)

ENDURANCE_PATTERN = re.compile(
    r"\b(?:run|running|jog|row|rowing|bike|biking|cycle|cycling|swim|swimming|ski|skierg|erg)\b",
    re.IGNORECASE,
)
DURATION_MINUTES_PATTERN = re.compile(r"\b(\d{1,5})\s*(?:min|mins|minutes?)\b", re.IGNORECASE)
DURATION_HOURS_PATTERN = re.compile(r"\b(\d{1,3}(?:\.\d+)?)\s*(?:h|hr|hrs|hours?)\b", re.IGNORECASE)

# "21 Thrusters", "50 Box jumps (24/20 in)"; the count must be followed by a movement word
MOVEMENT_LINE_PATTERN = re.compile(r"^\s*[-*•]?\s*(\d{1,5})(?!\d)\s*(?:x\s+)?([A-Za-z][A-Za-z' -]*)")
UNIT_WORDS = {
    "m", "meter", "meters", "metre", "metres", "km", "k", "mi", "mile", "miles",
    "min", "mins", "minute", "minutes", "sec", "secs", "second", "seconds", "s",
    "cal", "cals", "calorie", "calories", "round", "rounds", "rep", "reps",
    "lb", "lbs", "kg", "kgs", "in", "ft", "x",
}


def movement_reps(text: str) -> List[Tuple[int, str]]:
    """
    Movement lines with a leading rep count, in order.

    Returns (reps, movement) pairs such as (21, "thrusters"). Distance, time
    and calorie lines ("400m Run", "2 min rest") are skipped.
    """
    movements: List[Tuple[int, str]] = []
    for line in text.splitlines():
        m = MOVEMENT_LINE_PATTERN.match(line)
        if not m:
            continue
        words = m.group(2).strip().lower().split()
        if not words or words[0] in UNIT_WORDS or words[0] in ("rest", "for"):
            continue
        reps = to_int(m.group(1))
        if reps is not None:
            movements.append((reps, " ".join(words)))
    return movements


def _is_ladder(counts: List[int]) -> bool:
    if len(counts) < MIN_LADDER_LINES:
        return False
    step = counts[1] - counts[0]
    if step == 0:
        return False
    return all(b - a == step for a, b in zip(counts, counts[1:]))


def _is_chipper(text: str, movements: List[Tuple[int, str]]) -> bool:
    if ROUNDS_PATTERN.search(text):
        return False
    distinct = {name for _, name in movements}
    if len(distinct) < MIN_CHIPPER_MOVEMENTS:
        return False
    counts = [reps for reps, _ in movements]
    return all(b <= a for a, b in zip(counts, counts[1:]))


def _has_strength_notation(text: str) -> bool:
    for m in SET_SEQUENCE_PATTERN.finditer(text):
        numbers = [int(n) for n in re.findall(r"\d+", m.group(0))]
        if all(n <= MAX_STRENGTH_SET_REPS for n in numbers):
            return True
    return bool(
        SETS_X_REPS_PATTERN.search(text)
        or PERCENT_LOAD_PATTERN.search(text)
        or REP_MAX_PATTERN.search(text)
        or BUILD_TO_PATTERN.search(text)
    )


def _is_interval(text: str) -> bool:
    return bool(
        WORK_REST_PATTERN.search(text)
        or EVERY_N_MINUTES_PATTERN.search(text)
        or ROUNDS_REST_PATTERN.search(text)
        or INTERVAL_WORD_PATTERN.search(text)
    )


def _longest_duration_minutes(text: str) -> Optional[float]:
    durations = [float(m.group(1)) for m in DURATION_MINUTES_PATTERN.finditer(text)]
    durations += [float(m.group(1)) * 60 for m in DURATION_HOURS_PATTERN.finditer(text)]
    return max(durations) if durations else None


def _is_endurance(text: str) -> bool:
    if not ENDURANCE_PATTERN.search(text):
        return False
    minutes = _longest_duration_minutes(text)
    if minutes is None or minutes < MIN_ENDURANCE_MINUTES:
        return False
    return not movement_reps(text)


class TypeClassifier:
    """Keyword and rep-scheme based workout type detection."""

    @staticmethod
    def classify(text: Optional[str]) -> Tuple[str, bool]:
        """
        Classify a segment.

        Args:
            text: Segment name and body.

        Returns:
            (workout_type, has_signal). has_signal is False only for the
            for_time fallback.
        """
        if not text or not text.strip():
            return DEFAULT_TYPE, False

        if AMRAP_PATTERN.search(text):
            return "amrap", True
        if EMOM_PATTERN.search(text):
            return "emom", True
        if TABATA_PATTERN.search(text):
            return "tabata", True

        if FOR_TIME_PATTERN.search(text):
            movements = movement_reps(text)
            if _is_ladder([reps for reps, _ in movements]):
                return "ladder", True
            if _is_chipper(text, movements):
                return "chipper", True
            return "for_time", True

        if _has_strength_notation(text):
            return "strength", True
        if UNBROKEN_PATTERN.search(text):
            return "unbroken", True
        if _is_interval(text):
            return "interval", True
        if _is_endurance(text):
            return "endurance", True

        return DEFAULT_TYPE, False
