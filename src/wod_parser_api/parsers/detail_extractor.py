"""
Detail extraction: time cap, total effort, barbell lifts and scoring.

Numeric parse failures leave a field unset. A cap label with no readable
value is reported as a notice instead of raising.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from wod_parser_api.utils import to_int

logger = logging.getLogger(__name__)

TIME_CAP_NOT_RECOGNIZED = "time cap not recognized"

# "Time cap: 8 minutes", "Cap: 12 mins", "TC: 15", "Time cap 12:30"
CAP_LABEL_PATTERN = re.compile(r"\b(?:time[\s-]*cap|cap|tc)\b\s*[:=\-]?\s*", re.IGNORECASE)
CAP_CLOCK_VALUE = re.compile(r"(\d{1,3}):(\d{2})\b")
CAP_NUMBER_VALUE = re.compile(
    r"(\d{1,5}(?:\.\d+)?)(?!\d)\s*(mins?|minutes?|m\b|'|secs?|seconds?|s\b)?",
    re.IGNORECASE,
)
# "(12 min cap)", "20 minute time cap"
CAP_TRAILING_PATTERN = re.compile(
    r"\b(\d{1,5}(?:\.\d+)?)\s*(?:-\s*)?(?:min|mins|minutes?|m)?\s*(?:time\s*)?cap\b",
    re.IGNORECASE,
)
# "AMRAP 20", "EMOM 12 minutes", "E2MOM 10"
TIMED_FORMAT_PATTERN = re.compile(
    r"\b(?:amrap|e\d*mom)\s*(?:in\s+|of\s+|for\s+)?(\d{1,5})\b",
    re.IGNORECASE,
)
# "20 min AMRAP", "12-minute EMOM"
TIMED_FORMAT_LEADING_PATTERN = re.compile(
    r"\b(\d{1,5})\s*-?\s*(?:min|mins|minutes?)\s+(?:amrap|e\d*mom)\b",
    re.IGNORECASE,
)
DURATION_PATTERN = re.compile(r"\b(\d{1,5})\s*-?\s*(?:min|mins|minutes?)\b", re.IGNORECASE)

TOTAL_LABEL_PATTERN = re.compile(r"\btotal\s*:\s*(\d{1,5})\s*(?:reps?)?\b", re.IGNORECASE)
TOTAL_REPS_PATTERN = re.compile(r"\b(\d{1,5})\s+total\s+reps?\b", re.IGNORECASE)
ROUNDS_COUNT_PATTERN = re.compile(r"\b(\d{1,5})\s+rounds?\b", re.IGNORECASE)

SCORING_PATTERN = re.compile(r"^\s*\**\s*(?:scoring|score)\s*\**\s*:\s*\**\s*(.+?)\s*$", re.IGNORECASE | re.MULTILINE)


@dataclass
class SegmentDetails:
    """Fields pulled out of one segment's text."""
    time_cap_seconds: Optional[int] = None
    # True when the cap came from a cap label rather than AMRAP/EMOM or a duration
    time_cap_explicit: bool = False
    total_effort: Optional[int] = None
    # True for "Total: N reps" style totals, False for "N rounds"
    total_effort_explicit: bool = False
    barbell_lifts: List[str] = field(default_factory=list)
    scoring: Optional[str] = None
    notices: List[str] = field(default_factory=list)


def _to_seconds(value: str, unit: Optional[str]) -> Optional[int]:
    unit = (unit or "").lower()
    try:
        amount = float(value)
        if unit.startswith("s"):
            return int(round(amount))
        return int(round(amount * 60))
    except (ValueError, OverflowError):
        return None


def parse_cap_value(text: str) -> Optional[int]:
    """Read a cap value like "8 minutes", "12:30" or "15" (minutes) into seconds."""
    clock = CAP_CLOCK_VALUE.match(text)
    if clock:
        return to_int(clock.group(1)) * 60 + to_int(clock.group(2))
    number = CAP_NUMBER_VALUE.match(text)
    if number:
        return _to_seconds(number.group(1), number.group(2))
    return None


def extract_time_cap(text: str) -> Tuple[Optional[int], bool, bool]:
    """
    Find the time cap in seconds.

    Returns (seconds, explicit, unreadable_label). A cap label wins, then an
    "AMRAP N" / "EMOM N" duration, then the first "N minutes" in the text.
    """
    label_seen = False
    for m in CAP_LABEL_PATTERN.finditer(text):
        label_seen = True
        seconds = parse_cap_value(text[m.end():])
        if seconds is not None:
            return seconds, True, False

    trailing = CAP_TRAILING_PATTERN.search(text)
    if trailing:
        seconds = _to_seconds(trailing.group(1), "min")
        if seconds is not None:
            return seconds, True, False

    for pattern in (TIMED_FORMAT_PATTERN, TIMED_FORMAT_LEADING_PATTERN, DURATION_PATTERN):
        m = pattern.search(text)
        minutes = to_int(m.group(1)) if m else None
        if minutes is not None:
            return minutes * 60, False, label_seen

    return None, False, label_seen


def extract_total_effort(text: str) -> Tuple[Optional[int], bool]:
    """Explicit totals only: "Total: 150 reps", "150 total reps" or "N rounds"."""
    for pattern in (TOTAL_LABEL_PATTERN, TOTAL_REPS_PATTERN):
        m = pattern.search(text)
        total = to_int(m.group(1)) if m else None
        if total is not None:
            return total, True
    m = ROUNDS_COUNT_PATTERN.search(text)
    rounds = to_int(m.group(1)) if m else None
    if rounds is not None:
        return rounds, False
    return None, False


def extract_scoring(text: str) -> Optional[str]:
    m = SCORING_PATTERN.search(text)
    if not m:
        return None
    value = m.group(1).strip().strip("*").strip()
    return value or None


def _lift_search_text(text: str) -> str:
    text = text.lower().replace("&", " and ")
    text = re.sub(r"[-_/]", " ", text)
    return re.sub(r"[ ]{2,}", " ", text)


class DetailExtractor:
    """Pulls caps, totals, lifts and scoring out of segment text."""

    def __init__(self, lift_names: Iterable[str] = ()):
        # Longest first so "Squat Clean" masks "Clean"
        names = sorted({n for n in lift_names if n}, key=lambda n: (-len(n), n))
        self._lift_patterns = [
            (
                name,
                re.compile(
                    r"\b" + r"\s+".join(re.escape(w) for w in _lift_search_text(name).split())
                    + r"(?:s|es)?\b"
                ),
            )
            for name in names
        ]

    def find_lifts(self, text: str) -> List[str]:
        """Barbell lifts named in the text, deduplicated in first-seen order."""
        if not text or not self._lift_patterns:
            return []

        search = _lift_search_text(text)
        found: List[Tuple[int, str]] = []
        for name, pattern in self._lift_patterns:
            for m in pattern.finditer(search):
                found.append((m.start(), name))
            # Mask matched spans so shorter names can't re-match inside them
            search = pattern.sub(lambda m: " " * len(m.group(0)), search)

        lifts: List[str] = []
        for _, name in sorted(found):
            if name not in lifts:
                lifts.append(name)
        return lifts

    def extract(self, text: Optional[str]) -> SegmentDetails:
        details = SegmentDetails()
        if not text or not text.strip():
            return details

        cap, explicit, unreadable = extract_time_cap(text)
        details.time_cap_seconds = cap
        details.time_cap_explicit = explicit
        if unreadable:
            details.notices.append(TIME_CAP_NOT_RECOGNIZED)

        details.total_effort, details.total_effort_explicit = extract_total_effort(text)
        details.barbell_lifts = self.find_lifts(text)
        details.scoring = extract_scoring(text)
        return details
