"""
Date extraction for pasted training logs.

Supported forms:
- 27-June-2025 | Friday   (day-month name-year, any case, optional weekday)
- 2025-06-27              (ISO)
- June 27, 2025           (comma optional)
- 27/6/2025               (day first)

Coach posts often wrap the date line in asterisks ("**27-Jun-2025**"), which is
tolerated. Tokens that name an impossible calendar day are skipped.
"""
import logging
import re
from datetime import date
from typing import Iterator, Optional, Tuple

logger = logging.getLogger(__name__)

MONTH_NAMES = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)

_WEEKDAY = r"(?:mon|tue|tues|wed|thu|thur|thurs|fri|sat|sun)[a-z]*\.?"

DAY_MONTH_YEAR = re.compile(r"\b(\d{1,2})-([A-Za-z]{3,9})\.?-(\d{4})\b")
ISO_DATE = re.compile(r"\b(\d{4})-(\d{1,2})-(\d{1,2})\b")
MONTH_DAY_YEAR = re.compile(r"\b([A-Za-z]{3,9})\.?\s+(\d{1,2})(?:st|nd|rd|th)?,?\s+(\d{4})\b")
SLASH_DATE = re.compile(r"\b(\d{1,2})/(\d{1,2})/(\d{4})\b")

# Whole-line form: optional leading weekday, one date token, optional "| Weekday"
_DATE_TOKEN = (
    r"(?:\d{1,2}-[a-z]{3,9}\.?-\d{4}"
    r"|\d{4}-\d{1,2}-\d{1,2}"
    r"|[a-z]{3,9}\.?\s+\d{1,2}(?:st|nd|rd|th)?,?\s+\d{4}"
    r"|\d{1,2}/\d{1,2}/\d{4})"
)
DATE_LINE = re.compile(
    rf"^(?:{_WEEKDAY},?\s+)?{_DATE_TOKEN}(?:\s*[|,\-]?\s*{_WEEKDAY})?$",
    re.IGNORECASE,
)


def month_number(token: str) -> Optional[int]:
    """Map a full or abbreviated month name to 1-12."""
    t = token.lower().rstrip(".")
    if t == "sept":
        return 9
    if len(t) < 3:
        return None
    for i, name in enumerate(MONTH_NAMES, start=1):
        if name.startswith(t):
            return i
    return None


def is_date_line(line: str) -> bool:
    """True when the line holds nothing but a date (and optional weekday)."""
    stripped = line.strip().strip("*_").strip()
    if not stripped:
        return False
    return bool(DATE_LINE.match(stripped))


def _candidates(line: str) -> Iterator[Tuple[int, int, int, int]]:
    """Yield (position, year, month, day) for every date-shaped token in a line."""
    for m in DAY_MONTH_YEAR.finditer(line):
        month = month_number(m.group(2))
        if month:
            yield m.start(), int(m.group(3)), month, int(m.group(1))
    for m in ISO_DATE.finditer(line):
        yield m.start(), int(m.group(1)), int(m.group(2)), int(m.group(3))
    for m in MONTH_DAY_YEAR.finditer(line):
        month = month_number(m.group(1))
        if month:
            yield m.start(), int(m.group(3)), month, int(m.group(2))
    for m in SLASH_DATE.finditer(line):
        yield m.start(), int(m.group(3)), int(m.group(2)), int(m.group(1))


def extract_date(text: Optional[str]) -> Optional[str]:
    """
    Return the first valid date in the text as an ISO string.

    Lines are scanned top to bottom, tokens left to right. A malformed token
    such as "31-February-2025" is ignored and the scan continues.
    """
    if not text:
        return None

    for line in text.splitlines():
        for _, year, month, day in sorted(_candidates(line)):
            try:
                found = date(year, month, day)
            except ValueError:
                logger.debug(f"Skipping invalid date token {year}-{month}-{day}")
                continue
            return found.isoformat()
    return None
