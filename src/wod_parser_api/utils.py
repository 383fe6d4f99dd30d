"""Utility functions."""
import re
from typing import Optional

_PARENTHETICAL = re.compile(r"\([^)]*\)|\[[^\]]*\]")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def to_int(s: Optional[str]) -> Optional[int]:
    """Convert string to int, returning None if conversion fails."""
    try:
        return int(s) if s is not None else None
    except Exception:
        return None


def normalize_name(name: str) -> str:
    """
    Normalize a workout name for comparison.

    Lowercases, drops parenthetical annotations like "(RX)" or "(95/65 lb)",
    spells out "&" and collapses punctuation and whitespace.

    Examples:
    - "FRAN (Rx)" -> "fran"
    - "  Filthy-Fifty!! " -> "filthy fifty"
    - "Clean & Jerk" -> "clean and jerk"
    """
    text = _PARENTHETICAL.sub(" ", name.lower())
    text = text.replace("&", " and ")
    return _NON_ALNUM.sub(" ", text).strip()


def levenshtein(a: str, b: str) -> int:
    """Character edit distance between two strings."""
    if a == b:
        return 0
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + cost,
            ))
        previous = current
    return previous[-1]
