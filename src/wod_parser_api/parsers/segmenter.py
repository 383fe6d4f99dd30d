"""
Segmenter

Splits pasted workout text into candidate blocks, one per apparent workout
section. Boundaries are blank-line runs plus section headers such as
"STRENGTH", "**METCON:**", "WOD: Fran" or a quoted title line.

Date-only lines are dropped here; the date extractor reads them from the raw
input instead.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from wod_parser_api.parsers.date_extractor import is_date_line

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 50

KNOWN_HEADER = re.compile(
    r"^(STRENGTH|CONDITIONING|METCON|WOD|WORKOUT|SKILL|GYMNASTICS|ACCESSORY|FINISHER"
    r"|WARM[\s-]?UP|COOL[\s-]?DOWN|MINI[\s-]PUMP|BUY[\s-]IN|CASH[\s-]OUT)"
    r"\s*(?::\s*(.*))?$",
    re.IGNORECASE,
)
QUOTED_TITLE = re.compile(r'^["“”\'](.+?)["“”\']$')

# Words that mark a line as workout structure rather than a title
TYPE_KEYWORDS = re.compile(
    r"\b(amrap|emom|e\d+mom|for\s+time|rounds?|reps?|minutes?|seconds?"
    r"|build\s+to|work\s+up\s+to)\b|\bcap\s*:",
    re.IGNORECASE,
)
# Format words that keep an all-caps colon line in the body instead of opening a section
FORMAT_KEYWORDS = re.compile(
    r"\b(amrap|emom|e\d+mom|tabata|for\s+time|rounds?|reps?|rft|every|intervals?"
    r"|unbroken|rest|on\s+the\s+minute|build\s+to|work\s+up\s+to)\b",
    re.IGNORECASE,
)
# Rep, load, distance and clock notation
REP_TIME_NOTATION = re.compile(
    r"\d+\s*[x×]\s*\d+"  # 5x3
    r"|\d+(?:-\d+){2,}"  # 21-15-9
    r"|\d+:\d{2}"  # 12:00
    r"|@\s*\d+"  # @85%
    r"|\d+\s*(?:%|rm\b|reps?\b|rounds?\b|min\b|mins\b|minutes?\b|sec\b|secs\b|seconds?\b"
    r"|m\b|km\b|mi\b|miles?\b|cal\b|cals\b|lbs?\b|kg\b|in\b|ft\b)",
    re.IGNORECASE,
)


@dataclass
class Segment:
    """One candidate workout section of the input."""
    index: int
    header: Optional[str] = None
    name_line: Optional[str] = None
    body: str = ""

    @property
    def has_name(self) -> bool:
        return bool(self.name_line)

    @property
    def has_body(self) -> bool:
        return bool(self.body.strip())

    @property
    def text(self) -> str:
        """Name and body joined, for whole-segment scans."""
        return "\n".join(part for part in (self.name_line, self.body) if part)


@dataclass
class _Block:
    header: Optional[str] = None
    title: Optional[str] = None  # explicit title from a quoted line
    lines: List[str] = field(default_factory=list)

    def resolve(self) -> "tuple[Optional[str], List[str]]":
        """Split the block into (name_line, body_lines)."""
        if self.title:
            return self.title, self.lines
        if self.lines and looks_like_name(self.lines[0]):
            return self.lines[0].strip(), self.lines[1:]
        return None, self.lines

    def has_alpha(self) -> bool:
        return any(
            any(ch.isalpha() for ch in part)
            for part in [self.header or "", self.title or ""] + self.lines
        )


def _strip_decoration(line: str) -> str:
    return line.strip().strip("*_#").strip()


def looks_like_name(line: str) -> bool:
    """
    True when a line reads like a workout title.

    "Fran", "Summer Sweat" and "The Seven" qualify. "21-15-9 reps",
    "AMRAP 20 minutes" and "Back Squat 5x3 @85%" do not.
    """
    text = _strip_decoration(line).rstrip(":").strip()
    if not text or len(text) > MAX_NAME_LENGTH:
        return False
    if text[0].isdigit() or not any(ch.isalpha() for ch in text):
        return False
    if TYPE_KEYWORDS.search(text) or REP_TIME_NOTATION.search(text):
        return False
    return True


def _is_generic_header(text: str) -> bool:
    """All-caps label ending in a colon, e.g. "PART B:"."""
    if not text.endswith(":"):
        return False
    label = text[:-1].strip()
    if not label or not any(ch.isalpha() for ch in label):
        return False
    if label != label.upper() or any(ch.isdigit() for ch in label):
        return False
    return not FORMAT_KEYWORDS.search(label)


def _boundary(line: str) -> Optional[_Block]:
    """Return a fresh block when the line opens a new section."""
    text = _strip_decoration(line)
    if not text:
        return None

    m = KNOWN_HEADER.match(text)
    if m:
        header = m.group(1).upper()
        rest = _strip_decoration(m.group(2) or "")
        return _Block(header=header, lines=[rest] if rest else [])

    if _is_generic_header(text):
        return _Block(header=text[:-1].strip())

    m = QUOTED_TITLE.match(text)
    if m and m.group(1).strip():
        return _Block(title=m.group(1).strip())

    return None


def normalize_text(text: str) -> str:
    """Unify line endings and whitespace before splitting."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = text.replace("\t", " ").replace("\u00a0", " ")
    lines = [line.rstrip() for line in text.split("\n")]
    return re.sub(r"\n{3,}", "\n\n", "\n".join(lines)).strip("\n")


def _merge(blocks: List[_Block]) -> List[_Block]:
    """Fold a header-only or name-only block into the block that follows it."""
    merged: List[_Block] = []
    for block in blocks:
        if merged:
            prev = merged[-1]
            prev_name, prev_body = prev.resolve()
            next_name, _ = block.resolve()
            if not prev_body and block.header is None:
                if prev_name is None and prev.header is not None:
                    # "STRENGTH" then a blank line
                    merged[-1] = _Block(header=prev.header, title=block.title, lines=block.lines)
                    continue
                if prev_name is not None and next_name is None:
                    # "FRAN" then a blank line
                    merged[-1] = _Block(
                        header=prev.header,
                        title=prev_name,
                        lines=block.lines,
                    )
                    continue
        merged.append(block)
    return merged


def segment_text(text: Optional[str]) -> List[Segment]:
    """
    Split raw workout text into ordered segments.

    Returns an empty list when the input holds nothing with letters in it.
    """
    if not text or not text.strip():
        return []

    lines = [line for line in normalize_text(text).split("\n") if not is_date_line(line)]

    blocks: List[_Block] = []
    current = _Block()
    for line in lines:
        if not line.strip():
            blocks.append(current)
            current = _Block()
            continue
        opened = _boundary(line)
        if opened is not None:
            blocks.append(current)
            current = opened
            continue
        current.lines.append(line.strip())
    blocks.append(current)

    blocks = [b for b in blocks if b.has_alpha()]
    blocks = _merge(blocks)

    segments: List[Segment] = []
    for block in blocks:
        name_line, body_lines = block.resolve()
        segments.append(Segment(
            index=len(segments) + 1,
            header=block.header,
            name_line=_strip_decoration(name_line).rstrip(":").strip() if name_line else None,
            body="\n".join(body_lines).strip(),
        ))

    logger.debug(f"Segmented input into {len(segments)} block(s)")
    return segments
