"""
Date Detectors for Deadline Tracker.
Finds absolute calendar dates and relative duration phrases in contract text,
and provides the calendar arithmetic used to resolve them.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, NamedTuple, Optional, Sequence

from deadline_tracker.processing.normalizer import position_to_line

logger = logging.getLogger(__name__)

MONTHS = "january|february|march|april|may|june|july|august|september|october|november|december"
SHORT_MONTHS = "jan|feb|mar|apr|may|jun|jul|aug|sep|sept|oct|nov|dec"

MONTH_NUMBERS = {
    "january": 1, "jan": 1,
    "february": 2, "feb": 2,
    "march": 3, "mar": 3,
    "april": 4, "apr": 4,
    "may": 5,
    "june": 6, "jun": 6,
    "july": 7, "jul": 7,
    "august": 8, "aug": 8,
    "september": 9, "sep": 9, "sept": 9,
    "october": 10, "oct": 10,
    "november": 11, "nov": 11,
    "december": 12, "dec": 12,
}

NUMBER_WORD_UNITS = {
    "zero": 0, "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
    "eleven": 11, "twelve": 12, "thirteen": 13, "fourteen": 14, "fifteen": 15,
    "sixteen": 16, "seventeen": 17, "eighteen": 18, "nineteen": 19,
}

NUMBER_WORD_TENS = {
    "twenty": 20, "thirty": 30, "forty": 40, "fifty": 50,
    "sixty": 60, "seventy": 70, "eighty": 80, "ninety": 90,
}

NUMBER_WORD_PATTERN = (
    r"(?:one|two|three|four|five|six|seven|eight|nine|ten|eleven|twelve|thirteen|"
    r"fourteen|fifteen|sixteen|seventeen|eighteen|nineteen|twenty|thirty|forty|"
    r"fifty|sixty|seventy|eighty|ninety)(?:[-\s](?:one|two|three|four|five|six|seven|eight|nine))?"
)

_UNIT = r"(business\s+|calendar\s+)?(days?|weeks?|months?|years?)"
_POSSESSIVE = r"(?:['’]s?)?"

ABSOLUTE_DATE_PATTERNS = (
    # March 1, 2026 / Mar. 1st 2026
    (re.compile(
        rf"\b({MONTHS}|{SHORT_MONTHS})\.?\s+(\d{{1,2}})(?:st|nd|rd|th)?[,]?\s+(\d{{2,4}})\b",
        re.IGNORECASE), "MDY_TEXT"),
    # 1 March 2026
    (re.compile(
        rf"\b(\d{{1,2}})(?:st|nd|rd|th)?\s+({MONTHS}|{SHORT_MONTHS})\.?[,]?\s+(\d{{2,4}})\b",
        re.IGNORECASE), "DMY_TEXT"),
    # 2026-03-01
    (re.compile(r"\b(\d{4})-(\d{1,2})-(\d{1,2})\b"), "ISO"),
    # 3/1/26, 03/01/2026
    (re.compile(r"\b(\d{1,2})/(\d{1,2})/(\d{2,4})\b"), "MDY"),
)

NUMERIC_RELATIVE_PATTERNS = tuple(re.compile(p, re.IGNORECASE) for p in (
    r"\bwithin\s+(\d{1,3})\s+days\b",
    r"\bwithin\s+(\d{1,3})\s+business\s+days\b",
    r"\b(\d{1,3})\s+days?\s+prior\b",
    r"\b(\d{1,3})\s+business\s+days?\s+prior\b",
    r"\bno\s+later\s+than\s+(\d{1,3})\s+days?\s+after\b",
    r"\bno\s+later\s+than\s+(\d{1,3})\s+days?\s+prior\s+to\b",
    r"\b(\d{1,3})\s+days?\s+before\s+the\s+end\s+of\s+the\s+term\b",
    r"\b(\d{1,3})\s+days?\s+prior\s+to\s+renewal\b",
    r"\b(\d{1,3})\s+days?\s+after\s+invoice\b",
    r"\b(\d{1,3})\s+days?\s+of\s+execution\b",
))


class RelativePattern(NamedTuple):
    """A relative-duration pattern and where its parts are captured."""
    regex: "re.Pattern"
    amount_group: int
    unit_group: int
    token_group: Optional[int]
    direction: int


def _relative(pattern: str, token_group: Optional[int], direction: int) -> RelativePattern:
    return RelativePattern(re.compile(pattern, re.IGNORECASE), 1, 3, token_group, direction)


LEGAL_PAREN_PATTERNS = (
    _relative(rf"\bwithin\s+\w+\s*\((\d{{1,3}})\)\s*{_UNIT}\b", None, 1),
    _relative(
        rf"\bno\s+later\s+than\s+\w+\s*\((\d{{1,3}})\)\s*{_UNIT}\s+(after|following|before|prior\s+to)\b",
        4, -1),
    _relative(
        rf"\b\w+\s*\((\d{{1,3}})\)\s*{_UNIT}{_POSSESSIVE}\s+(prior\s+to|before|after|following|of|from)\b",
        4, -1),
    _relative(rf"\b\w+\s*\((\d{{1,3}})\)\s*{_UNIT}{_POSSESSIVE}\s+(?:written\s+)?notice\b", None, -1),
    _relative(
        rf"\b(?:at\s+least|not\s+less\s+than)\s+(\d{{1,3}})\s*{_UNIT}\s+(before|prior\s+to|after|following)\b",
        4, -1),
    _relative(rf"\b(\d{{1,3}})\s*{_UNIT}\s+(before|prior\s+to|after|following|of|from)\b", 4, -1),
    _relative(rf"\b\((\d{{1,3}})\)\s*{_UNIT}\s+(before|prior\s+to|after|following|of|from)\b", 4, -1),
)

NUMBER_WORD_PATTERNS = (
    _relative(rf"\bwithin\s+({NUMBER_WORD_PATTERN})\s+{_UNIT}\b", None, 1),
    _relative(
        rf"\bno\s+later\s+than\s+({NUMBER_WORD_PATTERN})\s+{_UNIT}\s+(before|prior\s+to|after|following|from|of)\b",
        4, -1),
    _relative(
        rf"\b({NUMBER_WORD_PATTERN})\s+{_UNIT}{_POSSESSIVE}\s+(prior\s+to|before|after|following|from|of)\b",
        4, -1),
    _relative(rf"\b({NUMBER_WORD_PATTERN})\s+{_UNIT}{_POSSESSIVE}\s+(?:written\s+)?notice\b", None, -1),
)

# Order matters: the first matching hint wins.
ANCHOR_HINT_TERMS = (
    ("renewal", ("renewal", "renew")),
    ("term_end", ("term end", "end of term", "expiration", "expires")),
    ("effective", ("effective date", "commencement", "start date")),
    ("invoice", ("invoice", "billing")),
    ("execution", ("execution",)),
    ("receipt", ("receipt",)),
    ("notice", ("notice",)),
    ("request", ("request",)),
    ("approval", ("approval",)),
)


@dataclass(frozen=True)
class AbsoluteDateMatch:
    """A calendar date written explicitly in the text."""
    iso_date: str
    original: str
    index: int
    line: int


@dataclass(frozen=True)
class RelativeClause:
    """A duration phrase offset from an implicit anchor date."""
    offset_days: int
    direction: int
    snippet: str
    index: int
    line: int
    anchor_hint: Optional[str] = None


def to_iso_date(year, month, day) -> Optional[str]:
    """
    Build a ``YYYY-MM-DD`` string, or None when the parts are not a real date.

    Args:
        year: Four-digit year
        month: Month number (1-12)
        day: Day of month

    Returns:
        ISO date string or None (e.g. for February 30)
    """
    try:
        return date(int(year), int(month), int(day)).isoformat()
    except (TypeError, ValueError):
        return None


def add_days(iso_date: Optional[str], offset_days: int) -> Optional[str]:
    """Shift an ISO date by a (possibly negative) number of calendar days."""
    if not iso_date:
        return None
    try:
        shifted = date.fromisoformat(iso_date) + timedelta(days=int(offset_days))
    except (ValueError, OverflowError):
        logger.debug(f"Cannot shift {iso_date} by {offset_days} days")
        return None
    return shifted.isoformat()


def normalize_year(year_raw: str) -> int:
    """Two-digit years are read as 20xx."""
    year = int(year_raw)
    if len(str(year_raw)) == 2:
        return 2000 + year
    return year


def month_name_to_number(name: str) -> Optional[int]:
    return MONTH_NUMBERS.get(name.lower())


def parse_number_token(raw) -> Optional[int]:
    """
    Parse digits or spelled-out English numbers.

    Supports ones, teens, tens, hyphenated compounds ("twenty-five") and the
    "hundred"/"thousand" multipliers.

    Args:
        raw: Token such as "90", "ninety", "twenty-five", "one hundred and ten"

    Returns:
        Integer value, or None if the token is not a number
    """
    if not raw:
        return None
    normalized = str(raw).lower()
    normalized = re.sub(r"[,'\".]", "", normalized)
    normalized = re.sub(r"\band\b", " ", normalized)
    normalized = normalized.replace("-", " ")
    normalized = re.sub(r"\s+", " ", normalized).strip()
    if not normalized:
        return None
    if normalized.isdigit():
        return int(normalized)

    total = 0
    current = 0
    for token in normalized.split(" "):
        if token in NUMBER_WORD_UNITS:
            current += NUMBER_WORD_UNITS[token]
        elif token in NUMBER_WORD_TENS:
            current += NUMBER_WORD_TENS[token]
        elif token == "hundred":
            current = max(1, current) * 100
        elif token == "thousand":
            total += max(1, current) * 1000
            current = 0
        else:
            return None
    return total + current


def to_days(amount: int, unit: str = "days") -> int:
    """Convert a duration to days using flat 7/30/365-day units."""
    unit = str(unit or "days").lower()
    if unit.startswith("week"):
        return amount * 7
    if unit.startswith("month"):
        return amount * 30
    if unit.startswith("year"):
        return amount * 365
    return amount


def direction_from_token(token: Optional[str], fallback: int = -1) -> int:
    """Map a directional word ("prior to", "following", ...) to -1 or +1."""
    t = str(token or "").lower()
    if "after" in t or "following" in t or "of" in t or "from" in t:
        return 1
    if "before" in t or "prior" in t:
        return -1
    return fallback


def infer_anchor_hint(snippet: str) -> Optional[str]:
    """Guess which kind of anchor date a relative phrase refers to."""
    s = str(snippet or "").lower()
    for hint, terms in ANCHOR_HINT_TERMS:
        if any(term in s for term in terms):
            return hint
    return None


def detect_absolute_dates(text: str, line_starts: Sequence[int] = (0,)) -> List[AbsoluteDateMatch]:
    """
    Find calendar dates written in any of the supported surface forms.

    Args:
        text: Normalized text
        line_starts: Start offsets of each line, for line lookups

    Returns:
        Valid dates sorted by character offset (not deduplicated)
    """
    matches = []
    for regex, form in ABSOLUTE_DATE_PATTERNS:
        for m in regex.finditer(text):
            if form == "MDY_TEXT":
                iso = to_iso_date(normalize_year(m.group(3)), month_name_to_number(m.group(1)), m.group(2))
            elif form == "DMY_TEXT":
                iso = to_iso_date(normalize_year(m.group(3)), month_name_to_number(m.group(2)), m.group(1))
            elif form == "ISO":
                iso = to_iso_date(m.group(1), m.group(2), m.group(3))
            else:
                iso = to_iso_date(normalize_year(m.group(3)), m.group(1), m.group(2))
            if not iso:
                continue
            matches.append(AbsoluteDateMatch(
                iso_date=iso,
                original=m.group(0),
                index=m.start(),
                line=position_to_line(m.start(), line_starts)
            ))
    return sorted(matches, key=lambda d: d.index)


def _make_relative(amount, unit, direction, snippet, index, line_starts) -> Optional[RelativeClause]:
    if amount is None or amount <= 0:
        return None
    return RelativeClause(
        offset_days=to_days(amount, unit),
        direction=direction,
        snippet=snippet,
        index=index,
        line=position_to_line(index, line_starts),
        anchor_hint=infer_anchor_hint(snippet)
    )


def detect_relative_dates(text: str, line_starts: Sequence[int] = (0,)) -> List[RelativeClause]:
    """
    Find duration-before/after phrases.

    Three pattern families run over the same text: plain numeric phrases,
    legal parenthetical phrases ("ninety (90) days") and spelled-out numbers.

    Args:
        text: Normalized text
        line_starts: Start offsets of each line, for line lookups

    Returns:
        Relative clauses, deduplicated and sorted by character offset
    """
    found = []

    for regex in NUMERIC_RELATIVE_PATTERNS:
        for m in regex.finditer(text):
            snippet = m.group(0)
            lower = snippet.lower()
            direction = 1 if ("after" in lower or "within" in lower or "of execution" in lower) else -1
            found.append(_make_relative(int(m.group(1)), "days", direction, snippet, m.start(), line_starts))

    for family, parse_amount in ((LEGAL_PAREN_PATTERNS, int), (NUMBER_WORD_PATTERNS, parse_number_token)):
        for pattern in family:
            for m in pattern.regex.finditer(text):
                amount = parse_amount(m.group(pattern.amount_group))
                unit = m.group(pattern.unit_group) or "days"
                if pattern.token_group:
                    direction = direction_from_token(m.group(pattern.token_group), pattern.direction)
                else:
                    direction = pattern.direction
                found.append(_make_relative(amount, unit, direction, m.group(0), m.start(), line_starts))

    unique = {}
    for clause in found:
        if clause is None:
            continue
        key = (clause.index, clause.offset_days, clause.direction, clause.snippet.lower())
        unique.setdefault(key, clause)
    return sorted(unique.values(), key=lambda r: r.index)
