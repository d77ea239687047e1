"""
Text Normalizer for Deadline Tracker.
Collapses whitespace per line while keeping line boundaries and page markers,
and maps character offsets back to line numbers.
"""

import re
from bisect import bisect_right
from dataclasses import dataclass
from typing import List, Tuple

PAGE_MARKER_PATTERN = re.compile(r'\[\[\[TT_PAGE_(\d+)\]\]\]')

_INLINE_SPACE = re.compile(r'[ \t]+')
_ANY_WHITESPACE = re.compile(r'\s+')


@dataclass(frozen=True)
class NormalizedText:
    """Normalized document text with its line index."""
    text: str
    lines: Tuple[str, ...]
    line_starts: Tuple[int, ...]


def normalize_text(raw: str) -> NormalizedText:
    """
    Normalize raw document text.

    Line breaks become ``\\n``. On each line, runs of spaces/tabs collapse to a
    single space and only spaces/tabs are trimmed at the edges, so form-feeds
    and other page-break characters survive.

    Args:
        raw: Raw text, possibly containing ``\\r\\n`` and page markers

    Returns:
        NormalizedText with the text, its lines and their start offsets
    """
    safe = str(raw or "").replace("\r\n", "\n").replace("\r", "\n")
    lines = [_INLINE_SPACE.sub(" ", line).strip(" \t") for line in safe.split("\n")]

    line_starts = []
    cursor = 0
    for line in lines:
        line_starts.append(cursor)
        cursor += len(line) + 1

    return NormalizedText(
        text="\n".join(lines),
        lines=tuple(lines),
        line_starts=tuple(line_starts)
    )


def position_to_line(position: int, line_starts) -> int:
    """Return the zero-based line containing ``position``."""
    return max(0, bisect_right(line_starts, position) - 1)


def snippet_around(text: str, index: int, radius: int = 180) -> str:
    """Whitespace-collapsed slice of ``text`` within ``radius`` chars of ``index``."""
    start = max(0, index - radius)
    end = min(len(text), index + radius)
    return _ANY_WHITESPACE.sub(" ", text[start:end]).strip()


def normalize_snippet(text: str) -> str:
    """Strip page markers and collapse whitespace."""
    cleaned = PAGE_MARKER_PATTERN.sub(" ", str(text or ""))
    return _ANY_WHITESPACE.sub(" ", cleaned).strip()


def find_page_markers(text: str) -> List[Tuple[int, int]]:
    """Return ``(offset, page_number)`` for every page marker in ``text``."""
    return [(m.start(), int(m.group(1))) for m in PAGE_MARKER_PATTERN.finditer(text)]
