"""
Clause Segmenter for Deadline Tracker.
Splits text into clause-sized windows for locality-scoped analysis.
"""

import re
from dataclasses import dataclass
from typing import Iterator, List, Tuple

from deadline_tracker.processing.normalizer import normalize_snippet

CLAUSE_PATTERN = re.compile(r'[^.;\n]+[.;\n]?')
SENTENCE_PATTERN = re.compile(r'[^.?!;\n]+[.?!;\n]?')


@dataclass(frozen=True)
class Clause:
    """A bounded, whitespace-normalized slice of the source text."""
    text: str
    start: int


def split_clauses(
    text: str,
    max_length: int = 650,
    window: int = 520,
    stride: int = 300
) -> List[Clause]:
    """
    Split text into clauses on ``.``, ``;`` and line breaks.

    Clauses longer than ``max_length`` (common in PDF text with no
    punctuation) are cut into overlapping windows so dates stay close to the
    words around them.

    Args:
        text: Normalized document text
        max_length: Longest clause kept whole
        window: Size of each chunk of an oversized clause
        stride: Step between chunk starts

    Returns:
        Clauses in document order
    """
    clauses = []
    for m in CLAUSE_PATTERN.finditer(text):
        cleaned = normalize_snippet(m.group(0))
        if not cleaned:
            continue
        if len(cleaned) <= max_length:
            clauses.append(Clause(text=cleaned, start=m.start()))
            continue
        for offset in range(0, len(cleaned), stride):
            piece = cleaned[offset:offset + window].strip()
            if piece:
                clauses.append(Clause(text=piece, start=m.start() + offset))
    return clauses


def iter_sentences(text: str) -> Iterator[Tuple[str, int]]:
    """Yield ``(normalized_sentence, start_offset)`` for non-empty sentences."""
    for m in SENTENCE_PATTERN.finditer(text):
        sentence = normalize_snippet(m.group(0))
        if sentence:
            yield sentence, m.start()
