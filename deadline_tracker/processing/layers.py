"""
Extraction Layers for Deadline Tracker.

Five independent passes over the same document. Each takes the shared
DocumentContext explicitly and returns candidate items:

- baseline-absolute: absolute dates with a fixed window around them
- baseline-relative: relative clauses with a wider window, resolved to anchors
- clause: both detectors re-run inside each obligation-bearing clause
- anchor-expansion: relative clauses searched around each labelled anchor
- sentence-sweep: resolved relative clauses in obligation sentences
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from deadline_tracker.processing.anchors import Anchor, AnchorResolver, extract_anchors
from deadline_tracker.processing.clauses import Clause, iter_sentences, split_clauses
from deadline_tracker.processing.dates import (
    AbsoluteDateMatch,
    RelativeClause,
    add_days,
    detect_absolute_dates,
    detect_relative_dates,
)
from deadline_tracker.processing.lexicon import (
    confidence_for_absolute,
    confidence_for_relative,
    has_contract_context,
    has_obligation_language,
    keep_candidate,
    type_from_window,
)
from deadline_tracker.processing.models import ExtractionItem, build_item
from deadline_tracker.processing.normalizer import (
    find_page_markers,
    normalize_snippet,
    normalize_text,
    position_to_line,
    snippet_around,
)
from deadline_tracker.utils.config import ExtractionSettings

logger = logging.getLogger(__name__)


class Locator:
    """Formats item locations as ``Page N`` (PDF with markers) or ``Line N``."""

    def __init__(self, source: str, page_markers: Sequence[Tuple[int, int]], line_starts: Sequence[int]):
        self.use_pages = str(source or "").lower().endswith(".pdf") and bool(page_markers)
        self.page_markers = tuple(page_markers)
        self.line_starts = tuple(line_starts)

    def location_for(self, index: int, line: int) -> str:
        if self.use_pages:
            page = 1
            for marker_index, marker_page in self.page_markers:
                if marker_index <= index:
                    page = marker_page
            return f"Page {page}"
        return f"Line {line + 1}"

    def location_at(self, index: int) -> str:
        """Location of a document offset, looking the line up from the index."""
        return self.location_for(index, position_to_line(index, self.line_starts))


@dataclass(frozen=True)
class DocumentContext:
    """Everything the layers share about one document."""
    text: str
    source: str
    absolute: Tuple[AbsoluteDateMatch, ...]
    relative: Tuple[RelativeClause, ...]
    anchors: Tuple[Anchor, ...]
    clauses: Tuple[Clause, ...]
    resolver: AnchorResolver
    locator: Locator


def build_context(raw_text: str, source: str, settings: ExtractionSettings) -> DocumentContext:
    """Normalize the text and run the detectors once for all layers."""
    normalized = normalize_text(raw_text)
    text = normalized.text
    absolute = detect_absolute_dates(text, normalized.line_starts)
    relative = detect_relative_dates(text, normalized.line_starts)
    anchors = extract_anchors(text, absolute, settings.anchor_label_window)
    return DocumentContext(
        text=text,
        source=source,
        absolute=tuple(absolute),
        relative=tuple(relative),
        anchors=tuple(anchors),
        clauses=tuple(split_clauses(
            text,
            max_length=settings.clause_max_length,
            window=settings.clause_chunk_window,
            stride=settings.clause_chunk_stride
        )),
        resolver=AnchorResolver(
            anchors,
            absolute,
            max_distance=settings.anchor_max_distance,
            fallback_radius=settings.fallback_signal_radius
        ),
        locator=Locator(source, find_page_markers(text), normalized.line_starts)
    )


def run_baseline_absolute_layer(ctx: DocumentContext, settings: ExtractionSettings) -> List[ExtractionItem]:
    items = []
    for d in ctx.absolute:
        window = normalize_snippet(snippet_around(ctx.text, d.index, settings.absolute_window))
        obligation_type = type_from_window(window)
        if not keep_candidate(obligation_type, window):
            continue
        items.append(build_item(
            obligation_type,
            d.iso_date,
            confidence_for_absolute(obligation_type, window),
            window,
            f'Detected absolute date "{d.original}" on line {d.line + 1}.',
            ctx.source,
            ctx.locator.location_for(d.index, d.line)
        ))
    return items


def run_baseline_relative_layer(ctx: DocumentContext, settings: ExtractionSettings) -> List[ExtractionItem]:
    """Unresolved clauses still yield an undated, low-confidence item."""
    items = []
    for rel in ctx.relative:
        window = normalize_snippet(snippet_around(ctx.text, rel.index, settings.relative_window))
        obligation_type = type_from_window(window, rel.anchor_hint)
        location = ctx.locator.location_for(rel.index, rel.line)
        anchor_date, derived = ctx.resolver.resolve_date(rel, rel.index, window)

        if anchor_date is None:
            if not keep_candidate(obligation_type, window):
                continue
            items.append(build_item(
                obligation_type,
                None,
                confidence_for_relative(obligation_type, window, False),
                window,
                f'Relative clause "{rel.snippet}" found but no anchor date detected nearby.',
                ctx.source,
                location
            ))
            continue

        if obligation_type == "other" and not keep_candidate(obligation_type, window):
            continue
        items.append(build_item(
            obligation_type,
            derived,
            confidence_for_relative(obligation_type, window, True),
            window,
            f'Derived from "{rel.snippet}" using anchor date {anchor_date}.',
            ctx.source,
            location
        ))
    return items


def run_clause_layer(ctx: DocumentContext, settings: ExtractionSettings) -> List[ExtractionItem]:
    """Offsets found inside a clause are local and shifted by the clause start."""
    items = []
    for clause in ctx.clauses:
        clause_text = normalize_snippet(clause.text)
        if not has_obligation_language(clause_text) and not has_contract_context(clause_text):
            continue

        for d in detect_absolute_dates(clause_text):
            obligation_type = type_from_window(clause_text)
            if not keep_candidate(obligation_type, clause_text):
                continue
            items.append(build_item(
                obligation_type,
                d.iso_date,
                confidence_for_absolute(obligation_type, clause_text),
                clause_text,
                f'Detected obligation-linked absolute date "{d.original}" in clause context.',
                ctx.source,
                ctx.locator.location_at(clause.start + d.index)
            ))

        for rel in detect_relative_dates(clause_text):
            document_index = clause.start + rel.index
            obligation_type = type_from_window(clause_text, rel.anchor_hint)
            location = ctx.locator.location_at(document_index)
            anchor_date, derived = ctx.resolver.resolve_date(rel, document_index, clause_text)

            if anchor_date is None:
                if not keep_candidate(obligation_type, clause_text):
                    continue
                items.append(build_item(
                    obligation_type,
                    None,
                    confidence_for_relative(obligation_type, clause_text, False),
                    clause_text,
                    f'Relative clause "{rel.snippet}" found in obligation context but no anchor date resolved.',
                    ctx.source,
                    location
                ))
                continue

            items.append(build_item(
                obligation_type,
                derived,
                confidence_for_relative(obligation_type, clause_text, True),
                clause_text,
                f'Derived from clause-relative date "{rel.snippet}" using anchor {anchor_date}.',
                ctx.source,
                location
            ))
    return items


def run_anchor_expansion_layer(ctx: DocumentContext, settings: ExtractionSettings) -> List[ExtractionItem]:
    """Relative clauses near a labelled anchor resolve directly against it."""
    items = []
    for anchor in ctx.anchors:
        if anchor.is_generic:
            continue
        context = normalize_snippet(snippet_around(ctx.text, anchor.index, settings.anchor_expansion_window))
        for rel in detect_relative_dates(context):
            obligation_type = type_from_window(context, rel.anchor_hint or anchor.labels[0])
            if not keep_candidate(obligation_type, context):
                continue
            items.append(build_item(
                obligation_type,
                add_days(anchor.iso_date, rel.direction * rel.offset_days),
                confidence_for_relative(obligation_type, context, True),
                context,
                f'Anchor-expansion: "{rel.snippet}" resolved from anchor {anchor.iso_date}.',
                ctx.source,
                ctx.locator.location_for(anchor.index, anchor.line)
            ))
    return items


def run_sentence_sweep_layer(ctx: DocumentContext, settings: ExtractionSettings) -> List[ExtractionItem]:
    """Only resolved clauses are emitted here; there is no undated fallback."""
    items = []
    for sentence, start in iter_sentences(ctx.text):
        if not has_obligation_language(sentence):
            continue
        for rel in detect_relative_dates(sentence):
            document_index = start + rel.index
            anchor_date, derived = ctx.resolver.resolve_date(rel, document_index, sentence)
            if anchor_date is None:
                continue
            obligation_type = type_from_window(sentence, rel.anchor_hint)
            items.append(build_item(
                obligation_type,
                derived,
                confidence_for_relative(obligation_type, sentence, True),
                sentence,
                f'Sentence sweep derived from "{rel.snippet}" with anchor {anchor_date}.',
                ctx.source,
                ctx.locator.location_at(document_index)
            ))
    return items


BASELINE_LAYERS = (
    ("baseline_absolute", run_baseline_absolute_layer),
    ("baseline_relative", run_baseline_relative_layer),
    ("clause", run_clause_layer),
)

EXPANSION_LAYERS = (
    ("anchor_expansion", run_anchor_expansion_layer),
    ("sentence_sweep", run_sentence_sweep_layer),
)
