"""
Anchor Extraction and Resolution for Deadline Tracker.
Tags absolute dates with semantic labels (renewal, term_end, ...) and turns
relative clauses into concrete dates by pairing them with a nearby anchor.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from deadline_tracker.processing.dates import AbsoluteDateMatch, RelativeClause, add_days
from deadline_tracker.processing.lexicon import ANCHOR_KEYWORDS, has_deadline_signal
from deadline_tracker.processing.normalizer import snippet_around

logger = logging.getLogger(__name__)

GENERIC_LABEL = "generic"


@dataclass(frozen=True)
class Anchor:
    """An absolute date enriched with semantic labels."""
    iso_date: str
    index: int
    line: int
    labels: Tuple[str, ...] = (GENERIC_LABEL,)

    @property
    def is_generic(self) -> bool:
        return GENERIC_LABEL in self.labels


def _matching_labels(text: str) -> List[str]:
    t = text.lower()
    return [label for label, keywords in ANCHOR_KEYWORDS.items() if any(kw in t for kw in keywords)]


def extract_anchors(text: str, absolute_dates: Sequence[AbsoluteDateMatch], window: int = 130) -> List[Anchor]:
    """
    Label every absolute date by the anchor keywords around it.

    Args:
        text: Normalized document text
        absolute_dates: Dates found in ``text``
        window: Radius in characters inspected around each date

    Returns:
        One anchor per date, in the same order
    """
    anchors = []
    for d in absolute_dates:
        labels = _matching_labels(snippet_around(text, d.index, window))
        anchors.append(Anchor(
            iso_date=d.iso_date,
            index=d.index,
            line=d.line,
            labels=tuple(labels) or (GENERIC_LABEL,)
        ))
    return anchors


def labels_from_context(context: str, hint: Optional[str] = None) -> List[str]:
    """Anchor labels suggested by a clause's hint and surrounding words."""
    labels = [hint] if hint else []
    for label in _matching_labels(str(context or "")):
        if label not in labels:
            labels.append(label)
    return labels


class AnchorResolver:
    """Pairs relative clauses with the anchor date they most likely refer to."""

    def __init__(
        self,
        anchors: Sequence[Anchor],
        absolute_dates: Sequence[AbsoluteDateMatch],
        max_distance: int = 2600,
        fallback_radius: int = 120
    ):
        """
        Initialize the resolver for one document.

        Args:
            anchors: Labelled anchors of the document
            absolute_dates: All absolute dates of the document
            max_distance: Furthest an anchor may be from the clause, in characters
            fallback_radius: Radius of the clause context checked for a deadline
                signal before accepting the unlabelled nearest-date fallback
        """
        self.anchors = tuple(anchors)
        self.absolute_dates = tuple(absolute_dates)
        self.max_distance = max_distance
        self.fallback_radius = fallback_radius

    def _nearby(self, index: int) -> List[Anchor]:
        near = [a for a in self.anchors if abs(a.index - index) <= self.max_distance]
        return sorted(near, key=lambda a: abs(a.index - index))

    def _nearest_absolute(self, index: int) -> Optional[AbsoluteDateMatch]:
        best = None
        best_distance = None
        for d in self.absolute_dates:
            distance = abs(d.index - index)
            if best_distance is None or distance < best_distance:
                best, best_distance = d, distance
        return best

    def resolve(self, rel: RelativeClause, rel_index: int, context: str) -> Optional[str]:
        """
        Find the anchor date for a relative clause.

        Labelled evidence is strict: when the context names an anchor kind,
        only an anchor of that kind is accepted. Without any label, the nearest
        date is used only if the clause reads like a deadline.

        Args:
            rel: The relative clause
            rel_index: Offset of the clause in the document text
            context: Text window the clause was found in

        Returns:
            ISO date of the anchor, or None when resolution fails
        """
        preferred = [
            label for label in labels_from_context(context, rel.anchor_hint)
            if label in ANCHOR_KEYWORDS
        ]
        near = self._nearby(rel_index)

        if preferred:
            for anchor in near:
                if any(label in preferred for label in anchor.labels):
                    return anchor.iso_date
            return None

        if rel.anchor_hint in ANCHOR_KEYWORDS:
            for anchor in near:
                if rel.anchor_hint in anchor.labels:
                    return anchor.iso_date
            return None

        fallback = self._nearest_absolute(rel_index)
        if fallback is None:
            return None
        middle = snippet_around(context, len(context) // 2, self.fallback_radius)
        if not has_deadline_signal(middle):
            return None
        return fallback.iso_date

    def resolve_date(self, rel: RelativeClause, rel_index: int, context: str) -> Tuple[Optional[str], Optional[str]]:
        """Return ``(anchor_date, derived_date)``; both None when unresolved."""
        anchor_date = self.resolve(rel, rel_index, context)
        if anchor_date is None:
            return None, None
        return anchor_date, add_days(anchor_date, rel.direction * rel.offset_days)
