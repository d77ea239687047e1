"""
Obligation Extractor for Contract Analysis.
Runs the deterministic extraction pipeline: detectors, five extraction
layers, merge/rank/filter and classification.
"""

import logging
from typing import List, Optional

from deadline_tracker.processing.classifier import assign_deadline_confidence, assign_priority
from deadline_tracker.processing.layers import BASELINE_LAYERS, EXPANSION_LAYERS, build_context
from deadline_tracker.processing.models import ExtractionItem, item_key
from deadline_tracker.processing.ranking import merge_items, rank_and_filter
from deadline_tracker.utils.config import ExtractionSettings

logger = logging.getLogger(__name__)


class ObligationExtractor:
    """Extracts dated obligations from contract text using lexical rules."""

    def __init__(self, settings: Optional[ExtractionSettings] = None):
        """
        Initialize the obligation extractor.

        Args:
            settings: Window sizes and caps (defaults when omitted)
        """
        self.settings = settings or ExtractionSettings()
        logger.info("ObligationExtractor initialized")

    def extract(self, raw_text: str, source: str) -> List[ExtractionItem]:
        """
        Extract obligations from one document.

        Args:
            raw_text: Plain document text, with page markers for PDF sources
            source: Label echoed into every item (e.g. the file name)

        Returns:
            Items ordered by priority, date and confidence
        """
        ctx = build_context(raw_text, source, self.settings)
        logger.debug(
            f"{source}: {len(ctx.absolute)} absolute dates, {len(ctx.relative)} relative clauses, "
            f"{len(ctx.clauses)} clauses"
        )

        baseline = []
        for name, layer in BASELINE_LAYERS:
            candidates = layer(ctx, self.settings)
            logger.debug(f"{source}: layer {name} produced {len(candidates)} candidates")
            baseline.extend(candidates)
        baseline = merge_items([], baseline)
        locked_keys = frozenset(item_key(item) for item in baseline)

        merged = baseline
        for name, layer in EXPANSION_LAYERS:
            candidates = layer(ctx, self.settings)
            logger.debug(f"{source}: layer {name} produced {len(candidates)} candidates")
            merged = merge_items(merged, candidates)

        ranked = rank_and_filter(merged, locked_keys, self.settings.max_items)
        items = assign_deadline_confidence(assign_priority(ranked, self.settings.max_high_priority))

        logger.info(f"Extracted {len(items)} obligations from {source}")
        return items

    def extract_obligations(self, raw_text: str, source: str) -> List[dict]:
        """Extract and serialize items with their public field names."""
        return [item.model_dump(by_alias=True) for item in self.extract(raw_text, source)]


_default_extractor = None


def get_default_extractor() -> ObligationExtractor:
    global _default_extractor
    if _default_extractor is None:
        _default_extractor = ObligationExtractor()
    return _default_extractor


def extract(raw_text: str, source: str) -> List[ExtractionItem]:
    """Extract obligations with default settings."""
    return get_default_extractor().extract(raw_text, source)
