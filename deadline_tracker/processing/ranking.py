"""
Merge, Rank and Filter Engine for Deadline Tracker.
Deduplicates candidates across layers, promotes confidence on strong
evidence, drops low-value noise and caps the output size.
"""

import logging
from typing import AbstractSet, Iterable, List

from deadline_tracker.processing.lexicon import (
    confidence_rank,
    has_contract_context,
    has_deadline_signal,
    has_obligation_language,
    has_strong_obligation_language,
    looks_like_regulatory_reference,
)
from deadline_tracker.processing.models import ExtractionItem, item_key

logger = logging.getLogger(__name__)


def merge_items(existing: Iterable[ExtractionItem], incoming: Iterable[ExtractionItem]) -> List[ExtractionItem]:
    """
    Merge two candidate lists by item key.

    The higher-confidence item wins; on equal confidence the one with longer
    notes wins. A replaced item keeps its original position.
    """
    merged = {}
    for item in existing:
        merged[item_key(item)] = item
    for item in incoming:
        key = item_key(item)
        previous = merged.get(key)
        if previous is None:
            merged[key] = item
            continue
        previous_rank = confidence_rank(previous.confidence)
        incoming_rank = confidence_rank(item.confidence)
        if incoming_rank > previous_rank:
            merged[key] = item
        elif incoming_rank == previous_rank and len(item.notes or "") > len(previous.notes or ""):
            merged[key] = item
    return list(merged.values())


def promote_confidence(item: ExtractionItem) -> ExtractionItem:
    if not item.date or item.type == "other":
        return item
    if has_strong_obligation_language(item.snippet) and has_deadline_signal(item.snippet):
        return item.model_copy(update={"confidence": "high"})
    if (item.confidence == "low"
            and has_obligation_language(item.snippet)
            and has_deadline_signal(item.snippet)):
        return item.model_copy(update={"confidence": "medium"})
    return item


def relevance(item: ExtractionItem) -> int:
    score = 0
    if item.type != "other":
        score += 3
    if item.date:
        score += 2
    if has_obligation_language(item.snippet):
        score += 2
    if has_contract_context(item.snippet):
        score += 1
    if item.type == "other" and looks_like_regulatory_reference(item.snippet):
        score -= 3
    return score


def _survives_filter(item: ExtractionItem, locked_keys: AbstractSet[str]) -> bool:
    if item_key(item) in locked_keys:
        return True
    if item.type != "other":
        return True
    if item.date and has_deadline_signal(item.snippet) and not looks_like_regulatory_reference(item.snippet):
        return True
    return item.confidence == "high" and has_contract_context(item.snippet)


def rank_and_filter(
    items: Iterable[ExtractionItem],
    locked_keys: AbstractSet[str],
    max_items: int = 240
) -> List[ExtractionItem]:
    """
    Promote, filter and rank merged candidates.

    Args:
        items: Merged candidates from all layers
        locked_keys: Keys of baseline items that always survive filtering
        max_items: Output cap

    Returns:
        Surviving items, most relevant first
    """
    promoted = [promote_confidence(item) for item in items]
    kept = [item for item in promoted if _survives_filter(item, locked_keys)]
    kept.sort(key=lambda it: (relevance(it), confidence_rank(it.confidence)), reverse=True)
    if len(kept) > max_items:
        logger.debug(f"Capping {len(kept)} ranked items to {max_items}")
    return kept[:max_items]
