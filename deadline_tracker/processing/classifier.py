"""
Priority and Deadline-Confidence Classifier for Deadline Tracker.
"""

import re
from typing import List, Sequence

from deadline_tracker.processing.lexicon import PRIORITY_RANK, confidence_rank
from deadline_tracker.processing.models import (
    AUTO_RENEWAL,
    HARD_DEADLINE,
    PENALTY_BACKED,
    SOFT_IMPLIED,
    ExtractionItem,
    item_key,
)

UNDATED_SORT_KEY = "9999-12-31"

RENEWAL_CRITICAL = re.compile(r'auto[- ]?renew|renewal term|notice of non[- ]?renewal|non[- ]?renewal|successive one')
NOTICE_TIMING = re.compile(r'notice|prior|before|at least|no later than')
TERM_BOUNDARY = re.compile(r'end of term|term ends?|expires?|expiration|termination date')
TERMINATION_THEN_NOTICE = re.compile(
    r'(terminate|termination|cancel|cancellation).{0,90}(prior notice|written notice|at least|no later than|before)'
)
NOTICE_THEN_TERMINATION = re.compile(
    r'(prior notice|written notice).{0,90}(terminate|termination|cancel|cancellation)'
)
RENEWAL_LANGUAGE = re.compile(r'non[- ]?renewal|auto[- ]?renew|renewal term')
TERMINATION_WORDS = re.compile(r'terminate|termination|cancel|cancellation')
TERMINATION_TIMING = re.compile(r'notice|prior|before|at least')

INSURANCE = re.compile(r'insurance|policy')
CANCELLATION_NOTICE = re.compile(r'notice|cancel|cancellation')
PAYMENT_DUE = re.compile(r'payment due|invoice|fee due|payable')
RETENTION = re.compile(r'retain|retention|records|audit period')
RETENTION_AFTER = re.compile(r'years?\s+after|after')

AUTO_RENEW_SIGNAL = re.compile(
    r'auto[- ]?renew|renewal term|non[- ]?renewal|notice of non[- ]?renewal|successive term'
)
PENALTY_SIGNAL = re.compile(
    r'(late fee|penalty|penalties|interest|default|breach|liquidated damages|service charge)'
)
SUSPENSION_SIGNAL = re.compile(r'(suspend|termination|terminate|cancellation|cancel)')
NON_PAYMENT_SIGNAL = re.compile(r'(non[- ]?payment|failure to pay|past due|overdue)')
HARD_DEADLINE_SIGNAL = re.compile(
    r'(no later than|prior to|at least|not less than|within|before|due|deadline|must|shall|required)'
)


def _evidence_text(item: ExtractionItem) -> str:
    return f"{item.snippet or ''} {item.notes or ''}".lower()


def _date_sort_key(item: ExtractionItem) -> str:
    return item.date or UNDATED_SORT_KEY


def looks_like_high_priority_clause(item: ExtractionItem) -> bool:
    if not item.date:
        return False
    text = _evidence_text(item)
    renewal_critical = bool(RENEWAL_CRITICAL.search(text)) and bool(NOTICE_TIMING.search(text))
    term_boundary = bool(TERM_BOUNDARY.search(text))
    termination_notice = bool(TERMINATION_THEN_NOTICE.search(text) or NOTICE_THEN_TERMINATION.search(text))
    return renewal_critical or term_boundary or termination_notice


def looks_like_medium_priority_clause(item: ExtractionItem) -> bool:
    if not item.date:
        return False
    text = _evidence_text(item)
    insurance_notice = bool(INSURANCE.search(text)) and bool(CANCELLATION_NOTICE.search(text))
    payment_due = item.type == "payment" and bool(PAYMENT_DUE.search(text))
    retention_deadline = bool(RETENTION.search(text)) and bool(RETENTION_AFTER.search(text))
    if insurance_notice or payment_due or retention_deadline:
        return True
    return item.type != "other" and item.confidence != "low"


def high_priority_score(item: ExtractionItem) -> int:
    text = _evidence_text(item)
    score = 0
    if looks_like_high_priority_clause(item):
        score += 4
    if item.type in ("renewal", "term_end"):
        score += 2
    if RENEWAL_LANGUAGE.search(text):
        score += 2
    if TERMINATION_WORDS.search(text) and TERMINATION_TIMING.search(text):
        score += 2
    if item.confidence == "high":
        score += 1
    return score


def assign_priority(items: Sequence[ExtractionItem], max_high: int = 3) -> List[ExtractionItem]:
    """
    Label items high/medium/low and order them for review.

    The top-scoring items become ``high``, at most ``max_high`` distinct
    ``type|date|location`` signatures. Output is ordered by priority, then
    date (undated last), then confidence.
    """
    scores = [high_priority_score(item) for item in items]
    candidates = sorted(
        (pair for pair in zip(scores, items) if pair[0] > 0),
        key=lambda pair: (-pair[0], _date_sort_key(pair[1]), -confidence_rank(pair[1].confidence))
    )

    high_keys = set()
    signatures = set()
    for _, candidate in candidates:
        if len(high_keys) >= max_high:
            break
        signature = f"{candidate.type}|{candidate.date or 'null'}|{candidate.location or ''}"
        if signature in signatures:
            continue
        signatures.add(signature)
        high_keys.add(item_key(candidate))

    prioritized = []
    for item in items:
        if item_key(item) in high_keys:
            priority = "high"
        elif looks_like_medium_priority_clause(item):
            priority = "medium"
        else:
            priority = "low"
        prioritized.append(item.model_copy(update={"priority": priority}))

    prioritized.sort(key=lambda it: (
        -PRIORITY_RANK.get(it.priority, 1),
        _date_sort_key(it),
        -confidence_rank(it.confidence)
    ))
    return prioritized


def deadline_confidence_for(item: ExtractionItem) -> str:
    """Classify how binding a deadline is, checking labels in fixed precedence."""
    text = _evidence_text(item)
    if AUTO_RENEW_SIGNAL.search(text):
        return AUTO_RENEWAL
    if PENALTY_SIGNAL.search(text) or (SUSPENSION_SIGNAL.search(text) and NON_PAYMENT_SIGNAL.search(text)):
        return PENALTY_BACKED
    if item.date and (
        HARD_DEADLINE_SIGNAL.search(text)
        or item.priority == "high"
        or (item.type != "other" and item.confidence != "low")
    ):
        return HARD_DEADLINE
    return SOFT_IMPLIED


def assign_deadline_confidence(items: Sequence[ExtractionItem]) -> List[ExtractionItem]:
    return [item.model_copy(update={"deadline_confidence": deadline_confidence_for(item)}) for item in items]
