"""
Contract Lexicon for Deadline Tracker.
Read-only keyword tables and the evidence checks built on them: obligation
language, deadline signals, contract context, regulatory noise, type
classification and candidate admission.
"""

from types import MappingProxyType
from typing import Optional

OBLIGATION_TYPES = ("renewal", "notice", "payment", "term_end", "trial_end", "other")

TYPE_KEYWORDS = MappingProxyType({
    "renewal": ("renew", "renewal", "auto-renew", "extend", "extension", "successive term"),
    "notice": (
        "notice", "notify", "termination", "cancel", "approval", "request",
        "deliver", "provided", "written notice", "promptly",
    ),
    "payment": (
        "payment due", "invoice", "billed", "fee due", "payable", "fees",
        "compensation", "paid", "payment",
    ),
    "term_end": (
        "expiration", "expires", "end of term", "expire", "termination date", "term ends",
        "end of the term", "end of the initial term", "initial term",
    ),
    "trial_end": ("trial", "free trial", "trial period"),
})

TYPE_LABELS = MappingProxyType({
    "renewal": "Renewal",
    "notice": "Notice Deadline",
    "payment": "Payment Due",
    "term_end": "Term End",
    "trial_end": "Trial End",
    "other": "Other",
})

# Anchor hint to item type, used when the window itself has no type keywords
HINT_TYPES = MappingProxyType({
    "invoice": "payment",
    "renewal": "renewal",
    "term_end": "term_end",
    "notice": "notice",
    "request": "notice",
    "approval": "notice",
})

OBLIGATION_TERMS = (
    "must", "shall", "required", "due", "no later than", "prior to", "before",
    "after", "within", "at least", "not less than", "terminate", "cancellation",
    "cancel", "notice", "renewal", "auto-renew", "expires", "expiration",
    "invoice", "payment due", "fee due", "trial", "provide", "deliver",
    "submit", "furnish", "payable",
)

STRONG_OBLIGATION_TERMS = (
    "must", "shall", "required", "no later than", "prior to", "within", "due", "at least",
)

DEADLINE_SIGNAL_TERMS = (
    "within", "no later than", "prior to", "before", "after", "by ", "due",
    "deadline", "renewal", "renew", "auto-renew", "expiration", "expires",
    "end of term", "term end", "termination date", "invoice", "payment due",
    "written notice", "business days", "calendar days", "days of", "days from",
    "days following",
)

REGULATORY_NOISE_TERMS = (
    "federal register", "guidance", "regulation", "regulations", "nist",
    "u.s.c.", "cfr", "public law", "statute", "promulgated",
)

CONTRACT_CONTEXT_TERMS = (
    "agreement", "contract", "term", "effective date", "services", "party",
    "parties", "statement of work", "renewal", "notice", "invoice", "payment",
    "vendor", "contractor", "client",
)

ANCHOR_KEYWORDS = MappingProxyType({
    "renewal": ("renew", "renewal", "auto-renew", "extension", "successive term"),
    "term_end": (
        "end of term", "term end", "expires", "expiration", "termination date",
        "end of the term", "end of the initial term",
    ),
    "effective": ("effective date", "commencement", "start date"),
    "invoice": ("invoice", "billing date", "billed", "statement date"),
    "execution": ("execution", "executed"),
    "receipt": ("receipt", "received"),
})

CONFIDENCE_RANK = MappingProxyType({"high": 3, "medium": 2, "low": 1})
PRIORITY_RANK = MappingProxyType({"high": 3, "medium": 2, "low": 1})


def _contains_any(text: str, terms) -> bool:
    t = str(text or "").lower()
    return any(term in t for term in terms)


def has_obligation_language(text: str) -> bool:
    return _contains_any(text, OBLIGATION_TERMS)


def has_strong_obligation_language(text: str) -> bool:
    return _contains_any(text, STRONG_OBLIGATION_TERMS)


def has_deadline_signal(text: str) -> bool:
    return _contains_any(text, DEADLINE_SIGNAL_TERMS)


def has_contract_context(text: str) -> bool:
    return _contains_any(text, CONTRACT_CONTEXT_TERMS)


def looks_like_regulatory_reference(text: str) -> bool:
    """Two or more statute/regulation terms mark a citation rather than a contract duty."""
    t = str(text or "").lower()
    return sum(1 for term in REGULATORY_NOISE_TERMS if term in t) >= 2


def confidence_rank(confidence: str) -> int:
    return CONFIDENCE_RANK.get(confidence, 1)


def type_from_window(window_text: str, fallback_hint: Optional[str] = None) -> str:
    """
    Classify a text window into an obligation type.

    Each keyword hit scores 1, multi-word keywords score 2. Ties keep the type
    declared first.

    Args:
        window_text: Text around the date or relative clause
        fallback_hint: Anchor hint used when no type keyword matches

    Returns:
        One of OBLIGATION_TYPES
    """
    t = str(window_text or "").lower()
    best_type = "other"
    best_score = 0

    for obligation_type, keywords in TYPE_KEYWORDS.items():
        score = sum(2 if " " in kw else 1 for kw in keywords if kw in t)
        if score > best_score:
            best_score = score
            best_type = obligation_type

    if best_type != "other" or not fallback_hint:
        return best_type
    return HINT_TYPES.get(fallback_hint, "other")


def keep_candidate(obligation_type: str, snippet: str) -> bool:
    """Decide whether a window carries enough evidence to become a candidate."""
    deadline = has_deadline_signal(snippet)
    strong = has_strong_obligation_language(snippet)
    obligation = has_obligation_language(snippet)
    contract = has_contract_context(snippet)

    if obligation_type == "notice":
        return deadline and (strong or obligation or contract)
    if obligation_type != "other":
        return deadline or (strong and contract)

    if looks_like_regulatory_reference(snippet):
        return False
    return (deadline and (strong or contract)) or (strong and obligation and contract)


def confidence_for_absolute(obligation_type: str, context: str) -> str:
    strong = has_strong_obligation_language(context)
    contract = has_contract_context(context)
    if obligation_type != "other" and strong:
        return "high"
    if obligation_type != "other" and contract:
        return "medium"
    if strong and contract:
        return "medium"
    return "low"


def confidence_for_relative(obligation_type: str, context: str, has_anchor: bool) -> str:
    """Unanchored relative clauses are always low confidence."""
    if not has_anchor:
        return "low"
    strong = has_strong_obligation_language(context)
    if obligation_type != "other" and strong:
        return "high"
    if obligation_type != "other":
        return "medium"
    if strong and has_contract_context(context):
        return "medium"
    return "low"
