"""
Extraction item model for Deadline Tracker.
Defines the output record of the extraction pipeline and its merge key.
"""

import datetime
import re
import uuid
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from deadline_tracker.processing.lexicon import TYPE_LABELS
from deadline_tracker.processing.normalizer import normalize_snippet

ObligationType = Literal["renewal", "notice", "payment", "term_end", "trial_end", "other"]
Level = Literal["high", "medium", "low"]
DeadlineConfidence = Literal["Hard deadline", "Auto-renewal", "Soft / implied", "Penalty-backed"]

HARD_DEADLINE = "Hard deadline"
AUTO_RENEWAL = "Auto-renewal"
SOFT_IMPLIED = "Soft / implied"
PENALTY_BACKED = "Penalty-backed"

KEY_TOKEN_LIMIT = 24

_ITEM_NAMESPACE = uuid.UUID("5b0f3c52-9a8e-4d2c-8a57-3f1f6f4f2a10")
_NON_ALNUM = re.compile(r'[^a-z0-9\s]')


class ExtractionItem(BaseModel):
    """One dated (or undated) obligation found in a document."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., description="Stable item identifier")
    type: ObligationType = Field(..., description="Obligation type")
    date: Optional[str] = Field(None, description="Due date (YYYY-MM-DD) or null")
    confidence: Level = Field("low", description="Extraction confidence")
    priority: Level = Field("low", description="Review priority")
    deadline_confidence: DeadlineConfidence = Field(
        SOFT_IMPLIED, alias="deadlineConfidence", description="How binding the deadline is"
    )
    item: str = Field(..., description="Display label for the type")
    snippet: str = Field("", description="Evidence text")
    notes: str = Field("", description="How the date was derived")
    source: str = Field("", description="Source label, e.g. file name")
    location: str = Field("", description="Page N or Line N")

    @field_validator("date")
    @classmethod
    def _validate_date(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        datetime.date.fromisoformat(value)
        return value


def snippet_tokens(snippet: str, limit: int = KEY_TOKEN_LIMIT) -> str:
    """Sorted distinct tokens (longer than two chars) of a snippet."""
    cleaned = _NON_ALNUM.sub(" ", normalize_snippet(snippet).lower())
    tokens = sorted({t for t in cleaned.split() if len(t) > 2})
    return " ".join(tokens[:limit])


def item_key(item: ExtractionItem, token_limit: int = KEY_TOKEN_LIMIT) -> str:
    """Identity used to merge duplicate candidates across layers."""
    return "|".join([
        item.date or "null",
        item.type,
        item.location or "",
        snippet_tokens(item.snippet, token_limit),
    ])


def build_item(
    obligation_type: str,
    date: Optional[str],
    confidence: str,
    snippet: str,
    notes: str,
    source: str,
    location: str
) -> ExtractionItem:
    """
    Create a fresh extraction item.

    The id is derived from the source and the merge key, so identical input
    always yields identical ids.
    """
    snippet = normalize_snippet(snippet)
    key = "|".join([date or "null", obligation_type, location or "", snippet_tokens(snippet)])
    return ExtractionItem(
        id=str(uuid.uuid5(_ITEM_NAMESPACE, f"{source}|{key}")),
        type=obligation_type,
        date=date,
        confidence=confidence,
        item=TYPE_LABELS.get(obligation_type, TYPE_LABELS["other"]),
        snippet=snippet,
        notes=notes,
        source=source,
        location=location
    )
