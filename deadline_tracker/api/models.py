"""
Pydantic Models for Deadline Tracker API.
Defines request and response schemas.
"""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field

from deadline_tracker.processing.models import ExtractionItem


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field("healthy", description="Service status")
    version: str = Field(..., description="API version")
    timestamp: str = Field(..., description="Current timestamp")


class ExtractRequest(BaseModel):
    """Request model for extracting obligations from pasted text."""
    text: str = Field(..., min_length=1, description="Contract text")
    source: str = Field("Pasted Text", description="Source label echoed into every item")


class FileReport(BaseModel):
    """Per-source processing outcome."""
    source: str
    ok: bool
    chars: int = 0
    error: Optional[str] = None


class ExtractResponse(BaseModel):
    """Response model for extraction."""
    items: List[ExtractionItem] = Field(default_factory=list, description="Extracted obligations")
    file_reports: List[FileReport] = Field(default_factory=list, description="Outcome per source")


class ExportRequest(BaseModel):
    """Request model for reminder sheet export."""
    items: List[ExtractionItem] = Field(..., description="Items to export")
    format: Literal["csv", "txt"] = Field("csv", description="Export format")
