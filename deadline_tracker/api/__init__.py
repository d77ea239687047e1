"""API module for Deadline Tracker."""

from deadline_tracker.api.routes import router
from deadline_tracker.api.models import (
    HealthResponse,
    ExtractRequest,
    ExtractResponse,
    ExportRequest,
    FileReport
)

__all__ = [
    "router",
    "HealthResponse",
    "ExtractRequest",
    "ExtractResponse",
    "ExportRequest",
    "FileReport"
]
