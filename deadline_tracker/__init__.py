"""
Deadline Tracker

A deterministic document processing service that finds dated contractual
obligations (renewals, notice windows, payments, term and trial ends) in
contract text and ranks them for review.
"""

from deadline_tracker.processing.models import ExtractionItem
from deadline_tracker.processing.obligation_extractor import ObligationExtractor, extract

__version__ = "1.0.0"
__author__ = "Deadline Tracker Team"

__all__ = ["extract", "ObligationExtractor", "ExtractionItem"]
