"""
Pytest configuration and fixtures for test suite.
"""
import pytest
from fastapi.testclient import TestClient

from app import app
from deadline_tracker.processing.obligation_extractor import ObligationExtractor
from deadline_tracker.utils.config import ExtractionSettings


NOTICE_BEFORE_TERM_END = (
    "Tenant shall provide written notice no later than ninety (90) days prior to "
    "the end of the Initial Term, which ends December 31, 2026."
)

AUTO_RENEWAL_CLAUSE = (
    "This Agreement shall automatically renew for successive one-year renewal terms "
    "unless either party provides notice of non-renewal at least 60 days before the "
    "expiration of the current term on June 30, 2027."
)

UNANCHORED_DELIVERY = (
    "Vendor shall deliver the report within 30 days of receipt of the purchase order."
)

GENERIC_PROSE = "The weather was pleasant and the team enjoyed a long lunch together."


@pytest.fixture
def client():
    """
    Fixture that provides a TestClient instance for the FastAPI app.
    """
    return TestClient(app)


@pytest.fixture
def extractor():
    """Obligation extractor with default settings."""
    return ObligationExtractor(ExtractionSettings())


@pytest.fixture
def notice_text():
    """Notice obligation anchored to the end of an initial term."""
    return NOTICE_BEFORE_TERM_END


@pytest.fixture
def renewal_text():
    """Auto-renewal clause with a non-renewal notice window."""
    return AUTO_RENEWAL_CLAUSE


@pytest.fixture
def unanchored_text():
    """Relative deadline with no calendar date anywhere."""
    return UNANCHORED_DELIVERY


@pytest.fixture
def generic_text():
    """Prose without any obligation or date."""
    return GENERIC_PROSE
