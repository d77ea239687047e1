"""
Unit tests for ObligationExtractor class.
"""
from datetime import date
from unittest.mock import patch

import pytest

import deadline_tracker
from deadline_tracker.processing.models import item_key
from deadline_tracker.processing.obligation_extractor import ObligationExtractor, extract, get_default_extractor
from deadline_tracker.utils.config import ExtractionSettings


class TestObligationExtractorInit:
    """Test suite for ObligationExtractor initialization."""

    def test_default_settings(self):
        """Test extractor initialization without settings."""
        extractor = ObligationExtractor()
        assert extractor.settings == ExtractionSettings()

    def test_custom_settings(self):
        """Test extractor initialization with settings."""
        settings = ExtractionSettings(max_items=10)
        assert ObligationExtractor(settings).settings.max_items == 10

    def test_default_extractor_singleton(self):
        """Test that the module-level extractor is reused."""
        assert get_default_extractor() is get_default_extractor()

    def test_package_exports(self):
        """Test the top-level package entry point."""
        assert deadline_tracker.extract is extract
        assert deadline_tracker.ObligationExtractor is ObligationExtractor


class TestExtractScenarios:
    """Test suite for end-to-end extraction behaviour."""

    def test_notice_before_term_end(self, extractor, notice_text):
        """Test the term end and the notice date derived 90 days earlier."""
        items = extractor.extract(notice_text, "lease.txt")
        by_date = {item.date: item for item in items}

        assert len(items) == 2
        assert set(by_date) == {"2026-12-31", "2026-10-02"}
        assert by_date["2026-12-31"].type == "term_end"
        assert by_date["2026-10-02"].deadline_confidence == "Hard deadline"
        assert all(item.priority == "high" for item in items)
        assert all(item.source == "lease.txt" for item in items)
        assert all(item.location == "Line 1" for item in items)

    def test_notice_items_ordered_by_date(self, extractor, notice_text):
        """Test ordering by priority, then date."""
        items = extractor.extract(notice_text, "lease.txt")
        assert [item.date for item in items] == ["2026-10-02", "2026-12-31"]

    def test_auto_renewal(self, extractor, renewal_text):
        """Test that a non-renewal window is flagged as an auto-renewal deadline."""
        items = extractor.extract(renewal_text, "saas.txt")

        assert any(
            item.deadline_confidence == "Auto-renewal" and item.priority == "high"
            for item in items
        )
        assert any(item.date == "2027-05-01" for item in items)

    def test_generic_prose(self, extractor, generic_text):
        """Test that prose without obligations yields nothing."""
        assert extractor.extract(generic_text, "Pasted Text") == []

    @pytest.mark.parametrize("raw", ["", "   \n\t  ", None])
    def test_empty_input(self, extractor, raw):
        """Test empty and missing text."""
        assert extractor.extract(raw, "Pasted Text") == []

    def test_unanchored_relative_clause(self, extractor, unanchored_text):
        """Test that a clause with no date anywhere yields undated, modest items."""
        items = extractor.extract(unanchored_text, "sow.txt")

        assert items
        assert all(item.date is None for item in items)
        assert all(item.confidence in ("low", "medium") for item in items)

    def test_layers_collapse_duplicates(self, extractor, notice_text):
        """Test that items from different layers merge by key."""
        items = extractor.extract(notice_text, "lease.txt")
        keys = [item_key(item) for item in items]
        assert len(keys) == len(set(keys))

    def test_all_dates_valid(self, extractor):
        """Test that only real calendar dates are emitted."""
        text = (
            "Payment is due February 30, 2025 under this Agreement. "
            "The Client shall pay each invoice no later than 15 days after invoice date of 2025-02-20. "
            "This Agreement expires on 12/31/2025."
        )
        items = extractor.extract(text, "msa.txt")

        assert items
        for item in items:
            if item.date is not None:
                date.fromisoformat(item.date)
        assert "2025-02-30" not in {item.date for item in items}

    def test_max_items_cap(self, notice_text):
        """Test the output cap."""
        extractor = ObligationExtractor(ExtractionSettings(max_items=1))
        assert len(extractor.extract(notice_text, "lease.txt")) == 1

    def test_pdf_pages(self, extractor):
        """Test page locations for PDF sources."""
        text = (
            "\n[[[TT_PAGE_1]]]\nMaster Services Agreement between the parties.\n"
            "[[[TT_PAGE_2]]]\nThis Agreement expires on March 31, 2027.\n"
        )
        items = extractor.extract(text, "msa.pdf")

        assert items
        assert all(item.location == "Page 2" for item in items)
        assert all("TT_PAGE" not in item.snippet for item in items)


class TestIdempotence:
    """Test suite for repeatable output."""

    def test_extract_is_idempotent(self, extractor, notice_text, renewal_text):
        """Test that repeated calls return equal items in the same order."""
        text = f"{notice_text}\n\n{renewal_text}"
        first = extractor.extract(text, "combined.txt")
        second = extractor.extract(text, "combined.txt")

        assert first == second
        assert [item.id for item in first] == [item.id for item in second]

    def test_module_level_extract(self, notice_text):
        """Test the convenience entry point."""
        assert extract(notice_text, "lease.txt") == ObligationExtractor().extract(notice_text, "lease.txt")


class TestExtractObligations:
    """Test suite for extract_obligations method."""

    def test_serialized_with_public_names(self, extractor, notice_text):
        """Test dict output with camelCase deadline confidence."""
        obligations = extractor.extract_obligations(notice_text, "lease.txt")

        assert obligations
        assert all("deadlineConfidence" in obl for obl in obligations)
        assert {obl["date"] for obl in obligations} == {"2026-12-31", "2026-10-02"}

    def test_layer_failure_propagates(self, extractor, notice_text):
        """Test that unexpected errors are not swallowed."""
        with patch(
            "deadline_tracker.processing.obligation_extractor.rank_and_filter",
            side_effect=RuntimeError("boom")
        ):
            with pytest.raises(RuntimeError):
                extractor.extract(notice_text, "lease.txt")
