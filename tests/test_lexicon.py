"""
Unit tests for keyword tables, type classification and candidate admission.
"""
import pytest

from deadline_tracker.processing.lexicon import (
    TYPE_KEYWORDS,
    confidence_for_absolute,
    confidence_for_relative,
    confidence_rank,
    has_deadline_signal,
    keep_candidate,
    looks_like_regulatory_reference,
    type_from_window,
)


class TestKeywordTables:
    """Test suite for the module-level tables."""

    def test_tables_are_read_only(self):
        """Test that keyword tables cannot be modified."""
        with pytest.raises(TypeError):
            TYPE_KEYWORDS["renewal"] = ("x",)

    def test_confidence_rank(self):
        """Test confidence ordering and unknown values."""
        assert confidence_rank("high") > confidence_rank("medium") > confidence_rank("low")
        assert confidence_rank("unknown") == 1


class TestTypeFromWindow:
    """Test suite for type_from_window."""

    def test_multi_word_keywords_score_double(self):
        """Test that phrase matches outweigh single words."""
        assert type_from_window("Payment due upon invoice") == "payment"

    def test_term_end_wins_over_notice(self):
        """Test a notice window anchored to the end of the initial term."""
        window = "written notice no later than 90 days prior to the end of the Initial Term"
        assert type_from_window(window) == "term_end"

    def test_tie_keeps_declaration_order(self):
        """Test that ties go to the type declared first."""
        assert type_from_window("renew the trial") == "renewal"

    def test_fallback_hint(self):
        """Test hint mapping when no keyword matches."""
        assert type_from_window("within ten days", "invoice") == "payment"
        assert type_from_window("within ten days", "request") == "notice"
        assert type_from_window("within ten days", "execution") == "other"
        assert type_from_window("within ten days") == "other"


class TestEvidenceChecks:
    """Test suite for evidence predicates and admission."""

    def test_deadline_signal(self):
        """Test deadline vocabulary."""
        assert has_deadline_signal("payable within 30 days")
        assert not has_deadline_signal("the parties agree")

    def test_regulatory_reference(self):
        """Test that two statute terms mark a citation."""
        assert looks_like_regulatory_reference("See the Federal Register and 48 CFR 52.204")
        assert not looks_like_regulatory_reference("Comply with applicable regulation")

    def test_notice_needs_deadline_signal(self):
        """Test notice admission."""
        assert keep_candidate("notice", "Tenant shall give notice within 10 days")
        assert not keep_candidate("notice", "notice was given to the tenant")

    def test_typed_candidate(self):
        """Test admission of typed candidates."""
        assert keep_candidate("payment", "invoice payable within 30 days")
        assert keep_candidate("payment", "the contract fees shall apply")
        assert not keep_candidate("payment", "fees")

    def test_other_rejects_regulatory_noise(self):
        """Test that statute citations are dropped."""
        snippet = "Federal Register guidance shall apply within the regulation"
        assert not keep_candidate("other", snippet)

    def test_other_with_obligation_evidence(self):
        """Test untyped candidates with deadline evidence."""
        assert keep_candidate("other", "the contract shall be signed within 5 days")
        assert not keep_candidate("other", "a lovely afternoon")


class TestConfidence:
    """Test suite for confidence assignment."""

    def test_absolute_confidence(self):
        """Test absolute-date confidence levels."""
        assert confidence_for_absolute("payment", "fees shall be paid") == "high"
        assert confidence_for_absolute("payment", "the contract") == "medium"
        assert confidence_for_absolute("other", "the contract shall") == "medium"
        assert confidence_for_absolute("other", "hello") == "low"

    def test_relative_confidence(self):
        """Test relative-date confidence levels."""
        assert confidence_for_relative("notice", "Tenant shall notify", False) == "low"
        assert confidence_for_relative("notice", "Tenant shall notify", True) == "high"
        assert confidence_for_relative("notice", "Tenant notifies", True) == "medium"
        assert confidence_for_relative("other", "a date", True) == "low"
