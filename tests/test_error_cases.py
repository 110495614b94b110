"""
Tests for error handling and edge cases.
"""

import pytest
from unittest.mock import patch

from invoice_matcher.config import Config, get_config
from invoice_matcher.main import perform_invoice_matching
from invoice_matcher.state import MatchingState
from invoice_matcher.storage import InMemoryStorage
from invoice_matcher.agents.po_matching import amount_score, po_matching_agent
from invoice_matcher.agents.resolution import recommend_invoice_status
from invoice_matcher.schemas.output import MatchResult
from invoice_matcher.utils import calculate_percentage_variance

from factories import make_invoice


class FailingDeliveryStorage(InMemoryStorage):
    """Storage whose delivery lookup is down."""

    def list_deliveries_for_po(self, po_number):
        raise ConnectionError("delivery store unavailable")


class TestStorageErrors:

    def test_delivery_lookup_failure_degrades_to_no_delivery(self, invoice, purchase_order):
        storage = FailingDeliveryStorage(purchase_orders=[purchase_order])
        result = perform_invoice_matching(invoice, storage)

        assert result.po_match.matched is True
        assert result.delivery_match.matched is False
        assert result.item_matches == []
        assert result.flags == ["No delivery record found", "Delivery match confidence below perfect: 0%"]
        assert result.overall_score == pytest.approx(2 / 3)


class TestAgentErrors:

    def test_po_scoring_failure_recorded_in_state(self, invoice, purchase_order):
        state = MatchingState(invoice=invoice, purchase_orders=[purchase_order])

        with patch("invoice_matcher.agents.po_matching.select_best_po") as mock_select:
            mock_select.side_effect = RuntimeError("scoring failed")
            result = po_matching_agent(state)

        assert result.matched_po is None
        assert result.po_confidence == 0.0
        assert "scoring failed" in result.match_error
        assert "Error during PO matching" in result.get_agent_reasoning()

    def test_po_scoring_failure_through_workflow(self, invoice, storage):
        with patch("invoice_matcher.agents.po_matching.select_best_po") as mock_select:
            mock_select.side_effect = RuntimeError("scoring failed")
            result = perform_invoice_matching(invoice, storage)

        assert result.po_match.matched is False
        assert result.flags[0] == "No matching Purchase Order found"
        assert result.overall_score == 0.0


class TestZeroAmounts:

    def test_variance_against_zero_is_undefined(self):
        assert calculate_percentage_variance(100.0, 0.0) is None

    def test_zero_po_amount_scores_zero(self):
        assert amount_score(25000.0, 0.0) == 0.0

    def test_amount_score_tolerance_is_inclusive(self):
        assert amount_score(27500.0, 25000.0) == 1.0

    def test_amount_score_falls_off_linearly(self):
        assert amount_score(30000.0, 25000.0) == pytest.approx(0.8)
        assert amount_score(100000.0, 25000.0) == 0.0

    def test_zero_invoice_total(self, storage):
        result = perform_invoice_matching(make_invoice(total=0.0), storage)
        assert result.amount_match.matched is False
        assert "Amount does not exactly match PO" in result.flags


class TestConfiguration:

    def test_default_config_is_valid(self):
        config = get_config("test")
        config.validate()
        assert config.AUTO_APPROVE is False

    def test_threshold_out_of_range(self):
        class BrokenConfig(Config):
            PO_MATCH_THRESHOLD = 1.5

        with pytest.raises(ValueError):
            BrokenConfig.validate()

    def test_weights_must_sum_to_one(self):
        class BrokenConfig(Config):
            DELIVERY_WEIGHTS = (0.5, 0.6)

        with pytest.raises(ValueError):
            BrokenConfig.validate()

    def test_invalid_log_level(self):
        class BrokenConfig(Config):
            LOG_LEVEL = "VERBOSE"

        with pytest.raises(ValueError):
            BrokenConfig.validate()


class TestResolution:

    def test_perfect_match_auto_approved(self):
        assert recommend_invoice_status(MatchResult(overall_score=1.0), auto_approve=True) == "approved"

    def test_auto_approve_off(self):
        assert recommend_invoice_status(MatchResult(overall_score=1.0), auto_approve=False) == "pending"

    def test_imperfect_match_stays_pending(self):
        assert recommend_invoice_status(MatchResult(overall_score=0.99), auto_approve=True) == "pending"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
