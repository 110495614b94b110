"""
Verification Agents
Amount verification against the matched PO and duplicate invoice detection.
"""

from typing import List, Optional

from invoice_matcher.state import MatchingState
from invoice_matcher.schemas.invoice import InvoiceCandidate, InvoiceRecord
from invoice_matcher.schemas.po import PurchaseOrder
from invoice_matcher.schemas.output import AmountMatchResult
from invoice_matcher.utils import calculate_percentage_variance
from invoice_matcher.utils.logging import setup_logging, log_agent_action
from invoice_matcher.config import get_config


logger = setup_logging(__name__)
config = get_config()


def verify_amount(invoice: InvoiceCandidate, po: Optional[PurchaseOrder]) -> AmountMatchResult:
    """
    Compare the invoice total to the PO amount.

    Matched when the absolute variance is within AMOUNT_MATCH_TOLERANCE of the
    PO amount. Without a PO there is nothing to verify. A zero PO amount
    never matches.
    """
    if po is None:
        return AmountMatchResult(matched=False, variance=0.0)

    variance = abs(po.amount - invoice.total_amount)
    variance_percent = calculate_percentage_variance(invoice.total_amount, po.amount)
    return AmountMatchResult(
        matched=variance_percent is not None and variance_percent <= config.AMOUNT_MATCH_TOLERANCE,
        variance=variance,
    )


def is_duplicate(invoice: InvoiceCandidate, existing_invoices: List[InvoiceRecord]) -> bool:
    """Same invoice number (exact) from the same vendor (case-insensitive)."""
    vendor_name = invoice.vendor.name.lower()
    return any(
        existing.invoice_number == invoice.invoice_number
        and existing.vendor.name.lower() == vendor_name
        for existing in existing_invoices
    )


def amount_verification_agent(state: MatchingState) -> MatchingState:
    """
    Amount Verification Agent node.

    Updates state:
    - amount_match
    """
    state.amount_match = verify_amount(state.invoice, state.matched_po)

    if state.matched_po:
        log_agent_action(
            logger,
            "AmountVerificationAgent",
            "Amount verified" if state.amount_match.matched else "Amount outside tolerance",
            details={
                "po_number": state.matched_po.po_number,
                "po_amount": state.matched_po.amount,
                "invoice_amount": state.invoice.total_amount,
                "variance": state.amount_match.variance,
            },
        )
        state.add_reasoning(
            agent_name="AmountVerificationAgent",
            message=(
                f"Invoice total {state.invoice.total_amount:.2f} vs PO amount "
                f"{state.matched_po.amount:.2f} (variance {state.amount_match.variance:.2f})"
            ),
            action="amount_matched" if state.amount_match.matched else "amount_mismatch",
        )

    return state


def duplicate_detection_agent(state: MatchingState) -> MatchingState:
    """
    Duplicate Detection Agent node. Only flags; never blocks the invoice.

    Updates state:
    - is_duplicate
    """
    state.is_duplicate = is_duplicate(state.invoice, state.existing_invoices)

    if state.is_duplicate:
        logger.warning(
            f"[DuplicateDetectionAgent] Invoice {state.invoice.invoice_number} from "
            f"{state.invoice.vendor.name} was already submitted"
        )
        state.add_reasoning(
            agent_name="DuplicateDetectionAgent",
            message="An invoice with the same number and vendor already exists",
            action="duplicate_detected",
        )

    return state
