"""
PO Matching Agent
Scores every known Purchase Order against the invoice and selects the best one.
"""

from typing import List, Optional, Tuple

from invoice_matcher.state import MatchingState
from invoice_matcher.schemas.invoice import InvoiceCandidate
from invoice_matcher.schemas.po import PurchaseOrder
from invoice_matcher.utils import calculate_percentage_variance
from invoice_matcher.utils.similarity import string_similarity
from invoice_matcher.utils.item_matching import match_items_to_po
from invoice_matcher.utils.logging import setup_logging, log_agent_action
from invoice_matcher.utils.confidence import (
    average_item_score,
    combine_confidence_scores,
    confidence_level_name,
)
from invoice_matcher.config import get_config


logger = setup_logging(__name__)
config = get_config()


def amount_score(invoice_total: float, po_amount: float) -> float:
    """
    Score how closely the invoice total tracks the PO amount.

    Within AMOUNT_SCORE_TOLERANCE (inclusive) the score is 1; beyond it the
    score falls off linearly with the relative variance. A zero PO amount
    scores 0.
    """
    variance = calculate_percentage_variance(invoice_total, po_amount)
    if variance is None:
        return 0.0
    if variance <= config.AMOUNT_SCORE_TOLERANCE:
        return 1.0
    return max(0.0, 1.0 - variance)


def score_purchase_order(invoice: InvoiceCandidate, po: PurchaseOrder) -> float:
    """Confidence that the invoice bills against this PO."""
    vendor_similarity = string_similarity(invoice.vendor.name, po.vendor_name)

    item_matches = match_items_to_po(invoice.items, po.items)
    item_score = average_item_score(
        [m.description_similarity for m in item_matches],
        [m.price_match for m in item_matches],
        config.UNVERIFIED_ITEM_FACTOR,
    )

    confidence = combine_confidence_scores(
        [vendor_similarity, amount_score(invoice.total_amount, po.amount), item_score],
        weights=config.PO_WEIGHTS,
    )

    logger.debug(
        f"[POMatchingAgent] {po.po_number}: vendor={vendor_similarity:.2f}, "
        f"items={item_score:.2f} ({len(item_matches)} matched), confidence={confidence:.4f}"
    )
    return confidence


def select_best_po(
    invoice: InvoiceCandidate,
    purchase_orders: List[PurchaseOrder],
) -> Tuple[Optional[PurchaseOrder], float]:
    """
    Pick the PO with the strictly highest confidence above PO_MATCH_THRESHOLD.

    POs are visited in the order given, so on equal confidence the first one
    wins. Returns (None, 0.0) when no PO clears the threshold.
    """
    best_po = None
    best_confidence = 0.0

    for po in purchase_orders:
        confidence = score_purchase_order(invoice, po)
        if confidence > best_confidence and confidence > config.PO_MATCH_THRESHOLD:
            best_confidence = confidence
            best_po = po

    return best_po, best_confidence


def po_matching_agent(state: MatchingState) -> MatchingState:
    """
    PO Matching Agent node.

    Updates state:
    - matched_po
    - po_confidence

    Adds reasoning log entry.
    """
    invoice_number = state.invoice.invoice_number
    logger.info(f"[POMatchingAgent] Matching invoice {invoice_number} against {len(state.purchase_orders)} POs")

    try:
        if not state.purchase_orders:
            logger.warning("[POMatchingAgent] No purchase orders available.")
            state.add_reasoning(
                agent_name="POMatchingAgent",
                message="No purchase orders available in system",
                confidence=0.0,
            )
            return state

        best_po, confidence = select_best_po(state.invoice, state.purchase_orders)

        if best_po:
            state.matched_po = best_po
            state.po_confidence = confidence
            log_agent_action(
                logger,
                "POMatchingAgent",
                f"Matched PO {best_po.po_number}",
                details={"invoice_number": invoice_number, "po_number": best_po.po_number},
                confidence=confidence,
            )
            state.add_reasoning(
                agent_name="POMatchingAgent",
                message=f"Matched PO {best_po.po_number} ({confidence_level_name(confidence)})",
                confidence=confidence,
                action="po_matched",
            )
        else:
            logger.warning(f"[POMatchingAgent] No matching PO found for invoice {invoice_number}")
            state.add_reasoning(
                agent_name="POMatchingAgent",
                message=f"No PO scored above {config.PO_MATCH_THRESHOLD:.2f}",
                confidence=0.0,
            )

    except Exception as e:
        logger.exception(f"[POMatchingAgent] Unexpected error: {e}")
        state.match_error = str(e)
        state.matched_po = None
        state.po_confidence = 0.0
        state.add_reasoning(
            agent_name="POMatchingAgent",
            message=f"Error during PO matching: {str(e)}",
            confidence=0.0,
        )

    return state
