"""
Delivery Matching Agent
Finds the goods receipt that best supports the invoice against the matched PO.
"""

from typing import List, Optional, Tuple

from invoice_matcher.state import MatchingState
from invoice_matcher.storage import MatchingStorage
from invoice_matcher.schemas.invoice import InvoiceCandidate
from invoice_matcher.schemas.po import PurchaseOrder
from invoice_matcher.schemas.delivery import Delivery
from invoice_matcher.schemas.output import ItemMatchResult
from invoice_matcher.utils.similarity import string_similarity
from invoice_matcher.utils.item_matching import match_items_to_delivery
from invoice_matcher.utils.logging import setup_logging, log_agent_action
from invoice_matcher.utils.confidence import average_item_score, combine_confidence_scores
from invoice_matcher.config import get_config


logger = setup_logging(__name__)
config = get_config()


def score_delivery(
    invoice: InvoiceCandidate,
    po: PurchaseOrder,
    delivery: Delivery,
) -> Tuple[float, List[ItemMatchResult]]:
    """Confidence that the delivery covers the invoice, with the item matches behind it."""
    vendor_similarity = string_similarity(invoice.vendor.name, delivery.vendor_name)

    item_matches = match_items_to_delivery(invoice.items, po.items, delivery.items)
    item_score = average_item_score(
        [m.description_similarity for m in item_matches],
        [m.quantity_match for m in item_matches],
        config.UNVERIFIED_ITEM_FACTOR,
    )

    confidence = combine_confidence_scores(
        [vendor_similarity, item_score],
        weights=config.DELIVERY_WEIGHTS,
    )
    return confidence, item_matches


def select_best_delivery(
    invoice: InvoiceCandidate,
    po: PurchaseOrder,
    deliveries: List[Delivery],
) -> Tuple[Optional[Delivery], float, List[ItemMatchResult]]:
    """
    Pick the delivery with the strictly highest confidence above
    DELIVERY_MATCH_THRESHOLD, first seen winning ties.

    Returns (None, 0.0, []) when none qualifies.
    """
    best_delivery = None
    best_confidence = 0.0
    best_item_matches: List[ItemMatchResult] = []

    for delivery in deliveries:
        confidence, item_matches = score_delivery(invoice, po, delivery)
        logger.debug(
            f"[DeliveryMatchingAgent] {delivery.delivery_number}: confidence={confidence:.4f}, "
            f"{len(item_matches)} item(s) matched"
        )
        if confidence > best_confidence and confidence > config.DELIVERY_MATCH_THRESHOLD:
            best_confidence = confidence
            best_delivery = delivery
            best_item_matches = item_matches

    return best_delivery, best_confidence, best_item_matches


def delivery_matching_agent(state: MatchingState, storage: MatchingStorage) -> MatchingState:
    """
    Delivery Matching Agent node. Only reached when a PO matched.

    Deliveries are looked up by the matched PO's number.

    Updates state:
    - matched_delivery
    - delivery_confidence
    - item_matches
    """
    po = state.matched_po
    if po is None:
        logger.debug("[DeliveryMatchingAgent] No matched PO, skipping")
        return state

    try:
        deliveries = storage.list_deliveries_for_po(po.po_number)
        logger.info(f"[DeliveryMatchingAgent] {len(deliveries)} deliveries recorded against {po.po_number}")

        best_delivery, confidence, item_matches = select_best_delivery(state.invoice, po, deliveries)

        if best_delivery:
            state.matched_delivery = best_delivery
            state.delivery_confidence = confidence
            state.item_matches = item_matches
            log_agent_action(
                logger,
                "DeliveryMatchingAgent",
                f"Matched delivery {best_delivery.delivery_number}",
                details={
                    "invoice_number": state.invoice.invoice_number,
                    "delivery_number": best_delivery.delivery_number,
                    "item_matches": len(item_matches),
                },
                confidence=confidence,
            )
            state.add_reasoning(
                agent_name="DeliveryMatchingAgent",
                message=f"Matched delivery {best_delivery.delivery_number} with {len(item_matches)} item match(es)",
                confidence=confidence,
                action="delivery_matched",
            )
        else:
            logger.warning(f"[DeliveryMatchingAgent] No delivery found for PO {po.po_number}")
            state.add_reasoning(
                agent_name="DeliveryMatchingAgent",
                message=f"No delivery against {po.po_number} scored above {config.DELIVERY_MATCH_THRESHOLD:.2f}",
                confidence=0.0,
            )

    except Exception as e:
        logger.exception(f"[DeliveryMatchingAgent] Unexpected error: {e}")
        state.match_error = str(e)
        state.matched_delivery = None
        state.delivery_confidence = 0.0
        state.item_matches = []
        state.add_reasoning(
            agent_name="DeliveryMatchingAgent",
            message=f"Error during delivery matching: {str(e)}",
            confidence=0.0,
        )

    return state
