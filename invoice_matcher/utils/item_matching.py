"""
Line item matching.

Pairs each invoice line with its best counterpart on a PO or a delivery.
Selection is greedy per invoice line: a PO or delivery line may be the best
match for several invoice lines, and an invoice line without a qualifying
candidate is left out of the result.
"""

from typing import List, Optional

from invoice_matcher.schemas.invoice import InvoiceLineItem
from invoice_matcher.schemas.po import POLineItem
from invoice_matcher.schemas.delivery import DeliveryLineItem
from invoice_matcher.schemas.output import ItemMatchResult
from invoice_matcher.utils import calculate_percentage_variance
from invoice_matcher.utils.similarity import string_similarity
from invoice_matcher.config import get_config


config = get_config()


def unit_price_matches(invoice_price: float, po_price: float) -> bool:
    """Invoice unit price within tolerance of the PO unit price; a zero PO price never matches."""
    variance = calculate_percentage_variance(invoice_price, po_price)
    return variance is not None and variance <= config.ITEM_PRICE_TOLERANCE


def quantity_matches(invoiced: float, delivered: float) -> bool:
    return abs(delivered - invoiced) <= config.ITEM_QUANTITY_TOLERANCE


def match_items_to_po(
    invoice_items: List[InvoiceLineItem],
    po_items: List[POLineItem],
) -> List[ItemMatchResult]:
    """
    Match invoice lines against PO lines.

    A PO line qualifies when its description similarity is strictly above
    ITEM_DESCRIPTION_THRESHOLD and the unit prices agree within
    ITEM_PRICE_TOLERANCE. The most similar qualifying line wins; ties keep
    the first one seen.
    """
    matches = []

    for invoice_item in invoice_items:
        best_match: Optional[ItemMatchResult] = None
        best_similarity = 0.0

        for po_item in po_items:
            similarity = string_similarity(invoice_item.name, po_item.description)
            price_match = unit_price_matches(invoice_item.unit_price, po_item.unit_price)

            if (
                similarity > best_similarity
                and price_match
                and similarity > config.ITEM_DESCRIPTION_THRESHOLD
            ):
                best_similarity = similarity
                best_match = ItemMatchResult(
                    invoice_item=invoice_item,
                    po_item=po_item,
                    description_similarity=similarity,
                    quantity_match=False,
                    price_match=price_match,
                )

        if best_match:
            matches.append(best_match)

    return matches


def _linked_po_item(delivery_item: DeliveryLineItem, po_items: List[POLineItem]) -> Optional[POLineItem]:
    """PO line most similar to a delivery line, if any clears the description floor."""
    best_item = None
    best_similarity = 0.0
    for po_item in po_items:
        similarity = string_similarity(delivery_item.description, po_item.description)
        if similarity >= config.ITEM_DESCRIPTION_THRESHOLD and similarity > best_similarity:
            best_similarity = similarity
            best_item = po_item
    return best_item


def match_items_to_delivery(
    invoice_items: List[InvoiceLineItem],
    po_items: List[POLineItem],
    delivery_items: List[DeliveryLineItem],
) -> List[ItemMatchResult]:
    """
    Match invoice lines against delivery lines.

    Delivery lines below ITEM_DESCRIPTION_THRESHOLD are skipped. Of the rest,
    only lines whose delivered quantity is within ITEM_QUANTITY_TOLERANCE
    units of the invoiced quantity are eligible, and the most similar wins.
    Prices are not compared here. The PO line matching the chosen delivery
    line is attached for reference and does not affect the result.
    """
    matches = []

    for invoice_item in invoice_items:
        best_match: Optional[ItemMatchResult] = None
        best_similarity = 0.0

        for delivery_item in delivery_items:
            similarity = string_similarity(invoice_item.name, delivery_item.description)

            if similarity < config.ITEM_DESCRIPTION_THRESHOLD:
                continue

            quantity_match = quantity_matches(invoice_item.quantity, delivery_item.quantity_delivered)

            if similarity > best_similarity and quantity_match:
                best_similarity = similarity
                best_match = ItemMatchResult(
                    invoice_item=invoice_item,
                    delivery_item=delivery_item,
                    description_similarity=similarity,
                    quantity_match=quantity_match,
                    price_match=False,
                )

        if best_match:
            best_match.po_item = _linked_po_item(best_match.delivery_item, po_items)
            matches.append(best_match)

    return matches
