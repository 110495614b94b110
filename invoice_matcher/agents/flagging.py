"""
Flagging Agent
Turns the matching signals into reviewer-facing flags and the overall score.

Flags are emitted in a fixed order and displayed verbatim by consumers:
1. PO not found / low confidence PO match
2. No delivery record
3. Amount variance against the PO
4. Duplicate invoice
5. Per delivery item: low description similarity, quantity mismatch
6. Delivery matched without any item matches
7. PO confidence short of perfect
8. Delivery confidence short of perfect
9. Amount not matching the PO
"""

from typing import List

from invoice_matcher.state import MatchingState
from invoice_matcher.schemas.output import AmountMatchResult, ItemMatchResult
from invoice_matcher.utils.logging import setup_logging, log_flag
from invoice_matcher.config import get_config


logger = setup_logging(__name__)
config = get_config()


def format_currency(amount: float) -> str:
    """Currency symbol, thousands separators, at most three decimals."""
    formatted = f"{amount:,.3f}".rstrip("0").rstrip(".")
    return f"{config.CURRENCY_SYMBOL}{formatted}"


def build_flags(
    po_matched: bool,
    po_confidence: float,
    delivery_matched: bool,
    delivery_confidence: float,
    amount_match: AmountMatchResult,
    duplicate: bool,
    item_matches: List[ItemMatchResult],
) -> List[str]:
    """Flags for one invoice, in display order."""
    flags = []

    if not po_matched:
        flags.append("No matching Purchase Order found")
    elif po_confidence < config.PO_HIGH_CONFIDENCE_THRESHOLD:
        flags.append("Low confidence PO match")

    if not delivery_matched:
        flags.append("No delivery record found")

    if po_matched and not amount_match.matched:
        flags.append(f"Amount exceeds PO by {format_currency(amount_match.variance)}")

    if duplicate:
        flags.append("Potential duplicate invoice detected")

    for index, match in enumerate(item_matches, 1):
        if match.description_similarity < config.ITEM_SIMILARITY_FLAG_THRESHOLD:
            flags.append(
                f"Item {index}: Low description similarity ({match.description_similarity * 100:.2f}%)"
            )
        if not match.quantity_match:
            flags.append(f"Item {index}: Quantity mismatch")

    if delivery_matched and not item_matches:
        flags.append("No matching delivery items found")

    # Any shortfall from 1.0 is reported, however small
    if po_confidence < 1.0:
        flags.append(f"PO match confidence below perfect: {po_confidence * 100:.0f}%")
    if delivery_confidence < 1.0:
        flags.append(f"Delivery match confidence below perfect: {delivery_confidence * 100:.0f}%")

    if not amount_match.matched:
        flags.append("Amount does not exactly match PO")

    return flags


def compute_overall_score(po_confidence: float, delivery_confidence: float, amount_matched: bool) -> float:
    """Unweighted mean of PO confidence, delivery confidence and the amount check."""
    return (po_confidence + delivery_confidence + (1.0 if amount_matched else 0.0)) / 3


def flagging_agent(state: MatchingState) -> MatchingState:
    """
    Flagging Agent node.

    Updates state:
    - flags
    - overall_score
    """
    state.flags = build_flags(
        po_matched=state.matched_po is not None,
        po_confidence=state.po_confidence,
        delivery_matched=state.matched_delivery is not None,
        delivery_confidence=state.delivery_confidence,
        amount_match=state.amount_match,
        duplicate=state.is_duplicate,
        item_matches=state.item_matches,
    )
    state.overall_score = compute_overall_score(
        state.po_confidence,
        state.delivery_confidence,
        state.amount_match.matched,
    )

    for flag in state.flags:
        log_flag(logger, state.invoice.invoice_number, flag)

    state.add_reasoning(
        agent_name="FlaggingAgent",
        message=f"{len(state.flags)} flag(s) raised",
        confidence=state.overall_score,
        action="flags_aggregated",
    )

    return state
