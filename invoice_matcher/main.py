"""
Main entry point for the invoice matching engine.
"""

import json
import sys
from typing import Any, Dict

from invoice_matcher.state import MatchingState
from invoice_matcher.graph import build_matching_graph
from invoice_matcher.storage import MatchingStorage, load_storage_from_file
from invoice_matcher.schemas.invoice import InvoiceCandidate
from invoice_matcher.schemas.output import MatchResult
from invoice_matcher.utils.logging import setup_logging
from invoice_matcher.utils import dict_to_json_string
from invoice_matcher.config import get_config


logger = setup_logging(__name__)
config = get_config()


def perform_invoice_matching(invoice: InvoiceCandidate, storage: MatchingStorage) -> MatchResult:
    """
    Run the three-way match for one invoice.

    Purchase orders and existing invoices are read from storage up front;
    deliveries are read for the matched PO during the run. The result
    depends only on those reads, so repeated calls over the same data return
    identical results.

    Args:
        invoice: Normalized invoice candidate
        storage: Read-only data access

    Returns:
        MatchResult with PO, delivery, amount and item matches, flags and score
    """
    purchase_orders = storage.list_purchase_orders()
    existing_invoices = storage.list_all_invoices()

    state = MatchingState(
        invoice=invoice,
        purchase_orders=purchase_orders,
        existing_invoices=existing_invoices,
    )

    logger.info(f"Starting three-way match for invoice {invoice.invoice_number}")
    logger.info(f"Available POs: {len(purchase_orders)}, existing invoices: {len(existing_invoices)}")

    graph = build_matching_graph(storage)
    result = graph.invoke(state, config={"recursion_limit": config.GRAPH_RECURSION_LIMIT})

    # LangGraph hands back the channel values as a dict
    final_state = MatchingState(**result) if isinstance(result, dict) else result

    if final_state.match_error:
        logger.error(f"Matching for {invoice.invoice_number} degraded: {final_state.match_error}")

    match_result = final_state.to_match_result()
    logger.info(
        f"Matching complete for {invoice.invoice_number}. "
        f"Overall score: {match_result.overall_score:.2f}, flags: {len(match_result.flags)}"
    )
    logger.debug(f"Summary: {final_state.get_summary()}")
    logger.debug(final_state.get_agent_reasoning())

    return match_result


def match_invoice_payload(payload: Dict[str, Any], storage: MatchingStorage) -> MatchResult:
    """
    Normalize a raw OCR payload and match it.

    Raises:
        InvoiceValidationError: if the payload has no invoice number
    """
    invoice = InvoiceCandidate.from_ocr_payload(payload)
    return perform_invoice_matching(invoice, storage)


def format_output_json(result: MatchResult) -> str:
    """Format result as JSON string."""
    return dict_to_json_string(result.to_json_dict())


if __name__ == "__main__":
    if len(sys.argv) > 1:
        invoice_path = sys.argv[1]
        data_path = sys.argv[2] if len(sys.argv) > 2 else config.DATA_PATH

        with open(invoice_path, 'r', encoding='utf-8') as f:
            payload = json.load(f)

        result = match_invoice_payload(payload, load_storage_from_file(data_path))
        print(format_output_json(result))
    else:
        print("Usage: python -m invoice_matcher.main <invoice.json> [data.json]")
