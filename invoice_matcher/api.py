"""
Optional FastAPI REST endpoint for invoice matching.
Can be run with: uvicorn invoice_matcher.api:app --reload
"""

from typing import Any, Dict

from fastapi import Depends, FastAPI, HTTPException

from invoice_matcher.main import perform_invoice_matching
from invoice_matcher.storage import InMemoryStorage, load_storage_from_file
from invoice_matcher.schemas.invoice import InvoiceCandidate, InvoiceRecord, InvoiceValidationError
from invoice_matcher.agents.resolution import recommend_invoice_status
from invoice_matcher.utils.logging import setup_logging
from invoice_matcher.config import get_config

config = get_config()
logger = setup_logging(__name__)

app = FastAPI(
    title="Invoice Matching API",
    description="Three-way matching of invoices against purchase orders and deliveries",
    version="1.0.0",
    debug=config.API_DEBUG,
)

_storage = None


def get_storage() -> InMemoryStorage:
    """Storage shared by all requests, loaded from DATA_PATH on first use."""
    global _storage
    if _storage is None:
        _storage = load_storage_from_file(config.DATA_PATH)
    return _storage


@app.post("/match", status_code=201)
def match_invoice_endpoint(
    payload: Dict[str, Any],
    storage: InMemoryStorage = Depends(get_storage),
):
    """
    Match an OCR-extracted invoice and record it.

    Args:
        payload: OCR payload (invoiceNumber, vendorId, totalAmount, items, ...)

    Returns:
        JSON with the normalized invoice, its matching results and status
    """
    try:
        invoice = InvoiceCandidate.from_ocr_payload(payload)
    except InvoiceValidationError as e:
        logger.warning(f"Rejected OCR payload: {e}")
        raise HTTPException(status_code=400, detail=f"Invalid invoice data: {e}")

    result = perform_invoice_matching(invoice, storage)
    status = recommend_invoice_status(result)

    # Recorded after matching so a resubmission is caught as a duplicate
    storage.add_invoice(InvoiceRecord.from_candidate(invoice, status=status))

    return {
        "invoice": invoice.model_dump(mode="json", by_alias=True),
        "matchingResults": result.to_json_dict(),
        "status": status,
    }


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": "1.0.0"}


@app.get("/config")
def get_config_endpoint():
    """Get current matching configuration (sanitized)."""
    return {
        "po_match_threshold": config.PO_MATCH_THRESHOLD,
        "delivery_match_threshold": config.DELIVERY_MATCH_THRESHOLD,
        "item_description_threshold": config.ITEM_DESCRIPTION_THRESHOLD,
        "item_price_tolerance": config.ITEM_PRICE_TOLERANCE,
        "amount_match_tolerance": config.AMOUNT_MATCH_TOLERANCE,
        "auto_approve": config.AUTO_APPROVE,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=config.API_HOST,
        port=config.API_PORT,
        log_level=config.LOG_LEVEL.lower(),
    )
