"""
Three-Way Invoice Matching Engine
"""

__version__ = "1.0.0"
__author__ = "AI Team"
__description__ = "Three-way matching of invoices against purchase orders and deliveries"

from invoice_matcher.main import perform_invoice_matching, match_invoice_payload
from invoice_matcher.storage import MatchingStorage, InMemoryStorage
from invoice_matcher.schemas.invoice import InvoiceCandidate, InvoiceValidationError
from invoice_matcher.schemas.output import MatchResult

__all__ = [
    "perform_invoice_matching",
    "match_invoice_payload",
    "MatchingStorage",
    "InMemoryStorage",
    "InvoiceCandidate",
    "InvoiceValidationError",
    "MatchResult",
]
