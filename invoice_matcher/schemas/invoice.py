"""
Invoice schema and data models.
Represents OCR-extracted invoice data as it enters the matching engine.
"""

import math
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator


DEFAULT_VENDOR_NAME = "Unknown Vendor"
DEFAULT_ITEM_NAME = "Unknown Item"
DEFAULT_EXTRACTION_CONFIDENCE = 0.5
DEFAULT_PAYMENT_TERM_DAYS = 7


class InvoiceValidationError(ValueError):
    """Raised when an OCR payload cannot be turned into an invoice candidate."""


def _as_number(value: Any, default: float) -> float:
    """Coerce an OCR value to a number, falling back on anything unusable or zero."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or number == 0:
        return default
    return number


class VendorInfo(BaseModel):
    """Vendor details printed on the invoice."""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    tax_id: Optional[str] = Field(default=None, alias="taxId")


class InvoiceLineItem(BaseModel):
    """A single line item from an invoice, keyed the way the OCR service emits it."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(alias="iname")
    unit_price: float = Field(alias="amt")
    quantity: float = Field(alias="units")
    line_total: float = Field(alias="t_amt")


class InvoiceCandidate(BaseModel):
    """An invoice submitted for matching. Transient, never persisted by the engine."""
    model_config = ConfigDict(populate_by_name=True)

    invoice_number: str = Field(alias="invoiceNumber")
    vendor: VendorInfo = Field(alias="vendorId")
    total_amount: float = Field(alias="totalAmount")
    invoice_date: Optional[date] = Field(default=None, alias="date")
    due_date: Optional[date] = Field(default=None, alias="dueDate")
    items: List[InvoiceLineItem] = Field(default_factory=list)
    confidence: float = Field(default=DEFAULT_EXTRACTION_CONFIDENCE, ge=0.0, le=1.0)

    @field_validator("invoice_number")
    @classmethod
    def invoice_number_present(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("invoiceNumber is required")
        return value.strip()

    @model_validator(mode="after")
    def default_due_date(self) -> "InvoiceCandidate":
        if self.due_date is None and self.invoice_date is not None:
            self.due_date = self.invoice_date + timedelta(days=DEFAULT_PAYMENT_TERM_DAYS)
        return self

    @classmethod
    def from_ocr_payload(cls, payload: Dict[str, Any]) -> "InvoiceCandidate":
        """
        Build a candidate from a raw OCR payload, applying the defaulting rules.

        The OCR service is loose about types and omits fields it could not
        read. Everything except the invoice number gets a default; a missing
        invoice number is a hard failure.

        Raises:
            InvoiceValidationError: if the invoice number is missing or the
                payload is otherwise unusable.
        """
        if not isinstance(payload, dict):
            raise InvoiceValidationError("OCR payload must be an object")

        invoice_number = payload.get("invoiceNumber")
        if not isinstance(invoice_number, str) or not invoice_number.strip():
            raise InvoiceValidationError("Invoice number is required")

        vendor = payload.get("vendorId")
        if not isinstance(vendor, dict):
            vendor = {}
        items = payload.get("items")
        confidence = payload.get("confidence")
        if (
            isinstance(confidence, bool)
            or not isinstance(confidence, (int, float))
            or math.isnan(confidence)
            or not 0.0 <= confidence <= 1.0
        ):
            confidence = DEFAULT_EXTRACTION_CONFIDENCE

        normalized_items = []
        for item in items if isinstance(items, list) else []:
            if not isinstance(item, dict):
                continue
            unit_price = _as_number(item.get("amt"), 0.0)
            units = _as_number(item.get("units"), 1.0)
            normalized_items.append({
                "iname": item.get("iname") or DEFAULT_ITEM_NAME,
                "amt": unit_price,
                "units": units,
                "t_amt": _as_number(item.get("t_amt"), unit_price * units),
            })

        normalized = {
            "invoiceNumber": invoice_number,
            "vendorId": {
                "name": vendor.get("name") or DEFAULT_VENDOR_NAME,
                "email": vendor.get("email") or None,
                "phone": vendor.get("phone") or None,
                "address": vendor.get("address") or None,
                "taxId": vendor.get("taxId") or None,
            },
            "totalAmount": _as_number(payload.get("totalAmount"), 0.0),
            "date": payload.get("date") or None,
            "dueDate": payload.get("dueDate") or None,
            "items": normalized_items,
            "confidence": confidence,
        }

        try:
            return cls.model_validate(normalized)
        except ValidationError as e:
            raise InvoiceValidationError(str(e)) from e


class InvoiceRecord(BaseModel):
    """An invoice already held by the storage collaborator."""
    model_config = ConfigDict(populate_by_name=True)

    invoice_number: str = Field(alias="invoiceNumber")
    vendor: VendorInfo = Field(alias="vendorId")
    total_amount: float = Field(default=0.0, alias="totalAmount")
    status: str = "pending"  # pending, approved, rejected, paid

    @classmethod
    def from_candidate(cls, invoice: InvoiceCandidate, status: str = "pending") -> "InvoiceRecord":
        """Record a submitted candidate."""
        return cls(
            invoice_number=invoice.invoice_number,
            vendor=invoice.vendor,
            total_amount=invoice.total_amount,
            status=status,
        )
