"""
Tests for OCR payload normalization and the record schemas.
"""

import pytest
from datetime import date

from invoice_matcher.schemas.invoice import InvoiceCandidate, InvoiceValidationError
from invoice_matcher.schemas.po import PurchaseOrder
from invoice_matcher.schemas.delivery import Delivery
from invoice_matcher.schemas.output import MatchResult, POMatchResult


@pytest.fixture
def ocr_payload():
    return {
        "invoiceNumber": "INV-2024-001",
        "vendorId": {"name": "Acme Corporation", "email": "billing@acme.example"},
        "totalAmount": 25000,
        "date": "2024-01-15",
        "items": [{"iname": "Office Supplies", "amt": 250, "units": 100, "t_amt": 25000}],
        "confidence": 0.92,
    }


class TestOCRNormalization:

    def test_complete_payload(self, ocr_payload):
        invoice = InvoiceCandidate.from_ocr_payload(ocr_payload)
        assert invoice.invoice_number == "INV-2024-001"
        assert invoice.vendor.name == "Acme Corporation"
        assert invoice.vendor.email == "billing@acme.example"
        assert invoice.total_amount == 25000.0
        assert invoice.invoice_date == date(2024, 1, 15)
        assert invoice.confidence == 0.92
        assert invoice.items[0].name == "Office Supplies"
        assert invoice.items[0].line_total == 25000.0

    def test_missing_invoice_number(self, ocr_payload):
        del ocr_payload["invoiceNumber"]
        with pytest.raises(InvoiceValidationError):
            InvoiceCandidate.from_ocr_payload(ocr_payload)

    def test_blank_invoice_number(self, ocr_payload):
        ocr_payload["invoiceNumber"] = "   "
        with pytest.raises(InvoiceValidationError):
            InvoiceCandidate.from_ocr_payload(ocr_payload)

    def test_non_object_payload(self):
        with pytest.raises(InvoiceValidationError):
            InvoiceCandidate.from_ocr_payload(["INV-1"])

    def test_validation_error_is_a_value_error(self):
        assert issubclass(InvoiceValidationError, ValueError)

    def test_due_date_defaults_to_seven_days(self, ocr_payload):
        invoice = InvoiceCandidate.from_ocr_payload(ocr_payload)
        assert invoice.due_date == date(2024, 1, 22)

    def test_explicit_due_date_kept(self, ocr_payload):
        ocr_payload["dueDate"] = "2024-02-15"
        invoice = InvoiceCandidate.from_ocr_payload(ocr_payload)
        assert invoice.due_date == date(2024, 2, 15)

    def test_missing_vendor_and_total(self, ocr_payload):
        del ocr_payload["vendorId"]
        del ocr_payload["totalAmount"]
        invoice = InvoiceCandidate.from_ocr_payload(ocr_payload)
        assert invoice.vendor.name == "Unknown Vendor"
        assert invoice.vendor.email is None
        assert invoice.total_amount == 0.0

    def test_unparseable_total(self, ocr_payload):
        ocr_payload["totalAmount"] = "n/a"
        assert InvoiceCandidate.from_ocr_payload(ocr_payload).total_amount == 0.0

    def test_numeric_strings_accepted(self, ocr_payload):
        ocr_payload["totalAmount"] = "25000.50"
        assert InvoiceCandidate.from_ocr_payload(ocr_payload).total_amount == 25000.5

    @pytest.mark.parametrize("confidence", [1.5, -0.1, "high", None])
    def test_unusable_confidence_defaults(self, ocr_payload, confidence):
        ocr_payload["confidence"] = confidence
        assert InvoiceCandidate.from_ocr_payload(ocr_payload).confidence == 0.5

    def test_item_defaults(self, ocr_payload):
        ocr_payload["items"] = [{"amt": 40}, {"iname": "Stapler", "amt": 10, "units": 0}]
        items = InvoiceCandidate.from_ocr_payload(ocr_payload).items
        assert items[0].name == "Unknown Item"
        assert items[0].quantity == 1.0
        assert items[0].line_total == 40.0
        assert items[1].quantity == 1.0
        assert items[1].line_total == 10.0

    def test_line_total_derived_from_price_and_units(self, ocr_payload):
        ocr_payload["items"] = [{"iname": "Paper", "amt": 12.5, "units": 4}]
        assert InvoiceCandidate.from_ocr_payload(ocr_payload).items[0].line_total == 50.0

    def test_items_not_a_list(self, ocr_payload):
        ocr_payload["items"] = "Office Supplies"
        assert InvoiceCandidate.from_ocr_payload(ocr_payload).items == []


class TestRecordSchemas:

    def test_po_amount_from_decimal_string(self):
        po = PurchaseOrder.model_validate({
            "poNumber": "PO-2024-001",
            "vendorName": "Acme Corporation",
            "amount": "25000.00",
            "items": [{"description": "Office Supplies", "quantity": 100, "unitPrice": 250}],
        })
        assert po.amount == 25000.0
        assert po.items[0].unit_price == 250.0
        assert po.status == "active"

    def test_delivery_numeric_po_reference(self):
        delivery = Delivery.model_validate({
            "deliveryNumber": "DEL-1",
            "poId": 1001,
            "vendorName": "Acme Corporation",
        })
        assert delivery.po_id == "1001"
        assert delivery.items == []


class TestMatchResultSerialization:

    def test_camel_case_keys(self):
        result = MatchResult(po_match=POMatchResult(matched=True, confidence=1.0, po_number="PO-1"))
        data = result.to_json_dict()
        assert set(data) == {"poMatch", "deliveryMatch", "amountMatch", "itemMatches", "flags", "overallScore"}
        assert data["poMatch"] == {"matched": True, "confidence": 1.0, "poNumber": "PO-1"}

    def test_absent_references_omitted(self):
        data = MatchResult().to_json_dict()
        assert data["poMatch"] == {"matched": False, "confidence": 0.0}
        assert data["deliveryMatch"] == {"matched": False, "confidence": 0.0}
        assert data["amountMatch"] == {"matched": False, "variance": 0.0}

    def test_score_bounds_enforced(self):
        with pytest.raises(ValueError):
            MatchResult(overall_score=1.5)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
