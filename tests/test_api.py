"""
Tests for the REST endpoint.
"""

import pytest
from fastapi.testclient import TestClient

from invoice_matcher.api import app, get_storage


@pytest.fixture
def client(storage):
    app.dependency_overrides[get_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def payload():
    return {
        "invoiceNumber": "INV-001",
        "vendorId": {"name": "Acme Corporation"},
        "totalAmount": 25000,
        "date": "2024-01-15",
        "items": [{"iname": "Widget A", "amt": 250, "units": 100, "t_amt": 25000}],
        "confidence": 0.95,
    }


def test_match_invoice(client, payload):
    response = client.post("/match", json=payload)

    assert response.status_code == 201
    body = response.json()
    assert body["invoice"]["invoiceNumber"] == "INV-001"
    assert body["invoice"]["dueDate"] == "2024-01-22"
    assert body["matchingResults"]["poMatch"] == {"matched": True, "confidence": 1.0, "poNumber": "PO-1"}
    assert body["matchingResults"]["deliveryMatch"]["deliveryNumber"] == "DEL-1"
    assert body["matchingResults"]["flags"] == []
    assert body["matchingResults"]["overallScore"] == 1.0
    assert body["status"] in ("pending", "approved")


def test_submitted_invoice_is_recorded(client, payload, storage):
    client.post("/match", json=payload)

    records = storage.list_all_invoices()
    assert [record.invoice_number for record in records] == ["INV-001"]


def test_resubmission_flagged_as_duplicate(client, payload):
    client.post("/match", json=payload)
    response = client.post("/match", json=payload)

    assert response.status_code == 201
    assert response.json()["matchingResults"]["flags"] == ["Potential duplicate invoice detected"]


def test_missing_invoice_number(client, payload, storage):
    del payload["invoiceNumber"]
    response = client.post("/match", json=payload)

    assert response.status_code == 400
    assert response.json()["detail"].startswith("Invalid invoice data")
    assert storage.list_all_invoices() == []


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_config(client):
    response = client.get("/config")
    assert response.status_code == 200
    data = response.json()
    assert data["po_match_threshold"] == 0.7
    assert data["delivery_match_threshold"] == 0.6
    assert data["amount_match_tolerance"] == 0.05
