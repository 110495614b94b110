"""
Storage interface consumed by the matching engine.

The engine only reads: purchase orders, the deliveries recorded against a PO,
and previously submitted invoices. Implementations must return records in a
stable order (insertion order) because PO and delivery selection break ties
on first-seen.
"""

import json
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from invoice_matcher.schemas.invoice import InvoiceRecord
from invoice_matcher.schemas.po import PurchaseOrder
from invoice_matcher.schemas.delivery import Delivery
from invoice_matcher.utils.logging import setup_logging


logger = setup_logging(__name__)


class MatchingStorage(ABC):
    """Read-only data access for the matching engine."""

    @abstractmethod
    def list_purchase_orders(self) -> List[PurchaseOrder]:
        """All purchase orders, in creation order."""

    @abstractmethod
    def list_deliveries_for_po(self, po_number: str) -> List[Delivery]:
        """Deliveries whose po_id is the given PO number, in creation order."""

    @abstractmethod
    def list_all_invoices(self) -> List[InvoiceRecord]:
        """Previously submitted invoices, used for duplicate detection."""


class InMemoryStorage(MatchingStorage):
    """Insertion-ordered in-memory store."""

    def __init__(
        self,
        purchase_orders: Optional[Iterable[PurchaseOrder]] = None,
        deliveries: Optional[Iterable[Delivery]] = None,
        invoices: Optional[Iterable[InvoiceRecord]] = None,
    ):
        self._purchase_orders: List[PurchaseOrder] = list(purchase_orders or [])
        self._deliveries: List[Delivery] = list(deliveries or [])
        self._invoices: List[InvoiceRecord] = list(invoices or [])

    def list_purchase_orders(self) -> List[PurchaseOrder]:
        return list(self._purchase_orders)

    def list_deliveries_for_po(self, po_number: str) -> List[Delivery]:
        return [d for d in self._deliveries if d.po_id == po_number]

    def list_all_invoices(self) -> List[InvoiceRecord]:
        return list(self._invoices)

    def add_purchase_order(self, po: PurchaseOrder) -> None:
        if any(existing.po_number == po.po_number for existing in self._purchase_orders):
            raise ValueError(f"Purchase order {po.po_number} already exists")
        self._purchase_orders.append(po)

    def add_delivery(self, delivery: Delivery) -> None:
        if any(existing.delivery_number == delivery.delivery_number for existing in self._deliveries):
            raise ValueError(f"Delivery {delivery.delivery_number} already exists")
        self._deliveries.append(delivery)

    def add_invoice(self, invoice: InvoiceRecord) -> None:
        self._invoices.append(invoice)


def load_storage_from_file(data_file: str) -> InMemoryStorage:
    """
    Load POs, deliveries and invoices from a JSON file.

    The file holds "purchaseOrders", "deliveries" and "invoices" arrays in the
    camelCase shape the records are stored in. A missing file yields an empty
    store.
    """
    try:
        with open(data_file, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.warning(f"Data file not found: {data_file}. Using empty storage.")
        return InMemoryStorage()

    storage = InMemoryStorage()
    for po_dict in data.get("purchaseOrders", []):
        storage.add_purchase_order(PurchaseOrder.model_validate(po_dict))
    for delivery_dict in data.get("deliveries", []):
        storage.add_delivery(Delivery.model_validate(delivery_dict))
    for invoice_dict in data.get("invoices", []):
        storage.add_invoice(InvoiceRecord.model_validate(invoice_dict))

    logger.info(
        f"Loaded {len(storage.list_purchase_orders())} purchase orders, "
        f"{len(data.get('deliveries', []))} deliveries and "
        f"{len(storage.list_all_invoices())} invoices from {data_file}"
    )
    return storage
