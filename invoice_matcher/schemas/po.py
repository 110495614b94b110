"""
Purchase Order schema and data models.
Represents POs held by the storage collaborator.
"""

from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from datetime import datetime


class POLineItem(BaseModel):
    """A single line item in a Purchase Order."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    description: str
    quantity: float
    unit_price: float


class PurchaseOrder(BaseModel):
    """A Purchase Order record."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    po_number: str
    vendor_name: str
    amount: float  # stored as a decimal string, e.g. "25000.00"
    po_date: Optional[datetime] = None
    status: str = "active"  # active, completed, cancelled
    items: List[POLineItem] = Field(default_factory=list)
