"""
Delivery (goods receipt) schema and data models.
"""

from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime


class DeliveryLineItem(BaseModel):
    """A single line on a goods receipt."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    description: str
    quantity_ordered: float = 0
    quantity_delivered: float = 0


class Delivery(BaseModel):
    """
    A delivery recorded against a Purchase Order.

    po_id always carries the PO number of the order it was received against.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    delivery_number: str
    po_id: str
    vendor_name: str
    delivery_date: Optional[datetime] = None
    items: List[DeliveryLineItem] = Field(default_factory=list)
    status: str = "received"  # pending, received, partial

    @field_validator("po_id", mode="before")
    @classmethod
    def po_reference_as_text(cls, value):
        return str(value) if isinstance(value, int) else value
