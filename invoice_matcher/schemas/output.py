"""
Output schemas for the matching results.
Defines the JSON shape attached to the invoice record by the caller.
"""

from typing import Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from invoice_matcher.schemas.invoice import InvoiceLineItem
from invoice_matcher.schemas.po import POLineItem
from invoice_matcher.schemas.delivery import DeliveryLineItem


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ItemMatchResult(_CamelModel):
    """Best candidate found for one invoice line."""
    invoice_item: InvoiceLineItem
    po_item: Optional[POLineItem] = None
    delivery_item: Optional[DeliveryLineItem] = None
    description_similarity: float = Field(ge=0.0, le=1.0)
    quantity_match: bool = False
    price_match: bool = False


class POMatchResult(_CamelModel):
    """Outcome of PO selection."""
    matched: bool = False
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    po_number: Optional[str] = None


class DeliveryMatchResult(_CamelModel):
    """Outcome of delivery selection."""
    matched: bool = False
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    delivery_number: Optional[str] = None


class AmountMatchResult(_CamelModel):
    """Invoice total compared to the matched PO total."""
    matched: bool = False
    variance: float = 0.0  # absolute difference


class MatchResult(_CamelModel):
    """Final three-way match result."""
    po_match: POMatchResult = Field(default_factory=POMatchResult)
    delivery_match: DeliveryMatchResult = Field(default_factory=DeliveryMatchResult)
    amount_match: AmountMatchResult = Field(default_factory=AmountMatchResult)
    item_matches: List[ItemMatchResult] = Field(default_factory=list)
    flags: List[str] = Field(default_factory=list)
    overall_score: float = Field(default=0.0, ge=0.0, le=1.0)

    def to_json_dict(self) -> Dict[str, Any]:
        """camelCase JSON-ready dict; absent PO/delivery references are omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "poMatch": {"matched": True, "confidence": 1.0, "poNumber": "PO-2024-001"},
                "deliveryMatch": {"matched": True, "confidence": 1.0, "deliveryNumber": "DEL-2024-001"},
                "amountMatch": {"matched": True, "variance": 0.0},
                "itemMatches": [],
                "flags": [],
                "overallScore": 1.0,
            }
        },
    )
