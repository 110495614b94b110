"""
Shared state object for the matching workflow.
Every node reads from and writes to this state.
"""

from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field
from datetime import datetime, timezone
from invoice_matcher.schemas.invoice import InvoiceCandidate, InvoiceRecord
from invoice_matcher.schemas.po import PurchaseOrder
from invoice_matcher.schemas.delivery import Delivery
from invoice_matcher.schemas.output import (
    AmountMatchResult,
    DeliveryMatchResult,
    ItemMatchResult,
    MatchResult,
    POMatchResult,
)


class ReasoningLogEntry(BaseModel):
    """A single entry in the agent reasoning log."""
    timestamp: datetime
    agent_name: str
    message: str
    confidence: Optional[float] = None
    action: Optional[str] = None


class MatchingState(BaseModel):
    """
    Shared state object for one matching run.

    This state is passed between nodes. Each node:
    1. Reads relevant state
    2. Performs its task
    3. Updates state with results
    4. Adds reasoning log entry
    5. Passes state to next node

    List fields are always reassigned, never appended to in place, so the
    graph picks up every update.
    """

    invoice: InvoiceCandidate

    # Snapshots read from storage before the run
    purchase_orders: List[PurchaseOrder] = Field(default_factory=list)
    existing_invoices: List[InvoiceRecord] = Field(default_factory=list)

    # PO selection
    matched_po: Optional[PurchaseOrder] = None
    po_confidence: float = 0.0

    # Delivery selection
    matched_delivery: Optional[Delivery] = None
    delivery_confidence: float = 0.0
    item_matches: List[ItemMatchResult] = Field(default_factory=list)

    # Verification
    amount_match: AmountMatchResult = Field(default_factory=AmountMatchResult)
    is_duplicate: bool = False

    # Aggregation
    flags: List[str] = Field(default_factory=list)
    overall_score: float = 0.0

    match_error: Optional[str] = None

    # Reasoning and audit trail
    reasoning_log: List[ReasoningLogEntry] = Field(default_factory=list)

    def add_reasoning(
        self,
        agent_name: str,
        message: str,
        confidence: Optional[float] = None,
        action: Optional[str] = None
    ) -> None:
        """Add an entry to the agent reasoning log."""
        self.reasoning_log = self.reasoning_log + [
            ReasoningLogEntry(
                timestamp=datetime.now(timezone.utc),
                agent_name=agent_name,
                message=message,
                confidence=confidence,
                action=action,
            )
        ]

    def get_agent_reasoning(self) -> str:
        """Get a human-readable summary of the agent reasoning."""
        if not self.reasoning_log:
            return "No reasoning available."

        lines = []
        for entry in self.reasoning_log:
            conf_str = f" (confidence: {entry.confidence:.2f})" if entry.confidence is not None else ""
            lines.append(f"[{entry.agent_name}] {entry.message}{conf_str}")

        return "\n".join(lines)

    def to_match_result(self) -> MatchResult:
        """Assemble the public result from the state."""
        if self.matched_po:
            po_match = POMatchResult(
                matched=True,
                confidence=self.po_confidence,
                po_number=self.matched_po.po_number,
            )
        else:
            po_match = POMatchResult(matched=False, confidence=0.0)

        if self.matched_delivery:
            delivery_match = DeliveryMatchResult(
                matched=True,
                confidence=self.delivery_confidence,
                delivery_number=self.matched_delivery.delivery_number,
            )
        else:
            delivery_match = DeliveryMatchResult(matched=False, confidence=0.0)

        return MatchResult(
            po_match=po_match,
            delivery_match=delivery_match,
            amount_match=self.amount_match,
            item_matches=self.item_matches,
            flags=self.flags,
            overall_score=self.overall_score,
        )

    def get_summary(self) -> Dict[str, Any]:
        """Get a summary of the current state."""
        return {
            "invoice_number": self.invoice.invoice_number,
            "po_number": self.matched_po.po_number if self.matched_po else None,
            "delivery_number": self.matched_delivery.delivery_number if self.matched_delivery else None,
            "flags_raised": len(self.flags),
            "overall_score": self.overall_score,
            "total_agents_participated": len(set(log.agent_name for log in self.reasoning_log)),
        }
