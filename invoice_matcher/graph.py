"""
LangGraph orchestration for the three-way matching workflow.
Defines the graph structure and node routing logic.
"""

from typing import Literal
from langgraph.graph import StateGraph, END
from invoice_matcher.state import MatchingState
from invoice_matcher.storage import MatchingStorage
from invoice_matcher.agents.po_matching import po_matching_agent
from invoice_matcher.agents.delivery_matching import delivery_matching_agent
from invoice_matcher.agents.verification import amount_verification_agent, duplicate_detection_agent
from invoice_matcher.agents.flagging import flagging_agent


def route_after_po_matching(state: MatchingState) -> Literal["delivery_matching_agent", "amount_verification_agent"]:
    """Route after PO matching."""
    if state.matched_po is None:
        # Deliveries are only looked up for a matched PO
        return "amount_verification_agent"
    return "delivery_matching_agent"


def build_matching_graph(storage: MatchingStorage):
    """
    Build the LangGraph workflow for three-way matching.

    Flow:
    1. PO Matching Agent - Select the best PO
    2. Delivery Matching Agent - Select the best delivery (only with a PO)
    3. Amount Verification Agent - Compare totals
    4. Duplicate Detection Agent - Look for a prior submission
    5. Flagging Agent - Flags and overall score

    The storage is bound into the delivery node, which is the only node that
    reads during the run.
    """

    def delivery_node(state: MatchingState) -> MatchingState:
        return delivery_matching_agent(state, storage)

    graph = StateGraph(MatchingState)

    # Add agent nodes
    graph.add_node("po_matching_agent", po_matching_agent)
    graph.add_node("delivery_matching_agent", delivery_node)
    graph.add_node("amount_verification_agent", amount_verification_agent)
    graph.add_node("duplicate_detection_agent", duplicate_detection_agent)
    graph.add_node("flagging_agent", flagging_agent)

    # Set the entry point
    graph.set_entry_point("po_matching_agent")

    # Add edges with routing logic
    graph.add_conditional_edges(
        "po_matching_agent",
        route_after_po_matching,
        {
            "delivery_matching_agent": "delivery_matching_agent",
            "amount_verification_agent": "amount_verification_agent",
        }
    )
    graph.add_edge("delivery_matching_agent", "amount_verification_agent")
    graph.add_edge("amount_verification_agent", "duplicate_detection_agent")
    graph.add_edge("duplicate_detection_agent", "flagging_agent")
    graph.add_edge("flagging_agent", END)

    return graph.compile()
