"""
Resolution Recommendation
Decides the status an invoice should be stored with once matching is done.
"""

from invoice_matcher.schemas.output import MatchResult
from invoice_matcher.utils.logging import setup_logging
from invoice_matcher.config import get_config


logger = setup_logging(__name__)
config = get_config()


def recommend_invoice_status(result: MatchResult, auto_approve: bool = None) -> str:
    """
    Recommend "approved" or "pending" for a matched invoice.

    Approval is automatic only when the caller's auto-approve setting is on
    and the three-way match is perfect. Everything else waits for a reviewer;
    the engine never rejects.
    """
    if auto_approve is None:
        auto_approve = config.AUTO_APPROVE

    if auto_approve and result.overall_score >= config.AUTO_APPROVE_SCORE:
        logger.info(f"[ResolutionAgent] Auto-approving (overall score {result.overall_score:.2f})")
        return "approved"

    logger.debug(
        f"[ResolutionAgent] Leaving invoice pending (auto_approve={auto_approve}, "
        f"overall score {result.overall_score:.2f})"
    )
    return "pending"
