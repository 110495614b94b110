"""
Confidence arithmetic shared by the PO and delivery selectors.
"""

import logging
from typing import List, Optional, Sequence


logger = logging.getLogger(__name__)

# Lower bound of each named band, highest first
CONFIDENCE_LEVELS = (
    (0.95, "VERY_HIGH"),
    (0.85, "HIGH"),
    (0.70, "ACCEPTABLE"),
    (0.50, "LOW"),
)


def _clamp(score: float, position: int) -> float:
    if 0.0 <= score <= 1.0:
        return score
    logger.warning(f"Confidence score {position} out of range: {score}. Clamping to [0,1]")
    return max(0.0, min(1.0, score))


def combine_confidence_scores(
    scores: Sequence[float],
    weights: Optional[Sequence[float]] = None,
) -> float:
    """
    Weighted mean of component scores.

    Scores outside [0, 1] are clamped with a warning. Weights are normalized,
    so they only need to be proportional; without weights every score counts
    equally.

    Raises:
        ValueError: if weights and scores differ in length
    """
    if not scores:
        return 0.0
    if weights is None:
        weights = [1.0] * len(scores)
    if len(weights) != len(scores):
        raise ValueError(f"Got {len(weights)} weights for {len(scores)} scores")

    total_weight = sum(weights)
    clamped = [_clamp(score, i) for i, score in enumerate(scores)]
    return sum(score * (weight / total_weight) for score, weight in zip(clamped, weights))


def average_item_score(similarities: List[float], verified: List[bool], unverified_factor: float) -> float:
    """
    Average item score over matched items only.

    Each matched item contributes its description similarity, scaled down by
    unverified_factor when its price or quantity did not check out.
    """
    if not similarities:
        return 0.0
    return sum(
        similarity * (1.0 if ok else unverified_factor)
        for similarity, ok in zip(similarities, verified)
    ) / len(similarities)


def confidence_level_name(confidence: float) -> str:
    """Band name used in reasoning messages."""
    for floor, name in CONFIDENCE_LEVELS:
        if confidence >= floor:
            return name
    return "VERY_LOW"
