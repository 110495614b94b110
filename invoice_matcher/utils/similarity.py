"""
String similarity for vendor names and item descriptions.
"""

from typing import Optional
from rapidfuzz import fuzz


def string_similarity(first: Optional[str], second: Optional[str]) -> float:
    """
    Case-insensitive normalized edit-distance ratio between two strings.

    Returns a value in [0, 1]; empty or missing input scores 0.
    """
    if not first or not second:
        return 0.0
    return fuzz.ratio(first.lower(), second.lower()) / 100.0
