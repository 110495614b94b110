"""
Shared utilities and helpers.
"""

import json
from typing import Any, Dict, Optional
from datetime import date, datetime


def serialize_for_json(obj: Any) -> Any:
    """Serialize objects that aren't JSON-serializable by default."""
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    elif hasattr(obj, 'model_dump'):  # Pydantic model
        return obj.model_dump(mode="json", by_alias=True)
    elif hasattr(obj, '__dict__'):
        return obj.__dict__
    return str(obj)


def dict_to_json_string(data: Dict) -> str:
    """Convert dict to JSON string, handling non-serializable types."""
    return json.dumps(data, default=serialize_for_json, indent=2, ensure_ascii=False)


def calculate_percentage_variance(actual: float, expected: float) -> Optional[float]:
    """
    Calculate relative variance of actual against expected.

    Returns None when expected is zero: there is nothing to compare against,
    and callers treat that as a mismatch.
    """
    if expected == 0:
        return None
    return abs(actual - expected) / expected
