"""
Numeric helpers shared by the measure statistics and the API's JSON output.
"""
from __future__ import annotations

import math
from typing import Any, Iterable

import numpy as np


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """numerator / denominator, or ``default`` for a zero, NaN or infinite result."""
    if not denominator or math.isnan(denominator):
        return default
    result = numerator / denominator
    return result if math.isfinite(result) else default


def safe_mean(values: Iterable[float], default: float = 0.0) -> float:
    """Arithmetic mean, or ``default`` when there are no values."""
    arr = np.fromiter(values, dtype=float)
    if arr.size == 0:
        return default
    return float(arr.mean())


def pct_change(current: float, previous: float) -> float:
    """Percentage change from previous to current; 0 when previous is 0."""
    return safe_divide(current - previous, previous) * 100


def sanitize_for_json(obj: Any) -> Any:
    """Make a to_dict() payload safe for strict JSON.

    numpy scalars become Python numbers and non-finite floats become None.
    """
    if isinstance(obj, dict):
        return {str(key): sanitize_for_json(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [sanitize_for_json(value) for value in obj]
    if isinstance(obj, np.generic):
        obj = obj.item()
    if isinstance(obj, float) and not math.isfinite(obj):
        return None
    return obj
