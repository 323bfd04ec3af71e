from __future__ import annotations

import math
from typing import Any

from villagewar.errors import InvalidInput


def require_non_negative(name: str, value: Any) -> float:
    """Return ``value`` as a float, rejecting negatives, NaN and non-numbers."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInput(f"{name} must be a number, got {value!r}")
    if math.isnan(value) or math.isinf(value):
        raise InvalidInput(f"{name} must be finite, got {value!r}")
    if value < 0:
        raise InvalidInput(f"{name} must be non-negative, got {value!r}")
    return float(value)


def require_non_negative_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidInput(f"{name} must be non-negative, got {value!r}")
    return value


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up, for non-negative values."""
    return int(math.floor(value + 0.5))
