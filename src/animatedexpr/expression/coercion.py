"""Truthiness and numeric coercion for values flowing through a graph."""

from typing import Optional

import numpy as np


def is_truthy(value: Optional[float]) -> bool:
    """Check whether a value counts as true.

    Absence and numeric zero (either sign) are false. Everything else,
    including negative numbers and NaN, is true.
    """
    return value is not None and value != 0


def to_flag(condition: bool) -> np.float64:
    """Convert a boolean to exactly 1.0 or 0.0."""
    return np.float64(1.0) if condition else np.float64(0.0)


def to_scalar(value: Optional[float]) -> np.float64:
    """Convert an external value to float64; absence becomes 0.0."""
    if value is None:
        return np.float64(0.0)
    return np.float64(value)
