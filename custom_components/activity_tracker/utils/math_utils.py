# File: utils/math_utils.py
"""Math and calculation utilities for Activity Tracker.

Pure Python math functions with no I/O and no package imports.

Functions:
    - calculate_mean: Arithmetic mean that returns None for empty input
    - pairwise_differences: Consecutive differences of an ordered sequence
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from itertools import pairwise


def calculate_mean(values: Sequence[float]) -> float | None:
    """Return the arithmetic mean, or None when there are no values.

    None signals "not enough data" and must not be read as zero.

    Examples:
        calculate_mean([10, 20]) → 15.0
        calculate_mean([]) → None
    """
    if not values:
        return None
    return sum(values) / len(values)


def pairwise_differences(values: Iterable[float]) -> list[float]:
    """Return the differences between consecutive values.

    Examples:
        pairwise_differences([0, 10, 30]) → [10, 20]
        pairwise_differences([5]) → []
    """
    return [later - earlier for earlier, later in pairwise(values)]
