"""Ordinary least squares and volatility helpers.

x is the sequence index of each observation, y its unit price.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from statistics import pstdev

from ..common.errors import ComputationDegeneracy


@dataclass(frozen=True)
class LinearTrend:
    """Least-squares line y = slope * x + intercept."""

    slope: float
    intercept: float
    r_squared: float


def fit_linear_trend(values: Sequence[float]) -> LinearTrend:
    """Fit unit prices against their sequence index.

    Raises:
        ComputationDegeneracy: fewer than two values, or all values equal
            (R² is undefined without variance).
    """
    n = len(values)
    if n < 2:
        raise ComputationDegeneracy(f"Regression needs at least 2 values, got {n}")
    if max(values) == min(values):
        raise ComputationDegeneracy("Regression input has zero variance")

    x = range(n)
    sum_x = sum(x)
    sum_y = sum(values)
    sum_xy = sum(xi * yi for xi, yi in zip(x, values))
    sum_xx = sum(xi * xi for xi in x)

    slope = (n * sum_xy - sum_x * sum_y) / (n * sum_xx - sum_x * sum_x)
    mean_y = sum_y / n
    intercept = mean_y - slope * (sum_x / n)

    ss_total = sum((y - mean_y) ** 2 for y in values)
    ss_residual = sum((y - (slope * xi + intercept)) ** 2 for xi, y in zip(x, values))
    r_squared = 1 - ss_residual / ss_total

    return LinearTrend(slope=slope, intercept=intercept, r_squared=r_squared)


def relative_volatility(values: Sequence[float]) -> float:
    """Population standard deviation of consecutive relative returns."""
    if len(values) < 2:
        return 0.0

    returns = [
        (values[i] - values[i - 1]) / values[i - 1]
        for i in range(1, len(values))
        if values[i - 1] != 0
    ]
    if not returns:
        return 0.0
    return pstdev(returns)
