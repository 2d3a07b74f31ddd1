"""Trend Analyzer Module - regression trend, horizon changes and forecast."""

from .analyzer import TrendAnalyzer
from .models import TrendFit, TrendResult
from .regression import LinearTrend, fit_linear_trend, relative_volatility

__all__ = [
    "LinearTrend",
    "TrendAnalyzer",
    "TrendFit",
    "TrendResult",
    "fit_linear_trend",
    "relative_volatility",
]
