"""Data models for trend analysis."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..common.models import Direction


@dataclass(frozen=True)
class TrendFit:
    """Direction, slope and confidence of a regression over unit prices."""

    direction: Direction
    slope: float
    confidence: float  # R² clamped to [0, 1]

    @classmethod
    def stable(cls) -> TrendFit:
        return cls(direction=Direction.STABLE, slope=0.0, confidence=0.0)


@dataclass
class TrendResult:
    """Trend analysis for a single item over a time window.

    Maps to the API contract: { current, average, min, max, changes,
    direction, slope, confidence, forecast, forecast_min, forecast_max,
    recommendations }
    """

    item_id: str
    window_days: int
    sample_count: int
    current: float
    average: float
    minimum: float
    maximum: float
    changes: dict[str, float]  # % deltas keyed by horizon name
    fit: TrendFit
    forecast: list[float] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)

    @property
    def direction(self) -> Direction:
        return self.fit.direction

    @property
    def slope(self) -> float:
        return self.fit.slope

    @property
    def confidence(self) -> float:
        return self.fit.confidence

    @property
    def forecast_min(self) -> float:
        return min(self.forecast)

    @property
    def forecast_max(self) -> float:
        return max(self.forecast)

    def to_dict(self) -> dict:
        return {
            "item_id": self.item_id,
            "window_days": self.window_days,
            "sample_count": self.sample_count,
            "current": self.current,
            "average": self.average,
            "min": self.minimum,
            "max": self.maximum,
            "changes": dict(self.changes),
            "direction": self.direction.value,
            "slope": self.slope,
            "confidence": self.confidence,
            "forecast": list(self.forecast),
            "forecast_min": self.forecast_min,
            "forecast_max": self.forecast_max,
            "recommendations": list(self.recommendations),
        }
