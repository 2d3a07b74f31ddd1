"""Data models for cross-platform comparison."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from ..common.models import Direction


@dataclass
class PlatformOption:
    """One platform's offer for an item at a requested quantity.

    Maps to the API contract: { platform, unit_price, total_cost,
    reliability, direction }
    """

    platform: str
    unit_price: float  # latest observed unit price
    quantity: float
    subtotal: float  # after discount, before shipping
    shipping_cost: float
    reliability: float  # 0-1, from sample count
    direction: Direction
    sample_count: int

    @property
    def total_cost(self) -> float:
        return self.subtotal + self.shipping_cost

    def to_dict(self) -> dict:
        return {
            "platform": self.platform,
            "unit_price": self.unit_price,
            "quantity": self.quantity,
            "subtotal": self.subtotal,
            "shipping_cost": self.shipping_cost,
            "total_cost": self.total_cost,
            "reliability": self.reliability,
            "direction": self.direction.value,
            "sample_count": self.sample_count,
        }


@dataclass
class PlatformComparison:
    """Ranked platform options for one item.

    `best_platform` is None when no platform has enough observations;
    `savings_percent` is None unless at least two platforms qualify.
    """

    item_id: str
    quantity: float
    platforms: list[PlatformOption] = field(default_factory=list)
    best_platform: PlatformOption | None = None
    savings_percent: float | None = None
    recommendation: str = ""

    def to_dict(self) -> dict:
        return {
            "item_id": self.item_id,
            "quantity": self.quantity,
            "platforms": [p.to_dict() for p in self.platforms],
            "best_platform": self.best_platform.to_dict() if self.best_platform else None,
            "savings_percent": self.savings_percent,
            "recommendation": self.recommendation,
        }


@dataclass
class DailyPriceRow:
    """Last observed unit price per platform on one calendar day."""

    day: date
    prices: dict[str, float | None]

    def to_dict(self) -> dict:
        return {"date": self.day.isoformat(), "platforms": dict(self.prices)}
