"""Data models for price alerts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class AlertKind(str, Enum):
    SPIKE = "SPIKE"
    OPPORTUNITY = "OPPORTUNITY"


class Urgency(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @property
    def rank(self) -> int:
        return {"LOW": 1, "MEDIUM": 2, "HIGH": 3}[self.value]


@dataclass
class PriceAlert:
    """Significant deviation of an item's latest price from its recent baseline.

    Maps to the API contract: { item_id, kind, current_price,
    baseline_price, deviation_percent, urgency }
    """

    item_id: str
    kind: AlertKind
    current_price: float
    baseline_price: float
    deviation_percent: float
    urgency: Urgency
    message: str = ""
    action: str = ""

    def to_dict(self) -> dict:
        return {
            "item_id": self.item_id,
            "kind": self.kind.value,
            "current_price": self.current_price,
            "baseline_price": self.baseline_price,
            "deviation_percent": self.deviation_percent,
            "urgency": self.urgency.value,
            "message": self.message,
            "action": self.action,
        }
