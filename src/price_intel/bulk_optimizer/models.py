"""Data models for bulk purchase allocation."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PlanItem:
    """One unit of an item bought on a platform."""

    item_id: str
    platform: str
    unit_price: float

    def to_dict(self) -> dict:
        return {
            "item_id": self.item_id,
            "platform": self.platform,
            "unit_price": self.unit_price,
        }


@dataclass
class PlanGroup:
    """Items bought together on one platform, sharing one shipping charge."""

    platform: str
    items: list[PlanItem] = field(default_factory=list)
    shipping_cost: float = 0.0

    @property
    def subtotal(self) -> float:
        return sum(item.unit_price for item in self.items)

    @property
    def cost(self) -> float:
        return self.subtotal + self.shipping_cost

    def to_dict(self) -> dict:
        return {
            "items": [item.item_id for item in self.items],
            "subtotal": self.subtotal,
            "shipping_cost": self.shipping_cost,
            "cost": self.cost,
        }


@dataclass
class PurchasePlan:
    """A candidate plan: one group (single platform) or several (mixed)."""

    plan_id: str
    groups: list[PlanGroup] = field(default_factory=list)
    mixed: bool = False

    @property
    def total_cost(self) -> float:
        return sum(group.cost for group in self.groups)


@dataclass
class AllocationPlan:
    """Outcome of a bulk purchase optimization.

    Maps to the API contract: { per_platform_total, mixed_plan_breakdown,
    best_plan_id, total_cost, savings_percent, unpriced_items }
    """

    item_ids: list[str]
    single_platform_plans: list[PurchasePlan] = field(default_factory=list)
    mixed_plan: PurchasePlan | None = None
    best_plan_id: str | None = None
    total_cost: float = 0.0
    savings_percent: float = 0.0
    unpriced_items: list[str] = field(default_factory=list)

    @property
    def per_platform_total(self) -> dict[str, float]:
        return {plan.plan_id: plan.total_cost for plan in self.single_platform_plans}

    @property
    def mixed_plan_breakdown(self) -> dict[str, dict]:
        if self.mixed_plan is None:
            return {}
        return {group.platform: group.to_dict() for group in self.mixed_plan.groups}

    def to_dict(self) -> dict:
        return {
            "item_ids": list(self.item_ids),
            "per_platform_total": self.per_platform_total,
            "mixed_plan_total": self.mixed_plan.total_cost if self.mixed_plan else None,
            "mixed_plan_breakdown": self.mixed_plan_breakdown,
            "best_plan_id": self.best_plan_id,
            "total_cost": self.total_cost,
            "savings_percent": self.savings_percent,
            "unpriced_items": list(self.unpriced_items),
        }
