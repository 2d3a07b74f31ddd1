"""Bulk purchase allocation across platforms.

Candidate plans:
- Single platform: every item bought on one platform that all priced
  items qualify on; shipping charged once on the combined subtotal.
- Mixed: each item on its cheapest platform; shipping charged once per
  platform group.

The cheapest candidate wins. Savings are measured against the mean of
all candidates, the mixed plan included.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from itertools import groupby
from statistics import mean

from ..common.config import Settings
from ..common.errors import InvalidInputError
from ..history.source import PlatformRuleSource, PriceHistorySource, normalize_item_ids
from ..platform_comparator.comparator import PlatformComparator
from ..platform_comparator.landed_cost import shipping_for
from ..platform_comparator.models import PlatformComparison, PlatformOption
from .models import AllocationPlan, PlanGroup, PlanItem, PurchasePlan

logger = logging.getLogger(__name__)

MIXED_PLAN_ID = "mixed"


class BulkAllocationOptimizer:
    """Pick the cheapest way to buy a basket of items.

    Usage:
        optimizer = BulkAllocationOptimizer(history, rules)
        plan = optimizer.optimize(["apple", "rice", "milk"])
        print(plan.best_plan_id, plan.total_cost, plan.unpriced_items)
    """

    def __init__(
        self,
        history: PriceHistorySource,
        rules: PlatformRuleSource,
        settings: Settings | None = None,
        comparator: PlatformComparator | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.history = history
        self.rules = rules
        self.settings = settings or Settings()
        self.comparator = comparator or PlatformComparator(
            history, rules, self.settings, clock=clock
        )

    def optimize(self, item_ids: Iterable[str]) -> AllocationPlan:
        """Build and compare all candidate plans for the given items.

        Raises:
            InvalidInputError: empty item list or unknown item ids.
        """
        ids = normalize_item_ids(item_ids) or []
        if not ids:
            raise InvalidInputError("item_ids must not be empty")

        known = self.history.fetch_known_item_ids(ids)
        unknown = [i for i in ids if i not in known]
        if unknown:
            raise InvalidInputError(f"Unknown item(s): {', '.join(unknown)}")

        # Single batched read for the whole basket
        points = sorted(self.history.fetch_valid_price_points(ids), key=lambda p: p.item_id)
        points_by_item = {
            item_id: list(group) for item_id, group in groupby(points, key=lambda p: p.item_id)
        }

        priced: dict[str, PlatformComparison] = {}
        unpriced: list[str] = []
        for item_id in ids:
            comparison = self.comparator.compare_points(
                item_id, points_by_item.get(item_id, []), quantity=1
            )
            if comparison.platforms:
                priced[item_id] = comparison
            else:
                unpriced.append(item_id)

        if unpriced:
            logger.warning("No qualifying platform for %d item(s): %s", len(unpriced), unpriced)

        single_plans = self._single_platform_plans(priced)
        mixed_plan = self._mixed_plan(priced)
        candidates = single_plans + ([mixed_plan] if mixed_plan else [])

        plan = AllocationPlan(
            item_ids=ids,
            single_platform_plans=single_plans,
            mixed_plan=mixed_plan,
            unpriced_items=unpriced,
        )
        if not candidates:
            logger.info("No purchase plan possible for %d item(s)", len(ids))
            return plan

        # Ties prefer a single-platform plan, then plan id
        best = min(candidates, key=lambda p: (p.total_cost, p.mixed, p.plan_id))
        avg_cost = mean(p.total_cost for p in candidates)

        plan.best_plan_id = best.plan_id
        plan.total_cost = best.total_cost
        plan.savings_percent = (avg_cost - best.total_cost) / avg_cost * 100 if avg_cost else 0.0

        logger.info(
            "Bulk plan for %d item(s): best=%s total=%.2f savings=%.1f%% (%d candidates)",
            len(ids), plan.best_plan_id, plan.total_cost, plan.savings_percent, len(candidates),
        )
        return plan

    def _single_platform_plans(
        self, priced: dict[str, PlatformComparison]
    ) -> list[PurchasePlan]:
        if not priced:
            return []

        offers: dict[str, dict[str, PlatformOption]] = {
            item_id: {o.platform: o for o in comparison.platforms}
            for item_id, comparison in priced.items()
        }
        common = set.intersection(*(set(by_platform) for by_platform in offers.values()))

        plans: list[PurchasePlan] = []
        for platform in sorted(common):
            items = [
                PlanItem(item_id, platform, offers[item_id][platform].unit_price)
                for item_id in sorted(offers)
            ]
            plans.append(PurchasePlan(plan_id=platform, groups=[self._group(platform, items)]))
        return plans

    def _mixed_plan(self, priced: dict[str, PlatformComparison]) -> PurchasePlan | None:
        if not priced:
            return None

        chosen: dict[str, list[PlanItem]] = {}
        for item_id in sorted(priced):
            cheapest = min(
                priced[item_id].platforms,
                key=lambda o: (o.unit_price, -o.reliability, o.platform),
            )
            chosen.setdefault(cheapest.platform, []).append(
                PlanItem(item_id, cheapest.platform, cheapest.unit_price)
            )

        groups = [self._group(platform, chosen[platform]) for platform in sorted(chosen)]
        return PurchasePlan(plan_id=MIXED_PLAN_ID, groups=groups, mixed=True)

    def _group(self, platform: str, items: list[PlanItem]) -> PlanGroup:
        group = PlanGroup(platform=platform, items=items)
        group.shipping_cost = shipping_for(group.subtotal, self.rules.fetch_platform_rules(platform))
        return group
