"""Cross-platform landed-cost comparison for a single item.

Observations are grouped per platform. A platform qualifies with at
least two valid points; its offer is the latest unit price, costed with
the platform's discount and shipping rule for the requested quantity.

Ranking: lowest total cost, then higher reliability, then platform name.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import date, datetime, timedelta
from itertools import groupby
from statistics import mean

from ..common.config import Settings
from ..common.errors import InvalidInputError
from ..common.models import PricePoint, to_naive_utc, utc_now
from ..history.source import PlatformRuleSource, PriceHistorySource
from ..trend_analyzer.analyzer import TrendAnalyzer
from .landed_cost import landed_cost
from .models import DailyPriceRow, PlatformComparison, PlatformOption

logger = logging.getLogger(__name__)


def ranking_key(option: PlatformOption) -> tuple[float, float, str]:
    """Sort key: cheapest total, most reliable, then name ascending."""
    return (option.total_cost, -option.reliability, option.platform)


class PlatformComparator:
    """Compare an item's landed cost across purchasing platforms.

    Usage:
        comparator = PlatformComparator(history, rules)
        comparison = comparator.compare("apple", quantity=2)
        if comparison.best_platform is not None:
            print(comparison.best_platform.platform)
    """

    def __init__(
        self,
        history: PriceHistorySource,
        rules: PlatformRuleSource,
        settings: Settings | None = None,
        trend_analyzer: TrendAnalyzer | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.history = history
        self.rules = rules
        self.settings = settings or Settings()
        self._clock = clock or utc_now
        self.trend_analyzer = trend_analyzer or TrendAnalyzer(
            history, self.settings, clock=self._clock
        )

    def compare(self, item_id: str, quantity: float = 1) -> PlatformComparison:
        """Fetch the item's history and rank its platforms.

        Raises:
            InvalidInputError: unknown item or non-positive quantity.
        """
        self._check_quantity(quantity)
        if not self.history.fetch_known_item_ids([item_id]):
            raise InvalidInputError(f"Unknown item: {item_id}")
        points = self.history.fetch_valid_price_points(item_id)
        return self.compare_points(item_id, points, quantity)

    def compare_points(
        self,
        item_id: str,
        points: Sequence[PricePoint],
        quantity: float = 1,
    ) -> PlatformComparison:
        """Rank platforms from already-fetched points."""
        self._check_quantity(quantity)
        comparison_cfg = self.settings.comparison

        ordered = sorted(
            (p for p in points if p.valid and p.item_id == item_id),
            key=lambda p: p.date,
        )
        recent = ordered[-comparison_cfg.history_limit:]

        options: list[PlatformOption] = []
        by_platform = sorted(recent, key=lambda p: p.platform)  # stable: keeps date order
        for platform, group in groupby(by_platform, key=lambda p: p.platform):
            platform_points = list(group)
            if len(platform_points) < comparison_cfg.min_platform_points:
                logger.debug(
                    "Excluding %s for %s: %d point(s)",
                    platform, item_id, len(platform_points),
                )
                continue
            options.append(self._build_option(platform, platform_points, quantity))

        options.sort(key=ranking_key)
        best = options[0] if options else None

        savings: float | None = None
        if best is not None and len(options) > 1:
            avg_total = mean(o.total_cost for o in options)
            savings = (avg_total - best.total_cost) / avg_total * 100 if avg_total else 0.0

        comparison = PlatformComparison(
            item_id=item_id,
            quantity=quantity,
            platforms=options,
            best_platform=best,
            savings_percent=savings,
            recommendation=self._recommend(best, savings),
        )
        logger.info(
            "Compared %s across %d platform(s): best=%s",
            item_id, len(options), best.platform if best else None,
        )
        return comparison

    def daily_price_matrix(
        self,
        item_id: str,
        window_days: int = 30,
    ) -> list[DailyPriceRow]:
        """One row per day with each platform's last unit price that day."""
        if window_days <= 0:
            raise InvalidInputError(f"window_days must be positive, got {window_days}")
        if not self.history.fetch_known_item_ids([item_id]):
            raise InvalidInputError(f"Unknown item: {item_id}")

        since = to_naive_utc(self._clock()) - timedelta(days=window_days)
        points = sorted(
            self.history.fetch_valid_price_points(item_id, since=since),
            key=lambda p: p.date,
        )
        platforms = sorted({p.platform for p in points})

        days: dict[date, dict[str, float | None]] = {}
        for point in points:
            row = days.setdefault(point.date.date(), dict.fromkeys(platforms))
            row[point.platform] = point.unit_price

        return [DailyPriceRow(day=day, prices=prices) for day, prices in sorted(days.items())]

    def _build_option(
        self,
        platform: str,
        platform_points: list[PricePoint],
        quantity: float,
    ) -> PlatformOption:
        rule = self.rules.fetch_platform_rules(platform)
        unit_price = platform_points[-1].unit_price
        subtotal, shipping = landed_cost(unit_price * quantity, rule)
        fit = self.trend_analyzer.fit_trend([p.unit_price for p in platform_points])

        return PlatformOption(
            platform=platform,
            unit_price=unit_price,
            quantity=quantity,
            subtotal=subtotal,
            shipping_cost=shipping,
            reliability=min(1.0, len(platform_points) / self.settings.comparison.reliability_full_sample),
            direction=fit.direction,
            sample_count=len(platform_points),
        )

    def _recommend(
        self,
        best: PlatformOption | None,
        savings: float | None,
    ) -> str:
        if best is None or savings is None:
            return "Need more platform data to make a recommendation"
        if savings > self.settings.comparison.strong_savings_percent:
            return f"Strongly recommend {best.platform}: {savings:.1f}% cheaper than the platform average"
        if savings > self.settings.comparison.mild_savings_percent:
            return f"Recommend {best.platform} for a better price"
        return "Prices are similar across platforms; choose by convenience"

    @staticmethod
    def _check_quantity(quantity: float) -> None:
        if quantity <= 0:
            raise InvalidInputError(f"quantity must be positive, got {quantity}")
