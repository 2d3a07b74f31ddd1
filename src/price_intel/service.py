"""Exposed price intelligence interface.

Wires the four components over one history source and one rule table
and returns plain JSON-serializable dicts.
"""

from __future__ import annotations

import logging
import random
from collections import Counter
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta

from .alert_generator.generator import AlertGenerator
from .bulk_optimizer.optimizer import BulkAllocationOptimizer
from .common.config import Settings
from .common.errors import InvalidInputError
from .common.models import to_naive_utc, utc_now
from .history.rules import PlatformRuleTable
from .history.source import PlatformRuleSource, PriceHistorySource
from .history.sqlite_source import SQLitePriceHistory
from .platform_comparator.comparator import PlatformComparator
from .trend_analyzer.analyzer import TrendAnalyzer

logger = logging.getLogger(__name__)


class PriceIntelligenceService:
    """Stateless facade over trend, comparison, allocation and alerts.

    Usage:
        service = PriceIntelligenceService.from_settings()
        trend = service.get_trend("apple", window_days=30)
        plan = service.optimize_bulk_purchase(["apple", "rice"])
    """

    def __init__(
        self,
        history: PriceHistorySource,
        rules: PlatformRuleSource,
        settings: Settings | None = None,
        clock: Callable[[], datetime] | None = None,
        rng_factory: Callable[[int | None], random.Random] = random.Random,
    ) -> None:
        self.history = history
        self.rules = rules
        self.settings = settings or Settings()
        self._clock = clock or utc_now

        self.trend_analyzer = TrendAnalyzer(
            history, self.settings, clock=self._clock, rng_factory=rng_factory
        )
        self.comparator = PlatformComparator(
            history, rules, self.settings,
            trend_analyzer=self.trend_analyzer, clock=self._clock,
        )
        self.optimizer = BulkAllocationOptimizer(
            history, rules, self.settings, comparator=self.comparator
        )
        self.alert_generator = AlertGenerator(history, self.settings, clock=self._clock)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> PriceIntelligenceService:
        """Build a service over the configured SQLite store and rule table."""
        settings = settings or Settings.load()
        return cls(
            SQLitePriceHistory(settings),
            PlatformRuleTable.from_settings(settings),
            settings,
        )

    def get_trend(
        self,
        item_id: str,
        window_days: int | None = None,
        seed: int | None = None,
    ) -> dict:
        return self.trend_analyzer.get_trend(item_id, window_days, seed=seed).to_dict()

    def compare_platforms(self, item_id: str, quantity: float = 1) -> dict:
        return self.comparator.compare(item_id, quantity).to_dict()

    def optimize_bulk_purchase(self, item_ids: Iterable[str]) -> dict:
        return self.optimizer.optimize(item_ids).to_dict()

    def scan_alerts(self, window_days: int | None = None) -> list[dict]:
        return [alert.to_dict() for alert in self.alert_generator.scan(window_days)]

    def daily_platform_prices(self, item_id: str, window_days: int = 30) -> list[dict]:
        return [row.to_dict() for row in self.comparator.daily_price_matrix(item_id, window_days)]

    def popular_trends(
        self,
        limit: int = 20,
        window_days: int | None = None,
        seed: int | None = None,
    ) -> list[dict]:
        """Trends for the items with the most valid observations in the window.

        Items are ranked by observation count (desc), then id; items with
        too few points for a trend are skipped.
        """
        if limit <= 0:
            raise InvalidInputError(f"limit must be positive, got {limit}")
        if window_days is None:
            window_days = self.settings.analysis.default_window_days
        if window_days <= 0:
            raise InvalidInputError(f"window_days must be positive, got {window_days}")

        now = to_naive_utc(self._clock())
        points = self.history.fetch_valid_price_points(None, since=now - timedelta(days=window_days))
        counts = Counter(p.item_id for p in points)
        ranked = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))[:limit]

        trends: list[dict] = []
        for item_id, count in ranked:
            if count < self.settings.analysis.min_points:
                logger.debug("Skipping %s: %d point(s)", item_id, count)
                continue
            item_points = [p for p in points if p.item_id == item_id]
            trend = self.trend_analyzer.analyze(item_id, item_points, window_days, now=now, seed=seed)
            trends.append(trend.to_dict())
        return trends
