"""Tests for the price intelligence service facade."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest

from src.price_intel.common.errors import InsufficientDataError, InvalidInputError
from src.price_intel.common.models import PricePoint
from src.price_intel.history import InMemoryPriceHistory
from src.price_intel.service import PriceIntelligenceService


@pytest.fixture
def basket(series):
    return (
        series("apple", [5.0, 4.8, 4.6, 4.4, 4.2], platform="A")
        + series("apple", [4.0, 4.0], platform="B")
        + series("rice", [2.0, 2.1, 2.2], platform="A")
        + series("milk", [3.0, 3.0], platform="B")
    )


@pytest.fixture
def service(basket, ab_rules, clock):
    return PriceIntelligenceService(InMemoryPriceHistory(basket), ab_rules, clock=clock)


class TestServiceOutputs:
    """Every exposed operation returns plain JSON-serializable data."""

    def test_get_trend(self, service):
        trend = service.get_trend("apple", 30)

        assert trend["item_id"] == "apple"
        assert trend["sample_count"] == 7
        assert len(trend["forecast"]) == 7
        json.dumps(trend)

    def test_get_trend_is_reproducible(self, service):
        assert service.get_trend("apple", 30, seed=7) == service.get_trend("apple", 30, seed=7)

    def test_get_trend_insufficient_data(self, service):
        with pytest.raises(InsufficientDataError):
            service.get_trend("milk", 30)

    def test_compare_platforms(self, service):
        result = service.compare_platforms("apple", 1)

        # A: 4.2 + 15 shipping; B ships free
        assert result["best_platform"]["platform"] == "B"
        assert [p["platform"] for p in result["platforms"]] == ["B", "A"]
        json.dumps(result)

    def test_optimize_bulk_purchase(self, service):
        plan = service.optimize_bulk_purchase(["apple", "milk", "rice"])

        assert plan["item_ids"] == ["apple", "milk", "rice"]
        assert plan["unpriced_items"] == []
        assert plan["best_plan_id"] is not None
        json.dumps(plan)

    def test_scan_alerts(self, service):
        assert service.scan_alerts(7) == []

    def test_daily_platform_prices(self, service):
        rows = service.daily_platform_prices("apple", 3)

        assert rows[-1]["date"] == "2026-03-01"
        assert rows[-1]["platforms"] == {"A": 4.2, "B": 4.0}
        json.dumps(rows)


class TestPopularTrends:
    """Test PriceIntelligenceService.popular_trends."""

    def test_ranked_by_observation_count(self, service):
        trends = service.popular_trends(limit=3)
        assert [t["item_id"] for t in trends] == ["apple", "rice"]

    def test_limit(self, service):
        trends = service.popular_trends(limit=1)
        assert [t["item_id"] for t in trends] == ["apple"]

    def test_items_with_too_few_points_skipped(self, service):
        assert "milk" not in {t["item_id"] for t in service.popular_trends(limit=10)}

    def test_invalid_arguments(self, service):
        with pytest.raises(InvalidInputError):
            service.popular_trends(limit=0)
        with pytest.raises(InvalidInputError):
            service.popular_trends(window_days=-1)


def utc_stamped(item_id, unit_prices, platform):
    """Points serialized with a trailing Z, one per day up to now."""
    now = datetime.now(timezone.utc)
    n = len(unit_prices)
    return [
        PricePoint(
            item_id=item_id,
            date=(now - timedelta(days=n - 1 - i)).isoformat().replace("+00:00", "Z"),
            price=price,
            unit_price=price,
            platform=platform,
        )
        for i, price in enumerate(unit_prices)
    ]


class TestTimezoneAwareHistory:
    """Offset-carrying timestamps flow through every operation."""

    @pytest.fixture
    def utc_service(self, ab_rules):
        points = (
            utc_stamped("tea", [10.0, 10.0], "A")
            + utc_stamped("tea", [9.0, 9.0], "B")
            + utc_stamped("coffee", [10.0, 10.0, 10.0, 10.0, 15.0], "A")
        )
        return PriceIntelligenceService(InMemoryPriceHistory(points), ab_rules)

    def test_get_trend(self, utc_service):
        trend = utc_service.get_trend("coffee", 30)
        assert trend["sample_count"] == 5

    def test_compare_platforms(self, utc_service):
        result = utc_service.compare_platforms("tea", 1)
        assert result["best_platform"]["platform"] == "B"

    def test_scan_alerts(self, utc_service):
        alerts = utc_service.scan_alerts(7)
        assert [(a["item_id"], a["kind"]) for a in alerts] == [("coffee", "SPIKE")]

    def test_aware_clock_with_naive_points(self, basket, ab_rules, now):
        service = PriceIntelligenceService(
            InMemoryPriceHistory(basket), ab_rules,
            clock=lambda: now.replace(tzinfo=timezone.utc),
        )
        assert service.get_trend("apple", 30)["sample_count"] == 7
        assert service.scan_alerts(7) == []
