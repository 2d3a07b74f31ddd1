"""Tests for the alert generator module."""

from __future__ import annotations

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from src.price_intel.alert_generator.generator import AlertGenerator
from src.price_intel.alert_generator.models import AlertKind, Urgency
from src.price_intel.common.errors import InvalidInputError
from src.price_intel.common.models import PricePoint
from src.price_intel.history import InMemoryPriceHistory

STEP = 0.5  # two observations per day keeps short series inside the 7-day window


@pytest.fixture
def generator_for(clock):
    def _build(points):
        return AlertGenerator(InMemoryPriceHistory(points), clock=clock)
    return _build


class TestScan:
    """Test AlertGenerator.scan."""

    def test_fifty_percent_spike_is_high(self, generator_for, series):
        points = series("egg", [10.0, 10.0, 10.0, 10.0, 15.0], step_days=STEP)
        alerts = generator_for(points).scan(7)

        assert len(alerts) == 1
        alert = alerts[0]
        assert alert.kind == AlertKind.SPIKE
        assert alert.urgency == Urgency.HIGH
        assert alert.deviation_percent == pytest.approx(50.0)
        assert alert.baseline_price == pytest.approx(10.0)
        assert alert.current_price == 15.0

    def test_moderate_spike_is_medium(self, generator_for, series):
        points = series("egg", [10.0, 10.0, 10.0, 13.0], step_days=STEP)
        alerts = generator_for(points).scan(7)

        assert alerts[0].kind == AlertKind.SPIKE
        assert alerts[0].urgency == Urgency.MEDIUM
        assert alerts[0].deviation_percent == pytest.approx(30.0)

    def test_drop_is_opportunity(self, generator_for, series):
        points = series("egg", [10.0, 10.0, 10.0, 8.0], step_days=STEP)
        alerts = generator_for(points).scan(7)

        assert alerts[0].kind == AlertKind.OPPORTUNITY
        assert alerts[0].urgency == Urgency.MEDIUM
        assert alerts[0].deviation_percent == pytest.approx(-20.0)
        assert "dropped 20.0%" in alerts[0].message

    def test_normal_fluctuation_emits_nothing(self, generator_for, series):
        points = series("egg", [10.0, 10.0, 10.0, 11.0], step_days=STEP)
        assert generator_for(points).scan(7) == []

    def test_too_few_points_skipped(self, generator_for, series):
        points = series("egg", [10.0, 30.0], step_days=STEP)
        assert generator_for(points).scan(7) == []

    def test_baseline_uses_second_to_sixth_most_recent(self, generator_for, series):
        # The 100 is seventh most recent and stays out of the baseline
        points = series("egg", [100.0, 10.0, 10.0, 10.0, 10.0, 10.0, 15.0], step_days=STEP)
        alerts = generator_for(points).scan(7)

        assert alerts[0].baseline_price == pytest.approx(10.0)
        assert alerts[0].urgency == Urgency.HIGH

    def test_points_outside_window_ignored(self, generator_for, series, now):
        old = series("egg", [10.0, 10.0, 10.0], end=now - timedelta(days=20))
        recent = series("egg", [20.0, 20.0], step_days=STEP)
        assert generator_for(old + recent).scan(7) == []

    def test_invalid_points_ignored(self, generator_for, series, now):
        points = series("egg", [10.0, 10.0, 15.0], step_days=STEP) + [
            PricePoint(item_id="egg", date=now + timedelta(hours=1), price=0, unit_price=0,
                       platform="Hema", valid=False),
        ]
        alerts = generator_for(points).scan(7)
        assert alerts[0].current_price == 15.0

    def test_sorted_by_urgency_then_item(self, generator_for, series):
        points = (
            series("b", [10.0, 10.0, 10.0, 16.0], step_days=STEP)  # HIGH
            + series("a", [10.0, 10.0, 10.0, 8.0], step_days=STEP)  # MEDIUM
            + series("c", [10.0, 10.0, 10.0, 20.0], step_days=STEP)  # HIGH
        )
        alerts = generator_for(points).scan(7)

        assert [(a.item_id, a.urgency) for a in alerts] == [
            ("b", Urgency.HIGH),
            ("c", Urgency.HIGH),
            ("a", Urgency.MEDIUM),
        ]

    def test_single_batched_fetch(self, series, clock):
        points = series("a", [10.0, 10.0, 10.0, 8.0], step_days=STEP) + series(
            "b", [10.0, 10.0, 10.0, 16.0], step_days=STEP
        )
        history = MagicMock(wraps=InMemoryPriceHistory(points))
        AlertGenerator(history, clock=clock).scan(7)

        assert history.fetch_valid_price_points.call_count == 1

    def test_default_window(self, generator_for, series):
        points = series("egg", [10.0, 10.0, 10.0, 10.0, 15.0], step_days=STEP)
        assert len(generator_for(points).scan()) == 1

    def test_non_positive_window_raises(self, generator_for, series):
        with pytest.raises(InvalidInputError):
            generator_for(series("egg", [10.0, 10.0, 10.0])).scan(0)

    def test_to_dict(self, generator_for, series):
        points = series("egg", [10.0, 10.0, 10.0, 10.0, 15.0], step_days=STEP)
        d = generator_for(points).scan(7)[0].to_dict()

        assert d["kind"] == "SPIKE"
        assert d["urgency"] == "HIGH"
        assert d["item_id"] == "egg"
