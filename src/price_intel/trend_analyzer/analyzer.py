"""Per-item price trend analyzer.

Fits an OLS line to an item's unit prices inside a time window, reports
percentage changes over fixed horizons and produces a short forecast
perturbed by noise bounded by historical volatility.

Forecast noise comes from a seeded `random.Random`, created fresh for
every call, so identical input and seed give identical output.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta
from statistics import mean

from ..common.config import Settings
from ..common.errors import ComputationDegeneracy, InsufficientDataError, InvalidInputError
from ..common.models import Direction, PricePoint, to_naive_utc, utc_now
from ..history.source import PriceHistorySource
from .models import TrendFit, TrendResult
from .regression import fit_linear_trend, relative_volatility

logger = logging.getLogger(__name__)

# Recommendation texts, emitted in this rule order
REC_LOW_PRICE = "Current price is well below average; a good time to stock up"
REC_HIGH_PRICE = "Current price is well above average; postpone the purchase or look for a substitute"
REC_RISING = "Price is trending upward; buy soon"
REC_FALLING = "Price is trending downward; wait for a lower price"
REC_FORECAST_DROP = "Prices are forecast to drop over the next days; consider waiting"
REC_FORECAST_RISE = "Prices are forecast to rise over the next days; consider buying now"


class TrendAnalyzer:
    """Analyze the unit price trend of a single item.

    Usage:
        analyzer = TrendAnalyzer(history, settings)
        trend = analyzer.get_trend("apple", window_days=30)
        print(trend.direction, trend.confidence, trend.forecast)
    """

    def __init__(
        self,
        history: PriceHistorySource,
        settings: Settings | None = None,
        clock: Callable[[], datetime] | None = None,
        rng_factory: Callable[[int | None], random.Random] = random.Random,
    ) -> None:
        self.history = history
        self.settings = settings or Settings()
        self._clock = clock or utc_now
        self._rng_factory = rng_factory

    def get_trend(
        self,
        item_id: str,
        window_days: int | None = None,
        seed: int | None = None,
    ) -> TrendResult:
        """Fetch the item's window of history and analyze it.

        Raises:
            InvalidInputError: unknown item or non-positive window.
            InsufficientDataError: fewer than 3 valid points in the window.
        """
        if window_days is None:
            window_days = self.settings.analysis.default_window_days
        if window_days <= 0:
            raise InvalidInputError(f"window_days must be positive, got {window_days}")
        if not self.history.fetch_known_item_ids([item_id]):
            raise InvalidInputError(f"Unknown item: {item_id}")

        now = to_naive_utc(self._clock())
        points = self.history.fetch_valid_price_points(
            item_id, since=now - timedelta(days=window_days)
        )
        return self.analyze(item_id, points, window_days, now=now, seed=seed)

    def analyze(
        self,
        item_id: str,
        points: Sequence[PricePoint],
        window_days: int,
        now: datetime | None = None,
        seed: int | None = None,
    ) -> TrendResult:
        """Analyze already-fetched points (one item, any order)."""
        now = to_naive_utc(now or self._clock())
        ordered = sorted(
            (p for p in points if p.valid and p.item_id == item_id),
            key=lambda p: p.date,
        )
        min_points = self.settings.analysis.min_points
        if len(ordered) < min_points:
            raise InsufficientDataError(item_id, min_points, len(ordered))

        values = [p.unit_price for p in ordered]
        current = values[-1]
        average = mean(values)

        changes = {
            name: self._change_since(ordered, now - timedelta(days=days))
            for name, days in self.settings.analysis.change_horizons_days.items()
        }

        fit, degenerate = self._fit(values)
        forecast = self._forecast(values, fit, degenerate, seed)
        recommendations = self._recommend(current, average, fit, forecast)

        result = TrendResult(
            item_id=item_id,
            window_days=window_days,
            sample_count=len(values),
            current=current,
            average=average,
            minimum=min(values),
            maximum=max(values),
            changes=changes,
            fit=fit,
            forecast=forecast,
            recommendations=recommendations,
        )
        logger.info(
            "Trend for %s: %s slope=%.4f confidence=%.3f (%d points, %d days)",
            item_id, fit.direction.value, fit.slope, fit.confidence,
            len(values), window_days,
        )
        return result

    def fit_trend(self, values: Sequence[float]) -> TrendFit:
        """Regression direction for a chronological run of unit prices.

        Runs shorter than the trend minimum are reported as STABLE.
        """
        if len(values) < self.settings.analysis.min_points:
            return TrendFit.stable()
        fit, _ = self._fit(values)
        return fit

    def _fit(self, values: Sequence[float]) -> tuple[TrendFit, bool]:
        try:
            line = fit_linear_trend(values)
        except ComputationDegeneracy as e:
            logger.debug("Degenerate regression input, treating as stable: %s", e)
            return TrendFit.stable(), True

        confidence = min(1.0, max(0.0, line.r_squared))
        if abs(line.slope) < self.settings.analysis.stable_slope_threshold:
            direction = Direction.STABLE
        else:
            direction = Direction.UP if line.slope > 0 else Direction.DOWN
        return TrendFit(direction=direction, slope=line.slope, confidence=confidence), False

    @staticmethod
    def _change_since(ordered: Sequence[PricePoint], target: datetime) -> float:
        """% change of the latest price vs. the point closest to `target`.

        0 when no observation exists at or before the target date.
        """
        if ordered[0].date > target:
            return 0.0
        reference = min(ordered, key=lambda p: (abs(p.date - target), p.date))
        current = ordered[-1].unit_price
        return (current - reference.unit_price) / reference.unit_price * 100

    def _forecast(
        self,
        values: Sequence[float],
        fit: TrendFit,
        degenerate: bool,
        seed: int | None,
    ) -> list[float]:
        days = self.settings.analysis.forecast_days
        current = values[-1]
        if degenerate:
            return [current] * days

        if seed is None:
            seed = self.settings.analysis.forecast_seed
        rng = self._rng_factory(seed)
        volatility = relative_volatility(values)

        forecast: list[float] = []
        for i in range(1, days + 1):
            predicted = current + fit.slope * i
            noise = (rng.random() - 0.5) * 2 * volatility
            forecast.append(max(0.0, predicted + noise))
        return forecast

    def _recommend(
        self,
        current: float,
        average: float,
        fit: TrendFit,
        forecast: Sequence[float],
    ) -> list[str]:
        analysis = self.settings.analysis
        recommendations: list[str] = []

        # Price level vs. window average
        if current < average * (1 - analysis.price_level_band):
            recommendations.append(REC_LOW_PRICE)
        elif current > average * (1 + analysis.price_level_band):
            recommendations.append(REC_HIGH_PRICE)

        # Fitted trend
        if fit.confidence > analysis.high_confidence:
            if fit.direction == Direction.UP:
                recommendations.append(REC_RISING)
            elif fit.direction == Direction.DOWN:
                recommendations.append(REC_FALLING)

        # Forecast vs. current
        forecast_avg = mean(forecast)
        if forecast_avg < current * (1 - analysis.forecast_band):
            recommendations.append(REC_FORECAST_DROP)
        elif forecast_avg > current * (1 + analysis.forecast_band):
            recommendations.append(REC_FORECAST_RISE)

        return recommendations
