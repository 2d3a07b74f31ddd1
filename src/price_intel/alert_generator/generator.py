"""Price alert scan over recent history.

For every item with enough recent observations, the latest unit price
is compared against the mean of the observations ranked 2nd to 6th most
recent:
- deviation > +20%  -> SPIKE (HIGH from +50%, else MEDIUM)
- deviation < -15%  -> OPPORTUNITY (MEDIUM)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime, timedelta
from itertools import groupby
from statistics import mean

from ..common.config import Settings
from ..common.errors import InvalidInputError
from ..common.models import PricePoint, to_naive_utc, utc_now
from ..history.source import PriceHistorySource
from .models import AlertKind, PriceAlert, Urgency

logger = logging.getLogger(__name__)


class AlertGenerator:
    """Flag items whose latest price deviates from their short baseline.

    Usage:
        generator = AlertGenerator(history)
        for alert in generator.scan(window_days=7):
            print(alert.item_id, alert.kind.value, alert.urgency.value)
    """

    def __init__(
        self,
        history: PriceHistorySource,
        settings: Settings | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.history = history
        self.settings = settings or Settings()
        self._clock = clock or utc_now

    def scan(
        self,
        window_days: int | None = None,
        item_ids: Iterable[str] | None = None,
    ) -> list[PriceAlert]:
        """Scan all items (or `item_ids`) seen within the window.

        Returns alerts sorted by urgency (HIGH first), then item id.
        """
        if window_days is None:
            window_days = self.settings.alerts.window_days
        if window_days <= 0:
            raise InvalidInputError(f"window_days must be positive, got {window_days}")

        since = to_naive_utc(self._clock()) - timedelta(days=window_days)
        points = self.history.fetch_valid_price_points(item_ids, since=since)

        by_item = sorted(
            (p for p in points if p.valid),
            key=lambda p: (p.item_id, p.date),
        )
        alerts: list[PriceAlert] = []
        evaluated = 0
        for item_id, group in groupby(by_item, key=lambda p: p.item_id):
            most_recent_first = list(group)[::-1]
            if len(most_recent_first) < self.settings.alerts.min_points:
                logger.debug("Skipping %s: %d point(s) in window", item_id, len(most_recent_first))
                continue
            evaluated += 1
            if alert := self.evaluate(item_id, most_recent_first):
                alerts.append(alert)

        alerts.sort(key=lambda a: (-a.urgency.rank, a.item_id))
        logger.info(
            "Alert scan (%d days): %d item(s) evaluated, %d alert(s)",
            window_days, evaluated, len(alerts),
        )
        return alerts

    def evaluate(
        self,
        item_id: str,
        most_recent_first: Sequence[PricePoint],
    ) -> PriceAlert | None:
        """Classify one item's deviation; None when within normal range."""
        cfg = self.settings.alerts
        latest = most_recent_first[0].unit_price
        baseline = mean(p.unit_price for p in most_recent_first[1:1 + cfg.baseline_size])
        deviation = (latest - baseline) / baseline * 100

        if deviation > cfg.spike_percent:
            return PriceAlert(
                item_id=item_id,
                kind=AlertKind.SPIKE,
                current_price=latest,
                baseline_price=baseline,
                deviation_percent=deviation,
                urgency=Urgency.HIGH if deviation >= cfg.high_spike_percent else Urgency.MEDIUM,
                message=f"{item_id} price jumped {deviation:.1f}%",
                action="Postpone the purchase or look for a substitute",
            )
        if deviation < cfg.opportunity_percent:
            return PriceAlert(
                item_id=item_id,
                kind=AlertKind.OPPORTUNITY,
                current_price=latest,
                baseline_price=baseline,
                deviation_percent=deviation,
                urgency=Urgency.MEDIUM,
                message=f"{item_id} price dropped {abs(deviation):.1f}%",
                action="Buy now while the price is low",
            )
        return None
