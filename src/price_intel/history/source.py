"""Read-only interfaces to price history and platform rules.

The analyzers never talk to storage directly: they receive a
PriceHistorySource and a PlatformRuleSource and issue one batched read
per call.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol

from ..common.models import PlatformRule, PricePoint, to_naive_utc


class PriceHistorySource(Protocol):
    """Supplies immutable, time-ordered price observations."""

    def fetch_valid_price_points(
        self,
        item_ids: str | Iterable[str] | None,
        since: datetime | None = None,
    ) -> list[PricePoint]:
        """Return valid points for the given items (all items when None),
        recorded at or after `since`, ordered by date ascending."""
        ...

    def fetch_known_item_ids(self, item_ids: Iterable[str]) -> set[str]:
        """Return the subset of `item_ids` that exist in the catalog."""
        ...


class PlatformRuleSource(Protocol):
    """Supplies shipping/discount rules per platform."""

    def fetch_platform_rules(self, platform: str) -> PlatformRule:
        ...


def normalize_item_ids(item_ids: str | Iterable[str] | None) -> list[str] | None:
    """Turn a single id or an iterable of ids into a sorted, de-duplicated list."""
    if item_ids is None:
        return None
    if isinstance(item_ids, str):
        return [item_ids]
    return sorted(set(item_ids))


class InMemoryPriceHistory:
    """PriceHistorySource over an in-memory snapshot of points.

    Usage:
        history = InMemoryPriceHistory(points)
        points = history.fetch_valid_price_points(["apple"], since=cutoff)
    """

    def __init__(
        self,
        points: Iterable[PricePoint],
        item_ids: Iterable[str] | None = None,
    ) -> None:
        # Stable sort keeps insertion order among same-timestamp points
        self._points: tuple[PricePoint, ...] = tuple(
            sorted(points, key=lambda p: p.date)
        )
        catalog = set(item_ids) if item_ids is not None else set()
        catalog.update(p.item_id for p in self._points)
        self._catalog = frozenset(catalog)

    def fetch_valid_price_points(
        self,
        item_ids: str | Iterable[str] | None,
        since: datetime | None = None,
    ) -> list[PricePoint]:
        wanted = normalize_item_ids(item_ids)
        wanted_set = set(wanted) if wanted is not None else None
        if since is not None:
            since = to_naive_utc(since)
        return [
            p for p in self._points
            if p.valid
            and (wanted_set is None or p.item_id in wanted_set)
            and (since is None or p.date >= since)
        ]

    def fetch_known_item_ids(self, item_ids: Iterable[str]) -> set[str]:
        return {i for i in item_ids if i in self._catalog}
