"""SQLite-backed PriceHistorySource.

Reads from the `items` and `price_points` tables created by
`database.connection.init_db`. Each fetch is a single query regardless
of how many items are requested.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterable
from datetime import datetime

from ..common.config import Settings
from ..common.models import PricePoint, to_naive_utc
from ..database.connection import get_connection
from .source import normalize_item_ids

logger = logging.getLogger(__name__)


class SQLitePriceHistory:
    """Read-only price history adapter over the SQLite store.

    Usage:
        history = SQLitePriceHistory(Settings.load())
        points = history.fetch_valid_price_points(["apple", "banana"], since)
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings.load()

    def fetch_valid_price_points(
        self,
        item_ids: str | Iterable[str] | None,
        since: datetime | None = None,
    ) -> list[PricePoint]:
        wanted = normalize_item_ids(item_ids)
        if wanted == []:
            return []

        query = (
            "SELECT item_id, recorded_at, price, unit_price, platform "
            "FROM price_points WHERE is_valid = 1"
        )
        params: list = []
        if wanted is not None:
            query += f" AND item_id IN ({', '.join('?' for _ in wanted)})"
            params.extend(wanted)
        if since is not None:
            # julianday() folds any UTC offset in recorded_at
            query += " AND julianday(recorded_at) >= julianday(?)"
            params.append(to_naive_utc(since).isoformat())
        query += " ORDER BY julianday(recorded_at), id"

        conn = get_connection(self.settings, read_only=True)
        try:
            rows = conn.execute(query, params).fetchall()
        finally:
            conn.close()

        logger.debug(
            "Fetched %d valid price points for %s",
            len(rows),
            "all items" if wanted is None else f"{len(wanted)} item(s)",
        )
        return [self._row_to_point(row) for row in rows]

    def fetch_known_item_ids(self, item_ids: Iterable[str]) -> set[str]:
        wanted = normalize_item_ids(item_ids) or []
        if not wanted:
            return set()
        conn = get_connection(self.settings, read_only=True)
        try:
            rows = conn.execute(
                f"SELECT item_id FROM items WHERE item_id IN ({', '.join('?' for _ in wanted)})",
                wanted,
            ).fetchall()
        finally:
            conn.close()
        return {row["item_id"] for row in rows}

    @staticmethod
    def _row_to_point(row: sqlite3.Row) -> PricePoint:
        return PricePoint(
            item_id=row["item_id"],
            date=row["recorded_at"],
            price=row["price"],
            unit_price=row["unit_price"],
            platform=row["platform"],
            valid=True,
        )
