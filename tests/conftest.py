"""Shared test fixtures for the price intelligence engine."""

import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

# Ensure src is importable
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.price_intel.common.config import DatabaseSettings, Settings
from src.price_intel.common.models import PlatformRule, PricePoint
from src.price_intel.database.connection import get_connection, init_db
from src.price_intel.history import PlatformRuleTable

NOW = datetime(2026, 3, 1, 12, 0, 0)


def make_series(
    item_id: str,
    unit_prices: list[float],
    platform: str = "Hema",
    end: datetime = NOW,
    step_days: float = 1.0,
) -> list[PricePoint]:
    """Points spaced `step_days` apart, the last one recorded at `end`."""
    n = len(unit_prices)
    return [
        PricePoint(
            item_id=item_id,
            date=end - timedelta(days=step_days * (n - 1 - i)),
            price=price,
            unit_price=price,
            platform=platform,
        )
        for i, price in enumerate(unit_prices)
    ]


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def clock():
    """Fixed clock so windows and horizons are reproducible."""
    return lambda: NOW


@pytest.fixture
def series():
    """Factory for evenly spaced price series."""
    return make_series


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Default settings pointing to a temporary SQLite database."""
    return Settings(database=DatabaseSettings(db_path=str(tmp_path / "test_prices.db")))


@pytest.fixture
def temp_db(settings) -> Settings:
    """Settings whose database schema has been initialized."""
    init_db(settings)
    return settings


@pytest.fixture
def db_conn(temp_db):
    """Provide an initialized SQLite connection from temp_db."""
    conn = get_connection(temp_db)
    yield conn
    conn.close()


@pytest.fixture
def ab_rules() -> PlatformRuleTable:
    """Platform A charges 15 shipping below 99; platform B ships free."""
    return PlatformRuleTable([
        PlatformRule(platform="A", shipping_cost=15, free_shipping_threshold=99),
        PlatformRule(platform="B", shipping_cost=0),
    ])


@pytest.fixture
def free_shipping_rules() -> PlatformRuleTable:
    """Every platform ships free."""
    return PlatformRuleTable(default=PlatformRule(platform="*", shipping_cost=0))


@pytest.fixture
def insert_points():
    """Write (item_id, recorded_at, unit_price, platform, is_valid) rows."""
    def _insert(conn, rows):
        for item_id in sorted({r[0] for r in rows}):
            conn.execute("INSERT OR IGNORE INTO items (item_id, name) VALUES (?, ?)", (item_id, item_id))
        for item_id, recorded_at, unit_price, platform, is_valid in rows:
            conn.execute(
                """INSERT INTO price_points
                   (item_id, recorded_at, price, unit_price, platform, is_valid)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (item_id, recorded_at.isoformat(), unit_price, unit_price, platform, is_valid),
            )
        conn.commit()
    return _insert
