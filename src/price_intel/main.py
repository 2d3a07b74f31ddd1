"""CLI entry point for the price intelligence engine.

Usage:
    python -m src.price_intel.main trend --item apple --days 30
    python -m src.price_intel.main compare --item apple --quantity 2
    python -m src.price_intel.main optimize --items apple rice milk
    python -m src.price_intel.main alerts --days 7
    python -m src.price_intel.main popular --limit 10
    python -m src.price_intel.main daily --item apple --days 14

    # Custom settings / database:
    python -m src.price_intel.main --settings config/settings.yaml --db data/prices.db alerts
"""

from __future__ import annotations

import argparse
import json
import logging
import sqlite3
import sys

from .common.config import Settings
from .common.errors import PriceIntelError
from .common.logging import setup_logging
from .service import PriceIntelligenceService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Price intelligence: trends, platform comparison, bulk plans and alerts")
    parser.add_argument("--settings", type=str, help="Path to settings YAML (default: config/settings.yaml)")
    parser.add_argument("--db", type=str, help="SQLite database path (overrides settings)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    trend = sub.add_parser("trend", help="Price trend and 7-day forecast for one item")
    trend.add_argument("--item", required=True, help="Item id")
    trend.add_argument("--days", type=int, help="Window in days")
    trend.add_argument("--seed", type=int, help="Forecast noise seed")

    compare = sub.add_parser("compare", help="Compare landed cost across platforms")
    compare.add_argument("--item", required=True, help="Item id")
    compare.add_argument("--quantity", type=float, default=1.0, help="Quantity in canonical units")

    optimize = sub.add_parser("optimize", help="Optimize a bulk purchase across platforms")
    optimize.add_argument("--items", nargs="+", required=True, help="Item ids")

    alerts = sub.add_parser("alerts", help="Scan recent history for price alerts")
    alerts.add_argument("--days", type=int, help="Window in days")

    popular = sub.add_parser("popular", help="Trends for the most observed items")
    popular.add_argument("--limit", type=int, default=20, help="Number of items")
    popular.add_argument("--days", type=int, help="Window in days")

    daily = sub.add_parser("daily", help="Daily unit price per platform for one item")
    daily.add_argument("--item", required=True, help="Item id")
    daily.add_argument("--days", type=int, default=30, help="Window in days")

    return parser


def run(args: argparse.Namespace, service: PriceIntelligenceService) -> dict | list:
    if args.command == "trend":
        return service.get_trend(args.item, args.days, seed=args.seed)
    if args.command == "compare":
        return service.compare_platforms(args.item, args.quantity)
    if args.command == "optimize":
        return service.optimize_bulk_purchase(args.items)
    if args.command == "alerts":
        return service.scan_alerts(args.days)
    if args.command == "popular":
        return service.popular_trends(args.limit, args.days)
    if args.command == "daily":
        return service.daily_platform_prices(args.item, args.days)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(
        logging.DEBUG if args.verbose else logging.INFO,
        module_name=__package__ or "price_intel",
    )

    settings = Settings.load(args.settings)
    if args.db:
        settings.database.db_path = args.db

    try:
        service = PriceIntelligenceService.from_settings(settings)
        result = run(args, service)
    except PriceIntelError as e:
        logger.error("%s failed: %s", args.command, e)
        return 1
    except sqlite3.Error as e:
        logger.error("%s failed: database %s: %s", args.command, settings.database_abs_path, e)
        return 1

    print(json.dumps(result, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
