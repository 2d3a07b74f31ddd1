"""Tests for the price intelligence CLI."""

from __future__ import annotations

import json
import logging
from datetime import timedelta

import pytest

from src.price_intel.common.models import utc_now
from src.price_intel.main import build_parser, main


@pytest.fixture(autouse=True)
def reset_cli_logger():
    yield
    logging.getLogger("src.price_intel").handlers.clear()


@pytest.fixture
def db_path(temp_db, db_conn, insert_points):
    """Database with apple on Hema and Dingdong, recorded in the last day."""
    now = utc_now()
    insert_points(db_conn, [
        ("apple", now - timedelta(hours=6), 10.0, "Hema", 1),
        ("apple", now - timedelta(hours=5), 9.0, "Dingdong", 1),
        ("apple", now - timedelta(hours=2), 10.0, "Hema", 1),
        ("apple", now - timedelta(hours=1), 9.0, "Dingdong", 1),
    ])
    return str(temp_db.database_abs_path)


class TestParser:
    def test_optimize_takes_many_items(self):
        args = build_parser().parse_args(["optimize", "--items", "apple", "rice"])
        assert args.command == "optimize"
        assert args.items == ["apple", "rice"]

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestMain:
    def test_compare_prints_json(self, db_path, capsys):
        assert main(["--db", db_path, "compare", "--item", "apple"]) == 0

        result = json.loads(capsys.readouterr().out)
        # Dingdong: 9 + 8 shipping; Hema: 10 + 12 shipping
        assert result["best_platform"]["platform"] == "Dingdong"
        assert result["best_platform"]["total_cost"] == pytest.approx(17.0)
        assert [p["platform"] for p in result["platforms"]] == ["Dingdong", "Hema"]

    def test_daily_prints_rows(self, db_path, capsys):
        assert main(["--db", db_path, "daily", "--item", "apple", "--days", "3"]) == 0

        rows = json.loads(capsys.readouterr().out)
        assert rows
        assert set(rows[-1]["platforms"]) == {"Dingdong", "Hema"}

    def test_unknown_item_exits_nonzero(self, db_path, capsys):
        assert main(["--db", db_path, "compare", "--item", "durian"]) == 1
        assert capsys.readouterr().out == ""

    def test_trend_prints_json(self, db_path, capsys):
        assert main(["--db", db_path, "trend", "--item", "apple", "--days", "2", "--seed", "3"]) == 0

        trend = json.loads(capsys.readouterr().out)
        assert trend["sample_count"] == 4
        assert len(trend["forecast"]) == 7

    def test_missing_database_exits_nonzero(self, tmp_path, capsys):
        assert main(["--db", str(tmp_path / "missing.db"), "alerts"]) == 1
        assert capsys.readouterr().out == ""
