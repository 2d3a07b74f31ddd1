"""Project configuration and paths.

Loads settings from config/settings.yaml and environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

# === Paths ===
PROJECT_ROOT = Path(__file__).resolve().parents[3]
CONFIG_DIR = PROJECT_ROOT / "config"
DATA_DIR = PROJECT_ROOT / "data"

# Load .env from project root
load_dotenv(PROJECT_ROOT / ".env")


class AnalysisSettings(BaseModel):
    """Settings for per-item trend analysis."""
    default_window_days: int = Field(default=30, gt=0)
    min_points: int = Field(default=3, ge=3)
    stable_slope_threshold: float = Field(default=0.01, ge=0)
    forecast_days: int = Field(default=7, gt=0)
    change_horizons_days: dict[str, int] = Field(
        default_factory=lambda: {"daily": 1, "weekly": 7, "monthly": 30}
    )
    high_confidence: float = Field(default=0.7, ge=0, le=1)
    price_level_band: float = Field(default=0.2, ge=0)
    forecast_band: float = Field(default=0.1, ge=0)
    forecast_seed: int | None = 42


class ComparisonSettings(BaseModel):
    """Settings for cross-platform comparison."""
    min_platform_points: int = Field(default=2, ge=1)
    reliability_full_sample: int = Field(default=10, gt=0)
    history_limit: int = Field(default=100, gt=0)
    strong_savings_percent: float = 10.0
    mild_savings_percent: float = 5.0


class AlertSettings(BaseModel):
    """Settings for the price alert scan."""
    window_days: int = Field(default=7, gt=0)
    min_points: int = Field(default=3, ge=2)
    baseline_size: int = Field(default=5, gt=0)
    spike_percent: float = 20.0
    high_spike_percent: float = 50.0
    opportunity_percent: float = -15.0


class DatabaseSettings(BaseModel):
    """Database connection settings."""
    db_path: str = str(DATA_DIR / "price_history.db")


class Settings(BaseModel):
    """Top-level application settings."""
    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)
    comparison: ComparisonSettings = Field(default_factory=ComparisonSettings)
    alerts: AlertSettings = Field(default_factory=AlertSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    platform_rules_path: str = str(CONFIG_DIR / "platform_rules.yaml")

    @classmethod
    def load(cls, path: str | Path | None = None) -> Settings:
        """Load settings from config/settings.yaml, falling back to defaults.

        Environment variables override the file:
        PRICE_INTEL_DB_PATH, PRICE_INTEL_RULES_PATH, PRICE_INTEL_FORECAST_SEED.
        """
        settings_path = Path(path) if path else CONFIG_DIR / "settings.yaml"
        data: dict = {}
        if settings_path.exists():
            with open(settings_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}

        if db_path := os.getenv("PRICE_INTEL_DB_PATH"):
            data["database"] = {**(data.get("database") or {}), "db_path": db_path}
        if rules_path := os.getenv("PRICE_INTEL_RULES_PATH"):
            data["platform_rules_path"] = rules_path
        if seed := os.getenv("PRICE_INTEL_FORECAST_SEED"):
            data["analysis"] = {**(data.get("analysis") or {}), "forecast_seed": seed}

        # Overrides go through validation like the file values
        return cls.model_validate(data)

    @property
    def database_abs_path(self) -> Path:
        """Resolve database path relative to project root."""
        p = Path(self.database.db_path)
        if p.is_absolute():
            return p
        return PROJECT_ROOT / p

    @property
    def platform_rules_abs_path(self) -> Path:
        """Resolve platform rules path relative to project root."""
        p = Path(self.platform_rules_path)
        if p.is_absolute():
            return p
        return PROJECT_ROOT / p
