"""
Price Intelligence Engine

Modules:
- trend_analyzer: Per-item regression trend, horizon changes, 7-day forecast
- platform_comparator: Landed-cost comparison across purchasing platforms
- bulk_optimizer: Single-platform vs. mixed-platform purchase plans
- alert_generator: Spike / opportunity detection over recent history
- history: Price history and platform rule sources
- database: SQLite storage layer
- common: Shared configuration, logging, models and errors
"""

__version__ = "0.1.0"
