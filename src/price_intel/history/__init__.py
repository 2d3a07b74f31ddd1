"""Price history and platform rule sources consumed by the analyzers."""

from .rules import DEFAULT_RULE, PlatformRuleTable
from .source import (
    InMemoryPriceHistory,
    PlatformRuleSource,
    PriceHistorySource,
    normalize_item_ids,
)
from .sqlite_source import SQLitePriceHistory

__all__ = [
    "DEFAULT_RULE",
    "InMemoryPriceHistory",
    "PlatformRuleSource",
    "PlatformRuleTable",
    "PriceHistorySource",
    "SQLitePriceHistory",
    "normalize_item_ids",
]
