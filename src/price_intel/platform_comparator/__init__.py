"""Platform Comparator Module - landed-cost comparison across platforms."""

from .comparator import PlatformComparator, ranking_key
from .landed_cost import apply_discount, landed_cost, shipping_for
from .models import DailyPriceRow, PlatformComparison, PlatformOption

__all__ = [
    "DailyPriceRow",
    "PlatformComparator",
    "PlatformComparison",
    "PlatformOption",
    "apply_discount",
    "landed_cost",
    "ranking_key",
    "shipping_for",
]
