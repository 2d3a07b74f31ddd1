"""Common utilities shared across price_intel modules."""

from .config import Settings
from .errors import (
    ComputationDegeneracy,
    InsufficientDataError,
    InvalidInputError,
    PriceIntelError,
)
from .logging import setup_logging

__all__ = [
    "Settings",
    "ComputationDegeneracy",
    "InsufficientDataError",
    "InvalidInputError",
    "PriceIntelError",
    "setup_logging",
]
