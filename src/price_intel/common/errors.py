"""Error types raised by the price intelligence components."""

from __future__ import annotations


class PriceIntelError(Exception):
    """Base class for all price intelligence errors."""


class InsufficientDataError(PriceIntelError):
    """A minimum sample threshold was not met."""

    def __init__(self, item_id: str, required: int, available: int) -> None:
        self.item_id = item_id
        self.required = required
        self.available = available
        super().__init__(
            f"Insufficient price data for {item_id}: "
            f"need {required} valid points, got {available}"
        )


class InvalidInputError(PriceIntelError):
    """Unknown item id, empty item list, or a non-positive argument."""


class ComputationDegeneracy(PriceIntelError):
    """Numeric input is degenerate (e.g. zero variance).

    Never surfaced to callers: components catch it and fall back to
    safe defaults.
    """
