"""Shared Pydantic data models for the price intelligence engine.

These models define the input contracts supplied by the price history
source and the platform rule table. Result types live next to the
component that computes them.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# === Time ===

def to_naive_utc(value: datetime) -> datetime:
    """Aware datetimes become naive UTC; naive ones are taken as UTC already."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def utc_now() -> datetime:
    """Default clock: the current time as naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# === Enums ===

class Direction(str, Enum):
    """Direction of a fitted price trend."""
    UP = "UP"
    DOWN = "DOWN"
    STABLE = "STABLE"


# === Price observations ===

class PricePoint(BaseModel):
    """Single price observation for an item on a platform.

    `date` is held as naive UTC; aware input is converted on validation.
    """

    model_config = ConfigDict(frozen=True)

    item_id: str
    date: datetime
    price: float = Field(ge=0, description="Amount actually paid")
    unit_price: float = Field(description="Price per canonical unit (e.g. per kg)")
    platform: str
    valid: bool = True

    @field_validator("date")
    @classmethod
    def _date_as_naive_utc(cls, value: datetime) -> datetime:
        return to_naive_utc(value)

    @model_validator(mode="after")
    def _valid_points_have_unit_price(self) -> PricePoint:
        if self.valid and self.unit_price <= 0:
            raise ValueError("unit_price must be > 0 for valid price points")
        return self


# === Platform rules ===

class Percentage(BaseModel):
    """Reduce the subtotal by `value` percent."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["percentage"] = "percentage"
    value: float = Field(ge=0, le=100)
    description: str = ""


class Fixed(BaseModel):
    """Subtract a flat `value` from the subtotal."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["fixed"] = "fixed"
    value: float = Field(ge=0)
    description: str = ""


class Threshold(BaseModel):
    """Informational spend threshold; does not change the subtotal."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["threshold"] = "threshold"
    value: float = Field(ge=0)
    description: str = ""


DiscountPolicy = Annotated[
    Union[Percentage, Fixed, Threshold],
    Field(discriminator="kind"),
]


class PlatformRule(BaseModel):
    """Static shipping and discount rule for a purchasing platform.

    A missing `free_shipping_threshold` means shipping always applies.
    """

    model_config = ConfigDict(frozen=True)

    platform: str
    shipping_cost: float = Field(default=0.0, ge=0)
    free_shipping_threshold: float | None = Field(default=None, ge=0)
    discount_policy: DiscountPolicy | None = None
