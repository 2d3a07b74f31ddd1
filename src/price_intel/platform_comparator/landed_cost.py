"""Landed cost: discount first, then shipping on the discounted subtotal."""

from __future__ import annotations

from ..common.models import Fixed, Percentage, PlatformRule, Threshold


def apply_discount(subtotal: float, rule: PlatformRule) -> float:
    """Apply the platform's discount policy to a subtotal."""
    policy = rule.discount_policy
    if policy is None or isinstance(policy, Threshold):
        return subtotal
    if isinstance(policy, Percentage):
        return subtotal * (1 - policy.value / 100)
    if isinstance(policy, Fixed):
        return max(0.0, subtotal - policy.value)
    raise TypeError(f"Unsupported discount policy: {policy!r}")


def shipping_for(subtotal: float, rule: PlatformRule) -> float:
    """Shipping charged on `subtotal`; free at or above the threshold."""
    threshold = rule.free_shipping_threshold
    if threshold is not None and subtotal >= threshold:
        return 0.0
    return rule.shipping_cost


def landed_cost(subtotal: float, rule: PlatformRule) -> tuple[float, float]:
    """Return (discounted subtotal, shipping) for an order on one platform."""
    discounted = apply_discount(subtotal, rule)
    return discounted, shipping_for(discounted, rule)
