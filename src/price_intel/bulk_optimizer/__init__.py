"""Bulk Optimizer Module - single-platform vs. mixed-platform purchase plans."""

from .models import AllocationPlan, PlanGroup, PlanItem, PurchasePlan
from .optimizer import MIXED_PLAN_ID, BulkAllocationOptimizer

__all__ = [
    "AllocationPlan",
    "BulkAllocationOptimizer",
    "MIXED_PLAN_ID",
    "PlanGroup",
    "PlanItem",
    "PurchasePlan",
]
