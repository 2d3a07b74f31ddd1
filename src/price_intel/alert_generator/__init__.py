"""Alert Generator Module - spike and opportunity detection."""

from .generator import AlertGenerator
from .models import AlertKind, PriceAlert, Urgency

__all__ = ["AlertGenerator", "AlertKind", "PriceAlert", "Urgency"]
