"""Request-level helpers shared by the deal and establishment routes."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from ..config import settings
from ..models.domain import Deal, Establishment


def reference_instant(at: Optional[datetime] = None) -> datetime:
    """Local civil time used to classify deals.

    Naive ``at`` values are read in the configured timezone; aware ones are converted to it.
    """

    tz = ZoneInfo(settings.timezone)
    if at is None:
        return datetime.now(tz)
    if at.tzinfo is None:
        return at.replace(tzinfo=tz)
    return at.astimezone(tz)


def resolve_radius(radius: Optional[float]) -> float:
    radius_km = settings.default_radius_km if radius is None else radius
    if radius_km > settings.max_radius_km:
        raise ValueError(f"radius must be <= {settings.max_radius_km} km, got {radius_km}")
    return radius_km


def _price(deal: Deal) -> float:
    if deal.happy_hour_price is None or math.isnan(deal.happy_hour_price):
        return math.inf
    return deal.happy_hour_price


def compare_deals_by_price(
    left: tuple[Deal, Establishment] | Deal,
    right: tuple[Deal, Establishment] | Deal,
) -> int:
    """Cheaper happy hour price first; deals without a price sort last."""

    left_deal = left[0] if isinstance(left, tuple) else left
    right_deal = right[0] if isinstance(right, tuple) else right
    left_price, right_price = _price(left_deal), _price(right_deal)
    return (left_price > right_price) - (left_price < right_price)
