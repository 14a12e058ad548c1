"""Utilities to serialize query results into JSON-ready structures."""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from typing import Callable, Optional

from ...models.domain import Deal, DealState, Establishment, ProximityItem, QueryResult
from ..deals.classifier import DEFAULT_UPCOMING_WINDOW_MINUTES, status_display
from ..geospatial import format_distance, walking_minutes
from ..schedule.days import describe_days
from ..schedule.times import time_range_display

ItemSerializer = Callable[[ProximityItem], dict]


def proximity_item_to_json(item: ProximityItem) -> dict:
    return {
        "payload": item.payload,
        "distanceKm": item.distance_km,
    }


def query_result_to_json(result: QueryResult, serialize: ItemSerializer = proximity_item_to_json) -> dict:
    """``{"active": [...], "upcoming": [...], "future": [...]}`` in result order."""

    return {
        state.value: [serialize(item) for item in items]
        for state, items in result.buckets().items()
    }


def establishment_to_json(establishment: Establishment) -> dict:
    data = asdict(establishment)
    data.pop("raw", None)
    return data


def deal_to_json(
    deal: Deal,
    *,
    establishment: Optional[Establishment] = None,
    reference: Optional[datetime] = None,
    state: Optional[DealState] = None,
    upcoming_window_minutes: int = DEFAULT_UPCOMING_WINDOW_MINUTES,
) -> dict:
    data = asdict(deal)
    data.pop("raw", None)
    data["savings_percentage"] = deal.savings_percentage
    data["days_display"] = describe_days(deal.valid_days)
    data["time_display"] = time_range_display(deal.hh_start_time, deal.hh_end_time)
    if state is not None:
        data["state"] = state.value
    if reference is not None:
        data["status_display"] = status_display(
            deal.window, reference, state, upcoming_window_minutes=upcoming_window_minutes
        )
    if establishment is not None:
        data["establishment"] = establishment_to_json(establishment)
    return data


def distance_details(distance_km: float) -> dict:
    return {
        "distanceKm": round(distance_km, 3),
        "distanceDisplay": format_distance(distance_km),
        "walkingMinutes": walking_minutes(distance_km),
    }
