"""Nearby deal queries: radius filtering, classification and ranking."""

from __future__ import annotations

import logging
from datetime import datetime
from functools import cmp_to_key
from typing import Any, Callable, Iterable, Optional, Sequence

from shapely.geometry import Polygon

from ...models.domain import (
    CandidateDeal,
    Coordinate,
    DealState,
    Establishment,
    ProximityItem,
    QueryResult,
)
from ..geospatial import (
    bounding_box,
    distance_within,
    in_bounding_box,
    is_valid_coordinate,
    validate_coordinate,
    validate_radius,
)
from .classifier import DEFAULT_UPCOMING_WINDOW_MINUTES, classify_deal

Comparator = Callable[[Any, Any], int]

# the flat-degree box only safely contains the haversine circle for modest radii
PREFILTER_MARGIN = 1.1
PREFILTER_MAX_RADIUS_KM = 500.0
PREFILTER_MAX_LATITUDE = 80.0

STATE_ORDER: dict[DealState, int] = {
    DealState.ACTIVE: 0,
    DealState.UPCOMING: 1,
    DealState.FUTURE: 2,
    DealState.INACTIVE: 3,
}


def _validate_limit(limit: Optional[int]) -> Optional[int]:
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be >= 0, got {limit}")
    return limit


def _prefilter_region(point: Coordinate, radius_km: float) -> Optional[Polygon]:
    """Bounding box around the query point, or None when it would wrap the globe."""

    if radius_km <= 0 or radius_km > PREFILTER_MAX_RADIUS_KM or abs(point.latitude) > PREFILTER_MAX_LATITUDE:
        return None
    region = bounding_box(point, radius_km * PREFILTER_MARGIN)
    min_lon, min_lat, max_lon, max_lat = region.bounds
    if min_lon < -180 or max_lon > 180 or min_lat < -90 or max_lat > 90:
        return None
    return region


def _sort_by_distance(items: list[ProximityItem], tie_breaker: Optional[Comparator]) -> None:
    if tie_breaker is None:
        items.sort(key=lambda item: item.distance_km)
        return
    payload_key = cmp_to_key(tie_breaker)
    items.sort(key=lambda item: (item.distance_km, payload_key(item.payload)))


def query(
    point: Coordinate,
    radius_km: float,
    reference: datetime,
    candidates: Iterable[CandidateDeal],
    *,
    tie_breaker: Optional[Comparator] = None,
    limit: Optional[int] = None,
    upcoming_window_minutes: int = DEFAULT_UPCOMING_WINDOW_MINUTES,
) -> QueryResult:
    """Find deals within ``radius_km`` of ``point`` and bucket them by state at ``reference``.

    Candidates without a usable establishment coordinate are skipped. Each
    bucket is sorted by ascending distance, ties going to ``tie_breaker``
    (a ``cmp``-style function over payloads), and only then cut to ``limit``.
    Inactive deals are not returned.
    """

    validate_coordinate(point)
    validate_radius(radius_km)
    _validate_limit(limit)

    region = _prefilter_region(point, radius_km)
    result = QueryResult()
    buckets = result.buckets()
    seen = 0
    for candidate in candidates:
        seen += 1
        coordinate = candidate.coordinate
        if not is_valid_coordinate(coordinate):
            logging.debug(f"Skipping candidate without usable coordinate: {candidate.payload!r}")
            continue
        if region is not None and not in_bounding_box(region, coordinate):
            continue
        distance = distance_within(point, coordinate, radius_km)
        if distance is None:
            continue
        state = classify_deal(
            candidate.window,
            reference,
            upcoming_window_minutes=upcoming_window_minutes,
        )
        if state is DealState.INACTIVE:
            continue
        buckets[state].append(ProximityItem(payload=candidate.payload, distance_km=distance, state=state))

    for items in buckets.values():
        _sort_by_distance(items, tie_breaker)
        if limit is not None:
            del items[limit:]

    logging.info(
        f"Nearby query at ({point.latitude:.5f}, {point.longitude:.5f}) r={radius_km}km: "
        f"{seen} candidates -> {len(result.active)} active, "
        f"{len(result.upcoming)} upcoming, {len(result.future)} future"
    )
    return result


def nearby_establishments(
    point: Coordinate,
    radius_km: float,
    establishments: Iterable[Establishment],
) -> list[tuple[Establishment, float]]:
    """Establishments within ``radius_km`` of ``point``, closest first."""

    validate_coordinate(point)
    validate_radius(radius_km)

    nearby: list[tuple[Establishment, float]] = []
    for establishment in establishments:
        distance = distance_within(point, establishment.coordinate, radius_km)
        if distance is not None:
            nearby.append((establishment, distance))
    nearby.sort(key=lambda item: item[1])
    return nearby


def establishment_deals(
    candidates: Sequence[CandidateDeal],
    reference: datetime,
    *,
    tie_breaker: Optional[Comparator] = None,
    upcoming_window_minutes: int = DEFAULT_UPCOMING_WINDOW_MINUTES,
) -> list[tuple[Any, DealState]]:
    """Classify every deal of one establishment, inactive ones included.

    No location filtering happens here. Results are ordered active, upcoming,
    future, inactive and then by ``tie_breaker``.
    """

    classified = [
        (
            candidate.payload,
            classify_deal(candidate.window, reference, upcoming_window_minutes=upcoming_window_minutes),
        )
        for candidate in candidates
    ]
    if tie_breaker is None:
        classified.sort(key=lambda item: STATE_ORDER[item[1]])
    else:
        payload_key = cmp_to_key(tie_breaker)
        classified.sort(key=lambda item: (STATE_ORDER[item[1]], payload_key(item[0])))
    return classified
