"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Optional

from shapely.geometry import Point, Polygon, box

from ..models.domain import Coordinate

EARTH_RADIUS_KM = 6371.0
KM_PER_DEGREE = 111.0
WALKING_MINUTES_PER_KM = 12


class InvalidCoordinateError(ValueError):
    """Raised when a query point is NaN or outside the valid degree range."""


class InvalidRadiusError(ValueError):
    """Raised when a search radius is NaN, infinite or negative."""


def is_valid_coordinate(coordinate: Optional[Coordinate]) -> bool:
    if coordinate is None:
        return False
    lat, lon = coordinate.latitude, coordinate.longitude
    if lat is None or lon is None:
        return False
    if math.isnan(lat) or math.isnan(lon):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0


def validate_coordinate(coordinate: Optional[Coordinate]) -> Coordinate:
    """Return the coordinate unchanged or raise ``InvalidCoordinateError``."""

    if coordinate is None:
        raise InvalidCoordinateError("Coordinate is required.")
    if not is_valid_coordinate(coordinate):
        raise InvalidCoordinateError(
            f"Invalid coordinate ({coordinate.latitude}, {coordinate.longitude}): "
            "latitude must be within [-90, 90] and longitude within [-180, 180]."
        )
    return coordinate


def validate_radius(radius_km: float) -> float:
    if radius_km is None or math.isnan(radius_km) or math.isinf(radius_km) or radius_km < 0:
        raise InvalidRadiusError(f"Invalid radius '{radius_km}': must be a finite number >= 0.")
    return radius_km


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # rounding can push a a hair above 1 for antipodal points
    a = min(1.0, a)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance_km(a: Coordinate, b: Coordinate) -> float:
    return haversine_km(a.latitude, a.longitude, b.latitude, b.longitude)


def distance_within(a: Optional[Coordinate], b: Optional[Coordinate], radius_km: float) -> Optional[float]:
    """Distance between ``a`` and ``b`` when both are usable and within ``radius_km``, else None.

    Missing or NaN coordinates never match; they are not treated as zero distance.
    """

    if not (is_valid_coordinate(a) and is_valid_coordinate(b)):
        return None
    distance = distance_km(a, b)
    if distance > radius_km:
        return None
    return distance


def within_radius(a: Optional[Coordinate], b: Optional[Coordinate], radius_km: float) -> bool:
    return distance_within(a, b, radius_km) is not None


def bounding_box(center: Coordinate, radius_km: float) -> Polygon:
    """Coarse lon/lat box around ``center`` used to prefilter candidates.

    Uses a flat 111 km per degree approximation, widened in longitude by the
    latitude cosine. Always contains the exact haversine circle away from the poles.
    """

    lat_delta = radius_km / KM_PER_DEGREE
    cos_lat = math.cos(math.radians(center.latitude))
    if cos_lat <= 1e-12:
        lon_delta = 180.0
    else:
        lon_delta = min(180.0, radius_km / (KM_PER_DEGREE * cos_lat))
    return box(
        center.longitude - lon_delta,
        center.latitude - lat_delta,
        center.longitude + lon_delta,
        center.latitude + lat_delta,
    )


def in_bounding_box(region: Polygon, coordinate: Optional[Coordinate]) -> bool:
    if not is_valid_coordinate(coordinate):
        return False
    return region.covers(Point(coordinate.longitude, coordinate.latitude))


def format_distance(km: float) -> str:
    """Human readable distance: metres below 1 km, otherwise one decimal km."""

    if km < 1:
        return f"{round(km * 1000)}m"
    return f"{km:.1f}km"


def walking_minutes(km: float) -> int:
    return round(km * WALKING_MINUTES_PER_KM)
