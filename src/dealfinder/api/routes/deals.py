"""API routes for nearby happy hour deals."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, HTTPException, Query, status

from ...config import settings
from ...data.deals_repository import get_repository
from ...models.domain import Coordinate, ProximityItem
from ...schemas.deals import NearbyDealsResponse
from ...services.deals.proximity import query
from ...services.outputs.formatter import deal_to_json, distance_details, query_result_to_json
from ..params import compare_deals_by_price, reference_instant, resolve_radius

router = APIRouter(prefix="/deals", tags=["deals"])


@router.get("/nearby", response_model=NearbyDealsResponse, status_code=status.HTTP_200_OK)
def get_nearby_deals(
    lat: float = Query(..., description="Latitude of the user location"),
    lng: float = Query(..., description="Longitude of the user location"),
    radius: float | None = Query(default=None, ge=0, description="Search radius in kilometres"),
    limit: int | None = Query(default=None, ge=1, le=500, description="Maximum deals per bucket"),
    at: datetime | None = Query(default=None, description="Evaluate deal states at this time instead of now"),
) -> NearbyDealsResponse:
    """Active, upcoming and tomorrow's deals around a point, closest (then cheapest) first."""

    reference = reference_instant(at)
    try:
        radius_km = resolve_radius(radius)
        result = query(
            Coordinate(lat, lng),
            radius_km,
            reference,
            get_repository().candidates(),
            tie_breaker=compare_deals_by_price,
            limit=limit or settings.max_results_per_bucket,
            upcoming_window_minutes=settings.upcoming_window_minutes,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    def serialize(item: ProximityItem) -> dict:
        deal, establishment = item.payload
        payload = deal_to_json(
            deal,
            establishment=establishment,
            reference=reference,
            state=item.state,
            upcoming_window_minutes=settings.upcoming_window_minutes,
        )
        return {
            "payload": payload,
            **distance_details(item.distance_km),
            "status": payload["status_display"],
        }

    return NearbyDealsResponse(
        **query_result_to_json(result, serialize),
        radiusKm=radius_km,
        reference=reference.isoformat(),
    )
