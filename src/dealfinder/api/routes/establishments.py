"""API routes for establishments and their deals."""

from __future__ import annotations

from datetime import datetime
from functools import cmp_to_key
from typing import List

from fastapi import APIRouter, HTTPException, Query, status

from ...config import settings
from ...data.deals_repository import get_repository
from ...models.domain import CandidateDeal, Coordinate
from ...schemas.deals import EstablishmentDetailResponse, EstablishmentModel, NearbyEstablishmentModel
from ...services.deals.classifier import is_active
from ...services.deals.proximity import establishment_deals, nearby_establishments
from ...services.outputs.formatter import deal_to_json, distance_details, establishment_to_json
from ..params import compare_deals_by_price, reference_instant, resolve_radius

router = APIRouter(prefix="/establishments", tags=["establishments"])


@router.get("/nearby", response_model=List[NearbyEstablishmentModel], status_code=status.HTTP_200_OK)
def get_nearby_establishments(
    lat: float = Query(..., description="Latitude of the user location"),
    lng: float = Query(..., description="Longitude of the user location"),
    radius: float | None = Query(default=None, ge=0, description="Search radius in kilometres"),
    at: datetime | None = Query(default=None, description="Evaluate deal states at this time instead of now"),
) -> List[NearbyEstablishmentModel]:
    """Establishments within the radius, closest first, each with its currently active deals."""

    reference = reference_instant(at)
    repository = get_repository()
    try:
        nearby = nearby_establishments(Coordinate(lat, lng), resolve_radius(radius), repository.list_establishments())
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    items: List[NearbyEstablishmentModel] = []
    for establishment, distance in nearby:
        active = [
            deal
            for deal in repository.deals_for_establishment(establishment.establishment_id)
            if is_active(deal.window, reference)
        ]
        active.sort(key=cmp_to_key(compare_deals_by_price))
        items.append(
            NearbyEstablishmentModel(
                **establishment_to_json(establishment),
                **distance_details(distance),
                activeDeals=[deal_to_json(deal) for deal in active],
            )
        )
    return items


@router.get("/{establishment_id}", response_model=EstablishmentDetailResponse, status_code=status.HTTP_200_OK)
def get_establishment(
    establishment_id: int,
    at: datetime | None = Query(default=None, description="Evaluate deal states at this time instead of now"),
) -> EstablishmentDetailResponse:
    """One establishment with all of its deals: active first, then upcoming, future, inactive."""

    repository = get_repository()
    establishment = repository.get_establishment(establishment_id)
    if establishment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Establishment not found")

    reference = reference_instant(at)
    candidates = [
        CandidateDeal(window=deal.window, coordinate=establishment.coordinate, payload=deal)
        for deal in repository.deals_for_establishment(establishment_id)
    ]
    classified = establishment_deals(
        candidates,
        reference,
        tie_breaker=compare_deals_by_price,
        upcoming_window_minutes=settings.upcoming_window_minutes,
    )
    return EstablishmentDetailResponse(
        establishment=EstablishmentModel(**establishment_to_json(establishment)),
        deals=[
            deal_to_json(
                deal,
                reference=reference,
                state=state,
                upcoming_window_minutes=settings.upcoming_window_minutes,
            )
            for deal, state in classified
        ],
        reference=reference.isoformat(),
    )
