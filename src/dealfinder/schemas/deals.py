"""Pydantic response models for deal and establishment endpoints."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class NearbyDealModel(BaseModel):
    payload: dict
    distanceKm: float
    distanceDisplay: str
    walkingMinutes: int
    status: str


class NearbyDealsResponse(BaseModel):
    active: List[NearbyDealModel]
    upcoming: List[NearbyDealModel]
    future: List[NearbyDealModel]
    radiusKm: float
    reference: str = Field(..., description="ISO timestamp the deal states were computed against.")


class EstablishmentModel(BaseModel):
    establishment_id: int
    name: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    category: Optional[str] = None
    rating: Optional[float] = None


class NearbyEstablishmentModel(EstablishmentModel):
    distanceKm: float
    distanceDisplay: str
    walkingMinutes: int
    activeDeals: List[dict]


class EstablishmentDetailResponse(BaseModel):
    establishment: EstablishmentModel
    deals: List[dict]
    reference: str
