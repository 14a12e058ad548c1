"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/data", status_code=status.HTTP_200_OK)
def health_data() -> dict:
    """Report how many establishments and deals the repository is serving."""
    from ...data.deals_repository import get_repository

    try:
        repository = get_repository()
        return {
            "healthy": True,
            "establishments": len(list(repository.list_establishments())),
            "deals": len(list(repository.list_deals())),
            "timezone": settings.timezone,
        }
    except (OSError, ValueError) as exc:
        return {"healthy": False, "error": str(exc)}
