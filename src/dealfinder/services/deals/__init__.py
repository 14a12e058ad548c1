"""Deal classification and nearby queries."""

from .classifier import classify_deal, is_active, status_display
from .proximity import establishment_deals, nearby_establishments, query

__all__ = [
    "classify_deal",
    "is_active",
    "status_display",
    "query",
    "nearby_establishments",
    "establishment_deals",
]
