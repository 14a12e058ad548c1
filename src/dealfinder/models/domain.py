"""Domain models for establishments, deals and query results."""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Optional


class Weekday(IntEnum):
    """Calendar day, numbered like ``datetime.date.weekday()``."""

    MON = 0
    TUE = 1
    WED = 2
    THU = 3
    FRI = 4
    SAT = 5
    SUN = 6


class DealState(str, Enum):
    """Where a deal stands relative to a reference instant."""

    ACTIVE = "active"
    UPCOMING = "upcoming"
    FUTURE = "future"
    INACTIVE = "inactive"


@dataclass(frozen=True, slots=True)
class Coordinate:
    """Latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class DealWindow:
    """Day specification plus start/end time strings exactly as imported."""

    days: str
    start_time: str
    end_time: str


@dataclass(slots=True)
class CandidateDeal:
    """A deal window bundled with its establishment location.

    ``payload`` is handed back untouched in query results.
    """

    window: DealWindow
    coordinate: Optional[Coordinate]
    payload: Any = None


@dataclass(slots=True)
class ProximityItem:
    payload: Any
    distance_km: float
    state: DealState


@dataclass(slots=True)
class QueryResult:
    """Ordered result buckets returned by a proximity query."""

    active: list[ProximityItem] = field(default_factory=list)
    upcoming: list[ProximityItem] = field(default_factory=list)
    future: list[ProximityItem] = field(default_factory=list)

    def buckets(self) -> dict[DealState, list[ProximityItem]]:
        return {
            DealState.ACTIVE: self.active,
            DealState.UPCOMING: self.upcoming,
            DealState.FUTURE: self.future,
        }

    @property
    def is_empty(self) -> bool:
        return not (self.active or self.upcoming or self.future)


@dataclass(slots=True)
class Establishment:
    """A bar or restaurant offering deals."""

    establishment_id: int
    name: str
    latitude: Optional[float]
    longitude: Optional[float]
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    category: Optional[str] = None
    rating: Optional[float] = None
    raw: dict = field(default_factory=dict)

    @property
    def coordinate(self) -> Optional[Coordinate]:
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinate(self.latitude, self.longitude)


@dataclass(slots=True)
class Deal:
    """A happy hour offer as imported from the deals sheet."""

    deal_id: int
    establishment_id: int
    drink_name: str
    valid_days: str
    hh_start_time: str
    hh_end_time: str
    happy_hour_price: Optional[float] = None
    standard_price: Optional[float] = None
    alcohol_category: Optional[str] = None
    raw: dict = field(default_factory=dict)

    @property
    def window(self) -> DealWindow:
        return DealWindow(self.valid_days, self.hh_start_time, self.hh_end_time)

    @property
    def savings_percentage(self) -> Optional[float]:
        if not self.standard_price or self.happy_hour_price is None:
            return None
        return round((self.standard_price - self.happy_hour_price) / self.standard_price * 100, 1)
