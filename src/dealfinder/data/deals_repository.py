"""Data access helpers for establishments and their happy hour deals."""

from __future__ import annotations

import csv
import functools
import logging
import math
from pathlib import Path
from typing import Iterable, Optional, Protocol

from ..config import settings
from ..models.domain import CandidateDeal, Deal, Establishment


class DealRepository(Protocol):
    """Supplies establishments and deals to the query layer."""

    def list_establishments(self) -> Iterable[Establishment]: ...

    def get_establishment(self, establishment_id: int) -> Optional[Establishment]: ...

    def list_deals(self) -> Iterable[Deal]: ...

    def deals_for_establishment(self, establishment_id: int) -> list[Deal]: ...

    def candidates(self) -> list[CandidateDeal]: ...


def _coerce_float(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    text = str(value).strip().replace(",", "").lstrip("$")
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if math.isnan(number):
        return None
    return number


def _coerce_int(value: Optional[str]) -> Optional[int]:
    number = _coerce_float(value)
    if number is None:
        return None
    return int(number)


def _text(row: dict, *keys: str) -> Optional[str]:
    for key in keys:
        value = row.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return None


class InMemoryDealRepository:
    """Dictionary-backed store with auto-incrementing ids."""

    def __init__(self) -> None:
        self._establishments: dict[int, Establishment] = {}
        self._deals: dict[int, Deal] = {}
        self._next_establishment_id = 1
        self._next_deal_id = 1

    def add_establishment(
        self,
        name: str,
        latitude: Optional[float],
        longitude: Optional[float],
        *,
        establishment_id: Optional[int] = None,
        **details,
    ) -> Establishment:
        if establishment_id is None:
            establishment_id = self._next_establishment_id
        elif establishment_id in self._establishments:
            raise ValueError(f"Establishment id {establishment_id} is already taken")
        self._next_establishment_id = max(self._next_establishment_id, establishment_id + 1)
        establishment = Establishment(
            establishment_id=establishment_id,
            name=name,
            latitude=latitude,
            longitude=longitude,
            **details,
        )
        self._establishments[establishment_id] = establishment
        return establishment

    def add_deal(
        self,
        establishment_id: int,
        drink_name: str,
        valid_days: str,
        hh_start_time: str,
        hh_end_time: str,
        *,
        deal_id: Optional[int] = None,
        **details,
    ) -> Deal:
        if establishment_id not in self._establishments:
            raise KeyError(f"Unknown establishment {establishment_id}")
        if deal_id is None:
            deal_id = self._next_deal_id
        elif deal_id in self._deals:
            raise ValueError(f"Deal id {deal_id} is already taken")
        self._next_deal_id = max(self._next_deal_id, deal_id + 1)
        deal = Deal(
            deal_id=deal_id,
            establishment_id=establishment_id,
            drink_name=drink_name,
            valid_days=valid_days,
            hh_start_time=hh_start_time,
            hh_end_time=hh_end_time,
            **details,
        )
        self._deals[deal_id] = deal
        return deal

    def list_establishments(self) -> list[Establishment]:
        return list(self._establishments.values())

    def get_establishment(self, establishment_id: int) -> Optional[Establishment]:
        return self._establishments.get(establishment_id)

    def list_deals(self) -> list[Deal]:
        return list(self._deals.values())

    def deals_for_establishment(self, establishment_id: int) -> list[Deal]:
        return [deal for deal in self._deals.values() if deal.establishment_id == establishment_id]

    def candidates(self) -> list[CandidateDeal]:
        """Every deal bundled with its establishment's coordinate.

        Deals whose establishment is unknown are left out.
        """

        bundled: list[CandidateDeal] = []
        for deal in self._deals.values():
            establishment = self._establishments.get(deal.establishment_id)
            if establishment is None:
                logging.warning(f"Deal {deal.deal_id} references missing establishment {deal.establishment_id}")
                continue
            bundled.append(
                CandidateDeal(
                    window=deal.window,
                    coordinate=establishment.coordinate,
                    payload=(deal, establishment),
                )
            )
        return bundled

    @classmethod
    def load_from_csv(cls, establishments_path: Path, deals_path: Path) -> "InMemoryDealRepository":
        """Build a repository from the imported establishment and deal sheets."""

        repository = cls()
        for row in _read_rows(establishments_path):
            establishment_id = _coerce_int(_text(row, "id", "establishment_id", "establishmentId"))
            name = _text(row, "name", "Name")
            if establishment_id is None or not name:
                logging.warning(f"Skipping establishment row without id/name: {row}")
                continue
            try:
                repository.add_establishment(
                    name,
                    _coerce_float(_text(row, "latitude", "Latitude")),
                    _coerce_float(_text(row, "longitude", "Longitude")),
                    establishment_id=establishment_id,
                    address=_text(row, "address", "Address"),
                    city=_text(row, "city", "City"),
                    postal_code=_text(row, "postal_code", "postalCode"),
                    category=_text(row, "type", "category"),
                    rating=_coerce_float(_text(row, "rating", "Rating")),
                    raw=row,
                )
            except ValueError as exc:
                logging.warning(f"Skipping duplicate establishment row in {establishments_path}: {exc}")

        skipped = 0
        # rows with an explicit id claim it before rows without one are numbered
        deal_rows = _read_rows(deals_path)
        with_id = [row for row in deal_rows if _coerce_int(_text(row, "id", "deal_id")) is not None]
        without_id = [row for row in deal_rows if _coerce_int(_text(row, "id", "deal_id")) is None]
        for row in with_id + without_id:
            establishment_id = _coerce_int(_text(row, "establishment_id", "establishmentId"))
            if establishment_id is None or repository.get_establishment(establishment_id) is None:
                skipped += 1
                continue
            try:
                repository.add_deal(
                    establishment_id,
                    _text(row, "drink_name", "title") or "",
                    _text(row, "valid_days", "days") or "",
                    _text(row, "hh_start_time", "start_time") or "",
                    _text(row, "hh_end_time", "end_time") or "",
                    deal_id=_coerce_int(_text(row, "id", "deal_id")),
                    happy_hour_price=_coerce_float(_text(row, "happy_hour_price")),
                    standard_price=_coerce_float(_text(row, "standard_price")),
                    alcohol_category=_text(row, "alcohol_category"),
                    raw=row,
                )
            except ValueError as exc:
                logging.warning(f"Skipping duplicate deal row in {deals_path}: {exc}")
        if skipped:
            logging.warning(f"Skipped {skipped} deal rows with unknown establishments in {deals_path}")
        return repository


def _read_rows(path: Path) -> list[dict]:
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")
    with path.open(mode="r", encoding="utf-8-sig", newline="") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            raise ValueError(f"Data file '{path}' is missing a header row.")
        return list(reader)


@functools.lru_cache(maxsize=1)
def get_repository() -> DealRepository:
    """Repository backed by the configured CSV files, or an empty store when none exist."""

    if settings.establishments_file.exists() and settings.deals_file.exists():
        repository = InMemoryDealRepository.load_from_csv(settings.establishments_file, settings.deals_file)
        logging.info(
            f"Loaded {len(repository.list_establishments())} establishments and "
            f"{len(repository.list_deals())} deals from {settings.data_root}"
        )
        return repository
    logging.warning("Deal data files not found; starting with an empty repository")
    return InMemoryDealRepository()
