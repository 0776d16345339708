"""Dataclasses shared between the ingestion, processing and dashboard layers."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

REQUIRED_TEXT_FIELDS = ("name", "address", "city", "country")
FLOAT_FIELDS = ("latitude", "longitude", "rating")
INT_FIELDS = ("reviews", "row_number")


@dataclass(frozen=True)
class Listing:
    """One co-working-space directory record."""

    name: str
    address: str
    city: str
    country: str
    state: Optional[str] = None
    region: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    category: Optional[str] = None
    types: Optional[str] = None
    rating: Optional[float] = None
    reviews: Optional[int] = None
    open_state: Optional[str] = None
    operating_hours: Optional[str] = None
    accessibility_features: Optional[str] = None
    amenities: Optional[str] = None
    parking_options: Optional[str] = None
    crowd_info: Optional[str] = None
    from_business: Optional[str] = None
    thumbnail: Optional[str] = None
    place_id: Optional[str] = None
    search_query: Optional[str] = None
    search_timestamp: Optional[str] = None
    row_number: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)
    source_columns: Tuple[str, ...] = field(default=(), compare=False, repr=False)

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "Listing":
        """Coerce a raw CSV/JSON/Parquet row into a Listing.

        Blank strings and NaN become ``None``; numbers that fail to parse are
        treated as absent. Columns that are not Listing fields land in
        ``extra`` so the original row shape can be reproduced on export.
        """

        known = _field_names()
        values: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}
        for key, raw in row.items():
            key = str(key)
            if key not in known:
                extra[key] = None if _is_missing(raw) else raw
                continue
            if key in FLOAT_FIELDS:
                values[key] = _to_float(raw)
            elif key in INT_FIELDS:
                values[key] = _to_int(raw)
            else:
                values[key] = _to_text(raw)
        for name in REQUIRED_TEXT_FIELDS:
            if values.get(name) is None:
                values[name] = ""
        return cls(**values, extra=extra, source_columns=tuple(str(key) for key in row.keys()))

    def to_dict(self) -> Dict[str, Any]:
        """Return the record as an ordered mapping of column -> value."""

        if self.source_columns:
            known = _field_names()
            return {
                column: getattr(self, column) if column in known else self.extra.get(column)
                for column in self.source_columns
            }
        data = {name: getattr(self, name) for name in _field_names()}
        data.update(self.extra)
        return data

    @property
    def has_coordinates(self) -> bool:
        return _is_number(self.latitude) and _is_number(self.longitude)


@dataclass(frozen=True)
class CityGroup:
    city: str
    state: Optional[str]
    country: str
    region: Optional[str]
    spaces: List[Listing]
    total_spaces: int


@dataclass(frozen=True)
class StateGroup:
    state: str
    country: str
    cities: List[CityGroup]
    total_cities: int
    total_spaces: int


@dataclass(frozen=True)
class CountryGroup:
    country: str
    states: List[StateGroup]
    cities: List[CityGroup]
    total_states: int
    total_cities: int
    total_spaces: int


@dataclass(frozen=True)
class CityCount:
    city: str
    count: int


@dataclass(frozen=True)
class CountryCount:
    country: str
    count: int


@dataclass(frozen=True)
class DashboardStats:
    """Snapshot of the headline metrics shown on the dashboard."""

    total_spaces: int
    total_cities: int
    total_countries: int
    average_rating: float
    spaces_with_high_rating: int
    spaces_currently_open: int
    wheelchair_accessible: int
    women_owned: int
    lgbtq_friendly: int
    top_cities: List[CityCount]
    country_distribution: List[CountryCount]


DuplicateGroup = List[Listing]


class DetectionMethod(str, Enum):
    PLACE_ID = "place_id"
    NAME_ADDRESS = "name_address"
    COORDINATES = "coordinates"


@dataclass(frozen=True)
class UploadMetadata:
    id: str
    filename: str
    timestamp: datetime
    record_count: int
    processing_time: float
    status: str = "success"  # success | processing | failed


@dataclass(frozen=True)
class LocationQuery:
    """A city the workflow backend should search for co-working spaces."""

    city: str
    state: str
    country: str
    region: str = ""
    search_query: str = ""

    def to_payload(self) -> Dict[str, str]:
        return {
            "city": self.city,
            "state": self.state,
            "country": self.country,
            "region": self.region,
            "search_query": self.search_query or default_search_query(self.city, self.state),
        }


def default_search_query(city: str, state: str) -> str:
    return f"coworking space in {city}, {state}"


def _field_names() -> Tuple[str, ...]:
    return tuple(f.name for f in fields(Listing) if f.name not in ("extra", "source_columns"))


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and not math.isnan(value)


def _to_text(value: Any) -> Optional[str]:
    if _is_missing(value):
        return None
    return value if isinstance(value, str) else str(value)


def _to_float(value: Any) -> Optional[float]:
    if _is_missing(value) or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number


def _to_int(value: Any) -> Optional[int]:
    number = _to_float(value)
    if number is None or math.isinf(number):
        return None
    return int(number)
