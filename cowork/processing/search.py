"""Free-text filters used by the listing and city views."""

from __future__ import annotations

from typing import List, Optional, Sequence

from cowork.common.models import CityGroup, Listing


def _matches(query: str, *values: Optional[str]) -> bool:
    return any(isinstance(value, str) and query in value.lower() for value in values)


def filter_listings(listings: Sequence[Listing], query: str) -> List[Listing]:
    if not query:
        return list(listings)
    query = query.lower()
    return [item for item in listings if _matches(query, item.name, item.address, item.city, item.country)]


def filter_cities(groups: Sequence[CityGroup], query: str) -> List[CityGroup]:
    if not query:
        return list(groups)
    query = query.lower()
    return [group for group in groups if _matches(query, group.city, group.state, group.country)]
