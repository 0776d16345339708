"""Headline metrics for the dashboard overview."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from cowork.common.models import CityCount, CountryCount, DashboardStats, Listing
from cowork.processing.grouping import group_by_city, group_by_country

TOP_CITY_LIMIT = 10
HIGH_RATING = 4


def _contains(value: Optional[str], needle: str) -> bool:
    return isinstance(value, str) and needle in value.lower()


def _round_half_up(value: float) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _is_positive(value: Optional[float]) -> bool:
    return isinstance(value, (int, float)) and value > 0


def calculate_dashboard_stats(listings: Sequence[Listing], top_cities: int = TOP_CITY_LIMIT) -> DashboardStats:
    """Summarise a listing snapshot.

    City and country counts use exact string matching, so "NYC" and "nyc"
    are two cities.
    """

    rated = [item.rating for item in listings if _is_positive(item.rating)]
    average = _round_half_up(sum(rated) / len(rated)) if rated else 0

    high_rating = sum(1 for item in listings if _is_positive(item.rating) and item.rating >= HIGH_RATING)
    currently_open = sum(1 for item in listings if _contains(item.open_state, "open"))
    wheelchair = sum(1 for item in listings if _contains(item.accessibility_features, "wheelchair"))
    women_owned = sum(
        1
        for item in listings
        if _contains(item.from_business, "women-owned") or _contains(item.amenities, "women-owned")
    )
    lgbtq = sum(
        1 for item in listings if _contains(item.amenities, "lgbtq") or _contains(item.from_business, "lgbtq")
    )

    city_groups = group_by_city(listings)
    country_groups = group_by_country(listings)

    return DashboardStats(
        total_spaces=len(listings),
        total_cities=len({item.city for item in listings}),
        total_countries=len({item.country for item in listings}),
        average_rating=average,
        spaces_with_high_rating=high_rating,
        spaces_currently_open=currently_open,
        wheelchair_accessible=wheelchair,
        women_owned=women_owned,
        lgbtq_friendly=lgbtq,
        top_cities=[CityCount(city=group.city, count=group.total_spaces) for group in city_groups[:top_cities]],
        country_distribution=[
            CountryCount(country=group.country, count=group.total_spaces) for group in country_groups
        ],
    )
