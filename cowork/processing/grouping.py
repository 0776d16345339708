"""Group flat listing lists into city, state and country buckets."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Hashable, Iterable, List, Sequence, TypeVar

from cowork.common.models import CityGroup, CountryGroup, Listing, StateGroup

logger = logging.getLogger(__name__)

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)

UNKNOWN_STATE = "Unknown"


def group_by(items: Iterable[T], key: Callable[[T], K]) -> Dict[K, List[T]]:
    """Bucket items by a computed key, keeping first-seen key order."""

    grouped: Dict[K, List[T]] = {}
    for item in items:
        grouped.setdefault(key(item), []).append(item)
    return grouped


def city_key(listing: Listing) -> tuple:
    return (listing.city or "", listing.state or "", listing.country or "")


def group_by_city(listings: Sequence[Listing]) -> List[CityGroup]:
    """One CityGroup per (city, state, country), largest first.

    Display fields come from the first member of each bucket; members are
    expected to agree on them because they share the key.
    """

    groups = []
    for members in group_by(listings, city_key).values():
        first = members[0]
        groups.append(
            CityGroup(
                city=first.city,
                state=first.state,
                country=first.country,
                region=first.region,
                spaces=members,
                total_spaces=len(members),
            )
        )
    groups.sort(key=lambda group: group.total_spaces, reverse=True)
    return groups


def group_by_country(listings: Sequence[Listing]) -> List[CountryGroup]:
    """Nest listings as country -> state -> city, largest first at every level."""

    countries = []
    for country, country_listings in group_by(listings, lambda item: item.country or "").items():
        states = []
        for state, state_listings in group_by(country_listings, lambda item: item.state or "").items():
            cities = group_by_city(state_listings)
            states.append(
                StateGroup(
                    state=state or UNKNOWN_STATE,
                    country=country,
                    cities=cities,
                    total_cities=len(cities),
                    total_spaces=len(state_listings),
                )
            )
        states.sort(key=lambda group: group.total_spaces, reverse=True)
        all_cities = group_by_city(country_listings)
        countries.append(
            CountryGroup(
                country=country,
                states=states,
                cities=all_cities,
                total_states=len(states),
                total_cities=len(all_cities),
                total_spaces=len(country_listings),
            )
        )
    countries.sort(key=lambda group: group.total_spaces, reverse=True)
    logger.debug("Grouped %d listings into %d countries", len(listings), len(countries))
    return countries
