"""Load listing and location CSV files with pandas."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, List, Union

import pandas as pd

from cowork.common.models import Listing, LocationQuery, default_search_query

logger = logging.getLogger(__name__)

CsvSource = Union[str, Path, IO]
LOCATION_COLUMNS = ("city", "state", "country")


def read_csv(source: CsvSource) -> pd.DataFrame:
    """Read a header-row CSV keeping every column as text."""

    frame = pd.read_csv(source, dtype=str, keep_default_na=False, skipinitialspace=False)
    frame.columns = [str(column).strip() for column in frame.columns]
    return frame


def frame_to_listings(frame: pd.DataFrame) -> List[Listing]:
    return [Listing.from_mapping(row) for row in frame.to_dict(orient="records")]


def load_listings_csv(source: CsvSource) -> List[Listing]:
    """Parse an exported listing CSV into Listing records."""

    listings = frame_to_listings(read_csv(source))
    logger.info("Loaded %d listings from CSV", len(listings))
    return listings


def extract_location_queries(frame: pd.DataFrame) -> List[LocationQuery]:
    """Rows with city, state and country become backend search requests."""

    if any(column not in frame.columns for column in LOCATION_COLUMNS):
        logger.warning("Location CSV is missing one of the columns %s", ", ".join(LOCATION_COLUMNS))
        return []

    queries = []
    for row in frame.to_dict(orient="records"):
        city = (row.get("city") or "").strip()
        state = (row.get("state") or "").strip()
        country = (row.get("country") or "").strip()
        if not (city and state and country):
            continue
        queries.append(
            LocationQuery(
                city=city,
                state=state,
                country=country,
                region=(row.get("region") or "").strip(),
                search_query=(row.get("search_query") or "").strip() or default_search_query(city, state),
            )
        )
    skipped = len(frame) - len(queries)
    if skipped:
        logger.info("Skipped %d location rows without city/state/country", skipped)
    return queries


def load_locations_csv(source: CsvSource) -> List[LocationQuery]:
    return extract_location_queries(read_csv(source))
