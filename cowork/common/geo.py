"""Geospatial helpers for coordinate-proximity matching."""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

from .models import Listing

KM_PER_DEGREE = 111.0  # Approx conversion for small areas
DEFAULT_THRESHOLD_DEGREES = 0.0001


class ProximityMatcher:
    """Decides whether two listings sit on (practically) the same spot."""

    def __init__(self, threshold_degrees: float = DEFAULT_THRESHOLD_DEGREES) -> None:
        self.threshold_degrees = max(float(threshold_degrees), 0.0)

    @property
    def threshold_meters(self) -> float:
        return self.threshold_degrees * KM_PER_DEGREE * 1000

    def matches(self, seed: Listing, other: Listing) -> bool:
        # Per-axis box test, not a great-circle distance.
        lat_diff = abs(seed.latitude - other.latitude)
        lon_diff = abs(seed.longitude - other.longitude)
        return lat_diff < self.threshold_degrees and lon_diff < self.threshold_degrees


def map_center(listings: Iterable[Listing]) -> Optional[Tuple[float, float]]:
    """Mean latitude/longitude of the listings that carry coordinates."""

    points = [(item.latitude, item.longitude) for item in listings if item.has_coordinates]
    if not points:
        return None
    lat = sum(point[0] for point in points) / len(points)
    lon = sum(point[1] for point in points) / len(points)
    return round(lat, 6), round(lon, 6)
