"""Duplicate detection over a flat listing snapshot."""

from __future__ import annotations

import logging
from typing import Any, List, Sequence, Set, Union

from cowork.common.geo import DEFAULT_THRESHOLD_DEGREES, ProximityMatcher
from cowork.common.models import DetectionMethod, DuplicateGroup, Listing
from cowork.processing.grouping import group_by

logger = logging.getLogger(__name__)


def detect_duplicates(
    listings: Sequence[Listing],
    method: Union[DetectionMethod, str],
    threshold: float = DEFAULT_THRESHOLD_DEGREES,
) -> List[DuplicateGroup]:
    """Return groups of two or more listings judged equivalent by ``method``.

    The first listing of every group is the one a keep-first removal keeps.
    Unknown methods yield an empty list.
    """

    try:
        method = DetectionMethod(method)
    except ValueError:
        logger.debug("Unknown duplicate detection method %r", method)
        return []

    if method is DetectionMethod.PLACE_ID:
        groups = _detect_by_place_id(listings)
    elif method is DetectionMethod.NAME_ADDRESS:
        groups = _detect_by_name_address(listings)
    else:
        groups = _detect_by_coordinates(listings, ProximityMatcher(threshold))
    logger.debug("Found %d duplicate groups by %s", len(groups), method.value)
    return groups


def _detect_by_place_id(listings: Sequence[Listing]) -> List[DuplicateGroup]:
    grouped = group_by((item for item in listings if item.place_id), lambda item: item.place_id)
    return [members for members in grouped.values() if len(members) > 1]


def _normalize(value: Any) -> str:
    if not isinstance(value, str):
        value = str(value or "")
    return value.lower().strip()


def _detect_by_name_address(listings: Sequence[Listing]) -> List[DuplicateGroup]:
    grouped = group_by(listings, lambda item: (_normalize(item.name), _normalize(item.address)))
    return [members for members in grouped.values() if len(members) > 1]


def _detect_by_coordinates(listings: Sequence[Listing], matcher: ProximityMatcher) -> List[DuplicateGroup]:
    # Candidates are compared with the cluster's seed only, never with members
    # added later, so clusters are not transitive.
    located = [item for item in listings if item.has_coordinates]
    processed: Set[int] = set()
    groups: List[DuplicateGroup] = []
    for index, seed in enumerate(located):
        if index in processed:
            continue
        processed.add(index)
        cluster = [seed]
        for other_index, other in enumerate(located):
            if other_index in processed:
                continue
            if matcher.matches(seed, other):
                cluster.append(other)
                processed.add(other_index)
        if len(cluster) > 1:
            groups.append(cluster)
    return groups


def rows_to_remove(group: DuplicateGroup, keep_first: bool = True) -> List[int]:
    """Row numbers to delete for one group; members without one are skipped."""

    members = group[1:] if keep_first else group
    return [item.row_number for item in members if item.row_number]


def collect_duplicate_rows(groups: Sequence[DuplicateGroup]) -> List[int]:
    """Keep-first row numbers across every group, in group order."""

    rows: List[int] = []
    for group in groups:
        rows.extend(rows_to_remove(group, keep_first=True))
    return rows
