"""Serialize listings back to CSV text."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Sequence, Union

from cowork.common.models import Listing

Row = Union[Listing, Mapping[str, Any]]


def _as_dict(item: Row) -> Dict[str, Any]:
    if isinstance(item, Listing):
        return item.to_dict()
    return dict(item)


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    text = str(value)
    if isinstance(value, str) and "," in text:
        # Embedded quotes are left as-is.
        return f'"{text}"'
    return text


def export_to_csv(listings: Sequence[Row]) -> str:
    """Render listings as CSV, using the first listing's columns as the header.

    Later rows are read against that header; keys they add are dropped and
    keys they lack come out empty.
    """

    if not listings:
        return ""

    rows = [_as_dict(item) for item in listings]
    headers = list(rows[0].keys())
    lines = [",".join(headers)]
    for row in rows:
        lines.append(",".join(_format_value(row.get(header)) for header in headers))
    return "\n".join(lines)
