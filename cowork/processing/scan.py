"""Command-line duplicate scan over the co-working directory."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from cowork.common.config import AppConfig, load_config
from cowork.common.errors import CoworkError
from cowork.common.logging_setup import setup_logging
from cowork.common.models import DetectionMethod, DuplicateGroup, Listing
from cowork.ingest.api_client import WorkflowClient
from cowork.ingest.csv_loader import load_listings_csv
from cowork.ingest.store import ListingStore
from cowork.processing.duplicates import collect_duplicate_rows, detect_duplicates, rows_to_remove
from cowork.processing.export import export_to_csv
from cowork.processing.stats import calculate_dashboard_stats

logger = logging.getLogger(__name__)


def load_listings(config: AppConfig, source: str, csv_path: Optional[str] = None) -> List[Listing]:
    if source == "api":
        return WorkflowClient.from_config(config.api).fetch_spaces()
    if source == "store":
        return ListingStore(config.store.base_path).all_listings()
    if source == "csv":
        if not csv_path:
            raise ValueError("--csv must be set when --source is csv.")
        return load_listings_csv(csv_path)
    raise ValueError(f"Unknown source: {source}")


def print_report(listings: Sequence[Listing], groups: Sequence[DuplicateGroup], method: str) -> None:
    stats = calculate_dashboard_stats(listings)
    print(
        f"{stats.total_spaces} spaces in {stats.total_cities} cities across "
        f"{stats.total_countries} countries (avg rating {stats.average_rating})"
    )
    print(f"Found {len(groups)} duplicate {'group' if len(groups) == 1 else 'groups'} by {method}")
    for index, group in enumerate(groups, start=1):
        original = group[0]
        print(f"  [{index}] {original.name} - {original.address} ({len(group)} entries)")
        for duplicate in group[1:]:
            print(f"      duplicate: {duplicate.name} - {duplicate.address} (row {duplicate.row_number})")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Scan co-working listings for duplicates.")
    parser.add_argument("--config", default=None, help="Path to YAML config.")
    parser.add_argument("--source", choices=("api", "store", "csv"), default="api", help="Where to load listings from.")
    parser.add_argument("--csv", default=None, help="Listing CSV path when --source is csv.")
    parser.add_argument(
        "--method",
        choices=[method.value for method in DetectionMethod],
        default=None,
        help="Duplicate detection strategy.",
    )
    parser.add_argument("--threshold", type=float, default=None, help="Coordinate threshold in degrees.")
    parser.add_argument("--export", default=None, help="Write the loaded listings to this CSV path.")
    parser.add_argument("--remove", action="store_true", help="Delete duplicates through the workflow backend.")
    parser.add_argument("--keep-none", action="store_true", help="With --remove, delete every member of each group.")
    args = parser.parse_args(argv)

    config = load_config(args.config)
    setup_logging(config.logging.level, config.logging.file)
    method = args.method or config.duplicates.default_method
    threshold = args.threshold if args.threshold is not None else config.duplicates.coordinate_threshold

    try:
        listings = load_listings(config, args.source, args.csv)
        groups = detect_duplicates(listings, method, threshold)
        print_report(listings, groups, method)

        if args.export:
            Path(args.export).write_text(export_to_csv(listings), encoding="utf-8")
            print(f"Exported {len(listings)} spaces to {args.export}")

        if args.remove:
            if args.keep_none:
                rows = [row for group in groups for row in rows_to_remove(group, keep_first=False)]
            else:
                rows = collect_duplicate_rows(groups)
            if not rows:
                print("No row numbers available for deletion.")
                return 1
            client = WorkflowClient.from_config(config.api)
            client.delete_rows(rows)
            print(f"Removed {len(rows)} duplicate{'s' if len(rows) > 1 else ''} from {len(groups)} groups")
            refreshed = client.fetch_spaces()
            print_report(refreshed, detect_duplicates(refreshed, method, threshold), method)
    except (CoworkError, ValueError) as exc:
        logger.error("Scan failed: %s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
