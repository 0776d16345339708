"""Persist listings and upload history as Parquet tables."""

from __future__ import annotations

import logging
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional, Sequence

import pandas as pd

from cowork.common.errors import StoreError
from cowork.common.models import Listing, UploadMetadata

logger = logging.getLogger(__name__)

SPACES_TABLE = "spaces.parquet"
UPLOADS_TABLE = "uploads.parquet"
UPLOAD_ID_COLUMN = "upload_id"


class ListingStore:
    """Local listing store keyed by ``place_id``, with upload history."""

    def __init__(self, base_path: str | Path) -> None:
        self.base_path = Path(base_path)

    @property
    def spaces_path(self) -> Path:
        return self.base_path / SPACES_TABLE

    @property
    def uploads_path(self) -> Path:
        return self.base_path / UPLOADS_TABLE

    def save_listings(self, listings: Sequence[Listing], upload_id: str) -> int:
        """Upsert listings by place_id; returns how many rows were written."""

        rows = []
        for listing in listings:
            if not listing.place_id:
                continue
            row = listing.to_dict()
            row[UPLOAD_ID_COLUMN] = upload_id
            rows.append(row)
        skipped = len(listings) - len(rows)
        if skipped:
            logger.warning("Skipped %d listings without place_id", skipped)
        if not rows:
            return 0

        incoming = pd.DataFrame(rows)
        existing = self._read(self.spaces_path)
        combined = pd.concat([existing, incoming], ignore_index=True) if not existing.empty else incoming
        combined = combined.drop_duplicates(subset=["place_id"], keep="last")
        self._write(combined, self.spaces_path)
        logger.info("Stored %d listings for upload %s", len(rows), upload_id)
        return len(rows)

    def save_upload(self, metadata: UploadMetadata) -> None:
        incoming = pd.DataFrame([asdict(metadata)])
        existing = self._read(self.uploads_path)
        combined = pd.concat([existing, incoming], ignore_index=True) if not existing.empty else incoming
        combined = combined.drop_duplicates(subset=["id"], keep="last")
        self._write(combined, self.uploads_path)

    def all_listings(self) -> List[Listing]:
        frame = self._read(self.spaces_path)
        if frame.empty:
            return []
        frame = frame.drop(columns=[UPLOAD_ID_COLUMN], errors="ignore")
        return [Listing.from_mapping(row) for row in frame.to_dict(orient="records")]

    def listings_by_city(self, city: str) -> List[Listing]:
        return [item for item in self.all_listings() if item.city == city]

    def listings_by_country(self, country: str) -> List[Listing]:
        return [item for item in self.all_listings() if item.country == country]

    def all_uploads(self) -> List[UploadMetadata]:
        frame = self._read(self.uploads_path)
        if frame.empty:
            return []
        frame = frame.sort_values("timestamp")
        return [
            UploadMetadata(
                id=str(row["id"]),
                filename=str(row["filename"]),
                timestamp=pd.Timestamp(row["timestamp"]).to_pydatetime(),
                record_count=int(row["record_count"]),
                processing_time=float(row["processing_time"]),
                status=str(row["status"]),
            )
            for row in frame.to_dict(orient="records")
        ]

    def latest_upload(self) -> Optional[UploadMetadata]:
        uploads = self.all_uploads()
        return uploads[-1] if uploads else None

    def clear(self) -> None:
        for path in (self.spaces_path, self.uploads_path):
            if path.exists():
                path.unlink()
        logger.info("Cleared listing store at %s", self.base_path)

    def _read(self, path: Path) -> pd.DataFrame:
        if not path.exists():
            return pd.DataFrame()
        try:
            return pd.read_parquet(path)
        except (OSError, TypeError, ValueError) as exc:
            raise StoreError(f"Could not read {path}: {exc}") from exc

    def _write(self, frame: pd.DataFrame, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            frame.to_parquet(path, index=False)
        except (OSError, TypeError, ValueError) as exc:
            raise StoreError(f"Could not write {path}: {exc}") from exc
