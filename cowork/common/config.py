"""Configuration helpers for the co-working directory dashboard."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from .geo import DEFAULT_THRESHOLD_DEGREES

DEFAULT_CONFIG_PATH = "config/local.yaml"


@dataclass(frozen=True)
class ApiConfig:
    """Workflow backend endpoints."""

    base_url: str = "http://localhost:5678"
    spaces_path: str = "/webhook/coworking-spaces"
    process_path: str = "/webhook/process-data"
    delete_path: str = "/webhook/delete-rows"
    timeout_seconds: float = 30.0
    fetch_limit: int = 5000


@dataclass(frozen=True)
class StoreConfig:
    """Where the local listing store keeps its Parquet files."""

    base_path: str = "./data/store"


@dataclass(frozen=True)
class DuplicateConfig:
    """Duplicate scan defaults."""

    default_method: str = "place_id"  # place_id | name_address | coordinates
    coordinate_threshold: float = DEFAULT_THRESHOLD_DEGREES


@dataclass(frozen=True)
class DashboardConfig:
    """Dashboard defaults."""

    top_cities: int = 10
    default_page: str = "Dashboard"


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    file: Optional[str] = None


@dataclass(frozen=True)
class AppConfig:
    """Aggregated configuration model."""

    api: ApiConfig
    store: StoreConfig
    duplicates: DuplicateConfig
    dashboard: DashboardConfig
    logging: LoggingConfig


def load_config(path: str | Path | None = None) -> AppConfig:
    """Parse a YAML config file into an AppConfig dataclass.

    A missing file yields the defaults. ``COWORK_API_URL`` overrides the
    backend base URL.
    """

    path = Path(path or os.environ.get("COWORK_CONFIG", DEFAULT_CONFIG_PATH))
    raw = _load_yaml(path) if path.exists() else {}
    api_cfg = raw.get("api") or {}
    store_cfg = raw.get("store") or {}
    duplicates_cfg = raw.get("duplicates") or {}
    dashboard_cfg = raw.get("dashboard") or {}
    logging_cfg = raw.get("logging") or {}

    api = ApiConfig(
        base_url=str(os.environ.get("COWORK_API_URL") or api_cfg.get("base_url", ApiConfig.base_url)),
        spaces_path=str(api_cfg.get("spaces_path", ApiConfig.spaces_path)),
        process_path=str(api_cfg.get("process_path", ApiConfig.process_path)),
        delete_path=str(api_cfg.get("delete_path", ApiConfig.delete_path)),
        timeout_seconds=float(api_cfg.get("timeout_seconds", ApiConfig.timeout_seconds)),
        fetch_limit=int(api_cfg.get("fetch_limit", ApiConfig.fetch_limit)),
    )
    store = StoreConfig(base_path=str(store_cfg.get("base_path", StoreConfig.base_path)))
    duplicates = DuplicateConfig(
        default_method=str(duplicates_cfg.get("default_method", DuplicateConfig.default_method)),
        coordinate_threshold=float(
            duplicates_cfg.get("coordinate_threshold", DuplicateConfig.coordinate_threshold)
        ),
    )
    dashboard = DashboardConfig(
        top_cities=int(dashboard_cfg.get("top_cities", DashboardConfig.top_cities)),
        default_page=str(dashboard_cfg.get("default_page", DashboardConfig.default_page)),
    )
    logging = LoggingConfig(
        level=str(logging_cfg.get("level", LoggingConfig.level)).upper(),
        file=logging_cfg.get("file"),
    )
    return AppConfig(api=api, store=store, duplicates=duplicates, dashboard=dashboard, logging=logging)


def _load_yaml(path: str | Path) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a top-level mapping.")
    return data
