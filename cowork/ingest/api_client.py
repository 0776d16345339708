"""HTTP client for the workflow backend that scrapes and stores listings."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

import requests
from requests import Response

from cowork.common.config import ApiConfig
from cowork.common.errors import NetworkError
from cowork.common.models import Listing, LocationQuery

logger = logging.getLogger(__name__)


class WorkflowClient:
    """Fetch, trigger and delete listings through the backend webhooks.

    Calls are made once; callers own any retry or refresh sequencing.
    """

    def __init__(
        self,
        base_url: str,
        spaces_path: str = ApiConfig.spaces_path,
        process_path: str = ApiConfig.process_path,
        delete_path: str = ApiConfig.delete_path,
        timeout: float = ApiConfig.timeout_seconds,
        fetch_limit: int = ApiConfig.fetch_limit,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.spaces_path = spaces_path
        self.process_path = process_path
        self.delete_path = delete_path
        self.timeout = timeout
        self.fetch_limit = fetch_limit
        self.session = session or requests.Session()
        self.session.headers.setdefault("Accept", "application/json")

    @classmethod
    def from_config(cls, config: ApiConfig, session: Optional[requests.Session] = None) -> "WorkflowClient":
        return cls(
            config.base_url,
            spaces_path=config.spaces_path,
            process_path=config.process_path,
            delete_path=config.delete_path,
            timeout=config.timeout_seconds,
            fetch_limit=config.fetch_limit,
            session=session,
        )

    def fetch_spaces(self) -> List[Listing]:
        data = self._request("GET", self.spaces_path, params={"limit": self.fetch_limit})
        if isinstance(data, dict):
            data = data.get("data") or data.get("spaces") or []
        if not isinstance(data, list):
            raise NetworkError("Unexpected response shape from spaces endpoint")
        listings = [Listing.from_mapping(row) for row in data if isinstance(row, dict)]
        logger.info("Fetched %d listings from %s", len(listings), self.base_url)
        return listings

    def process_locations(self, queries: Iterable[LocationQuery]) -> Dict[str, Any]:
        cities = [query.to_payload() for query in queries]
        logger.info("Submitting %d locations for processing", len(cities))
        return self._request("POST", self.process_path, json={"cities": cities})

    def process_location(self, query: LocationQuery) -> Dict[str, Any]:
        return self._request("POST", self.process_path, json=query.to_payload())

    def start_default_workflow(self) -> Dict[str, Any]:
        return self._request("POST", self.process_path, json={"command": "start"})

    def delete_rows(self, row_numbers: Iterable[int]) -> Dict[str, Any]:
        rows = [int(row) for row in row_numbers]
        if not rows:
            raise ValueError("No row numbers available for deletion.")
        result = self._request("POST", self.delete_path, json={"row_numbers": rows})
        logger.info("Deleted %d rows", len(rows))
        return result

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            raise NetworkError(f"Could not reach {url}: {exc}") from exc

        if not response.ok:
            message = _error_message(response) or f"{method} {path} failed"
            logger.error("%s %s returned %s: %s", method, url, response.status_code, message)
            raise NetworkError(message, status_code=response.status_code)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise NetworkError(f"Invalid JSON from {url}") from exc


def _error_message(response: Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return body.get("error") or body.get("message")
    return None
