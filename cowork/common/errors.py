"""Exceptions raised by the ingest collaborators."""

from typing import Optional


class CoworkError(Exception):
    """Base exception for the co-working directory"""


class NetworkError(CoworkError):
    """Workflow backend unreachable or answered with a failure"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        if status_code is not None:
            message = f"{message} (HTTP {status_code})"
        super().__init__(message)


class StoreError(CoworkError):
    """Local listing store could not be read or written"""
