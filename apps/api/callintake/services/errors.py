"""Errors that map directly onto an HTTP response body of ``{"error": ...}``."""
from __future__ import annotations


class RequestRejected(Exception):
    """Raised when a request cannot be processed; carries the HTTP outcome."""

    def __init__(self, status_code: int, error: str) -> None:
        super().__init__(error)
        self.status_code = status_code
        self.error = error
