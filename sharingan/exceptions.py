"""
Custom exceptions for the query pipeline.

These exceptions provide clear error categories for a query:
- SharinganError: Base exception for all pipeline errors
- TransportError: Network failures, timeouts and HTTP error statuses
- DecodeError: Malformed provider envelopes
- TeamNotFound: Team directory lookups that match nothing

An empty result is not an error and has no exception.
"""

from typing import Optional

# Upper bound on the input sample carried by DecodeError
SAMPLE_LIMIT = 1000


class SharinganError(Exception):
    """Base exception for all pipeline errors."""
    pass


class TransportError(SharinganError):
    """Failed to fetch a response from the provider."""

    def __init__(self, message: str, url: str = "", status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class DecodeError(SharinganError):
    """Provider response could not be decoded into the expected envelope."""

    def __init__(self, message: str, stage: str, raw: bytes = b""):
        super().__init__(message)
        self.stage = stage
        self.sample = bytes(raw[:SAMPLE_LIMIT])

    def __str__(self) -> str:
        sample = self.sample.decode("utf-8", errors="replace")
        return f"{self.args[0]} (stage: {self.stage}, sample: {sample!r})"


class TeamNotFound(SharinganError):
    """No directory entry matched the requested team."""

    def __init__(self, identifier: str, directory_size: int = 0):
        super().__init__(
            f"No team matching '{identifier}' among {directory_size} directory entries"
        )
        self.identifier = identifier
        self.directory_size = directory_size
