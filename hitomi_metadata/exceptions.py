"""
Custom exceptions for the Hitomi.la metadata source.

Error philosophy:
  - InvalidAddressError    → FAIL HARD: the address was never eligible for extraction.
  - FetchError             → FAIL HARD: the page could not be downloaded or parsed.
  - StructureMismatchError → FAIL HARD: the gallery markup is not shaped as expected.
  - NoPagesFoundError      → FAIL HARD: the preview script listed no content pages.

There is no partial-record mode.  Every stage raises immediately and the
error reaches the caller unchanged, because incomplete catalog metadata is
worse than no metadata.
"""

from typing import Optional


class HitomiSourceError(Exception):
    """Base exception for all metadata source errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_response(self) -> dict:
        """Convert to the JSON error entry used by run_extractor.py."""
        return {
            "error": type(self).__name__,
            "message": self.message,
            "details": self.details
        }


class InvalidAddressError(HitomiSourceError):
    """Raised when an address does not identify a Hitomi.la gallery or reader page."""

    def __init__(self, message: str, address: str, details: Optional[dict] = None):
        super().__init__(message, details)
        self.address = address


class FetchError(HitomiSourceError):
    """
    Raised when the gallery document cannot be retrieved or parsed.

    Wraps network errors, non-2xx responses and tree-builder failures.
    The core never retries.
    """

    def __init__(
        self,
        message: str,
        address: str,
        status_code: Optional[int] = None,
        details: Optional[dict] = None
    ):
        super().__init__(message, details)
        self.address = address
        self.status_code = status_code  # None for transport or parse failures


class StructureMismatchError(HitomiSourceError):
    """Raised when an expected element (container, heading, table, row) is missing."""

    def __init__(self, message: str, field: str, details: Optional[dict] = None):
        super().__init__(message, details)
        # Semantic field name, e.g. "language", so breakage is easy to localize
        self.field = field


class NoPagesFoundError(HitomiSourceError):
    """Raised when the embedded preview script yields no content pages."""
    pass
