"""
Errors: Exception hierarchy for fatal conversion failures.

Tolerated conditions (unknown codes, unparsable timestamps) never raise;
they pass the original text through.
"""

from typing import Optional


class ItineraryError(Exception):
    """Base error for this package."""


class LookupMalformedError(ItineraryError):
    """Raised when the airport reference table cannot be built."""

    def __init__(self, message: str, missing_columns: Optional[list[str]] = None):
        self.missing_columns = missing_columns or []
        super().__init__(message)


class MalformedDataError(ItineraryError):
    """Raised when a scanned airport marker violates the lookup invariants."""

    def __init__(self, message: str, code: str = ""):
        self.code = code
        super().__init__(message)
