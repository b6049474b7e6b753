"""
IR Enums: Labels and status codes shared by passes and results.
"""

from enum import Enum


class MarkerKind(str, Enum):
    """Airport marker kinds."""

    ICAO = "icao"      # ##ABCD
    IATA = "iata"      # #ABC


class ClockFormat(str, Enum):
    """Clock marker tokens: 24-hour and 12-hour rendering."""

    T24 = "T24"
    T12 = "T12"


class DiagnosticLevel(str, Enum):
    """Diagnostic severity levels."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class TransformStatus(str, Enum):
    """Overall conversion status."""

    SUCCESS = "success"
    ERROR = "error"
