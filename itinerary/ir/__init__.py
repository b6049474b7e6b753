"""
IR: Result models for itinerary conversions.
"""

from itinerary.ir.enums import (
    ClockFormat,
    DiagnosticLevel,
    MarkerKind,
    TransformStatus,
)
from itinerary.ir.schema import (
    ConversionStats,
    Diagnostic,
    TraceEntry,
    TransformResult,
)

__all__ = [
    # Enums
    "ClockFormat",
    "DiagnosticLevel",
    "MarkerKind",
    "TransformStatus",
    # Models
    "ConversionStats",
    "Diagnostic",
    "TraceEntry",
    "TransformResult",
]
