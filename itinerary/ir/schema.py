"""
IR Schema: Pydantic models for conversion results.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from itinerary.ir.enums import DiagnosticLevel, TransformStatus

RESULT_VERSION = "0.1.0"


class TraceEntry(BaseModel):
    """A single transformation trace entry."""

    id: str
    timestamp: datetime
    pass_name: str
    action: str
    before: Optional[str] = None
    after: Optional[str] = None


class Diagnostic(BaseModel):
    """A diagnostic message."""

    id: str
    level: DiagnosticLevel
    code: str
    message: str
    source: str


class ConversionStats(BaseModel):
    """Counts of substitutions made during a run."""

    airports_resolved: int = 0
    clocks_rewritten: int = 0
    dates_rewritten: int = 0


class TransformResult(BaseModel):
    """The complete output of one itinerary conversion."""

    version: str = Field(default=RESULT_VERSION, description="Result schema version")
    request_id: str = Field(..., description="Unique conversion ID")
    timestamp: datetime = Field(..., description="When the conversion started")
    processing_duration_ms: float = Field(default=0.0)

    line_count: int = Field(default=0, description="Lines after normalization")
    unresolved_codes: list[str] = Field(
        default_factory=list,
        description="Airport markers left intact because the code is unknown, in order of appearance",
    )
    stats: ConversionStats = Field(default_factory=ConversionStats)

    trace: list[TraceEntry] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    rendered_text: Optional[str] = Field(None, description="Converted document; absent on error")
    status: TransformStatus = TransformStatus.SUCCESS
