"""
TransformContext: Mutable state passed between pipeline passes.

Each pass reads prior artifacts and mutates only its allowed fields.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional
from uuid import uuid4

from itinerary.ir.enums import DiagnosticLevel, TransformStatus
from itinerary.ir.schema import ConversionStats, Diagnostic, TraceEntry, TransformResult


@dataclass
class TransformRequest:
    """Input to the conversion pipeline."""

    text: str
    lookup: Mapping[str, str]
    workers: int = 1
    request_id: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.request_id is None:
            self.request_id = str(uuid4())


@dataclass
class TransformContext:
    """
    Mutable context passed through pipeline passes.

    Each pass may read all fields but should only mutate
    the fields it is responsible for.
    """

    # Input
    request: TransformRequest
    raw_text: str
    normalized_text: str = ""

    # Working lines (set by p10_split_lines, rewritten in place by p20/p30)
    lines: list[str] = field(default_factory=list)

    # Unknown airport markers, kept verbatim in the output
    unresolved_codes: list[str] = field(default_factory=list)
    stats: ConversionStats = field(default_factory=ConversionStats)

    # Trace and diagnostics
    trace: list[TraceEntry] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    # Output
    rendered_text: Optional[str] = None
    status: TransformStatus = TransformStatus.SUCCESS

    # Internal
    start_time: datetime = field(default_factory=datetime.now)
    error: Optional[Exception] = None

    @property
    def lookup(self) -> Mapping[str, str]:
        return self.request.lookup

    @property
    def workers(self) -> int:
        return self.request.workers

    @classmethod
    def from_request(cls, request: TransformRequest) -> "TransformContext":
        """Create a context from a transform request."""
        return cls(
            request=request,
            raw_text=request.text,
        )

    def add_trace(self, pass_name: str, action: str, **kwargs: Any) -> None:
        """Add a trace entry."""
        self.trace.append(
            TraceEntry(
                id=str(uuid4()),
                timestamp=datetime.now(),
                pass_name=pass_name,
                action=action,
                before=kwargs.get("before"),
                after=kwargs.get("after"),
            )
        )

    def add_diagnostic(
        self,
        level: str,
        code: str,
        message: str,
        source: str,
    ) -> None:
        """Add a diagnostic message."""
        self.diagnostics.append(
            Diagnostic(
                id=str(uuid4()),
                level=DiagnosticLevel(level),
                code=code,
                message=message,
                source=source,
            )
        )

    def to_result(self) -> TransformResult:
        """Convert context to final TransformResult."""
        duration_ms = (datetime.now() - self.start_time).total_seconds() * 1000
        return TransformResult(
            request_id=self.request.request_id or str(uuid4()),
            timestamp=self.start_time,
            processing_duration_ms=duration_ms,
            line_count=len(self.lines),
            unresolved_codes=self.unresolved_codes,
            stats=self.stats,
            trace=self.trace,
            diagnostics=self.diagnostics,
            rendered_text=self.rendered_text,
            status=self.status,
        )
