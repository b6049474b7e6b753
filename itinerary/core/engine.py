"""
Engine: Pipeline orchestration.

The engine selects a pipeline, runs passes in order,
stops at the first failing pass, and packages output.

The engine is NOT where domain logic lives.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Callable, Optional

from itinerary.core.context import TransformContext, TransformRequest
from itinerary.core.logging import TransformLogger
from itinerary.ir.schema import TransformResult
from itinerary.ir.enums import TransformStatus


# Type alias for a pass function
PassFn = Callable[[TransformContext], TransformContext]


@dataclass
class Pipeline:
    """A named sequence of passes."""

    id: str
    name: str
    passes: list[PassFn]


def default_pipeline() -> Pipeline:
    """The normalize → split → scan → rewrite → package pipeline."""
    from itinerary.passes import (
        normalize,
        package,
        rewrite_datetimes,
        split_lines,
        substitute_airport_codes,
    )

    return Pipeline(
        id="default",
        name="Default Itinerary Pipeline",
        passes=[
            normalize,
            split_lines,
            substitute_airport_codes,
            rewrite_datetimes,
            package,
        ],
    )


class Engine:
    """
    Pipeline orchestrator.

    Runs passes in order, handles errors, and packages results.
    """

    def __init__(self) -> None:
        self._pipelines: dict[str, Pipeline] = {}

    def register_pipeline(self, pipeline: Pipeline) -> None:
        """Register a pipeline by ID."""
        self._pipelines[pipeline.id] = pipeline

    def list_pipelines(self) -> list[str]:
        """List registered pipeline IDs."""
        return list(self._pipelines.keys())

    def run(self, request: TransformRequest, pipeline_id: Optional[str] = None) -> TransformContext:
        """
        Run a pipeline and return the final context.

        A pass exception marks the context as failed, records a
        PASS_ERROR diagnostic and stops the pipeline; no rendered
        text is produced in that case.
        """
        pipeline_id = pipeline_id or "default"

        ctx = TransformContext.from_request(request)
        if pipeline_id not in self._pipelines:
            ctx.status = TransformStatus.ERROR
            ctx.add_diagnostic(
                level="error",
                code="PIPELINE_NOT_FOUND",
                message=f"Pipeline '{pipeline_id}' not registered",
                source="engine",
            )
            return ctx

        pipeline = self._pipelines[pipeline_id]
        tlog = TransformLogger(request.request_id)

        for pass_fn in pipeline.passes:
            pass_name = pass_fn.__name__
            try:
                tlog.pass_start(pass_name)
                ctx = pass_fn(ctx)
                tlog.pass_end(pass_name)
            except Exception as e:
                tlog.pass_error(pass_name, e)
                ctx.status = TransformStatus.ERROR
                ctx.rendered_text = None
                ctx.error = e
                ctx.add_diagnostic(
                    level="error",
                    code="PASS_ERROR",
                    message=f"Pass '{pass_name}' failed: {e}",
                    source="engine",
                )
                ctx.add_trace(
                    pass_name=pass_name,
                    action="error",
                )
                break

        tlog.transform_complete(
            status=ctx.status.value,
            lines=len(ctx.lines),
            unresolved_codes=len(ctx.unresolved_codes),
            diagnostics=len(ctx.diagnostics),
        )
        return ctx

    def transform(
        self,
        request: TransformRequest,
        pipeline_id: Optional[str] = None,
    ) -> TransformResult:
        """
        Run a conversion.

        Args:
            request: The conversion request
            pipeline_id: Which pipeline to use (default: 'default')

        Returns:
            TransformResult with rendered text, trace, and diagnostics
        """
        return self.run(request, pipeline_id).to_result()


# Global engine instance
_engine: Optional[Engine] = None


def get_engine() -> Engine:
    """Get or create the global engine instance with the default pipeline."""
    global _engine
    if _engine is None:
        _engine = Engine()
        _engine.register_pipeline(default_pipeline())
    return _engine


def convert(text: str, lookup: Mapping[str, str], workers: int = 1) -> str:
    """
    Convert an itinerary document.

    Args:
        text: Raw itinerary text
        lookup: Airport code to airport name mapping
        workers: Threads used for per-line work

    Returns:
        The converted document

    Raises:
        ItineraryError: On the first fatal condition; no partial output
    """
    ctx = get_engine().run(TransformRequest(text=text, lookup=lookup, workers=workers))
    if ctx.error is not None:
        raise ctx.error
    return ctx.rendered_text
