"""
Pass 80: Packaging

Rejoins the rewritten lines into the final document and records
the run summary.
"""

from itinerary.core.context import TransformContext
from itinerary.core.logging import get_pass_logger

PASS_NAME = "p80_package"
log = get_pass_logger(PASS_NAME)


def package(ctx: TransformContext) -> TransformContext:
    """Join ctx.lines with newlines into ctx.rendered_text."""
    log.verbose("starting_packaging")

    ctx.rendered_text = "\n".join(ctx.lines)

    log.info(
        "packaged",
        status=ctx.status.value,
        lines=len(ctx.lines),
        output_chars=len(ctx.rendered_text),
        airports_resolved=ctx.stats.airports_resolved,
        unresolved_codes=len(ctx.unresolved_codes),
        clocks_rewritten=ctx.stats.clocks_rewritten,
        dates_rewritten=ctx.stats.dates_rewritten,
    )

    ctx.add_trace(
        pass_name=PASS_NAME,
        action="packaged",
        after=f"status={ctx.status.value}, lines={len(ctx.lines)}",
    )

    return ctx
