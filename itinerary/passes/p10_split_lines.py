"""
Pass 10: Line Splitting

Splits normalized text on newlines. Every later pass works line by line,
and the output keeps exactly this many lines in this order.
"""

from itinerary.core.context import TransformContext
from itinerary.core.logging import get_pass_logger

PASS_NAME = "p10_split_lines"
log = get_pass_logger(PASS_NAME)


def split_lines(ctx: TransformContext) -> TransformContext:
    """Split ctx.normalized_text into ctx.lines."""
    # str.split keeps a trailing empty line, unlike splitlines()
    ctx.lines = ctx.normalized_text.split("\n")

    log.verbose("split", lines=len(ctx.lines))
    ctx.add_trace(
        pass_name=PASS_NAME,
        action="split_lines",
        after=f"{len(ctx.lines)} lines",
    )
    return ctx
