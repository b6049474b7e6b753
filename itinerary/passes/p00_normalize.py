"""
Pass 00: Whitespace Normalization

Prepares raw input for line-oriented scanning:
- Carriage return, vertical tab and form feed become newlines
- Runs of 3+ newlines collapse to exactly 2

No other characters are altered.
"""

from itinerary.core.context import TransformContext
from itinerary.core.logging import get_pass_logger

PASS_NAME = "p00_normalize"
log = get_pass_logger(PASS_NAME)

VERTICAL_WHITESPACE = ("\r", "\v", "\f")


def normalize_whitespace(text: str) -> str:
    """
    Normalize vertical whitespace.

    Collapsing is repeated until no run of three newlines remains,
    so the result is a fixed point (normalizing twice equals once).
    """
    for ch in VERTICAL_WHITESPACE:
        text = text.replace(ch, "\n")

    while "\n\n\n" in text:
        text = text.replace("\n\n\n", "\n\n")

    return text


def normalize(ctx: TransformContext) -> TransformContext:
    """Normalize the raw input text into ctx.normalized_text."""
    raw = ctx.raw_text
    raw_len = len(raw)

    log.verbose("starting_normalization", input_chars=raw_len)

    text = normalize_whitespace(raw)
    output_len = len(text)

    log.info(
        "normalized",
        input_chars=raw_len,
        output_chars=output_len,
        chars_removed=raw_len - output_len,
    )

    ctx.normalized_text = text
    ctx.add_trace(
        pass_name=PASS_NAME,
        action="normalized_input",
        before=f"{raw_len} chars",
        after=f"{output_len} chars",
    )

    return ctx
