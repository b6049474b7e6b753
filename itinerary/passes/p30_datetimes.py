"""
Pass 30: Date/Time Rewriting

Rewrites machine-formatted timestamps into reader-friendly text, per line,
after airport codes have been substituted. Two steps run in order:

1. Clock rewrite. A line of the shape ``<date> T24(<timestamp>)`` or
   ``<date> T12(<timestamp>)`` becomes ``<date> 10:00 (-05:00)`` or
   ``<date> 10:00AM (-05:00)``. Only lines with exactly one "(" qualify.
2. Date markers. Every ``D(<timestamp>)`` becomes ``02 Jan 2024``.

Anything that does not parse is left exactly as it was.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from itinerary.core.context import TransformContext
from itinerary.core.lines import map_lines
from itinerary.core.logging import get_pass_logger
from itinerary.ir.enums import ClockFormat

PASS_NAME = "p30_datetimes"
log = get_pass_logger(PASS_NAME)


@dataclass(frozen=True)
class TimestampLayout:
    """A strict timestamp layout: a full-match guard plus a strptime format."""

    name: str
    pattern: re.Pattern
    strptime_format: str

    def parse(self, text: str) -> Optional[datetime]:
        if not self.pattern.fullmatch(text):
            return None
        try:
            return datetime.strptime(text, self.strptime_format)
        except ValueError:
            return None


UTC_LAYOUT = TimestampLayout(
    "utc",
    re.compile(r"\d{4}-\d{2}-\d{2}T\d{1,2}:\d{2}Z"),
    "%Y-%m-%dT%H:%MZ",
)
OFFSET_LAYOUT = TimestampLayout(
    "offset",
    re.compile(r"\d{4}-\d{2}-\d{2}T\d{1,2}:\d{2}[+-]\d{2}:\d{2}"),
    "%Y-%m-%dT%H:%M%z",
)
FIXED_PLUS_TWO_LAYOUT = TimestampLayout(
    "fixed_plus_two",
    re.compile(r"\d{4}-\d{2}-\d{2}T\d{1,2}:\d{2}\+02:00"),
    "%Y-%m-%dT%H:%M+02:00",
)

# Tried in order; the first layout that parses wins
CLOCK_LAYOUTS = (OFFSET_LAYOUT, UTC_LAYOUT)
DATE_LAYOUTS = (UTC_LAYOUT, OFFSET_LAYOUT, FIXED_PLUS_TWO_LAYOUT)

DATE_MARKER_OPEN = "D("
DATE_MARKER_CLOSE = ")"

_MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
               "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def parse_timestamp(text: str, layouts: tuple[TimestampLayout, ...]) -> Optional[datetime]:
    """Parse ``text`` with the first matching layout, or return None."""
    for layout in layouts:
        parsed = layout.parse(text)
        if parsed is not None:
            return parsed
    return None


def format_offset(moment: datetime) -> str:
    """Render the UTC offset as ±HH:MM; UTC and naive times are +00:00."""
    offset = moment.utcoffset() or timedelta(0)
    sign = "-" if offset < timedelta(0) else "+"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def format_clock(moment: datetime, clock: ClockFormat) -> str:
    """Render ``HH:MM (±HH:MM)`` or ``HH:MMAM (±HH:MM)``."""
    if clock is ClockFormat.T12:
        # Locale-independent meridiem
        meridiem = "AM" if moment.hour < 12 else "PM"
        clock_text = f"{(moment.hour % 12 or 12):02d}:{moment.minute:02d}{meridiem}"
    else:
        clock_text = f"{moment.hour:02d}:{moment.minute:02d}"
    return f"{clock_text} ({format_offset(moment)})"


def format_date(moment: datetime) -> str:
    """Render ``DD Mon YYYY`` with English month abbreviations."""
    return f"{moment.day:02d} {_MONTH_ABBR[moment.month - 1]} {moment.year:04d}"


def rewrite_clock(line: str) -> str:
    """
    Rewrite a ``<date> T24(...)`` / ``<date> T12(...)`` line.

    The line must hold exactly one "(", and the text before it must be
    exactly two space-separated tokens, the second being T24 or T12.
    On success the marker token is replaced by the rendered clock and
    everything from "(" on is dropped. Otherwise the line is returned
    unchanged.
    """
    # TODO: lines with a second "(" (e.g. a parenthetical note) are never
    # rewritten; confirm with itinerary owners whether that should change.
    parts = line.split("(")
    if len(parts) != 2:
        return line
    head, tail = parts

    tokens = head.split(" ")
    if len(tokens) != 2:
        return line

    try:
        clock = ClockFormat(tokens[1])
    except ValueError:
        return line

    moment = parse_timestamp(tail[:-1], CLOCK_LAYOUTS)
    if moment is None:
        return line

    return head.replace(clock.value, format_clock(moment, clock), 1)


def _replace_date_markers(line: str) -> tuple[str, int]:
    out: list[str] = []
    replaced = 0
    pos = 0

    while True:
        start = line.find(DATE_MARKER_OPEN, pos)
        if start == -1:
            out.append(line[pos:])
            break
        out.append(line[pos:start])

        end = line.find(DATE_MARKER_CLOSE, start)
        if end == -1:
            out.append(line[start:])
            break

        moment = parse_timestamp(line[start + len(DATE_MARKER_OPEN):end], DATE_LAYOUTS)
        pos = end + len(DATE_MARKER_CLOSE)
        if moment is None:
            out.append(line[start:pos])
            continue

        # "Jan.D(...)": fold the period into a single space before the date
        if start > 0 and line[start - 1] == "." and _last_char(out) == ".":
            _drop_last_char(out)
            out.append(" ")

        out.append(format_date(moment))
        replaced += 1

    return "".join(out), replaced


def rewrite_date_markers(line: str) -> str:
    """
    Replace every parsable ``D(...)`` marker with ``DD Mon YYYY``.

    Unparsable markers are kept verbatim; an unterminated marker ends
    the scan and the rest of the line is kept verbatim.
    """
    return _replace_date_markers(line)[0]


def _last_char(parts: list[str]) -> str:
    for part in reversed(parts):
        if part:
            return part[-1]
    return ""


def _drop_last_char(parts: list[str]) -> None:
    for i in range(len(parts) - 1, -1, -1):
        if parts[i]:
            parts[i] = parts[i][:-1]
            return


@dataclass
class LineRewrite:
    """Result of rewriting one line."""

    text: str
    clock_rewritten: bool = False
    dates_rewritten: int = 0


def rewrite_line(line: str) -> LineRewrite:
    """Clock rewrite, then date-marker rewrite."""
    clocked = rewrite_clock(line)
    text, dates = _replace_date_markers(clocked)
    return LineRewrite(text=text, clock_rewritten=clocked != line, dates_rewritten=dates)


def rewrite_datetimes(ctx: TransformContext) -> TransformContext:
    """Rewrite clock and date markers on every line of ctx.lines."""
    rewrites = map_lines(rewrite_line, ctx.lines, ctx.workers)

    for before, rw in zip(ctx.lines, rewrites):
        if rw.text != before:
            log.debug("line_rewritten", before=before, after=rw.text)
        ctx.stats.clocks_rewritten += int(rw.clock_rewritten)
        ctx.stats.dates_rewritten += rw.dates_rewritten

    ctx.lines = [rw.text for rw in rewrites]

    log.info(
        "datetimes_rewritten",
        clocks=ctx.stats.clocks_rewritten,
        dates=ctx.stats.dates_rewritten,
    )
    ctx.add_trace(
        pass_name=PASS_NAME,
        action="rewrote_datetimes",
        after=f"clocks={ctx.stats.clocks_rewritten}, dates={ctx.stats.dates_rewritten}",
    )
    return ctx
