"""
Pass 20: Airport Code Substitution

Replaces airport markers with airport names from the lookup table:
- ##ABCD  4-character ICAO code
- #ABC    3-character IATA code

The scanner is a small state machine. ICAO is tried before IATA so a
genuine ##ABCD is never read as # + #ABC. Codes are fixed-length slices
taken verbatim. Unknown codes are left in place byte-for-byte, and a
marker cut short by the end of the line ends scanning for that line.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from functools import partial

from itinerary.core.context import TransformContext
from itinerary.core.errors import MalformedDataError
from itinerary.core.lines import map_lines
from itinerary.core.logging import get_pass_logger
from itinerary.ir.enums import MarkerKind

PASS_NAME = "p20_airport_codes"
log = get_pass_logger(PASS_NAME)


class ScanState(str, Enum):
    """Tokenizer states."""

    NORMAL = "normal"
    SCANNING_ICAO = "scanning_icao"
    SCANNING_IATA = "scanning_iata"


@dataclass(frozen=True)
class AirportMarker:
    kind: MarkerKind
    prefix: str
    code_length: int


ICAO_MARKER = AirportMarker(MarkerKind.ICAO, "##", 4)
IATA_MARKER = AirportMarker(MarkerKind.IATA, "#", 3)

_STATE_MARKERS = {
    ScanState.SCANNING_ICAO: ICAO_MARKER,
    ScanState.SCANNING_IATA: IATA_MARKER,
}


@dataclass
class LineScan:
    """Result of scanning one line."""

    text: str
    resolved: int = 0
    unresolved: list[str] = field(default_factory=list)


def _transition(line: str, pos: int) -> ScanState:
    """Pick the next state from the characters at the cursor."""
    # A prefix only counts when at least one character follows it
    if line.startswith(ICAO_MARKER.prefix, pos) and pos + len(ICAO_MARKER.prefix) < len(line):
        return ScanState.SCANNING_ICAO
    if line.startswith(IATA_MARKER.prefix, pos) and pos + len(IATA_MARKER.prefix) < len(line):
        return ScanState.SCANNING_IATA
    return ScanState.NORMAL


def _resolve(code: str, marker: AirportMarker, lookup: Mapping[str, str], scan: LineScan) -> str:
    kind = marker.kind.value.upper()
    if not code:
        raise MalformedDataError(f"malformed data: {kind} code is blank", code=code)

    if code not in lookup:
        scan.unresolved.append(marker.prefix + code)
        return marker.prefix + code

    name = lookup[code]
    if not name:
        raise MalformedDataError(
            f"malformed data: airport name for {kind} code {code} is blank",
            code=code,
        )
    scan.resolved += 1
    return name


def scan_airport_codes(line: str, lookup: Mapping[str, str]) -> LineScan:
    """
    Substitute every airport marker in a line.

    Args:
        line: A single line (no newlines)
        lookup: Airport code to airport name mapping

    Returns:
        LineScan with the rewritten text and resolution counts

    Raises:
        MalformedDataError: If a code is blank or resolves to a blank name
    """
    scan = LineScan(text=line)
    out: list[str] = []
    state = ScanState.NORMAL
    pos = 0       # cursor
    flushed = 0   # start of text not yet copied to out

    while pos < len(line):
        if state is ScanState.NORMAL:
            state = _transition(line, pos)
            if state is ScanState.NORMAL:
                pos += 1
            continue

        marker = _STATE_MARKERS[state]
        state = ScanState.NORMAL
        code_start = pos + len(marker.prefix)
        code_end = code_start + marker.code_length
        if code_end > len(line):
            # Truncated marker: the tail is copied verbatim below
            break

        out.append(line[flushed:pos])
        out.append(_resolve(line[code_start:code_end], marker, lookup, scan))
        pos = flushed = code_end

    out.append(line[flushed:])
    scan.text = "".join(out)
    return scan


def substitute_airport_codes(ctx: TransformContext) -> TransformContext:
    """Run the airport code scanner over every line of ctx.lines."""
    scans = map_lines(partial(scan_airport_codes, lookup=ctx.lookup), ctx.lines, ctx.workers)

    ctx.lines = [s.text for s in scans]
    for s in scans:
        ctx.stats.airports_resolved += s.resolved
        ctx.unresolved_codes.extend(s.unresolved)

    for code in ctx.unresolved_codes:
        log.debug("code_unresolved", marker=code)

    log.info(
        "airport_codes_substituted",
        resolved=ctx.stats.airports_resolved,
        unresolved=len(ctx.unresolved_codes),
    )
    ctx.add_trace(
        pass_name=PASS_NAME,
        action="substituted_airport_codes",
        after=f"resolved={ctx.stats.airports_resolved}, unresolved={len(ctx.unresolved_codes)}",
    )
    return ctx
