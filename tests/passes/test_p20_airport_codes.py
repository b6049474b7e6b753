"""
Unit tests for p20_airport_codes pass.
"""

import pytest
from itinerary.core.context import TransformContext, TransformRequest
from itinerary.core.errors import MalformedDataError
from itinerary.passes.p20_airport_codes import (
    IATA_MARKER,
    ICAO_MARKER,
    LineScan,
    _resolve,
    scan_airport_codes,
    substitute_airport_codes,
)

LOOKUP = {
    "LAX": "Los Angeles International Airport",
    "KLAX": "Los Angeles International Airport",
    "LHR": "London Heathrow Airport",
    "EGLL": "London Heathrow Airport",
}


def _make_context(lines: list[str], lookup=LOOKUP, workers: int = 1) -> TransformContext:
    text = "\n".join(lines)
    req = TransformRequest(text=text, lookup=lookup, workers=workers)
    ctx = TransformContext(request=req, raw_text=text)
    ctx.lines = list(lines)
    return ctx


class TestScanResolvesCodes:
    """Known codes are replaced by airport names."""

    def test_iata_code(self):
        """Verify #ABC is replaced."""
        scan = scan_airport_codes("Fly to #LAX today", LOOKUP)
        assert scan.text == "Fly to Los Angeles International Airport today"
        assert scan.resolved == 1

    def test_icao_code(self):
        """Verify ##ABCD is replaced."""
        scan = scan_airport_codes("##EGLL", LOOKUP)
        assert scan.text == "London Heathrow Airport"

    def test_icao_has_priority_over_iata(self):
        """Verify ##KLAX is never read as # followed by #KLA."""
        scan = scan_airport_codes("From ##KLAX.", LOOKUP)
        assert scan.text == "From Los Angeles International Airport."
        assert scan.unresolved == []

    def test_multiple_and_adjacent_codes(self):
        """Verify several markers on one line, including back-to-back ones."""
        scan = scan_airport_codes("#LAX#LHR and ##EGLL-#LAX", LOOKUP)
        assert scan.text == (
            "Los Angeles International AirportLondon Heathrow Airport and "
            "London Heathrow Airport-Los Angeles International Airport"
        )
        assert scan.resolved == 4

    @pytest.mark.parametrize("prefix,suffix", [("", ""), ("(", ")"), ("x", "y"), ("  ", "\t")])
    def test_independent_of_surrounding_text(self, prefix, suffix):
        """Verify substitution does not depend on neighbouring characters."""
        scan = scan_airport_codes(f"{prefix}#LHR{suffix}", LOOKUP)
        assert scan.text == f"{prefix}London Heathrow Airport{suffix}"


class TestScanPassThrough:
    """Unknown or incomplete markers are left untouched."""

    def test_unknown_iata_code(self):
        """Verify an unknown IATA code stays verbatim."""
        scan = scan_airport_codes("Connect via #ZZZ", LOOKUP)
        assert scan.text == "Connect via #ZZZ"
        assert scan.unresolved == ["#ZZZ"]

    def test_unknown_icao_code(self):
        """Verify an unknown ICAO code stays verbatim."""
        scan = scan_airport_codes("Connect via ##QQQQ", LOOKUP)
        assert scan.text == "Connect via ##QQQQ"
        assert scan.unresolved == ["##QQQQ"]

    def test_codes_are_case_sensitive(self):
        """Verify lookup is exact, not case-folded."""
        scan = scan_airport_codes("#lax", LOOKUP)
        assert scan.text == "#lax"

    def test_truncated_iata_marker(self):
        """Verify a marker cut short by end of line is kept and scanning stops."""
        scan = scan_airport_codes("Arrive #LA", LOOKUP)
        assert scan.text == "Arrive #LA"
        assert scan.unresolved == []

    def test_truncated_icao_marker(self):
        """Verify ##ABC at end of line is not retried as an IATA code."""
        scan = scan_airport_codes("Arrive ##LHR", LOOKUP)
        assert scan.text == "Arrive ##LHR"
        assert scan.resolved == 0
        assert scan.unresolved == []

    @pytest.mark.parametrize("line", ["Gate #", "Gate ##", "#", "##", ""])
    def test_bare_prefixes(self, line):
        """Verify lone marker prefixes are plain text."""
        assert scan_airport_codes(line, LOOKUP).text == line

    def test_code_slice_is_fixed_length(self):
        """Verify the code is the next 4 characters verbatim, spaces included."""
        scan = scan_airport_codes("##AB #LAX", LOOKUP)
        assert scan.text == "##AB #LAX"
        assert scan.unresolved == ["##AB #"]


class TestScanErrors:
    """Lookup invariant violations are fatal."""

    def test_blank_airport_name(self):
        """Verify a code that resolves to an empty name raises."""
        with pytest.raises(MalformedDataError, match="airport name for IATA code LAX is blank") as exc:
            scan_airport_codes("Depart #LAX", {"LAX": ""})
        assert exc.value.code == "LAX"

    def test_blank_code_carries_code(self):
        """Verify the blank-code error exposes the offending code like the blank-name one."""
        with pytest.raises(MalformedDataError, match="IATA code is blank") as exc:
            _resolve("", IATA_MARKER, LOOKUP, LineScan(text=""))
        assert exc.value.code == ""

    def test_blank_name_carries_code(self):
        """Verify the blank-name error exposes the offending code."""
        with pytest.raises(MalformedDataError) as exc:
            _resolve("EGLL", ICAO_MARKER, {"EGLL": ""}, LineScan(text=""))
        assert exc.value.code == "EGLL"

    def test_blank_icao_name(self):
        """Verify the ICAO variant of the message."""
        with pytest.raises(MalformedDataError, match="ICAO code KLAX"):
            scan_airport_codes("##KLAX", {"KLAX": ""})


class TestSubstituteAirportCodesPass:
    """Tests for the pass wrapper."""

    def test_rewrites_every_line(self):
        """Verify every line is scanned and line count is preserved."""
        ctx = _make_context(["Depart #LAX", "", "Arrive ##EGLL"])

        substitute_airport_codes(ctx)

        assert ctx.lines == [
            "Depart Los Angeles International Airport",
            "",
            "Arrive London Heathrow Airport",
        ]
        assert ctx.stats.airports_resolved == 2

    def test_collects_unresolved_codes_in_order(self):
        """Verify unknown markers are recorded in order of appearance."""
        ctx = _make_context(["#AAA then ##BBBB", "#CCC"])

        substitute_airport_codes(ctx)

        assert ctx.unresolved_codes == ["#AAA", "##BBBB", "#CCC"]

    def test_parallel_matches_sequential(self):
        """Verify thread fan-out keeps line order and content."""
        lines = [f"Leg {i}: #LAX to ##EGLL via #X{i:02d}" for i in range(50)]
        sequential = substitute_airport_codes(_make_context(lines))
        parallel = substitute_airport_codes(_make_context(lines, workers=8))

        assert parallel.lines == sequential.lines
        assert parallel.unresolved_codes == sequential.unresolved_codes

    def test_raises_on_blank_name(self):
        """Verify the pass propagates fatal errors."""
        ctx = _make_context(["ok", "#LAX"], lookup={"LAX": ""})

        with pytest.raises(MalformedDataError):
            substitute_airport_codes(ctx)

    def test_adds_trace(self):
        """Verify trace entry is added."""
        ctx = _make_context(["#LAX"])

        substitute_airport_codes(ctx)

        assert ctx.trace[-1].pass_name == "p20_airport_codes"
