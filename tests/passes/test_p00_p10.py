"""
Unit tests for early pipeline passes (p00, p10).
"""

import pytest
from itinerary.core.context import TransformContext, TransformRequest
from itinerary.passes.p00_normalize import normalize, normalize_whitespace
from itinerary.passes.p10_split_lines import split_lines


def _make_context(text: str) -> TransformContext:
    req = TransformRequest(text=text, lookup={})
    return TransformContext(request=req, raw_text=text)


class TestP00Normalize:
    """Tests for p00_normalize pass."""

    @pytest.mark.parametrize("ch", ["\r", "\v", "\f"])
    def test_vertical_whitespace_becomes_newline(self, ch):
        """Verify CR, VT and FF each become a newline."""
        assert normalize_whitespace(ch) == "\n"
        assert normalize_whitespace(f"a{ch}b") == "a\nb"

    def test_collapses_four_newlines(self):
        """Verify a run of four newlines collapses to two."""
        assert normalize_whitespace("\n\n\n\n") == "\n\n"

    def test_collapses_long_runs_to_two(self):
        """Verify arbitrarily long runs end at exactly two newlines."""
        assert normalize_whitespace("a" + "\n" * 9 + "b") == "a\n\nb"

    def test_crlf_counts_as_two_newlines(self):
        """Verify CRLF becomes a blank-line pair, and repeated CRLF collapses."""
        assert normalize_whitespace("a\r\nb") == "a\n\nb"
        assert normalize_whitespace("a\r\n\r\nb") == "a\n\nb"

    def test_preserves_single_and_double_newlines(self):
        """Verify one and two newlines are untouched."""
        text = "Day 1\nFlight\n\nDay 2"
        assert normalize_whitespace(text) == text

    def test_leaves_other_characters_alone(self):
        """Verify spaces and tabs are not altered."""
        text = "  Depart\t#LAX  "
        assert normalize_whitespace(text) == text

    def test_idempotent(self):
        """Verify normalizing twice equals normalizing once."""
        text = "a\r\r\r\v\fb\n\n\n\nc\r\n"
        once = normalize_whitespace(text)
        assert normalize_whitespace(once) == once
        assert "\n\n\n" not in once

    def test_pass_sets_normalized_text(self):
        """Verify the pass writes ctx.normalized_text."""
        ctx = _make_context("a\r\n\r\n\r\nb")

        normalize(ctx)

        assert ctx.normalized_text == "a\n\nb"
        assert ctx.raw_text == "a\r\n\r\n\r\nb"

    def test_adds_trace(self):
        """Verify trace entry is added."""
        ctx = _make_context("Hello")

        normalize(ctx)

        assert len(ctx.trace) == 1
        assert ctx.trace[0].pass_name == "p00_normalize"

    def test_empty_input(self):
        """Verify empty input produces empty output."""
        ctx = _make_context("")

        normalize(ctx)

        assert ctx.normalized_text == ""


class TestP10SplitLines:
    """Tests for p10_split_lines pass."""

    def test_splits_on_newline(self):
        """Verify each newline starts a new line."""
        ctx = _make_context("")
        ctx.normalized_text = "one\ntwo\n\nfour"

        split_lines(ctx)

        assert ctx.lines == ["one", "two", "", "four"]

    def test_keeps_trailing_empty_line(self):
        """Verify a trailing newline yields a trailing empty line."""
        ctx = _make_context("")
        ctx.normalized_text = "one\n"

        split_lines(ctx)

        assert ctx.lines == ["one", ""]

    def test_empty_text_is_one_empty_line(self):
        """Verify empty input is a single empty line."""
        ctx = _make_context("")

        split_lines(ctx)

        assert ctx.lines == [""]
