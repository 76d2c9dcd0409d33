"""
Unit tests for the text-math segmenter.
"""

from __future__ import annotations

import pytest

from slidewright.deck.math_segment import has_math, is_whole_block, join_segments, segment
from slidewright.deck.models import Segment, SegmentKind, block_math, inline_math, plain


class TestWholeBlock:

    def test_whole_block(self):
        assert is_whole_block("$$x^2$$")
        assert is_whole_block("  $$x^2$$\n")

    def test_too_short_for_two_delimiters(self):
        assert not is_whole_block("$$")
        assert not is_whole_block("$$$")

    def test_not_wrapped(self):
        assert not is_whole_block("a $$x$$")
        assert not is_whole_block("$x$")


class TestSegment:

    def test_empty(self):
        assert segment("") == []

    def test_plain_only(self):
        assert segment("Quarterly results") == [plain("Quarterly results")]

    def test_whole_block_fast_path(self):
        result = segment("$$x^2$$")
        assert result == [block_math("x^2")]
        assert result[0].scrollable

    def test_whole_block_trimmed(self):
        assert segment("  $$\\frac{a}{b}$$  ") == [block_math("\\frac{a}{b}")]

    def test_mixed(self):
        assert segment("a $x$ b $$y$$ c") == [
            plain("a "),
            inline_math("x"),
            plain(" b "),
            block_math("y"),
            plain(" c"),
        ]

    def test_adjacent_spans_no_empty_plain(self):
        result = segment("$a$$b$")
        assert result == [inline_math("a"), inline_math("b")]

    def test_lone_dollar_stays_plain(self):
        assert segment("costs $5") == [plain("costs $5")]

    def test_unbalanced_pairs_first_two(self):
        # The scan rule pairs the first two dollars; accepted mis-segmentation
        assert segment("$5 and $10") == [inline_math("5 and "), plain("10")]

    def test_double_dollar_alone(self):
        assert segment("$$") == [inline_math("")]

    def test_math_does_not_cross_lines(self):
        assert segment("$a\nb$") == [plain("$a\nb$")]

    def test_overlapping_delimiters_claimed_by_fast_path(self):
        assert segment("$$a$ $b$$") == [block_math("a$ $b")]

    def test_block_inside_text_not_fast_path(self):
        result = segment("Euler: $$e^{i\\pi}+1=0$$ holds")
        kinds = [s.kind for s in result]
        assert kinds == [SegmentKind.PLAIN, SegmentKind.BLOCK_MATH, SegmentKind.PLAIN]
        assert result[1].value == "e^{i\\pi}+1=0"

    @pytest.mark.parametrize("text", [
        "plain text only",
        "a $x$ b $$y$$ c",
        "$a$$b$",
        "start $$\\sum_i x_i$$",
        "$\\alpha$ then $\\beta$ end",
        "line one\nline $two$",
    ])
    def test_balanced_round_trip(self, text):
        assert join_segments(segment(text)) == text

    def test_has_math(self):
        assert has_math("value $x$")
        assert not has_math("costs $5")
        assert not has_math("")


class TestSegmentModel:

    def test_source_restores_delimiters(self):
        assert plain("a").source() == "a"
        assert inline_math("x").source() == "$x$"
        assert block_math("y").source() == "$$y$$"

    def test_is_math(self):
        assert not plain("a").is_math
        assert inline_math("x").is_math
        assert not inline_math("x").scrollable

    def test_dict_round_trip(self):
        seg = block_math("x^2")
        assert Segment.from_dict(seg.to_dict()) == seg
