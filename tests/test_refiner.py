"""Unit tests for the span refiner.

WHY: The refiner decides what text reaches the screen and when. Leftover
control tokens, a lost punctuation mark, or split fragments that do not add
up to the original span all end up visible in the editor.

HOW: Tests cover each refinement step in order: control-token stripping,
script conversion (including failure), trimming and dropping, punctuation
splitting, and proportional time interpolation.

RULES:
- Split conservation: fragment durations sum to the span duration and
  fragment texts concatenate back to the refined text
- Floating-point comparisons use pytest.approx unless exactness is the point
"""

import pytest

from fcpx_captions.core import refiner
from fcpx_captions.core.ir import MIN_DURATION_S, RawSpan, ScriptMode
from fcpx_captions.core.refiner import (
    convert_script,
    refine_span,
    refine_spans,
    split_at_punctuation,
    strip_control_tokens,
    visible_length,
)


class TestControlTokens:
    """<|...|> tags are removed wherever they appear."""

    def test_concatenated_tags(self):
        text = "<|startoftranscript|><|zh|><|transcribe|><|0.00|>你好<|2.00|>"
        assert strip_control_tokens(text) == "你好"

    def test_tags_between_words(self):
        assert strip_control_tokens("Hello <|0.50|>world") == "Hello world"

    def test_stray_halves(self):
        assert strip_control_tokens("tail|> and <|head") == "tail and head"

    def test_plain_text_untouched(self):
        assert strip_control_tokens("a < b | c > d") == "a < b | c > d"


class TestScriptConversion:
    """OpenCC Hans↔Hant conversion."""

    def test_none_is_identity(self):
        assert convert_script("漢字汉字", ScriptMode.NONE) == "漢字汉字"

    def test_to_simplified(self):
        assert convert_script("漢字", ScriptMode.SIMPLIFIED) == "汉字"

    def test_to_traditional(self):
        assert convert_script("汉字", ScriptMode.TRADITIONAL) == "漢字"

    def test_latin_text_unchanged(self):
        assert convert_script("Hello, world.", ScriptMode.SIMPLIFIED) == "Hello, world."

    def test_failure_leaves_text_unchanged(self, monkeypatch):
        def boom(profile):
            raise RuntimeError("profile missing")

        monkeypatch.setattr(refiner, "_get_converter", boom)
        assert convert_script("漢字", ScriptMode.SIMPLIFIED) == "漢字"


class TestSplitAtPunctuation:
    """Fragments keep their punctuation and are trimmed."""

    def test_cjk(self):
        assert split_at_punctuation("你好，世界。") == ["你好，", "世界。"]

    def test_latin_with_spaces(self):
        assert split_at_punctuation("Hi, there. How are you?") == ["Hi,", "there.", "How are you?"]

    def test_trailing_text_without_punctuation(self):
        assert split_at_punctuation("第一句。第二句") == ["第一句。", "第二句"]

    def test_consecutive_punctuation_is_own_fragment(self):
        assert split_at_punctuation("What?! No.") == ["What?", "!", "No."]

    def test_no_punctuation(self):
        assert split_at_punctuation("no punctuation here") == ["no punctuation here"]


class TestRefineSpan:
    """End-to-end refinement of one raw span."""

    def test_punctuation_split_scenario(self):
        segments = refine_span(RawSpan("你好，世界。", 0.0, 4.0))
        assert [s.text for s in segments] == ["你好，", "世界。"]
        assert (segments[0].start_s, segments[0].end_s) == (0.0, 2.0)
        assert (segments[1].start_s, segments[1].end_s) == (2.0, 4.0)

    def test_filler_only_span_is_dropped(self):
        assert refine_span(RawSpan("<|endoftext|>  ", 1.0, 2.0)) == []

    def test_single_fragment_keeps_whole_text(self):
        segments = refine_span(RawSpan("  Hello world.  ", 1.0, 2.0))
        assert len(segments) == 1
        assert segments[0].text == "Hello world."
        assert (segments[0].start_s, segments[0].end_s) == (1.0, 2.0)

    def test_non_positive_duration_corrected(self):
        segments = refine_span(RawSpan("Hi", 3.0, 3.0))
        assert segments[0].end_s == pytest.approx(3.0 + MIN_DURATION_S)
        assert segments[0].end_s > segments[0].start_s

    def test_proportional_interpolation(self):
        segments = refine_span(RawSpan("A,BBB.", 10.0, 14.0))
        assert [s.text for s in segments] == ["A,", "BBB."]
        assert segments[0].duration_s == pytest.approx(4.0 * 2 / 6)
        assert segments[1].duration_s == pytest.approx(4.0 * 4 / 6)

    def test_split_conservation(self):
        span = RawSpan("<|zh|>今天天气很好，我们去公园吧！好的。", 1.3, 7.9)
        segments = refine_span(span)
        assert len(segments) == 3
        assert sum(s.duration_s for s in segments) == pytest.approx(span.end_s - span.start_s)
        assert "".join(s.text for s in segments) == "今天天气很好，我们去公园吧！好的。"
        assert segments[0].start_s == span.start_s
        assert segments[-1].end_s == span.end_s
        for left, right in zip(segments, segments[1:]):
            assert left.end_s == right.start_s

    def test_script_mode_applied_before_split(self):
        segments = refine_span(RawSpan("漢字，測試。", 0.0, 2.0), ScriptMode.SIMPLIFIED)
        assert [s.text for s in segments] == ["汉字，", "测试。"]

    def test_each_segment_gets_unique_id(self):
        segments = refine_span(RawSpan("一，二，三。", 0.0, 3.0))
        assert len({s.id for s in segments}) == 3


class TestRefineSpans:
    def test_batch_preserves_order_and_drops_empty(self):
        spans = [
            RawSpan("First.", 0.0, 1.0),
            RawSpan("<|nocaptions|>", 1.0, 2.0),
            RawSpan("Second.", 2.0, 3.0),
        ]
        assert [s.text for s in refine_spans(spans)] == ["First.", "Second."]


class TestVisibleLength:
    """Time is shared out by user-perceived characters."""

    def test_combining_mark_counts_once(self):
        assert len("é") == 2
        assert visible_length("é") == 1

    def test_emoji_with_skin_tone_counts_once(self):
        assert visible_length("\U0001F44D\U0001F3FD") == 1

    def test_cjk(self):
        assert visible_length("你好，") == 3

    def test_split_weighted_by_graphemes(self):
        # e + combining acute + "," is 2 visible characters (3 code points)
        segments = refine_span(RawSpan("é,ab.", 0.0, 5.0))
        assert [s.text for s in segments] == ["é,", "ab."]
        assert segments[0].duration_s == pytest.approx(2.0)
        assert segments[1].duration_s == pytest.approx(3.0)
