"""Unit tests for the streaming deduplicator.

WHY: The same caption is delivered by up to three paths (re-delivered
incremental chunks and the final batch). A missed duplicate doubles a
caption on screen; an over-eager one drops a line of dialogue.

HOW: Feed incremental batches and a final batch built from the shared
fixtures, then check emission counts, the final result, progress
reporting, and reset.

RULES:
- Exactly one segment per distinct (start, text) key in every result
- Incremental emissions are never retracted
"""

import pytest

from fcpx_captions.core.dedup import StreamingDeduplicator
from fcpx_captions.core.ir import RawSpan, ScriptMode


def _keys(segments):
    return [(s.start_s, s.text) for s in segments]


class TestExactlyOnce:
    """Each (start, text) key reaches listeners once."""

    def test_repeated_discovery_emits_once(self, discovered_batches):
        emitted = []
        dedup = StreamingDeduplicator(on_segment=emitted.append)
        for batch in discovered_batches:
            dedup.accept_discovered(batch)
        # "你好，" + "世界。" from span 0, "Hello there." from span 1
        assert _keys(emitted) == [(0.0, "你好，"), (2.0, "世界。"), (5.0, "Hello there.")]

    def test_final_batch_only_emits_unseen(self, discovered_batches, final_spans):
        emitted = []
        dedup = StreamingDeduplicator(on_segment=emitted.append)
        for batch in discovered_batches:
            dedup.accept_discovered(batch)
        new = dedup.accept_final(final_spans)
        assert _keys(new) == [(9.0, "Bye")]
        assert len(emitted) == 4

    def test_result_has_one_segment_per_key(self, discovered_batches, final_spans):
        dedup = StreamingDeduplicator()
        for batch in discovered_batches:
            dedup.accept_discovered(batch)
        dedup.accept_final(final_spans + final_spans)
        result = dedup.result()
        assert len(result) == len(set(_keys(result))) == 4

    def test_final_without_streaming(self, final_spans):
        emitted = []
        dedup = StreamingDeduplicator(on_segment=emitted.append)
        dedup.accept_final(final_spans)
        assert _keys(emitted) == _keys(dedup.result())

    def test_same_text_different_start_is_distinct(self):
        dedup = StreamingDeduplicator()
        dedup.accept_discovered([RawSpan("Yes", 1.0, 2.0), RawSpan("Yes", 3.0, 4.0)])
        assert len(dedup.live_segments) == 2


class TestFinalIsAuthoritative:
    """Once the final batch arrives, result() is the final batch."""

    def test_result_before_final_is_live_timeline(self, discovered_batches):
        dedup = StreamingDeduplicator()
        dedup.accept_discovered(discovered_batches[0])
        assert not dedup.is_complete
        assert _keys(dedup.result()) == _keys(dedup.live_segments)

    def test_streamed_only_segment_not_in_result(self):
        """Re-decoded timing in the final batch replaces the streamed one."""
        dedup = StreamingDeduplicator()
        dedup.accept_discovered([RawSpan("Hello", 1.0, 2.0)])
        dedup.accept_final([RawSpan("Hello", 1.1, 2.0)])
        assert _keys(dedup.result()) == [(1.1, "Hello")]
        # No retraction: the streamed segment stays in the live list
        assert _keys(dedup.live_segments) == [(1.0, "Hello"), (1.1, "Hello")]

    def test_script_mode_applies_to_both_channels(self):
        emitted = []
        dedup = StreamingDeduplicator(script_mode=ScriptMode.SIMPLIFIED, on_segment=emitted.append)
        dedup.accept_discovered([RawSpan("漢字", 0.0, 1.0)])
        dedup.accept_final([RawSpan("漢字", 0.0, 1.0)])
        assert _keys(emitted) == [(0.0, "汉字")]


class TestProgress:
    """Watermark-based progress, capped at 99% until the final batch."""

    def test_progress_follows_watermark(self):
        reports = []
        dedup = StreamingDeduplicator(media_duration_s=10.0, on_progress=reports.append)
        dedup.accept_discovered([RawSpan("a", 0.0, 2.5)])
        dedup.accept_discovered([RawSpan("b", 2.5, 5.0)])
        assert reports == [pytest.approx(0.25), pytest.approx(0.5)]

    def test_watermark_is_monotonic(self):
        reports = []
        dedup = StreamingDeduplicator(media_duration_s=10.0, on_progress=reports.append)
        dedup.accept_discovered([RawSpan("late", 6.0, 8.0)])
        dedup.accept_discovered([RawSpan("early", 1.0, 2.0)])
        assert reports == [pytest.approx(0.8)]
        assert dedup.progress == pytest.approx(0.8)

    def test_capped_before_final(self):
        dedup = StreamingDeduplicator(media_duration_s=10.0)
        dedup.accept_discovered([RawSpan("overrun", 9.0, 12.0)])
        assert dedup.progress == pytest.approx(0.99)

    def test_final_reports_complete(self, final_spans):
        reports = []
        dedup = StreamingDeduplicator(media_duration_s=10.0, on_progress=reports.append)
        dedup.accept_final(final_spans)
        assert reports[-1] == 1.0

    def test_unknown_duration_reports_nothing_while_streaming(self):
        reports = []
        dedup = StreamingDeduplicator(media_duration_s=0.0, on_progress=reports.append)
        dedup.accept_discovered([RawSpan("a", 0.0, 2.0)])
        assert reports == []

    def test_dropped_span_does_not_move_watermark(self):
        dedup = StreamingDeduplicator(media_duration_s=10.0)
        dedup.accept_discovered([RawSpan("<|endoftext|>", 0.0, 9.0)])
        assert dedup.progress == 0.0


class TestReset:
    def test_reset_clears_keys_and_result(self, final_spans):
        dedup = StreamingDeduplicator(media_duration_s=10.0)
        dedup.accept_final(final_spans)
        dedup.reset()
        assert dedup.live_segments == []
        assert dedup.result() == []
        assert dedup.progress == 0.0
        assert not dedup.is_complete
        # Keys are forgotten: the same batch emits again
        assert len(dedup.accept_final(final_spans)) == 4
