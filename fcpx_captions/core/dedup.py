"""Exactly-once delivery of refined segments from two recognition channels.

WHY: The recognizer reports results twice: incrementally ("discovered"
chunks, so captions can appear while recognition is still running) and once
more as a final, authoritative batch. Both are refined independently from
the same raw spans, so without bookkeeping every caption would show up
twice.

HOW: The deduplicator keeps a set of DedupKey (start, text) values. Each
refined segment is emitted to the live timeline (and the on_segment
listener) only the first time its key is seen, whichever channel delivers
it. The final batch, deduplicated by key, replaces the live timeline as the
result once it arrives. Incremental end times drive a monotonic watermark
used for progress reporting.

RULES:
- Single owner: only one thread may call accept_* / reset (the
  TranscriptionSession mailbox guarantees this)
- First-observed wins; already-emitted segments are never retracted
- Progress = min(watermark / media duration, 0.99) until the final batch
  arrives, then 1.0; nothing is reported when the duration is unknown
- The final batch is the ground truth for what reaches the Gap Merger
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Iterable, List, Optional, Set

from fcpx_captions.core.ir import DedupKey, RawSpan, ScriptMode, Segment
from fcpx_captions.core.refiner import refine_span

logger = logging.getLogger(__name__)

# Share of progress held back until the final batch has been processed.
_MAX_STREAMING_PROGRESS = 0.99


class StreamingDeduplicator:
    """Merges the discovered and final channels into one timeline.

    Args:
        script_mode: Chinese script normalization passed to the refiner.
        media_duration_s: Total media length for progress math (0 = unknown).
        on_segment: Called once per newly seen segment, in arrival order.
        on_progress: Called with a fraction in [0, 1] when progress advances.
    """

    def __init__(
        self,
        script_mode: ScriptMode = ScriptMode.NONE,
        media_duration_s: float = 0.0,
        on_segment: Optional[Callable[[Segment], None]] = None,
        on_progress: Optional[Callable[[float], None]] = None,
    ) -> None:
        self.script_mode = script_mode
        self.media_duration_s = media_duration_s
        self._on_segment = on_segment
        self._on_progress = on_progress
        self._seen: Set[DedupKey] = set()
        self._live: List[Segment] = []
        self._final: Optional[List[Segment]] = None
        self._watermark = 0.0
        self._progress = 0.0

    @property
    def live_segments(self) -> List[Segment]:
        """Segments emitted so far, in emission order (a copy)."""
        return list(self._live)

    @property
    def progress(self) -> float:
        return self._progress

    @property
    def is_complete(self) -> bool:
        return self._final is not None

    def reset(self) -> None:
        """Forget all state so the instance can serve a new transcription run."""
        self._seen.clear()
        self._live = []
        self._final = None
        self._watermark = 0.0
        self._progress = 0.0

    def accept_discovered(self, spans: Iterable[RawSpan]) -> List[Segment]:
        """Process one incremental batch; returns the segments newly emitted."""
        emitted: List[Segment] = []
        for span in spans:
            segments = refine_span(span, self.script_mode)
            if not segments:
                continue
            self._advance_watermark(segments[-1].end_s)
            for segment in segments:
                if self._emit_if_new(segment):
                    emitted.append(segment)
        return emitted

    def accept_final(self, spans: Iterable[RawSpan]) -> List[Segment]:
        """Process the authoritative batch; returns the segments newly emitted.

        The deduplicated final list becomes result(). Keys the incremental
        channel already delivered are not emitted again.
        """
        final: List[Segment] = []
        final_keys: Set[DedupKey] = set()
        emitted: List[Segment] = []

        for span in spans:
            for segment in refine_span(span, self.script_mode):
                key = segment.key
                if key in final_keys:
                    continue
                final_keys.add(key)
                final.append(segment)
                if self._emit_if_new(segment):
                    emitted.append(segment)

        self._final = final
        logger.debug(
            "Final batch: %d segments (%d not seen during streaming)",
            len(final), len(emitted),
        )
        self._report_progress(1.0)
        return emitted

    def result(self) -> List[Segment]:
        """The authoritative segment list: the final batch once it arrived."""
        if self._final is not None:
            return list(self._final)
        return list(self._live)

    def _emit_if_new(self, segment: Segment) -> bool:
        key = segment.key
        if key in self._seen:
            return False
        self._seen.add(key)
        self._live.append(segment)
        if self._on_segment is not None:
            self._on_segment(segment)
        return True

    def _advance_watermark(self, end_s: float) -> None:
        if end_s <= self._watermark:
            return
        self._watermark = end_s
        if self.media_duration_s > 0:
            self._report_progress(min(self._watermark / self.media_duration_s, _MAX_STREAMING_PROGRESS))

    def _report_progress(self, fraction: float) -> None:
        if fraction <= self._progress:
            return
        self._progress = fraction
        if self._on_progress is not None:
            self._on_progress(fraction)
