"""Transcription session (single-owner mailbox) and timeline export.

WHY: Recognizers call back from their own threads, sometimes while the
final batch is already on its way. If those callbacks appended to the
segment list directly, two threads could interleave appends and corrupt the
dedup key set. All mutation therefore happens on one owner thread.

HOW: Callbacks only put typed messages (DiscoveredBatch, FinalBatch,
RecognitionFailed) on a queue.Queue. The owner drains the queue and is the
only caller of the StreamingDeduplicator. run() executes the recognizer on
a worker thread and drains on the calling thread until the final batch has
been applied. export_timeline() then sorts, merges, and formats.

RULES:
- on_discovered / on_final are safe to call from any thread
- process_pending / run / reset must be called from the owner thread only
- Anything the recognizer raises (BaseException included) is re-raised on
  the owner as TranscriptionError
- No internal cancellation: to abort, stop forwarding spans and discard
  the session
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from fcpx_captions.config import DEFAULT_MERGE_GAP_S
from fcpx_captions.core.dedup import StreamingDeduplicator
from fcpx_captions.core.ir import CaptionTimeline, RawSpan, ScriptMode, Segment
from fcpx_captions.core.merger import merge_close_segments, sort_segments
from fcpx_captions.errors import EmptyInputError, TranscriptionError
from fcpx_captions.formatters import FORMATTERS
from fcpx_captions.formatters.base import ExportOptions, FormatterOutput
from fcpx_captions.recognition.base import Recognizer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiscoveredBatch:
    spans: List[RawSpan]


@dataclass(frozen=True)
class FinalBatch:
    spans: List[RawSpan]


@dataclass(frozen=True)
class RecognitionFailed:
    error: BaseException


class TranscriptionSession:
    """Collects one transcription run into a deduplicated segment list.

    Args:
        script_mode: Chinese script normalization for the refiner.
        media_duration_s: Media length for progress reporting (0 = unknown).
        on_segment: Called on the owner thread for each new segment.
        on_progress: Called on the owner thread with progress in [0, 1].
    """

    def __init__(
        self,
        script_mode: ScriptMode = ScriptMode.NONE,
        media_duration_s: float = 0.0,
        on_segment: Optional[Callable[[Segment], None]] = None,
        on_progress: Optional[Callable[[float], None]] = None,
    ) -> None:
        self._mailbox: queue.Queue = queue.Queue()
        self._dedup = StreamingDeduplicator(
            script_mode=script_mode,
            media_duration_s=media_duration_s,
            on_segment=on_segment,
            on_progress=on_progress,
        )

    # -- producer side (any thread) ------------------------------------------

    def on_discovered(self, spans: Iterable[RawSpan]) -> None:
        self._mailbox.put(DiscoveredBatch(list(spans)))

    def on_final(self, spans: Iterable[RawSpan]) -> None:
        self._mailbox.put(FinalBatch(list(spans)))

    def on_failure(self, error: BaseException) -> None:
        self._mailbox.put(RecognitionFailed(error))

    # -- owner side ----------------------------------------------------------

    @property
    def segments(self) -> List[Segment]:
        """Segments shown so far (live, in arrival order)."""
        return self._dedup.live_segments

    @property
    def progress(self) -> float:
        return self._dedup.progress

    @property
    def is_complete(self) -> bool:
        return self._dedup.is_complete

    def result(self) -> List[Segment]:
        """The authoritative segment list (the final batch once applied)."""
        return self._dedup.result()

    def process_pending(self) -> int:
        """Apply every queued message without blocking; returns how many."""
        count = 0
        while True:
            try:
                message = self._mailbox.get_nowait()
            except queue.Empty:
                return count
            self._apply(message)
            count += 1

    def reset(self) -> None:
        """Discard queued messages and all collected segments."""
        while True:
            try:
                self._mailbox.get_nowait()
            except queue.Empty:
                break
        self._dedup.reset()

    def run(
        self,
        recognizer: Recognizer,
        samples: Sequence[float],
        language: str,
    ) -> List[Segment]:
        """Run the recognizer on a worker thread and collect its output.

        Blocks the calling (owner) thread, applying messages as they arrive,
        until the final batch has been processed.

        Raises:
            TranscriptionError: If the recognizer raised.
        """
        self.reset()
        worker = threading.Thread(
            target=self._recognize,
            args=(recognizer, samples, language),
            name="recognizer",
            daemon=True,
        )
        worker.start()
        try:
            while not self._dedup.is_complete:
                self._apply(self._mailbox.get())
        finally:
            worker.join()

        segments = self.result()
        logger.info("Transcription finished with %d segments", len(segments))
        return segments

    def _recognize(self, recognizer: Recognizer, samples: Sequence[float], language: str) -> None:
        try:
            final = recognizer.transcribe(samples, language, self.on_discovered)
        except BaseException as e:
            # Anything escaping here must reach the owner, or run() waits forever
            logger.exception("Recognizer failed")
            self.on_failure(e)
            return
        self.on_final(final)

    def _apply(self, message: object) -> None:
        if isinstance(message, DiscoveredBatch):
            self._dedup.accept_discovered(message.spans)
        elif isinstance(message, FinalBatch):
            self._dedup.accept_final(message.spans)
        elif isinstance(message, RecognitionFailed):
            raise TranscriptionError(
                "Transcription failed: {}".format(message.error)
            ) from message.error
        else:
            raise TypeError("Unexpected mailbox message: {!r}".format(message))


def build_timeline(
    segments: Sequence[Segment],
    merge_gap_s: float = DEFAULT_MERGE_GAP_S,
    source_filename: str = "",
    media_duration_s: float = 0.0,
) -> CaptionTimeline:
    """Sort and gap-merge segments into the timeline formatters consume."""
    merged = merge_close_segments(sort_segments(segments), merge_gap_s)
    logger.debug("Merged timeline: %d segments (gap < %.2fs closed)", len(merged), merge_gap_s)
    return CaptionTimeline(
        segments=merged,
        source_filename=source_filename,
        media_duration_s=media_duration_s,
    )


def export_timeline(
    timeline: CaptionTimeline,
    format_keys: Sequence[str],
    options: Optional[ExportOptions] = None,
) -> List[FormatterOutput]:
    """Run the named formatters over a merged timeline.

    Raises:
        EmptyInputError: If the timeline has no segments.
        KeyError: If a format key is not registered in FORMATTERS.
    """
    if not timeline.segments:
        raise EmptyInputError()

    outputs: List[FormatterOutput] = []
    for key in format_keys:
        formatter = FORMATTERS[key](options)
        logger.debug("Running %s formatter", formatter.name)
        outputs.extend(formatter.format(timeline))
    return outputs
