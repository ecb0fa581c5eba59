"""Recognizer that plays back a recorded recognition run.

WHY: Lets the CLI and tests drive the full streaming pipeline (incremental
batches, then the final batch) from a file instead of a live model.

HOW: transcribe() ignores the audio, delivers each recorded discovered
batch through on_discovered in order, then returns the final batch.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from fcpx_captions.core.ir import RawSpan
from fcpx_captions.recognition.base import DiscoveredCallback, Recognizer
from fcpx_captions.recognition.models import RecognitionRecording

logger = logging.getLogger(__name__)


class ReplayRecognizer(Recognizer):
    """Replays a RecognitionRecording."""

    def __init__(self, recording: RecognitionRecording) -> None:
        self.recording = recording

    def transcribe(
        self,
        samples: Sequence[float],
        language: str,
        on_discovered: DiscoveredCallback,
    ) -> List[RawSpan]:
        if self.recording.language and self.recording.language != language:
            logger.warning(
                "Recording language '%s' differs from requested '%s'",
                self.recording.language, language,
            )
        for batch in self.recording.discovered:
            on_discovered(list(batch))
        return list(self.recording.final)
