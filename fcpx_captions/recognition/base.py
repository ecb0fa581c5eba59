"""Interface the pipeline expects from a speech recognizer.

WHY: Recognition itself is someone else's job (WhisperKit, whisper.cpp, a
cloud API). The pipeline only needs a way to start a run and to hear about
results: incrementally while decoding, and once more as the final list.

RULES:
- transcribe() may call on_discovered any number of times, from any thread
- transcribe() returns the final, complete span list exactly once
- Spans may contain control tokens; refinement happens downstream
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import List, Sequence

from fcpx_captions.core.ir import RawSpan

DiscoveredCallback = Callable[[List[RawSpan]], None]


class Recognizer(ABC):
    """Abstract speech recognizer."""

    @abstractmethod
    def transcribe(
        self,
        samples: Sequence[float],
        language: str,
        on_discovered: DiscoveredCallback,
    ) -> List[RawSpan]:
        """Recognize mono 16 kHz PCM samples.

        Args:
            samples: Audio samples in [-1, 1].
            language: Recognizer language code, e.g. "zh" or "en".
            on_discovered: Receives each batch of newly finalized spans.

        Returns:
            The complete, authoritative span list.
        """
