"""Shared test fixtures for the fcpx_captions test suite.

WHY: Several test modules need the same small recognition run: a couple of
raw spans with control tokens, the incremental batches a streaming
recognizer would deliver, and the final batch. Centralizing them keeps
every module testing against the same data.

HOW: Plain module-level constants plus pytest fixtures returning fresh
copies, so tests can mutate freely.

RULES:
- Times are chosen so that expected split/merge results are exact in
  binary floating point where tests compare with ==
- Fixtures return new lists on every call
"""

from typing import List

import pytest

from fcpx_captions.core.frame_rates import get_frame_rate
from fcpx_captions.core.ir import RawSpan, Segment
from fcpx_captions.recognition.models import RecognitionRecording


# ---------------------------------------------------------------------------
# A short mixed-language recognition run
# ---------------------------------------------------------------------------

FINAL_SPANS: List[RawSpan] = [
    RawSpan(text="<|startoftranscript|><|zh|><|transcribe|>你好，世界。<|0.00|>", start_s=0.0, end_s=4.0),
    RawSpan(text=" Hello there.", start_s=5.0, end_s=6.0),
    RawSpan(text="<|endoftext|>", start_s=6.0, end_s=6.5),
    RawSpan(text="Bye", start_s=9.0, end_s=10.0),
]

# What a streaming recognizer reports before the final batch: the first
# span twice (chunk re-delivery) and the second once.
DISCOVERED_BATCHES: List[List[RawSpan]] = [
    [FINAL_SPANS[0]],
    [FINAL_SPANS[0], FINAL_SPANS[1]],
]


@pytest.fixture
def final_spans():
    return list(FINAL_SPANS)


@pytest.fixture
def discovered_batches():
    return [list(batch) for batch in DISCOVERED_BATCHES]


@pytest.fixture
def sample_recording():
    return RecognitionRecording(
        final=list(FINAL_SPANS),
        discovered=[list(batch) for batch in DISCOVERED_BATCHES],
        language="zh",
        media_duration_s=10.0,
    )


@pytest.fixture
def hello_world_segments():
    """Two captions 1.5s apart, the canonical merge example."""
    return [
        Segment(text="Hello.", start_s=0.0, end_s=1.0),
        Segment(text="World.", start_s=2.5, end_s=3.0),
    ]


@pytest.fixture
def fps25():
    return get_frame_rate("25")
