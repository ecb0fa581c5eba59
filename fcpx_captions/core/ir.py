"""Intermediate representation dataclasses for the caption timeline.

WHY: Recognition spans arrive noisy and overlapping; formatters need clean,
validated segments. A small set of typed values lets every stage (refiner,
deduplicator, merger, aligner, formatters) agree on what a caption is
without sharing mutable state.

HOW: Five types form the model:
  RawSpan         — one (text, start, end) triple straight from the recognizer
  Segment         — a refined, validated caption with a stable id
  DedupKey        — the (start, text) identity used to spot repeats
  ScriptMode      — which Chinese script to normalize text to
  CaptionTimeline — the finished segment list plus source metadata

RULES:
- All times are float seconds
- Segment.end_s > Segment.start_s once a segment leaves the refiner
- Segment.id is for bookkeeping only, never for ordering
- Stages return updated copies (dataclasses.replace) instead of mutating
  segments they were handed
"""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass, field
from typing import List

# Smallest duration a frame-independent segment may have (one millisecond).
MIN_DURATION_S = 0.001


def new_segment_id() -> str:
    """Return a fresh process-unique segment id."""
    return uuid.uuid4().hex


class ScriptMode(str, enum.Enum):
    """Chinese script normalization applied to recognized text.

    Inherits from str so values round-trip through config and CLI flags.
    """

    NONE = "none"
    SIMPLIFIED = "simplified"
    TRADITIONAL = "traditional"


@dataclass(frozen=True)
class RawSpan:
    """An unrefined recognition result.

    text may still contain recognizer control tokens such as
    ``<|startoftranscript|>`` or ``<|0.00|>``.
    """

    text: str
    start_s: float
    end_s: float


@dataclass(frozen=True)
class DedupKey:
    """Identity of a logical segment across delivery channels.

    The start time is kept as the exact float the refiner produced, not a
    formatted string, so two keys compare equal only when the values do.
    """

    start_s: float
    text: str


@dataclass
class Segment:
    """A refined caption on the output timeline.

    RULES:
    - text: non-empty, control tokens stripped, script-normalized
    - start_s / end_s: seconds, end_s > start_s
    - id: assigned at creation, preserved by merger and aligner copies
    """

    text: str
    start_s: float
    end_s: float
    id: str = field(default_factory=new_segment_id)

    @property
    def duration_s(self) -> float:
        return self.end_s - self.start_s

    @property
    def key(self) -> DedupKey:
        return DedupKey(start_s=self.start_s, text=self.text)


@dataclass
class CaptionTimeline:
    """The complete timeline handed to formatters.

    WHY: Formatters need the segments plus a little context (the media file
    name for project naming, the media duration for reporting). Bundling
    them keeps the formatter interface to a single argument.

    RULES:
    - segments: sorted by start_s; merged before formatting
    - source_filename: original media file name (may contain any characters;
      formatters escape it where needed)
    - media_duration_s: total media length, 0.0 when unknown
    """

    segments: List[Segment]
    source_filename: str = ""
    media_duration_s: float = 0.0
