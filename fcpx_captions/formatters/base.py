"""Abstract base formatter, export options, and output container.

WHY: Every output format consumes the same CaptionTimeline but produces
different file content. This base class enforces a consistent interface
so the CLI and pipeline can work with any formatter generically.

HOW: BaseFormatter is an ABC with two requirements — a ``name`` property
and a ``format()`` method. ExportOptions carries the frame-level settings
some formatters need; every formatter accepts it so the registry can
instantiate any of them the same way. FormatterOutput bundles a file suffix
with its content and MIME type.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``format()``
- ``format()`` raises EmptyInputError for a timeline without segments
- ``suffix`` includes the dot, e.g. ``".srt"``; the caller prepends the
  source filename stem
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

from fcpx_captions.config import DEFAULT_FRAME_RATE, DEFAULT_MIN_GAP_FRAMES
from fcpx_captions.core.frame_rates import FrameRate, get_frame_rate
from fcpx_captions.core.ir import CaptionTimeline
from fcpx_captions.errors import EmptyInputError


@dataclass
class ExportOptions:
    """Frame-level export settings.

    Attributes:
        frame_rate: Target frame rate for frame-aligned formats.
        min_gap_frames: Empty frames kept between consecutive clips.
    """

    frame_rate: FrameRate = field(default_factory=lambda: get_frame_rate(DEFAULT_FRAME_RATE))
    min_gap_frames: int = DEFAULT_MIN_GAP_FRAMES


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix appended to the source stem,
                e.g. ``".fcpxml"`` → ``"interview.fcpxml"``.
        content: The file content.
        media_type: MIME type for the content, e.g. ``"application/x-subrip"``.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all output formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    def __init__(self, options: Optional[ExportOptions] = None) -> None:
        self.options = options or ExportOptions()

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'FCPXML'."""

    @abstractmethod
    def format(self, timeline: CaptionTimeline) -> List[FormatterOutput]:
        """Convert the timeline into one or more output files.

        Raises:
            EmptyInputError: If the timeline has no segments.
            MalformedTimecodeError: If a caption ends at or before its start.
        """

    @staticmethod
    def _require_segments(timeline: CaptionTimeline) -> None:
        if not timeline.segments:
            raise EmptyInputError()
