"""SRT subtitle formatter.

WHY: SRT is the lowest common denominator for subtitles: every player and
editor reads it. It is frame-independent, so captions keep the merged
millisecond timing instead of being snapped to a frame grid.

HOW: One block per segment (index, ``start --> end`` line, text, blank
line), with timestamps rendered by timecode.seconds_to_srt_time().

RULES:
- Indices are 1-based
- Every block ends with a blank line, including the last one
- No frame alignment is applied
- A cue whose end does not come after its start at millisecond resolution
  raises MalformedTimecodeError
- Output suffix: ".srt", media type "application/x-subrip"
"""

from typing import List

from fcpx_captions.core.ir import CaptionTimeline
from fcpx_captions.core.timecode import seconds_to_milliseconds, seconds_to_srt_time
from fcpx_captions.errors import MalformedTimecodeError
from fcpx_captions.formatters.base import BaseFormatter, FormatterOutput


class SRTFormatter(BaseFormatter):
    """Formatter that renders the timeline as a single SRT file."""

    @property
    def name(self) -> str:
        return "SRT"

    def format(self, timeline: CaptionTimeline) -> List[FormatterOutput]:
        self._require_segments(timeline)

        blocks = []
        for index, segment in enumerate(timeline.segments, 1):
            # A cue that rounds to zero length would be written as "t --> t"
            if seconds_to_milliseconds(segment.end_s) <= seconds_to_milliseconds(segment.start_s):
                raise MalformedTimecodeError(index, segment.start_s, segment.end_s)
            blocks.append("{}\n{} --> {}\n{}\n\n".format(
                index,
                seconds_to_srt_time(segment.start_s),
                seconds_to_srt_time(segment.end_s),
                segment.text,
            ))

        return [
            FormatterOutput(
                suffix=".srt",
                content="".join(blocks),
                media_type="application/x-subrip",
            )
        ]
