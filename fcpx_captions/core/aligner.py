"""Frame alignment: snap caption times onto exact frame boundaries.

WHY: Final Cut Pro rejects or silently shifts clips whose offsets fall
between frames, and refuses to import title clips that sit too close
together on the same lane. Every exported clip therefore has to start and
end on a frame, last at least one frame, and keep a minimum gap from its
predecessor.

HOW: All arithmetic happens in whole frames, using the frame rate's exact
Fraction so fractional NTSC rates do not drift:
  1. snap start and end to the nearest frame (halves round up)
  2. if the start lands within min_gap_frames of the previous clip's end,
     push it to previous end + min_gap_frames
  3. if the clip is now shorter than one frame, extend it to one frame
Frame counts convert to timescale units by multiplying by frame_units.

RULES:
- min_gap_frames must be >= 0 so clips never overlap
- Never reorders; clip i always corresponds to segment i
- end_frame > start_frame for every clip
- start_frame >= previous end_frame + min_gap_frames for every pair
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from fractions import Fraction
from typing import List, Sequence

from fcpx_captions.core.frame_rates import FrameRate
from fcpx_captions.core.ir import Segment

DEFAULT_MIN_GAP_FRAMES = 2


@dataclass(frozen=True)
class AlignedClip:
    """A segment placed on the frame grid of one frame rate."""

    segment: Segment
    frame_rate: FrameRate
    start_frame: int
    end_frame: int

    @property
    def offset_value(self) -> int:
        """Clip start in timescale units."""
        return self.start_frame * self.frame_rate.frame_units

    @property
    def end_value(self) -> int:
        return self.end_frame * self.frame_rate.frame_units

    @property
    def duration_value(self) -> int:
        return self.end_value - self.offset_value

    @property
    def start_s(self) -> float:
        return self.offset_value / self.frame_rate.timescale

    @property
    def end_s(self) -> float:
        return self.end_value / self.frame_rate.timescale


def snap_to_frame(seconds: float, frame_rate: FrameRate) -> int:
    """Return the index of the frame boundary nearest to seconds (>= 0)."""
    frames = Fraction(max(seconds, 0.0)) / frame_rate.frame_duration
    return math.floor(frames + Fraction(1, 2))


def align_segments(
    segments: Sequence[Segment],
    frame_rate: FrameRate,
    min_gap_frames: int = DEFAULT_MIN_GAP_FRAMES,
) -> List[AlignedClip]:
    """Place start-sorted segments on the frame grid.

    Args:
        segments: Merged captions sorted by start_s.
        frame_rate: Target frame rate.
        min_gap_frames: Minimum number of empty frames between clips.

    Returns:
        One AlignedClip per segment, in input order.

    Raises:
        ValueError: If min_gap_frames is negative.
    """
    if min_gap_frames < 0:
        raise ValueError(
            "Minimum clip gap must not be negative, got {} frames".format(min_gap_frames)
        )

    clips: List[AlignedClip] = []
    previous_end = None

    for segment in segments:
        start = snap_to_frame(segment.start_s, frame_rate)
        end = snap_to_frame(segment.end_s, frame_rate)

        if previous_end is not None and start < previous_end + min_gap_frames:
            start = previous_end + min_gap_frames
        if end - start < 1:
            end = start + 1

        clips.append(AlignedClip(
            segment=segment,
            frame_rate=frame_rate,
            start_frame=start,
            end_frame=end,
        ))
        previous_end = end

    return clips
