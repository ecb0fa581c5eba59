"""Gap merging: close short silences between consecutive captions.

WHY: Captions that blink off for a second and come back are distracting.
When the silence between two captions is shorter than a threshold, the
earlier caption is held on screen until the next one starts. Overlaps are
resolved the same way, by cutting the earlier caption at the next start.

HOW: One left-to-right pass over a start-sorted list. For each adjacent
pair, gap = current.start - previous.end; if gap < max_gap_s (negative
gaps included) the previous caption's end becomes the current start.
A caption that ends up shorter than one millisecond (coincident starts,
or a sub-millisecond fragment from the refiner) keeps MIN_DURATION_S and
pushes its successor's start past it.

RULES:
- Input must already be sorted by start_s; the merger never reorders
- max_gap_s must be >= 0 so every overlap is cut
- Not transitive: a caption is only ever extended up to its direct successor
- Returns new Segment objects (ids preserved); input is not modified
- Idempotent: merging merged output changes nothing
- Every caption spans at least one whole millisecond once rounded, the
  resolution of SRT timestamps
"""

from __future__ import annotations

import dataclasses
from typing import List, Sequence

from fcpx_captions.core.ir import MIN_DURATION_S, Segment
from fcpx_captions.core.timecode import seconds_to_milliseconds

DEFAULT_MAX_GAP_S = 2.0


def sort_segments(segments: Sequence[Segment]) -> List[Segment]:
    """Return segments ordered by start time (stable for equal starts)."""
    return sorted(segments, key=lambda s: s.start_s)


def _too_short(segment: Segment) -> bool:
    return seconds_to_milliseconds(segment.end_s) <= seconds_to_milliseconds(segment.start_s)


def merge_close_segments(
    segments: Sequence[Segment],
    max_gap_s: float = DEFAULT_MAX_GAP_S,
) -> List[Segment]:
    """Extend each caption to the next one's start when the gap is short.

    Args:
        segments: Captions sorted by start_s.
        max_gap_s: Silences shorter than this are closed.

    Returns:
        A new list of the same length, still sorted, with
        previous.end_s <= current.start_s for every adjacent pair.

    Raises:
        ValueError: If max_gap_s is negative.
    """
    if max_gap_s < 0:
        raise ValueError("Merge gap must not be negative, got {}".format(max_gap_s))

    result = [dataclasses.replace(s) for s in segments]

    for i, current in enumerate(result):
        if i > 0:
            previous = result[i - 1]
            if current.start_s - previous.end_s < max_gap_s:
                previous.end_s = current.start_s
                if _too_short(previous):
                    previous.end_s = previous.start_s + MIN_DURATION_S
                    current.start_s = previous.end_s
        if _too_short(current):
            current.end_s = current.start_s + MIN_DURATION_S

    return result
