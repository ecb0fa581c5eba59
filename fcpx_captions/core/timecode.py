"""Conversions between float seconds, SRT timecodes, and rational time.

WHY: SRT wants ``HH:MM:SS,mmm`` at millisecond precision; FCPXML wants
``<value>/<timescale>s`` fractions tied to a frame rate. Both are derived
from the same float seconds, and both must never go negative.

RULES:
- Negative input is clamped to zero, never an error
- SRT: round to the nearest millisecond first, then split into
  hours/minutes/seconds (so 1.9996 renders as 00:00:02,000, not ,1000)
- Hours are not wrapped at 24
- Rational: denominator is always the frame rate's timescale,
  numerator is round(seconds * timescale)
"""

from __future__ import annotations

import math
from typing import Tuple

from fcpx_captions.core.frame_rates import FrameRate


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def seconds_to_milliseconds(seconds: float) -> int:
    """Round seconds to whole milliseconds, the resolution SRT can express."""
    return _round_half_up(max(seconds, 0.0) * 1000)


def seconds_to_srt_time(seconds: float) -> str:
    """Convert seconds to an SRT timestamp: HH:MM:SS,mmm."""
    total_ms = seconds_to_milliseconds(seconds)
    total_s, millis = divmod(total_ms, 1000)
    hours, rest = divmod(total_s, 3600)
    minutes, secs = divmod(rest, 60)
    return "{:02d}:{:02d}:{:02d},{:03d}".format(hours, minutes, secs, millis)


def seconds_to_rational(seconds: float, frame_rate: FrameRate) -> Tuple[int, int]:
    """Convert seconds to a (numerator, timescale) pair for the given rate."""
    timescale = frame_rate.timescale
    return _round_half_up(max(seconds, 0.0) * timescale), timescale


def rational_to_seconds(numerator: int, denominator: int) -> float:
    """Decode a rational time value back to float seconds."""
    return numerator / denominator


def format_rational(numerator: int, denominator: int) -> str:
    """Render a rational time the way FCPXML attributes expect: ``"n/ds"``."""
    return "{}/{}s".format(numerator, denominator)
