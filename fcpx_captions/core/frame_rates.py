"""Supported frame rates with exact rational timescales.

WHY: FCPXML expresses every time as an integer fraction of a timescale.
Fractional NTSC rates (23.976, 29.97, 59.94) drift if handled as rounded
decimals, so each rate stores its exact fps as a Fraction and a timescale
chosen so that one frame is a whole number of timescale units.

HOW: FRAME_RATES is a plain table keyed by the short rate name. Each
FrameRate validates on construction that timescale / fps is an integer
(frame_units), e.g. 23.98 fps → 24000 / (24000/1001) = 1001 units.

RULES:
- Adding a frame rate means adding one row to FRAME_RATES; nothing else
  branches on which rate is selected
- label and format_tag are only used for display and serialization
  attributes (FFVideoFormat1080p<format_tag>)
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import Tuple


@dataclass(frozen=True)
class FrameRate:
    """One supported frame rate.

    Attributes:
        key: Short lookup name, e.g. ``"25"`` or ``"29.97"``.
        label: Human-readable name, e.g. ``"29.97 fps"``.
        fps: Exact frames per second.
        timescale: Time units per second used in rational time values.
        format_tag: Suffix of the FCPXML video format name.
    """

    key: str
    label: str
    fps: Fraction
    timescale: int
    format_tag: str

    def __post_init__(self) -> None:
        units = Fraction(self.timescale) / self.fps
        if units.denominator != 1:
            raise ValueError(
                "Timescale {} does not divide evenly into frames at {} fps".format(
                    self.timescale, self.fps
                )
            )

    @property
    def frame_units(self) -> int:
        """Length of one frame in timescale units."""
        return int(Fraction(self.timescale) / self.fps)

    @property
    def frame_duration(self) -> Fraction:
        """Exact length of one frame in seconds."""
        return Fraction(self.frame_units, self.timescale)

    @property
    def frame_duration_fraction(self) -> Tuple[int, int]:
        """One frame as an unreduced (units, timescale) pair, e.g. (1001, 24000)."""
        return self.frame_units, self.timescale

    @property
    def frame_duration_s(self) -> float:
        return float(self.frame_duration)


FRAME_RATES: dict[str, FrameRate] = {
    "23.98": FrameRate("23.98", "23.98 fps", Fraction(24000, 1001), 24000, "2398"),
    "24": FrameRate("24", "24 fps", Fraction(24), 2400, "24"),
    "25": FrameRate("25", "25 fps", Fraction(25), 2500, "25"),
    "29.97": FrameRate("29.97", "29.97 fps", Fraction(30000, 1001), 30000, "2997"),
    "30": FrameRate("30", "30 fps", Fraction(30), 3000, "30"),
    "50": FrameRate("50", "50 fps", Fraction(50), 5000, "50"),
    "59.94": FrameRate("59.94", "59.94 fps", Fraction(60000, 1001), 60000, "5994"),
    "60": FrameRate("60", "60 fps", Fraction(60), 6000, "60"),
}


def get_frame_rate(key: str) -> FrameRate:
    """Look up a frame rate by key ("25") or label ("25 fps").

    Raises:
        ValueError: If the key matches no registered rate.
    """
    name = key.strip().lower()
    if name.endswith("fps"):
        name = name[:-3].strip()
    rate = FRAME_RATES.get(name)
    if rate is None:
        raise ValueError(
            "Unknown frame rate '{}'. Available: {}".format(
                key, ", ".join(FRAME_RATES.keys())
            )
        )
    return rate
