"""FCPX Captions — streaming recognition output to frame-accurate captions.

WHY: Speech recognizers deliver overlapping, repeated, control-token-laden
spans. Editors need clean captions: one clause per title, no flicker
between close captions, every clip on a frame boundary, in formats their
tools import (SRT, FCPXML).

HOW: refine (clean, script-convert, split at punctuation) → deduplicate
the incremental and final channels → sort and gap-merge → frame-align →
format. Each stage is a pure transform and independently testable.

RULES:
- All formatters consume the same CaptionTimeline
- Adding a new output format = one new formatter module, no core changes
- Recognition, audio decoding, and UI are outside this package
"""

__version__ = "0.1.0"
