"""Recognizer boundary: the interface, recorded results, and playback.

RULES:
- Nothing here performs speech recognition
- Recorded results are schema-validated before conversion to RawSpan
"""

from fcpx_captions.recognition.base import Recognizer
from fcpx_captions.recognition.models import (
    RecognitionRecording,
    load_recording,
    parse_recording,
)
from fcpx_captions.recognition.replay import ReplayRecognizer

__all__ = [
    "Recognizer",
    "RecognitionRecording",
    "ReplayRecognizer",
    "load_recording",
    "parse_recording",
]
