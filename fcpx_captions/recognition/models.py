"""Recorded recognition results: JSON schema, parsing, and loading.

WHY: The CLI works from recognizer output saved to disk, so captions can be
regenerated (different frame rate, different merge gap) without running
recognition again. Such files come from other tools and are validated
before anything downstream trusts them.

HOW: Two shapes are accepted:
  1. A plain list of spans — treated as the final batch only
  2. An object with "final" and optionally "discovered" (a list of
     incremental batches), "language", and "media_duration_s"
A span is ``{"text": str, "start": number, "end": number}``. The document
is checked with jsonschema, then converted into RawSpan values.

RULES:
- Schema violations and unreadable JSON raise RecordingFormatError
- Span times are seconds; negative times are rejected by the schema
- Extra keys on spans are ignored (recognizers add tokens, scores, ...)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

import jsonschema

from fcpx_captions.core.ir import RawSpan
from fcpx_captions.errors import RecordingFormatError

_SPAN_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["text", "start", "end"],
    "properties": {
        "text": {"type": "string"},
        "start": {"type": "number", "minimum": 0},
        "end": {"type": "number", "minimum": 0},
    },
}

_BATCH_SCHEMA: dict[str, Any] = {"type": "array", "items": _SPAN_SCHEMA}

RECORDING_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "oneOf": [
        _BATCH_SCHEMA,
        {
            "type": "object",
            "required": ["final"],
            "properties": {
                "language": {"type": "string"},
                "media_duration_s": {"type": "number", "minimum": 0},
                "discovered": {"type": "array", "items": _BATCH_SCHEMA},
                "final": _BATCH_SCHEMA,
            },
        },
    ],
}


@dataclass
class RecognitionRecording:
    """A recognizer run captured to disk.

    Attributes:
        final: The authoritative span list.
        discovered: Incremental batches in delivery order (may be empty).
        language: Recognizer language code, if recorded.
        media_duration_s: Media length in seconds, if recorded.
    """

    final: List[RawSpan]
    discovered: List[List[RawSpan]] = field(default_factory=list)
    language: Optional[str] = None
    media_duration_s: Optional[float] = None


def _to_spans(batch: List[dict]) -> List[RawSpan]:
    return [
        RawSpan(text=item["text"], start_s=float(item["start"]), end_s=float(item["end"]))
        for item in batch
    ]


def parse_recording(data: Any) -> RecognitionRecording:
    """Validate parsed JSON and convert it into a RecognitionRecording.

    Raises:
        RecordingFormatError: If data does not match RECORDING_SCHEMA.
    """
    try:
        jsonschema.validate(instance=data, schema=RECORDING_SCHEMA)
    except jsonschema.ValidationError as e:
        raise RecordingFormatError(
            "Invalid recognition result: {}".format(e.message)
        ) from e

    if isinstance(data, list):
        return RecognitionRecording(final=_to_spans(data))

    duration = data.get("media_duration_s")
    return RecognitionRecording(
        final=_to_spans(data["final"]),
        discovered=[_to_spans(batch) for batch in data.get("discovered", [])],
        language=data.get("language"),
        media_duration_s=float(duration) if duration is not None else None,
    )


def load_recording(path: Path) -> RecognitionRecording:
    """Read and validate a recognition result JSON file.

    Raises:
        RecordingFormatError: If the file is not valid JSON or fails the schema.
        OSError: If the file cannot be read.
    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise RecordingFormatError(
            "{} is not valid JSON: {}".format(path, e)
        ) from e
    return parse_recording(data)
