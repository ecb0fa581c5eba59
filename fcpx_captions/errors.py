"""Exception taxonomy for caption export and transcription.

WHY: The CLI (and any embedding application) needs to tell "nothing to
export" apart from "the disk refused the file" and from a timing bug, and
report each with a clear message instead of a traceback.

RULES:
- Every error raised by this package derives from CaptionError
- None of these are retried internally; retry is the caller's policy
- WriteFailureError carries the storage layer's message verbatim
"""


class CaptionError(Exception):
    """Base class for all caption pipeline errors."""


class EmptyInputError(CaptionError):
    """Raised when a serializer receives no segments."""

    def __init__(self, message: str = "No subtitle segments to export") -> None:
        super().__init__(message)


class WriteFailureError(CaptionError):
    """Raised when an output file could not be written.

    The message is the underlying OSError text, unmodified, so the user
    sees exactly what the filesystem reported.
    """

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(message)


class MalformedTimecodeError(CaptionError):
    """Raised when a clip ends at or before its start after all corrections."""

    def __init__(self, index: int, start: object, end: object) -> None:
        self.index = index
        self.start = start
        self.end = end
        super().__init__(
            "Invalid timecode for caption {}: end {} is not after start {}".format(
                index, end, start
            )
        )


class TranscriptionError(CaptionError):
    """Raised when the recognizer fails; the original error is the __cause__."""


class RecordingFormatError(CaptionError):
    """Raised when a recorded recognition result does not match the schema."""
