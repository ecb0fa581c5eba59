"""Command-line interface for FCPX Captions.

WHY: Editors need a way to turn a saved recognition result into caption
files without a GUI: pick a frame rate, get an .srt and an .fcpxml next
to the media. The CLI wires the whole pipeline behind one command.

HOW: Uses argparse to accept a recognition result JSON file, language,
frame rate, merge/min-gap settings, output formats, and output directory.
The recording is replayed through a TranscriptionSession (so incremental
and final batches are deduplicated exactly as with a live recognizer),
merged, formatted, and saved. Status messages go to stderr.

RULES:
- Positional argument: recognition result JSON file
- --formats: comma-separated formatter keys (default: all registered)
- Output naming: {stem}{suffix}, numeric suffix on conflict ({stem}-2.srt);
  existing files are never overwritten
- The stem comes from --media-name when given, else the input file
- Status output goes to stderr (not stdout)
- CaptionError subclasses print "Error: ..." and exit with status 1
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from fcpx_captions.config import (
    DEFAULT_FRAME_RATE,
    DEFAULT_LANGUAGE,
    DEFAULT_MERGE_GAP_S,
    DEFAULT_MIN_GAP_FRAMES,
    LANGUAGE_PRESETS,
    map_language,
)
from fcpx_captions.core.frame_rates import FRAME_RATES, get_frame_rate
from fcpx_captions.core.ir import Segment
from fcpx_captions.errors import CaptionError, WriteFailureError
from fcpx_captions.formatters import FORMATTERS
from fcpx_captions.formatters.base import ExportOptions, FormatterOutput
from fcpx_captions.pipeline import TranscriptionSession, build_timeline, export_timeline
from fcpx_captions.recognition import ReplayRecognizer, load_recording

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr, flushed immediately."""
    print(msg, file=sys.stderr, flush=True)


def _resolve_output_path(stem: str, suffix: str, output_dir: Path) -> Path:
    """Resolve a conflict-free output path.

    WHY: Re-running on the same media must not overwrite earlier exports
    (an editor may already have imported them).

    RULES:
    - First attempt: {stem}{suffix} (e.g. interview.fcpxml)
    - Conflict: insert -2, -3, ... before the extension
      (e.g. interview-2.fcpxml)
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    # ".fcpxml" → ("", ".fcpxml"); "-captions.srt" → ("-captions", ".srt")
    dot_idx = suffix.rfind(".")
    if dot_idx >= 0:
        suffix_name = suffix[:dot_idx]
        suffix_ext = suffix[dot_idx:]
    else:
        suffix_name = suffix
        suffix_ext = ""

    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, suffix_name, counter, suffix_ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(output: FormatterOutput, stem: str, output_dir: Path) -> Path:
    """Write one formatter output as UTF-8 (no BOM) and return its path.

    Raises:
        WriteFailureError: If the filesystem rejects the write; the
            message is the OSError text unchanged.
    """
    path = _resolve_output_path(stem, output.suffix, output_dir)
    try:
        path.write_text(output.content, encoding="utf-8")
    except OSError as e:
        raise WriteFailureError(str(path), str(e)) from e
    return path


def _parse_formats(value: Optional[str]) -> List[str]:
    if not value:
        return list(FORMATTERS.keys())
    keys = [f.strip().lower() for f in value.split(",") if f.strip()]
    for key in keys:
        if key not in FORMATTERS:
            raise ValueError(
                "Unknown format '{}'. Available formats: {}".format(
                    key, ", ".join(sorted(FORMATTERS.keys()))
                )
            )
    return keys


def _run(args: argparse.Namespace) -> List[Path]:
    """Execute the pipeline for parsed arguments; returns saved file paths."""
    input_path = Path(args.input_file).resolve()
    if not input_path.is_file():
        raise ValueError("File not found: {}".format(input_path))

    output_dir = Path(args.output_dir).resolve() if args.output_dir else input_path.parent
    if not output_dir.is_dir():
        raise ValueError("Output directory does not exist: {}".format(output_dir))

    if args.merge_gap < 0:
        raise ValueError("--merge-gap must not be negative, got {}".format(args.merge_gap))
    if args.min_gap_frames < 0:
        raise ValueError("--min-gap-frames must not be negative, got {}".format(args.min_gap_frames))

    format_keys = _parse_formats(args.formats)
    preset = map_language(args.language)
    options = ExportOptions(
        frame_rate=get_frame_rate(args.frame_rate),
        min_gap_frames=args.min_gap_frames,
    )

    _status("Loading recognition result...")
    recording = load_recording(input_path)

    media_duration = args.media_duration
    if media_duration is None:
        media_duration = recording.media_duration_s or 0.0

    last_pct = -1

    def on_progress(fraction: float) -> None:
        nonlocal last_pct
        pct = int(fraction * 100)
        if pct != last_pct:
            last_pct = pct
            _status("  Transcribing... {}%".format(pct))

    def on_segment(segment: Segment) -> None:
        logger.debug("[%.3f - %.3f] %s", segment.start_s, segment.end_s, segment.text)

    session = TranscriptionSession(
        script_mode=preset.script_mode,
        media_duration_s=media_duration,
        on_segment=on_segment,
        on_progress=on_progress,
    )
    segments = session.run(ReplayRecognizer(recording), [], preset.recognizer_code)
    _status("  {} segments".format(len(segments)))

    source_name = args.media_name or input_path.name
    stem = Path(source_name).stem
    timeline = build_timeline(
        segments,
        merge_gap_s=args.merge_gap,
        source_filename=source_name,
        media_duration_s=media_duration,
    )

    _status("Formatting output ({} @ {})...".format(
        ", ".join(format_keys), options.frame_rate.label
    ))
    saved: List[Path] = []
    for output in export_timeline(timeline, format_keys, options):
        path = _save_output(output, stem, output_dir)
        saved.append(path)
        _status("  Saved: {}".format(path.name))
    return saved


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="fcpx_captions",
        description="Turn a recognition result into frame-accurate SRT and FCPXML captions.",
    )

    parser.add_argument(
        "input_file",
        help="Recognition result JSON (a span list, or an object with 'final' "
             "and optional 'discovered' batches).",
    )
    parser.add_argument(
        "--media-name",
        default=None,
        help="Original media file name, used for output naming and the FCPXML project name.",
    )
    parser.add_argument(
        "--language",
        default=DEFAULT_LANGUAGE,
        help="Recognition language preset: {} (default: %(default)s).".format(
            ", ".join(sorted(LANGUAGE_PRESETS))
        ),
    )
    parser.add_argument(
        "--frame-rate",
        default=DEFAULT_FRAME_RATE,
        help="Target frame rate: {} (default: %(default)s).".format(", ".join(FRAME_RATES)),
    )
    parser.add_argument(
        "--formats",
        default=None,
        help="Comma-separated list of output formats. "
             "Available: {}. Default: all.".format(", ".join(sorted(FORMATTERS.keys()))),
    )
    parser.add_argument(
        "--merge-gap",
        type=float,
        default=DEFAULT_MERGE_GAP_S,
        help="Close silences shorter than this many seconds (default: %(default)s).",
    )
    parser.add_argument(
        "--min-gap-frames",
        type=int,
        default=DEFAULT_MIN_GAP_FRAMES,
        help="Minimum empty frames between FCPXML title clips (default: %(default)s).",
    )
    parser.add_argument(
        "--media-duration",
        type=float,
        default=None,
        help="Media duration in seconds for progress reporting "
             "(default: taken from the recording, if present).",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: same as input file).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``python -m fcpx_captions`` and the console script."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    try:
        saved = _run(args)
    except (CaptionError, ValueError, OSError) as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)

    _status("")
    _status("Done! Saved {} file(s)".format(len(saved)))


if __name__ == "__main__":
    main()
