"""Final Cut Pro XML (FCPXML 1.10) caption formatter.

WHY: Final Cut Pro has no SRT-to-title import that keeps styling editable.
An FCPXML project whose captions are Basic Title clips connected above a
gap can be opened directly and restyled in the editor.

HOW: Segments are placed on the frame grid by aligner.align_segments(),
then written as a project whose spine holds one gap spanning the whole
timeline. Each caption is a lane-1 ``<title>`` connected to that gap, with
its own ``<text-style-def>`` (fixed default style) referenced by id.

RULES:
- All time attributes are rational: ``"<value>/<timescale>s"``
- Total duration is the latest aligned clip end, frame-aligned
- All free text (caption text, media file name) is XML-escaped, including
  both quote characters
- Style ids are ts1, ts2, ... in caption order
- Output suffix: ".fcpxml", media type "application/xml"
"""

from __future__ import annotations

from typing import List
from xml.sax.saxutils import escape

from fcpx_captions.core.aligner import AlignedClip, align_segments
from fcpx_captions.core.ir import CaptionTimeline
from fcpx_captions.core.timecode import format_rational
from fcpx_captions.errors import MalformedTimecodeError
from fcpx_captions.formatters.base import BaseFormatter, FormatterOutput

FCPXML_VERSION = "1.10"

FORMAT_WIDTH = 1920
FORMAT_HEIGHT = 1080

TITLE_EFFECT_NAME = "Basic Title"
TITLE_EFFECT_UID = ".../Titles.localized/Bumper:Opener.localized/Basic Title.localized/Basic Title.moti"

TITLE_FONT = "Helvetica"
TITLE_FONT_SIZE = 60
TITLE_FONT_COLOR = "1 1 1 1"
TITLE_ALIGNMENT = "center"

_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def escape_xml(text: str) -> str:
    """Escape & < > " ' for use in both element text and attribute values."""
    return escape(text, _XML_ENTITIES)


def _project_name(source_filename: str) -> str:
    if not source_filename:
        return "Captions"
    return "Captions_{}".format(source_filename)


def _title_lines(clip: AlignedClip, style_id: str, timescale: int) -> List[str]:
    text = escape_xml(clip.segment.text)
    indent = " " * 28
    return [
        indent + '<title ref="r2" name="{}" lane="1" offset="{}" duration="{}" start="{}">'.format(
            text,
            format_rational(clip.offset_value, timescale),
            format_rational(clip.duration_value, timescale),
            format_rational(0, timescale),
        ),
        indent + "    <text>",
        indent + '        <text-style ref="{}">{}</text-style>'.format(style_id, text),
        indent + "    </text>",
        indent + '    <text-style-def id="{}">'.format(style_id),
        indent + '        <text-style font="{}" fontSize="{}" fontColor="{}" alignment="{}"/>'.format(
            TITLE_FONT, TITLE_FONT_SIZE, TITLE_FONT_COLOR, TITLE_ALIGNMENT,
        ),
        indent + "    </text-style-def>",
        indent + "</title>",
    ]


class FCPXMLFormatter(BaseFormatter):
    """Formatter that produces an FCPXML project of connected title clips."""

    @property
    def name(self) -> str:
        return "FCPXML"

    def format(self, timeline: CaptionTimeline) -> List[FormatterOutput]:
        self._require_segments(timeline)

        frame_rate = self.options.frame_rate
        timescale = frame_rate.timescale
        clips = align_segments(
            timeline.segments, frame_rate, self.options.min_gap_frames
        )
        for index, clip in enumerate(clips, 1):
            if clip.duration_value <= 0:
                raise MalformedTimecodeError(index, clip.offset_value, clip.end_value)

        total = max(clip.end_value for clip in clips)
        zero = format_rational(0, timescale)
        total_rational = format_rational(total, timescale)
        project_name = escape_xml(_project_name(timeline.source_filename))

        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            "<!DOCTYPE fcpxml>",
            '<fcpxml version="{}">'.format(FCPXML_VERSION),
            "    <resources>",
            '        <format id="r1" name="FFVideoFormat1080p{}" frameDuration="{}" width="{}" height="{}"/>'.format(
                frame_rate.format_tag,
                format_rational(*frame_rate.frame_duration_fraction),
                FORMAT_WIDTH,
                FORMAT_HEIGHT,
            ),
            '        <effect id="r2" name="{}" uid="{}"/>'.format(
                escape_xml(TITLE_EFFECT_NAME), escape_xml(TITLE_EFFECT_UID)
            ),
            "    </resources>",
            "    <library>",
            '        <event name="{}">'.format(project_name),
            '            <project name="{}">'.format(project_name),
            '                <sequence format="r1" duration="{}" tcStart="{}" tcFormat="NDF">'.format(
                total_rational, zero
            ),
            "                    <spine>",
            '                        <gap name="Gap" offset="{}" duration="{}" start="{}">'.format(
                zero, total_rational, zero
            ),
        ]

        for index, clip in enumerate(clips, 1):
            lines.extend(_title_lines(clip, "ts{}".format(index), timescale))

        lines.extend([
            "                        </gap>",
            "                    </spine>",
            "                </sequence>",
            "            </project>",
            "        </event>",
            "    </library>",
            "</fcpxml>",
        ])

        return [
            FormatterOutput(
                suffix=".fcpxml",
                content="\n".join(lines) + "\n",
                media_type="application/xml",
            )
        ]
