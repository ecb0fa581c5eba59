"""Span refinement: control-token cleanup, script conversion, punctuation splitting.

WHY: Whisper-style recognizers emit spans that still carry control tokens
(``<|zh|>``, ``<|0.00|>``), may mix Simplified and Traditional characters,
and often pack several clauses into one long span. Captions read better one
clause at a time, so each span is cleaned and split at sentence punctuation
with its time divided proportionally by character count.

HOW: refine_span() runs the steps in a fixed order:
  1. strip_control_tokens()  — drop ``<|...|>`` tags and stray ``<|`` / ``|>``
  2. convert_script()        — OpenCC Hans↔Hant conversion when requested
  3. trim; an empty result drops the whole span
  4. split_at_punctuation()  — fragments keep their trailing punctuation
  5. one fragment → one segment carrying the whole refined text
  6. several fragments → contiguous segments, duration ∝ visible_length()

RULES:
- Split set: ，。！？,.!? (CJK and Latin forms)
- Fragments are whitespace-trimmed; empty fragments are discarded
- Split fragments exactly cover [start, end]; the last one ends at end
- Fragment length is counted in grapheme clusters, not code points
- A span with end <= start is first stretched to one millisecond
- Conversion failures leave the text unchanged (logged, not raised)
"""

from __future__ import annotations

import functools
import logging
import re
from typing import Iterable, List

import opencc
import regex

from fcpx_captions.core.ir import MIN_DURATION_S, RawSpan, ScriptMode, Segment

logger = logging.getLogger(__name__)

# Recognizer control tokens, e.g. <|startoftranscript|>, <|zh|>, <|0.00|>
_CONTROL_TOKEN_RE = re.compile(r"<\|[^|>]+\|>")

# Sentence and clause punctuation that ends a caption fragment.
_SPLIT_PUNCTUATION_RE = re.compile(r"[，。！？,.!?]")

# One user-perceived character (extended grapheme cluster).
_GRAPHEME_RE = regex.compile(r"\X")

# OpenCC conversion profiles per script mode.
_OPENCC_PROFILES = {
    ScriptMode.SIMPLIFIED: "t2s.json",
    ScriptMode.TRADITIONAL: "s2t.json",
}


def strip_control_tokens(text: str) -> str:
    """Remove recognizer control tokens, including leftover ``<|`` / ``|>`` halves."""
    cleaned = _CONTROL_TOKEN_RE.sub("", text)
    return cleaned.replace("<|", "").replace("|>", "")


@functools.lru_cache(maxsize=None)
def _get_converter(profile: str) -> opencc.OpenCC:
    return opencc.OpenCC(profile)


def convert_script(text: str, mode: ScriptMode) -> str:
    """Convert text between Simplified and Traditional Chinese.

    ScriptMode.NONE returns the text untouched. Any failure inside OpenCC
    (missing profile, conversion error) is logged and the original text is
    returned.
    """
    profile = _OPENCC_PROFILES.get(ScriptMode(mode))
    if profile is None:
        return text
    try:
        return _get_converter(profile).convert(text)
    except Exception:
        logger.warning("Script conversion (%s) failed; keeping original text", profile, exc_info=True)
        return text


def visible_length(text: str) -> int:
    """Count user-perceived characters, so "e" + combining accent or a
    skin-toned emoji counts once."""
    return len(_GRAPHEME_RE.findall(text))


def split_at_punctuation(text: str) -> List[str]:
    """Split text after each punctuation mark, keeping the mark with its clause.

    "你好，世界。" → ["你好，", "世界。"]; trailing text without punctuation
    becomes the last fragment.
    """
    parts: List[str] = []
    last_end = 0
    for match in _SPLIT_PUNCTUATION_RE.finditer(text):
        part = text[last_end:match.end()].strip()
        if part:
            parts.append(part)
        last_end = match.end()

    remaining = text[last_end:].strip()
    if remaining:
        parts.append(remaining)
    return parts


def refine_span(span: RawSpan, script_mode: ScriptMode = ScriptMode.NONE) -> List[Segment]:
    """Turn one raw recognition span into zero or more caption segments.

    Args:
        span: The raw (text, start, end) triple from the recognizer.
        script_mode: Chinese script normalization to apply.

    Returns:
        An empty list when nothing printable remains, one segment when the
        text has at most one clause, otherwise one segment per clause with
        interpolated times.
    """
    text = convert_script(strip_control_tokens(span.text), script_mode).strip()
    if not text:
        return []

    start = span.start_s
    end = span.end_s
    if end <= start:
        end = start + MIN_DURATION_S

    parts = split_at_punctuation(text)
    if len(parts) <= 1:
        return [Segment(text=text, start_s=start, end_s=end)]

    lengths = [visible_length(part) for part in parts]
    total_chars = sum(lengths)
    total_duration = end - start

    segments: List[Segment] = []
    cursor = start
    for i, part in enumerate(parts):
        if i == len(parts) - 1:
            part_end = end
        else:
            part_end = cursor + total_duration * lengths[i] / total_chars
        segments.append(Segment(text=part, start_s=cursor, end_s=part_end))
        cursor = part_end

    return segments


def refine_spans(spans: Iterable[RawSpan], script_mode: ScriptMode = ScriptMode.NONE) -> List[Segment]:
    """Refine a batch of spans, preserving input order."""
    segments: List[Segment] = []
    for span in spans:
        segments.extend(refine_span(span, script_mode))
    return segments
