"""Configuration defaults, language presets, and .env loading.

WHY: Frame rate, merge threshold, minimum clip gap, and recognition language
are the knobs an editor actually turns between projects. Keeping them as
plain module-level values (overridable from the environment) means the CLI,
the pipeline, and tests all agree on one set of defaults.

HOW: python-dotenv loads the .env file on import. Constants are read from
the environment with hard-coded fallbacks. LANGUAGE_PRESETS maps the
user-facing language choice to the recognizer language code and the
Chinese script normalization that goes with it.

RULES:
- The merge threshold (seconds) and minimum clip gap (frames) are two
  independent settings; never derive one from the other
- Unknown language presets raise ValueError with the available keys
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from fcpx_captions.core.ir import ScriptMode

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Timeline defaults
# ---------------------------------------------------------------------------

DEFAULT_FRAME_RATE = os.getenv("CAPTIONS_FRAME_RATE", "25")
DEFAULT_MERGE_GAP_S = float(os.getenv("CAPTIONS_MERGE_GAP_S", "2.0"))
DEFAULT_MIN_GAP_FRAMES = int(os.getenv("CAPTIONS_MIN_GAP_FRAMES", "2"))
DEFAULT_LANGUAGE = os.getenv("CAPTIONS_LANGUAGE", "zh-hans")

# ---------------------------------------------------------------------------
# Language presets: user choice → recognizer code + script normalization
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LanguagePreset:
    """A recognition language as offered to the user.

    Both Chinese presets feed the recognizer the same "zh" code; they only
    differ in which script the output text is normalized to.
    """

    key: str
    display_name: str
    recognizer_code: str
    script_mode: ScriptMode


LANGUAGE_PRESETS: dict[str, LanguagePreset] = {
    "zh-hans": LanguagePreset("zh-hans", "简体中文", "zh", ScriptMode.SIMPLIFIED),
    "zh-hant": LanguagePreset("zh-hant", "繁體中文", "zh", ScriptMode.TRADITIONAL),
    "en": LanguagePreset("en", "English", "en", ScriptMode.NONE),
}


def map_language(key: str) -> LanguagePreset:
    """Look up a language preset by key.

    RULES:
    - Lookup is case-insensitive
    - Raises ValueError for unknown keys, listing the available ones
    """
    preset = LANGUAGE_PRESETS.get(key.lower())
    if preset is None:
        raise ValueError(
            "Unknown language '{}'. Available: {}".format(
                key, ", ".join(sorted(LANGUAGE_PRESETS))
            )
        )
    return preset
