"""Output formatter registry.

WHY: The CLI and the pipeline need a single lookup to find the right
formatter by name. A central dict makes it trivial to add new formats:
create the formatter class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``FORMATTERS["fcpxml"](options)``.

RULES:
- Keys are lowercase identifiers (used in CLI flags and config)
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fcpx_captions.formatters.fcpxml import FCPXMLFormatter
from fcpx_captions.formatters.srt import SRTFormatter

if TYPE_CHECKING:
    from fcpx_captions.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "srt": SRTFormatter,
    "fcpxml": FCPXMLFormatter,
}
