"""Conversion requests and the engine's XML parameter document.

WHY: The engine reads one parameter document per conversion. Its element
names and order are a wire contract with the engine's parser, so the
document is rendered from a fixed template rather than through an XML
library that might reorder attributes or change whitespace.

HOW: ConversionRequest captures everything one job needs. create() decides
the PDF-only font directory from the destination extension. build_params()
fills the template.

RULES:
- Element order: m_sFileFrom, m_sThemeDir, m_sFileTo, m_bIsNoBase64, extras
- <m_sFontDir> is present if and only if the request has a font_dir
- create() sets font_dir exactly when the destination extension is pdf
- Paths are inserted verbatim; callers pass sanitized names only
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from x2t_bridge.config import FONT_DIR_PARAM, THEMES_DIR
from x2t_bridge.core.sanitize import extension_of

PARAMS_TEMPLATE = """<?xml version="1.0" encoding="utf-8"?>
<TaskQueueDataConvert xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" xmlns:xsd="http://www.w3.org/2001/XMLSchema">
  <m_sFileFrom>{source}</m_sFileFrom>
  <m_sThemeDir>{theme_dir}</m_sThemeDir>
  <m_sFileTo>{destination}</m_sFileTo>
  <m_bIsNoBase64>{no_base64}</m_bIsNoBase64>
  {additional}
</TaskQueueDataConvert>"""

FONT_DIR_ELEMENT = "<m_sFontDir>{}</m_sFontDir>"


@dataclass(frozen=True)
class ConversionRequest:
    """One engine job: where to read, where to write, and engine options."""

    source_path: str
    destination_path: str
    theme_dir: str = THEMES_DIR
    suppress_base64: bool = False
    font_dir: Optional[str] = None

    @classmethod
    def create(cls, source_path: str, destination_path: str) -> ConversionRequest:
        """Build a request, attaching the font directory for PDF output."""
        font_dir = None
        if extension_of(destination_path).lower() == "pdf":
            font_dir = FONT_DIR_PARAM
        return cls(
            source_path=source_path,
            destination_path=destination_path,
            font_dir=font_dir,
        )


def build_params(request: ConversionRequest) -> str:
    """Render the parameter document for ``request``."""
    additional = ""
    if request.font_dir:
        additional = FONT_DIR_ELEMENT.format(request.font_dir)
    return PARAMS_TEMPLATE.format(
        source=request.source_path,
        theme_dir=request.theme_dir,
        destination=request.destination_path,
        no_base64="true" if request.suppress_base64 else "false",
        additional=additional,
    )
