"""
Text measurement and line wrapping with reportlab's standard Helvetica metrics.

Font sizes are points; widths are millimeters.
"""

from __future__ import annotations

import re

from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth

REGULAR = "Helvetica"
BOLD = "Helvetica-Bold"
ITALIC = "Helvetica-Oblique"

_ROW_PREFIX_RE = re.compile(r"^(Rnd|Round|Row|R)\s*\d+[\s:.\-–]*\s*", re.IGNORECASE)


def text_width(text: str, size: float, font: str = REGULAR) -> float:
    """Rendered width of *text* in millimeters."""
    return stringWidth(text, font, size) / mm


def wrap(text: str, size: float, max_width: float, font: str = REGULAR) -> list[str]:
    """Split *text* into lines no wider than *max_width* mm (newlines respected)."""
    return simpleSplit(text, font, size, max_width * mm)


def strip_row_prefix(text: str) -> str:
    """Drop a leading "Rnd 3:" / "Row 3." label; the row number is drawn separately."""
    return _ROW_PREFIX_RE.sub("", text).strip()
