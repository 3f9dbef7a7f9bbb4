"""PDF export of a compiled pattern."""

from __future__ import annotations

from typing import IO

from pupstitch.layout.geometry import A4, BRAND, PageGeometry
from pupstitch.layout.paginator import PaginatedDocument, Paginator
from pupstitch.layout.surface import ReportLabSurface
from pupstitch.schemas.pattern import Pattern


def export_pdf(
    pattern: Pattern, out: str | IO[bytes], geometry: PageGeometry = A4
) -> PaginatedDocument:
    """
    Render *pattern* as a PDF written to *out* (a path or a binary stream).

    Returns the page/block record of the rendered document.
    """
    surface = ReportLabSurface(out, geometry)
    surface.set_metadata(pattern.title, BRAND)
    document = Paginator(surface, geometry).paginate(pattern)
    surface.finish()
    return document
