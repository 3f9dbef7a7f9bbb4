from .geometry import A4, PageGeometry
from .paginator import (
    Page,
    PaginatedDocument,
    Paginator,
    PlacedBlock,
    find_notes_for_section,
)
from .pdf import export_pdf
from .surface import DrawingSurface, RecordingSurface, ReportLabSurface

__all__ = [
    "A4",
    "DrawingSurface",
    "Page",
    "PageGeometry",
    "PaginatedDocument",
    "Paginator",
    "PlacedBlock",
    "RecordingSurface",
    "ReportLabSurface",
    "export_pdf",
    "find_notes_for_section",
]
