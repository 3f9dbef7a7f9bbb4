"""
Drawing surfaces the paginator renders onto.

Coordinates are millimeters from the top-left corner with y growing downward;
text is positioned by its baseline. ReportLabSurface converts to PDF points
with a bottom-left origin. RecordingSurface keeps every call for inspection.
"""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import IO, Any, Protocol, runtime_checkable

from PIL import Image
from reportlab.lib.colors import Color, HexColor
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from pupstitch.layout.geometry import A4, PageGeometry
from pupstitch.layout.text import REGULAR
from pupstitch.utilities.colors import normalize_hex


def _color(value: str) -> Color:
    # HexColor reads a string without "#" as a decimal number
    canonical = normalize_hex(value)
    if canonical is None:
        raise ValueError(f"not a hex color: {value!r}")
    return HexColor(canonical)


@runtime_checkable
class DrawingSurface(Protocol):
    """
    Page-oriented drawing target.

    ``image`` raises when the bytes cannot be decoded; the caller decides how
    to degrade. ``end_page`` closes the current page, ``finish`` the document.
    """

    def text(
        self,
        x: float,
        y: float,
        value: str,
        *,
        font: str = REGULAR,
        size: float = 10,
        color: str = "#000000",
        align: str = "left",
    ) -> None: ...

    def rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        fill: str | None = None,
        stroke: str | None = None,
        line_width: float = 0.3,
        radius: float = 0.0,
    ) -> None: ...

    def circle(self, cx: float, cy: float, r: float, *, fill: str) -> None: ...

    def line(
        self, x1: float, y1: float, x2: float, y2: float, *, color: str, width: float = 0.3
    ) -> None: ...

    def image(self, x: float, y: float, width: float, height: float, data: bytes) -> None: ...

    def end_page(self) -> None: ...

    def finish(self) -> None: ...


# ── Recording ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class DrawCommand:
    page: int
    op: str
    args: dict[str, Any] = field(default_factory=dict)


class RecordingSurface:
    """
    In-memory surface that records draw commands per page.

    Images are decoded with Pillow so that undecodable bytes fail the same
    way they would on a real surface.
    """

    def __init__(self) -> None:
        self.commands: list[DrawCommand] = []
        self.page = 1
        self.finished = False

    def _record(self, op: str, **args: Any) -> None:
        self.commands.append(DrawCommand(self.page, op, args))

    def text(self, x, y, value, *, font=REGULAR, size=10, color="#000000", align="left"):
        self._record("text", x=x, y=y, value=value, font=font, size=size, color=color, align=align)

    def rect(self, x, y, width, height, *, fill=None, stroke=None, line_width=0.3, radius=0.0):
        self._record(
            "rect", x=x, y=y, width=width, height=height, fill=fill, stroke=stroke, radius=radius
        )

    def circle(self, cx, cy, r, *, fill):
        self._record("circle", cx=cx, cy=cy, r=r, fill=fill)

    def line(self, x1, y1, x2, y2, *, color, width=0.3):
        self._record("line", x1=x1, y1=y1, x2=x2, y2=y2, color=color)

    def image(self, x, y, width, height, data):
        with Image.open(io.BytesIO(data)) as img:
            img.verify()
        self._record("image", x=x, y=y, width=width, height=height)

    def end_page(self):
        self._record("end_page")
        self.page += 1

    def finish(self):
        self.finished = True

    def texts(self, page: int | None = None) -> list[str]:
        """All text values drawn, optionally on one page only."""
        return [
            c.args["value"]
            for c in self.commands
            if c.op == "text" and (page is None or c.page == page)
        ]

    @property
    def page_count(self) -> int:
        return sum(1 for c in self.commands if c.op == "end_page")


# ── reportlab ──────────────────────────────────────────────────────────────────


class ReportLabSurface:
    """
    PDF surface backed by ``reportlab.pdfgen.canvas.Canvas``.

    Parameters
    ----------
    out:
        File path or binary file-like object the PDF is written to on
        ``finish()``.
    geometry:
        Page size; defaults to A4.
    """

    def __init__(self, out: str | IO[bytes], geometry: PageGeometry = A4) -> None:
        self._geometry = geometry
        self._canvas = canvas.Canvas(out, pagesize=(geometry.width * mm, geometry.height * mm))

    def _y(self, y: float) -> float:
        return (self._geometry.height - y) * mm

    def set_metadata(self, title: str, author: str) -> None:
        self._canvas.setTitle(title)
        self._canvas.setAuthor(author)

    def text(self, x, y, value, *, font=REGULAR, size=10, color="#000000", align="left"):
        c = self._canvas
        c.setFont(font, size)
        c.setFillColor(_color(color))
        if align == "right":
            c.drawRightString(x * mm, self._y(y), value)
        elif align == "center":
            c.drawCentredString(x * mm, self._y(y), value)
        else:
            c.drawString(x * mm, self._y(y), value)

    def rect(self, x, y, width, height, *, fill=None, stroke=None, line_width=0.3, radius=0.0):
        c = self._canvas
        if fill is not None:
            c.setFillColor(_color(fill))
        if stroke is not None:
            c.setStrokeColor(_color(stroke))
            c.setLineWidth(line_width * mm)
        # reportlab anchors rectangles at their bottom-left corner
        args = (x * mm, self._y(y + height), width * mm, height * mm)
        if radius:
            c.roundRect(*args, radius * mm, stroke=int(stroke is not None), fill=int(fill is not None))
        else:
            c.rect(*args, stroke=int(stroke is not None), fill=int(fill is not None))

    def circle(self, cx, cy, r, *, fill):
        self._canvas.setFillColor(_color(fill))
        self._canvas.circle(cx * mm, self._y(cy), r * mm, stroke=0, fill=1)

    def line(self, x1, y1, x2, y2, *, color, width=0.3):
        self._canvas.setStrokeColor(_color(color))
        self._canvas.setLineWidth(width * mm)
        self._canvas.line(x1 * mm, self._y(y1), x2 * mm, self._y(y2))

    def image(self, x, y, width, height, data):
        reader = ImageReader(io.BytesIO(data))
        self._canvas.drawImage(
            reader,
            x * mm,
            self._y(y + height),
            width * mm,
            height * mm,
            preserveAspectRatio=True,
            anchor="c",
            mask="auto",
        )

    def end_page(self):
        self._canvas.showPage()

    def finish(self):
        self._canvas.save()
