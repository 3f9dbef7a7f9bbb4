"""
Paginator: lays a compiled Pattern out as an A4 document.

Page program:

  1. Cover (no header): title, dog name, info block, yarn swatches.
  2. Preview (only with a preview image): the image, then a color and
     feature reference per analyzed body part.
  3. "1. Instruments and Materials"
  4. "2. Abbreviations", followed by two tip boxes.
  5. One page per section, numbered from 3, with its crochet notes box.
  6. Assembly, then general notes.

Every block is placed through ``_place(kind, height)``: the whole height is
requested at once, a page break happens first when it does not fit, and the
block is never split. Paragraphs are placed one line at a time.

Rendering is best-effort. A preview image that cannot be decoded becomes a
placeholder line and a swatch with a malformed hex color is skipped; both are
logged as warnings.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from pupstitch.compiler.compiler import format_breed_display
from pupstitch.layout.geometry import (
    A4,
    AMBER,
    AMBER_DARK,
    AMBER_DEEP,
    AMBER_LIGHT_BG,
    BORDER_LIGHT,
    BRAND,
    BRAND_SITE,
    BRAND_TAGLINE,
    TEXT_DARK,
    TEXT_FAINT,
    TEXT_LIGHT,
    TEXT_MED,
    WHITE,
    PageGeometry,
)
from pupstitch.layout.surface import DrawingSurface
from pupstitch.layout.text import BOLD, ITALIC, REGULAR, strip_row_prefix, text_width, wrap
from pupstitch.schemas.analysis import BodyPartAnalysis
from pupstitch.schemas.pattern import CompiledSection, Pattern
from pupstitch.utilities.colors import normalize_hex

logger = logging.getLogger(__name__)

FIRST_SECTION_NUMBER = 3

TIPS = (
    (
        "Tip 1",
        "The toy must be crocheted with tight stitches, to be sure that there won't be "
        "any holes through which stuffing material can be seen.",
    ),
    (
        "Tip 2",
        "To keep track of the beginning of the row, use a marker. Pin marker to the last "
        "loop of the row. Every new row must be finished with a loop at the marker.",
    ),
)

IMAGE_WIDTH = 120.0
IMAGE_HEIGHT = 150.0

_PARENTHETICAL_RE = re.compile(r"\s*\(.*\)")


@dataclass(frozen=True)
class PlacedBlock:
    kind: str
    y: float
    height: float


@dataclass
class Page:
    number: int
    has_header: bool
    blocks: list[PlacedBlock] = field(default_factory=list)


@dataclass(frozen=True)
class PaginatedDocument:
    pages: tuple[Page, ...]

    @property
    def page_count(self) -> int:
        return len(self.pages)


def find_notes_for_section(
    section_name: str, body_parts: tuple[BodyPartAnalysis, ...]
) -> BodyPartAnalysis | None:
    """
    Match a section to its body-part analysis.

    Tries the exact (case-insensitive) name, then the name without a
    parenthetical such as "(make 2)", then its first word. Returns None when
    nothing matches.
    """
    by_name = {bp.part_name.lower().strip(): bp for bp in body_parts}
    key = section_name.lower().strip()
    if key in by_name:
        return by_name[key]
    base = _PARENTHETICAL_RE.sub("", key).strip()
    if base in by_name:
        return by_name[base]
    first = base.split(" ")[0] if base else ""
    return by_name.get(first)


def _truncate(lines: list[str], limit: int, size: float, width: float) -> list[str]:
    """Keep at most *limit* lines, ending the last kept line with "..." when text was cut."""
    if len(lines) <= limit:
        return lines
    if limit <= 0:
        return []
    kept = lines[:limit]
    last = kept[-1].rstrip()
    while last and text_width(last + "...", size) > width:
        last = last[:-1].rstrip()
    kept[-1] = last + "..."
    return kept


class Paginator:
    """
    Renders one Pattern onto a DrawingSurface.

    A Paginator instance is single-use per ``paginate`` call; the cursor and
    page list are reset at the start of each call.
    """

    def __init__(self, surface: DrawingSurface, geometry: PageGeometry = A4) -> None:
        self.surface = surface
        self.geometry = geometry
        self.y = geometry.content_top
        self._pages: list[Page] = []
        self._title = ""

    # ── Cursor and page control ────────────────────────────────────────────────

    @property
    def page(self) -> Page:
        return self._pages[-1]

    def new_page(self) -> None:
        """Close the current page (footer included) and open a page with a header."""
        self._footer()
        self.surface.end_page()
        self._pages.append(Page(number=len(self._pages) + 1, has_header=True))
        self.y = self.geometry.content_top
        self._header()

    def ensure_space(self, height: float) -> None:
        # nothing placed yet; breaking would only leave this page blank
        if self.y == self.geometry.content_top:
            return
        if self.y + height > self.geometry.content_bottom:
            self.new_page()

    def _place(self, kind: str, height: float) -> float:
        self.ensure_space(height)
        self.page.blocks.append(PlacedBlock(kind, self.y, height))
        return self.y

    def _header(self) -> None:
        g = self.geometry
        self.surface.text(g.right_edge, g.margin_top, self._title, font=BOLD, size=13,
                          color=AMBER, align="right")
        self.surface.text(g.right_edge, g.margin_top + 4.5, BRAND, size=7, color=TEXT_FAINT,
                          align="right")

    def _footer(self) -> None:
        g = self.geometry
        fy = g.footer_y
        self.surface.text(g.margin_left, fy, BRAND_SITE, size=7.5, color=TEXT_FAINT)
        self.surface.text(g.center_x, fy, BRAND_TAGLINE, size=7.5, color=TEXT_FAINT,
                          align="center")
        self.surface.text(g.right_edge, fy, str(self.page.number), size=7.5, color=TEXT_FAINT,
                          align="right")

    # ── Entry point ────────────────────────────────────────────────────────────

    def paginate(self, pattern: Pattern) -> PaginatedDocument:
        """Lay out *pattern* and return the page/block record."""
        self._title = pattern.title
        self._pages = [Page(number=1, has_header=False)]
        self.y = self.geometry.content_top

        self._cover(pattern)
        if pattern.preview_image:
            self._preview(pattern)
        self._materials(pattern)
        self._abbreviations(pattern)
        for i, section in enumerate(pattern.sections):
            self._section(FIRST_SECTION_NUMBER + i, section, pattern)
        number = FIRST_SECTION_NUMBER + len(pattern.sections)
        if pattern.assembly_instructions:
            self._assembly(number, pattern)
            number += 1
        if pattern.notes:
            self._notes(number, pattern.notes)

        self._footer()
        self.surface.end_page()
        logger.info("paginated %s: %d pages", pattern.id, len(self._pages))
        return PaginatedDocument(pages=tuple(self._pages))

    # ── Shared blocks ──────────────────────────────────────────────────────────

    def _section_heading(self, number: int, name: str) -> None:
        g = self.geometry
        y = self._place("heading", 14)
        label = f"{number}."
        self.surface.text(g.margin_left, y, label, font=BOLD, size=26, color=AMBER)
        x = g.margin_left + text_width(label, 26, BOLD) + 3
        self.surface.text(x, y, name, font=BOLD, size=20, color=TEXT_DARK)
        self.y += 14

    def _paragraph(self, text: str, *, size: float = 10, width: float | None = None,
                   line_height: float = 5.0, color: str = TEXT_MED, font: str = REGULAR) -> None:
        g = self.geometry
        for line in wrap(text, size, width or g.content_width - 10, font):
            y = self._place("paragraph-line", line_height)
            self.surface.text(g.margin_left, y, line, font=font, size=size, color=color)
            self.y += line_height

    def _swatch(self, x: float, y: float, size: float, hex_code: str, label: str) -> bool:
        fill = normalize_hex(hex_code)
        if fill is None:
            logger.warning("skipping swatch for %s: malformed color %r", label, hex_code)
            return False
        self.surface.rect(x, y, size, size, fill=fill, stroke=BORDER_LIGHT, radius=0.5)
        return True

    def _bullet(self, text: str, *, size: float = 10) -> None:
        g = self.geometry
        lines = wrap(text, size, g.content_width - 10)
        height = len(lines) * 5 + 2
        y = self._place("bullet", height)
        self.surface.circle(g.margin_left + 3, y - 1.2, 0.8, fill=AMBER)
        for j, line in enumerate(lines):
            self.surface.text(g.margin_left + 8, y + j * 5, line, size=size, color=TEXT_DARK)
        self.y += height

    # ── Cover ──────────────────────────────────────────────────────────────────

    def _cover(self, pattern: Pattern) -> None:
        g = self.geometry
        s = self.surface
        s.rect(0, 0, g.width, 8, fill=AMBER)

        ty = 70.0
        for line in wrap(pattern.title, 34, g.content_width, BOLD):
            s.text(g.center_x, ty, line, font=BOLD, size=34, color=TEXT_DARK, align="center")
            ty += 14
        s.line(g.center_x - 30, ty + 2, g.center_x + 30, ty + 2, color=AMBER, width=0.35)
        ty += 14
        s.text(g.center_x, ty, "Custom Amigurumi Crochet Pattern", size=14, color=TEXT_MED,
               align="center")
        ty += 20
        if pattern.dog_name:
            ty += 4
            s.text(g.center_x, ty, f"For {pattern.dog_name}", font=ITALIC, size=16,
                   color=AMBER, align="center")
            ty += 10

        m = pattern.materials
        weight = m.yarns[0].weight if m.yarns else "worsted"
        for info in (
            f"Breed: {format_breed_display(pattern.breed_id)}",
            f"Skill Level: {pattern.skill_level.value.capitalize()}",
            f"Estimated Time: ~{round(pattern.estimated_total_hours)} hours",
            f"Hook Size: {m.hook_size}",
            f"Yarn Weight: {weight.capitalize()}",
        ):
            s.text(g.center_x, ty, info, size=11, color=TEXT_MED, align="center")
            ty += 8
        ty += 8

        if m.yarns:
            s.text(g.center_x, ty, "Yarn Colors", size=9, color=TEXT_LIGHT, align="center")
            ty += 7
            swatch, gap = 14.0, 5.0
            x = g.center_x - (len(m.yarns) * swatch + (len(m.yarns) - 1) * gap) / 2
            for yarn in m.yarns:
                if self._swatch(x, ty, swatch, yarn.hex_code, yarn.name):
                    s.text(x + swatch / 2, ty + swatch + 4, yarn.name, size=6,
                           color=TEXT_LIGHT, align="center")
                x += swatch + gap

        s.text(g.center_x, 255,
               f"Generated by {BRAND}, {pattern.created_at.date().isoformat()}", size=9,
               color=TEXT_FAINT, align="center")
        for_line = (
            f"Custom amigurumi pattern for {pattern.dog_name}"
            if pattern.dog_name
            else "Custom amigurumi pattern for your pup"
        )
        s.text(g.center_x, 262, for_line, size=9, color=TEXT_FAINT, align="center")
        s.rect(0, g.height - 8, g.width, 8, fill=AMBER)

    # ── Preview ────────────────────────────────────────────────────────────────

    def _preview(self, pattern: Pattern) -> None:
        g = self.geometry
        s = self.surface
        self.new_page()

        y = self._place("heading", 8)
        s.text(g.center_x, y, "Amigurumi Preview", font=BOLD, size=18, color=TEXT_DARK,
               align="center")
        self.y += 8
        y = self._place("subtitle", 8)
        s.text(g.center_x, y, "How your finished doll should look", font=ITALIC, size=10,
               color=TEXT_LIGHT, align="center")
        self.y += 8

        height = IMAGE_HEIGHT + 8
        y = self._place("image", height)
        try:
            s.image(g.center_x - IMAGE_WIDTH / 2, y, IMAGE_WIDTH, IMAGE_HEIGHT,
                    pattern.preview_image)
        except Exception as exc:  # noqa: BLE001
            logger.warning("preview image for %s could not be drawn: %s", pattern.id, exc)
            self.page.blocks[-1] = PlacedBlock("image-placeholder", y, height)
            s.text(g.center_x, y + 40, "[Preview image could not be loaded]", font=ITALIC,
                   size=10, color=TEXT_FAINT, align="center")
        self.y += height

        body_parts = pattern.analysis.body_part_analysis
        if not body_parts:
            return
        y = self._place("subheading", 20)
        s.text(g.margin_left, y, "Color & Feature Reference", font=BOLD, size=13,
               color=AMBER_DARK)
        self.y += 8
        for bp in body_parts:
            self._feature_row(bp)

    def _feature_row(self, bp: BodyPartAnalysis) -> None:
        g = self.geometry
        s = self.surface
        detail = ", ".join(p for p in (bp.shape, bp.texture) if p)
        label = bp.part_name.capitalize() + (f": {detail}" if detail else "")
        label_lines = wrap(label, 9.5, g.content_width - 10)
        mark_lines = wrap("Markings: " + ", ".join(bp.markings), 8, g.content_width - 15) \
            if bp.markings else []
        height = len(label_lines) * 5 + len(mark_lines) * 4 + 2
        y = self._place("feature-row", height)
        self._swatch(g.margin_left + 2, y - 3, 4, bp.primary_color, bp.part_name)
        for j, line in enumerate(label_lines):
            s.text(g.margin_left + 10, y + j * 5, line, size=9.5, color=TEXT_DARK)
        my = y + len(label_lines) * 5
        for j, line in enumerate(mark_lines):
            s.text(g.margin_left + 10, my + j * 4, line, size=8, color=TEXT_LIGHT)
        self.y += height

    # ── Materials ──────────────────────────────────────────────────────────────

    def _materials(self, pattern: Pattern) -> None:
        g = self.geometry
        s = self.surface
        m = pattern.materials
        self.new_page()
        self._section_heading(1, "Instruments and Materials")

        self._bullet(m.hook_size_info)
        bullet_x = g.margin_left + 8
        for yarn in m.yarns:
            lines = wrap(f"{yarn.name} ({yarn.weight}) - {yarn.yardage} yards", 10,
                         g.content_width - 15)
            height = max(7, len(lines) * 5 + 2)
            y = self._place("yarn", height)
            self._swatch(bullet_x - 5, y - 3.2, 4, yarn.hex_code, yarn.name)
            for j, line in enumerate(lines):
                s.text(bullet_x, y + j * 5, line, size=10, color=TEXT_DARK)
            self.y += height
        for notion in m.notions:
            self._bullet(f"{notion.name} ({notion.quantity} {notion.unit})")
        self._bullet(f"{m.stuffing_type}: ~{m.stuffing_amount_oz:g} oz")
        for supply in m.additional_supplies:
            self._bullet(supply)

        y = self._place("total", 20)
        s.line(g.margin_left, y + 4, g.right_edge, y + 4, color=BORDER_LIGHT)
        s.text(g.margin_left, y + 12, f"Total yarn: ~{m.total_yardage} yards", font=BOLD,
               size=11, color=AMBER_DEEP)
        self.y += 20
        self._paragraph(pattern.description, size=9.5, color=TEXT_LIGHT)

    # ── Abbreviations ──────────────────────────────────────────────────────────

    def _abbreviations(self, pattern: Pattern) -> None:
        g = self.geometry
        s = self.surface
        self.new_page()
        self._section_heading(2, "Abbreviations")
        for abbr, meaning in pattern.abbreviations:
            y = self._place("abbreviation", 6)
            s.text(g.margin_left + 22, y, abbr, font=BOLD, size=10, color=AMBER_DARK,
                   align="right")
            s.text(g.margin_left + 26, y, meaning, size=10, color=TEXT_DARK)
            self.y += 6
        self.y += 6
        for title, tip in TIPS:
            self._tip_box(title, tip)

    def _tip_box(self, title: str, tip: str) -> None:
        g = self.geometry
        s = self.surface
        lines = wrap(tip, 9, g.content_width - 20)
        box_h = 10 + len(lines) * 4.5 + 4
        y = self._place("tip", box_h + 4)
        s.rect(g.margin_left, y, g.content_width, box_h, fill=AMBER_LIGHT_BG, stroke=AMBER,
               line_width=0.4, radius=3)
        s.text(g.margin_left + 8, y + 7, title, font=BOLD, size=11, color=AMBER)
        for j, line in enumerate(lines):
            s.text(g.margin_left + 8, y + 13 + j * 4.5, line, size=9, color=TEXT_MED)
        self.y += box_h + 6

    # ── Sections ───────────────────────────────────────────────────────────────

    def _section(self, number: int, section: CompiledSection, pattern: Pattern) -> None:
        g = self.geometry
        s = self.surface
        self.new_page()
        self._section_heading(number, section.name)

        bp = find_notes_for_section(section.name, pattern.analysis.body_part_analysis)
        if bp is not None and bp.crochet_notes:
            self._notes_box(bp)

        yarns = pattern.materials.yarns
        primary = yarns[0].name.lower() if yarns else "main color"
        y = self._place("subtitle", 10)
        s.text(g.margin_left, y, f"With {primary} yarn, {pattern.materials.hook_size} hook",
               font=ITALIC, size=10, color=TEXT_LIGHT)
        self.y += 10

        text_x = g.margin_left + 31
        text_w = g.content_width - 35
        for instruction in section.instructions:
            raw = strip_row_prefix(instruction.text)
            lines = wrap(raw, 9.5, text_w)
            y = self._place("row", len(lines) * 5 + 3)
            if instruction.row_number:
                s.text(g.margin_left + 28, y, f"{instruction.row_number} row", font=BOLD,
                       size=9.5, color=AMBER_DARK, align="right")
            color = TEXT_LIGHT if instruction.row_number == 0 else TEXT_DARK
            for j, line in enumerate(lines):
                s.text(text_x, y + j * 5, line, size=9.5, color=color)
            self.y += len(lines) * 5 + 1.5

        if section.notes:
            self.y += 5
            self._paragraph(section.notes, size=9, color=TEXT_MED)
        if section.difficulty_notes:
            self._paragraph(section.difficulty_notes, size=9, color=TEXT_LIGHT, font=ITALIC)

    def _notes_box(self, bp: BodyPartAnalysis) -> None:
        g = self.geometry
        s = self.surface
        lines = wrap(bp.crochet_notes, 9, g.content_width - 24)
        mark_lines = wrap("Markings: " + ", ".join(bp.markings), 8, g.content_width - 28) \
            if bp.markings else []
        # the box is one atomic block, so it must fit a single content band
        room = g.content_height - 18
        if mark_lines and room - 1 - len(mark_lines) * 4 < 4.5:
            mark_lines = []
        if mark_lines:
            room -= 1 + len(mark_lines) * 4
        lines = _truncate(lines, int(room // 4.5), 9, g.content_width - 24)
        box_h = 10 + len(lines) * 4.5 + 4
        if mark_lines:
            box_h += 1 + len(mark_lines) * 4
        y = self._place("notes-box", box_h + 4)
        s.rect(g.margin_left, y, g.content_width, box_h, fill=AMBER_LIGHT_BG,
               stroke=BORDER_LIGHT, radius=2)
        accent = normalize_hex(bp.primary_color)
        if accent is not None:
            s.rect(g.margin_left, y, 3, box_h, fill=accent)
        else:
            logger.warning("skipping accent bar for %s: malformed color %r", bp.part_name,
                           bp.primary_color)
        s.text(g.margin_left + 8, y + 7, "CROCHET NOTES", font=BOLD, size=8, color=AMBER)
        ly = y + 12
        for line in lines:
            s.text(g.margin_left + 8, ly, line, size=9, color=TEXT_MED)
            ly += 4.5
        ly += 1
        for line in mark_lines:
            s.text(g.margin_left + 8, ly, line, font=ITALIC, size=8, color=TEXT_LIGHT)
            ly += 4
        self.y += box_h + 6

    # ── Assembly and notes ─────────────────────────────────────────────────────

    def _assembly(self, number: int, pattern: Pattern) -> None:
        g = self.geometry
        s = self.surface
        self.new_page()
        self._section_heading(number, "Assembly")
        for i, step in enumerate(pattern.assembly_instructions, 1):
            lines = wrap(step, 10, g.content_width - 20)
            height = len(lines) * 5.5 + 4
            y = self._place("numbered-step", height)
            s.circle(g.margin_left + 6, y - 1.5, 3, fill=AMBER)
            s.text(g.margin_left + 6, y - 0.5, str(i), font=BOLD, size=8, color=WHITE,
                   align="center")
            for j, line in enumerate(lines):
                s.text(g.margin_left + 14, y + j * 5.5, line, size=10, color=TEXT_DARK)
            self.y += height

    def _notes(self, number: int, notes: str) -> None:
        self.y += 10
        # soft break: keep the heading with a few lines of text
        self.ensure_space(50)
        self._section_heading(number, "Notes")
        self._paragraph(notes, size=10, line_height=5.5)
