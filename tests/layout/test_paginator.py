"""
Tests for the Paginator, rendered onto a RecordingSurface.

Covers:
  - Page program: cover without header, numbered section pages, assembly, notes
  - Non-splitting: every placed block fits inside the content band
  - Headers and footers on every page
  - Preview page with a real image, and the placeholder for undecodable bytes
  - Malformed swatch colors skipped with a warning
  - find_notes_for_section() matching rules
"""

import io
import logging
from dataclasses import replace
from datetime import datetime, timezone

import pytest
from PIL import Image

from pupstitch.compiler import PatternCompiler, analysis_from_preset
from pupstitch.layout import (
    A4,
    PageGeometry,
    Paginator,
    RecordingSurface,
    find_notes_for_section,
)
from pupstitch.layout.paginator import FIRST_SECTION_NUMBER, TIPS
from pupstitch.presets import get
from pupstitch.schemas.analysis import BodyPartAnalysis
from pupstitch.schemas.customization import ColorAssignment, Customizations

_CREATED = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _pattern(custom=None, **kwargs):
    preset = get("labrador")
    return PatternCompiler().compile(
        analysis_from_preset(preset),
        preset,
        custom,
        pattern_id="pattern-layout",
        created_at=_CREATED,
        **kwargs,
    )


def _png() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (12, 15), "#C4A265").save(buf, format="PNG")
    return buf.getvalue()


def _pattern_with_head_notes(notes, primary_color="#C4A265"):
    preset = get("labrador")
    analysis = replace(
        analysis_from_preset(preset),
        body_part_analysis=(BodyPartAnalysis("head", primary_color, crochet_notes=notes),),
    )
    return PatternCompiler().compile(analysis, preset, pattern_id="pattern-notes", created_at=_CREATED)


def _render(pattern, geometry=A4):
    surface = RecordingSurface()
    document = Paginator(surface, geometry).paginate(pattern)
    return surface, document


def _page_with_text(surface, value):
    return next(c.page for c in surface.commands if c.op == "text" and c.args["value"] == value)


@pytest.fixture(scope="module")
def pattern():
    return _pattern(dog_name="Biscuit")


@pytest.fixture(scope="module")
def rendered(pattern):
    return _render(pattern)


# ── Page program ───────────────────────────────────────────────────────────────


class TestPageProgram:
    def test_cover_has_no_header(self, rendered):
        _, document = rendered
        assert document.pages[0].has_header is False
        assert document.pages[0].blocks == []
        assert all(p.has_header for p in document.pages[1:])

    def test_page_numbers_sequential(self, rendered):
        surface, document = rendered
        assert [p.number for p in document.pages] == list(range(1, document.page_count + 1))
        assert surface.page_count == document.page_count

    def test_cover_content(self, rendered):
        surface, _ = rendered
        cover = surface.texts(page=1)
        assert "For Biscuit" in cover
        assert "Breed: Labrador" in cover
        assert "Skill Level: Beginner" in cover
        assert "Hook Size: 3.5mm" in cover
        assert "Yarn Weight: Worsted" in cover
        assert "Generated by PupStitch, 2024-05-01" in cover
        assert "Custom amigurumi pattern for Biscuit" in cover

    def test_cover_without_dog_name(self):
        surface, _ = _render(_pattern())
        cover = surface.texts(page=1)
        assert "Custom amigurumi pattern for your pup" in cover
        assert not any(t.startswith("For ") for t in cover)

    def test_materials_and_abbreviations_pages(self, rendered, pattern):
        surface, _ = rendered
        texts = surface.texts()
        assert "Instruments and Materials" in texts
        assert f"Total yarn: ~{pattern.materials.total_yardage} yards" in texts
        assert _page_with_text(surface, "Abbreviations") > _page_with_text(
            surface, "Instruments and Materials"
        )
        for title, _ in TIPS:
            assert title in texts

    def test_each_section_starts_a_page(self, rendered, pattern):
        surface, document = rendered
        for i, section in enumerate(pattern.sections):
            label = f"{FIRST_SECTION_NUMBER + i}."
            page = _page_with_text(surface, label)
            assert section.name in surface.texts(page=page)
            first = document.pages[page - 1].blocks[0]
            assert first.kind == "heading"
            assert first.y == A4.content_top

    def test_assembly_follows_sections(self, rendered, pattern):
        surface, _ = rendered
        label = f"{FIRST_SECTION_NUMBER + len(pattern.sections)}."
        page = _page_with_text(surface, label)
        assert "Assembly" in surface.texts(page=page)
        assert "Notes" in surface.texts()

    def test_notes_numbered_after_assembly(self, rendered, pattern):
        surface, _ = rendered
        label = f"{FIRST_SECTION_NUMBER + len(pattern.sections) + 1}."
        assert "Notes" in surface.texts(page=_page_with_text(surface, label))

    def test_notes_numbered_without_assembly(self, pattern):
        surface, _ = _render(replace(pattern, assembly_instructions=()))
        label = f"{FIRST_SECTION_NUMBER + len(pattern.sections)}."
        assert "Notes" in surface.texts(page=_page_with_text(surface, label))

    def test_no_preview_page_without_image(self, rendered):
        surface, _ = rendered
        assert "Amigurumi Preview" not in surface.texts()


# ── Block placement ────────────────────────────────────────────────────────────


class TestNonSplitting:
    @staticmethod
    def _assert_within(document, geometry):
        for page in document.pages:
            for block in page.blocks:
                assert block.y >= geometry.content_top, (page.number, block)
                assert block.y + block.height <= geometry.content_bottom, (page.number, block)

    def test_a4(self, rendered):
        self._assert_within(rendered[1], A4)

    def test_short_pages(self, pattern):
        short = PageGeometry(height=150)
        _, document = _render(pattern, short)
        self._assert_within(document, short)
        assert document.page_count > _render(pattern)[1].page_count

    def test_with_preview(self):
        _, document = _render(_pattern(preview_image=_png()))
        self._assert_within(document, A4)

    @pytest.mark.parametrize("geometry", [A4, PageGeometry(height=150)])
    def test_oversized_notes_box_truncated(self, geometry):
        notes = "Work the head carefully. " * 400
        surface, document = _render(_pattern_with_head_notes(notes), geometry)
        self._assert_within(document, geometry)
        texts = surface.texts()
        assert texts.count("CROCHET NOTES") == 1
        assert any(t.endswith("...") for t in texts)
        # the rest of the document is unaffected
        assert "Assembly" in texts

    def test_short_notes_not_truncated(self):
        surface, _ = _render(_pattern_with_head_notes("Round head."))
        texts = surface.texts()
        assert "Round head." in texts
        assert "Round head...." not in texts


class TestHeadersAndFooters:
    def test_header_on_every_page_but_cover(self, rendered, pattern):
        surface, document = rendered
        assert "PupStitch" not in surface.texts(page=1)
        for page in range(2, document.page_count + 1):
            texts = surface.texts(page=page)
            assert "PupStitch" in texts
            assert pattern.title in texts

    def test_footer_on_every_page(self, rendered):
        surface, document = rendered
        for page in range(1, document.page_count + 1):
            texts = surface.texts(page=page)
            assert "PupStitch.com" in texts
            assert str(page) in texts


class TestSectionRows:
    def test_row_labels_and_stripped_text(self, rendered):
        surface, _ = rendered
        texts = surface.texts()
        assert "1 row" in texts
        assert "13 row" in texts
        assert any(t.startswith("With Tan yarn: Magic ring") for t in texts)

    def test_reminder_rows_have_no_label(self, rendered):
        surface, _ = rendered
        assert "0 row" not in surface.texts()

    def test_notes_box_and_subtitle(self, rendered):
        surface, _ = rendered
        texts = surface.texts()
        assert "CROCHET NOTES" in texts
        assert "With tan yarn, 3.5mm hook" in texts

    def test_optional_trailers_skipped(self, pattern):
        surface, _ = _render(replace(pattern, assembly_instructions=(), notes=""))
        texts = surface.texts()
        assert "Assembly" not in texts
        assert "Notes" not in texts


# ── Degradation ────────────────────────────────────────────────────────────────


class TestPreview:
    def test_image_drawn(self):
        surface, document = _render(_pattern(preview_image=_png()))
        assert "Amigurumi Preview" in surface.texts(page=2)
        assert any(c.op == "image" for c in surface.commands)
        kinds = [b.kind for b in document.pages[1].blocks]
        assert "image" in kinds
        assert kinds.count("feature-row") == 5

    def test_undecodable_image_becomes_placeholder(self, caplog):
        with caplog.at_level(logging.WARNING, logger="pupstitch.layout.paginator"):
            surface, document = _render(_pattern(preview_image=b"not an image"))
        kinds = [b.kind for b in document.pages[1].blocks]
        assert "image-placeholder" in kinds
        assert "image" not in kinds
        assert "[Preview image could not be loaded]" in surface.texts(page=2)
        assert "could not be drawn" in caplog.text
        # the rest of the document still renders
        assert "Assembly" in surface.texts()


class TestSwatches:
    def test_malformed_hex_skipped(self, caplog):
        palette = (
            ColorAssignment("primary", "#C4A265", "Tan"),
            ColorAssignment("accent", "not-a-color", "Mystery"),
        )
        with caplog.at_level(logging.WARNING, logger="pupstitch.layout.paginator"):
            surface, _ = _render(_pattern(Customizations(color_assignments=palette)))
        fills = {c.args.get("fill") for c in surface.commands if c.op == "rect"}
        assert "#c4a265" in fills
        assert "not-a-color" not in fills
        assert "malformed color 'not-a-color'" in caplog.text

    def test_hex_without_hash_drawn_canonical(self):
        palette = (
            ColorAssignment("primary", "C8A165", "Tan"),
            ColorAssignment("secondary", "123456", "Navy"),
        )
        surface, _ = _render(_pattern(Customizations(color_assignments=palette)))
        fills = {c.args.get("fill") for c in surface.commands if c.op == "rect"}
        assert {"#c8a165", "#123456"} <= fills
        assert "C8A165" not in fills

    @pytest.mark.parametrize("primary_color", [None, "", "beige"])
    def test_missing_accent_color_skips_bar(self, primary_color, caplog):
        with caplog.at_level(logging.WARNING, logger="pupstitch.layout.paginator"):
            surface, _ = _render(_pattern_with_head_notes("Round head.", primary_color))
        assert "CROCHET NOTES" in surface.texts()
        assert "skipping accent bar for head" in caplog.text


# ── Notes lookup ───────────────────────────────────────────────────────────────


class TestFindNotesForSection:
    _PARTS = (
        BodyPartAnalysis("head", "#C4A265", crochet_notes="Round head."),
        BodyPartAnalysis("Ears", "#C4A265", crochet_notes="Floppy."),
        BodyPartAnalysis("tail", "#C4A265", crochet_notes="Otter tail."),
    )

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Head", "Round head."),
            ("Ears (make 2)", "Floppy."),
            ("Tail Tip", "Otter tail."),
        ],
    )
    def test_matches(self, name, expected):
        assert find_notes_for_section(name, self._PARTS).crochet_notes == expected

    @pytest.mark.parametrize("name", ["Front Legs (make 2)", "Nose", "", "   "])
    def test_no_match_is_none(self, name):
        assert find_notes_for_section(name, self._PARTS) is None

    def test_empty_analysis(self):
        assert find_notes_for_section("Head", ()) is None
