"""
Tests for the plain-text, markdown and list renderings.

Covers:
  - format_instruction() / format_section()
  - format_pattern_text() with and without section overrides
  - format_materials_list(), format_shopping_list()
  - format_pattern_markdown()
  - pattern_summary()
"""

from dataclasses import replace
from datetime import datetime, timezone

import pytest

from pupstitch.compiler import PatternCompiler, analysis_from_preset
from pupstitch.presets import get
from pupstitch.schemas.pattern import CompiledInstruction
from pupstitch.schemas.preset import BodyPartName
from pupstitch.writer import (
    format_instruction,
    format_materials_list,
    format_pattern_markdown,
    format_pattern_text,
    format_section,
    format_shopping_list,
    pattern_summary,
)


@pytest.fixture(scope="module")
def pattern():
    preset = get("labrador")
    return PatternCompiler().compile(
        analysis_from_preset(preset),
        preset,
        pattern_id="pattern-text",
        created_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
    )


class TestFormatInstruction:
    def test_plain(self):
        inst = CompiledInstruction(1, "Rnd 1: sc", "primary")
        assert format_instruction(inst) == "Rnd 1: sc"

    def test_with_note(self):
        inst = CompiledInstruction(1, "Rnd 1: sc", "secondary", note="Color: Cream")
        assert format_instruction(inst) == "Rnd 1: sc (Color: Cream)"


class TestFormatSection:
    def test_head(self, pattern):
        text = format_section(pattern.section(BodyPartName.HEAD))
        lines = text.split("\n")
        assert lines[0] == "### Head"
        assert lines[1] == "Notes: Leave the head open until the eyes are fixed."
        assert lines[2].startswith("Assembly: With Tan yarn, 3.5mm hook.")
        assert lines[3] == "Estimated time: 0.6 hours"
        assert "  (Reminder)" in lines
        assert lines[-1] == ""

    def test_zone_notes_indented(self, pattern):
        text = format_section(pattern.section(BodyPartName.BODY))
        assert "  (Color: Golden)" in text.split("\n")


class TestFormatPatternText:
    def test_header_and_blocks(self, pattern):
        text = format_pattern_text(pattern)
        lines = text.split("\n")
        assert lines[0] == "# Labrador Amigurumi Pattern"
        assert lines[2] == "Skill Level: beginner"
        assert lines[3] == "Estimated Time: 4 hours"
        assert "MR = magic ring (adjustable ring)" in lines
        assert "## Pattern Instructions" in lines
        assert "### Front Legs (make 2)" in text
        assert "1. Insert safety eyes between Rnds 9 and 10 of the head, about 7 stitches apart." in lines
        assert "## Notes" in lines

    def test_section_order(self, pattern):
        text = format_pattern_text(pattern)
        positions = [text.index(f"### {s.name}\n") for s in pattern.sections]
        assert positions == sorted(positions)

    def test_override_replaces_section(self, pattern):
        text = format_pattern_text(pattern, {"head": "CUSTOM HEAD"})
        assert "CUSTOM HEAD" in text
        assert "### Head\n" not in text
        assert "### Body\n" in text

    def test_optional_blocks_omitted(self, pattern):
        text = format_pattern_text(replace(pattern, assembly_instructions=(), notes=""))
        assert "## Assembly Instructions" not in text
        assert "## Notes" not in text


class TestMaterialsList:
    def test_contents(self, pattern):
        text = format_materials_list(pattern.materials)
        lines = text.split("\n")
        assert lines[0] == "# Materials Needed"
        assert "- Tan: 211 yards (worsted weight)" in lines
        assert "- Safety eyes, 9-12mm: 2 pieces" in lines
        assert "- Polyester fiberfill: 4 oz" in lines
        assert "- Scissors" in lines
        assert lines[-2:] == ["---", "Total Yardage: 259 yards"]


class TestShoppingList:
    def test_contents(self, pattern):
        lines = format_shopping_list(pattern.materials).split("\n")
        assert lines[0] == "# Shopping List"
        assert "☐ Tan - 211 yards (Tan)" in lines
        assert "☐ Crochet hook: 3.5mm" in lines
        assert "☐ Stitch markers (2 pieces)" in lines
        assert "☐ Polyester fiberfill - 4 oz" in lines


class TestMarkdown:
    def test_contents(self, pattern):
        md = format_pattern_markdown(pattern)
        lines = md.split("\n")
        assert lines[0] == "# Labrador Amigurumi Pattern"
        assert "**Skill Level:** beginner" in lines
        assert "| MR | magic ring (adjustable ring) |" in lines
        assert "## Front Legs (make 2)" in lines
        assert any(line.startswith("> With Tan yarn, 3.5mm hook.") for line in lines)
        assert "- Rnd 1: With Tan yarn: Magic ring, 6 sc in ring [6 sts]" in lines
        assert "## Assembly" in lines


class TestSummary:
    def test_lines(self, pattern):
        total = sum(len(s.instructions) for s in pattern.sections)
        assert pattern_summary(pattern).split("\n") == [
            "Pattern: Labrador Amigurumi Pattern",
            "Sections: 8",
            f"Total Instructions: {total}",
            "Unique Stitches: sc, inc, dec, ch",
            "Skill Level: beginner",
            "Estimated Time: 4 hours",
        ]
