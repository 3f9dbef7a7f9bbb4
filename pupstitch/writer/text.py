"""
Plain-text, markdown and shopping-list renderings of a compiled Pattern.

All functions are pure and return a single string with "\\n" line breaks.
"""

from __future__ import annotations

from collections.abc import Mapping

from pupstitch.compiler.compiler import round_half_up
from pupstitch.schemas.pattern import (
    CompiledInstruction,
    CompiledSection,
    Pattern,
    PatternMaterials,
)
from pupstitch.utilities.colors import classify_color


def _hours(value: float) -> int:
    return int(round_half_up(value))


def format_instruction(instruction: CompiledInstruction) -> str:
    """Instruction text with its note in parentheses, if any."""
    if instruction.note:
        return f"{instruction.text} ({instruction.note})"
    return instruction.text


def format_section(section: CompiledSection) -> str:
    lines = [f"### {section.name}"]
    if section.difficulty_notes:
        lines.append(f"Notes: {section.difficulty_notes}")
    if section.notes:
        lines.append(f"Assembly: {section.notes}")
    lines.append(f"Estimated time: {section.estimated_time_hours:.1f} hours")
    lines.append("")
    for instruction in section.instructions:
        lines.append(instruction.text)
        if instruction.note:
            lines.append(f"  ({instruction.note})")
    lines.append("")
    return "\n".join(lines)


def format_pattern_text(
    pattern: Pattern, section_texts: Mapping[str, str] | None = None
) -> str:
    """
    Full printable pattern.

    Parameters
    ----------
    pattern:
        Compiled pattern.
    section_texts:
        Optional replacement text per section, keyed by body-part value
        (``"head"``, ``"frontLeg"``, ...). Sections without an entry use
        ``format_section``.
    """
    overrides = section_texts or {}
    lines = [
        f"# {pattern.title}",
        f"Description: {pattern.description}",
        f"Skill Level: {pattern.skill_level.value}",
        f"Estimated Time: {_hours(pattern.estimated_total_hours)} hours",
        "",
        "## Abbreviations",
    ]
    lines.extend(f"{abbr} = {meaning}" for abbr, meaning in pattern.abbreviations)
    lines.append("")

    lines.append("## Pattern Instructions")
    for section in pattern.sections:
        lines.append(overrides.get(section.part.value) or format_section(section))
    lines.append("")

    if pattern.assembly_instructions:
        lines.append("## Assembly Instructions")
        lines.extend(f"{i}. {step}" for i, step in enumerate(pattern.assembly_instructions, 1))
        lines.append("")

    if pattern.notes:
        lines.extend(("## Notes", pattern.notes, ""))

    return "\n".join(lines)


def format_materials_list(materials: PatternMaterials) -> str:
    lines = ["# Materials Needed", "", "## Yarn"]
    lines.extend(f"- {y.name}: {y.yardage} yards ({y.weight} weight)" for y in materials.yarns)
    lines.append("")

    lines.extend(("## Tools", f"- Hook: {materials.hook_size} ({materials.hook_size_info})", ""))

    if materials.notions:
        lines.append("## Notions & Supplies")
        lines.extend(f"- {n.name}: {n.quantity} {n.unit}" for n in materials.notions)
        lines.append("")

    lines.extend(
        (
            "## Stuffing",
            f"- {materials.stuffing_type}: {materials.stuffing_amount_oz:g} oz",
            "",
        )
    )

    if materials.additional_supplies:
        lines.append("## Additional Supplies")
        lines.extend(f"- {s}" for s in materials.additional_supplies)
        lines.append("")

    lines.extend(("---", f"Total Yardage: {materials.total_yardage} yards"))
    return "\n".join(lines)


def format_pattern_markdown(pattern: Pattern) -> str:
    lines = [
        f"# {pattern.title}",
        "",
        pattern.description,
        "",
        f"**Skill Level:** {pattern.skill_level.value}",
        f"**Estimated Time:** {_hours(pattern.estimated_total_hours)} hours",
        "",
        "| Abbreviation | Full Name |",
        "|---|---|",
    ]
    lines.extend(f"| {abbr} | {meaning} |" for abbr, meaning in pattern.abbreviations)
    lines.append("")

    for section in pattern.sections:
        lines.append(f"## {section.name}")
        if section.notes:
            lines.append(f"> {section.notes}")
        lines.append("")
        lines.extend(f"- {i.text}" for i in section.instructions)
        lines.append("")

    if pattern.assembly_instructions:
        lines.append("## Assembly")
        lines.extend(f"{i}. {step}" for i, step in enumerate(pattern.assembly_instructions, 1))

    return "\n".join(lines)


def format_shopping_list(materials: PatternMaterials) -> str:
    """Checkbox list of everything to buy, yarn colors named by classify_color."""
    lines = ["# Shopping List", "", "## Yarn"]
    lines.extend(
        f"☐ {y.name} - {y.yardage} yards ({classify_color(y.hex_code)})" for y in materials.yarns
    )
    lines.extend(("", "## Tools", f"☐ Crochet hook: {materials.hook_size}", "", "## Supplies"))
    lines.extend(f"☐ {n.name} ({n.quantity} {n.unit})" for n in materials.notions)
    if materials.stuffing_type:
        lines.append(f"☐ {materials.stuffing_type} - {materials.stuffing_amount_oz:g} oz")
    lines.extend(f"☐ {s}" for s in materials.additional_supplies)
    return "\n".join(lines)


def pattern_summary(pattern: Pattern) -> str:
    """One fact per line: title, section and instruction counts, stitches, skill, hours."""
    stitches: list[str] = []
    for section in pattern.sections:
        for instruction in section.instructions:
            for st in instruction.stitches_used:
                if st.value not in stitches:
                    stitches.append(st.value)
    total = sum(len(s.instructions) for s in pattern.sections)
    return "\n".join(
        (
            f"Pattern: {pattern.title}",
            f"Sections: {len(pattern.sections)}",
            f"Total Instructions: {total}",
            f"Unique Stitches: {', '.join(stitches)}",
            f"Skill Level: {pattern.skill_level.value}",
            f"Estimated Time: {_hours(pattern.estimated_total_hours)} hours",
        )
    )
