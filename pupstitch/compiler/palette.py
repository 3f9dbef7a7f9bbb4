"""
Palette seeding and per-part yarn naming.

build_color_assignments() derives a palette from an analysis when the caller
supplied none:
  - primary / secondary / tertiary / accent from the top-level colors
    (a secondary that names the same as primary becomes "Light <name>")
  - one "bp-<part>" entry per body-part color whose hex is not already in the
    palette; a name collision gets the part name appended in parentheses
  - a "nose" entry: the analysis's nose color, else accent, else black
"""

from __future__ import annotations

from pupstitch.schemas.analysis import DogAnalysis
from pupstitch.schemas.customization import PART_COLOR_PREFIX, ColorAssignment, Customizations
from pupstitch.schemas.preset import BodyPartName
from pupstitch.tables.registry import get_tables
from pupstitch.utilities.colors import classify_color

NOSE_DEFAULT_HEX = "#000000"


def _same_hex(a: str, b: str) -> bool:
    return a.lower() == b.lower()


def build_color_assignments(analysis: DogAnalysis) -> tuple[ColorAssignment, ...]:
    colors = analysis.colors
    primary_name = classify_color(colors.primary)
    palette = [ColorAssignment("primary", colors.primary, primary_name)]

    if colors.secondary:
        name = classify_color(colors.secondary)
        label = f"Light {name}" if name == primary_name else name
        palette.append(ColorAssignment("secondary", colors.secondary, label))
    if colors.tertiary:
        palette.append(
            ColorAssignment("tertiary", colors.tertiary, classify_color(colors.tertiary))
        )
    if colors.accent:
        palette.append(ColorAssignment("accent", colors.accent, classify_color(colors.accent)))

    used_names = {a.yarn_name for a in palette}
    for bp in analysis.body_part_analysis:
        if not bp.primary_color:
            continue
        key = f"{PART_COLOR_PREFIX}{bp.part_name}"
        if any(_same_hex(a.hex_code, bp.primary_color) for a in palette):
            continue
        if any(a.color_key == key for a in palette):
            continue
        name = classify_color(bp.primary_color)
        label = name
        if label in used_names:
            label = f"{name} ({bp.part_name[:1].upper()}{bp.part_name[1:]})"
        palette.append(ColorAssignment(key, bp.primary_color, label))
        used_names.add(label)

    nose_hex = NOSE_DEFAULT_HEX
    for bp in analysis.body_part_analysis:
        if bp.part_name == "nose" and bp.primary_color:
            nose_hex = bp.primary_color
            break
    if nose_hex == NOSE_DEFAULT_HEX and colors.accent:
        nose_hex = colors.accent
    if not any(a.color_key == "nose" for a in palette):
        palette.append(ColorAssignment("nose", nose_hex, classify_color(nose_hex)))

    return tuple(palette)


def body_part_color_name(
    part: BodyPartName,
    analysis: DogAnalysis,
    customizations: Customizations,
) -> str:
    """
    Yarn name to start *part* with.

    Prefers the analysis's own color for the part (named via the palette when
    its hex is there), then the nose entry for the nose, then primary.
    """
    analysis_part = get_tables().analysis_part(part)
    for bp in analysis.body_part_analysis:
        if bp.part_name in (analysis_part, part.value) and bp.primary_color:
            for a in customizations.color_assignments:
                if _same_hex(a.hex_code, bp.primary_color):
                    return a.display_name
            return classify_color(bp.primary_color)
        if bp.part_name in (analysis_part, part.value):
            break

    if part == BodyPartName.NOSE:
        nose = customizations.assignment("nose")
        if nose is not None:
            return nose.yarn_name or "Black"

    primary = customizations.assignment("primary")
    if primary is not None and primary.yarn_name:
        return primary.yarn_name
    return "Main Color"
