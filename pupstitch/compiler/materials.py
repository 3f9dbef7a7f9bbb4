"""
Materials calculator: yarn yardage per palette color plus the notions bill.

Yardage per enabled part is the table's per-piece yards times quantity. A part
with color zones splits that yardage by zone: each zone gets the share of the
part's non-terminal rows it covers, and uncovered non-terminal rows go to
"primary". A part without zones is all "primary".

Per palette entry: accumulated yards (3 for "nose", 5 otherwise, when nothing
accumulated), plus a 15% waste buffer and 3 yards for tails, rounded up and
never below 3.
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from dataclasses import replace

from pupstitch.schemas.customization import ColorAssignment, Customizations
from pupstitch.schemas.pattern import Notion, PatternMaterials, YarnInfo
from pupstitch.schemas.preset import BodyPartTemplate, BreedPreset, EarShape, SizeKey
from pupstitch.tables.registry import get_tables

logger = logging.getLogger(__name__)

WASTE_BUFFER = 1.15
JOINING_ALLOWANCE_YARDS = 3
MIN_YARDS = 3
DEFAULT_NOSE_YARDS = 3
DEFAULT_DETAIL_YARDS = 5

STUFFING_TYPE = "Polyester fiberfill"
ADDITIONAL_SUPPLIES = (
    "Embroidery thread or floss (black, for mouth, eyebrows and details)",
    "Scissors",
    "Pins (for positioning pieces before sewing)",
    "Row counter or pen & paper (to track rounds)",
)


def zone_fractions(template: BodyPartTemplate) -> dict[str, float]:
    """
    Share of *template*'s fabric worked in each color key.

    Only non-terminal rows (stitch count > 0) count. Shares sum to 1.
    """
    fabric_rows = [r for r in template.rows if r.stitch_count > 0]
    if not template.color_zones or not fabric_rows:
        return {"primary": 1.0}

    counts: dict[str, int] = defaultdict(int)
    for row in fabric_rows:
        zone = template.zone_for_row(row.row_number)
        counts[zone.color_key if zone is not None else "primary"] += 1
    return {key: n / len(fabric_rows) for key, n in counts.items()}


def finish_yardage(raw_yards: float) -> int:
    """Apply the waste buffer and joining allowance, round up, floor at 3."""
    # 20 * 1.15 + 3 == 26.000000000000004
    yards = math.ceil(round(raw_yards * WASTE_BUFFER + JOINING_ALLOWANCE_YARDS, 6))
    return max(MIN_YARDS, yards)


def accumulate_yardage(
    preset: BreedPreset,
    customizations: Customizations,
    size_key: SizeKey,
) -> dict[str, float]:
    tables = get_tables()
    per_color: dict[str, float] = defaultdict(float)
    for part in tables.canonical_order:
        template = preset.body_parts.get(part)
        if template is None or not customizations.is_enabled(part):
            continue
        part_yards = tables.base_yardage(size_key, part) * template.quantity
        for key, share in zone_fractions(template).items():
            per_color[key] += part_yards * share
    return dict(per_color)


def compute_materials(
    preset: BreedPreset,
    customizations: Customizations,
    size_key: SizeKey,
) -> tuple[PatternMaterials, tuple[ColorAssignment, ...]]:
    """
    Build the materials bill.

    Returns
    -------
    tuple[PatternMaterials, tuple[ColorAssignment, ...]]
        The materials, and the palette with ``yardage_used`` filled in.
    """
    tables = get_tables()
    sizing = tables.sizing_for(size_key)
    accumulated = accumulate_yardage(preset, customizations, size_key)
    yarn_weight = customizations.yarn_weight_override or preset.yarn_weight
    hook_size = customizations.hook_size_override or preset.hook_size

    palette_keys = {a.color_key for a in customizations.color_assignments}
    for key in sorted(set(accumulated) - palette_keys):
        logger.debug("%s: %.1f yd for color key %r not in palette", preset.breed_id,
                     accumulated[key], key)

    yarns: list[YarnInfo] = []
    palette: list[ColorAssignment] = []
    for assignment in customizations.color_assignments:
        raw = accumulated.get(assignment.color_key, 0.0)
        if raw == 0:
            raw = DEFAULT_NOSE_YARDS if assignment.color_key == "nose" else DEFAULT_DETAIL_YARDS
        yards = finish_yardage(raw)
        yarns.append(
            YarnInfo(
                name=assignment.display_name,
                color_key=assignment.color_key,
                hex_code=assignment.hex_code,
                yardage=yards,
                weight=yarn_weight,
            )
        )
        palette.append(replace(assignment, yardage_used=yards))

    notions = [
        Notion(f"Safety eyes, {sizing.safety_eyes}", 2, "pieces"),
        Notion("Safety eye washers/backings", 2, "pieces"),
        Notion("Stitch markers", 2, "pieces"),
        Notion("Yarn needle (tapestry needle)", 1, "piece"),
    ]
    if preset.default_ear_shape in (EarShape.POINTY, EarShape.BUTTON):
        notions.append(Notion("Pipe cleaners (for ear support)", 2, "pieces"))

    materials = PatternMaterials(
        yarns=tuple(yarns),
        hook_size=hook_size,
        hook_size_info=(
            f"{hook_size} crochet hook (use 1-2 sizes smaller than yarn label "
            "recommends for tight amigurumi fabric)"
        ),
        notions=tuple(notions),
        stuffing_amount_oz=round(sizing.stuffing_oz, 1),
        stuffing_type=STUFFING_TYPE,
        additional_supplies=ADDITIONAL_SUPPLIES,
        total_yardage=sum(y.yardage for y in yarns),
        size_key=size_key,
        safety_eye_size=sizing.safety_eyes,
        finished_height=sizing.finished_height,
    )
    return materials, tuple(palette)
