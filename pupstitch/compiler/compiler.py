"""
PatternCompiler: analysis + preset + customizations -> Pattern.

Stages:

  1. Fill in body-part analysis from the fallback when the analysis has none.
  2. Seed the palette from the analysis when the customizations have none.
  3. Per body part in canonical order (skipping absent and disabled parts):
     interpret rows, run-length merge when simplified, estimate time, and
     build section notes.
  4. Materials bill and palette yardage.
  5. Assembly steps, title, description, general notes.

Every compile returns a fresh Pattern; the inputs are never modified and no
reference to them is kept beyond the values copied into the Pattern.
"""

from __future__ import annotations

import logging
import math
import re
import uuid
from dataclasses import replace
from datetime import datetime, timezone

from pupstitch.compiler.assembly import assembly_instructions
from pupstitch.compiler.fallback import fallback_body_part_analysis
from pupstitch.compiler.interpreter import interpret, merge_repeated_rows
from pupstitch.compiler.materials import compute_materials
from pupstitch.compiler.palette import body_part_color_name, build_color_assignments
from pupstitch.schemas.analysis import BodyPartAnalysis, DogAnalysis
from pupstitch.schemas.customization import Customizations, DifficultyLevel
from pupstitch.schemas.pattern import CompiledSection, Pattern
from pupstitch.schemas.preset import BodyPartName, BodyPartTemplate, BreedPreset
from pupstitch.tables.registry import get_tables

logger = logging.getLogger(__name__)

MINUTES_PER_ROW = 2
MIN_HOURS_PER_PIECE = 0.3

_BREED_SPLIT_RE = re.compile(r"[-\s]+")


class CompileError(Exception):
    """Raised when a compile stage fails.

    Attributes:
        stage: Name of the stage that failed (``"interpreter"`` or ``"materials"``).
        detail: Human-readable description of the failure.
    """

    def __init__(self, stage: str, detail: str) -> None:
        super().__init__(f"[{stage}] {detail}")
        self.stage = stage
        self.detail = detail


def format_breed_display(breed: str) -> str:
    """``"german-shepherd"`` -> ``"German Shepherd"``."""
    return " ".join(w[:1].upper() + w[1:] for w in _BREED_SPLIT_RE.split(breed.strip()) if w)


def round_half_up(value: float, digits: int = 0) -> float:
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


def general_notes(finished_height: str) -> str:
    return "\n".join(
        (
            "Work in continuous spiral rounds unless otherwise noted. "
            "Do not join rounds with a slip stitch.",
            "Use a stitch marker to mark the first stitch of each round and move it up as you go.",
            "Gauge is not critical for amigurumi. Your stitches should be tight enough that "
            "no stuffing shows through. If stuffing is visible, try a smaller hook.",
            f"Finished size: {finished_height} tall (approximate).",
            "Stuff each piece as you go. It is much harder to stuff after closing.",
            "Leave a long yarn tail (~12 inches) when fastening off each piece "
            "for sewing during assembly.",
        )
    )


def piece_hours(template: BodyPartTemplate, multiplier: float) -> float:
    """Hours for one piece: two minutes per row, scaled, at least 0.3 (0 with no rows)."""
    if not template.rows:
        return 0.0
    return max(MIN_HOURS_PER_PIECE, len(template.rows) * MINUTES_PER_ROW / 60 * multiplier)


def find_part_analysis(part: BodyPartName, analysis: DogAnalysis) -> BodyPartAnalysis | None:
    analysis_part = get_tables().analysis_part(part)
    for bp in analysis.body_part_analysis:
        if bp.part_name in (analysis_part, part.value):
            return bp
    return None


class PatternCompiler:
    """
    Deterministic pattern compiler.

    Holds no state between calls; one instance may serve concurrent compiles.
    """

    def compile(
        self,
        analysis: DogAnalysis,
        preset: BreedPreset,
        customizations: Customizations | None = None,
        *,
        pattern_id: str | None = None,
        created_at: datetime | None = None,
        dog_name: str | None = None,
        preview_image: bytes | None = None,
    ) -> Pattern:
        """
        Compile a complete pattern.

        Parameters
        ----------
        analysis:
            Vision (or preset-derived) analysis. Not modified.
        preset:
            Breed preset, already specialized to the size bucket.
        customizations:
            Defaults to ``Customizations()`` (standard difficulty, size 1.0).
        pattern_id, created_at:
            Carried over by the customizer on recompiles; generated otherwise.
        dog_name, preview_image:
            Optional cover / preview content carried on the Pattern.

        Returns
        -------
        Pattern

        Raises
        ------
        CompileError
            If the interpreter or the materials stage fails. ``stage`` names
            the failing step.
        """
        tables = get_tables()
        custom = customizations if customizations is not None else Customizations()

        # Stage 1-2: resolved analysis and palette (copies, never the inputs)
        if not analysis.body_part_analysis:
            analysis = replace(analysis, body_part_analysis=fallback_body_part_analysis(analysis))
        if not custom.color_assignments:
            custom = replace(custom, color_assignments=build_color_assignments(analysis))

        size_key = tables.size_key_for(custom.size_multiplier)
        hook_size = custom.hook_size_override or preset.hook_size

        # Stage 3: sections in canonical order
        sections: list[CompiledSection] = []
        total_hours = 0.0
        for part in tables.canonical_order:
            template = preset.body_parts.get(part)
            if template is None or not custom.is_enabled(part):
                continue
            multiplier = custom.multiplier_for(part)
            try:
                instructions = interpret(
                    template.rows,
                    template.color_zones,
                    custom,
                    multiplier,
                    custom.difficulty_level,
                    part,
                )
            except Exception as exc:
                raise CompileError("interpreter", f"body part '{part.value}': {exc}") from exc
            if custom.difficulty_level == DifficultyLevel.SIMPLIFIED:
                instructions = merge_repeated_rows(instructions)

            hours = piece_hours(template, multiplier) * template.quantity
            total_hours += hours

            name = tables.display_name(part)
            if template.quantity > 1:
                name = f"{name} (make {template.quantity})"

            sections.append(
                CompiledSection(
                    name=name,
                    part=part,
                    quantity=template.quantity,
                    instructions=instructions,
                    estimated_time_hours=round(hours, 2),
                    notes=self._section_notes(part, template, analysis, custom, hook_size),
                    difficulty_notes=template.assembly_notes[0] if template.assembly_notes else None,
                )
            )
            logger.debug("compiled %s: %d instructions", part.value, len(instructions))

        # Stage 4: materials
        try:
            materials, palette = compute_materials(preset, custom, size_key)
        except Exception as exc:
            raise CompileError("materials", str(exc)) from exc
        custom = replace(custom, color_assignments=palette)

        # Stage 5: document metadata
        breed = format_breed_display(analysis.detected_breed)
        skill = preset.skill_level.value
        total = round_half_up(total_hours, 1)
        now = created_at or datetime.now(timezone.utc)

        pattern = Pattern(
            id=pattern_id or f"pattern-{uuid.uuid4().hex[:12]}",
            breed_id=preset.breed_id,
            title=f"{breed} Amigurumi Pattern",
            description=(
                f"Custom {breed} amigurumi crochet doll. "
                f"Finished size: {materials.finished_height}. "
                f"Skill level: {skill}. "
                f"Estimated time: {int(round_half_up(total_hours))} hours."
            ),
            skill_level=preset.skill_level,
            analysis=analysis,
            customizations=custom,
            sections=tuple(sections),
            materials=materials,
            assembly_instructions=assembly_instructions(preset, analysis),
            abbreviations=tables.abbreviations,
            notes=general_notes(materials.finished_height),
            estimated_total_hours=total,
            created_at=now,
            updated_at=now,
            dog_name=dog_name,
            preview_image=preview_image,
        )
        logger.info(
            "compiled %s (%s): %d sections, %d yd, %.1f h",
            preset.breed_id,
            size_key.value,
            len(sections),
            materials.total_yardage,
            total,
        )
        return pattern

    @staticmethod
    def _section_notes(
        part: BodyPartName,
        template: BodyPartTemplate,
        analysis: DogAnalysis,
        custom: Customizations,
        hook_size: str,
    ) -> str:
        notes = [f"With {body_part_color_name(part, analysis, custom)} yarn, {hook_size} hook."]
        bp = find_part_analysis(part, analysis)
        if bp is not None and bp.crochet_notes:
            notes.append(bp.crochet_notes)
        notes.append(f"Stuff {get_tables().stuffing_level(part)}.")
        if template.assembly_notes:
            notes.append(" ".join(template.assembly_notes))
        return " ".join(notes)


def compile_pattern(
    analysis: DogAnalysis,
    preset: BreedPreset,
    customizations: Customizations | None = None,
    **kwargs,
) -> Pattern:
    """Module-level shortcut for ``PatternCompiler().compile(...)``."""
    return PatternCompiler().compile(analysis, preset, customizations, **kwargs)
