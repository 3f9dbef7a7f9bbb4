"""
Deterministic stand-ins for vision-collaborator output.

fallback_body_part_analysis() synthesizes head / body / ears / tail / snout
analysis from the top-level palette and proportions when the collaborator
supplied none. analysis_from_preset() is the no-photo path: an analysis built
entirely from a preset's defaults.

Both are ordinary code paths, not error recovery.
"""

from __future__ import annotations

from pupstitch.schemas.analysis import BodyPartAnalysis, BodyProportions, DogAnalysis
from pupstitch.schemas.preset import BreedPreset, BuildType, EarShape

SHORT_SNOUT = 0.25


def _body_notes(build: BuildType) -> str:
    if build == BuildType.STOCKY:
        extra = "Use wider increases for a stocky build."
    elif build == BuildType.SLENDER:
        extra = "Keep a slim profile with fewer increases."
    else:
        extra = "Work standard increases for the body."
    return f"Create the main body shape. {extra}"


def fallback_body_part_analysis(analysis: DogAnalysis) -> tuple[BodyPartAnalysis, ...]:
    primary = analysis.colors.primary
    secondary = analysis.colors.secondary or primary
    props = analysis.body_proportions
    build = props.build_type
    two_tone = (primary, secondary) if secondary != primary else (primary,)
    snout = props.snout_length

    return (
        BodyPartAnalysis(
            part_name="head",
            primary_color=primary,
            colors=two_tone,
            shape=(
                "broad, rounded" if build in (BuildType.STOCKY, BuildType.MASSIVE) else "rounded"
            ),
            texture="smooth",
            relative_size=props.head_to_body_ratio,
            crochet_notes="Work in continuous rounds. Stuff firmly for a rounded head shape.",
        ),
        BodyPartAnalysis(
            part_name="body",
            primary_color=primary,
            colors=two_tone,
            shape=build.value,
            texture="smooth",
            relative_size=1.0,
            crochet_notes=_body_notes(build),
        ),
        BodyPartAnalysis(
            part_name="ears",
            primary_color=primary,
            colors=(primary,),
            shape=analysis.ear_shape.value,
            texture="smooth",
            relative_size=props.ear_size,
            crochet_notes=(
                "Create pointed triangular ears. Use pipe cleaners inside to keep them upright."
                if analysis.ear_shape == EarShape.POINTY
                else "Create flat, rounded ear pieces. Leave unstuffed for a natural floppy look."
            ),
        ),
        BodyPartAnalysis(
            part_name="tail",
            primary_color=primary,
            colors=(primary,),
            shape=analysis.tail_type.value,
            texture="smooth",
            relative_size=props.tail_length,
            crochet_notes=(
                f"Shape the tail to match a {analysis.tail_type.value} style. Stuff lightly."
            ),
        ),
        BodyPartAnalysis(
            part_name="snout",
            primary_color=primary,
            colors=(primary,),
            shape="short, flat" if snout < SHORT_SNOUT else "medium",
            texture="smooth",
            relative_size=snout,
            crochet_notes=(
                "Very short snout, almost flush with the face."
                if snout < SHORT_SNOUT
                else "Attach centered on the lower half of the head."
            ),
        ),
    )


def analysis_from_preset(preset: BreedPreset) -> DogAnalysis:
    """Analysis for a breed chosen without a photo, from the preset's defaults."""
    return DogAnalysis(
        detected_breed=preset.breed_id,
        colors=preset.default_colors,
        ear_shape=preset.default_ear_shape,
        tail_type=preset.default_tail_type,
        body_proportions=BodyProportions(build_type=preset.default_build),
        confidence_score=1.0,
        color_confidence=1.0,
    )
