"""
Analysis schema: what the vision collaborator detected in a dog photo.

The analysis is input-only. The compiler reads it and attaches a copy (with
synthesized body-part analysis where the collaborator supplied none) to the
compiled Pattern; it never mutates the caller's instance.

analysis_from_dict() converts the collaborator's JSON-like mapping into the
typed records below.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pupstitch.schemas.preset import BodyPartName, BreedColors, BuildType, EarShape, TailType

_RATIO_FIELDS = (
    "head_to_body_ratio",
    "leg_length",
    "tail_length",
    "ear_size",
    "snout_length",
)


@dataclass(frozen=True)
class BodyProportions:
    """
    Detected body proportions.

    All ratios are in ``[0, 1]``: head and legs relative to body height, ears
    relative to the head, tail and snout relative to body length.
    """

    head_to_body_ratio: float = 0.28
    leg_length: float = 0.3
    tail_length: float = 0.15
    ear_size: float = 0.15
    snout_length: float = 0.3
    build_type: BuildType = BuildType.ATHLETIC

    def __post_init__(self) -> None:
        for name in _RATIO_FIELDS:
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {value}")


@dataclass(frozen=True)
class Marking:
    type: str
    location: BodyPartName
    coverage: float
    colors: tuple[str, ...] = ()


@dataclass(frozen=True)
class BodyPartAnalysis:
    """Per-body-part detail from the vision collaborator (free-text fields)."""

    part_name: str  # head, body, legs, ears, tail, snout, nose
    primary_color: str
    colors: tuple[str, ...] = ()
    markings: tuple[str, ...] = ()
    shape: str = ""
    texture: str = ""
    relative_size: float = 0.5
    crochet_notes: str = ""


@dataclass(frozen=True)
class DogAnalysis:
    """
    Structured analysis record for one dog.

    ``body_part_analysis`` is empty when the collaborator omitted it; the
    compiler then synthesizes a default from the palette and proportions.
    """

    detected_breed: str
    colors: BreedColors
    ear_shape: EarShape
    tail_type: TailType
    body_proportions: BodyProportions = BodyProportions()
    confidence_score: float = 1.0
    color_confidence: float = 1.0
    markings: tuple[Marking, ...] = ()
    body_part_analysis: tuple[BodyPartAnalysis, ...] = ()
    photo_url: str | None = None

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence_score <= 1.0:
            raise ValueError(f"confidence_score must be in [0, 1], got {self.confidence_score}")


def _opt(data: Mapping[str, Any], key: str, default: Any) -> Any:
    """``data[key]``, or *default* when the key is absent or null."""
    value = data.get(key)
    return default if value is None else value


def analysis_from_dict(data: Mapping[str, Any]) -> DogAnalysis:
    """
    Build a DogAnalysis from a JSON-like mapping with snake_case keys.

    Optional fields may be absent or null. Raises KeyError for a missing
    ``detected_breed`` or ``colors.primary`` and ValueError for unknown enum
    values.
    """
    colors = data["colors"]
    proportions = _opt(data, "body_proportions", {})
    return DogAnalysis(
        detected_breed=data["detected_breed"],
        colors=BreedColors(
            primary=colors["primary"],
            secondary=colors.get("secondary"),
            tertiary=colors.get("tertiary"),
            accent=colors.get("accent"),
        ),
        ear_shape=EarShape(_opt(data, "ear_shape", EarShape.FLOPPY.value)),
        tail_type=TailType(_opt(data, "tail_type", TailType.STRAIGHT.value)),
        body_proportions=BodyProportions(
            **{k: float(proportions[k]) for k in _RATIO_FIELDS if proportions.get(k) is not None},
            build_type=BuildType(_opt(proportions, "build_type", BuildType.ATHLETIC.value)),
        ),
        confidence_score=float(_opt(data, "confidence_score", 1.0)),
        color_confidence=float(_opt(data, "color_confidence", 1.0)),
        markings=tuple(
            Marking(
                type=m["type"],
                location=BodyPartName(m["location"]),
                coverage=float(_opt(m, "coverage", 0.0)),
                colors=tuple(_opt(m, "colors", ())),
            )
            for m in _opt(data, "markings", ())
        ),
        body_part_analysis=tuple(
            BodyPartAnalysis(
                part_name=bp["part_name"],
                primary_color=_opt(bp, "primary_color", ""),
                colors=tuple(_opt(bp, "colors", ())),
                markings=tuple(_opt(bp, "markings", ())),
                shape=_opt(bp, "shape", ""),
                texture=_opt(bp, "texture", ""),
                relative_size=float(_opt(bp, "relative_size", 0.5)),
                crochet_notes=_opt(bp, "crochet_notes", ""),
            )
            for bp in _opt(data, "body_part_analysis", ())
        ),
        photo_url=data.get("photo_url"),
    )
