"""
Compiled pattern schema: the aggregate the compiler returns.

Everything here is derived. A Pattern is replaced wholesale on every compile;
the customizer builds new values with dataclasses.replace rather than editing
one in place.

Key types:
  CompiledInstruction: one rendered row (or a synthetic reminder row)
  CompiledSection:     one enabled body part
  PatternMaterials:    yarn / hook / notions / stuffing bill
  Pattern:             aggregate root, JSON-serializable via to_dict()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from pupstitch.schemas.analysis import DogAnalysis
from pupstitch.schemas.customization import Customizations
from pupstitch.schemas.preset import BodyPartName, SizeKey, SkillLevel


class StitchType(str, Enum):
    SC = "sc"
    INC = "inc"
    DEC = "dec"
    HDC = "hdc"
    DC = "dc"
    TR = "tr"
    SLST = "slst"
    CH = "ch"


@dataclass(frozen=True)
class CompiledInstruction:
    """
    One rendered instruction.

    ``row_number == 0`` marks a synthetic reminder row that has no template
    counterpart.
    """

    row_number: int
    text: str
    color_key: str
    stitches_used: tuple[StitchType, ...] = ()
    note: str | None = None


@dataclass(frozen=True)
class CompiledSection:
    name: str  # display name, with "(make N)" when quantity > 1
    part: BodyPartName
    quantity: int
    instructions: tuple[CompiledInstruction, ...]
    estimated_time_hours: float
    notes: str = ""
    difficulty_notes: str | None = None


@dataclass(frozen=True)
class YarnInfo:
    name: str
    color_key: str
    hex_code: str
    yardage: int
    weight: str


@dataclass(frozen=True)
class Notion:
    name: str
    quantity: int
    unit: str


@dataclass(frozen=True)
class PatternMaterials:
    yarns: tuple[YarnInfo, ...]
    hook_size: str
    hook_size_info: str
    notions: tuple[Notion, ...]
    stuffing_amount_oz: float
    stuffing_type: str
    additional_supplies: tuple[str, ...]
    total_yardage: int
    size_key: SizeKey
    safety_eye_size: str
    finished_height: str


@dataclass(frozen=True)
class Pattern:
    """
    Aggregate root for one compiled pattern.

    ``analysis`` is the compiler's copy of the input analysis, with
    body-part analysis filled in when the input had none. ``customizations``
    carries the resolved palette with ``yardage_used`` populated.
    """

    id: str
    breed_id: str
    title: str
    description: str
    skill_level: SkillLevel
    analysis: DogAnalysis
    customizations: Customizations
    sections: tuple[CompiledSection, ...]
    materials: PatternMaterials
    assembly_instructions: tuple[str, ...]
    abbreviations: tuple[tuple[str, str], ...]
    notes: str
    estimated_total_hours: float
    created_at: datetime
    updated_at: datetime
    dog_name: str | None = None
    preview_image: bytes | None = field(default=None, repr=False)

    def section(self, part: BodyPartName) -> CompiledSection | None:
        for s in self.sections:
            if s.part == part:
                return s
        return None

    def to_dict(self) -> dict[str, Any]:
        """
        JSON-serializable view of the pattern.

        Enums become their values, tuples become lists, timestamps become
        ISO-8601 strings. The preview image is omitted.
        """
        return {
            "id": self.id,
            "breed_id": self.breed_id,
            "title": self.title,
            "description": self.description,
            "skill_level": self.skill_level.value,
            "dog_name": self.dog_name,
            "analysis": _analysis_dict(self.analysis),
            "customizations": _customizations_dict(self.customizations),
            "sections": [
                {
                    "name": s.name,
                    "part": s.part.value,
                    "quantity": s.quantity,
                    "estimated_time_hours": s.estimated_time_hours,
                    "notes": s.notes,
                    "difficulty_notes": s.difficulty_notes,
                    "instructions": [
                        {
                            "row_number": i.row_number,
                            "text": i.text,
                            "color_key": i.color_key,
                            "stitches_used": [st.value for st in i.stitches_used],
                            "note": i.note,
                        }
                        for i in s.instructions
                    ],
                }
                for s in self.sections
            ],
            "materials": _materials_dict(self.materials),
            "assembly_instructions": list(self.assembly_instructions),
            "abbreviations": [[a, m] for a, m in self.abbreviations],
            "notes": self.notes,
            "estimated_total_hours": self.estimated_total_hours,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


def _analysis_dict(a: DogAnalysis) -> dict[str, Any]:
    p = a.body_proportions
    return {
        "detected_breed": a.detected_breed,
        "confidence_score": a.confidence_score,
        "color_confidence": a.color_confidence,
        "colors": {
            "primary": a.colors.primary,
            "secondary": a.colors.secondary,
            "tertiary": a.colors.tertiary,
            "accent": a.colors.accent,
        },
        "ear_shape": a.ear_shape.value,
        "tail_type": a.tail_type.value,
        "body_proportions": {
            "head_to_body_ratio": p.head_to_body_ratio,
            "leg_length": p.leg_length,
            "tail_length": p.tail_length,
            "ear_size": p.ear_size,
            "snout_length": p.snout_length,
            "build_type": p.build_type.value,
        },
        "markings": [
            {
                "type": m.type,
                "location": m.location.value,
                "coverage": m.coverage,
                "colors": list(m.colors),
            }
            for m in a.markings
        ],
        "body_part_analysis": [
            {
                "part_name": bp.part_name,
                "primary_color": bp.primary_color,
                "colors": list(bp.colors),
                "markings": list(bp.markings),
                "shape": bp.shape,
                "texture": bp.texture,
                "relative_size": bp.relative_size,
                "crochet_notes": bp.crochet_notes,
            }
            for bp in a.body_part_analysis
        ],
        "photo_url": a.photo_url,
    }


def _customizations_dict(c: Customizations) -> dict[str, Any]:
    return {
        "color_assignments": [
            {
                "color_key": a.color_key,
                "hex_code": a.hex_code,
                "yarn_name": a.yarn_name,
                "yardage_used": a.yardage_used,
            }
            for a in c.color_assignments
        ],
        "toggled_features": {k.value: v for k, v in c.toggled_features.items()},
        "proportion_adjustments": {k.value: v for k, v in c.proportion_adjustments.items()},
        "difficulty_level": c.difficulty_level.value,
        "size_multiplier": c.size_multiplier,
        "hook_size_override": c.hook_size_override,
        "yarn_weight_override": c.yarn_weight_override,
        "notes": c.notes,
    }


def _materials_dict(m: PatternMaterials) -> dict[str, Any]:
    return {
        "yarns": [
            {
                "name": y.name,
                "color_key": y.color_key,
                "hex_code": y.hex_code,
                "yardage": y.yardage,
                "weight": y.weight,
            }
            for y in m.yarns
        ],
        "hook_size": m.hook_size,
        "hook_size_info": m.hook_size_info,
        "notions": [{"name": n.name, "quantity": n.quantity, "unit": n.unit} for n in m.notions],
        "stuffing_amount_oz": m.stuffing_amount_oz,
        "stuffing_type": m.stuffing_type,
        "additional_supplies": list(m.additional_supplies),
        "total_yardage": m.total_yardage,
        "size_key": m.size_key.value,
        "safety_eye_size": m.safety_eye_size,
        "finished_height": m.finished_height,
    }
