"""
Breed preset schema: row templates, color zones and body-part blueprints.

Presets are loaded from YAML by the preset registry and are immutable once
loaded. Every body-part blueprint carries its own ordered row templates; the
compiler never edits them, it only reads them.

Key types:
  BodyPartName:     canonical body-part vocabulary
  RowTemplate:      one instruction line with its expected stitch count
  ColorZone:        contiguous row range assigned to one color key
  BodyPartTemplate: rows + zones + quantity + assembly notes for one part
  SizeVariant:      size-specific hook / yarn / body-part override
  BreedPreset:      complete breed blueprint
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


class BodyPartName(str, Enum):
    """Construction units of an amigurumi dog."""

    HEAD = "head"
    BODY = "body"
    FRONT_LEG = "frontLeg"
    BACK_LEG = "backLeg"
    EAR = "ear"
    TAIL = "tail"
    SNOUT = "snout"
    NOSE = "nose"
    EYE_PATCH = "eyePatch"


class EarShape(str, Enum):
    FLOPPY = "floppy"
    POINTY = "pointy"
    DROOPY = "droopy"
    BUTTON = "button"
    PENDANT = "pendant"
    ROSE = "rose"
    FLAT = "flat"
    BAT = "bat"


class TailType(str, Enum):
    CURLED = "curled"
    PLUMED = "plumed"
    STRAIGHT = "straight"
    FEATHERED = "feathered"
    DOCKED = "docked"
    SABER = "saber"
    WHIP = "whip"
    FLAG = "flag"
    OTTER = "otter"
    CORKSCREW = "corkscrew"


class BuildType(str, Enum):
    STOCKY = "stocky"
    ATHLETIC = "athletic"
    SLENDER = "slender"
    MASSIVE = "massive"


class SkillLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class SizeKey(str, Enum):
    """Doll size bucket derived from the size multiplier."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


@dataclass(frozen=True)
class RowTemplate:
    """
    One round of a body part as written in the preset.

    ``stitch_count == 0`` marks a terminal (fasten-off) row.
    """

    row_number: int
    instruction_text: str
    stitch_count: int
    color_key: str | None = None

    def __post_init__(self) -> None:
        if self.stitch_count < 0:
            raise ValueError(f"stitch_count must be >= 0, got {self.stitch_count}")


@dataclass(frozen=True)
class ColorZone:
    """Inclusive row range ``[start_row, end_row]`` worked in ``color_key``."""

    start_row: int
    end_row: int
    color_key: str
    description: str = ""

    def __post_init__(self) -> None:
        if self.end_row < self.start_row:
            raise ValueError(
                f"color zone end_row ({self.end_row}) precedes start_row ({self.start_row})"
            )

    def covers(self, row_number: int) -> bool:
        return self.start_row <= row_number <= self.end_row


@dataclass(frozen=True)
class Proportions:
    width_ratio: float = 1.0
    height_ratio: float = 1.0
    depth_ratio: float | None = None


@dataclass(frozen=True)
class BodyPartTemplate:
    """
    Blueprint for one body part.

    At most one color zone may cover any given row; overlapping zones are
    rejected at construction time.
    """

    name: BodyPartName
    quantity: int
    rows: tuple[RowTemplate, ...]
    color_zones: tuple[ColorZone, ...] = ()
    proportions: Proportions = field(default_factory=Proportions)
    assembly_notes: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError(f"{self.name.value}: quantity must be >= 1, got {self.quantity}")
        ordered = sorted(self.color_zones, key=lambda z: z.start_row)
        for prev, nxt in zip(ordered, ordered[1:]):
            if nxt.start_row <= prev.end_row:
                raise ValueError(
                    f"{self.name.value}: color zones overlap "
                    f"({prev.start_row}-{prev.end_row} and {nxt.start_row}-{nxt.end_row})"
                )

    def zone_for_row(self, row_number: int) -> ColorZone | None:
        for zone in self.color_zones:
            if zone.covers(row_number):
                return zone
        return None


@dataclass(frozen=True)
class BreedColors:
    """Breed (or detected) coat palette as hex strings."""

    primary: str
    secondary: str | None = None
    tertiary: str | None = None
    accent: str | None = None


@dataclass(frozen=True)
class SizeVariant:
    hook_size: str
    yarn_weight: str
    body_parts: MappingProxyType[BodyPartName, BodyPartTemplate]


@dataclass(frozen=True)
class BreedPreset:
    """
    Complete preset for one breed.

    ``body_parts`` holds only the parts this breed uses; missing parts are
    simply not compiled. ``sizes`` holds optional small/medium/large variants.
    """

    breed_id: str
    name: str
    description: str
    skill_level: SkillLevel
    estimated_hours: float
    hook_size: str
    yarn_weight: str
    default_colors: BreedColors
    default_ear_shape: EarShape
    default_tail_type: TailType
    body_parts: MappingProxyType[BodyPartName, BodyPartTemplate]
    default_build: BuildType = BuildType.ATHLETIC
    base_size: SizeKey = SizeKey.MEDIUM
    assembly_instructions: tuple[str, ...] = ()
    sizes: MappingProxyType[SizeKey, SizeVariant] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        if isinstance(self.body_parts, dict):
            object.__setattr__(self, "body_parts", MappingProxyType(self.body_parts))
        if isinstance(self.sizes, dict):
            object.__setattr__(self, "sizes", MappingProxyType(self.sizes))
