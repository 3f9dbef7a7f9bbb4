"""
Customization schema: the user-editable knobs that drive compilation.

Customizations is the single input the customizer mutates. Maps are keyed by
BodyPartName; string keys are accepted at construction and normalized, so an
unknown part name fails fast with ValueError instead of being silently
ignored by the compiler.

Proportion adjustments and the size multiplier are clamped to
[MIN_MULTIPLIER, MAX_MULTIPLIER] at construction. Every mutation path goes
through the constructor (dataclasses.replace included), so stored values are
always in range.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from pupstitch.schemas.preset import BodyPartName

MIN_MULTIPLIER = 0.5
MAX_MULTIPLIER = 2.0

# Palette keys with a fixed meaning; per-part keys use the "bp-<part>" form.
RESERVED_COLOR_KEYS = ("primary", "secondary", "tertiary", "accent", "nose")
PART_COLOR_PREFIX = "bp-"


class DifficultyLevel(str, Enum):
    SIMPLIFIED = "simplified"
    STANDARD = "standard"
    DETAILED = "detailed"


def clamp_multiplier(value: float) -> float:
    """Clamp a size or proportion multiplier to [0.5, 2.0]."""
    return max(MIN_MULTIPLIER, min(MAX_MULTIPLIER, float(value)))


@dataclass(frozen=True)
class ColorAssignment:
    """One palette entry. ``color_key`` is unique within a palette."""

    color_key: str
    hex_code: str
    yarn_name: str | None = None
    yardage_used: int | None = None

    @property
    def display_name(self) -> str:
        return self.yarn_name or self.color_key


def _part_key_map(data: Mapping, label: str) -> dict[BodyPartName, object]:
    out: dict[BodyPartName, object] = {}
    for key, value in data.items():
        try:
            out[BodyPartName(key)] = value
        except ValueError:
            raise ValueError(f"{label}: unknown body part {key!r}") from None
    return out


@dataclass(frozen=True)
class Customizations:
    """
    Complete customization state for one pattern.

    Parameters
    ----------
    color_assignments:
        The palette. Empty means "derive from the analysis" at compile time.
    toggled_features:
        Body part -> enabled flag. Missing parts are enabled.
    proportion_adjustments:
        Body part -> multiplier layered on top of ``size_multiplier``.
    difficulty_level:
        Instruction density / verbosity profile.
    size_multiplier:
        Global stitch-count scale; also selects the small/medium/large tables.
    hook_size_override, yarn_weight_override:
        Replace the preset's hook size / yarn weight when set.
    notes:
        Free-text maker notes, carried through untouched.
    """

    color_assignments: tuple[ColorAssignment, ...] = ()
    toggled_features: Mapping[BodyPartName, bool] = field(
        default_factory=lambda: MappingProxyType({})
    )
    proportion_adjustments: Mapping[BodyPartName, float] = field(
        default_factory=lambda: MappingProxyType({})
    )
    difficulty_level: DifficultyLevel = DifficultyLevel.STANDARD
    size_multiplier: float = 1.0
    hook_size_override: str | None = None
    yarn_weight_override: str | None = None
    notes: str | None = None

    def __post_init__(self) -> None:
        keys = [a.color_key for a in self.color_assignments]
        duplicates = sorted({k for k in keys if keys.count(k) > 1})
        if duplicates:
            raise ValueError(f"duplicate color keys in palette: {duplicates}")
        unknown = [
            k for k in keys if k not in RESERVED_COLOR_KEYS and not k.startswith(PART_COLOR_PREFIX)
        ]
        if unknown:
            raise ValueError(
                f"unknown color keys in palette: {unknown} "
                f"(expected one of {list(RESERVED_COLOR_KEYS)} or '{PART_COLOR_PREFIX}<part>')"
            )

        toggles = _part_key_map(self.toggled_features, "toggled_features")
        object.__setattr__(
            self,
            "toggled_features",
            MappingProxyType({k: bool(v) for k, v in toggles.items()}),
        )
        adjustments = _part_key_map(self.proportion_adjustments, "proportion_adjustments")
        object.__setattr__(
            self,
            "proportion_adjustments",
            MappingProxyType({k: clamp_multiplier(v) for k, v in adjustments.items()}),
        )
        object.__setattr__(self, "color_assignments", tuple(self.color_assignments))
        object.__setattr__(self, "difficulty_level", DifficultyLevel(self.difficulty_level))
        object.__setattr__(self, "size_multiplier", clamp_multiplier(self.size_multiplier))

    def is_enabled(self, part: BodyPartName) -> bool:
        return self.toggled_features.get(part, True)

    def multiplier_for(self, part: BodyPartName) -> float:
        """Combined size x proportion multiplier for one body part."""
        return self.size_multiplier * self.proportion_adjustments.get(part, 1.0)

    def assignment(self, color_key: str) -> ColorAssignment | None:
        for a in self.color_assignments:
            if a.color_key == color_key:
                return a
        return None

    def yarn_name_for(self, color_key: str) -> str:
        """Yarn name for a palette key, falling back to the raw key."""
        a = self.assignment(color_key)
        return a.display_name if a is not None else color_key


@dataclass(frozen=True)
class CustomizationDelta:
    """
    A partial update for ``PatternCustomizer.apply_customizations``.

    ``None`` fields are left unchanged. Toggle and proportion maps are merged
    into the existing maps; a palette replaces the existing palette.
    """

    color_assignments: tuple[ColorAssignment, ...] | None = None
    toggled_features: Mapping[str, bool] | None = None
    proportion_adjustments: Mapping[str, float] | None = None
    difficulty_level: DifficultyLevel | None = None
    size_multiplier: float | None = None
    hook_size_override: str | None = None
    yarn_weight_override: str | None = None
    notes: str | None = None
