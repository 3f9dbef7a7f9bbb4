"""
PatternCustomizer: copy-on-write edits to a compiled Pattern.

Each mutator changes one customization field and recompiles the whole pattern
against the breed preset; there is no partial recompilation. The input
Pattern is never modified. The returned Pattern keeps the id and created_at
of the input and gets a fresh updated_at.

Difficulty is applied by the compiler only. set_difficulty() stores the level
and recompiles, so simplification and detail annotations are applied exactly
once per compile.

Callers must serialize edits per pattern id; two overlapping edits of the same
Pattern produce two independent results and the caller keeps whichever it
stores last.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import replace
from datetime import datetime, timezone

from pupstitch.compiler.compiler import PatternCompiler
from pupstitch.presets.registry import PresetRegistry, get_presets
from pupstitch.schemas.customization import (
    ColorAssignment,
    CustomizationDelta,
    Customizations,
    DifficultyLevel,
    clamp_multiplier,
)
from pupstitch.schemas.pattern import Pattern
from pupstitch.schemas.preset import BodyPartName
from pupstitch.tables.registry import get_tables

DEFAULT_PRICE_PER_YARD = 0.5


class MissingPatternError(ValueError):
    """A customizer operation was called without a current pattern."""


def _require(pattern: Pattern | None) -> Pattern:
    if pattern is None:
        raise MissingPatternError("no current pattern to customize")
    return pattern


class PatternCustomizer:
    """
    Mutators over compiled patterns.

    Parameters
    ----------
    presets:
        Preset source for recompiles; defaults to the module registry.
    compiler:
        Defaults to a fresh ``PatternCompiler``.
    clock:
        Returns the ``updated_at`` timestamp; injectable for tests.
    """

    def __init__(
        self,
        presets: PresetRegistry | None = None,
        compiler: PatternCompiler | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._presets = presets or get_presets()
        self._compiler = compiler or PatternCompiler()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # ── Recompile ──────────────────────────────────────────────────────────────

    def recompile(self, pattern: Pattern | None, customizations: Customizations) -> Pattern:
        """
        Recompile *pattern* with *customizations*.

        Raises
        ------
        MissingPatternError
            If *pattern* is None.
        PresetNotFoundError
            If the pattern's breed no longer has a preset.
        """
        current = _require(pattern)
        size = get_tables().size_key_for(customizations.size_multiplier)
        preset = self._presets.get(current.breed_id, size=size)
        compiled = self._compiler.compile(
            current.analysis,
            preset,
            customizations,
            pattern_id=current.id,
            created_at=current.created_at,
            dog_name=current.dog_name,
            preview_image=current.preview_image,
        )
        return replace(compiled, updated_at=self._clock())

    # ── Mutators ───────────────────────────────────────────────────────────────

    def update_colors(
        self, pattern: Pattern | None, color_assignments: Sequence[ColorAssignment]
    ) -> Pattern:
        """Replace the palette."""
        current = _require(pattern)
        return self.recompile(
            current,
            replace(current.customizations, color_assignments=tuple(color_assignments)),
        )

    def toggle_feature(
        self, pattern: Pattern | None, part: BodyPartName | str, enabled: bool
    ) -> Pattern:
        """Enable or disable one body part. Re-enabling restores its canonical position."""
        current = _require(pattern)
        toggles = dict(current.customizations.toggled_features)
        toggles[BodyPartName(part)] = enabled
        return self.recompile(current, replace(current.customizations, toggled_features=toggles))

    def adjust_proportions(
        self, pattern: Pattern | None, part: BodyPartName | str, modifier: float
    ) -> Pattern:
        """Set one body part's proportion multiplier, clamped to [0.5, 2.0]."""
        current = _require(pattern)
        adjustments = dict(current.customizations.proportion_adjustments)
        adjustments[BodyPartName(part)] = clamp_multiplier(modifier)
        return self.recompile(
            current, replace(current.customizations, proportion_adjustments=adjustments)
        )

    def set_difficulty(self, pattern: Pattern | None, level: DifficultyLevel | str) -> Pattern:
        current = _require(pattern)
        return self.recompile(
            current, replace(current.customizations, difficulty_level=DifficultyLevel(level))
        )

    def apply_customizations(self, pattern: Pattern | None, delta: CustomizationDelta) -> Pattern:
        """
        Apply several changes with a single recompile.

        Toggle and proportion maps are merged into the current ones (each
        proportion clamped); a palette replaces the current palette; other
        fields replace the current value when set.
        """
        current = _require(pattern)
        c = current.customizations
        changes: dict = {}
        if delta.color_assignments is not None:
            changes["color_assignments"] = tuple(delta.color_assignments)
        if delta.toggled_features is not None:
            toggles = dict(c.toggled_features)
            toggles.update({BodyPartName(k): v for k, v in delta.toggled_features.items()})
            changes["toggled_features"] = toggles
        if delta.proportion_adjustments is not None:
            adjustments = dict(c.proportion_adjustments)
            adjustments.update(
                {BodyPartName(k): clamp_multiplier(v) for k, v in delta.proportion_adjustments.items()}
            )
            changes["proportion_adjustments"] = adjustments
        if delta.difficulty_level is not None:
            changes["difficulty_level"] = DifficultyLevel(delta.difficulty_level)
        if delta.size_multiplier is not None:
            changes["size_multiplier"] = clamp_multiplier(delta.size_multiplier)
        if delta.hook_size_override is not None:
            changes["hook_size_override"] = delta.hook_size_override
        if delta.yarn_weight_override is not None:
            changes["yarn_weight_override"] = delta.yarn_weight_override
        if delta.notes is not None:
            changes["notes"] = delta.notes
        return self.recompile(current, replace(c, **changes))


# ── Derived figures ────────────────────────────────────────────────────────────


def total_yardage(pattern: Pattern) -> int:
    return pattern.materials.total_yardage


def estimated_hours(pattern: Pattern) -> float:
    return pattern.estimated_total_hours


def estimated_cost(pattern: Pattern, price_per_yard: float = DEFAULT_PRICE_PER_YARD) -> float:
    """Yarn cost at a flat price per yard."""
    return total_yardage(pattern) * price_per_yard
