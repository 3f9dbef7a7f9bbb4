"""
Tests for Customizations: key normalization, clamping, palette lookups.
"""

from dataclasses import replace

import pytest

from pupstitch.schemas.customization import (
    ColorAssignment,
    Customizations,
    DifficultyLevel,
)
from pupstitch.schemas.preset import BodyPartName

_PALETTE = (
    ColorAssignment("primary", "#C4A265", "Tan"),
    ColorAssignment("nose", "#1A1A1A"),
)


class TestConstruction:
    def test_defaults(self):
        c = Customizations()
        assert c.difficulty_level == DifficultyLevel.STANDARD
        assert c.size_multiplier == 1.0
        assert c.color_assignments == ()

    def test_string_keys_are_normalized(self):
        c = Customizations(toggled_features={"ear": False}, proportion_adjustments={"head": 1.2})
        assert c.toggled_features[BodyPartName.EAR] is False
        assert c.proportion_adjustments[BodyPartName.HEAD] == 1.2

    def test_unknown_part_rejected(self):
        with pytest.raises(ValueError, match="unknown body part"):
            Customizations(toggled_features={"wing": False})

    def test_duplicate_color_keys_rejected(self):
        with pytest.raises(ValueError, match="duplicate"):
            Customizations(
                color_assignments=(
                    ColorAssignment("primary", "#000000"),
                    ColorAssignment("primary", "#FFFFFF"),
                )
            )

    def test_part_color_keys_accepted(self):
        c = Customizations(color_assignments=(ColorAssignment("bp-ears", "#8B4513"),))
        assert c.color_assignments[0].color_key == "bp-ears"

    @pytest.mark.parametrize("key", ["main", "Primary", "ears"])
    def test_unknown_color_key_rejected(self, key):
        with pytest.raises(ValueError, match="unknown color keys"):
            Customizations(color_assignments=(ColorAssignment(key, "#000000"),))

    def test_difficulty_string_coerced(self):
        assert Customizations(difficulty_level="detailed").difficulty_level == (
            DifficultyLevel.DETAILED
        )


class TestClamping:
    def test_proportion_clamped_high(self):
        c = Customizations(proportion_adjustments={BodyPartName.HEAD: 3.0})
        assert c.proportion_adjustments[BodyPartName.HEAD] == 2.0

    def test_proportion_clamped_low(self):
        c = Customizations(proportion_adjustments={BodyPartName.TAIL: 0.1})
        assert c.proportion_adjustments[BodyPartName.TAIL] == 0.5

    def test_size_multiplier_clamped(self):
        assert Customizations(size_multiplier=5).size_multiplier == 2.0

    def test_replace_reclamps(self):
        c = replace(Customizations(), size_multiplier=0.1)
        assert c.size_multiplier == 0.5


class TestLookups:
    def test_missing_parts_are_enabled(self):
        c = Customizations(toggled_features={BodyPartName.EAR: False})
        assert not c.is_enabled(BodyPartName.EAR)
        assert c.is_enabled(BodyPartName.HEAD)

    def test_multiplier_combines_size_and_proportion(self):
        c = Customizations(size_multiplier=1.5, proportion_adjustments={BodyPartName.HEAD: 1.2})
        assert c.multiplier_for(BodyPartName.HEAD) == pytest.approx(1.8)
        assert c.multiplier_for(BodyPartName.BODY) == 1.5

    def test_yarn_name_for(self):
        c = Customizations(color_assignments=_PALETTE)
        assert c.yarn_name_for("primary") == "Tan"
        assert c.yarn_name_for("nose") == "nose"
        assert c.yarn_name_for("secondary") == "secondary"
