"""Tests for palette seeding and per-part yarn naming."""

from pupstitch.compiler.palette import body_part_color_name, build_color_assignments
from pupstitch.schemas.analysis import BodyPartAnalysis, DogAnalysis
from pupstitch.schemas.customization import ColorAssignment, Customizations
from pupstitch.schemas.preset import BodyPartName, BreedColors, EarShape, TailType


def _analysis(colors, parts=()):
    return DogAnalysis(
        detected_breed="labrador",
        colors=colors,
        ear_shape=EarShape.FLOPPY,
        tail_type=TailType.OTTER,
        body_part_analysis=tuple(parts),
    )


def _keys(palette):
    return [a.color_key for a in palette]


class TestBuildColorAssignments:
    def test_top_level_colors(self):
        palette = build_color_assignments(
            _analysis(BreedColors(primary="#C4A265", secondary="#E8D5B0", accent="#1A1A1A"))
        )
        assert _keys(palette) == ["primary", "secondary", "accent", "nose"]
        assert [a.yarn_name for a in palette] == ["Tan", "Golden", "Black", "Black"]

    def test_nose_falls_back_to_accent_hex(self):
        palette = build_color_assignments(
            _analysis(BreedColors(primary="#C4A265", accent="#1A1A1A"))
        )
        assert palette[-1] == ColorAssignment("nose", "#1A1A1A", "Black")

    def test_nose_defaults_to_black(self):
        palette = build_color_assignments(_analysis(BreedColors(primary="#C4A265")))
        assert palette[-1] == ColorAssignment("nose", "#000000", "Black")

    def test_nose_from_analysis(self):
        parts = [BodyPartAnalysis("nose", "#D2691E")]
        palette = build_color_assignments(
            _analysis(BreedColors(primary="#C4A265", accent="#1A1A1A"), parts)
        )
        nose = next(a for a in palette if a.color_key == "nose")
        assert nose.hex_code == "#D2691E"

    def test_same_named_secondary_gets_light_prefix(self):
        palette = build_color_assignments(
            _analysis(BreedColors(primary="#C4A265", secondary="#C0A070"))
        )
        assert palette[1].yarn_name == "Light Tan"

    def test_tertiary_included(self):
        palette = build_color_assignments(
            _analysis(BreedColors(primary="#C4A265", tertiary="#FFFFFF"))
        )
        assert _keys(palette) == ["primary", "tertiary", "nose"]

    def test_body_part_colors_add_entries(self):
        parts = [
            BodyPartAnalysis("head", "#C4A265"),
            BodyPartAnalysis("ears", "#3B2314"),
            BodyPartAnalysis("tail", "#3A2213"),
        ]
        palette = build_color_assignments(_analysis(BreedColors(primary="#C4A265"), parts))
        assert _keys(palette) == ["primary", "bp-ears", "bp-tail", "nose"]
        assert palette[1].yarn_name == "Dark Brown"
        assert palette[2].yarn_name == "Dark Brown (Tail)"

    def test_hex_match_is_case_insensitive(self):
        parts = [BodyPartAnalysis("ears", "#c4a265")]
        palette = build_color_assignments(_analysis(BreedColors(primary="#C4A265"), parts))
        assert "bp-ears" not in _keys(palette)


class TestBodyPartColorName:
    _CUSTOM = Customizations(
        color_assignments=(
            ColorAssignment("primary", "#C4A265", "Tan"),
            ColorAssignment("secondary", "#E8D5B0", "Cream"),
            ColorAssignment("nose", "#1A1A1A", "Black"),
        )
    )

    def test_palette_name_for_matching_hex(self):
        analysis = _analysis(
            BreedColors(primary="#C4A265"), [BodyPartAnalysis("ears", "#E8D5B0")]
        )
        assert body_part_color_name(BodyPartName.EAR, analysis, self._CUSTOM) == "Cream"

    def test_classified_name_for_unknown_hex(self):
        analysis = _analysis(
            BreedColors(primary="#C4A265"), [BodyPartAnalysis("tail", "#3B2314")]
        )
        assert body_part_color_name(BodyPartName.TAIL, analysis, self._CUSTOM) == "Dark Brown"

    def test_legs_share_analysis_entry(self):
        analysis = _analysis(
            BreedColors(primary="#C4A265"), [BodyPartAnalysis("legs", "#E8D5B0")]
        )
        assert body_part_color_name(BodyPartName.FRONT_LEG, analysis, self._CUSTOM) == "Cream"
        assert body_part_color_name(BodyPartName.BACK_LEG, analysis, self._CUSTOM) == "Cream"

    def test_nose_uses_nose_entry(self):
        analysis = _analysis(BreedColors(primary="#C4A265"))
        assert body_part_color_name(BodyPartName.NOSE, analysis, self._CUSTOM) == "Black"

    def test_defaults_to_primary(self):
        analysis = _analysis(BreedColors(primary="#C4A265"))
        assert body_part_color_name(BodyPartName.BODY, analysis, self._CUSTOM) == "Tan"

    def test_empty_palette(self):
        analysis = _analysis(BreedColors(primary="#C4A265"))
        assert body_part_color_name(BodyPartName.BODY, analysis, Customizations()) == "Main Color"
