"""Tests for utilities.sizing: stitch scaling, size buckets, clamping."""

import pytest

from pupstitch.schemas.preset import SizeKey
from pupstitch.utilities.sizing import clamp_multiplier, scale_stitch_count, size_key_for


class TestScaleStitchCount:
    def test_identity(self):
        for count in (0, 1, 6, 36, 101):
            assert scale_stitch_count(count, 1.0) == count

    def test_halves_round_up(self):
        assert scale_stitch_count(6, 0.75) == 5  # 4.5
        assert scale_stitch_count(18, 0.75) == 14  # 13.5
        assert scale_stitch_count(5, 0.5) == 3  # 2.5

    def test_scales_up(self):
        assert scale_stitch_count(36, 1.5) == 54

    def test_zero_stays_zero(self):
        assert scale_stitch_count(0, 2.0) == 0


class TestClampMultiplier:
    @pytest.mark.parametrize(
        "value,expected", [(0.1, 0.5), (0.5, 0.5), (1.2, 1.2), (2.0, 2.0), (3.0, 2.0)]
    )
    def test_clamped_to_range(self, value, expected):
        assert clamp_multiplier(value) == expected


class TestSizeKeyFor:
    def test_delegates_to_table_breakpoints(self):
        assert size_key_for(0.75) == SizeKey.SMALL
        assert size_key_for(1.0) == SizeKey.MEDIUM
        assert size_key_for(1.5) == SizeKey.LARGE
