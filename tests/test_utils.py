# tests/test_utils.py

"""
Band Arithmetic Tests - clamp_round, cap and mean_band
"""

import math

import pytest

from band_estimator.scoring.utils import cap, clamp_round, mean_band


class TestClampRound:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (6.0, 6.0),
            (6.2, 6.0),
            (6.25, 6.5),
            (6.74, 6.5),
            (6.75, 7.0),
            (0.24, 0.0),
            (8.8, 9.0),
        ],
    )
    def test_rounds_to_nearest_half_with_half_up(self, raw, expected):
        assert clamp_round(raw) == expected

    @pytest.mark.parametrize("raw, expected", [(-3.0, 0.0), (9.6, 9.0), (42, 9.0)])
    def test_clamps_to_band_scale(self, raw, expected):
        assert clamp_round(raw) == expected

    def test_nan_becomes_zero(self):
        assert clamp_round(math.nan) == 0.0

    def test_none_becomes_zero(self):
        assert clamp_round(None) == 0.0

    def test_infinities_clamp(self):
        assert clamp_round(math.inf) == 9.0
        assert clamp_round(-math.inf) == 0.0


class TestMeanBand:

    def test_aggregate_of_mixed_bands(self):
        assert mean_band([7.0, 6.5, 7.0, 7.5]) == 7.0

    def test_quarter_rounds_up(self):
        # 6.25 -> 6.5
        assert mean_band([6.0, 6.0, 6.5, 6.5]) == 6.5

    def test_three_quarters_rounds_up(self):
        # 5.875 -> 6.0
        assert mean_band([6.5, 6.5, 5.5, 5.0]) == 6.0

    def test_empty_is_zero(self):
        assert mean_band([]) == 0.0


def test_cap_only_lowers():
    assert cap(8.5, 7.5) == 7.5
    assert cap(6.0, 7.5) == 6.0
