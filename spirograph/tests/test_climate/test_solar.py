"""Tests for the solar intensity model."""

import math
from datetime import date

import pytest

from spirograph.climate.solar import day_of_year, solar_intensity


class TestSolarIntensity:
    @pytest.mark.parametrize("hour", [0, 3, 5, 6, 18, 19, 23])
    def test_dark_outside_daylight(self, hour: int):
        assert solar_intensity(hour, 172) == pytest.approx(0.0, abs=1e-12)

    def test_peak_at_noon_on_solstice(self):
        assert solar_intensity(12, 172) == pytest.approx(1.0)

    def test_winter_noon_is_dimmer(self):
        # cos((355 - 172) * 2pi / 365) ~ -1 -> factor ~0.4
        assert solar_intensity(12, 355) == pytest.approx(0.4, abs=1e-3)

    def test_no_day_of_year_is_base_curve(self):
        assert solar_intensity(12) == pytest.approx(1.0)
        assert solar_intensity(9) == pytest.approx(math.sin(math.pi / 4))

    @pytest.mark.parametrize("doy", [0, 366, -5, math.nan, math.inf, None, "172"])
    def test_out_of_range_day_ignored(self, doy):
        assert solar_intensity(9, doy) == pytest.approx(math.sin(math.pi / 4))

    def test_always_in_unit_interval(self):
        for doy in (1, 80, 172, 266, 365):
            for h in range(24):
                assert 0.0 <= solar_intensity(h, doy) <= 1.0


class TestDayOfYear:
    def test_first_and_last(self):
        assert day_of_year(date(2026, 1, 1)) == 1
        assert day_of_year(date(2026, 12, 31)) == 365
        assert day_of_year(date(2024, 12, 31)) == 366

    def test_mid_year(self):
        assert day_of_year(date(2026, 2, 23)) == 54
