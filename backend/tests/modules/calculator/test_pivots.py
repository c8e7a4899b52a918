"""Tests for pivot formulas."""

import math

import pytest
from pydantic import ValidationError

from modules.calculator import FormulaSet, PivotRequest, calculate, camarilla_levels, classic_levels


class TestClassic:
    def test_levels(self):
        levels = classic_levels(high=110.0, low=90.0, close=100.0)

        assert levels.pivot == pytest.approx(100.0)
        assert levels.r1 == pytest.approx(110.0)
        assert levels.s1 == pytest.approx(90.0)
        assert levels.r2 == pytest.approx(120.0)
        assert levels.s2 == pytest.approx(80.0)
        assert levels.r3 == pytest.approx(140.0)
        assert levels.s3 == pytest.approx(60.0)
        assert levels.r4 == pytest.approx(160.0)
        assert levels.s4 == pytest.approx(40.0)


class TestCamarilla:
    def test_levels(self):
        levels = camarilla_levels(high=110.0, low=90.0, close=100.0)

        assert levels.pivot == pytest.approx(100.0)
        assert levels.r1 == pytest.approx(100 + 20 * 1.1 / 12)
        assert levels.r4 == pytest.approx(111.0)
        assert levels.s4 == pytest.approx(89.0)
        assert levels.s2 == pytest.approx(100 - 20 * 1.1 / 6)

    def test_levels_are_symmetric_around_close(self):
        levels = camarilla_levels(high=2050.5, low=1990.25, close=2011.0)
        for n in range(1, 5):
            up = getattr(levels, f"r{n}") - 2011.0
            down = 2011.0 - getattr(levels, f"s{n}")
            assert up == pytest.approx(down)


class TestCalculate:
    def test_both_sets_by_default(self):
        response = calculate(PivotRequest(open=95, high=110, low=90, close=100))
        assert response.classic is not None
        assert response.camarilla is not None

    def test_single_set(self):
        response = calculate(PivotRequest(open=95, high=110, low=90, close=100, formula=FormulaSet.CAMARILLA))
        assert response.classic is None
        assert response.camarilla is not None


class TestValidation:
    def test_high_below_low(self):
        with pytest.raises(ValidationError):
            PivotRequest(open=1, high=1, low=2, close=1)

    @pytest.mark.parametrize("value", [math.inf, math.nan])
    def test_non_finite(self, value):
        with pytest.raises(ValidationError):
            PivotRequest(open=1, high=value, low=0, close=1)

    def test_missing_field(self):
        with pytest.raises(ValidationError):
            PivotRequest(open=1, high=2, low=0)
