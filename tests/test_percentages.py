from __future__ import annotations

import math

import pytest

from cartlift.core.percentages import normalize_or_zero, normalize_percentage


@pytest.mark.parametrize("value", [1.5, 2, 40, 99.9, 100])
def test_whole_percent_is_divided(value: float) -> None:
    assert normalize_percentage(value) == pytest.approx(value / 100)


@pytest.mark.parametrize("value", [0, 0.004, 0.4, 1])
def test_decimal_is_unchanged(value: float) -> None:
    assert normalize_percentage(value) == value


def test_missing_and_nan_are_none() -> None:
    assert normalize_percentage(None) is None
    assert normalize_percentage(math.nan) is None


def test_negative_is_treated_as_decimal() -> None:
    assert normalize_percentage(-0.2) == -0.2
    assert normalize_percentage(-20) == -20


def test_normalize_or_zero() -> None:
    assert normalize_or_zero(None) == 0.0
    assert normalize_or_zero(25) == pytest.approx(0.25)
