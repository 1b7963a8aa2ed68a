"""Tests for growth math, display formatting, and JSON sanitizing."""

from __future__ import annotations

import math

import numpy as np
import pandas as pd
import pytest

from salesview.analytics.common import (
    calc_growth,
    contribution,
    format_growth,
    format_number,
    format_number_abbreviated,
    growth_series,
    sanitize_for_json,
    sequential_sum,
)


@pytest.mark.parametrize(
    ("current", "previous", "expected"),
    [
        (150.0, 100.0, 50.0),
        (0.0, 100.0, -100.0),
        (0.0, 0.0, 0.0),
        (-10.0, 0.0, 0.0),
        (5.0, 0.0, math.inf),
        (50.0, -100.0, -150.0),
    ],
)
def test_calc_growth(current, previous, expected) -> None:
    assert calc_growth(current, previous) == expected


def test_growth_series_matches_scalar_rule() -> None:
    current = pd.Series([150.0, 0.0, 0.0, 5.0])
    previous = pd.Series([100.0, 100.0, 0.0, 0.0])
    result = growth_series(current, previous)
    assert list(result) == [calc_growth(c, p) for c, p in zip(current, previous)]


def test_contribution_is_zero_for_non_positive_totals() -> None:
    assert contribution(25.0, 100.0) == 25.0
    assert contribution(25.0, 0.0) == 0.0
    assert contribution(25.0, -10.0) == 0.0


def test_format_growth() -> None:
    assert format_growth(math.inf) == "▲ New"
    assert format_growth(12.5) == "▲ 12.50%"
    assert format_growth(-3.0) == "▼ 3.00%"
    assert format_growth(float("nan")) == "-"


def test_format_numbers() -> None:
    assert format_number(1234567.891, 2) == "1,234,567.89"
    assert format_number(math.inf) == "∞"
    assert format_number_abbreviated(2_500_000_000) == "2.50B"
    assert format_number_abbreviated(1_500_000) == "1.50M"
    assert format_number_abbreviated(2_500) == "2.5K"
    assert format_number_abbreviated(999) == "999"
    assert format_number_abbreviated(None) == "-"


def test_sanitize_for_json_replaces_non_finite_and_numpy_values() -> None:
    data = {
        "growth": math.inf,
        "missing": float("nan"),
        "count": np.int64(3),
        "share": np.float64(12.5),
        "rows": (1, 2),
    }
    assert sanitize_for_json(data) == {
        "growth": None,
        "missing": None,
        "count": 3,
        "share": 12.5,
        "rows": [1, 2],
    }


def test_sequential_sum_adds_left_to_right() -> None:
    assert sequential_sum([0.1, 0.2, -0.3]) == (0.1 + 0.2) - 0.3
    assert sequential_sum(pd.Series([1.0, 2.5])) == 3.5
    assert sequential_sum([]) == 0.0
