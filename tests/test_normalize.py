"""Tests for field- and row-level normalization of raw extract values."""

from __future__ import annotations

import math

import pandas as pd
import pytest

from salesview.data.schemas import DimensionKind, FilterOptions
from salesview.data.normalize import (
    match_headers,
    normalize_columns,
    normalize_row,
    normalize_text_value,
    parse_sales_value,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("(1,234.50)", -1234.5),
        ("N/A", 0.0),
        ("#n/a", 0.0),
        ("", 0.0),
        (None, 0.0),
        ("2,500", 2500.0),
        ("$1,000.25", 1000.25),
        ("100-", -100.0),
        ("-75", -75.0),
        (" 42 ", 42.0),
        ("abc", 0.0),
        ("12.3.4", 12.3),
        (150, 150.0),
    ],
)
def test_parse_sales_value(raw, expected) -> None:
    assert parse_sales_value(raw) == expected


def test_parse_sales_value_never_returns_negative_zero() -> None:
    value = parse_sales_value("-0")
    assert value == 0.0
    assert math.copysign(1.0, value) == 1.0


def test_normalize_text_value_trims_upper_cases_and_blanks_markers() -> None:
    assert normalize_text_value("  acme foods ") == "ACME FOODS"
    assert normalize_text_value("#N/A") == ""
    assert normalize_text_value(" N/A ") == ""
    assert normalize_text_value(None) == ""


def test_text_markers_are_case_sensitive() -> None:
    """Only the exact upper-case markers blank a text field."""
    assert normalize_text_value("n/a") == "N/A"


def test_match_headers_first_match_wins() -> None:
    matched = match_headers([" brand ", "BRAND", "Sales2024"])
    assert matched["BRAND"] == " brand "
    assert matched["SALES2024"] == "Sales2024"


def test_normalize_row_fills_missing_fields() -> None:
    raw = {" division ": "food", "Brand": " acme ", "SALES2025": "(10)"}
    row = normalize_row(raw, list(raw))
    assert row.division == "FOOD"
    assert row.brand == "ACME"
    assert row.sales2025 == -10.0
    assert row.sales2024 == 0.0
    assert row.item_description == ""
    assert row.get("BRAND") == "ACME"


def test_normalize_columns_matches_row_normalization() -> None:
    raw = pd.DataFrame({
        "Division": ["food", "#N/A"],
        "BRAND": ["acme", "fizz"],
        "SALES2024": ["1,000", "N/A"],
        "SALES2025": ["(5)", "7"],
    })
    df = normalize_columns(raw)
    assert list(df["division"]) == ["FOOD", ""]
    assert list(df["sales2024"]) == [1000.0, 0.0]
    assert list(df["sales2025"]) == [-5.0, 7.0]
    assert list(df["category"]) == ["", ""]

    rows = [normalize_row(rec, list(raw.columns)) for rec in raw.to_dict("records")]
    assert [r.division for r in rows] == list(df["division"])


def test_dimension_kind_lookups() -> None:
    row = normalize_row({"BRANCH NAME": "north"}, ["BRANCH NAME"])
    assert DimensionKind.parse("branches") is DimensionKind.BRANCH
    assert DimensionKind.BRANCH.header == "BRANCH NAME"
    assert DimensionKind.BRANCH.accessor(row) == "NORTH"
    assert FilterOptions(branches=("NORTH",)).for_dimension(DimensionKind.BRANCH) == ("NORTH",)
    with pytest.raises(ValueError):
        DimensionKind.parse("planet")
