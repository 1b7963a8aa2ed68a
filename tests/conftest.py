"""Pytest configuration: local package import resolution and shared sales fixtures."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
project_root_str = str(PROJECT_ROOT)
if project_root_str not in sys.path:
    sys.path.insert(0, project_root_str)

from salesview.analytics.aggregate import aggregate  # noqa: E402
from salesview.data.normalize import rows_to_frame  # noqa: E402
from salesview.data.schemas import NormalizedRow  # noqa: E402
from salesview.data.store import DataStore  # noqa: E402


# Totals: 2024 = 390, 2025 = 350.
# FARMCO / WHOLE MILK are new in 2025; OLDPOP / ROOT BEER were lost.
SAMPLE_CSV = (
    "DIVISION,DEPARTMENT,CATEGORY,BRANCH CODE,BRANCH NAME,BRAND,ITEM CODE,ITEM DESCRIPTION,SALES2024,SALES2025\n"
    "FOOD,SNACKS,CHIPS,B01,NORTH,ACME,1001,CRISPS,100,150\n"
    "FOOD,SNACKS,CHIPS,B02,SOUTH,ACME,1001,CRISPS,50,0\n"
    "FOOD,DAIRY,MILK,B01,NORTH,FARMCO,2001,WHOLE MILK,0,80\n"
    "DRINKS,SODA,COLA,B02,SOUTH,FIZZ,3001,COLA 1L,200,120\n"
    "DRINKS,SODA,COLA,B03,EAST,OLDPOP,3002,ROOT BEER,40,0\n"
)


def make_row(**overrides) -> NormalizedRow:
    values = {
        "division": "A",
        "department": "",
        "category": "",
        "branch_code": "",
        "branch_name": "",
        "brand": "",
        "item_code": "",
        "item_description": "",
        "sales2024": 0.0,
        "sales2025": 0.0,
    }
    values.update(overrides)
    return NormalizedRow(**values)


@pytest.fixture
def sample_rows() -> list[NormalizedRow]:
    table = [
        ("FOOD", "SNACKS", "CHIPS", "B01", "NORTH", "ACME", "1001", "CRISPS", 100.0, 150.0),
        ("FOOD", "SNACKS", "CHIPS", "B02", "SOUTH", "ACME", "1001", "CRISPS", 50.0, 0.0),
        ("FOOD", "DAIRY", "MILK", "B01", "NORTH", "FARMCO", "2001", "WHOLE MILK", 0.0, 80.0),
        ("DRINKS", "SODA", "COLA", "B02", "SOUTH", "FIZZ", "3001", "COLA 1L", 200.0, 120.0),
        ("DRINKS", "SODA", "COLA", "B03", "EAST", "OLDPOP", "3002", "ROOT BEER", 40.0, 0.0),
    ]
    return [
        NormalizedRow(
            division=d, department=dep, category=cat, branch_code=bc, branch_name=bn,
            brand=br, item_code=ic, item_description=idesc, sales2024=s24, sales2025=s25,
        )
        for d, dep, cat, bc, bn, br, ic, idesc, s24, s25 in table
    ]


@pytest.fixture
def scenario_rows() -> list[NormalizedRow]:
    """Two-row example: brand X grows, brand Y is new."""
    return [
        make_row(division="A", brand="X", item_description="I1", sales2024=100.0, sales2025=150.0),
        make_row(division="A", brand="Y", item_description="I2", sales2024=0.0, sales2025=50.0),
    ]


@pytest.fixture
def sample_frame(sample_rows):
    return rows_to_frame(sample_rows)


@pytest.fixture
def sample_snapshot(sample_rows):
    return aggregate(sample_rows)


@pytest.fixture
def loaded_store(sample_rows) -> DataStore:
    return DataStore().load_rows(sample_rows)
