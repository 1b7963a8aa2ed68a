"""Behavior tests for the aggregation engine and the processed snapshot."""

from __future__ import annotations

import math

import pytest

from salesview.analytics.aggregate import aggregate, calculate_pareto, empty_snapshot
from salesview.data.schemas import EntitySalesData, FilterOptions, ProcessedSnapshot

from conftest import make_row


def _entities(*sales2025: float) -> list[EntitySalesData]:
    return [EntitySalesData(name=f"E{i}", sales2024=0.0, sales2025=s, growth=0.0) for i, s in enumerate(sales2025)]


def test_two_row_scenario(scenario_rows) -> None:
    snap = aggregate(scenario_rows)
    assert snap.total_sales_2024 == 100.0
    assert snap.total_sales_2025 == 200.0
    assert snap.sales_growth_percentage == 100.0
    assert [(b.name, b.sales2025) for b in snap.sales_by_brand] == [("X", 150.0), ("Y", 50.0)]
    assert snap.sales_by_brand[1].growth == math.inf
    assert snap.new_entities.brands.count == 1
    assert snap.new_brands_list[0].name == "Y"
    assert snap.lost_entities.brands.count == 0


def test_sample_totals_rollups_and_counts(sample_snapshot) -> None:
    snap = sample_snapshot
    assert snap.row_count == 5
    assert snap.total_sales_2024 == 390.0
    assert snap.total_sales_2025 == 350.0
    assert snap.sales_growth_percentage == pytest.approx(-10.2564, rel=1e-4)

    assert [d.name for d in snap.sales_by_division] == ["FOOD", "DRINKS"]
    assert [b.name for b in snap.sales_by_brand] == ["ACME", "FIZZ", "FARMCO", "OLDPOP"]
    assert [b.name for b in snap.sales_by_branch] == ["NORTH", "SOUTH", "EAST"]
    assert [(i.name, i.code) for i in snap.sales_by_item] == [
        ("CRISPS", "1001"), ("COLA 1L", "3001"), ("WHOLE MILK", "2001"), ("ROOT BEER", "3002"),
    ]
    assert snap.sales_by_division[0].code is None
    assert snap.top_division.name == "FOOD"

    assert (snap.branch_count_2024, snap.branch_count_2025) == (3, 2)
    assert (snap.brand_count_2024, snap.brand_count_2025) == (3, 3)
    assert (snap.item_count_2024, snap.item_count_2025) == (3, 3)
    assert snap.total_unique_item_count == 4
    assert snap.net_new_branches == -1


def test_sample_pareto_and_lifecycle(sample_snapshot) -> None:
    snap = sample_snapshot
    assert snap.pareto.brands.top_count == 1
    assert snap.pareto.brands.total_contributors == 3
    assert snap.pareto.brands.sales_percent == pytest.approx(150 / 350 * 100)
    assert [b.name for b in snap.pareto_contributors.brands] == ["ACME"]
    assert snap.pareto.branches.sales_percent == pytest.approx(230 / 350 * 100)

    assert [e.name for e in snap.new_brands_list] == ["FARMCO"]
    assert [e.name for e in snap.lost_brands_list] == ["OLDPOP"]
    assert snap.new_entities.brands.percent_of_total == pytest.approx(80 / 350 * 100)
    assert snap.lost_entities.brands.percent_of_total == pytest.approx(40 / 390 * 100)
    assert [(e.name, e.code) for e in snap.new_items_list] == [("WHOLE MILK", "2001")]
    assert snap.lost_entities.items.sales == 40.0


def test_filter_options_are_sorted_vocabularies(sample_snapshot) -> None:
    opts = sample_snapshot.filter_options
    assert opts.divisions == ("DRINKS", "FOOD")
    assert opts.branches == ("EAST", "NORTH", "SOUTH")
    assert opts.categories == ("CHIPS", "COLA", "MILK")


def test_existing_filter_options_are_reused(sample_rows) -> None:
    options = FilterOptions(divisions=("ONLY",))
    assert aggregate(sample_rows, options).filter_options is options


@pytest.mark.parametrize(("n", "expected"), [(1, 1), (4, 1), (5, 1), (6, 2), (10, 2), (11, 3)])
def test_pareto_top_count_boundaries(n, expected) -> None:
    result, contributors = calculate_pareto(_entities(*([10.0] * n)))
    assert result.top_count == expected
    assert len(contributors) == expected


def test_pareto_ignores_non_positive_entities() -> None:
    result, contributors = calculate_pareto(_entities(100.0, 0.0, -20.0))
    assert result.total_contributors == 1
    assert result.total_sales == 100.0
    assert result.sales_percent == 100.0
    assert [c.name for c in contributors] == ["E0"]


def test_pareto_without_positive_sales_is_zero() -> None:
    result, contributors = calculate_pareto(_entities(0.0, -5.0))
    assert result.top_count == 0
    assert result.sales_percent == 0.0
    assert contributors == ()


def test_empty_input_yields_empty_snapshot() -> None:
    snap = aggregate([])
    assert snap == ProcessedSnapshot()
    assert snap.is_empty
    assert snap.top_division is None
    assert snap.sales_growth_percentage == 0.0
    assert empty_snapshot() == snap


def test_aggregation_is_deterministic(sample_rows) -> None:
    assert aggregate(sample_rows) == aggregate(list(sample_rows))


def test_rollup_sums_match_totals(sample_snapshot) -> None:
    snap = sample_snapshot
    for rollup in (snap.sales_by_division, snap.sales_by_brand, snap.sales_by_branch, snap.sales_by_item):
        assert sum(e.sales2024 for e in rollup) == pytest.approx(snap.total_sales_2024)
        assert sum(e.sales2025 for e in rollup) == pytest.approx(snap.total_sales_2025)


def test_empty_names_excluded_from_rollups_but_counted_in_totals() -> None:
    rows = [
        make_row(brand="X", item_description="I1", branch_name="B1", sales2025=10.0),
        make_row(brand="", item_description="", branch_name="", sales2025=5.0),
    ]
    snap = aggregate(rows)
    assert snap.total_sales_2025 == 15.0
    assert [b.name for b in snap.sales_by_brand] == ["X"]
    assert snap.brand_count_2025 == 1


def test_ties_keep_first_encounter_order() -> None:
    rows = [
        make_row(brand="B", sales2025=10.0),
        make_row(brand="A", sales2025=10.0),
        make_row(brand="C", sales2025=20.0),
    ]
    assert [b.name for b in aggregate(rows).sales_by_brand] == ["C", "B", "A"]


def test_active_counts_are_per_line_not_per_rollup() -> None:
    rows = [
        make_row(brand="NETS_TO_ZERO", sales2025=10.0),
        make_row(brand="NETS_TO_ZERO", sales2025=-10.0),
        make_row(brand="ONLY_RETURNS", sales2025=-5.0),
    ]
    snap = aggregate(rows)
    assert snap.brand_count_2025 == 1
    assert snap.new_entities.brands.count == 0


def test_new_and_lost_are_mutually_exclusive(sample_snapshot) -> None:
    snap = sample_snapshot
    new_names = {e.name for e in snap.new_brands_list + snap.new_items_list}
    lost_names = {e.name for e in snap.lost_brands_list + snap.lost_items_list}
    assert not new_names & lost_names


def test_top_lists_are_truncated_rollups() -> None:
    rows = [make_row(brand=f"B{i:02d}", item_description=f"I{i:02d}", sales2025=float(100 - i)) for i in range(60)]
    snap = aggregate(rows)
    assert len(snap.top10_brands) == 10
    assert snap.top10_brands == snap.sales_by_brand[:10]
    assert len(snap.top50_items) == 50


def test_float_residue_is_not_treated_as_zero() -> None:
    """Rollups and totals sum left to right, so 0.1 + 0.2 - 0.3 stays a tiny positive 2024 figure."""
    rows = [
        make_row(brand="Z", sales2024=0.1),
        make_row(brand="Z", sales2024=0.2),
        make_row(brand="Z", sales2024=-0.3, sales2025=5.0),
    ]
    snap = aggregate(rows)
    residue = (0.1 + 0.2) - 0.3
    assert snap.total_sales_2024 == residue
    assert snap.sales_by_brand[0].sales2024 == residue
    assert snap.new_entities.brands.count == 0
    assert snap.lost_entities.brands.count == 0


def test_blank_dimension_everywhere_gives_empty_rollup() -> None:
    snap = aggregate([make_row(brand="", item_description="", sales2025=3.0)])
    assert snap.total_sales_2025 == 3.0
    assert snap.sales_by_brand == ()
    assert snap.sales_by_item == ()
    assert [d.name for d in snap.sales_by_division] == ["A"]
