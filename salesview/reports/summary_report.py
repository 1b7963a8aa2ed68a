"""
Sales Summary Report — KPI overview, rollups, Pareto concentration, new/lost entities.
"""
from __future__ import annotations

import math
from pathlib import Path

import pandas as pd

from salesview.data.store import DataStore
from salesview.data.schemas import FilterState
from salesview.analytics.common import format_number_abbreviated, sanitize_for_json
from salesview.analytics.drilldown import DRILLDOWN_VIEWS, drilldown
from salesview.excel.writer import ExcelWriter


SHEETS = [
    ("Divisions", "divisions"),
    ("Branches", "branches"),
    ("Brands", "brands"),
    ("Items", "items"),
    ("Top 20% Brands", "pareto_brands"),
    ("Top 20% Items", "pareto_items"),
    ("New Brands", "new_brands"),
    ("Lost Brands", "lost_brands"),
    ("New Items", "new_items"),
    ("Lost Items", "lost_items"),
]


def generate_json(store: DataStore, filters: FilterState | None = None) -> dict:
    snap = store.snapshot(filters)
    return sanitize_for_json({
        **snap.to_dict(),
        "is_empty": snap.is_empty,
    })


def generate_excel(
    store: DataStore,
    output_path: str | Path | None = None,
    filters: FilterState | None = None,
) -> Path | bytes:
    """Build the workbook; saved to ``output_path`` or returned as bytes."""
    snap = store.snapshot(filters)
    ew = ExcelWriter()

    ws = ew.add_sheet("Summary")
    scope = "All data" if filters is None or filters.is_empty else "Filtered view"
    ew.write_title(ws, "SALES VIEW",
                   f"2024 vs 2025 Sales Summary  |  {scope}  |  Generated {pd.Timestamp.now():%B %d, %Y}")

    row = ew.write_section(ws, 5, "SALES OVERVIEW")
    ew.write_kpi_row(ws, row, [
        (snap.total_sales_2024, "2024 SALES", "currency"),
        (snap.total_sales_2025, "2025 SALES", "currency"),
    ])
    ew.write_delta_kpi(ws, row, 5, snap.sales_growth_percentage, "GROWTH")
    row += 3

    row = ew.write_section(ws, row, "ACTIVE ENTITIES (2024 / 2025)")
    row = ew.write_kpi_row(ws, row, [
        (snap.branch_count_2024, "BRANCHES 2024", "number"),
        (snap.branch_count_2025, "BRANCHES 2025", "number"),
        (snap.brand_count_2024, "BRANDS 2024", "number"),
        (snap.brand_count_2025, "BRANDS 2025", "number"),
        (snap.item_count_2024, "ITEMS 2024", "number"),
        (snap.item_count_2025, "ITEMS 2025", "number"),
    ])

    row = ew.write_section(ws, row, "PARETO (TOP 20% SHARE OF 2025 SALES)")
    row = ew.write_kpi_row(ws, row, [
        (snap.pareto.branches.sales_percent, f"TOP {snap.pareto.branches.top_count} BRANCHES", "percent"),
        (snap.pareto.brands.sales_percent, f"TOP {snap.pareto.brands.top_count} BRANDS", "percent"),
        (snap.pareto.items.sales_percent, f"TOP {snap.pareto.items.top_count} ITEMS", "percent"),
    ])

    row = ew.write_section(ws, row, "NEW / LOST")
    row = ew.write_kpi_row(ws, row, [
        (snap.new_entities.brands.count, "NEW BRANDS", "number"),
        (snap.lost_entities.brands.count, "LOST BRANDS", "number"),
        (snap.new_entities.items.count, "NEW ITEMS", "number"),
        (snap.lost_entities.items.count, "LOST ITEMS", "number"),
    ])

    if snap.top_division is not None:
        top = snap.top_division
        ew.write_insight(
            ws, row, "Top Division",
            f"{top.name}: {format_number_abbreviated(top.sales2025)} in 2025 "
            f"({format_number_abbreviated(top.sales2024)} in 2024)",
        )

    for sheet_name, view in SHEETS:
        listing = drilldown(snap, view)
        ws_d = ew.add_sheet(sheet_name)
        columns = [(c["key"], c["type"], c["label"]) for c in listing["columns"]]
        ew.write_table(ws_d, 1, columns, listing["records"], show_total=True)

    if output_path is None:
        return ew.to_bytes()
    return ew.save(output_path)


def listing_csv(store: DataStore, view: str, filters: FilterState | None = None) -> str:
    """One drill-down list as CSV text, labelled columns, infinite growth as "New"."""
    if view not in DRILLDOWN_VIEWS:
        raise ValueError(f"Unknown drilldown view: {view}")

    listing = drilldown(store.snapshot(filters), view)
    columns = listing["columns"]
    df = pd.DataFrame(listing["records"], columns=[c["key"] for c in columns])
    if "growth" in df.columns:
        df["growth"] = df["growth"].map(lambda g: "New" if math.isinf(g) else round(g, 2))
    df.columns = [c["label"] for c in columns]
    return df.to_csv(index=False)
