"""
Aggregation engine — turns normalized rows into one immutable ProcessedSnapshot.

Pure function of (rows, optional filter vocabulary): no caching, no globals.
Re-run from scratch on every filter change.
"""
from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence, Union

import pandas as pd

from salesview.config import PARETO_SHARE, TOP_BRANDS_LIMIT, TOP_ITEMS_LIMIT
from salesview.data.normalize import rows_to_frame
from salesview.data.schemas import (
    DimensionKind,
    EntitySalesData,
    FilterOptions,
    LifecycleEntry,
    LifecycleSet,
    LifecycleSummary,
    NormalizedRow,
    ParetoContributors,
    ParetoResult,
    ParetoSet,
    ProcessedSnapshot,
)
from salesview.analytics.common import calc_growth, contribution, sequential_sum

Rows = Union[Sequence[NormalizedRow], pd.DataFrame]


# ---------------------------------------------------------------------------
# Rollups
# ---------------------------------------------------------------------------

def group_sales(df: pd.DataFrame, kind: DimensionKind) -> pd.DataFrame:
    """Sum both years per non-empty dimension value, in first-encounter order.

    Item groups also carry the ITEM CODE of the first row seen.
    """
    column = kind.column
    keyed = df[df[column] != ""]
    agg = {
        "sales2024": ("sales2024", sequential_sum),
        "sales2025": ("sales2025", sequential_sum),
    }
    if kind == DimensionKind.ITEM:
        agg["code"] = ("item_code", "first")
    if keyed.empty:
        empty = pd.DataFrame(columns=list(agg), index=pd.Index([], name=column))
        return empty.astype({"sales2024": float, "sales2025": float})
    return keyed.groupby(column, sort=False).agg(**agg)


def sort_by_sales(grouped: pd.DataFrame, column: str = "sales2025") -> pd.DataFrame:
    """Descending by sales; ties keep their existing order."""
    return grouped.sort_values(column, ascending=False, kind="stable")


def to_entities(grouped: pd.DataFrame) -> tuple[EntitySalesData, ...]:
    has_code = "code" in grouped.columns
    entities = []
    for rec in grouped.itertuples():
        s24, s25 = float(rec.sales2024), float(rec.sales2025)
        entities.append(EntitySalesData(
            name=str(rec.Index),
            sales2024=s24,
            sales2025=s25,
            growth=calc_growth(s25, s24),
            code=str(rec.code) if has_code else None,
        ))
    return tuple(entities)


def _active_count(df: pd.DataFrame, kind: DimensionKind, year_col: str) -> int:
    """Distinct names with at least one strictly positive line in that year.

    Counted per row, not per rollup: a name whose lines net to zero can still
    be active, and a name with only negative lines never is.
    """
    column = kind.column
    mask = (df[column] != "") & (df[year_col] > 0)
    return int(df.loc[mask, column].nunique())


# ---------------------------------------------------------------------------
# Pareto
# ---------------------------------------------------------------------------

def calculate_pareto(
    entities: Iterable[EntitySalesData],
) -> tuple[ParetoResult, tuple[EntitySalesData, ...]]:
    """Share of 2025 sales held by the top fifth of positive-sales contributors."""
    ranked = sorted((e for e in entities if e.sales2025 > 0), key=lambda e: e.sales2025, reverse=True)
    total_contributors = len(ranked)
    if total_contributors == 0:
        return ParetoResult(), ()

    total_sales = sum(e.sales2025 for e in ranked)
    top_count = min(max(1, math.ceil(total_contributors * PARETO_SHARE)), total_contributors)
    contributors = tuple(ranked[:top_count])
    top_sales = sum(e.sales2025 for e in contributors)

    return ParetoResult(
        top_count=top_count,
        sales_percent=top_sales / total_sales * 100,
        total_sales=total_sales,
        total_contributors=total_contributors,
        top_sales=top_sales,
    ), contributors


# ---------------------------------------------------------------------------
# New / lost entities
# ---------------------------------------------------------------------------

def calculate_lifecycle(
    grouped: pd.DataFrame,
    total_sales_2024: float,
    total_sales_2025: float,
) -> tuple[LifecycleSummary, tuple[LifecycleEntry, ...], LifecycleSummary, tuple[LifecycleEntry, ...]]:
    """New (sold 2025 only) and lost (sold 2024 only) entities from an unsorted rollup.

    Returns (new summary, new list, lost summary, lost list); lists sorted by
    their relevant year's sales, descending.
    """
    has_code = "code" in grouped.columns
    new_list: list[LifecycleEntry] = []
    lost_list: list[LifecycleEntry] = []

    for rec in grouped.itertuples():
        s24, s25 = float(rec.sales2024), float(rec.sales2025)
        code = str(rec.code) if has_code else None
        if s25 > 0 and s24 == 0:
            new_list.append(LifecycleEntry(name=str(rec.Index), sales=s25, code=code))
        if s24 > 0 and s25 == 0:
            lost_list.append(LifecycleEntry(name=str(rec.Index), sales=s24, code=code))

    new_sales = sum(e.sales for e in new_list)
    lost_sales = sum(e.sales for e in lost_list)
    new_list.sort(key=lambda e: e.sales, reverse=True)
    lost_list.sort(key=lambda e: e.sales, reverse=True)

    return (
        LifecycleSummary(count=len(new_list), sales=new_sales, percent_of_total=contribution(new_sales, total_sales_2025)),
        tuple(new_list),
        LifecycleSummary(count=len(lost_list), sales=lost_sales, percent_of_total=contribution(lost_sales, total_sales_2024)),
        tuple(lost_list),
    )


# ---------------------------------------------------------------------------
# Filter vocabulary
# ---------------------------------------------------------------------------

def build_filter_options(df: pd.DataFrame) -> FilterOptions:
    """Sorted unique non-empty values for every filterable dimension."""
    values = {}
    for kind in DimensionKind:
        column = df[kind.column]
        values[kind.plural] = tuple(sorted(str(v) for v in column[column != ""].unique()))
    return FilterOptions(**values)


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------

def empty_snapshot(filter_options: Optional[FilterOptions] = None) -> ProcessedSnapshot:
    """Inert all-zero snapshot for a row set (or filter) that matched nothing."""
    return ProcessedSnapshot(filter_options=filter_options if filter_options is not None else FilterOptions())


def aggregate_frame(
    df: pd.DataFrame,
    existing_filter_options: Optional[FilterOptions] = None,
) -> ProcessedSnapshot:
    """Compute the full snapshot from a normalized rows DataFrame."""
    if df.empty:
        return empty_snapshot(existing_filter_options)

    total_2024 = sequential_sum(df["sales2024"])
    total_2025 = sequential_sum(df["sales2025"])

    grouped = {
        kind: group_sales(df, kind)
        for kind in (DimensionKind.DIVISION, DimensionKind.BRAND, DimensionKind.BRANCH, DimensionKind.ITEM)
    }
    rollups = {kind: to_entities(sort_by_sales(g)) for kind, g in grouped.items()}

    by_division = rollups[DimensionKind.DIVISION]
    by_brand = rollups[DimensionKind.BRAND]
    by_branch = rollups[DimensionKind.BRANCH]
    by_item = rollups[DimensionKind.ITEM]

    pareto_branches, top_branches = calculate_pareto(by_branch)
    pareto_brands, top_brands = calculate_pareto(by_brand)
    pareto_items, top_items = calculate_pareto(by_item)

    new_brands, new_brands_list, lost_brands, lost_brands_list = calculate_lifecycle(
        grouped[DimensionKind.BRAND], total_2024, total_2025,
    )
    new_items, new_items_list, lost_items, lost_items_list = calculate_lifecycle(
        grouped[DimensionKind.ITEM], total_2024, total_2025,
    )

    counts = {
        (kind, year): _active_count(df, kind, f"sales{year}")
        for kind in (DimensionKind.BRANCH, DimensionKind.BRAND, DimensionKind.ITEM)
        for year in (2024, 2025)
    }

    return ProcessedSnapshot(
        row_count=len(df),
        total_sales_2024=total_2024,
        total_sales_2025=total_2025,
        sales_growth_percentage=calc_growth(total_2025, total_2024),
        sales_by_division=by_division,
        sales_by_brand=by_brand,
        sales_by_branch=by_branch,
        sales_by_item=by_item,
        top10_brands=by_brand[:TOP_BRANDS_LIMIT],
        top50_items=by_item[:TOP_ITEMS_LIMIT],
        branch_count_2024=counts[(DimensionKind.BRANCH, 2024)],
        branch_count_2025=counts[(DimensionKind.BRANCH, 2025)],
        brand_count_2024=counts[(DimensionKind.BRAND, 2024)],
        brand_count_2025=counts[(DimensionKind.BRAND, 2025)],
        item_count_2024=counts[(DimensionKind.ITEM, 2024)],
        item_count_2025=counts[(DimensionKind.ITEM, 2025)],
        total_unique_item_count=len(by_item),
        net_new_branches=counts[(DimensionKind.BRANCH, 2025)] - counts[(DimensionKind.BRANCH, 2024)],
        top_division=by_division[0] if by_division else None,
        pareto=ParetoSet(branches=pareto_branches, brands=pareto_brands, items=pareto_items),
        pareto_contributors=ParetoContributors(branches=top_branches, brands=top_brands, items=top_items),
        new_entities=LifecycleSet(brands=new_brands, items=new_items),
        lost_entities=LifecycleSet(brands=lost_brands, items=lost_items),
        new_brands_list=new_brands_list,
        new_items_list=new_items_list,
        lost_brands_list=lost_brands_list,
        lost_items_list=lost_items_list,
        filter_options=existing_filter_options if existing_filter_options is not None else build_filter_options(df),
    )


def aggregate(rows: Rows, existing_filter_options: Optional[FilterOptions] = None) -> ProcessedSnapshot:
    """Aggregate normalized rows (or an already-built rows DataFrame)."""
    df = rows if isinstance(rows, pd.DataFrame) else rows_to_frame(rows)
    return aggregate_frame(df, existing_filter_options)
