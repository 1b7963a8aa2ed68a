"""
Drill-down analytics — division detail, category items, comparison hub, entity
profile, and the list views behind each summary card.

Functions return plain dicts/lists ready for sanitize_for_json.
"""
from __future__ import annotations

from typing import Iterable, Optional

import pandas as pd

from salesview.config import HIERARCHY
from salesview.data.schemas import DimensionKind, ProcessedSnapshot
from salesview.analytics.aggregate import calculate_pareto, group_sales, sort_by_sales, to_entities
from salesview.analytics.common import calc_growth, contribution, growth_series


ColSpec = tuple[str, str, str]  # (key, col_type, label)

_HIERARCHY = [DimensionKind(h) for h in HIERARCHY]


def _totals(df: pd.DataFrame) -> tuple[float, float]:
    return float(df["sales2024"].sum()), float(df["sales2025"].sum())


# ---------------------------------------------------------------------------
# Division detail
# ---------------------------------------------------------------------------

def division_detail(df: pd.DataFrame, division: str, department: Optional[str] = None) -> dict | None:
    """Department and category breakdown for one division.

    Returns None when the division has no rows. ``department`` narrows only the
    branch list; the tables always cover the whole division.
    """
    div = df[df["division"] == division]
    if div.empty:
        return None

    s24, s25 = _totals(div)

    depts = sort_by_sales(group_sales(div, DimensionKind.DEPARTMENT))
    departments = [
        {
            "name": e.name,
            "sales2024": e.sales2024,
            "sales2025": e.sales2025,
            "contribution2025": contribution(e.sales2025, s25),
        }
        for e in to_entities(depts)
    ]

    # Department x category table (blank department/category rows included)
    table = div.groupby(["department", "category"], sort=False).agg(
        sales2024=("sales2024", "sum"),
        sales2025=("sales2025", "sum"),
    ).reset_index()
    table["growth"] = growth_series(table["sales2025"], table["sales2024"])
    table["contribution2024"] = table["sales2024"].map(lambda v: contribution(v, s24))
    table["contribution2025"] = table["sales2025"].map(lambda v: contribution(v, s25))

    groups = []
    for dept_name, cats in table.groupby("department", sort=False):
        cats = cats.sort_values("sales2025", ascending=False, kind="stable")
        d24, d25 = float(cats["sales2024"].sum()), float(cats["sales2025"].sum())
        groups.append({
            "department": dept_name,
            "categories": cats.to_dict("records"),
            "total": {
                "department": dept_name,
                "category": "TOTAL",
                "sales2024": d24,
                "sales2025": d25,
                "growth": calc_growth(d25, d24),
                "contribution2024": contribution(d24, s24),
                "contribution2025": contribution(d25, s25),
            },
        })
    groups.sort(key=lambda g: g["total"]["sales2025"], reverse=True)

    return {
        "division": division,
        "department": department,
        "totals": {
            "sales2024": s24,
            "sales2025": s25,
            "growth": calc_growth(s25, s24),
            "contribution2024": 100.0,
            "contribution2025": 100.0,
        },
        "departments": departments,
        "groups": groups,
        "branches": _branch_sales(df, div, department),
    }


def _branch_sales(df: pd.DataFrame, div: pd.DataFrame, department: Optional[str]) -> list[dict]:
    """2025 sales per branch inside the division, zero-filled for every known branch."""
    source = div[div["department"] == department] if department else div
    keyed = source[source["branch_name"] != ""]
    sales = keyed.groupby("branch_name", sort=False)["sales2025"].sum()

    all_branches = pd.Series(df.loc[df["branch_name"] != "", "branch_name"].unique())
    result = pd.DataFrame({
        "name": all_branches,
        "sales2025": all_branches.map(sales).fillna(0.0).astype(float),
    })
    result = result.sort_values("sales2025", ascending=False, kind="stable")
    return result.to_dict("records")


# ---------------------------------------------------------------------------
# Category items
# ---------------------------------------------------------------------------

def category_items(
    df: pd.DataFrame,
    division: str,
    department: str,
    category: str,
    search: str = "",
) -> dict:
    """Items of one division/department/category, keyed by ITEM CODE.

    Contributions are relative to the whole division's totals.
    """
    div = df[df["division"] == division]
    div_24, div_25 = _totals(div)

    scoped = div[(div["department"] == department) & (div["category"] == category) & (div["item_code"] != "")]
    grouped = scoped.groupby("item_code", sort=False).agg(
        name=("item_description", "first"),
        sales2024=("sales2024", "sum"),
        sales2025=("sales2025", "sum"),
    )

    items = []
    for code, rec in grouped.iterrows():
        i24, i25 = float(rec["sales2024"]), float(rec["sales2025"])
        items.append({
            "code": str(code),
            "name": str(rec["name"]),
            "sales2024": i24,
            "sales2025": i25,
            "growth": calc_growth(i25, i24),
            "contribution2024": contribution(i24, div_24),
            "contribution2025": contribution(i25, div_25),
        })

    term = search.strip().lower()
    if term:
        items = [i for i in items if term in i["name"].lower() or term in i["code"].lower()]
    items.sort(key=lambda i: i["sales2025"], reverse=True)

    total = None
    if items:
        t24 = sum(i["sales2024"] for i in items)
        t25 = sum(i["sales2025"] for i in items)
        total = {
            "code": "TOTAL",
            "name": f"Total ({len(items)} items)",
            "sales2024": t24,
            "sales2025": t25,
            "growth": calc_growth(t25, t24),
            "contribution2024": sum(i["contribution2024"] for i in items),
            "contribution2025": sum(i["contribution2025"] for i in items),
        }

    return {
        "division": division,
        "department": department,
        "category": category,
        "division_totals": {"sales2024": div_24, "sales2025": div_25},
        "items": items,
        "total": total,
    }


# ---------------------------------------------------------------------------
# Comparison hub
# ---------------------------------------------------------------------------

def _child_kind(path: list[tuple[DimensionKind, str]]) -> Optional[DimensionKind]:
    """Next hierarchy level below the deepest hierarchy entry in the path."""
    depth = -1
    for kind, _ in path:
        if kind in _HIERARCHY:
            depth = max(depth, _HIERARCHY.index(kind))
    nxt = depth + 1
    return _HIERARCHY[nxt] if nxt < len(_HIERARCHY) else None


def compare_children(df: pd.DataFrame, path: Iterable[tuple[str | DimensionKind, str]] = ()) -> dict:
    """Children of a drill-down path, ranked by 2025 sales, plus a summary.

    The path narrows the rows (e.g. division=A, department=B); the child level
    follows the hierarchy division → department → category → brand → item.
    """
    resolved = [(DimensionKind.parse(kind), name) for kind, name in path]

    scoped = df
    for kind, name in resolved:
        scoped = scoped[scoped[kind.column] == name]

    child = _child_kind(resolved)
    summary = {"total_sales": 0.0, "total_entities": 0, "growth": 0.0}
    if child is None:
        return {"path": _path_dicts(resolved), "child_dimension": None, "children": [], "summary": summary}

    keyed = scoped[scoped[child.column] != ""]
    sales = keyed.groupby(child.column, sort=False)["sales2025"].sum()
    sales = sales.sort_values(ascending=False, kind="stable")
    children = [{"dimension": child.value, "name": str(name), "sales2025": float(v)} for name, v in sales.items()]

    if children:
        s24, s25 = _totals(keyed)
        summary = {"total_sales": s25, "total_entities": len(children), "growth": calc_growth(s25, s24)}

    return {
        "path": _path_dicts(resolved),
        "child_dimension": child.value,
        "children": children,
        "summary": summary,
    }


def _path_dicts(path: list[tuple[DimensionKind, str]]) -> list[dict]:
    return [{"dimension": kind.value, "name": name} for kind, name in path]


# ---------------------------------------------------------------------------
# Entity profile (comparison column)
# ---------------------------------------------------------------------------

def entity_profile(
    df: pd.DataFrame,
    dimension: str | DimensionKind,
    name: str,
    snapshot: ProcessedSnapshot,
) -> dict:
    """Item-level health card for one division/department/category/brand/branch/item."""
    kind = DimensionKind.parse(dimension)
    data = df[df[kind.column] == name]

    profile = {
        "dimension": kind.value,
        "name": name,
        "sales2024": 0.0, "sales2025": 0.0, "growth": 0.0,
        "item_count_2024": 0, "item_count_2025": 0, "total_items_for_entity": 0,
        "contribution": 0.0,
        "pareto": {"top_count": 0, "sales_percent": 0.0},
        "new_items": {"count": 0, "sales": 0.0},
        "lost_items": {"count": 0, "sales2024": 0.0},
        "avg_sales_per_item": 0.0,
        "availability_2024": 0.0, "availability_2025": 0.0,
    }
    if data.empty:
        return profile

    s24, s25 = _totals(data)
    items = group_sales(data, DimensionKind.ITEM)
    pareto, _ = calculate_pareto(to_entities(items))

    items24 = int((items["sales2024"] > 0).sum())
    items25 = int((items["sales2025"] > 0).sum())
    new_mask = (items["sales2025"] > 0) & (items["sales2024"] == 0)
    lost_mask = (items["sales2024"] > 0) & (items["sales2025"] == 0)

    profile.update({
        "sales2024": s24,
        "sales2025": s25,
        "growth": calc_growth(s25, s24),
        "item_count_2024": items24,
        "item_count_2025": items25,
        "total_items_for_entity": int(data.loc[data["item_description"] != "", "item_description"].nunique()),
        "contribution": contribution(s25, float(df["sales2025"].sum())),
        "pareto": {"top_count": pareto.top_count, "sales_percent": contribution(pareto.top_sales, s25)},
        "new_items": {"count": int(new_mask.sum()), "sales": float(items.loc[new_mask, "sales2025"].sum())},
        "lost_items": {"count": int(lost_mask.sum()), "sales2024": float(items.loc[lost_mask, "sales2024"].sum())},
        "avg_sales_per_item": s25 / items25 if items25 > 0 else 0.0,
        "availability_2024": contribution(items24, snapshot.item_count_2024),
        "availability_2025": contribution(items25, snapshot.item_count_2025),
    })
    return profile


# ---------------------------------------------------------------------------
# List views behind the summary cards
# ---------------------------------------------------------------------------

_NAME = {
    "division": ("name", "text", "Division"),
    "branch": ("name", "text", "Branch"),
    "brand": ("name", "text", "Brand"),
    "item": ("name", "text", "Item Description"),
}
_CODE: ColSpec = ("code", "text", "Item Code")
_S24: ColSpec = ("sales2024", "currency", "2024 Sales")
_S25: ColSpec = ("sales2025", "currency", "2025 Sales")
_GROWTH: ColSpec = ("growth", "percent", "Growth %")

# view -> (title, snapshot attribute, columns)
DRILLDOWN_VIEWS: dict[str, tuple[str, str, list[ColSpec]]] = {
    "divisions": ("Division Performance", "sales_by_division", [_NAME["division"], _S24, _S25, _GROWTH]),
    "branches": ("Branch Performance", "sales_by_branch", [_NAME["branch"], _S24, _S25, _GROWTH]),
    "brands": ("Brand Performance", "sales_by_brand", [_NAME["brand"], _S24, _S25, _GROWTH]),
    "items": ("Item Performance", "sales_by_item", [_CODE, _NAME["item"], _S24, _S25, _GROWTH]),
    "pareto_branches": ("Top 20% Branches (Pareto)", "pareto_contributors.branches",
                        [_NAME["branch"], _S24, _S25, _GROWTH]),
    "pareto_brands": ("Top 20% Brands (Pareto)", "pareto_contributors.brands",
                      [_NAME["brand"], _S24, _S25, _GROWTH]),
    "pareto_items": ("Top 20% Items (Pareto)", "pareto_contributors.items",
                     [_CODE, _NAME["item"], _S24, _S25, _GROWTH]),
    "new_brands": ("New Brands (Sold in 2025 only)", "new_brands_list", [_NAME["brand"], _S25]),
    "lost_brands": ("Lost Brands (Sold in 2024 only)", "lost_brands_list", [_NAME["brand"], _S24]),
    "new_items": ("New Items (Sold in 2025 only)", "new_items_list", [_CODE, _NAME["item"], _S25]),
    "lost_items": ("Lost Items (Sold in 2024 only)", "lost_items_list", [_CODE, _NAME["item"], _S24]),
}


def _resolve(snapshot: ProcessedSnapshot, attr_path: str):
    obj = snapshot
    for part in attr_path.split("."):
        obj = getattr(obj, part)
    return obj


def drilldown(snapshot: ProcessedSnapshot, view: str) -> dict:
    """Title, columns, and default-sorted records for one list view."""
    if view not in DRILLDOWN_VIEWS:
        raise ValueError(f"Unknown drilldown view: {view}")

    title, attr_path, columns = DRILLDOWN_VIEWS[view]
    sort_key = "sales2024" if view.startswith("lost_") else "sales2025"
    lifecycle_view = view.startswith(("new_", "lost_"))

    records = []
    for entry in _resolve(snapshot, attr_path):
        if lifecycle_view:
            rec = {"name": entry.name, sort_key: entry.sales}
        else:
            rec = {"name": entry.name, "sales2024": entry.sales2024, "sales2025": entry.sales2025,
                   "growth": entry.growth}
        if entry.code is not None:
            rec["code"] = entry.code
        records.append(rec)
    records.sort(key=lambda r: r[sort_key], reverse=True)

    performance_rate = None
    if view == "new_items":
        total, count = snapshot.item_count_2025, snapshot.new_entities.items.count
        performance_rate = {"rate": contribution(count, total), "sold": count, "total": total,
                            "label": "New Items Rate", "unit": "Total Items"}
    elif view == "lost_items":
        total, count = snapshot.item_count_2024, snapshot.lost_entities.items.count
        performance_rate = {"rate": contribution(count, total), "sold": count, "total": total,
                            "label": "Lost Items Rate", "unit": "Total Items (2024)"}

    return {
        "view": view,
        "title": title,
        "columns": [{"key": k, "type": t, "label": label} for k, t, label in columns],
        "records": records,
        "performance_rate": performance_rate,
    }
