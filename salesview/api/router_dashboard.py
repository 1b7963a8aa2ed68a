"""
Dashboard endpoints — summary snapshot, card drill-downs, division detail,
category items, comparison hub, entity profile.
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from salesview.data.store import DataProcessingError, DataStore
from salesview.data.schemas import DimensionKind, FilterState
from salesview.api.dependencies import get_store, parse_filters
from salesview.analytics.common import sanitize_for_json
from salesview.analytics.drilldown import (
    DRILLDOWN_VIEWS,
    category_items,
    compare_children,
    division_detail,
    drilldown,
    entity_profile,
)
from salesview.reports import summary_report

router = APIRouter(prefix="/api", tags=["dashboard"])


def _safe_json(data: dict) -> JSONResponse:
    return JSONResponse(content=sanitize_for_json(data))


def _snapshot(store: DataStore, filters: FilterState | None):
    try:
        return store.snapshot(filters)
    except DataProcessingError:
        raise HTTPException(500, "Error processing data")


@router.get("/dashboard")
def dashboard(
    store: DataStore = Depends(get_store),
    filters: FilterState | None = Depends(parse_filters),
):
    """Full processed snapshot for the current filters."""
    try:
        return _safe_json(summary_report.generate_json(store, filters))
    except DataProcessingError:
        raise HTTPException(500, "Error processing data")


@router.get("/details/{view}")
def details(
    view: str,
    store: DataStore = Depends(get_store),
    filters: FilterState | None = Depends(parse_filters),
):
    """List behind one summary card (divisions, pareto_brands, new_items, ...)."""
    if view not in DRILLDOWN_VIEWS:
        raise HTTPException(400, f"Unknown view: {view}. Options: {', '.join(DRILLDOWN_VIEWS)}")
    return _safe_json(drilldown(_snapshot(store, filters), view))


@router.get("/division/{name}")
def division(
    name: str,
    department: Optional[str] = Query(None, description="Narrow the branch list to one department"),
    store: DataStore = Depends(get_store),
    filters: FilterState | None = Depends(parse_filters),
):
    """Department/category breakdown for one division."""
    detail = division_detail(store.filtered_frame(filters), name, department)
    if detail is None:
        raise HTTPException(404, f"No data for division: {name}")
    return _safe_json(detail)


@router.get("/division/{name}/{department}/{category}")
def division_category_items(
    name: str,
    department: str,
    category: str,
    search: str = Query("", description="Filter items by name or code"),
    store: DataStore = Depends(get_store),
):
    """Items of one category, with contributions against the division totals."""
    return _safe_json(category_items(store.df, name, department, category, search))


@router.get("/compare")
def compare(
    division: Optional[str] = Query(None),
    department: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    brand: Optional[str] = Query(None),
    branch: Optional[str] = Query(None),
    store: DataStore = Depends(get_store),
):
    """Children of the given drill path, ranked by 2025 sales."""
    path = [
        (kind, value)
        for kind, value in (
            (DimensionKind.DIVISION, division),
            (DimensionKind.DEPARTMENT, department),
            (DimensionKind.CATEGORY, category),
            (DimensionKind.BRAND, brand),
            (DimensionKind.BRANCH, branch),
        )
        if value
    ]
    return _safe_json(compare_children(store.df, path))


@router.get("/entity/{dimension}/{name}")
def entity(
    dimension: str,
    name: str,
    store: DataStore = Depends(get_store),
    filters: FilterState | None = Depends(parse_filters),
):
    """Health card for one entity (division, department, category, branch, brand, item)."""
    try:
        kind = DimensionKind.parse(dimension)
    except ValueError as exc:
        raise HTTPException(400, str(exc))
    frame = store.filtered_frame(filters)
    return _safe_json(entity_profile(frame, kind, name, _snapshot(store, filters)))
