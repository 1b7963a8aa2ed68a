"""
Export endpoints: summary workbook (xlsx) and drill-down lists (csv).
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from salesview.data.store import DataProcessingError, DataStore
from salesview.data.schemas import FilterState
from salesview.api.dependencies import get_store, parse_filters
from salesview.analytics.drilldown import DRILLDOWN_VIEWS
from salesview.reports import summary_report

router = APIRouter(prefix="/api/export", tags=["export"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.get("/summary.xlsx")
def export_summary(
    store: DataStore = Depends(get_store),
    filters: FilterState | None = Depends(parse_filters),
):
    try:
        content = summary_report.generate_excel(store, None, filters)
    except DataProcessingError:
        raise HTTPException(500, "Error processing data")
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="sales_summary.xlsx"'},
    )


@router.get("/{view}.csv")
def export_listing(
    view: str,
    store: DataStore = Depends(get_store),
    filters: FilterState | None = Depends(parse_filters),
):
    if view not in DRILLDOWN_VIEWS:
        raise HTTPException(400, f"Unknown view: {view}. Options: {', '.join(DRILLDOWN_VIEWS)}")
    try:
        content = summary_report.listing_csv(store, view, filters)
    except DataProcessingError:
        raise HTTPException(500, "Error processing data")
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{view}.csv"'},
    )
