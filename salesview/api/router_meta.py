"""
Meta endpoints: health, filter options, reload, upload.
"""
from __future__ import annotations

import io

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from salesview.config import DATA_SOURCE
from salesview.data.loader import CsvParseError, MissingColumnsError
from salesview.data.store import DataProcessingError, DataStore
from salesview.api.dependencies import get_store_or_empty
from salesview.api.response_models import FilterOptionsResponse, HealthResponse, LoadResponse

router = APIRouter(prefix="/api", tags=["meta"])


def _load(store: DataStore, source) -> None:
    """Load into the store, mapping load failures onto HTTP errors."""
    try:
        store.load(source)
    except MissingColumnsError as exc:
        raise HTTPException(422, str(exc))
    except CsvParseError as exc:
        raise HTTPException(400, str(exc))
    except OSError as exc:
        raise HTTPException(400, f"Could not read data source: {exc}")
    except DataProcessingError:
        raise HTTPException(500, "Error processing data")


@router.get("/health", response_model=HealthResponse)
def health(store: DataStore = Depends(get_store_or_empty)):
    opts = store.filter_options
    return HealthResponse(
        status="ok",
        loaded=store.is_loaded,
        rows=store.row_count(),
        divisions=len(opts.divisions),
        branches=len(opts.branches),
        brands=len(opts.brands),
        items=len(opts.items),
    )


@router.get("/filter-options", response_model=FilterOptionsResponse)
def filter_options(store: DataStore = Depends(get_store_or_empty)):
    opts = store.filter_options
    return FilterOptionsResponse(
        divisions=list(opts.divisions),
        departments=list(opts.departments),
        categories=list(opts.categories),
        branches=list(opts.branches),
        brands=list(opts.brands),
        items=list(opts.items),
    )


@router.post("/reload", response_model=LoadResponse)
def reload_data(store: DataStore = Depends(get_store_or_empty)):
    """Re-read the configured data source."""
    if not DATA_SOURCE:
        raise HTTPException(400, "No data source configured (set SALESVIEW_DATA_SOURCE)")
    _load(store, DATA_SOURCE)
    print(f"  Reload complete — {store.row_count():,} rows")
    return LoadResponse(status="reloaded", rows=store.row_count(), source=DATA_SOURCE)


@router.post("/upload", response_model=LoadResponse)
async def upload_csv(file: UploadFile = File(...), store: DataStore = Depends(get_store_or_empty)):
    """Replace the session's data with an uploaded CSV extract."""
    if not file.filename or not file.filename.lower().endswith(".csv"):
        raise HTTPException(400, f"Only .csv files are accepted (got '{file.filename}')")

    content = await file.read()
    _load(store, io.BytesIO(content))
    print(f"  Uploaded {file.filename} — {store.row_count():,} rows")
    return LoadResponse(status="loaded", rows=store.row_count(), source=file.filename)
