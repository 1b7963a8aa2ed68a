"""
FastAPI dependencies — DataStore singleton, filter parsing.
"""
from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, Query

from salesview.data.store import DataStore
from salesview.data.schemas import FilterState

# ---------------------------------------------------------------------------
# Global store singleton (set during startup)
# ---------------------------------------------------------------------------
_store: DataStore | None = None


def set_store(store: DataStore) -> None:
    global _store
    _store = store


def get_store() -> DataStore:
    if _store is None or not _store.is_loaded:
        raise HTTPException(503, "Data not loaded yet")
    return _store


def get_store_or_empty() -> DataStore:
    """Return the store even if it has no data (for health/upload/reload endpoints)."""
    if _store is None:
        raise HTTPException(503, "Server not initialized yet")
    return _store


# ---------------------------------------------------------------------------
# Filter parsing from query params
# ---------------------------------------------------------------------------

def _split(value: Optional[str]) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(v.strip() for v in value.split(",") if v.strip())


def parse_filters(
    divisions: Optional[str] = Query(None, description="Comma-separated divisions"),
    departments: Optional[str] = Query(None, description="Comma-separated departments"),
    categories: Optional[str] = Query(None, description="Comma-separated categories"),
    branches: Optional[str] = Query(None, description="Comma-separated branch names"),
    brands: Optional[str] = Query(None, description="Comma-separated brands"),
    items: Optional[str] = Query(None, description="Comma-separated item descriptions"),
    search: Optional[str] = Query(None, description="Free-text search"),
) -> FilterState | None:
    """Parse filter query parameters into a FilterState (None when unfiltered)."""
    filters = FilterState(
        divisions=_split(divisions),
        departments=_split(departments),
        categories=_split(categories),
        branches=_split(branches),
        brands=_split(brands),
        items=_split(items),
        search=search or "",
    )
    return None if filters.is_empty else filters
