"""
Sales View — FastAPI app factory with startup data loading.
"""
from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from salesview.config import DATA_SOURCE
from salesview.data.loader import CsvParseError, MissingColumnsError
from salesview.data.store import DataProcessingError, DataStore
from salesview.api.dependencies import set_store
from salesview.api.router_meta import router as meta_router
from salesview.api.router_dashboard import router as dashboard_router
from salesview.api.router_export import router as export_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the configured extract at startup (if any)."""
    print(f"  SALESVIEW_DATA_SOURCE = {DATA_SOURCE or '(not set)'}")

    store = DataStore()
    if DATA_SOURCE:
        try:
            store.load(DATA_SOURCE)
        except (MissingColumnsError, CsvParseError, DataProcessingError, OSError) as exc:
            print(f"  Could not load {DATA_SOURCE}: {exc}")
    set_store(store)

    if store.row_count() > 0:
        opts = store.filter_options
        print(f"\nSales View ready — {store.row_count():,} rows, "
              f"{len(opts.divisions)} divisions, {len(opts.brands)} brands\n")
    else:
        print("\nSales View ready — no data yet. Upload a CSV via /api/upload.\n")
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Sales View API",
        description="2024 vs 2025 sales comparison — rollups, Pareto concentration, new/lost entities",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(meta_router)
    app.include_router(dashboard_router)
    app.include_router(export_router)

    return app


app = create_app()
