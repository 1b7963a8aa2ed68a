"""
DataStore — session-scoped row collection with filter-aware snapshots.

Loaded once per session (or upload), queried on every filter change. The
engine itself stays pure; this class owns the rows and the cached base snapshot.
"""
from __future__ import annotations

from typing import Iterable, Optional

import pandas as pd

from salesview.analytics import aggregate as engine
from salesview.config import SEARCH_COLS
from salesview.data.loader import Source, load_frame
from salesview.data.normalize import ROW_FIELDS, rows_to_frame
from salesview.data.schemas import FilterOptions, FilterState, NormalizedRow, ProcessedSnapshot


class DataProcessingError(RuntimeError):
    """Aggregation failed unexpectedly; no partial snapshot is returned."""


class DataStore:
    """In-memory normalized rows with filtered snapshot accessors."""

    def __init__(self) -> None:
        # (rows, base snapshot), always replaced as one tuple
        self._data: tuple[pd.DataFrame, Optional[ProcessedSnapshot]] = (pd.DataFrame(columns=ROW_FIELDS), None)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self, source: Source) -> "DataStore":
        """Read, validate, normalize, and pre-aggregate an extract.

        MissingColumnsError propagates unchanged and leaves the previous data in place.
        """
        print("Loading sales data...")
        df = load_frame(source)
        return self._install(df)

    def load_rows(self, rows: Iterable[NormalizedRow]) -> "DataStore":
        """Install already-normalized rows."""
        return self._install(rows_to_frame(rows))

    def _install(self, df: pd.DataFrame) -> "DataStore":
        try:
            base = engine.aggregate_frame(df)
        except Exception as exc:
            raise DataProcessingError(f"Error processing data: {exc}") from exc

        self._data = (df, base)
        if df.empty:
            print("  No rows in extract — starting with empty dataset")
        else:
            print(f"  Pre-aggregated {len(df):,} rows, "
                  f"{len(base.sales_by_division)} divisions, {len(base.sales_by_brand)} brands")
        return self

    @property
    def df(self) -> pd.DataFrame:
        return self._data[0]

    @property
    def is_loaded(self) -> bool:
        return self._data[1] is not None

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------

    def filtered_frame(self, filters: FilterState | None = None) -> pd.DataFrame:
        """Rows matching every non-empty selection and the search term."""
        return _apply_filters(self.df, filters)

    def snapshot(self, filters: FilterState | None = None) -> ProcessedSnapshot:
        """Snapshot for the current filters.

        No filters: the cached base snapshot. Nothing matched: the empty
        snapshot with the base vocabulary. Otherwise a fresh aggregation that
        keeps the base vocabulary so dropdowns stay stable.
        """
        df, base = self._data
        if base is None:
            base = engine.empty_snapshot()
        if filters is None or filters.is_empty:
            return base

        subset = _apply_filters(df, filters)
        if subset.empty:
            return engine.empty_snapshot(base.filter_options)

        try:
            return engine.aggregate_frame(subset, base.filter_options)
        except Exception as exc:
            raise DataProcessingError(f"Error processing data: {exc}") from exc

    def base_snapshot(self) -> ProcessedSnapshot:
        base = self._data[1]
        return base if base is not None else engine.empty_snapshot()

    # ------------------------------------------------------------------
    # Metadata queries
    # ------------------------------------------------------------------

    @property
    def filter_options(self) -> FilterOptions:
        return self.base_snapshot().filter_options

    def row_count(self) -> int:
        return len(self.df)


def _apply_filters(df: pd.DataFrame, filters: FilterState | None) -> pd.DataFrame:
    if filters is None or filters.is_empty:
        return df

    for kind, selected in filters.selections().items():
        if selected:
            df = df[df[kind.column].isin(selected)]

    term = filters.search.strip().lower()
    if term:
        hit = pd.Series(False, index=df.index)
        for col in SEARCH_COLS:
            hit |= df[col].str.lower().str.contains(term, regex=False)
        df = df[hit]
    return df
