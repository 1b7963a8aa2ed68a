"""
CSV reading, required-column validation, and normalization into rows.
"""
from __future__ import annotations

from pathlib import Path
from typing import IO, Union

import pandas as pd

from salesview.config import REQUIRED_COLUMNS
from salesview.data.normalize import frame_to_rows, normalize_columns
from salesview.data.schemas import NormalizedRow

Source = Union[str, Path, IO]


class MissingColumnsError(ValueError):
    """The extract lacks one or more required columns. Fatal for that load."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Missing required columns: {', '.join(missing)}")


class CsvParseError(ValueError):
    """The extract could not be read as CSV (empty file, bad encoding, broken quoting)."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Failed to parse CSV data: {detail}")


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def validate_headers(headers) -> None:
    """Raise MissingColumnsError unless every required column is present."""
    present = {str(h).strip().upper() for h in headers if h is not None}
    missing = [col for col in REQUIRED_COLUMNS if col not in present]
    if missing:
        raise MissingColumnsError(missing)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def read_sales_csv(source: Source) -> pd.DataFrame:
    """Read a sales extract as raw strings (path, URL, or file-like object).

    Unreadable content raises CsvParseError; a missing file or unreachable URL
    propagates as OSError.
    """
    try:
        return pd.read_csv(
            source,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            encoding="utf-8-sig",
        )
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise CsvParseError(str(exc)) from exc


def _drop_blank_rows(df: pd.DataFrame) -> pd.DataFrame:
    """Drop rows where every cell is blank (e.g. trailing ",,,," lines)."""
    if df.empty:
        return df
    blank = df.apply(lambda col: col.astype(str).str.strip() == "").all(axis=1)
    return df[~blank]


def load_frame(source: Source) -> pd.DataFrame:
    """Read, validate, and normalize an extract into the analytics DataFrame."""
    raw = read_sales_csv(source)
    validate_headers(raw.columns)
    raw = _drop_blank_rows(raw)
    df = normalize_columns(raw)
    print(f"  Loaded {len(df):,} rows ({len(raw.columns)} columns)")
    return df


def load_rows(source: Source) -> list[NormalizedRow]:
    """Read, validate, and normalize an extract into NormalizedRow values."""
    return frame_to_rows(load_frame(source))
