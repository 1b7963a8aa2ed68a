"""
Row normalization: header matching, text cleanup, currency-like sales parsing.

Malformed values never raise. Text degrades to "" and sales to 0.0 because the
source extract is maintained by hand and is routinely dirty.
"""
from __future__ import annotations

import re
from dataclasses import fields
from typing import Any, Iterable, Mapping, Sequence

import pandas as pd

from salesview.config import COLUMN_MAP, NA_MARKERS, SALES_COLS, TEXT_COLS
from salesview.data.schemas import NormalizedRow

ROW_FIELDS = [f.name for f in fields(NormalizedRow)]

_NON_NUMERIC_RE = re.compile(r"[^0-9.]")
_LEADING_NUMBER_RE = re.compile(r"\d*\.?\d*")


# ---------------------------------------------------------------------------
# Field-level helpers
# ---------------------------------------------------------------------------

def parse_sales_value(value: Any) -> float:
    """Coerce a currency-like value to a signed float.

    Handles thousands separators, currency symbols, trailing minus signs and
    accounting parentheses: ``"(1,234.50)" -> -1234.5``, ``"2,500" -> 2500.0``.
    Missing, NA or unparseable input gives 0.0.
    """
    if value is None:
        return 0.0
    text = str(value).strip()
    if text == "" or text.lower() in ("n/a", "#n/a"):
        return 0.0

    is_negative = text.startswith("-") or text.endswith("-") or (text.startswith("(") and text.endswith(")"))
    digits = _NON_NUMERIC_RE.sub("", text)

    # Longest leading "123.45" run; stray extra dots end the number
    match = _LEADING_NUMBER_RE.match(digits)
    number_text = match.group(0) if match else ""
    if number_text in ("", "."):
        return 0.0

    number = abs(float(number_text))
    result = -number if is_negative else number
    return 0.0 if result == 0 else result


def normalize_text_value(value: Any) -> str:
    """Trim, blank out NA markers, upper-case everything else."""
    if value is None:
        return ""
    text = str(value).strip()
    if text in NA_MARKERS:
        return ""
    return text.upper()


def match_headers(headers: Iterable[str]) -> dict[str, str]:
    """Map each canonical header to the first file header equal to it after trim + upper-case."""
    matched: dict[str, str] = {}
    for header in headers:
        if header is None:
            continue
        key = str(header).strip().upper()
        if key in COLUMN_MAP and key not in matched:
            matched[key] = header
    return matched


# ---------------------------------------------------------------------------
# Row-level normalization
# ---------------------------------------------------------------------------

def normalize_row(raw: Mapping[str, Any], headers: Sequence[str]) -> NormalizedRow:
    """Build a NormalizedRow from one parsed CSV record."""
    matched = match_headers(headers)
    values: dict[str, Any] = {}
    for header, attr in COLUMN_MAP.items():
        source = matched.get(header)
        value = raw.get(source) if source is not None else None
        if attr in SALES_COLS:
            values[attr] = parse_sales_value(value)
        else:
            values[attr] = normalize_text_value(value)
    return NormalizedRow(**values)


# ---------------------------------------------------------------------------
# Frame-level normalization
# ---------------------------------------------------------------------------

def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Normalize a raw string DataFrame into one column per NormalizedRow field.

    Same rules as normalize_row, applied column-wise. Missing columns are
    filled with "" / 0.0.
    """
    matched = match_headers(df.columns)
    out = pd.DataFrame(index=df.index)

    for header, attr in COLUMN_MAP.items():
        source = matched.get(header)
        if attr in SALES_COLS:
            if source is None:
                out[attr] = 0.0
            else:
                out[attr] = df[source].map(parse_sales_value).astype(float)
        else:
            if source is None:
                out[attr] = ""
            else:
                text = df[source].fillna("").astype(str).str.strip()
                out[attr] = text.where(~text.isin(NA_MARKERS), "").str.upper()

    return out[ROW_FIELDS].reset_index(drop=True)


def rows_to_frame(rows: Iterable[NormalizedRow]) -> pd.DataFrame:
    """Stack normalized rows into the DataFrame shape the analytics work on."""
    df = pd.DataFrame([[getattr(r, f) for f in ROW_FIELDS] for r in rows], columns=ROW_FIELDS)
    return df.astype({col: float for col in SALES_COLS} | {col: object for col in TEXT_COLS})


def frame_to_rows(df: pd.DataFrame) -> list[NormalizedRow]:
    """Inverse of rows_to_frame."""
    rows = []
    for rec in df[ROW_FIELDS].itertuples(index=False):
        values = dict(zip(ROW_FIELDS, rec))
        for col in SALES_COLS:
            values[col] = float(values[col])
        rows.append(NormalizedRow(**values))
    return rows
