"""
Safe math, growth, and display-formatting helpers used across analytics modules.
"""
from __future__ import annotations

import math

import numpy as np
import pandas as pd


def contribution(part: float, total: float) -> float:
    """Share of a positive total in percent; 0 when the total is zero or negative."""
    return part / total * 100 if total > 0 else 0.0


def sequential_sum(values) -> float:
    """Left-to-right float sum, no pairwise or compensated summation.

    Rollups and grand totals both sum this way: 0.1 + 0.2 - 0.3 is 5.55e-17, not 0.
    """
    arr = np.asarray(values, dtype=float)
    return float(np.add.accumulate(arr)[-1]) if arr.size else 0.0


def calc_growth(current: float, previous: float) -> float:
    """Year-over-year growth in percent.

    Zero base: +inf when current is positive ("new"), else 0. So 0 -> 0 is 0,
    never NaN.
    """
    if previous == 0:
        return math.inf if current > 0 else 0.0
    return (current - previous) / previous * 100


def growth_series(current: pd.Series, previous: pd.Series) -> pd.Series:
    """Element-wise calc_growth for aligned Series."""
    zero_base = previous == 0
    ratio = (current - previous) / previous.where(~zero_base, np.nan) * 100
    on_zero = np.where(current > 0, math.inf, 0.0)
    return ratio.where(~zero_base, pd.Series(on_zero, index=current.index)).astype(float)


# ---------------------------------------------------------------------------
# Display formatting
# ---------------------------------------------------------------------------

def format_number(num: float | None, decimals: int = 0) -> str:
    """Full number with thousands separators; infinity renders as ∞."""
    if num is None or pd.isna(num):
        return "-"
    if num == math.inf:
        return "∞"
    return f"{num:,.{decimals}f}"


def format_number_abbreviated(num: float | None) -> str:
    """Sales figure abbreviated to K / M / B."""
    if num is None or pd.isna(num):
        return "-"
    size = abs(num)
    if size >= 1e9:
        return f"{num / 1e9:.2f}B"
    if size >= 1e6:
        return f"{num / 1e6:.2f}M"
    if size >= 1e3:
        return f"{num / 1e3:.1f}K"
    return f"{num:,.0f}"


def format_growth(value: float | None, unit: str = "%", invert: bool = False) -> str:
    """Growth with a direction marker: "▲ 12.50%", "▼ 3.00%", "▲ New"."""
    if value is None or pd.isna(value):
        return "-"
    if value == math.inf:
        return "▲ New"
    is_positive = value >= 0 if not invert else value <= 0
    icon = "▲" if is_positive else "▼"
    return f"{icon} {abs(value):.2f}{unit}"


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------

def sanitize_for_json(obj):
    """Recursively convert numpy/pandas types to native Python for JSON serialization.

    NaN and infinite floats become None; for growth fields None means "new".
    """
    if isinstance(obj, dict):
        clean = {}
        for k, v in obj.items():
            if k is None:
                continue
            if isinstance(k, float) and (math.isnan(k) or math.isinf(k)):
                continue
            clean[str(k) if not isinstance(k, str) else k] = sanitize_for_json(v)
        return clean
    if isinstance(obj, (list, tuple)):
        return [sanitize_for_json(v) for v in obj]
    if isinstance(obj, (np.integer,)):
        return int(obj)
    if isinstance(obj, (np.floating,)):
        v = float(obj)
        return None if (math.isnan(v) or math.isinf(v)) else v
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, np.ndarray):
        return sanitize_for_json(obj.tolist())
    if isinstance(obj, float):
        return None if (math.isnan(obj) or math.isinf(obj)) else obj
    if pd.api.types.is_scalar(obj) and pd.isna(obj):
        return None
    return obj
