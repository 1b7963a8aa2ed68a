"""
Cell, row, and KPI card formatting helpers.
"""
from __future__ import annotations

import math

from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from salesview.excel.styles import (
    HEADER_FONT, HEADER_FILL, HEADER_BORDER,
    DATA_FONT, TOTAL_FONT,
    THIN_BORDER, TOTAL_BORDER,
    ALTERNATE_FILL, TOTAL_FILL,
    KPI_VALUE_FONT, KPI_LABEL_FONT,
    CENTER, LEFT, RIGHT,
    HIGHLIGHT_FILLS,
)

NUMBER_FORMATS = {
    "currency": '"$"#,##0.00',
    "percent": '0.0"%"',
    "number": "#,##0",
    "decimal": "0.0",
}

NUMERIC_TYPES = ("currency", "number", "percent", "decimal")


def format_header_row(ws: Worksheet, row_num: int, num_cols: int) -> None:
    """Apply header styling to an entire row."""
    for col in range(1, num_cols + 1):
        cell = ws.cell(row=row_num, column=col)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = CENTER
        cell.border = HEADER_BORDER


def format_data_cell(
    ws: Worksheet,
    row_num: int,
    col_num: int,
    value,
    col_type: str = "text",
    is_total: bool = False,
    highlight: str | None = None,
) -> None:
    """Write and format a single data cell.

    Infinite growth is written as the text "New"; Excel has no infinity.
    """
    if isinstance(value, float) and math.isinf(value):
        value = "New" if value > 0 else "-"

    cell = ws.cell(row=row_num, column=col_num)
    cell.value = value
    cell.font = TOTAL_FONT if is_total else DATA_FONT
    cell.border = TOTAL_BORDER if is_total else THIN_BORDER
    cell.alignment = RIGHT if col_type in NUMERIC_TYPES else LEFT

    if col_type in NUMBER_FORMATS:
        cell.number_format = NUMBER_FORMATS[col_type]

    if highlight and highlight in HIGHLIGHT_FILLS:
        cell.fill = HIGHLIGHT_FILLS[highlight]
    elif is_total:
        cell.fill = TOTAL_FILL
    elif row_num % 2 == 0:
        cell.fill = ALTERNATE_FILL


def auto_column_width(ws: Worksheet, min_width: int = 10, max_width: int = 55) -> None:
    """Fit column widths to the longest rendered value."""
    for column in ws.columns:
        longest = max((len(str(c.value)) for c in column if c.value is not None), default=0)
        letter = get_column_letter(column[0].column)
        ws.column_dimensions[letter].width = min(max(longest + 2, min_width), max_width)


def add_kpi_card(
    ws: Worksheet,
    row: int,
    col: int,
    value,
    label: str,
    format_type: str = "currency",
) -> None:
    """Write a large KPI value + small label below it."""
    if isinstance(value, float) and math.isinf(value):
        value, format_type = "New", "text"

    value_cell = ws.cell(row=row, column=col)
    label_cell = ws.cell(row=row + 1, column=col)

    value_cell.value = value
    value_cell.font = KPI_VALUE_FONT
    value_cell.alignment = CENTER
    if format_type == "currency":
        value_cell.number_format = '"$"#,##0'
    elif format_type in NUMBER_FORMATS:
        value_cell.number_format = NUMBER_FORMATS[format_type]

    label_cell.value = label
    label_cell.font = KPI_LABEL_FONT
    label_cell.alignment = CENTER
