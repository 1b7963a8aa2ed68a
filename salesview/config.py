"""
Sales View — Configuration: paths, canonical columns, analytics constants.
"""
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths — override with SALESVIEW_DATA_DIR env var for cloud deployment
# ---------------------------------------------------------------------------
_data_dir = Path(os.environ.get("SALESVIEW_DATA_DIR", str(Path.home() / "Desktop" / "Sales View")))
EXPORTS_FOLDER = _data_dir / "exports"

# CSV path or URL loaded at API startup (empty = start with no data)
DATA_SOURCE = os.environ.get("SALESVIEW_DATA_SOURCE", "")

# ---------------------------------------------------------------------------
# Canonical CSV columns → NormalizedRow attributes
# ---------------------------------------------------------------------------
COLUMN_MAP = {
    "DIVISION": "division",
    "DEPARTMENT": "department",
    "CATEGORY": "category",
    "BRANCH CODE": "branch_code",
    "BRANCH NAME": "branch_name",
    "BRAND": "brand",
    "ITEM CODE": "item_code",
    "ITEM DESCRIPTION": "item_description",
    "SALES2024": "sales2024",
    "SALES2025": "sales2025",
}

SALES_COLS = ["sales2024", "sales2025"]
TEXT_COLS = [attr for attr in COLUMN_MAP.values() if attr not in SALES_COLS]

# Validated by presence-check before any row is normalized
REQUIRED_COLUMNS = ["DIVISION", "SALES2024", "SALES2025", "BRANCH NAME", "BRAND", "ITEM DESCRIPTION"]

# Text markers treated as missing (text fields compare case-sensitively, sales fields do not)
NA_MARKERS = {"#N/A", "N/A", ""}

# Columns matched by the free-text search box
SEARCH_COLS = ["division", "department", "category", "branch_name", "brand", "item_description"]

# ---------------------------------------------------------------------------
# Analytics constants
# ---------------------------------------------------------------------------
PARETO_SHARE = 0.20
TOP_BRANDS_LIMIT = 10
TOP_ITEMS_LIMIT = 50

# Drill-through order used by the comparison hub
HIERARCHY = ["division", "department", "category", "brand", "item"]
