"""
Typed value objects: normalized rows, dimensions, filters, and the processed snapshot.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Optional

from salesview.config import COLUMN_MAP


# ---------------------------------------------------------------------------
# Rows
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NormalizedRow:
    """One transaction line after normalization. Every field is always present."""
    division: str = ""
    department: str = ""
    category: str = ""
    branch_code: str = ""
    branch_name: str = ""
    brand: str = ""
    item_code: str = ""
    item_description: str = ""
    sales2024: float = 0.0
    sales2025: float = 0.0

    def get(self, header: str):
        """Field value by canonical CSV header, e.g. ``row.get("BRANCH NAME")``."""
        return getattr(self, COLUMN_MAP[header])


# ---------------------------------------------------------------------------
# Dimensions
# ---------------------------------------------------------------------------

class DimensionKind(str, Enum):
    DIVISION = "division"
    DEPARTMENT = "department"
    CATEGORY = "category"
    BRANCH = "branch"
    BRAND = "brand"
    ITEM = "item"

    @property
    def column(self) -> str:
        """Row attribute / DataFrame column holding this dimension's value."""
        return _DIMENSION_COLUMNS[self]

    @property
    def header(self) -> str:
        """Canonical CSV header for this dimension."""
        return _DIMENSION_HEADERS[self]

    @property
    def plural(self) -> str:
        return _DIMENSION_PLURALS[self]

    def accessor(self, row: NormalizedRow) -> str:
        return getattr(row, self.column)

    @classmethod
    def parse(cls, value: "str | DimensionKind") -> "DimensionKind":
        """Accept a member, its value, or the plural form ("branches", "items")."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        for kind in cls:
            if key in (kind.value, kind.plural):
                return kind
        raise ValueError(f"Unknown dimension: {value}")


_DIMENSION_COLUMNS = {
    DimensionKind.DIVISION: "division",
    DimensionKind.DEPARTMENT: "department",
    DimensionKind.CATEGORY: "category",
    DimensionKind.BRANCH: "branch_name",
    DimensionKind.BRAND: "brand",
    DimensionKind.ITEM: "item_description",
}

_DIMENSION_HEADERS = {
    DimensionKind.DIVISION: "DIVISION",
    DimensionKind.DEPARTMENT: "DEPARTMENT",
    DimensionKind.CATEGORY: "CATEGORY",
    DimensionKind.BRANCH: "BRANCH NAME",
    DimensionKind.BRAND: "BRAND",
    DimensionKind.ITEM: "ITEM DESCRIPTION",
}

_DIMENSION_PLURALS = {
    DimensionKind.DIVISION: "divisions",
    DimensionKind.DEPARTMENT: "departments",
    DimensionKind.CATEGORY: "categories",
    DimensionKind.BRANCH: "branches",
    DimensionKind.BRAND: "brands",
    DimensionKind.ITEM: "items",
}


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FilterOptions:
    """Sorted dimension vocabularies used to populate filter dropdowns."""
    divisions: tuple[str, ...] = ()
    departments: tuple[str, ...] = ()
    categories: tuple[str, ...] = ()
    branches: tuple[str, ...] = ()
    brands: tuple[str, ...] = ()
    items: tuple[str, ...] = ()

    def for_dimension(self, kind: DimensionKind) -> tuple[str, ...]:
        return getattr(self, kind.plural)


@dataclass(frozen=True)
class FilterState:
    """Dropdown selections (empty = no restriction) plus a free-text search term."""
    divisions: tuple[str, ...] = ()
    departments: tuple[str, ...] = ()
    categories: tuple[str, ...] = ()
    branches: tuple[str, ...] = ()
    brands: tuple[str, ...] = ()
    items: tuple[str, ...] = ()
    search: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.search.strip() and not any(self.selections().values())

    def selections(self) -> dict[DimensionKind, tuple[str, ...]]:
        return {kind: getattr(self, kind.plural) for kind in DimensionKind}


# ---------------------------------------------------------------------------
# Processed snapshot
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EntitySalesData:
    name: str
    sales2024: float
    sales2025: float
    growth: float
    code: Optional[str] = None


@dataclass(frozen=True)
class ParetoResult:
    top_count: int = 0
    sales_percent: float = 0.0
    total_sales: float = 0.0
    total_contributors: int = 0
    top_sales: float = 0.0


@dataclass(frozen=True)
class LifecycleSummary:
    """Count and summed sales of new (2025 sales) or lost (2024 sales) entities."""
    count: int = 0
    sales: float = 0.0
    percent_of_total: float = 0.0


@dataclass(frozen=True)
class LifecycleEntry:
    name: str
    sales: float
    code: Optional[str] = None


@dataclass(frozen=True)
class ParetoSet:
    branches: ParetoResult = field(default_factory=ParetoResult)
    brands: ParetoResult = field(default_factory=ParetoResult)
    items: ParetoResult = field(default_factory=ParetoResult)


@dataclass(frozen=True)
class ParetoContributors:
    branches: tuple[EntitySalesData, ...] = ()
    brands: tuple[EntitySalesData, ...] = ()
    items: tuple[EntitySalesData, ...] = ()


@dataclass(frozen=True)
class LifecycleSet:
    brands: LifecycleSummary = field(default_factory=LifecycleSummary)
    items: LifecycleSummary = field(default_factory=LifecycleSummary)


@dataclass(frozen=True)
class ProcessedSnapshot:
    """Everything the dashboard renders, computed from one set of rows."""
    row_count: int = 0
    total_sales_2024: float = 0.0
    total_sales_2025: float = 0.0
    sales_growth_percentage: float = 0.0

    sales_by_division: tuple[EntitySalesData, ...] = ()
    sales_by_brand: tuple[EntitySalesData, ...] = ()
    sales_by_branch: tuple[EntitySalesData, ...] = ()
    sales_by_item: tuple[EntitySalesData, ...] = ()
    top10_brands: tuple[EntitySalesData, ...] = ()
    top50_items: tuple[EntitySalesData, ...] = ()

    branch_count_2024: int = 0
    branch_count_2025: int = 0
    brand_count_2024: int = 0
    brand_count_2025: int = 0
    item_count_2024: int = 0
    item_count_2025: int = 0
    total_unique_item_count: int = 0
    net_new_branches: int = 0

    top_division: Optional[EntitySalesData] = None

    pareto: ParetoSet = field(default_factory=ParetoSet)
    pareto_contributors: ParetoContributors = field(default_factory=ParetoContributors)

    new_entities: LifecycleSet = field(default_factory=LifecycleSet)
    lost_entities: LifecycleSet = field(default_factory=LifecycleSet)
    new_brands_list: tuple[LifecycleEntry, ...] = ()
    new_items_list: tuple[LifecycleEntry, ...] = ()
    lost_brands_list: tuple[LifecycleEntry, ...] = ()
    lost_items_list: tuple[LifecycleEntry, ...] = ()

    filter_options: FilterOptions = field(default_factory=FilterOptions)

    @property
    def is_empty(self) -> bool:
        """True for the inert result of an empty row set."""
        return self.row_count == 0

    def to_dict(self) -> dict:
        return asdict(self)
