"""Data loading, normalization, and the session row store."""
from .loader import CsvParseError, MissingColumnsError, load_frame, load_rows, validate_headers
from .store import DataProcessingError, DataStore
from .schemas import DimensionKind, FilterOptions, FilterState, NormalizedRow, ProcessedSnapshot
from .normalize import normalize_row, normalize_columns, parse_sales_value
