"""
Single source of truth for all Excel colors, fonts, fills, borders, alignments.
"""
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side

# ---------------------------------------------------------------------------
# Color constants
# ---------------------------------------------------------------------------
BRAND_BLUE = "1565C0"
NAVY = "0D47A1"
LIGHT_BLUE = "E3F2FD"
HEADER_BG = "0D47A1"
ALTERNATE_ROW = "F5F7FA"
WHITE = "FFFFFF"
BLACK = "000000"
GREEN = "2E7D32"
LIGHT_GREEN = "E8F5E9"
RED = "C62828"
LIGHT_RED = "FFEBEE"
LIGHT_GOLD = "FFF8DC"
TOTAL_ROW_BG = "E8EAF6"
GRAY_666 = "666666"

# ---------------------------------------------------------------------------
# Fonts
# ---------------------------------------------------------------------------
TITLE_FONT = Font(name="Calibri", size=22, bold=True, color=NAVY)
SUBTITLE_FONT = Font(name="Calibri", size=11, italic=True, color=GRAY_666)
HEADER_FONT = Font(name="Calibri", size=11, bold=True, color=WHITE)
DATA_FONT = Font(name="Calibri", size=10, color=BLACK)
TOTAL_FONT = Font(name="Calibri", size=10, bold=True, color=BLACK)
SECTION_FONT = Font(name="Calibri", size=14, bold=True, color=NAVY)
KPI_VALUE_FONT = Font(name="Calibri", size=24, bold=True, color=NAVY)
KPI_LABEL_FONT = Font(name="Calibri", size=10, color=GRAY_666)
POSITIVE_KPI_FONT = Font(name="Calibri", size=24, bold=True, color=GREEN)
NEGATIVE_KPI_FONT = Font(name="Calibri", size=24, bold=True, color=RED)
INSIGHT_TITLE_FONT = Font(name="Calibri", size=11, bold=True)
INSIGHT_BODY_FONT = Font(name="Calibri", size=10, italic=True)

# ---------------------------------------------------------------------------
# Fills
# ---------------------------------------------------------------------------
HEADER_FILL = PatternFill(start_color=HEADER_BG, end_color=HEADER_BG, fill_type="solid")
ALTERNATE_FILL = PatternFill(start_color=ALTERNATE_ROW, end_color=ALTERNATE_ROW, fill_type="solid")
TOTAL_FILL = PatternFill(start_color=TOTAL_ROW_BG, end_color=TOTAL_ROW_BG, fill_type="solid")
GOLD_FILL = PatternFill(start_color=LIGHT_GOLD, end_color=LIGHT_GOLD, fill_type="solid")
POSITIVE_FILL = PatternFill(start_color=LIGHT_GREEN, end_color=LIGHT_GREEN, fill_type="solid")
WARNING_FILL = PatternFill(start_color=LIGHT_RED, end_color=LIGHT_RED, fill_type="solid")

# ---------------------------------------------------------------------------
# Borders
# ---------------------------------------------------------------------------
THIN_BORDER = Border(
    left=Side(style="thin", color="CCCCCC"),
    right=Side(style="thin", color="CCCCCC"),
    top=Side(style="thin", color="CCCCCC"),
    bottom=Side(style="thin", color="CCCCCC"),
)
HEADER_BORDER = Border(
    left=Side(style="thin", color=NAVY),
    right=Side(style="thin", color=NAVY),
    top=Side(style="thin", color=NAVY),
    bottom=Side(style="medium", color=NAVY),
)
TOTAL_BORDER = Border(
    left=Side(style="thin", color="999999"),
    right=Side(style="thin", color="999999"),
    top=Side(style="medium", color="999999"),
    bottom=Side(style="medium", color="999999"),
)

# ---------------------------------------------------------------------------
# Alignments
# ---------------------------------------------------------------------------
CENTER = Alignment(horizontal="center", vertical="center")
LEFT = Alignment(horizontal="left", vertical="center")
RIGHT = Alignment(horizontal="right", vertical="center")

# ---------------------------------------------------------------------------
# Highlight name -> fill mapping
# ---------------------------------------------------------------------------
HIGHLIGHT_FILLS = {
    "gold": GOLD_FILL,
    "positive": POSITIVE_FILL,
    "warning": WARNING_FILL,
}
