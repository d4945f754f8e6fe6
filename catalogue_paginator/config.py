"""
Shared configuration and constants.
"""

import dataclasses


POINTS_PER_INCH = 72.0

LAYOUT_CAPACITIES = {
	"1": 1,
	"2": 2,
	"2-int": 2,
	"3": 3,
	"4": 4,
	"8": 8,
}

# (columns, rows) used by the proof renderer
LAYOUT_GRIDS = {
	"1": (1, 1),
	"2": (2, 1),
	"2-int": (2, 1),
	"3": (1, 3),
	"4": (2, 2),
	"8": (4, 2),
}

# font sizes in points by text role and density tier
FONT_SIZES = {
	"title": {1: 14, 2: 12, 3: 10, 4: 9, 8: 7},
	"subtitle": {1: 10, 2: 9, 3: 8, 4: 7, 8: 6},
	"author": {1: 9, 2: 8, 3: 7, 4: 7, 8: 6},
	"description": {1: 9, 2: 8, 3: 7, 4: 6, 8: 5},
	"price": {1: 10, 2: 10, 3: 9, 4: 8, 8: 6},
	"details": {1: 9, 2: 7, 3: 7, 4: 7, 8: 6},
}

# image boxes (width, height) in points by image role and density tier
IMAGE_SIZES = {
	"product": {1: (120, 160), 2: (100, 140), 3: (80, 120), 4: (60, 90), 8: (30, 45)},
	"barcode": {1: (100, 30), 2: (80, 25), 3: (70, 20), 4: (60, 18), 8: (40, 12)},
	"internals": {1: (70, 95), 2: (50, 70), 3: (40, 60), 4: (30, 45), 8: (20, 30)},
}

# character budgets by layout key and field
TRUNCATION_LIMITS = {
	"1": {"description": 1000, "authorBio": 752},
	"2": {"description": 997},
	"2-int": {"description": 997},
	"3-mixed": {"description": 1397},
	"3-standalone": {"description": 997},
	"4": {"description": 947},
	"8": {"description": 997},
}

SEVERITY_MILD_MAX = 25.0
SEVERITY_MODERATE_MAX = 50.0
WORD_BREAK_MIN_INDEX = 40
ELLIPSIS = "…"

EAN13_PAYLOAD_DIGITS = 12
EAN13_DIGITS = 13

DEFAULT_WEBSITE_NAME = "www.woodslane.com.au"
DEFAULT_BANNER_COLOR = "#F7981D"
DEFAULT_FONT_REGULAR = "Helvetica"
DEFAULT_FONT_BOLD = "Helvetica-Bold"
DEFAULT_FONT_ITALIC = "Helvetica-Oblique"
DEFAULT_LEFT_MARGIN = 36.0
DEFAULT_TOP_MARGIN = 36.0
DEFAULT_GUTTER = 12.0
DEFAULT_CELL_PADDING = 6.0
BANNER_HEIGHT = 22.0
BANNER_TEXT_SIZE = 12.0
FALLBACK_TEXT_SIZE = 6.0
WARNING_MARK_SIZE = 7.0
PROGRESS_BAR_WIDTH = 20
PROGRESS_UPDATE_EVERY = 10
COVER_IMAGE_SUFFIXES = (".jpg", ".jpeg", ".png")


@dataclasses.dataclass
class ProofConfig:
	left_margin: float
	top_margin: float
	gutter: float
	cell_padding: float
	banner_color: str
	draw_outlines: bool
	show_warnings: bool
	image_dir: str | None
	title: str


@dataclasses.dataclass
class ProofResult:
	pages: int
	placed_items: int
	empty_slots: int
	barcodes_drawn: int
	barcode_fallbacks: int
	images_drawn: int
	flagged_cells: int


#============================================
def inches_to_points(value: float) -> float:
	"""
	Convert inches to points.

	Args:
		value: Inches value.

	Returns:
		Points value.
	"""
	return value * POINTS_PER_INCH
