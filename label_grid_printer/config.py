"""
Shared configuration and constants.
"""

import dataclasses


POINTS_PER_INCH = 72.0
MM_PER_INCH = 25.4

PAGE_WIDTH = 215.9
PAGE_HEIGHT = 279.4

LABEL_WIDTH = 101.6
LABEL_HEIGHT = 127.0
COLUMNS = 2
ROWS = 2

LEFT_MARGIN = 4.0
TOP_MARGIN = 12.0
BOTTOM_MARGIN = 12.0
COLUMN_SPACING = 4.5

POSITIONS = ("top-left", "top-right", "bottom-left", "bottom-right")
POSITION_GRID = {
	"top-left": (0, 0),
	"top-right": (0, 1),
	"bottom-left": (1, 0),
	"bottom-right": (1, 1),
}

ALLOWED_FORMATS = ("JPEG", "PNG", "GIF")
# Pillow names multi-picture JPEG files MPO
FORMAT_ALIASES = {
	"MPO": "JPEG",
}

REASON_PATH_REJECTED = "PathRejected"
REASON_NOT_FOUND = "NotFound"
REASON_INVALID_FORMAT = "InvalidFormat"
REASON_UNSUPPORTED_TYPE = "UnsupportedType"
REASON_PROCESSING_ERROR = "ProcessingError"
ERROR_MESSAGES = {
	REASON_NOT_FOUND: "File not found",
	REASON_INVALID_FORMAT: "Invalid image format",
	REASON_UNSUPPORTED_TYPE: "Unsupported image type",
	REASON_PROCESSING_ERROR: "PROCESSING ERROR",
}

DEFAULT_FONT_REGULAR = "Helvetica"
ERROR_TEXT_SIZE = 40.0
ERROR_TEXT_MIN_SIZE = 6.0
ERROR_TEXT_PADDING = 2.0
OUTLINE_LINE_WIDTH = 0.3
ERROR_BOX_LINE_WIDTH = 0.6


@dataclasses.dataclass
class LabelRequest:
	top_left: str | None = None
	top_right: str | None = None
	bottom_left: str | None = None
	bottom_right: str | None = None

	def get(self, position: str) -> str | None:
		"""
		Get the raw value for a position, treating blank values as absent.

		Args:
			position: Position name like "top-left".

		Returns:
			Raw string or None.
		"""
		if position not in POSITION_GRID:
			raise KeyError(position)
		value = getattr(self, position.replace("-", "_"))
		if value is None or not value.strip():
			return None
		return value

	@classmethod
	def from_mapping(cls, mapping: dict) -> "LabelRequest":
		"""
		Build a request from a position-keyed mapping.

		Unknown keys are ignored.
		"""
		values = {}
		for position in POSITIONS:
			value = mapping.get(position)
			if value is not None:
				values[position.replace("-", "_")] = str(value)
		return cls(**values)


@dataclasses.dataclass
class SheetConfig:
	base_directory: str
	output_path: str
	draw_outlines: bool
	calibration: bool
	manifest_path: str | None
	verbose: bool


#============================================
def mm_to_points(value: float) -> float:
	"""
	Convert millimetres to points.

	Args:
		value: Millimetre value.

	Returns:
		Points value.
	"""
	return value / MM_PER_INCH * POINTS_PER_INCH


#============================================
def compute_slot_origin(row: int, col: int) -> tuple[float, float]:
	"""
	Compute the top-left corner of a label slot.

	Top labels sit TOP_MARGIN below the page edge, bottom labels sit
	BOTTOM_MARGIN above it.

	Args:
		row: Row index (0 or 1).
		col: Column index (0 or 1).

	Returns:
		Tuple of (x, y) in millimetres from the top-left page corner.
	"""
	x = LEFT_MARGIN + col * (LABEL_WIDTH + COLUMN_SPACING)
	if row == 0:
		y = TOP_MARGIN
	else:
		y = PAGE_HEIGHT - BOTTOM_MARGIN - LABEL_HEIGHT
	return (x, y)


SLOT_ORIGINS = {
	position: compute_slot_origin(row, col)
	for position, (row, col) in POSITION_GRID.items()
}
