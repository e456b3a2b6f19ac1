"""
Rendering of placement plans onto a letter-size PDF page.
"""

# Standard Library
import dataclasses
import json
import pathlib

# PIP3 modules
import PIL.Image
import reportlab.lib.pagesizes
import reportlab.lib.utils
import reportlab.pdfbase.pdfmetrics
import reportlab.pdfgen.canvas

# local repo modules
import label_grid_printer as lgp
import label_grid_printer.assets
import label_grid_printer.config
import label_grid_printer.grid


PlacementPlan = lgp.grid.PlacementPlan
ErrorPlan = lgp.grid.ErrorPlan
SheetConfig = lgp.config.SheetConfig

mm_to_points = lgp.config.mm_to_points
POINTS_PER_INCH = lgp.config.POINTS_PER_INCH
POSITIONS = lgp.config.POSITIONS
SLOT_ORIGINS = lgp.config.SLOT_ORIGINS
LABEL_WIDTH = lgp.config.LABEL_WIDTH
LABEL_HEIGHT = lgp.config.LABEL_HEIGHT
PAGE_WIDTH = lgp.config.PAGE_WIDTH
PAGE_HEIGHT = lgp.config.PAGE_HEIGHT
DEFAULT_FONT_REGULAR = lgp.config.DEFAULT_FONT_REGULAR
ERROR_TEXT_SIZE = lgp.config.ERROR_TEXT_SIZE
ERROR_TEXT_MIN_SIZE = lgp.config.ERROR_TEXT_MIN_SIZE
ERROR_TEXT_PADDING = lgp.config.ERROR_TEXT_PADDING
OUTLINE_LINE_WIDTH = lgp.config.OUTLINE_LINE_WIDTH
ERROR_BOX_LINE_WIDTH = lgp.config.ERROR_BOX_LINE_WIDTH
REASON_PROCESSING_ERROR = lgp.config.REASON_PROCESSING_ERROR

DrawItem = tuple[PlacementPlan | ErrorPlan, reportlab.lib.utils.ImageReader | None]


#============================================
def to_pdf_rect(x: float, y: float, width: float, height: float) -> tuple[float, float, float, float]:
	"""
	Convert a top-left millimetre rectangle into PDF point space.

	Args:
		x: Left edge in mm.
		y: Top edge in mm from the top of the page.
		width: Width in mm.
		height: Height in mm.

	Returns:
		Tuple of (x, y, width, height) in points, bottom-left origin.
	"""
	page_height = reportlab.lib.pagesizes.letter[1]
	pdf_x = mm_to_points(x)
	pdf_y = page_height - mm_to_points(y + height)
	return (pdf_x, pdf_y, mm_to_points(width), mm_to_points(height))


#============================================
def realize_plans(
	plans: list[tuple[str, PlacementPlan | ErrorPlan]],
) -> list[DrawItem]:
	"""
	Load image data for each plan, rotating where planned.

	A slot whose image cannot be decoded or rotated becomes a
	ProcessingError plan.

	Args:
		plans: Output of grid.build_plan.

	Returns:
		List of (plan, ImageReader or None) pairs.
	"""
	items: list[DrawItem] = []
	for position, plan in plans:
		if isinstance(plan, ErrorPlan):
			items.append((plan, None))
			continue
		try:
			image_reader = lgp.assets.load_oriented_image(plan.source_path, plan.rotated)
		except (PIL.Image.DecompressionBombError, PIL.UnidentifiedImageError, OSError, ValueError):
			error_plan = lgp.grid.build_error_plan(
				position,
				plan.slot_x,
				plan.slot_y,
				plan.slot_width,
				plan.slot_height,
				REASON_PROCESSING_ERROR,
			)
			items.append((error_plan, None))
			continue
		items.append((plan, image_reader))
	return items


#============================================
def fit_font_size(text: str, font_name: str, max_width: float) -> float:
	"""
	Shrink the error font until the text fits the available width.

	Args:
		text: Message text.
		font_name: ReportLab font name.
		max_width: Available width in points.

	Returns:
		Font size in points.
	"""
	font_size = ERROR_TEXT_SIZE
	width = reportlab.pdfbase.pdfmetrics.stringWidth(text, font_name, font_size)
	if width > max_width and width > 0:
		font_size = font_size * max_width / width
	return max(ERROR_TEXT_MIN_SIZE, font_size)


#============================================
def draw_image_plan(
	pdf: reportlab.pdfgen.canvas.Canvas,
	plan: PlacementPlan,
	image_reader: reportlab.lib.utils.ImageReader,
) -> None:
	"""
	Draw a planned image.

	Args:
		pdf: ReportLab canvas.
		plan: Placement plan.
		image_reader: Oriented image.
	"""
	image_x, image_y, image_width, image_height = to_pdf_rect(
		plan.slot_x + plan.offset_x,
		plan.slot_y + plan.offset_y,
		plan.draw_width,
		plan.draw_height,
	)
	pdf.drawImage(
		image_reader,
		image_x,
		image_y,
		width=image_width,
		height=image_height,
		mask="auto",
		preserveAspectRatio=False,
		anchor="sw",
	)


#============================================
def draw_error_plan(pdf: reportlab.pdfgen.canvas.Canvas, plan: ErrorPlan) -> None:
	"""
	Draw an error box with its message centered in the slot.

	Args:
		pdf: ReportLab canvas.
		plan: Error plan.
	"""
	box_x, box_y, box_width, box_height = to_pdf_rect(
		plan.slot_x,
		plan.slot_y,
		plan.slot_width,
		plan.slot_height,
	)
	pdf.setStrokeColorRGB(0.0, 0.0, 0.0)
	pdf.setLineWidth(ERROR_BOX_LINE_WIDTH)
	pdf.rect(box_x, box_y, box_width, box_height, stroke=1, fill=0)

	available = box_width - 2.0 * mm_to_points(ERROR_TEXT_PADDING)
	font_size = fit_font_size(plan.message, DEFAULT_FONT_REGULAR, available)
	pdf.setFont(DEFAULT_FONT_REGULAR, font_size)
	pdf.setFillColorRGB(0.0, 0.0, 0.0)
	center_x = box_x + box_width / 2.0
	baseline_y = box_y + box_height / 2.0 - font_size * 0.35
	pdf.drawCentredString(center_x, baseline_y, plan.message)


#============================================
def draw_label_outlines(pdf: reportlab.pdfgen.canvas.Canvas) -> None:
	"""
	Draw the four slot outlines on the current page.

	Args:
		pdf: ReportLab canvas.
	"""
	pdf.setLineWidth(OUTLINE_LINE_WIDTH)
	pdf.setStrokeColorRGB(0.7, 0.7, 0.7)
	for position in POSITIONS:
		slot_x, slot_y = SLOT_ORIGINS[position]
		rect = to_pdf_rect(slot_x, slot_y, LABEL_WIDTH, LABEL_HEIGHT)
		pdf.rect(rect[0], rect[1], rect[2], rect[3], stroke=1, fill=0)


#============================================
def draw_calibration_page(pdf: reportlab.pdfgen.canvas.Canvas) -> None:
	"""
	Draw slot outlines, center crosshairs and a 1 inch ruler mark.

	Args:
		pdf: ReportLab canvas.
	"""
	draw_label_outlines(pdf)

	pdf.setLineWidth(0.6)
	pdf.setStrokeColorRGB(0.0, 0.0, 0.0)
	for position in POSITIONS:
		slot_x, slot_y = SLOT_ORIGINS[position]
		cell_x, cell_y, cell_width, cell_height = to_pdf_rect(
			slot_x,
			slot_y,
			LABEL_WIDTH,
			LABEL_HEIGHT,
		)
		center_x = cell_x + cell_width / 2.0
		center_y = cell_y + cell_height / 2.0
		size = 6.0
		pdf.line(center_x - size, center_y, center_x + size, center_y)
		pdf.line(center_x, center_y - size, center_x, center_y + size)

	first_x, first_y = SLOT_ORIGINS[POSITIONS[0]]
	ruler_x = mm_to_points(first_x)
	ruler_y = reportlab.lib.pagesizes.letter[1] - mm_to_points(first_y) + 10.0
	pdf.line(ruler_x, ruler_y, ruler_x + POINTS_PER_INCH, ruler_y)
	pdf.setFont(DEFAULT_FONT_REGULAR, 8)
	pdf.setFillColorRGB(0.0, 0.0, 0.0)
	pdf.drawString(ruler_x, ruler_y + 4.0, "1 in")


#============================================
def render_label_sheet(
	plans: list[tuple[str, PlacementPlan | ErrorPlan]],
	output_path: pathlib.Path,
	draw_outlines: bool = False,
	calibration: bool = False,
) -> list[PlacementPlan | ErrorPlan]:
	"""
	Render plans onto a single letter page.

	The document is always written, even when every slot failed.

	Args:
		plans: Output of grid.build_plan.
		output_path: Output PDF path.
		draw_outlines: Draw slot outlines.
		calibration: Add a calibration page before the labels.

	Returns:
		Final plans as drawn, after processing failures were applied.
	"""
	page_width, page_height = reportlab.lib.pagesizes.letter
	pdf = reportlab.pdfgen.canvas.Canvas(str(output_path), pagesize=(page_width, page_height))

	if calibration:
		draw_calibration_page(pdf)
		pdf.showPage()

	if draw_outlines:
		draw_label_outlines(pdf)

	drawn: list[PlacementPlan | ErrorPlan] = []
	for plan, image_reader in realize_plans(plans):
		if image_reader is None:
			draw_error_plan(pdf, plan)
		else:
			draw_image_plan(pdf, plan, image_reader)
		drawn.append(plan)

	pdf.showPage()
	pdf.save()
	return drawn


#============================================
def plan_to_dict(plan: PlacementPlan | ErrorPlan) -> dict:
	"""
	Convert a plan into a JSON-friendly dict.
	"""
	data = dataclasses.asdict(plan)
	if isinstance(plan, ErrorPlan):
		data["kind"] = "error"
	else:
		data["kind"] = "image"
	return data


#============================================
def write_manifest(
	manifest_path: pathlib.Path,
	plans: list[PlacementPlan | ErrorPlan],
	config: SheetConfig,
) -> None:
	"""
	Write a manifest JSON file.

	Args:
		manifest_path: Output path.
		plans: Plans as drawn.
		config: Sheet configuration.
	"""
	data = {
		"output": config.output_path,
		"base_directory": config.base_directory,
		"plans": [plan_to_dict(plan) for plan in plans],
		"layout": {
			"page_width": PAGE_WIDTH,
			"page_height": PAGE_HEIGHT,
			"label_width": LABEL_WIDTH,
			"label_height": LABEL_HEIGHT,
			"slot_origins": {
				position: list(SLOT_ORIGINS[position]) for position in POSITIONS
			},
			"draw_outlines": config.draw_outlines,
			"calibration": config.calibration,
		},
		"fonts": {
			"regular": DEFAULT_FONT_REGULAR,
		},
	}
	with manifest_path.open("w", encoding="utf-8") as handle:
		json.dump(data, handle, indent=2, sort_keys=True)
