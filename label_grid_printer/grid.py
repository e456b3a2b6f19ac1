"""
Per-slot placement planning for the 2x2 label sheet.
"""

# Standard Library
import dataclasses
import urllib.parse

# local repo modules
import label_grid_printer as lgp
import label_grid_printer.assets
import label_grid_printer.config
import label_grid_printer.fit
import label_grid_printer.paths


LabelRequest = lgp.config.LabelRequest
AssetError = lgp.assets.AssetError

POSITIONS = lgp.config.POSITIONS
SLOT_ORIGINS = lgp.config.SLOT_ORIGINS
LABEL_WIDTH = lgp.config.LABEL_WIDTH
LABEL_HEIGHT = lgp.config.LABEL_HEIGHT
ERROR_MESSAGES = lgp.config.ERROR_MESSAGES
REASON_PROCESSING_ERROR = lgp.config.REASON_PROCESSING_ERROR


@dataclasses.dataclass
class PlacementPlan:
	position: str
	slot_x: float
	slot_y: float
	slot_width: float
	slot_height: float
	rotated: bool
	draw_width: float
	draw_height: float
	offset_x: float
	offset_y: float
	source_path: str


@dataclasses.dataclass
class ErrorPlan:
	position: str
	slot_x: float
	slot_y: float
	slot_width: float
	slot_height: float
	reason: str
	message: str


#============================================
def build_error_plan(
	position: str,
	slot_x: float,
	slot_y: float,
	slot_width: float,
	slot_height: float,
	reason: str,
) -> ErrorPlan:
	"""
	Build an error plan covering a whole slot.
	"""
	return ErrorPlan(
		position=position,
		slot_x=slot_x,
		slot_y=slot_y,
		slot_width=slot_width,
		slot_height=slot_height,
		reason=reason,
		message=ERROR_MESSAGES[reason],
	)


#============================================
def request_from_query(query: str) -> LabelRequest:
	"""
	Parse a URL query string into a label request.

	Args:
		query: Query string like "top-left=a.png&bottom-right=b.jpg".

	Returns:
		LabelRequest using the first value given for each position.
	"""
	query = (query or "").lstrip("?")
	parsed = urllib.parse.parse_qs(query, keep_blank_values=True)
	mapping = {}
	for position in POSITIONS:
		values = parsed.get(position)
		if values:
			mapping[position] = values[0]
	return LabelRequest.from_mapping(mapping)


#============================================
def plan_slot(
	position: str,
	raw_value: str,
	base_directory: str,
	slot_x: float,
	slot_y: float,
	slot_width: float,
	slot_height: float,
	verbose: bool = False,
) -> PlacementPlan | ErrorPlan | None:
	"""
	Plan one occupied slot.

	Args:
		position: Position name.
		raw_value: Untrusted relative path.
		base_directory: Configured base directory.
		slot_x: Slot left edge in mm.
		slot_y: Slot top edge in mm.
		slot_width: Slot width in mm.
		slot_height: Slot height in mm.
		verbose: Print rejected paths.

	Returns:
		PlacementPlan, ErrorPlan, or None for a rejected path.
	"""
	resolved_path = lgp.paths.resolve_asset_path(raw_value, base_directory)
	if resolved_path is None:
		if verbose:
			print(f"Rejected path for {position}: {raw_value!r}")
		return None

	asset = lgp.assets.validate_asset(resolved_path)
	if isinstance(asset, AssetError):
		return build_error_plan(
			position,
			slot_x,
			slot_y,
			slot_width,
			slot_height,
			asset.reason,
		)

	try:
		fit = lgp.fit.plan_fit(
			asset.pixel_width,
			asset.pixel_height,
			slot_width,
			slot_height,
		)
	except ValueError:
		return build_error_plan(
			position,
			slot_x,
			slot_y,
			slot_width,
			slot_height,
			REASON_PROCESSING_ERROR,
		)

	return PlacementPlan(
		position=position,
		slot_x=slot_x,
		slot_y=slot_y,
		slot_width=slot_width,
		slot_height=slot_height,
		rotated=fit.rotated,
		draw_width=fit.draw_width,
		draw_height=fit.draw_height,
		offset_x=fit.offset_x,
		offset_y=fit.offset_y,
		source_path=asset.absolute_path,
	)


#============================================
def build_plan(
	request: LabelRequest,
	base_directory: str,
	slot_width: float = LABEL_WIDTH,
	slot_height: float = LABEL_HEIGHT,
	slot_origins: dict[str, tuple[float, float]] | None = None,
	verbose: bool = False,
) -> list[tuple[str, PlacementPlan | ErrorPlan]]:
	"""
	Build placement plans for every occupied position.

	Positions are visited in the fixed order top-left, top-right,
	bottom-left, bottom-right. Missing values and rejected paths produce
	no entry at all.

	Args:
		request: Label request.
		base_directory: Configured base directory.
		slot_width: Slot width in mm.
		slot_height: Slot height in mm.
		slot_origins: Slot top-left corners by position.
		verbose: Print rejected paths.

	Returns:
		List of (position, plan) tuples.
	"""
	if slot_origins is None:
		slot_origins = SLOT_ORIGINS
	plans: list[tuple[str, PlacementPlan | ErrorPlan]] = []
	for position in POSITIONS:
		raw_value = request.get(position)
		if raw_value is None:
			continue
		slot_x, slot_y = slot_origins[position]
		plan = plan_slot(
			position,
			raw_value,
			base_directory,
			slot_x,
			slot_y,
			slot_width,
			slot_height,
			verbose=verbose,
		)
		if plan is None:
			continue
		plans.append((position, plan))
	return plans
