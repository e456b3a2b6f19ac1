"""
CLI entry points for printing images onto a 2x2 letter label sheet.
"""

# Standard Library
import argparse
import os
import pathlib
import time

# local repo modules
import label_grid_printer as lgp
import label_grid_printer.config
import label_grid_printer.grid
import label_grid_printer.paths
import label_grid_printer.render


SheetConfig = lgp.config.SheetConfig
LabelRequest = lgp.config.LabelRequest
PlacementPlan = lgp.grid.PlacementPlan
ErrorPlan = lgp.grid.ErrorPlan

POSITIONS = lgp.config.POSITIONS


#============================================
def build_sheet_config(args: argparse.Namespace) -> SheetConfig:
	"""
	Build sheet config from CLI args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		SheetConfig.
	"""
	base_directory = lgp.paths.resolve_configured_base(args.base_dir, os.getcwd())
	return SheetConfig(
		base_directory=base_directory,
		output_path=args.output_path,
		draw_outlines=args.draw_outlines,
		calibration=args.calibration,
		manifest_path=args.manifest_path,
		verbose=args.verbose,
	)


#============================================
def build_request(args: argparse.Namespace) -> LabelRequest:
	"""
	Build the label request from the query string and position flags.

	Position flags override values from the query string.

	Args:
		args: Parsed argparse namespace.

	Returns:
		LabelRequest.
	"""
	request = lgp.grid.request_from_query(args.query or "")
	for position in POSITIONS:
		value = getattr(args, position.replace("-", "_"))
		if value is not None:
			setattr(request, position.replace("-", "_"), value)
	return request


#============================================
def parse_args() -> argparse.Namespace:
	"""
	Parse command line arguments.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Place up to four images on a 2x2 letter label sheet.")

	input_group = parser.add_argument_group("Input")
	for position in POSITIONS:
		input_group.add_argument(
			f"--{position}",
			dest=position.replace("-", "_"),
			default=None,
			help=f"Image path for the {position} label, relative to the base directory.",
		)
	input_group.add_argument("-q", "--query", dest="query", default=None, help="URL query string like 'top-left=a.png'.")
	input_group.add_argument("-b", "--base-dir", dest="base_dir", default="", help="Base image directory (default: current directory).")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", required=True, help="Output PDF path.")
	output_group.add_argument("-m", "--manifest", dest="manifest_path", default=None, help="Output manifest JSON path.")

	behavior_group = parser.add_argument_group("Behavior")
	behavior_group.add_argument("-d", "--draw-outlines", dest="draw_outlines", action="store_true", help="Draw label outlines.")
	behavior_group.add_argument("-D", "--no-draw-outlines", dest="draw_outlines", action="store_false", help="Disable label outlines.")
	behavior_group.add_argument("-c", "--calibration", dest="calibration", action="store_true", help="Add a calibration page.")
	behavior_group.add_argument("-C", "--no-calibration", dest="calibration", action="store_false", help="Disable calibration page.")
	behavior_group.add_argument("-v", "--verbose", dest="verbose", action="store_true", help="Report rejected paths while planning.")

	parser.set_defaults(
		draw_outlines=False,
		calibration=False,
		verbose=False,
	)

	args = parser.parse_args()
	return args


#============================================
def describe_slot(
	position: str,
	plan: PlacementPlan | ErrorPlan | None,
	base_missing: bool = False,
) -> str:
	"""
	Describe one slot outcome for the run summary.
	"""
	if plan is None:
		if base_missing:
			return f"{position}: skipped (base directory missing)"
		return f"{position}: skipped (rejected path)"
	if isinstance(plan, ErrorPlan):
		return f"{position}: error {plan.reason}"
	rotated = " rotated" if plan.rotated else ""
	return f"{position}: image {plan.draw_width:.1f}x{plan.draw_height:.1f} mm{rotated}"


#============================================
def run_pipeline(args: argparse.Namespace) -> list[PlacementPlan | ErrorPlan]:
	"""
	Run planning and rendering for one label sheet.

	Args:
		args: Parsed argparse namespace.

	Returns:
		Plans as drawn.
	"""
	config = build_sheet_config(args)
	request = build_request(args)

	print("Label grid sheet")
	print(f"Output PDF: {config.output_path}")
	print(f"Base directory: {config.base_directory}")
	base_missing = lgp.paths.canonicalize_base_directory(config.base_directory) is None
	if base_missing:
		print("Base directory not found; no images will be placed.")
	print(f"Draw outlines: {config.draw_outlines}")
	print(f"Calibration: {config.calibration}")

	start_time = time.perf_counter()
	plans = lgp.grid.build_plan(request, config.base_directory, verbose=config.verbose)
	plan_end = time.perf_counter()

	output_path = pathlib.Path(config.output_path)
	drawn = lgp.render.render_label_sheet(
		plans,
		output_path,
		draw_outlines=config.draw_outlines,
		calibration=config.calibration,
	)
	render_end = time.perf_counter()

	drawn_by_position = {plan.position: plan for plan in drawn}
	for position in POSITIONS:
		if request.get(position) is None:
			continue
		print(describe_slot(position, drawn_by_position.get(position), base_missing))

	if config.manifest_path:
		lgp.render.write_manifest(pathlib.Path(config.manifest_path), drawn, config)
		print(f"Manifest written: {config.manifest_path}")

	print(
		"Timing: plan={:.2f}s render={:.2f}s".format(
			plan_end - start_time,
			render_end - plan_end,
		)
	)
	print(f"PDF written: {output_path}")
	return drawn


#============================================
def main() -> None:
	"""
	Main entry point.
	"""
	args = parse_args()
	run_pipeline(args)
