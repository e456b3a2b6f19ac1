import pathlib

import PIL.Image
import pytest

import label_grid_printer.assets
import label_grid_printer.config
import label_grid_printer.fit
import label_grid_printer.grid

import test_asset_validator


LabelRequest = label_grid_printer.config.LabelRequest
PlacementPlan = label_grid_printer.grid.PlacementPlan
ErrorPlan = label_grid_printer.grid.ErrorPlan
SLOT_ORIGINS = label_grid_printer.config.SLOT_ORIGINS


#============================================
def _make_base(tmp_path: pathlib.Path) -> pathlib.Path:
	"""
	Create a base directory with a square PNG and a wide JPEG.

	Args:
		tmp_path: Pytest temp directory.

	Returns:
		Base directory path.
	"""
	base = tmp_path / "images"
	(base / "sub").mkdir(parents=True)
	PIL.Image.new("RGB", (500, 500), (0, 0, 0)).save(base / "label.png", format="PNG")
	PIL.Image.new("RGB", (1000, 200), (0, 0, 0)).save(base / "sub" / "wide.jpg", format="JPEG")
	(base / "notes.txt").write_text("hello", encoding="utf-8")
	return base


#============================================
def test_single_square_png_plan(tmp_path: pathlib.Path) -> None:
	"""
	A 500x500 PNG at top-left fills the slot width, centered vertically.
	"""
	base = _make_base(tmp_path)
	plans = label_grid_printer.grid.build_plan(LabelRequest(top_left="label.png"), str(base))
	assert len(plans) == 1
	position, plan = plans[0]
	assert position == "top-left"
	assert isinstance(plan, PlacementPlan)
	assert plan.rotated is False
	assert plan.draw_width == pytest.approx(101.6)
	assert plan.draw_height == pytest.approx(101.6)
	assert plan.offset_x == pytest.approx(0.0)
	assert plan.offset_y == pytest.approx((127.0 - 101.6) / 2.0)
	assert (plan.slot_x, plan.slot_y) == SLOT_ORIGINS["top-left"]
	assert (plan.slot_width, plan.slot_height) == (101.6, 127.0)
	assert plan.source_path == str((base / "label.png").resolve())


#============================================
def test_traversal_request_yields_no_plan(tmp_path: pathlib.Path) -> None:
	"""
	An escaping path produces no plan and no error entry.
	"""
	base = _make_base(tmp_path)
	request = LabelRequest(top_left="../../etc/passwd")
	assert label_grid_printer.grid.build_plan(request, str(base)) == []


#============================================
def test_traversal_request_never_touches_filesystem(tmp_path: pathlib.Path, monkeypatch) -> None:
	"""
	A rejected path is never handed to the validator.
	"""
	base = _make_base(tmp_path)
	calls = []

	def fake_validate(path: str):
		calls.append(path)
		raise AssertionError("validator should not run")

	monkeypatch.setattr(label_grid_printer.assets, "validate_asset", fake_validate)
	request = LabelRequest(top_left="../../etc/passwd", bottom_left="/etc/passwd")
	assert label_grid_printer.grid.build_plan(request, str(base)) == []
	assert calls == []


#============================================
def test_missing_file_yields_not_found_error_plan(tmp_path: pathlib.Path) -> None:
	"""
	A safe path to a missing file yields a NotFound error plan at the slot.
	"""
	base = _make_base(tmp_path)
	plans = label_grid_printer.grid.build_plan(LabelRequest(top_left="missing.png"), str(base))
	assert len(plans) == 1
	position, plan = plans[0]
	assert position == "top-left"
	assert isinstance(plan, ErrorPlan)
	assert plan.reason == "NotFound"
	assert plan.message == "File not found"
	assert (plan.slot_x, plan.slot_y) == SLOT_ORIGINS["top-left"]
	assert (plan.slot_width, plan.slot_height) == (101.6, 127.0)


#============================================
def test_invalid_format_error_plan(tmp_path: pathlib.Path) -> None:
	"""
	A non-image file yields an InvalidFormat error plan.
	"""
	base = _make_base(tmp_path)
	plans = label_grid_printer.grid.build_plan(LabelRequest(bottom_right="notes.txt"), str(base))
	assert plans[0][0] == "bottom-right"
	assert plans[0][1].reason == "InvalidFormat"
	assert (plans[0][1].slot_x, plans[0][1].slot_y) == SLOT_ORIGINS["bottom-right"]


#============================================
def test_missing_position_is_a_no_op(tmp_path: pathlib.Path) -> None:
	"""
	A position without a value produces no entry at all.
	"""
	base = _make_base(tmp_path)
	request = LabelRequest(top_left="label.png", top_right="label.png", bottom_left="label.png")
	plans = label_grid_printer.grid.build_plan(request, str(base))
	positions = [position for position, _plan in plans]
	assert positions == ["top-left", "top-right", "bottom-left"]
	assert "bottom-right" not in positions


#============================================
def test_positions_are_emitted_in_fixed_order(tmp_path: pathlib.Path) -> None:
	"""
	Plans follow top-left, top-right, bottom-left, bottom-right.
	"""
	base = _make_base(tmp_path)
	request = LabelRequest.from_mapping(
		{
			"bottom-right": "label.png",
			"bottom-left": "missing.png",
			"top-right": "sub/wide.jpg",
			"top-left": "label.png",
		}
	)
	plans = label_grid_printer.grid.build_plan(request, str(base))
	assert [position for position, _plan in plans] == list(label_grid_printer.config.POSITIONS)
	assert isinstance(plans[2][1], ErrorPlan)


#============================================
def test_wide_image_is_planned_rotated(tmp_path: pathlib.Path) -> None:
	"""
	A landscape image is rotated to fill the portrait slot.
	"""
	base = _make_base(tmp_path)
	plans = label_grid_printer.grid.build_plan(LabelRequest(top_right="sub/wide.jpg"), str(base))
	_position, plan = plans[0]
	assert plan.rotated is True
	assert plan.draw_width <= plan.slot_width
	assert plan.draw_height <= plan.slot_height
	assert plan.draw_height == pytest.approx(127.0)
	assert plan.offset_x == pytest.approx((plan.slot_width - plan.draw_width) / 2.0)


#============================================
def test_mixed_request_degrades_slot_by_slot(tmp_path: pathlib.Path) -> None:
	"""
	Rejected, missing and valid values coexist without aborting the plan.
	"""
	base = _make_base(tmp_path)
	request = LabelRequest(
		top_left="../outside.png",
		top_right="missing.png",
		bottom_left="label.png",
		bottom_right="   ",
	)
	plans = label_grid_printer.grid.build_plan(request, str(base))
	assert [position for position, _plan in plans] == ["top-right", "bottom-left"]
	assert isinstance(plans[0][1], ErrorPlan)
	assert isinstance(plans[1][1], PlacementPlan)


#============================================
def test_missing_base_directory_skips_everything(tmp_path: pathlib.Path) -> None:
	"""
	A missing base directory makes every resolution fail.
	"""
	request = LabelRequest(top_left="label.png", bottom_right="label.png")
	assert label_grid_printer.grid.build_plan(request, str(tmp_path / "nope")) == []


#============================================
def test_fit_failure_becomes_processing_error(tmp_path: pathlib.Path, monkeypatch) -> None:
	"""
	A geometry failure turns into a ProcessingError plan for that slot.
	"""
	base = _make_base(tmp_path)

	def broken_fit(*args):
		raise ValueError("bad geometry")

	monkeypatch.setattr(label_grid_printer.fit, "plan_fit", broken_fit)
	plans = label_grid_printer.grid.build_plan(LabelRequest(top_left="label.png"), str(base))
	assert plans[0][1].reason == "ProcessingError"
	assert plans[0][1].message == "PROCESSING ERROR"


#============================================
def test_custom_slot_geometry(tmp_path: pathlib.Path) -> None:
	"""
	Slot size and origins passed in are used for the plan.
	"""
	base = _make_base(tmp_path)
	origins = {position: (10.0, 20.0) for position in label_grid_printer.config.POSITIONS}
	plans = label_grid_printer.grid.build_plan(
		LabelRequest(top_left="label.png"),
		str(base),
		slot_width=50.0,
		slot_height=80.0,
		slot_origins=origins,
	)
	plan = plans[0][1]
	assert (plan.slot_x, plan.slot_y) == (10.0, 20.0)
	assert plan.draw_width == pytest.approx(50.0)
	assert plan.offset_y == pytest.approx(15.0)


#============================================
def test_verbose_reports_rejected_paths(tmp_path: pathlib.Path, capsys) -> None:
	"""
	Verbose planning prints rejected paths.
	"""
	base = _make_base(tmp_path)
	label_grid_printer.grid.build_plan(LabelRequest(top_left="../x.png"), str(base), verbose=True)
	captured = capsys.readouterr()
	assert "Rejected path for top-left" in captured.out


#============================================
def test_request_from_query() -> None:
	"""
	Query strings map onto the fixed positions.
	"""
	request = label_grid_printer.grid.request_from_query(
		"?top-left=a.png&bottom-right=dir%2Fb.jpg&top-left=second.png&other=x&top-right="
	)
	assert request.get("top-left") == "a.png"
	assert request.get("bottom-right") == "dir/b.jpg"
	assert request.get("top-right") is None
	assert request.get("bottom-left") is None


#============================================
def test_oversized_image_does_not_abort_other_slots(tmp_path: pathlib.Path) -> None:
	"""
	An image over Pillow's pixel limit fails its own slot only.
	"""
	base = _make_base(tmp_path)
	test_asset_validator.write_oversized_png(base / "huge.png", 20000, 20000)
	plans = label_grid_printer.grid.build_plan(
		LabelRequest(top_left="huge.png", top_right="label.png"),
		str(base),
	)
	assert [position for position, _plan in plans] == ["top-left", "top-right"]
	assert isinstance(plans[0][1], ErrorPlan)
	assert plans[0][1].reason == "InvalidFormat"
	assert isinstance(plans[1][1], PlacementPlan)
