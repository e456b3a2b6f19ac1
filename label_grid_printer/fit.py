"""
Best-fit orientation and centering inside a fixed rectangle.
"""

# Standard Library
import dataclasses


@dataclasses.dataclass(frozen=True)
class FitResult:
	rotated: bool
	scale: float
	draw_width: float
	draw_height: float
	offset_x: float
	offset_y: float


#============================================
def compute_scales(
	source_width: float,
	source_height: float,
	target_width: float,
	target_height: float,
) -> tuple[float, float]:
	"""
	Compute the scale factors for both orientations.

	Args:
		source_width: Source width in pixels.
		source_height: Source height in pixels.
		target_width: Target width.
		target_height: Target height.

	Returns:
		Tuple of (normal scale, rotated scale).
	"""
	scale_normal = min(target_width / source_width, target_height / source_height)
	scale_rotated = min(target_width / source_height, target_height / source_width)
	return (scale_normal, scale_rotated)


#============================================
def plan_fit(
	source_width: float,
	source_height: float,
	target_width: float,
	target_height: float,
) -> FitResult:
	"""
	Choose the orientation that fills more of the target and center it.

	A tie keeps the unrotated orientation. This only plans the geometry;
	rotating pixel data happens elsewhere.

	Args:
		source_width: Source width in pixels.
		source_height: Source height in pixels.
		target_width: Target width.
		target_height: Target height.

	Returns:
		FitResult.
	"""
	for name, value in (
		("source_width", source_width),
		("source_height", source_height),
		("target_width", target_width),
		("target_height", target_height),
	):
		if not value > 0:
			raise ValueError(f"{name} must be positive, got {value!r}")

	scale_normal, scale_rotated = compute_scales(
		source_width,
		source_height,
		target_width,
		target_height,
	)
	rotated = scale_rotated > scale_normal
	if rotated:
		scale = scale_rotated
		oriented_width = source_height
		oriented_height = source_width
	else:
		scale = scale_normal
		oriented_width = source_width
		oriented_height = source_height

	# min() can land a hair above the target through float error
	draw_width = min(oriented_width * scale, target_width)
	draw_height = min(oriented_height * scale, target_height)
	offset_x = (target_width - draw_width) / 2.0
	offset_y = (target_height - draw_height) / 2.0

	return FitResult(
		rotated=rotated,
		scale=scale,
		draw_width=draw_width,
		draw_height=draw_height,
		offset_x=offset_x,
		offset_y=offset_y,
	)
