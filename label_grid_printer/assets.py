"""
Image asset validation and non-destructive orientation.
"""

# Standard Library
import dataclasses
import io
import pathlib

# PIP3 modules
import PIL.Image
import reportlab.lib.utils

# local repo modules
import label_grid_printer as lgp
import label_grid_printer.config


ALLOWED_FORMATS = lgp.config.ALLOWED_FORMATS
FORMAT_ALIASES = lgp.config.FORMAT_ALIASES
ERROR_MESSAGES = lgp.config.ERROR_MESSAGES
REASON_NOT_FOUND = lgp.config.REASON_NOT_FOUND
REASON_INVALID_FORMAT = lgp.config.REASON_INVALID_FORMAT
REASON_UNSUPPORTED_TYPE = lgp.config.REASON_UNSUPPORTED_TYPE


@dataclasses.dataclass
class ResolvedAsset:
	absolute_path: str
	pixel_width: int
	pixel_height: int
	format: str


@dataclasses.dataclass
class AssetError:
	reason: str
	message: str


#============================================
def build_asset_error(reason: str) -> AssetError:
	"""
	Build an AssetError with its in-document message.
	"""
	return AssetError(reason=reason, message=ERROR_MESSAGES[reason])


#============================================
def validate_asset(path: str) -> ResolvedAsset | AssetError:
	"""
	Confirm a resolved path is a supported raster image.

	The format is detected from file content, not the extension.

	Args:
		path: Canonical absolute path.

	Returns:
		ResolvedAsset on success, AssetError otherwise.
	"""
	file_path = pathlib.Path(path)
	if not file_path.is_file():
		return build_asset_error(REASON_NOT_FOUND)

	try:
		with PIL.Image.open(file_path) as image:
			image_format = image.format
			width, height = image.size
	except FileNotFoundError:
		return build_asset_error(REASON_NOT_FOUND)
	except (PIL.Image.DecompressionBombError, PIL.UnidentifiedImageError, OSError, ValueError):
		return build_asset_error(REASON_INVALID_FORMAT)

	if width <= 0 or height <= 0:
		return build_asset_error(REASON_INVALID_FORMAT)
	image_format = FORMAT_ALIASES.get(image_format, image_format)
	if image_format not in ALLOWED_FORMATS:
		return build_asset_error(REASON_UNSUPPORTED_TYPE)

	return ResolvedAsset(
		absolute_path=str(file_path),
		pixel_width=width,
		pixel_height=height,
		format=image_format,
	)


#============================================
def to_drawable_mode(image: PIL.Image.Image) -> PIL.Image.Image:
	"""
	Convert palette, bilevel and other modes into one reportlab draws directly.
	"""
	if image.mode in ("L", "RGB", "RGBA"):
		return image.copy()
	return image.convert("RGBA")


#============================================
def rotate_image_bytes(path: str) -> io.BytesIO:
	"""
	Rotate an image 90 degrees clockwise into a new PNG byte stream.

	The source file is only read.

	Args:
		path: Image path.

	Returns:
		Buffer positioned at the start of the rotated PNG.
	"""
	with PIL.Image.open(path) as image:
		image.load()
		rotated = to_drawable_mode(image).transpose(PIL.Image.Transpose.ROTATE_270)
	buffer = io.BytesIO()
	rotated.save(buffer, format="PNG")
	buffer.seek(0)
	return buffer


#============================================
def load_oriented_image(path: str, rotated: bool) -> reportlab.lib.utils.ImageReader:
	"""
	Load an image for drawing, rotated when the plan asks for it.

	Args:
		path: Image path.
		rotated: Whether to rotate 90 degrees clockwise.

	Returns:
		ImageReader instance.
	"""
	if rotated:
		return reportlab.lib.utils.ImageReader(rotate_image_bytes(path))
	with PIL.Image.open(path) as image:
		image.load()
		drawable = to_drawable_mode(image)
	return reportlab.lib.utils.ImageReader(drawable)
