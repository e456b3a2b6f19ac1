"""
Sandboxed resolution of untrusted image paths.
"""

# Standard Library
import pathlib
import re


SEPARATOR = "/"
DRIVE_PATTERN = re.compile(r"^[A-Za-z]:")
SEGMENT_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")


#============================================
def resolve_configured_base(setting: str, anchor: str) -> str:
	"""
	Apply the base directory setting rules.

	An empty setting means the anchor directory, an absolute setting is
	used as-is and a relative one is joined to the anchor.

	Args:
		setting: Configured base directory.
		anchor: Directory that relative settings hang off.

	Returns:
		Base directory path (not yet canonical).
	"""
	setting = (setting or "").strip()
	if not setting:
		return anchor
	path = pathlib.Path(setting).expanduser()
	if path.is_absolute():
		return str(path)
	return str(pathlib.Path(anchor) / path)


#============================================
def canonicalize_base_directory(base_directory: str) -> pathlib.Path | None:
	"""
	Canonicalize the base directory through the filesystem.

	Args:
		base_directory: Configured base directory.

	Returns:
		Canonical directory path, or None when missing or not a directory.
	"""
	if not base_directory or "\0" in base_directory:
		return None
	try:
		base = pathlib.Path(base_directory).expanduser().resolve(strict=True)
	except (OSError, RuntimeError):
		return None
	if not base.is_dir():
		return None
	return base


#============================================
def split_safe_segments(raw_path: str) -> list[str] | None:
	"""
	Canonicalize an untrusted relative path into accepted segments.

	Segments are walked left to right on a stack. A ".." with nothing
	left to pop rejects the whole input instead of clamping to the root.

	Args:
		raw_path: Untrusted relative path.

	Returns:
		List of segments, or None when the input is rejected.
	"""
	if raw_path is None:
		return None
	value = raw_path.strip()
	if not value:
		return None
	if "\0" in value:
		return None
	value = value.replace("\\", SEPARATOR)
	if value.startswith(SEPARATOR):
		return None
	if DRIVE_PATTERN.match(value):
		return None

	stack: list[str] = []
	for part in value.split(SEPARATOR):
		if part in ("", "."):
			continue
		if part == "..":
			if not stack:
				return None
			stack.pop()
			continue
		if not SEGMENT_PATTERN.match(part):
			return None
		stack.append(part)
	return stack


#============================================
def resolve_asset_path(raw_path: str, base_directory: str) -> str | None:
	"""
	Resolve an untrusted relative path to a canonical path inside the base.

	The final path is resolved through the filesystem (symlinks followed)
	and must sit strictly below the canonical base directory.

	Args:
		raw_path: Untrusted relative path.
		base_directory: Configured base directory.

	Returns:
		Canonical absolute path string, or None when rejected.
	"""
	segments = split_safe_segments(raw_path)
	if segments is None:
		return None
	base = canonicalize_base_directory(base_directory)
	if base is None:
		return None
	if not segments:
		# the base directory itself is never an asset
		return None

	candidate = base.joinpath(*segments)
	try:
		resolved = candidate.resolve()
	except (OSError, RuntimeError):
		return None
	if resolved == base or not resolved.is_relative_to(base):
		return None
	return str(resolved)
