from __future__ import annotations

import fnmatch
import os
from typing import Iterator, Optional, Sequence

from .errors import ScanError


SOURCE_SUFFIX = ".py"

IGNORED_DIRS = {".git", "node_modules", "dist", "build", "__pycache__", ".venv", ".tox"}


def is_excluded(filename: str, patterns: Sequence[str]) -> bool:
	return any(fnmatch.fnmatchcase(filename, pattern) for pattern in patterns)


def to_identifier(name: str) -> str:
	return name.replace("-", "_").replace(".", "_")


def package_name_for(root: str, file_path: str) -> str:
	"""Name of the package a file belongs to.

	That is the directory holding the file, or the file's own stem when it sits
	directly under the scan root.
	"""
	rel_dir = os.path.dirname(os.path.relpath(file_path, root))
	if rel_dir in ("", os.curdir):
		return to_identifier(os.path.splitext(os.path.basename(file_path))[0])
	return to_identifier(os.path.basename(rel_dir))


def package_import_path(root: str, file_path: str, import_root: Optional[str] = "") -> str:
	rel_path = os.path.relpath(file_path, root)
	rel_dir = os.path.dirname(rel_path)
	if rel_dir in ("", os.curdir):
		parts = [os.path.splitext(os.path.basename(rel_path))[0]]
	else:
		parts = rel_dir.split(os.sep)
	parts = [to_identifier(p) for p in parts]
	if import_root:
		parts.insert(0, import_root)
	return ".".join(parts)


def _raise_walk_error(err: OSError) -> None:
	raise ScanError(err.filename or "<unknown>", err.strerror or err)


def iter_source_files(root: str, exclude_patterns: Sequence[str] = ()) -> Iterator[str]:
	"""Yield source files under ``root`` in a stable, sorted order."""
	if not os.path.isdir(root):
		raise ScanError(root, "not a directory")

	for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
		dirnames[:] = sorted(d for d in dirnames if d not in IGNORED_DIRS)
		for filename in sorted(filenames):
			if not filename.endswith(SOURCE_SUFFIX):
				continue
			if is_excluded(filename, exclude_patterns):
				continue
			yield os.path.join(dirpath, filename)
