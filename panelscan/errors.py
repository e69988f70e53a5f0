from __future__ import annotations


class PanelScanError(Exception):
	"""Base class for every error raised by the scanner pipeline."""


class ConfigError(PanelScanError):
	pass


class ScanError(PanelScanError):
	"""Walk, read or parse failure. Always aborts the whole scan."""

	def __init__(self, path: str, reason: object):
		self.path = path
		self.reason = reason
		super().__init__(f"failed to scan {path}: {reason}")


class ScanCancelled(ScanError):
	def __init__(self, path: str):
		super().__init__(path, "scan cancelled")


class GenerationError(PanelScanError):
	"""Template render or file write failure."""
