from __future__ import annotations

import logging
import os
from typing import Any, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .errors import ConfigError


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "panelscan.yaml"

DEFAULT_EXCLUDE_PATTERNS: List[str] = ["test_*.py", "*_test.py", "*_gen.py", "conftest.py"]


def path_to_import_root(path: str) -> str:
	"""Turn a relative directory like ``app/resources`` into ``app.resources``."""
	norm = os.path.normpath(path)
	if os.path.isabs(norm) or norm in (".", ""):
		return ""
	return ".".join(part.replace("-", "_") for part in norm.split(os.sep) if part not in ("", "."))


class ScannerConfig(BaseModel):
	model_config = ConfigDict(frozen=True, extra="forbid")

	resources_path: str = "app/resources"
	pages_path: Optional[str] = "app/pages"
	output_path: str = "app/registry/registry_gen.py"
	template_path: Optional[str] = None
	import_root: Optional[str] = None
	pages_import_root: Optional[str] = None
	strict_mode: bool = False
	auto_fix: bool = True
	verbose: bool = False
	dry_run: bool = False
	exclude_patterns: List[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))
	workers: int = Field(default=1, ge=1)

	@model_validator(mode="after")
	def _derive_import_roots(self) -> "ScannerConfig":
		# frozen model: go through object.__setattr__ for derived defaults
		if self.import_root is None:
			object.__setattr__(self, "import_root", path_to_import_root(self.resources_path))
		if self.pages_import_root is None and self.pages_path:
			object.__setattr__(self, "pages_import_root", path_to_import_root(self.pages_path))
		return self


def default_config() -> ScannerConfig:
	return ScannerConfig()


def _read_yaml(path: str) -> dict:
	try:
		with open(path, "r", encoding="utf-8") as fh:
			data = yaml.safe_load(fh) or {}
	except OSError as e:
		raise ConfigError(f"cannot read config {path}: {e}") from e
	except yaml.YAMLError as e:
		raise ConfigError(f"invalid YAML in {path}: {e}") from e
	if not isinstance(data, dict):
		raise ConfigError(f"config {path} must contain a mapping, got {type(data).__name__}")
	return data


def load_config(path: Optional[str] = None, **overrides: Any) -> ScannerConfig:
	"""Load a ScannerConfig from YAML and apply overrides.

	When ``path`` is None, ``panelscan.yaml`` in the working directory is used
	if it exists. Overrides whose value is None are ignored, so argparse
	defaults can be passed straight through.
	"""
	data: dict = {}
	if path is not None:
		data = _read_yaml(path)
	elif os.path.isfile(DEFAULT_CONFIG_FILE):
		path = DEFAULT_CONFIG_FILE
		data = _read_yaml(path)

	for key, value in overrides.items():
		if value is not None:
			data[key] = value

	try:
		config = ScannerConfig(**data)
	except ValidationError as e:
		raise ConfigError(f"invalid configuration{f' in {path}' if path else ''}: {e}") from e

	if path:
		logger.debug("loaded configuration from %s", path)
	return config
