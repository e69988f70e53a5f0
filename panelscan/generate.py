from __future__ import annotations

import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template, TemplateError

from .config import ScannerConfig, default_config
from .conflicts import filter_by_severity
from .errors import GenerationError
from .model import GenerationResult, Severity, TemplateData


logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_DIR = Path(__file__).with_name("templates")
DEFAULT_TEMPLATE_NAME = "registry.py.j2"


def load_template(template_path: Optional[str] = None) -> Template:
	if template_path:
		directory, name = os.path.split(os.path.abspath(template_path))
	else:
		directory, name = str(DEFAULT_TEMPLATE_DIR), DEFAULT_TEMPLATE_NAME
	env = Environment(
		loader=FileSystemLoader(directory),
		autoescape=False,
		trim_blocks=True,
		lstrip_blocks=True,
		keep_trailing_newline=True,
		undefined=StrictUndefined,
	)
	try:
		return env.get_template(name)
	except TemplateError as e:
		raise GenerationError(f"cannot load template {template_path or name}: {e}") from e


def render(data: TemplateData, template_path: Optional[str] = None) -> str:
	template = load_template(template_path)
	try:
		return template.render(**data.model_dump(mode="python"))
	except TemplateError as e:
		raise GenerationError(f"template render failed: {e}") from e


def _current_umask() -> int:
	mask = os.umask(0)
	os.umask(mask)
	return mask


def write_atomic(path: str, content: str) -> int:
	"""Write ``content`` to ``path`` via a temp file so readers never see half a file."""
	payload = content.encode("utf-8")
	directory = os.path.dirname(os.path.abspath(path))
	try:
		os.makedirs(directory, exist_ok=True)
		fd, tmp_path = tempfile.mkstemp(prefix=".panelscan-", suffix=".tmp", dir=directory)
		try:
			with os.fdopen(fd, "wb") as fh:
				fh.write(payload)
			os.chmod(tmp_path, 0o666 & ~_current_umask())
			os.replace(tmp_path, path)
		except BaseException:
			if os.path.exists(tmp_path):
				os.unlink(tmp_path)
			raise
	except OSError as e:
		raise GenerationError(f"failed to write {path}: {e}") from e
	return len(payload)


class Generator:
	"""Renders TemplateData into the registration module."""

	def __init__(self, config: Optional[ScannerConfig] = None):
		self.config = config or default_config()

	def _result(self, start: float, data: TemplateData, **fields) -> GenerationResult:
		fields.setdefault("file_path", self.config.output_path)
		return GenerationResult(
			warnings=data.warnings,
			conflicts=data.conflicts,
			duration=time.monotonic() - start,
			**fields,
		)

	def generate(self, data: TemplateData) -> GenerationResult:
		start = time.monotonic()
		config = self.config
		errors = filter_by_severity(data.conflicts, Severity.ERROR)

		# A dry run never writes, so strict mode only annotates it.
		if config.strict_mode and errors and not config.dry_run:
			logger.error("strict mode: refusing to generate with %d error conflict(s)", len(errors))
			return self._result(
				start,
				data,
				success=False,
				message=f"Strict mode: {len(errors)} blocking conflict(s), nothing written",
			)

		try:
			content = render(data, config.template_path)
		except GenerationError as e:
			logger.error("%s", e)
			return self._result(start, data, success=False, message=str(e))

		if config.dry_run:
			logger.info("dry run: rendered %d bytes for %s", len(content.encode("utf-8")), config.output_path)
			message = f"Dry run: {data.count} resources rendered, nothing written"
			if config.strict_mode and errors:
				message += f" (strict mode would block on {len(errors)} conflict(s))"
			return self._result(start, data, success=True, message=message, content=content)

		try:
			written = write_atomic(config.output_path, content)
		except GenerationError as e:
			logger.error("%s", e)
			return self._result(start, data, success=False, message=str(e), content=content)

		if config.verbose:
			logger.info("wrote %s (%d bytes)", config.output_path, written)
		return self._result(
			start,
			data,
			success=True,
			message=f"Generated {config.output_path} with {data.count} resources",
			bytes_written=written,
			content=content,
		)
