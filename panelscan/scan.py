from __future__ import annotations

import logging
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Tuple

from .ast_parse import PAGE_SUFFIX, RESOURCE_SUFFIX, Source, parse_pages, parse_resources, read_source
from .build import build_template_data
from .config import ScannerConfig, default_config
from .conflicts import Detector, has_errors
from .errors import ScanCancelled, ScanError
from .fs_scan import iter_source_files, package_name_for
from .generate import Generator
from .model import GenerationResult, ResourceMetadata, ScanResult


logger = logging.getLogger(__name__)

FileParser = Callable[[str, str, Source], List[ResourceMetadata]]


class Scanner:
	"""Discovers resources and pages under the configured roots."""

	def __init__(self, config: Optional[ScannerConfig] = None):
		self.config = config or default_config()

	def _check_cancel(self, cancel: Optional[threading.Event], path: str) -> None:
		if cancel is not None and cancel.is_set():
			raise ScanCancelled(path)

	def _scan_file(self, root: str, path: str, parse: FileParser, cancel: Optional[threading.Event]) -> List[ResourceMetadata]:
		self._check_cancel(cancel, path)
		text = read_source(path)
		found = parse(package_name_for(root, path), path, text)
		if self.config.verbose:
			logger.info("scanned %s: %d match(es)", path, len(found))
		return found

	def scan_root(
		self,
		root: str,
		parse: FileParser = parse_resources,
		cancel: Optional[threading.Event] = None,
	) -> List[ResourceMetadata]:
		"""Parse every source file under ``root``; any failure aborts the lot."""
		paths: List[str] = []
		for path in iter_source_files(root, self.config.exclude_patterns):
			self._check_cancel(cancel, path)
			paths.append(path)
		logger.debug("found %d source files under %s", len(paths), root)

		if self.config.workers <= 1 or len(paths) <= 1:
			per_file = [self._scan_file(root, p, parse, cancel) for p in paths]
		else:
			with ThreadPoolExecutor(max_workers=self.config.workers) as pool:
				try:
					# map() yields in submission order, keeping output independent of scheduling
					per_file = list(pool.map(lambda p: self._scan_file(root, p, parse, cancel), paths))
				except BaseException:
					pool.shutdown(wait=True, cancel_futures=True)
					raise

		found: List[ResourceMetadata] = []
		for items in per_file:
			found.extend(items)
		return found

	def scan(self, cancel: Optional[threading.Event] = None) -> ScanResult:
		start = time.monotonic()
		config = self.config
		try:
			resources = self.scan_root(config.resources_path, parse_resources, cancel)
			pages: List[ResourceMetadata] = []
			if config.pages_path and os.path.isdir(config.pages_path):
				pages = self.scan_root(config.pages_path, parse_pages, cancel)
			elif config.pages_path:
				logger.debug("pages path %s does not exist, skipping", config.pages_path)
		except ScanError as e:
			logger.error("scan failed: %s", e)
			return ScanResult(
				success=False,
				message=f"Scan failed: {e}",
				duration=time.monotonic() - start,
			)

		conflicts = Detector(resources, suffix=RESOURCE_SUFFIX).detect()
		page_conflicts = Detector(pages, suffix=PAGE_SUFFIX).detect()

		if config.strict_mode and has_errors([*conflicts, *page_conflicts]):
			logger.error("strict mode: blocking errors detected")
			return ScanResult(
				resources=resources,
				pages=pages,
				conflicts=conflicts,
				page_conflicts=page_conflicts,
				success=False,
				message="Strict mode: blocking errors detected",
				duration=time.monotonic() - start,
			)

		message = f"Scanned {len(resources)} resources"
		if pages:
			message += f" and {len(pages)} pages"
		total = len(conflicts) + len(page_conflicts)
		if total:
			message += f" ({total} conflicts detected)"
		logger.info(message)

		return ScanResult(
			resources=resources,
			pages=pages,
			conflicts=conflicts,
			page_conflicts=page_conflicts,
			success=True,
			message=message,
			duration=time.monotonic() - start,
		)

	def scan_and_generate(self, cancel: Optional[threading.Event] = None) -> Tuple[ScanResult, GenerationResult]:
		result = self.scan(cancel=cancel)
		if not result.success:
			return result, GenerationResult(
				file_path=self.config.output_path,
				success=False,
				message=result.message,
				conflicts=result.all_conflicts,
			)
		data = build_template_data(result, self.config)
		return result, Generator(self.config).generate(data)
