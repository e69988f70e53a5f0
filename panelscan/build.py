from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .config import ScannerConfig, default_config
from .conflicts import build_alias_map, duplicate_name_keys
from .fs_scan import package_import_path
from .model import (
	Conflict,
	ImportInfo,
	PageInfo,
	ResourceInfo,
	ResourceMetadata,
	ScanResult,
	Severity,
	TemplateData,
)


logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def generation_time() -> datetime:
	epoch = os.environ.get("SOURCE_DATE_EPOCH")
	if epoch:
		try:
			return datetime.fromtimestamp(int(epoch), tz=timezone.utc)
		except ValueError:
			logger.warning("ignoring invalid SOURCE_DATE_EPOCH=%r", epoch)
	return datetime.now()


def extract_warnings(conflicts: Iterable[Conflict]) -> List[str]:
	return [c.message for c in conflicts if c.severity in (Severity.WARNING, Severity.INFO)]


def _claim(claimed: Dict[str, str], path: str, wanted: str, fallback: str) -> str:
	"""Bind ``path`` to a module-level name no other import path holds."""
	for candidate in (wanted, fallback):
		if claimed.setdefault(candidate, path) == path:
			return candidate
	counter = 1
	while True:
		candidate = f"{fallback}_{counter}"
		if claimed.setdefault(candidate, path) == path:
			return candidate
		counter += 1


def build_references(
	items: Sequence[ResourceMetadata],
	conflicts: Sequence[Conflict],
	root: str,
	import_root: Optional[str],
	apply_aliases: bool = True,
	claimed: Optional[Dict[str, str]] = None,
	info_type: type = ResourceInfo,
) -> Tuple[List[ImportInfo], List[ResourceInfo]]:
	"""Project one bucket of declarations into imports and references.

	Only keys from auto-fixable duplicate-name conflicts are aliased. ``claimed``
	maps binding names to import paths and is shared between buckets so that
	two different packages are never bound under the same name.
	"""
	if claimed is None:
		claimed = {}
	alias_map = build_alias_map(items)

	ref_alias: Dict[Tuple[str, str], str] = {}
	pkg_alias: Dict[str, str] = {}
	if apply_aliases:
		for key in duplicate_name_keys(conflicts):
			ref_alias[key] = alias_map[key]
			pkg_alias[key[0]] = alias_map[key]

	imports: Dict[str, ImportInfo] = {}
	infos: List[ResourceInfo] = []
	for r in items:
		path = package_import_path(root, r.file_path, import_root)
		alias = ref_alias.get(r.key, "")
		if alias:
			qualifier = alias = _claim(claimed, path, alias, alias)
		else:
			qualifier = _claim(claimed, path, r.package_name, alias_map[r.key])
			if qualifier != r.package_name:
				alias = qualifier
				logger.debug("package %s rebound as %s to avoid a name clash", path, qualifier)

		imp = imports.get(path)
		if imp is None:
			imp_alias = pkg_alias.get(r.package_name, "")
			imp = ImportInfo(path=path, alias=imp_alias, needs_alias=bool(imp_alias), package=r.package_name)
			imports[path] = imp
		if qualifier not in imp.bindings:
			imp.bindings.append(qualifier)
		if not imp.needs_alias and qualifier != imp.package:
			imp.alias = qualifier
			imp.needs_alias = True

		infos.append(
			info_type(
				reference=f"{qualifier}.{r.type_name}",
				source=r.file_path,
				alias=alias,
				conflict=bool(alias),
			)
		)
	return list(imports.values()), infos


def build_template_data(
	result: ScanResult,
	config: Optional[ScannerConfig] = None,
	now: Optional[datetime] = None,
) -> TemplateData:
	config = config or default_config()
	now = now or generation_time()

	claimed: Dict[str, str] = {}
	imports, resources = build_references(
		result.resources,
		result.conflicts,
		config.resources_path,
		config.import_root,
		apply_aliases=config.auto_fix,
		claimed=claimed,
	)
	page_imports, pages = build_references(
		result.pages,
		result.page_conflicts,
		config.pages_path or "",
		config.pages_import_root,
		apply_aliases=config.auto_fix,
		claimed=claimed,
		info_type=PageInfo,
	)

	return TemplateData(
		timestamp=now.strftime(TIMESTAMP_FORMAT),
		count=len(result.resources),
		page_count=len(result.pages),
		imports=imports,
		page_imports=page_imports,
		resources=resources,
		pages=pages,
		warnings=extract_warnings(result.all_conflicts),
		conflicts=result.all_conflicts,
		generated=now,
	)
