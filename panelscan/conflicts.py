"""Naming conflict detection and alias assignment for discovered resources.

The detector runs four independent passes and concatenates their output in a
fixed order: duplicate names, generic names, naming conventions, package
duplicates. Every grouping pass iterates its group keys in sorted order so
diagnostics come out identical from one run to the next.

Aliases come from :func:`build_alias_map`. The template data builder calls the
very same function, so an alias proposed in a conflict suggestion is exactly
the alias that ends up in the generated module.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Sequence, Tuple

from .ast_parse import GENERIC_NAMES, RESOURCE_SUFFIX
from .model import Conflict, ConflictType, ResourceMetadata, Severity


logger = logging.getLogger(__name__)

Key = Tuple[str, str]


def title_case(package_name: str) -> str:
	return "".join(part.capitalize() for part in package_name.split("_"))


def base_alias(resource: ResourceMetadata) -> str:
	return f"{resource.package_name.lower()}_{resource.type_name.lower()}"


def build_alias_map(resources: Iterable[ResourceMetadata]) -> Dict[Key, str]:
	"""Assign every distinct (package, type) key a unique alias.

	Keys are visited in sorted order. A key keeps its base alias unless another
	key already holds it; otherwise it gets the first ``<base>_<n>`` that is
	neither assigned nor some other key's base alias.
	"""
	bases: Dict[Key, str] = {}
	for r in resources:
		bases.setdefault(r.key, base_alias(r))
	natural = set(bases.values())

	aliases: Dict[Key, str] = {}
	used: set = set()
	for key in sorted(bases):
		base = bases[key]
		candidate = base
		counter = 0
		while candidate in used or (counter and candidate in natural):
			counter += 1
			candidate = f"{base}_{counter}"
		aliases[key] = candidate
		used.add(candidate)
	return aliases


def generate_alias(resource: ResourceMetadata, resources: Sequence[ResourceMetadata]) -> str:
	return build_alias_map([*resources, resource])[resource.key]


def _group_by(resources: Iterable[ResourceMetadata], attr: str) -> Dict[str, List[ResourceMetadata]]:
	grouped: Dict[str, List[ResourceMetadata]] = defaultdict(list)
	for r in resources:
		grouped[getattr(r, attr)].append(r)
	return grouped


class Detector:
	"""Finds naming conflicts in a complete set of discovered declarations."""

	def __init__(self, resources: Sequence[ResourceMetadata], suffix: str = RESOURCE_SUFFIX):
		self.resources = list(resources)
		self.suffix = suffix
		self._aliases = build_alias_map(self.resources)

	def alias_for(self, resource: ResourceMetadata) -> str:
		return self._aliases[resource.key]

	def detect(self) -> List[Conflict]:
		conflicts: List[Conflict] = []
		conflicts.extend(self.detect_duplicate_names())
		conflicts.extend(self.detect_generic_names())
		conflicts.extend(self.detect_naming_conventions())
		conflicts.extend(self.detect_package_conflicts())
		logger.debug("detected %d conflicts among %d declarations", len(conflicts), len(self.resources))
		return conflicts

	def detect_duplicate_names(self) -> List[Conflict]:
		conflicts: List[Conflict] = []
		grouped = _group_by(self.resources, "type_name")
		for type_name in sorted(grouped):
			members = grouped[type_name]
			packages = {r.package_name for r in members}
			# same-package repeats are reported by detect_package_conflicts
			if len(packages) < 2:
				continue
			fixes = [
				f"{r.package_name}.{r.type_name} → {self.alias_for(r)}.{r.type_name}" for r in members
			]
			conflicts.append(
				Conflict(
					type=ConflictType.DUPLICATE_NAME,
					severity=Severity.ERROR,
					message=f"Duplicate type name '{type_name}' found {len(members)} times in {len(packages)} packages",
					suggestion=(
						"Rename types to be unique across all packages"
						f"\nAuto-fix aliases: {', '.join(fixes)}"
					),
					resources=members,
					auto_fix=True,
				)
			)
		return conflicts

	def detect_generic_names(self) -> List[Conflict]:
		conflicts: List[Conflict] = []
		for r in self.resources:
			if r.type_name not in GENERIC_NAMES:
				continue
			conflicts.append(
				Conflict(
					type=ConflictType.GENERIC_NAME,
					severity=Severity.WARNING,
					message=f"Generic type name '{r.type_name}' should be more specific",
					suggestion=f"Rename '{r.type_name}' to '{title_case(r.package_name)}{r.type_name}'",
					resources=[r],
					auto_fix=True,
				)
			)
		return conflicts

	def detect_naming_conventions(self) -> List[Conflict]:
		conflicts: List[Conflict] = []
		for r in self.resources:
			expected = f"{title_case(r.package_name)}{self.suffix}"
			if r.type_name == expected:
				continue
			conflicts.append(
				Conflict(
					type=ConflictType.NAMING_CONVENTION,
					severity=Severity.INFO,
					message=f"Type '{r.type_name}' doesn't follow naming convention",
					suggestion=f"Consider renaming to '{expected}' for consistency",
					resources=[r],
					auto_fix=False,
				)
			)
		return conflicts

	def detect_package_conflicts(self) -> List[Conflict]:
		conflicts: List[Conflict] = []
		grouped = _group_by(self.resources, "package_name")
		for package_name in sorted(grouped):
			members = grouped[package_name]
			type_names = [r.type_name for r in members]
			if len(set(type_names)) == len(type_names):
				continue
			conflicts.append(
				Conflict(
					type=ConflictType.PACKAGE_CONFLICT,
					severity=Severity.ERROR,
					message=f"Multiple resources with same name in package '{package_name}'",
					suggestion="Rename resources to be unique within their package",
					resources=members,
					auto_fix=False,
				)
			)
		return conflicts


def detect(resources: Sequence[ResourceMetadata], suffix: str = RESOURCE_SUFFIX) -> List[Conflict]:
	return Detector(resources, suffix=suffix).detect()


def filter_by_severity(conflicts: Iterable[Conflict], severity: Severity) -> List[Conflict]:
	return [c for c in conflicts if c.severity == severity]


def has_errors(conflicts: Iterable[Conflict]) -> bool:
	return any(c.severity == Severity.ERROR for c in conflicts)


def has_warnings(conflicts: Iterable[Conflict]) -> bool:
	return any(c.severity == Severity.WARNING for c in conflicts)


def get_auto_fixable(conflicts: Iterable[Conflict]) -> List[Conflict]:
	return [c for c in conflicts if c.auto_fix]


def duplicate_name_keys(conflicts: Iterable[Conflict]) -> List[Key]:
	"""Keys that must be aliased: members of auto-fixable duplicate-name conflicts."""
	keys: List[Key] = []
	for c in conflicts:
		if c.type != ConflictType.DUPLICATE_NAME or not c.auto_fix:
			continue
		for r in c.resources:
			if r.key not in keys:
				keys.append(r.key)
	return keys


def group_by_package(resources: Iterable[ResourceMetadata]) -> Dict[str, List[ResourceMetadata]]:
	grouped = _group_by(resources, "package_name")
	return {pkg: grouped[pkg] for pkg in sorted(grouped)}


def filter_by_package(resources: Iterable[ResourceMetadata], package_name: str) -> List[ResourceMetadata]:
	return [r for r in resources if r.package_name == package_name]


def extract_type_names(resources: Iterable[ResourceMetadata]) -> List[str]:
	return [r.type_name for r in resources]


def extract_slugs(resources: Iterable[ResourceMetadata]) -> List[str]:
	return [r.slug for r in resources]
