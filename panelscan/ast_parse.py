from __future__ import annotations

import ast
from typing import Callable, List, Type, Union

from .errors import ScanError
from .model import PageMetadata, ResourceMetadata


CandidatePredicate = Callable[[str], bool]
Slugger = Callable[[str], str]
Source = Union[str, bytes]

RESOURCE_SUFFIX = "Resource"
PAGE_SUFFIX = "Page"

# Matched like any other candidate; the detector flags them afterwards.
GENERIC_NAMES = ("Resource", "Entity", "Model", "Item", "Object")


def is_resource_candidate(name: str) -> bool:
	return name.endswith(RESOURCE_SUFFIX) or name in GENERIC_NAMES


def is_page_candidate(name: str) -> bool:
	return name.endswith(PAGE_SUFFIX)


def pluralize(word: str) -> str:
	if word.endswith("y"):
		return word[:-1] + "ies"
	# singular nouns ending in s still take "es"
	if word.endswith(("us", "ss", "x", "ch", "sh")):
		return word + "es"
	if word.endswith("s"):
		return word
	return word + "s"


def extract_slug(type_name: str, suffix: str = RESOURCE_SUFFIX) -> str:
	name = type_name[: -len(suffix)] if suffix and type_name.endswith(suffix) else type_name
	return pluralize(name.lower())


def page_slug(type_name: str) -> str:
	name = type_name[: -len(PAGE_SUFFIX)] if type_name.endswith(PAGE_SUFFIX) else type_name
	return name.lower()


def _is_exported(name: str) -> bool:
	return not name.startswith("_")


def parse_tree(path: str, text: Source) -> ast.Module:
	try:
		return ast.parse(text, filename=path)
	except (SyntaxError, ValueError) as e:
		raise ScanError(path, f"failed to parse file: {e}") from e


def parse_declarations(
	package_name: str,
	path: str,
	text: Source,
	predicate: CandidatePredicate = is_resource_candidate,
	slugger: Slugger = extract_slug,
	record_type: Type[ResourceMetadata] = ResourceMetadata,
) -> List[ResourceMetadata]:
	"""Collect top-level exported classes accepted by ``predicate``."""
	tree = parse_tree(path, text)
	found: List[ResourceMetadata] = []
	for node in tree.body:
		if not isinstance(node, ast.ClassDef):
			continue
		if not _is_exported(node.name) or not predicate(node.name):
			continue
		found.append(
			record_type(
				type_name=node.name,
				package_name=package_name,
				file_path=path,
				slug=slugger(node.name),
			)
		)
	return found


def parse_resources(package_name: str, path: str, text: Source) -> List[ResourceMetadata]:
	return parse_declarations(package_name, path, text)


def parse_pages(package_name: str, path: str, text: Source) -> List[ResourceMetadata]:
	return parse_declarations(
		package_name,
		path,
		text,
		predicate=is_page_candidate,
		slugger=page_slug,
		record_type=PageMetadata,
	)


def read_source(path: str) -> bytes:
	"""Raw file bytes; ``ast.parse`` honours a BOM or coding cookie itself."""
	try:
		with open(path, "rb") as fh:
			return fh.read()
	except OSError as e:
		raise ScanError(path, e) from e
