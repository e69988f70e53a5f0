from textwrap import dedent

import pytest

from panelscan.ast_parse import (
	extract_slug,
	is_resource_candidate,
	page_slug,
	parse_declarations,
	parse_pages,
	parse_resources,
	read_source,
)
from panelscan.errors import ScanError
from panelscan.model import PageMetadata


def test_parse_simple_module(tmp_path):
	code = dedent(
		"""
		import os
		from base import Base

		class UserResource(Base):
			def fields(self):
				class NestedResource:
					pass
				return []

		class _PrivateResource:
			pass

		class Entity:
			pass

		class Helper:
			pass

		def ProductResource():
			return None
		"""
	)
	p = tmp_path / "user.py"
	p.write_text(code)
	found = parse_resources("users", str(p), p.read_text())
	assert [r.type_name for r in found] == ["UserResource", "Entity"]
	assert all(r.package_name == "users" for r in found)
	assert found[0].file_path == str(p)
	assert found[0].slug == "users"
	assert found[1].slug == "entities"


@pytest.mark.parametrize(
	"type_name, slug",
	[
		("CompanyResource", "companies"),
		("StatusResource", "statuses"),
		("BoxResource", "boxes"),
		("UserResource", "users"),
		("BranchResource", "branches"),
		("WishResource", "wishes"),
		("AddressResource", "addresses"),
		("CampusResource", "campuses"),
		("NewsResource", "news"),
	],
)
def test_extract_slug(type_name, slug):
	assert extract_slug(type_name) == slug


def test_generic_names_are_candidates():
	for name in ("Resource", "Entity", "Model", "Item", "Object"):
		assert is_resource_candidate(name)
	assert not is_resource_candidate("Objects")
	assert not is_resource_candidate("ResourceManager")


def test_custom_predicate():
	text = "class Widget:\n\tpass\nclass Gadget:\n\tpass\n"
	found = parse_declarations("tools", "tools.py", text, predicate=lambda n: n.startswith("W"))
	assert [r.type_name for r in found] == ["Widget"]


def test_parse_pages():
	text = "class SettingsPage:\n\tpass\nclass UserResource:\n\tpass\n"
	found = parse_pages("settings", "settings/page.py", text)
	assert len(found) == 1
	assert isinstance(found[0], PageMetadata)
	assert found[0].slug == "settings"
	assert page_slug("DashboardPage") == "dashboard"


def test_syntax_error_names_the_file():
	with pytest.raises(ScanError) as excinfo:
		parse_resources("broken", "broken/bad.py", "class Broken(:\n\tpass\n")
	assert excinfo.value.path == "broken/bad.py"
	assert "broken/bad.py" in str(excinfo.value)


def test_bom_and_coding_cookie_are_honoured(tmp_path):
	bom = tmp_path / "bom.py"
	bom.write_bytes(b"\xef\xbb\xbfclass BomResource:\n\tpass\n")
	latin = tmp_path / "latin.py"
	latin.write_bytes(b"# -*- coding: latin-1 -*-\n# caf\xe9\nclass CafeResource:\n\tpass\n")

	assert [r.type_name for r in parse_resources("bom", str(bom), read_source(str(bom)))] == ["BomResource"]
	assert [r.type_name for r in parse_resources("latin", str(latin), read_source(str(latin)))] == ["CafeResource"]
