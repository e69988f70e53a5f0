from datetime import datetime

from panelscan.build import build_template_data, extract_warnings
from panelscan.conflicts import detect
from panelscan.model import ConflictType, PageMetadata, ResourceMetadata, ScanResult


FIXED = datetime(2026, 1, 2, 3, 4, 5)


def meta(root, package, type_name, filename="resource.py"):
	return ResourceMetadata(
		type_name=type_name,
		package_name=package,
		file_path=str(root / package / filename),
		slug="x",
	)


def scan_result(resources, pages=()):
	return ScanResult(
		resources=resources,
		pages=list(pages),
		conflicts=detect(resources),
		page_conflicts=detect(list(pages), suffix="Page"),
		success=True,
		message="ok",
	)


def test_duplicates_are_aliased(tmp_path, make_config):
	root = tmp_path / "resources"
	resources = [meta(root, "shop", "ProductResource"), meta(root, "shop2", "ProductResource")]
	data = build_template_data(scan_result(resources), make_config(root), now=FIXED)

	assert data.timestamp == "2026-01-02 03:04:05"
	assert data.count == 2
	assert [r.reference for r in data.resources] == [
		"shop_productresource.ProductResource",
		"shop2_productresource.ProductResource",
	]
	assert all(r.conflict for r in data.resources)
	assert [(i.path, i.alias, i.needs_alias, i.bindings) for i in data.imports] == [
		("app.resources.shop", "shop_productresource", True, ["shop_productresource"]),
		("app.resources.shop2", "shop2_productresource", True, ["shop2_productresource"]),
	]


def test_imports_are_deduplicated_in_first_seen_order(tmp_path, make_config):
	root = tmp_path / "resources"
	resources = [
		meta(root, "users", "UsersResource", "a.py"),
		meta(root, "billing", "BillingResource"),
		meta(root, "users", "AdminResource", "b.py"),
	]
	data = build_template_data(scan_result(resources), make_config(root), now=FIXED)
	assert [i.package for i in data.imports] == ["users", "billing"]
	assert [r.reference for r in data.resources] == [
		"users.UsersResource",
		"billing.BillingResource",
		"users.AdminResource",
	]
	assert not any(r.conflict for r in data.resources)
	assert [r.source for r in data.resources] == [r.file_path for r in resources]


def test_mixed_package_binds_alias_and_plain_name(tmp_path, make_config):
	root = tmp_path / "resources"
	resources = [
		meta(root, "shop", "ProductResource"),
		meta(root, "shop", "ShopResource"),
		meta(root, "shop2", "ProductResource"),
	]
	data = build_template_data(scan_result(resources), make_config(root), now=FIXED)
	shop = data.imports[0]
	assert shop.bindings == ["shop_productresource", "shop"]
	assert data.resources[1].reference == "shop.ShopResource"


def test_only_duplicate_name_conflicts_alias(tmp_path, make_config):
	root = tmp_path / "resources"
	resources = [meta(root, "a", "Resource"), meta(root, "shop", "ProductResource", "a.py"), meta(root, "shop", "ProductResource", "b.py")]
	result = scan_result(resources)
	types = {c.type for c in result.conflicts}
	assert ConflictType.GENERIC_NAME in types and ConflictType.PACKAGE_CONFLICT in types

	data = build_template_data(result, make_config(root), now=FIXED)
	assert [r.reference for r in data.resources] == ["a.Resource", "shop.ProductResource", "shop.ProductResource"]
	assert not any(r.conflict for r in data.resources)


def test_auto_fix_disabled_keeps_plain_names(tmp_path, make_config):
	root = tmp_path / "resources"
	resources = [meta(root, "shop", "ProductResource"), meta(root, "shop2", "ProductResource")]
	data = build_template_data(scan_result(resources), make_config(root, auto_fix=False), now=FIXED)
	assert [r.reference for r in data.resources] == ["shop.ProductResource", "shop2.ProductResource"]


def test_warnings_exclude_errors(tmp_path, make_config):
	root = tmp_path / "resources"
	resources = [meta(root, "a", "Resource"), meta(root, "b", "Resource")]
	result = scan_result(resources)
	warnings = extract_warnings(result.conflicts)
	assert warnings == [
		"Generic type name 'Resource' should be more specific",
		"Generic type name 'Resource' should be more specific",
		"Type 'Resource' doesn't follow naming convention",
		"Type 'Resource' doesn't follow naming convention",
	]
	data = build_template_data(result, make_config(root), now=FIXED)
	assert data.warnings == warnings
	assert len(data.conflicts) == len(result.conflicts)


def test_page_package_clashing_with_resource_package_is_rebound(tmp_path, make_config):
	root = tmp_path / "resources"
	pages_root = tmp_path / "pages"
	resources = [meta(root, "settings", "SettingsResource")]
	pages = [
		PageMetadata(
			type_name="SettingsPage",
			package_name="settings",
			file_path=str(pages_root / "settings" / "page.py"),
			slug="settings",
		)
	]
	config = make_config(root, pages_path=str(pages_root), pages_import_root="app.pages")
	data = build_template_data(scan_result(resources, pages), config, now=FIXED)
	assert data.resources[0].reference == "settings.SettingsResource"
	assert data.page_imports[0].path == "app.pages.settings"
	assert data.page_imports[0].bindings == ["settings_settingspage"]
	assert data.pages[0].reference == "settings_settingspage.SettingsPage"
	assert data.pages[0].conflict
	assert data.page_count == 1


def test_source_date_epoch(tmp_path, make_config, monkeypatch):
	monkeypatch.setenv("SOURCE_DATE_EPOCH", "0")
	data = build_template_data(scan_result([]), make_config(tmp_path))
	assert data.timestamp == "1970-01-01 00:00:00"
