from __future__ import annotations

from pathlib import Path
from textwrap import dedent
from typing import Dict

import pytest

from panelscan.config import ScannerConfig


def write_tree(root: Path, files: Dict[str, str]) -> Path:
	for rel, text in files.items():
		path = root / rel
		path.parent.mkdir(parents=True, exist_ok=True)
		path.write_text(dedent(text), encoding="utf-8")
	return root


@pytest.fixture
def make_tree(tmp_path):
	def _make(files: Dict[str, str], name: str = "resources") -> Path:
		return write_tree(tmp_path / name, files)

	return _make


@pytest.fixture
def shop_tree(make_tree):
	return make_tree(
		{
			"shop/product.py": """
				class ProductResource:
					pass
			""",
			"shop2/product.py": """
				class ProductResource:
					pass
			""",
		}
	)


@pytest.fixture
def make_config(tmp_path):
	def _make(root: Path, **fields) -> ScannerConfig:
		fields.setdefault("pages_path", None)
		fields.setdefault("import_root", "app.resources")
		fields.setdefault("output_path", str(tmp_path / "out" / "registry_gen.py"))
		return ScannerConfig(resources_path=str(root), **fields)

	return _make
