from __future__ import annotations

import os
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from panelscan.build import build_template_data
from panelscan.config import DEFAULT_EXCLUDE_PATTERNS, ScannerConfig
from panelscan.generate import Generator
from panelscan.model import GenerationResult, ScanResult
from panelscan.scan import Scanner


app = FastAPI(title="Panelscan Preview")


class ScanRequest(BaseModel):
	resources_path: str
	pages_path: Optional[str] = None
	exclude_patterns: List[str] = list(DEFAULT_EXCLUDE_PATTERNS)
	strict_mode: bool = False


class PreviewRequest(ScanRequest):
	import_root: Optional[str] = None
	template_path: Optional[str] = None
	auto_fix: bool = True


def _config(req: ScanRequest, **extra) -> ScannerConfig:
	root = os.path.abspath(req.resources_path)
	if not os.path.isdir(root):
		raise HTTPException(status_code=400, detail=f"Invalid resources_path: {root}")
	return ScannerConfig(
		resources_path=req.resources_path,
		pages_path=req.pages_path,
		exclude_patterns=req.exclude_patterns,
		strict_mode=req.strict_mode,
		**extra,
	)


@app.post("/scan", response_model=ScanResult)
def scan(req: ScanRequest) -> ScanResult:
	return Scanner(_config(req)).scan()


@app.post("/preview", response_model=GenerationResult)
def preview(req: PreviewRequest) -> GenerationResult:
	config = _config(
		req,
		import_root=req.import_root,
		template_path=req.template_path,
		auto_fix=req.auto_fix,
		dry_run=True,
	)
	result = Scanner(config).scan()
	if not result.success:
		raise HTTPException(status_code=422, detail=result.message)
	return Generator(config).generate(build_template_data(result, config))


def create_app() -> FastAPI:
	return app
