from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

import uvicorn

from panelscan.build import build_template_data
from panelscan.config import ScannerConfig, load_config
from panelscan.errors import ConfigError
from panelscan.generate import Generator
from panelscan.report import summarize_generation, summarize_scan
from panelscan.scan import Scanner


def configure_logging(verbose: bool) -> None:
	logging.basicConfig(
		level=logging.INFO if verbose else logging.WARNING,
		format="%(levelname)s %(name)s: %(message)s",
	)


def config_from_args(args: argparse.Namespace) -> ScannerConfig:
	return load_config(
		args.config,
		resources_path=args.resources,
		pages_path=args.pages,
		exclude_patterns=args.exclude,
		strict_mode=True if args.strict else None,
		verbose=True if args.verbose else None,
		workers=args.workers,
		output_path=getattr(args, "output", None),
		template_path=getattr(args, "template", None),
		import_root=getattr(args, "import_root", None),
		dry_run=True if getattr(args, "dry_run", False) else None,
		auto_fix=False if getattr(args, "no_auto_fix", False) else None,
	)


def cmd_scan(args: argparse.Namespace) -> int:
	config = config_from_args(args)
	result = Scanner(config).scan()
	if args.json:
		print(json.dumps(result.model_dump(mode="json"), indent=2))
	else:
		print(summarize_scan(result, verbose=config.verbose))
	return 0 if result.success else 1


def cmd_generate(args: argparse.Namespace) -> int:
	config = config_from_args(args)
	result = Scanner(config).scan()
	print(summarize_scan(result, verbose=config.verbose), file=sys.stderr)
	if not result.success:
		return 1

	generation = Generator(config).generate(build_template_data(result, config))
	if config.dry_run and generation.content is not None:
		sys.stdout.write(generation.content)
	print(summarize_generation(generation), file=sys.stderr)
	return 0 if generation.success else 1


def cmd_serve(args: argparse.Namespace) -> int:
	uvicorn.run("api:app", host=args.host, port=args.port, reload=args.reload)
	return 0


def _add_scan_options(p: argparse.ArgumentParser) -> None:
	p.add_argument("--config", default=None, help="YAML config file (default: ./panelscan.yaml if present)")
	p.add_argument("--resources", default=None, help="Root directory holding resources")
	p.add_argument("--pages", default=None, help="Root directory holding pages")
	p.add_argument("--exclude", action="append", default=None, metavar="GLOB", help="Exclude files whose basename matches GLOB (repeatable)")
	p.add_argument("--strict", action="store_true", help="Fail on error-severity conflicts")
	p.add_argument("--workers", type=int, default=None, help="Parse files on this many threads")
	p.add_argument("-v", "--verbose", action="store_true")


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(prog="panelscan")
	sub = parser.add_subparsers(dest="cmd", required=True)

	ps = sub.add_parser("scan", help="Scan for resources and report conflicts")
	_add_scan_options(ps)
	ps.add_argument("--json", action="store_true", help="Print the scan result as JSON")
	ps.set_defaults(func=cmd_scan)

	pg = sub.add_parser("generate", help="Scan and write the registration module")
	_add_scan_options(pg)
	pg.add_argument("--output", default=None, help="Generated file path")
	pg.add_argument("--template", default=None, help="Jinja2 template to render")
	pg.add_argument("--import-root", dest="import_root", default=None, help="Dotted import prefix for resource packages")
	pg.add_argument("--dry-run", action="store_true", help="Print the module instead of writing it")
	pg.add_argument("--no-auto-fix", action="store_true", help="Do not alias duplicate names")
	pg.set_defaults(func=cmd_generate)

	pv = sub.add_parser("serve", help="Run the preview API server")
	pv.add_argument("--host", default="127.0.0.1")
	pv.add_argument("--port", type=int, default=8000)
	pv.add_argument("--reload", action="store_true")
	pv.set_defaults(func=cmd_serve)
	return parser


def main(argv: Optional[List[str]] = None) -> int:
	args = build_parser().parse_args(argv)
	configure_logging(getattr(args, "verbose", False))
	try:
		return args.func(args)
	except ConfigError as e:
		print(f"panelscan: {e}", file=sys.stderr)
		return 1


if __name__ == "__main__":
	sys.exit(main())
