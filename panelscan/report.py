from __future__ import annotations

from typing import Iterable, List

from .conflicts import group_by_package
from .model import Conflict, GenerationResult, ScanResult, Severity


SEVERITY_LABEL = {
	Severity.ERROR: "ERROR",
	Severity.WARNING: "WARN",
	Severity.INFO: "INFO",
}


def summarize_conflict(c: Conflict) -> str:
	parts: List[str] = []
	parts.append(f"[{SEVERITY_LABEL[c.severity]}] {c.type.value}: {c.message}")
	for r in c.resources:
		parts.append(f"    - {r.qualified_name} ({r.file_path})")
	if c.suggestion:
		for line in c.suggestion.splitlines():
			parts.append(f"    > {line}")
	return "\n".join(parts)


def summarize_conflicts(conflicts: Iterable[Conflict], min_severity: Severity = Severity.INFO) -> str:
	order = [Severity.ERROR, Severity.WARNING, Severity.INFO]
	allowed = set(order[: order.index(min_severity) + 1])
	return "\n".join(summarize_conflict(c) for c in conflicts if c.severity in allowed)


def summarize_scan(result: ScanResult, verbose: bool = False) -> str:
	parts: List[str] = [result.message]
	if not result.success and not result.resources:
		return "\n".join(parts)

	for pkg, members in group_by_package(result.resources).items():
		parts.append(f"  {pkg}: {', '.join(f'{r.type_name} (/{r.slug})' for r in members)}")
	if result.pages:
		parts.append("  pages:")
		for pkg, members in group_by_package(result.pages).items():
			parts.append(f"    {pkg}: {', '.join(r.type_name for r in members)}")

	# info-level conventions are noisy on real trees; show them on request only
	listing = summarize_conflicts(
		result.all_conflicts, Severity.INFO if verbose else Severity.WARNING
	)
	if listing:
		parts.append(listing)
	return "\n".join(parts)


def summarize_generation(result: GenerationResult) -> str:
	parts: List[str] = [result.message]
	if result.success and result.bytes_written:
		parts.append(f"  {result.bytes_written} bytes written to {result.file_path}")
	for warning in result.warnings:
		parts.append(f"  warning: {warning}")
	return "\n".join(parts)
