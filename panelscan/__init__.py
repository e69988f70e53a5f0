"""Resource scanner and registry generator for the admin panel.

Modules:
- fs_scan.py: Source tree walking and package naming.
- ast_parse.py: Syntax-tree extraction of candidate resource and page classes.
- conflicts.py: Naming conflict detection and deterministic alias assignment.
- scan.py: Scanner orchestrating the walk, extraction and detection.
- build.py: Projection of scan results into template data.
- generate.py: Rendering and writing of the registration module.
- report.py: Deterministic textual summaries for the CLI.
- model.py: Data structures shared by every stage.
- config.py: Scanner configuration and YAML loading.
"""

__all__ = [
	"fs_scan",
	"ast_parse",
	"conflicts",
	"scan",
	"build",
	"generate",
	"report",
	"model",
	"config",
	"errors",
]
