"""Build command implementation."""
from __future__ import annotations

import warnings
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from libforge.build.orchestrator import BuildOrchestrator, BuildResult
from libforge.build.tools import EsbuildBundler, TscDeclarationGenerator
from libforge.cli.config import get_config
from libforge.errors import LibforgeError, LibforgeWarning

if TYPE_CHECKING:
    from pathlib import Path

console = Console()
err_console = Console(stderr=True)


def run_build(*, directory: Path, save: bool, json_output: bool) -> None:
    """Execute build command.

    Args:
        directory: Project directory.
        save: Rewrite the root package.json to reference the build output.
        json_output: Print the distribution manifest instead of a summary.
    """
    result = build_project(directory, save=save, quiet=json_output)

    if json_output:
        console.print_json(result.distribution.to_json())
        return

    _print_summary(result)
    if not save:
        console.print("[blue]i[/blue] Root package.json unchanged. Use --save to update it.")


def build_project(directory: Path, *, save: bool, quiet: bool = False) -> BuildResult:
    """Build `directory` with the configured tools, reporting problems.

    Exits with status 1 on any build error.
    """
    config = get_config()
    errors = config.validate_layout()
    if errors:
        for err in errors:
            err_console.print(f"[red]✗[/red] {err}")
        raise SystemExit(1)

    orchestrator = BuildOrchestrator(
        directory.resolve(),
        conventions=config.conventions,
        bundler=EsbuildBundler(config.esbuild_command, target=config.target),
        declarations=TscDeclarationGenerator(config.tsc_command),
        generate_declarations=config.declarations,
    )

    if not quiet:
        console.print(f"[blue]i[/blue] Building {orchestrator.project_root}...")

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", LibforgeWarning)
        try:
            result = orchestrator.build(save=save)
        except LibforgeError as e:
            report_warnings(caught)
            err_console.print(f"[red]✗[/red] Build failed: {escape(str(e))}")
            raise SystemExit(1) from None

    report_warnings(caught)
    if not quiet:
        console.print(f"[green]✓[/green] Built {len(result.entries)} entries into {result.output_dir}")
    return result


def report_warnings(caught: list[warnings.WarningMessage]) -> None:
    """Print build warnings; pass anything else on to the warnings machinery."""
    for w in caught:
        if issubclass(w.category, LibforgeWarning):
            err_console.print(f"[yellow]![/yellow] {escape(str(w.message))}")
        else:
            warnings.showwarning(w.message, w.category, w.filename, w.lineno)


def _print_summary(result: BuildResult) -> None:
    """Print build summary.

    Args:
        result: The finished build.
    """
    distribution = result.distribution

    table = Table(title="Build Summary")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Package", distribution.name or "")
    if distribution.version:
        table.add_row("Version", distribution.version)
    table.add_row("Output", str(result.output_dir))
    table.add_row("Main Entry", result.main_entry or "-")
    table.add_row("Formats", result.formats.describe())
    table.add_row("Entries", ", ".join(result.entries))
    table.add_row("Exports", str(len(distribution.exports or {})))
    if result.stale_keys:
        table.add_row("Stale Exports", f"[yellow]{escape(', '.join(result.stale_keys))}[/yellow]")
    table.add_row("Root Manifest", "updated" if result.saved else "unchanged")

    console.print(table)
