"""Publish command implementation."""
from __future__ import annotations

from collections.abc import Sequence  # noqa: TC003
from pathlib import Path  # noqa: TC003

from rich.console import Console
from rich.markup import escape

from libforge.build.publish import filter_publish_args, publish_package
from libforge.cli.commands.build import build_project
from libforge.cli.config import get_config
from libforge.errors import LibforgeError

console = Console()
err_console = Console(stderr=True)


def run_publish(*, directory: Path, save: bool, npm_args: Sequence[str]) -> None:
    """Execute publish command.

    Args:
        directory: Project directory.
        save: Rewrite the root package.json to reference the build output.
        npm_args: Flags forwarded to `npm publish` (filtered).
    """
    config = get_config()

    filtered = filter_publish_args(npm_args)
    for arg in filtered.dropped:
        err_console.print(f"[yellow]![/yellow] Ignoring unsupported npm publish argument: {escape(arg)}")

    result = build_project(directory, save=save)

    console.print(f"[blue]i[/blue] Publishing {result.distribution.name} to npm...")
    try:
        published = publish_package(
            result.output_dir,
            filtered.accepted,
            npm_command=config.npm_command,
        )
    except LibforgeError as e:
        err_console.print(f"[red]✗[/red] Publish failed: {escape(str(e))}")
        raise SystemExit(1) from None

    if "--dry-run" in filtered.accepted:
        console.print(f"[green]✓[/green] Dry run of {published.name}@{published.version} complete")
    else:
        console.print(f"[green]✓[/green] Published {published.name}@{published.version}")
