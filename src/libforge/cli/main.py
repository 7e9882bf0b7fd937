"""Main CLI entry point using Typer.

This module defines the top-level CLI commands:
- libforge build: Build the package into the output directory
- libforge publish: Build, then publish the output directory with npm
"""
from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from libforge import __version__

app = typer.Typer(
    name="libforge",
    help="libforge - Zero-config builds for npm libraries",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"libforge {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version", "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output."),
    ] = False,
) -> None:
    """libforge - Zero-config builds for npm libraries.

    Use 'libforge COMMAND --help' for information on specific commands.
    """
    import logging  # noqa: PLC0415
    import sys  # noqa: PLC0415

    import structlog  # noqa: PLC0415
    from pydantic import ValidationError  # noqa: PLC0415
    from rich.markup import escape  # noqa: PLC0415

    from libforge.cli.config import get_config  # noqa: PLC0415

    try:
        config = get_config()
    except ValidationError as e:
        for error in e.errors():
            setting = ".".join(str(part) for part in error["loc"])
            err_console.print(
                f"[red]✗[/red] Invalid configuration: {escape(setting)}: {escape(error['msg'])}"
            )
        raise SystemExit(1) from None

    level = logging.DEBUG if verbose else logging.getLevelName(config.log_level)
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


@app.command()
def build(
    directory: Annotated[
        Path,
        typer.Argument(help="Project directory containing package.json."),
    ] = Path(),
    save: Annotated[
        bool,
        typer.Option("--save/--no-save", help="Point the root package.json at the build output."),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Print the distribution package.json as JSON."),
    ] = False,
) -> None:
    """Build the package.

    Discovers entry points in src/ (and bin/), bundles them with esbuild,
    generates declarations with tsc and writes dist/package.json.

    Examples:
        libforge build

        libforge build packages/my-lib --save

        libforge build --json
    """
    from libforge.cli.commands.build import run_build  # noqa: PLC0415

    run_build(directory=directory, save=save, json_output=json_output)


@app.command(
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)
def publish(
    ctx: typer.Context,
    save: Annotated[
        bool,
        typer.Option("--save/--no-save", help="Point the root package.json at the build output."),
    ] = True,
) -> None:
    """Build the package, then publish the output directory with npm.

    Usage: libforge publish [DIRECTORY] [NPM FLAGS...]

    Supported npm flags: --dry-run, --tag, --access, --registry, --otp,
    --provenance, --workspace, --workspaces, --include-workspace-root.
    Anything else is dropped with a warning.

    Examples:
        libforge publish --dry-run

        libforge publish packages/my-lib --tag beta

        libforge publish --no-save --otp 123456
    """
    from libforge.cli.commands.publish import run_publish  # noqa: PLC0415

    args = list(ctx.args)
    directory = Path(args.pop(0)) if args and not args[0].startswith("-") else Path()
    run_publish(directory=directory, save=save, npm_args=args)


if __name__ == "__main__":
    app()
