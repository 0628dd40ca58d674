"""Patternkit CLI Main Entry Point

Usage:
    patternkit info                     # Counts of collections/components/variants
    patternkit list [--tag TAG]         # Table of components
    patternkit show @button             # JSON of an entity
    patternkit show forms/button--large # ...by path, variant via splitter
    patternkit context @button:large    # Fully resolved context as JSON
    patternkit new forms/input          # Scaffold a component
    patternkit -s src/components list   # Use another source directory
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from patternkit._version import __version__

from .commands import (
    context_command,
    info_command,
    list_command,
    new_command,
    show_command,
)
from .utils import CLIContext, setup_logging

app = typer.Typer(
    help="Compile a directory of UI components into a queryable entity graph.",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"patternkit {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    source: Path = typer.Option(
        Path("components"), "-s", "--source", help="Component source directory."
    ),
    config: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Path to patternkit.yaml."
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Show info logs."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    setup_logging(verbose)
    ctx.obj = CLIContext(source=source, config=config, verbose=verbose)


@app.command("info")
def info(ctx: typer.Context) -> None:
    """Summarize the component library."""
    info_command(ctx.obj)


@app.command("list")
def list_(
    ctx: typer.Context,
    tag: Optional[str] = typer.Option(None, "-t", "--tag", help="Only components with this tag."),
) -> None:
    """List components."""
    list_command(ctx.obj, tag=tag)


@app.command("show")
def show(
    ctx: typer.Context,
    ref: str = typer.Argument(..., help="@handle, @handle:variant or a path."),
) -> None:
    """Show an entity as JSON."""
    show_command(ctx.obj, ref)


@app.command("context")
def context(
    ctx: typer.Context,
    ref: str = typer.Argument(..., help="@handle or @handle:variant."),
) -> None:
    """Show the resolved context of a variant as JSON."""
    context_command(ctx.obj, ref)


@app.command("new")
def new(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Path of the new component below the source."),
    label: Optional[str] = typer.Option(None, "-l", "--label", help="Component label."),
) -> None:
    """Scaffold a new component."""
    new_command(ctx.obj, path, label=label)


if __name__ == "__main__":
    app()
