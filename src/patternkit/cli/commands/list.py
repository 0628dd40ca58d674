"""List command - table of components"""

from __future__ import annotations

import asyncio

from rich.table import Table

from patternkit.exceptions import PatternkitError

from ..utils import CLIContext, console, exit_with_error, get_compiler


def list_command(state: CLIContext, tag: str | None = None) -> None:
    """List all components."""
    try:
        compiler = get_compiler(state)
        root = asyncio.run(compiler.parse())
    except PatternkitError as e:
        exit_with_error(str(e))

    if tag:
        root = root.filter("tags", tag)
    components = root.flatten()

    if not components:
        console.print("[yellow]No components found[/yellow]")
        return

    table = Table()
    table.add_column("Handle", style="cyan")
    table.add_column("Label")
    table.add_column("Path")
    table.add_column("Status")
    table.add_column("Variants", justify="right")

    for component in components:
        statuses = ", ".join(
            f"[{info.color}]{info.label}[/{info.color}]" if info.color else info.label
            for info in component.status
        )
        table.add_row(
            f"@{component.handle}",
            component.label,
            component.path,
            statuses,
            str(len(component.variants)),
        )

    console.print(table)
