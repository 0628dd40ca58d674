"""New command - scaffold a component"""

from __future__ import annotations

import typer

from patternkit.exceptions import PatternkitError
from patternkit.scaffold import create_component

from ..utils import CLIContext, exit_with_error, load_settings


def new_command(state: CLIContext, path: str, label: str | None = None) -> None:
    """Create a component directory below the source root."""
    try:
        target = create_component(state.source, path, load_settings(state), label=label)
    except PatternkitError as e:
        exit_with_error(str(e))

    typer.echo(f"Created {target}")
