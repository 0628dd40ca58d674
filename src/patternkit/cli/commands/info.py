"""Info command - summary of the component library"""

from __future__ import annotations

import asyncio

from patternkit.exceptions import PatternkitError

from ..utils import CLIContext, console, exit_with_error, get_compiler


def info_command(state: CLIContext) -> None:
    """Print counts of collections, components and variants."""
    try:
        compiler = get_compiler(state)
        root = asyncio.run(compiler.parse())
    except PatternkitError as e:
        exit_with_error(str(e))

    components = root.flatten()
    console.print(f"[bold]{root.label}[/bold] ({state.source})")
    console.print(f"Collections: {len(root.flatten_collections())}")
    console.print(f"Components:  {len(components)}")
    console.print(f"Variants:    {sum(len(c.variants) for c in components)}")
