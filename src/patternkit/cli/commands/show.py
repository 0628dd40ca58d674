"""Show and context commands - JSON views of one entity"""

from __future__ import annotations

import asyncio

from patternkit.compiler import Compiler
from patternkit.exceptions import PatternkitError

from ..utils import CLIContext, console, exit_with_error, get_compiler


def show_command(state: CLIContext, ref: str) -> None:
    """Print the JSON projection of a collection, component or variant."""
    try:
        compiler = get_compiler(state)
        asyncio.run(compiler.parse())
        entity = compiler.get(ref)
    except PatternkitError as e:
        exit_with_error(str(e))

    console.print_json(data=entity.to_json(), default=str)


async def _resolve(compiler: Compiler, ref: str) -> dict:
    await compiler.parse()
    return await compiler.resolve_context(compiler.get(ref))


def context_command(state: CLIContext, ref: str) -> None:
    """Print the fully resolved context of a variant or component."""
    try:
        compiler = get_compiler(state)
        context = asyncio.run(_resolve(compiler, ref))
    except PatternkitError as e:
        exit_with_error(str(e))

    console.print_json(data=context, default=str)
