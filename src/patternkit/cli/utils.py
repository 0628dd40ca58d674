"""Shared utilities for CLI commands"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler

from patternkit.compiler import Compiler
from patternkit.config import CompilerSettings, find_settings_file

console = Console()
err_console = Console(stderr=True)


@dataclass
class CLIContext:
    """Global options shared by every command."""

    source: Path
    config: Path | None = None
    verbose: bool = False


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the patternkit CLI.

    Log levels:
    - Normal: only warnings/errors shown
    - Verbose (-v): INFO level - build summaries
    - Debug (PATTERNKIT_DEBUG=1): DEBUG level - shows everything
    """
    debug = bool(os.environ.get("PATTERNKIT_DEBUG"))
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=err_console,
        show_time=verbose,
        show_path=debug,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("patternkit")
    logger.setLevel(level)
    logger.handlers = [handler]
    logger.propagate = False


def exit_with_error(message: str, exit_code: int = 1) -> NoReturn:
    """Exit the program with an error message."""
    typer.secho(f"Error: {message}", err=True, fg=typer.colors.RED)
    raise typer.Exit(code=exit_code)


def load_settings(state: CLIContext) -> CompilerSettings:
    path = state.config or find_settings_file(state.source)
    return CompilerSettings.load(path)


def get_compiler(state: CLIContext) -> Compiler:
    """Compiler for the configured source directory."""
    if not state.source.is_dir():
        exit_with_error(f"Component directory not found: {state.source}")
    return Compiler(state.source, load_settings(state))
