"""CLI commands"""

from .info import info_command
from .list import list_command
from .new import new_command
from .show import context_command, show_command

__all__ = [
    "context_command",
    "info_command",
    "list_command",
    "new_command",
    "show_command",
]
