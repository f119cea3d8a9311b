"""Adapters: bindings to external tools.

Public re-exports for convenient access.
"""

from zix_installer.adapters.base import Backend
from zix_installer.adapters.registry import BackendRegistry
from zix_installer.adapters.shell.command import CommandResult, run_command

__all__ = [
    "Backend",
    "BackendRegistry",
    "CommandResult",
    "run_command",
]
