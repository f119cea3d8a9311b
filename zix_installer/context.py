"""
Run context: the explicit value every pipeline stage receives.

Nothing in the installer reads process-wide mutable state.  The CLI
builds one ``InstallContext`` per run (config + log channel + host
probes) and passes it down; tests build their own with fake probes.
"""

from __future__ import annotations

import os
import shutil
import sys
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

import click

from zix_installer.adapters.shell.command import CommandResult, run_command
from zix_installer.core.errors import InstallInterrupted
from zix_installer.core.models.config import InstallationConfig
from zix_installer.core.observability.channel import LogChannel


def _disk_free(path: Path) -> int:
    return shutil.disk_usage(path).free


def _is_writable(path: Path) -> bool:
    return os.access(path, os.W_OK)


def _stdin_is_tty() -> bool:
    try:
        return sys.stdin is not None and sys.stdin.isatty()
    except (AttributeError, ValueError):
        return False


def _confirm(question: str, default: bool) -> bool:
    # click turns Ctrl-C and EOF at the prompt into Abort
    try:
        return click.confirm(question, default=default)
    except click.Abort:
        raise InstallInterrupted() from None


@dataclass
class Host:
    """Probes of the machine the installer runs on.

    ``interactive`` is False when stdin is not a terminal (``curl | bash``
    style runs); every trust prompt then fails closed instead of asking.
    """

    which: Callable[[str], str | None] = shutil.which
    geteuid: Callable[[], int] = os.geteuid
    disk_free: Callable[[Path], int] = _disk_free
    is_writable: Callable[[Path], bool] = _is_writable
    confirm: Callable[[str, bool], bool] = _confirm
    sleep: Callable[[float], None] = time.sleep
    run: Callable[..., CommandResult] = run_command
    interactive: bool = field(default_factory=_stdin_is_tty)
    env: Mapping[str, str] = field(default_factory=lambda: dict(os.environ))

    def ask(self, question: str, default: bool = False) -> bool:
        """Ask a yes/no question; non-interactive runs get ``False``."""
        if not self.interactive:
            return False
        return self.confirm(question, default)


@dataclass
class InstallContext:
    config: InstallationConfig
    channel: LogChannel
    host: Host = field(default_factory=Host)
