"""
Shell profile configuration: put the bin dir on PATH, exactly once.

The sentinel comment is the only idempotency signal; profile content
is never parsed beyond searching for it.  An unrecognised shell is a
skip, not an error: PATH setup is a convenience.
"""

from __future__ import annotations

import enum
import logging
import os
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path

from zix_installer.context import InstallContext
from zix_installer.core.errors import ProfileConfigError
from zix_installer.core.models.records import ProfileResult
from zix_installer.core.services.backup import backup_file

logger = logging.getLogger(__name__)

SENTINEL = "# zix - Zig Version Manager"


class ShellFamily(str, enum.Enum):
    BASH = "bash"
    ZSH = "zsh"
    FISH = "fish"
    UNKNOWN = "unknown"


def _posix_block(bin_dir: Path) -> list[str]:
    return [
        f'if [[ ":$PATH:" != *":{bin_dir}:"* ]]; then',
        f'    export PATH="{bin_dir}:$PATH"',
        "fi",
    ]


def _fish_block(bin_dir: Path) -> list[str]:
    return [
        f"if not contains {bin_dir} $PATH",
        f"    set -gx PATH {bin_dir} $PATH",
        "end",
    ]


@dataclass(frozen=True)
class ShellProfileSpec:
    """Where a shell family keeps its startup file and how it guards PATH."""

    candidates: Callable[[Path, Mapping[str, str]], list[Path]]
    path_block: Callable[[Path], list[str]]

    def config_path(self, home: Path, env: Mapping[str, str]) -> Path:
        """First existing candidate, else the first one (created on write)."""
        options = self.candidates(home, env)
        for path in options:
            if path.is_file():
                return path
        return options[0]


_SHELLS: dict[ShellFamily, ShellProfileSpec] = {
    ShellFamily.BASH: ShellProfileSpec(
        candidates=lambda home, env: [home / ".bashrc", home / ".bash_profile", home / ".profile"],
        path_block=_posix_block,
    ),
    ShellFamily.ZSH: ShellProfileSpec(
        candidates=lambda home, env: [Path(env.get("ZDOTDIR") or home) / ".zshrc"],
        path_block=_posix_block,
    ),
    ShellFamily.FISH: ShellProfileSpec(
        candidates=lambda home, env: [home / ".config" / "fish" / "config.fish"],
        path_block=_fish_block,
    ),
}


def manual_path_line(bin_dir: Path) -> str:
    return f'export PATH="{bin_dir}:$PATH"'


# ── Detection ─────────────────────────────────────────────────

def detect_shell(ctx: InstallContext) -> ShellFamily:
    """Classify the user's shell from $SHELL, $BASH, then the parent process."""
    env = ctx.host.env
    shell_path = env.get("SHELL") or env.get("BASH") or _parent_process_name(ctx)
    name = os.path.basename(shell_path or "sh").lstrip("-")
    try:
        return ShellFamily(name)
    except ValueError:
        return ShellFamily.UNKNOWN


def _parent_process_name(ctx: InstallContext) -> str:
    result = ctx.host.run(["ps", "-p", str(os.getppid()), "-o", "comm="], timeout=5)
    if not result.ok:
        return "sh"
    return result.stdout.strip() or "sh"


def profile_path(ctx: InstallContext, family: ShellFamily) -> Path | None:
    spec = _SHELLS.get(family)
    if spec is None:
        return None
    return spec.config_path(ctx.config.home, ctx.host.env)


# ── Configuration ────────────────────────────────────────────

def render_block(family: ShellFamily, bin_dir: Path, *, now: float | None = None) -> str:
    """The text appended to the profile, sentinel first."""
    stamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(now))
    lines = [
        "",
        SENTINEL,
        f"# Added by zix installer on {stamp}",
        *_SHELLS[family].path_block(bin_dir),
    ]
    return "\n".join(lines) + "\n"


def configure_shell_profile(ctx: InstallContext) -> ProfileResult:
    """Append the PATH block to the user's startup file if it is not there.

    Returns:
        ``configured`` (newly or already) or ``skipped`` for unknown shells.

    Raises:
        ProfileConfigError: The profile could not be read, backed up or written.
    """
    channel, bin_dir = ctx.channel, ctx.config.bin_dir
    family = detect_shell(ctx)

    path = profile_path(ctx, family)
    if path is None:
        shell = ctx.host.env.get("SHELL", "")
        channel.warn(f"Unknown shell ({shell}), skipping automatic PATH setup")
        return ProfileResult(status="skipped", shell=family.value, reason="unknown shell")

    try:
        if path.is_file() and SENTINEL in path.read_text(encoding="utf-8", errors="replace"):
            channel.success(f"PATH already configured in {path}")
            return ProfileResult(
                status="configured",
                shell=family.value,
                path=path,
                already_configured=True,
            )

        channel.info(f"Adding {bin_dir} to PATH in {path}...")
        backup = backup_file(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            f.write(render_block(family, bin_dir))
    except OSError as exc:
        raise ProfileConfigError(f"Could not update {path}: {exc}") from exc

    channel.success(f"Added to PATH in {path}")
    channel.note("PATH configuration added to %s", path)
    return ProfileResult(status="configured", shell=family.value, path=path, backup=backup)
