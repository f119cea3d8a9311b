"""
Deployment: move a verified artifact live and point the symlink at it.

Ordering is the transaction boundary:

    back up the live file  →  rename staging file over it  →  chmod +x  →  relink

The rename is atomic within one filesystem, so the live path only ever
holds a complete, verified artifact.  A failed backup aborts before
anything destructive happens.
"""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path

from zix_installer.context import InstallContext
from zix_installer.core.errors import DeployError
from zix_installer.core.models.records import BackupRecord
from zix_installer.core.services.backup import backup_file

logger = logging.getLogger(__name__)

_EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


def prepare_directories(ctx: InstallContext) -> None:
    """``mkdir -p`` the install root and the bin dir."""
    config, channel = ctx.config, ctx.channel
    channel.info("Creating directories...")
    for directory in (config.zig_home, config.bin_dir):
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("mkdir %s failed: %s", directory, exc)
            raise DeployError("Failed to create directories") from exc
        channel.success(f"Created {directory}")


def deploy_artifact(
    ctx: InstallContext,
    source: Path,
    final_path: Path,
    link_path: Path,
) -> BackupRecord | None:
    """Install ``source`` at ``final_path`` and link ``link_path`` to it.

    Returns:
        The backup of the previous artifact, if there was one.

    Raises:
        DeployError: Any step failed.  The live path is untouched unless
            the rename itself succeeded.
    """
    channel = ctx.channel

    # ── Backup (must complete before the rename) ──
    backup = None
    if final_path.is_file():
        try:
            backup = backup_file(final_path)
        except OSError as exc:
            raise DeployError(f"Failed to back up {final_path}: {exc}") from exc
        channel.info("Backed up existing installation")

    # ── Atomic replace ──
    try:
        os.replace(source, final_path)
    except OSError as exc:
        raise DeployError(f"Failed to move {source} into place: {exc}") from exc
    channel.success("Downloaded and verified zix")

    # ── Permissions ──
    try:
        mode = final_path.stat().st_mode
        final_path.chmod(mode | _EXEC_BITS)
    except OSError as exc:
        raise DeployError("Failed to make zix executable") from exc
    channel.success("Made zix executable")

    # ── Symlink ──
    link_to(final_path, link_path)
    channel.success(f"Created symlink: {link_path} -> {final_path}")
    return backup


def link_to(target: Path, link_path: Path) -> None:
    """Replace whatever occupies ``link_path`` with a symlink to ``target``."""
    try:
        if link_path.is_symlink() or link_path.exists():
            if link_path.is_dir() and not link_path.is_symlink():
                raise DeployError(f"{link_path} is a directory, refusing to replace it")
            link_path.unlink()
        os.symlink(target, link_path)
    except OSError as exc:
        raise DeployError(f"Failed to create symlink: {exc}") from exc
