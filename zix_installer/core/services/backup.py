"""
Pre-overwrite backup.

Creates timestamped copies (``PATH.backup-YYYYMMDD-HHMMSS``) before a
file is replaced or appended to.  Backups are never cleaned up by the
installer; they stay for the user.
"""

from __future__ import annotations

import logging
import shutil
import time
from pathlib import Path

from zix_installer.core.models.records import BackupRecord

logger = logging.getLogger(__name__)


def backup_suffix(now: float | None = None) -> str:
    return ".backup-" + time.strftime("%Y%m%d-%H%M%S", time.localtime(now))


def backup_file(path: Path, *, now: float | None = None) -> BackupRecord | None:
    """Copy ``path`` aside, preserving mode and timestamps.

    Returns:
        The BackupRecord, or None when there was nothing to back up.

    Raises:
        OSError: The copy failed.  Callers decide whether that is fatal.
    """
    if not path.is_file():
        logger.debug("backup: path does not exist, skipping: %s", path)
        return None

    dest = path.with_name(path.name + backup_suffix(now))
    shutil.copy2(path, dest)
    logger.info("Created backup: %s", dest)
    return BackupRecord(original=path, backup=dest)
