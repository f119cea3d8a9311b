"""Core domain models: public re-exports."""

from zix_installer.core.models.config import InstallationConfig
from zix_installer.core.models.records import (
    BackupRecord,
    DownloadAttempt,
    InstallResult,
    ProfileResult,
)

__all__ = [
    "BackupRecord",
    "DownloadAttempt",
    "InstallResult",
    "InstallationConfig",
    "ProfileResult",
]
