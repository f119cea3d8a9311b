"""
Run records: download attempts, backups, profile outcomes, run result.

None of these are persisted.  They exist so each stage can report
what it did in a typed shape that tests and the CLI can inspect.
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class DownloadAttempt(BaseModel):
    """One logical fetch attempt inside the retry loop."""

    index: int                      # 1-based
    backend: str
    ok: bool
    error: str | None = None
    elapsed_ms: int = 0
    started_at: str = Field(default_factory=_now_iso)


class BackupRecord(BaseModel):
    """A timestamped copy taken before a destructive overwrite.

    Backups are never removed by the installer; they are left for the user.
    """

    original: Path
    backup: Path


class ProfileResult(BaseModel):
    """Outcome of shell profile configuration."""

    status: Literal["configured", "skipped"]
    shell: str
    path: Path | None = None
    already_configured: bool = False
    backup: BackupRecord | None = None
    reason: str = ""

    @property
    def configured(self) -> bool:
        return self.status == "configured"


class InstallResult(BaseModel):
    """Final outcome of an install run, handed back to the CLI."""

    exit_code: int = 0
    error: str | None = None
    stage: str | None = None
    backend: str | None = None
    log_file: Path | None = None
    log_retained: bool = False
    attempts: list[DownloadAttempt] = Field(default_factory=list)
    backups: list[BackupRecord] = Field(default_factory=list)
    profile: ProfileResult | None = None

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
