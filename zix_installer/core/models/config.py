"""
InstallationConfig: the immutable description of one install run.

Built once at start by the config loader and passed to every stage.
Only two roots are overridable (install root and bin dir); every
other path is derived from them.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_URL = "https://codeberg.org/erffy/zix/raw/branch/master/zix"
ARTIFACT_NAME = "zix"


class InstallationConfig(BaseModel):
    """Where the artifact comes from and where it lands."""

    model_config = ConfigDict(frozen=True)

    url: str = DEFAULT_URL
    home: Path
    zig_home: Path                  # install root
    bin_dir: Path                   # holds the stable-named symlink
    log_file: Path
    downloader: str | None = None   # forced backend, None = priority order
    artifact_name: str = ARTIFACT_NAME
    installer_version: str = "1.0.0"

    @field_validator("url")
    @classmethod
    def _url_scheme(cls, value: str) -> str:
        if not is_http_url(value):
            raise ValueError("must start with http:// or https://")
        return value

    @field_validator("downloader")
    @classmethod
    def _blank_downloader(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @property
    def artifact_path(self) -> Path:
        return self.zig_home / self.artifact_name

    @property
    def symlink_path(self) -> Path:
        return self.bin_dir / self.artifact_name

    @property
    def staging_path(self) -> Path:
        """Temporary sibling the fetch writes into before the rename."""
        return self.artifact_path.with_name(self.artifact_name + ".tmp")

    @property
    def user_agent(self) -> str:
        return f"zix-installer/{self.installer_version}"


def is_http_url(url: str) -> bool:
    return url.startswith("http://") or url.startswith("https://")
