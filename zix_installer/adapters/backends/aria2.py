"""
aria2c backend: multiplexed download (4 connections per attempt).

aria2c takes a directory and a file name instead of an output path,
and refuses to overwrite unless told to.
"""

from __future__ import annotations

from pathlib import Path

from zix_installer.adapters.base import Backend

CONNECT_TIMEOUT = 10
TIMEOUT = 30
MAX_TRIES = 3
RETRY_WAIT = 2


class Aria2Backend(Backend):

    @property
    def name(self) -> str:
        return "aria2c"

    def build_command(self, url: str, destination: Path, user_agent: str) -> list[str]:
        return [
            "aria2c",
            "--console-log-level=error",
            "--summary-interval=0",
            "-x", "4",
            "-s", "4",
            f"--max-tries={MAX_TRIES}",
            f"--retry-wait={RETRY_WAIT}",
            f"--connect-timeout={CONNECT_TIMEOUT}",
            f"--timeout={TIMEOUT}",
            f"--user-agent={user_agent}",
            "--allow-overwrite=true",
            "--auto-file-renaming=false",
            "-d", str(destination.parent),
            "-o", destination.name,
            url,
        ]

    def worst_case_seconds(self) -> int:
        return MAX_TRIES * (CONNECT_TIMEOUT + TIMEOUT) + (MAX_TRIES - 1) * RETRY_WAIT
