"""curl backend: single connection, fail on HTTP errors."""

from __future__ import annotations

from pathlib import Path

from zix_installer.adapters.base import Backend

CONNECT_TIMEOUT = 10
MAX_TIME = 60
RETRIES = 2
RETRY_DELAY = 2


class CurlBackend(Backend):

    @property
    def name(self) -> str:
        return "curl"

    def build_command(self, url: str, destination: Path, user_agent: str) -> list[str]:
        return [
            "curl", "-fsSL",
            "--connect-timeout", str(CONNECT_TIMEOUT),
            "--max-time", str(MAX_TIME),
            "--retry", str(RETRIES),
            "--retry-delay", str(RETRY_DELAY),
            "-A", user_agent,
            url,
            "-o", str(destination),
        ]

    def worst_case_seconds(self) -> int:
        # --max-time bounds each try, connect included
        return (RETRIES + 1) * MAX_TIME + RETRIES * RETRY_DELAY
