"""wget backend."""

from __future__ import annotations

from pathlib import Path

from zix_installer.adapters.base import Backend

TIMEOUT = 30
TRIES = 3
WAIT_RETRY = 2


class WgetBackend(Backend):

    @property
    def name(self) -> str:
        return "wget"

    def build_command(self, url: str, destination: Path, user_agent: str) -> list[str]:
        return [
            "wget", "-q",
            f"--timeout={TIMEOUT}",
            f"--tries={TRIES}",
            f"--waitretry={WAIT_RETRY}",
            f"--user-agent={user_agent}",
            "-O", str(destination),
            url,
        ]

    def worst_case_seconds(self) -> int:
        # --timeout applies separately to DNS, connect and read
        return TRIES * 3 * TIMEOUT + (TRIES - 1) * WAIT_RETRY
