"""
Fetch backend base: the contract between the fetch pipeline and
external download tools.

The pipeline only talks to backends through this interface.  Each
backend owns its flag dialect (timeouts, inner retries, connection
multiplexing); the outer retry policy stays in the pipeline.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path

from zix_installer.adapters.shell.command import CommandResult, run_command

Runner = Callable[..., CommandResult]


class Backend(ABC):
    """Abstract base class for all fetch backends.

    To create a new backend:
        1. Subclass Backend
        2. Implement name, build_command and worst_case_seconds
        3. Register it in the BackendRegistry
    """

    # Slack on top of the backend's own worst case before the runner kills it
    timeout_margin = 30

    @property
    @abstractmethod
    def name(self) -> str:
        """The backend identifier, also the binary probed on PATH."""

    @abstractmethod
    def build_command(self, url: str, destination: Path, user_agent: str) -> list[str]:
        """Return the argv for a single bounded download of ``url``."""

    @abstractmethod
    def worst_case_seconds(self) -> int:
        """Longest one attempt can run under the backend's own timeouts and retries."""

    @property
    def timeout(self) -> int:
        """Seconds the runner waits before killing one attempt."""
        return self.worst_case_seconds() + self.timeout_margin

    def is_available(self, which: Callable[[str], str | None]) -> bool:
        """Whether the backend's binary is on PATH.  Never raises."""
        try:
            return which(self.name) is not None
        except OSError:
            return False

    def fetch(
        self,
        url: str,
        destination: Path,
        *,
        user_agent: str,
        run: Runner = run_command,
    ) -> CommandResult:
        """One logical download attempt.  Any non-zero exit is a failure."""
        cmd = self.build_command(url, destination, user_agent)
        return run(cmd, timeout=self.timeout)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
