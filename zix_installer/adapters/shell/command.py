"""
Shell command adapter: the single place ``subprocess.run`` is called.

Backends, the syntax checker, OS probes and the completion hook all
go through ``run_command``.  It never raises for a missing binary or
a timeout; failures come back in the CommandResult.
"""

from __future__ import annotations

import logging
import subprocess
import time
from collections.abc import Sequence

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class CommandResult(BaseModel):
    """Outcome of one external command."""

    ok: bool
    returncode: int | None = None
    stdout: str = ""
    stderr: str = ""
    elapsed_ms: int = 0
    error: str | None = None


def run_command(
    cmd: Sequence[str],
    *,
    timeout: int = 120,
    cwd: str | None = None,
) -> CommandResult:
    """Run a command, capture its output, and log both streams.

    Args:
        cmd: Command list for ``subprocess.run()``.
        timeout: Seconds before the command is killed.
        cwd: Working directory for the command.

    Returns:
        CommandResult with ``ok`` True only for exit status 0.
    """
    argv = [str(part) for part in cmd]
    logger.debug("Running: %s", " ".join(argv))
    start = time.monotonic()

    try:
        result = subprocess.run(
            argv,
            capture_output=True,
            text=True,
            timeout=timeout,
            cwd=cwd,
            stdin=subprocess.DEVNULL,
        )
    except FileNotFoundError:
        return CommandResult(ok=False, error=f"Command not found: {argv[0]}")
    except subprocess.TimeoutExpired:
        return CommandResult(ok=False, error=f"Command timed out ({timeout}s)")
    except OSError as e:
        logger.warning("Cannot run %s: %s", argv[0], e)
        return CommandResult(ok=False, error=str(e))

    elapsed_ms = int((time.monotonic() - start) * 1000)
    stdout = result.stdout[-2000:] if result.stdout else ""
    stderr = result.stderr[-2000:] if result.stderr else ""

    # Backend chatter goes to the run log for postmortem
    for line in (stdout + stderr).splitlines():
        if line.strip():
            logger.debug("  │ %s", line)

    if result.returncode == 0:
        return CommandResult(ok=True, returncode=0, stdout=stdout, stderr=stderr, elapsed_ms=elapsed_ms)

    return CommandResult(
        ok=False,
        returncode=result.returncode,
        stdout=stdout,
        stderr=stderr,
        elapsed_ms=elapsed_ms,
        error=f"Command failed (exit {result.returncode})",
    )
