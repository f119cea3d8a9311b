"""
Fetch pipeline: bounded retries over one chosen backend.

The retry policy is backend-agnostic: a fixed number of attempts with
a fixed pause between them (never before the first).  Each backend
applies its own inner timeouts and retries within a single attempt.
A partially written destination is left for the caller to discard.
"""

from __future__ import annotations

import logging
from pathlib import Path

from zix_installer.adapters.base import Backend
from zix_installer.context import InstallContext
from zix_installer.core.errors import FetchError
from zix_installer.core.models.records import DownloadAttempt

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3
RETRY_DELAY = 2.0


def fetch_artifact(
    ctx: InstallContext,
    url: str,
    destination: Path,
    backend: Backend,
    *,
    max_attempts: int = MAX_ATTEMPTS,
    retry_delay: float = RETRY_DELAY,
) -> list[DownloadAttempt]:
    """Download ``url`` to ``destination`` with ``backend``.

    Returns:
        The attempts made; the last one succeeded.

    Raises:
        FetchError: All ``max_attempts`` failed.
    """
    channel, host = ctx.channel, ctx.host
    channel.note("Downloading: %s -> %s (using %s)", url, destination, backend.name)

    attempts: list[DownloadAttempt] = []
    for index in range(1, max_attempts + 1):
        if index > 1:
            channel.warn(f"Retry attempt {index}/{max_attempts}...")
            host.sleep(retry_delay)

        try:
            result = backend.fetch(
                url,
                destination,
                user_agent=ctx.config.user_agent,
                run=host.run,
            )
        except OSError as exc:
            logger.warning("Backend %s could not start: %s", backend.name, exc)
            ok, error, elapsed = False, str(exc), 0
        else:
            ok, error, elapsed = result.ok, result.error, result.elapsed_ms

        attempt = DownloadAttempt(
            index=index,
            backend=backend.name,
            ok=ok,
            error=None if ok else (error or "download failed"),
            elapsed_ms=elapsed,
        )
        attempts.append(attempt)

        if ok:
            channel.note("Download successful (attempt %d, %dms)", index, elapsed)
            return attempts
        channel.note("Download attempt %d failed: %s", index, attempt.error)

    raise FetchError(
        f"Failed to download after {max_attempts} attempts",
        attempts=attempts,
    )
