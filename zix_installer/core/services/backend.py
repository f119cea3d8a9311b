"""Backend selection: which download tool fetches the artifact."""

from __future__ import annotations

import logging

from zix_installer.adapters.base import Backend
from zix_installer.adapters.registry import BackendRegistry
from zix_installer.context import InstallContext

logger = logging.getLogger(__name__)


def select_backend(ctx: InstallContext, registry: BackendRegistry | None = None) -> Backend:
    """Forced backend if configured, else the first one on PATH.

    Raises:
        NoBackendAvailableError: Nothing usable.
    """
    registry = registry or BackendRegistry.default()
    backend = registry.select(which=ctx.host.which, override=ctx.config.downloader)
    ctx.channel.info(f"Using {backend.name} for downloads")
    ctx.channel.note("Downloader: %s", backend.name)
    return backend
