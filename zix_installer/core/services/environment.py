"""
Environment validation: is this host fit to install on?

Checks, in order: elevated privileges, URL shape, free disk space,
write access to the home directory.  Every failure is fatal.
"""

from __future__ import annotations

import logging

from zix_installer.context import InstallContext
from zix_installer.core.errors import HostEnvironmentError
from zix_installer.core.models.config import is_http_url

logger = logging.getLogger(__name__)

# 100 MB, in bytes
MIN_FREE_BYTES = 102400 * 1024


def validate_environment(ctx: InstallContext) -> None:
    """Fail with HostEnvironmentError if the host is unsuitable."""
    channel = ctx.channel
    channel.note("Validating environment...")
    _confirm_privileges(ctx)
    check_host(ctx)
    channel.note("Environment validation passed")


def _confirm_privileges(ctx: InstallContext) -> None:
    host, channel = ctx.host, ctx.channel
    if host.geteuid() != 0:
        return
    channel.warn("Running as root is not recommended")
    channel.warn("zix should be installed per-user, not system-wide")
    if not host.interactive:
        raise HostEnvironmentError(
            "Installation cancelled: running as root in pipe mode. Run directly if needed."
        )
    if not host.ask("Continue anyway?", default=False):
        raise HostEnvironmentError("Installation cancelled")
    channel.note("Root installation confirmed by user")


def check_host(ctx: InstallContext) -> None:
    """URL, disk and write-access checks.  Never prompts."""
    config, host = ctx.config, ctx.host

    # ── URL ──
    if not is_http_url(config.url):
        raise HostEnvironmentError(
            f"Invalid ZIX_URL: must start with http:// or https:// (got {config.url!r})"
        )

    # ── Disk space ──
    free = _free_space(ctx)
    if free is not None and free < MIN_FREE_BYTES:
        raise HostEnvironmentError(
            f"Insufficient disk space. Need at least 100MB free in {config.home}"
        )

    # ── Write access ──
    if not host.is_writable(config.home):
        raise HostEnvironmentError(f"No write permission in {config.home} directory")


def _free_space(ctx: InstallContext) -> int | None:
    """Free bytes under the home directory, or None when unmeasurable."""
    try:
        free = ctx.host.disk_free(ctx.config.home)
    except OSError as exc:
        ctx.channel.note("Disk space unknown (%s), continuing", exc)
        return None
    logger.debug("Free space in %s: %d bytes", ctx.config.home, free)
    return free
