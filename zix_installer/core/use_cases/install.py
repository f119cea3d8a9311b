"""
Install use case: run the whole fetch-and-deploy pipeline.

    environment → dependencies → backend → fetch → integrity
        → deploy → verify → shell profile → (completions)

Any stage raising InstallError aborts the rest.  The run log lives
exactly as long as this function: it is deleted on success and kept
on failure or interruption.  The staging file never outlives the run.
"""

from __future__ import annotations

import contextlib
import getpass
import logging
import signal
from collections.abc import Iterator

from zix_installer.adapters.registry import BackendRegistry
from zix_installer.context import Host, InstallContext
from zix_installer.core.errors import (
    FetchError,
    InstallError,
    InstallInterrupted,
    ProfileConfigError,
)
from zix_installer.core.models.config import InstallationConfig
from zix_installer.core.models.records import InstallResult, ProfileResult
from zix_installer.core.observability.channel import LogChannel
from zix_installer.core.services.backend import select_backend
from zix_installer.core.services.dependencies import check_dependencies
from zix_installer.core.services.deploy import deploy_artifact, prepare_directories
from zix_installer.core.services.environment import validate_environment
from zix_installer.core.services.fetch import fetch_artifact
from zix_installer.core.services.integrity import verify_artifact
from zix_installer.core.services.shell_profile import (
    configure_shell_profile,
    manual_path_line,
)
from zix_installer.core.services.verify import verify_installation

logger = logging.getLogger(__name__)

COMPLETION_SUBCOMMAND = "completion-install"


def run_install(
    config: InstallationConfig,
    *,
    host: Host | None = None,
    registry: BackendRegistry | None = None,
    console: bool = True,
) -> InstallResult:
    """Install the artifact described by ``config``.

    Never raises for pipeline failures: the outcome, including the exit
    code (0, 1 or 130), is returned in the InstallResult.
    """
    channel = LogChannel(config.log_file, console=console)
    try:
        channel.open()
    except OSError as exc:
        return InstallResult(
            exit_code=1,
            stage="log",
            error=f"Cannot open log file {config.log_file}: {exc}",
        )

    ctx = InstallContext(config=config, channel=channel, host=host or Host())
    result = InstallResult(log_file=config.log_file)

    try:
        with _sigterm_as_interrupt():
            _log_header(ctx)
            _run_pipeline(ctx, registry, result)
        channel.mark_success()
    except InstallError as exc:
        result.exit_code = exc.exit_code
        result.stage = exc.stage
        result.error = str(exc)
        logger.debug("Stage %s failed", exc.stage, exc_info=True)
        channel.error(str(exc))
        channel.error("Installation failed")
    except KeyboardInterrupt:
        result.exit_code = InstallInterrupted.exit_code
        result.stage = "interrupted"
        result.error = "Installation interrupted by user"
        channel.echo()
        channel.error("Installation interrupted by user")
    finally:
        _discard_staging(ctx)
        channel.close()

    result.log_retained = channel.retained
    return result


def _run_pipeline(
    ctx: InstallContext,
    registry: BackendRegistry | None,
    result: InstallResult,
) -> None:
    config, channel = ctx.config, ctx.channel

    validate_environment(ctx)
    channel.info("Installing zix (Zig Version Manager)...")
    channel.echo()

    check_dependencies(ctx)
    channel.echo()

    backend = select_backend(ctx, registry)
    result.backend = backend.name
    channel.echo()

    prepare_directories(ctx)
    channel.echo()

    # ── Fetch + verify into the staging path ──
    channel.info(f"Downloading zix from {config.url}...")
    try:
        result.attempts = fetch_artifact(ctx, config.url, config.staging_path, backend)
    except FetchError as exc:
        result.attempts = exc.attempts
        raise
    verify_artifact(ctx, config.staging_path)

    # ── Go live ──
    channel.info("Setting up zix...")
    backup = deploy_artifact(ctx, config.staging_path, config.artifact_path, config.symlink_path)
    if backup is not None:
        result.backups.append(backup)
    channel.echo()

    verify_installation(ctx)
    channel.echo()

    # ── Advisory steps: never fail the run ──
    channel.info("Configuring shell environment...")
    result.profile = _configure_profile(ctx)
    channel.echo()

    _show_next_steps(ctx, result.profile)
    offer_completions(ctx)

    channel.echo()
    channel.success("Happy Zigging!")
    channel.note("=== Installation completed successfully ===")


def _configure_profile(ctx: InstallContext) -> ProfileResult | None:
    try:
        profile = configure_shell_profile(ctx)
    except ProfileConfigError as exc:
        ctx.channel.warn(str(exc))
        profile = None

    if profile is None or not profile.configured:
        ctx.channel.warn("Could not automatically configure PATH")
        ctx.channel.warn("Add this to your shell configuration file:")
        ctx.channel.echo()
        ctx.channel.echo(f"  {manual_path_line(ctx.config.bin_dir)}")
    return profile


def _show_next_steps(ctx: InstallContext, profile: ProfileResult | None) -> None:
    channel = ctx.channel
    channel.success("Installation complete!")
    channel.echo()
    channel.info("Next steps:")
    channel.echo("  1. Reload your shell configuration:")
    if profile is not None and profile.configured and profile.path is not None:
        channel.echo(f"     source {profile.path}")
        channel.echo("     # or simply start a new terminal session")
    else:
        channel.echo(f"     {manual_path_line(ctx.config.bin_dir)}")
    channel.echo("  2. Verify installation:")
    channel.echo("     zix doctor")
    channel.echo()


def offer_completions(ctx: InstallContext) -> bool:
    """Ask to run ``zix completion-install``.  Failure is only a warning.

    Returns:
        True if completions were installed.
    """
    channel, host = ctx.channel, ctx.host
    later = f"zix {COMPLETION_SUBCOMMAND}"

    if not host.interactive:
        channel.info(f"Shell completions can be installed later with: {later}")
        return False

    if not host.ask("Install shell completions?", default=True):
        channel.info(f"Skipped shell completions (install later with: {later})")
        return False

    channel.info("Installing shell completions...")
    result = host.run([str(ctx.config.symlink_path), COMPLETION_SUBCOMMAND], timeout=60)
    if result.ok:
        channel.success("Shell completions installed")
        channel.warn("Restart your shell to activate completions")
        return True

    channel.warn("Failed to install shell completions")
    channel.warn(f"You can install them later with: {later}")
    return False


def _log_header(ctx: InstallContext) -> None:
    config, host, note = ctx.config, ctx.host, ctx.channel.note
    note("=== Installation started ===")
    note("Installer version: %s", config.installer_version)
    note("Pipe mode: %s", not host.interactive)
    note("ZIX_URL: %s", config.url)
    note("ZIG_HOME: %s", config.zig_home)
    note("BIN_DIR: %s", config.bin_dir)
    note("Shell: %s", host.env.get("SHELL", ""))
    note("User: %s", host.env.get("USER") or _current_user())
    note("Home: %s", config.home)


def _current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "unknown"


def _discard_staging(ctx: InstallContext) -> None:
    staging = ctx.config.staging_path
    try:
        staging.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Could not remove %s: %s", staging, exc)


@contextlib.contextmanager
def _sigterm_as_interrupt() -> Iterator[None]:
    """Treat SIGTERM like Ctrl-C for the duration of the run."""

    def _raise(signum, frame):
        raise InstallInterrupted()

    try:
        previous = signal.signal(signal.SIGTERM, _raise)
    except ValueError:
        # Not the main thread; leave signal handling alone
        yield
        return
    try:
        yield
    finally:
        signal.signal(signal.SIGTERM, previous)
