"""
zix installer: CLI entrypoint.

Usage:
    zix-install install
    zix-install install --downloader wget
    zix-install verify
    zix-install doctor --json
"""

from __future__ import annotations

import json
import os
import sys

import click

from zix_installer import __version__
from zix_installer.core.errors import SettingsError
from zix_installer.core.observability.logging_config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="zix-install")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, debug: bool) -> None:
    """zix installer: install the Zig version manager for this user."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("ZIX_LOG_LEVEL", "WARNING")

    setup_logging(level=level)


def _load(overrides: dict | None = None):
    from zix_installer.core.config.loader import load_config

    try:
        return load_config(overrides=overrides)
    except SettingsError as e:
        click.secho(f"✗ {e}", fg="red", err=True)
        sys.exit(e.exit_code)


@cli.command()
@click.option("--url", default=None, help="Artifact URL (overrides ZIX_URL).")
@click.option(
    "--downloader",
    default=None,
    help="Force a download tool: curl, wget or aria2c (overrides ZIX_DOWNLOADER).",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Print the result as JSON.")
@click.pass_context
def install(ctx: click.Context, url: str | None, downloader: str | None, as_json: bool) -> None:
    """Download, verify and install zix.

    Exit codes: 0 success, 1 failure, 130 interrupted.
    """
    from zix_installer.core.use_cases.install import run_install

    config = _load({"url": url, "downloader": downloader})
    result = run_install(config, console=not as_json)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))

    sys.exit(result.exit_code)


@cli.command()
@click.pass_context
def verify(ctx: click.Context) -> None:
    """Check that the installed artifact and symlink are intact."""
    from zix_installer.core.errors import VerificationError
    from zix_installer.core.services.verify import check_installation

    config = _load()
    try:
        check_installation(config)
    except VerificationError as e:
        click.secho(f"✗ {e}", fg="red")
        click.echo(f"   check: {e.check}")
        sys.exit(1)

    click.secho("✓ Installation verified", fg="green")
    if not ctx.obj.get("quiet"):
        click.echo(f"   {config.symlink_path} -> {config.artifact_path}")


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def doctor(as_json: bool) -> None:
    """Run pre-flight checks without installing anything."""
    from zix_installer.core.use_cases.doctor import run_doctor

    config = _load()
    report = run_doctor(config, console=not as_json)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        sys.exit(0 if report.ok else 1)

    click.echo()
    for check in report.checks:
        if check.ok:
            click.secho(f"   ✓ {check.name}", fg="green", nl=False)
        else:
            click.secho(f"   ✗ {check.name}", fg="red", nl=False)
        click.echo(f"  {check.message}")
    click.echo()

    if not report.ok:
        sys.exit(1)


if __name__ == "__main__":
    cli()
