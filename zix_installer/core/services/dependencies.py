"""
Dependency resolution: required tool presence and remediation hints.

Read-only.  Missing tools are collected, never short-circuited, so
the user gets the whole install command in one go.
"""

from __future__ import annotations

import logging
import platform
from pathlib import Path

from zix_installer.context import InstallContext
from zix_installer.core.errors import MissingDependencyError

logger = logging.getLogger(__name__)

REQUIRED_TOOLS = ("jq", "tar")
CHECKSUM_TOOLS = ("sha256sum", "shasum")

OS_RELEASE = Path("/etc/os-release")

# distro ID → install command template
_PM_COMMANDS: dict[str, str] = {
    "arch": "sudo pacman -S {pkgs}",
    "manjaro": "sudo pacman -S {pkgs}",
    "ubuntu": "sudo apt update && sudo apt install {pkgs}",
    "debian": "sudo apt update && sudo apt install {pkgs}",
    "pop": "sudo apt update && sudo apt install {pkgs}",
    "linuxmint": "sudo apt update && sudo apt install {pkgs}",
    "fedora": "sudo dnf install {pkgs}",
    "rhel": "sudo dnf install {pkgs}",
    "centos": "sudo dnf install {pkgs}",
    "alpine": "sudo apk add {pkgs}",
}

_GENERIC_HINT = "Use your package manager to install: {pkgs}"


def check_dependencies(ctx: InstallContext) -> str:
    """Check required tools and pick a checksum tool.

    Returns:
        Name of the checksum tool found.

    Raises:
        MissingDependencyError: With every missing name and an install hint.
    """
    channel, which = ctx.channel, ctx.host.which
    channel.info("Checking dependencies...")

    missing: list[str] = []
    for tool in REQUIRED_TOOLS:
        if which(tool):
            channel.success(f"{tool} found")
        else:
            channel.error(f"{tool} not found (required)")
            missing.append(tool)

    checksum_tool = next((t for t in CHECKSUM_TOOLS if which(t)), None)
    if checksum_tool:
        channel.success(f"{checksum_tool} found")
    else:
        channel.error(f"No checksum tool found (need {' or '.join(CHECKSUM_TOOLS)})")
        missing.append(CHECKSUM_TOOLS[0])

    if missing:
        hint = install_hint(missing)
        channel.echo()
        channel.error(f"Missing required dependencies: {' '.join(missing)}")
        channel.echo()
        channel.echo("Install them with:")
        channel.echo(f"  {hint}")
        channel.echo()
        raise MissingDependencyError(missing, hint=hint)

    channel.note("All dependencies satisfied")
    return checksum_tool


def install_hint(
    packages: list[str],
    *,
    os_release: Path = OS_RELEASE,
    system: str | None = None,
) -> str:
    """Suggest a package-manager command for ``packages``.

    Purely advisory: an unidentifiable OS yields the generic hint.
    """
    pkgs = " ".join(packages)
    distro = _distro_id(os_release)

    if distro is not None:
        template = _PM_COMMANDS.get(distro)
        if template is None and distro.startswith("opensuse"):
            template = "sudo zypper install {pkgs}"
        return (template or _GENERIC_HINT).format(pkgs=pkgs)

    if (system or platform.system()) == "Darwin":
        return f"brew install {pkgs}"
    return _GENERIC_HINT.format(pkgs=pkgs)


def _distro_id(os_release: Path) -> str | None:
    """``ID`` from os-release, ``"unknown"`` if absent, None if no file."""
    try:
        with open(os_release, encoding="utf-8") as f:
            for line in f:
                if line.startswith("ID="):
                    return line.strip().split("=", 1)[1].strip('"\'').lower()
    except (FileNotFoundError, OSError):
        return None
    return "unknown"
