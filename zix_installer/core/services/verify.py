"""
Installation verification: re-check the deployed state from scratch.

Independent of whatever the deploy step reported.  Each broken
invariant raises VerificationError with its own ``check`` name.
"""

from __future__ import annotations

import logging
import os

from zix_installer.context import InstallContext
from zix_installer.core.errors import VerificationError
from zix_installer.core.models.config import InstallationConfig

logger = logging.getLogger(__name__)

CHECK_ARTIFACT_MISSING = "artifact_missing"
CHECK_NOT_EXECUTABLE = "artifact_not_executable"
CHECK_LINK_MISSING = "link_missing"
CHECK_LINK_WRONG_TARGET = "link_wrong_target"


def check_installation(config: InstallationConfig) -> None:
    """Raise VerificationError for the first invariant that does not hold."""
    artifact, link = config.artifact_path, config.symlink_path

    if not artifact.is_file():
        raise VerificationError(
            CHECK_ARTIFACT_MISSING, f"zix script not found at {artifact}"
        )

    if not os.access(artifact, os.X_OK):
        raise VerificationError(CHECK_NOT_EXECUTABLE, "zix script is not executable")

    # A plain file or copy at the link path counts as missing
    if not link.is_symlink():
        raise VerificationError(CHECK_LINK_MISSING, f"zix symlink not found at {link}")

    target = os.readlink(link)
    if target != str(artifact):
        raise VerificationError(
            CHECK_LINK_WRONG_TARGET,
            f"zix symlink points to wrong target ({target}, expected {artifact})",
        )


def verify_installation(ctx: InstallContext) -> None:
    ctx.channel.info("Verifying installation...")
    check_installation(ctx.config)
    ctx.channel.success("Installation verified")
    ctx.channel.note("Installation verification passed")
