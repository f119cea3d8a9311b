"""
Installer error taxonomy.

Every pipeline stage fails closed by raising one of these.  The
orchestrator is the only place they are caught; it reports the
message and maps the error to a process exit code.
"""

from __future__ import annotations


class InstallError(Exception):
    """Base class for every fatal installer condition."""

    exit_code = 1
    stage = "install"


class SettingsError(InstallError):
    """Raised when installer configuration is invalid or unreadable."""

    stage = "config"


class HostEnvironmentError(InstallError):
    """The host is unsuitable: root refused, bad URL, no space, no write access."""

    stage = "environment"


class MissingDependencyError(InstallError):
    """One or more required tools are absent."""

    stage = "dependencies"

    def __init__(self, missing: list[str], hint: str = "") -> None:
        self.missing = list(missing)
        self.hint = hint
        super().__init__("Cannot continue without required dependencies")


class NoBackendAvailableError(InstallError):
    stage = "backend"


class FetchError(InstallError):
    """Every download attempt failed."""

    stage = "fetch"

    def __init__(self, message: str, attempts: list | None = None) -> None:
        self.attempts = list(attempts or [])
        super().__init__(message)


class IntegrityError(InstallError):
    stage = "integrity"


class DeployError(InstallError):
    stage = "deploy"


class VerificationError(InstallError):
    """Post-deploy state does not match what was deployed.

    ``check`` names the invariant that broke so callers (and tests)
    can tell a missing artifact from a stale symlink.
    """

    stage = "verify"

    def __init__(self, check: str, message: str) -> None:
        self.check = check
        super().__init__(message)


class ProfileConfigError(InstallError):
    """Shell profile could not be updated.  Advisory, never fatal."""

    stage = "shell"


class InstallInterrupted(KeyboardInterrupt):
    """User cancelled the run (SIGINT / SIGTERM)."""

    exit_code = 130
