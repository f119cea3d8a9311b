"""
Doctor use case: pre-flight checks without installing anything.

Runs environment validation, dependency resolution and backend
selection and reports each outcome.  Nothing is written to disk.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from zix_installer.adapters.registry import BackendRegistry
from zix_installer.context import Host, InstallContext
from zix_installer.core.errors import HostEnvironmentError, InstallError
from zix_installer.core.models.config import InstallationConfig
from zix_installer.core.observability.channel import LogChannel
from zix_installer.core.services.backend import select_backend
from zix_installer.core.services.dependencies import check_dependencies
from zix_installer.core.services.environment import check_host


@dataclass
class CheckOutcome:
    name: str
    ok: bool
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "ok": self.ok, "message": self.message}


@dataclass
class DoctorReport:
    checks: list[CheckOutcome] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(c.ok for c in self.checks)

    def to_dict(self) -> dict[str, Any]:
        return {"ok": self.ok, "checks": [c.to_dict() for c in self.checks]}


def run_doctor(
    config: InstallationConfig,
    *,
    host: Host | None = None,
    registry: BackendRegistry | None = None,
    console: bool = True,
) -> DoctorReport:
    """Run every read-only check, collecting failures instead of stopping."""
    # Never opened: events go to the console only, no log file is created
    channel = LogChannel(config.log_file, console=console)
    ctx = InstallContext(config=config, channel=channel, host=host or Host())
    report = DoctorReport()

    def _check(name: str, fn) -> None:
        try:
            value = fn()
        except InstallError as exc:
            report.checks.append(CheckOutcome(name=name, ok=False, message=str(exc)))
        else:
            report.checks.append(CheckOutcome(name=name, ok=True, message=str(value or "ok")))

    def _environment() -> None:
        # Reported, never asked: doctor does not prompt
        if ctx.host.geteuid() == 0:
            raise HostEnvironmentError("Running as root is not recommended")
        check_host(ctx)

    _check("environment", _environment)
    _check("dependencies", lambda: check_dependencies(ctx))
    _check("backend", lambda: select_backend(ctx, registry).name)
    return report
