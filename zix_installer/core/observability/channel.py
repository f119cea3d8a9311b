"""
LogChannel: the single diagnostic sink of one install run.

Opened at run start, written by every stage, and disposed on every
exit path.  The file is deleted when the run is marked successful and
kept (with its location printed) otherwise.

Console lines and log lines are emitted together::

    channel.info("Downloading ...")      # ==> Downloading ...   + [ts] INFO: ...
    channel.success("Created symlink")   # ✓ Created symlink      + [ts] SUCCESS: ...
    channel.note("Pipe mode: True")      # (log only)             + [ts] INFO: ...
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import TracebackType

import click

from zix_installer.core.observability.logging_config import SUCCESS

logger = logging.getLogger("zix_installer.run")

_FMT_FILE = "[%(asctime)s] %(tag)s: %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

_TAGS = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    SUCCESS: "SUCCESS",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "ERROR",
}


class _TagFormatter(logging.Formatter):
    """Render WARNING as ``WARN`` and keep the custom SUCCESS level name."""

    def format(self, record: logging.LogRecord) -> str:
        record.tag = _TAGS.get(record.levelno, record.levelname)
        return super().format(record)


class LogChannel:
    """Run-scoped log file plus console reporter.

    Use as a context manager.  Exactly one channel is open per run; it
    attaches a DEBUG file handler to the root logger so diagnostics
    from every module land in the same file.
    """

    def __init__(self, path: Path, *, console: bool = True) -> None:
        self.path = path
        self.console = console
        self.succeeded = False
        self.retained = False
        self._handler: logging.FileHandler | None = None
        self._saved_level: int | None = None

    # ── Lifecycle ──────────────────────────────────────────────

    def open(self) -> LogChannel:
        if self._handler is not None:
            return self
        self.path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(self.path, mode="w", encoding="utf-8")
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(_TagFormatter(_FMT_FILE, datefmt=_DATEFMT_FILE))

        root = logging.getLogger()
        root.addHandler(handler)
        self._saved_level = root.level
        root.setLevel(logging.DEBUG)
        self._handler = handler
        return self

    def close(self) -> None:
        """Detach the handler; delete the file unless the run failed."""
        handler = self._handler
        if handler is None:
            return
        if not self.succeeded:
            self.retained = True
            self.error(f"Log saved to: {self.path}")

        root = logging.getLogger()
        root.removeHandler(handler)
        handler.close()
        if self._saved_level is not None:
            root.setLevel(self._saved_level)
        self._handler = None

        if self.succeeded:
            self.path.unlink(missing_ok=True)

    def mark_success(self) -> None:
        self.succeeded = True

    def __enter__(self) -> LogChannel:
        return self.open()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # ── Events ─────────────────────────────────────────────────

    def note(self, message: str, *args: object) -> None:
        """Write to the log file only."""
        logger.info(message, *args, extra={"echoed": True})

    def info(self, message: str) -> None:
        self._console("==>", message, fg="blue", bold=True)
        logger.info(message, extra={"echoed": True})

    def success(self, message: str) -> None:
        self._console("✓", message, fg="green")
        logger.log(SUCCESS, message, extra={"echoed": True})

    def warn(self, message: str) -> None:
        self._console("!", message, fg="yellow")
        logger.warning(message, extra={"echoed": True})

    def error(self, message: str) -> None:
        self._console("✗", message, fg="red", err=True)
        logger.error(message, extra={"echoed": True})

    def echo(self, message: str = "") -> None:
        """Plain console text (instructions, hints).  Not logged."""
        if self.console:
            click.echo(message)

    def _console(self, icon: str, message: str, *, fg: str, bold: bool = False, err: bool = False) -> None:
        if not self.console:
            return
        click.secho(f"{icon} ", fg=fg, nl=False, err=err)
        click.secho(message, bold=bold, err=err)
