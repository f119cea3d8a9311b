"""
Artifact integrity: decide whether a fetched script may be trusted.

Checks run in order and stop at the first failure:

1. the file exists and is non-empty
2. the first line is an interpreter directive (``#!``), which rules out
   HTML error pages and truncated downloads
3. no dangerous idioms (encoded eval, fetch-and-pipe-to-shell); a hit
   is a soft failure the user may override interactively, and is
   always fatal in pipe mode
4. ``bash -n`` parses it without running it

The pattern scan is a non-exhaustive safety net, not a security
boundary.  Nothing in the artifact is ever executed here.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from zix_installer.context import InstallContext
from zix_installer.core.errors import IntegrityError

logger = logging.getLogger(__name__)

SYNTAX_CHECKER = "bash"

# Line-oriented: ``.`` never crosses a newline
DANGEROUS_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"eval.*base64"),
    re.compile(r"curl.*\|.*sh"),
    re.compile(r"wget.*\|.*sh"),
)


def find_dangerous_lines(text: str) -> list[tuple[int, str]]:
    """Return ``(line_number, line)`` for every line matching a pattern."""
    hits: list[tuple[int, str]] = []
    for number, line in enumerate(text.splitlines(), start=1):
        if any(p.search(line) for p in DANGEROUS_PATTERNS):
            hits.append((number, line.strip()))
    return hits


def verify_artifact(ctx: InstallContext, path: Path) -> None:
    """Raise IntegrityError unless ``path`` passes every check."""
    channel, host = ctx.channel, ctx.host
    channel.note("Verifying script integrity...")

    # ── 1. Present and non-empty ──
    if not path.is_file() or path.stat().st_size == 0:
        raise IntegrityError("Downloaded file is missing or empty")

    text = path.read_text(encoding="utf-8", errors="replace")

    # ── 2. Interpreter directive ──
    first_line = text.split("\n", 1)[0]
    if not first_line.startswith("#!"):
        raise IntegrityError("Downloaded file is missing shebang")

    # ── 3. Dangerous idioms ──
    hits = find_dangerous_lines(text)
    if hits:
        channel.warn("Script contains potentially dangerous patterns")
        for number, line in hits[:5]:
            channel.note("  line %d: %s", number, line)
        if not host.interactive:
            raise IntegrityError(
                "Verification failed: script contains suspicious patterns. Review manually."
            )
        channel.warn(f"Please review: {path}")
        if not host.ask("Continue anyway?", default=False):
            raise IntegrityError("Script rejected after manual review")
        channel.note("Suspicious patterns accepted by user")

    # ── 4. Syntax only ──
    _check_syntax(ctx, path)

    channel.note("Script verification passed")


def _check_syntax(ctx: InstallContext, path: Path) -> None:
    host, channel = ctx.host, ctx.channel
    if not host.which(SYNTAX_CHECKER):
        channel.warn(f"{SYNTAX_CHECKER} not found, skipping syntax check")
        return

    result = host.run([SYNTAX_CHECKER, "-n", str(path)], timeout=30)
    if not result.ok:
        raise IntegrityError("Script has syntax errors")
