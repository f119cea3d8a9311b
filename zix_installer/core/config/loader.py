"""
Configuration loader: environment + optional YAML into InstallationConfig.

Precedence, highest first:
    explicit overrides (CLI)  >  environment  >  ZIX_INSTALL_CONFIG file  >  defaults

Environment variables:
    ZIX_URL             artifact URL
    ZIG_HOME            install root            (default: $HOME/.zig)
    ZIX_BIN_DIR         symlink directory       (default: $HOME/.local/bin)
    ZIX_DOWNLOADER      force a fetch backend   (default: priority order)
    ZIX_LOG             run log path            (default: <tmp>/zix-install-<pid>.log)
    ZIX_INSTALL_CONFIG  path to a YAML file with the same keys
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from zix_installer import __version__
from zix_installer.core.errors import SettingsError
from zix_installer.core.models.config import DEFAULT_URL, InstallationConfig

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV = "ZIX_INSTALL_CONFIG"

# config key → environment variable
_ENV_KEYS: dict[str, str] = {
    "url": "ZIX_URL",
    "zig_home": "ZIG_HOME",
    "bin_dir": "ZIX_BIN_DIR",
    "downloader": "ZIX_DOWNLOADER",
    "log_file": "ZIX_LOG",
}


def read_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML config file into a plain mapping.

    Raises:
        SettingsError: If the file is missing, unreadable, or not a mapping.
    """
    if not path.is_file():
        raise SettingsError(f"Config file not found: {path}")

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SettingsError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise SettingsError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SettingsError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    unknown = sorted(set(data) - set(_ENV_KEYS))
    if unknown:
        logger.warning("Ignoring unknown config keys in %s: %s", path, ", ".join(unknown))
    return {k: v for k, v in data.items() if k in _ENV_KEYS and v is not None}


def load_config(
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> InstallationConfig:
    """Build the run's InstallationConfig.

    Args:
        env: Environment mapping (default: ``os.environ``).
        overrides: Values that win over everything else, e.g. CLI options.
            ``None`` values are ignored.

    Raises:
        SettingsError: If a source is unreadable or the result is invalid.
    """
    env = os.environ if env is None else env
    home = Path(env.get("HOME") or Path.home())

    values: dict[str, Any] = {
        "url": DEFAULT_URL,
        "zig_home": home / ".zig",
        "bin_dir": home / ".local" / "bin",
        "log_file": Path(tempfile.gettempdir()) / f"zix-install-{os.getpid()}.log",
    }

    config_file = env.get(CONFIG_FILE_ENV)
    if config_file:
        logger.debug("Loading installer config from %s", config_file)
        values.update(read_config_file(Path(config_file).expanduser()))

    for key, var in _ENV_KEYS.items():
        if env.get(var):
            values[key] = env[var]

    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value

    for key in ("zig_home", "bin_dir", "log_file"):
        values[key] = _absolute(values[key], home)

    try:
        return InstallationConfig(
            home=home,
            installer_version=__version__,
            **values,
        )
    except ValidationError as e:
        raise SettingsError(f"Invalid installer configuration: {_first_error(e)}") from e


def _absolute(value: Any, home: Path) -> Path:
    """Expand ``~`` against the configured home and anchor relative paths."""
    text = str(value)
    if text == "~" or text.startswith("~/"):
        text = str(home) + text[1:]
    return Path(os.path.abspath(text))


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    field = ".".join(str(p) for p in err.get("loc", ())) or "config"
    return f"{field}: {err.get('msg', 'invalid value')}"
