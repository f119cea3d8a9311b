"""
Shared test fixtures and configuration.

Every test gets a tmp_path home, a Host with fake probes and fake
backends; nothing touches the network or the real home directory.
"""

import logging
from pathlib import Path

import pytest

from tests.fakes import FakeBackend, make_host
from zix_installer.adapters.registry import BackendRegistry
from zix_installer.context import InstallContext
from zix_installer.core.models.config import InstallationConfig
from zix_installer.core.observability.channel import LogChannel


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """setup_logging() and LogChannel reconfigure the root logger; undo it."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """A fresh, empty home directory."""
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def make_config(home: Path, tmp_path: Path):
    def _make(**overrides) -> InstallationConfig:
        values = {
            "url": "https://example.test/zix",
            "home": home,
            "zig_home": home / ".zig",
            "bin_dir": home / ".local" / "bin",
            "log_file": tmp_path / "logs" / "zix-install.log",
        }
        values.update(overrides)
        return InstallationConfig(**values)

    return _make


@pytest.fixture
def config(make_config) -> InstallationConfig:
    return make_config()


@pytest.fixture
def make_ctx(config: InstallationConfig, home: Path):
    def _make(cfg: InstallationConfig | None = None, **host_kwargs) -> InstallContext:
        cfg = cfg or config
        return InstallContext(
            config=cfg,
            channel=LogChannel(cfg.log_file, console=False),
            host=make_host(home, **host_kwargs),
        )

    return _make


@pytest.fixture
def ctx(make_ctx) -> InstallContext:
    return make_ctx()


@pytest.fixture
def registry() -> BackendRegistry:
    return BackendRegistry([FakeBackend("curl"), FakeBackend("wget"), FakeBackend("aria2c")])
