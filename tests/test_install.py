"""
End-to-end tests for the install use case.

Real filesystem under tmp_path, fake host probes, fake backends.
"""

import builtins
import os
import signal

import click
import pytest

from tests.fakes import FakeBackend, FakeRunner, make_host
from zix_installer.adapters.registry import BackendRegistry
from zix_installer.context import _confirm
from zix_installer.core.services.shell_profile import SENTINEL
from zix_installer.core.use_cases.install import run_install


def _script_of_size(size: int) -> str:
    head = "#!/usr/bin/env bash\necho zix\n"
    return head + "#" * (size - len(head) - 1) + "\n"


SCRIPT_200 = _script_of_size(200)


def _registry(*backends):
    return BackendRegistry(list(backends))


class TestInstallSuccess:
    def test_fresh_host(self, make_config, home):
        assert len(SCRIPT_200) == 200
        config = make_config(downloader="wget")
        backend = FakeBackend("wget", content=SCRIPT_200)
        host = make_host(home)

        result = run_install(
            config,
            host=host,
            registry=_registry(FakeBackend("curl"), backend),
            console=False,
        )

        assert result.exit_code == 0, result.error
        assert result.backend == "wget"
        assert backend.calls == 1
        assert config.artifact_path.read_text() == SCRIPT_200
        assert os.access(config.artifact_path, os.X_OK)
        assert os.readlink(config.symlink_path) == str(config.artifact_path)
        assert (home / ".bashrc").read_text().count(SENTINEL) == 1
        assert not config.log_file.exists()
        assert not result.log_retained
        assert not config.staging_path.exists()

    def test_rerun_is_idempotent(self, make_config, home):
        config = make_config()
        for _ in range(2):
            result = run_install(
                config,
                host=make_host(home),
                registry=_registry(FakeBackend("curl", content=SCRIPT_200)),
                console=False,
            )
            assert result.ok

        assert (home / ".bashrc").read_text().count(SENTINEL) == 1
        assert len(list(config.zig_home.glob("zix.backup-*"))) == 1
        assert result.profile is not None and result.profile.already_configured

    def test_retry_then_success(self, make_config, home):
        config = make_config()
        backend = FakeBackend("curl", failures=2)
        result = run_install(config, host=make_host(home), registry=_registry(backend), console=False)
        assert result.ok
        assert [a.ok for a in result.attempts] == [False, False, True]

    def test_unknown_shell_still_succeeds(self, make_config, home):
        config = make_config()
        result = run_install(
            config,
            host=make_host(home, shell="/bin/tcsh"),
            registry=_registry(FakeBackend("curl")),
            console=False,
        )
        assert result.ok
        assert result.profile is not None and result.profile.status == "skipped"
        assert not (home / ".bashrc").exists()

    def test_profile_write_failure_is_advisory(self, make_config, home):
        (home / ".bashrc").mkdir()
        result = run_install(
            make_config(),
            host=make_host(home),
            registry=_registry(FakeBackend("curl")),
            console=False,
        )
        assert result.ok
        assert result.profile is None


class TestInstallFailure:
    def test_unreachable_url(self, make_config, home):
        config = make_config(downloader="curl")
        config.zig_home.mkdir(parents=True)
        config.artifact_path.write_text("#!/bin/bash\necho previous\n")

        result = run_install(
            config,
            host=make_host(home),
            registry=_registry(FakeBackend("curl", failures=99)),
            console=False,
        )

        assert result.exit_code == 1
        assert result.stage == "fetch"
        assert len(result.attempts) == 3
        assert config.log_file.exists()
        assert result.log_retained
        assert config.artifact_path.read_text() == "#!/bin/bash\necho previous\n"
        assert list(config.zig_home.glob("zix.backup-*")) == []
        assert not config.symlink_path.exists()
        assert not config.staging_path.exists()
        assert not (home / ".bashrc").exists()

    def test_log_records_the_failure(self, make_config, home):
        config = make_config()
        run_install(
            config,
            host=make_host(home),
            registry=_registry(FakeBackend("curl", failures=99)),
            console=False,
        )
        text = config.log_file.read_text()
        assert "=== Installation started ===" in text
        assert "ERROR: Failed to download after 3 attempts" in text
        assert "Log saved to:" in text

    def test_integrity_failure_discards_staging(self, make_config, home):
        config = make_config()
        result = run_install(
            config,
            host=make_host(home),
            registry=_registry(FakeBackend("curl", content="<html>oops</html>\n")),
            console=False,
        )
        assert result.exit_code == 1
        assert result.stage == "integrity"
        assert not config.staging_path.exists()
        assert not config.artifact_path.exists()

    def test_missing_dependencies_stop_before_fetch(self, make_config, home):
        backend = FakeBackend("curl")
        result = run_install(
            make_config(),
            host=make_host(home, tools={"curl", "bash"}),
            registry=_registry(backend),
            console=False,
        )
        assert result.exit_code == 1
        assert result.stage == "dependencies"
        assert backend.calls == 0

    def test_no_backend(self, make_config, home):
        result = run_install(
            make_config(),
            host=make_host(home, tools={"jq", "tar", "sha256sum"}),
            registry=BackendRegistry.default(),
            console=False,
        )
        assert result.exit_code == 1
        assert result.stage == "backend"

    def test_root_in_pipe_mode(self, make_config, home):
        result = run_install(
            make_config(),
            host=make_host(home, euid=0),
            registry=_registry(FakeBackend("curl")),
            console=False,
        )
        assert result.exit_code == 1
        assert result.stage == "environment"

    def test_unwritable_log_location(self, make_config, home, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        result = run_install(
            make_config(log_file=blocker / "run.log"),
            host=make_host(home),
            registry=_registry(FakeBackend("curl")),
            console=False,
        )
        assert result.exit_code == 1
        assert result.stage == "log"


class TestInterruption:
    class _InterruptingBackend(FakeBackend):
        def __init__(self, raiser):
            super().__init__("curl")
            self._raiser = raiser

        def fetch(self, url, destination, *, user_agent, run=None):
            destination.write_text("#!/bin/bash\npartial")
            self._raiser()

    def _raise_keyboard_interrupt(self):
        raise KeyboardInterrupt

    def _send_sigterm(self):
        os.kill(os.getpid(), signal.SIGTERM)

    @pytest.mark.parametrize("how", ["_raise_keyboard_interrupt", "_send_sigterm"])
    def test_interrupt_exits_130(self, make_config, home, how):
        config = make_config()
        backend = self._InterruptingBackend(getattr(self, how))
        result = run_install(config, host=make_host(home), registry=_registry(backend), console=False)

        assert result.exit_code == 130
        assert result.stage == "interrupted"
        assert config.log_file.exists()
        assert not config.staging_path.exists()

    @pytest.fixture
    def ctrl_c_at_prompt(self, monkeypatch):
        def _prompt(text=""):
            raise KeyboardInterrupt

        monkeypatch.setattr(builtins, "input", _prompt)
        monkeypatch.setattr(click.termui, "visible_prompt_func", _prompt, raising=False)

    def test_ctrl_c_at_root_prompt(self, make_config, home, ctrl_c_at_prompt):
        config = make_config()
        backend = FakeBackend()
        host = make_host(home, euid=0, interactive=True)
        host.confirm = _confirm

        result = run_install(config, host=host, registry=_registry(backend), console=False)

        assert result.exit_code == 130
        assert result.stage == "interrupted"
        assert backend.calls == 0
        assert config.log_file.exists()

    def test_ctrl_c_at_completion_prompt(self, make_config, home, ctrl_c_at_prompt):
        config = make_config()
        host = make_host(home, interactive=True)
        host.confirm = _confirm

        result = run_install(config, host=host, registry=_registry(FakeBackend()), console=False)

        assert result.exit_code == 130
        assert result.log_retained
        assert config.artifact_path.exists()

    def test_sigterm_handler_restored(self, make_config, home):
        before = signal.getsignal(signal.SIGTERM)
        run_install(make_config(), host=make_host(home), registry=_registry(FakeBackend()), console=False)
        assert signal.getsignal(signal.SIGTERM) == before


class TestCompletions:
    def test_installed_when_confirmed(self, make_config, home):
        config = make_config()
        runner = FakeRunner()
        host = make_host(home, interactive=True, answers=[True], runner=runner)

        result = run_install(config, host=host, registry=_registry(FakeBackend()), console=False)

        assert result.ok
        assert host.asked == ["Install shell completions?"]
        assert [str(config.symlink_path), "completion-install"] in runner.calls

    def test_failure_is_only_a_warning(self, make_config, home):
        config = make_config()
        runner = FakeRunner(fail={"zix"})
        host = make_host(home, interactive=True, answers=[True], runner=runner)

        result = run_install(config, host=host, registry=_registry(FakeBackend()), console=False)
        assert result.ok

    def test_never_prompted_in_pipe_mode(self, make_config, home):
        runner = FakeRunner()
        host = make_host(home, interactive=False, runner=runner)
        result = run_install(make_config(), host=host, registry=_registry(FakeBackend()), console=False)
        assert result.ok
        assert host.asked == []
        assert not any("completion-install" in call for call in runner.calls)
