"""
Tests for the fetch pipeline: bounded retries with fixed backoff.
"""

import pytest

from tests.fakes import FakeBackend
from zix_installer.core.errors import FetchError
from zix_installer.core.services.backend import select_backend
from zix_installer.core.services.fetch import MAX_ATTEMPTS, RETRY_DELAY, fetch_artifact

URL = "https://example.test/zix"


class TestFetchArtifact:
    @pytest.mark.parametrize("failures", [0, 1, 2])
    def test_first_success_stops_retrying(self, ctx, tmp_path, failures):
        backend = FakeBackend(failures=failures)
        dest = tmp_path / "zix.tmp"
        attempts = fetch_artifact(ctx, URL, dest, backend)

        assert backend.calls == failures + 1
        assert len(attempts) == failures + 1
        assert attempts[-1].ok
        assert all(not a.ok for a in attempts[:-1])
        assert dest.read_text().startswith("#!")

    @pytest.mark.parametrize("failures", [3, 5])
    def test_exhausts_exactly_max_attempts(self, ctx, tmp_path, failures):
        backend = FakeBackend(failures=failures)
        with pytest.raises(FetchError) as exc_info:
            fetch_artifact(ctx, URL, tmp_path / "zix.tmp", backend)

        assert backend.calls == MAX_ATTEMPTS
        assert [a.index for a in exc_info.value.attempts] == [1, 2, 3]
        assert all(a.backend == "curl" for a in exc_info.value.attempts)

    def test_backoff_between_attempts_only(self, ctx, tmp_path):
        with pytest.raises(FetchError):
            fetch_artifact(ctx, URL, tmp_path / "zix.tmp", FakeBackend(failures=9))
        assert ctx.host.sleeps == [RETRY_DELAY, RETRY_DELAY]

    def test_no_sleep_on_first_try_success(self, ctx, tmp_path):
        fetch_artifact(ctx, URL, tmp_path / "zix.tmp", FakeBackend())
        assert ctx.host.sleeps == []

    def test_partial_file_left_for_caller(self, ctx, tmp_path):
        dest = tmp_path / "zix.tmp"
        with pytest.raises(FetchError):
            fetch_artifact(ctx, URL, dest, FakeBackend(failures=3))
        assert dest.exists()

    def test_attempts_logged(self, ctx, tmp_path, config):
        with ctx.channel:
            with pytest.raises(FetchError):
                fetch_artifact(ctx, URL, tmp_path / "zix.tmp", FakeBackend("wget", failures=3))
            text = config.log_file.read_text()
        assert "using wget" in text
        assert "Download attempt 1 failed" in text
        assert "Download attempt 3 failed" in text
        assert "Retry attempt 2/3" in text


class TestSelectBackend:
    def test_forced_backend(self, make_ctx, make_config, registry):
        ctx = make_ctx(make_config(downloader="wget"))
        assert select_backend(ctx, registry).name == "wget"

    def test_priority_order(self, ctx, registry):
        assert select_backend(ctx, registry).name == "curl"
