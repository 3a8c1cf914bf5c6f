"""Shared test helpers for fzy_core tests."""

import os
import shutil
import subprocess
import tempfile

import pytest

_session_dir: str | None = None


def pytest_configure(config):
    # fzy_core modules open their log file at import time, before any
    # fixture runs; keep that file out of the real home directory
    global _session_dir
    _session_dir = tempfile.mkdtemp(prefix="tmux-fzy-tests-")
    os.environ["XDG_CACHE_HOME"] = os.path.join(_session_dir, "cache")
    os.environ["XDG_CONFIG_HOME"] = os.path.join(_session_dir, "config")


def pytest_unconfigure(config):
    if _session_dir:
        shutil.rmtree(_session_dir, ignore_errors=True)


@pytest.fixture
def session_dir():
    """Temp dir holding the XDG dirs in effect when fzy_core was imported."""
    return _session_dir


class FakeHost:
    """In-memory SessionHost that records every request."""

    def __init__(self, sessions=(), fail_on=()):
        self.sessions: list[str] = list(sessions)
        self.fail_on = set(fail_on)
        self.requests: list[tuple] = []

    def _maybe_fail(self, op: str) -> None:
        if op in self.fail_on:
            raise subprocess.CalledProcessError(1, ["tmux", op], stderr=f"{op} failed")

    def list_sessions(self) -> list[str]:
        self.requests.append(("list",))
        self._maybe_fail("list")
        return list(self.sessions)

    def create_session(self, name: str, cwd: str) -> None:
        self.requests.append(("create", name, cwd))
        self._maybe_fail("create")
        self.sessions.append(name)

    def switch_client(self, name: str) -> None:
        self.requests.append(("switch", name))
        self._maybe_fail("switch")

    def kill_session(self, name: str) -> None:
        self.requests.append(("kill", name))
        if name in self.sessions:
            self.sessions.remove(name)

    def ops(self, kind: str) -> list[tuple]:
        return [r for r in self.requests if r[0] == kind]


@pytest.fixture(autouse=True)
def xdg_dirs(tmp_path, monkeypatch):
    """Point cache and config lookups at a temp dir for every test."""
    cache = tmp_path / "cache"
    config = tmp_path / "config"
    monkeypatch.setenv("XDG_CACHE_HOME", str(cache))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config))
    monkeypatch.delenv("TMUX_FZY_SOCKET", raising=False)
    return cache, config


@pytest.fixture
def make_host():
    """Factory for FakeHost, e.g. ``make_host(sessions=["Music"])``."""
    return FakeHost


@pytest.fixture
def fake_host():
    return FakeHost()
