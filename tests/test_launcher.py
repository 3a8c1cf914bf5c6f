"""Tests for fzy_core.launcher — create-or-switch session orchestration."""

import subprocess
from unittest.mock import patch, MagicMock

import pytest

from fzy_core.launcher import (
    LaunchError,
    LaunchOutcome,
    TmuxHost,
    launch,
    open_sessions,
    session_name_for,
)


@pytest.fixture
def project(tmp_path):
    d = tmp_path / "Music"
    d.mkdir()
    return str(d)


# ---------------------------------------------------------------------------
# session_name_for
# ---------------------------------------------------------------------------

class TestSessionName:
    def test_last_component(self):
        assert session_name_for("/home/u/Music") == "Music"

    def test_trailing_slash(self):
        assert session_name_for("/home/u/Code/proj/") == "proj"

    def test_dots_and_colons_replaced(self):
        assert session_name_for("/srv/example.com") == "example_com"
        assert session_name_for("/x/a:b") == "a_b"

    def test_root_rejected(self):
        with pytest.raises(LaunchError):
            session_name_for("/")

    def test_deterministic(self):
        assert session_name_for("/a/b/c") == session_name_for("/a/b/c")


# ---------------------------------------------------------------------------
# launch
# ---------------------------------------------------------------------------

class TestLaunch:
    def test_creates_then_switches(self, project, fake_host):
        assert launch(project, fake_host) is LaunchOutcome.CREATED
        assert fake_host.ops("create") == [("create", "Music", project)]
        assert fake_host.ops("switch") == [("switch", "Music")]
        # create comes before switch
        kinds = [r[0] for r in fake_host.requests]
        assert kinds.index("create") < kinds.index("switch")

    def test_existing_session_only_switches(self, project, make_host):
        host = make_host(sessions=["Music"])
        assert launch(project, host) is LaunchOutcome.SWITCHED
        assert host.ops("create") == []
        assert host.ops("switch") == [("switch", "Music")]

    def test_second_run_switches(self, project, fake_host):
        launch(project, fake_host)
        launch(project, fake_host)
        assert len(fake_host.ops("create")) == 1
        assert len(fake_host.ops("switch")) == 2

    def test_exact_name_match_only(self, project, make_host):
        host = make_host(sessions=["Music2", "MusicBox"])
        assert launch(project, host) is LaunchOutcome.CREATED

    def test_missing_directory(self, tmp_path, fake_host):
        with pytest.raises(LaunchError, match="not a directory"):
            launch(str(tmp_path / "gone"), fake_host)
        assert fake_host.requests == []

    def test_create_failure(self, project, make_host):
        host = make_host(fail_on={"create"})
        with pytest.raises(LaunchError, match="create failed"):
            launch(project, host)
        assert host.ops("switch") == []

    def test_switch_failure_rolls_back_new_session(self, project, make_host):
        host = make_host(fail_on={"switch"})
        with pytest.raises(LaunchError, match="Could not switch"):
            launch(project, host)
        assert host.ops("kill") == [("kill", "Music")]
        assert "Music" not in host.sessions

    def test_switch_failure_keeps_existing_session(self, project, make_host):
        host = make_host(sessions=["Music"], fail_on={"switch"})
        with pytest.raises(LaunchError):
            launch(project, host)
        assert host.ops("kill") == []
        assert host.sessions == ["Music"]

    def test_list_failure(self, project, make_host):
        host = make_host(fail_on={"list"})
        with pytest.raises(LaunchError, match="list"):
            launch(project, host)
        assert host.ops("create") == []

    def test_os_error_wrapped(self, project, fake_host):
        fake_host.create_session = MagicMock(side_effect=FileNotFoundError("tmux"))
        with pytest.raises(LaunchError):
            launch(project, fake_host)


class TestOpenSessions:
    def test_returns_set(self, make_host):
        assert open_sessions(make_host(sessions=["a", "b"])) == {"a", "b"}

    def test_failure_is_empty(self, make_host):
        assert open_sessions(make_host(fail_on={"list"})) == set()


# ---------------------------------------------------------------------------
# TmuxHost
# ---------------------------------------------------------------------------

class TestTmuxHost:
    @patch("fzy_core.launcher.tmux_mod")
    def test_switch_inside_tmux(self, mock_tmux):
        mock_tmux.in_tmux.return_value = True
        TmuxHost().switch_client("Music")
        mock_tmux.switch_client.assert_called_once_with("Music", socket_path=None)
        mock_tmux.attach.assert_not_called()

    @patch("fzy_core.launcher.tmux_mod")
    def test_attach_outside_tmux(self, mock_tmux):
        mock_tmux.in_tmux.return_value = False
        TmuxHost().switch_client("Music")
        mock_tmux.attach.assert_called_once_with("Music", socket_path=None)
        mock_tmux.switch_client.assert_not_called()

    @patch("fzy_core.launcher.tmux_mod")
    def test_socket_forwarded(self, mock_tmux):
        host = TmuxHost(socket_path="/tmp/s")
        host.create_session("Music", "/home/u/Music")
        host.list_sessions()
        host.kill_session("Music")
        mock_tmux.create_session.assert_called_once_with(
            "Music", "/home/u/Music", socket_path="/tmp/s")
        mock_tmux.list_sessions.assert_called_once_with(socket_path="/tmp/s")
        mock_tmux.kill_session.assert_called_once_with("Music", socket_path="/tmp/s")

    @patch("fzy_core.tmux.subprocess.run")
    def test_launch_through_tmux(self, mock_run, project, monkeypatch):
        monkeypatch.setenv("TMUX", "/tmp/tmux-1000/default,1,0")
        mock_run.return_value = MagicMock(returncode=0, stdout="other\n")
        assert launch(project, TmuxHost()) is LaunchOutcome.CREATED
        verbs = [c[0][0][1] for c in mock_run.call_args_list]
        assert verbs == ["list-sessions", "new-session", "switch-client"]

    @patch("fzy_core.tmux.subprocess.run")
    def test_stderr_in_error(self, mock_run, project, monkeypatch):
        monkeypatch.setenv("TMUX", "/tmp/tmux-1000/default,1,0")

        def fake_run(cmd, **kwargs):
            if "new-session" in cmd:
                raise subprocess.CalledProcessError(1, cmd, stderr="duplicate session: Music\n")
            return MagicMock(returncode=0, stdout="")

        mock_run.side_effect = fake_run
        with pytest.raises(LaunchError, match="duplicate session: Music"):
            launch(project, TmuxHost())
