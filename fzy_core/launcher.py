"""Open a tmux session for a chosen project directory.

The session is named after the directory's last path component.  If a
session of that name is already running we switch to it; otherwise one is
created in the directory and then switched to.  Exactly one of
{create + switch, switch} happens per launch.
"""

import enum
import os
import subprocess
from typing import Protocol

from fzy_core import tmux as tmux_mod
from fzy_core.paths import configure_logger

_log = configure_logger("fzy.launcher")

# tmux rejects these in session names (and would treat them as
# window/pane separators in targets)
_SESSION_NAME_UNSAFE = str.maketrans({".": "_", ":": "_"})


class LaunchError(Exception):
    """Raised when a session cannot be created or switched to."""


class LaunchOutcome(enum.Enum):
    CREATED = "created"
    SWITCHED = "switched"


class SessionHost(Protocol):
    """The session operations the launcher needs from tmux."""

    def list_sessions(self) -> list[str]: ...

    def create_session(self, name: str, cwd: str) -> None: ...

    def switch_client(self, name: str) -> None: ...

    def kill_session(self, name: str) -> None: ...


class TmuxHost:
    """SessionHost backed by the tmux binary.

    Inside tmux the current client is switched; outside it, this terminal
    attaches to the session instead.
    """

    def __init__(self, socket_path: str | None = None):
        self.socket_path = socket_path

    def list_sessions(self) -> list[str]:
        return tmux_mod.list_sessions(socket_path=self.socket_path)

    def create_session(self, name: str, cwd: str) -> None:
        tmux_mod.create_session(name, cwd, socket_path=self.socket_path)

    def switch_client(self, name: str) -> None:
        if tmux_mod.in_tmux():
            tmux_mod.switch_client(name, socket_path=self.socket_path)
        else:
            tmux_mod.attach(name, socket_path=self.socket_path)

    def kill_session(self, name: str) -> None:
        tmux_mod.kill_session(name, socket_path=self.socket_path)


def session_name_for(path: str) -> str:
    """Derive the session name for a project path.

    >>> session_name_for("/home/u/Music")
    'Music'
    >>> session_name_for("/srv/example.com/")
    'example_com'
    """
    base = os.path.basename(os.path.normpath(path))
    if not base or base in (os.sep, ".", ".."):
        raise LaunchError(f"Cannot derive a session name from {path!r}")
    return base.translate(_SESSION_NAME_UNSAFE)


def _describe(e: Exception) -> str:
    if isinstance(e, subprocess.CalledProcessError):
        detail = e.stderr.strip() if isinstance(e.stderr, str) else ""
        return detail or f"tmux exited with status {e.returncode}"
    return str(e)


def launch(path: str, host: SessionHost) -> LaunchOutcome:
    """Switch to the session for *path*, creating it first if needed.

    Raises LaunchError if the directory is gone or tmux refuses.  A session
    created here is killed again if switching to it fails.
    """
    name = session_name_for(path)
    if not os.path.isdir(path):
        raise LaunchError(f"{path} is not a directory")

    try:
        existing = host.list_sessions()
    except (subprocess.CalledProcessError, OSError) as e:
        raise LaunchError(f"Could not list tmux sessions: {_describe(e)}") from e

    if name in existing:
        _log.info("switching to existing session %s", name)
        try:
            host.switch_client(name)
        except (subprocess.CalledProcessError, OSError) as e:
            raise LaunchError(f"Could not switch to session {name}: {_describe(e)}") from e
        return LaunchOutcome.SWITCHED

    _log.info("creating session %s in %s", name, path)
    try:
        host.create_session(name, path)
    except (subprocess.CalledProcessError, OSError) as e:
        raise LaunchError(f"Could not create session {name}: {_describe(e)}") from e
    try:
        host.switch_client(name)
    except (subprocess.CalledProcessError, OSError) as e:
        _log.warning("switch to new session %s failed, removing it", name)
        host.kill_session(name)
        raise LaunchError(f"Could not switch to session {name}: {_describe(e)}") from e
    return LaunchOutcome.CREATED


def open_sessions(host: SessionHost) -> set[str]:
    """Names of running sessions, or an empty set if tmux can't be asked."""
    try:
        return set(host.list_sessions())
    except (subprocess.CalledProcessError, OSError) as e:
        _log.debug("listing sessions failed: %s", e)
        return set()
