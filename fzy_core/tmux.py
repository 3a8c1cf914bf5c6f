"""Tmux session management for tmux-fzy."""

import os
import shlex
import subprocess

from fzy_core.paths import configure_logger

_log = configure_logger("fzy.tmux")


def _tmux_cmd(*args: str, socket_path: str | None = None) -> list[str]:
    """Build a tmux command with optional custom socket.

    If socket_path is given, uses it.  Otherwise checks the TMUX_FZY_SOCKET
    env var, so every call talks to the same server.
    """
    cmd = ["tmux"]
    sp = socket_path or os.environ.get("TMUX_FZY_SOCKET")
    if sp:
        cmd.extend(["-S", sp])
    cmd.extend(args)
    return cmd


def _run(cmd: list[str], **kwargs) -> subprocess.CompletedProcess:
    """Run a tmux command, logging it before execution and on failure."""
    _log.info("shell: %s", shlex.join(cmd))
    result = subprocess.run(cmd, **kwargs)
    if result.returncode != 0:
        stderr = getattr(result, "stderr", "") or ""
        _log.debug("shell failed (rc=%d): %s", result.returncode, str(stderr)[:200])
    return result


def has_tmux() -> bool:
    """Check if tmux is installed."""
    import shutil
    return shutil.which("tmux") is not None


def in_tmux() -> bool:
    """Check if we're currently inside a tmux session."""
    return bool(os.environ.get("TMUX"))


def list_sessions(socket_path: str | None = None) -> list[str]:
    """Return the names of all sessions, or [] when no server is running."""
    result = _run(
        _tmux_cmd("list-sessions", "-F", "#{session_name}", socket_path=socket_path),
        capture_output=True, text=True,
    )
    if result.returncode != 0:
        return []
    return [line for line in result.stdout.splitlines() if line]


def session_exists(name: str, socket_path: str | None = None) -> bool:
    """Check if a tmux session with the given name exists."""
    # "=" forces an exact match; plain -t would also accept a prefix
    result = _run(
        _tmux_cmd("has-session", "-t", f"={name}", socket_path=socket_path),
        capture_output=True,
    )
    return result.returncode == 0


def create_session(name: str, cwd: str, socket_path: str | None = None) -> None:
    """Create a detached tmux session with its working directory set to cwd."""
    _run(
        _tmux_cmd("new-session", "-d", "-s", name, "-c", cwd, socket_path=socket_path),
        check=True, capture_output=True, text=True,
    )


def switch_client(name: str, socket_path: str | None = None) -> None:
    """Point the current tmux client at a session (must be inside tmux)."""
    _run(
        _tmux_cmd("switch-client", "-t", f"={name}", socket_path=socket_path),
        check=True, capture_output=True, text=True,
    )


def attach(name: str, socket_path: str | None = None) -> None:
    """Attach this terminal to a session.  Blocks until the client detaches."""
    _run(
        _tmux_cmd("attach-session", "-t", f"={name}", socket_path=socket_path),
        check=True,
    )


def kill_session(name: str, socket_path: str | None = None) -> None:
    """Kill a tmux session."""
    _run(
        _tmux_cmd("kill-session", "-t", f"={name}", socket_path=socket_path),
        check=False, capture_output=True,
    )
