"""Session commands for the tmux-fzy CLI.

``open`` runs the same create-or-switch as the picker for a path given on
the command line; ``kill`` ends the session a path maps to.
"""

import click

from fzy_core import tmux as tmux_mod
from fzy_core.launcher import LaunchError, TmuxHost, launch, session_name_for

from fzy_core.cli import cli
from fzy_core.cli.helpers import _log, canonical_path, fail


def _require_tmux() -> None:
    if not tmux_mod.has_tmux():
        fail("tmux is required for tmux-fzy. Install it first.")


@cli.command("open")
@click.argument("path", type=click.Path(exists=True, file_okay=False, resolve_path=True))
def open_cmd(path: str):
    """Switch to PATH's tmux session, creating it if needed."""
    _require_tmux()
    try:
        outcome = launch(path, TmuxHost())
    except LaunchError as e:
        fail(str(e))
    _log.info("open: %s session for %s", outcome.value, path)


@cli.command("kill")
@click.argument("path")
def kill_cmd(path: str):
    """Kill the tmux session that PATH maps to."""
    _require_tmux()
    try:
        name = session_name_for(canonical_path(path))
    except LaunchError as e:
        fail(str(e))
    if not tmux_mod.session_exists(name):
        fail(f"No tmux session named {name}")
    tmux_mod.kill_session(name)
    click.echo(f"Killed session {name}")
