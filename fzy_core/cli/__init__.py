"""Click CLI definitions for tmux-fzy.

The ``cli`` group, ``main`` entry point, and the picker command live here.
Shared helpers (HelpGroup, fail, ...) are in ``cli.helpers``.

Command groups are split into submodules:
- cli.projects - add / list / del on the stored project list
- cli.session  - open / kill a project's tmux session directly
"""

import click

from fzy_core import tmux as tmux_mod
from fzy_core.colors import load_colors
from fzy_core.launcher import LaunchError, TmuxHost, launch, open_sessions
from fzy_core.store import CandidateStore
from fzy_core.tui import TerminalError, run_picker

from fzy_core.cli.helpers import (
    CONTEXT_SETTINGS,
    EXIT_CANCELLED,
    HelpGroup,
    _log,
    fail,
    open_project_paths,
)


@click.group(invoke_without_command=True, cls=HelpGroup, context_settings=CONTEXT_SETTINGS)
@click.option("--max-rows", type=click.IntRange(min=1), default=None,
              help="Show at most this many results")
@click.pass_context
def cli(ctx, max_rows: int | None):
    """tmux-fzy - fuzzy-find a project and jump to its tmux session.

    With no command, opens the picker over the stored projects.  Type to
    filter, Up/Down (or Ctrl-K/Ctrl-J) to move, Enter to open, Esc to quit.
    """
    if ctx.invoked_subcommand is None:
        ctx.invoke(pick_cmd, max_rows=max_rows)


@cli.command("pick")
@click.option("--max-rows", type=click.IntRange(min=1), default=None,
              help="Show at most this many results")
def pick_cmd(max_rows: int | None):
    """Open the picker (the default command)."""
    if not tmux_mod.has_tmux():
        fail("tmux is required for tmux-fzy. Install it first.")

    store = CandidateStore.load()
    colors = load_colors()
    host = TmuxHost()
    open_paths = open_project_paths(store, open_sessions(host))

    try:
        result = run_picker(store.candidates, colors,
                            open_paths=open_paths, max_rows=max_rows)
    except TerminalError as e:
        fail(str(e))
    except KeyboardInterrupt:
        raise SystemExit(EXIT_CANCELLED)

    if not result.confirmed:
        _log.info("picker cancelled")
        raise SystemExit(EXIT_CANCELLED)

    # The terminal is back in its normal mode here
    try:
        outcome = launch(result.path, host)
    except LaunchError as e:
        fail(str(e))
    _log.info("%s session for %s", outcome.value, result.path)


# ---------------------------------------------------------------------------
# Import submodules to register their commands on ``cli``.
# This must be at the bottom of the file, after ``cli`` is defined.
# ---------------------------------------------------------------------------
from fzy_core.cli import projects, session  # noqa: E402, F401


def main():
    cli()
