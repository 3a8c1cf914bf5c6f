"""Project list commands for the tmux-fzy CLI.

Registers ``add``, ``list`` and ``del``.  These are the only places the
stored list is written; the picker only reads it.
"""

import click

from fzy_core import tmux as tmux_mod
from fzy_core import store as store_mod
from fzy_core.launcher import TmuxHost, open_sessions
from fzy_core.store import CandidateStore, StoreLockTimeout

from fzy_core.cli import cli
from fzy_core.cli.helpers import _log, canonical_path, fail, open_project_paths


@cli.command("add")
@click.argument("paths", nargs=-1, required=True,
                type=click.Path(exists=True, file_okay=False, resolve_path=True))
@click.option("--mindepth", type=click.IntRange(min=0), default=0,
              help="Skip directories shallower than this (0 = the path itself)")
@click.option("--maxdepth", type=click.IntRange(min=0), default=None,
              help="Also add subdirectories down to this depth (default: mindepth)")
def add_cmd(paths: tuple[str, ...], mindepth: int, maxdepth: int | None):
    """Add directories to the project list.

    \b
    Examples:
      tmux-fzy add .                      # the current directory
      tmux-fzy add ~/code --mindepth 1    # every directory directly in ~/code
    """
    if maxdepth is None:
        maxdepth = mindepth
    if mindepth > maxdepth:
        raise click.BadParameter("--mindepth cannot exceed --maxdepth",
                                 param_hint="'--mindepth'")

    expanded: list[str] = []
    for p in paths:
        expanded.extend(store_mod.expand_directories(p, mindepth, maxdepth))

    added: list[str] = []

    def _apply(s: CandidateStore) -> None:
        added.extend(s.add(expanded))

    try:
        store_mod.locked_update(_apply)
    except StoreLockTimeout as e:
        fail(str(e))

    _log.info("add: %d new of %d", len(added), len(expanded))
    for p in added:
        click.echo(f"  {click.format_filename(p)}")
    click.echo(f"Added {len(added)} path(s).")


@cli.command("list")
def list_cmd():
    """List stored projects (* = tmux session running)."""
    s = CandidateStore.load()
    running: set[str] = set()
    if tmux_mod.has_tmux():
        running = open_sessions(TmuxHost())
    open_paths = open_project_paths(s, running)
    for i, p in enumerate(s, 1):
        marker = click.style(" *", fg="green") if p in open_paths else ""
        click.echo(click.style(f"{i}: ", fg="blue") + click.format_filename(p) + marker)


@cli.command("del")
@click.argument("paths", nargs=-1, required=True)
def del_cmd(paths: tuple[str, ...]):
    """Remove directories from the project list.

    The directories don't need to exist any more.
    """
    targets = [canonical_path(p) for p in paths]
    removed: list[str] = []

    def _apply(s: CandidateStore) -> None:
        removed.extend(s.remove(targets))

    try:
        store_mod.locked_update(_apply)
    except StoreLockTimeout as e:
        fail(str(e))

    for p in targets:
        if p not in removed:
            click.echo(f"Not in project list: {click.format_filename(p)}", err=True)
    click.echo(f"Removed {len(removed)} path(s).")
