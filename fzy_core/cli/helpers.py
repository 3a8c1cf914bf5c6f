"""Shared helpers for the tmux-fzy CLI package.

Contains the HelpGroup class, error reporting, and path normalization used
across the CLI submodules.
"""

import os

import click

from fzy_core.launcher import LaunchError, session_name_for
from fzy_core.paths import configure_logger

_log = configure_logger("fzy.cli")

# Shared Click settings: make -h and --help both work everywhere
CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])

# Picker closed without a selection.  Not an error, but distinct from 0 so
# shell bindings can tell the two apart.
EXIT_CANCELLED = 130


class HelpGroup(click.Group):
    """Click Group that treats 'help' as an alias for --help everywhere.

    Handles two cases:
    - ``tmux-fzy help`` - 'help' as the command name on the group
    - ``tmux-fzy add help`` - 'help' as an arg to a leaf command
    """

    def resolve_command(self, ctx, args):
        if args and args[0] == "help":
            if super().get_command(ctx, "help") is not None:
                return super().resolve_command(ctx, args)
            click.echo(ctx.get_help(), color=ctx.color)
            ctx.exit()
        cmd_name, cmd, remaining = super().resolve_command(ctx, args)
        if (remaining and remaining[0] == "help"
                and cmd is not None and not isinstance(cmd, click.Group)):
            remaining = ["--help"] + remaining[1:]
        return cmd_name, cmd, remaining


def fail(message: str) -> None:
    """Print one error line to stderr and exit with status 1."""
    _log.error(message)
    click.echo(click.style("Error: ", fg="red", bold=True) + message, err=True)
    raise SystemExit(1)


def canonical_path(path: str) -> str:
    """Absolute, symlink-resolved form of *path* (which may not exist)."""
    return os.path.realpath(os.path.abspath(os.path.expanduser(path)))


def session_name_or_none(path: str) -> str | None:
    try:
        return session_name_for(path)
    except LaunchError:
        return None


def open_project_paths(paths, running: set[str]) -> set[str]:
    """Subset of *paths* whose session is in *running*."""
    return {p for p in paths if session_name_or_none(p) in running}
