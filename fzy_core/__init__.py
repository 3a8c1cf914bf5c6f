"""tmux-fzy: fuzzy-pick a project directory and jump to its tmux session."""

__version__ = "0.3.0"
