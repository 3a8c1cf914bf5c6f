"""Centralized path management for tmux-fzy.

Locations follow the XDG base directories:
- $XDG_CACHE_HOME/.tmux-fzy          - Stored project paths (one per line)
- $XDG_CACHE_HOME/tmux-fzy/debug/    - Rotating debug log
- $XDG_CONFIG_HOME/tmux-fzy/         - config.yaml (colors) and the debug marker

Each falls back to ~/.cache or ~/.config when the variable is unset or not
an absolute path.
"""

import logging
import os
from pathlib import Path

CACHE_FILE_NAME = ".tmux-fzy"
APP_DIR_NAME = "tmux-fzy"


def _xdg_dir(env_var: str, fallback: str) -> Path:
    value = os.environ.get(env_var)
    if value and os.path.isabs(value):
        return Path(value)
    return Path.home() / fallback


def cache_home() -> Path:
    """Return the base cache directory ($XDG_CACHE_HOME or ~/.cache)."""
    return _xdg_dir("XDG_CACHE_HOME", ".cache")


def config_dir() -> Path:
    """Return the tmux-fzy config directory (not created)."""
    return _xdg_dir("XDG_CONFIG_HOME", ".config") / APP_DIR_NAME


def projects_file() -> Path:
    """Return the path of the stored project list."""
    return cache_home() / CACHE_FILE_NAME


def colors_file() -> Path:
    """Return the path of the optional color configuration."""
    return config_dir() / "config.yaml"


def debug_dir() -> Path:
    """Return the debug/logs directory, creating it if needed."""
    d = cache_home() / APP_DIR_NAME / "debug"
    d.mkdir(parents=True, exist_ok=True)
    return d


def log_file() -> Path:
    return debug_dir() / "tmux-fzy.log"


def debug_enabled() -> bool:
    """Check if debug logging is on.

    Enabled by TMUX_FZY_DEBUG=1 or by a ``debug`` file in the config dir
    (it just needs to exist).
    """
    if os.environ.get("TMUX_FZY_DEBUG", "") not in ("", "0"):
        return True
    return (config_dir() / "debug").exists()


def configure_logger(name: str, max_bytes: int = 1_000_000) -> logging.Logger:
    """Configure a logger that writes to the rotating debug log.

    The terminal belongs to the picker while it runs, so log records never
    go to stderr.

    Args:
        name: Logger name (e.g., "fzy.tui")
        max_bytes: Maximum log file size before rotation

    Returns:
        Configured logger instance
    """
    from logging.handlers import RotatingFileHandler

    logger = logging.getLogger(name)

    # Avoid adding duplicate handlers
    if logger.handlers:
        return logger

    try:
        handler: logging.Handler = RotatingFileHandler(
            log_file(),
            maxBytes=max_bytes,
            backupCount=1,
        )
    except OSError:
        # Read-only home or similar: keep running without a log
        handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s", datefmt="%H:%M:%S"
    ))
    logger.addHandler(handler)
    logger.propagate = False

    if debug_enabled():
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    return logger
