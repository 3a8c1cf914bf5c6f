"""Color configuration for the picker.

``config.yaml`` is an optional mapping of role name to ANSI color index
(0-15)::

    fg: 7
    border: 8
    inactive: 7
    active: 1
    selection: 2

Anything missing or unusable falls back to the default for that role; a
bad config file never stops the picker from starting.
"""

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional

import yaml
from rich.color import Color
from rich.style import Style

from fzy_core.paths import colors_file, configure_logger

_log = configure_logger("fzy.colors")


@dataclass(frozen=True)
class Colors:
    """Resolved ANSI color indices.  None means the terminal default."""
    fg: Optional[int] = None
    border: Optional[int] = 8
    inactive: Optional[int] = None
    active: Optional[int] = 1
    selection: Optional[int] = 2

    def style(self, role: str, bold: bool = False) -> Style:
        index = getattr(self, role)
        color = Color.from_ansi(index) if index is not None else None
        return Style(color=color, bold=bold or None)


ROLES = tuple(f.name for f in fields(Colors))

_ANSI_NAMES = ("black", "red", "green", "yellow", "blue", "magenta", "cyan", "white")


def textual_color(index: Optional[int]) -> Optional[str]:
    """Textual CSS name for an ANSI index, e.g. 9 -> "ansi_bright_red"."""
    if index is None:
        return None
    name = _ANSI_NAMES[index % 8]
    return f"ansi_bright_{name}" if index >= 8 else f"ansi_{name}"


def _valid_index(value) -> bool:
    # bool is an int subclass; `active: yes` is not a color
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= 15


def parse_colors(data) -> Colors:
    """Build Colors from a loaded YAML document, ignoring bad entries."""
    colors = Colors()
    if data is None:
        return colors
    if not isinstance(data, dict):
        _log.warning("color config is not a mapping, using defaults")
        return colors
    overrides = {}
    for key, value in data.items():
        if key not in ROLES:
            _log.warning("unknown color key %r ignored", key)
            continue
        if isinstance(value, str) and value.strip().isdigit():
            value = int(value.strip())
        if not _valid_index(value):
            _log.warning("invalid value %r for color %r ignored", value, key)
            continue
        overrides[key] = value
    return replace(colors, **overrides)


def load_colors(path: Optional[Path] = None) -> Colors:
    """Load colors from *path* (default: the config file).  Never raises."""
    if path is None:
        path = colors_file()
    try:
        text = path.read_text()
    except FileNotFoundError:
        return Colors()
    except (OSError, UnicodeDecodeError) as e:
        _log.warning("cannot read %s: %s", path, e)
        return Colors()
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        _log.warning("cannot parse %s: %s", path, e)
        return Colors()
    return parse_colors(data)
