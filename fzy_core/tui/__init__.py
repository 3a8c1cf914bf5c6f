"""Interactive fuzzy picker for tmux-fzy."""

from fzy_core.tui.app import PickerApp, TerminalError, run_picker
from fzy_core.tui.state import PickerState, PickResult, PickStatus

__all__ = [
    "PickResult",
    "PickStatus",
    "PickerApp",
    "PickerState",
    "TerminalError",
    "run_picker",
]
