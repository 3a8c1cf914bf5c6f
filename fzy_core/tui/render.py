"""Row building for the picker's result list.

Each visible match becomes one rich ``Text`` row:

    col 0   ▪ on the selected row
    col 1   * when the project's tmux session is already running
    col 3+  the path, matched characters highlighted

These functions are pure; ``ResultList`` in ``app.py`` calls them with its
current size on every render.
"""

from typing import Collection

from rich.text import Text

from fzy_core.colors import Colors
from fzy_core.matcher import ScoredMatch, highlight_spans
from fzy_core.tui.state import PickerState

PROMPT = "❯ "
SELECTED_MARKER = "▪"
OPEN_MARKER = "*"


def visible_rows(height: int, max_rows: int | None = None) -> int:
    """How many result rows to show in *height* lines."""
    rows = max(0, height)
    if max_rows is not None:
        rows = min(rows, max(0, max_rows))
    return rows


def scroll_offset(cursor: int, rows: int) -> int:
    """First ranked index to show so that the cursor row is on screen."""
    if rows <= 0:
        return 0
    return max(0, cursor - rows + 1)


def candidate_line(match: ScoredMatch, colors: Colors, width: int,
                   selected: bool, is_open: bool) -> Text:
    base = colors.style("active", bold=True) if selected else colors.style("inactive")
    hit = base + colors.style("selection", bold=True)

    line = Text(no_wrap=True, overflow="ellipsis")
    line.append(SELECTED_MARKER if selected else " ", base)
    line.append(OPEN_MARKER if is_open else " ", colors.style("selection"))
    line.append(" ")
    for chunk, matched in highlight_spans(match.candidate, match.positions):
        line.append(chunk, hit if matched else base)
    line.truncate(width, overflow="ellipsis")
    return line


def result_rows(state: PickerState, colors: Colors, width: int, height: int,
                max_rows: int | None = None,
                open_paths: Collection[str] = ()) -> list[Text]:
    """Rows for the ranked matches, scrolled so the cursor is visible."""
    if width <= 0:
        return []
    rows = visible_rows(height, max_rows)
    start = scroll_offset(state.cursor, rows)
    return [
        candidate_line(
            match, colors, width,
            selected=(i == state.cursor),
            is_open=match.candidate in open_paths,
        )
        for i, match in enumerate(state.matches[start:start + rows], start)
    ]


def counter_text(state: PickerState, colors: Colors) -> Text:
    return Text(state.counter, style=colors.style("inactive"), no_wrap=True)


def border_text(colors: Colors, width: int) -> Text:
    return Text("─" * max(0, width), style=colors.style("border"), no_wrap=True)
