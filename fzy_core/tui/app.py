"""Textual app for the interactive picker.

Layout, top to bottom:

    ❯ query ..................... matched/total
    ───────────────────────────────────────────
    ▪  /best/match
       /next/match

The query is a textual ``Input``; every change is forwarded to
``PickerState``, which re-ranks synchronously.  Cursor movement and cancel
are app-level priority bindings so they win over the Input's own editing
keys.  The app exits with a ``PickResult``; textual restores the terminal
before ``run()`` returns.
"""

import shutil
import sys
from typing import Collection, Sequence

from rich.text import Text
from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widget import Widget
from textual.widgets import Input, Static

from fzy_core.colors import Colors, textual_color
from fzy_core.matcher import SCORE_MIN
from fzy_core.paths import configure_logger
from fzy_core.tui.render import (
    PROMPT,
    border_text,
    counter_text,
    result_rows,
)
from fzy_core.tui.state import PickerState, PickResult, PickStatus

_log = configure_logger("fzy.tui")

MIN_ROWS = 3
MIN_COLS = 10


class TerminalError(Exception):
    """Raised when the terminal can't host the picker."""


class BorderLine(Widget):
    """Horizontal rule under the query line."""

    def __init__(self, colors: Colors, **kwargs):
        super().__init__(**kwargs)
        self.color_config = colors

    def render(self) -> Text:
        return border_text(self.color_config, self.size.width)


class ResultList(Widget):
    """Ranked matches, best first, scrolled to keep the cursor visible."""

    def __init__(self, state: PickerState, colors: Colors,
                 open_paths: Collection[str] = (), max_rows: int | None = None,
                 **kwargs):
        super().__init__(**kwargs)
        self.state = state
        self.color_config = colors
        self.open_paths = open_paths
        self.max_rows = max_rows

    def render(self) -> Text:
        rows = result_rows(self.state, self.color_config, self.size.width, self.size.height,
                           max_rows=self.max_rows, open_paths=self.open_paths)
        return Text("\n").join(rows)


class PickerApp(App[PickResult]):
    """Fuzzy project picker."""

    CSS = """
    Screen {
        layout: vertical;
    }
    #prompt-row {
        height: 1;
    }
    #prompt {
        width: 2;
    }
    #query {
        border: none;
        height: 1;
        padding: 0;
        width: 1fr;
        background: $background;
    }
    #counter {
        width: auto;
        padding: 0 0 0 1;
    }
    BorderLine {
        height: 1;
    }
    ResultList {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("up,ctrl+k,ctrl+p", "cursor_up", "Up", show=False, priority=True),
        Binding("down,ctrl+j,ctrl+n", "cursor_down", "Down", show=False, priority=True),
        Binding("ctrl+u", "clear_query", "Clear", show=False, priority=True),
        Binding("escape,ctrl+c,ctrl+d", "cancel", "Cancel", show=False, priority=True),
    ]

    def __init__(self, candidates: Sequence[str], colors: Colors | None = None, *,
                 open_paths: Collection[str] = (), max_rows: int | None = None,
                 threshold: float = SCORE_MIN):
        super().__init__()
        self.color_config = colors or Colors()
        self.state = PickerState(candidates, threshold=threshold)
        self.open_paths = open_paths
        self.max_rows = max_rows

    def compose(self) -> ComposeResult:
        with Horizontal(id="prompt-row"):
            yield Static(Text(PROMPT, style=self.color_config.style("active", bold=True)), id="prompt")
            yield Input(id="query")
            yield Static(counter_text(self.state, self.color_config), id="counter")
        yield BorderLine(self.color_config)
        yield ResultList(self.state, self.color_config,
                         open_paths=self.open_paths, max_rows=self.max_rows)

    def on_mount(self) -> None:
        _log.info("picker started with %d candidates", len(self.state.candidates))
        query = self.query_one("#query", Input)
        fg = textual_color(self.color_config.fg)
        if fg is not None:
            query.styles.color = fg
        query.focus()

    def _refresh_results(self) -> None:
        self.query_one("#counter", Static).update(counter_text(self.state, self.color_config))
        self.query_one(ResultList).refresh()

    def _finish(self) -> None:
        result = self.state.result()
        _log.info("picker finished: %s %s", result.status.value, result.path or "")
        self.exit(result)

    # -- events -------------------------------------------------------------

    @on(Input.Changed, "#query")
    def on_query_changed(self, event: Input.Changed) -> None:
        if self.state.set_query(event.value):
            self._refresh_results()

    @on(Input.Submitted, "#query")
    def on_query_submitted(self, event: Input.Submitted) -> None:
        self.state.confirm()
        self._finish()

    # -- actions ------------------------------------------------------------

    def action_cursor_up(self) -> None:
        self.state.move(-1)
        self._refresh_results()

    def action_cursor_down(self) -> None:
        self.state.move(1)
        self._refresh_results()

    def action_clear_query(self) -> None:
        # Input.Changed carries the empty query to the state
        self.query_one("#query", Input).value = ""

    def action_cancel(self) -> None:
        self.state.cancel()
        self._finish()


def check_terminal() -> None:
    """Raise TerminalError unless stdin/stdout are a usable terminal."""
    if not (sys.stdin.isatty() and sys.stdout.isatty()):
        raise TerminalError("tmux-fzy needs an interactive terminal")
    size = shutil.get_terminal_size()
    if size.lines < MIN_ROWS or size.columns < MIN_COLS:
        raise TerminalError(
            f"Terminal too small ({size.columns}x{size.lines}); "
            f"need at least {MIN_COLS}x{MIN_ROWS}"
        )


def run_picker(
    candidates: Sequence[str],
    colors: Colors | None = None,
    *,
    open_paths: Collection[str] = (),
    max_rows: int | None = None,
    threshold: float = SCORE_MIN,
) -> PickResult:
    """Let the user pick one of *candidates*.

    Args:
        candidates: Paths in their stored order.
        colors: Resolved colors (defaults if None).
        open_paths: Candidates whose tmux session is already running;
            they get a marker but keep their rank.
        max_rows: Cap on visible result rows (terminal height still applies).
        threshold: Matches scoring at or below this are hidden.

    Returns:
        The PickResult.  The terminal has been restored by the time this
        returns, whatever the outcome.
    """
    check_terminal()
    app = PickerApp(candidates, colors, open_paths=open_paths,
                    max_rows=max_rows, threshold=threshold)
    result = app.run()
    if result is None:
        # Quit some other way (e.g. textual's own ctrl+q)
        return PickResult(PickStatus.CANCELLED)
    return result
