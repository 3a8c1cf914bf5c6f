"""Picker state machine.

Holds the query, the ranked matches and the selection cursor.  The textual
app forwards edits and bindings here; no widget code lives in this module,
so the whole interaction can be driven from tests.
"""

import enum
from dataclasses import dataclass
from typing import Sequence

from fzy_core import matcher
from fzy_core.matcher import ScoredMatch


class PickStatus(enum.Enum):
    EDITING = "editing"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class PickResult:
    status: PickStatus
    path: str | None = None

    @property
    def confirmed(self) -> bool:
        return self.status is PickStatus.CONFIRMED


class PickerState:
    """Query, ranked list and cursor for one interactive run."""

    def __init__(self, candidates: Sequence[str], threshold: float = matcher.SCORE_MIN):
        self.candidates = list(candidates)
        self.threshold = threshold
        self.query = ""
        self.cursor = 0
        self.status = PickStatus.EDITING
        self.matches: list[ScoredMatch] = []
        self._recompute()

    # -- derived ------------------------------------------------------------

    @property
    def done(self) -> bool:
        return self.status is not PickStatus.EDITING

    @property
    def selected(self) -> ScoredMatch | None:
        if not self.matches:
            return None
        return self.matches[self.cursor]

    @property
    def counter(self) -> str:
        """``matched/total`` for the query line."""
        return f"{len(self.matches)}/{len(self.candidates)}"

    def result(self) -> PickResult:
        if self.status is PickStatus.CONFIRMED and self.selected is not None:
            return PickResult(PickStatus.CONFIRMED, self.selected.candidate)
        # Confirmed with nothing selected can't happen via confirm(); treat
        # it as a cancel if it ever does
        return PickResult(PickStatus.CANCELLED)

    # -- transitions --------------------------------------------------------

    def _recompute(self, reset: bool = False) -> None:
        before = len(self.matches)
        self.matches = matcher.rank(self.query, self.candidates, self.threshold)
        if reset or len(self.matches) != before:
            self.cursor = 0
        else:
            self._clamp()

    def _clamp(self) -> None:
        if not self.matches:
            self.cursor = 0
        else:
            self.cursor = max(0, min(self.cursor, len(self.matches) - 1))

    def set_query(self, text: str) -> bool:
        """Replace the query with the input box's current value.

        Growing the query counts as typing and puts the cursor back on the
        best match.  Returns False if nothing changed.
        """
        if self.done or text == self.query:
            return False
        typed = len(text) > len(self.query)
        self.query = text
        self._recompute(reset=typed)
        return True

    def insert(self, text: str) -> None:
        self.set_query(self.query + text)

    def backspace(self) -> None:
        if self.query:
            self.set_query(self.query[:-1])

    def clear(self) -> None:
        self.set_query("")

    def move(self, delta: int) -> None:
        if self.done:
            return
        self.cursor += delta
        self._clamp()

    def confirm(self) -> None:
        if self.done:
            return
        if self.matches:
            self.status = PickStatus.CONFIRMED
        else:
            self.status = PickStatus.CANCELLED

    def cancel(self) -> None:
        if self.done:
            return
        self.query = ""
        self.status = PickStatus.CANCELLED
