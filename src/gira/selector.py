"""Selection state for the interactive branch picker.

The state machine owns the cursor and the per-branch ``selected`` flags while
the picker runs. It knows nothing about terminals: the textual front-end in
:mod:`gira.tui` translates key presses into the transitions below, and tests
drive it with :meth:`SelectionState.handle`.
"""

import logging

from gira.branches import Branch

logger = logging.getLogger(__name__)

MOVE_UP_KEYS = frozenset({"up", "k"})
MOVE_DOWN_KEYS = frozenset({"down", "j"})
TOGGLE_KEYS = frozenset({"enter", "space"})
COMMIT_KEYS = frozenset({"escape"})
ABORT_KEYS = frozenset({"ctrl+c"})


class SelectionState:
    """Cursor and selection flags over a fixed list of branches."""

    def __init__(self, branches: list[Branch]) -> None:
        self.branches = branches
        self.cursor_row = 0
        self.finished = False
        self._committed = False

    @property
    def cancelled(self) -> bool:
        """True unless the session ended through commit."""
        return not self._committed

    @property
    def current(self) -> Branch | None:
        if not self.branches:
            return None
        return self.branches[self.cursor_row]

    def move_to(self, row: int) -> None:
        """Move the cursor, clamped to the first and last rows."""
        if self.finished or not self.branches:
            return
        self.cursor_row = min(max(row, 0), len(self.branches) - 1)

    def move_up(self) -> None:
        self.move_to(self.cursor_row - 1)

    def move_down(self) -> None:
        self.move_to(self.cursor_row + 1)

    def toggle(self) -> bool:
        """Flip the focused branch's selection.

        Returns:
            Whether the flag changed (protected rows and finished sessions are left alone)
        """
        branch = self.current
        if self.finished or branch is None:
            return False
        if branch.protected:
            logger.debug("Refusing to select protected branch %s", branch.display_name)
            return False
        branch.selected = not branch.selected
        return True

    def commit(self) -> None:
        """End the session keeping the current selection."""
        if self.finished:
            return
        self.finished = True
        self._committed = True

    def abort(self) -> None:
        """End the session discarding every selection."""
        if self.finished:
            return
        self.finished = True
        self._committed = False

    def chosen(self) -> list[Branch]:
        """Branches to delete; always empty unless the session was committed."""
        if self.cancelled:
            return []
        return [branch for branch in self.branches if branch.selected]

    def handle(self, key: str) -> None:
        """Apply one input event, named the way textual names keys."""
        if key in ABORT_KEYS:
            self.abort()
        elif key in COMMIT_KEYS:
            self.commit()
        elif key in TOGGLE_KEYS:
            self.toggle()
        elif key in MOVE_UP_KEYS:
            self.move_up()
        elif key in MOVE_DOWN_KEYS:
            self.move_down()
