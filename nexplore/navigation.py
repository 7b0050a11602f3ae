"""Cursor and viewport over the flattened tree."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from .cache import NodeCache
from .errors import NotExpandable, ReadError
from .keys import Action
from .nodes import parent_id_of
from .reader import Reader
from .rows import Row, project_rows
from .tree import TreeState

logger = logging.getLogger(__name__)


@dataclass
class Viewport:
    """The window of rows drawn at once."""

    top_offset: int = 0
    height: int = 1

    def scroll_to(self, index: int, row_count: int) -> None:
        """Scroll the least amount that keeps index on screen."""
        if index < self.top_offset:
            self.top_offset = index
        elif index > self.top_offset + self.height - 1:
            self.top_offset = index - self.height + 1
        max_top = max(0, row_count - self.height)
        self.top_offset = max(0, min(self.top_offset, max_top))

    def window(self, row_count: int) -> range:
        """Indices of the rows on screen."""
        return range(self.top_offset, min(self.top_offset + self.height, row_count))


@dataclass
class Outcome:
    """Result of applying an action."""

    handled: bool = True
    error: str | None = None


class Navigator:
    """
    Session state for one open file: tree, visible rows, cursor, viewport.

    The cursor is kept as a node id so it survives row recomputation; its
    index is re-derived after every change.
    """

    def __init__(self, tree: TreeState, height: int = 1) -> None:
        self.tree = tree
        self.viewport = Viewport(height=max(1, height))
        self.selected_id = tree.root_id
        self.rows: list[Row] = []
        self._index_of: dict[str, int] = {}
        self.refresh()

    @classmethod
    def from_reader(cls, reader: Reader, height: int = 1) -> "Navigator":
        return cls(TreeState(NodeCache(reader)), height)

    # === State ===

    @property
    def cursor(self) -> int:
        return self._index_of[self.selected_id]

    @property
    def selected_row(self) -> Row:
        return self.rows[self.cursor]

    def visible_rows(self) -> list[tuple[int, Row]]:
        """(index, row) pairs for the rows inside the viewport."""
        return [(i, self.rows[i]) for i in self.viewport.window(len(self.rows))]

    def refresh(self) -> None:
        """Recompute rows and put the cursor back on a visible row."""
        self.rows = list(project_rows(self.tree))
        self._index_of = {row.node_id: i for i, row in enumerate(self.rows)}
        if self.selected_id not in self._index_of:
            self.selected_id = self._nearest_visible(self.selected_id)
        self.viewport.scroll_to(self.cursor, len(self.rows))

    def _nearest_visible(self, node_id: str) -> str:
        # Walk the path rather than the arena: the node may have been dropped.
        current = parent_id_of(node_id)
        while current is not None:
            if current in self._index_of:
                return current
            current = parent_id_of(current)
        return self.tree.root_id

    def resize(self, height: int) -> None:
        self.viewport.height = max(1, height)
        self.viewport.scroll_to(self.cursor, len(self.rows))

    # === Movement ===

    def move_to(self, index: int) -> None:
        index = max(0, min(index, len(self.rows) - 1))
        self.selected_id = self.rows[index].node_id
        self.viewport.scroll_to(index, len(self.rows))

    def move_by(self, delta: int) -> None:
        self.move_to(self.cursor + delta)

    def move_up(self) -> None:
        self.move_by(-1)

    def move_down(self) -> None:
        self.move_by(1)

    def page_up(self) -> None:
        self.move_by(-self.viewport.height)

    def page_down(self) -> None:
        self.move_by(self.viewport.height)

    def home(self) -> None:
        self.move_to(0)

    def end(self) -> None:
        self.move_to(len(self.rows) - 1)

    def select(self, node_id: str) -> None:
        """Reveal a discovered node and put the cursor on it."""
        self.tree.reveal(node_id)
        self.refresh()
        self.move_to(self._index_of[node_id])

    # === Expansion ===

    def expand_right(self) -> None:
        """Expand a collapsed group, or step into an expanded one."""
        node = self.tree.node(self.selected_id)
        if not node.kind.expandable:
            return

        if not self.tree.is_expanded(node.id):
            try:
                self.tree.expand(node.id)
            finally:
                self.refresh()
            if node.id == self.tree.root_id and node.children:
                self.move_down()
        elif node.children:
            self.move_down()

    def collapse_left(self) -> None:
        """Collapse an expanded group, otherwise move to the parent row."""
        node = self.tree.node(self.selected_id)
        if self.tree.is_expanded(node.id):
            self.tree.collapse(node.id)
            self.refresh()
        elif node.parent is not None:
            self.move_to(self._index_of[node.parent])

    def _target_group(self) -> str:
        node = self.tree.node(self.selected_id)
        if node.kind.expandable:
            return node.id
        return node.parent or self.tree.root_id

    def expand_all(self) -> list[str]:
        """Expand the whole subtree under the selected group."""
        failed = self.tree.expand_all(self._target_group())
        self.refresh()
        return failed

    def collapse_all(self) -> None:
        self.tree.collapse_all()
        self.refresh()

    def reload(self) -> None:
        """Re-read the selected group from the file."""
        target = self._target_group()
        was_expanded = self.tree.is_expanded(target)
        self.tree.reload(target)
        self.refresh()
        self.move_to(self._index_of[target])
        if was_expanded:
            try:
                self.tree.expand(target)
            finally:
                self.refresh()

    # === Dispatch ===

    def apply(self, action: Action) -> Outcome:
        """Apply one navigation action to completion."""
        handlers: dict[Action, Callable[[], object]] = {
            Action.MOVE_UP: self.move_up,
            Action.MOVE_DOWN: self.move_down,
            Action.PAGE_UP: self.page_up,
            Action.PAGE_DOWN: self.page_down,
            Action.HOME: self.home,
            Action.END: self.end,
            Action.EXPAND_RIGHT: self.expand_right,
            Action.COLLAPSE_LEFT: self.collapse_left,
            Action.EXPAND_ALL: self.expand_all,
            Action.COLLAPSE_ALL: self.collapse_all,
            Action.RELOAD: self.reload,
        }
        handler = handlers.get(action)
        if handler is None:
            return Outcome(handled=False)

        try:
            result = handler()
        except NotExpandable:
            return Outcome()
        except ReadError as e:
            logger.warning("%s failed: %s", action.value, e)
            return Outcome(error=str(e))

        if action is Action.EXPAND_ALL and result:
            failed = ", ".join(result)
            return Outcome(error=f"Could not read {len(result)} group(s): {failed}")
        return Outcome()
