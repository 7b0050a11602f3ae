"""Key bindings: map terminal key names to navigation actions."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Mapping

from .config import Config

logger = logging.getLogger(__name__)


class Action(str, Enum):
    """Something the user asked for."""
    QUIT = "quit"
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    HOME = "home"
    END = "end"
    COLLAPSE_LEFT = "collapse_left"
    EXPAND_RIGHT = "expand_right"
    COLLAPSE_ALL = "collapse_all"
    EXPAND_ALL = "expand_all"
    RELOAD = "reload"
    SEARCH = "search"
    YANK_PATH = "yank_path"
    SHOW_STATS = "show_stats"
    HELP = "help"

    @property
    def description(self) -> str:
        return self.value.replace("_", " ").capitalize()


# Key names as reported by Textual's Key event.
DEFAULT_KEYMAP: dict[str, Action] = {
    "escape": Action.QUIT,
    "q": Action.QUIT,
    "up": Action.MOVE_UP,
    "k": Action.MOVE_UP,
    "down": Action.MOVE_DOWN,
    "j": Action.MOVE_DOWN,
    "pageup": Action.PAGE_UP,
    "pagedown": Action.PAGE_DOWN,
    "home": Action.HOME,
    "g": Action.HOME,
    "end": Action.END,
    "G": Action.END,
    "left": Action.COLLAPSE_LEFT,
    "h": Action.COLLAPSE_LEFT,
    "right": Action.EXPAND_RIGHT,
    "l": Action.EXPAND_RIGHT,
    "shift+left": Action.COLLAPSE_ALL,
    "H": Action.COLLAPSE_ALL,
    "shift+right": Action.EXPAND_ALL,
    "L": Action.EXPAND_ALL,
    "r": Action.RELOAD,
    "slash": Action.SEARCH,
    "y": Action.YANK_PATH,
    "s": Action.SHOW_STATS,
    "question_mark": Action.HELP,
}


class InputDispatcher:
    """Translate raw key names into Actions."""

    def __init__(self, keymap: Mapping[str, Action] | None = None) -> None:
        self.keymap: dict[str, Action] = dict(DEFAULT_KEYMAP if keymap is None else keymap)

    @classmethod
    def from_config(cls, config: Config) -> "InputDispatcher":
        """Default keymap with the configured bindings (key -> action name) laid on top.

        An empty action name or "none" unbinds the key.
        """
        keymap = dict(DEFAULT_KEYMAP)
        for key, name in config.keys.items():
            if name in ("", "none"):
                keymap.pop(key, None)
                continue
            try:
                keymap[key] = Action(name)
            except ValueError:
                logger.warning("ignoring binding %r: unknown action %r", key, name)
        return cls(keymap)

    def dispatch(self, key: str) -> Action | None:
        """The action bound to key, or None."""
        return self.keymap.get(key)

    def keys_for(self, action: Action) -> list[str]:
        """All keys bound to an action, in binding order."""
        return [key for key, bound in self.keymap.items() if bound is action]
