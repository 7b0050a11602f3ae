"""Theme system for the nexplore TUI using Textual's built-in theme system."""

from __future__ import annotations

import logging

from textual.theme import Theme

from .config import DEFAULT_THEME

logger = logging.getLogger(__name__)


THEMES: list[Theme] = [
    Theme(
        name="nexplore-tokyo-night",
        primary="#7aa2f7",
        secondary="#a9b1d6",
        accent="#7dcfff",
        warning="#e0af68",
        error="#f7768e",
        success="#9ece6a",
        foreground="#c0caf5",
        background="#1a1b26",
        surface="#24283b",
        panel="#414868",
        dark=True,
    ),
    Theme(
        name="nexplore-nord",
        primary="#88c0d0",
        secondary="#d8dee9",
        accent="#81a1c1",
        warning="#ebcb8b",
        error="#bf616a",
        success="#a3be8c",
        foreground="#eceff4",
        background="#242933",
        surface="#2e3440",
        panel="#3b4252",
        dark=True,
    ),
    Theme(
        name="nexplore-solarized-light",
        primary="#268bd2",
        secondary="#586e75",
        accent="#2aa198",
        warning="#b58900",
        error="#dc322f",
        success="#859900",
        foreground="#073642",
        background="#fdf6e3",
        surface="#eee8d5",
        panel="#eee8d5",
        dark=False,
    ),
]


def get_themes() -> list[Theme]:
    """Get all nexplore themes."""
    return THEMES


def resolve_theme(name: str, available: list[str]) -> str:
    """The theme to apply: name if known, otherwise the default."""
    if name in available:
        return name
    logger.warning("unknown theme %r, using %s", name, DEFAULT_THEME)
    return DEFAULT_THEME
