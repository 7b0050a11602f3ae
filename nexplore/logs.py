"""Logging setup for nexplore.

The terminal belongs to the TUI, so records go either to a file or to the
Textual devtools console (``textual console``), never to stderr.
"""

from __future__ import annotations

import logging

from textual.logging import TextualHandler

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int = logging.WARNING, log_file: str | None = None) -> logging.Handler:
    """Attach a single handler to the ``nexplore`` logger and return it."""
    logger = logging.getLogger("nexplore")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_file:
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = TextualHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return handler
