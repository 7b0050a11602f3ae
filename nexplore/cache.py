"""Memoizing front for the file reader."""

from __future__ import annotations

import logging

from .nodes import ChildEntry, Metadata, is_descendant
from .reader import Reader

logger = logging.getLogger(__name__)


class NodeCache:
    """
    Sole owner of everything read from the file during a session.

    Children lists and metadata are fetched from the reader on first use and
    reused afterwards. Failed reads raise ReadError and are not remembered, so
    the next call tries the reader again.
    """

    def __init__(self, reader: Reader) -> None:
        self.reader = reader
        self._children: dict[str, tuple[ChildEntry, ...]] = {}
        self._metadata: dict[str, Metadata] = {}

    @property
    def root_id(self) -> str:
        return self.reader.root_id

    @property
    def root_key(self) -> int | None:
        return self.reader.root_key

    @property
    def file_name(self) -> str:
        return self.reader.file_name

    def resolve_children(self, node_id: str) -> tuple[ChildEntry, ...]:
        """Ordered children of a group, read once."""
        if node_id not in self._children:
            logger.debug("fetching children of %s", node_id)
            self._children[node_id] = tuple(self.reader.children(node_id))
        return self._children[node_id]

    def resolve_metadata(self, node_id: str) -> Metadata:
        """Metadata of a node, read once."""
        if node_id not in self._metadata:
            logger.debug("fetching metadata of %s", node_id)
            self._metadata[node_id] = self.reader.metadata(node_id)
        return self._metadata[node_id]

    def has_children(self, node_id: str) -> bool:
        return node_id in self._children

    def has_metadata(self, node_id: str) -> bool:
        return node_id in self._metadata

    def invalidate(self, node_id: str) -> None:
        """Forget a node and everything cached below it."""
        for store in (self._children, self._metadata):
            stale = [key for key in store if key == node_id or is_descendant(key, node_id)]
            for key in stale:
                del store[key]
        logger.debug("invalidated %s", node_id)
