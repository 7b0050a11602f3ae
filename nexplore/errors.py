"""Exceptions raised by nexplore."""

from __future__ import annotations


class NexploreError(Exception):
    """Base class for nexplore errors."""


class OpenError(NexploreError):
    """The file is missing, unreadable or not an HDF5 file."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot open '{path}': {reason}")
        self.path = path
        self.reason = reason


class ReadError(NexploreError):
    """Reading the children or metadata of a node failed."""

    def __init__(self, node_id: str, reason: str) -> None:
        super().__init__(f"Cannot read '{node_id}': {reason}")
        self.node_id = node_id
        self.reason = reason


class NotExpandable(NexploreError):
    """Raised when expanding a node that is not a group."""

    def __init__(self, node_id: str) -> None:
        super().__init__(f"'{node_id}' is a dataset and cannot be expanded")
        self.node_id = node_id
