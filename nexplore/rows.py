"""Flatten the tree into the rows currently visible."""

from __future__ import annotations

from typing import Iterator, NamedTuple

from .nodes import NodeKind
from .tree import TreeState


class Row(NamedTuple):
    """One visible line of the tree."""
    node_id: str
    name: str
    depth: int
    kind: NodeKind
    expanded: bool
    error: str | None


def project_rows(tree: TreeState) -> Iterator[Row]:
    """Yield visible rows in pre-order, descending only into expanded groups.

    Each call starts a fresh traversal from the root.
    """
    stack = [(tree.root_id, 0)]
    while stack:
        node_id, depth = stack.pop()
        node = tree.nodes[node_id]
        expanded = node_id in tree.expanded
        yield Row(
            node_id=node_id,
            name=node.name,
            depth=depth,
            kind=node.kind,
            expanded=expanded,
            error=node.error or node.metadata_error,
        )
        if expanded:
            stack.extend((child, depth + 1) for child in reversed(node.children))
