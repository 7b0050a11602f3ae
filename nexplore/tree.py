"""Tree state: discovered nodes and which groups are expanded."""

from __future__ import annotations

import logging
from typing import Iterator

from .cache import NodeCache
from .errors import NotExpandable, ReadError
from .nodes import LoadState, Metadata, Node, NodeKind, is_descendant

logger = logging.getLogger(__name__)


class TreeState:
    """
    The logical tree as far as it has been discovered.

    Nodes live in a flat mapping keyed by path id; parents are referenced by
    id. All reads go through the NodeCache.
    """

    def __init__(self, cache: NodeCache) -> None:
        self.cache = cache
        self.root_id = cache.root_id
        self.nodes: dict[str, Node] = {
            self.root_id: Node(
                id=self.root_id, name=cache.file_name, kind=NodeKind.GROUP,
                object_key=cache.root_key,
            ),
        }
        self.expanded: set[str] = set()

    def __contains__(self, node_id: str) -> bool:
        return node_id in self.nodes

    def node(self, node_id: str) -> Node:
        """Get a node by ID, raising if it has not been discovered."""
        node = self.nodes.get(node_id)
        if not node:
            raise ValueError(f"Node {node_id} not found")
        return node

    @property
    def root(self) -> Node:
        return self.nodes[self.root_id]

    # === Expansion ===

    def is_expanded(self, node_id: str) -> bool:
        return node_id in self.expanded

    def expand(self, node_id: str) -> None:
        """Expand a group, loading its children on first use."""
        node = self.node(node_id)
        if not node.kind.expandable:
            raise NotExpandable(node_id)
        if node_id in self.expanded:
            return
        if not node.is_loaded:
            self.load_children(node_id)
        self.expanded.add(node_id)

    def collapse(self, node_id: str) -> None:
        """Collapse a group. Loaded children stay cached."""
        self.expanded.discard(node_id)

    def toggle(self, node_id: str) -> None:
        """Expand if collapsed, collapse if expanded."""
        if node_id in self.expanded:
            self.collapse(node_id)
        else:
            self.expand(node_id)

    def load_children(self, node_id: str) -> None:
        """Register the children of a group as nodes."""
        node = self.node(node_id)
        node.children_state = LoadState.LOADING
        try:
            entries = self.cache.resolve_children(node_id)
        except ReadError as e:
            node.children_state = LoadState.FAILED
            node.error = e.reason
            logger.warning("failed to list %s: %s", node_id, e.reason)
            raise

        for entry in entries:
            if entry.id not in self.nodes:
                self.nodes[entry.id] = Node(
                    id=entry.id, name=entry.name, kind=entry.kind, parent=node_id,
                    object_key=entry.object_key,
                )
        node.children = tuple(entry.id for entry in entries)
        node.children_state = LoadState.LOADED
        node.error = None

    def expand_all(self, node_id: str | None = None) -> list[str]:
        """Expand every group below node_id. Returns the ids that failed to load.

        A group reached again through another hard link is left collapsed, so
        link cycles do not make the walk endless.
        """
        start = node_id or self.root_id
        failed: list[str] = []
        seen: set[int] = set()
        stack = [start]
        while stack:
            current = stack.pop()
            node = self.nodes[current]
            if not node.is_group:
                continue
            if node.object_key is not None:
                if node.object_key in seen:
                    logger.debug("not expanding %s: group already walked", current)
                    continue
                seen.add(node.object_key)
            try:
                self.expand(current)
            except ReadError:
                failed.append(current)
                continue
            stack.extend(reversed(self.nodes[current].children))
        return failed

    def collapse_all(self) -> None:
        """Collapse every group."""
        self.expanded.clear()

    def reveal(self, node_id: str) -> None:
        """Expand every ancestor of a discovered node."""
        for ancestor in self.ancestors(node_id):
            self.expand(ancestor)

    def reload(self, node_id: str) -> None:
        """Forget a group's subtree so the next expand reads it again."""
        node = self.node(node_id)
        if not node.is_group:
            raise NotExpandable(node_id)

        stale = [nid for nid in self.nodes if is_descendant(nid, node_id)]
        for nid in stale:
            del self.nodes[nid]
            self.expanded.discard(nid)
        self.expanded.discard(node_id)
        self.cache.invalidate(node_id)

        node.children = ()
        node.children_state = LoadState.UNLOADED
        node.metadata = None
        node.error = None
        node.metadata_error = None
        logger.info("reloading %s (%d nodes dropped)", node_id, len(stale))

    # === Visibility ===

    def is_visible(self, node_id: str) -> bool:
        """True when every strict ancestor is expanded."""
        if node_id not in self.nodes:
            return False
        return all(ancestor in self.expanded for ancestor in self.ancestors(node_id))

    def parent(self, node_id: str) -> str | None:
        return self.node(node_id).parent

    def ancestors(self, node_id: str) -> list[str]:
        """Strict ancestors from the root down."""
        path = self.get_path_to_root(node_id)
        return path[:-1]

    def get_path_to_root(self, node_id: str) -> list[str]:
        """Get the path from root to the specified node."""
        path = []
        current = node_id
        while current:
            path.append(current)
            node = self.nodes.get(current)
            current = node.parent if node else None
        return list(reversed(path))

    def depth(self, node_id: str) -> int:
        return len(self.get_path_to_root(node_id)) - 1

    # === Metadata ===

    def metadata(self, node_id: str) -> Metadata | None:
        """Metadata for a node, or None when it cannot be read.

        A failed read is remembered on the node until it is reloaded.
        """
        node = self.node(node_id)
        if node.metadata is None and node.metadata_error is None:
            try:
                node.metadata = self.cache.resolve_metadata(node_id)
            except ReadError as e:
                node.metadata_error = e.reason
                logger.warning("failed to read metadata of %s: %s", node_id, e.reason)
                return None
        return node.metadata

    # === Queries ===

    def iter_loaded(self, start: str | None = None) -> Iterator[tuple[str, int]]:
        """Pre-order over loaded nodes regardless of expansion, yielding (id, depth)."""
        stack = [(start or self.root_id, 0)]
        while stack:
            node_id, depth = stack.pop()
            yield node_id, depth
            node = self.nodes[node_id]
            stack.extend((child, depth + 1) for child in reversed(node.children))

    def search(self, pattern: str) -> list[str]:
        """Loaded nodes whose name contains pattern, case-insensitive."""
        pattern_lower = pattern.lower()
        if not pattern_lower:
            return []
        return [
            nid for nid, _ in self.iter_loaded()
            if nid != self.root_id and pattern_lower in self.nodes[nid].name.lower()
        ]

    def get_statistics(self) -> dict:
        """Get statistics about what has been discovered so far."""
        stats = {
            "discovered": len(self.nodes),
            "groups": 0,
            "datasets": 0,
            "loaded_groups": 0,
            "expanded": len(self.expanded),
            "errors": 0,
            "max_depth": 0,
        }

        for node in self.nodes.values():
            if node.is_group:
                stats["groups"] += 1
                if node.is_loaded:
                    stats["loaded_groups"] += 1
            else:
                stats["datasets"] += 1
            if node.error or node.metadata_error:
                stats["errors"] += 1

        for _, depth in self.iter_loaded():
            stats["max_depth"] = max(stats["max_depth"], depth)

        return stats
