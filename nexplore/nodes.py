"""Node types shared by the reader, the cache and the tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

ROOT_ID = "/"


class NodeKind(str, Enum):
    """Kind of a node in the file hierarchy."""
    GROUP = "group"
    DATASET = "dataset"

    @property
    def icon(self) -> str:
        """Get the icon for this kind."""
        return {
            NodeKind.GROUP: "▣",
            NodeKind.DATASET: "▤",
        }[self]

    @property
    def expandable(self) -> bool:
        """Whether this kind can have children."""
        return {
            NodeKind.GROUP: True,
            NodeKind.DATASET: False,
        }[self]


class LoadState(str, Enum):
    """Load state of a group's children."""
    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass(frozen=True)
class ChildEntry:
    """One child as listed by the reader."""

    name: str
    id: str
    kind: NodeKind
    object_key: int | None = None


@dataclass(frozen=True)
class Metadata:
    """Summary of a node, never its data."""

    kind: NodeKind
    size: int | None = None
    dtype: str | None = None
    shape: tuple[int, ...] | None = None
    child_count: int | None = None
    attributes: dict[str, str] = field(default_factory=dict)
    nx_class: str | None = None

    @property
    def attribute_count(self) -> int:
        return len(self.attributes)


@dataclass
class Node:
    """A group or dataset discovered in the file."""

    id: str
    name: str
    kind: NodeKind
    parent: str | None = None
    metadata: Metadata | None = None
    children_state: LoadState = LoadState.UNLOADED
    children: tuple[str, ...] = ()
    error: str | None = None
    metadata_error: str | None = None
    object_key: int | None = None

    @property
    def is_group(self) -> bool:
        """Whether this node is a group."""
        return self.kind is NodeKind.GROUP

    @property
    def is_loaded(self) -> bool:
        """Whether the children of this node have been listed."""
        return self.children_state is LoadState.LOADED


def join_id(parent_id: str, name: str) -> str:
    """Build the id of a child from its parent id and name."""
    if parent_id == ROOT_ID:
        return f"/{name}"
    return f"{parent_id}/{name}"


def parent_id_of(node_id: str) -> str | None:
    """Parent id derived from a path id; None for the root."""
    if node_id == ROOT_ID:
        return None
    head = node_id.rsplit("/", 1)[0]
    return head or ROOT_ID


def is_descendant(node_id: str, ancestor_id: str) -> bool:
    """Whether node_id lies strictly below ancestor_id."""
    if node_id == ancestor_id:
        return False
    if ancestor_id == ROOT_ID:
        return node_id.startswith("/")
    return node_id.startswith(ancestor_id + "/")
