"""Formatting of rows, metadata and trees with rich."""

from __future__ import annotations

from typing import NamedTuple

from rich import filesize
from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.tree import Tree as RichTree

from .errors import ReadError
from .navigation import Navigator
from .nodes import Metadata, Node, NodeKind
from .tree import TreeState


console = Console()

BINARY_SUFFIXES = ["B", "KiB", "MiB", "GiB", "TiB", "PiB", "EiB"]

KIND_COLORS = {
    NodeKind.GROUP: "cyan",
    NodeKind.DATASET: "green",
}
ERROR_COLOR = "red"


class DrawRow(NamedTuple):
    """What the renderer needs to draw one line."""
    depth: int
    label: str
    kind: NodeKind
    summary: str
    is_selected: bool
    expanded: bool = False
    error: str | None = None


def format_size(size: int) -> str:
    """Human-readable size in binary units."""
    if size < 1024:
        return f"{size} B"
    unit, suffix = filesize.pick_unit_and_suffix(size, BINARY_SUFFIXES, 1024)
    return f"{size / unit:.1f} {suffix}"


def format_shape(shape: tuple[int, ...] | None) -> str:
    if shape is None:
        return "null"
    if not shape:
        return "scalar"
    return "(" + ", ".join(str(dim) for dim in shape) + ")"


def summarize(metadata: Metadata | None) -> str:
    """One-line summary shown next to a row."""
    if metadata is None:
        return ""

    parts = []
    if metadata.kind is NodeKind.DATASET:
        if metadata.dtype:
            parts.append(metadata.dtype)
        if metadata.shape is not None or metadata.dtype:
            parts.append(format_shape(metadata.shape))
        if metadata.size is not None:
            parts.append(format_size(metadata.size))
    else:
        if metadata.nx_class:
            parts.append(metadata.nx_class)
        if metadata.child_count is not None:
            noun = "item" if metadata.child_count == 1 else "items"
            parts.append(f"{metadata.child_count} {noun}")

    if metadata.attribute_count:
        noun = "attr" if metadata.attribute_count == 1 else "attrs"
        parts.append(f"{metadata.attribute_count} {noun}")
    return " · ".join(parts)


def draw_rows(navigator: Navigator) -> list[DrawRow]:
    """Draw rows for the viewport slice; metadata is read only for these rows."""
    tree = navigator.tree
    selected = navigator.cursor
    result = []
    for index, row in navigator.visible_rows():
        metadata = tree.metadata(row.node_id)
        node = tree.nodes[row.node_id]
        result.append(DrawRow(
            depth=row.depth,
            label=row.name,
            kind=row.kind,
            summary=summarize(metadata),
            is_selected=index == selected,
            expanded=row.expanded,
            error=node.error or node.metadata_error,
        ))
    return result


def format_row(row: DrawRow) -> Text:
    """Format a draw row as one line of text."""
    color = ERROR_COLOR if row.error else KIND_COLORS[row.kind]
    text = Text(no_wrap=True, overflow="ellipsis")
    text.append("  " * row.depth)

    if row.kind is NodeKind.GROUP:
        text.append("▾ " if row.expanded else "▸ ")
    else:
        text.append("  ")

    if row.is_selected:
        text.append(f"{row.kind.icon} {row.label}", style=f"bold black on {color}")
    else:
        text.append(f"{row.kind.icon} {row.label}", style=color)

    if row.error:
        text.append(f"  ⚠ {row.error}", style=ERROR_COLOR)
    elif row.summary:
        text.append(f"  {row.summary}", style="dim")
    return text


def format_rows(rows: list[DrawRow]) -> Text:
    """Join formatted rows into one block."""
    return Text("\n", no_wrap=True).join(format_row(row) for row in rows)


def details_table(node: Node, metadata: Metadata | None) -> Table:
    """Key/value table describing a node."""
    table = Table(show_header=False, box=None, expand=True, padding=(0, 1))
    table.add_column("key", style="bold", no_wrap=True)
    table.add_column("value", overflow="fold")

    table.add_row("Path", node.id)
    table.add_row("Kind", node.kind.value)
    if node.error:
        table.add_row("Error", Text(node.error, style=ERROR_COLOR))
    if node.metadata_error:
        table.add_row("Error", Text(node.metadata_error, style=ERROR_COLOR))
    if metadata is None:
        return table

    if metadata.nx_class:
        table.add_row("NX_class", metadata.nx_class)
    if metadata.kind is NodeKind.DATASET:
        table.add_row("Type", metadata.dtype or "-")
        table.add_row("Shape", format_shape(metadata.shape))
        if metadata.size is not None:
            table.add_row("Size", f"{format_size(metadata.size)} ({metadata.size} bytes)")
    else:
        table.add_row("Members", str(metadata.child_count))

    table.add_row("Attributes", str(metadata.attribute_count))
    for name, value in metadata.attributes.items():
        table.add_row(Text(f"  @{name}", style="dim"), value)
    return table


def format_node_label(tree: TreeState, node_id: str) -> Text:
    """Format a node label for the tree dump."""
    node = tree.nodes[node_id]
    text = Text()
    text.append(f"{node.kind.icon} {node.name}", style=KIND_COLORS[node.kind])
    summary = summarize(tree.metadata(node_id))
    if summary:
        text.append(f"  {summary}", style="dim")
    if node.metadata_error:
        text.append(f"  ⚠ {node.metadata_error}", style=ERROR_COLOR)
    return text


def print_tree(tree: TreeState, file_size: int, max_depth: int | None = None) -> None:
    """Print the file structure, loading groups down to max_depth."""
    seen: set[int] = set()

    def add_children(rich_node, node_id: str, depth: int):
        node = tree.nodes[node_id]
        if not node.is_group:
            return
        if max_depth is not None and depth >= max_depth:
            return
        if node.object_key is not None:
            if node.object_key in seen:
                rich_node.label.append("  ↻ already shown", style="dim")
                return
            seen.add(node.object_key)
        try:
            tree.expand(node_id)
        except ReadError:
            return

        for child_id in node.children:
            label = format_node_label(tree, child_id)
            child_rich = rich_node.add(label)
            add_children(child_rich, child_id, depth + 1)
            if tree.nodes[child_id].error:
                label.append(f"  ⚠ {tree.nodes[child_id].error}", style=ERROR_COLOR)

    header = Text(tree.root.name, style="bold cyan")
    header.append(f"  {format_size(file_size)}", style="dim")
    rich_tree = RichTree(header)
    add_children(rich_tree, tree.root_id, 0)
    if tree.root.error:
        header.append(f"  ⚠ {tree.root.error}", style=ERROR_COLOR)

    console.print(rich_tree)

