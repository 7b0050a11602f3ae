"""TUI interface for nexplore using Textual."""

from __future__ import annotations

import logging

import pyperclip
from rich.console import RenderableType
from rich.text import Text
from textual import events, on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical, VerticalScroll
from textual.message import Message
from textual.screen import ModalScreen
from textual.widget import Widget
from textual.widgets import Header, Input, Label, ListItem, ListView, Markdown, Static

from .config import Config
from .display import details_table, draw_rows, format_rows, format_size
from .keys import Action, InputDispatcher
from .navigation import Navigator
from .reader import Reader
from .themes import get_themes, resolve_theme
from .tree import TreeState

logger = logging.getLogger(__name__)

MAX_SEARCH_RESULTS = 20


# === Screens ===

class HelpScreen(ModalScreen):
    """Help screen listing the active key bindings."""

    BINDINGS = [
        Binding("escape", "dismiss", "Close"),
        Binding("q", "dismiss", "Close"),
        Binding("j", "scroll_down", "Scroll down", show=False),
        Binding("k", "scroll_up", "Scroll up", show=False),
        Binding("down", "scroll_down", "Scroll down", show=False),
        Binding("up", "scroll_up", "Scroll up", show=False),
    ]

    def __init__(self, dispatcher: InputDispatcher) -> None:
        super().__init__()
        self.dispatcher = dispatcher

    def compose(self) -> ComposeResult:
        lines = [
            "# nexplore - Keyboard Shortcuts",
            "",
            "| Key | Action |",
            "|-----|--------|",
        ]
        for action in Action:
            keys = self.dispatcher.keys_for(action)
            if keys:
                shown = " ".join(f"`{key}`" for key in keys)
                lines.append(f"| {shown} | {action.description} |")
        yield Container(
            VerticalScroll(
                Markdown("\n".join(lines), id="help-content"),
                id="help-scroll",
            ),
            id="help-container",
        )

    def action_dismiss(self) -> None:
        self.app.pop_screen()

    def action_scroll_down(self) -> None:
        self.query_one("#help-scroll").scroll_down()

    def action_scroll_up(self) -> None:
        self.query_one("#help-scroll").scroll_up()


class SearchScreen(ModalScreen[str | None]):
    """Modal screen for finding a loaded node by name."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, tree: TreeState) -> None:
        super().__init__()
        self.current_tree = tree
        self.results: list[str] = []

    def compose(self) -> ComposeResult:
        yield Container(
            Label("Search loaded nodes (expand groups to search deeper)", id="search-prompt"),
            Input(placeholder="Search...", id="search-input"),
            ListView(id="search-results"),
            id="search-container",
        )

    def on_mount(self) -> None:
        self.query_one(Input).focus()

    @on(Input.Changed)
    def on_search_changed(self, event: Input.Changed) -> None:
        results_view = self.query_one("#search-results", ListView)
        results_view.clear()

        self.results = self.current_tree.search(event.value.strip())[:MAX_SEARCH_RESULTS]
        for nid in self.results:
            node = self.current_tree.nodes[nid]
            results_view.append(ListItem(Label(Text(f"{node.kind.icon} {nid}"))))

    @on(Input.Submitted)
    def on_search_submit(self, event: Input.Submitted) -> None:
        self.dismiss(self.results[0] if self.results else None)

    @on(ListView.Selected)
    def on_result_selected(self, event: ListView.Selected) -> None:
        if event.list_view.index is not None and event.list_view.index < len(self.results):
            self.dismiss(self.results[event.list_view.index])

    def action_cancel(self) -> None:
        self.dismiss(None)


class StatisticsScreen(ModalScreen):
    """Modal screen showing what has been discovered so far."""

    BINDINGS = [
        Binding("escape", "dismiss", "Close"),
        Binding("q", "dismiss", "Close"),
    ]

    def __init__(self, tree: TreeState, file_size: int) -> None:
        super().__init__()
        self.current_tree = tree
        self.file_size = file_size

    def compose(self) -> ComposeResult:
        stats = self.current_tree.get_statistics()
        content = f"""
# {self.current_tree.root.name}

| Metric | Value |
|--------|-------|
| File size | {format_size(self.file_size)} |
| Discovered nodes | {stats['discovered']} |
| Groups | {stats['groups']} |
| Datasets | {stats['datasets']} |
| Loaded groups | {stats['loaded_groups']} |
| Expanded groups | {stats['expanded']} |
| Read errors | {stats['errors']} |
| Max depth loaded | {stats['max_depth']} |
"""
        yield Container(
            Markdown(content, id="stats-content"),
            id="stats-container",
        )

    def action_dismiss(self) -> None:
        self.app.pop_screen()


# === Widgets ===

class NodeTreeView(Widget, can_focus=True):
    """Draws the viewport slice of the visible rows and handles navigation keys."""

    class SelectionChanged(Message):
        """The highlighted node may have changed."""

        def __init__(self, node_id: str) -> None:
            super().__init__()
            self.node_id = node_id

    class Command(Message):
        """An action the tree view does not handle itself."""

        def __init__(self, action: Action) -> None:
            super().__init__()
            self.action = action

    def __init__(self, navigator: Navigator, dispatcher: InputDispatcher, **kwargs) -> None:
        super().__init__(**kwargs)
        self.navigator = navigator
        self.dispatcher = dispatcher

    def render(self) -> RenderableType:
        return format_rows(draw_rows(self.navigator))

    def on_resize(self, event: events.Resize) -> None:
        self.navigator.resize(event.size.height)
        self.refresh()

    def on_key(self, event: events.Key) -> None:
        action = self.dispatcher.dispatch(event.key)
        if action is None:
            return
        event.stop()
        event.prevent_default()

        outcome = self.navigator.apply(action)
        if not outcome.handled:
            self.post_message(self.Command(action))
            return
        if outcome.error:
            self.app.notify(outcome.error, title="Read error", severity="error")
        self.refresh()
        self.post_message(self.SelectionChanged(self.navigator.selected_id))

    def select(self, node_id: str) -> None:
        self.navigator.select(node_id)
        self.refresh()
        self.post_message(self.SelectionChanged(self.navigator.selected_id))


# === Main App ===

class NexploreApp(App):
    """nexplore TUI application."""

    CSS = """
    #main-container {
        layout: horizontal;
    }

    #tree-panel {
        width: 2fr;
        border: solid $primary;
    }

    #details-panel {
        width: 3fr;
        border: solid $primary;
    }

    .panel-title {
        background: $primary;
        color: $text;
        text-align: center;
        padding: 0 1;
    }

    .panel:focus-within .panel-title {
        background: $accent;
    }

    #node-tree {
        height: 1fr;
    }

    #details-scroll {
        height: 1fr;
        padding: 0 1;
    }

    #hint {
        dock: bottom;
        color: $text-muted;
        padding: 0 1;
    }

    /* Modal screens */
    #search-container, #stats-container {
        align: center middle;
        width: 80%;
        max-width: 80;
        height: auto;
        max-height: 80%;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }

    #help-container {
        align: center middle;
        width: 90%;
        max-width: 100;
        height: 90%;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }

    #help-scroll {
        height: 100%;
    }

    #help-content, #stats-content {
        height: auto;
    }

    #search-prompt {
        margin-bottom: 1;
    }

    #search-results {
        height: auto;
        max-height: 20;
        margin-top: 1;
    }
    """

    def __init__(self, reader: Reader, config: Config | None = None) -> None:
        super().__init__()
        self.reader = reader
        self.config = config or Config()
        self.navigator = Navigator.from_reader(reader)
        self.dispatcher = InputDispatcher.from_config(self.config)

    @property
    def tree(self) -> TreeState:
        return self.navigator.tree

    def compose(self) -> ComposeResult:
        yield Header()
        yield Horizontal(
            Vertical(
                Static("Contents", classes="panel-title"),
                NodeTreeView(self.navigator, self.dispatcher, id="node-tree"),
                id="tree-panel",
                classes="panel",
            ),
            Vertical(
                Static("Details", classes="panel-title"),
                VerticalScroll(
                    Static("", id="details"),
                    id="details-scroll",
                ),
                id="details-panel",
                classes="panel",
            ),
            id="main-container",
        )
        yield Static(self._hint_text(), id="hint")

    def on_mount(self) -> None:
        for theme in get_themes():
            self.register_theme(theme)
        self.theme = resolve_theme(self.config.theme, list(self.available_themes))

        self.title = self.reader.file_name
        self.sub_title = format_size(self.reader.file_size)
        self.query_one("#node-tree", NodeTreeView).focus()
        self.refresh_details()

    def _hint_text(self) -> str:
        def first_key(action: Action) -> str:
            keys = self.dispatcher.keys_for(action)
            return keys[0] if keys else "-"

        return (
            f"{first_key(Action.EXPAND_RIGHT)}/{first_key(Action.COLLAPSE_LEFT)} expand/collapse  "
            f"{first_key(Action.SEARCH)} search  "
            f"{first_key(Action.HELP)} help  "
            f"{first_key(Action.QUIT)} quit"
        )

    def refresh_details(self) -> None:
        """Show metadata of the selected node."""
        node = self.tree.node(self.navigator.selected_id)
        metadata = self.tree.metadata(node.id)
        self.query_one("#details", Static).update(details_table(node, metadata))

    @on(NodeTreeView.SelectionChanged)
    def on_selection_changed(self, event: NodeTreeView.SelectionChanged) -> None:
        self.refresh_details()

    @on(NodeTreeView.Command)
    def on_command(self, event: NodeTreeView.Command) -> None:
        handlers = {
            Action.QUIT: self.exit,
            Action.SEARCH: self.action_search,
            Action.HELP: self.action_show_help,
            Action.YANK_PATH: self.action_yank_path,
            Action.SHOW_STATS: self.action_show_stats,
        }
        handler = handlers.get(event.action)
        if handler is None:
            logger.debug("no handler for %s", event.action.value)
            return
        handler()

    # === Actions ===

    def action_search(self) -> None:
        self.push_screen(SearchScreen(self.tree), self._on_search_result)

    def _on_search_result(self, node_id: str | None) -> None:
        if node_id and node_id in self.tree:
            self.query_one("#node-tree", NodeTreeView).select(node_id)

    def action_show_help(self) -> None:
        self.push_screen(HelpScreen(self.dispatcher))

    def action_show_stats(self) -> None:
        self.push_screen(StatisticsScreen(self.tree, self.reader.file_size))

    def action_yank_path(self) -> None:
        node_id = self.navigator.selected_id
        try:
            pyperclip.copy(node_id)
            self.notify(f"Copied {node_id} to clipboard")
        except pyperclip.PyperclipException:
            self.notify("Clipboard not available", severity="warning")


def run_tui(reader: Reader, config: Config | None = None) -> None:
    """Run the TUI application."""
    app = NexploreApp(reader, config)
    try:
        app.run()
    finally:
        reader.close()
