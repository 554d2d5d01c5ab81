"""
et tui - Interactive epic/story browser.

Page stack: Home (all epics) -> Epic detail -> Story detail. Every screen
reloads the document when it becomes active, so the UI never holds state
the store doesn't have.
"""

from typing import Any, Callable

from rich.markup import escape
from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.screen import Screen
from textual.widgets import DataTable, Footer, Header, Static

from epictrack.db import Document, Epic, IssueStore, Status, Story, TrackerError
from epictrack.lib.columns import get_column_string
from epictrack.lib.tui import ConfirmModal, ItemFormModal, StatusModal

NAME_WIDTH = 32


def format_epic_details(epic_id: int, epic: Epic) -> str:
    """Rich markup block describing one epic."""
    lines = [
        f"[bold]Epic {epic_id}[/bold]  [cyan]{epic.status.label}[/cyan]",
        f"Name: {escape(epic.name)}",
        f"Description: {escape(epic.description) or '[dim](none)[/dim]'}",
    ]
    return "\n".join(lines)


def format_story_details(story_id: int, story: Story, epic_id: int) -> str:
    """Rich markup block describing one story."""
    lines = [
        f"[bold]Story {story_id}[/bold]  [cyan]{story.status.label}[/cyan]",
        f"Epic: {epic_id}",
        f"Name: {escape(story.name)}",
        f"Description: {escape(story.description) or '[dim](none)[/dim]'}",
    ]
    return "\n".join(lines)


class TrackerScreen(Screen):
    """Base for pages that render from a freshly read document."""

    @property
    def store(self) -> IssueStore:
        return self.app.store

    # Fires on first push as well as on return from a child page or modal.
    def on_screen_resume(self) -> None:
        self.reload()

    def reload(self) -> None:
        try:
            document = self.store.read()
        except TrackerError as e:
            self.notify(str(e), title="Read failed", severity="error")
            return
        self.render_document(document)

    def render_document(self, document: Document) -> None:
        """Fill this page's widgets from the document. Pages override this."""

    def close_stale(self, message: str) -> None:
        """Warn and go back a page, unless this page is already gone."""
        if self.is_current:
            self.notify(message, severity="warning")
            self.app.pop_screen()

    def run_store_op(self, operation: Callable[..., Any], *args: Any) -> bool:
        """Call a store method, turning failures into notifications."""
        try:
            operation(*args)
        except TrackerError as e:
            self.notify(str(e), severity="error")
            return False
        return True


class HomeScreen(TrackerScreen):
    """All epics."""

    BINDINGS = [
        Binding("c", "create_epic", "New epic"),
        Binding("q", "quit_app", "Quit"),
    ]

    def compose(self) -> ComposeResult:
        yield Header()
        yield Container(
            Static("[bold]Epics[/bold]", id="home-title"),
            DataTable(cursor_type="row", id="epics-table"),
            id="home-body",
        )
        yield Footer()

    def render_document(self, document: Document) -> None:
        table = self.query_one("#epics-table", DataTable)
        table.clear(columns=True)
        table.add_columns("ID", "NAME", "STATUS", "STORIES")
        for epic_id in sorted(document.epics):
            epic = document.epics[epic_id]
            table.add_row(
                str(epic_id),
                escape(get_column_string(epic.name, NAME_WIDTH)),
                epic.status.label,
                str(len(epic.stories)),
                key=str(epic_id),
            )

    @on(DataTable.RowSelected, "#epics-table")
    def open_epic(self, event: DataTable.RowSelected) -> None:
        self.app.push_screen(EpicDetailScreen(int(event.row_key.value)))

    def action_create_epic(self) -> None:
        def handle_form(result: tuple[str, str] | None) -> None:
            if not result:
                return
            name, description = result
            if not name:
                self.notify("Epic name is required", severity="warning")
                return
            if self.run_store_op(self.store.create_epic, Epic(name, description)):
                self.reload()

        self.app.push_screen(ItemFormModal("New epic"), handle_form)

    def action_quit_app(self) -> None:
        self.app.exit()


class EpicDetailScreen(TrackerScreen):
    """One epic and its stories."""

    BINDINGS = [
        Binding("c", "create_story", "New story"),
        Binding("u", "update_status", "Status"),
        Binding("d", "delete_epic", "Delete"),
        Binding("p", "previous", "Back"),
        Binding("escape", "previous", "Back", show=False),
    ]

    def __init__(self, epic_id: int) -> None:
        super().__init__()
        self.epic_id = epic_id
        self.epic: Epic | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield Container(
            Static(id="epic-details"),
            DataTable(cursor_type="row", id="stories-table"),
            id="epic-body",
        )
        yield Footer()

    def render_document(self, document: Document) -> None:
        self.epic = document.epics.get(self.epic_id)
        if self.epic is None:
            self.close_stale(f"Epic {self.epic_id} no longer exists")
            return

        self.query_one("#epic-details", Static).update(
            format_epic_details(self.epic_id, self.epic)
        )

        table = self.query_one("#stories-table", DataTable)
        table.clear(columns=True)
        table.add_columns("ID", "NAME", "STATUS")
        for story_id in self.epic.stories:
            story = document.stories.get(story_id)
            if story is None:
                continue
            table.add_row(
                str(story_id),
                escape(get_column_string(story.name, NAME_WIDTH)),
                story.status.label,
                key=str(story_id),
            )

    @on(DataTable.RowSelected, "#stories-table")
    def open_story(self, event: DataTable.RowSelected) -> None:
        self.app.push_screen(StoryDetailScreen(self.epic_id, int(event.row_key.value)))

    def action_create_story(self) -> None:
        def handle_form(result: tuple[str, str] | None) -> None:
            if not result:
                return
            name, description = result
            if not name:
                self.notify("Story name is required", severity="warning")
                return
            self.run_store_op(self.store.create_story, Story(name, description), self.epic_id)
            self.reload()

        self.app.push_screen(ItemFormModal(f"New story in epic {self.epic_id}"), handle_form)

    def action_update_status(self) -> None:
        def handle_status(status: Status | None) -> None:
            if status is None:
                return
            self.run_store_op(self.store.update_epic_status, self.epic_id, status)
            self.reload()

        current = self.epic.status if self.epic else None
        self.app.push_screen(StatusModal(current), handle_status)

    def action_delete_epic(self) -> None:
        def handle_confirm(confirmed: bool) -> None:
            if not confirmed:
                return
            if self.run_store_op(self.store.delete_epic, self.epic_id):
                self.notify(f"Deleted epic {self.epic_id}")
                self.app.pop_screen()

        self.app.push_screen(
            ConfirmModal(f"Delete epic {self.epic_id} and all of its stories?"),
            handle_confirm,
        )

    def action_previous(self) -> None:
        self.app.pop_screen()


class StoryDetailScreen(TrackerScreen):
    """One story."""

    BINDINGS = [
        Binding("u", "update_status", "Status"),
        Binding("d", "delete_story", "Delete"),
        Binding("p", "previous", "Back"),
        Binding("escape", "previous", "Back", show=False),
    ]

    def __init__(self, epic_id: int, story_id: int) -> None:
        super().__init__()
        self.epic_id = epic_id
        self.story_id = story_id
        self.story: Story | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield Container(Static(id="story-details"), id="story-body")
        yield Footer()

    def render_document(self, document: Document) -> None:
        self.story = document.stories.get(self.story_id)
        if self.story is None:
            self.close_stale(f"Story {self.story_id} no longer exists")
            return

        self.query_one("#story-details", Static).update(
            format_story_details(self.story_id, self.story, self.epic_id)
        )

    def action_update_status(self) -> None:
        def handle_status(status: Status | None) -> None:
            if status is None:
                return
            self.run_store_op(self.store.update_story_status, self.story_id, status)
            self.reload()

        current = self.story.status if self.story else None
        self.app.push_screen(StatusModal(current), handle_status)

    def action_delete_story(self) -> None:
        def handle_confirm(confirmed: bool) -> None:
            if not confirmed:
                return
            if self.run_store_op(self.store.delete_story, self.epic_id, self.story_id):
                self.notify(f"Deleted story {self.story_id}")
                self.app.pop_screen()

        self.app.push_screen(ConfirmModal(f"Delete story {self.story_id}?"), handle_confirm)

    def action_previous(self) -> None:
        self.app.pop_screen()


class TrackerApp(App):
    """epictrack TUI application."""

    TITLE = "epictrack"

    CSS = """
    #home-body, #epic-body, #story-body {
        layout: vertical;
        padding: 1;
    }

    #home-title {
        margin-bottom: 1;
    }

    #epic-details, #story-details {
        border: solid green;
        padding: 1;
        margin-bottom: 1;
        height: auto;
    }
    """

    def __init__(self, store: IssueStore) -> None:
        super().__init__()
        self.store = store

    def on_mount(self) -> None:
        self.push_screen(HomeScreen())


def cmd_tui(args, store: IssueStore) -> int:
    """Launch the TUI."""
    # Fail fast on an unreadable database rather than inside the app.
    store.read()
    app = TrackerApp(store)
    app.run()
    return 0
