"""Shared TUI components for et tui."""

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.screen import ModalScreen
from textual.widgets import Input, Label, OptionList, Static
from textual.widgets.option_list import Option

from epictrack.db import Status


class ConfirmModal(ModalScreen[bool]):
    """Simple yes/no confirmation modal."""

    CSS = """
    ConfirmModal {
        align: center middle;
    }

    #confirm-dialog {
        width: auto;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: solid $warning;
    }

    #confirm-message {
        margin-bottom: 1;
    }

    #confirm-hint {
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("y", "confirm", "Yes"),
        Binding("n", "cancel", "No"),
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, message: str) -> None:
        super().__init__()
        self.message = message

    def compose(self) -> ComposeResult:
        yield Container(
            Static(self.message, id="confirm-message"),
            Static("Press y to confirm, n to cancel", id="confirm-hint"),
            id="confirm-dialog",
        )

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)


class ItemFormModal(ModalScreen[tuple[str, str] | None]):
    """Name + description prompt for a new epic or story.

    Enter in the name field moves to the description; Enter there submits.
    Dismisses with None on Escape.
    """

    CSS = """
    ItemFormModal {
        align: center middle;
    }

    #form-dialog {
        width: 70;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $primary;
    }

    #form-hint {
        margin-top: 1;
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, title: str) -> None:
        super().__init__()
        self.form_title = title

    def compose(self) -> ComposeResult:
        yield Container(
            Label(self.form_title, id="form-title"),
            Input(placeholder="Name", id="form-name"),
            Input(placeholder="Description", id="form-description"),
            Label("Enter to continue, Escape to cancel", id="form-hint"),
            id="form-dialog",
        )

    def on_mount(self) -> None:
        self.query_one("#form-name", Input).focus()

    @on(Input.Submitted, "#form-name")
    def on_name_submitted(self) -> None:
        self.query_one("#form-description", Input).focus()

    @on(Input.Submitted, "#form-description")
    def on_description_submitted(self) -> None:
        name = self.query_one("#form-name", Input).value.strip()
        description = self.query_one("#form-description", Input).value.strip()
        self.dismiss((name, description))

    def action_cancel(self) -> None:
        self.dismiss(None)


class StatusModal(ModalScreen[Status | None]):
    """Pick one of the four statuses."""

    CSS = """
    StatusModal {
        align: center middle;
    }

    #status-dialog {
        width: 40;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $primary;
    }

    #status-options {
        height: auto;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, current: Status | None = None) -> None:
        super().__init__()
        self.current = current

    def compose(self) -> ComposeResult:
        options = [Option(status.label, id=status.value) for status in Status]
        yield Container(
            Label("New status:"),
            OptionList(*options, id="status-options"),
            id="status-dialog",
        )

    def on_mount(self) -> None:
        option_list = self.query_one("#status-options", OptionList)
        option_list.focus()
        if self.current is not None:
            option_list.highlighted = list(Status).index(self.current)

    @on(OptionList.OptionSelected)
    def on_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.dismiss(Status(event.option.id))

    def action_cancel(self) -> None:
        self.dismiss(None)
