"""Modal screens layered over the entry grid."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Label
from textual.screen import ModalScreen

from editor import GridEditor, Mode
from widgets import HelpPanel, TimeEntryPopup, confirm_message


class EditorModal(ModalScreen[None]):
    """Modal screen whose keys go to the app's editor like the grid's do."""

    AUTO_FOCUS = None

    def __init__(self, editor: GridEditor):
        super().__init__()
        self.editor = editor

    def on_mount(self) -> None:
        self.refresh_content()

    def refresh_content(self) -> None:
        """Redraw from editor state. Subclasses override."""

    def on_key(self, event) -> None:
        if hasattr(self.app, "handle_editor_key"):
            self.app.handle_editor_key(event.key, event.character)  # type: ignore[attr-defined]
        event.prevent_default()
        event.stop()


class TimeEntryPopupScreen(EditorModal):
    """Popup for viewing and editing the multi-line time entry."""

    CSS = """
    TimeEntryPopupScreen {
        align: center middle;
    }

    #time-entry-popup {
        width: 80%;
        height: 60%;
        padding: 0 1;
        background: $surface;
        border: thick $primary;
    }
    """

    def compose(self) -> ComposeResult:
        yield TimeEntryPopup(id="time-entry-popup")

    def refresh_content(self) -> None:
        if not self.is_mounted:
            return
        editor = self.editor
        editing = editor.mode is Mode.EDITING_POPUP
        popup = self.query_one("#time-entry-popup", TimeEntryPopup)
        popup.border_title = "Edit Time Entry" if editing else "Time Entry"
        popup.update_display(
            editor.current_entry.time_entry,
            editor.text_cursor,
            editing=editing,
            scroll=editor.popup_scroll,
        )


class HelpScreen(EditorModal):
    """Key binding reference; any key returns to navigation."""

    CSS = """
    HelpScreen {
        align: center middle;
    }

    #help-panel {
        width: 70;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $primary;
    }
    """

    def compose(self) -> ComposeResult:
        yield HelpPanel(id="help-panel")


class ConfirmScreen(EditorModal):
    """Yes/no prompt for deleting an entry or clearing them all."""

    CSS = """
    ConfirmScreen {
        align: center middle;
    }

    #confirm-dialog {
        width: 50;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $warning;
    }

    #confirm-buttons {
        width: 100%;
        height: auto;
        margin-top: 1;
    }

    #confirm-buttons Button {
        width: 1fr;
        margin: 0 1;
    }
    """

    def __init__(self, editor: GridEditor):
        super().__init__(editor)
        self.message = confirm_message(editor.mode, editor.cursor.row)

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-dialog"):
            yield Label(self.message)
            with Horizontal(id="confirm-buttons"):
                yield Button("Yes (Y)", variant="warning", id="yes")
                yield Button("No (N)", variant="default", id="no")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        key = "y" if event.button.id == "yes" else "n"
        if hasattr(self.app, "handle_editor_key"):
            self.app.handle_editor_key(key, key)  # type: ignore[attr-defined]
