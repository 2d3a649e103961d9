"""Custom widgets for the task log application."""

from __future__ import annotations

from textual.widgets import DataTable, Static
from rich.text import Text

from editor import GridEditor, Mode
from models import Entry, Field

ACTIVE_NAV_STYLE = "bold black on cyan"
ACTIVE_EDIT_STYLE = "bold black on yellow"

GRID_COLUMNS = [
    ("#", 4),
    (Field.TASK_NUMBER.label, 15),
    (Field.WORK_CODE.label, 15),
    (Field.TIME_ENTRY.label, 30),
    (Field.START_TIME.label, 12),
    (Field.END_TIME.label, 12),
    ("Task Time", 10),
]

MODE_HINTS = {
    Mode.NAVIGATION: "i edit, dd delete, Ctrl+S export, Ctrl+X clear, Ctrl+Y copy, ? help, q quit",
    Mode.EDITING: "Esc to exit, Tab to next cell",
    Mode.VIEWING_POPUP: "i edit, ↑↓ scroll, Tab next cell, Ctrl+Y copy",
    Mode.EDITING_POPUP: "Esc stop editing, Enter new line, Tab next cell",
    Mode.HELP: "any key to return",
    Mode.CONFIRM_DELETE_ENTRY: "y to delete, n to cancel",
    Mode.CONFIRM_CLEAR_ENTRIES: "y to clear, n to cancel",
}


def with_text_cursor(value: str, text_cursor: int) -> str:
    """Insert a '|' marker at the text cursor position."""
    pos = min(max(text_cursor, 0), len(value))
    return value[:pos] + "|" + value[pos:]


def format_cell(value: str, field: Field, active: bool, mode: Mode, text_cursor: int) -> Text:
    """Render one grid cell, bracketing and highlighting the active one."""
    if field.is_multiline:
        value = value.replace("\n", " ")
    if not active:
        return Text(value)

    if mode is Mode.EDITING:
        value = with_text_cursor(value, text_cursor)
    style = ACTIVE_EDIT_STYLE if mode.is_editing else ACTIVE_NAV_STYLE
    return Text(f"[{value}]", style=style)


def row_cells(index: int, entry: Entry, editor: GridEditor) -> list[Text]:
    is_current_row = index == editor.cursor.row
    cells = [Text(">>" if is_current_row else str(index + 1), style="bold" if is_current_row else "dim")]
    for field in Field:
        active = is_current_row and editor.cursor.col is field
        cells.append(format_cell(entry.get(field), field, active, editor.mode, editor.text_cursor))
    cells.append(Text(entry.task_duration() or "", style="dim"))
    return cells


class EntryGrid(DataTable):
    """Entry table that hands every key press to the app's editor."""

    def setup_columns(self) -> None:
        self.cursor_type = "cell"
        self.zebra_stripes = True
        for label, width in GRID_COLUMNS:
            self.add_column(label, width=width)

    def update_display(self, editor: GridEditor) -> None:
        self.clear()
        for i, entry in enumerate(editor.entries):
            self.add_row(*row_cells(i, entry, editor), key=str(i))
        self.move_cursor(row=editor.cursor.row, column=int(editor.cursor.col))

    def on_key(self, event) -> None:
        """Intercept all keys so the editor sees them before DataTable bindings."""
        if not hasattr(self.app, "handle_editor_key"):
            return
        self.app.handle_editor_key(event.key, event.character)  # type: ignore[attr-defined]
        event.prevent_default()
        event.stop()


class StatusBar(Static):
    """Shows mode, cursor position, key hints and transient messages."""

    def update_display(self, editor: GridEditor) -> None:
        col = editor.cursor.col
        text = Text()
        text.append(f"Mode: {editor.mode.value}", style="bold")

        if editor.mode is Mode.EDITING:
            text.append(f" | Editing {col.label}: '{editor.current_value}'")
        else:
            text.append(f" | Row: {editor.cursor.row + 1} | Col: {int(col)} ({col.label})")

        if editor.pending_delete:
            text.append(" | d-", style="bold red")

        if editor.config.show_instructions:
            text.append(f" | {MODE_HINTS[editor.mode]}", style="dim")

        if editor.status_message:
            text.append("\n")
            text.append(editor.status_message, style="bold yellow")

        self.update(text)


class TimeEntryPopup(Static):
    """Full view of the multi-line time entry field."""

    def update_display(self, value: str, text_cursor: int, editing: bool, scroll: int) -> None:
        if editing:
            value = with_text_cursor(value, text_cursor)
        lines = value.split("\n")[scroll:]
        self.update(Text("\n".join(lines)))


HELP_TEXT = """\
Task Log - Help

Navigation Mode:
  i          - Enter edit mode
  Tab        - Move to next column
  Shift+Tab  - Move to previous column
  Arrow Keys - Navigate up/down/left/right
  dd         - Delete current entry
  ?          - Show this help
  Ctrl+S     - Export to CSV
  Ctrl+X     - Clear all entries
  Ctrl+Y     - Copy current field
  q          - Quit

Edit Mode:
  Esc        - Exit edit mode
  Tab        - Move to next column (stay in edit)
  Enter      - Move to next column (new line in Time Entry)
  ←/→        - Move the text cursor
  Home/End   - Jump to start/end of field
  Backspace  - Delete characters

Time Entry Popup:
  ↑/↓        - Scroll (viewing) or move between lines (editing)

Press any key to return to navigation."""


class HelpPanel(Static):
    """Key binding reference."""

    def __init__(self, **kwargs):
        super().__init__(HELP_TEXT, **kwargs)


def confirm_message(mode: Mode, row: int) -> str:
    if mode is Mode.CONFIRM_DELETE_ENTRY:
        return f"Delete entry on row {row + 1}?"
    return "Clear ALL entries? This cannot be undone."
