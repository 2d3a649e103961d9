"""Modal cursor and editing state for the entry grid.

GridEditor owns the entry list, the (row, field) cursor, the active input
mode and the text cursor within the selected field. Keys arrive one at a time
through handle_key(); the UI tick calls tick() to expire status messages and
run the interval auto-save. Rendering only ever reads this state.
"""

from __future__ import annotations

import csv
import logging
import sqlite3
import time
from dataclasses import dataclass, field as dataclass_field
from enum import Enum
from typing import Callable

import clipboard
import export
import storage
from models import Config, Entry, Field
from utils import locate_cursor, move_cursor_vertically

logger = logging.getLogger(__name__)

STATUS_MESSAGE_SECONDS = 3.0
AUTO_SAVE_INTERVAL = 30.0


class Mode(Enum):
    NAVIGATION = "Navigation"
    EDITING = "Editing"
    EDITING_POPUP = "Editing (Popup)"
    VIEWING_POPUP = "Viewing (Popup)"
    HELP = "Help"
    CONFIRM_DELETE_ENTRY = "Confirm Delete"
    CONFIRM_CLEAR_ENTRIES = "Confirm Clear"

    @property
    def is_editing(self) -> bool:
        return self in (Mode.EDITING, Mode.EDITING_POPUP)

    @property
    def is_popup(self) -> bool:
        return self in (Mode.VIEWING_POPUP, Mode.EDITING_POPUP)

    @property
    def follows_column(self) -> bool:
        """Modes that switch between grid and popup variants with the column."""
        return self in (Mode.NAVIGATION, Mode.EDITING, Mode.VIEWING_POPUP, Mode.EDITING_POPUP)


@dataclass
class Cursor:
    row: int = 0
    col: Field = dataclass_field(default=Field.TASK_NUMBER)


class GridEditor:
    """Keyboard-driven editor for the entry grid."""

    def __init__(
        self,
        entries: list[Entry] | None = None,
        config: Config | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.entries: list[Entry] = entries or [Entry()]
        self.config = config or Config()
        self._clock = clock

        self.cursor = Cursor()
        self.mode = Mode.NAVIGATION
        self.text_cursor = 0
        self.popup_scroll = 0
        self.pending_delete = False
        self.should_quit = False

        self.status_message: str | None = None
        self.message_time: float | None = None
        self.last_save_time = self._clock()

        self._handlers: dict[Mode, Callable[[str, str | None], None]] = {
            Mode.NAVIGATION: self._handle_navigation,
            Mode.EDITING: self._handle_editing,
            Mode.VIEWING_POPUP: self._handle_viewing_popup,
            Mode.EDITING_POPUP: self._handle_editing_popup,
            Mode.HELP: self._handle_help,
            Mode.CONFIRM_DELETE_ENTRY: self._handle_confirm_delete,
            Mode.CONFIRM_CLEAR_ENTRIES: self._handle_confirm_clear,
        }

        self._normalize_mode()

    # --- State accessors ---

    @property
    def current_entry(self) -> Entry:
        return self.entries[self.cursor.row]

    @property
    def current_value(self) -> str:
        return self.current_entry.get(self.cursor.col)

    @property
    def popup_lines(self) -> list[str]:
        return self.current_entry.time_entry.split("\n")

    @property
    def max_popup_scroll(self) -> int:
        return max(0, len(self.popup_lines) - 1)

    # --- Key dispatch ---

    def handle_key(self, key: str, character: str | None = None) -> None:
        """Apply a single key press to the editor state."""
        self._handlers[self.mode](key, character)

    def _handle_navigation(self, key: str, character: str | None) -> None:
        if key == "d":
            if self.pending_delete:
                self.mode = Mode.CONFIRM_DELETE_ENTRY
                self.pending_delete = False
            else:
                self.pending_delete = True
            return

        self.pending_delete = False
        if key == "q":
            self.should_quit = True
        elif key == "ctrl+s":
            self.export_entries()
        elif key == "ctrl+x":
            self.mode = Mode.CONFIRM_CLEAR_ENTRIES
        elif key == "ctrl+y":
            self.copy_current_field()
        elif key == "i":
            self.enter_edit()
        elif key == "question_mark" or character == "?":
            self.mode = Mode.HELP
        elif key in ("tab", "right"):
            self.next_col()
        elif key in ("shift+tab", "left"):
            self.prev_col()
        elif key == "up":
            self.prev_row()
        elif key == "down":
            self.next_row()

    def _handle_editing(self, key: str, character: str | None) -> None:
        if key == "escape":
            self.exit_edit()
        elif key in ("tab", "enter"):
            self.next_col()
        elif key == "shift+tab":
            self.prev_col()
        else:
            self._edit_text(key, character)

    def _handle_viewing_popup(self, key: str, character: str | None) -> None:
        if key == "i":
            self.enter_edit()
        elif key == "ctrl+y":
            self.copy_current_field()
        elif key in ("tab", "right"):
            self.next_col()
        elif key in ("shift+tab", "left"):
            self.prev_col()
        elif key == "up":
            self.popup_scroll = max(0, self.popup_scroll - 1)
        elif key == "down":
            self.popup_scroll = min(self.max_popup_scroll, self.popup_scroll + 1)

    def _handle_editing_popup(self, key: str, character: str | None) -> None:
        if key == "escape":
            self.mode = Mode.VIEWING_POPUP
            self._save()
        elif key == "tab":
            self.next_col()
            self.popup_scroll = 0
        elif key == "shift+tab":
            self.prev_col()
            self.popup_scroll = 0
        elif key == "ctrl+y":
            self.copy_current_field()
        elif key == "enter":
            self.insert_char("\n")
        elif key == "up":
            self.text_cursor = move_cursor_vertically(self.current_value, self.text_cursor, -1)
        elif key == "down":
            self.text_cursor = move_cursor_vertically(self.current_value, self.text_cursor, 1)
        else:
            self._edit_text(key, character)

        if self.mode is Mode.EDITING_POPUP:
            self._scroll_to_text_cursor()

    def _scroll_to_text_cursor(self) -> None:
        """Pull the popup scroll up so the text cursor's line stays visible."""
        line, _ = locate_cursor(self.popup_lines, self.text_cursor)
        self.popup_scroll = min(self.popup_scroll, line, self.max_popup_scroll)

    def _handle_help(self, key: str, character: str | None) -> None:
        self.mode = Mode.NAVIGATION
        self._normalize_mode()

    def _handle_confirm_delete(self, key: str, character: str | None) -> None:
        if character in ("y", "Y"):
            self.delete_current_entry()
        elif character in ("n", "N") or key == "escape":
            self._back_to_navigation()

    def _handle_confirm_clear(self, key: str, character: str | None) -> None:
        if character in ("y", "Y"):
            self.clear_entries()
        elif character in ("n", "N") or key == "escape":
            self._back_to_navigation()

    def _edit_text(self, key: str, character: str | None) -> None:
        """Text cursor movement and character editing shared by both edit modes."""
        if key == "left":
            self.text_cursor = max(0, self.text_cursor - 1)
        elif key == "right":
            self.text_cursor = min(len(self.current_value), self.text_cursor + 1)
        elif key == "home":
            self.text_cursor = 0
        elif key == "end":
            self.text_cursor = len(self.current_value)
        elif key == "backspace":
            self.delete_char()
        elif character and character.isprintable():
            self.insert_char(character)

    # --- Cursor movement ---

    def next_col(self) -> None:
        if self.cursor.col < Field.END_TIME:
            self.cursor.col = Field(self.cursor.col + 1)
        else:
            self.cursor.col = Field.TASK_NUMBER
            self._advance_row(create=True)
        self._normalize_mode()

    def prev_col(self) -> None:
        if self.cursor.col > Field.TASK_NUMBER:
            self.cursor.col = Field(self.cursor.col - 1)
        elif self.cursor.row > 0:
            self.cursor.col = Field.END_TIME
            self.cursor.row -= 1
        self._normalize_mode()

    def next_row(self) -> None:
        self._advance_row(create=False)
        self._normalize_mode()

    def prev_row(self) -> None:
        if self.cursor.row > 0:
            self.cursor.row -= 1
        self._normalize_mode()

    def _advance_row(self, create: bool) -> None:
        """Move down a row, appending a blank row after a complete last row if create is set."""
        if self.cursor.row < len(self.entries) - 1:
            self.cursor.row += 1
        elif create and self.current_entry.is_complete():
            self.entries.append(Entry())
            self.cursor.row += 1

    def _normalize_mode(self) -> None:
        """Show the popup exactly when the multi-line field is selected."""
        if self.mode.follows_column:
            if self.cursor.col.is_multiline:
                if self.mode is Mode.NAVIGATION:
                    self.mode = Mode.VIEWING_POPUP
                elif self.mode is Mode.EDITING:
                    self.mode = Mode.EDITING_POPUP
            else:
                if self.mode is Mode.VIEWING_POPUP:
                    self.mode = Mode.NAVIGATION
                elif self.mode is Mode.EDITING_POPUP:
                    self.mode = Mode.EDITING
                self.popup_scroll = 0
        self.text_cursor = len(self.current_value)

    def _back_to_navigation(self) -> None:
        self.mode = Mode.NAVIGATION
        self._normalize_mode()

    # --- Editing ---

    def enter_edit(self) -> None:
        if self.mode is Mode.VIEWING_POPUP or self.cursor.col.is_multiline:
            self.mode = Mode.EDITING_POPUP
        else:
            self.mode = Mode.EDITING
        self.text_cursor = len(self.current_value)

    def exit_edit(self) -> None:
        self.mode = Mode.NAVIGATION
        if self.cursor.row == len(self.entries) - 1 and self.current_entry.is_complete():
            self.entries.append(Entry())
            self.cursor.row += 1
            self.cursor.col = Field.TASK_NUMBER
        self._normalize_mode()
        self._save()

    def insert_char(self, char: str) -> None:
        value = self.current_value
        pos = min(self.text_cursor, len(value))
        self.current_entry.set(self.cursor.col, value[:pos] + char + value[pos:])
        self.text_cursor = pos + 1
        self._save_after_edit()

    def delete_char(self) -> None:
        value = self.current_value
        pos = min(self.text_cursor, len(value))
        if pos == 0:
            return
        self.current_entry.set(self.cursor.col, value[:pos - 1] + value[pos:])
        self.text_cursor = pos - 1
        self._save_after_edit()

    # --- Destructive actions ---

    def delete_current_entry(self) -> None:
        """Remove the current row, or blank it if it's the only one."""
        if len(self.entries) <= 1:
            self.entries[0] = Entry()
            self.cursor.row = 0
        else:
            del self.entries[self.cursor.row]
            if self.cursor.row >= len(self.entries):
                self.cursor.row = len(self.entries) - 1
        logger.info("Deleted entry at row %d", self.cursor.row + 1)

        self.cursor.col = Field.TASK_NUMBER
        self._back_to_navigation()
        self._save()

    def clear_entries(self) -> None:
        self.entries = [Entry()]
        self.cursor = Cursor()
        logger.info("Cleared all entries")
        self._back_to_navigation()
        self._save()

    # --- Actions ---

    def export_entries(self) -> None:
        try:
            path = export.export_entries(self.entries, self.config)
        except (OSError, ValueError, csv.Error) as e:
            logger.warning("Export failed: %s", e)
            self.show_message(f"Export failed: {e}")
        else:
            count = sum(1 for entry in self.entries if not entry.is_entirely_empty())
            self.show_message(f"Exported {count} entries to {path}")
        self._save()

    def copy_current_field(self) -> None:
        label = self.cursor.col.label
        value = self.current_value
        if not value:
            self.show_message(f"{label} is empty")
            return
        if clipboard.copy_text(value):
            self.show_message(f"{label} copied to clipboard!")
        else:
            self.show_message("Failed to copy to clipboard")

    # --- Persistence and status ---

    def _save(self, failure: str = "Save failed") -> bool:
        try:
            storage.save_entries(self.entries)
        except (sqlite3.Error, OSError) as e:
            logger.warning("%s: %s", failure, e)
            self.show_message(f"{failure}: {e}")
            return False
        self.last_save_time = self._clock()
        return True

    def _save_after_edit(self) -> None:
        if self.config.auto_save:
            self._save()

    def save_on_quit(self) -> None:
        """Best-effort save on the way out."""
        try:
            storage.save_entries(self.entries)
        except (sqlite3.Error, OSError) as e:
            logger.warning("Save on quit failed: %s", e)

    def show_message(self, msg: str) -> None:
        self.status_message = msg
        self.message_time = self._clock()

    def tick(self) -> bool:
        """Run timer checks. Returns True if visible state changed."""
        changed = False
        now = self._clock()
        if self.message_time is not None and now - self.message_time >= STATUS_MESSAGE_SECONDS:
            self.status_message = None
            self.message_time = None
            changed = True

        if self.config.auto_save and now - self.last_save_time >= AUTO_SAVE_INTERVAL:
            if not self._save("Auto-save failed"):
                # Retry on the next interval rather than every tick
                self.last_save_time = now
                changed = True
        return changed
