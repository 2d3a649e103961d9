#!/usr/bin/env python3
"""Task log TUI application."""

from __future__ import annotations

import logging
import sqlite3
import sys

from textual.app import App, ComposeResult

import storage
from editor import GridEditor, Mode
from screens import ConfirmScreen, EditorModal, HelpScreen, TimeEntryPopupScreen
from widgets import EntryGrid, StatusBar

logger = logging.getLogger(__name__)

TICK_SECONDS = 0.1


def overlay_for_mode(mode: Mode) -> type[EditorModal] | None:
    """Which modal screen, if any, should be showing for a mode."""
    if mode.is_popup:
        return TimeEntryPopupScreen
    if mode is Mode.HELP:
        return HelpScreen
    if mode in (Mode.CONFIRM_DELETE_ENTRY, Mode.CONFIRM_CLEAR_ENTRIES):
        return ConfirmScreen
    return None


class TaskLogApp(App):
    """Main task log application."""

    TITLE = "Task Log"
    ENABLE_COMMAND_PALETTE = False

    CSS = """
    Screen {
        background: $surface;
    }

    #entry-grid {
        height: 1fr;
        margin: 0 1;
        border: round $primary;
        border-title-style: bold;
    }

    #status-bar {
        height: auto;
        dock: bottom;
        padding: 0 1;
        border: round $primary;
        color: $text;
    }

    DataTable > .datatable--cursor {
        background: $secondary;
    }
    """

    def __init__(self):
        super().__init__()
        storage.init_db()
        config = storage.ensure_config()
        entries = storage.load_entries()
        self.editor = GridEditor(entries, config)

        self.grid = EntryGrid(id="entry-grid")
        self.status_bar = StatusBar(id="status-bar")
        self._overlay: EditorModal | None = None

    def compose(self) -> ComposeResult:
        yield self.grid
        yield self.status_bar

    def on_mount(self):
        self.grid.border_title = self.TITLE
        self.grid.setup_columns()
        self._refresh_display()
        self.grid.focus()
        self.set_interval(TICK_SECONDS, self._on_tick)

    def handle_editor_key(self, key: str, character: str | None) -> None:
        """Feed a key press to the editor, then redraw or quit."""
        self.editor.handle_key(key, character)
        if self.editor.should_quit:
            self._quit()
            return
        self._refresh_display()

    def _on_tick(self) -> None:
        if self.editor.tick():
            self._refresh_display()

    def _refresh_display(self) -> None:
        self.grid.update_display(self.editor)
        self.status_bar.update_display(self.editor)
        self._sync_overlay()

    def _sync_overlay(self) -> None:
        """Push or pop the modal screen matching the editor's mode."""
        wanted = overlay_for_mode(self.editor.mode)
        if self._overlay is not None and type(self._overlay) is not wanted:
            self.pop_screen()
            self._overlay = None
        if wanted is not None and self._overlay is None:
            self._overlay = wanted(self.editor)
            self.push_screen(self._overlay)
        elif self._overlay is not None:
            self._overlay.refresh_content()

    def _quit(self) -> None:
        self.editor.save_on_quit()
        logger.info("Exiting")
        self.exit()

    async def action_quit(self) -> None:
        self._quit()


def setup_logging() -> None:
    log_file = storage.DB_PATH.parent / "tasklog.log"
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.FileHandler(log_file)],
    )


def main() -> int:
    try:
        setup_logging()
        app = TaskLogApp()
    except (sqlite3.Error, OSError) as e:
        print(f"tasklog: could not open {storage.DB_PATH}: {e}", file=sys.stderr)
        return 1

    logger.info("Starting with %d entries from %s", len(app.editor.entries), storage.DB_PATH)
    app.run()
    return app.return_code or 0


if __name__ == "__main__":
    sys.exit(main())
