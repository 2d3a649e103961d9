from __future__ import annotations

import logging
import os
import sqlite3
from datetime import datetime
from pathlib import Path

from models import Config, Entry

logger = logging.getLogger(__name__)

BACKUP_PREFIX = "entries_backup_"
BACKUPS_TO_KEEP = 10


def _get_db_path() -> Path:
    """Get database path from environment variable or default location."""
    if env_path := os.environ.get("TASKLOG_DB"):
        return Path(env_path)
    return Path.home() / ".tasklog" / "tasklog.db"


DB_PATH = _get_db_path()


def backup_dir() -> Path:
    return DB_PATH.parent / "backups"


def get_connection(path: Path | None = None) -> sqlite3.Connection:
    path = path or DB_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    return conn


_SCHEMA = """
    CREATE TABLE IF NOT EXISTS entries (
        position INTEGER PRIMARY KEY,
        task_number TEXT NOT NULL DEFAULT '',
        work_code TEXT NOT NULL DEFAULT '',
        time_entry TEXT NOT NULL DEFAULT '',
        start_time TEXT NOT NULL DEFAULT '',
        end_time TEXT NOT NULL DEFAULT ''
    );

    CREATE TABLE IF NOT EXISTS config (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL
    );
"""


def init_db():
    """Create tables if they don't exist."""
    conn = get_connection()
    conn.executescript(_SCHEMA)
    conn.commit()
    conn.close()


def _row_to_entry(row: sqlite3.Row) -> Entry:
    return Entry(
        task_number=row["task_number"],
        work_code=row["work_code"],
        time_entry=row["time_entry"],
        start_time=row["start_time"],
        end_time=row["end_time"],
    )


def load_entries() -> list[Entry] | None:
    """Load the entry list. Returns None when nothing usable is stored."""
    try:
        conn = get_connection()
        try:
            rows = conn.execute("SELECT * FROM entries ORDER BY position").fetchall()
        finally:
            conn.close()
    except (sqlite3.Error, OSError) as e:
        logger.warning("Could not load entries from %s: %s", DB_PATH, e)
        return None

    if not rows:
        return None
    return [_row_to_entry(row) for row in rows]


def _write_entries(path: Path, entries: list[Entry]) -> None:
    """Replace the stored entry list at path in a single transaction."""
    conn = get_connection(path)
    try:
        conn.executescript(_SCHEMA)
        with conn:
            conn.execute("DELETE FROM entries")
            conn.executemany(
                """
                INSERT INTO entries
                (position, task_number, work_code, time_entry, start_time, end_time)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                [(i, *entry.values()) for i, entry in enumerate(entries)],
            )
    finally:
        conn.close()


def backup_entries(entries: list[Entry], now: datetime | None = None) -> Path:
    """Write a timestamped copy of the entry list into the backup directory."""
    timestamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    path = backup_dir() / f"{BACKUP_PREFIX}{timestamp}.db"
    _write_entries(path, entries)
    return path


def list_backups() -> list[Path]:
    """Backup files, newest first."""
    directory = backup_dir()
    if not directory.exists():
        return []
    backups = [
        p for p in directory.iterdir()
        if p.name.startswith(BACKUP_PREFIX) and p.suffix == ".db"
    ]
    return sorted(backups, key=lambda p: p.stat().st_mtime, reverse=True)


def cleanup_old_backups(keep: int = BACKUPS_TO_KEEP) -> int:
    """Delete all but the most recent backups. Returns count removed."""
    removed = 0
    for old in list_backups()[keep:]:
        try:
            old.unlink()
            removed += 1
        except OSError as e:
            logger.warning("Could not remove old backup %s: %s", old, e)
    return removed


def save_entries(entries: list[Entry]) -> None:
    """Back up then overwrite the stored entry list.

    Raises sqlite3.Error or OSError if the backup or the primary write fails.
    """
    backup_entries(entries)
    cleanup_old_backups()
    _write_entries(DB_PATH, entries)


def _parse_bool(val: str) -> bool | None:
    lowered = val.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    return None


def get_config() -> Config:
    """Load config from database."""
    conn = get_connection()
    rows = conn.execute("SELECT key, value FROM config").fetchall()
    conn.close()

    config = Config()
    for row in rows:
        if row["key"] == "export_path" and row["value"]:
            config.export_path = row["value"]
        elif row["key"] == "export_format" and row["value"]:
            config.export_format = row["value"]
        elif row["key"] == "show_instructions":
            parsed = _parse_bool(row["value"])
            if parsed is not None:
                config.show_instructions = parsed
        elif row["key"] == "auto_save":
            parsed = _parse_bool(row["value"])
            if parsed is not None:
                config.auto_save = parsed

    return config


def save_config(config: Config):
    """Save config to database."""
    conn = get_connection()
    conn.execute("INSERT OR REPLACE INTO config (key, value) VALUES (?, ?)",
                 ("export_path", config.export_path))
    conn.execute("INSERT OR REPLACE INTO config (key, value) VALUES (?, ?)",
                 ("export_format", config.export_format))
    conn.execute("INSERT OR REPLACE INTO config (key, value) VALUES (?, ?)",
                 ("show_instructions", str(config.show_instructions).lower()))
    conn.execute("INSERT OR REPLACE INTO config (key, value) VALUES (?, ?)",
                 ("auto_save", str(config.auto_save).lower()))
    conn.commit()
    conn.close()


def ensure_config() -> Config:
    """Load config, writing defaults for any keys not yet stored."""
    config = get_config()
    save_config(config)
    return config
