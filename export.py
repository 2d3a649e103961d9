"""CSV export of the entry list."""

from __future__ import annotations

import csv
import logging
from datetime import date
from pathlib import Path

from models import Config, Entry

logger = logging.getLogger(__name__)

HEADER = [
    "Row",
    "Task Number",
    "Work Code",
    "Time Entry",
    "Start Time",
    "End Time",
    "Task Time",
]


def export_dir(config: Config) -> Path:
    return Path(config.export_path).expanduser()


def export_filename(today: date) -> str:
    return f"tasklog_{today.isoformat()}.csv"


def export_rows(entries: list[Entry]) -> list[list[str]]:
    """Rows to export, skipping entries with nothing in them."""
    rows = []
    for i, entry in enumerate(entries):
        if entry.is_entirely_empty():
            continue
        rows.append([
            str(i + 1),
            entry.task_number,
            entry.work_code,
            entry.time_entry,
            entry.start_time,
            entry.end_time,
            entry.task_duration() or "00:00",
        ])
    return rows


def export_csv(entries: list[Entry], config: Config, today: date | None = None) -> Path:
    """Write entries to a dated CSV file in the configured export directory."""
    directory = export_dir(config)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(today or date.today())

    rows = export_rows(entries)
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(HEADER)
        writer.writerows(rows)

    logger.info("Exported %d entries to %s", len(rows), path)
    return path


EXPORTERS = {
    "csv": export_csv,
}


def export_entries(entries: list[Entry], config: Config, today: date | None = None) -> Path:
    """Export using the configured format."""
    exporter = EXPORTERS.get(config.export_format.lower())
    if exporter is None:
        raise ValueError(f"Unsupported export format: {config.export_format}")
    return exporter(entries, config, today)
