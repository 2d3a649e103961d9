"""Tests for export.py - CSV export."""

from __future__ import annotations

import csv
from datetime import date

import pytest

from export import HEADER, export_csv, export_dir, export_entries, export_filename, export_rows
from models import Config, Entry


def read_csv(path):
    with path.open(newline="", encoding="utf-8") as f:
        return list(csv.reader(f))


class TestExportRows:
    """Tests for export_rows function."""

    def test_skips_entirely_empty_entries(self, complete_entry):
        rows = export_rows([Entry(), complete_entry, Entry()])
        assert len(rows) == 1
        assert rows[0][0] == "2"

    def test_incomplete_entry_exported_with_placeholder_duration(self, partial_entry):
        rows = export_rows([partial_entry])
        assert rows == [["1", "T-200", "", "", "", "", "00:00"]]

    def test_complete_entry_duration(self, complete_entry):
        rows = export_rows([complete_entry])
        assert rows[0][-1] == "01:30"
        assert rows[0][3] == complete_entry.time_entry

    def test_inverted_times_use_placeholder(self):
        rows = export_rows([Entry(task_number="T", start_time="17:00", end_time="09:00")])
        assert rows[0][-1] == "00:00"


class TestExportCsv:
    """Tests for export_csv function."""

    def test_writes_dated_file(self, sample_config, complete_entry):
        path = export_csv([complete_entry], sample_config, today=date(2026, 1, 27))

        assert path.name == "tasklog_2026-01-27.csv"
        assert path.parent == export_dir(sample_config)
        assert path.exists()

    def test_header_and_rows(self, sample_config, complete_entry, partial_entry):
        path = export_csv([complete_entry, Entry(), partial_entry], sample_config, today=date(2026, 1, 27))

        rows = read_csv(path)
        assert rows[0] == HEADER
        assert rows[1] == ["1", "T-100", "DEV", "Fixed login bug\nReviewed PR", "09:00", "10:30", "01:30"]
        assert rows[2] == ["3", "T-200", "", "", "", "", "00:00"]
        assert len(rows) == 3

    def test_creates_missing_directory(self, tmp_path, complete_entry):
        config = Config(export_path=str(tmp_path / "a" / "b"))

        path = export_csv([complete_entry], config, today=date(2026, 3, 1))

        assert path.exists()

    def test_home_relative_directory(self, tmp_path, monkeypatch, complete_entry):
        monkeypatch.setenv("HOME", str(tmp_path))
        config = Config(export_path="~/exports")

        path = export_csv([complete_entry], config, today=date(2026, 3, 1))

        assert path == tmp_path / "exports" / "tasklog_2026-03-01.csv"

    def test_overwrites_same_day_export(self, sample_config, complete_entry, partial_entry):
        export_csv([complete_entry, partial_entry], sample_config, today=date(2026, 1, 27))
        path = export_csv([partial_entry], sample_config, today=date(2026, 1, 27))

        assert len(read_csv(path)) == 2


class TestExportEntries:
    """Tests for export_entries dispatch."""

    def test_csv_format(self, sample_config, complete_entry):
        path = export_entries([complete_entry], sample_config, today=date(2026, 1, 27))
        assert path.suffix == ".csv"

    def test_format_is_case_insensitive(self, sample_config, complete_entry):
        sample_config.export_format = "CSV"
        path = export_entries([complete_entry], sample_config, today=date(2026, 1, 27))
        assert path.exists()

    def test_unknown_format(self, sample_config, complete_entry):
        sample_config.export_format = "xlsx"
        with pytest.raises(ValueError, match="xlsx"):
            export_entries([complete_entry], sample_config)

    def test_filename(self):
        assert export_filename(date(2025, 12, 31)) == "tasklog_2025-12-31.csv"
