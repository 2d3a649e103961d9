"""Shared fixtures for tests."""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path
from typing import Generator
from unittest.mock import MagicMock, patch

import pytest

# Set up test database before importing storage
_test_dir = tempfile.mkdtemp(prefix="tasklog-test-")
_test_db_path = os.path.join(_test_dir, "tasklog.db")
os.environ["TASKLOG_DB"] = _test_db_path


@pytest.fixture(scope="session", autouse=True)
def setup_test_db() -> Generator[Path, None, None]:
    """Set up a test database for the entire test session."""
    import storage

    # Reinitialise storage module with test db path
    storage.DB_PATH = Path(_test_db_path)
    storage.init_db()

    yield Path(_test_db_path)

    # Cleanup
    shutil.rmtree(_test_dir, ignore_errors=True)


class FakeClock:
    """Manually advanced stand-in for time.monotonic."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mock_save() -> Generator[MagicMock, None, None]:
    """Replace storage.save_entries so editor tests don't touch disk."""
    import storage

    with patch.object(storage, "save_entries") as save:
        yield save


@pytest.fixture
def complete_entry():
    """Create an Entry with every field filled in."""
    from models import Entry

    return Entry(
        task_number="T-100",
        work_code="DEV",
        time_entry="Fixed login bug\nReviewed PR",
        start_time="09:00",
        end_time="10:30",
    )


@pytest.fixture
def partial_entry():
    """Create an Entry with only the task number set."""
    from models import Entry

    return Entry(task_number="T-200")


@pytest.fixture
def sample_config(tmp_path):
    """Create a Config exporting into a temporary directory."""
    from models import Config

    return Config(
        export_path=str(tmp_path / "exports"),
        export_format="csv",
        show_instructions=True,
        auto_save=True,
    )


@pytest.fixture
def editor(clock, mock_save):
    """A fresh GridEditor with a fake clock and storage saves mocked."""
    from editor import GridEditor

    return GridEditor(clock=clock)

