from __future__ import annotations

from dataclasses import dataclass, fields
from enum import IntEnum

from utils import format_duration, parse_time_of_day


class Field(IntEnum):
    """Editable entry fields, valued by their grid column."""

    TASK_NUMBER = 1
    WORK_CODE = 2
    TIME_ENTRY = 3
    START_TIME = 4
    END_TIME = 5

    @property
    def attr(self) -> str:
        return self.name.lower()

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title()

    @property
    def is_multiline(self) -> bool:
        return self is Field.TIME_ENTRY


@dataclass
class Entry:
    task_number: str = ""
    work_code: str = ""
    time_entry: str = ""
    start_time: str = ""
    end_time: str = ""

    def get(self, field: Field) -> str:
        return getattr(self, field.attr)

    def set(self, field: Field, value: str) -> None:
        setattr(self, field.attr, value)

    def values(self) -> list[str]:
        return [getattr(self, f.name) for f in fields(self)]

    def is_complete(self) -> bool:
        """True when every field has a value."""
        return all(self.values())

    def is_entirely_empty(self) -> bool:
        return not any(self.values())

    def task_duration(self) -> str | None:
        """Time between start and end as HH:MM, or None if it can't be worked out."""
        start = parse_time_of_day(self.start_time)
        end = parse_time_of_day(self.end_time)
        if start is None or end is None or end < start:
            return None
        return format_duration(start, end)


@dataclass
class Config:
    export_path: str = "~/Documents/tasklog_exports"
    export_format: str = "csv"
    show_instructions: bool = True
    auto_save: bool = True
