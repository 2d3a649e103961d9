"""Utility functions for time parsing and multi-line text cursors."""

from __future__ import annotations

from datetime import time


def parse_time_of_day(val: str) -> time | None:
    """Parse 'HH:MM' or 'HHMM' into a time, None if it isn't one."""
    digits = val.replace(":", "")
    if len(digits) != 4 or not digits.isdigit():
        return None
    try:
        return time(int(digits[:2]), int(digits[2:]))
    except ValueError:
        return None


def format_duration(start: time, end: time) -> str:
    """Format the span from start to end as HH:MM."""
    minutes = (end.hour * 60 + end.minute) - (start.hour * 60 + start.minute)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def locate_cursor(lines: list[str], offset: int) -> tuple[int, int]:
    """Find (line index, column) of a character offset within split lines."""
    char_count = 0
    for idx, line in enumerate(lines):
        if char_count + len(line) >= offset:
            return idx, offset - char_count
        char_count += len(line) + 1  # line break
    return len(lines) - 1, len(lines[-1])


def line_start(lines: list[str], line_idx: int) -> int:
    """Offset of the first character of a line."""
    return sum(len(line) + 1 for line in lines[:line_idx])


def move_cursor_vertically(text: str, offset: int, delta: int) -> int:
    """Move a text cursor to the same column on an adjacent line.

    The column is clamped to the target line's length. Moving past the first
    or last line leaves the offset unchanged.
    """
    lines = text.split("\n")
    current_line, pos_in_line = locate_cursor(lines, offset)
    target = current_line + delta
    if target < 0 or target >= len(lines):
        return offset
    return line_start(lines, target) + min(pos_in_line, len(lines[target]))
