"""System clipboard access through the platform's clipboard commands."""

from __future__ import annotations

import logging
import os
import subprocess

logger = logging.getLogger(__name__)

POSIX_COMMANDS = [
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
    ["pbcopy"],
]
WINDOWS_COMMANDS = [["clip"]]


def clipboard_commands() -> list[list[str]]:
    return POSIX_COMMANDS if os.name == "posix" else WINDOWS_COMMANDS


def copy_text(text: str) -> bool:
    """Put text on the system clipboard. Returns False if no command worked."""
    for cmd in clipboard_commands():
        try:
            subprocess.run(cmd, input=text, text=True, check=True, timeout=1)
            return True
        except (subprocess.SubprocessError, OSError):
            continue
    logger.warning("No clipboard command succeeded")
    return False
