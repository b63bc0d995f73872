"""Best-effort clipboard sink backed by the platform copy commands."""

from __future__ import annotations

import os
import shutil
import subprocess
import sys
from typing import List

from .logging import get_logger

LOGGER = get_logger("kubeview.utils.clipboard")


def clipboard_commands() -> List[List[str]]:
    if sys.platform == "darwin":
        return [["pbcopy"]]
    if os.name == "nt":
        return [["clip"]]
    return [
        ["wl-copy"],
        ["xclip", "-selection", "clipboard"],
        ["xsel", "--clipboard", "--input"],
    ]


def copy_to_clipboard(text: str) -> bool:
    """Write ``text`` to the first available clipboard tool.

    Returns False when nothing accepted the text; callers ignore it.
    """

    for command in clipboard_commands():
        if shutil.which(command[0]) is None:
            continue
        try:
            proc = subprocess.run(command, input=text, text=True, check=False)
        except OSError as exc:
            LOGGER.debug("Clipboard command %s failed: %s", command[0], exc)
            continue
        if proc.returncode == 0:
            return True
    LOGGER.debug("No clipboard command accepted the selection")
    return False


__all__ = ["clipboard_commands", "copy_to_clipboard"]
