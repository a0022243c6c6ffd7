"""
Plain-text conversion and clipboard support for dry-run mode.

:func:`markdown_to_plain_text` strips the markdown the model produces so
the report can be pasted into DingTalk's report form. The substitutions
run in a fixed order: code, then images before links, then headings and
emphasis. The rules are re-applied until the text stops changing, since
removing one construct can expose another.
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
import sys
from typing import List, Optional, Pattern, Tuple


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


MARKDOWN_RULES: List[Tuple[Pattern[str], str]] = [
    (re.compile(r"```[^\n]*\n?(.*?)```", re.DOTALL), r"\1"),
    (re.compile(r"`([^`\n]+)`"), r"\1"),
    (re.compile(r"!\[([^\]]*)\]\([^)]*\)"), r"\1"),
    (re.compile(r"\[([^\]]+)\]\([^)]*\)"), r"\1"),
    (re.compile(r"^[ \t]{0,3}#{1,6}[ \t]+", re.MULTILINE), ""),
    (re.compile(r"\*\*(.+?)\*\*"), r"\1"),
    (re.compile(r"__(.+?)__"), r"\1"),
    (re.compile(r"\*([^*\n]+?)\*"), r"\1"),
    (re.compile(r"(?<!\w)_([^_\n]+?)_(?!\w)"), r"\1"),
]

BLANK_RUNS = re.compile(r"\n{3,}")


def markdown_to_plain_text(text: str) -> str:
    """Strip markdown syntax from ``text`` and normalise blank lines."""
    result = (text or "").strip()
    while True:
        previous = result
        for pattern, replacement in MARKDOWN_RULES:
            result = pattern.sub(replacement, result)
        result = BLANK_RUNS.sub("\n\n", result).strip()
        if result == previous:
            return result


def _clipboard_command() -> Optional[List[str]]:
    if sys.platform == "darwin":
        return ["pbcopy"]
    if sys.platform == "win32":
        return ["clip"]
    for command in (["wl-copy"], ["xclip", "-selection", "clipboard"], ["xsel", "--clipboard", "--input"]):
        if shutil.which(command[0]):
            return command
    return None


def copy_to_clipboard(text: str) -> bool:
    """Copy ``text`` to the system clipboard.

    Returns False instead of raising when no clipboard tool is available
    or the tool fails.
    """
    command = _clipboard_command()
    if command is None:
        logger.warning("No clipboard tool found; report is displayed only")
        return False
    try:
        subprocess.run(command, input=text, text=True, check=True, timeout=10)
    except (OSError, subprocess.SubprocessError) as exc:
        logger.warning("Failed to copy report to clipboard: %s", exc)
        return False
    return True
