# Copyright (C) 2025-2026 XLEngine Contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# See LICENSE for the full text.

"""Line-oriented reader and writer for the engine's ini files.

The settings files repeat keys (``keyMapping`` appears once per game) and
give meaning to the order of lines, so :mod:`configparser` cannot read
them.  The reader instead hands every ``key=value`` pair to a callback, in
file order.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Callable, Iterator

log = logging.getLogger(__name__)

_SECTION_RE = re.compile(r"^\[([^\]]*)\]$")
_COMMENT_PREFIXES = (";", "#")

IniCallback = Callable[[str, str], "bool | None"]


# ── Reading ──────────────────────────────────────────────────────────────

def iter_pairs(text: str) -> Iterator[tuple[str, str]]:
    """Yield ``(key, value)`` for every assignment line of *text*.

    Blank lines, comments and ``[section]`` headers are skipped.  Values
    lose one pair of surrounding double quotes.
    """
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith(_COMMENT_PREFIXES):
            continue
        if _SECTION_RE.match(line):
            continue
        if "=" not in line:
            continue
        key, _, val = line.partition("=")
        key = key.strip()
        if not key:
            continue
        yield key, _unquote(val.strip())


def read_ini(path: str | Path, callback: IniCallback) -> bool:
    """Feed every pair of the file at *path* to *callback*.

    Returns ``False`` if the file does not exist or cannot be read.  A
    callback returning ``False`` stops the scan early.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        log.debug("Cannot read %s: %s", path, exc)
        return False

    count = 0
    for key, value in iter_pairs(text):
        count += 1
        if callback(key, value) is False:
            break
    log.debug("Read %d entries from %s", count, path)
    return True


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == '"' and value[-1] == '"':
        return value[1:-1]
    return value


# ── Writing ──────────────────────────────────────────────────────────────

class IniWriter:
    """Accumulates ini lines and saves them in one atomic write."""

    def __init__(self) -> None:
        self._lines: list[str] = []

    def comment(self, text: str) -> None:
        self._lines.append(f"; {text}")

    def new_line(self) -> None:
        self._lines.append("")

    def write(self, key: str, value: bool | int | float | str) -> None:
        """Write *key* with *value* formatted by type; strings are quoted."""
        if isinstance(value, bool):
            text = "true" if value else "false"
        elif isinstance(value, int):
            text = str(value)
        elif isinstance(value, float):
            text = f"{value:f}"
        else:
            text = f'"{value}"'
        self._lines.append(f"{key}={text}")

    def write_raw(self, key: str, value: str) -> None:
        """Write *value* exactly as given, without quotes."""
        self._lines.append(f"{key}={value}")

    def lines(self) -> list[str]:
        return list(self._lines)

    def text(self) -> str:
        text = "\n".join(self._lines)
        if not text.endswith("\n"):
            text += "\n"
        return text

    def save(self, path: str | Path) -> None:
        """Write to *path* via temp-file-and-rename so readers never see a
        half-written file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp = tempfile.mkstemp(
            suffix=".ini", dir=str(path.parent), prefix=".tmp_xl_"
        )
        try:
            os.close(fd)
            Path(tmp).write_text(self.text(), encoding="utf-8")
            Path(tmp).replace(path)
        except BaseException:
            try:
                os.unlink(tmp)
            except OSError:
                pass
            raise
        log.debug("Wrote %d lines to %s", len(self._lines), path)
