# Copyright (C) 2025-2026 XLEngine Contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# See LICENSE for the full text.

"""
Game icon registry for the launcher UI.

Icons are loaded once as QIcons and handed out by integer handle, which is
what :func:`xlengine.core.config.init_game_data` stores on each game.
"""

from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtGui import QIcon, QPixmap

log = logging.getLogger(__name__)

INVALID_ICON = -1


class IconRegistry:
    """Owns the loaded game icons.  Handles are indices into the registry."""

    def __init__(self, root: str | Path | None = None) -> None:
        self._root = Path(root) if root is not None else None
        self._icons: list[QIcon] = []
        self._by_path: dict[str, int] = {}

    def add_icon(self, icon_file: str) -> int:
        """Load *icon_file* and return its handle, or ``INVALID_ICON``."""
        if not icon_file:
            return INVALID_ICON
        path = Path(icon_file)
        if self._root is not None and not path.is_absolute():
            path = self._root / path
        key = str(path)
        if key in self._by_path:
            return self._by_path[key]

        pixmap = QPixmap(key)
        if pixmap.isNull():
            log.warning("Cannot load game icon %s", key)
            return INVALID_ICON

        handle = len(self._icons)
        self._icons.append(QIcon(pixmap))
        self._by_path[key] = handle
        return handle

    def icon(self, handle: int) -> QIcon:
        """Return the icon for *handle*; an empty QIcon for invalid handles."""
        if 0 <= handle < len(self._icons):
            return self._icons[handle]
        return QIcon()

    def __len__(self) -> int:
        return len(self._icons)
