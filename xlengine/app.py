# Copyright (C) 2025-2026 XLEngine Contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# See LICENSE for the full text.

import logging
from pathlib import Path

from PySide6.QtGui import QGuiApplication

from xlengine.core import config
from xlengine.core.config import SettingsPaths
from xlengine.core.models import SettingsStore
from xlengine.ui.icons import IconRegistry

log = logging.getLogger(__name__)

# Used when no screen is reported (headless platforms).
_FALLBACK_MONITOR = (1920, 1080)


def primary_monitor_size() -> tuple[int, int]:
    """Return the primary screen size in device-independent pixels."""
    screen = QGuiApplication.primaryScreen()
    if screen is None:
        log.warning("No screen reported, assuming %dx%d", *_FALLBACK_MONITOR)
        return _FALLBACK_MONITOR
    size = screen.size()
    return size.width(), size.height()


class EngineApp:
    """Startup controller: loads settings and the game registry."""

    def __init__(self, argv: list[str], root: str | Path | None = None):
        self._qt = QGuiApplication(argv)
        self._qt.setApplicationName("XL Engine")
        self._qt.setOrganizationName("XL Engine")

        self.paths = SettingsPaths(root=Path(root)) if root else SettingsPaths()
        self.store = SettingsStore()
        self.icons = IconRegistry(self.paths.root)

        width, height = primary_monitor_size()
        self.loaded = config.read(self.store, width, height, self.paths)
        if self.loaded:
            config.init_game_data(self.store, self.icons.add_icon)

    def run(self) -> int:
        """Report what was loaded.  Returns the process exit code."""
        if not self.loaded:
            log.error("Cannot start without %s", self.paths.games_path)
            return 1

        settings = self.store.settings
        log.info(
            "XL Engine %s: window %dx%d, game %dx%d, device %s",
            self.store.version,
            settings.window_width, settings.window_height,
            settings.game_width, settings.game_height,
            self.store.graphics_device.value,
        )
        for idx, game in enumerate(self.store.games):
            log.info(
                "Game %d: %s (%s) - %d actions",
                idx, game.name, game.lib, len(game.actions),
            )
        return 0
