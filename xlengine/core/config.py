# Copyright (C) 2025-2026 XLEngine Contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# See LICENSE for the full text.

"""
Persistent engine configuration.

Three files live in the engine directory:

* ``xlgames.ini`` - the game registry shipped with the engine: names,
  libraries, icons, data paths and the default action/key mappings.
* ``xlsettings.ini`` - user settings, rewritten by the engine whenever it
  is missing or its resolution no longer fits the monitor.
* ``buildVersion.txt`` - the build number.

:func:`read` loads all three into a :class:`SettingsStore` at startup.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from xlengine.core.dispatcher import KeyValueDispatcher
from xlengine.core.ini_io import IniWriter, read_ini
from xlengine.core.models import SettingsStore
from xlengine.core.resolution import choose_default_resolution, reconcile_on_load
from xlengine.core.serializer import write_settings

log = logging.getLogger(__name__)


# -- Defaults --------------------------------------------------------------

MAJOR_VERSION = 0         # 1 will be the first full release
MINOR_VERSION = 2
VERSION_LABEL = "(Beta 1)"

_GAMES_FILE    = "xlgames.ini"
_SETTINGS_FILE = "xlsettings.ini"
_VERSION_FILE  = "buildVersion.txt"

_BUILD_RE = re.compile(r"\d*")


@dataclass
class SettingsPaths:
    """Where the configuration files are found."""
    root: Path = field(default_factory=Path.cwd)
    games_file: str = _GAMES_FILE
    settings_file: str = _SETTINGS_FILE
    version_file: str = _VERSION_FILE

    @property
    def games_path(self) -> Path:
        return Path(self.root) / self.games_file

    @property
    def settings_path(self) -> Path:
        return Path(self.root) / self.settings_file

    @property
    def version_path(self) -> Path:
        return Path(self.root) / self.version_file


# -- Version ---------------------------------------------------------------

def read_build_number(path: str | Path) -> int:
    """Return the run of digits the file starts with, or 0."""
    try:
        text = Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError:
        return 0
    digits = _BUILD_RE.match(text).group(0)
    return int(digits) if digits else 0


def format_version(build: int) -> str:
    return f"{MAJOR_VERSION}.{MINOR_VERSION}.{build} {VERSION_LABEL}"


def read_build_version(paths: SettingsPaths) -> str:
    return format_version(read_build_number(paths.version_path))


# -- Persistence -----------------------------------------------------------

def read_game_data(
    store: SettingsStore,
    paths: SettingsPaths,
    dispatcher: KeyValueDispatcher | None = None,
) -> bool:
    """Load the game registry and its default key mappings.

    Returns ``False`` if the registry file is missing.
    """
    dispatcher = dispatcher or KeyValueDispatcher(store)
    store.reset_registry()
    dispatcher.begin_pass(establishing_defaults=True)
    return read_ini(paths.games_path, dispatcher.dispatch)


def read(
    store: SettingsStore,
    monitor_width: int,
    monitor_height: int,
    paths: SettingsPaths | None = None,
) -> bool:
    """Populate *store* from disk for a monitor of the given size.

    Without a game registry nothing else is meaningful and ``False`` is
    returned.  The user settings file is optional; it is (re)written when
    it is missing or when its resolution had to be repaired.
    """
    paths = paths or SettingsPaths()
    store.version = read_build_version(paths)
    log.info("XL Engine version %s", store.version)

    dispatcher = KeyValueDispatcher(store)
    if not read_game_data(store, paths, dispatcher):
        log.error("Game registry %s not found", paths.games_path)
        return False
    log.info("Registered %d games", store.game_count)

    choose_default_resolution(store.settings, monitor_width, monitor_height)

    write_required = True
    dispatcher.begin_pass(establishing_defaults=False)
    if read_ini(paths.settings_path, dispatcher.dispatch):
        write_required = reconcile_on_load(store.settings, monitor_width, monitor_height)
    else:
        log.info("No user settings at %s, using defaults", paths.settings_path)

    if write_required:
        write(store, paths)
    return True


def write(store: SettingsStore, paths: SettingsPaths | None = None) -> None:
    """Write the user settings file."""
    paths = paths or SettingsPaths()
    writer = IniWriter()
    write_settings(store, writer)
    writer.save(paths.settings_path)
    log.info("Saved settings to %s", paths.settings_path)


def init_game_data(store: SettingsStore, add_icon: Callable[[str], int]) -> None:
    """Register every game's icon and remember the handle *add_icon* returns."""
    for game in store.games:
        game.icon_id = add_icon(game.icon_file)
