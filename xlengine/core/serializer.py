# Copyright (C) 2025-2026 XLEngine Contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# See LICENSE for the full text.

"""Render a :class:`SettingsStore` as the contents of ``xlsettings.ini``.

Every key written here is one the dispatcher reads back, so a saved file
reproduces the store when it is loaded again.
"""

from __future__ import annotations

from xlengine.core.dispatcher import FLAG_KEYS
from xlengine.core.ini_io import IniWriter
from xlengine.core.key_mapping import format_keys
from xlengine.core.models import SettingsStore

# Canonical spelling of each flag key, in file order.
_FLAG_NAMES: tuple[str, ...] = (
    "fullscreen",
    "immediateExit",
    "showAllGames",
    "uiGlow",
    "colorCorrect",
    "vsync",
    "reduceCPU",
)

_PERCENT_NAMES: tuple[str, ...] = ("brightness", "saturation", "contrast", "gamma")


def write_settings(store: SettingsStore, writer: IniWriter) -> None:
    settings = store.settings

    writer.comment("Flags")
    for name in _FLAG_NAMES:
        writer.write(name, settings.has_flag(FLAG_KEYS[name.lower()]))
    writer.new_line()

    writer.comment("Video")
    writer.write("windowScale", settings.window_scale)
    writer.write("gameScale", settings.game_scale)
    writer.write("graphicsDevice", store.graphics_device.value)
    writer.write("frameLimit", settings.frame_limit)
    for name in _PERCENT_NAMES:
        writer.write(name, getattr(settings.color_correct, name) * 100.0)
    writer.new_line()

    writer.comment("Sound")
    writer.write("musicVolume", settings.music_volume)
    writer.write("soundVolume", settings.sound_volume)
    writer.write("midiformat", settings.midi_format.value)
    writer.write("patchloc", settings.patch_data_location)
    writer.new_line()

    writer.comment("Engine Settings")
    launch = settings.launch_game_id
    if 0 <= launch < store.game_count:
        writer.write("launchGame", store.games[launch].name)
    else:
        writer.write("launchGame", "None")
    writer.new_line()

    writer.comment("Game Data")
    for idx, game in enumerate(store.games):
        writer.write(f"game{idx}Path", game.path)
    writer.new_line()

    writer.comment("Action/Key Mapping")
    for idx, game in enumerate(store.games):
        writer.comment(f"Game {idx} ({game.name})")
        writer.write("keyMapping", idx)
        for action in game.actions:
            writer.write_raw(action.action, _mapping_value(action.keys))
        writer.new_line()


def _mapping_value(keys: list[str]) -> str:
    # The reader strips edge whitespace and one pair of outer quotes.
    encoded = format_keys(keys)
    if encoded != encoded.strip() or (
        len(encoded) >= 2 and encoded[0] == '"' and encoded[-1] == '"'
    ):
        return f'"{encoded}"'
    return encoded


def render_settings(store: SettingsStore) -> str:
    """Return the settings file text for *store*."""
    writer = IniWriter()
    write_settings(store, writer)
    return writer.text()
