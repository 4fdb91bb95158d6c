# Copyright (C) 2025-2026 XLEngine Contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# See LICENSE for the full text.

"""
Key/value interpreter for ``xlgames.ini`` and ``xlsettings.ini``.

Both files are replayed pair by pair, in file order, into a
:class:`KeyValueDispatcher`.  Most keys set one field of the
:class:`~xlengine.core.models.SettingsStore`.  Two kinds of key depend on
what came earlier in the same file:

* ``game{N}Name`` / ``Lib`` / ``Icon`` / ``Path`` only apply once
  ``gameCount`` has made room for game ``N``.
* ``keyMapping=N`` opens a block: every following key that is not a known
  setting names an action of game ``N``, until the next ``keyMapping``.

The game registry is read with ``establishing_defaults=True``, which
creates the actions.  The user settings are read afterwards with
``establishing_defaults=False``, which may only rebind existing actions.

Nothing here raises for bad input.  Bad numbers read as zero, unknown keys
are ignored, and capacity problems are logged.
"""

from __future__ import annotations

import enum
import logging
import re
from functools import partial
from typing import Callable

from xlengine.core.key_mapping import parse_keys
from xlengine.core.models import (
    MAX_GAME_COUNT,
    NO_GAME,
    CapacityError,
    DuplicateActionError,
    EngineFlag,
    GraphicsDevice,
    MidiFormat,
    SettingsStore,
)

log = logging.getLogger(__name__)

_INT_RE = re.compile(r"\s*([+-]?\d+)")
_FLOAT_RE = re.compile(
    r"\s*([+-]?(?:\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)
_GAME_FIELD_RE = re.compile(r"^game(0|[1-9]\d*)(name|lib|icon|path)$", re.IGNORECASE)

# Lower-cased key -> flag bit
FLAG_KEYS: dict[str, EngineFlag] = {
    "fullscreen":    EngineFlag.FULLSCREEN,
    "immediateexit": EngineFlag.IMMEDIATE_EXIT,
    "showallgames":  EngineFlag.SHOW_ALL_GAMES,
    "uiglow":        EngineFlag.UI_GLOW,
    "colorcorrect":  EngineFlag.COLOR_CORRECT,
    "vsync":         EngineFlag.VSYNC,
    "reducecpu":     EngineFlag.REDUCE_CPU,
}

# Lower-cased key -> EngineSettings attribute
INT_SETTING_KEYS: dict[str, str] = {
    "framelimit":  "frame_limit",
    "windowscale": "window_scale",
    "gamescale":   "game_scale",
    "musicvolume": "music_volume",
    "soundvolume": "sound_volume",
}

# Lower-cased key -> ColorCorrection attribute
PERCENT_KEYS: dict[str, str] = {
    "brightness": "brightness",
    "saturation": "saturation",
    "contrast":   "contrast",
    "gamma":      "gamma",
}

MIDI_FORMAT_NAMES: dict[str, MidiFormat] = {
    "gus":    MidiFormat.GUS_PATCH,
    "gravis": MidiFormat.GUS_PATCH,
    "sf2":    MidiFormat.SOUND_FONT,
}

# There is no 3.2 device yet; it falls back to the 2.0 device.
GRAPHICS_DEVICE_NAMES: dict[str, GraphicsDevice] = {
    "opengl 1.3": GraphicsDevice.OPENGL_1_3,
    "opengl1.3":  GraphicsDevice.OPENGL_1_3,
    "opengl 2.0": GraphicsDevice.OPENGL_2_0,
    "opengl2.0":  GraphicsDevice.OPENGL_2_0,
    "opengl 3.2": GraphicsDevice.OPENGL_2_0,
    "opengl3.2":  GraphicsDevice.OPENGL_2_0,
    "autodetect": GraphicsDevice.AUTODETECT,
}

_GAME_FIELDS: dict[str, str] = {
    "name": "name",
    "lib":  "lib",
    "icon": "icon_file",
    "path": "path",
}


# ── Scalar parsing ───────────────────────────────────────────────────────

def read_bool(value: str) -> bool:
    """Only ``false`` and ``0`` (any case) are false."""
    return value.lower() not in ("false", "0")


def parse_int(value: str) -> int:
    """Parse the leading integer of *value*; ``0`` if there is none."""
    m = _INT_RE.match(value)
    return int(m.group(1)) if m else 0


def parse_float(value: str) -> float:
    """Parse the leading number of *value*; ``0.0`` if there is none."""
    m = _FLOAT_RE.match(value)
    if not m:
        return 0.0
    try:
        return float(m.group(1))
    except ValueError:
        return 0.0


# ── Dispatcher ───────────────────────────────────────────────────────────

class ParseState(enum.Enum):
    IDLE                = "idle"
    COLLECTING_DEFAULTS = "collecting-defaults"
    OVERRIDING          = "overriding"


class KeyValueDispatcher:
    """Apply ini key/value pairs to a :class:`SettingsStore`.

    Call :meth:`begin_pass` before replaying each file, then hand
    :meth:`dispatch` to the ini reader as its callback.
    """

    def __init__(self, store: SettingsStore) -> None:
        self._store = store
        self._establishing_defaults = False
        self._active_game = NO_GAME
        self._handlers = self._build_handlers()

    # -- Pass control ------------------------------------------------------

    def begin_pass(self, *, establishing_defaults: bool) -> None:
        self._establishing_defaults = establishing_defaults
        self._active_game = NO_GAME

    @property
    def establishing_defaults(self) -> bool:
        return self._establishing_defaults

    @property
    def active_game(self) -> int:
        return self._active_game

    @property
    def state(self) -> ParseState:
        # A later, smaller gameCount can leave the block pointing past the end.
        if not 0 <= self._active_game < self._store.game_count:
            return ParseState.IDLE
        if self._establishing_defaults:
            return ParseState.COLLECTING_DEFAULTS
        return ParseState.OVERRIDING

    # -- Dispatch ----------------------------------------------------------

    def dispatch(self, key: str, value: str) -> bool:
        """Apply one pair.  Always returns ``True`` so reading continues."""
        handler = self._handlers.get(key.lower())
        if handler is not None:
            handler(value)
        elif self.state is ParseState.COLLECTING_DEFAULTS:
            self._define_action(key, value)
        elif self.state is ParseState.OVERRIDING:
            self._override_action(key, value)
        else:
            self._assign_game_field(key, value)
        return True

    __call__ = dispatch

    def _build_handlers(self) -> dict[str, Callable[[str], None]]:
        handlers: dict[str, Callable[[str], None]] = {}
        for key, flag in FLAG_KEYS.items():
            handlers[key] = partial(self._set_flag, flag)
        handlers["launchgame"] = self._set_launch_game
        for key, attr in INT_SETTING_KEYS.items():
            handlers[key] = partial(self._set_int, attr)
        handlers["gamecount"] = self._set_game_count
        handlers["keymapping"] = self._open_mapping_block
        for key, attr in PERCENT_KEYS.items():
            handlers[key] = partial(self._set_percent, attr)
        handlers["midiformat"] = self._set_midi_format
        handlers["patchloc"] = self._set_patch_location
        handlers["graphicsdevice"] = self._set_graphics_device
        return handlers

    # -- Settings ----------------------------------------------------------

    def _set_flag(self, flag: EngineFlag, value: str) -> None:
        self._store.settings.set_flag(flag, read_bool(value))

    def _set_launch_game(self, value: str) -> None:
        self._store.settings.launch_game_id = self._store.find_game(value)

    def _set_int(self, attr: str, value: str) -> None:
        setattr(self._store.settings, attr, parse_int(value))

    def _set_percent(self, attr: str, value: str) -> None:
        setattr(self._store.settings.color_correct, attr, parse_float(value) / 100.0)

    def _set_midi_format(self, value: str) -> None:
        fmt = MIDI_FORMAT_NAMES.get(value.lower())
        if fmt is not None:
            self._store.settings.midi_format = fmt

    def _set_patch_location(self, value: str) -> None:
        self._store.settings.patch_data_location = value

    def _set_graphics_device(self, value: str) -> None:
        device = GRAPHICS_DEVICE_NAMES.get(value.lower())
        if device is None:
            log.warning(
                'Invalid graphics device "%s" - available devices are '
                '"openGL 1.3", "openGL 2.0", "openGL 3.2" or "autodetect"',
                value,
            )
            return
        self._store.set_graphics_device(device)

    # -- Game registry -----------------------------------------------------

    def _set_game_count(self, value: str) -> None:
        count = parse_int(value)
        try:
            self._store.set_game_count(count)
        except CapacityError as exc:
            log.error("%s; only the first %d games are used", exc, MAX_GAME_COUNT)
            self._store.set_game_count(MAX_GAME_COUNT)

    def _assign_game_field(self, key: str, value: str) -> None:
        m = _GAME_FIELD_RE.match(key)
        if not m:
            return
        index = int(m.group(1))
        if index >= self._store.game_count:
            return
        setattr(self._store.games[index], _GAME_FIELDS[m.group(2).lower()], value)

    # -- Action/key mapping ------------------------------------------------

    def _open_mapping_block(self, value: str) -> None:
        index = parse_int(value)
        if index >= self._store.game_count:
            log.warning(
                "keyMapping=%d refers to a game that is not registered (%d games); "
                "ignoring its mappings",
                index, self._store.game_count,
            )
            index = NO_GAME
        self._active_game = max(index, NO_GAME)

    def _define_action(self, key: str, value: str) -> None:
        game = self._store.games[self._active_game]
        try:
            game.add_action(key, parse_keys(value))
        except DuplicateActionError as exc:
            log.warning("%s; keeping the first definition", exc)
        except CapacityError as exc:
            log.error("%s; dropping action %r", exc, key)

    def _override_action(self, key: str, value: str) -> None:
        game = self._store.games[self._active_game]
        action = game.find_action(key)
        if action is None:
            log.debug(
                "Ignoring mapping for unknown action %r of game %d",
                key, self._active_game,
            )
            return
        action.keys = parse_keys(value)
