# Copyright (C) 2025-2026 XLEngine Contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# See LICENSE for the full text.

"""Typed data model for the engine settings and the game registry."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from xlengine.core.key_mapping import MAX_KEY_LENGTH, MAX_MAPPING_COUNT


# ── Capacities ───────────────────────────────────────────────────────────

MAX_GAME_COUNT   = 256
MAX_ACTION_COUNT = 64     # actions per game

NO_GAME = -1

# ── Base resolutions (scale 1) ───────────────────────────────────────────

WINDOW_BASE_WIDTH  = 320
WINDOW_BASE_HEIGHT = 240
GAME_BASE_WIDTH    = 320
GAME_BASE_HEIGHT   = 200

MIN_WINDOW_SCALE = 3      # 960x720, smallest size the UI fits in
MIN_GAME_SCALE   = 1


class CapacityError(ValueError):
    """Raised when a registry or mapping table is already full."""


class DuplicateActionError(ValueError):
    """Raised when an action name is already defined for a game."""


# ── Enumerations ─────────────────────────────────────────────────────────

class EngineFlag(enum.IntFlag):
    NONE           = 0
    FULLSCREEN     = 1 << 0
    IMMEDIATE_EXIT = 1 << 1
    SHOW_ALL_GAMES = 1 << 2
    UI_GLOW        = 1 << 3
    COLOR_CORRECT  = 1 << 4
    VSYNC          = 1 << 5
    REDUCE_CPU     = 1 << 6


class MidiFormat(enum.Enum):
    GUS_PATCH  = "gus"
    SOUND_FONT = "sf2"


class GraphicsDevice(enum.Enum):
    """Renderer selection.  AUTODETECT is resolved later by the renderer."""
    AUTODETECT = "autodetect"
    OPENGL_1_3 = "openGL 1.3"
    OPENGL_2_0 = "openGL 2.0"


# ── Settings ─────────────────────────────────────────────────────────────

@dataclass
class ColorCorrection:
    """Color-correction factors, 1.0 meaning unchanged (100%)."""
    brightness: float = 1.0
    saturation: float = 1.0
    contrast: float = 1.0
    gamma: float = 1.0


@dataclass
class EngineSettings:
    """Global engine settings.  The defaults are the compiled-in values."""
    flags: EngineFlag = EngineFlag.SHOW_ALL_GAMES | EngineFlag.UI_GLOW
    launch_game_id: int = NO_GAME
    frame_limit: int = 120                 # Hz, 0 = no cap
    window_scale: int = 4
    game_scale: int = 4
    window_width: int = WINDOW_BASE_WIDTH * 4
    window_height: int = WINDOW_BASE_HEIGHT * 4
    game_width: int = GAME_BASE_WIDTH * 4
    game_height: int = GAME_BASE_HEIGHT * 4
    color_correct: ColorCorrection = field(default_factory=ColorCorrection)

    # Sound
    midi_format: MidiFormat = MidiFormat.GUS_PATCH
    patch_data_location: str = "Sound/freepats/freepats.cfg"
    music_volume: int = 100               # percent
    sound_volume: int = 100               # percent

    def has_flag(self, flag: EngineFlag) -> bool:
        return bool(self.flags & flag)

    def set_flag(self, flag: EngineFlag, enabled: bool) -> None:
        if enabled:
            self.flags |= flag
        else:
            self.flags &= ~flag

    @property
    def fullscreen(self) -> bool:
        return self.has_flag(EngineFlag.FULLSCREEN)

    def apply_window_scale(self) -> None:
        """Recompute the window size from :attr:`window_scale`."""
        self.window_width = WINDOW_BASE_WIDTH * self.window_scale
        self.window_height = WINDOW_BASE_HEIGHT * self.window_scale

    def apply_game_scale(self) -> None:
        """Recompute the game resolution from :attr:`game_scale`."""
        self.game_width = GAME_BASE_WIDTH * self.game_scale
        self.game_height = GAME_BASE_HEIGHT * self.game_scale


# ── Game registry ────────────────────────────────────────────────────────

@dataclass
class ActionMapping:
    """One named input action and the keys bound to it."""
    action: str
    keys: list[str] = field(default_factory=list)

    def validate(self) -> None:
        if len(self.keys) > MAX_MAPPING_COUNT:
            raise CapacityError(
                f"{self.action!r} has {len(self.keys)} keys, "
                f"at most {MAX_MAPPING_COUNT} are allowed"
            )
        for key in self.keys:
            if len(key) > MAX_KEY_LENGTH:
                raise ValueError(
                    f"key {key[:32]!r}... exceeds {MAX_KEY_LENGTH} characters"
                )


@dataclass
class GameEntry:
    """One launchable game in the registry."""
    name: str = ""
    lib: str = ""
    icon_file: str = ""
    path: str = ""
    icon_id: int = -1
    actions: list[ActionMapping] = field(default_factory=list)

    def find_action(self, name: str) -> ActionMapping | None:
        """Return the action called *name* (case-insensitive) or ``None``."""
        folded = name.casefold()
        for action in self.actions:
            if action.action.casefold() == folded:
                return action
        return None

    def add_action(self, name: str, keys: list[str]) -> ActionMapping:
        """Append a new action.

        Raises :class:`DuplicateActionError` if *name* already exists and
        :class:`CapacityError` once :data:`MAX_ACTION_COUNT` is reached.
        """
        if self.find_action(name) is not None:
            raise DuplicateActionError(
                f"Action {name!r} is already defined for {self.name or 'game'!r}"
            )
        if len(self.actions) >= MAX_ACTION_COUNT:
            raise CapacityError(
                f"{self.name or 'game'!r} already has {MAX_ACTION_COUNT} actions"
            )
        mapping = ActionMapping(action=name, keys=list(keys))
        mapping.validate()
        self.actions.append(mapping)
        return mapping


@dataclass
class SettingsStore:
    """Everything read from the game registry and the user settings.

    The store is an ordinary object owned by the caller; every operation
    that reads or writes settings takes it explicitly.
    """
    settings: EngineSettings = field(default_factory=EngineSettings)
    graphics_device: GraphicsDevice = GraphicsDevice.AUTODETECT
    games: list[GameEntry] = field(default_factory=list)
    game_id: int = NO_GAME
    version: str = ""

    @property
    def game_count(self) -> int:
        return len(self.games)

    def set_game_count(self, count: int) -> None:
        """Grow or shrink the registry to *count* entries.

        Negative counts empty the registry.  Raises :class:`CapacityError`
        above :data:`MAX_GAME_COUNT`, leaving the registry untouched.
        """
        if count > MAX_GAME_COUNT:
            raise CapacityError(
                f"gameCount {count} exceeds the registry capacity of {MAX_GAME_COUNT}"
            )
        count = max(count, 0)
        if count < len(self.games):
            del self.games[count:]
        while len(self.games) < count:
            self.games.append(GameEntry())

    def game(self, index: int) -> GameEntry:
        if not 0 <= index < len(self.games):
            raise IndexError(f"game index {index} out of range 0-{len(self.games) - 1}")
        return self.games[index]

    def find_game(self, name: str) -> int:
        """Return the index of the game called *name*, or :data:`NO_GAME`."""
        folded = name.casefold()
        for idx, game in enumerate(self.games):
            if game.name.casefold() == folded:
                return idx
        return NO_GAME

    def set_game_id(self, index: int) -> None:
        if not 0 <= index < len(self.games):
            raise ValueError(f"game id {index} out of range 0-{len(self.games) - 1}")
        self.game_id = index

    def set_graphics_device(self, device: GraphicsDevice) -> None:
        self.graphics_device = device

    def reset_registry(self) -> None:
        self.games.clear()
        self.game_id = NO_GAME
