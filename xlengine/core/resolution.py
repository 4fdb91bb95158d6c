# Copyright (C) 2025-2026 XLEngine Contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# See LICENSE for the full text.

"""
Window and game resolution selection.

Both resolutions are integer multiples of a fixed base (320x240 for the
window, 320x200 for the game).  The scale is what gets stored; widths and
heights are always derived from it, except that fullscreen uses the
monitor size for the window.
"""

from __future__ import annotations

import logging

from xlengine.core.models import (
    GAME_BASE_HEIGHT,
    GAME_BASE_WIDTH,
    MIN_GAME_SCALE,
    MIN_WINDOW_SCALE,
    WINDOW_BASE_HEIGHT,
    WINDOW_BASE_WIDTH,
    EngineSettings,
)

log = logging.getLogger(__name__)

MAX_DEFAULT_SCALE = 5


def largest_scale(
    base_width: int,
    base_height: int,
    max_width: int,
    max_height: int,
    upper: int = MAX_DEFAULT_SCALE,
) -> int | None:
    """Largest ``s`` in ``[0, upper]`` with ``base * s`` inside the bounds."""
    for scale in range(upper, -1, -1):
        if base_width * scale <= max_width and base_height * scale <= max_height:
            return scale
    return None


def choose_default_resolution(
    settings: EngineSettings,
    monitor_width: int,
    monitor_height: int,
) -> None:
    """Pick first-run scales for a monitor of the given size."""
    if settings.fullscreen:
        settings.window_width = monitor_width
        settings.window_height = monitor_height
        scale = largest_scale(GAME_BASE_WIDTH, GAME_BASE_HEIGHT, monitor_width, monitor_height)
        if scale is not None:
            settings.game_scale = scale
    else:
        scale = largest_scale(WINDOW_BASE_WIDTH, WINDOW_BASE_HEIGHT, monitor_width, monitor_height)
        if scale is not None:
            settings.window_scale = scale
        settings.game_scale = settings.window_scale
        settings.apply_window_scale()

    settings.apply_game_scale()
    log.debug(
        "Default resolution for %dx%d monitor: window %dx%d, game %dx%d",
        monitor_width, monitor_height,
        settings.window_width, settings.window_height,
        settings.game_width, settings.game_height,
    )


def reconcile_on_load(
    settings: EngineSettings,
    monitor_width: int,
    monitor_height: int,
) -> bool:
    """Repair stored scales that no longer suit the monitor.

    Returns ``True`` if anything had to change, meaning the settings file
    should be rewritten.
    """
    settings.apply_window_scale()
    settings.apply_game_scale()
    changed = False

    # The monitor or desktop resolution may have changed since the last run.
    if settings.window_scale > MIN_WINDOW_SCALE and (
        settings.window_width > monitor_width or settings.window_height > monitor_height
    ):
        settings.window_scale = max(
            MIN_WINDOW_SCALE,
            min(
                settings.window_scale,
                monitor_width // WINDOW_BASE_WIDTH,
                monitor_height // WINDOW_BASE_HEIGHT,
            ),
        )
        settings.apply_window_scale()
        changed = True

    if settings.fullscreen:
        settings.window_width = monitor_width
        settings.window_height = monitor_height
    elif settings.window_scale < MIN_WINDOW_SCALE:
        settings.window_scale = MIN_WINDOW_SCALE
        settings.apply_window_scale()
        changed = True

    if settings.game_scale > MIN_GAME_SCALE and (
        settings.game_width > settings.window_width
        or settings.game_height > settings.window_height
    ):
        settings.game_scale = max(
            MIN_GAME_SCALE,
            min(
                settings.game_scale,
                settings.window_width // GAME_BASE_WIDTH,
                settings.window_height // GAME_BASE_HEIGHT,
            ),
        )
        settings.apply_game_scale()
        changed = True

    if changed:
        log.info(
            "Adjusted resolution for %dx%d monitor: window scale %d, game scale %d",
            monitor_width, monitor_height,
            settings.window_scale, settings.game_scale,
        )
    return changed
