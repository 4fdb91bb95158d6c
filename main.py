# Copyright (C) 2025-2026 XLEngine Contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# See LICENSE for the full text.

import logging
import os
import sys
import traceback
from datetime import datetime, timezone
from pathlib import Path

_ROOT = Path(__file__).resolve().parent
_CACHE_DIR = _ROOT / "cache"
_CRASH_LOG = _CACHE_DIR / "latest.log"


def _crash_report(exc_type, exc_value, exc_tb, root: Path) -> str:
    """Text of ``cache/latest.log`` for an unhandled exception.

    The header names the engine build, the settings directory in use and
    whether each of its configuration files was present.
    """
    from xlengine.core.config import SettingsPaths, read_build_version

    paths = SettingsPaths(root=root)
    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
    lines = [
        "XL Engine crash log",
        "===================",
        f"Timestamp : {timestamp}",
        f"Engine    : {read_build_version(paths)}",
        f"Settings  : {Path(root).resolve()}",
    ]
    for path in (paths.games_path, paths.settings_path, paths.version_path):
        state = "present" if path.is_file() else "missing"
        lines.append(f"  {path.name:<16} {state}")
    lines += [
        f"Python    : {sys.version}",
        f"Platform  : {sys.platform}",
        f"Exception : {exc_type.__name__}: {exc_value}",
        "",
        "",
    ]
    tb_text = "".join(traceback.format_exception(exc_type, exc_value, exc_tb))
    return "\n".join(lines) + tb_text


def _install_crash_logger(root: Path, log_path: Path = _CRASH_LOG) -> None:
    """Replace the default exception hook so unhandled errors are written
    to *log_path* before the process terminates."""
    _original_hook = sys.excepthook

    def _crash_hook(exc_type, exc_value, exc_tb):
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            log_path.write_text(
                _crash_report(exc_type, exc_value, exc_tb, root), encoding="utf-8"
            )
        except Exception:
            pass
        _original_hook(exc_type, exc_value, exc_tb)

    sys.excepthook = _crash_hook


def _apply_logging() -> None:
    """Log to ``cache/xlengine.log`` and stderr at ``XLENGINE_LOG_LEVEL``."""
    level_name = os.environ.get("XLENGINE_LOG_LEVEL", "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)
    try:
        _CACHE_DIR.mkdir(parents=True, exist_ok=True)
        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            handlers=[
                logging.FileHandler(str(_CACHE_DIR / "xlengine.log"), encoding="utf-8"),
                logging.StreamHandler(sys.stderr),
            ],
            force=True,
        )
    except OSError:
        logging.basicConfig(level=level, force=True)


def main():
    root = Path(sys.argv[1]) if len(sys.argv) > 1 else Path.cwd()
    _install_crash_logger(root)
    _apply_logging()
    from xlengine.app import EngineApp
    app = EngineApp(sys.argv, root=root)
    sys.exit(app.run())


if __name__ == "__main__":
    main()
