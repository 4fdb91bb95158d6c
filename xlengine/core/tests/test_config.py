"""Tests for reading and writing the engine configuration files."""

from pathlib import Path

import pytest

from xlengine.core import config
from xlengine.core.config import SettingsPaths
from xlengine.core.ini_io import iter_pairs
from xlengine.core.models import EngineFlag, GraphicsDevice, SettingsStore


GAMES_INI = """\
; XL Engine game registry
gameCount=2
game0Name="Daggerfall"
game0Lib="DaggerXL"
game0Icon="Icons/daggerfall.png"
game0Path="C:/Games/Daggerfall"
game1Name="Dark Forces"
game1Lib="DarkXL"
game1Icon="Icons/darkforces.png"
game1Path="C:/Games/DarkForces"

keyMapping=0
Jump=Space
Forward=Up,W

keyMapping=1
Fire=Ctrl
"""

SETTINGS_INI = """\
; Flags
fullscreen=false
vsync=true

; Video
windowScale=4
gameScale=4
graphicsDevice="openGL 2.0"
brightness=150.000000

; Engine Settings
launchGame="Dark Forces"

; Game Data
game1Path="D:/DarkForces"

; Action/Key Mapping
keyMapping=0
Jump=Enter,Space
Crouch=C
"""


@pytest.fixture
def paths(tmp_path: Path) -> SettingsPaths:
    (tmp_path / "xlgames.ini").write_text(GAMES_INI, encoding="utf-8")
    return SettingsPaths(root=tmp_path)


class TestBuildVersion:
    def test_reads_leading_digits(self, tmp_path: Path) -> None:
        f = tmp_path / "buildVersion.txt"
        f.write_text("417 nightly\n", encoding="utf-8")
        assert config.read_build_number(f) == 417

    def test_missing_file_is_zero(self, tmp_path: Path) -> None:
        assert config.read_build_number(tmp_path / "buildVersion.txt") == 0

    def test_no_digits_is_zero(self, tmp_path: Path) -> None:
        f = tmp_path / "buildVersion.txt"
        f.write_text("beta", encoding="utf-8")
        assert config.read_build_number(f) == 0

    def test_version_string(self, tmp_path: Path) -> None:
        (tmp_path / "buildVersion.txt").write_text("12", encoding="utf-8")
        assert config.read_build_version(SettingsPaths(root=tmp_path)) == "0.2.12 (Beta 1)"


class TestReadGameData:
    def test_loads_registry(self, paths: SettingsPaths) -> None:
        store = SettingsStore()
        assert config.read_game_data(store, paths) is True
        assert store.game_count == 2
        assert store.games[1].lib == "DarkXL"
        assert store.games[0].find_action("Forward").keys == ["Up", "W"]

    def test_missing_registry(self, tmp_path: Path) -> None:
        store = SettingsStore()
        assert config.read_game_data(store, SettingsPaths(root=tmp_path)) is False

    def test_reread_does_not_duplicate_actions(self, paths: SettingsPaths) -> None:
        store = SettingsStore()
        config.read_game_data(store, paths)
        config.read_game_data(store, paths)
        assert len(store.games[0].actions) == 2


class TestRead:
    def test_missing_registry_fails(self, tmp_path: Path) -> None:
        store = SettingsStore()
        assert config.read(store, 1920, 1080, SettingsPaths(root=tmp_path)) is False
        assert not (tmp_path / "xlsettings.ini").exists()

    def test_missing_settings_written_with_defaults(self, paths: SettingsPaths) -> None:
        store = SettingsStore()
        assert config.read(store, 1920, 1080, paths) is True
        assert paths.settings_path.exists()
        pairs = dict(iter_pairs(paths.settings_path.read_text(encoding="utf-8")))
        assert pairs["windowScale"] == "4"
        assert pairs["gameScale"] == "4"
        assert store.settings.window_width == 1280
        assert store.version == "0.2.0 (Beta 1)"

    def test_settings_override_registry(self, paths: SettingsPaths) -> None:
        paths.settings_path.write_text(SETTINGS_INI, encoding="utf-8")
        store = SettingsStore()
        assert config.read(store, 1920, 1080, paths) is True

        s = store.settings
        assert s.has_flag(EngineFlag.VSYNC)
        assert s.color_correct.brightness == 1.5
        assert s.launch_game_id == 1
        assert store.graphics_device is GraphicsDevice.OPENGL_2_0
        assert store.games[1].path == "D:/DarkForces"
        daggerfall = store.games[0]
        assert daggerfall.find_action("Jump").keys == ["Enter", "Space"]
        assert daggerfall.find_action("Crouch") is None

    def test_valid_settings_not_rewritten(self, paths: SettingsPaths) -> None:
        paths.settings_path.write_text(SETTINGS_INI, encoding="utf-8")
        config.read(SettingsStore(), 1920, 1080, paths)
        assert paths.settings_path.read_text(encoding="utf-8") == SETTINGS_INI

    def test_stale_resolution_rewritten(self, paths: SettingsPaths) -> None:
        paths.settings_path.write_text(SETTINGS_INI, encoding="utf-8")
        store = SettingsStore()
        config.read(store, 1024, 768, paths)
        assert store.settings.window_scale == 3
        assert store.settings.game_scale == 3
        pairs = dict(iter_pairs(paths.settings_path.read_text(encoding="utf-8")))
        assert pairs["windowScale"] == "3"
        assert pairs["gameScale"] == "3"
        # Bindings survive the rewrite.
        assert "Jump=Enter,Space" in paths.settings_path.read_text(encoding="utf-8")

    def test_written_settings_read_back(self, paths: SettingsPaths) -> None:
        store = SettingsStore()
        config.read(store, 1920, 1080, paths)
        store.settings.set_flag(EngineFlag.IMMEDIATE_EXIT, True)
        store.games[0].find_action("Jump").keys = ["LShift", ","]
        config.write(store, paths)

        again = SettingsStore()
        config.read(again, 1920, 1080, paths)
        assert again.settings.has_flag(EngineFlag.IMMEDIATE_EXIT)
        assert again.games[0].find_action("Jump").keys == ["LShift", ","]


class TestInitGameData:
    def test_assigns_icon_handles(self, paths: SettingsPaths) -> None:
        store = SettingsStore()
        config.read_game_data(store, paths)
        registered: list[str] = []

        def add_icon(icon_file: str) -> int:
            registered.append(icon_file)
            return len(registered) - 1

        config.init_game_data(store, add_icon)
        assert registered == ["Icons/daggerfall.png", "Icons/darkforces.png"]
        assert [g.icon_id for g in store.games] == [0, 1]
