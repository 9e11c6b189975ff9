"""Shared fixtures for climate-tiles tests."""

from pathlib import Path

import pytest
from PIL import Image
from PySide6.QtCore import QSettings

from climate_tiles.resources import get_builtin_tileset_text
from climate_tiles.tilesets.models import ClimateClass

TILE_SIZE = 72

CLIMATE_COLORS = {
    "Polar": (240, 248, 255, 255),
    "Subpolar": (200, 220, 240, 255),
    "Boreal": (60, 110, 90, 255),
    "CoolTemperate": (90, 160, 90, 255),
    "WarmTemperate": (150, 190, 80, 255),
    "Subtropical": (210, 190, 90, 255),
    "Tropical": (40, 150, 40, 255),
}


@pytest.fixture(autouse=True)
def isolated_qsettings(tmp_path_factory: pytest.TempPathFactory):
    """Store every QSettings created during a test in a throwaway INI file."""
    settings_dir = tmp_path_factory.mktemp("qsettings")
    QSettings.setDefaultFormat(QSettings.Format.IniFormat)
    QSettings.setPath(
        QSettings.Format.IniFormat, QSettings.Scope.UserScope, str(settings_dir)
    )
    QSettings.setPath(
        QSettings.Format.NativeFormat, QSettings.Scope.UserScope, str(settings_dir)
    )
    yield settings_dir


@pytest.fixture
def settings():
    """AppSettings on a fresh store with console and file logging off."""
    from climate_tiles.settings import AppSettings

    settings_obj = AppSettings(profile="test")
    settings_obj.console_logging = False
    settings_obj.file_logging = False
    return settings_obj


def write_png(path: Path, size: tuple[int, int], color=(0, 0, 0, 255)) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGBA", size, color).save(path)
    return path


@pytest.fixture
def climate_dir(tmp_path: Path) -> Path:
    """Map directory holding the climate tileset and all 7 tile images."""
    map_dir = tmp_path / "map"
    map_dir.mkdir()
    (map_dir / "temperature.tsx").write_text(get_builtin_tileset_text(), encoding="utf-8")

    image_dir = map_dir / "climate_tiles" / "temp_moisture"
    for climate in ClimateClass:
        write_png(
            image_dir / f"{climate.value.lower()}.png",
            (TILE_SIZE, TILE_SIZE),
            CLIMATE_COLORS[climate.value],
        )
    return map_dir


@pytest.fixture
def climate_tsx(climate_dir: Path) -> Path:
    return climate_dir / "temperature.tsx"


@pytest.fixture
def make_png():
    """Factory writing a solid PNG of a given size."""
    return write_png
