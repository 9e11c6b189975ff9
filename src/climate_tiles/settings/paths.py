"""
Path-related settings for climate-tiles.
"""

from pathlib import Path
from typing import List, Optional, Union, TYPE_CHECKING, cast

from .types import ConfigError

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

MAX_RECENT_FILES = 10


class PathSettings:
    """Manages path-related settings."""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def _get_str(self, key: str, default: str = "") -> str:
        """Type-safe string retrieval from settings."""
        value = self.settings.value(key, default)
        return str(value) if value is not None else default

    def _get_list(self, key: str, default: Optional[List[str]] = None) -> List[str]:
        """Type-safe list retrieval from settings."""
        if default is None:
            default = []
        value = self.settings.value(key, default)
        if isinstance(value, list):
            return [
                str(item) if item is not None else ""
                for item in cast(list[object], value)
            ]
        # QSettings INI backend returns a bare string for one-element lists
        if isinstance(value, str) and value:
            return [value]
        return default

    def _get_path(self, key: str) -> Optional[Path]:
        path_str = self._get_str(key, "")
        return Path(path_str) if path_str else None

    def _set_dir(self, key: str, value: Optional[Path]) -> None:
        """Store a directory path; existing non-directories are rejected."""
        if value is not None and value.exists() and not value.is_dir():
            raise ConfigError(f"Not a directory: {value}")
        self.settings.setValue(key, str(value) if value else "")
        self.settings.sync()

    @property
    def tilesets_path(self) -> Optional[Path]:
        """Get directory scanned for .tsx tileset files."""
        return self._get_path("paths/tilesets")

    @tilesets_path.setter
    def tilesets_path(self, value: Optional[Path]) -> None:
        self._set_dir("paths/tilesets", value)

    @property
    def maps_path(self) -> Optional[Path]:
        """Get directory containing .tmx map files."""
        return self._get_path("paths/maps")

    @maps_path.setter
    def maps_path(self, value: Optional[Path]) -> None:
        self._set_dir("paths/maps", value)

    @property
    def image_defs_path(self) -> Optional[Path]:
        """Get directory of JSON image definitions."""
        return self._get_path("paths/image_defs")

    @image_defs_path.setter
    def image_defs_path(self, value: Optional[Path]) -> None:
        self._set_dir("paths/image_defs", value)

    @property
    def recent_files(self) -> List[str]:
        """Get list of recently opened files."""
        return self._get_list("paths/recent_files", [])

    def add_recent_file(self, file_path: Union[str, Path]) -> None:
        """Add file to recent files list (max 10 items)."""
        recent = self.recent_files
        file_str = str(file_path)

        if file_str in recent:
            recent.remove(file_str)

        recent.insert(0, file_str)
        recent = recent[:MAX_RECENT_FILES]

        self.settings.setValue("paths/recent_files", recent)
        self.settings.sync()

    def clear_recent_files(self) -> None:
        """Clear recent files list."""
        self.settings.setValue("paths/recent_files", [])
        self.settings.sync()
