"""
Settings migration system for climate-tiles.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from .types import ConfigVersion

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)


class SettingsMigrator:
    """Handles configuration migration between versions."""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def ensure_version(self) -> None:
        """Ensure configuration version is set and handle migrations."""
        current_version = str(self.settings.value("app/version", ""))

        if not current_version:
            self.settings.setValue("app/version", ConfigVersion.CURRENT.value)
            self.settings.sync()
            logger.info("No configuration version found, initializing configuration")
        elif current_version != ConfigVersion.CURRENT.value:
            self._migrate_config(current_version, ConfigVersion.CURRENT.value)

    def _migrate_config(self, from_version: str, to_version: str) -> None:
        """Migrate configuration from old version to new version."""
        logger.info(f"Migrating configuration from {from_version} to {to_version}")

        if from_version == ConfigVersion.V1_0.value and to_version == ConfigVersion.V1_1.value:
            self._migrate_1_0_to_1_1()

        self.settings.setValue("app/version", to_version)
        self.settings.setValue("app/migrated_from", from_version)
        self.settings.sync()
        logger.info(f"Migration from {from_version} to {to_version} completed")

    def _migrate_1_0_to_1_1(self) -> None:
        """Migrate from version 1.0 to 1.1 - split the single data directory.

        1.0 stored one `paths/data` directory holding both tilesets and maps.
        1.1 keeps them as separate keys; both start out pointing at the old
        directory, or at its `map` subdirectory when one exists.
        """
        logger.debug("Performing migration from 1.0 to 1.1")

        old_data_path = str(self.settings.value("paths/data", "") or "")
        if not old_data_path:
            return

        data_path = Path(old_data_path)
        map_dir = data_path / "map"
        target = map_dir if map_dir.is_dir() else data_path
        if not map_dir.is_dir():
            logger.warning(f"Migrated unverified data directory: {data_path}")

        if not self.settings.value("paths/tilesets", ""):
            self.settings.setValue("paths/tilesets", str(target))
        if not self.settings.value("paths/maps", ""):
            self.settings.setValue("paths/maps", str(target))
        logger.info(f"Migrated data directory to tilesets/maps paths: {target}")

        self.settings.remove("paths/data")
        self.settings.sync()
