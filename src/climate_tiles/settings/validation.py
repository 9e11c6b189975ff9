"""
Settings validation system for climate-tiles.
"""

import logging
from pathlib import Path
from typing import List, TYPE_CHECKING

from .types import ValidationResult

if TYPE_CHECKING:
    from .core import AppSettings

logger = logging.getLogger(__name__)


class SettingsValidator:
    """Validates configuration settings."""

    def __init__(self, settings: "AppSettings"):
        self.settings = settings

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        errors: List[str] = []
        warnings: List[str] = []

        tilesets_path = self.settings.tilesets_path
        if tilesets_path:
            if not tilesets_path.exists():
                errors.append(f"Tilesets path does not exist: {tilesets_path}")
            elif not any(tilesets_path.rglob("*.tsx")):
                warnings.append(f"No .tsx tilesets found in: {tilesets_path}")
        else:
            warnings.append("Tilesets path not set, using builtin tileset")

        for label, path in (
            ("Maps", self.settings.maps_path),
            ("Image definitions", self.settings.image_defs_path),
        ):
            if path and not path.exists():
                errors.append(f"{label} path does not exist: {path}")

        # Validate recent files
        recent_files = self.settings.recent_files
        valid_recent: List[str] = []
        for file_path in recent_files:
            if Path(file_path).exists():
                valid_recent.append(file_path)
            else:
                warnings.append(f"Recent file no longer exists: {file_path}")

        # Clean up invalid recent files
        if len(valid_recent) != len(recent_files):
            self.settings.settings.setValue("paths/recent_files", valid_recent)
            self.settings.settings.sync()

        return ValidationResult(
            is_valid=len(errors) == 0, errors=errors, warnings=warnings
        )
