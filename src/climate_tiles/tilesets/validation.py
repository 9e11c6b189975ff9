"""
Tileset validation.

Checks the invariants a loaded tileset is expected to satisfy before a
consumer relies on it as reference data.
"""

import logging
from collections import Counter
from typing import List, Optional

from PIL import Image, UnidentifiedImageError

from ..settings.types import ValidationResult
from .models import Tileset


class TilesetValidator:
    """Validates tileset structure and, optionally, the referenced images."""

    def __init__(self, check_images: bool = True):
        self.check_images = check_images
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def validate(self, tileset: Tileset) -> ValidationResult:
        """Validate a tileset and return collected errors and warnings."""
        errors: List[str] = []
        warnings: List[str] = []

        self._check_ids(tileset, errors)
        self._check_types(tileset, errors, warnings)
        self._check_declared_sizes(tileset, errors, warnings)

        if tileset.is_collection and tileset.grid is None:
            warnings.append("Collection tileset has no <grid> element")

        if self.check_images:
            self._check_image_files(tileset, errors)

        result = ValidationResult(
            is_valid=len(errors) == 0, errors=errors, warnings=warnings
        )
        self.logger.debug(
            f"Validated tileset '{tileset.name}': "
            f"{len(errors)} error(s), {len(warnings)} warning(s)"
        )
        return result

    def _check_ids(self, tileset: Tileset, errors: List[str]) -> None:
        ids = tileset.ids()
        counts = Counter(ids)
        for tile_id, count in sorted(counts.items()):
            if count > 1:
                errors.append(f"Duplicate tile id {tile_id} ({count} entries)")

        unique_ids = sorted(counts)
        negative = [i for i in unique_ids if i < 0]
        if negative:
            errors.append(f"Negative tile ids: {negative}")

        expected = set(range(max(unique_ids) + 1)) if unique_ids else set()
        missing = sorted(expected - set(unique_ids))
        if missing:
            errors.append(f"Tile ids are not contiguous from 0, missing: {missing}")

        if tileset.tile_count != len(tileset.tiles):
            errors.append(
                f"tilecount is {tileset.tile_count} but {len(tileset.tiles)} tile(s) are defined"
            )

    def _check_types(
        self, tileset: Tileset, errors: List[str], warnings: List[str]
    ) -> None:
        labelled = [t for t in tileset.types() if t is not None]
        for tile_type, count in sorted(Counter(labelled).items()):
            if count > 1:
                errors.append(f"Duplicate tile type '{tile_type}' ({count} entries)")

        for tile in tileset.tiles:
            if tile.type is None:
                warnings.append(f"Tile {tile.id} has no type label")

    def _check_declared_sizes(
        self, tileset: Tileset, errors: List[str], warnings: List[str]
    ) -> None:
        for tile in tileset.tiles:
            if tile.image is None:
                warnings.append(f"Tile {tile.id} has no image")
                continue
            declared = (tile.image.width, tile.image.height)
            expected = (tileset.tile_width, tileset.tile_height)
            if declared != expected:
                errors.append(
                    f"Tile {tile.id} image is declared {declared[0]}x{declared[1]}, "
                    f"tileset tiles are {expected[0]}x{expected[1]}"
                )

    def _check_image_files(self, tileset: Tileset, errors: List[str]) -> None:
        for tile in tileset.tiles:
            image_path = tileset.resolve_image_path(tile)
            if image_path is None or tile.image is None:
                continue
            if not image_path.exists():
                errors.append(f"Tile {tile.id} image not found: {image_path}")
                continue

            actual = self._read_image_size(image_path, errors, tile.id)
            if actual is None:
                continue
            declared = (tile.image.width, tile.image.height)
            if actual != declared:
                errors.append(
                    f"Tile {tile.id} image {image_path.name} is {actual[0]}x{actual[1]}, "
                    f"declared {declared[0]}x{declared[1]}"
                )

    def _read_image_size(
        self, image_path, errors: List[str], tile_id: int
    ) -> Optional[tuple[int, int]]:
        try:
            with Image.open(image_path) as img:
                return img.size
        except (UnidentifiedImageError, OSError) as e:
            errors.append(f"Tile {tile_id} image unreadable: {image_path} ({e})")
            return None
