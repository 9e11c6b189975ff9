"""
High-level service for working with tilesets.

Provides orchestration and public API for loading and querying Tiled
tilesets.
Responsibilities:
    * Discover .tsx files under a tilesets directory
    * Parse them in parallel and register them by name
    * Build id and type indices per tileset
    * Resolve image paths relative to each tileset file
    * Provide lookup helpers returning fully materialized `TileObject`.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Optional, TYPE_CHECKING

from .. import resources
from ..settings.types import ValidationResult
from .errors import TileNotFoundError, TilesetError
from .managers import ImageManager, TilesetManager, TilesManager
from .models import ClimateClass, TileDefinition, TileObject, Tileset
from .parser import TsxParser
from .validation import TilesetValidator

if TYPE_CHECKING:
    from ..settings import AppSettings


class TilesetService:
    """Facade for tileset operations.

    Instantiate with a directory containing `.tsx` files (or with settings
    providing one). Scanning happens immediately; without a directory the
    service starts empty and tilesets can be added with `load_tileset` or
    `load_builtin`.
    """

    TILESET_GLOB = "*.tsx"

    def __init__(
        self,
        tilesets_path: Optional[Path | str] = None,
        settings: Optional["AppSettings"] = None,
    ):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.settings = settings

        if tilesets_path is None and settings is not None:
            tilesets_path = settings.tilesets_path
        self.tilesets_path = Path(tilesets_path) if tilesets_path else None

        self.parser = TsxParser()
        self.tilesets = TilesetManager()
        self.tiles = TilesManager()
        self.images = ImageManager()

        if self.tilesets_path is not None:
            self._load_tilesets_dir(self.tilesets_path)

    def _load_tilesets_dir(self, tilesets_path: Path):
        """Load every tileset file under a directory in parallel."""
        if not tilesets_path.exists() or not tilesets_path.is_dir():
            raise RuntimeError(f"Tilesets path is invalid: {tilesets_path}")

        tsx_files = sorted(tilesets_path.rglob(self.TILESET_GLOB))
        self.logger.debug(f"total {len(tsx_files)} tileset files found")

        with ThreadPoolExecutor(max_workers=4) as executor:
            future_to_path = {
                executor.submit(self.parser.parse_file, tsx_path): tsx_path
                for tsx_path in tsx_files
            }

            parsed: list[tuple[Path, Tileset]] = []
            for future in as_completed(future_to_path):
                tsx_path = future_to_path[future]
                try:
                    parsed.append((tsx_path, future.result()))
                except (TilesetError, OSError) as e:
                    self.logger.error(f"Failed to load tileset {tsx_path.name}: {e}")

        # Register in path order so duplicate names resolve deterministically
        for tsx_path, tileset in sorted(parsed, key=lambda item: item[0]):
            self._register(tileset)
            self.logger.info(f"  tileset: {tileset.name} ({tsx_path.name})")

    def _register(self, tileset: Tileset) -> Tileset:
        if self.tilesets.get_tileset(tileset.name) is not None:
            self.logger.warning(
                f"Tileset '{tileset.name}' loaded twice, keeping {tileset.source_path}"
            )
        self.tilesets.add_tileset(tileset)
        self.tiles.index_tileset(tileset)
        return tileset

    def load_tileset(self, path: Path | str) -> Tileset:
        """Parse and register a single tileset file."""
        tileset = self.parser.parse_file(path)
        return self._register(tileset)

    def load_builtin(self) -> Tileset:
        """Register the climate tileset bundled with the package.

        Without a filesystem install the tileset is still parsed from the
        packaged text; image sources then resolve against the current
        directory.
        """
        try:
            source_path: Optional[Path] = resources.get_builtin_tileset_path()
        except FileNotFoundError as e:
            self.logger.warning(f"{e}, image paths resolve against the current directory")
            source_path = None
        tileset = self.parser.parse_string(
            resources.get_builtin_tileset_text(), source_path=source_path
        )
        self.logger.debug(f"Loaded builtin tileset '{tileset.name}'")
        return self._register(tileset)

    # === LOOKUPS ===

    def get_available_tilesets(self) -> list[str]:
        """Return names of all loaded tilesets."""
        return self.tilesets.names()

    def get_tileset(self, tileset_name: str) -> Tileset:
        """Return a loaded tileset.

        Raises:
            KeyError: If no tileset with that name is loaded
        """
        tileset = self.tilesets.get_tileset(tileset_name)
        if tileset is None:
            raise KeyError(f"Tileset not loaded: {tileset_name}")
        return tileset

    def get_tile(self, tileset_name: str, tile_id: int) -> TileDefinition:
        """Return a tile by id.

        Raises:
            KeyError: If the tileset is not loaded
            TileNotFoundError: If the id is not in the tileset
        """
        self.get_tileset(tileset_name)
        tile = self.tiles.get_tile(tileset_name, tile_id)
        if tile is None:
            raise TileNotFoundError(f"Tile id {tile_id} not found in '{tileset_name}'")
        return tile

    def get_tile_by_type(self, tileset_name: str, tile_type: str) -> TileDefinition:
        """Return a tile by type label.

        Raises:
            KeyError: If the tileset is not loaded
            TileNotFoundError: If no tile carries that label
        """
        self.get_tileset(tileset_name)
        tile = self.tiles.get_tile_by_type(tileset_name, tile_type)
        if tile is None:
            raise TileNotFoundError(
                f"Tile type '{tile_type}' not found in '{tileset_name}'"
            )
        return tile

    def get_climate_tile(
        self, tileset_name: str, climate: ClimateClass
    ) -> TileDefinition:
        """Return the tile labelled with a climate class."""
        return self.get_tile_by_type(tileset_name, climate.value)

    def resolve_image_path(self, tileset_name: str, tile_id: int) -> Path:
        """Resolve the image of a tile relative to its tileset file.

        Raises:
            TileNotFoundError: If the tile does not exist or has no image
        """
        tileset = self.get_tileset(tileset_name)
        tile = self.get_tile(tileset_name, tile_id)
        image_path = tileset.resolve_image_path(tile)
        if image_path is None:
            raise TileNotFoundError(f"Tile {tile_id} in '{tileset_name}' has no image")
        return image_path

    def get_tile_object(self, tileset_name: str, tile_id: int) -> TileObject:
        """Return a tile together with its opened image.

        Raises:
            TileNotFoundError: If the tile does not exist or has no image
            TileImageError: If the image file is missing or unreadable
        """
        tile = self.get_tile(tileset_name, tile_id)
        image_path = self.resolve_image_path(tileset_name, tile_id)
        image = self.images.get_image(image_path)
        return TileObject(
            tile=tile, tileset_name=tileset_name, image_path=image_path, image=image
        )

    def validate(self, tileset_name: str, check_images: bool = True) -> ValidationResult:
        """Validate a loaded tileset."""
        tileset = self.get_tileset(tileset_name)
        result = TilesetValidator(check_images=check_images).validate(tileset)
        for warning in result.warnings:
            self.logger.debug(f"{tileset_name}: {warning}")
        for error in result.errors:
            self.logger.warning(f"{tileset_name}: {error}")
        return result
