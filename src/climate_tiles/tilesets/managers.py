"""
Managers for tilesets, tiles, and tile images.

Provides indexing, lookup and bookkeeping for different components of the
tileset system. No XML parsing happens here.
"""

import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

from PIL import Image

from .errors import TileImageError
from .models import TileDefinition, Tileset


class TilesetManager:
    """Manage tilesets loaded from disk.

    Holds a dictionary of `Tileset` objects keyed by tileset name.
    """

    def __init__(self):
        self.tilesets = dict[str, Tileset]()

    def add_tileset(self, tileset: Tileset) -> Tileset:
        """Register a tileset; a later tileset with the same name replaces it."""
        self.tilesets[tileset.name] = tileset
        return tileset

    def get_tileset(self, name: str) -> Tileset | None:
        """Return tileset by name if present."""
        return self.tilesets.get(name, None)

    def get_tileset_by_source(self, source_path: Path | str) -> Tileset | None:
        """Return the tileset loaded from a given .tsx file, if any."""
        wanted = Path(source_path).resolve()
        for tileset in self.tilesets.values():
            if tileset.source_path is not None and tileset.source_path == wanted:
                return tileset
        return None

    def names(self) -> list[str]:
        return sorted(self.tilesets)


@dataclass
class TilesManager:
    """Manage tiles indexed by tileset.

    Two indices are maintained per tileset:
    - by_id[tileset][id] -> TileDefinition
    - by_type[tileset][type] -> TileDefinition (first label wins)
    """

    by_id: Dict[str, Dict[int, TileDefinition]] = field(default_factory=lambda: {})
    by_type: Dict[str, Dict[str, TileDefinition]] = field(default_factory=lambda: {})

    def index_tileset(self, tileset: Tileset):
        """(Re)build both indices for a tileset."""
        ids: Dict[int, TileDefinition] = {}
        types: Dict[str, TileDefinition] = {}
        for tile in tileset.tiles:
            ids.setdefault(tile.id, tile)
            if tile.type is not None:
                types.setdefault(tile.type, tile)
        self.by_id[tileset.name] = ids
        self.by_type[tileset.name] = types

    def get_tile(self, tileset: str, tile_id: int) -> TileDefinition | None:
        """Get a tile by id within a tileset, if present."""
        return self.by_id.get(tileset, {}).get(tile_id)

    def get_tile_by_type(self, tileset: str, tile_type: str) -> TileDefinition | None:
        """Get a tile by type label within a tileset, if present."""
        return self.by_type.get(tileset, {}).get(tile_type)

    def get_types(self, tileset: str) -> list[str]:
        return list(self.by_type.get(tileset, {}).keys())


class ImageManager:
    """Thread-safe cache of opened tile images keyed by resolved path."""

    def __init__(self):
        self._images: dict[Path, Image.Image] = {}
        self._lock = threading.Lock()

    def get_image(self, path: Path) -> Image.Image:
        """Return the RGBA image at `path`, opening it on first use.

        Raises:
            TileImageError: If the file is missing or not a readable image
        """
        with self._lock:
            cached = self._images.get(path)
            if cached is not None:
                return cached

        if not path.exists():
            raise TileImageError(f"Tile image not found: {path}")
        try:
            with Image.open(path) as img:
                image = img.convert("RGBA")
        except OSError as e:
            raise TileImageError(f"Cannot read tile image {path}: {e}")

        with self._lock:
            return self._images.setdefault(path, image)

    def clear(self) -> None:
        with self._lock:
            self._images.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._images)
