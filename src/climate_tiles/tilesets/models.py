"""
Data models for working with Tiled tilesets.

Contains all dataclasses and type definitions used by the tileset system.
Models hold no file-system or service logic beyond resolving paths relative to the tileset file.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional, cast

from PIL import Image


# =============================================================================
# Climate Classes
# =============================================================================

class ClimateClass(Enum):
    """Climate classes used as tile `type` labels, coldest first."""

    POLAR = "Polar"
    SUBPOLAR = "Subpolar"
    BOREAL = "Boreal"
    COOL_TEMPERATE = "CoolTemperate"
    WARM_TEMPERATE = "WarmTemperate"
    SUBTROPICAL = "Subtropical"
    TROPICAL = "Tropical"

    @classmethod
    def from_label(cls, label: str) -> "ClimateClass":
        """Return the climate class for an exact tile type label.

        Raises:
            ValueError: If the label is not a climate class
        """
        return cls(label)

    @classmethod
    def labels(cls) -> list[str]:
        """Return all labels in climate order."""
        return [member.value for member in cls]


# =============================================================================
# Tile Models
# =============================================================================

@dataclass(frozen=True)
class TileImage:
    """Reference to an external raster asset.

    `source` is kept exactly as written in the tileset file (relative to
    the tileset location); resolution happens in `Tileset`.
    """
    source: str
    width: int
    height: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TileImage":
        """Create TileImage from a JSON-compatible dict."""
        return cls(
            source=str(data["source"]),
            width=int(data.get("width", 0)),
            height=int(data.get("height", 0)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"source": self.source, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class TileDefinition:
    """Single addressable tile: numeric id, optional label and image."""
    id: int
    type: Optional[str] = None
    image: Optional[TileImage] = None

    @property
    def climate_class(self) -> Optional[ClimateClass]:
        """Climate class for this tile, or None if the label is not one."""
        if self.type is None:
            return None
        try:
            return ClimateClass.from_label(self.type)
        except ValueError:
            return None

    @property
    def source(self) -> Optional[str]:
        """Relative image source, or None for tiles without an image."""
        return self.image.source if self.image else None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TileDefinition":
        """Create TileDefinition from a JSON-compatible dict.

        Args:
            data: Dict with 'id' and optional 'type' / 'image' keys

        Returns:
            TileDefinition instance
        """
        image_data = data.get("image")
        return cls(
            id=int(data["id"]),
            type=str(data["type"]) if data.get("type") is not None else None,
            image=TileImage.from_dict(cast(dict[str, Any], image_data))
            if isinstance(image_data, dict)
            else None,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id}
        if self.type is not None:
            data["type"] = self.type
        if self.image is not None:
            data["image"] = self.image.to_dict()
        return data


@dataclass(frozen=True)
class GridSettings:
    """Per-cell orientation and size used for id-to-grid-position mapping."""
    orientation: str = "orthogonal"
    width: int = 1
    height: int = 1

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GridSettings":
        return cls(
            orientation=str(data.get("orientation", "orthogonal")),
            width=int(data.get("width", 1)),
            height=int(data.get("height", 1)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "orientation": self.orientation,
            "width": self.width,
            "height": self.height,
        }


# =============================================================================
# Tileset Models
# =============================================================================

@dataclass(frozen=True)
class Tileset:
    """Tileset descriptor.

    Mirrors the attributes of a Tiled `<tileset>` element. Loaded once and
    treated as immutable reference data; `tiles` keeps file order, which is
    only meaningful for display.
    """
    name: str = ""
    tile_width: int = 0
    tile_height: int = 0
    tile_count: int = 0
    columns: int = 0
    version: Optional[str] = None
    tiled_version: Optional[str] = None
    grid: Optional[GridSettings] = None
    tiles: tuple[TileDefinition, ...] = field(default_factory=tuple)
    source_path: Optional[Path] = None

    @property
    def is_collection(self) -> bool:
        """True for a collection of images (no single sheet, columns == 0)."""
        return self.columns == 0

    @property
    def base_dir(self) -> Path:
        """Directory image sources are resolved against."""
        if self.source_path is not None:
            return self.source_path.parent
        return Path.cwd()

    def get_tile(self, tile_id: int) -> Optional[TileDefinition]:
        """Return tile by id if present."""
        for tile in self.tiles:
            if tile.id == tile_id:
                return tile
        return None

    def get_tile_by_type(self, tile_type: str) -> Optional[TileDefinition]:
        """Return the first tile carrying the given type label."""
        for tile in self.tiles:
            if tile.type == tile_type:
                return tile
        return None

    def resolve_image_path(self, tile: TileDefinition) -> Optional[Path]:
        """Resolve a tile's image source relative to the tileset location."""
        if tile.image is None:
            return None
        return (self.base_dir / tile.image.source).resolve()

    def ids(self) -> list[int]:
        return [tile.id for tile in self.tiles]

    def types(self) -> list[Optional[str]]:
        return [tile.type for tile in self.tiles]

    def triples(self) -> set[tuple[int, Optional[str], Optional[str]]]:
        """(id, type, source) triples; order-insensitive identity of the tiles."""
        return {(tile.id, tile.type, tile.source) for tile in self.tiles}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Tileset":
        """Create Tileset from a JSON-compatible dict (see `to_dict`).

        Args:
            data: Dict produced by `to_dict` or an equivalent export

        Returns:
            Tileset with properly typed fields
        """
        grid_data = data.get("grid")
        raw_tiles: list[Any] = list(data.get("tiles", []))
        source_path = data.get("source_path")
        return cls(
            name=str(data.get("name", "")),
            tile_width=int(data.get("tilewidth", 0)),
            tile_height=int(data.get("tileheight", 0)),
            tile_count=int(data.get("tilecount", len(raw_tiles))),
            columns=int(data.get("columns", 0)),
            version=data.get("version"),
            tiled_version=data.get("tiledversion"),
            grid=GridSettings.from_dict(cast(dict[str, Any], grid_data))
            if isinstance(grid_data, dict)
            else None,
            tiles=tuple(
                TileDefinition.from_dict(cast(dict[str, Any], item))
                for item in raw_tiles
                if isinstance(item, dict)
            ),
            source_path=Path(source_path) if source_path else None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dict using Tiled attribute names."""
        data: dict[str, Any] = {
            "name": self.name,
            "version": self.version,
            "tiledversion": self.tiled_version,
            "tilewidth": self.tile_width,
            "tileheight": self.tile_height,
            "tilecount": self.tile_count,
            "columns": self.columns,
            "grid": self.grid.to_dict() if self.grid else None,
            "tiles": [tile.to_dict() for tile in self.tiles],
        }
        if self.source_path is not None:
            data["source_path"] = str(self.source_path)
        return data


@dataclass
class TileObject:
    """Fully materialized tile with its resolved image.

    Produced by `TilesetService.get_tile_object` once the image file has
    been located and opened.
    """
    tile: TileDefinition
    tileset_name: str
    image_path: Path
    image: Image.Image

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size
