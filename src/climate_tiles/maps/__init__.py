"""World map models, TMX loading and hex geometry for climate-tiles."""

from .models import (
    DEFAULT_TERRAIN_TABLE,
    MapTile,
    TerrainType,
    TileInfo,
    TilesetRef,
    WorldMap,
    gid_to_terrain,
)
from .tmx_loader import TmxMapLoader
from .map_manager import MapManager
from . import hex_grid

__all__ = [
    "DEFAULT_TERRAIN_TABLE",
    "MapTile",
    "TerrainType",
    "TileInfo",
    "TilesetRef",
    "WorldMap",
    "gid_to_terrain",
    "TmxMapLoader",
    "MapManager",
    "hex_grid",
]
