"""Map manager for querying a loaded world map.

Wraps a `WorldMap` with the position queries clients need: the tiles in
view around a position and the tiles at a list of positions.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional

from . import hex_grid
from .models import MapTile, TerrainType, WorldMap
from .tmx_loader import TmxMapLoader


class MapManager:
    """Serves tile queries on a world map.

    Hex geometry is bounded by the map's own width and height.
    """

    def __init__(self, world_map: WorldMap):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.world_map = world_map

    @classmethod
    def from_file(
        cls, path: Path | str, loader: Optional[TmxMapLoader] = None
    ) -> "MapManager":
        """Load a TMX map and wrap it."""
        return cls((loader or TmxMapLoader()).load(path))

    def _map_tile(self, x: int, y: int) -> MapTile:
        cell = self.world_map.tile_at(x, y)
        return MapTile(x=x, y=y, t=tuple(cell.layers))

    def terrain_at(self, x: int, y: int) -> TerrainType:
        return self.world_map.tile_at(x, y).terrain

    def get_neighbour_tiles(self, center_x: int, center_y: int, radius: int) -> list[MapTile]:
        """Tiles within `radius` hex steps of a position, center included."""
        positions = hex_grid.hex_range(
            (center_x, center_y),
            radius,
            self.world_map.width,
            self.world_map.height,
        )
        return [self._map_tile(x, y) for x, y in positions]

    def pos_to_tiles(self, positions: Iterable[tuple[int, int]]) -> list[MapTile]:
        """Tiles at the given positions, in the given order.

        Raises:
            IndexError: If a position lies outside the map
        """
        return [self._map_tile(x, y) for x, y in positions]

    def neighbours(self, x: int, y: int) -> list[tuple[int, int]]:
        return hex_grid.neighbours((x, y), self.world_map.width, self.world_map.height)

    def distance(self, src: tuple[int, int], dst: tuple[int, int]) -> int:
        return hex_grid.distance(src, dst)
