"""
Data models for world maps loaded from Tiled `.tmx` files.

The map is a flat list of cells in row-major order; each cell keeps the
gids of every base layer that painted it and the terrain type of the
topmost one.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class TerrainType(Enum):
    """Terrain categories a world tile gid can map to."""

    GRASSLANDS = "Grasslands"
    SNOW = "Snow"
    RIVER = "River"
    OCEAN = "Ocean"
    PLAINS = "Plains"
    HILLS_PLAINS = "HillsPlains"
    DESERT = "Desert"
    OASIS = "Oasis"
    HILLS_DESERT = "HillsDesert"
    HILLS_GRASSLANDS = "HillsGrasslands"
    SWAMP = "Swamp"
    HILLS_SNOW = "HillsSnow"
    DECIDUOUS_FOREST = "DeciduousForest"
    RAINFOREST = "Rainforest"
    JUNGLE = "Jungle"
    SAVANNA = "Savanna"
    FROZEN_FOREST = "FrozenForest"
    PINE_FOREST = "PineForest"
    PALM_FOREST = "PalmForest"
    MOUNTAIN = "Mountain"
    VOLCANO = "Volcano"
    UNKNOWN = "Unknown"


# Gid -> terrain table of the world terrain tileset (firstgid 1)
DEFAULT_TERRAIN_TABLE: dict[int, TerrainType] = {
    1: TerrainType.GRASSLANDS,
    2: TerrainType.SNOW,
    3: TerrainType.RIVER,
    4: TerrainType.RIVER,
    5: TerrainType.OCEAN,
    6: TerrainType.PLAINS,
    7: TerrainType.HILLS_PLAINS,
    8: TerrainType.HILLS_PLAINS,
    9: TerrainType.PLAINS,
    10: TerrainType.DESERT,
    11: TerrainType.OASIS,
    12: TerrainType.HILLS_DESERT,
    13: TerrainType.HILLS_GRASSLANDS,
    14: TerrainType.SWAMP,
    15: TerrainType.SWAMP,
    16: TerrainType.HILLS_SNOW,
    17: TerrainType.OCEAN,
    18: TerrainType.SWAMP,
    19: TerrainType.DECIDUOUS_FOREST,
    20: TerrainType.RAINFOREST,
    21: TerrainType.JUNGLE,
    22: TerrainType.SAVANNA,
    23: TerrainType.DECIDUOUS_FOREST,
    24: TerrainType.DECIDUOUS_FOREST,
    25: TerrainType.FROZEN_FOREST,
    26: TerrainType.FROZEN_FOREST,
    27: TerrainType.PINE_FOREST,
    28: TerrainType.FROZEN_FOREST,
    29: TerrainType.SAVANNA,
    30: TerrainType.PALM_FOREST,
    31: TerrainType.JUNGLE,
    32: TerrainType.MOUNTAIN,
    33: TerrainType.MOUNTAIN,
    34: TerrainType.MOUNTAIN,
    35: TerrainType.MOUNTAIN,
    36: TerrainType.MOUNTAIN,
    37: TerrainType.MOUNTAIN,
    38: TerrainType.MOUNTAIN,
    39: TerrainType.VOLCANO,
}


def gid_to_terrain(
    gid: int, table: Optional[dict[int, TerrainType]] = None
) -> TerrainType:
    """Map a gid to its terrain; gids outside the table are UNKNOWN."""
    return (table if table is not None else DEFAULT_TERRAIN_TABLE).get(
        gid, TerrainType.UNKNOWN
    )


@dataclass
class TileInfo:
    """One map cell: topmost terrain plus every gid painted on it."""
    terrain: TerrainType
    layers: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class MapTile:
    """Cell position with its gid stack, in the shape clients receive."""
    x: int
    y: int
    t: tuple[int, ...]

    def to_dict(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y, "t": list(self.t)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MapTile":
        return cls(x=int(data["x"]), y=int(data["y"]), t=tuple(int(g) for g in data["t"]))


@dataclass(frozen=True)
class TilesetRef:
    """A `<tileset>` reference inside a map: first gid and source file."""
    firstgid: int
    source: str


@dataclass
class WorldMap:
    """Loaded world map.

    `base` holds width * height cells, indexed by `y * width + x`.
    """
    width: int
    height: int
    base: list[TileInfo] = field(default_factory=list)
    tilesets: list[TilesetRef] = field(default_factory=list)

    def tile_index(self, x: int, y: int) -> int:
        return y * self.width + x

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def tile_at(self, x: int, y: int) -> TileInfo:
        """Return the cell at (x, y).

        Raises:
            IndexError: If the position is outside the map
        """
        if not self.contains(x, y):
            raise IndexError(f"Position ({x}, {y}) outside {self.width}x{self.height} map")
        return self.base[self.tile_index(x, y)]

    def resolve_gid(self, gid: int) -> Optional[tuple[TilesetRef, int]]:
        """Map a gid to its tileset reference and local tile id.

        The owning tileset is the one with the largest firstgid not above
        `gid`. Gid 0 (empty cell) and gids below every firstgid give None.
        """
        if gid <= 0:
            return None
        owner: Optional[TilesetRef] = None
        for ref in self.tilesets:
            if ref.firstgid <= gid and (owner is None or ref.firstgid > owner.firstgid):
                owner = ref
        if owner is None:
            return None
        return owner, gid - owner.firstgid
