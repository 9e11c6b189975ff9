"""Loading world maps from Tiled `.tmx` files.

Only the two base layers are read: `base1` paints every cell, `base2`
overlays non-empty cells on top of it.
"""

import base64
import gzip
import logging
import struct
import xml.etree.ElementTree as ET
import zlib
from pathlib import Path
from typing import Optional

from ..tilesets.errors import TilesetFormatError
from .models import TerrainType, TileInfo, TilesetRef, WorldMap, gid_to_terrain

BASE_LAYER = "base1"
OVERLAY_LAYER = "base2"

# Tiled stores flip/rotation flags in the top bits of each gid
GID_FLAG_MASK = 0xF0000000


class TmxMapLoader:
    """Loads world maps from TMX files.

    Handles XML parsing, layer decoding and conversion of gids into
    `TileInfo` cells.
    """

    def __init__(self, terrain_table: Optional[dict[int, TerrainType]] = None):
        """Initialize the loader.

        Args:
            terrain_table: gid -> terrain mapping, defaults to the world table
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.terrain_table = terrain_table

    def load(self, path: Path | str) -> WorldMap:
        """Load a world map from a TMX file.

        Args:
            path: Path to TMX file

        Returns:
            Loaded WorldMap instance

        Raises:
            FileNotFoundError: If file doesn't exist
            TilesetFormatError: If the XML is invalid or layers don't fit the map
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Map file not found: {path}")

        self.logger.info(f"Loading map from: {path}")
        world_map = self.load_string(path.read_bytes(), where=str(path))
        self.logger.info(
            f"Loaded {world_map.width}x{world_map.height} map with "
            f"{len(world_map.tilesets)} tileset reference(s)"
        )
        return world_map

    def load_string(self, text: str | bytes, where: str = "<string>") -> WorldMap:
        """Load a world map from TMX text or raw bytes."""
        try:
            root = ET.fromstring(text)
        except (ET.ParseError, ValueError) as e:
            raise TilesetFormatError(f"{where}: malformed XML: {e}")

        if root.tag != "map":
            raise TilesetFormatError(f"{where}: expected <map> root element, got <{root.tag}>")

        try:
            width = int(root.get("width", ""))
            height = int(root.get("height", ""))
        except ValueError:
            raise TilesetFormatError(f"{where}: <map> needs integer width and height")

        world_map = WorldMap(width=width, height=height)
        world_map.tilesets = self._read_tileset_refs(root, where)

        for layer in root.findall("layer"):
            name = layer.get("name", "")
            if name not in (BASE_LAYER, OVERLAY_LAYER):
                self.logger.debug(f"Skipping layer '{name}'")
                continue

            gids = self._decode_layer(layer, where)
            if len(gids) != width * height:
                raise TilesetFormatError(
                    f"{where}: layer '{name}' has {len(gids)} cells, map needs {width * height}"
                )

            if name == BASE_LAYER:
                world_map.base = [
                    TileInfo(terrain=self._terrain(gid), layers=[gid]) for gid in gids
                ]
            else:
                if not world_map.base:
                    raise TilesetFormatError(
                        f"{where}: layer '{OVERLAY_LAYER}' appears before '{BASE_LAYER}'"
                    )
                for cell, gid in zip(world_map.base, gids):
                    if gid != 0:
                        cell.terrain = self._terrain(gid)
                        cell.layers.append(gid)

        if not world_map.base:
            raise TilesetFormatError(f"{where}: map has no '{BASE_LAYER}' layer")

        return world_map

    def _terrain(self, gid: int) -> TerrainType:
        return gid_to_terrain(gid, self.terrain_table)

    def _read_tileset_refs(self, root: ET.Element, where: str) -> list[TilesetRef]:
        refs: list[TilesetRef] = []
        for ts_el in root.findall("tileset"):
            try:
                firstgid = int(ts_el.get("firstgid", ""))
            except ValueError:
                raise TilesetFormatError(f"{where}: <tileset> without integer firstgid")
            # Embedded tilesets have no source; fall back to their name
            source = ts_el.get("source") or ts_el.get("name", "")
            refs.append(TilesetRef(firstgid=firstgid, source=source))
        refs.sort(key=lambda ref: ref.firstgid)
        return refs

    def _decode_layer(self, layer: ET.Element, where: str) -> list[int]:
        data = layer.find("data")
        if data is None:
            raise TilesetFormatError(f"{where}: layer '{layer.get('name')}' has no <data>")

        encoding = data.get("encoding")
        if encoding is None:
            try:
                raw = [int(tile.get("gid", "0")) for tile in data.findall("tile")]
            except ValueError:
                raise TilesetFormatError(f"{where}: invalid <tile> gid in layer data")
        elif encoding == "csv":
            text = (data.text or "").strip()
            try:
                raw = [int(part) for part in text.replace("\n", "").split(",") if part.strip()]
            except ValueError:
                raise TilesetFormatError(f"{where}: invalid CSV layer data")
        elif encoding == "base64":
            raw = self._decode_base64(data.text or "", data.get("compression"), where)
        else:
            raise TilesetFormatError(f"{where}: unsupported layer encoding '{encoding}'")

        return [gid & ~GID_FLAG_MASK for gid in raw]

    def _decode_base64(
        self, text: str, compression: Optional[str], where: str
    ) -> list[int]:
        try:
            payload = base64.b64decode(text.strip())
            if compression == "zlib":
                payload = zlib.decompress(payload)
            elif compression == "gzip":
                payload = gzip.decompress(payload)
            elif compression:
                raise TilesetFormatError(
                    f"{where}: unsupported layer compression '{compression}'"
                )
        except (ValueError, zlib.error, OSError) as e:
            raise TilesetFormatError(f"{where}: cannot decode layer data: {e}")

        if len(payload) % 4:
            raise TilesetFormatError(f"{where}: layer data is not a list of 32-bit gids")
        return list(struct.unpack(f"<{len(payload) // 4}I", payload))
