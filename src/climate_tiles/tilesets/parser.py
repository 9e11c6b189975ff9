"""
Reading Tiled tileset (.tsx) files.

Handles deserialization of the XML tileset format into `Tileset` instances.
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional

from .errors import TilesetFormatError
from .models import GridSettings, TileDefinition, TileImage, Tileset


def _required_int(element: ET.Element, attr: str, where: str) -> int:
    """Read a required integer attribute, raising TilesetFormatError."""
    raw = element.get(attr)
    if raw is None:
        raise TilesetFormatError(f"{where}: <{element.tag}> is missing '{attr}'")
    try:
        return int(raw)
    except ValueError:
        raise TilesetFormatError(
            f"{where}: <{element.tag}> attribute '{attr}' is not an integer: {raw!r}"
        )


def _optional_int(element: ET.Element, attr: str, default: int, where: str) -> int:
    if element.get(attr) is None:
        return default
    return _required_int(element, attr, where)


class TsxParser:
    """Parses `.tsx` tileset files.

    Accepts both the `type` attribute and the `class` attribute newer Tiled
    versions write for tiles; `type` wins when both are present.
    """

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def parse_file(self, path: Path | str) -> Tileset:
        """Parse a tileset file.

        Args:
            path: Path to the .tsx file

        Returns:
            Loaded Tileset; image sources resolve against the file's directory

        Raises:
            FileNotFoundError: If file doesn't exist
            TilesetFormatError: If the XML is malformed or incomplete
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Tileset file not found: {path}")

        self.logger.debug(f"Parsing tileset: {path}")
        return self.parse_string(path.read_bytes(), source_path=path)

    def parse_string(
        self, text: str | bytes, source_path: Optional[Path] = None
    ) -> Tileset:
        """Parse tileset XML from text or raw bytes.

        Bytes are decoded by the XML parser itself, honouring the encoding
        named in the XML declaration.
        """
        where = str(source_path) if source_path else "<string>"
        try:
            root = ET.fromstring(text)
        except (ET.ParseError, ValueError) as e:
            raise TilesetFormatError(f"{where}: malformed XML: {e}")

        tileset = self.parse_element(root, where, source_path)
        self.logger.debug(
            f"Parsed tileset '{tileset.name}' with {len(tileset.tiles)} tile(s)"
        )
        return tileset

    def parse_element(
        self, root: ET.Element, where: str, source_path: Optional[Path] = None
    ) -> Tileset:
        """Build a Tileset from an already parsed `<tileset>` element."""
        if root.tag != "tileset":
            raise TilesetFormatError(
                f"{where}: expected <tileset> root element, got <{root.tag}>"
            )

        grid_el = root.find("grid")
        grid = None
        if grid_el is not None:
            grid = GridSettings(
                orientation=grid_el.get("orientation", "orthogonal"),
                width=_optional_int(grid_el, "width", 1, where),
                height=_optional_int(grid_el, "height", 1, where),
            )

        tiles = tuple(self._parse_tile(tile_el, where) for tile_el in root.findall("tile"))

        return Tileset(
            name=root.get("name", source_path.stem if source_path else ""),
            tile_width=_required_int(root, "tilewidth", where),
            tile_height=_required_int(root, "tileheight", where),
            tile_count=_required_int(root, "tilecount", where),
            columns=_required_int(root, "columns", where),
            version=root.get("version"),
            tiled_version=root.get("tiledversion"),
            grid=grid,
            tiles=tiles,
            source_path=source_path.resolve() if source_path else None,
        )

    def _parse_tile(self, tile_el: ET.Element, where: str) -> TileDefinition:
        tile_id = _required_int(tile_el, "id", where)
        tile_type = tile_el.get("type")
        if tile_type is None:
            tile_type = tile_el.get("class")

        image = None
        image_el = tile_el.find("image")
        if image_el is not None:
            source = image_el.get("source")
            if not source:
                raise TilesetFormatError(
                    f"{where}: <image> of tile {tile_id} is missing 'source'"
                )
            image = TileImage(
                source=source,
                width=_optional_int(image_el, "width", 0, where),
                height=_optional_int(image_el, "height", 0, where),
            )

        return TileDefinition(id=tile_id, type=tile_type, image=image)
