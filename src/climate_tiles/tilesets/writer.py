"""
Writing Tiled tileset (.tsx) files.

Produces the same layout Tiled itself writes: XML declaration, one-space
indentation and attributes in Tiled's order.
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

from .models import Tileset


class TsxWriter:
    """Serializes `Tileset` objects back to `.tsx` XML."""

    INDENT = " "

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def build_element(self, tileset: Tileset) -> ET.Element:
        """Build the `<tileset>` element tree for a tileset."""
        root = ET.Element("tileset")
        # ElementTree keeps insertion order for attributes
        if tileset.version is not None:
            root.set("version", tileset.version)
        if tileset.tiled_version is not None:
            root.set("tiledversion", tileset.tiled_version)
        root.set("name", tileset.name)
        root.set("tilewidth", str(tileset.tile_width))
        root.set("tileheight", str(tileset.tile_height))
        root.set("tilecount", str(tileset.tile_count))
        root.set("columns", str(tileset.columns))

        if tileset.grid is not None:
            ET.SubElement(
                root,
                "grid",
                {
                    "orientation": tileset.grid.orientation,
                    "width": str(tileset.grid.width),
                    "height": str(tileset.grid.height),
                },
            )

        for tile in tileset.tiles:
            tile_el = ET.SubElement(root, "tile", {"id": str(tile.id)})
            if tile.type is not None:
                tile_el.set("type", tile.type)
            if tile.image is not None:
                ET.SubElement(
                    tile_el,
                    "image",
                    {
                        "width": str(tile.image.width),
                        "height": str(tile.image.height),
                        "source": tile.image.source,
                    },
                )

        return root

    def to_string(self, tileset: Tileset) -> str:
        """Serialize a tileset to `.tsx` text."""
        root = self.build_element(tileset)
        ET.indent(root, space=self.INDENT)
        body = ET.tostring(root, encoding="unicode", short_empty_elements=True)
        # Tiled writes empty elements as <x/>, without the space ElementTree adds
        body = body.replace(" />", "/>")
        return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}\n'

    def write(self, tileset: Tileset, path: Path | str) -> Path:
        """Write a tileset to disk and return the written path."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_string(tileset), encoding="utf-8")
        self.logger.info(f"Wrote tileset '{tileset.name}' to {path}")
        return path
