"""
Exceptions raised by the tileset system.
"""


class TilesetError(Exception):
    """Base class for all tileset errors."""
    pass


class TilesetFormatError(TilesetError):
    """Raised when a tileset or map file is malformed.

    Covers broken XML, an unexpected root element, missing required
    attributes and numbers that cannot be parsed.
    """
    pass


class TileNotFoundError(TilesetError, KeyError):
    """Raised when a tile id or type label is not present in a tileset."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep plain messages instead
        return str(self.args[0]) if self.args else ""


class TileImageError(TilesetError):
    """Raised when a tile image is missing or cannot be decoded."""
    pass
