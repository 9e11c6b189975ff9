"""
Tilesets package for climate-tiles.

Provides services for loading, validating and querying Tiled tilesets,
including the bundled climate tileset.
"""

from .service import TilesetService
from .models import ClimateClass, GridSettings, TileDefinition, TileImage, TileObject, Tileset
from .errors import TileImageError, TileNotFoundError, TilesetError, TilesetFormatError
from .parser import TsxParser
from .writer import TsxWriter
from .validation import TilesetValidator
from .image_defs import ImageDefRegistry
from .managers import ImageManager, TilesetManager, TilesManager

# Public classes intended for external use
__all__ = [
    # Main service
    'TilesetService',

    # Data models
    'ClimateClass',
    'GridSettings',
    'TileDefinition',
    'TileImage',
    'TileObject',
    'Tileset',

    # Errors
    'TileImageError',
    'TileNotFoundError',
    'TilesetError',
    'TilesetFormatError',

    # File formats and checks
    'TsxParser',
    'TsxWriter',
    'TilesetValidator',
    'ImageDefRegistry',

    # Managers (exposed in case they are needed directly)
    'ImageManager',
    'TilesetManager',
    'TilesManager',
]
