"""
climate-tiles: Tiled climate tileset and world map loader

Parses, validates and serves the climate/temperature tileset used by the
world map, together with the map's TMX layers and hex geometry.
"""

__version__ = "0.1.0"
__author__ = "climate-tiles Contributors"

# Core service imports
from .tilesets import TilesetService, TsxParser, TsxWriter, TilesetValidator
from .maps import MapManager, TmxMapLoader
from .utils.logging_config import setup_logging

# Main data models
from .tilesets.models import (
    ClimateClass, TileDefinition, TileImage, GridSettings, Tileset, TileObject
)

__all__ = [
    # Services
    'TilesetService',
    'MapManager',

    # File formats
    'TsxParser',
    'TsxWriter',
    'TilesetValidator',
    'TmxMapLoader',

    # Logging
    'setup_logging',

    # Data models
    'ClimateClass',
    'TileDefinition',
    'TileImage',
    'GridSettings',
    'Tileset',
    'TileObject',
]
