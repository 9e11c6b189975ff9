"""
Resources for climate-tiles.

Provides helpers to access packaged assets such as the bundled climate tileset.
"""

from functools import lru_cache
from importlib import resources as importlib_resources
from pathlib import Path

BUILTIN_TILESET = "temperature.tsx"


@lru_cache(maxsize=1)
def get_builtin_tileset_text() -> str:
    """Return the XML text of the bundled climate tileset."""
    return importlib_resources.files(__name__).joinpath(BUILTIN_TILESET).read_text(
        encoding="utf-8"
    )


def get_builtin_tileset_path() -> Path:
    """Return the filesystem path of the bundled climate tileset.

    Image sources inside the tileset resolve against the directory of this
    path, so the tile images themselves are expected next to a real map
    directory rather than inside the package.

    Raises:
        FileNotFoundError: If the package is not installed as plain files
            (e.g. imported from a zip archive)
    """
    resource = importlib_resources.files(__name__).joinpath(BUILTIN_TILESET)
    if not isinstance(resource, Path) or not resource.is_file():
        raise FileNotFoundError(
            f"Builtin tileset is not available as a file: {resource}"
        )
    return resource
