"""
Command line interface for climate-tiles.

Usage: climate-tiles COMMAND [ARGS]   (or python -m climate_tiles)
"""

import logging
from collections import Counter
from pathlib import Path
from typing import NoReturn, Optional

import orjson
import typer

from .maps import TmxMapLoader
from .settings import AppSettings
from .tilesets import (
    ImageDefRegistry,
    TileDefinition,
    TilesetError,
    TilesetService,
    TilesetValidator,
    TsxParser,
    TsxWriter,
)
from .tilesets.models import Tileset
from .utils.logging_config import setup_logging

app = typer.Typer(no_args_is_help=True, help="Inspect and check Tiled climate tilesets.")
logger = logging.getLogger(__name__)


def _fail(message: str) -> NoReturn:
    logger.error(message)
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


def _load_tileset(tileset_file: Optional[Path]) -> Tileset:
    """Load a tileset file, or the bundled climate tileset when none is given."""
    service = TilesetService()
    try:
        if tileset_file is None:
            return service.load_builtin()
        return service.load_tileset(tileset_file)
    except (TilesetError, FileNotFoundError) as e:
        _fail(str(e))


def _describe(tileset: Tileset, tile: TileDefinition) -> str:
    image_path = tileset.resolve_image_path(tile)
    source = tile.source or "-"
    resolved = str(image_path) if image_path else "-"
    return f"{tile.id:>4}  {tile.type or '-':<16} {source}  ({resolved})"


@app.callback()
def main(
    ctx: typer.Context,
    profile: str = typer.Option("default", help="Settings profile to use."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log DEBUG to console."),
):
    """Load settings and configure logging before any command runs."""
    settings = AppSettings(profile=profile)
    setup_logging(settings, console_level="DEBUG" if verbose else None)
    logger.debug(f"Configuration loaded from {settings.get_settings_file_path()}")

    validation = settings.validate()
    for warning in validation.warnings:
        logger.debug(f"  {warning}")
    for error in validation.errors:
        logger.warning(f"  {error}")
    ctx.obj = settings


@app.command()
def info(
    tileset_file: Optional[Path] = typer.Argument(None, help="Tileset .tsx file (default: builtin)."),
):
    """Show tileset metadata and all tiles."""
    tileset = _load_tileset(tileset_file)
    typer.echo(
        f"{tileset.name}: {tileset.tile_count} tile(s) of "
        f"{tileset.tile_width}x{tileset.tile_height}, columns={tileset.columns}"
    )
    if tileset.grid is not None:
        typer.echo(
            f"grid: {tileset.grid.orientation} {tileset.grid.width}x{tileset.grid.height}"
        )
    for tile in tileset.tiles:
        typer.echo(_describe(tileset, tile))


@app.command()
def lookup(
    tileset_file: Optional[Path] = typer.Argument(None, help="Tileset .tsx file (default: builtin)."),
    tile_id: Optional[int] = typer.Option(None, "--id", help="Tile id to look up."),
    tile_type: Optional[str] = typer.Option(None, "--type", help="Tile type label to look up."),
):
    """Look up one tile by id or by type label."""
    if (tile_id is None) == (tile_type is None):
        _fail("Give exactly one of --id or --type")

    tileset = _load_tileset(tileset_file)
    if tile_id is not None:
        tile = tileset.get_tile(tile_id)
        wanted = f"id {tile_id}"
    else:
        tile = tileset.get_tile_by_type(str(tile_type))
        wanted = f"type '{tile_type}'"

    if tile is None:
        _fail(f"No tile with {wanted} in '{tileset.name}'")
    typer.echo(_describe(tileset, tile))


@app.command()
def validate(
    tileset_file: Optional[Path] = typer.Argument(None, help="Tileset .tsx file (default: builtin)."),
    images: bool = typer.Option(True, "--images/--no-images", help="Check image files on disk."),
):
    """Check tileset invariants; exits with 1 when errors are found."""
    tileset = _load_tileset(tileset_file)
    result = TilesetValidator(check_images=images).validate(tileset)

    for warning in result.warnings:
        typer.echo(f"warning: {warning}")
    for error in result.errors:
        typer.echo(f"error: {error}")

    if not result.is_valid:
        raise typer.Exit(code=1)
    typer.echo(f"{tileset.name}: OK")


@app.command("export-json")
def export_json(
    tileset_file: Path = typer.Argument(..., help="Tileset .tsx file."),
    output: Path = typer.Argument(..., help="JSON file to write."),
):
    """Export a tileset to JSON."""
    tileset = _load_tileset(tileset_file)
    output.write_bytes(orjson.dumps(tileset.to_dict(), option=orjson.OPT_INDENT_2))
    typer.echo(f"Wrote {output}")


@app.command()
def convert(
    tileset_file: Path = typer.Argument(..., help="Tileset .tsx file."),
    output: Path = typer.Argument(..., help="Tileset .tsx file to write."),
):
    """Rewrite a tileset in normalized Tiled layout."""
    try:
        tileset = TsxParser().parse_file(tileset_file)
    except (TilesetError, FileNotFoundError) as e:
        _fail(str(e))
    TsxWriter().write(tileset, output)
    typer.echo(f"Wrote {output}")


@app.command("map-info")
def map_info(
    map_file: Path = typer.Argument(..., help="Map .tmx file."),
):
    """Show map size, tileset references and terrain counts."""
    try:
        world_map = TmxMapLoader().load(map_file)
    except (TilesetError, FileNotFoundError) as e:
        _fail(str(e))

    typer.echo(f"{map_file.name}: {world_map.width}x{world_map.height}")
    for ref in world_map.tilesets:
        typer.echo(f"  tileset firstgid={ref.firstgid} source={ref.source}")
    counts = Counter(cell.terrain.value for cell in world_map.base)
    for terrain, count in counts.most_common():
        typer.echo(f"  {terrain:<16} {count}")


@app.command("image-def")
def image_def(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Image name, optionally with a variant digit."),
    directory: Optional[Path] = typer.Option(None, "--dir", help="Image definitions directory."),
):
    """Print the JSON image definition for an image name."""
    settings: AppSettings = ctx.obj
    directory = directory or settings.image_defs_path
    if directory is None:
        _fail("No image definitions directory given or configured")

    try:
        registry = ImageDefRegistry(directory)
        data = registry.get(name)
    except (FileNotFoundError, KeyError) as e:
        _fail(str(e).strip("'\""))
    typer.echo(orjson.dumps(data, option=orjson.OPT_INDENT_2).decode("utf-8"))
