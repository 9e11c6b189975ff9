"""Tests for tileset validation."""

from dataclasses import replace
from pathlib import Path

from climate_tiles.tilesets import TilesetValidator, TsxParser
from climate_tiles.tilesets.models import TileDefinition, TileImage, Tileset


def _tileset(*tiles: TileDefinition, tile_count=None, source_path=None) -> Tileset:
    return Tileset(
        name="t",
        tile_width=72,
        tile_height=72,
        tile_count=len(tiles) if tile_count is None else tile_count,
        columns=0,
        tiles=tuple(tiles),
        source_path=source_path,
    )


def _tile(tile_id: int, tile_type="Polar", size=(72, 72), source=None) -> TileDefinition:
    return TileDefinition(
        id=tile_id,
        type=tile_type,
        image=TileImage(source or f"t{tile_id}.png", size[0], size[1]),
    )


class TestClimateTilesetValidation:
    """Test the climate tileset passes validation."""

    def test_valid_with_images(self, climate_tsx: Path) -> None:
        """Test the climate tileset is valid with its images."""
        result = TilesetValidator().validate(TsxParser().parse_file(climate_tsx))

        assert result.is_valid, result.errors
        assert result.errors == []
        assert result.warnings == []

    def test_missing_images_reported(self, climate_dir: Path, climate_tsx: Path) -> None:
        """Test a missing image is an error."""
        (climate_dir / "climate_tiles" / "temp_moisture" / "tropical.png").unlink()

        result = TilesetValidator().validate(TsxParser().parse_file(climate_tsx))

        assert not result.is_valid
        assert len(result.errors) == 1
        assert "Tile 6 image not found" in result.errors[0]

    def test_missing_images_ignored_without_image_check(self, climate_dir: Path, climate_tsx: Path) -> None:
        """Test missing images pass when image checks are off."""
        (climate_dir / "climate_tiles" / "temp_moisture" / "tropical.png").unlink()

        result = TilesetValidator(check_images=False).validate(TsxParser().parse_file(climate_tsx))

        assert result.is_valid

    def test_wrong_pixel_size_reported(self, climate_dir: Path, climate_tsx: Path, make_png) -> None:
        """Test a wrong pixel size is an error."""
        make_png(climate_dir / "climate_tiles" / "temp_moisture" / "polar.png", (64, 72))

        result = TilesetValidator().validate(TsxParser().parse_file(climate_tsx))

        assert not result.is_valid
        assert any("polar.png is 64x72, declared 72x72" in e for e in result.errors)

    def test_unreadable_image_reported(self, climate_dir: Path, climate_tsx: Path) -> None:
        """Test an unreadable image is an error."""
        (climate_dir / "climate_tiles" / "temp_moisture" / "boreal.png").write_bytes(b"not a png")

        result = TilesetValidator().validate(TsxParser().parse_file(climate_tsx))

        assert not result.is_valid
        assert any("Tile 2 image unreadable" in e for e in result.errors)


class TestStructuralChecks:
    """Test invariant checks on hand-built tilesets."""

    def test_gap_in_ids(self) -> None:
        """Test a gap in ids is an error."""
        result = TilesetValidator(check_images=False).validate(
            _tileset(_tile(0, "Polar"), _tile(2, "Boreal"))
        )

        assert not result.is_valid
        assert "Tile ids are not contiguous from 0, missing: [1]" in result.errors

    def test_duplicate_ids(self) -> None:
        """Test duplicate ids are an error."""
        result = TilesetValidator(check_images=False).validate(
            _tileset(_tile(0, "Polar"), _tile(0, "Boreal"))
        )

        assert "Duplicate tile id 0 (2 entries)" in result.errors

    def test_ids_not_starting_at_zero(self) -> None:
        """Test ids must start at 0."""
        result = TilesetValidator(check_images=False).validate(_tileset(_tile(1, "Polar")))

        assert "Tile ids are not contiguous from 0, missing: [0]" in result.errors

    def test_duplicate_types(self) -> None:
        """Test duplicate type labels are an error."""
        result = TilesetValidator(check_images=False).validate(
            _tileset(_tile(0, "Polar"), _tile(1, "Polar"))
        )

        assert "Duplicate tile type 'Polar' (2 entries)" in result.errors

    def test_missing_type_is_warning(self) -> None:
        """Test a missing type label is a warning."""
        result = TilesetValidator(check_images=False).validate(_tileset(_tile(0, None)))

        assert result.is_valid
        assert "Tile 0 has no type label" in result.warnings

    def test_tilecount_mismatch(self) -> None:
        """Test a tilecount mismatch is an error."""
        result = TilesetValidator(check_images=False).validate(
            _tileset(_tile(0), tile_count=7)
        )

        assert "tilecount is 7 but 1 tile(s) are defined" in result.errors

    def test_declared_size_mismatch(self) -> None:
        """Test a declared size other than the tile size is an error."""
        result = TilesetValidator(check_images=False).validate(
            _tileset(_tile(0, size=(32, 32)))
        )

        assert "Tile 0 image is declared 32x32, tileset tiles are 72x72" in result.errors

    def test_collection_without_grid_warns(self) -> None:
        """Test a collection without grid is a warning."""
        result = TilesetValidator(check_images=False).validate(_tileset(_tile(0)))

        assert "Collection tileset has no <grid> element" in result.warnings

    def test_images_resolve_against_source_path(self, tmp_path: Path, make_png) -> None:
        """Test images resolve against the tileset source path."""
        make_png(tmp_path / "art" / "t0.png", (72, 72))
        tileset = _tileset(
            _tile(0, source="art/t0.png"), source_path=tmp_path / "set.tsx"
        )

        assert TilesetValidator().validate(tileset).is_valid
        assert not TilesetValidator().validate(replace(tileset, source_path=tmp_path / "x" / "set.tsx")).is_valid
