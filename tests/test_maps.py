"""Tests for TMX map loading and map queries."""

import base64
import gzip
import struct
import zlib
from pathlib import Path

import pytest

from climate_tiles.maps import MapManager, MapTile, TerrainType, TmxMapLoader, gid_to_terrain
from climate_tiles.tilesets import TilesetFormatError

BASE1 = [
    1, 1, 5, 5,
    13, 2, 10, 32,
    1, 22, 19, 39,
]
BASE2 = [
    0, 0, 0, 0,
    0, 25, 0, 0,
    40, 0, 0, 0,
]


def _csv(gids: list[int]) -> str:
    rows = [",".join(str(g) for g in gids[i:i + 4]) for i in range(0, len(gids), 4)]
    return "\n" + ",\n".join(rows) + "\n"


def _tmx(layers: str, width: int = 4, height: int = 3) -> str:
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<map version="1.10" orientation="hexagonal" width="{width}" height="{height}" tilewidth="72" tileheight="72">
 <tileset firstgid="1" source="terrain.tsx"/>
 <tileset firstgid="40" source="temperature.tsx"/>
{layers}
</map>
"""


def _csv_layer(name: str, gids: list[int]) -> str:
    return f' <layer id="1" name="{name}" width="4" height="3">\n  <data encoding="csv">{_csv(gids)}</data>\n </layer>'


@pytest.fixture
def map_file(tmp_path: Path) -> Path:
    path = tmp_path / "world.tmx"
    path.write_text(
        _tmx(_csv_layer("base1", BASE1) + "\n" + _csv_layer("base2", BASE2)),
        encoding="utf-8",
    )
    return path


class TestTerrainTable:
    """Test gid to terrain mapping."""

    def test_known_gids(self) -> None:
        """Test gids in the terrain table map to their terrain."""
        assert gid_to_terrain(1) is TerrainType.GRASSLANDS
        assert gid_to_terrain(13) is TerrainType.HILLS_GRASSLANDS
        assert gid_to_terrain(39) is TerrainType.VOLCANO

    def test_unknown_gids(self) -> None:
        """Test gids outside the table map to UNKNOWN."""
        assert gid_to_terrain(0) is TerrainType.UNKNOWN
        assert gid_to_terrain(40) is TerrainType.UNKNOWN

    def test_custom_table(self) -> None:
        """Test a custom terrain table is used."""
        assert gid_to_terrain(1, {1: TerrainType.DESERT}) is TerrainType.DESERT


class TestTmxMapLoader:
    """Test reading TMX maps."""

    def test_size_and_tilesets(self, map_file: Path) -> None:
        """Test map size and tileset references are read."""
        world_map = TmxMapLoader().load(map_file)

        assert (world_map.width, world_map.height) == (4, 3)
        assert len(world_map.base) == 12
        assert [(ref.firstgid, ref.source) for ref in world_map.tilesets] == [
            (1, "terrain.tsx"),
            (40, "temperature.tsx"),
        ]

    def test_base_layer(self, map_file: Path) -> None:
        """Test base1 fills every cell."""
        world_map = TmxMapLoader().load(map_file)

        cell = world_map.tile_at(0, 1)
        assert cell.layers == [13]
        assert cell.terrain is TerrainType.HILLS_GRASSLANDS
        assert world_map.tile_at(3, 2).terrain is TerrainType.VOLCANO

    def test_overlay_layer(self, map_file: Path) -> None:
        """Test base2 overlays non-empty cells."""
        world_map = TmxMapLoader().load(map_file)

        cell = world_map.tile_at(1, 1)
        assert cell.layers == [2, 25]
        assert cell.terrain is TerrainType.FROZEN_FOREST
        assert world_map.tile_at(0, 2).layers == [1, 40]

    def test_resolve_gid(self, map_file: Path) -> None:
        """Test gids resolve to tileset and local id."""
        world_map = TmxMapLoader().load(map_file)

        ref, local_id = world_map.resolve_gid(44)
        assert ref.source == "temperature.tsx"
        assert local_id == 4
        ref, local_id = world_map.resolve_gid(1)
        assert (ref.source, local_id) == ("terrain.tsx", 0)
        assert world_map.resolve_gid(0) is None

    def test_tile_at_outside_map(self, map_file: Path) -> None:
        """Test tile_at raises IndexError outside the map."""
        world_map = TmxMapLoader().load(map_file)

        with pytest.raises(IndexError):
            world_map.tile_at(4, 0)

    def test_xml_tile_elements(self) -> None:
        """Test layer data given as <tile> elements."""
        tiles = "".join(f'<tile gid="{g}"/>' if g else "<tile/>" for g in BASE1)
        text = _tmx(f' <layer name="base1" width="4" height="3"><data>{tiles}</data></layer>')

        world_map = TmxMapLoader().load_string(text)

        assert [cell.layers[0] for cell in world_map.base] == BASE1

    def test_base64_zlib_layer(self) -> None:
        """Test zlib-compressed base64 layer data is decoded."""
        payload = base64.b64encode(zlib.compress(struct.pack("<12I", *BASE1))).decode("ascii")
        text = _tmx(
            f' <layer name="base1" width="4" height="3">'
            f'<data encoding="base64" compression="zlib">{payload}</data></layer>'
        )

        world_map = TmxMapLoader().load_string(text)

        assert [cell.layers[0] for cell in world_map.base] == BASE1

    def test_base64_gzip_layer(self) -> None:
        """Test gzip-compressed base64 layer data is decoded."""
        payload = base64.b64encode(gzip.compress(struct.pack("<12I", *BASE1))).decode("ascii")
        text = _tmx(
            f' <layer name="base1" width="4" height="3">'
            f'<data encoding="base64" compression="gzip">{payload}</data></layer>'
        )

        world_map = TmxMapLoader().load_string(text)

        assert [cell.layers[0] for cell in world_map.base] == BASE1

    def test_base64_uncompressed_layer(self) -> None:
        """Test plain base64 layer data without compression is decoded."""
        payload = base64.b64encode(struct.pack("<12I", *BASE1)).decode("ascii")
        text = _tmx(
            f' <layer name="base1" width="4" height="3">'
            f'<data encoding="base64">{payload}</data></layer>'
        )

        world_map = TmxMapLoader().load_string(text)

        assert [cell.layers[0] for cell in world_map.base] == BASE1

    def test_declared_latin1_encoding_is_honoured(self, tmp_path: Path) -> None:
        """Test map files are decoded with the encoding their XML declaration names."""
        path = tmp_path / "latin1.tmx"
        path.write_bytes(
            b'<?xml version="1.0" encoding="ISO-8859-1"?>'
            b'<map width="1" height="1"><tileset firstgid="1" source="caf\xe9.tsx"/>'
            b'<layer name="base1"><data encoding="csv">5</data></layer></map>'
        )

        world_map = TmxMapLoader().load(path)

        assert world_map.tilesets[0].source == "caf\u00e9.tsx"
        assert world_map.tile_at(0, 0).terrain is TerrainType.OCEAN

    def test_flip_flags_are_stripped(self) -> None:
        """Test flip flags are masked out of gids."""
        gids = [0x80000001] + BASE1[1:]
        world_map = TmxMapLoader().load_string(_tmx(_csv_layer("base1", gids)))

        assert world_map.base[0].layers == [1]
        assert world_map.base[0].terrain is TerrainType.GRASSLANDS

    def test_other_layers_ignored(self) -> None:
        """Test layers other than base1 and base2 are ignored."""
        text = _tmx(_csv_layer("base1", BASE1) + "\n" + _csv_layer("decor", [7] * 12))

        world_map = TmxMapLoader().load_string(text)

        assert all(len(cell.layers) == 1 for cell in world_map.base)


class TestTmxErrors:
    """Test error reporting for broken maps."""

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing map file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            TmxMapLoader().load(tmp_path / "missing.tmx")

    def test_wrong_root(self) -> None:
        """Test a non-map root element is rejected."""
        with pytest.raises(TilesetFormatError, match="expected <map>"):
            TmxMapLoader().load_string('<tileset tilewidth="1"/>')

    def test_layer_size_mismatch(self) -> None:
        """Test a layer with the wrong cell count is rejected."""
        with pytest.raises(TilesetFormatError, match="has 11 cells"):
            TmxMapLoader().load_string(_tmx(_csv_layer("base1", BASE1[:11])))

    def test_overlay_before_base(self) -> None:
        """Test base2 before base1 is rejected."""
        with pytest.raises(TilesetFormatError, match="before 'base1'"):
            TmxMapLoader().load_string(_tmx(_csv_layer("base2", BASE2)))

    def test_missing_base_layer(self) -> None:
        """Test a map without base1 is rejected."""
        with pytest.raises(TilesetFormatError, match="no 'base1' layer"):
            TmxMapLoader().load_string(_tmx(""))

    def test_invalid_tile_gid(self) -> None:
        """Test a non-numeric <tile> gid is reported as a format error."""
        text = '<map width="1" height="1"><layer name="base1"><data><tile gid="x"/></data></layer></map>'

        with pytest.raises(TilesetFormatError, match="invalid <tile> gid"):
            TmxMapLoader().load_string(text)

    def test_invalid_utf8_file(self, tmp_path: Path) -> None:
        """Test undecodable bytes are reported as a format error naming the file."""
        path = tmp_path / "garbled.tmx"
        path.write_bytes(b'<map width="1" height="1" name="caf\xe9"/>')

        with pytest.raises(TilesetFormatError, match="garbled.tmx"):
            TmxMapLoader().load(path)

    def test_unsupported_compression(self) -> None:
        """Test unknown layer compression is rejected."""
        text = _tmx(
            ' <layer name="base1" width="4" height="3">'
            '<data encoding="base64" compression="zstd">AAAA</data></layer>'
        )
        with pytest.raises(TilesetFormatError, match="zstd"):
            TmxMapLoader().load_string(text)


class TestMapManager:
    """Test map queries."""

    def test_neighbour_tiles(self, map_file: Path) -> None:
        """Test tiles around a position in range order."""
        manager = MapManager.from_file(map_file)

        tiles = manager.get_neighbour_tiles(1, 1, 1)

        assert tiles == [
            MapTile(0, 2, (1, 40)),
            MapTile(0, 1, (13,)),
            MapTile(1, 2, (22,)),
            MapTile(1, 1, (2, 25)),
            MapTile(1, 0, (1,)),
            MapTile(2, 2, (19,)),
            MapTile(2, 1, (10,)),
        ]

    def test_pos_to_tiles(self, map_file: Path) -> None:
        """Test positions map to tiles in the given order."""
        manager = MapManager.from_file(map_file)

        tiles = manager.pos_to_tiles([(3, 0), (1, 1)])

        assert [tile.to_dict() for tile in tiles] == [
            {"x": 3, "y": 0, "t": [5]},
            {"x": 1, "y": 1, "t": [2, 25]},
        ]

    def test_terrain_and_geometry(self, map_file: Path) -> None:
        """Test terrain lookup and map-bounded geometry."""
        manager = MapManager.from_file(map_file)

        assert manager.terrain_at(2, 0) is TerrainType.OCEAN
        assert manager.neighbours(0, 0) == [(1, 0), (0, 1)]
        assert manager.distance((0, 0), (3, 2)) == 4

    def test_map_tile_from_dict(self) -> None:
        """Test MapTile is built from its client dict."""
        assert MapTile.from_dict({"x": 17, "y": 34, "t": [13]}) == MapTile(17, 34, (13,))
