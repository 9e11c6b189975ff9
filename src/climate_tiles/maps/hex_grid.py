"""
Odd-q hexagonal grid geometry.

Positions are (q, r) offset coordinates where odd columns are shoved down
by half a cell. Distance and range work in cube coordinates (x, y, z) with
x + y + z == 0.
"""

DEFAULT_WIDTH = 60
DEFAULT_HEIGHT = 50

Position = tuple[int, int]
Cube = tuple[int, int, int]

# Cube direction offsets in neighbour order
CUBE_DIRECTIONS: tuple[Cube, ...] = (
    (1, -1, 0),
    (1, 0, -1),
    (0, 1, -1),
    (-1, 1, 0),
    (-1, 0, 1),
    (0, -1, 1),
)


def odd_q_to_cube(pos: Position) -> Cube:
    q, r = pos
    x = q
    z = r - (q - (q & 1)) // 2
    y = -x - z
    return (x, y, z)


def cube_to_odd_q(cube: Cube) -> Position:
    x, _, z = cube
    return (x, z + (x - (x & 1)) // 2)


def distance(src: Position, dst: Position) -> int:
    """Number of hex steps between two positions."""
    sx, sy, sz = odd_q_to_cube(src)
    dx, dy, dz = odd_q_to_cube(dst)
    return (abs(sx - dx) + abs(sy - dy) + abs(sz - dz)) // 2


def is_valid_pos(
    pos: Position, width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT
) -> bool:
    q, r = pos
    return 0 <= q < width and 0 <= r < height


def hex_range(
    center: Position,
    radius: int,
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
) -> list[Position]:
    """All on-map positions within `radius` steps of `center`, center included.

    Order follows the cube offset iteration (x, then y, then z ascending),
    which clients rely on when diffing visible tiles.
    """
    cx, cy, cz = odd_q_to_cube(center)
    result: list[Position] = []

    for sx in range(-radius, radius + 1):
        for sy in range(-radius, radius + 1):
            for sz in range(-radius, radius + 1):
                if (cx + sx) + (cy + sy) + (cz + sz) != 0:
                    continue
                pos = cube_to_odd_q((cx + sx, cy + sy, cz + sz))
                if is_valid_pos(pos, width, height):
                    result.append(pos)

    return result


def neighbours(
    pos: Position, width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT
) -> list[Position]:
    """Adjacent on-map positions in `CUBE_DIRECTIONS` order."""
    x, y, z = odd_q_to_cube(pos)
    result: list[Position] = []
    for nx, ny, nz in CUBE_DIRECTIONS:
        neighbour = cube_to_odd_q((x + nx, y + ny, z + nz))
        if is_valid_pos(neighbour, width, height):
            result.append(neighbour)
    return result
