"""The six axis-aligned directions of a 3D grid.

Directions are a closed IntEnum so they can index the lookup tables below
(and the first axis of the adjacency tensor) directly.
"""

from __future__ import annotations

from enum import IntEnum

from wfc3d.types import Coord3D, GridShape


class Direction(IntEnum):
    """Axis-aligned neighbor direction."""

    POS_X = 0
    NEG_X = 1
    POS_Y = 2
    NEG_Y = 3
    POS_Z = 4
    NEG_Z = 5

    @property
    def offset(self) -> Coord3D:
        return DIR_OFFSETS[self]

    @property
    def opposite(self) -> Direction:
        return OPPOSITE_DIR[self]


DIRECTIONS: tuple[Direction, ...] = tuple(Direction)

# Indexed by Direction.
DIR_OFFSETS: tuple[Coord3D, ...] = (
    (1, 0, 0),
    (-1, 0, 0),
    (0, 1, 0),
    (0, -1, 0),
    (0, 0, 1),
    (0, 0, -1),
)

OPPOSITE_DIR: tuple[Direction, ...] = (
    Direction.NEG_X,
    Direction.POS_X,
    Direction.NEG_Y,
    Direction.POS_Y,
    Direction.NEG_Z,
    Direction.POS_Z,
)


def in_bounds(coord: Coord3D, shape: GridShape) -> bool:
    """Return True if coord lies inside a grid of the given shape."""
    x, y, z = coord
    sx, sy, sz = shape
    return 0 <= x < sx and 0 <= y < sy and 0 <= z < sz


def step(coord: Coord3D, direction: Direction) -> Coord3D:
    """Return the coordinate one cell away from coord in direction.

    The result is not bounds-checked; pair with in_bounds() or use
    neighbors().
    """
    dx, dy, dz = DIR_OFFSETS[direction]
    return (coord[0] + dx, coord[1] + dy, coord[2] + dz)


def neighbors(coord: Coord3D, shape: GridShape) -> list[tuple[Direction, Coord3D]]:
    """Return (direction, neighbor) pairs for every in-bounds neighbor of coord."""
    result: list[tuple[Direction, Coord3D]] = []
    for direction in DIRECTIONS:
        target = step(coord, direction)
        if in_bounds(target, shape):
            result.append((direction, target))
    return result
