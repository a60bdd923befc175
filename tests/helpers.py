from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from wfc3d.adjacency import AdjacencyModel
from wfc3d.directions import DIRECTIONS, step
from wfc3d.exemplar import Exemplar


def row_exemplar(names: Sequence[str]) -> Exemplar[str]:
    """An n x 1 x 1 exemplar with one named cell per x position."""
    return Exemplar.from_nested([[[name]] for name in names])


def block_exemplar(size_x: int, size_y: int, size_z: int) -> Exemplar[str]:
    """An exemplar whose cell at (x, y, z) is the handle "x,y,z"."""
    return Exemplar.from_nested(
        [
            [[f"{x},{y},{z}" for z in range(size_z)] for y in range(size_y)]
            for x in range(size_x)
        ]
    )


def adjacency_violations(
    pattern_grid: np.ndarray, adjacency: AdjacencyModel
) -> list[str]:
    """Describe every neighbor pair in a solved grid that the rules forbid."""
    shape = pattern_grid.shape
    violations: list[str] = []
    for x, y, z in np.ndindex(*shape):
        current = int(pattern_grid[x, y, z])
        for direction in DIRECTIONS:
            nx, ny, nz = step((x, y, z), direction)
            if not (0 <= nx < shape[0] and 0 <= ny < shape[1] and 0 <= nz < shape[2]):
                continue
            neighbor = int(pattern_grid[nx, ny, nz])
            if not adjacency.allowed[direction, current, neighbor]:
                violations.append(
                    f"({x},{y},{z}) {current} -{direction.name}-> "
                    f"({nx},{ny},{nz}) {neighbor}"
                )
    return violations
