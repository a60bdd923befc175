"""The exemplar grid the adjacency rules are learned from.

The solver never looks inside a cell. A cell handle can be anything the
embedding system uses to describe a piece of geometry (an object, a name, a
voxel bundle); the solver only needs to enumerate cells in a stable order.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any, Generic, TypeVar

import numpy as np

from wfc3d.errors import WFCInvalidInput
from wfc3d.types import Coord3D, GridShape

CellT = TypeVar("CellT")


def _require_level(value: object, where: str) -> None:
    """Reject a nesting level that is a cell handle rather than a sequence.

    Strings count as handles, so a 2D list of names is not read as 3D.
    """
    if isinstance(value, str | bytes) or not isinstance(value, Sequence):
        raise WFCInvalidInput(
            f"Exemplar must be 3-dimensional: {where} is "
            f"{type(value).__name__}, not a sequence"
        )


class Exemplar(Generic[CellT]):
    """A non-empty 3D array of opaque cell handles indexed (x, y, z).

    Iteration order is C order: x outermost, z innermost. Pattern ids are
    assigned in this order, so it must never change.
    """

    def __init__(self, cells: np.ndarray) -> None:
        if cells.ndim != 3:
            raise WFCInvalidInput(
                f"Exemplar must be 3-dimensional, got {cells.ndim} dimensions"
            )
        if cells.size == 0:
            raise WFCInvalidInput(f"Exemplar is empty (shape {cells.shape})")
        self.cells = cells

    @classmethod
    def from_nested(
        cls, nested: Sequence[Sequence[Sequence[CellT]]]
    ) -> Exemplar[CellT]:
        """Build an exemplar from nested sequences indexed nested[x][y][z].

        Cell handles are stored as-is in an object array, so handles that are
        themselves sequences (tuples, strings) are not split apart.

        Raises:
            WFCInvalidInput: If the nesting is not 3 levels deep, empty or ragged.
        """
        _require_level(nested, "exemplar")
        size_x = len(nested)
        if size_x == 0:
            raise WFCInvalidInput("Exemplar is empty")
        _require_level(nested[0], "plane x=0")
        size_y = len(nested[0])
        if size_y == 0:
            raise WFCInvalidInput("Exemplar is empty")
        _require_level(nested[0][0], "row (0, 0)")
        size_z = len(nested[0][0])
        if size_z == 0:
            raise WFCInvalidInput("Exemplar is empty")

        cells = np.empty((size_x, size_y, size_z), dtype=object)
        for x, plane in enumerate(nested):
            _require_level(plane, f"plane x={x}")
            if len(plane) != size_y:
                raise WFCInvalidInput(
                    f"Ragged exemplar: plane x={x} has {len(plane)} rows, "
                    f"expected {size_y}"
                )
            for y, row in enumerate(plane):
                _require_level(row, f"row ({x}, {y})")
                if len(row) != size_z:
                    raise WFCInvalidInput(
                        f"Ragged exemplar: row ({x}, {y}) has {len(row)} cells, "
                        f"expected {size_z}"
                    )
                for z, cell in enumerate(row):
                    cells[x, y, z] = cell
        return cls(cells)

    @property
    def shape(self) -> GridShape:
        sx, sy, sz = self.cells.shape
        return (sx, sy, sz)

    @property
    def size(self) -> int:
        return int(self.cells.size)

    def __getitem__(self, coord: Coord3D) -> Any:
        return self.cells[coord]

    def __len__(self) -> int:
        return self.size

    def iter_cells(self) -> Iterator[tuple[Coord3D, CellT]]:
        """Yield (coord, handle) pairs in scan order."""
        for index in np.ndindex(*self.cells.shape):
            x, y, z = index
            yield (x, y, z), self.cells[index]


def as_exemplar(
    cells: Exemplar[CellT] | np.ndarray | Sequence[Sequence[Sequence[CellT]]],
) -> Exemplar[CellT]:
    """Wrap an ndarray or nested sequences as an Exemplar. Exemplars pass through."""
    if isinstance(cells, Exemplar):
        return cells
    if isinstance(cells, np.ndarray):
        return Exemplar(cells)
    return Exemplar.from_nested(cells)
