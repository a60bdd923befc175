"""The output lattice of candidate sets ("the wave").

Domains live in one flat boolean arena of shape (cells, patterns): row i is
the domain of the cell whose C-order index is i, and column p is set while
PatternId p is still possible there. All coordinate access goes through the
bounds-checked index() function.
"""

from __future__ import annotations

import operator
from collections.abc import Iterable, Sequence

import numpy as np

from wfc3d.errors import WFCContradiction, WFCInvalidInput, WFCOutOfBounds
from wfc3d.types import Coord3D, GridShape, PatternId


def _validate_shape(shape: Sequence[int]) -> GridShape:
    if len(shape) != 3:
        raise WFCInvalidInput(f"Output shape must have 3 dimensions, got {shape!r}")
    try:
        sx, sy, sz = (operator.index(n) for n in shape)
    except TypeError as exc:
        raise WFCInvalidInput(f"Output dimensions must be integers: {shape!r}") from exc
    if sx <= 0 or sy <= 0 or sz <= 0:
        raise WFCInvalidInput(f"Output dimensions must be positive, got {shape!r}")
    return (sx, sy, sz)


class DomainGrid:
    """Per-cell candidate sets for one solve attempt.

    Domains only ever shrink. A cell whose row sums to one is collapsed; a
    row that sums to zero is a contradiction.
    """

    def __init__(self, shape: Sequence[int], num_patterns: int) -> None:
        """Allocate a grid where every cell may still hold every pattern.

        Args:
            shape: Output extents (size_x, size_y, size_z), all positive.
            num_patterns: Size of the full pattern set, at least one.

        Raises:
            WFCInvalidInput: On a non-positive dimension or an empty pattern set.
        """
        self.shape = _validate_shape(shape)
        if num_patterns <= 0:
            raise WFCInvalidInput("Pattern set is empty")

        self.num_patterns = num_patterns
        self.num_cells = self.shape[0] * self.shape[1] * self.shape[2]
        self.domains = np.ones((self.num_cells, num_patterns), dtype=bool)

    # -------------------------------------------------------------------------
    # Addressing
    # -------------------------------------------------------------------------

    def in_bounds(self, coord: Coord3D) -> bool:
        x, y, z = coord
        sx, sy, sz = self.shape
        return 0 <= x < sx and 0 <= y < sy and 0 <= z < sz

    def index(self, coord: Coord3D) -> int:
        """Flat arena index of coord.

        Raises:
            WFCOutOfBounds: If coord lies outside the grid.
        """
        if not self.in_bounds(coord):
            raise WFCOutOfBounds(f"Coordinate {coord} outside grid {self.shape}")
        x, y, z = coord
        _, sy, sz = self.shape
        return (x * sy + y) * sz + z

    def coord(self, index: int) -> Coord3D:
        """Inverse of index()."""
        if not 0 <= index < self.num_cells:
            raise WFCOutOfBounds(f"Index {index} outside grid {self.shape}")
        _, sy, sz = self.shape
        x, rest = divmod(index, sy * sz)
        y, z = divmod(rest, sz)
        return (x, y, z)

    def coords(self) -> Iterable[Coord3D]:
        """Every coordinate in arena order."""
        for x, y, z in np.ndindex(*self.shape):
            yield (x, y, z)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def domain(self, coord: Coord3D) -> frozenset[PatternId]:
        """The patterns still possible at coord."""
        row = self.domains[self.index(coord)]
        return frozenset(int(p) for p in np.flatnonzero(row))

    def cardinalities(self) -> np.ndarray:
        """Number of remaining candidates per cell, in arena order."""
        return np.count_nonzero(self.domains, axis=1)

    def unresolved(self) -> np.ndarray:
        """Arena indices of every cell with more than one candidate left."""
        return np.flatnonzero(self.cardinalities() > 1)

    def is_collapsed(self, coord: Coord3D) -> bool:
        return int(np.count_nonzero(self.domains[self.index(coord)])) == 1

    def is_solved(self) -> bool:
        return bool(np.all(self.cardinalities() == 1))

    def has_contradiction(self) -> bool:
        return bool(np.any(self.cardinalities() == 0))

    def snapshot(self) -> np.ndarray:
        """Copy of the domain arena."""
        return self.domains.copy()

    # -------------------------------------------------------------------------
    # Narrowing
    # -------------------------------------------------------------------------

    def narrow(self, index: int, allowed: np.ndarray) -> bool:
        """Intersect a cell's domain with allowed in place.

        Returns:
            True if at least one candidate was removed.
        """
        row = self.domains[index]
        narrowed = row & allowed
        if np.array_equal(narrowed, row):
            return False
        self.domains[index] = narrowed
        return True

    def collapse(self, index: int, pattern_id: PatternId) -> None:
        """Reduce a cell's domain to exactly pattern_id."""
        if not self.domains[index, pattern_id]:
            raise WFCInvalidInput(
                f"Pattern {pattern_id} is not in the domain of {self.coord(index)}"
            )
        self.domains[index] = False
        self.domains[index, pattern_id] = True

    # -------------------------------------------------------------------------
    # Result
    # -------------------------------------------------------------------------

    def to_pattern_grid(self) -> np.ndarray:
        """The chosen PatternId for every cell, shaped like the grid.

        Raises:
            WFCContradiction: If any domain is empty.
            RuntimeError: If any domain still holds more than one candidate.
        """
        counts = self.cardinalities()
        empty = np.flatnonzero(counts == 0)
        if empty.size:
            coord = self.coord(int(empty[0]))
            raise WFCContradiction(f"No valid patterns at {coord}", coord)
        if np.any(counts > 1):
            raise RuntimeError(
                f"{int(np.count_nonzero(counts > 1))} cells are not collapsed yet"
            )
        return np.argmax(self.domains, axis=1).astype(np.int32).reshape(self.shape)
