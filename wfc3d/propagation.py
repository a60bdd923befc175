"""Breadth-first constraint propagation over the domain grid.

After a cell's domain narrows, each neighbor is intersected with the union
of the adjacency rules of everything still possible at that cell. Any
neighbor that loses a candidate is queued in turn, until the queue drains
(settled) or some domain becomes empty (contradiction).

A pass moves through Idle -> Traversing -> Settled | Contradiction. A
contradiction aborts the pass at once and leaves the grid as it was at the
moment the empty domain appeared; the solve attempt owning the grid must
be abandoned.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable
from enum import Enum, auto

import numpy as np

from wfc3d.adjacency import AdjacencyModel
from wfc3d.directions import DIRECTIONS, step
from wfc3d.domain_grid import DomainGrid
from wfc3d.errors import WFCContradiction, WFCInvalidInput
from wfc3d.types import Coord3D

logger = logging.getLogger(__name__)


class PropagationState(Enum):
    IDLE = auto()
    TRAVERSING = auto()
    SETTLED = auto()
    CONTRADICTION = auto()


class Propagator:
    """Restores arc consistency of a DomainGrid after domains narrow.

    Attributes:
        change_mask: One flag per cell, set while the cell waits in the queue.
            Cleared at the start of every pass and when the cell is dequeued,
            so a cell that shrinks again later in the same pass is revisited.
        state: State of the most recent pass.
        last_shrunk: Number of domain narrowings committed by the last pass.
        last_visited: Number of cells dequeued by the last pass.
    """

    def __init__(self, grid: DomainGrid, adjacency: AdjacencyModel) -> None:
        if adjacency.num_patterns != grid.num_patterns:
            raise WFCInvalidInput(
                f"Adjacency model has {adjacency.num_patterns} patterns but the "
                f"grid holds {grid.num_patterns}"
            )
        self.grid = grid
        self.adjacency = adjacency
        self.change_mask = np.zeros(grid.num_cells, dtype=bool)
        self.state = PropagationState.IDLE
        self.last_shrunk = 0
        self.last_visited = 0
        self._neighbor_table = self._build_neighbor_table()

    def _build_neighbor_table(self) -> np.ndarray:
        """Arena index of each cell's neighbor per direction, -1 past the edge."""
        grid = self.grid
        table = np.full((grid.num_cells, len(DIRECTIONS)), -1, dtype=np.int64)
        for index, coord in enumerate(grid.coords()):
            for direction in DIRECTIONS:
                target = step(coord, direction)
                if grid.in_bounds(target):
                    table[index, direction] = grid.index(target)
        return table

    def propagate(self, start: Iterable[Coord3D]) -> int:
        """Run one propagation pass seeded with the given cells.

        Args:
            start: Cells whose domains narrowed since the last settled pass.

        Returns:
            The number of neighbor narrowings committed. Zero means the grid
            was already at a fixpoint around the seeds.

        Raises:
            WFCContradiction: If a domain becomes (or already is) empty.
        """
        grid = self.grid
        domains = grid.domains
        neighbor_table = self._neighbor_table
        change_mask = self.change_mask

        self.state = PropagationState.IDLE
        change_mask[:] = False
        queue: deque[int] = deque()
        for coord in start:
            index = grid.index(coord)
            if not domains[index].any():
                self.state = PropagationState.CONTRADICTION
                raise WFCContradiction(f"No valid patterns at {coord}", coord)
            if not change_mask[index]:
                change_mask[index] = True
                queue.append(index)

        self.state = PropagationState.TRAVERSING
        shrunk = 0
        visited = 0

        while queue:
            index = queue.popleft()
            change_mask[index] = False
            visited += 1
            domain = domains[index]

            for direction in DIRECTIONS:
                neighbor = int(neighbor_table[index, direction])
                if neighbor < 0:
                    continue

                # Patterns the neighbor may hold given what remains possible here
                permitted = self.adjacency.support(domain, direction)
                if not grid.narrow(neighbor, permitted):
                    continue

                shrunk += 1
                if not domains[neighbor].any():
                    self.state = PropagationState.CONTRADICTION
                    self.last_shrunk = shrunk
                    self.last_visited = visited
                    coord = grid.coord(neighbor)
                    logger.debug(f"Contradiction at {coord} after {visited} visits")
                    raise WFCContradiction(
                        f"No valid patterns at {coord} after propagation", coord
                    )

                if not change_mask[neighbor]:
                    change_mask[neighbor] = True
                    queue.append(neighbor)

        self.state = PropagationState.SETTLED
        self.last_shrunk = shrunk
        self.last_visited = visited
        logger.debug(f"Propagation settled: {visited} visited, {shrunk} narrowed")
        return shrunk

    def propagate_all(self) -> int:
        """Run one pass seeded with every cell of the grid."""
        return self.propagate(self.grid.coords())
