"""Collapse scheduling: which cell to observe next, and what it becomes.

Each step picks the unresolved cell with the fewest remaining candidates
(lowest entropy), breaking ties with the injected RNG, collapses it to one
candidate and then blocks on a full propagation pass. Every step removes at
least one unresolved cell, so a solve takes at most one step per cell.
"""

from __future__ import annotations

import logging

import numpy as np

from wfc3d.domain_grid import DomainGrid
from wfc3d.errors import WFCInvalidInput
from wfc3d.propagation import Propagator
from wfc3d.types import Coord3D, PatternId
from wfc3d.util.rng import RNG

logger = logging.getLogger(__name__)


class CollapseScheduler:
    """Drives the observe/propagate loop over a DomainGrid."""

    def __init__(
        self,
        grid: DomainGrid,
        propagator: Propagator,
        rng: RNG,
        weights: np.ndarray | None = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            grid: The grid being solved. Shared with the propagator.
            propagator: Propagation engine bound to the same grid.
            rng: Random source for tie-breaking and candidate choice.
            weights: Optional per-pattern weights. When given, candidates are
                chosen proportionally to their weight instead of uniformly.
        """
        if propagator.grid is not grid:
            raise WFCInvalidInput("Propagator is bound to a different grid")
        if weights is not None and weights.shape != (grid.num_patterns,):
            raise WFCInvalidInput(
                f"Expected {grid.num_patterns} weights, got {weights.size}"
            )
        self.grid = grid
        self.propagator = propagator
        self.rng = rng
        self.weights = weights
        self.collapse_count = 0

    def select(self) -> int | None:
        """Arena index of the next cell to collapse, or None if all are resolved."""
        counts = self.grid.cardinalities()
        unresolved = counts > 1
        if not unresolved.any():
            return None

        lowest = counts[unresolved].min()
        candidates = np.flatnonzero(unresolved & (counts == lowest)).tolist()
        return self.rng.choice(candidates)

    def choose_pattern(self, index: int) -> PatternId:
        """Pick one of the patterns still possible at a cell."""
        candidates = np.flatnonzero(self.grid.domains[index]).tolist()
        if self.weights is None:
            return self.rng.choice(candidates)
        weights = self.weights[candidates].tolist()
        return self.rng.choices(candidates, weights=weights)[0]

    def step(self) -> Coord3D | None:
        """Collapse one cell and propagate.

        Returns:
            The collapsed coordinate, or None if every cell was already resolved.

        Raises:
            WFCContradiction: If propagation empties a domain.
        """
        index = self.select()
        if index is None:
            return None

        pattern_id = self.choose_pattern(index)
        self.grid.collapse(index, pattern_id)
        self.collapse_count += 1

        coord = self.grid.coord(index)
        logger.debug(f"Collapsed {coord} to pattern {pattern_id}")
        self.propagator.propagate([coord])
        return coord

    def run(self) -> int:
        """Step until every cell is collapsed.

        Returns:
            The number of collapses performed by this call.
        """
        steps = 0
        # Each step resolves at least one cell, so this bound is never reached
        # by a correct grid.
        for _ in range(self.grid.num_cells + 1):
            if self.step() is None:
                return steps
            steps += 1
        raise RuntimeError(
            f"Collapse loop did not finish within {self.grid.num_cells} steps"
        )
