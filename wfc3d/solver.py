"""Discrete 3D Wave Function Collapse model.

DiscreteModel wires the pieces of one solve together:

    Exemplar -> PatternRegistry -> AdjacencyModel   (built once)
    DomainGrid + Propagator + CollapseScheduler     (one solve attempt)

Usage:
    from wfc3d import DiscreteModel, WFCContradiction

    model = DiscreteModel(exemplar_cells, (16, 4, 16), random.Random(42))
    try:
        pattern_grid = model.solve()  # int32 array of PatternIds
    except WFCContradiction:
        ...  # retry with new random numbers, or use solve_with_retries()

A model that hit a contradiction is spent: every later call raises
WFCContradiction again instead of continuing from a half-propagated grid.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any, Generic, TypeVar

import numpy as np

from wfc3d import config
from wfc3d.adjacency import AdjacencyModel
from wfc3d.domain_grid import DomainGrid
from wfc3d.errors import WFCContradiction, WFCInvalidInput
from wfc3d.exemplar import Exemplar, as_exemplar
from wfc3d.propagation import Propagator
from wfc3d.registry import PatternRegistry
from wfc3d.scheduler import CollapseScheduler
from wfc3d.types import Coord3D, PatternId
from wfc3d.util import rng as rng_streams
from wfc3d.util.rng import RNG

logger = logging.getLogger(__name__)

CellT = TypeVar("CellT")

_solve_rng = rng_streams.get(config.RNG_DOMAIN_SOLVE)


class DiscreteModel(Generic[CellT]):
    """One solve attempt of an output grid against an exemplar's adjacency rules."""

    def __init__(
        self,
        exemplar: Exemplar[CellT] | np.ndarray | Sequence[Sequence[Sequence[CellT]]],
        output_shape: Sequence[int],
        rng: RNG | None = None,
        *,
        weights: Sequence[float] | None = None,
        weighted: bool | None = None,
        include_self: bool = config.INCLUDE_SELF_ADJACENCY,
    ) -> None:
        """Build the registry, adjacency rules and a fresh domain grid.

        Args:
            exemplar: Exemplar grid of opaque cell handles, indexed [x][y][z].
            output_shape: Output extents (size_x, size_y, size_z).
            rng: Random source. Defaults to the "wfc.solve" stream.
            weights: Optional per-pattern weights in exemplar scan order.
            weighted: Collapse proportionally to weights instead of uniformly.
                Defaults to True when weights are given, otherwise to
                config.WEIGHTED_COLLAPSE.
            include_self: Permit every pattern next to itself.

        Raises:
            WFCInvalidInput: On an empty exemplar or a non-positive dimension.
        """
        if weighted is None:
            weighted = weights is not None or config.WEIGHTED_COLLAPSE
        self.exemplar = as_exemplar(exemplar)
        self.registry = PatternRegistry.from_exemplar(self.exemplar, weights)
        self.adjacency = AdjacencyModel.build(self.registry, include_self=include_self)
        self.grid = DomainGrid(output_shape, self.registry.num_patterns)
        self.propagator = Propagator(self.grid, self.adjacency)
        self.rng = rng if rng is not None else _solve_rng
        self.scheduler = CollapseScheduler(
            self.grid,
            self.propagator,
            self.rng,
            weights=self.registry.weights if weighted else None,
        )
        self._settled = False
        self._failure: WFCContradiction | None = None

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def failed(self) -> bool:
        return self._failure is not None

    @property
    def is_solved(self) -> bool:
        return self._failure is None and self.grid.is_solved()

    def _ensure_usable(self) -> None:
        if self._failure is not None:
            raise WFCContradiction(
                f"Solve attempt already failed: {self._failure}", self._failure.coord
            ) from self._failure

    def _fail(self, exc: WFCContradiction) -> None:
        self._failure = exc
        logger.debug(f"Solve attempt failed: {exc}")

    def _settle(self) -> None:
        """Prune patterns that can never appear where they are, before collapsing."""
        if self._settled:
            return
        try:
            self.propagator.propagate_all()
        except WFCContradiction as exc:
            self._fail(exc)
            raise
        self._settled = True

    # -------------------------------------------------------------------------
    # Constraints
    # -------------------------------------------------------------------------

    def _allowed_mask(self, allowed: Iterable[PatternId]) -> np.ndarray:
        mask = np.zeros(self.registry.num_patterns, dtype=bool)
        for pattern_id in allowed:
            if not 0 <= pattern_id < self.registry.num_patterns:
                raise WFCInvalidInput(f"Unknown pattern id {pattern_id}")
            mask[pattern_id] = True
        return mask

    def constrain(self, coord: Coord3D, allowed: Iterable[PatternId]) -> None:
        """Restrict a cell to a subset of patterns and propagate.

        Useful for boundary conditions or seeding specific patterns before
        solving.

        Raises:
            WFCContradiction: If no allowed pattern remains possible.
        """
        self.constrain_many([(coord, allowed)])

    def constrain_many(
        self, cells: Iterable[tuple[Coord3D, Iterable[PatternId]]]
    ) -> None:
        """Restrict several cells, then propagate from all of them in one pass.

        Every entry is validated before any domain is touched, so a rejected
        call leaves the grid unchanged.

        Raises:
            WFCInvalidInput: On an unknown pattern id.
            WFCOutOfBounds: On a coordinate outside the grid.
            WFCContradiction: If a cell is left with no allowed pattern.
        """
        self._ensure_usable()
        requests = [
            (coord, self.grid.index(coord), self._allowed_mask(allowed))
            for coord, allowed in cells
        ]

        narrowed: list[Coord3D] = []
        for coord, index, mask in requests:
            if self.grid.narrow(index, mask):
                narrowed.append(coord)
            if not self.grid.domains[index].any():
                exc = WFCContradiction(
                    f"No valid patterns at {coord} after constraint", coord
                )
                self._fail(exc)
                raise exc

        if not narrowed:
            return
        try:
            self.propagator.propagate(narrowed)
        except WFCContradiction as exc:
            self._fail(exc)
            raise

    # -------------------------------------------------------------------------
    # Solving
    # -------------------------------------------------------------------------

    def step(self) -> Coord3D | None:
        """Collapse one cell and propagate.

        Returns:
            The collapsed coordinate, or None once every cell is resolved.

        Raises:
            WFCContradiction: If this or an earlier step hit a contradiction.
        """
        self._ensure_usable()
        self._settle()
        try:
            return self.scheduler.step()
        except WFCContradiction as exc:
            self._fail(exc)
            raise

    def solve(self) -> np.ndarray:
        """Run the WFC algorithm to completion.

        Returns:
            int32 array shaped like the output grid, one PatternId per cell.

        Raises:
            WFCContradiction: If the grid cannot be completed with these choices.
        """
        self._ensure_usable()
        self._settle()
        try:
            steps = self.scheduler.run()
        except WFCContradiction as exc:
            self._fail(exc)
            raise
        logger.info(
            f"Solved {self.grid.shape} grid with {self.registry.num_patterns} "
            f"patterns in {steps} collapses"
        )
        return self.result()

    def result(self) -> np.ndarray:
        """PatternId grid of a finished solve.

        Raises:
            WFCContradiction: If the attempt failed.
            RuntimeError: If cells remain unresolved.
        """
        self._ensure_usable()
        return self.grid.to_pattern_grid()

    def handle_at(self, coord: Coord3D) -> Any:
        """Exemplar cell handle chosen for a collapsed output cell."""
        self._ensure_usable()
        if not self.grid.is_collapsed(coord):
            raise RuntimeError(f"Cell {coord} is not collapsed")
        (pattern_id,) = self.grid.domain(coord)
        return self.registry.handle_for(pattern_id)


def solve_with_retries(
    exemplar: Exemplar[CellT] | np.ndarray | Sequence[Sequence[Sequence[CellT]]],
    output_shape: Sequence[int],
    rng: RNG | None = None,
    *,
    max_attempts: int = config.SOLVE_MAX_ATTEMPTS,
    **model_kwargs: Any,
) -> np.ndarray:
    """Solve with fresh models until one succeeds.

    All attempts draw from the same RNG, so each one makes different choices.

    Args:
        exemplar: Exemplar grid of opaque cell handles.
        output_shape: Output extents (size_x, size_y, size_z).
        rng: Random source shared by every attempt.
        max_attempts: Number of attempts before giving up, at least one.
        **model_kwargs: Passed through to DiscreteModel.

    Raises:
        WFCContradiction: The last attempt's contradiction, if all attempts fail.
    """
    if max_attempts < 1:
        raise WFCInvalidInput(f"max_attempts must be at least 1, got {max_attempts}")

    exemplar = as_exemplar(exemplar)
    stream = rng if rng is not None else _solve_rng
    last_error: WFCContradiction | None = None

    for attempt in range(1, max_attempts + 1):
        model = DiscreteModel(exemplar, output_shape, stream, **model_kwargs)
        try:
            return model.solve()
        except WFCContradiction as exc:
            last_error = exc
            logger.warning(
                f"WFC attempt {attempt}/{max_attempts} hit a contradiction: {exc}"
            )

    assert last_error is not None
    raise last_error
