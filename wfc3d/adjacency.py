"""Adjacency model learned from the exemplar.

For each pattern and each of the six directions, the model records which
patterns were observed next to it in that direction. Rules are stored as a
boolean tensor so propagation can union the rules of a whole domain with a
single numpy reduction:

    allowed[direction, pattern, neighbor] == True

means `neighbor` was seen one step from `pattern` in `direction`.

The tensor is symmetric by construction: if B sits +X of A, then A sits
-X of B, so allowed[POS_X, A, B] == allowed[NEG_X, B, A].
"""

from __future__ import annotations

import logging

import numpy as np

from wfc3d import config
from wfc3d.directions import DIR_OFFSETS, DIRECTIONS, OPPOSITE_DIR, Direction
from wfc3d.registry import PatternRegistry
from wfc3d.types import PatternId

logger = logging.getLogger(__name__)


def _axis_slices(offset: int, size: int) -> tuple[slice, slice]:
    """Source and destination slices pairing each index with index + offset."""
    if offset > 0:
        return slice(0, size - 1), slice(1, size)
    if offset < 0:
        return slice(1, size), slice(0, size - 1)
    return slice(0, size), slice(0, size)


class AdjacencyModel:
    """Read-only per-direction adjacency rules between PatternIds."""

    def __init__(self, allowed: np.ndarray) -> None:
        """Wrap a prebuilt (6, n, n) boolean rule tensor.

        Use AdjacencyModel.build() to learn rules from an exemplar.
        """
        self.allowed = allowed
        self.allowed.flags.writeable = False
        self.num_patterns = allowed.shape[1]

    @classmethod
    def build(
        cls,
        registry: PatternRegistry,
        *,
        include_self: bool = config.INCLUDE_SELF_ADJACENCY,
    ) -> AdjacencyModel:
        """Learn adjacency rules from every in-bounds neighbor pair in the exemplar.

        Args:
            registry: Registry holding the exemplar's PatternId grid.
            include_self: Also permit every pattern next to itself in all
                directions.
        """
        ids = registry.ids
        num_patterns = registry.num_patterns
        allowed = np.zeros((len(DIRECTIONS), num_patterns, num_patterns), dtype=bool)

        for direction in DIRECTIONS:
            src_slices: list[slice] = []
            dst_slices: list[slice] = []
            for offset, size in zip(DIR_OFFSETS[direction], ids.shape, strict=True):
                src, dst = _axis_slices(offset, size)
                src_slices.append(src)
                dst_slices.append(dst)

            sources = ids[tuple(src_slices)].ravel()
            targets = ids[tuple(dst_slices)].ravel()
            allowed[direction, sources, targets] = True

        if include_self:
            diagonal = np.arange(num_patterns)
            allowed[:, diagonal, diagonal] = True

        logger.debug(
            f"Built adjacency for {num_patterns} patterns: "
            f"{int(allowed.sum())} rules (include_self={include_self})"
        )
        return cls(allowed)

    def neighbors(
        self, pattern_id: PatternId, direction: Direction
    ) -> frozenset[PatternId]:
        """Patterns permitted one step from pattern_id in direction."""
        return frozenset(
            int(p) for p in np.flatnonzero(self.allowed[direction, pattern_id])
        )

    def support(self, domain: np.ndarray, direction: Direction) -> np.ndarray:
        """Union of the direction rules of every pattern set in a domain row.

        Args:
            domain: Boolean row of length num_patterns.
            direction: Direction from the domain's cell towards the neighbor.

        Returns:
            Boolean row of the patterns the neighbor may still hold.
        """
        return np.any(self.allowed[direction][domain], axis=0)

    def as_dict(self) -> dict[PatternId, dict[Direction, frozenset[PatternId]]]:
        """Plain-dict view of every rule, for diagnostics and visualization."""
        return {
            pattern_id: {
                direction: self.neighbors(pattern_id, direction)
                for direction in DIRECTIONS
            }
            for pattern_id in range(self.num_patterns)
        }

    def is_symmetric(self) -> bool:
        """True if every rule has its mirrored counterpart in the opposite direction."""
        return all(
            np.array_equal(
                self.allowed[direction], self.allowed[OPPOSITE_DIR[direction]].T
            )
            for direction in DIRECTIONS
        )
