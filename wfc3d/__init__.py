"""Discrete 3D Wave Function Collapse.

Learns which patterns may sit next to each other from a small exemplar grid
and fills a larger 3D grid with pattern ids that respect those rules.

- Exemplar: 3D grid of opaque cell handles to learn from
- PatternRegistry: stable integer id per exemplar cell
- AdjacencyModel: per-direction neighbor rules learned from the exemplar
- DomainGrid: candidate pattern set per output cell
- Propagator: breadth-first constraint propagation to a fixpoint
- CollapseScheduler: lowest-entropy observe/collapse loop
- DiscreteModel: one complete solve attempt
"""

from .adjacency import AdjacencyModel
from .directions import DIR_OFFSETS, DIRECTIONS, OPPOSITE_DIR, Direction
from .domain_grid import DomainGrid
from .errors import WFCContradiction, WFCError, WFCInvalidInput, WFCOutOfBounds
from .exemplar import Exemplar, as_exemplar
from .propagation import PropagationState, Propagator
from .registry import PatternRegistry
from .scheduler import CollapseScheduler
from .solver import DiscreteModel, solve_with_retries

__all__ = [
    "DIRECTIONS",
    "DIR_OFFSETS",
    "OPPOSITE_DIR",
    "AdjacencyModel",
    "CollapseScheduler",
    "Direction",
    "DiscreteModel",
    "DomainGrid",
    "Exemplar",
    "PatternRegistry",
    "PropagationState",
    "Propagator",
    "WFCContradiction",
    "WFCError",
    "WFCInvalidInput",
    "WFCOutOfBounds",
    "as_exemplar",
    "solve_with_retries",
]
