"""Error kinds raised by the solver.

- WFCInvalidInput: bad construction arguments, fatal to the solve attempt.
- WFCContradiction: a domain became empty. Callers may retry with new
  random numbers.
- WFCOutOfBounds: a coordinate outside the grid reached the domain storage.
  This is a programming defect, never a user error.
"""

from __future__ import annotations

from wfc3d.types import Coord3D


class WFCError(Exception):
    """Base class for every solver error so callers can catch them together."""


class WFCInvalidInput(WFCError, ValueError):
    """Raised when an exemplar, output shape, pattern set or constraint is invalid."""


class WFCContradiction(WFCError):
    """Raised when WFC reaches an unsolvable state.

    This occurs when constraint propagation eliminates all possibilities
    for a cell, meaning no valid solution exists with the current choices.

    Attributes:
        coord: The cell whose domain became empty, if known.
    """

    def __init__(self, message: str, coord: Coord3D | None = None) -> None:
        super().__init__(message)
        self.coord = coord


class WFCOutOfBounds(WFCError, AssertionError):
    """Raised when a coordinate outside the grid is used to address a domain."""
