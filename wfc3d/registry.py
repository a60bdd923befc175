"""Pattern registry: a stable integer identity for every exemplar cell."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Generic, TypeVar

import numpy as np

from wfc3d.errors import WFCInvalidInput
from wfc3d.exemplar import Exemplar
from wfc3d.types import Coord3D, GridShape, PatternId

CellT = TypeVar("CellT")


class PatternRegistry(Generic[CellT]):
    """Assigns PatternIds 0..n-1 to exemplar cells in scan order.

    Attributes:
        ids: int32 array with the exemplar's shape holding each cell's PatternId.
        handles: Cell handle for each PatternId, indexed by id.
        weights: Relative selection weight for each PatternId (default 1.0).
    """

    def __init__(
        self,
        ids: np.ndarray,
        handles: list[CellT],
        weights: np.ndarray,
    ) -> None:
        self.ids = ids
        self.handles = handles
        self.weights = weights
        self.ids.flags.writeable = False
        self.weights.flags.writeable = False

    @classmethod
    def from_exemplar(
        cls,
        exemplar: Exemplar[CellT],
        weights: Sequence[float] | None = None,
    ) -> PatternRegistry[CellT]:
        """Register every exemplar cell.

        Args:
            exemplar: Non-empty exemplar grid.
            weights: Optional selection weight per PatternId, in scan order.

        Raises:
            WFCInvalidInput: If weights has the wrong length or a non-positive entry.
        """
        ids = np.empty(exemplar.shape, dtype=np.int32)
        handles: list[CellT] = []
        for pattern_id, (coord, handle) in enumerate(exemplar.iter_cells()):
            ids[coord] = pattern_id
            handles.append(handle)

        if weights is None:
            weight_array = np.ones(len(handles), dtype=np.float64)
        else:
            weight_array = np.asarray(weights, dtype=np.float64)
            if weight_array.shape != (len(handles),):
                raise WFCInvalidInput(
                    f"Expected {len(handles)} pattern weights, got {weight_array.size}"
                )
            if np.any(weight_array <= 0):
                raise WFCInvalidInput("Pattern weights must all be positive")

        return cls(ids, handles, weight_array)

    def __len__(self) -> int:
        return len(self.handles)

    @property
    def num_patterns(self) -> int:
        return len(self.handles)

    @property
    def exemplar_shape(self) -> GridShape:
        sx, sy, sz = self.ids.shape
        return (sx, sy, sz)

    @property
    def pattern_ids(self) -> range:
        return range(len(self.handles))

    def pattern_set(self) -> frozenset[PatternId]:
        return frozenset(self.pattern_ids)

    def id_at(self, coord: Coord3D) -> PatternId:
        """PatternId of the exemplar cell at coord."""
        return int(self.ids[coord])

    def handle_for(self, pattern_id: PatternId) -> CellT:
        """Exemplar cell handle registered under pattern_id."""
        if not 0 <= pattern_id < len(self.handles):
            raise KeyError(pattern_id)
        return self.handles[pattern_id]
