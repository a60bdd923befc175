"""Tests for the domain grid arena."""

from __future__ import annotations

import numpy as np
import pytest

from wfc3d.domain_grid import DomainGrid
from wfc3d.errors import WFCContradiction, WFCInvalidInput, WFCOutOfBounds


class TestDomainGridInitialization:
    """Every cell starts with the full pattern set."""

    def test_full_domains(self) -> None:
        """All cells hold every pattern after creation."""
        grid = DomainGrid((2, 3, 4), num_patterns=5)

        assert grid.num_cells == 24
        assert grid.domains.shape == (24, 5)
        assert grid.domains.all()
        assert grid.domain((1, 2, 3)) == frozenset(range(5))
        assert (grid.cardinalities() == 5).all()

    @pytest.mark.parametrize("shape", [(0, 1, 1), (1, -2, 1), (1, 1, 0)])
    def test_non_positive_dimension_raises(self, shape: tuple[int, int, int]) -> None:
        """Zero or negative dimensions are invalid input."""
        with pytest.raises(WFCInvalidInput, match="positive"):
            DomainGrid(shape, num_patterns=2)

    def test_wrong_rank_raises(self) -> None:
        """Output shapes must have three dimensions."""
        with pytest.raises(WFCInvalidInput, match="3 dimensions"):
            DomainGrid((2, 2), num_patterns=2)

    def test_non_integer_dimension_raises(self) -> None:
        """Float dimensions are rejected rather than truncated."""
        with pytest.raises(WFCInvalidInput, match="integers"):
            DomainGrid((2.5, 1, 1), num_patterns=2)

    def test_empty_pattern_set_raises(self) -> None:
        """A grid needs at least one pattern."""
        with pytest.raises(WFCInvalidInput, match="empty"):
            DomainGrid((1, 1, 1), num_patterns=0)


class TestAddressing:
    """index() and coord() are bounds-checked inverses."""

    def test_index_round_trip_covers_arena(self) -> None:
        """Every coordinate maps to a distinct index and back."""
        grid = DomainGrid((3, 2, 4), num_patterns=1)
        indices = [grid.index(coord) for coord in grid.coords()]

        assert indices == list(range(grid.num_cells))
        assert all(grid.coord(i) == c for i, c in zip(indices, grid.coords()))

    @pytest.mark.parametrize("coord", [(-1, 0, 0), (3, 0, 0), (0, 2, 0), (0, 0, 4)])
    def test_out_of_bounds_raises(self, coord: tuple[int, int, int]) -> None:
        """Addressing outside the grid is an assertion-level defect."""
        grid = DomainGrid((3, 2, 4), num_patterns=1)

        with pytest.raises(WFCOutOfBounds):
            grid.index(coord)
        with pytest.raises(AssertionError):
            grid.domain(coord)

    def test_coord_out_of_bounds_raises(self) -> None:
        """coord() rejects indices past the arena."""
        grid = DomainGrid((2, 2, 2), num_patterns=1)
        with pytest.raises(WFCOutOfBounds):
            grid.coord(8)


class TestNarrowing:
    """Domains only shrink."""

    def test_narrow_reports_change(self) -> None:
        """narrow() returns True only when a candidate is removed."""
        grid = DomainGrid((1, 1, 2), num_patterns=3)
        allowed = np.array([True, False, True])

        assert grid.narrow(0, allowed)
        assert grid.domain((0, 0, 0)) == frozenset({0, 2})
        assert not grid.narrow(0, allowed)
        assert grid.domain((0, 0, 1)) == frozenset({0, 1, 2})

    def test_narrow_never_adds(self) -> None:
        """Intersecting with a larger set does not restore candidates."""
        grid = DomainGrid((1, 1, 1), num_patterns=3)
        grid.narrow(0, np.array([True, False, False]))

        assert not grid.narrow(0, np.ones(3, dtype=bool))
        assert grid.domain((0, 0, 0)) == frozenset({0})

    def test_collapse(self) -> None:
        """collapse() leaves exactly one candidate."""
        grid = DomainGrid((2, 1, 1), num_patterns=3)
        grid.collapse(1, 2)

        assert grid.is_collapsed((1, 0, 0))
        assert not grid.is_collapsed((0, 0, 0))
        assert grid.unresolved().tolist() == [0]

    def test_collapse_to_removed_pattern_raises(self) -> None:
        """A cell cannot collapse to a pattern it no longer allows."""
        grid = DomainGrid((1, 1, 1), num_patterns=2)
        grid.narrow(0, np.array([True, False]))
        with pytest.raises(WFCInvalidInput, match="not in the domain"):
            grid.collapse(0, 1)


class TestPatternGrid:
    """to_pattern_grid() never returns partial results."""

    def test_solved_grid(self) -> None:
        """A fully collapsed grid converts to an id array."""
        grid = DomainGrid((2, 1, 2), num_patterns=4)
        for index, pattern_id in enumerate([3, 0, 1, 2]):
            grid.collapse(index, pattern_id)

        result = grid.to_pattern_grid()

        assert grid.is_solved()
        assert result.shape == (2, 1, 2)
        assert result.tolist() == [[[3, 0]], [[1, 2]]]

    def test_unresolved_grid_raises(self) -> None:
        """A grid with an undecided cell is not a result."""
        grid = DomainGrid((2, 1, 1), num_patterns=2)
        grid.collapse(0, 0)
        with pytest.raises(RuntimeError, match="not collapsed"):
            grid.to_pattern_grid()

    def test_empty_domain_raises_contradiction(self) -> None:
        """A grid with an empty domain reports the contradiction."""
        grid = DomainGrid((2, 1, 1), num_patterns=2)
        grid.collapse(0, 0)
        grid.narrow(1, np.zeros(2, dtype=bool))

        assert grid.has_contradiction()
        with pytest.raises(WFCContradiction) as excinfo:
            grid.to_pattern_grid()
        assert excinfo.value.coord == (1, 0, 0)
