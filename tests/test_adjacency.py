"""Tests for learning adjacency rules from an exemplar."""

from __future__ import annotations

import numpy as np
import pytest

from tests.helpers import block_exemplar, row_exemplar
from wfc3d.adjacency import AdjacencyModel
from wfc3d.directions import DIRECTIONS, Direction
from wfc3d.registry import PatternRegistry


def build(exemplar, *, include_self: bool = False) -> AdjacencyModel:
    return AdjacencyModel.build(
        PatternRegistry.from_exemplar(exemplar), include_self=include_self
    )


# =============================================================================
# Construction
# =============================================================================


class TestAdjacencyConstruction:
    """Rules record exactly the neighbor pairs seen in the exemplar."""

    def test_two_cell_row(self) -> None:
        """A at x=0, B at x=1: B is +X of A, A is -X of B, nothing else."""
        model = build(row_exemplar(["A", "B"]))
        a, b = 0, 1

        assert model.neighbors(a, Direction.POS_X) == frozenset({b})
        assert model.neighbors(b, Direction.NEG_X) == frozenset({a})

        assert model.neighbors(a, Direction.NEG_X) == frozenset()
        assert model.neighbors(b, Direction.POS_X) == frozenset()
        for direction in (
            Direction.POS_Y,
            Direction.NEG_Y,
            Direction.POS_Z,
            Direction.NEG_Z,
        ):
            assert model.neighbors(a, direction) == frozenset()
            assert model.neighbors(b, direction) == frozenset()

    def test_every_pattern_has_all_six_directions(self) -> None:
        """as_dict() has an entry per pattern and direction, possibly empty."""
        rules = build(block_exemplar(2, 2, 1)).as_dict()

        assert set(rules) == {0, 1, 2, 3}
        for per_direction in rules.values():
            assert set(per_direction) == set(DIRECTIONS)

    def test_three_axis_block(self) -> None:
        """Each axis is learned independently."""
        registry = PatternRegistry.from_exemplar(block_exemplar(2, 2, 2))
        model = AdjacencyModel.build(registry)
        origin = registry.id_at((0, 0, 0))

        assert model.neighbors(origin, Direction.POS_X) == {registry.id_at((1, 0, 0))}
        assert model.neighbors(origin, Direction.POS_Y) == {registry.id_at((0, 1, 0))}
        assert model.neighbors(origin, Direction.POS_Z) == {registry.id_at((0, 0, 1))}
        assert model.neighbors(origin, Direction.NEG_X) == frozenset()

    def test_rules_count_matches_neighbor_pairs(self) -> None:
        """Each in-bounds ordered neighbor pair yields exactly one rule."""
        model = build(block_exemplar(3, 2, 4))
        # Pairs along each axis, counted in both directions.
        expected = 2 * (2 * 2 * 4 + 3 * 1 * 4 + 3 * 2 * 3)
        assert int(model.allowed.sum()) == expected

    def test_rules_are_symmetric(self) -> None:
        """A rule in one direction implies the mirrored rule in the opposite one."""
        assert build(block_exemplar(3, 3, 2)).is_symmetric()

    def test_allowed_is_read_only(self) -> None:
        """The rule tensor cannot be modified after building."""
        model = build(row_exemplar(["A", "B"]))
        with pytest.raises(ValueError):
            model.allowed[0, 0, 0] = True


# =============================================================================
# Self-adjacency
# =============================================================================


class TestSelfAdjacency:
    """Self-adjacency is an explicit opt-in."""

    def test_disabled_by_default(self) -> None:
        """By default a pattern is not its own neighbor."""
        model = AdjacencyModel.build(
            PatternRegistry.from_exemplar(row_exemplar(["A", "B"]))
        )
        for direction in DIRECTIONS:
            assert not model.allowed[direction].diagonal().any()

    def test_enabled_adds_every_pattern_to_itself(self) -> None:
        """With include_self each pattern permits itself in all directions."""
        model = build(row_exemplar(["A", "B"]), include_self=True)

        assert model.neighbors(0, Direction.POS_X) == frozenset({0, 1})
        assert model.neighbors(1, Direction.POS_X) == frozenset({1})
        for direction in DIRECTIONS:
            assert model.allowed[direction].diagonal().all()
        assert model.is_symmetric()


# =============================================================================
# Support
# =============================================================================


class TestSupport:
    """support() is the union of rules over a domain."""

    def test_union_over_domain(self) -> None:
        """Support of {A, B} to +X is the union of each pattern's +X rules."""
        model = build(row_exemplar(["A", "B", "C"]))
        domain = np.array([True, True, False])

        support = model.support(domain, Direction.POS_X)

        assert np.flatnonzero(support).tolist() == [1, 2]

    def test_empty_domain_supports_nothing(self) -> None:
        """An empty domain supports no neighbor pattern."""
        model = build(row_exemplar(["A", "B"]))
        support = model.support(np.zeros(2, dtype=bool), Direction.POS_X)
        assert not support.any()
