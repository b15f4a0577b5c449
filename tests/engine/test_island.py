"""Tests for island shapes, overlap and hit tracking."""

import pytest

from islands_engine.engine.coordinate import Coordinate
from islands_engine.engine.errors import InvalidIslandPosition, InvalidIslandType
from islands_engine.engine.island import GuessOutcome, Island, IslandType


def test_square_island_coordinates() -> None:
    island = Island.create(IslandType.SQUARE, Coordinate(1, 1))
    assert island.coordinates == {
        Coordinate(1, 1),
        Coordinate(1, 2),
        Coordinate(2, 1),
        Coordinate(2, 2),
    }
    assert island.hit_coordinates == frozenset()


@pytest.mark.parametrize(
    "island_type, expected",
    [
        (IslandType.ATOLL, {(3, 3), (3, 4), (4, 4), (5, 3), (5, 4)}),
        (IslandType.DOT, {(3, 3)}),
        (IslandType.L_SHAPE, {(3, 3), (4, 3), (5, 3), (5, 4)}),
        (IslandType.S_SHAPE, {(3, 4), (3, 5), (4, 3), (4, 4)}),
    ],
)
def test_shapes_follow_offsets_from_anchor(island_type: IslandType, expected: set) -> None:
    island = Island.create(island_type, Coordinate(3, 3))
    assert {(c.row, c.col) for c in island.coordinates} == expected
    assert island_type.size == len(expected)


def test_create_accepts_string_tags() -> None:
    assert Island.create("dot", Coordinate(4, 4)) == Island.create(IslandType.DOT, Coordinate(4, 4))


def test_invalid_wrong_type_island() -> None:
    with pytest.raises(InvalidIslandType):
        Island.create("not_a_valid_type", Coordinate(1, 1))


@pytest.mark.parametrize("row, col", [(10, 10), (10, 1), (1, 10)])
def test_square_overflowing_the_board_is_rejected(row: int, col: int) -> None:
    with pytest.raises(InvalidIslandPosition):
        Island.create(IslandType.SQUARE, Coordinate(row, col))


def test_dot_fits_anywhere() -> None:
    for row in range(1, 11):
        for col in range(1, 11):
            island = Island.create(IslandType.DOT, Coordinate(row, col))
            assert island.coordinates == {Coordinate(row, col)}


def test_overlaps_is_symmetric() -> None:
    l_far = Island.create(IslandType.L_SHAPE, Coordinate(5, 5))
    l_near = Island.create(IslandType.L_SHAPE, Coordinate(1, 1))
    square = Island.create(IslandType.SQUARE, Coordinate(1, 1))
    assert not l_far.overlaps(square)
    assert not square.overlaps(l_far)
    assert l_near.overlaps(square)
    assert square.overlaps(l_near)


def test_guess_hit_and_miss() -> None:
    island = Island.create(IslandType.DOT, Coordinate(1, 1))

    outcome, hit_island = island.guess(Coordinate(1, 1))
    assert outcome is GuessOutcome.HIT
    assert hit_island.hit_coordinates == {Coordinate(1, 1)}
    assert island.hit_coordinates == frozenset(), "original island must be untouched"

    outcome, missed = island.guess(Coordinate(2, 2))
    assert outcome is GuessOutcome.MISS
    assert missed is island


def test_repeated_hit_is_idempotent() -> None:
    island = Island.create(IslandType.SQUARE, Coordinate(1, 1))
    _, once = island.guess(Coordinate(1, 2))
    outcome, twice = once.guess(Coordinate(1, 2))
    assert outcome is GuessOutcome.HIT
    assert twice.hit_coordinates == once.hit_coordinates


def test_forested_once_every_cell_hit_and_stays_forested() -> None:
    island = Island.create(IslandType.ATOLL, Coordinate(2, 2))
    cells = sorted(island.coordinates)
    for idx, coord in enumerate(cells, start=1):
        _, island = island.guess(coord)
        assert island.is_forested() is (idx == len(cells))

    for coord in [cells[0], Coordinate(9, 9)]:
        _, island = island.guess(coord)
        assert island.is_forested()


def test_hit_coordinates_must_be_subset() -> None:
    with pytest.raises(InvalidIslandPosition):
        Island(frozenset({Coordinate(1, 1)}), frozenset({Coordinate(2, 2)}))


def test_all_types_in_lexicographic_order() -> None:
    assert IslandType.all() == [
        IslandType.ATOLL,
        IslandType.DOT,
        IslandType.L_SHAPE,
        IslandType.S_SHAPE,
        IslandType.SQUARE,
    ]
