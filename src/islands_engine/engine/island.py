"""Island shapes and hit tracking."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from .coordinate import Coordinate
from .errors import InvalidCoordinate, InvalidIslandPosition, InvalidIslandType

Offset = tuple[int, int]


class GuessOutcome(Enum):
    """Result of a single guess against an island or board."""

    HIT = "hit"
    MISS = "miss"


class IslandType(Enum):
    """The five island shapes every player must place."""

    ATOLL = "atoll"
    DOT = "dot"
    L_SHAPE = "l_shape"
    S_SHAPE = "s_shape"
    SQUARE = "square"

    @classmethod
    def all(cls) -> list[IslandType]:
        """All types in lexicographic order of their tags."""
        return sorted(cls, key=lambda island_type: island_type.value)

    @classmethod
    def parse(cls, tag: IslandType | str) -> IslandType:
        """Resolve a type or its string tag, rejecting anything else."""
        if isinstance(tag, cls):
            return tag
        try:
            return cls(tag)
        except ValueError as exc:
            raise InvalidIslandType(tag) from exc

    @property
    def offsets(self) -> tuple[Offset, ...]:
        """(row, col) offsets of the shape relative to its upper-left anchor."""
        return _OFFSETS[self]

    @property
    def size(self) -> int:
        """Number of cells the shape covers."""
        return len(self.offsets)


_OFFSETS: dict[IslandType, tuple[Offset, ...]] = {
    IslandType.SQUARE: ((0, 0), (0, 1), (1, 0), (1, 1)),
    IslandType.ATOLL: ((0, 0), (0, 1), (1, 1), (2, 0), (2, 1)),
    IslandType.DOT: ((0, 0),),
    IslandType.L_SHAPE: ((0, 0), (1, 0), (2, 0), (2, 1)),
    IslandType.S_SHAPE: ((0, 1), (0, 2), (1, 0), (1, 1)),
}


@dataclass(frozen=True)
class Island:
    """A placed island: its cells and the cells hit so far."""

    coordinates: frozenset[Coordinate]
    hit_coordinates: frozenset[Coordinate] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not self.coordinates:
            raise InvalidIslandPosition("An island must cover at least one coordinate.")
        if not self.hit_coordinates <= self.coordinates:
            raise InvalidIslandPosition("Hit coordinates must belong to the island.")

    @classmethod
    def create(cls, island_type: IslandType | str, anchor: Coordinate) -> Island:
        """Build the island of `island_type` whose upper-left cell is `anchor`."""
        island_type = IslandType.parse(island_type)
        cells: set[Coordinate] = set()
        for delta_row, delta_col in island_type.offsets:
            try:
                cells.add(anchor.offset(delta_row, delta_col))
            except InvalidCoordinate as exc:
                raise InvalidIslandPosition(
                    f"{island_type.value} anchored at ({anchor.row}, {anchor.col}) "
                    "does not fit on the board."
                ) from exc
        return cls(frozenset(cells))

    def overlaps(self, other: Island) -> bool:
        """Return True if the two islands share any coordinate."""
        return not self.coordinates.isdisjoint(other.coordinates)

    def guess(self, coordinate: Coordinate) -> tuple[GuessOutcome, Island]:
        """Register a guess; a miss hands back this island unchanged."""
        if coordinate not in self.coordinates:
            return GuessOutcome.MISS, self
        return GuessOutcome.HIT, replace(self, hit_coordinates=self.hit_coordinates | {coordinate})

    def is_forested(self) -> bool:
        return self.hit_coordinates == self.coordinates
