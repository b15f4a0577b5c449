"""Single-player board: positioned islands and guess resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from islands_engine.telemetry import get_meter, get_tracer

from .coordinate import Coordinate
from .errors import OverlappingIsland
from .island import GuessOutcome, Island, IslandType

logger = logging.getLogger(__name__)
tracer = get_tracer("islands_engine.engine.board")
meter = get_meter("islands_engine.engine.board")

PLACEMENT_COUNTER = meter.create_counter(
    "islands_engine_island_placements",
    unit="1",
    description="Number of attempted island placements",
)

GUESS_COUNTER = meter.create_counter(
    "islands_engine_guesses",
    unit="1",
    description="Guesses resolved against a board",
)


@dataclass(frozen=True)
class BoardGuess:
    """Outcome of a guess against a board, plus the board it produced."""

    outcome: GuessOutcome
    forested: IslandType | None
    win: bool
    board: Board

    @property
    def hit(self) -> bool:
        return self.outcome is GuessOutcome.HIT


@dataclass(frozen=True)
class Board:
    """One player's islands, keyed by type.

    Boards are values: placing an island or resolving a guess returns a new
    board and leaves this one untouched. Boards compare by value but are not
    hashable.
    """

    __hash__ = None  # type: ignore[assignment]

    _islands: Mapping[IslandType, Island] = field(default_factory=dict, repr=False)
    owner: str = "unknown"

    def __post_init__(self) -> None:
        object.__setattr__(self, "_islands", MappingProxyType(dict(self._islands)))

    @property
    def islands(self) -> Mapping[IslandType, Island]:
        """Read-only view of the positioned islands."""
        return self._islands

    def __repr__(self) -> str:
        placed = ", ".join(island_type.value for island_type in self._islands)
        return f"Board(owner={self.owner!r}, islands=[{placed}])"

    def position_island(self, island_type: IslandType | str, island: Island) -> Board:
        """Return a board with `island` positioned as `island_type`.

        Re-positioning a type replaces its previous island; touching any other
        type's island is rejected.
        """
        island_type = IslandType.parse(island_type)
        with tracer.start_as_current_span("board.position_island") as span:
            span.set_attribute("island.type", island_type.value)
            span.set_attribute("island.size", len(island.coordinates))
            span.set_attribute("board.owner", self.owner)
            clash = self._overlapping_type(island_type, island)
            if clash is not None:
                PLACEMENT_COUNTER.add(1, attributes={"result": "overlap", "owner": self.owner})
                logger.warning(
                    "island_position_rejected",
                    extra={
                        "owner": self.owner,
                        "island_type": island_type.value,
                        "overlaps": clash.value,
                    },
                )
                raise OverlappingIsland(
                    f"{island_type.value} overlaps the {clash.value} island already on the board."
                )

            PLACEMENT_COUNTER.add(1, attributes={"result": "success", "owner": self.owner})
            logger.info(
                "island_positioned",
                extra={
                    "owner": self.owner,
                    "island_type": island_type.value,
                    "replaced": island_type in self._islands,
                },
            )
            return self._with_island(island_type, island)

    def all_islands_positioned(self) -> bool:
        """True once every island type has been positioned."""
        return all(island_type in self._islands for island_type in IslandType.all())

    def guess(self, coordinate: Coordinate) -> BoardGuess:
        """Resolve a guess against the islands on this board."""
        with tracer.start_as_current_span("board.guess") as span:
            span.set_attribute("guess.row", coordinate.row)
            span.set_attribute("guess.col", coordinate.col)
            span.set_attribute("board.owner", self.owner)

            # Positioning rejects overlaps, so at most one island can match.
            for island_type, island in self._islands.items():
                outcome, updated = island.guess(coordinate)
                if outcome is GuessOutcome.MISS:
                    continue

                board = self._with_island(island_type, updated)
                forested = island_type if updated.is_forested() else None
                win = board.all_forested()
                span.set_attribute("guess.outcome", "hit")
                span.set_attribute("guess.win", win)
                GUESS_COUNTER.add(1, attributes={"outcome": "hit", "owner": self.owner})
                logger.info(
                    "guess_hit",
                    extra={
                        "row": coordinate.row,
                        "col": coordinate.col,
                        "island_type": island_type.value,
                        "owner": self.owner,
                    },
                )
                if forested is not None:
                    logger.info(
                        "island_forested",
                        extra={"island_type": island_type.value, "owner": self.owner},
                    )
                return BoardGuess(GuessOutcome.HIT, forested, win, board)

            span.set_attribute("guess.outcome", "miss")
            GUESS_COUNTER.add(1, attributes={"outcome": "miss", "owner": self.owner})
            logger.info(
                "guess_miss",
                extra={"row": coordinate.row, "col": coordinate.col, "owner": self.owner},
            )
            return BoardGuess(GuessOutcome.MISS, None, False, self)

    def all_forested(self) -> bool:
        """True when every island on the board has been completely hit."""
        return all(island.is_forested() for island in self._islands.values())

    def forested_types(self) -> list[IslandType]:
        return [
            island_type
            for island_type in IslandType.all()
            if island_type in self._islands and self._islands[island_type].is_forested()
        ]

    def occupied_coordinates(self) -> frozenset[Coordinate]:
        coords: set[Coordinate] = set()
        for island in self._islands.values():
            coords.update(island.coordinates)
        return frozenset(coords)

    def _overlapping_type(self, island_type: IslandType, island: Island) -> IslandType | None:
        for existing_type, existing in self._islands.items():
            if existing_type is not island_type and existing.overlaps(island):
                return existing_type
        return None

    def _with_island(self, island_type: IslandType, island: Island) -> Board:
        islands = dict(self._islands)
        islands[island_type] = island
        return Board(islands, owner=self.owner)
