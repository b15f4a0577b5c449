"""Two-player game session wiring boards, guesses and rules together."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from islands_engine.telemetry import get_meter, get_tracer

from .board import Board, BoardGuess
from .coordinate import Coordinate
from .errors import (
    DuplicateGuess,
    InvalidCoordinate,
    InvalidIslandPosition,
    InvalidIslandType,
    IslandsNotPositioned,
)
from .guesses import Guesses
from .island import Island, IslandType
from .rules import (
    AddPlayer,
    GuessCoordinate,
    Player,
    PositionIslands,
    Rules,
    RulesState,
    SetIslands,
)

logger = logging.getLogger(__name__)
tracer = get_tracer("islands_engine.engine.session")
meter = get_meter("islands_engine.engine.session")

ACTION_COUNTER = meter.create_counter(
    "islands_engine_session_actions",
    unit="1",
    description="Actions applied to a GameSession",
)


@dataclass
class PlayerSeat:
    """Everything one player owns in a session."""

    name: str | None
    board: Board
    guesses: Guesses


@dataclass(frozen=True)
class SessionSnapshot:
    """Immutable view of a session for state queries."""

    # holds dicts, so snapshots compare by value but cannot be hashed
    __hash__ = None  # type: ignore[assignment]

    state: RulesState
    rules: Rules
    names: dict[Player, str | None]
    boards: dict[Player, Board]
    guesses: dict[Player, Guesses]
    winner: Player | None


class GameSession:
    """Applies player actions in order, consulting the rules before each one."""

    def __init__(self, player1_name: str) -> None:
        self.rules = Rules()
        self.seats: dict[Player, PlayerSeat] = {
            player: PlayerSeat(name=None, board=Board(owner=player.value), guesses=Guesses())
            for player in Player
        }
        self.seats[Player.PLAYER1].name = player1_name
        self.winner: Player | None = None

    @property
    def state(self) -> RulesState:
        return self.rules.state

    def add_player(self, name: str) -> None:
        """Seat the second player."""
        with tracer.start_as_current_span("session.add_player"):
            self.rules = self.rules.check(AddPlayer())
            self.seats[Player.PLAYER2].name = name
            ACTION_COUNTER.add(1, attributes={"action": AddPlayer.name})
            logger.info("player_added", extra={"player": Player.PLAYER2.value})

    def position_island(
        self, player: Player, island_type: IslandType | str, row: int, col: int
    ) -> Island:
        """Place (or move) one of `player`'s islands with its upper-left cell at (row, col)."""
        with tracer.start_as_current_span("session.position_island") as span:
            span.set_attribute("player", player.value)
            span.set_attribute("row", row)
            span.set_attribute("col", col)
            self.rules.require(PositionIslands(player))
            try:
                island = Island.create(island_type, Coordinate(row, col))
            except (InvalidCoordinate, InvalidIslandPosition, InvalidIslandType) as exc:
                logger.warning(
                    "island_position_rejected",
                    extra={
                        "owner": player.value,
                        "island_type": getattr(island_type, "value", island_type),
                        "row": row,
                        "col": col,
                        "reason": type(exc).__name__,
                    },
                )
                raise
            seat = self.seats[player]
            seat.board = seat.board.position_island(island_type, island)
            ACTION_COUNTER.add(1, attributes={"action": PositionIslands.name})
            return island

    def set_islands(self, player: Player) -> None:
        """Lock in `player`'s layout once every island type is positioned."""
        with tracer.start_as_current_span("session.set_islands") as span:
            span.set_attribute("player", player.value)
            self.rules.require(SetIslands(player))
            board = self.seats[player].board
            if not board.all_islands_positioned():
                missing = [t.value for t in IslandType.all() if t not in board.islands]
                logger.warning(
                    "set_islands_rejected",
                    extra={"player": player.value, "missing": missing},
                )
                raise IslandsNotPositioned(
                    f"{player.value} has not positioned: {', '.join(missing)}."
                )
            self.rules = self.rules.check(SetIslands(player))
            ACTION_COUNTER.add(1, attributes={"action": SetIslands.name})
            logger.info(
                "islands_set", extra={"player": player.value, "state": self.rules.state.value}
            )

    def guess_coordinate(self, player: Player, row: int, col: int) -> BoardGuess:
        """Guess (row, col) on the opponent's board for `player`'s turn."""
        with tracer.start_as_current_span("session.guess_coordinate") as span:
            span.set_attribute("player", player.value)
            span.set_attribute("row", row)
            span.set_attribute("col", col)
            self.rules.require(GuessCoordinate(player))
            try:
                coordinate = Coordinate(row, col)
            except InvalidCoordinate:
                logger.warning(
                    "guess_rejected",
                    extra={"player": player.value, "row": row, "col": col},
                )
                raise
            seat = self.seats[player]
            if seat.guesses.guessed(coordinate):
                logger.error(
                    "guess_duplicate",
                    extra={"player": player.value, "row": row, "col": col},
                )
                raise DuplicateGuess(f"{player.value} already guessed ({row}, {col}).")

            opponent = self.seats[player.opponent()]
            result = opponent.board.guess(coordinate)
            self.rules = self.rules.check(GuessCoordinate(player, win=result.win))
            opponent.board = result.board
            seat.guesses = seat.guesses.record(result.outcome, coordinate)

            span.set_attribute("guess.outcome", result.outcome.value)
            ACTION_COUNTER.add(
                1,
                attributes={"action": GuessCoordinate.name, "outcome": result.outcome.value},
            )
            if result.win:
                self.winner = player
                span.set_attribute("game.winner", player.value)
                logger.info("game_won", extra={"winner": player.value})
            return result

    def snapshot(self) -> SessionSnapshot:
        """Return an immutable view of the current session."""
        return SessionSnapshot(
            state=self.rules.state,
            rules=self.rules,
            names={player: seat.name for player, seat in self.seats.items()},
            boards={player: seat.board for player, seat in self.seats.items()},
            guesses={player: seat.guesses for player, seat in self.seats.items()},
            winner=self.winner,
        )
