"""Rule and geometry core of the islands game."""

from .board import Board, BoardGuess
from .coordinate import BOARD_SIZE, Coordinate, all_coordinates
from .errors import (
    DuplicateGuess,
    InvalidCoordinate,
    InvalidIslandPosition,
    InvalidIslandType,
    IslandsEngineError,
    IslandsNotPositioned,
    OverlappingIsland,
    RuleViolation,
)
from .guesses import Guesses
from .island import GuessOutcome, Island, IslandType
from .rules import (
    AddPlayer,
    GuessCoordinate,
    IslandsStatus,
    Player,
    PositionIslands,
    Rules,
    RulesState,
    SetIslands,
    parse_action,
)
from .session import GameSession, SessionSnapshot

__all__ = [
    "AddPlayer",
    "BOARD_SIZE",
    "Board",
    "BoardGuess",
    "Coordinate",
    "DuplicateGuess",
    "GameSession",
    "GuessCoordinate",
    "GuessOutcome",
    "Guesses",
    "InvalidCoordinate",
    "InvalidIslandPosition",
    "InvalidIslandType",
    "Island",
    "IslandType",
    "IslandsEngineError",
    "IslandsNotPositioned",
    "IslandsStatus",
    "OverlappingIsland",
    "Player",
    "PositionIslands",
    "RuleViolation",
    "Rules",
    "RulesState",
    "SessionSnapshot",
    "SetIslands",
    "all_coordinates",
    "parse_action",
]
