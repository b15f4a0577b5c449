"""Rejections raised by the islands engine."""

from __future__ import annotations

from typing import Any


class IslandsEngineError(ValueError):
    """Base class for every rejection the engine can produce."""


class InvalidCoordinate(IslandsEngineError):
    """Row or column lies outside the board."""

    def __init__(self, row: Any, col: Any) -> None:
        super().__init__(f"Coordinate ({row!r}, {col!r}) is off the board.")
        self.row = row
        self.col = col


class InvalidIslandType(IslandsEngineError):
    """Unknown island type tag."""

    def __init__(self, island_type: Any) -> None:
        super().__init__(f"Unknown island type: {island_type!r}.")
        self.island_type = island_type


class InvalidIslandPosition(IslandsEngineError):
    """Part of an island's shape would fall off the board."""


class OverlappingIsland(IslandsEngineError):
    """Island intersects a different island already on the board."""


class IslandsNotPositioned(IslandsEngineError):
    """A player tried to set islands before positioning every type."""


class DuplicateGuess(IslandsEngineError):
    """A player guessed the same coordinate twice."""


class RuleViolation(IslandsEngineError):
    """Action is not permitted in the current rules state."""

    def __init__(self, state: Any, action: Any) -> None:
        super().__init__(f"{action!r} is not permitted in state {state!r}.")
        self.state = state
        self.action = action
