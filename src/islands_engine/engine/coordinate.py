"""Board coordinates."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import InvalidCoordinate

BOARD_SIZE = 10
BOARD_RANGE = range(1, BOARD_SIZE + 1)


@dataclass(frozen=True, order=True)
class Coordinate:
    """Immutable, 1-based board coordinate.

    Construction is the only place bounds are checked; any Coordinate that
    exists lies on the 10x10 board.
    """

    row: int
    col: int

    def __post_init__(self) -> None:
        if not (_on_board(self.row) and _on_board(self.col)):
            raise InvalidCoordinate(self.row, self.col)

    def offset(self, delta_row: int, delta_col: int) -> Coordinate:
        """Return the coordinate shifted by the given deltas."""
        return Coordinate(self.row + delta_row, self.col + delta_col)


def _on_board(value: object) -> bool:
    # bool is an int subclass but never a valid index
    return isinstance(value, int) and not isinstance(value, bool) and value in BOARD_RANGE


def all_coordinates() -> list[Coordinate]:
    """Every coordinate on the board in row-major order."""
    return [Coordinate(row, col) for row in BOARD_RANGE for col in BOARD_RANGE]
