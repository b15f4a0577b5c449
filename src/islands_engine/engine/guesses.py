"""A player's record of guesses against the opponent's board."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from .coordinate import Coordinate
from .island import GuessOutcome


@dataclass(frozen=True)
class Guesses:
    """Coordinates guessed so far, split into hits and misses."""

    hits: frozenset[Coordinate] = field(default_factory=frozenset)
    misses: frozenset[Coordinate] = field(default_factory=frozenset)

    def record(self, outcome: GuessOutcome, coordinate: Coordinate) -> Guesses:
        """Return a copy with `coordinate` added to the set for `outcome`.

        The two sets are not reconciled against each other; callers record a
        coordinate once.
        """
        if outcome is GuessOutcome.HIT:
            return replace(self, hits=self.hits | {coordinate})
        return replace(self, misses=self.misses | {coordinate})

    def guessed(self, coordinate: Coordinate) -> bool:
        return coordinate in self.hits or coordinate in self.misses

    @property
    def total(self) -> int:
        return len(self.hits) + len(self.misses)
