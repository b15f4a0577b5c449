"""Tests for the per-player guess record."""

from islands_engine.engine.coordinate import Coordinate
from islands_engine.engine.guesses import Guesses
from islands_engine.engine.island import GuessOutcome


def test_new_guesses_are_empty() -> None:
    guesses = Guesses()
    assert guesses.hits == frozenset()
    assert guesses.misses == frozenset()
    assert guesses.total == 0


def test_record_hit_and_miss() -> None:
    hit = Guesses().record(GuessOutcome.HIT, Coordinate(1, 2))
    assert hit.hits == {Coordinate(1, 2)}
    assert hit.misses == frozenset()

    miss = Guesses().record(GuessOutcome.MISS, Coordinate(1, 2))
    assert miss.misses == {Coordinate(1, 2)}
    assert miss.hits == frozenset()


def test_record_is_idempotent_and_pure() -> None:
    original = Guesses()
    once = original.record(GuessOutcome.HIT, Coordinate(3, 3))
    twice = once.record(GuessOutcome.HIT, Coordinate(3, 3))
    assert twice == once
    assert original.total == 0


def test_guessed_checks_both_sets() -> None:
    guesses = (
        Guesses()
        .record(GuessOutcome.HIT, Coordinate(1, 1))
        .record(GuessOutcome.MISS, Coordinate(2, 2))
    )
    assert guesses.guessed(Coordinate(1, 1))
    assert guesses.guessed(Coordinate(2, 2))
    assert not guesses.guessed(Coordinate(3, 3))
    assert guesses.total == 2
