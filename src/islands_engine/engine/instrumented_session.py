"""GameSession with game-level tracing, metrics and logging."""

from __future__ import annotations

import itertools
import time

from islands_engine.engine.board import BoardGuess
from islands_engine.engine.errors import IslandsEngineError
from islands_engine.engine.island import Island, IslandType
from islands_engine.engine.rules import Player, RulesState
from islands_engine.engine.session import GameSession
from islands_engine.telemetry import get_logger, get_tracer, record_game_metric

_SESSION_IDS = itertools.count(1)


class InstrumentedGameSession(GameSession):
    """Wraps GameSession in a per-game span and records game metrics."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._logger = get_logger("islands_engine.engine")
        self._tracer = get_tracer("islands_engine.engine")
        self.session_id = next(_SESSION_IDS)
        self._game_span_cm = None
        self._game_span = None
        self._started_at: float | None = None

    def add_player(self, name: str) -> None:
        with self._tracer.start_as_current_span("islands_engine.session.add_player") as span:
            span.set_attribute("session.id", self.session_id)
            try:
                super().add_player(name)
            except IslandsEngineError as exc:
                self._reject(span, exc, Player.PLAYER2, "add_player")
                raise

    def position_island(
        self, player: Player, island_type: IslandType | str, row: int, col: int
    ) -> Island:
        with self._tracer.start_as_current_span("islands_engine.session.position_island") as span:
            span.set_attribute("session.id", self.session_id)
            span.set_attribute("player", player.name)
            try:
                return super().position_island(player, island_type, row, col)
            except IslandsEngineError as exc:
                self._reject(span, exc, player, "position_island")
                raise

    def set_islands(self, player: Player) -> None:
        with self._tracer.start_as_current_span("islands_engine.session.set_islands") as span:
            span.set_attribute("session.id", self.session_id)
            span.set_attribute("player", player.name)
            try:
                super().set_islands(player)
            except IslandsEngineError as exc:
                self._reject(span, exc, player, "set_islands")
                raise
        # the game span is a sibling of set_islands, not its child
        if self.state is RulesState.PLAYER1_TURN:
            self._start_game_span()
            record_game_metric("islands_engine_games_started_total", 1)
            self._logger.info("Session %d: both players set, game started", self.session_id)

    def guess_coordinate(self, player: Player, row: int, col: int) -> BoardGuess:
        with self._tracer.start_as_current_span("islands_engine.session.guess") as span:
            span.set_attribute("session.id", self.session_id)
            span.set_attribute("player", player.name)
            span.set_attribute("coord.row", row)
            span.set_attribute("coord.col", col)

            try:
                result = super().guess_coordinate(player, row, col)
            except IslandsEngineError as exc:
                self._reject(span, exc, player, "guess_coordinate")
                raise

            span.set_attribute("guess_outcome", result.outcome.name)
            span.set_attribute("forested", result.forested.value if result.forested else "")
            record_game_metric(
                "islands_engine_guesses_by_result_total",
                1,
                {"player": player.name, "result": result.outcome.value},
            )
            if result.forested is not None:
                record_game_metric(
                    "islands_engine_islands_forested_total",
                    1,
                    {"player": player.name, "island_type": result.forested.value},
                )

            self._logger.info(
                "guess player=%s coord=(%d,%d) outcome=%s",
                player.name,
                row,
                col,
                result.outcome.name,
            )

            if result.win:
                span.set_attribute("winner", player.name)
                self._finish_game()
            return result

    def _reject(self, span, exc: Exception, player: Player, action: str) -> None:
        record_game_metric(
            "islands_engine_rejected_actions_total",
            1,
            {"player": player.name, "action": action, "reason": type(exc).__name__},
        )
        span.record_exception(exc)
        span.set_attribute("error", True)
        self._logger.error("Rejected %s from %s: %s", action, player.name, exc)

    def _start_game_span(self) -> None:
        self._close_game_span()
        self._started_at = time.perf_counter()
        self._game_span_cm = self._tracer.start_as_current_span("islands_engine.game")
        self._game_span = self._game_span_cm.__enter__()
        self._game_span.set_attribute("session.id", self.session_id)

    def _finish_game(self) -> None:
        duration = (time.perf_counter() - self._started_at) if self._started_at else 0.0
        total_guesses = sum(seat.guesses.total for seat in self.seats.values())
        winner = self.winner.name if self.winner else "unknown"

        record_game_metric("islands_engine_games_completed_total", 1, {"winner": winner})
        record_game_metric("islands_engine_game_duration_seconds", duration, {"winner": winner})

        with self._tracer.start_as_current_span("islands_engine.game_complete") as span:
            span.set_attribute("session.id", self.session_id)
            span.set_attribute("winner", winner)
            span.set_attribute("guesses", total_guesses)
            span.set_attribute("duration_ms", duration * 1000)

        if self._game_span is not None:
            self._game_span.set_attribute("winner", winner)
            self._game_span.set_attribute("guesses", total_guesses)

        self._logger.info(
            "Game finished. winner=%s guesses=%d duration_s=%.3f", winner, total_guesses, duration
        )
        self._close_game_span()

    def _close_game_span(self) -> None:
        if self._game_span_cm is not None:
            self._game_span_cm.__exit__(None, None, None)
            self._game_span_cm = None
            self._game_span = None
