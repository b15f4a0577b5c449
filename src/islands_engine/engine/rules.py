"""Game-state machine deciding which actions are legal when."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, ClassVar, NoReturn, Optional, TypeAlias, Union

from islands_engine.telemetry import get_meter

from .errors import RuleViolation

logger = logging.getLogger(__name__)
meter = get_meter("islands_engine.engine.rules")

RULE_CHECK_COUNTER = meter.create_counter(
    "islands_engine_rule_checks",
    unit="1",
    description="Actions checked against the rules state machine",
)


class Player(Enum):
    """The two seats in a game."""

    PLAYER1 = "player1"
    PLAYER2 = "player2"

    def opponent(self) -> Player:
        """Return the opposing player."""
        return Player.PLAYER2 if self is Player.PLAYER1 else Player.PLAYER1


class RulesState(Enum):
    """Lifecycle of a game session."""

    INITIALIZED = "initialized"
    PLAYERS_SET = "players_set"
    PLAYER1_TURN = "player1_turn"
    PLAYER2_TURN = "player2_turn"
    GAME_OVER = "game_over"


class IslandsStatus(Enum):
    """Whether a player has locked in their island layout."""

    ISLANDS_NOT_SET = "islands_not_set"
    ISLANDS_SET = "islands_set"


@dataclass(frozen=True)
class AddPlayer:
    name: ClassVar[str] = "add_player"


@dataclass(frozen=True)
class PositionIslands:
    player: Player
    name: ClassVar[str] = "position_islands"


@dataclass(frozen=True)
class SetIslands:
    player: Player
    name: ClassVar[str] = "set_islands"


@dataclass(frozen=True)
class GuessCoordinate:
    """A turn taken by `player`; `win` reports whether the guess won the game."""

    player: Player
    win: bool = False
    name: ClassVar[str] = "guess_coordinate"


Action: TypeAlias = Union[AddPlayer, PositionIslands, SetIslands, GuessCoordinate]

_TURN_OWNER = {
    RulesState.PLAYER1_TURN: Player.PLAYER1,
    RulesState.PLAYER2_TURN: Player.PLAYER2,
}
_TURN_STATE = {player: state for state, player in _TURN_OWNER.items()}


def parse_action(name: str, player: Player | str | None = None, *, win: bool = False) -> Action:
    """Build an action from its wire name, e.g. ``parse_action("set_islands", "player1")``."""
    if name == AddPlayer.name:
        return AddPlayer()
    if player is None:
        raise ValueError(f"Action {name!r} needs a player.")
    player = Player(player)
    if name == PositionIslands.name:
        return PositionIslands(player)
    if name == SetIslands.name:
        return SetIslands(player)
    if name == GuessCoordinate.name:
        return GuessCoordinate(player, win=win)
    raise ValueError(f"Unknown action {name!r}.")


@dataclass(frozen=True)
class Rules:
    """Current game state plus each player's island status."""

    state: RulesState = RulesState.INITIALIZED
    player1: IslandsStatus = IslandsStatus.ISLANDS_NOT_SET
    player2: IslandsStatus = IslandsStatus.ISLANDS_NOT_SET

    def status(self, player: Player) -> IslandsStatus:
        return self.player1 if player is Player.PLAYER1 else self.player2

    def check(self, action: Action) -> Rules:
        """Return the rules after `action`, or raise RuleViolation."""
        transition = _TRANSITIONS.get((self.state, type(action)))
        updated = transition(self, action) if transition is not None else None
        if updated is None:
            self._reject(action)

        RULE_CHECK_COUNTER.add(1, attributes={"action": action.name, "result": "ok"})
        if updated.state is not self.state:
            logger.info(
                "rules_transition",
                extra={
                    "action": action.name,
                    "from_state": self.state.value,
                    "to_state": updated.state.value,
                },
            )
        return updated

    def permits(self, action: Action) -> bool:
        """True if `action` would be accepted in the current state."""
        transition = _TRANSITIONS.get((self.state, type(action)))
        return transition is not None and transition(self, action) is not None

    def require(self, action: Action) -> None:
        """Raise RuleViolation unless `action` is permitted; records no transition."""
        if not self.permits(action):
            self._reject(action)

    def _reject(self, action: Action) -> NoReturn:
        action_name = getattr(action, "name", repr(action))
        RULE_CHECK_COUNTER.add(1, attributes={"action": action_name, "result": "rejected"})
        logger.warning(
            "rules_rejected",
            extra={"state": self.state.value, "action": action_name},
        )
        raise RuleViolation(self.state, action)

    def _with_status(self, player: Player, status: IslandsStatus) -> Rules:
        if player is Player.PLAYER1:
            return replace(self, player1=status)
        return replace(self, player2=status)


def _add_player(rules: Rules, action: Action) -> Optional[Rules]:
    return replace(rules, state=RulesState.PLAYERS_SET)


def _position_islands(rules: Rules, action: PositionIslands) -> Optional[Rules]:
    if rules.status(action.player) is IslandsStatus.ISLANDS_SET:
        return None
    return rules


def _set_islands(rules: Rules, action: SetIslands) -> Optional[Rules]:
    rules = rules._with_status(action.player, IslandsStatus.ISLANDS_SET)
    if rules.player1 is rules.player2 is IslandsStatus.ISLANDS_SET:
        return replace(rules, state=RulesState.PLAYER1_TURN)
    return rules


def _guess_coordinate(rules: Rules, action: GuessCoordinate) -> Optional[Rules]:
    if action.player is not _TURN_OWNER[rules.state]:
        return None
    if action.win:
        return replace(rules, state=RulesState.GAME_OVER)
    return replace(rules, state=_TURN_STATE[action.player.opponent()])


# (state, action kind) pairs missing from this table are rejected.
_TRANSITIONS: dict[tuple[RulesState, type], Callable[[Rules, Action], Optional[Rules]]] = {
    (RulesState.INITIALIZED, AddPlayer): _add_player,
    (RulesState.PLAYERS_SET, PositionIslands): _position_islands,
    (RulesState.PLAYERS_SET, SetIslands): _set_islands,
    (RulesState.PLAYER1_TURN, GuessCoordinate): _guess_coordinate,
    (RulesState.PLAYER2_TURN, GuessCoordinate): _guess_coordinate,
}
