"""Tests for the rules state machine."""

import logging

import pytest

from islands_engine.engine.errors import RuleViolation
from islands_engine.engine.rules import (
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

SET = IslandsStatus.ISLANDS_SET
NOT_SET = IslandsStatus.ISLANDS_NOT_SET

ALL_ACTIONS = [
    AddPlayer(),
    *(PositionIslands(player) for player in Player),
    *(SetIslands(player) for player in Player),
    *(GuessCoordinate(player, win=win) for player in Player for win in (False, True)),
]

ALL_RULES = [
    Rules(state=state, player1=p1, player2=p2)
    for state in RulesState
    for p1 in IslandsStatus
    for p2 in IslandsStatus
]


def expected_next(rules: Rules, action) -> Rules | None:
    """Independent statement of the legal moves, used to check the table."""
    state = rules.state
    if state is RulesState.INITIALIZED and isinstance(action, AddPlayer):
        return Rules(RulesState.PLAYERS_SET, rules.player1, rules.player2)
    if state is RulesState.PLAYERS_SET and isinstance(action, PositionIslands):
        return rules if rules.status(action.player) is NOT_SET else None
    if state is RulesState.PLAYERS_SET and isinstance(action, SetIslands):
        p1 = SET if action.player is Player.PLAYER1 else rules.player1
        p2 = SET if action.player is Player.PLAYER2 else rules.player2
        next_state = RulesState.PLAYER1_TURN if p1 is p2 is SET else RulesState.PLAYERS_SET
        return Rules(next_state, p1, p2)
    if isinstance(action, GuessCoordinate):
        turns = {
            (RulesState.PLAYER1_TURN, Player.PLAYER1): RulesState.PLAYER2_TURN,
            (RulesState.PLAYER2_TURN, Player.PLAYER2): RulesState.PLAYER1_TURN,
        }
        if (state, action.player) in turns:
            next_state = RulesState.GAME_OVER if action.win else turns[(state, action.player)]
            return Rules(next_state, rules.player1, rules.player2)
    return None


def test_new_rules() -> None:
    rules = Rules()
    assert rules.state is RulesState.INITIALIZED
    assert rules.player1 is NOT_SET
    assert rules.player2 is NOT_SET


def test_add_player() -> None:
    rules = Rules().check(AddPlayer())
    assert rules == Rules(state=RulesState.PLAYERS_SET)


def test_position_islands_allowed_until_set() -> None:
    rules = Rules(state=RulesState.PLAYERS_SET)
    assert rules.check(PositionIslands(Player.PLAYER1)) == rules

    locked = Rules(state=RulesState.PLAYERS_SET, player1=SET)
    with pytest.raises(RuleViolation):
        locked.check(PositionIslands(Player.PLAYER1))
    assert locked.check(PositionIslands(Player.PLAYER2)) == locked


def test_set_islands_for_both_players_starts_the_game() -> None:
    rules = Rules(state=RulesState.PLAYERS_SET)
    rules = rules.check(SetIslands(Player.PLAYER1))
    assert rules == Rules(state=RulesState.PLAYERS_SET, player1=SET, player2=NOT_SET)
    rules = rules.check(SetIslands(Player.PLAYER2))
    assert rules == Rules(state=RulesState.PLAYER1_TURN, player1=SET, player2=SET)


def test_turns_alternate_until_a_win() -> None:
    rules = Rules(state=RulesState.PLAYER1_TURN, player1=SET, player2=SET)
    rules = rules.check(GuessCoordinate(Player.PLAYER1))
    assert rules.state is RulesState.PLAYER2_TURN
    with pytest.raises(RuleViolation):
        rules.check(GuessCoordinate(Player.PLAYER1))
    rules = rules.check(GuessCoordinate(Player.PLAYER2))
    assert rules.state is RulesState.PLAYER1_TURN
    rules = rules.check(GuessCoordinate(Player.PLAYER1, win=True))
    assert rules.state is RulesState.GAME_OVER


def test_game_over_rejects_everything() -> None:
    rules = Rules(state=RulesState.GAME_OVER, player1=SET, player2=SET)
    for action in ALL_ACTIONS:
        assert not rules.permits(action)
        with pytest.raises(RuleViolation):
            rules.check(action)


def test_rule_violation_carries_state_and_action() -> None:
    action = SetIslands(Player.PLAYER1)
    with pytest.raises(RuleViolation) as excinfo:
        Rules().check(action)
    assert excinfo.value.state is RulesState.INITIALIZED
    assert excinfo.value.action == action


@pytest.mark.parametrize("rules", ALL_RULES, ids=lambda r: f"{r.state.value}-{r.player1.value}-{r.player2.value}")
@pytest.mark.parametrize("action", ALL_ACTIONS, ids=repr)
def test_transition_table_is_exhaustive(rules: Rules, action) -> None:
    expected = expected_next(rules, action)
    assert rules.permits(action) is (expected is not None)
    if expected is None:
        with pytest.raises(RuleViolation):
            rules.check(action)
    else:
        assert rules.check(action) == expected


def test_parse_action_from_wire_names() -> None:
    assert parse_action("add_player") == AddPlayer()
    assert parse_action("position_islands", "player1") == PositionIslands(Player.PLAYER1)
    assert parse_action("set_islands", Player.PLAYER2) == SetIslands(Player.PLAYER2)
    assert parse_action("guess_coordinate", "player2", win=True) == GuessCoordinate(
        Player.PLAYER2, win=True
    )
    with pytest.raises(ValueError):
        parse_action("set_islands")
    with pytest.raises(ValueError):
        parse_action("fire", "player1")
    with pytest.raises(ValueError):
        parse_action("set_islands", "player3")


def test_player_opponent() -> None:
    assert Player.PLAYER1.opponent() is Player.PLAYER2
    assert Player.PLAYER2.opponent() is Player.PLAYER1


@pytest.mark.parametrize("action", ["add_player", None, ("set_islands", "player1")])
def test_unknown_actions_are_rejected(action) -> None:
    for rules in ALL_RULES:
        assert not rules.permits(action)
        with pytest.raises(RuleViolation):
            rules.check(action)


def test_require_checks_without_transition(caplog: pytest.LogCaptureFixture) -> None:
    rules = Rules(state=RulesState.PLAYER1_TURN, player1=SET, player2=SET)
    with caplog.at_level(logging.INFO, logger="islands_engine.engine.rules"):
        assert rules.require(GuessCoordinate(Player.PLAYER1)) is None
        with pytest.raises(RuleViolation):
            rules.require(GuessCoordinate(Player.PLAYER2))

    messages = [record.getMessage() for record in caplog.records]
    assert "rules_transition" not in messages
    assert messages == ["rules_rejected"]
