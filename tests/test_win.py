"""
Tests for win detection.
"""

from subway_deal import serialize_view, submit
from subway_deal.events import EventType
from subway_deal.types import GamePhase


def _two_complete_sets(table, player_id):
    table.place(player_id, "brown", "prop_j", "prop_z")
    table.place(player_id, "darkblue", "prop_citi_field", "prop_yankee_stadium")


def test_third_complete_set_wins(empty_game, table):
    _two_complete_sets(table, "alice")
    table.place("alice", "yellow", "prop_n", "prop_q")
    table.hand("alice", "prop_r", "money_1_1")

    result = submit(empty_game, "alice", "PLAY_PROPERTY", {"cardId": "prop_r"})
    assert result.accepted
    assert empty_game.winner == "alice"
    assert empty_game.phase == GamePhase.GAME_OVER
    assert any(e["event_type"] == EventType.GAME_END.value for e in result.events)

    # No further submissions succeed
    assert submit(empty_game, "alice", "PLAY_MONEY", {"cardId": "money_1_1"}).reason == "GameAlreadyOver"
    assert submit(empty_game, "bob", "END_TURN").reason == "GameAlreadyOver"


def test_two_sets_do_not_win(empty_game, table):
    _two_complete_sets(table, "alice")
    table.hand("alice", "prop_n")
    submit(empty_game, "alice", "PLAY_PROPERTY", {"cardId": "prop_n"})
    assert empty_game.winner is None


def test_line_closure_can_win(empty_game, table):
    _two_complete_sets(table, "alice")
    table.place("bob", "utility", "prop_g", "prop_l")
    table.hand("alice", "action_line_closure_1")

    submit(
        empty_game,
        "alice",
        "LINE_CLOSURE",
        {"cardId": "action_line_closure_1", "targetPlayerId": "bob", "color": "utility"},
    )
    assert empty_game.winner is None

    assert submit(empty_game, "bob", "ACCEPT").accepted
    assert empty_game.winner == "alice"
    assert empty_game.pending_action is None


def test_win_mid_response_abandons_remaining_targets(empty_game3, table3):
    game = empty_game3
    _two_complete_sets(table3, "alice")
    table3.place("alice", "green", "prop_penn", "prop_grand_central")
    table3.place("bob", "green", "prop_atlantic")
    table3.bank("carol", "money_2_1")
    table3.hand("alice", "action_its_my_stop_1")

    submit(game, "alice", "ITS_MY_STOP", {"cardId": "action_its_my_stop_1"})
    assert game.pending_action.targets == ["bob", "carol"]

    # Bob has no bank, so he pays with his green card and completes Alice's set
    assert submit(game, "bob", "ACCEPT").accepted
    assert game.winner == "alice"
    assert game.pending_action is None
    assert game.phase == GamePhase.GAME_OVER

    assert submit(game, "carol", "ACCEPT").reason == "GameAlreadyOver"
    assert game.players["carol"].bank_total == 2


def test_winner_in_view(empty_game, table):
    _two_complete_sets(table, "alice")
    table.place("alice", "utility", "prop_g")
    table.hand("alice", "prop_l")
    submit(empty_game, "alice", "PLAY_PROPERTY", {"cardId": "prop_l"})

    view = serialize_view(empty_game, "bob")
    assert view["winner"] == {"id": "alice", "name": "Alice"}
    assert view["phase"] == "game_over"
