"""
Tests for the individual action cards.
"""

import pytest

from subway_deal import submit
from subway_deal.types import Color, Improvement


def test_power_broker_steals_one_card(empty_game, table):
    table.place("bob", "blue", "prop_a", "prop_c")
    table.hand("alice", "action_power_broker_1")

    result = submit(
        empty_game,
        "alice",
        "POWER_BROKER",
        {"cardId": "action_power_broker_1", "targetPlayerId": "bob", "color": "blue", "targetCardId": "prop_a"},
    )
    assert result.accepted
    # Nothing moves until the target answers
    assert empty_game.book.locate("prop_a") == ("bob", Color.BLUE)

    assert submit(empty_game, "bob", "ACCEPT").accepted
    assert empty_game.book.locate("prop_a") == ("alice", Color.BLUE)
    assert [c.id for c in empty_game.book.get_set("bob", Color.BLUE).cards] == ["prop_c"]


def test_power_broker_cannot_touch_complete_sets(empty_game, table):
    table.place("bob", "brown", "prop_j", "prop_z")
    table.hand("alice", "action_power_broker_1")

    result = submit(
        empty_game,
        "alice",
        "POWER_BROKER",
        {"cardId": "action_power_broker_1", "targetPlayerId": "bob", "color": "brown", "targetCardId": "prop_j"},
    )
    assert result.reason == "NotEligible"
    assert empty_game.ledger.actions_played == 0


def test_power_broker_target_must_exist(empty_game, table):
    table.place("bob", "blue", "prop_a")
    table.hand("alice", "action_power_broker_1")

    data = {"cardId": "action_power_broker_1", "targetPlayerId": "bob", "color": "blue", "targetCardId": "prop_c"}
    assert submit(empty_game, "alice", "POWER_BROKER", data).reason == "NotFound"
    data.update(targetPlayerId="alice", targetCardId="prop_a")
    assert submit(empty_game, "alice", "POWER_BROKER", data).reason == "NotEligible"


def test_line_closure_takes_complete_set_with_improvements(empty_game, table):
    table.place("bob", "darkblue", "prop_citi_field", "prop_yankee_stadium")
    empty_game.book.add_improvement("bob", Color.DARKBLUE, Improvement.EXPRESS)
    table.hand("alice", "action_line_closure_1")

    result = submit(
        empty_game,
        "alice",
        "LINE_CLOSURE",
        {"cardId": "action_line_closure_1", "targetPlayerId": "bob", "color": "darkblue"},
    )
    assert result.accepted
    assert submit(empty_game, "bob", "ACCEPT").accepted

    stolen = empty_game.book.get_set("alice", Color.DARKBLUE)
    assert stolen.is_complete
    assert stolen.improvements == [Improvement.EXPRESS]
    assert Color.DARKBLUE not in empty_game.players["bob"].properties


def test_line_closure_requires_complete_set(empty_game, table):
    table.place("bob", "darkblue", "prop_citi_field")
    table.hand("alice", "action_line_closure_1")

    result = submit(
        empty_game,
        "alice",
        "LINE_CLOSURE",
        {"cardId": "action_line_closure_1", "targetPlayerId": "bob", "color": "darkblue"},
    )
    assert result.reason == "NotEligible"


def test_service_change_swaps_cards(empty_game, table):
    table.place("alice", "brown", "prop_j")
    table.place("bob", "blue", "prop_a")
    table.hand("alice", "action_service_change_1")

    result = submit(
        empty_game,
        "alice",
        "SERVICE_CHANGE",
        {
            "cardId": "action_service_change_1",
            "targetPlayerId": "bob",
            "color": "blue",
            "targetCardId": "prop_a",
            "playerColor": "brown",
            "playerCardId": "prop_j",
        },
    )
    assert result.accepted
    assert submit(empty_game, "bob", "ACCEPT").accepted
    assert empty_game.book.locate("prop_a") == ("alice", Color.BLUE)
    assert empty_game.book.locate("prop_j") == ("bob", Color.BROWN)


def test_service_change_refuses_complete_sets(empty_game, table):
    table.place("alice", "brown", "prop_j", "prop_z")
    table.place("bob", "blue", "prop_a")
    table.hand("alice", "action_service_change_1")

    result = submit(
        empty_game,
        "alice",
        "SERVICE_CHANGE",
        {
            "cardId": "action_service_change_1",
            "targetPlayerId": "bob",
            "color": "blue",
            "targetCardId": "prop_a",
            "playerColor": "brown",
            "playerCardId": "prop_j",
        },
    )
    assert result.reason == "NotEligible"


def test_missed_your_train_demands_five(empty_game, table):
    table.bank("bob", "money_5_1", "money_1_1")
    table.hand("alice", "action_missed_train_1")

    result = submit(
        empty_game, "alice", "MISSED_YOUR_TRAIN", {"cardId": "action_missed_train_1", "targetPlayerId": "bob"}
    )
    assert result.accepted
    assert empty_game.pending_action.rent_amount == 5
    submit(empty_game, "bob", "ACCEPT")
    assert empty_game.players["alice"].bank_total == 6


def test_swipe_in_draws_two(empty_game, table, catalog):
    empty_game.draw_pile = [catalog.get("money_1_1"), catalog.get("money_1_2"), catalog.get("money_1_3")]
    table.hand("alice", "action_swipe_in_1")

    assert submit(empty_game, "alice", "SWIPE_IN", {"cardId": "action_swipe_in_1"}).accepted
    assert [c.id for c in empty_game.players["alice"].hand] == ["money_1_1", "money_1_2"]
    assert empty_game.discard_pile[-1].id == "action_swipe_in_1"


def test_card_must_match_action(empty_game, table):
    table.place("bob", "blue", "prop_a")
    table.hand("alice", "action_swipe_in_1")

    result = submit(
        empty_game,
        "alice",
        "POWER_BROKER",
        {"cardId": "action_swipe_in_1", "targetPlayerId": "bob", "color": "blue", "targetCardId": "prop_a"},
    )
    assert result.reason == "NotEligible"


def test_express_then_station(empty_game, table):
    table.place("alice", "yellow", "prop_n", "prop_q", "prop_r")
    table.hand("alice", "action_new_station_1", "action_express_service_1")

    result = submit(empty_game, "alice", "NEW_STATION", {"cardId": "action_new_station_1", "color": "yellow"})
    assert result.reason == "NotEligible"

    assert submit(empty_game, "alice", "EXPRESS_SERVICE", {"cardId": "action_express_service_1", "color": "yellow"}).accepted
    assert submit(empty_game, "alice", "NEW_STATION", {"cardId": "action_new_station_1", "color": "yellow"}).accepted
    assert empty_game.book.rent_for("alice", Color.YELLOW) == 6 + 3 + 4
    assert empty_game.players["alice"].hand == []


@pytest.mark.parametrize(
    "color,cards",
    [
        ("railroad", ("prop_lirr", "prop_metro_north", "prop_nj_transit", "prop_path")),
        ("green", ("prop_penn", "prop_atlantic")),
    ],
)
def test_express_not_allowed(empty_game, table, color, cards):
    table.place("alice", color, *cards)
    table.hand("alice", "action_express_service_1")
    result = submit(empty_game, "alice", "EXPRESS_SERVICE", {"cardId": "action_express_service_1", "color": color})
    assert result.reason == "NotEligible"


def test_banking_rules(empty_game, table):
    table.hand("alice", "action_power_broker_1", "prop_j", "wild_fulton_1")

    assert submit(empty_game, "alice", "PLAY_MONEY", {"cardId": "prop_j"}).reason == "CardNotBankable"
    assert submit(empty_game, "alice", "PLAY_MONEY", {"cardId": "wild_fulton_1"}).reason == "CardNotBankable"

    assert submit(empty_game, "alice", "PLAY_MONEY", {"cardId": "action_power_broker_1"}).accepted
    assert empty_game.players["alice"].bank_total == 3


def test_play_property_colors(empty_game, table):
    table.hand("alice", "prop_j", "wild_times_square_1")

    assert submit(empty_game, "alice", "PLAY_PROPERTY", {"cardId": "wild_times_square_1"}).reason == "MalformedPayload"
    assert (
        submit(empty_game, "alice", "PLAY_PROPERTY", {"cardId": "wild_times_square_1", "color": "green"}).reason
        == "InvalidPlacement"
    )
    assert submit(empty_game, "alice", "PLAY_PROPERTY", {"cardId": "wild_times_square_1", "color": "RED"}).accepted
    assert submit(empty_game, "alice", "PLAY_PROPERTY", {"cardId": "prop_j"}).accepted

    assert empty_game.book.locate("wild_times_square_1") == ("alice", Color.RED)
    assert empty_game.book.locate("prop_j") == ("alice", Color.BROWN)


def test_play_property_rejects_other_cards(empty_game, table):
    table.hand("alice", "money_1_1")
    result = submit(empty_game, "alice", "PLAY_PROPERTY", {"cardId": "money_1_1"})
    assert result.reason == "NotEligible"
