from subway_deal import serialize_view, submit


def test_basic_view_structure(basic_game):
    view = serialize_view(basic_game, "alice")

    assert view["currentPlayer"] == "alice"
    assert view["maxActionsPerTurn"] == 3
    assert view["actionsPlayedThisTurn"] == 0
    assert view["pendingAction"] is None
    assert view["winner"] is None
    assert view["phase"] == "playing"
    assert [p["id"] for p in view["players"]] == ["alice", "bob"]

    # No deck order exposed, only counts
    assert view["drawPileCount"] == len(basic_game.draw_pile)
    assert "drawPile" not in view


def test_hands_are_private(basic_game):
    view = serialize_view(basic_game, "alice")
    alice, bob = view["players"]

    assert len(alice["hand"]) == 7
    assert "handCount" not in alice
    assert bob["handCount"] == 5
    assert "hand" not in bob

    card = alice["hand"][0]
    assert {"id", "type", "name", "value"} <= set(card)


def test_view_without_viewer_hides_every_hand(basic_game):
    view = serialize_view(basic_game)
    assert all("hand" not in p for p in view["players"])


def test_properties_in_view(empty_game, table):
    table.place("alice", "brown", "prop_j", "prop_z")
    view = serialize_view(empty_game, "bob")
    alice = view["players"][0]

    assert alice["completeSets"] == 1
    assert alice["properties"] == [
        {
            "color": "brown",
            "cardCount": 2,
            "cards": ["prop_j", "prop_z"],
            "complete": True,
            "rent": 2,
            "improvements": [],
        }
    ]


def test_pending_action_in_view(empty_game, table):
    table.place("alice", "yellow", "prop_n")
    table.bank("bob", "money_3_1")
    table.hand("alice", "rent_red_yellow_1")
    submit(empty_game, "alice", "PLAY_RENT", {"cardId": "rent_red_yellow_1", "color": "yellow"})

    view = serialize_view(empty_game, "bob")
    assert view["pendingAction"] == {
        "type": "PLAY_RENT",
        "sourcePlayer": "alice",
        "targets": ["bob"],
        "rentAmount": 2,
        "rentColor": "yellow",
    }
    assert view["phase"] == "awaiting_response"
    assert view["actionsPlayedThisTurn"] == 1
    assert view["players"][1]["bankTotal"] == 3
    assert view["discardTop"]["id"] == "rent_red_yellow_1"
