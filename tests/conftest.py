"""Shared test fixtures for Subway Deal tests."""

import pytest

from subway_deal import CardCatalog, GameConfig, Player, create_game
from subway_deal.types import Color


class Table:
    """Puts specific cards into hands, banks and property sets."""

    def __init__(self, game):
        self.game = game

    def card(self, card_id):
        return self.game.catalog.get(card_id)

    def hand(self, player_id, *card_ids):
        self.game.players[player_id].hand.extend(self.card(cid) for cid in card_ids)

    def bank(self, player_id, *card_ids):
        self.game.players[player_id].bank.extend(self.card(cid) for cid in card_ids)

    def place(self, player_id, color, *card_ids):
        for cid in card_ids:
            self.game.book.place(player_id, Color(color), self.card(cid))


@pytest.fixture
def game_config():
    """Default game configuration with fixed seed for reproducibility."""
    return GameConfig(seed=42)


@pytest.fixture
def catalog():
    return CardCatalog.standard()


@pytest.fixture
def two_players():
    """Two test players."""
    return [Player("alice", "Alice"), Player("bob", "Bob")]


@pytest.fixture
def three_players():
    """Three test players."""
    return [Player("alice", "Alice"), Player("bob", "Bob"), Player("carol", "Carol")]


@pytest.fixture
def basic_game(game_config, two_players):
    """Two-player game dealt from a shuffled deck."""
    return create_game(game_config, two_players)


@pytest.fixture
def empty_game(game_config, two_players):
    """Two-player game with no draw pile, so every card is placed by hand."""
    return create_game(game_config, two_players, deck=[])


@pytest.fixture
def empty_game3(game_config, three_players):
    """Three-player game with no draw pile."""
    return create_game(game_config, three_players, deck=[])


@pytest.fixture
def table(empty_game):
    return Table(empty_game)


@pytest.fixture
def table3(empty_game3):
    return Table(empty_game3)
