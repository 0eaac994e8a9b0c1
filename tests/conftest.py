"""Shared test fixtures for MonoDeal tests."""

import itertools

import pytest
from monodeal import GameConfig, Player, create_game
from monodeal.game.cards import ActionKind, Card, CardType, PropertyColor


@pytest.fixture
def game_config():
    """Default game configuration with fixed seed for reproducibility."""
    return GameConfig(seed=42)


@pytest.fixture
def two_players():
    """Two test players."""
    return [Player(0, "Alice"), Player(1, "Bob")]


@pytest.fixture
def ai_players():
    """Two automated players."""
    return [Player(0, "Alice", is_ai=True), Player(1, "Bob", is_ai=True)]


@pytest.fixture
def basic_game(game_config, two_players):
    """Basic game with two players and fixed seed, still in the lobby."""
    return create_game(game_config, two_players)


def _clear_hands(game):
    for player in game.players:
        game.discard_pile.extend(player.hand)
        player.hand.clear()


@pytest.fixture
def playing_game(basic_game):
    """
    Alice's first turn in the play phase with both hands emptied.

    The dealt cards go to the discard pile so tests can hand out exactly
    the cards they need.
    """
    basic_game.start_game()
    basic_game.start_turn()
    _clear_hands(basic_game)
    return basic_game


@pytest.fixture
def ai_playing_game(game_config, ai_players):
    """Same as playing_game, but both seats are automated."""
    game = create_game(game_config, ai_players)
    game.start_game()
    game.start_turn()
    _clear_hands(game)
    return game


@pytest.fixture
def make_card():
    """Factory for cards with unique test ids."""
    counter = itertools.count(1)

    def _make(card_type, value=1, color=None, secondary_color=None, action=None, name=None):
        n = next(counter)
        return Card(
            id=f"test-{n}",
            name=name or f"Test Card {n}",
            card_type=card_type,
            value=value,
            color=color,
            secondary_color=secondary_color,
            action=action,
        )

    return _make


@pytest.fixture
def money(make_card):
    def _money(value):
        return make_card(CardType.MONEY, value, name=f"{value}M")

    return _money


@pytest.fixture
def prop(make_card):
    def _prop(color, value=1):
        return make_card(CardType.PROPERTY, value, color=color, name=f"{color.value} property")

    return _prop


@pytest.fixture
def action(make_card):
    names = {
        ActionKind.DEAL_BREAKER: ("Deal Breaker", 5),
        ActionKind.SLY_DEAL: ("Sly Deal", 3),
        ActionKind.FORCE_DEAL: ("Force Deal", 3),
        ActionKind.JUST_SAY_NO: ("Just Say No", 4),
        ActionKind.DEBT_COLLECTOR: ("Debt Collector", 3),
        ActionKind.BIRTHDAY: ("It's My Birthday", 2),
        ActionKind.PASS_GO: ("Pass Go", 1),
    }

    def _action(kind):
        name, value = names[kind]
        return make_card(CardType.ACTION, value, action=kind, name=name)

    return _action


@pytest.fixture
def rent_card(make_card):
    def _rent(color=PropertyColor.ANY, secondary_color=None):
        return make_card(CardType.RENT, 1, color=color, secondary_color=secondary_color, name="Rent")

    return _rent


@pytest.fixture
def lay(prop):
    """Put count fresh property cards of a color into a player's sets."""

    def _lay(player, color, count):
        prop_set = None
        for _ in range(count):
            prop_set = player.assign_to_property(prop(color))
        return prop_set

    return _lay
