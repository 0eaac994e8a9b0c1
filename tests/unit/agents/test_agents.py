"""
Tests for the built-in agents.
"""

import asyncio

from monodeal.agents import GreedyAgent, RandomAgent
from monodeal.game.cards import ActionKind, PropertyColor
from monodeal.game.rules import Move, MoveType, apply_move


class TestRespondToAction:
    def test_counters_when_holding_one(self, ai_playing_game, action):
        ai_playing_game.players[1].hand.append(action(ActionKind.JUST_SAY_NO))
        agent = GreedyAgent(1, "Bob")
        assert asyncio.run(agent.respond_to_action(ai_playing_game)) is True

    def test_declines_without_one(self, ai_playing_game):
        agent = RandomAgent(1, "Bob", seed=1)
        assert asyncio.run(agent.respond_to_action(ai_playing_game)) is False


class TestGreedyAgent:
    def test_properties_first(self, ai_playing_game, money, prop):
        cash, land = money(2), prop(PropertyColor.RED)
        ai_playing_game.players[0].hand.extend([cash, land])

        moves = asyncio.run(GreedyAgent(0, "Alice").propose_moves(ai_playing_game))

        assert moves == [
            Move(MoveType.PROPERTY, card_id=land.id),
            Move(MoveType.BANK, card_id=cash.id),
        ]

    def test_prefers_card_that_completes_a_set(self, ai_playing_game, prop, lay):
        alice = ai_playing_game.players[0]
        lay(alice, PropertyColor.BROWN, 1)
        red, brown = prop(PropertyColor.RED), prop(PropertyColor.BROWN)
        alice.hand.extend([red, brown])

        moves = asyncio.run(GreedyAgent(0, "Alice").propose_moves(ai_playing_game))

        assert moves[0] == Move(MoveType.PROPERTY, card_id=brown.id)

    def test_respects_action_budget(self, ai_playing_game, money):
        ai_playing_game.players[0].hand.extend(money(1) for _ in range(5))
        moves = asyncio.run(GreedyAgent(0, "Alice").propose_moves(ai_playing_game))
        assert len(moves) == 3

    def test_keeps_counter_cards(self, ai_playing_game, action):
        ai_playing_game.players[0].hand.append(action(ActionKind.JUST_SAY_NO))
        moves = asyncio.run(GreedyAgent(0, "Alice").propose_moves(ai_playing_game))
        assert moves == [Move(MoveType.END_TURN)]

    def test_contested_action_ends_plan(self, ai_playing_game, action, money):
        debt = action(ActionKind.DEBT_COLLECTOR)
        ai_playing_game.players[0].hand.extend([debt, money(1)])
        ai_playing_game.players[1].bank.append(money(5))

        moves = asyncio.run(GreedyAgent(0, "Alice").propose_moves(ai_playing_game))

        assert moves == [Move(MoveType.ACTION_PLAY, card_id=debt.id)]

    def test_skips_deal_breaker_without_target(self, ai_playing_game, action):
        ai_playing_game.players[0].hand.append(action(ActionKind.DEAL_BREAKER))
        moves = asyncio.run(GreedyAgent(0, "Alice").propose_moves(ai_playing_game))
        # Worth banking instead
        assert moves[0].move_type == MoveType.BANK


class TestRandomAgent:
    def test_proposals_are_playable(self, ai_playing_game, money, prop, action):
        hand = [money(1), prop(PropertyColor.GREEN), action(ActionKind.PASS_GO), money(3)]
        ai_playing_game.players[0].hand.extend(hand)
        agent = RandomAgent(0, "Alice", seed=5)

        moves = asyncio.run(agent.propose_moves(ai_playing_game))

        assert 1 <= len(moves) <= 3
        card_ids = [m.params["card_id"] for m in moves]
        assert len(card_ids) == len(set(card_ids))
        state = ai_playing_game
        for move in moves:
            state = apply_move(state, move)
        assert state.actions_remaining == 3 - len(moves)

    def test_empty_hand_ends_turn(self, ai_playing_game):
        moves = asyncio.run(RandomAgent(0, "Alice", seed=5).propose_moves(ai_playing_game))
        assert moves == [Move(MoveType.END_TURN)]
