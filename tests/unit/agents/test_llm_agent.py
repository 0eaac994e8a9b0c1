"""
Tests for the LLM agent against a mocked OpenAI-compatible endpoint.
"""

import asyncio
import json

import httpx
import pytest
from monodeal.agents import LLMAgent
from monodeal.game.cards import PropertyColor
from monodeal.game.rules import Move, MoveType


def _completion(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def _agent(handler, **kwargs):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return LLMAgent(
        0,
        "Alice",
        model_name="test-model",
        base_url="http://llm.test/v1",
        client=client,
        **kwargs,
    )


class TestLLMAgent:
    def test_parses_move_list(self, ai_playing_game, money, prop):
        cash, land = money(3), prop(PropertyColor.PINK)
        ai_playing_game.players[0].hand.extend([cash, land])
        seen = []

        def handler(request):
            seen.append(json.loads(request.content))
            content = json.dumps([
                {"action": "PROPERTY", "cardId": land.id},
                {"action": "BANK", "cardId": cash.id},
            ])
            return httpx.Response(200, json=_completion(content))

        moves = asyncio.run(_agent(handler).propose_moves(ai_playing_game))

        assert moves == [
            Move(MoveType.PROPERTY, card_id=land.id),
            Move(MoveType.BANK, card_id=cash.id),
        ]
        assert seen[0]["model"] == "test-model"
        assert land.id in seen[0]["messages"][0]["content"]

    def test_drops_unknown_and_repeated_cards(self, ai_playing_game, money):
        cash = money(1)
        ai_playing_game.players[0].hand.append(cash)

        def handler(request):
            content = (
                "Here you go:\n"
                + json.dumps([
                    {"action": "BANK", "cardId": "ghost-1"},
                    {"action": "BANK", "cardId": cash.id},
                    {"action": "BANK", "cardId": cash.id},
                    {"action": "FLY"},
                ])
            )
            return httpx.Response(200, json=_completion(content))

        moves = asyncio.run(_agent(handler).propose_moves(ai_playing_game))

        assert moves == [Move(MoveType.BANK, card_id=cash.id)]

    def test_truncates_to_actions_remaining(self, ai_playing_game, money):
        cards = [money(1) for _ in range(5)]
        ai_playing_game.players[0].hand.extend(cards)

        def handler(request):
            content = json.dumps([{"action": "BANK", "cardId": c.id} for c in cards])
            return httpx.Response(200, json=_completion(content))

        moves = asyncio.run(_agent(handler).propose_moves(ai_playing_game))

        assert len(moves) == 3

    def test_end_turn_cuts_plan(self, ai_playing_game, money):
        cash = money(1)
        ai_playing_game.players[0].hand.append(cash)

        def handler(request):
            content = json.dumps([{"action": "END_TURN"}, {"action": "BANK", "cardId": cash.id}])
            return httpx.Response(200, json=_completion(content))

        moves = asyncio.run(_agent(handler).propose_moves(ai_playing_game))

        assert moves == [Move(MoveType.END_TURN)]

    def test_retries_then_succeeds(self, ai_playing_game, money):
        cash = money(1)
        ai_playing_game.players[0].hand.append(cash)
        prompts = []

        def handler(request):
            prompts.append(json.loads(request.content)["messages"][0]["content"])
            if len(prompts) == 1:
                return httpx.Response(200, json=_completion("I think I should bank."))
            content = json.dumps([{"action": "BANK", "cardId": cash.id}])
            return httpx.Response(200, json=_completion(content))

        moves = asyncio.run(_agent(handler).propose_moves(ai_playing_game))

        assert moves == [Move(MoveType.BANK, card_id=cash.id)]
        assert len(prompts) == 2
        assert "previous response was INVALID" in prompts[1]

    def test_service_failure_falls_back_to_end_turn(self, ai_playing_game, money):
        ai_playing_game.players[0].hand.append(money(1))
        decisions = []
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503, json={"error": "overloaded"})

        agent = _agent(handler, decision_callback=decisions.append)
        moves = asyncio.run(agent.propose_moves(ai_playing_game))

        assert moves == [Move(MoveType.END_TURN)]
        assert len(calls) == 2
        assert decisions[0]["used_fallback"] is True
        assert "LLM request failed" in decisions[0]["error"]

    def test_sends_bearer_token(self, ai_playing_game):
        headers = []

        def handler(request):
            headers.append(request.headers.get("Authorization"))
            return httpx.Response(200, json=_completion("[]"))

        moves = asyncio.run(_agent(handler, api_key="sk-test").propose_moves(ai_playing_game))

        assert headers == ["Bearer sk-test"]
        assert moves == [Move(MoveType.END_TURN)]

    def test_unknown_strategy_defaults_to_balanced(self):
        agent = LLMAgent(0, "Alice", strategy="reckless", base_url="http://llm.test/v1")
        assert agent.strategy == "balanced"
        assert "balanced" in agent._strategy_prompt

    @pytest.mark.parametrize(
        "body",
        [
            {"choices": ["oops"]},
            {"choices": [{"message": "oops"}]},
            {"choices": [{"message": {"content": ["BANK"]}}]},
            {"choices": {"message": {"content": "[]"}}},
        ],
    )
    def test_malformed_completion_falls_back_to_end_turn(self, ai_playing_game, body):
        decisions = []

        def handler(request):
            return httpx.Response(200, json=body)

        agent = _agent(handler, decision_callback=decisions.append)
        moves = asyncio.run(agent.propose_moves(ai_playing_game))

        assert moves == [Move(MoveType.END_TURN)]
        assert decisions[0]["used_fallback"] is True
        assert decisions[0]["error"] == "Invalid LLM response format"

    def test_aclose_keeps_injected_client(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        agent = LLMAgent(0, "Alice", base_url="http://llm.test/v1", client=client)

        asyncio.run(agent.aclose())

        assert agent._client is client
        assert not client.is_closed
