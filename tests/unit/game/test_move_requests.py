"""
Tests for decoding move requests from the wire.
"""

import pytest
from monodeal.game.rules import Move, MoveType, parse_move_request


class TestParseMoveRequest:
    def test_snake_case(self):
        move = parse_move_request({"action": "BANK", "card_id": "10m-1"})
        assert move == Move(MoveType.BANK, card_id="10m-1")

    def test_camel_case(self):
        move = parse_move_request({"action": "PROPERTY", "cardId": "old-kent-road-1"})
        assert move == Move(MoveType.PROPERTY, card_id="old-kent-road-1")

    def test_action_is_case_insensitive(self):
        assert parse_move_request({"action": "end_turn"}) == Move(MoveType.END_TURN)

    def test_follow_ups(self):
        assert parse_move_request({"action": "SELECT_TARGET", "mySetIndex": 0, "targetSetIndex": 2}) == Move(
            MoveType.SELECT_TARGET, my_set_index=0, target_set_index=2
        )
        assert parse_move_request({"action": "COLLECT_RENT", "set_index": 1}) == Move(
            MoveType.COLLECT_RENT, set_index=1
        )
        assert parse_move_request({"action": "RESPOND", "useCounter": False}) == Move(
            MoveType.RESPOND, use_counter=False
        )

    def test_unknown_fields_ignored(self):
        move = parse_move_request({"action": "END_TURN", "reason": "done"})
        assert move == Move(MoveType.END_TURN)

    @pytest.mark.parametrize(
        "data",
        [
            None,
            "BANK",
            [],
            {},
            {"action": "FLY"},
            {"action": "BANK"},
            {"action": "COLLECT_RENT"},
            {"action": "SELECT_TARGET", "my_set_index": 0},
            {"action": "RESPOND"},
        ],
    )
    def test_malformed_requests(self, data):
        assert parse_move_request(data) is None

    def test_to_dict(self):
        move = Move(MoveType.BANK, card_id="1m-1")
        assert move.to_dict() == {"action": "BANK", "card_id": "1m-1"}
        assert parse_move_request(move.to_dict()) == move
