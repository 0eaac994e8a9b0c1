"""Random agent that makes random card plays."""

import random
from typing import List, Optional

from monodeal.game.game import GameState
from monodeal.game.rules import Move, MoveType, get_legal_moves

from monodeal.agents.base import Agent

_PLAYS = {MoveType.BANK, MoveType.PROPERTY, MoveType.ACTION_PLAY}


class RandomAgent(Agent):
    """
    Simple AI that plays random cards from its hand.

    Each card is used at most once per plan, and the plan occasionally
    stops early to keep the game moving.
    """

    def __init__(self, player_index: int, name: str, seed: Optional[int] = None):
        super().__init__(player_index, name)
        self.rng = random.Random(seed)

    async def propose_moves(self, game: GameState) -> List[Move]:
        candidates = [
            m for m in get_legal_moves(game, self.player_index) if m.move_type in _PLAYS
        ]
        self.rng.shuffle(candidates)

        moves: List[Move] = []
        used = set()
        for move in candidates:
            if len(moves) >= game.actions_remaining:
                break
            card_id = move.params["card_id"]
            if card_id in used:
                continue
            # Prefer ending the turn now and then
            if moves and self.rng.random() < 0.15:
                break
            used.add(card_id)
            moves.append(move)

        if not moves:
            return [Move(MoveType.END_TURN)]
        return moves
