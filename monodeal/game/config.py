"""
Game configuration settings.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class GameConfig:
    """Configuration for a MonoDeal game."""

    seed: Optional[int] = None

    hand_size: int = 5
    draw_per_turn: int = 2
    actions_per_turn: int = 3
    sets_to_win: int = 3

    pass_go_draw: int = 2
    debt_collector_amount: int = 5
    birthday_amount: int = 2

    reshuffle_discard: bool = True

    def to_dict(self) -> dict:
        return {
            "seed": self.seed,
            "hand_size": self.hand_size,
            "draw_per_turn": self.draw_per_turn,
            "actions_per_turn": self.actions_per_turn,
            "sets_to_win": self.sets_to_win,
            "pass_go_draw": self.pass_go_draw,
            "debt_collector_amount": self.debt_collector_amount,
            "birthday_amount": self.birthday_amount,
            "reshuffle_discard": self.reshuffle_discard,
        }
