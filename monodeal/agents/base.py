"""Base class for all MonoDeal agents."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from monodeal.game.game import GameState
    from monodeal.game.rules import Move


class Agent(ABC):
    """
    Abstract base class for automated MonoDeal players.

    An agent plans a whole turn at once: `propose_moves` returns the moves it
    wants to make, which the runner applies one at a time. Counter-play
    windows are answered separately through `respond_to_action`.

    Attributes:
        player_index: The player's seat in the game (0 or 1).
        name: The player's display name.
    """

    def __init__(self, player_index: int, name: str):
        """
        Initialize the agent.

        Args:
            player_index: The player's seat in the game.
            name: The player's display name.
        """
        self.player_index = player_index
        self.name = name

    @abstractmethod
    async def propose_moves(self, game: "GameState") -> List["Move"]:
        """
        Plan the moves for the current turn.

        Args:
            game: The current game state.

        Returns:
            At most `game.actions_remaining` card moves, or an END_TURN.
            An empty list ends the turn.
        """
        pass

    async def respond_to_action(self, game: "GameState") -> bool:
        """
        Answer a counter-play window.

        Returns:
            True to play a Just Say No, if one is in hand.
        """
        return game.players[self.player_index].find_counter_card() is not None

    async def aclose(self) -> None:
        """Release any resources the agent holds."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(player_index={self.player_index}, name='{self.name}')"
