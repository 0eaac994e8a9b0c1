"""Greedy agent that builds sets first and banks what is left."""

from typing import List

from monodeal.game.cards import SET_LIMITS, ActionKind, Card, CardType, PropertyColor
from monodeal.game.game import GameState
from monodeal.game.player import PlayerState
from monodeal.game.rules import Move, MoveType

from monodeal.agents.base import Agent


class GreedyAgent(Agent):
    """
    Simple AI that prefers laying properties and playing useful actions.

    Priority order:
    1. Properties, cards that complete a set first
    2. Action cards that have something to hit
    3. Bank money, then the highest-value leftovers

    Just Say No cards are kept in hand for counter-play.
    """

    async def propose_moves(self, game: GameState) -> List[Move]:
        player = game.players[self.player_index]
        opponent = game.get_opponent(self.player_index)
        budget = game.actions_remaining
        moves: List[Move] = []

        def room() -> bool:
            return len(moves) < budget

        properties = sorted(
            (c for c in player.hand if c.is_placeable),
            key=lambda c: self._completion_gap(player, c),
        )
        for card in properties:
            if not room():
                break
            moves.append(Move(MoveType.PROPERTY, card_id=card.id))

        for card in player.hand:
            if not room():
                break
            if self._worth_playing(card, player, opponent, len(properties) > 0):
                moves.append(Move(MoveType.ACTION_PLAY, card_id=card.id))
                # Contested actions stop the turn plan anyway
                if card.card_type == CardType.ACTION and card.action != ActionKind.PASS_GO:
                    return moves

        planned = {m.params["card_id"] for m in moves}
        leftovers = sorted(
            (
                c
                for c in player.hand
                if c.id not in planned and not c.is_placeable and not c.is_counter
            ),
            key=lambda c: (c.card_type != CardType.MONEY, -c.value),
        )
        for card in leftovers:
            if not room():
                break
            if card.card_type == CardType.MONEY or card.value >= 3:
                moves.append(Move(MoveType.BANK, card_id=card.id))

        if not moves:
            return [Move(MoveType.END_TURN)]
        return moves

    @staticmethod
    def _completion_gap(player: PlayerState, card: Card) -> int:
        color = card.color or PropertyColor.ANY
        for prop_set in player.properties:
            if prop_set.color == color and not prop_set.is_complete:
                return max(0, SET_LIMITS[color] - len(prop_set.cards))
        return 99

    @staticmethod
    def _worth_playing(
        card: Card, player: PlayerState, opponent: PlayerState, laying_properties: bool
    ) -> bool:
        if card.card_type == CardType.RENT:
            return bool(player.properties) or laying_properties
        if card.card_type != CardType.ACTION:
            return False

        has_target = any(s.cards and not s.is_complete for s in opponent.properties)
        if card.action == ActionKind.PASS_GO:
            return True
        if card.action == ActionKind.DEAL_BREAKER:
            return opponent.complete_set_count > 0
        if card.action == ActionKind.SLY_DEAL:
            return has_target
        if card.action == ActionKind.FORCE_DEAL:
            return has_target and any(s.cards and not s.is_complete for s in player.properties)
        if card.action in (ActionKind.DEBT_COLLECTOR, ActionKind.BIRTHDAY):
            return opponent.total_asset_value > 0
        return False
