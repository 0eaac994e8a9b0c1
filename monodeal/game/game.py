"""
Main game engine and state management.
"""

import copy
import random
from enum import Enum
from typing import List, Optional

from monodeal.game.cards import ActionKind, Card, CardType
from monodeal.game.config import GameConfig
from monodeal.game.contested import (
    PendingAction,
    PendingActionType,
    resolve_pending_action,
    select_targets,
)
from monodeal.game.deck import create_shuffled_deck
from monodeal.game.money import EventLog, EventType, settle
from monodeal.game.player import Player, PlayerState


class GamePhase(Enum):
    """Turn phases."""

    LOBBY = "LOBBY"
    START_TURN = "START_TURN"
    PLAY_PHASE = "PLAY_PHASE"
    END_TURN = "END_TURN"
    GAME_OVER = "GAME_OVER"


# Action cards that open a counter-play window as soon as they are played
_IMMEDIATE_CONTESTED = {
    ActionKind.DEAL_BREAKER: PendingActionType.DEAL_BREAKER,
    ActionKind.DEBT_COLLECTOR: PendingActionType.DEBT_COLLECTOR,
    ActionKind.BIRTHDAY: PendingActionType.BIRTHDAY,
}

# Action cards that need a target set before the window opens
_TARGETED = {
    ActionKind.FORCE_DEAL: PendingActionType.FORCE_DEAL,
    ActionKind.SLY_DEAL: PendingActionType.SLY_DEAL,
}


class GameState:
    """
    Represents the complete state of a MonoDeal game.

    Methods mutate in place and return True when something changed. The
    pure transition API lives in `monodeal.game.rules`, which calls these
    methods on a copy.
    """

    def __init__(self, config: GameConfig, players: List[Player]):
        if len(players) != 2:
            raise ValueError("MonoDeal is played by exactly two players")

        self.config = config
        self.event_log = EventLog()

        # Initialize RNG
        self.rng = random.Random(config.seed)

        self.players: List[PlayerState] = [
            PlayerState(i, p.name, p.is_ai) for i, p in enumerate(players)
        ]

        self.deck: List[Card] = create_shuffled_deck(self.rng)
        self.discard_pile: List[Card] = []

        self.active_player_index = 0
        self.turn_number = 0
        self.phase = GamePhase.LOBBY
        self.actions_remaining = config.actions_per_turn
        self.winner: Optional[int] = None

        self.pending_action: Optional[PendingAction] = None
        # Rent card played and waiting for the set to charge for
        self.pending_rent_card: Optional[Card] = None

    @property
    def logs(self) -> List[str]:
        """Human-readable log, newest first."""
        return self.event_log.messages()

    @property
    def game_over(self) -> bool:
        return self.winner is not None

    def copy(self) -> "GameState":
        """Independent deep copy; the basis of every state transition."""
        return copy.deepcopy(self)

    def get_current_player(self) -> PlayerState:
        """Get the current active player."""
        return self.players[self.active_player_index]

    def get_opponent(self, player_index: Optional[int] = None) -> PlayerState:
        if player_index is None:
            player_index = self.active_player_index
        return self.players[1 - player_index]

    def all_cards(self) -> List[Card]:
        """Every card in the game, whichever container holds it."""
        cards = list(self.deck) + list(self.discard_pile)
        for player in self.players:
            cards.extend(player.all_cards())
        if self.pending_action is not None:
            cards.append(self.pending_action.card)
        if self.pending_rent_card is not None:
            cards.append(self.pending_rent_card)
        return cards

    # =========== Turn flow ===========

    def start_game(self) -> bool:
        """Shuffle is done at construction; deal opening hands and leave the lobby."""
        if self.phase != GamePhase.LOBBY:
            return False

        for player in self.players:
            player.hand.extend(self._draw(self.config.hand_size))

        self.phase = GamePhase.START_TURN
        self.event_log.log(
            EventType.GAME_START,
            "Game started! Master the market.",
            players=[p.name for p in self.players],
            seed=self.config.seed,
        )
        return True

    def start_turn(self) -> bool:
        """Draw for the active player and open the play phase."""
        if self.phase != GamePhase.START_TURN or self.game_over:
            return False

        player = self.get_current_player()
        draw_count = self.config.hand_size if not player.hand else self.config.draw_per_turn
        drawn = self._draw(draw_count)
        player.hand.extend(drawn)

        self.turn_number += 1
        self.actions_remaining = self.config.actions_per_turn
        self.phase = GamePhase.PLAY_PHASE
        self.event_log.log(
            EventType.TURN_START,
            f"{player.name} draws {len(drawn)} cards.",
            player_index=player.player_index,
            turn=self.turn_number,
            drawn=len(drawn),
        )
        return True

    def end_turn(self) -> bool:
        """Hand the turn to the other player."""
        if self.phase != GamePhase.PLAY_PHASE or self.game_over:
            return False
        # Cannot walk away from an action the opponent may still answer
        if self.pending_action is not None and not self.pending_action.awaiting_target:
            return False

        self.cancel_interaction()

        self.phase = GamePhase.END_TURN
        self.active_player_index = 1 - self.active_player_index
        self.actions_remaining = self.config.actions_per_turn
        self.phase = GamePhase.START_TURN

        next_player = self.get_current_player()
        self.event_log.log(
            EventType.TURN_END,
            f"Turn change: {next_player.name}'s turn.",
            player_index=next_player.player_index,
            turn=self.turn_number,
        )
        return True

    def check_win_condition(self, player_index: int) -> bool:
        """End the game if the player holds enough complete sets."""
        if self.game_over:
            return True
        player = self.players[player_index]
        if player.complete_set_count >= self.config.sets_to_win:
            self.winner = player_index
            self.phase = GamePhase.GAME_OVER
            self.event_log.log(
                EventType.GAME_END,
                f"{player.name} wins with {player.complete_set_count} complete sets!",
                player_index=player_index,
                winner=player.name,
            )
            return True
        return False

    def _draw(self, count: int) -> List[Card]:
        drawn: List[Card] = []
        for _ in range(count):
            if not self.deck:
                if not (self.config.reshuffle_discard and self.discard_pile):
                    break
                self.deck = self.discard_pile
                self.discard_pile = []
                self.rng.shuffle(self.deck)
                self.event_log.log(
                    EventType.DECK_RESHUFFLED,
                    "Discard pile shuffled into a new deck.",
                    cards=len(self.deck),
                )
            drawn.append(self.deck.pop(0))
        return drawn

    # =========== Moves ===========

    def can_play(self) -> bool:
        """Shared preconditions for BANK, PROPERTY and ACTION_PLAY."""
        return (
            self.phase == GamePhase.PLAY_PHASE
            and self.actions_remaining > 0
            and self.winner is None
            and self.pending_action is None
            and self.pending_rent_card is None
        )

    def bank_card(self, card_id: str) -> bool:
        if not self.can_play():
            return False
        player = self.get_current_player()
        card = player.take_from_hand(card_id)
        if card is None:
            return False

        player.bank.append(card)
        self.event_log.log(
            EventType.BANK,
            f"{player.name} banked {card.name} ({card.value}M).",
            player_index=player.player_index,
            card_id=card.id,
            value=card.value,
        )
        self.actions_remaining -= 1
        self.check_win_condition(player.player_index)
        return True

    def play_property(self, card_id: str) -> bool:
        if not self.can_play():
            return False
        player = self.get_current_player()
        idx = player.find_in_hand(card_id)
        if idx is None or not player.hand[idx].is_placeable:
            return False

        card = player.hand.pop(idx)
        prop_set = player.assign_to_property(card)
        self.event_log.log(
            EventType.PROPERTY_PLAYED,
            f"{player.name} deployed {card.name}.",
            player_index=player.player_index,
            card_id=card.id,
            color=prop_set.color.value,
            set_complete=prop_set.is_complete,
        )
        self.actions_remaining -= 1
        self.check_win_condition(player.player_index)
        return True

    def play_action(self, card_id: str) -> bool:
        """Play an action or rent card from hand for its effect."""
        if not self.can_play():
            return False
        player = self.get_current_player()
        idx = player.find_in_hand(card_id)
        if idx is None:
            return False
        card = player.hand[idx]

        if card.card_type == CardType.RENT:
            player.hand.pop(idx)
            self.pending_rent_card = card
            self.event_log.log(
                EventType.ACTION_PLAYED,
                f"{player.name} played {card.name}.",
                player_index=player.player_index,
                card_id=card.id,
            )
            if player.is_ai:
                self._auto_collect_rent(player)
            return True

        if card.card_type != CardType.ACTION or card.action is None:
            return False

        player.hand.pop(idx)

        if card.action in _TARGETED:
            self.pending_action = PendingAction(
                action_type=_TARGETED[card.action],
                card=card,
                attacker_index=player.player_index,
                target_index=1 - player.player_index,
                awaiting_target=True,
            )
            self.event_log.log(
                EventType.ACTION_PLAYED,
                f"{player.name} played {card.name}.",
                player_index=player.player_index,
                card_id=card.id,
            )
            if player.is_ai:
                self._auto_target(player)
            return True

        if card.action in _IMMEDIATE_CONTESTED:
            self.pending_action = PendingAction(
                action_type=_IMMEDIATE_CONTESTED[card.action],
                card=card,
                attacker_index=player.player_index,
                target_index=1 - player.player_index,
            )
            self.event_log.log(
                EventType.ACTION_PENDING,
                f"{player.name} played {card.name}.",
                player_index=player.player_index,
                card_id=card.id,
                action=self.pending_action.action_type.value,
            )
            return True

        if card.action == ActionKind.PASS_GO:
            drawn = self._draw(self.config.pass_go_draw)
            player.hand.extend(drawn)
            message = f"{player.name} played Pass Go: +{len(drawn)} cards."
        else:
            message = f"{player.name} played {card.name}."
        self.discard_pile.append(card)
        self.event_log.log(
            EventType.ACTION_PLAYED,
            message,
            player_index=player.player_index,
            card_id=card.id,
        )
        self.actions_remaining -= 1
        self.check_win_condition(player.player_index)
        return True

    def collect_rent(self, set_index: int) -> bool:
        """Charge the opponent rent for one of the active player's sets."""
        if self.pending_rent_card is None or self.phase != GamePhase.PLAY_PHASE:
            return False
        player = self.get_current_player()
        target_set = player.get_set(set_index)
        if target_set is None:
            return False

        card = self.pending_rent_card
        opponent = self.get_opponent()
        rent = target_set.rent
        self.event_log.log(
            EventType.RENT_COLLECTED,
            f"{player.name} collected {rent}M rent for {target_set.color.value} set.",
            player_index=player.player_index,
            card_id=card.id,
            color=target_set.color.value,
            amount=rent,
        )
        settle(opponent, player, rent, self.event_log)

        self.discard_pile.append(card)
        self.pending_rent_card = None
        self.actions_remaining -= 1
        self.check_win_condition(player.player_index)
        return True

    def select_target(
        self, my_set_index: Optional[int] = None, target_set_index: Optional[int] = None
    ) -> bool:
        if self.game_over:
            return False
        return select_targets(self, my_set_index, target_set_index)

    def resolve_pending(self, use_counter: bool) -> bool:
        if self.game_over:
            return False
        return resolve_pending_action(self, use_counter)

    def cancel_interaction(self) -> bool:
        """Take back a rent card or a deal card that has no target yet."""
        player = self.get_current_player()
        changed = False
        if self.pending_rent_card is not None:
            player.hand.append(self.pending_rent_card)
            card = self.pending_rent_card
            self.pending_rent_card = None
            changed = True
            self.event_log.log(
                EventType.INTERACTION_CANCELLED,
                f"{player.name} took back {card.name}.",
                player_index=player.player_index,
                card_id=card.id,
            )
        if self.pending_action is not None and self.pending_action.awaiting_target:
            card = self.pending_action.card
            self.players[self.pending_action.attacker_index].hand.append(card)
            self.pending_action = None
            changed = True
            self.event_log.log(
                EventType.INTERACTION_CANCELLED,
                f"{player.name} took back {card.name}.",
                player_index=player.player_index,
                card_id=card.id,
            )
        return changed

    # =========== Automated targeting ===========

    def _waste(self, player: PlayerState, card: Card, message: str) -> None:
        self.discard_pile.append(card)
        self.actions_remaining -= 1
        self.event_log.log(
            EventType.CARD_WASTED,
            message,
            player_index=player.player_index,
            card_id=card.id,
        )

    def _auto_target(self, player: PlayerState) -> None:
        """Pick random eligible sets for an automated Force/Sly Deal."""
        pending = self.pending_action
        opponent = self.get_opponent(player.player_index)
        opp_choices = [
            i for i, s in enumerate(opponent.properties) if s.cards and not s.is_complete
        ]
        my_choices = [
            i for i, s in enumerate(player.properties) if s.cards and not s.is_complete
        ]

        if pending.action_type == PendingActionType.FORCE_DEAL:
            if opp_choices and my_choices:
                select_targets(self, self.rng.choice(my_choices), self.rng.choice(opp_choices))
                return
            reason = "no valid targets"
        else:
            if opp_choices:
                select_targets(self, None, self.rng.choice(opp_choices))
                return
            reason = "nothing to steal"

        self.pending_action = None
        self._waste(
            player,
            pending.card,
            f"AI tried {pending.card.name} but had {reason}. Card wasted.",
        )

    def _auto_collect_rent(self, player: PlayerState) -> None:
        """Charge rent on the automated player's most lucrative set."""
        if not player.properties:
            card = self.pending_rent_card
            self.pending_rent_card = None
            self._waste(player, card, f"AI played {card.name} with no properties. Card wasted.")
            return
        best = max(range(len(player.properties)), key=lambda i: player.properties[i].rent)
        self.collect_rent(best)

    def __repr__(self) -> str:
        return (
            f"GameState(phase={self.phase.value}, turn={self.turn_number}, "
            f"active={self.active_player_index}, actions={self.actions_remaining}, "
            f"deck={len(self.deck)}, winner={self.winner})"
        )


def create_game(config: GameConfig, players: List[Player]) -> GameState:
    """
    Create a new game with the specified configuration and players.

    Args:
        config: Game configuration
        players: Exactly two players

    Returns:
        GameState in the LOBBY phase
    """
    return GameState(config, players)
