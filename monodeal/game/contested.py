"""
Contested actions and the counter-play stack.

An action card that targets the opponent does not resolve straight away.
It waits as a PendingAction while the two players alternate Just Say No
responses; jsn_stack counts the counters played so far. An odd stack means
the action is currently blocked, an even stack means it goes through.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional

from monodeal.game.cards import Card
from monodeal.game.money import EventType, settle

if TYPE_CHECKING:
    from monodeal.game.game import GameState


class PendingActionType(Enum):
    """Contested action kinds."""

    FORCE_DEAL = "FORCE_DEAL"
    SLY_DEAL = "SLY_DEAL"
    DEAL_BREAKER = "DEAL_BREAKER"
    DEBT_COLLECTOR = "DEBT_COLLECTOR"
    BIRTHDAY = "BIRTHDAY"
    # Reserved: no card constructs it
    RENT_ALL = "RENT_ALL"


@dataclass
class PendingAction:
    """An action card in flight between being played and being resolved."""

    action_type: PendingActionType
    card: Card
    attacker_index: int
    target_index: Optional[int] = None
    target_set_index: Optional[int] = None
    my_set_index: Optional[int] = None
    jsn_stack: int = 0
    awaiting_target: bool = False

    @property
    def defender_index(self) -> int:
        return 1 - self.attacker_index

    @property
    def responder_index(self) -> int:
        """Defender answers on an even stack, attacker on an odd one."""
        if self.jsn_stack % 2 == 1:
            return self.attacker_index
        return self.defender_index

    @property
    def is_blocked(self) -> bool:
        return self.jsn_stack % 2 == 1

    def needs_my_set(self) -> bool:
        return self.action_type == PendingActionType.FORCE_DEAL

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.action_type.value,
            "card": self.card.to_dict(),
            "attacker_index": self.attacker_index,
            "target_index": self.target_index,
            "target_set_index": self.target_set_index,
            "my_set_index": self.my_set_index,
            "jsn_stack": self.jsn_stack,
            "awaiting_target": self.awaiting_target,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PendingAction":
        return cls(
            action_type=PendingActionType(data["type"]),
            card=Card.from_dict(data["card"]),
            attacker_index=int(data["attacker_index"]),
            target_index=data.get("target_index"),
            target_set_index=data.get("target_set_index"),
            my_set_index=data.get("my_set_index"),
            jsn_stack=int(data.get("jsn_stack") or 0),
            awaiting_target=bool(data.get("awaiting_target", False)),
        )


def select_targets(
    game: "GameState",
    my_set_index: Optional[int] = None,
    target_set_index: Optional[int] = None,
) -> bool:
    """
    Fill in the sets a Force Deal or Sly Deal is aimed at.

    Opens the counter-play window. Returns False (nothing changes) when no
    deal is waiting for a target or a required index is missing.
    """
    pending = game.pending_action
    if pending is None or not pending.awaiting_target:
        return False
    if target_set_index is None or target_set_index < 0:
        return False
    if pending.needs_my_set() and (my_set_index is None or my_set_index < 0):
        return False

    pending.target_set_index = target_set_index
    if pending.needs_my_set():
        pending.my_set_index = my_set_index
    pending.awaiting_target = False

    attacker = game.players[pending.attacker_index]
    game.event_log.log(
        EventType.TARGET_SELECTED,
        f"{attacker.name} targets set {target_set_index} with {pending.card.name}.",
        player_index=pending.attacker_index,
        action=pending.action_type.value,
        my_set_index=pending.my_set_index,
        target_set_index=target_set_index,
    )
    return True


def resolve_pending_action(game: "GameState", use_counter: bool) -> bool:
    """
    Apply the current responder's answer to the pending action.

    Returns False when there is nothing to answer.
    """
    pending = game.pending_action
    if pending is None or pending.awaiting_target:
        return False

    responder = game.players[pending.responder_index]

    if use_counter:
        counter_idx = responder.find_counter_card()
        if counter_idx is not None:
            counter = responder.hand.pop(counter_idx)
            game.discard_pile.append(counter)
            pending.jsn_stack += 1
            game.event_log.log(
                EventType.COUNTER_PLAYED,
                f"{responder.name} used JUST SAY NO! (Chain: {pending.jsn_stack})",
                player_index=responder.player_index,
                card_id=counter.id,
                jsn_stack=pending.jsn_stack,
            )
            return True

    if pending.is_blocked:
        game.event_log.log(
            EventType.ACTION_BLOCKED,
            f"Action {pending.card.name} blocked by Just Say No.",
            player_index=pending.attacker_index,
            action=pending.action_type.value,
            jsn_stack=pending.jsn_stack,
        )
        _finish(game, pending)
        return True

    _EFFECTS[pending.action_type](game, pending)
    _finish(game, pending)
    game.check_win_condition(pending.attacker_index)
    return True


def _finish(game: "GameState", pending: PendingAction) -> None:
    game.discard_pile.append(pending.card)
    game.pending_action = None
    game.actions_remaining -= 1


def _fail(game: "GameState", pending: PendingAction, message: str) -> None:
    game.event_log.log(
        EventType.ACTION_FAILED,
        message,
        player_index=pending.attacker_index,
        action=pending.action_type.value,
    )


def _force_deal(game: "GameState", pending: PendingAction) -> None:
    attacker = game.players[pending.attacker_index]
    opponent = game.players[pending.defender_index]
    my_set = attacker.get_set(pending.my_set_index)
    opp_set = opponent.get_set(pending.target_set_index)

    if my_set is None or opp_set is None or not my_set.cards or not opp_set.cards:
        _fail(game, pending, f"{attacker.name} tried Force Deal but a chosen set was invalid.")
        return

    my_card = attacker.remove_from_property(pending.my_set_index)
    opp_card = opponent.remove_from_property(pending.target_set_index)
    attacker.reassign_property(opp_card)
    opponent.reassign_property(my_card)

    game.event_log.log(
        EventType.FORCE_DEAL,
        f"{attacker.name} played Force Deal: Swapped {my_card.name} for {opp_card.name}.",
        player_index=pending.attacker_index,
        given=my_card.id,
        taken=opp_card.id,
    )


def _sly_deal(game: "GameState", pending: PendingAction) -> None:
    attacker = game.players[pending.attacker_index]
    opponent = game.players[pending.defender_index]
    target = opponent.get_set(pending.target_set_index)

    if target is None or target.is_complete or not target.cards:
        _fail(game, pending, f"{attacker.name} tried Sly Deal but target was invalid.")
        return

    stolen = opponent.remove_from_property(pending.target_set_index)
    attacker.reassign_property(stolen)
    game.event_log.log(
        EventType.SLY_DEAL,
        f"{attacker.name} stole {stolen.name} with Sly Deal.",
        player_index=pending.attacker_index,
        taken=stolen.id,
    )


def _deal_breaker(game: "GameState", pending: PendingAction) -> None:
    attacker = game.players[pending.attacker_index]
    opponent = game.players[pending.defender_index]
    set_index = next(
        (i for i, s in enumerate(opponent.properties) if s.is_complete), None
    )
    if set_index is None:
        _fail(game, pending, f"{attacker.name} played Deal Breaker but {opponent.name} has no complete set.")
        return

    stolen_set = opponent.properties.pop(set_index)
    attacker.properties.append(stolen_set)
    game.event_log.log(
        EventType.DEAL_BREAKER,
        f"{attacker.name} played Deal Breaker: Stole a complete {stolen_set.color.value} set!",
        player_index=pending.attacker_index,
        color=stolen_set.color.value,
        cards=[c.id for c in stolen_set.cards],
    )


def _debt_collector(game: "GameState", pending: PendingAction) -> None:
    attacker = game.players[pending.attacker_index]
    opponent = game.players[pending.defender_index]
    amount = game.config.debt_collector_amount
    game.event_log.log(
        EventType.DEBT_COLLECTOR,
        f"{attacker.name} used Debt Collector: {opponent.name} owes {amount}M.",
        player_index=pending.attacker_index,
        amount=amount,
    )
    settle(opponent, attacker, amount, game.event_log)


def _birthday(game: "GameState", pending: PendingAction) -> None:
    attacker = game.players[pending.attacker_index]
    opponent = game.players[pending.defender_index]
    amount = game.config.birthday_amount
    game.event_log.log(
        EventType.BIRTHDAY,
        f"{attacker.name} used It's My Birthday! {opponent.name} owes {amount}M.",
        player_index=pending.attacker_index,
        amount=amount,
    )
    settle(opponent, attacker, amount, game.event_log)


def _rent_all(game: "GameState", pending: PendingAction) -> None:
    _fail(game, pending, f"{pending.card.name} has no effect.")


_EFFECTS = {
    PendingActionType.FORCE_DEAL: _force_deal,
    PendingActionType.SLY_DEAL: _sly_deal,
    PendingActionType.DEAL_BREAKER: _deal_breaker,
    PendingActionType.DEBT_COLLECTOR: _debt_collector,
    PendingActionType.BIRTHDAY: _birthday,
    PendingActionType.RENT_ALL: _rent_all,
}
