"""
Event logging and debt settlement.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from monodeal.game.player import PlayerState


class EventType(Enum):
    """Types of game events."""

    GAME_START = "game_start"
    TURN_START = "turn_start"
    TURN_END = "turn_end"
    DRAW = "draw"
    DECK_RESHUFFLED = "deck_reshuffled"

    BANK = "bank"
    PROPERTY_PLAYED = "property_played"
    ACTION_PLAYED = "action_played"
    CARD_WASTED = "card_wasted"
    INTERACTION_CANCELLED = "interaction_cancelled"

    RENT_COLLECTED = "rent_collected"
    PAYMENT = "payment"
    PROPERTY_SURRENDERED = "property_surrendered"

    ACTION_PENDING = "action_pending"
    TARGET_SELECTED = "target_selected"
    COUNTER_PLAYED = "counter_played"
    ACTION_BLOCKED = "action_blocked"
    FORCE_DEAL = "force_deal"
    SLY_DEAL = "sly_deal"
    DEAL_BREAKER = "deal_breaker"
    DEBT_COLLECTOR = "debt_collector"
    BIRTHDAY = "birthday"
    ACTION_FAILED = "action_failed"

    GAME_END = "game_end"


@dataclass
class GameEvent:
    """A logged event in the game."""

    event_type: EventType
    message: str
    player_index: Optional[int] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": self.event_type.value,
            "message": self.message,
            "player_index": self.player_index,
            "details": dict(self.details),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameEvent":
        return cls(
            event_type=EventType(data["event_type"]),
            message=str(data.get("message", "")),
            player_index=data.get("player_index"),
            details=dict(data.get("details") or {}),
        )

    def __repr__(self) -> str:
        player_str = f"P{self.player_index}" if self.player_index is not None else "System"
        return f"[{player_str}] {self.event_type.value}: {self.message}"


class EventLog:
    """Append-only game event log."""

    def __init__(self):
        self.events: List[GameEvent] = []

    def log(
        self,
        event_type: EventType,
        message: str,
        player_index: Optional[int] = None,
        **details: Any,
    ) -> GameEvent:
        """Log a game event."""
        event = GameEvent(event_type, message, player_index, details)
        self.events.append(event)
        return event

    def get_events(self) -> List[GameEvent]:
        """Get all logged events, oldest first."""
        return self.events.copy()

    def messages(self) -> List[str]:
        """Human-readable log, newest entry first."""
        return [e.message for e in reversed(self.events)]

    def __len__(self) -> int:
        return len(self.events)


def settle(debtor: PlayerState, creditor: PlayerState, amount: int, event_log: EventLog) -> int:
    """
    Pay a debt from debtor to creditor.

    Bank cards go first, smallest value first; no change is given. Once the
    bank is empty, property cards are surrendered from the top of the first
    set until the debt is covered or nothing is left. A debtor who cannot
    cover the amount pays everything they have and owes nothing further.

    Returns:
        Total value transferred
    """
    remaining = amount
    paid = 0

    debtor.bank.sort(key=lambda c: c.value)
    while remaining > 0 and debtor.bank:
        card = debtor.bank.pop(0)
        creditor.bank.append(card)
        remaining -= card.value
        paid += card.value
        event_log.log(
            EventType.PAYMENT,
            f"{debtor.name} paid {card.name} ({card.value}M) from bank.",
            player_index=debtor.player_index,
            card_id=card.id,
            value=card.value,
            creditor=creditor.player_index,
            overpaid=max(0, -remaining),
        )

    while remaining > 0 and debtor.properties:
        set_index = next(
            (i for i, s in enumerate(debtor.properties) if s.cards), None
        )
        if set_index is None:
            break
        card = debtor.remove_from_property(set_index)
        creditor.reassign_property(card)
        remaining -= card.value
        paid += card.value
        event_log.log(
            EventType.PROPERTY_SURRENDERED,
            f"{debtor.name} surrendered property {card.name} to settle debt.",
            player_index=debtor.player_index,
            card_id=card.id,
            value=card.value,
            creditor=creditor.player_index,
        )

    return paid
