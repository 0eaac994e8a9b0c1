"""
Player state and property set management.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from monodeal.game.cards import SET_LIMITS, Card, PropertyColor, calculate_rent


@dataclass
class PropertySet:
    """Cards laid down under one color. Completeness is derived from the count."""

    color: PropertyColor
    cards: List[Card] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return len(self.cards) >= SET_LIMITS[self.color]

    @property
    def rent(self) -> int:
        return calculate_rent(self.color, len(self.cards))

    @property
    def value(self) -> int:
        return sum(c.value for c in self.cards)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "color": self.color.value,
            "cards": [c.to_dict() for c in self.cards],
            "is_complete": self.is_complete,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PropertySet":
        return cls(
            color=PropertyColor(data["color"]),
            cards=[Card.from_dict(c) for c in data.get("cards", [])],
        )


class PlayerState:
    """Represents the complete state of a player in the game."""

    def __init__(self, player_index: int, name: str, is_ai: bool = False):
        self.player_index = player_index
        self.name = name
        self.is_ai = is_ai
        self.hand: List[Card] = []
        self.bank: List[Card] = []
        self.properties: List[PropertySet] = []

    @property
    def bank_value(self) -> int:
        return sum(c.value for c in self.bank)

    @property
    def property_value(self) -> int:
        return sum(s.value for s in self.properties)

    @property
    def total_asset_value(self) -> int:
        """Everything a creditor could take: bank plus laid-down properties."""
        return self.bank_value + self.property_value

    @property
    def complete_set_count(self) -> int:
        return sum(1 for s in self.properties if s.is_complete)

    def find_in_hand(self, card_id: str) -> Optional[int]:
        """Index of the card in hand, or None."""
        for i, card in enumerate(self.hand):
            if card.id == card_id:
                return i
        return None

    def take_from_hand(self, card_id: str) -> Optional[Card]:
        idx = self.find_in_hand(card_id)
        if idx is None:
            return None
        return self.hand.pop(idx)

    def find_counter_card(self) -> Optional[int]:
        for i, card in enumerate(self.hand):
            if card.is_counter:
                return i
        return None

    def get_set(self, set_index: Optional[int]) -> Optional[PropertySet]:
        if set_index is None or not 0 <= set_index < len(self.properties):
            return None
        return self.properties[set_index]

    def assign_to_property(self, card: Card) -> PropertySet:
        """
        Lay a card down from hand.

        The card joins the set of its primary color (ANY when it has none),
        creating the set if needed.
        """
        color = card.color or PropertyColor.ANY
        target = next((s for s in self.properties if s.color == color), None)
        if target is None:
            target = PropertySet(color)
            self.properties.append(target)
        target.cards.append(card)
        return target

    def reassign_property(self, card: Card) -> PropertySet:
        """
        Place a card received from another player.

        Preference: an incomplete set of the primary color, an incomplete set
        of the secondary color, any set of the primary color, a new set.
        """
        color = card.color or PropertyColor.ANY
        target = next(
            (s for s in self.properties if s.color == color and not s.is_complete), None
        )
        if target is None and card.secondary_color is not None:
            target = next(
                (
                    s
                    for s in self.properties
                    if s.color == card.secondary_color and not s.is_complete
                ),
                None,
            )
        if target is None:
            target = next((s for s in self.properties if s.color == color), None)
        if target is None:
            target = PropertySet(color)
            self.properties.append(target)
        target.cards.append(card)
        return target

    def remove_from_property(self, set_index: int) -> Optional[Card]:
        """
        Pop the most recently added card of a set.

        An emptied set is dropped from the player's list. Returns None when
        the index is out of range or the set is empty.
        """
        prop_set = self.get_set(set_index)
        if prop_set is None or not prop_set.cards:
            return None
        card = prop_set.cards.pop()
        if not prop_set.cards:
            del self.properties[set_index]
        return card

    def all_cards(self) -> List[Card]:
        cards = list(self.hand) + list(self.bank)
        for prop_set in self.properties:
            cards.extend(prop_set.cards)
        return cards

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_index": self.player_index,
            "name": self.name,
            "is_ai": self.is_ai,
            "hand": [c.to_dict() for c in self.hand],
            "bank": [c.to_dict() for c in self.bank],
            "properties": [s.to_dict() for s in self.properties],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlayerState":
        player = cls(int(data["player_index"]), str(data["name"]), bool(data.get("is_ai", False)))
        player.hand = [Card.from_dict(c) for c in data.get("hand", [])]
        player.bank = [Card.from_dict(c) for c in data.get("bank", [])]
        player.properties = [PropertySet.from_dict(s) for s in data.get("properties", [])]
        return player

    def __repr__(self) -> str:
        return (
            f"PlayerState(index={self.player_index}, name='{self.name}', "
            f"hand={len(self.hand)}, bank={self.bank_value}M, "
            f"sets={len(self.properties)}, complete={self.complete_set_count})"
        )


class Player:
    """
    Convenience wrapper for player information.
    This is primarily for the external API.
    """

    def __init__(self, player_index: int, name: str, is_ai: bool = False):
        self.player_index = player_index
        self.name = name
        self.is_ai = is_ai

    def __repr__(self) -> str:
        return f"Player(index={self.player_index}, name='{self.name}', is_ai={self.is_ai})"
