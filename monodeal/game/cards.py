"""
Card definitions, property colors and the set/rent lookup tables.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


class CardType(Enum):
    """Broad card categories."""

    PROPERTY = "PROPERTY"
    ACTION = "ACTION"
    RENT = "RENT"
    MONEY = "MONEY"
    WILD = "WILD"


class PropertyColor(Enum):
    """Property color groups. ANY is the generic wildcard placement."""

    BROWN = "BROWN"
    LIGHT_BLUE = "LIGHT_BLUE"
    PINK = "PINK"
    ORANGE = "ORANGE"
    RED = "RED"
    YELLOW = "YELLOW"
    GREEN = "GREEN"
    DARK_BLUE = "DARK_BLUE"
    RAILROAD = "RAILROAD"
    UTILITY = "UTILITY"
    ANY = "ANY"


class ActionKind(Enum):
    """Behavior of an action card, fixed when the card is built."""

    DEAL_BREAKER = "DEAL_BREAKER"
    SLY_DEAL = "SLY_DEAL"
    FORCE_DEAL = "FORCE_DEAL"
    JUST_SAY_NO = "JUST_SAY_NO"
    DEBT_COLLECTOR = "DEBT_COLLECTOR"
    BIRTHDAY = "BIRTHDAY"
    PASS_GO = "PASS_GO"


# Cards needed before a color group counts as a complete set
SET_LIMITS: Dict[PropertyColor, int] = {
    PropertyColor.BROWN: 2,
    PropertyColor.LIGHT_BLUE: 3,
    PropertyColor.PINK: 3,
    PropertyColor.ORANGE: 3,
    PropertyColor.RED: 3,
    PropertyColor.YELLOW: 3,
    PropertyColor.GREEN: 3,
    PropertyColor.DARK_BLUE: 2,
    PropertyColor.RAILROAD: 4,
    PropertyColor.UTILITY: 2,
    PropertyColor.ANY: 999,
}

# Rent owed for a set holding 1, 2, 3... cards
RENT_VALUES: Dict[PropertyColor, List[int]] = {
    PropertyColor.BROWN: [1, 2],
    PropertyColor.LIGHT_BLUE: [1, 2, 3],
    PropertyColor.PINK: [1, 2, 4],
    PropertyColor.ORANGE: [1, 3, 5],
    PropertyColor.RED: [2, 3, 6],
    PropertyColor.YELLOW: [2, 4, 6],
    PropertyColor.GREEN: [2, 4, 7],
    PropertyColor.DARK_BLUE: [3, 8],
    PropertyColor.RAILROAD: [1, 2, 3, 4],
    PropertyColor.UTILITY: [1, 2],
    PropertyColor.ANY: [0],
}


def calculate_rent(color: PropertyColor, card_count: int) -> int:
    """
    Rent for a set of the given color holding card_count cards.

    Counts beyond the schedule are capped at its last entry; an empty set
    owes nothing.
    """
    schedule = RENT_VALUES[color]
    count = min(card_count, len(schedule))
    if count <= 0:
        return 0
    return schedule[count - 1]


@dataclass(frozen=True)
class Card:
    """A single card. Only its container ever changes."""

    id: str
    name: str
    card_type: CardType
    value: int
    color: Optional[PropertyColor] = None
    secondary_color: Optional[PropertyColor] = None
    action: Optional[ActionKind] = None
    description: str = ""

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError(f"Card value must be non-negative: {self.value}")

    @property
    def is_placeable(self) -> bool:
        """Whether the card can be laid down as a property."""
        return self.card_type in (CardType.PROPERTY, CardType.WILD)

    @property
    def is_counter(self) -> bool:
        return self.action == ActionKind.JUST_SAY_NO

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.card_type.value,
            "value": self.value,
            "color": self.color.value if self.color else None,
            "secondary_color": self.secondary_color.value if self.secondary_color else None,
            "action": self.action.value if self.action else None,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Card":
        color = data.get("color")
        secondary = data.get("secondary_color")
        action = data.get("action")
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            card_type=CardType(data["type"]),
            value=int(data["value"]),
            color=PropertyColor(color) if color else None,
            secondary_color=PropertyColor(secondary) if secondary else None,
            action=ActionKind(action) if action else None,
            description=data.get("description") or "",
        )

    def __repr__(self) -> str:
        return f"Card({self.id!r}, {self.name!r}, {self.value}M)"
