"""
The standard MonoDeal deck.

Card ids are deterministic (slug plus copy number) so two engines built from
the same seed agree on every card.
"""

import random
import re
from typing import List, Optional

from monodeal.game.cards import ActionKind, Card, CardType, PropertyColor


def _slug(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


class _DeckBuilder:
    """Collects cards and hands out unique ids per card name."""

    def __init__(self) -> None:
        self.cards: List[Card] = []
        self._counts: dict = {}

    def add(
        self,
        copies: int,
        name: str,
        card_type: CardType,
        value: int,
        color: Optional[PropertyColor] = None,
        secondary_color: Optional[PropertyColor] = None,
        action: Optional[ActionKind] = None,
        description: str = "",
    ) -> None:
        slug = _slug(name)
        for _ in range(copies):
            n = self._counts.get(slug, 0) + 1
            self._counts[slug] = n
            self.cards.append(
                Card(
                    id=f"{slug}-{n}",
                    name=name,
                    card_type=card_type,
                    value=value,
                    color=color,
                    secondary_color=secondary_color,
                    action=action,
                    description=description,
                )
            )


def create_deck() -> List[Card]:
    """Build the full, unshuffled deck (90 cards)."""
    b = _DeckBuilder()

    # Money
    b.add(1, "10M", CardType.MONEY, 10)
    b.add(2, "5M", CardType.MONEY, 5)
    b.add(3, "4M", CardType.MONEY, 4)
    b.add(3, "3M", CardType.MONEY, 3)
    b.add(5, "2M", CardType.MONEY, 2)
    b.add(6, "1M", CardType.MONEY, 1)

    # Actions
    b.add(2, "Deal Breaker", CardType.ACTION, 7, action=ActionKind.DEAL_BREAKER,
          description="Steal a complete set from any player.")
    b.add(3, "Sly Deal", CardType.ACTION, 3, action=ActionKind.SLY_DEAL,
          description="Steal a single property from any player.")
    b.add(3, "Force Deal", CardType.ACTION, 3, action=ActionKind.FORCE_DEAL,
          description="Swap a property with another player.")
    b.add(3, "Just Say No", CardType.ACTION, 4, action=ActionKind.JUST_SAY_NO,
          description="Counter any action card.")
    b.add(3, "Debt Collector", CardType.ACTION, 3, action=ActionKind.DEBT_COLLECTOR,
          description="Collect 5M from one player.")
    b.add(3, "It's My Birthday", CardType.ACTION, 2, action=ActionKind.BIRTHDAY,
          description="Collect 2M from all players.")
    b.add(10, "Pass Go", CardType.ACTION, 1, action=ActionKind.PASS_GO,
          description="Draw 2 extra cards.")

    # Rent
    rent_pairs = [
        ("Rent (Brown/L.Blue)", PropertyColor.BROWN, PropertyColor.LIGHT_BLUE, "Brown or Light Blue"),
        ("Rent (Pink/Orange)", PropertyColor.PINK, PropertyColor.ORANGE, "Pink or Orange"),
        ("Rent (Red/Yellow)", PropertyColor.RED, PropertyColor.YELLOW, "Red or Yellow"),
        ("Rent (Green/D.Blue)", PropertyColor.GREEN, PropertyColor.DARK_BLUE, "Green or Dark Blue"),
        ("Rent (Rail/Util)", PropertyColor.RAILROAD, PropertyColor.UTILITY, "Railroad or Utility"),
    ]
    for name, primary, secondary, label in rent_pairs:
        b.add(2, name, CardType.RENT, 1, color=primary, secondary_color=secondary,
              description=f"Collect rent for {label} sets.")
    b.add(3, "Any Rent", CardType.RENT, 3, color=PropertyColor.ANY,
          description="Collect rent for ANY color set.")

    # Properties
    b.add(2, "Old Kent Road", CardType.PROPERTY, 1, color=PropertyColor.BROWN)
    b.add(3, "The Angel Islington", CardType.PROPERTY, 1, color=PropertyColor.LIGHT_BLUE)
    b.add(3, "Whitehall", CardType.PROPERTY, 2, color=PropertyColor.PINK)
    b.add(3, "Bow Street", CardType.PROPERTY, 2, color=PropertyColor.ORANGE)
    b.add(3, "Fleet Street", CardType.PROPERTY, 3, color=PropertyColor.RED)
    b.add(3, "Leicester Square", CardType.PROPERTY, 3, color=PropertyColor.YELLOW)
    b.add(3, "Bond Street", CardType.PROPERTY, 4, color=PropertyColor.GREEN)
    b.add(2, "Park Lane", CardType.PROPERTY, 4, color=PropertyColor.DARK_BLUE)
    b.add(4, "King's Cross Station", CardType.PROPERTY, 2, color=PropertyColor.RAILROAD)
    b.add(2, "Water Works", CardType.PROPERTY, 2, color=PropertyColor.UTILITY)

    # Wildcards
    b.add(1, "Dark Blue/Green Wild", CardType.WILD, 4, color=PropertyColor.DARK_BLUE,
          secondary_color=PropertyColor.GREEN, description="Use as Dark Blue or Green property.")
    b.add(1, "Light Blue/Brown Wild", CardType.WILD, 1, color=PropertyColor.LIGHT_BLUE,
          secondary_color=PropertyColor.BROWN, description="Use as Light Blue or Brown property.")

    return b.cards


def create_shuffled_deck(rng: random.Random) -> List[Card]:
    """Build the deck and shuffle it with the game RNG."""
    cards = create_deck()
    rng.shuffle(cards)
    return cards
