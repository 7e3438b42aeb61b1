"""
Role definitions, cards, and the court deck.
"""

import random
from enum import Enum
from typing import List, Optional, Dict
from dataclasses import dataclass, field


class Role(Enum):
    """Character roles in the court deck."""
    DUKE = "Duke"
    ASSASSIN = "Assassin"
    CAPTAIN = "Captain"
    AMBASSADOR = "Ambassador"
    CONTESSA = "Contessa"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "Role":
        """Look up a role by display name (case-insensitive)."""
        for role in cls:
            if role.value.lower() == str(name).lower():
                return role
        raise ValueError(f"Unknown role: {name}")


@dataclass
class Card:
    """A single court card. Dead cards stay face up with their owner."""
    card_id: int
    role: Role
    dead: bool = False

    def __str__(self) -> str:
        state = "revealed" if self.dead else "hidden"
        return f"{self.role.value} ({state})"

    def to_dict(self, hide_role: bool = False) -> Dict:
        """Serialize the card. Hidden cards keep their id but not their role."""
        return {
            "card_id": self.card_id,
            "role": None if hide_role else self.role.value,
            "dead": self.dead,
        }


def copies_per_role(num_players: int, base_copies: int = 3) -> int:
    """
    Number of copies of each role for a table size.
    Six seats or fewer use the base deck; each two extra seats add a copy.
    """
    extra_seats = max(0, num_players - 6)
    return base_copies + (extra_seats + 1) // 2


@dataclass
class Deck:
    """The face-down court deck."""
    cards: List[Card] = field(default_factory=list)
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)

    @classmethod
    def build(cls, copies: int = 3, rng: Optional[random.Random] = None) -> "Deck":
        """Create a shuffled deck with `copies` of every role."""
        cards = []
        card_id = 1
        for role in Role:
            for _ in range(copies):
                cards.append(Card(card_id=card_id, role=role))
                card_id += 1
        deck = cls(cards=cards, rng=rng or random.Random())
        deck.shuffle()
        return deck

    def __len__(self) -> int:
        return len(self.cards)

    def shuffle(self) -> None:
        """Shuffle the deck in place."""
        self.rng.shuffle(self.cards)

    def draw(self) -> Optional[Card]:
        """Draw the top card, or None if the deck is empty."""
        if not self.cards:
            return None
        return self.cards.pop()

    def deal(self, count: int) -> List[Card]:
        """Draw up to `count` cards."""
        drawn = []
        for _ in range(count):
            card = self.draw()
            if card is None:
                break
            drawn.append(card)
        return drawn

    def return_cards(self, cards: List[Card], shuffle: bool = True) -> None:
        """Put cards back into the deck, face down."""
        for card in cards:
            card.dead = False
            self.cards.append(card)
        if shuffle:
            self.shuffle()

    def count_role(self, role: Role) -> int:
        """Count copies of a role still in the deck."""
        return sum(1 for c in self.cards if c.role == role)
