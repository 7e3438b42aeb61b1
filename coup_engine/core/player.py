"""
Player class representing a seat at the table.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any

from .roles import Card, Role


@dataclass
class Player:
    """Represents a player in the game."""
    player_id: int
    name: str
    coins: int = 2
    cards: List[Card] = field(default_factory=list)
    alive: bool = True

    # Seat control
    is_bot: bool = False
    is_remote: bool = False
    peer_id: Optional[str] = None
    connected: bool = True
    difficulty: str = "normal"

    # Declared actions, used by bots to judge repeated claims
    last_action: Optional[str] = None
    previous_action: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.name} (#{self.player_id})"

    @property
    def influence(self) -> List[Card]:
        """Live (face-down) cards."""
        return [c for c in self.cards if not c.dead]

    @property
    def revealed(self) -> List[Card]:
        """Dead cards, face up."""
        return [c for c in self.cards if c.dead]

    @property
    def influence_count(self) -> int:
        return len(self.influence)

    def live_index_of(self, role: Role) -> Optional[int]:
        """Index into `cards` of the first live card with the role."""
        for i, card in enumerate(self.cards):
            if card.role == role and not card.dead:
                return i
        return None

    def live_indices(self) -> List[int]:
        """Indices into `cards` of all live cards."""
        return [i for i, c in enumerate(self.cards) if not c.dead]

    def lose_card(self, card_index: int) -> bool:
        """
        Turn a live card face up.
        Returns True if this loss eliminated the player.
        """
        card = self.cards[card_index]
        if card.dead:
            return False
        card.dead = True
        if self.alive and not self.influence:
            self.alive = False
            return True
        return False

    def to_dict(self, hide_hand: bool = False) -> Dict[str, Any]:
        """Serialize the player. Hidden hands only expose revealed cards."""
        return {
            "player_id": self.player_id,
            "name": self.name,
            "coins": self.coins,
            "cards": [c.to_dict(hide_role=hide_hand and not c.dead) for c in self.cards],
            "alive": self.alive,
            "is_bot": self.is_bot,
            "is_remote": self.is_remote,
            "connected": self.connected,
            "last_action": self.last_action,
            "previous_action": self.previous_action,
        }
