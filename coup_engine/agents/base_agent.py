"""
Base agent interface for Coup players.
"""

from typing import Dict, List, Any, Optional, Tuple
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from ..core import Player, GameState, DecisionRequest, ActionType, copies_per_role, get_action_spec
from ..config.game_config import GameConfig, default_config


@dataclass
class AgentContext:
    """
    What an agent is allowed to know when it decides.

    `view` is the state as seen from the agent's seat: opponents' live cards
    are hidden, revealed cards and coins are public.
    """
    player_id: int
    request: DecisionRequest
    view: Dict[str, Any]
    hand: List[Tuple[int, str]]  # (index into cards, role) of own live cards
    coins: int
    opponents: List[Dict[str, Any]]
    revealed_counts: Dict[str, int]
    copies_per_role: int
    available_actions: List[str] = field(default_factory=list)
    must_coup: bool = False

    def live_roles(self) -> List[str]:
        return [role for _, role in self.hand]

    def count_in_hand(self, role: str) -> int:
        return sum(1 for r in self.live_roles() if r == role)

    def get_opponent(self, player_id: int) -> Optional[Dict[str, Any]]:
        for opponent in self.opponents:
            if opponent["player_id"] == player_id:
                return opponent
        return None


class BaseAgent(ABC):
    """
    Abstract base class for all player agents.

    One method per prompt the engine can raise. Agents only ever see an
    AgentContext; the engine validates whatever they return.
    """

    def __init__(self, player: Player, config: GameConfig = default_config):
        """
        Initialize the agent.

        Args:
            player: The player this agent represents
            config: Game configuration
        """
        self.player = player
        self.config = config

    @abstractmethod
    def choose_action(self, context: AgentContext) -> Tuple[str, Optional[int]]:
        """
        Pick the turn's action.

        Args:
            context: Current game context

        Returns:
            (action name, target player id or None)
        """
        pass

    @abstractmethod
    def choose_challenge(self, context: AgentContext) -> bool:
        """
        Decide whether to challenge the claim in `context.request`.

        Args:
            context: Current game context

        Returns:
            True to challenge, False to pass
        """
        pass

    @abstractmethod
    def choose_block(self, context: AgentContext) -> Optional[str]:
        """
        Decide whether to block the pending action.

        Args:
            context: Current game context

        Returns:
            Name of the blocking role to claim, or None to pass
        """
        pass

    @abstractmethod
    def choose_card_to_lose(self, context: AgentContext) -> int:
        """
        Pick which live card to reveal.

        Args:
            context: Current game context

        Returns:
            Index into the player's cards
        """
        pass

    @abstractmethod
    def choose_cards_to_keep(self, context: AgentContext) -> List[int]:
        """
        Pick the cards to keep after an Exchange draw.

        Args:
            context: Current game context; `request.keep_count` cards must be kept

        Returns:
            Indices into the player's cards
        """
        pass

    def build_context(self, game_state: GameState, request: DecisionRequest,
                      available_actions: Optional[List[ActionType]] = None) -> AgentContext:
        """
        Build context for the agent from a redacted view of the state.

        Args:
            game_state: Current game state
            request: The decision the engine is waiting for
            available_actions: Legal actions when the request is the action choice

        Returns:
            AgentContext with all relevant information
        """
        coup_at = max(self.config.forced_coup_threshold, get_action_spec(ActionType.COUP).cost)
        view = game_state.to_dict(viewer_id=self.player.player_id, include_log=False)
        me = next(p for p in view["players"] if p["player_id"] == self.player.player_id)

        hand = [(i, c["role"]) for i, c in enumerate(me["cards"]) if not c["dead"]]
        opponents = []
        for p in view["players"]:
            if p["player_id"] == self.player.player_id or not p["alive"]:
                continue
            opponents.append({
                "player_id": p["player_id"],
                "name": p["name"],
                "coins": p["coins"],
                "influence_count": sum(1 for c in p["cards"] if not c["dead"]),
                "last_action": p["last_action"],
                "previous_action": p["previous_action"],
            })

        return AgentContext(
            player_id=self.player.player_id,
            request=request,
            view=view,
            hand=hand,
            coins=me["coins"],
            opponents=opponents,
            revealed_counts=game_state.revealed_role_counts(),
            copies_per_role=copies_per_role(len(game_state.players), self.config.copies_per_role),
            available_actions=[a.value for a in (available_actions or [])],
            must_coup=(self.config.forced_coup_enabled and me["coins"] >= coup_at),
        )
