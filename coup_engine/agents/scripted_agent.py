"""
Scripted agent: replays queued decisions, for deterministic matches and tests.
"""

from collections import deque
from typing import Any, List, Optional, Tuple

from .base_agent import BaseAgent, AgentContext
from ..core import Player, ActionType
from ..config.game_config import GameConfig, default_config


class ScriptedAgent(BaseAgent):
    """
    Agent that answers from per-prompt queues.

    Empty queues fall back to the passive choice: Income, no challenge,
    no block, first live card, first cards in hand.
    """

    def __init__(self, player: Player, config: GameConfig = default_config,
                 actions: Optional[List[Tuple[str, Optional[int]]]] = None,
                 challenges: Optional[List[bool]] = None,
                 blocks: Optional[List[Optional[str]]] = None,
                 losses: Optional[List[int]] = None,
                 keeps: Optional[List[List[int]]] = None):
        super().__init__(player, config)
        self.actions = deque(actions or [])
        self.challenges = deque(challenges or [])
        self.blocks = deque(blocks or [])
        self.losses = deque(losses or [])
        self.keeps = deque(keeps or [])
        self.seen_requests: List[Any] = []

    def choose_action(self, context: AgentContext) -> Tuple[str, Optional[int]]:
        self.seen_requests.append(context.request)
        if self.actions:
            return self.actions.popleft()
        return ActionType.INCOME.value, None

    def choose_challenge(self, context: AgentContext) -> bool:
        self.seen_requests.append(context.request)
        return self.challenges.popleft() if self.challenges else False

    def choose_block(self, context: AgentContext) -> Optional[str]:
        self.seen_requests.append(context.request)
        return self.blocks.popleft() if self.blocks else None

    def choose_card_to_lose(self, context: AgentContext) -> int:
        self.seen_requests.append(context.request)
        return self.losses.popleft() if self.losses else context.hand[0][0]

    def choose_cards_to_keep(self, context: AgentContext) -> List[int]:
        self.seen_requests.append(context.request)
        if self.keeps:
            return self.keeps.popleft()
        return [index for index, _ in context.hand[:context.request.keep_count]]
