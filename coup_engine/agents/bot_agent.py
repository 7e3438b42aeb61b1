"""
Bot agent: heuristic play at four difficulty tiers.
"""

import random
from typing import Dict, List, Optional, Tuple

from .base_agent import BaseAgent, AgentContext
from ..core import Player, ActionType, RequestKind, Role
from ..config.game_config import GameConfig, default_config, BOT_DIFFICULTIES


DIFFICULTIES = BOT_DIFFICULTIES

# Random suspicion: challenge when a roll exceeds the threshold
CHALLENGE_THRESHOLDS: Dict[str, float] = {
    "easy": 0.8,
    "normal": 0.8,
    "hard": 0.6,
    "hardcore": 0.4,
}

# Higher is more useful to keep
ROLE_VALUE: Dict[str, int] = {
    Role.DUKE.value: 5,
    Role.CAPTAIN.value: 4,
    Role.ASSASSIN.value: 3,
    Role.CONTESSA.value: 3,
    Role.AMBASSADOR.value: 1,
}


class BotAgent(BaseAgent):
    """
    Heuristic bot with difficulty tiers: easy, normal, hard, hardcore.

    Deterministic rules (no dice involved):
    - Every tier coups when forced; normal, hard and hardcore coup at 7+ coins.
    - hard and hardcore challenge a claim whenever every copy of the role is
      accounted for (own live copies plus revealed ones); hardcore also when
      all but one are.
    - hard and hardcore challenge whenever they hold two live copies of the
      claimed role. Every tier challenges Tax or Exchange when holding two
      Dukes or two Ambassadors.
    - normal, hard and hardcore always block with a blocking role they really hold.
    - hardcore always claims Contessa against an assassination aimed at it.
    - Card to lose: a duplicate first, then the least valuable role.
      easy bots lose a random card.
    - Cards to keep: the most valuable distinct roles.

    Everything else is rolled with the bot's own random.Random, seeded from
    `config.random_seed + player_id` so every seat is reproducible.
    """

    def __init__(self, player: Player, config: GameConfig = default_config,
                 difficulty: Optional[str] = None):
        super().__init__(player, config)
        self.difficulty = difficulty or player.difficulty or config.bot_difficulty
        if self.difficulty not in DIFFICULTIES:
            raise ValueError(f"Unknown bot difficulty: {self.difficulty}")
        seed = config.random_seed
        if seed is not None:
            self.random = random.Random(seed + player.player_id)
        else:
            self.random = random.Random()

    # ------------------------------------------------------------------
    # Turn action
    # ------------------------------------------------------------------

    def choose_action(self, context: AgentContext) -> Tuple[str, Optional[int]]:
        target = self._strongest_opponent(context)
        if context.must_coup or (self.difficulty != "easy" and context.coins >= 7):
            if ActionType.COUP.value in context.available_actions:
                return ActionType.COUP.value, target

        action = self._pick_action(context)
        if action not in context.available_actions:
            action = ActionType.INCOME.value

        if action == ActionType.STEAL.value:
            rich = [o for o in context.opponents if o["coins"] > 0]
            if not rich:
                return ActionType.INCOME.value, None
            target = max(rich, key=lambda o: (o["coins"], o["influence_count"]))["player_id"]
            return action, target
        if action in (ActionType.ASSASSINATE.value, ActionType.COUP.value):
            return action, target
        return action, None

    def _pick_action(self, context: AgentContext) -> str:
        roles = context.live_roles()
        can_assassinate = context.coins >= 3
        has_duke = Role.DUKE.value in roles
        has_assassin = Role.ASSASSIN.value in roles
        has_captain = Role.CAPTAIN.value in roles
        roll = self.random.random

        if self.difficulty == "hardcore":
            if can_assassinate and (has_assassin or roll() > 0.3):
                return ActionType.ASSASSINATE.value
            if has_duke or roll() > 0.4:
                return ActionType.TAX.value
            if has_captain or roll() > 0.5:
                return ActionType.STEAL.value
            return ActionType.FOREIGN_AID.value

        if self.difficulty == "hard":
            if can_assassinate and (has_assassin or roll() > 0.4):
                return ActionType.ASSASSINATE.value
            if has_duke or roll() > 0.3:
                return ActionType.TAX.value
            if has_captain or roll() > 0.5:
                return ActionType.STEAL.value
            return ActionType.FOREIGN_AID.value

        if self.difficulty == "normal":
            # Honest play only
            if has_duke:
                return ActionType.TAX.value
            if can_assassinate and has_assassin:
                return ActionType.ASSASSINATE.value
            if has_captain:
                return ActionType.STEAL.value
            if Role.AMBASSADOR.value in roles:
                return ActionType.EXCHANGE.value
            return ActionType.INCOME.value

        options = [ActionType.INCOME.value, ActionType.FOREIGN_AID.value, ActionType.TAX.value]
        if can_assassinate:
            options.append(ActionType.ASSASSINATE.value)
        return self.random.choice(options)

    def _strongest_opponent(self, context: AgentContext) -> Optional[int]:
        """Richest alive opponent, ties broken by influence then seat."""
        if not context.opponents:
            return None
        best = max(context.opponents, key=lambda o: (o["coins"], o["influence_count"]))
        return best["player_id"]

    # ------------------------------------------------------------------
    # Reactions
    # ------------------------------------------------------------------

    def choose_challenge(self, context: AgentContext) -> bool:
        request = context.request
        if request.claimed_role is None:
            return False
        role = request.claimed_role.value
        action = request.action_type
        on_action = request.kind == RequestKind.CHALLENGE_ACTION

        threshold = CHALLENGE_THRESHOLDS[self.difficulty]
        claimant = context.get_opponent(request.actor_id)
        if on_action and claimant and claimant.get("previous_action") == action.value:
            threshold -= 0.2
            if action == ActionType.EXCHANGE:
                threshold -= 0.1

        mine = context.count_in_hand(role)
        known = mine + context.revealed_counts.get(role, 0)
        strict = self.difficulty in ("hard", "hardcore")

        if strict and known >= context.copies_per_role:
            return True
        if self.difficulty == "hardcore" and known >= context.copies_per_role - 1:
            return True
        if strict and mine == 2:
            return True

        if role == Role.AMBASSADOR.value:
            if mine == 2:
                return True
            if mine == 1 and self.difficulty != "easy" and self.random.random() > 0.7:
                return True

        if on_action and action == ActionType.TAX:
            if mine == 2:
                return True
            if strict and mine == 1 and self.random.random() > 0.5:
                return True

        return self.random.random() > threshold

    def choose_block(self, context: AgentContext) -> Optional[str]:
        request = context.request
        options = [r.value for r in request.block_roles]
        if not options:
            return None

        real = [r for r in options if r in context.live_roles()]
        if real:
            if self.difficulty != "easy" or self.random.random() > 0.5:
                return real[0]
            return None

        action = request.action_type
        targeted_at_me = request.target_id == context.player_id
        if self.difficulty == "hardcore":
            if action == ActionType.ASSASSINATE and targeted_at_me:
                return Role.CONTESSA.value
            if action == ActionType.STEAL and self.random.random() > 0.3:
                return self.random.choice(options)
            if action == ActionType.FOREIGN_AID and self.random.random() > 0.5:
                return Role.DUKE.value
        if self.difficulty == "hard":
            if action == ActionType.ASSASSINATE and self.random.random() > 0.2:
                return Role.CONTESSA.value
            if action == ActionType.STEAL and self.random.random() > 0.5:
                return self.random.choice(options)
        return None

    # ------------------------------------------------------------------
    # Card choices
    # ------------------------------------------------------------------

    def choose_card_to_lose(self, context: AgentContext) -> int:
        if self.difficulty == "easy":
            return self.random.choice(context.hand)[0]

        roles = context.live_roles()
        for index, role in context.hand:
            if roles.count(role) > 1:
                return index
        return min(context.hand, key=lambda item: ROLE_VALUE.get(item[1], 0))[0]

    def choose_cards_to_keep(self, context: AgentContext) -> List[int]:
        keep_count = context.request.keep_count
        ranked = sorted(context.hand, key=lambda item: -ROLE_VALUE.get(item[1], 0))

        kept: List[int] = []
        seen = set()
        for index, role in ranked:
            if role not in seen and len(kept) < keep_count:
                kept.append(index)
                seen.add(role)
        for index, _ in ranked:
            if len(kept) >= keep_count:
                break
            if index not in kept:
                kept.append(index)
        return kept
