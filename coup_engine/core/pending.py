"""
The in-flight decision stack: pending actions, reactions and decision requests.
"""

from enum import Enum
from typing import List, Optional, Dict, Any
from dataclasses import dataclass, field

from .roles import Role
from .actions import ActionType


class PendingPhase(Enum):
    """Where the current action is in its resolution."""
    ACTION_DECLARED = "action_declared"
    AWAITING_CHALLENGE_OF_ACTION = "awaiting_challenge_of_action"
    AWAITING_BLOCK_DECLARATION = "awaiting_block_declaration"
    AWAITING_CHALLENGE_OF_BLOCK = "awaiting_challenge_of_block"
    AWAITING_INFLUENCE_LOSS = "awaiting_influence_loss"
    AWAITING_EXCHANGE = "awaiting_exchange"
    RESOLVED = "resolved"


class LossReason(Enum):
    """Why a player must give up a card."""
    BLUFF_CAUGHT = "bluff_caught"
    CHALLENGE_LOST = "challenge_lost"
    ASSASSINATED = "assassinated"
    COUP = "coup"


class ResumeStep(Enum):
    """What the engine does once an influence loss has been paid."""
    CONTINUE_ACTION = "continue_action"  # honest action claim: go on to the block window or effect
    APPLY_EFFECT = "apply_effect"  # failed block: the action goes through
    BLOCK_STANDS = "block_stands"
    END_TURN = "end_turn"


class ReactionKind(Enum):
    PASS = "pass"
    CHALLENGE = "challenge"
    BLOCK = "block"


@dataclass(frozen=True)
class Reaction:
    """A reply in a challenge or block window."""
    kind: ReactionKind
    role: Optional[Role] = None

    @classmethod
    def passing(cls) -> "Reaction":
        return cls(ReactionKind.PASS)

    @classmethod
    def challenge(cls) -> "Reaction":
        return cls(ReactionKind.CHALLENGE)

    @classmethod
    def block(cls, role: Role) -> "Reaction":
        return cls(ReactionKind.BLOCK, role)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "role": self.role.value if self.role else None}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Reaction":
        kind = ReactionKind(data.get("kind", "pass"))
        role = Role.from_name(data["role"]) if data.get("role") else None
        return cls(kind, role)


@dataclass
class PendingAction:
    """State of the action currently being resolved."""
    actor_id: int
    action_type: ActionType
    target_id: Optional[int] = None
    claimed_role: Optional[Role] = None
    phase: PendingPhase = PendingPhase.ACTION_DECLARED

    blocker_id: Optional[int] = None
    block_role: Optional[Role] = None
    challenger_id: Optional[int] = None

    # Players still owed a reaction in the open window, in polling order
    reactors: List[int] = field(default_factory=list)
    responded: List[int] = field(default_factory=list)

    # Influence loss in progress
    loss_player_id: Optional[int] = None
    loss_reason: Optional[LossReason] = None
    resume: Optional[ResumeStep] = None

    # Exchange in progress
    keep_count: int = 0

    def open_window(self, phase: PendingPhase, reactors: List[int]) -> None:
        """Start a fresh reaction window."""
        self.phase = phase
        self.reactors = list(reactors)
        self.responded = []

    @property
    def current_reactor(self) -> Optional[int]:
        return self.reactors[0] if self.reactors else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "actor_id": self.actor_id,
            "action_type": self.action_type.value,
            "target_id": self.target_id,
            "claimed_role": self.claimed_role.value if self.claimed_role else None,
            "phase": self.phase.value,
            "blocker_id": self.blocker_id,
            "block_role": self.block_role.value if self.block_role else None,
            "challenger_id": self.challenger_id,
            "reactors": list(self.reactors),
            "responded": list(self.responded),
            "loss_player_id": self.loss_player_id,
            "loss_reason": self.loss_reason.value if self.loss_reason else None,
            "keep_count": self.keep_count,
        }


class RequestKind(Enum):
    """Prompts the engine can have open."""
    CHOOSE_ACTION = "choose_action"
    CHALLENGE_ACTION = "challenge_action"
    BLOCK = "block"
    CHALLENGE_BLOCK = "challenge_block"
    LOSE_INFLUENCE = "lose_influence"
    EXCHANGE = "exchange"


@dataclass(frozen=True)
class DecisionRequest:
    """The single decision the engine is waiting for."""
    request_id: int
    kind: RequestKind
    player_id: int
    action_type: Optional[ActionType] = None
    actor_id: Optional[int] = None
    target_id: Optional[int] = None
    claimed_role: Optional[Role] = None
    block_roles: tuple = ()
    loss_reason: Optional[LossReason] = None
    keep_count: int = 0
    options: tuple = ()

    @property
    def is_reaction(self) -> bool:
        return self.kind in (RequestKind.CHALLENGE_ACTION, RequestKind.BLOCK, RequestKind.CHALLENGE_BLOCK)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "request_id": self.request_id,
            "kind": self.kind.value,
            "player_id": self.player_id,
            "action_type": self.action_type.value if self.action_type else None,
            "actor_id": self.actor_id,
            "target_id": self.target_id,
            "claimed_role": self.claimed_role.value if self.claimed_role else None,
            "block_roles": [r.value for r in self.block_roles],
            "loss_reason": self.loss_reason.value if self.loss_reason else None,
            "keep_count": self.keep_count,
            "options": list(self.options),
        }
