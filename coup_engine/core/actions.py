"""
Static catalog of turn actions: costs, targets, claimed roles and blockers.
"""

from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Union
from dataclasses import dataclass

from .roles import Role
from .exceptions import UnknownActionError


class ActionType(Enum):
    """Actions a player can take on their turn."""
    INCOME = "Income"
    FOREIGN_AID = "Foreign Aid"
    COUP = "Coup"
    TAX = "Tax"
    ASSASSINATE = "Assassinate"
    STEAL = "Steal"
    EXCHANGE = "Exchange"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ActionSpec:
    """Rules metadata for one action."""
    action_type: ActionType
    cost: int = 0
    requires_target: bool = False
    claimed_role: Optional[Role] = None
    blockable_by: FrozenSet[Role] = frozenset()
    challengeable: bool = False
    # Any other player may block, not only the target
    open_block: bool = False

    @property
    def blockable(self) -> bool:
        return bool(self.blockable_by)

    @property
    def resolves_immediately(self) -> bool:
        """True when no player can react to the action."""
        return not self.challengeable and not self.blockable


ACTION_CATALOG: Dict[ActionType, ActionSpec] = {
    ActionType.INCOME: ActionSpec(ActionType.INCOME),
    ActionType.FOREIGN_AID: ActionSpec(
        ActionType.FOREIGN_AID,
        blockable_by=frozenset({Role.DUKE}),
        open_block=True,
    ),
    ActionType.COUP: ActionSpec(ActionType.COUP, cost=7, requires_target=True),
    ActionType.TAX: ActionSpec(
        ActionType.TAX,
        claimed_role=Role.DUKE,
        challengeable=True,
    ),
    ActionType.ASSASSINATE: ActionSpec(
        ActionType.ASSASSINATE,
        cost=3,
        requires_target=True,
        claimed_role=Role.ASSASSIN,
        blockable_by=frozenset({Role.CONTESSA}),
        challengeable=True,
    ),
    ActionType.STEAL: ActionSpec(
        ActionType.STEAL,
        requires_target=True,
        claimed_role=Role.CAPTAIN,
        blockable_by=frozenset({Role.CAPTAIN, Role.AMBASSADOR}),
        challengeable=True,
    ),
    ActionType.EXCHANGE: ActionSpec(
        ActionType.EXCHANGE,
        claimed_role=Role.AMBASSADOR,
        challengeable=True,
    ),
}


def parse_action_type(action: Union[ActionType, str]) -> ActionType:
    """Resolve an ActionType from an enum member, value ("Foreign Aid") or name ("FOREIGN_AID")."""
    if isinstance(action, ActionType):
        return action
    text = str(action).strip()
    for action_type in ActionType:
        if text.lower() in (action_type.value.lower(), action_type.name.lower()):
            return action_type
    raise UnknownActionError(text)


def get_action_spec(action: Union[ActionType, str]) -> ActionSpec:
    """
    Return the catalog entry for an action.

    Raises:
        UnknownActionError: the name is not in the catalog (programming error)
    """
    action_type = parse_action_type(action)
    try:
        return ACTION_CATALOG[action_type]
    except KeyError:
        raise UnknownActionError(action_type.value)


def actions_for_role(role: Role) -> List[ActionType]:
    """Actions a role legitimately performs."""
    return [a for a, spec in ACTION_CATALOG.items() if spec.claimed_role == role]


def actions_blocked_by(role: Role) -> List[ActionType]:
    """Actions a role can block."""
    return [a for a, spec in ACTION_CATALOG.items() if role in spec.blockable_by]
