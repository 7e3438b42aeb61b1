"""
Core game engine components: cards, players, the action catalog, game state and rule resolution.
"""

from .roles import Role, Card, Deck, copies_per_role
from .player import Player
from .actions import ActionType, ActionSpec, ACTION_CATALOG, get_action_spec, parse_action_type
from .pending import (
    PendingAction, PendingPhase, LossReason, ResumeStep, Reaction, ReactionKind,
    RequestKind, DecisionRequest,
)
from .game_state import GameState, GamePhase, LogEntry, SeatSpec
from .game_engine import ResolutionEngine
from .history import ReplayCursor
from .exceptions import (
    CoupError, InvalidMove, InvalidAction, InvalidReaction, InvalidSelection,
    ProtocolDesync, EngineInvariantViolation, UnknownActionError,
)

__all__ = [
    'Role',
    'Card',
    'Deck',
    'copies_per_role',
    'Player',
    'ActionType',
    'ActionSpec',
    'ACTION_CATALOG',
    'get_action_spec',
    'parse_action_type',
    'PendingAction',
    'PendingPhase',
    'LossReason',
    'ResumeStep',
    'Reaction',
    'ReactionKind',
    'RequestKind',
    'DecisionRequest',
    'GameState',
    'GamePhase',
    'LogEntry',
    'SeatSpec',
    'ResolutionEngine',
    'ReplayCursor',
    'CoupError',
    'InvalidMove',
    'InvalidAction',
    'InvalidReaction',
    'InvalidSelection',
    'ProtocolDesync',
    'EngineInvariantViolation',
    'UnknownActionError',
]
