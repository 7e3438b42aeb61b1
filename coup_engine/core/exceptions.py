"""
Error taxonomy for the rules engine and the sync layer.
"""

from typing import Optional


class CoupError(Exception):
    """Base class for engine errors."""


class InvalidMove(CoupError):
    """An illegal input from a player. State is left unchanged."""

    def __init__(self, player_id: Optional[int], message: str = ""):
        self.player_id = player_id
        self.message = message or f"Invalid move by player {player_id}"
        super().__init__(self.message)


class InvalidAction(InvalidMove):
    """Illegal action declaration: wrong phase, insufficient coins, bad target."""


class InvalidReaction(InvalidMove):
    """Illegal challenge, block or pass."""


class InvalidSelection(InvalidMove):
    """Illegal card choice for an influence loss or an exchange."""


class ProtocolDesync(CoupError):
    """A peer's mirror no longer matches the host's broadcast sequence."""

    def __init__(self, expected_seq: int, received_prev_seq: Optional[int]):
        self.expected_seq = expected_seq
        self.received_prev_seq = received_prev_seq
        super().__init__(
            f"State sync out of order: mirror at seq {expected_seq}, "
            f"delta built on seq {received_prev_seq}"
        )


class EngineInvariantViolation(CoupError):
    """Programming error inside the engine. Never caught by game code."""


class UnknownActionError(EngineInvariantViolation):
    """Action name missing from the catalog."""

    def __init__(self, action_name: str):
        self.action_name = action_name
        super().__init__(f"Unknown action: {action_name}")
