"""
Event emitter for recording game events to files.
"""

from typing import Dict, Any, Optional, List, Callable
from threading import Lock

from .run_recorder import RunRecorder


EventListener = Callable[[str, Dict[str, Any]], None]


class EventEmitter:
    """Event emitter that records game events to files and forwards them to listeners."""

    def __init__(self, run_recorder: Optional[RunRecorder] = None):
        self.run_recorder = run_recorder
        self._listeners: List[EventListener] = []
        self._lock = Lock()

    def register_listener(self, listener: EventListener) -> None:
        """Receive every emitted event as (event_type, data)."""
        with self._lock:
            self._listeners.append(listener)

    def _emit(self, event_type: str, data: Dict[str, Any]) -> None:
        """Emit an event by recording it to file."""
        if self.run_recorder:
            try:
                self.run_recorder.record_event(event_type, data)
            except OSError as e:
                # Don't let recording errors break the game
                print(f"Error recording event: {e}")
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(event_type, data)

    def emit_game_start(self, match_id: str, players: List[Dict[str, Any]]) -> None:
        """Emit game start event."""
        self._emit("game_start", {
            "match_id": match_id,
            "players": players,
        })

    def emit_turn_start(self, player_id: int, name: str, turn_number: int) -> None:
        self._emit("turn_start", {
            "player_id": player_id,
            "name": name,
            "turn_number": turn_number,
        })

    def emit_action_declared(self, actor_id: int, action: str, target_id: Optional[int],
                             claimed_role: Optional[str], turn_number: int) -> None:
        """Emit action declaration event."""
        self._emit("action_declared", {
            "actor_id": actor_id,
            "action": action,
            "target_id": target_id,
            "claimed_role": claimed_role,
            "turn_number": turn_number,
        })

    def emit_challenge(self, challenger_id: int, claimant_id: int, role: str,
                       bluff_caught: bool, on_block: bool = False) -> None:
        """Emit challenge event with its outcome."""
        self._emit("challenge", {
            "challenger_id": challenger_id,
            "claimant_id": claimant_id,
            "role": role,
            "bluff_caught": bluff_caught,
            "on_block": on_block,
        })

    def emit_block(self, blocker_id: int, role: str, action: str, actor_id: int) -> None:
        self._emit("block", {
            "blocker_id": blocker_id,
            "role": role,
            "action": action,
            "actor_id": actor_id,
        })

    def emit_influence_lost(self, player_id: int, role: str, reason: Optional[str]) -> None:
        self._emit("influence_lost", {
            "player_id": player_id,
            "role": role,
            "reason": reason,
        })

    def emit_elimination(self, player_id: int, name: str, turn_number: int) -> None:
        """Emit player elimination event."""
        self._emit("player_eliminated", {
            "player_id": player_id,
            "name": name,
            "turn_number": turn_number,
        })

    def emit_exchange(self, player_id: int, hand_size: int, kept: int) -> None:
        self._emit("exchange", {
            "player_id": player_id,
            "hand_size": hand_size,
            "kept": kept,
        })

    def emit_game_state_update(self, game_state: Dict[str, Any]) -> None:
        """Emit game state update event."""
        self._emit("game_state_update", {
            "game_state": game_state
        })

    def emit_game_over(self, winner_id: Optional[int], winner_name: Optional[str], turn_number: int) -> None:
        """Emit game over event."""
        self._emit("game_over", {
            "winner_id": winner_id,
            "winner": winner_name,
            "turn_number": turn_number,
        })
