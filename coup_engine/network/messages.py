"""
Wire messages exchanged between the host and its peers.

Every message is a JSON object {"type": ..., "payload": {...}}.
"""

import json
from enum import Enum
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, field


class MessageType(Enum):
    # peer -> host
    ACTION = "action"
    REACTION = "reaction"
    SELECTION = "selection"
    PLAYER_JOIN = "playerJoin"
    PLAYER_LEAVE = "playerLeave"
    RESYNC_REQUEST = "resyncRequest"
    # host -> peer
    STATE_SYNC = "stateSync"
    LOBBY_UPDATE = "lobbyUpdate"
    GAME_START = "gameStart"
    PROMPT = "prompt"
    GAME_OVER = "gameOver"
    ERROR = "error"


INPUT_TYPES = (MessageType.ACTION, MessageType.REACTION, MessageType.SELECTION)


@dataclass
class Message:
    """A typed wire message."""
    type: MessageType
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value, "payload": self.payload}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Any) -> "Message":
        """
        Parse a received message.

        Raises:
            ValueError: not an object, unknown type, or payload not an object
        """
        if not isinstance(data, dict):
            raise ValueError("Message must be a JSON object")
        try:
            message_type = MessageType(data.get("type"))
        except ValueError:
            raise ValueError(f"Unknown message type: {data.get('type')}")
        payload = data.get("payload") or {}
        if not isinstance(payload, dict):
            raise ValueError("Message payload must be a JSON object")
        return cls(message_type, payload)

    @classmethod
    def from_json(cls, text: str) -> "Message":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Malformed message: {e}")
        return cls.from_dict(data)


# Constructors, one per message kind

def player_join(name: str) -> Message:
    return Message(MessageType.PLAYER_JOIN, {"name": name})


def player_leave() -> Message:
    return Message(MessageType.PLAYER_LEAVE)


def resync_request() -> Message:
    return Message(MessageType.RESYNC_REQUEST)


def action(action_name: str, target_id: Optional[int] = None, request_id: Optional[int] = None) -> Message:
    return Message(MessageType.ACTION, {"action": action_name, "target_id": target_id, "request_id": request_id})


def reaction(kind: str, role: Optional[str] = None, request_id: Optional[int] = None) -> Message:
    return Message(MessageType.REACTION, {"kind": kind, "role": role, "request_id": request_id})


def lose_selection(card_index: int, request_id: Optional[int] = None) -> Message:
    return Message(MessageType.SELECTION, {"kind": "lose", "card_index": card_index, "request_id": request_id})


def keep_selection(kept_indices: List[int], request_id: Optional[int] = None) -> Message:
    return Message(MessageType.SELECTION, {"kind": "keep", "kept_indices": list(kept_indices), "request_id": request_id})


def state_sync(seq: int, prev_seq: Optional[int], full: bool, state: Dict[str, Any]) -> Message:
    return Message(MessageType.STATE_SYNC, {"seq": seq, "prev_seq": prev_seq, "full": full, "state": state})


def lobby_update(players: List[Dict[str, Any]], room_code: Optional[str] = None) -> Message:
    return Message(MessageType.LOBBY_UPDATE, {"players": players, "room_code": room_code})


def game_start(match_id: str, seat_id: Optional[int]) -> Message:
    return Message(MessageType.GAME_START, {"match_id": match_id, "seat_id": seat_id})


def prompt(request: Dict[str, Any]) -> Message:
    return Message(MessageType.PROMPT, request)


def game_over(winner_id: Optional[int], winner: Optional[str]) -> Message:
    return Message(MessageType.GAME_OVER, {"winner_id": winner_id, "winner": winner})


def error(message: str, code: str = "invalid_move") -> Message:
    return Message(MessageType.ERROR, {"message": message, "code": code})
