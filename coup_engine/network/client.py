"""
Peer side of a room: sends inputs, keeps a read-only mirror of the host's state.
"""

import copy
from typing import Dict, Any, List, Optional

from . import messages
from .messages import Message, MessageType
from .transport import ClientTransport
from ..core import ProtocolDesync


class NetworkClient:
    """Mirror of the authoritative state as seen from one seat."""

    def __init__(self, transport: ClientTransport, name: str):
        self.transport = transport
        self.transport.set_handler(self.handle_message)
        self.name = name

        self.mirror: Dict[str, Any] = {}
        self.seq: Optional[int] = None
        self.seat_id: Optional[int] = None
        self.match_id: Optional[str] = None
        self.prompt: Optional[Dict[str, Any]] = None
        self.lobby: List[Dict[str, Any]] = []
        self.errors: List[str] = []
        self.result: Optional[Dict[str, Any]] = None
        self.resync_count = 0
        self._awaiting_resync = False

    @property
    def peer_id(self) -> str:
        return self.transport.peer_id

    @property
    def state(self) -> Dict[str, Any]:
        """A copy of the mirror; the mirror itself is only written by syncs."""
        return copy.deepcopy(self.mirror)

    # ------------------------------------------------------------------
    # Outbound
    # ------------------------------------------------------------------

    def join(self) -> None:
        self._send(messages.player_join(self.name))

    def leave(self) -> None:
        self._send(messages.player_leave())

    def declare_action(self, action: str, target_id: Optional[int] = None) -> None:
        self._send(messages.action(action, target_id, self._request_id()))

    def react(self, kind: str, role: Optional[str] = None) -> None:
        self._send(messages.reaction(kind, role, self._request_id()))

    def lose_card(self, card_index: int) -> None:
        self._send(messages.lose_selection(card_index, self._request_id()))

    def keep_cards(self, kept_indices: List[int]) -> None:
        self._send(messages.keep_selection(kept_indices, self._request_id()))

    def request_resync(self) -> None:
        self._awaiting_resync = True
        self.resync_count += 1
        self._send(messages.resync_request())

    def _request_id(self) -> Optional[int]:
        if self.prompt:
            return self.prompt.get("request_id")
        return self.mirror.get("request_id")

    def _send(self, message: Message) -> None:
        self.transport.send(message.to_dict())

    # ------------------------------------------------------------------
    # Inbound
    # ------------------------------------------------------------------

    def handle_message(self, data: Dict[str, Any]) -> None:
        message = Message.from_dict(data)
        payload = message.payload

        if message.type == MessageType.STATE_SYNC:
            try:
                self.apply_sync(payload)
            except ProtocolDesync:
                if not self._awaiting_resync:
                    self.request_resync()
        elif message.type == MessageType.PROMPT:
            self.prompt = payload
        elif message.type == MessageType.LOBBY_UPDATE:
            self.lobby = payload.get("players", [])
        elif message.type == MessageType.GAME_START:
            self.match_id = payload.get("match_id")
            self.seat_id = payload.get("seat_id")
        elif message.type == MessageType.GAME_OVER:
            self.result = payload
            self.prompt = None
        elif message.type == MessageType.ERROR:
            self.errors.append(payload.get("message", ""))

    def apply_sync(self, payload: Dict[str, Any]) -> None:
        """
        Apply a stateSync payload to the mirror.

        Raises:
            ProtocolDesync: a delta built on a sequence the mirror never saw
        """
        if payload.get("full"):
            self.mirror = copy.deepcopy(payload["state"])
            self.seq = payload["seq"]
            self._awaiting_resync = False
        else:
            if self.seq is None or payload.get("prev_seq") != self.seq:
                raise ProtocolDesync(self.seq, payload.get("prev_seq"))
            self.mirror.update(copy.deepcopy(payload["state"]))
            self.seq = payload["seq"]

        if self.prompt and self.prompt.get("request_id") != self.mirror.get("request_id"):
            self.prompt = None
