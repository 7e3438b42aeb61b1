"""
Transport interfaces and an in-memory room for tests and local play.

A transport moves JSON-compatible dicts between one host and its peers in a
named room. The real peer-to-peer or Socket.IO plumbing lives behind these
interfaces.
"""

import json
from abc import ABC, abstractmethod
from collections import deque
from typing import Callable, Dict, Any, Optional, List, Tuple


HostMessageHandler = Callable[[str, Dict[str, Any]], None]
DisconnectHandler = Callable[[str], None]
ClientMessageHandler = Callable[[Dict[str, Any]], None]


class HostTransport(ABC):
    """Host side of a room."""

    def __init__(self):
        self.on_message: Optional[HostMessageHandler] = None
        self.on_disconnect: Optional[DisconnectHandler] = None

    def set_handlers(self, on_message: HostMessageHandler, on_disconnect: DisconnectHandler) -> None:
        self.on_message = on_message
        self.on_disconnect = on_disconnect

    @abstractmethod
    def send(self, peer_id: str, data: Dict[str, Any]) -> None:
        """Send one message to one peer."""
        pass


class ClientTransport(ABC):
    """Peer side of a room."""

    def __init__(self, peer_id: str):
        self.peer_id = peer_id
        self.on_message: Optional[ClientMessageHandler] = None

    def set_handler(self, on_message: ClientMessageHandler) -> None:
        self.on_message = on_message

    @abstractmethod
    def send(self, data: Dict[str, Any]) -> None:
        """Send one message to the host."""
        pass


class LoopbackHostTransport(HostTransport):
    def __init__(self, hub: "LoopbackHub"):
        super().__init__()
        self.hub = hub

    def send(self, peer_id: str, data: Dict[str, Any]) -> None:
        self.hub.enqueue(peer_id, data, to_host=False)


class LoopbackClientTransport(ClientTransport):
    def __init__(self, hub: "LoopbackHub", peer_id: str):
        super().__init__(peer_id)
        self.hub = hub
        self.received: List[Dict[str, Any]] = []

    def send(self, data: Dict[str, Any]) -> None:
        self.hub.enqueue(self.peer_id, data, to_host=True)


class LoopbackHub:
    """
    In-memory room. Messages are JSON-encoded on send and queued until
    `deliver()` is called, so tests control interleaving and can drop
    messages to simulate a lossy link.
    """

    def __init__(self, room_code: str = "LOCAL"):
        self.room_code = room_code
        self.host = LoopbackHostTransport(self)
        self.clients: Dict[str, LoopbackClientTransport] = {}
        self._queue: deque = deque()
        self._drops: Dict[str, int] = {}
        self.dropped: List[Tuple[str, Dict[str, Any]]] = []

    def connect(self, peer_id: str) -> LoopbackClientTransport:
        client = LoopbackClientTransport(self, peer_id)
        self.clients[peer_id] = client
        return client

    def disconnect(self, peer_id: str) -> None:
        """Drop the peer's link and tell the host."""
        self.clients.pop(peer_id, None)
        if self.host.on_disconnect:
            self.host.on_disconnect(peer_id)

    def drop_next(self, peer_id: str, count: int = 1) -> None:
        """Lose the next `count` host messages addressed to the peer."""
        self._drops[peer_id] = self._drops.get(peer_id, 0) + count

    def enqueue(self, peer_id: str, data: Dict[str, Any], to_host: bool) -> None:
        self._queue.append((peer_id, json.dumps(data), to_host))

    def pending(self) -> int:
        return len(self._queue)

    def deliver(self, limit: int = 100000) -> int:
        """
        Deliver queued messages, including those sent while delivering.

        Returns:
            Number of messages delivered
        """
        delivered = 0
        while self._queue and delivered < limit:
            peer_id, text, to_host = self._queue.popleft()
            data = json.loads(text)
            if to_host:
                if self.host.on_message:
                    self.host.on_message(peer_id, data)
            else:
                client = self.clients.get(peer_id)
                if client is None:
                    continue
                if self._drops.get(peer_id):
                    self._drops[peer_id] -= 1
                    self.dropped.append((peer_id, data))
                    continue
                client.received.append(data)
                if client.on_message:
                    client.on_message(data)
            delivered += 1
        return delivered
