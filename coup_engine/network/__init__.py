"""
Host-authoritative synchronization: wire messages, host, client, timer and transports.
"""

from .messages import Message, MessageType
from .transport import HostTransport, ClientTransport, LoopbackHub
from .timer import TurnTimer
from .host import NetworkHost, HOST_PEER_ID
from .client import NetworkClient

__all__ = [
    'Message',
    'MessageType',
    'HostTransport',
    'ClientTransport',
    'LoopbackHub',
    'TurnTimer',
    'NetworkHost',
    'HOST_PEER_ID',
    'NetworkClient',
]
