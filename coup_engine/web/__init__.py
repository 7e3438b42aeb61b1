"""
Web interface module: event recording, match history, and the Socket.IO and replay servers.
"""

from .event_emitter import EventEmitter
from .run_recorder import RunRecorder

__all__ = ['EventEmitter', 'RunRecorder']
