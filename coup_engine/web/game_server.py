"""
Socket.IO server hosting Coup rooms.

Each room code gets its own NetworkHost. Socket.IO session ids are the peer
ids; wire messages travel on the 'message' event.
"""

import threading
from typing import Optional, Dict, Any
from flask import Flask, jsonify, request
from flask_socketio import SocketIO, emit, join_room, leave_room

from .event_emitter import EventEmitter
from ..config.game_config import GameConfig, default_config
from ..network import messages
from ..network.host import NetworkHost
from ..network.transport import HostTransport


class SocketIOHostTransport(HostTransport):
    """Delivers host messages to one Socket.IO session each."""

    def __init__(self, socketio: SocketIO):
        super().__init__()
        self.socketio = socketio

    def send(self, peer_id: str, data: Dict[str, Any]) -> None:
        self.socketio.emit('message', data, to=peer_id)


class GameServer:
    """Web server hosting live matches for browser clients."""

    def __init__(self, port: int = 5000, host: str = '127.0.0.1', config: GameConfig = default_config,
                 event_emitter: Optional[EventEmitter] = None):
        self.port = port
        self.host = host
        self.config = config
        self.event_emitter = event_emitter

        self.app = Flask(__name__)
        self.socketio = SocketIO(self.app, cors_allowed_origins="*", async_mode='threading')
        self.rooms: Dict[str, NetworkHost] = {}
        self.peer_rooms: Dict[str, str] = {}
        self._lock = threading.Lock()
        self._running = False

        # Setup routes
        self._setup_routes()

        # Setup socketio handlers
        self._setup_socketio()

    def _setup_routes(self):
        """Setup Flask routes."""
        @self.app.route('/api/rooms')
        def list_rooms():
            with self._lock:
                return jsonify([
                    {
                        "room": code,
                        "started": room.started,
                        "players": room.lobby_players(),
                    }
                    for code, room in self.rooms.items()
                ])

    def _setup_socketio(self):
        """Setup SocketIO event handlers."""
        @self.socketio.on('join')
        def handle_join(data):
            sid = request.sid
            data = data or {}
            room_code = str(data.get('room') or '').strip().upper()
            if not room_code:
                emit('message', messages.error("Room code required", code="malformed").to_dict(), to=sid)
                return
            with self._lock:
                room = self._get_or_create_room(room_code)
                join_room(room_code)
                self.peer_rooms[sid] = room_code
                room.handle_message(sid, messages.player_join(data.get('name', '')).to_dict())

        @self.socketio.on('add_bot')
        def handle_add_bot(data):
            sid = request.sid
            data = data or {}
            with self._lock:
                room = self._room_for(sid)
                if room is None:
                    return
                try:
                    room.add_bot(data.get('name') or f"Bot {len(room.lobby) + 1}", data.get('difficulty'))
                except ValueError as e:
                    emit('message', messages.error(str(e), code="lobby").to_dict(), to=sid)

        @self.socketio.on('start')
        def handle_start(data=None):
            sid = request.sid
            with self._lock:
                room = self._room_for(sid)
                if room is None:
                    return
                try:
                    room.start_game()
                except ValueError as e:
                    emit('message', messages.error(str(e), code="lobby").to_dict(), to=sid)

        @self.socketio.on('message')
        def handle_message(data):
            sid = request.sid
            with self._lock:
                room = self._room_for(sid)
                if room is None:
                    return
                room.handle_message(sid, data)

        @self.socketio.on('disconnect')
        def handle_disconnect(*args):
            sid = request.sid
            with self._lock:
                room_code = self.peer_rooms.pop(sid, None)
                if room_code is None:
                    return
                leave_room(room_code)
                self.rooms[room_code].handle_disconnect(sid)
                print(f"Client {sid} left room {room_code}")
                self._close_room_if_empty(room_code)

    def _get_or_create_room(self, room_code: str) -> NetworkHost:
        room = self.rooms.get(room_code)
        if room is None:
            transport = SocketIOHostTransport(self.socketio)
            room = NetworkHost(
                transport, self.config, host_name=None, room_code=room_code,
                event_emitter=self.event_emitter,
            )
            self.rooms[room_code] = room
            print(f"Room {room_code} created")
        return room

    def _close_room_if_empty(self, room_code: str) -> None:
        if room_code in self.peer_rooms.values():
            return
        del self.rooms[room_code]
        print(f"Room {room_code} closed")

    def _room_for(self, sid: str) -> Optional[NetworkHost]:
        room_code = self.peer_rooms.get(sid)
        if room_code is None:
            emit('message', messages.error("Join a room first", code="not_seated").to_dict(), to=sid)
            return None
        return self.rooms[room_code]

    def pump_all(self) -> None:
        """Expire overdue requests in every running room."""
        with self._lock:
            for room in self.rooms.values():
                room.pump()

    def _pump_loop(self) -> None:
        while self._running:
            self.pump_all()
            self.socketio.sleep(self.config.network_poll_interval)

    def start(self) -> None:
        """Start the web server."""
        print(f"\n{'='*60}")
        print(f"Starting game server on http://{self.host}:{self.port}")
        print(f"{'='*60}\n")
        self._running = True
        self.socketio.start_background_task(self._pump_loop)
        self.socketio.run(self.app, host=self.host, port=self.port, debug=False, allow_unsafe_werkzeug=True)
        self._running = False
