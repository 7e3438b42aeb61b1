"""
Host-authoritative match server.

The host owns the only ResolutionEngine. Peers send inputs; the host applies
them as if they were local, then pushes each peer a redacted view of the new
state. Peers never touch authoritative state.
"""

import asyncio
import time
from typing import Callable, Dict, Any, List, Optional

from . import messages
from .messages import Message, MessageType
from .timer import TurnTimer
from .transport import HostTransport
from ..config.game_config import GameConfig, default_config
from ..core import (
    SeatSpec, Reaction, DecisionRequest, InvalidMove, UnknownActionError, LogEntry,
    parse_action_type,
)
from ..match import CoupMatch
from ..web import EventEmitter, RunRecorder


HOST_PEER_ID = "host"


class NetworkHost:
    """Lobby, input routing, state broadcast and turn timing for one room."""

    def __init__(self, transport: HostTransport, config: GameConfig = default_config,
                 host_name: Optional[str] = "Host", room_code: Optional[str] = None,
                 clock: Callable[[], float] = time.monotonic,
                 event_emitter: Optional[EventEmitter] = None,
                 run_recorder: Optional[RunRecorder] = None):
        self.transport = transport
        self.transport.set_handlers(self.handle_message, self.handle_disconnect)
        self.config = config
        self.room_code = room_code
        self.event_emitter = event_emitter
        self.run_recorder = run_recorder

        # Host seat is local; it plays through handle_message(HOST_PEER_ID, ...)
        self.lobby: List[SeatSpec] = []
        if host_name:
            self.lobby.append(SeatSpec(name=host_name, peer_id=HOST_PEER_ID))

        self.match: Optional[CoupMatch] = None
        self.timer = TurnTimer(config.turn_timer_seconds, clock=clock)
        self.local_prompt: Optional[Dict[str, Any]] = None

        self._seq = 0
        self._peer_seq: Dict[str, int] = {}
        self._last_sent: Dict[str, Dict[str, Any]] = {}
        self._game_over_sent = False

    # ------------------------------------------------------------------
    # Lobby
    # ------------------------------------------------------------------

    @property
    def started(self) -> bool:
        return self.match is not None

    def add_bot(self, name: str, difficulty: Optional[str] = None) -> None:
        if self.started:
            raise ValueError("Cannot add bots after the game started")
        if len(self.lobby) >= self.config.max_players:
            raise ValueError("Room is full")
        self.lobby.append(SeatSpec(name=name, is_bot=True, difficulty=difficulty or self.config.bot_difficulty))
        self._broadcast_lobby()

    def lobby_players(self) -> List[Dict[str, Any]]:
        return [
            {"seat": i + 1, "name": s.name, "is_bot": s.is_bot, "peer_id": s.peer_id}
            for i, s in enumerate(self.lobby)
        ]

    def start_game(self, match_id: Optional[str] = None) -> None:
        """
        Seat the lobby and start the match.

        Raises:
            ValueError: already started, or seat count outside the configured limits
        """
        if self.started:
            raise ValueError("Game already started")
        self.match = CoupMatch(
            seats=list(self.lobby),
            config=self.config,
            event_emitter=self.event_emitter,
            run_recorder=self.run_recorder,
            match_id=match_id,
        )
        self.match.engine.add_listener(self._on_state_change)

        for peer_id in self._remote_peers():
            player = self.match.game_state.get_player_by_peer(peer_id)
            self._send(peer_id, messages.game_start(self.match.game_state.match_id, player.player_id))
        self.match.engine.start()
        if self.match.run_recorder:
            self.match.run_recorder.save_metadata(self.match._metadata())
        self._advance()

    # ------------------------------------------------------------------
    # Inbound
    # ------------------------------------------------------------------

    def handle_message(self, peer_id: str, data: Any) -> None:
        """Route one message from a peer. Errors go back to that peer only."""
        try:
            message = Message.from_json(data) if isinstance(data, str) else Message.from_dict(data)
        except ValueError as e:
            self._send(peer_id, messages.error(str(e), code="malformed"))
            return

        if message.type == MessageType.PLAYER_JOIN:
            self._handle_join(peer_id, message.payload)
        elif message.type == MessageType.PLAYER_LEAVE:
            self.handle_disconnect(peer_id)
        elif message.type == MessageType.RESYNC_REQUEST:
            self.send_full_sync(peer_id)
        elif message.type in messages.INPUT_TYPES:
            self._handle_input(peer_id, message)
        else:
            self._send(peer_id, messages.error(f"Unexpected message: {message.type.value}", code="unexpected"))

    def handle_disconnect(self, peer_id: str) -> None:
        """A peer left. Lobby seats are freed; mid-game seats are marked disconnected."""
        if not self.started:
            before = len(self.lobby)
            self.lobby = [s for s in self.lobby if s.peer_id != peer_id]
            if len(self.lobby) != before:
                self._broadcast_lobby()
            return

        player = self.match.game_state.get_player_by_peer(peer_id)
        self._last_sent.pop(peer_id, None)
        self._peer_seq.pop(peer_id, None)
        if player is None or not player.connected:
            return
        player.connected = False
        if self.config.use_announcements:
            print(f"[HOST] {player.name} disconnected")
        self._advance()

    def _handle_join(self, peer_id: str, payload: Dict[str, Any]) -> None:
        if self.started:
            player = self.match.game_state.get_player_by_peer(peer_id)
            if player is None:
                self._send(peer_id, messages.error("Game already in progress", code="game_started"))
                return
            # Reconnect to an existing seat
            player.connected = True
            self._send(peer_id, messages.game_start(self.match.game_state.match_id, player.player_id))
            self.send_full_sync(peer_id)
            self._send_prompt()
            return

        if any(s.peer_id == peer_id for s in self.lobby):
            self._broadcast_lobby()
            return
        if len(self.lobby) >= self.config.max_players:
            self._send(peer_id, messages.error("Room is full", code="room_full"))
            return
        name = str(payload.get("name") or f"Player {len(self.lobby) + 1}")
        self.lobby.append(SeatSpec(name=name, is_remote=True, peer_id=peer_id))
        self._broadcast_lobby()

    def _handle_input(self, peer_id: str, message: Message) -> None:
        if not self.started:
            self._send(peer_id, messages.error("The game has not started", code="not_started"))
            return
        player = self.match.game_state.get_player_by_peer(peer_id)
        if player is None:
            self._send(peer_id, messages.error("You are not seated in this game", code="not_seated"))
            return

        engine = self.match.engine
        payload = message.payload
        request_id = payload.get("request_id")
        try:
            if message.type == MessageType.ACTION:
                if request_id is not None and request_id != self.match.game_state.request_id:
                    return
                action_type = parse_action_type(payload.get("action", ""))
                engine.declare_action(player.player_id, action_type, payload.get("target_id"))
            elif message.type == MessageType.REACTION:
                engine.submit_reaction(player.player_id, Reaction.from_dict(payload), request_id)
            elif payload.get("kind") == "lose":
                engine.resolve_influence_loss(player.player_id, int(payload["card_index"]), request_id)
            elif payload.get("kind") == "keep":
                kept = [int(i) for i in payload["kept_indices"]]
                engine.resolve_exchange_keep(player.player_id, kept, request_id)
            else:
                raise ValueError(f"Unknown selection kind: {payload.get('kind')}")
        except InvalidMove as e:
            self._send(peer_id, messages.error(e.message))
            return
        except UnknownActionError as e:
            # A remote peer naming a bogus action is bad input, not an engine fault
            self._send(peer_id, messages.error(str(e), code="malformed"))
            return
        except (KeyError, TypeError, ValueError) as e:
            self._send(peer_id, messages.error(f"Malformed input: {e}", code="malformed"))
            return
        self._advance()

    # ------------------------------------------------------------------
    # Outbound
    # ------------------------------------------------------------------

    def _on_state_change(self, snapshot: Dict[str, Any], entry: LogEntry) -> None:
        self.broadcast_state()

    def broadcast_state(self) -> None:
        """Send every connected peer its redacted view: full the first time, changed keys after."""
        state = self.match.game_state
        self._seq += 1
        for peer_id in self._remote_peers():
            player = state.get_player_by_peer(peer_id)
            if player is None or not player.connected:
                continue
            view = state.to_dict(viewer_id=player.player_id)
            previous = self._last_sent.get(peer_id)
            if previous is None:
                message = messages.state_sync(self._seq, None, True, view)
            else:
                changed = {k: v for k, v in view.items() if previous.get(k) != v}
                message = messages.state_sync(self._seq, self._peer_seq[peer_id], False, changed)
            self._last_sent[peer_id] = view
            self._peer_seq[peer_id] = self._seq
            self._send(peer_id, message)

    def send_full_sync(self, peer_id: str) -> None:
        """Answer a resync request with the complete view at the current sequence."""
        if not self.started:
            self._send(peer_id, messages.lobby_update(self.lobby_players(), self.room_code))
            return
        player = self.match.game_state.get_player_by_peer(peer_id)
        if player is None:
            self._send(peer_id, messages.error("You are not seated in this game", code="not_seated"))
            return
        view = self.match.game_state.to_dict(viewer_id=player.player_id)
        self._last_sent[peer_id] = view
        self._peer_seq[peer_id] = self._seq
        self._send(peer_id, messages.state_sync(self._seq, None, True, view))

    def _broadcast_lobby(self) -> None:
        message = messages.lobby_update(self.lobby_players(), self.room_code)
        for seat in self.lobby:
            if seat.peer_id and seat.peer_id != HOST_PEER_ID:
                self._send(seat.peer_id, message)

    def _send_prompt(self) -> None:
        request = self.match.engine.current_request()
        if request is None:
            return
        player = self.match.game_state.get_player(request.player_id)
        if player.peer_id == HOST_PEER_ID:
            self.local_prompt = request.to_dict()
        elif player.peer_id and player.connected:
            self._send(player.peer_id, messages.prompt(request.to_dict()))

    def _send(self, peer_id: str, message: Message) -> None:
        if peer_id == HOST_PEER_ID:
            if message.type == MessageType.ERROR and self.config.use_announcements:
                print(f"[HOST] {message.payload['message']}")
            return
        self.transport.send(peer_id, message.to_dict())

    def _remote_peers(self) -> List[str]:
        return [s.peer_id for s in self.lobby if s.peer_id and s.peer_id != HOST_PEER_ID]

    # ------------------------------------------------------------------
    # Driving
    # ------------------------------------------------------------------

    def _advance(self) -> None:
        """Play bots and absent seats until a connected human must decide, then prompt and time them."""
        engine = self.match.engine
        request = self.match.run_bots()
        while request is not None:
            player = self.match.game_state.get_player(request.player_id)
            if player.connected:
                break
            engine.expire_request(request.request_id)
            request = self.match.run_bots()

        if request is None:
            self.timer.cancel()
            self.local_prompt = None
            if not self._game_over_sent:
                self._game_over_sent = True
                state = self.match.game_state
                winner = state.get_player(state.winner_id)
                message = messages.game_over(state.winner_id, winner.name if winner else None)
                for peer_id in self._remote_peers():
                    self._send(peer_id, message)
            return

        if self.timer.request_id != request.request_id:
            self.local_prompt = None
            self.timer.start(request.request_id)
            self._send_prompt()

    def current_request(self) -> Optional[DecisionRequest]:
        return self.match.engine.current_request() if self.match else None

    def pump(self) -> bool:
        """
        Expire an overdue request into its default answer.
        Returns True if something was expired.
        """
        if not self.started or self.match.game_state.game_over:
            return False
        if not self.timer.expired():
            return False
        request_id = self.timer.request_id
        self.timer.cancel()
        expired = self.match.engine.expire_request(request_id)
        self._advance()
        return expired

    async def run(self, poll_interval: Optional[float] = None) -> None:
        """Pump the timer until the match ends."""
        interval = poll_interval if poll_interval is not None else self.config.network_poll_interval
        while not (self.started and self.match.game_state.game_over):
            self.pump()
            await asyncio.sleep(interval)
