"""
Game state: players, deck, turn pointer, the pending action and the match log.
"""

import copy
import random
import uuid
from enum import Enum
from typing import List, Optional, Dict, Any, Sequence
from dataclasses import dataclass, field

from .roles import Deck, copies_per_role
from .player import Player
from .pending import PendingAction
from ..config.game_config import GameConfig, default_config


class GamePhase(Enum):
    """Top-level match phase."""
    SETUP = "setup"
    AWAITING_ACTION = "awaiting_action"
    RESOLVING = "resolving"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class LogEntry:
    """One narrative line plus the full state at the moment it was written."""
    index: int
    text: str
    snapshot: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "snapshot": self.snapshot}


@dataclass
class SeatSpec:
    """Who sits in a seat before the match starts."""
    name: str
    is_bot: bool = False
    is_remote: bool = False
    peer_id: Optional[str] = None
    difficulty: str = "normal"


@dataclass
class GameState:
    """Complete game state."""
    players: List[Player] = field(default_factory=list)
    deck: Deck = field(default_factory=Deck)
    current_player_index: int = 0
    turn_number: int = 0
    phase: GamePhase = GamePhase.SETUP
    pending: Optional[PendingAction] = None
    log: List[LogEntry] = field(default_factory=list)
    winner_id: Optional[int] = None
    request_id: int = 0
    match_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    random_seed: Optional[int] = None
    initial_card_count: int = 0

    @classmethod
    def create(cls, seats: Sequence[SeatSpec], config: GameConfig = default_config,
               random_seed: Optional[int] = None, match_id: Optional[str] = None) -> "GameState":
        """
        Build a new match: deck sized for the table, two cards and starting coins per seat.

        Raises:
            ValueError: seat count outside the configured limits
        """
        if not config.min_players <= len(seats) <= config.max_players:
            raise ValueError(
                f"Need {config.min_players}-{config.max_players} players, got {len(seats)}"
            )

        rng = random.Random(random_seed) if random_seed is not None else random.Random()
        deck = Deck.build(copies_per_role(len(seats), config.copies_per_role), rng)

        players = []
        for i, seat in enumerate(seats, start=1):
            players.append(Player(
                player_id=i,
                name=seat.name,
                coins=config.starting_coins,
                cards=deck.deal(config.cards_per_player),
                is_bot=seat.is_bot,
                is_remote=seat.is_remote,
                peer_id=seat.peer_id,
                difficulty=seat.difficulty,
            ))

        state = cls(players=players, deck=deck, random_seed=random_seed)
        if match_id:
            state.match_id = match_id
        state.initial_card_count = state.total_card_count()
        return state

    @property
    def game_over(self) -> bool:
        return self.phase == GamePhase.GAME_OVER

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]

    def get_player(self, player_id: int) -> Optional[Player]:
        """Get player by id."""
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

    def get_player_by_peer(self, peer_id: str) -> Optional[Player]:
        for player in self.players:
            if player.peer_id == peer_id:
                return player
        return None

    def get_alive_players(self) -> List[Player]:
        """Get all alive players."""
        return [p for p in self.players if p.alive]

    def seat_order_after(self, player_id: int) -> List[Player]:
        """Alive players in seat order starting after the given player, wrapping."""
        ids = [p.player_id for p in self.players]
        start = ids.index(player_id)
        ordered = self.players[start + 1:] + self.players[:start]
        return [p for p in ordered if p.alive]

    def check_win_condition(self) -> Optional[Player]:
        """Return the winner when exactly one player is left alive."""
        alive = self.get_alive_players()
        if len(alive) == 1:
            return alive[0]
        return None

    def total_card_count(self) -> int:
        """Deck plus every hand, live and revealed."""
        return len(self.deck) + sum(len(p.cards) for p in self.players)

    def revealed_role_counts(self) -> Dict[str, int]:
        """Public knowledge: how many copies of each role are face up."""
        counts: Dict[str, int] = {}
        for player in self.players:
            for card in player.revealed:
                counts[card.role.value] = counts.get(card.role.value, 0) + 1
        return counts

    def add_log(self, text: str) -> LogEntry:
        """
        Append a log line with a snapshot that includes the log up to and including it.
        """
        index = len(self.log)
        texts = [e.text for e in self.log] + [text]
        snapshot = self.to_dict(include_log=False)
        snapshot["log"] = texts
        entry = LogEntry(index=index, text=text, snapshot=snapshot)
        self.log.append(entry)
        return entry

    def to_dict(self, viewer_id: Optional[int] = None, include_log: bool = True,
                reveal_all: Optional[bool] = None) -> Dict[str, Any]:
        """
        Serialize the state to plain JSON-compatible data.

        Args:
            viewer_id: when set, other players' live cards are hidden
            include_log: include the narrative log texts
            reveal_all: force full visibility (replay snapshots); defaults to viewer_id is None
        """
        if reveal_all is None:
            reveal_all = viewer_id is None
        players = []
        for player in self.players:
            hide = not reveal_all and player.player_id != viewer_id
            players.append(player.to_dict(hide_hand=hide))

        data = {
            "match_id": self.match_id,
            "players": players,
            "deck_size": len(self.deck),
            "current_player_index": self.current_player_index,
            "turn_number": self.turn_number,
            "phase": self.phase.value,
            "pending": self.pending.to_dict() if self.pending else None,
            "game_over": self.game_over,
            "winner_id": self.winner_id,
            "request_id": self.request_id,
        }
        if reveal_all:
            data["deck"] = [c.to_dict() for c in self.deck.cards]
        if include_log:
            data["log"] = [e.text for e in self.log]
        return copy.deepcopy(data)

    def snapshot(self) -> Dict[str, Any]:
        """Full, read-only copy of the current state."""
        return self.to_dict()

    def get_game_summary(self) -> Dict[str, Any]:
        """Get a summary of the current game state."""
        winner = self.get_player(self.winner_id) if self.winner_id is not None else None
        return {
            "match_id": self.match_id,
            "phase": self.phase.value,
            "turn": self.turn_number,
            "alive_players": len(self.get_alive_players()),
            "winner": winner.name if winner else None,
        }
