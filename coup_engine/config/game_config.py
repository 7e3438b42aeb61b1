"""
Game configuration and house rules.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict


BOT_DIFFICULTIES = ("easy", "normal", "hard", "hardcore")
AGENT_TYPES = ("bot", "scripted")


@dataclass
class GameConfig:
    """Configuration for game parameters."""

    # Table
    starting_coins: int = 2
    cards_per_player: int = 2
    copies_per_role: int = 3  # for tables of six or fewer
    min_players: int = 2
    max_players: int = 10

    # House rules
    forced_coup_enabled: bool = True
    forced_coup_threshold: int = 10
    refund_assassination_on_caught_bluff: bool = True
    block_challenge_by_anyone: bool = True  # False: only the blocked actor may challenge a block
    auto_resolve_forced_loss: bool = True  # one live card left means no choice to make

    # Seats for local simulation
    human_players: int = 0
    bot_players: int = 4

    # Agent settings
    agent_type: str = "bot"  # Options: "bot" or "scripted" (used if agent_types not specified)
    agent_types: Optional[Dict[int, str]] = field(default=None)  # Per-seat agent types: {player_id: "agent_type"}
    bot_difficulty: str = "normal"  # easy, normal, hard, hardcore

    # Network play
    turn_timer_seconds: Optional[float] = 30.0  # None waits forever (local play only)
    network_poll_interval: float = 0.1  # seconds

    # Output and recording
    use_announcements: bool = True
    record_runs: bool = True
    runs_dir: str = "runs"
    max_match_history: int = 20

    random_seed: Optional[int] = None  # Random seed for reproducible deals and bot behaviour


# Default configuration instance
default_config = GameConfig()
