"""
Pytest fixtures for Coup engine tests.
"""

import pytest
from typing import Dict, List, Optional, Sequence

from coup_engine.core import GameState, ResolutionEngine, Role, SeatSpec
from coup_engine.config.game_config import GameConfig


@pytest.fixture
def game_config():
    """Test game configuration."""
    return GameConfig(
        use_announcements=False,  # Disable for cleaner test output
        record_runs=False,
        random_seed=42,
    )


def _deal_hands(state: GameState, hands: Dict[int, List[Role]]) -> None:
    """
    Rig the deal: gather every card back, give the listed players exactly these
    roles, deal the rest normally. The card total never changes.
    """
    pool = list(state.deck.cards)
    for player in state.players:
        pool.extend(player.cards)
        player.cards = []
    for card in pool:
        card.dead = False

    for player_id, roles in hands.items():
        player = state.get_player(player_id)
        for role in roles:
            card = next(c for c in pool if c.role == role)
            pool.remove(card)
            player.cards.append(card)

    for player in state.players:
        while len(player.cards) < 2:
            player.cards.append(pool.pop())
    state.deck.cards = pool


@pytest.fixture
def deal_hands():
    return _deal_hands


@pytest.fixture
def make_engine(game_config):
    """
    Factory for a started engine with rigged hands and coins.

    Players are numbered from 1 in seat order.
    """
    def factory(names: Sequence[str] = ("Alice", "Bob"),
                hands: Optional[Dict[int, List[Role]]] = None,
                coins: Optional[Dict[int, int]] = None,
                dead: Optional[Dict[int, List[int]]] = None,
                config: Optional[GameConfig] = None,
                seed: int = 7,
                start: bool = True) -> ResolutionEngine:
        config = config or game_config
        state = GameState.create([SeatSpec(name=n) for n in names], config, random_seed=seed)
        if hands:
            _deal_hands(state, hands)
        for player_id, amount in (coins or {}).items():
            state.get_player(player_id).coins = amount
        for player_id, indices in (dead or {}).items():
            player = state.get_player(player_id)
            for index in indices:
                player.cards[index].dead = True
            player.alive = bool(player.influence)
        engine = ResolutionEngine(state, config)
        if start:
            engine.start()
        return engine

    return factory


def log_texts(engine: ResolutionEngine) -> List[str]:
    return [e.text for e in engine.game_state.log]


@pytest.fixture
def texts():
    return log_texts
