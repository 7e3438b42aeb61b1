"""
Match controller: seats, agents, the engine, and persistence of finished matches.
"""

import dataclasses
import random
from datetime import datetime
from typing import Dict, List, Optional, Any

from .agents import BaseAgent, BotAgent, ScriptedAgent
from .config.game_config import GameConfig, default_config
from .core import (
    GameState, SeatSpec, Player, ResolutionEngine, DecisionRequest, RequestKind,
    Reaction, Role, InvalidMove, InvalidReaction, LogEntry,
)
from .web import EventEmitter, RunRecorder


class CoupMatch:
    """Main game controller."""

    def __init__(self, seats: Optional[List[SeatSpec]] = None, config: Optional[GameConfig] = None,
                 agents: Optional[Dict[int, BaseAgent]] = None,
                 event_emitter: Optional[EventEmitter] = None,
                 run_recorder: Optional[RunRecorder] = None,
                 match_id: Optional[str] = None):
        config = config or default_config

        # Generate seed if not provided, without touching the shared config
        if config.random_seed is None:
            config = dataclasses.replace(config, random_seed=random.randint(0, 2**31 - 1))
        self.config = config

        self.game_state = GameState.create(
            seats if seats is not None else self._default_seats(),
            self.config,
            random_seed=self.config.random_seed,
            match_id=match_id,
        )

        # Create run recorder and event emitter
        if run_recorder is None and event_emitter is not None:
            run_recorder = event_emitter.run_recorder
        if run_recorder is None and self.config.record_runs:
            run_recorder = RunRecorder(self.config.runs_dir)
        if run_recorder is not None and run_recorder.current_run_dir is None:
            run_recorder.create_run(self.game_state.match_id)
        self.run_recorder = run_recorder
        self.event_emitter = event_emitter or EventEmitter(run_recorder)

        self.engine = ResolutionEngine(self.game_state, self.config, event_emitter=self.event_emitter)
        self.engine.add_listener(self._on_state_change)

        self.agents: Dict[int, BaseAgent] = {}
        self._initialize_agents(agents or {})

    def _default_seats(self) -> List[SeatSpec]:
        seats = [SeatSpec(name=f"Player {i}") for i in range(1, self.config.human_players + 1)]
        seats += [
            SeatSpec(name=f"Bot {i}", is_bot=True, difficulty=self.config.bot_difficulty)
            for i in range(1, self.config.bot_players + 1)
        ]
        return seats

    def _initialize_agents(self, agents: Dict[int, BaseAgent]) -> None:
        """Bot seats get an agent from config unless one was passed in."""
        for player in self.game_state.players:
            if player.player_id in agents:
                self.agents[player.player_id] = agents[player.player_id]
            elif player.is_bot:
                agent_type = self.config.agent_type
                if self.config.agent_types:
                    agent_type = self.config.agent_types.get(player.player_id, agent_type)
                self.agents[player.player_id] = self._create_agent(player, agent_type.lower())

    def _create_agent(self, player: Player, agent_type: str) -> BaseAgent:
        """Create an agent of the specified type for a player."""
        if agent_type == "bot":
            return BotAgent(player, self.config)
        elif agent_type == "scripted":
            return ScriptedAgent(player, self.config)
        else:
            raise ValueError(f"Unknown agent_type: {agent_type}. Must be 'bot' or 'scripted'")

    # ------------------------------------------------------------------
    # Driving the match
    # ------------------------------------------------------------------

    def start(self) -> Optional[DecisionRequest]:
        """Start the match and play bots until a human has to decide."""
        self.engine.start()
        if self.run_recorder:
            self.run_recorder.save_metadata(self._metadata())
        return self.run_bots()

    def run_bots(self) -> Optional[DecisionRequest]:
        """
        Answer every request owned by an agent.

        Returns:
            The first request that needs a human, or None once the game is over
        """
        while not self.game_state.game_over:
            request = self.engine.current_request()
            agent = self.agents.get(request.player_id)
            if agent is None:
                return request
            self.play_agent(agent, request)
        return None

    def run_game(self) -> Optional[str]:
        """
        Run an all-agent match to the end.
        Returns the winner's name.
        """
        if self.config.use_announcements:
            print("=" * 60)
            print("COUP - Starting")
            print("=" * 60)
            print(f"Match: {self.game_state.match_id}")
            print(f"Players: {', '.join(p.name for p in self.game_state.players)}")
            print(f"Random Seed: {self.config.random_seed}")
            print("=" * 60)

        request = self.start()
        if request is not None:
            raise ValueError(f"Seat {request.player_id} has no agent; use start() and run_bots() for human seats")

        winner = self.game_state.get_player(self.game_state.winner_id)
        if self.config.use_announcements:
            print("\n" + "=" * 60)
            print(f"GAME OVER - {winner.name} WINS after {self.game_state.turn_number} turns")
            print("=" * 60)
        return winner.name

    def play_agent(self, agent: BaseAgent, request: DecisionRequest) -> None:
        """Ask the agent for one decision; illegal output falls back to the safe default."""
        available = None
        if request.kind == RequestKind.CHOOSE_ACTION:
            available = self.engine.legal_actions(request.player_id)
        context = agent.build_context(self.game_state, request, available)
        try:
            self._apply_decision(agent, request, context)
        except InvalidMove as e:
            player = self.game_state.get_player(request.player_id)
            if self.config.use_announcements:
                print(f"[MATCH] {player.name} made an illegal choice ({e.message}), using the default")
            self.engine.apply_default(request)

    def _apply_decision(self, agent: BaseAgent, request: DecisionRequest, context) -> None:
        engine = self.engine
        player_id = request.player_id

        if request.kind == RequestKind.CHOOSE_ACTION:
            action, target_id = agent.choose_action(context)
            engine.declare_action(player_id, action, target_id)
        elif request.kind == RequestKind.BLOCK:
            role_name = agent.choose_block(context)
            if role_name:
                try:
                    role = Role.from_name(role_name)
                except ValueError:
                    raise InvalidReaction(player_id, f"Unknown role: {role_name}")
                engine.submit_reaction(player_id, Reaction.block(role), request.request_id)
            else:
                engine.submit_reaction(player_id, Reaction.passing(), request.request_id)
        elif request.is_reaction:
            reaction = Reaction.challenge() if agent.choose_challenge(context) else Reaction.passing()
            engine.submit_reaction(player_id, reaction, request.request_id)
        elif request.kind == RequestKind.LOSE_INFLUENCE:
            engine.resolve_influence_loss(player_id, agent.choose_card_to_lose(context), request.request_id)
        else:
            engine.resolve_exchange_keep(player_id, agent.choose_cards_to_keep(context), request.request_id)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def _on_state_change(self, snapshot: Dict[str, Any], entry: LogEntry) -> None:
        if snapshot["game_over"]:
            self.engine.remove_listener(self._on_state_change)
            self.save_history()

    def save_history(self) -> None:
        """Persist the finished match and prune old ones."""
        if not self.run_recorder:
            return
        self.run_recorder.save_replay(e.to_dict() for e in self.game_state.log)
        self.run_recorder.save_metadata(self._metadata())
        self.run_recorder.prune(self.config.max_match_history)

    def _metadata(self) -> Dict[str, Any]:
        state = self.game_state
        winner = state.get_player(state.winner_id) if state.winner_id is not None else None
        return {
            "match_id": state.match_id,
            "players": [
                {"player_id": p.player_id, "name": p.name, "is_bot": p.is_bot, "difficulty": p.difficulty}
                for p in state.players
            ],
            "winner": winner.name if winner else None,
            "winner_id": state.winner_id,
            "turns": state.turn_number,
            "steps": len(state.log),
            "saved_at": datetime.now().isoformat(),
            "config": {
                "random_seed": self.config.random_seed,
                "bot_difficulty": self.config.bot_difficulty,
                "forced_coup_threshold": self.config.forced_coup_threshold,
            },
        }

    def get_game_summary(self) -> Dict[str, Any]:
        """Get final game summary as dictionary."""
        return {
            "final_state": self.game_state.get_game_summary(),
            "log": [e.text for e in self.game_state.log[-10:]],
        }
