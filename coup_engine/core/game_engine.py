"""
Resolution engine: the turn, action and reaction state machine.

The engine is event driven. It holds at most one open decision (see
`current_request`) and advances only when that decision arrives through one of
the entry points:

    declare_action -> submit_reaction -> resolve_influence_loss / resolve_exchange_keep

Every accepted input bumps `GameState.request_id`; inputs that carry an older
request id, or come from a player who already answered the open window, are
ignored and return False.
"""

from typing import Callable, Iterable, List, Optional, Dict, Any, Union, TYPE_CHECKING

from .actions import ActionType, get_action_spec, parse_action_type
from .exceptions import (
    EngineInvariantViolation, InvalidAction, InvalidReaction, InvalidSelection,
)
from .game_state import GameState, GamePhase, LogEntry
from .pending import (
    DecisionRequest, LossReason, PendingAction, PendingPhase, Reaction, ReactionKind,
    RequestKind, ResumeStep,
)
from .player import Player
from ..config.game_config import GameConfig, default_config

if TYPE_CHECKING:
    from ..web.event_emitter import EventEmitter


StateListener = Callable[[Dict[str, Any], LogEntry], None]

REACTION_PHASES = {
    PendingPhase.AWAITING_CHALLENGE_OF_ACTION: RequestKind.CHALLENGE_ACTION,
    PendingPhase.AWAITING_BLOCK_DECLARATION: RequestKind.BLOCK,
    PendingPhase.AWAITING_CHALLENGE_OF_BLOCK: RequestKind.CHALLENGE_BLOCK,
}


class ResolutionEngine:
    """Owns and mutates the match state. Not reentrant."""

    def __init__(self, game_state: GameState, config: GameConfig = default_config,
                 event_emitter: Optional['EventEmitter'] = None):
        self.game_state = game_state
        self.config = config
        self.event_emitter = event_emitter
        self._listeners: List[StateListener] = []

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def add_listener(self, listener: StateListener) -> None:
        """Register a callback fired after every state change with (snapshot, newest entry)."""
        self._listeners.append(listener)

    def remove_listener(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def coup_threshold(self) -> int:
        """Coins at which Coup is forced; never below what a Coup costs."""
        return max(self.config.forced_coup_threshold, get_action_spec(ActionType.COUP).cost)

    def must_coup(self, player: Player) -> bool:
        return self.config.forced_coup_enabled and player.coins >= self.coup_threshold()

    def legal_actions(self, player_id: int) -> List[ActionType]:
        """Actions the player may declare right now."""
        state = self.game_state
        if state.phase != GamePhase.AWAITING_ACTION:
            return []
        player = state.get_player(player_id)
        if player is None or not player.alive or player is not state.current_player:
            return []
        if self.must_coup(player):
            return [ActionType.COUP]
        return [a for a in ActionType if player.coins >= get_action_spec(a).cost]

    def legal_targets(self, player_id: int) -> List[int]:
        """Alive opponents of the player."""
        return [p.player_id for p in self.game_state.get_alive_players() if p.player_id != player_id]

    def current_request(self) -> Optional[DecisionRequest]:
        """The single decision the engine is waiting for, or None when the game is not running."""
        state = self.game_state
        if state.phase in (GamePhase.SETUP, GamePhase.GAME_OVER):
            return None

        if state.phase == GamePhase.AWAITING_ACTION:
            player = state.current_player
            return DecisionRequest(
                request_id=state.request_id,
                kind=RequestKind.CHOOSE_ACTION,
                player_id=player.player_id,
                options=tuple(a.value for a in self.legal_actions(player.player_id)),
            )

        pending = self._require_pending()
        spec = get_action_spec(pending.action_type)

        if pending.phase in REACTION_PHASES:
            kind = REACTION_PHASES[pending.phase]
            claimed = pending.block_role if kind == RequestKind.CHALLENGE_BLOCK else pending.claimed_role
            return DecisionRequest(
                request_id=state.request_id,
                kind=kind,
                player_id=pending.current_reactor,
                action_type=pending.action_type,
                actor_id=pending.blocker_id if kind == RequestKind.CHALLENGE_BLOCK else pending.actor_id,
                target_id=pending.target_id,
                claimed_role=claimed,
                block_roles=tuple(sorted(spec.blockable_by, key=lambda r: r.value)),
            )

        if pending.phase == PendingPhase.AWAITING_INFLUENCE_LOSS:
            player = state.get_player(pending.loss_player_id)
            return DecisionRequest(
                request_id=state.request_id,
                kind=RequestKind.LOSE_INFLUENCE,
                player_id=player.player_id,
                action_type=pending.action_type,
                actor_id=pending.actor_id,
                target_id=pending.target_id,
                loss_reason=pending.loss_reason,
                options=tuple(player.live_indices()),
            )

        if pending.phase == PendingPhase.AWAITING_EXCHANGE:
            actor = state.get_player(pending.actor_id)
            return DecisionRequest(
                request_id=state.request_id,
                kind=RequestKind.EXCHANGE,
                player_id=actor.player_id,
                action_type=pending.action_type,
                actor_id=actor.player_id,
                keep_count=pending.keep_count,
                options=tuple(actor.live_indices()),
            )

        raise EngineInvariantViolation(f"No decision is open in phase {pending.phase.value}")

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Open the match: first turn goes to the first seat."""
        state = self.game_state
        if state.phase != GamePhase.SETUP:
            raise EngineInvariantViolation("Match already started")
        if len(state.get_alive_players()) < 2:
            raise EngineInvariantViolation("A match needs at least two players")

        self._log("Welcome to Coup.")
        if self.event_emitter:
            self.event_emitter.emit_game_start(
                state.match_id,
                [{"player_id": p.player_id, "name": p.name, "is_bot": p.is_bot} for p in state.players],
            )
        state.current_player_index = state.players.index(state.get_alive_players()[0])
        self._start_turn()
        self._after_input()

    def declare_action(self, player_id: int, action_type: Union[ActionType, str],
                       target_id: Optional[int] = None) -> None:
        """
        Declare the current player's action.

        Raises:
            InvalidAction: wrong phase or player, forced coup ignored, too few coins, bad target
            UnknownActionError: the action is not in the catalog
        """
        state = self.game_state
        self._ensure_running(InvalidAction, player_id)
        if state.phase != GamePhase.AWAITING_ACTION:
            raise InvalidAction(player_id, "An action is already being resolved")

        player = state.get_player(player_id)
        if player is None:
            raise InvalidAction(player_id, f"Unknown player {player_id}")
        if player is not state.current_player:
            raise InvalidAction(player_id, f"It is {state.current_player.name}'s turn")

        action_type = parse_action_type(action_type)
        spec = get_action_spec(action_type)

        if self.must_coup(player) and action_type != ActionType.COUP:
            raise InvalidAction(player_id, f"{player.name} has {player.coins} coins and must Coup")
        if player.coins < spec.cost:
            raise InvalidAction(player_id, f"{action_type.value} costs {spec.cost} coins")

        target = None
        if spec.requires_target:
            target = state.get_player(target_id) if target_id is not None else None
            if target is None:
                raise InvalidAction(player_id, f"{action_type.value} needs a target")
            if target is player:
                raise InvalidAction(player_id, "You cannot target yourself")
            if not target.alive:
                raise InvalidAction(player_id, f"{target.name} is already out")
        elif target_id is not None:
            raise InvalidAction(player_id, f"{action_type.value} takes no target")

        # Cost is paid up front, challenged or not
        player.coins -= spec.cost
        player.previous_action = player.last_action
        player.last_action = action_type.value

        state.phase = GamePhase.RESOLVING
        state.pending = PendingAction(
            actor_id=player.player_id,
            action_type=action_type,
            target_id=target.player_id if target else None,
            claimed_role=spec.claimed_role,
        )
        on_target = f" on {target.name}" if target else ""
        self._log(f"{player.name} attempts to {action_type.value}{on_target}.")
        if self.event_emitter:
            self.event_emitter.emit_action_declared(
                player.player_id, action_type.value,
                target.player_id if target else None,
                spec.claimed_role.value if spec.claimed_role else None,
                state.turn_number,
            )

        if spec.resolves_immediately:
            self._apply_effect()
        elif spec.challengeable:
            self._open_action_challenge()
        else:
            self._open_block_window()
        self._after_input()

    def submit_reaction(self, player_id: int, reaction: Reaction,
                        request_id: Optional[int] = None) -> bool:
        """
        Answer an open challenge or block window.

        Returns:
            True if accepted, False for a stale or duplicate reply (ignored)

        Raises:
            InvalidReaction: no window open, player not eligible or out of turn, wrong reaction kind
        """
        state = self.game_state
        self._ensure_running(InvalidReaction, player_id)
        if request_id is not None and request_id != state.request_id:
            return False

        pending = state.pending
        if pending is None or pending.phase not in REACTION_PHASES:
            raise InvalidReaction(player_id, "No reaction window is open")
        if player_id in pending.responded:
            return False
        if player_id not in pending.reactors:
            raise InvalidReaction(player_id, "You cannot react to this")
        if player_id != pending.current_reactor:
            waiting_on = state.get_player(pending.current_reactor)
            raise InvalidReaction(player_id, f"Waiting for {waiting_on.name} to react first")

        spec = get_action_spec(pending.action_type)
        if pending.phase == PendingPhase.AWAITING_BLOCK_DECLARATION:
            if reaction.kind == ReactionKind.CHALLENGE:
                raise InvalidReaction(player_id, "This window only accepts a block or a pass")
            if reaction.kind == ReactionKind.BLOCK and reaction.role not in spec.blockable_by:
                allowed = ", ".join(sorted(r.value for r in spec.blockable_by))
                raise InvalidReaction(player_id, f"{pending.action_type.value} can only be blocked by {allowed}")
        elif reaction.kind == ReactionKind.BLOCK:
            raise InvalidReaction(player_id, "This window only accepts a challenge or a pass")

        pending.reactors.pop(0)
        pending.responded.append(player_id)
        player = state.get_player(player_id)

        if reaction.kind == ReactionKind.PASS:
            if not pending.reactors:
                self._close_window_unanswered()
        elif reaction.kind == ReactionKind.CHALLENGE:
            pending.reactors = []
            if pending.phase == PendingPhase.AWAITING_CHALLENGE_OF_ACTION:
                claimant = state.get_player(pending.actor_id)
                self._resolve_challenge(claimant, player, pending.claimed_role, on_block=False)
            else:
                claimant = state.get_player(pending.blocker_id)
                self._resolve_challenge(claimant, player, pending.block_role, on_block=True)
        else:
            pending.reactors = []
            pending.blocker_id = player_id
            pending.block_role = reaction.role
            self._log(f"{player.name} BLOCKS with {reaction.role.value}!")
            if self.event_emitter:
                self.event_emitter.emit_block(
                    player_id, reaction.role.value, pending.action_type.value, pending.actor_id,
                )
            self._open_block_challenge()

        self._after_input()
        return True

    def resolve_influence_loss(self, player_id: int, card_index: int,
                               request_id: Optional[int] = None) -> bool:
        """
        Pick which live card to turn face up.

        Raises:
            InvalidSelection: no loss pending for this player, or the index is not a live card
        """
        state = self.game_state
        self._ensure_running(InvalidSelection, player_id)
        if request_id is not None and request_id != state.request_id:
            return False

        pending = state.pending
        if pending is None or pending.phase != PendingPhase.AWAITING_INFLUENCE_LOSS:
            raise InvalidSelection(player_id, "No influence loss is pending")
        if pending.loss_player_id != player_id:
            raise InvalidSelection(player_id, "You are not the one losing influence")

        player = state.get_player(player_id)
        if card_index not in player.live_indices():
            raise InvalidSelection(player_id, f"Card {card_index} is not a live card")

        self._apply_loss(player, card_index)
        self._after_input()
        return True

    def resolve_exchange_keep(self, player_id: int, kept_indices: Iterable[int],
                              request_id: Optional[int] = None) -> bool:
        """
        Choose which cards to keep after an Exchange draw.

        Raises:
            InvalidSelection: no exchange pending, wrong player, wrong count, repeated or dead cards
        """
        state = self.game_state
        self._ensure_running(InvalidSelection, player_id)
        if request_id is not None and request_id != state.request_id:
            return False

        pending = state.pending
        if pending is None or pending.phase != PendingPhase.AWAITING_EXCHANGE:
            raise InvalidSelection(player_id, "No exchange is pending")
        if pending.actor_id != player_id:
            raise InvalidSelection(player_id, "Only the exchanging player chooses")

        kept = list(kept_indices)
        player = state.get_player(player_id)
        if len(set(kept)) != len(kept):
            raise InvalidSelection(player_id, "A card can only be kept once")
        if len(kept) != pending.keep_count:
            raise InvalidSelection(player_id, f"Keep exactly {pending.keep_count} card(s)")
        live = set(player.live_indices())
        if any(i not in live for i in kept):
            raise InvalidSelection(player_id, "Kept cards must be live cards in your hand")

        self._finish_exchange(player, kept)
        self._after_input()
        return True

    def expire_request(self, request_id: int) -> bool:
        """
        Turn-timer expiry: answer the open request with its safe default.
        Reactions pass, the action falls back to Income (or Coup when forced),
        selections take the first live cards. Returns False if the request already moved on.
        """
        state = self.game_state
        if state.game_over or request_id != state.request_id:
            return False
        request = self.current_request()
        if request is None:
            return False

        player = state.get_player(request.player_id)
        self._log(f"{player.name}'s time ran out.")
        self.apply_default(request)
        return True

    def apply_default(self, request: DecisionRequest) -> None:
        """Answer a request with the safest legal choice."""
        player_id = request.player_id
        if request.kind == RequestKind.CHOOSE_ACTION:
            player = self.game_state.get_player(player_id)
            # Idle seats still coup at the threshold
            if player.coins >= self.coup_threshold():
                self.declare_action(player_id, ActionType.COUP, self.legal_targets(player_id)[0])
            else:
                self.declare_action(player_id, ActionType.INCOME)
        elif request.is_reaction:
            self.submit_reaction(player_id, Reaction.passing(), request.request_id)
        elif request.kind == RequestKind.LOSE_INFLUENCE:
            self.resolve_influence_loss(player_id, request.options[0], request.request_id)
        else:
            self.resolve_exchange_keep(player_id, request.options[:request.keep_count], request.request_id)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _start_turn(self) -> None:
        state = self.game_state
        state.phase = GamePhase.AWAITING_ACTION
        state.pending = None
        state.turn_number += 1
        player = state.current_player
        self._log(f"--- {player.name}'s turn ---")
        if self.event_emitter:
            self.event_emitter.emit_turn_start(player.player_id, player.name, state.turn_number)

    def _open_action_challenge(self) -> None:
        pending = self._require_pending()
        reactors = [p.player_id for p in self.game_state.seat_order_after(pending.actor_id)]
        pending.open_window(PendingPhase.AWAITING_CHALLENGE_OF_ACTION, reactors)
        if not reactors:
            self._continue_action()

    def _continue_action(self) -> None:
        """The action claim stands: block window if the action allows one, else the effect."""
        pending = self._require_pending()
        if get_action_spec(pending.action_type).blockable:
            self._open_block_window()
        else:
            self._apply_effect()

    def _open_block_window(self) -> None:
        state = self.game_state
        pending = self._require_pending()
        spec = get_action_spec(pending.action_type)
        if spec.open_block:
            blockers = [p.player_id for p in state.seat_order_after(pending.actor_id)]
        else:
            target = state.get_player(pending.target_id)
            blockers = [target.player_id] if target and target.alive else []
        pending.open_window(PendingPhase.AWAITING_BLOCK_DECLARATION, blockers)
        if not blockers:
            self._apply_effect()

    def _open_block_challenge(self) -> None:
        state = self.game_state
        pending = self._require_pending()
        challengers = []
        actor = state.get_player(pending.actor_id)
        if actor.alive:
            challengers.append(actor.player_id)
        if self.config.block_challenge_by_anyone:
            challengers.extend(
                p.player_id for p in state.seat_order_after(pending.actor_id)
                if p.player_id != pending.blocker_id
            )
        pending.open_window(PendingPhase.AWAITING_CHALLENGE_OF_BLOCK, challengers)
        if not challengers:
            self._block_stands()

    def _close_window_unanswered(self) -> None:
        phase = self._require_pending().phase
        if phase == PendingPhase.AWAITING_CHALLENGE_OF_ACTION:
            self._continue_action()
        elif phase == PendingPhase.AWAITING_BLOCK_DECLARATION:
            self._apply_effect()
        else:
            self._block_stands()

    def _block_stands(self) -> None:
        self._log("Action BLOCKED.")
        self._end_turn()

    def _resolve_challenge(self, claimant: Player, challenger: Player, role, on_block: bool) -> None:
        """Reveal against the claim. The outcome depends only on the claimant's hand."""
        pending = self._require_pending()
        if role is None:
            raise EngineInvariantViolation("Challenge against a claim that names no role")
        pending.challenger_id = challenger.player_id
        self._log(f"{challenger.name} CHALLENGES {claimant.name}'s {role.value}!")

        card_index = claimant.live_index_of(role)
        honest = card_index is not None
        if self.event_emitter:
            self.event_emitter.emit_challenge(
                challenger.player_id, claimant.player_id, role.value,
                bluff_caught=not honest, on_block=on_block,
            )

        if honest:
            self._log(f"Challenge FAILED! {claimant.name} HAS the {role.value}!")
            self._replace_revealed_card(claimant, card_index)
            resume = ResumeStep.BLOCK_STANDS if on_block else ResumeStep.CONTINUE_ACTION
            self._require_influence_loss(challenger, LossReason.CHALLENGE_LOST, resume)
            return

        self._log(f"{claimant.name} was BLUFFING!")
        if on_block:
            resume = ResumeStep.APPLY_EFFECT
        else:
            resume = ResumeStep.END_TURN
            spec = get_action_spec(pending.action_type)
            if pending.action_type == ActionType.ASSASSINATE and self.config.refund_assassination_on_caught_bluff:
                claimant.coins += spec.cost
                self._log(f"{claimant.name} is refunded {spec.cost} coins.")
        self._require_influence_loss(claimant, LossReason.BLUFF_CAUGHT, resume)

    def _replace_revealed_card(self, player: Player, card_index: int) -> None:
        """The proven card goes back into the deck; the player draws a fresh one."""
        deck = self.game_state.deck
        shown = player.cards[card_index]
        deck.return_cards([shown])
        replacement = deck.draw()
        if replacement is None:
            raise EngineInvariantViolation("Deck empty right after a card was returned")
        player.cards[card_index] = replacement

    def _require_influence_loss(self, player: Player, reason: LossReason, resume: ResumeStep) -> None:
        pending = self._require_pending()
        pending.phase = PendingPhase.AWAITING_INFLUENCE_LOSS
        pending.reactors = []
        pending.loss_player_id = player.player_id
        pending.loss_reason = reason
        pending.resume = resume

        live = player.live_indices()
        if not player.alive or not live:
            self._finish_loss()
        elif len(live) == 1 and self.config.auto_resolve_forced_loss:
            self._apply_loss(player, live[0])

    def _apply_loss(self, player: Player, card_index: int) -> None:
        pending = self._require_pending()
        card = player.cards[card_index]
        eliminated = player.lose_card(card_index)
        self._log(f"{player.name} loses influence: {card.role.value} revealed.")
        if self.event_emitter:
            self.event_emitter.emit_influence_lost(
                player.player_id, card.role.value,
                pending.loss_reason.value if pending.loss_reason else None,
            )
        if eliminated:
            self._log(f"{player.name} is ELIMINATED!")
            if self.event_emitter:
                self.event_emitter.emit_elimination(player.player_id, player.name, self.game_state.turn_number)
        self._finish_loss()

    def _finish_loss(self) -> None:
        pending = self._require_pending()
        resume = pending.resume
        pending.loss_player_id = None
        pending.resume = None
        if self._check_game_over():
            return
        if resume == ResumeStep.CONTINUE_ACTION:
            self._continue_action()
        elif resume == ResumeStep.APPLY_EFFECT:
            self._apply_effect()
        elif resume == ResumeStep.BLOCK_STANDS:
            self._block_stands()
        elif resume == ResumeStep.END_TURN:
            self._end_turn()
        else:
            raise EngineInvariantViolation("Influence loss finished with nowhere to resume")

    def _apply_effect(self) -> None:
        state = self.game_state
        pending = self._require_pending()
        actor = state.get_player(pending.actor_id)
        target = state.get_player(pending.target_id) if pending.target_id is not None else None
        action = pending.action_type

        if get_action_spec(action).requires_target and (target is None or not target.alive):
            self._log(f"{action.value} has no effect: the target is already out.")
            self._end_turn()
            return

        if action == ActionType.INCOME:
            actor.coins += 1
            self._log(f"{actor.name} takes 1 coin.")
        elif action == ActionType.FOREIGN_AID:
            actor.coins += 2
            self._log(f"{actor.name} collects 2 coins of foreign aid.")
        elif action == ActionType.TAX:
            actor.coins += 3
            self._log(f"{actor.name} collects 3 coins of tax.")
        elif action == ActionType.STEAL:
            stolen = min(2, target.coins)
            target.coins -= stolen
            actor.coins += stolen
            self._log(f"{actor.name} steals {stolen} from {target.name}.")
        elif action == ActionType.ASSASSINATE:
            self._log(f"{target.name} is struck by the assassin!")
            self._require_influence_loss(target, LossReason.ASSASSINATED, ResumeStep.END_TURN)
            return
        elif action == ActionType.COUP:
            self._log(f"{target.name} suffers a Coup!")
            self._require_influence_loss(target, LossReason.COUP, ResumeStep.END_TURN)
            return
        elif action == ActionType.EXCHANGE:
            self._start_exchange(actor)
            return
        self._end_turn()

    def _start_exchange(self, actor: Player) -> None:
        pending = self._require_pending()
        keep_count = actor.influence_count
        drawn = self.game_state.deck.deal(2)
        actor.cards.extend(drawn)
        pending.phase = PendingPhase.AWAITING_EXCHANGE
        pending.keep_count = keep_count
        self._log(f"{actor.name} draws {len(drawn)} card(s) from the court deck.")
        live = actor.live_indices()
        if len(live) <= keep_count:
            self._finish_exchange(actor, live)

    def _finish_exchange(self, actor: Player, kept_indices: List[int]) -> None:
        kept_set = set(kept_indices)
        kept = [c for i, c in enumerate(actor.cards) if i in kept_set]
        returned = [c for i, c in enumerate(actor.cards) if not c.dead and i not in kept_set]
        actor.cards = kept + actor.revealed
        self.game_state.deck.return_cards(returned)
        self._log(f"{actor.name} exchanges cards with the court deck.")
        if self.event_emitter:
            self.event_emitter.emit_exchange(actor.player_id, len(kept) + len(returned), len(kept))
        self._end_turn()

    def _end_turn(self) -> None:
        state = self.game_state
        pending = self._require_pending()
        pending.phase = PendingPhase.RESOLVED
        state.pending = None
        if self._check_game_over():
            return

        count = len(state.players)
        index = state.current_player_index
        for _ in range(count):
            index = (index + 1) % count
            if state.players[index].alive:
                break
        state.current_player_index = index
        self._start_turn()

    def _check_game_over(self) -> bool:
        winner = self.game_state.check_win_condition()
        if winner is None:
            return False
        self._end_game(winner)
        return True

    def _end_game(self, winner: Player) -> None:
        state = self.game_state
        state.pending = None
        state.phase = GamePhase.GAME_OVER
        state.winner_id = winner.player_id
        self._log(f"{winner.name} WINS THE GAME!")
        if self.event_emitter:
            self.event_emitter.emit_game_over(winner.player_id, winner.name, state.turn_number)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_pending(self) -> PendingAction:
        if self.game_state.pending is None:
            raise EngineInvariantViolation("No pending action is open")
        return self.game_state.pending

    def _ensure_running(self, error_cls, player_id: int) -> None:
        phase = self.game_state.phase
        if phase == GamePhase.GAME_OVER:
            raise error_cls(player_id, "The game is over")
        if phase == GamePhase.SETUP:
            raise error_cls(player_id, "The game has not started")

    def _log(self, text: str) -> LogEntry:
        entry = self.game_state.add_log(text)
        if self.config.use_announcements:
            print(f"[ENGINE] {text}")
        return entry

    def _after_input(self) -> None:
        """Consume the request id and tell listeners about the new state."""
        state = self.game_state
        state.request_id += 1
        snapshot = state.snapshot()
        entry = state.log[-1]
        if self.event_emitter:
            self.event_emitter.emit_game_state_update(snapshot)
        for listener in list(self._listeners):
            listener(snapshot, entry)
