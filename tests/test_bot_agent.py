"""
Tests for the heuristic bot agent.
"""

import pytest

from coup_engine.agents import BotAgent
from coup_engine.agents.base_agent import AgentContext
from coup_engine.core import ActionType, DecisionRequest, Reaction, RequestKind, Role


def _context_for(engine, player_id, agent):
    request = engine.current_request()
    return agent.build_context(engine.game_state, request, engine.legal_actions(player_id))


def _hand_context(hand, keep_count=0):
    """Minimal context for card choices."""
    request = DecisionRequest(request_id=0, kind=RequestKind.EXCHANGE, player_id=1, keep_count=keep_count)
    return AgentContext(
        player_id=1, request=request, view={}, hand=list(enumerate(hand)), coins=2,
        opponents=[], revealed_counts={}, copies_per_role=3,
    )


@pytest.mark.parametrize("difficulty", ["easy", "normal", "hard", "hardcore"])
def test_every_tier_coups_when_forced(make_engine, game_config, difficulty):
    engine = make_engine(coins={1: 10})
    bot = BotAgent(engine.game_state.get_player(1), game_config, difficulty)

    action, target = bot.choose_action(_context_for(engine, 1, bot))

    assert action == ActionType.COUP.value
    assert target == 2


def test_normal_bot_taxes_with_duke(make_engine, game_config):
    engine = make_engine(hands={1: [Role.DUKE, Role.CONTESSA]})
    bot = BotAgent(engine.game_state.get_player(1), game_config, "normal")

    assert bot.choose_action(_context_for(engine, 1, bot)) == (ActionType.TAX.value, None)


def test_normal_bot_coups_at_seven(make_engine, game_config):
    engine = make_engine(coins={1: 7})
    bot = BotAgent(engine.game_state.get_player(1), game_config, "normal")

    assert bot.choose_action(_context_for(engine, 1, bot)) == (ActionType.COUP.value, 2)


def test_normal_bot_steals_from_richest(make_engine, game_config):
    engine = make_engine(
        names=("Alice", "Bob", "Carol"),
        hands={1: [Role.CAPTAIN, Role.CONTESSA]},
        coins={2: 1, 3: 4},
    )
    bot = BotAgent(engine.game_state.get_player(1), game_config, "normal")

    assert bot.choose_action(_context_for(engine, 1, bot)) == (ActionType.STEAL.value, 3)


def test_hard_bot_challenges_when_all_copies_known(make_engine, game_config):
    """Bob holds the last unseen Captain, so Alice's claim must be false."""
    engine = make_engine(
        names=("Alice", "Bob", "Carol"),
        hands={
            1: [Role.DUKE, Role.CAPTAIN],
            2: [Role.CAPTAIN, Role.CONTESSA],
            3: [Role.CAPTAIN, Role.ASSASSIN],
        },
        dead={1: [1], 3: [0]},
    )
    engine.declare_action(1, ActionType.STEAL, 2)
    bob = BotAgent(engine.game_state.get_player(2), game_config, "hard")

    context = _context_for(engine, 2, bob)
    assert context.request.kind == RequestKind.CHALLENGE_ACTION
    assert context.revealed_counts[Role.CAPTAIN.value] == 2
    assert bob.choose_challenge(context) is True


def test_context_hides_opponent_cards(make_engine, game_config):
    engine = make_engine(hands={1: [Role.DUKE, Role.CONTESSA], 2: [Role.ASSASSIN, Role.CAPTAIN]})
    bot = BotAgent(engine.game_state.get_player(1), game_config, "normal")

    context = _context_for(engine, 1, bot)

    assert sorted(context.live_roles()) == ["Contessa", "Duke"]
    bob_view = next(p for p in context.view["players"] if p["player_id"] == 2)
    assert all(c["role"] is None for c in bob_view["cards"])


def _assassinate_bob(make_engine, bob_hand):
    engine = make_engine(hands={1: [Role.ASSASSIN, Role.DUKE], 2: bob_hand}, coins={1: 3})
    engine.declare_action(1, ActionType.ASSASSINATE, 2)
    engine.submit_reaction(2, Reaction.passing())
    return engine


def test_normal_bot_blocks_with_real_contessa(make_engine, game_config):
    engine = _assassinate_bob(make_engine, [Role.CONTESSA, Role.CAPTAIN])
    bob = BotAgent(engine.game_state.get_player(2), game_config, "normal")

    assert bob.choose_block(_context_for(engine, 2, bob)) == Role.CONTESSA.value


def test_normal_bot_never_bluffs_a_block(make_engine, game_config):
    engine = _assassinate_bob(make_engine, [Role.DUKE, Role.CAPTAIN])
    bob = BotAgent(engine.game_state.get_player(2), game_config, "normal")

    assert bob.choose_block(_context_for(engine, 2, bob)) is None


def test_hardcore_bot_claims_contessa_when_assassinated(make_engine, game_config):
    engine = _assassinate_bob(make_engine, [Role.DUKE, Role.CAPTAIN])
    bob = BotAgent(engine.game_state.get_player(2), game_config, "hardcore")

    assert bob.choose_block(_context_for(engine, 2, bob)) == Role.CONTESSA.value


def test_loses_duplicate_first(game_config, make_engine):
    engine = make_engine()
    bot = BotAgent(engine.game_state.get_player(1), game_config, "normal")

    assert bot.choose_card_to_lose(_hand_context(["Duke", "Captain", "Captain"])) == 1


def test_loses_least_valuable_card(game_config, make_engine):
    engine = make_engine()
    bot = BotAgent(engine.game_state.get_player(1), game_config, "hard")

    assert bot.choose_card_to_lose(_hand_context(["Duke", "Ambassador"])) == 1
    assert bot.choose_card_to_lose(_hand_context(["Contessa", "Captain"])) == 0


def test_keeps_distinct_valuable_roles(game_config, make_engine):
    engine = make_engine()
    bot = BotAgent(engine.game_state.get_player(1), game_config, "normal")

    kept = bot.choose_cards_to_keep(_hand_context(["Duke", "Duke", "Ambassador", "Captain"], keep_count=2))

    assert sorted(kept) == [0, 3]


def test_seeded_bots_are_reproducible(make_engine, game_config):
    engine = make_engine()
    engine.declare_action(1, ActionType.TAX)
    player = engine.game_state.get_player(2)

    first = BotAgent(player, game_config, "hardcore")
    second = BotAgent(player, game_config, "hardcore")
    context = _context_for(engine, 2, first)

    assert [first.choose_challenge(context) for _ in range(20)] == \
        [second.choose_challenge(context) for _ in range(20)]


def test_unknown_difficulty_rejected(make_engine, game_config):
    engine = make_engine()
    with pytest.raises(ValueError):
        BotAgent(engine.game_state.get_player(1), game_config, "impossible")
