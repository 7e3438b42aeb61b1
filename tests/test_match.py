"""
Tests for the match controller: full bot games, agent fallbacks and saved history.
"""

import pytest

from coup_engine.config.game_config import GameConfig
from coup_engine.core import RequestKind, SeatSpec
from coup_engine.match import CoupMatch


def _bot_config(**overrides):
    values = dict(use_announcements=False, record_runs=False, bot_players=4, random_seed=3)
    values.update(overrides)
    return GameConfig(**values)


@pytest.mark.parametrize("seed", [1, 2, 3])
@pytest.mark.parametrize("difficulty", ["easy", "normal", "hard", "hardcore"])
def test_cards_are_conserved_through_a_game(seed, difficulty):
    """Deck plus hands stays constant after every single state change."""
    match = CoupMatch(config=_bot_config(bot_difficulty=difficulty, random_seed=seed))
    expected = match.game_state.total_card_count()
    totals = []
    match.engine.add_listener(
        lambda snapshot, entry: totals.append(
            snapshot["deck_size"] + sum(len(p["cards"]) for p in snapshot["players"])
        )
    )

    winner = match.run_game()

    assert winner is not None
    assert totals
    assert set(totals) == {expected}


def test_bot_game_ends_with_single_survivor():
    match = CoupMatch(config=_bot_config(bot_players=5))

    winner = match.run_game()

    state = match.game_state
    alive = state.get_alive_players()
    assert len(alive) == 1
    assert alive[0].name == winner
    assert state.log[-1].text == f"{winner} WINS THE GAME!"
    assert match.get_game_summary()["final_state"]["winner"] == winner


def test_same_seed_replays_the_same_game():
    first = CoupMatch(config=_bot_config(random_seed=11))
    second = CoupMatch(config=_bot_config(random_seed=11))
    first.run_game()
    second.run_game()

    assert [e.text for e in first.game_state.log] == [e.text for e in second.game_state.log]


def test_illegal_agent_choice_falls_back_to_default():
    config = _bot_config(agent_type="scripted")
    match = CoupMatch(seats=[SeatSpec(name="Alice", is_bot=True), SeatSpec(name="Bob")], config=config)
    match.agents[1].actions.append(("Coup", 2))

    request = match.start()

    assert match.game_state.get_player(1).coins == 3
    assert request.kind == RequestKind.CHOOSE_ACTION
    assert request.player_id == 2


def test_run_game_needs_an_agent_per_seat():
    match = CoupMatch(seats=[SeatSpec(name="Alice", is_bot=True), SeatSpec(name="Bob")], config=_bot_config())
    with pytest.raises(ValueError):
        match.run_game()


def test_unknown_agent_type_rejected():
    with pytest.raises(ValueError):
        CoupMatch(config=_bot_config(agent_type="oracle"))


def test_finished_matches_are_saved_and_pruned(tmp_path):
    config = _bot_config(record_runs=True, runs_dir=str(tmp_path), max_match_history=2, bot_players=3)

    for match_id in ("m1", "m2", "m3"):
        CoupMatch(config=config, match_id=match_id).run_game()

    remaining = sorted(d.name for d in tmp_path.iterdir() if d.is_dir())
    assert len(remaining) == 2
    assert "m3" in remaining

    latest = tmp_path / "m3"
    assert (latest / "replay.jsonl").exists()
    assert (latest / "metadata.json").exists()
    assert (latest / "events.jsonl").exists()


def test_pruning_spares_matches_still_in_progress(tmp_path):
    """A finished match never deletes another match that is still being played."""
    config = _bot_config(record_runs=True, runs_dir=str(tmp_path), max_match_history=1, bot_players=2)
    older = CoupMatch(
        seats=[SeatSpec(name="Alice"), SeatSpec(name="Robo", is_bot=True)],
        config=config, match_id="older",
    )
    request = older.start()

    CoupMatch(config=config, match_id="newer").run_game()
    assert (tmp_path / "older").exists()

    while request is not None:
        older.engine.apply_default(request)
        request = older.run_bots()

    assert older.game_state.game_over
    assert (tmp_path / "older" / "replay.jsonl").exists()
    assert sorted(d.name for d in tmp_path.iterdir() if d.is_dir()) == ["older"]


def test_history_is_saved_once(tmp_path):
    config = _bot_config(record_runs=True, runs_dir=str(tmp_path), bot_players=2)
    match = CoupMatch(config=config, match_id="once")
    saves = []
    match.run_recorder.save_replay = lambda entries: saves.append(list(entries))

    match.run_game()

    assert len(saves) == 1
    assert match._on_state_change not in match.engine._listeners
