"""
Tests for stepping through a match log.
"""

from coup_engine.config.game_config import GameConfig
from coup_engine.core import ReplayCursor
from coup_engine.match import CoupMatch


def _finished_match():
    config = GameConfig(use_announcements=False, record_runs=False, bot_players=3, random_seed=21)
    match = CoupMatch(config=config)
    match.run_game()
    return match


def test_each_step_shows_only_the_log_so_far():
    match = _finished_match()
    texts = [e.text for e in match.game_state.log]
    cursor = ReplayCursor(match.game_state.log)

    for step in range(len(texts)):
        cursor.seek(step)
        snapshot = cursor.snapshot()
        assert snapshot["log"] == texts[:step + 1]
        assert cursor.visible_log() == texts[:step + 1]
        assert snapshot["game_over"] == (step == len(texts) - 1)
        assert ("WINS THE GAME!" in cursor.current()["text"]) == (step == len(texts) - 1)


def test_snapshots_reveal_every_hand():
    match = _finished_match()
    cursor = ReplayCursor(match.game_state.log)

    snapshot = cursor.seek(0)["snapshot"]

    assert snapshot["log"] == ["Welcome to Coup."]
    for player in snapshot["players"]:
        assert all(card["role"] is not None for card in player["cards"])


def test_cursor_clamps_to_the_log():
    entries = [{"text": t, "snapshot": {"log": [t]}} for t in ("a", "b", "c")]
    cursor = ReplayCursor(entries)

    assert cursor.at_end
    assert cursor.seek(99)["text"] == "c"
    assert cursor.seek(-5)["text"] == "a"
    assert cursor.at_start
    assert cursor.prev()["text"] == "a"
    assert cursor.next()["text"] == "b"


def test_empty_log():
    cursor = ReplayCursor([])
    assert len(cursor) == 0
    assert cursor.current() is None
    assert cursor.seek(3) is None
    assert cursor.visible_log() == []
