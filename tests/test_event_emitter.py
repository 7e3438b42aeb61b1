"""
Tests for structured event recording and run storage.
"""

import json
import shutil
from unittest.mock import MagicMock

import pytest

from coup_engine.core import ActionType, GameState, ResolutionEngine, SeatSpec
from coup_engine.web import EventEmitter, RunRecorder


def test_engine_emits_typed_events(game_config):
    events = []
    emitter = EventEmitter()
    emitter.register_listener(lambda event_type, data: events.append((event_type, data)))
    state = GameState.create([SeatSpec(name="Alice"), SeatSpec(name="Bob")], game_config, random_seed=1)
    engine = ResolutionEngine(state, game_config, event_emitter=emitter)

    engine.start()
    engine.declare_action(1, ActionType.TAX)

    types = [t for t, _ in events]
    assert types[:2] == ["game_start", "turn_start"]
    assert "action_declared" in types
    declared = next(d for t, d in events if t == "action_declared")
    assert declared["action"] == "Tax"
    assert declared["claimed_role"] == "Duke"


def test_recording_failure_does_not_break_the_game(game_config, capsys):
    recorder = MagicMock()
    recorder.record_event.side_effect = OSError("disk full")
    state = GameState.create([SeatSpec(name="Alice"), SeatSpec(name="Bob")], game_config, random_seed=1)
    engine = ResolutionEngine(state, game_config, event_emitter=EventEmitter(recorder))

    engine.start()
    engine.declare_action(1, ActionType.INCOME)

    assert state.get_player(1).coins == 3
    assert "Error recording event: disk full" in capsys.readouterr().out


def test_events_are_appended_in_sequence(tmp_path):
    recorder = RunRecorder(str(tmp_path))
    recorder.create_run("r1")

    recorder.record_event("turn_start", {"player_id": 1})
    recorder.record_event("turn_start", {"player_id": 2})

    lines = (tmp_path / "r1" / "events.jsonl").read_text().splitlines()
    records = [json.loads(line) for line in lines]
    assert [r["sequence"] for r in records] == [0, 1]
    assert records[1]["data"] == {"player_id": 2}


def test_replay_round_trip(tmp_path):
    recorder = RunRecorder(str(tmp_path))
    recorder.create_run("r1")
    entries = [{"text": "Welcome to Coup.", "snapshot": {"log": ["Welcome to Coup."]}}]

    recorder.save_replay(entries)

    assert recorder.load_replay("r1") == entries
    with pytest.raises(FileNotFoundError):
        recorder.load_replay("missing")
    assert recorder.load_metadata("missing") is None


def test_prune_keeps_the_current_run(tmp_path):
    for name in ("old1", "old2", "old3"):
        (tmp_path / name).mkdir()
        (tmp_path / name / "replay.jsonl").write_text("")
    recorder = RunRecorder(str(tmp_path))
    recorder.create_run("current")

    removed = recorder.prune(2)

    assert len(removed) == 2
    remaining = sorted(d.name for d in tmp_path.iterdir())
    assert len(remaining) == 2
    assert "current" in remaining


def test_prune_skips_runs_without_a_replay(tmp_path):
    (tmp_path / "playing").mkdir()
    (tmp_path / "done").mkdir()
    (tmp_path / "done" / "replay.jsonl").write_text("")
    recorder = RunRecorder(str(tmp_path))
    recorder.create_run("current")

    assert recorder.prune(1) == ["done"]
    assert sorted(d.name for d in tmp_path.iterdir()) == ["current", "playing"]


def test_run_directory_is_recreated_before_writing(tmp_path):
    recorder = RunRecorder(str(tmp_path))
    recorder.create_run("r1")
    shutil.rmtree(tmp_path / "r1")

    recorder.record_event("turn_start", {"player_id": 1})
    recorder.save_replay([{"text": "Welcome to Coup.", "snapshot": {}}])

    assert recorder.load_replay("r1")[0]["text"] == "Welcome to Coup."
    assert (tmp_path / "r1" / "events.jsonl").exists()


def test_list_runs_marks_unfinished_matches(tmp_path):
    (tmp_path / "playing").mkdir()
    recorder = RunRecorder(str(tmp_path))
    recorder.create_run("done")
    recorder.save_replay([{"text": "Alice WINS THE GAME!", "snapshot": {}}])

    runs = {r["name"]: r for r in recorder.list_runs()}

    assert runs["playing"]["in_progress"] is True
    assert runs["done"]["in_progress"] is False
