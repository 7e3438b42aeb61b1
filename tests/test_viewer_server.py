"""
Tests for the match history viewer API.
"""

import pytest

from coup_engine.config.game_config import GameConfig
from coup_engine.match import CoupMatch
from coup_engine.web.viewer_server import ViewerServer


@pytest.fixture
def client(tmp_path):
    config = GameConfig(
        use_announcements=False, record_runs=True, runs_dir=str(tmp_path),
        bot_players=3, random_seed=8,
    )
    CoupMatch(config=config, match_id="saved1").run_game()
    server = ViewerServer(runs_dir=str(tmp_path))
    return server.app.test_client()


def test_lists_saved_matches(client):
    matches = client.get('/api/matches').get_json()
    assert [m["name"] for m in matches] == ["saved1"]
    assert matches[0]["has_replay"]
    assert matches[0]["game_outcome"].endswith(" wins")


def test_metadata(client):
    metadata = client.get('/api/matches/saved1').get_json()
    assert metadata["match_id"] == "saved1"
    assert len(metadata["players"]) == 3
    assert metadata["winner"]


def test_first_step_shows_only_the_welcome(client):
    data = client.get('/api/matches/saved1/replay/0').get_json()
    assert data["step"] == 0
    assert data["log"] == ["Welcome to Coup."]
    assert data["snapshot"]["log"] == ["Welcome to Coup."]


def test_step_past_the_end_clamps_to_the_result(client):
    data = client.get('/api/matches/saved1/replay/100000').get_json()
    assert data["step"] == data["steps"] - 1
    assert data["text"].endswith("WINS THE GAME!")
    assert len(data["log"]) == data["steps"]


def test_full_replay_and_events(client):
    replay = client.get('/api/matches/saved1/replay').get_json()
    assert replay["log"][0] == "Welcome to Coup."
    assert replay["steps"] == len(replay["log"])

    events = client.get('/api/matches/saved1/events').get_json()
    types = [e["event_type"] for e in events["events"]]
    assert types[0] == "game_start"
    assert "game_over" in types

    later = client.get(f'/api/matches/saved1/events?last_position={events["position"]}').get_json()
    assert later["events"] == []


def test_unknown_match_is_404(client):
    assert client.get('/api/matches/nope').status_code == 404
    assert client.get('/api/matches/nope/replay/0').status_code == 404
    assert client.get('/api/matches/nope/events').status_code == 404


def test_matches_in_progress_are_hidden_by_default(client, tmp_path):
    playing = tmp_path / "playing"
    playing.mkdir()
    (playing / "metadata.json").write_text('{"match_id": "playing", "players": [], "winner": null}')

    finished = client.get('/api/matches').get_json()
    assert [m["name"] for m in finished] == ["saved1"]

    everything = {m["name"]: m for m in client.get('/api/matches?all=1').get_json()}
    assert everything["playing"]["in_progress"] is True
    assert everything["saved1"]["in_progress"] is False
