"""
Tests for the Socket.IO room server.
"""

import pytest

from coup_engine.config.game_config import GameConfig
from coup_engine.web.game_server import GameServer


@pytest.fixture
def server():
    return GameServer(config=GameConfig(use_announcements=False, record_runs=False, random_seed=4))


def _messages(client):
    return [r["args"] for r in client.get_received() if r["name"] == "message"]


def test_room_lifecycle(server):
    alice = server.socketio.test_client(server.app)
    alice.emit('join', {'room': ' abcd ', 'name': 'Alice'})
    alice.emit('add_bot', {'name': 'Robo'})

    lobby = [m for m in _messages(alice) if m["type"] == "lobbyUpdate"]
    assert [p["name"] for p in lobby[-1]["payload"]["players"]] == ["Alice", "Robo"]
    assert "ABCD" in server.rooms

    alice.emit('start')
    types = [m["type"] for m in _messages(alice)]
    assert "gameStart" in types
    assert "stateSync" in types
    assert "prompt" in types
    assert server.rooms["ABCD"].started

    late = server.socketio.test_client(server.app)
    late.emit('join', {'room': 'ABCD', 'name': 'Late'})
    assert _messages(late)[-1]["payload"]["message"] == "Game already in progress"


def test_input_before_joining_is_rejected(server):
    client = server.socketio.test_client(server.app)
    client.emit('message', {"type": "action", "payload": {"action": "Income"}})
    assert _messages(client)[-1]["payload"]["code"] == "not_seated"


def test_rooms_endpoint(server):
    client = server.socketio.test_client(server.app)
    client.emit('join', {'room': 'xyz', 'name': 'Bob'})

    rooms = server.app.test_client().get('/api/rooms').get_json()

    assert rooms == [{
        "room": "XYZ",
        "started": False,
        "players": [{"seat": 1, "name": "Bob", "is_bot": False, "peer_id": rooms[0]["players"][0]["peer_id"]}],
    }]


def test_room_closes_when_last_peer_leaves(server):
    alice = server.socketio.test_client(server.app)
    bob = server.socketio.test_client(server.app)
    alice.emit('join', {'room': 'gone', 'name': 'Alice'})
    bob.emit('join', {'room': 'gone', 'name': 'Bob'})

    alice.disconnect()
    assert "GONE" in server.rooms

    bob.disconnect()
    assert "GONE" not in server.rooms
    assert server.peer_rooms == {}


def test_started_room_with_only_bots_left_is_closed(server):
    alice = server.socketio.test_client(server.app)
    alice.emit('join', {'room': 'solo', 'name': 'Alice'})
    alice.emit('add_bot', {'name': 'Robo'})
    alice.emit('start')
    assert server.rooms["SOLO"].started

    alice.disconnect()

    assert "SOLO" not in server.rooms
    assert server.app.test_client().get('/api/rooms').get_json() == []
