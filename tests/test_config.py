"""
Tests for YAML configuration loading.
"""

from pathlib import Path

import pytest

from coup_engine.config import GameConfig, default_config, load_config, load_config_from_yaml


def test_load_yaml_overrides(tmp_path):
    path = tmp_path / "game.yaml"
    path.write_text(
        "bot_players: 5\n"
        "bot_difficulty: hardcore\n"
        "forced_coup_threshold: 12\n"
        "turn_timer_seconds: null\n"
        "agent_types:\n"
        "  '1': scripted\n"
        "  2: bot\n"
    )

    config = load_config_from_yaml(str(path))

    assert config.bot_players == 5
    assert config.bot_difficulty == "hardcore"
    assert config.forced_coup_threshold == 12
    assert config.turn_timer_seconds is None
    assert config.agent_types == {1: "scripted", 2: "bot"}
    assert config.starting_coins == 2


def test_unknown_key_warns(tmp_path, capsys):
    path = tmp_path / "game.yaml"
    path.write_text("night_phase: true\nbot_players: 3\n")

    config = load_config_from_yaml(str(path))

    assert config.bot_players == 3
    assert "Unknown config key 'night_phase'" in capsys.readouterr().out


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config_from_yaml(str(path)) == GameConfig()


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config_from_yaml(str(tmp_path / "nope.yaml"))


def test_load_config_without_path():
    assert load_config() is default_config


def test_shipped_default_config_loads():
    path = Path(__file__).parent.parent / "configs" / "default.yaml"
    config = load_config(str(path))
    assert config.bot_players == 4
    assert config.forced_coup_enabled is True


@pytest.mark.parametrize("body, message", [
    ("bot_difficulty: impossible\n", "bot_difficulty"),
    ("agent_types:\n  1: llm\n", "agent type 'llm'"),
    ("min_players: 1\n", "min_players"),
    ("min_players: 6\nmax_players: 4\n", "min_players"),
    ("max_match_history: 0\n", "max_match_history"),
    ("turn_timer_seconds: 0\n", "turn_timer_seconds"),
    ("forced_coup_threshold: -1\n", "forced_coup_threshold"),
])
def test_out_of_range_settings_are_rejected(tmp_path, body, message):
    path = tmp_path / "bad.yaml"
    path.write_text(body)
    with pytest.raises(ValueError, match=message):
        load_config_from_yaml(str(path))


def test_low_coup_threshold_is_accepted(tmp_path):
    path = tmp_path / "house.yaml"
    path.write_text("forced_coup_threshold: 5\n")
    assert load_config_from_yaml(str(path)).forced_coup_threshold == 5
