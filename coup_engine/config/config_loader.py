"""
Configuration loader for YAML-based game configurations.
"""

import yaml
from pathlib import Path
from typing import Optional

from .game_config import GameConfig, default_config, BOT_DIFFICULTIES, AGENT_TYPES


def load_config_from_yaml(config_path: str) -> GameConfig:
    """
    Load game configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        GameConfig instance with values from YAML file

    Raises:
        FileNotFoundError: If the config file doesn't exist
        yaml.YAMLError: If the YAML file is invalid
        ValueError: If a setting is out of range
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_file, 'r') as f:
        config_dict = yaml.safe_load(f)

    if config_dict is None:
        return GameConfig()

    config = GameConfig()

    for key, value in config_dict.items():
        if hasattr(config, key):
            setattr(config, key, value)
        else:
            print(f"Warning: Unknown config key '{key}' in YAML file")

    # YAML keys are strings; seat ids are ints
    if config.agent_types:
        config.agent_types = {int(k): v for k, v in config.agent_types.items()}

    validate_config(config)
    return config


def validate_config(config: GameConfig) -> None:
    """Reject settings the engine cannot play with."""
    if config.bot_difficulty not in BOT_DIFFICULTIES:
        raise ValueError(f"Unknown bot_difficulty '{config.bot_difficulty}'")
    agent_types = [config.agent_type] + list((config.agent_types or {}).values())
    for agent_type in agent_types:
        if agent_type not in AGENT_TYPES:
            raise ValueError(f"Unknown agent type '{agent_type}'")
    if not 2 <= config.min_players <= config.max_players:
        raise ValueError("Need 2 <= min_players <= max_players")
    if config.forced_coup_threshold < 0:
        raise ValueError("forced_coup_threshold must not be negative")
    if config.max_match_history < 1:
        raise ValueError("max_match_history must be at least 1")
    if config.turn_timer_seconds is not None and config.turn_timer_seconds <= 0:
        raise ValueError("turn_timer_seconds must be positive or null")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load configuration from YAML file or return default.

    Args:
        config_path: Optional path to YAML config file. If None, returns default config.

    Returns:
        GameConfig instance
    """
    if config_path is None:
        return default_config

    return load_config_from_yaml(config_path)
