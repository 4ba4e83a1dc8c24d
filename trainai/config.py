"""
Configuration loading (config.yaml + .env).
"""

import copy
import os

import yaml
from dotenv import load_dotenv


DEFAULT_CONFIG = {
    "claude": {
        "api_key_env": "ANTHROPIC_API_KEY",
        "model": "claude-3-5-sonnet-20241022",
        "max_tokens": 1600,
        "temperature": 0.4,
        "timeout": 120,
    },
    "database": {
        "path": "data/trainai.db",
    },
    "defaults": {
        "minutes": 45,
        "style": "strength",
    },
    "rotation": {
        "per_split": True,
    },
    "debug": False,
}


def _merge(base, override):
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path=None):
    """
    Load configuration from config.yaml, layered over the built-in defaults.

    Raises:
        FileNotFoundError: if an explicit config_path does not exist
    """
    if config_path is None:
        config_path = os.path.join(os.path.dirname(os.path.dirname(__file__)), "config.yaml")
        if not os.path.exists(config_path):
            return copy.deepcopy(DEFAULT_CONFIG)

    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        config = yaml.safe_load(f) or {}

    return _merge(DEFAULT_CONFIG, config)


def get_api_key(config):
    """Load .env and return the API key named by claude.api_key_env (or None)."""
    load_dotenv()
    api_key_env = config["claude"]["api_key_env"]
    return os.getenv(api_key_env)
