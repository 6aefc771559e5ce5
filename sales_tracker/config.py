from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict

import yaml

from sales_tracker.seed import DEFAULT_SEED_URL

DEFAULT_CONFIG: Dict[str, object] = {
    "db_path": "salesboard.db",
    "seed_url": DEFAULT_SEED_URL,
    "seed_on_startup": True,
    "seed_timeout": 30,
    "host": "127.0.0.1",
    "port": 8080,
    "cors_origins": ["*"],
    "log_level": "INFO",
}

CONFIG_PATH = Path("config.yaml")

# environment variable -> (config key, converter)
_ENV_OVERRIDES = {
    "SALESBOARD_DB_PATH": ("db_path", str),
    "SALESBOARD_SEED_URL": ("seed_url", str),
    "SALESBOARD_LOG_LEVEL": ("log_level", str),
    "PORT": ("port", int),
}


def _merge_defaults(current: Dict[str, object], defaults: Dict[str, object]) -> Dict[str, object]:
    """Fill keys missing from the current config with their defaults."""
    return {**defaults, **current}


def with_defaults(config: Dict[str, object]) -> Dict[str, object]:
    return _merge_defaults(config, DEFAULT_CONFIG)


def load_config(path: Path | str | None = None) -> Dict[str, object]:
    """Load YAML settings, fill in defaults, then apply environment overrides.

    A missing file is not an error; the defaults are used instead.
    """
    target = Path(path) if path else CONFIG_PATH
    data: Dict[str, object] = {}
    if target.exists():
        with target.open("r", encoding="utf-8") as fp:
            data = yaml.safe_load(fp) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {target} must contain a mapping")
    config = _merge_defaults(data, DEFAULT_CONFIG)
    for env_name, (key, convert) in _ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            config[key] = convert(value)
    return config


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=str(level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
