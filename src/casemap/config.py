"""CLI configuration management.

Handles persistent configuration stored in ~/.casemap/config.yaml.
Supports environment variable overrides.
"""

import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .shared.paths import CONFIG_FILE

# Default values
DEFAULT_SERVER = "http://localhost:8000"
DEFAULT_TIMEOUT = 30
DEFAULT_ACK_DELAY = 1.5
DEFAULT_CASES_DIR = "cases"

# Environment variable mappings
ENV_VARS = {
    "server": "CASEMAP_SERVER",
    "timeout": "CASEMAP_TIMEOUT",
    "host_url": "CASEMAP_HOST_URL",
    "ack_delay": "CASEMAP_ACK_DELAY",
    "cases_dir": "CASEMAP_CASES_DIR",
}

# Value parsers per key
CONVERTERS: dict[str, Any] = {
    "server": str,
    "timeout": int,
    "host_url": str,
    "ack_delay": float,
    "cases_dir": str,
}

CONFIG_KEYS = list(CONVERTERS)


@dataclass
class CaseMapConfig:
    """CLI configuration."""

    server: str = DEFAULT_SERVER
    timeout: int = DEFAULT_TIMEOUT
    host_url: str | None = None
    ack_delay: float = DEFAULT_ACK_DELAY
    cases_dir: str = DEFAULT_CASES_DIR

    # Track where each value came from
    _sources: dict[str, str] = field(default_factory=dict)

    def get_source(self, key: str) -> str:
        """Get the source of a config value."""
        return self._sources.get(key, "default")

    def values(self) -> dict[str, Any]:
        """Config values without source tracking."""
        data = asdict(self)
        data.pop("_sources")
        return data


def get_config_path() -> Path:
    """Get the CLI config file path.

    Returns:
        Path to ~/.casemap/config.yaml
    """
    return CONFIG_FILE


def _read_config_file(config_path: Path) -> dict[str, Any]:
    try:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return {}
    return data if isinstance(data, dict) else {}


def load_config() -> CaseMapConfig:
    """Load CLI configuration.

    Precedence (highest to lowest):
    1. Environment variables
    2. Config file (~/.casemap/config.yaml)
    3. Defaults

    Returns:
        CaseMapConfig with values and sources
    """
    config = CaseMapConfig()
    sources: dict[str, str] = {key: "default" for key in CONFIG_KEYS}

    config_path = get_config_path()
    if config_path.exists():
        file_config = _read_config_file(config_path)
        for key in CONFIG_KEYS:
            if key not in file_config or file_config[key] is None:
                continue
            try:
                setattr(config, key, CONVERTERS[key](file_config[key]))
                sources[key] = "config file"
            except (TypeError, ValueError):
                pass  # Keep default for malformed values

    for key, env_var in ENV_VARS.items():
        raw = os.environ.get(env_var)
        if not raw:
            continue
        try:
            setattr(config, key, CONVERTERS[key](raw))
            sources[key] = "environment"
        except ValueError:
            pass

    config._sources = sources
    return config


def save_config(key: str, value: Any) -> None:
    """Save a config value to the config file.

    Args:
        key: Config key (server, timeout, host_url, ack_delay, cases_dir)
        value: Value to save

    Raises:
        KeyError: If key is unknown
        ValueError: If value cannot be converted for key
    """
    if key not in CONVERTERS:
        raise KeyError(key)
    converted = CONVERTERS[key](value)

    config_path = get_config_path()
    existing = _read_config_file(config_path) if config_path.exists() else {}
    existing[key] = converted

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        yaml.dump(existing, f, default_flow_style=False)


def unset_config(key: str) -> bool:
    """Remove a config value from the config file.

    Args:
        key: Config key to remove

    Returns:
        True if key was removed, False if not found
    """
    config_path = get_config_path()
    if not config_path.exists():
        return False

    existing = _read_config_file(config_path)
    if key not in existing:
        return False

    del existing[key]

    with open(config_path, "w") as f:
        yaml.dump(existing, f, default_flow_style=False)

    return True
