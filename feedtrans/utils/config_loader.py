"""Configuration loading and management.

Settings come from three layers, later ones winning: built-in defaults, a
YAML file, environment variables.
"""

import os
import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from feedtrans.core.exceptions import ConfigurationError

PROJECT_CONFIG_PATH = Path("configs/default.yaml")
USER_CONFIG_PATH = Path.home() / ".feedtrans" / "config.yaml"

# Environment variable -> (key path, type)
ENV_OVERRIDES: Dict[str, Tuple[List[str], type]] = {
    "ANTHROPIC_API_KEY": (["api_keys", "anthropic"], str),
    "FEEDTRANS_MODEL": (["translation", "model_name"], str),
    "FEEDTRANS_BATCH_SIZE": (["translation", "batch_size"], int),
    "FEEDTRANS_MAX_RETRIES": (["translation", "max_retries"], int),
    "FEEDTRANS_LOG_LEVEL": (["logging", "level"], str),
}


def find_config_file() -> Optional[Path]:
    """First existing file among the project and user config locations."""
    for candidate in (PROJECT_CONFIG_PATH, USER_CONFIG_PATH):
        if candidate.exists():
            return candidate
    return None


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration.

    Args:
        config_path: YAML file; when omitted, configs/default.yaml and then
            ~/.feedtrans/config.yaml are tried, falling back to the defaults

    Returns:
        Defaults merged with the file, with environment overrides applied

    Raises:
        FileNotFoundError: An explicit config_path does not exist
        ConfigurationError: The file is not valid YAML or an override is malformed
    """
    path = Path(config_path) if config_path is not None else find_config_file()
    if path is None:
        return override_with_env(get_default_config())
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        try:
            loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid config file {path}: {e}") from e

    return override_with_env(merge_config(get_default_config(), loaded))


def save_config(config: Dict[str, Any], config_path: str) -> None:
    """Write configuration as YAML, creating parent directories."""
    path = Path(config_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w', encoding='utf-8') as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False, allow_unicode=True)


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into a copy of base."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def override_with_env(config: Dict[str, Any]) -> Dict[str, Any]:
    """Apply ENV_OVERRIDES to config in place; empty variables are ignored."""
    for env_var, (key_path, cast) in ENV_OVERRIDES.items():
        raw = os.getenv(env_var)
        if not raw:
            continue
        try:
            value = cast(raw)
        except ValueError as e:
            raise ConfigurationError(
                f"Environment variable {env_var} must be {cast.__name__}",
                config_key=env_var,
                invalid_value=raw
            ) from e

        section = config
        for key in key_path[:-1]:
            section = section.setdefault(key, {})
        section[key_path[-1]] = value

    return config


def get_default_config() -> Dict[str, Any]:
    """Built-in defaults; mirrors configs/default.yaml."""
    return {
        "translation": {
            "model_name": "claude-sonnet-4-20250514",
            "max_tokens": 8192,
            "batch_size": 40,
            "max_retries": 3,
            "retry_delay": 2.0,
            "display_truncate": 500,
        },
        "logging": {
            "level": "INFO",
            "file": None,
        },
        "api_keys": {
            "anthropic": "",
        },
    }
