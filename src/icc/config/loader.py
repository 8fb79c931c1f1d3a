"""
Configuration Loader Module

Loads AppConfig from config/{env}.yaml and overlays environment variables
(prefixed ICC_). Environment variables take precedence over the file.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger

from icc.config.settings import AppConfig

# Names the config environment (config/{env}.yaml) for processes started by
# scripts/run_dashboard.py
CONFIG_ENV_VAR = "ICC_ENV"

# env var -> (section, key); section None = top-level field
ENV_MAPPING = {
    "ICC_LOG_LEVEL": (None, "log_level"),
    "ICC_LOG_FILE": (None, "log_file"),
    "ICC_MAX_LOG_SIZE_MB": (None, "max_log_size_mb"),
    "ICC_LOG_BACKUP_COUNT": (None, "log_backup_count"),
    "ICC_ROLL_HISTORY_PATH": (None, "roll_history_path"),
    "ICC_WATCHLIST_SIZE": ("watchlist", "size"),
    "ICC_FALLBACK_MARKUP": ("watchlist", "fallback_markup"),
    "ICC_DASHBOARD_PORT": ("dashboard", "streamlit_port"),
    "ICC_CACHE_TTL": ("dashboard", "cache_ttl_seconds"),
    "ICC_USE_MOCK_DATA": ("dashboard", "use_mock_data"),
    "ICC_MOCK_SEED": ("dashboard", "mock_seed"),
    "ICC_DB_NAME": ("connection", "name"),
    "ICC_DB_TYPE": ("connection", "connection_type"),
    "ICC_DB_HOST": ("connection", "host"),
    "ICC_DB_PORT": ("connection", "port"),
    "ICC_DB_DATABASE": ("connection", "database_name"),
    "ICC_DB_SCHEMA": ("connection", "schema_name"),
    "ICC_DB_USER": ("connection", "username"),
    "ICC_DB_PASSWORD": ("connection", "password"),
    "ICC_DB_SSL": ("connection", "use_ssl"),
}

BOOL_KEYS = {"use_mock_data", "use_ssl"}
INT_KEYS = {"max_log_size_mb", "log_backup_count", "size", "streamlit_port", "cache_ttl_seconds", "mock_seed", "port"}
FLOAT_KEYS = {"fallback_markup"}


def load_config(env: str = "default", config_dir: str = "config") -> AppConfig:
    """
    Load configuration for specified environment.

    Args:
        env: Environment name (default, dev, prod)
        config_dir: Directory holding {env}.yaml files

    Returns:
        AppConfig instance with settings from file and environment

    Raises:
        ValueError: If config is invalid
    """
    config_file = Path(config_dir) / f"{env}.yaml"

    if config_file.exists():
        with open(config_file, "r") as f:
            config_data = yaml.safe_load(f) or {}
        logger.info(f"Loaded config from {config_file}")
    else:
        logger.warning(f"Config file not found: {config_file}, using defaults")
        config_data = {}

    config_data = merge_config_with_env(config_data)

    return AppConfig(**config_data)


def merge_config_with_env(
    config_data: Dict[str, Any],
    environ: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """
    Merge configuration with environment variables.

    Examples:
        ICC_LOG_LEVEL=DEBUG
        ICC_WATCHLIST_SIZE=10
        ICC_DB_HOST=192.168.1.101

    Args:
        config_data: Configuration data from file
        environ: Environment to read (default: os.environ)

    Returns:
        Merged configuration with env vars applied
    """
    environ = os.environ if environ is None else environ
    merged = {k: (dict(v) if isinstance(v, dict) else v) for k, v in config_data.items()}

    for env_var, (section, key) in ENV_MAPPING.items():
        env_value = environ.get(env_var)
        if env_value is None:
            continue

        value = _convert(key, env_value)
        if section is None:
            merged[key] = value
        else:
            merged.setdefault(section, {})
            if merged[section] is None:
                merged[section] = {}
            merged[section][key] = value

        logger.debug(f"Overriding {key} from env: {env_var}")

    return merged


def _convert(key: str, value: str) -> Any:
    if key in BOOL_KEYS:
        return value.lower() in ("true", "1", "yes", "on")
    if key in INT_KEYS:
        return int(value)
    if key in FLOAT_KEYS:
        return float(value)
    return value
