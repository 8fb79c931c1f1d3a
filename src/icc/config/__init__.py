"""
ICC Configuration Module

This module provides application configuration and the YAML/env loader.
"""

from icc.config.loader import CONFIG_ENV_VAR, load_config, merge_config_with_env
from icc.config.settings import AppConfig, DashboardConfig, WatchlistConfig

__all__ = [
    "CONFIG_ENV_VAR",
    "AppConfig",
    "DashboardConfig",
    "WatchlistConfig",
    "load_config",
    "merge_config_with_env",
]
