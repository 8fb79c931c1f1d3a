"""
Tests for configuration loading

YAML file parsing, defaults, ICC_* environment overrides and validation.
"""

import os

import pytest
import yaml

from icc.config import AppConfig, load_config, merge_config_with_env
from icc.data import ConnectionType


@pytest.fixture
def config_dir(tmp_path):
    """Config directory with a dev.yaml."""
    data = {
        "log_level": "debug",
        "watchlist": {"size": 5},
        "dashboard": {"use_mock_data": False, "mock_seed": 7},
        "connection": {
            "name": "Portfolio DB",
            "connection_type": "postgresql",
            "host": "db.local",
            "port": 5432,
            "database_name": "portfolio",
            "username": "reader",
        },
    }
    (tmp_path / "dev.yaml").write_text(yaml.safe_dump(data))
    return tmp_path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Make sure no ICC_* variables leak in from the environment."""
    for name in list(os.environ):
        if name.startswith("ICC_"):
            monkeypatch.delenv(name)


class TestLoadConfig:
    def test_missing_file_uses_defaults(self, tmp_path):
        config = load_config("nope", config_dir=str(tmp_path))

        assert config.log_level == "INFO"
        assert config.watchlist.size == 8
        assert config.watchlist.fallback_markup == 1.05
        assert config.dashboard.use_mock_data is True
        assert config.connection is None

    def test_yaml_values(self, config_dir):
        config = load_config("dev", config_dir=str(config_dir))

        assert config.log_level == "DEBUG"
        assert config.watchlist.size == 5
        assert config.dashboard.mock_seed == 7
        assert config.connection.connection_type == ConnectionType.POSTGRESQL
        assert config.connection.use_ssl is True

    def test_env_overrides_file(self, config_dir, monkeypatch):
        monkeypatch.setenv("ICC_WATCHLIST_SIZE", "10")
        monkeypatch.setenv("ICC_DB_PASSWORD", "s3cret")
        monkeypatch.setenv("ICC_DB_SSL", "false")

        config = load_config("dev", config_dir=str(config_dir))

        assert config.watchlist.size == 10
        assert config.connection.password.get_secret_value() == "s3cret"
        assert config.connection.use_ssl is False

    def test_invalid_log_level(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ICC_LOG_LEVEL", "LOUD")

        with pytest.raises(ValueError, match="log_level"):
            load_config("default", config_dir=str(tmp_path))


class TestMergeConfigWithEnv:
    def test_type_conversion(self):
        merged = merge_config_with_env(
            {},
            environ={
                "ICC_FALLBACK_MARKUP": "1.1",
                "ICC_USE_MOCK_DATA": "no",
                "ICC_DB_PORT": "6543",
            },
        )

        assert merged["watchlist"]["fallback_markup"] == 1.1
        assert merged["dashboard"]["use_mock_data"] is False
        assert merged["connection"]["port"] == 6543

    def test_input_is_not_modified(self):
        data = {"watchlist": {"size": 5}}

        merge_config_with_env(data, environ={"ICC_WATCHLIST_SIZE": "9"})

        assert data["watchlist"]["size"] == 5

    def test_unrelated_env_ignored(self):
        assert merge_config_with_env({"log_level": "INFO"}, environ={"HOME": "/root"}) == {"log_level": "INFO"}


class TestAppConfig:
    @pytest.mark.parametrize("watchlist", [{"size": 0}, {"fallback_markup": 0.0}])
    def test_invalid_watchlist(self, watchlist):
        with pytest.raises(ValueError):
            AppConfig(watchlist=watchlist)

    @pytest.mark.parametrize(
        "dashboard",
        [
            {"cache_ttl_seconds": 0},
            {"auto_refresh_options": [-5, 0], "default_refresh": 0},
            {"auto_refresh_options": [5, 30], "default_refresh": 60},
        ],
    )
    def test_invalid_dashboard(self, dashboard):
        with pytest.raises(ValueError):
            AppConfig(dashboard=dashboard)

    def test_dashboard_env_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ICC_DASHBOARD_PORT", "8600")
        monkeypatch.setenv("ICC_CACHE_TTL", "120")

        config = load_config("default", config_dir=str(tmp_path))

        assert config.dashboard.streamlit_port == 8600
        assert config.dashboard.cache_ttl_seconds == 120

    def test_log_config(self):
        log_config = AppConfig(max_log_size_mb=10, log_backup_count=3).get_log_config()

        assert log_config["rotation"] == "10 MB"
        assert log_config["retention"] == "3 days"
        assert log_config["level"] == "INFO"
