"""
Application Configuration Module

Provides configuration for logging, watchlist scoring, the dashboard and the
portfolio data source.
"""

from dataclasses import dataclass, field
from typing import Optional

from loguru import logger

from icc.data.connections import ConnectionConfig

VALID_LOG_LEVELS = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


@dataclass(slots=True)
class WatchlistConfig:
    """
    Watchlist scoring settings.

    Attributes:
        size: Maximum number of watchlist entries
        fallback_markup: strike multiplier used when no quote exists
    """

    size: int = 8
    fallback_markup: float = 1.05

    def __post_init__(self):
        if self.size < 1:
            raise ValueError(f"Watchlist size must be >= 1, got {self.size}")
        if self.fallback_markup <= 0:
            raise ValueError(f"fallback_markup must be > 0, got {self.fallback_markup}")


@dataclass(slots=True)
class DashboardConfig:
    """
    Dashboard configuration settings.

    Attributes:
        streamlit_port: Port for Streamlit server
        cache_ttl_seconds: Cache TTL for the portfolio snapshot
        auto_refresh_options: Auto-refresh intervals offered in the sidebar (seconds, 0 = off)
        default_refresh: Preselected auto-refresh interval (seconds)
        use_mock_data: Serve the generated mock book instead of a database
        mock_seed: Seed for the mock book generator
    """

    streamlit_port: int = 8501
    cache_ttl_seconds: int = 30
    auto_refresh_options: list[int] = field(default_factory=lambda: [5, 30, 60, 0])
    default_refresh: int = 0
    use_mock_data: bool = True
    mock_seed: int = 42

    def __post_init__(self):
        if self.cache_ttl_seconds < 1:
            raise ValueError(f"cache_ttl_seconds must be >= 1, got {self.cache_ttl_seconds}")
        if any(seconds < 0 for seconds in self.auto_refresh_options):
            raise ValueError(f"auto_refresh_options must be >= 0, got {self.auto_refresh_options}")
        if self.default_refresh not in self.auto_refresh_options:
            raise ValueError(
                f"default_refresh {self.default_refresh} is not one of {self.auto_refresh_options}"
            )


@dataclass
class AppConfig:
    """
    Investment Control Center configuration.

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ...)
        log_file: Path to log file
        max_log_size_mb: Maximum log file size before rotation
        log_backup_count: Days of rotated logs to retain
        roll_history_path: Delta Lake table for persisted roll history
        watchlist: Watchlist scoring settings
        dashboard: Dashboard settings
        connection: Portfolio database connection (None = mock data only)
    """

    # Logging
    log_level: str = "INFO"
    log_file: str = "logs/icc.log"
    max_log_size_mb: int = 50
    log_backup_count: int = 7

    # Storage
    roll_history_path: str = "data/lake/roll_history"

    watchlist: WatchlistConfig = field(default_factory=WatchlistConfig)
    dashboard: DashboardConfig = field(default_factory=DashboardConfig)
    connection: Optional[ConnectionConfig] = None

    def __post_init__(self):
        """
        Validate configuration after initialization.

        Raises:
            ValueError: If configuration is invalid
        """
        if self.log_level.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level}. Must be one of {VALID_LOG_LEVELS}")
        self.log_level = self.log_level.upper()

        if isinstance(self.watchlist, dict):
            self.watchlist = WatchlistConfig(**self.watchlist)
        if isinstance(self.dashboard, dict):
            self.dashboard = DashboardConfig(**self.dashboard)
        if isinstance(self.connection, dict):
            self.connection = ConnectionConfig(**self.connection)

        if self.connection is None and not self.dashboard.use_mock_data:
            logger.warning("No database connection configured and mock data disabled; the dashboard will be empty")

    def get_log_config(self) -> dict:
        """
        Get logging configuration for loguru.

        Returns:
            Dictionary with loguru file sink configuration
        """
        return {
            "rotation": f"{self.max_log_size_mb} MB",
            "retention": f"{self.log_backup_count} days",
            "compression": "zip",
            "level": self.log_level,
            "format": (
                "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
                "<level>{message}</level>"
            ),
        }
