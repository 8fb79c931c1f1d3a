"""
Logging setup for loguru.

Replaces loguru's default handler with a stderr sink and a rotating file
sink configured from AppConfig.
"""

import sys
from pathlib import Path

from loguru import logger

from icc.config.settings import AppConfig

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def configure_logging(config: AppConfig, console: bool = True) -> None:
    """
    Configure loguru sinks.

    Args:
        config: Application configuration (level, file, rotation)
        console: Also log to stderr
    """
    logger.remove()  # Remove default handler

    if console:
        logger.add(sys.stderr, level=config.log_level, format=CONSOLE_FORMAT)

    log_path = Path(config.log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logger.add(str(log_path), **config.get_log_config())

    logger.info(f"Logging configured: level={config.log_level}, file={log_path}")
