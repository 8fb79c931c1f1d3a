#!/usr/bin/env python
"""
Check Portfolio Database Connection

Cron-friendly script that tests the configured database connection and lists
the tables of its schema.

Usage:
    python scripts/check_connection.py [--env default]

Exit codes:
    0: Connection OK
    1: Connection failed or not configured
"""

import argparse
import sys
from pathlib import Path

from loguru import logger

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from icc.config import load_config
from icc.data import create_data_source
from icc.exceptions import DataSourceError
from icc.utils.logging_config import configure_logging


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Test the portfolio database connection"
    )
    parser.add_argument(
        "--env",
        type=str,
        default="default",
        help="Config environment (default: default)"
    )
    return parser.parse_args()


def main():
    args = parse_args()
    config = load_config(args.env)
    configure_logging(config)

    if config.connection is None:
        logger.error("No database connection configured (set ICC_DB_* or the connection section)")
        return 1

    logger.info(f"Testing {config.connection!r}")
    try:
        source = create_data_source(config.connection)
    except DataSourceError as e:
        logger.error(f"✗ {e}")
        return 1

    result = source.test_connection()
    if not result.success:
        logger.error(f"✗ Connection failed: {result.error}")
        return 1

    logger.success(f"✓ Connected in {result.latency_ms}ms")

    schema = config.connection.schema_name or "public"
    try:
        tables = source.list_tables(schema)
    except DataSourceError as e:
        logger.error(f"✗ Could not list tables in {schema}: {e}")
        return 1

    logger.info(f"Tables in {schema}: {', '.join(tables) or '(none)'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
