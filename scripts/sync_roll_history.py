#!/usr/bin/env python
"""
Sync Roll History to Delta Lake

Reads roll history from the configured data source (or the mock book) and
appends entries not yet persisted to the Delta Lake roll history table.

Usage:
    python scripts/sync_roll_history.py [--env default] [--mock]
"""

import argparse
import sys
from pathlib import Path

from loguru import logger

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from icc.config import load_config
from icc.data import MockDataSource, create_data_source, fetch_portfolio, generate_mock_book
from icc.exceptions import DataSourceError
from icc.rolls import RollHistoryRepository
from icc.utils.logging_config import configure_logging


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Persist roll history to Delta Lake")
    parser.add_argument("--env", type=str, default="default", help="Config environment (default: default)")
    parser.add_argument("--mock", action="store_true", help="Sync the generated mock book")
    return parser.parse_args()


def main():
    args = parse_args()
    config = load_config(args.env)
    configure_logging(config)

    if args.mock or config.connection is None:
        source = MockDataSource(generate_mock_book(seed=config.dashboard.mock_seed))
        schema = MockDataSource.schema
    else:
        source = create_data_source(config.connection)
        schema = config.connection.schema_name or "public"

    try:
        data = fetch_portfolio(source, schema=schema)
    except DataSourceError as e:
        logger.error(f"Failed to read portfolio: {e}")
        return 1

    repo = RollHistoryRepository(config.roll_history_path)
    written = repo.sync(data.roll_store)
    logger.success(f"Synced roll history: {written} new entries (table version {repo.get_version()})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
