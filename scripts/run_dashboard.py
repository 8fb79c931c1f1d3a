#!/usr/bin/env python3
"""
Launch the Investment Control Center dashboard.

Loads config/{env}.yaml for the dashboard port and passes the environment
name to the Streamlit process in ICC_ENV, so the app and its pages read the
same config.

Usage:
    python scripts/run_dashboard.py
    python scripts/run_dashboard.py --env prod
    python scripts/run_dashboard.py --port 8502 --debug

Exit codes:
    0: Dashboard stopped normally
    1: App missing or Streamlit exited with an error
"""

import argparse
import os
import subprocess
import sys
from pathlib import Path
from typing import Optional, Sequence

from loguru import logger

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from icc.config import CONFIG_ENV_VAR, load_config

APP_PATH = PROJECT_ROOT / "src" / "icc" / "dashboard" / "app.py"


def parse_args(argv: Optional[Sequence[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Launch the Investment Control Center dashboard"
    )
    parser.add_argument(
        "--env",
        type=str,
        default="default",
        help="Config environment, reads config/{env}.yaml (default: default)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Streamlit port (default: dashboard.streamlit_port from config)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Debug logging in the app and in Streamlit"
    )
    return parser.parse_args(argv)


def streamlit_command(port: int, debug: bool = False) -> list[str]:
    cmd = [
        "streamlit", "run", str(APP_PATH),
        "--server.port", str(port),
        "--server.headless", "true",
    ]
    if debug:
        cmd += ["--logger.level", "debug"]
    return cmd


def child_environment(env_name: str, debug: bool = False, base: Optional[dict] = None) -> dict[str, str]:
    """Environment for the Streamlit process: src on PYTHONPATH plus ICC_ENV."""
    child = dict(os.environ if base is None else base)
    child["PYTHONPATH"] = os.pathsep.join(filter(None, [str(PROJECT_ROOT / "src"), child.get("PYTHONPATH")]))
    child[CONFIG_ENV_VAR] = env_name
    if debug:
        child["ICC_LOG_LEVEL"] = "DEBUG"
    return child


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)

    if not APP_PATH.exists():
        logger.error(f"Dashboard app not found at {APP_PATH}")
        return 1

    config = load_config(args.env, config_dir=str(PROJECT_ROOT / "config"))
    port = args.port or config.dashboard.streamlit_port
    source = "mock data" if config.dashboard.use_mock_data or config.connection is None else repr(config.connection)

    logger.info(f"Starting dashboard at http://localhost:{port} (config: {args.env}, source: {source})")
    logger.info("Press Ctrl+C to stop")

    try:
        subprocess.run(
            streamlit_command(port, args.debug),
            check=True,
            env=child_environment(args.env, args.debug),
            cwd=PROJECT_ROOT,
        )
    except KeyboardInterrupt:
        logger.info("Dashboard stopped")
    except subprocess.CalledProcessError as e:
        logger.error(f"✗ Streamlit exited with code {e.returncode}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
