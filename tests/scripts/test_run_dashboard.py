"""
Tests for the dashboard launcher

subprocess.run is patched; the tests check the Streamlit command line and
the environment handed to it.
"""

import importlib.util
import os
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "run_dashboard.py"


@pytest.fixture(scope="module")
def run_dashboard():
    module_spec = importlib.util.spec_from_file_location("run_dashboard", SCRIPT)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in list(os.environ):
        if name.startswith("ICC_"):
            monkeypatch.delenv(name)


def launch(run_dashboard, argv):
    with patch.object(run_dashboard.subprocess, "run") as mock_run:
        code = run_dashboard.main(argv)
    assert mock_run.call_count == 1
    cmd = mock_run.call_args.args[0]
    return code, cmd, mock_run.call_args.kwargs["env"]


def option_value(cmd, flag):
    return cmd[cmd.index(flag) + 1]


class TestRunDashboard:
    def test_env_reaches_streamlit_process(self, run_dashboard):
        code, cmd, env = launch(run_dashboard, ["--env", "prod"])

        assert code == 0
        assert env["ICC_ENV"] == "prod"
        assert cmd[:3] == ["streamlit", "run", str(run_dashboard.APP_PATH)]

    def test_default_env(self, run_dashboard):
        _, _, env = launch(run_dashboard, [])

        assert env["ICC_ENV"] == "default"
        assert str(run_dashboard.PROJECT_ROOT / "src") in env["PYTHONPATH"]

    def test_port_comes_from_config(self, run_dashboard, monkeypatch):
        monkeypatch.setenv("ICC_DASHBOARD_PORT", "9123")

        _, cmd, _ = launch(run_dashboard, [])

        assert option_value(cmd, "--server.port") == "9123"

    def test_default_port(self, run_dashboard):
        _, cmd, _ = launch(run_dashboard, [])

        assert option_value(cmd, "--server.port") == "8501"

    def test_explicit_port_wins(self, run_dashboard, monkeypatch):
        monkeypatch.setenv("ICC_DASHBOARD_PORT", "9123")

        _, cmd, _ = launch(run_dashboard, ["--port", "8600"])

        assert option_value(cmd, "--server.port") == "8600"

    def test_debug(self, run_dashboard):
        _, cmd, env = launch(run_dashboard, ["--debug"])

        assert option_value(cmd, "--logger.level") == "debug"
        assert env["ICC_LOG_LEVEL"] == "DEBUG"

    def test_streamlit_failure_returns_1(self, run_dashboard):
        with patch.object(run_dashboard.subprocess, "run", side_effect=subprocess.CalledProcessError(2, "streamlit")):
            assert run_dashboard.main([]) == 1
