"""Shared fixtures: keep tests away from the real config file and env."""

import logging

import pytest


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point LARK_CONFIG at a temp file and clear credential env vars."""
    config_path = tmp_path / "config.json"
    monkeypatch.setenv("LARK_CONFIG", str(config_path))
    monkeypatch.delenv("LARK_APP_ID", raising=False)
    monkeypatch.delenv("LARK_BASE_URL", raising=False)
    monkeypatch.delenv("LARK_LOG_LEVEL", raising=False)
    return config_path


@pytest.fixture(autouse=True)
def reset_cli_logging():
    """Drop handlers the CLI bound to a runner's (now closed) stderr."""
    yield
    logging.getLogger("lark_cli").handlers.clear()
