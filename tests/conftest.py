"""Shared fixtures."""
import pytest

from etherx import config


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Run every test against default settings, ignoring any local .env."""
    for key in config._ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(config, "_ENV_LOADED", True)
    config._clear_cache()
    yield
    config._clear_cache()
