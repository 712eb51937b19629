"""
Shared test fixtures for singularity-mcp tests.
Patches config module to avoid loading a real .env or calling the live API.
"""

import os
import sys
import pytest

# Add project root to path so imports work without an install
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch):
    """Ensure every test starts with a clean config state.
    Prevents tests from reading the real .env or a developer's token."""
    from singularity_mcp import config

    monkeypatch.setattr(config, "env", {})
    monkeypatch.setattr(config, "BASE_URL", "https://api.example.test")
    monkeypatch.setattr(config, "ACCESS_TOKEN", "")
    monkeypatch.setattr(config, "LOG_ENABLED", False)
    monkeypatch.setattr(config, "LOG_LEVEL", "info")
    monkeypatch.setattr(config, "HTTP_TIMEOUT_SECONDS", None)
    monkeypatch.setattr(config, "RESOURCE_SCHEME", "singularity")
    monkeypatch.setattr(config, "MCP_HTTP_HOST", "127.0.0.1")
    monkeypatch.setattr(config, "MCP_HTTP_PORT", 8808)

