"""
singularity-mcp shared configuration and constants.
Standalone module; no imports from other project files.
"""

import os

# ---------------------------------------------------------------------------
# .env path and helpers
# ---------------------------------------------------------------------------

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
_PROJECT_ROOT = os.path.dirname(_PACKAGE_DIR)

ENV_PATH = os.path.join(_PROJECT_ROOT, ".env")

_ENV_PREFIXES = ("SINGULARITY_", "MCP_HTTP_")


def load_env():
    """Read KEY=VALUE pairs from .env, then overlay matching process env vars."""
    env = {}
    if os.path.exists(ENV_PATH):
        with open(ENV_PATH) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, val = line.split("=", 1)
                    env[key.strip()] = val.strip()
    for key, val in os.environ.items():
        if key.startswith(_ENV_PREFIXES):
            env[key] = val
    return env


def _env_bool(key, default=False):
    """Parse common boolean env formats."""
    raw = env.get(key)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(key, default):
    """Parse integer env values with fallback."""
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(key, default):
    """Parse float env values with fallback."""
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

VERSION = "1.0.0"
SERVER_NAME = "singularity-mcp-server"

DEFAULT_BASE_URL = "https://api.singularity-app.com"
DEFAULT_RESOURCE_SCHEME = "singularity"

LOG_LEVELS = ("debug", "info", "warn", "error")
TRANSPORTS = ("stdio", "sse", "streamable-http")

# ---------------------------------------------------------------------------
# Module-level state (loaded from .env and the environment)
# ---------------------------------------------------------------------------

env = load_env()

BASE_URL = env.get("SINGULARITY_BASE_URL", "") or DEFAULT_BASE_URL
ACCESS_TOKEN = env.get("SINGULARITY_ACCESS_TOKEN", "")
LOG_ENABLED = _env_bool("SINGULARITY_LOG", False)
LOG_LEVEL = env.get("SINGULARITY_LOG_LEVEL", "info").strip().lower() or "info"
# Unset means no timeout (urllib default).
HTTP_TIMEOUT_SECONDS = _env_float("SINGULARITY_HTTP_TIMEOUT_SECONDS", None)
RESOURCE_SCHEME = env.get("SINGULARITY_RESOURCE_SCHEME", "") or DEFAULT_RESOURCE_SCHEME

MCP_HTTP_HOST = env.get("MCP_HTTP_HOST", "127.0.0.1")
MCP_HTTP_PORT = _env_int("MCP_HTTP_PORT", 8808)
