"""
Environment and configuration management.

Handles .env loading and resolution of the model API key, model name and
remote server API key. Only the CLI reads from here; the connector, the
model interactor and the client receive these values as arguments.
"""

import os
import logging
from typing import Optional
import dotenv

from config import DEFAULT_MODEL


# ── .env key names ──────────────────────────────────────────────────────────

key_of_openai_api_key = "OPENAI_API_KEY"
key_of_openai_model = "OPENAI_MODEL"
key_of_openai_base_url = "OPENAI_BASE_URL"
key_of_server_api_key = "MCP_SERVER_API_KEY"
key_of_log_level = "LOG_LEVEL"

_default_log_level = "WARNING"


# ── .env I/O ────────────────────────────────────────────────────────────────

def mcp_env_loader() -> Optional[str]:
    """Load the nearest .env file into os.environ. Returns its path, if found."""
    dotenv_path = dotenv.find_dotenv(usecwd=True)
    if dotenv_path:
        dotenv.load_dotenv(dotenv_path, override=True)
        return dotenv_path

    logging.getLogger(__name__).info(
        "Did not find .env file in current working directory. Defaulting to system variables"
    )
    return None


def _get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


# ── Value resolution ────────────────────────────────────────────────────────

def resolve_openai_api_key(explicit: Optional[str] = None) -> Optional[str]:
    """Explicit key wins; otherwise OPENAI_API_KEY. Returns None when neither is set."""
    if explicit:
        return explicit
    return _get_env(key_of_openai_api_key) or None


def get_model_name() -> str:
    return _get_env(key_of_openai_model) or DEFAULT_MODEL


def get_openai_base_url() -> Optional[str]:
    return _get_env(key_of_openai_base_url) or None


def get_server_api_key() -> Optional[str]:
    return _get_env(key_of_server_api_key) or None


def get_log_level() -> str:
    return (_get_env(key_of_log_level) or _default_log_level).upper()
