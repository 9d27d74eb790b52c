import logging
import sys

logger = logging.getLogger("mcp_chat")

CLIENT_NAME = "mcp-chat-client"
CLIENT_VERSION = "1.0.0"

DEFAULT_MODEL = "gpt-4o"
MCP_PORT = 8000

# Query parameter carrying the API key for remote (SSE) servers
API_KEY_QUERY_PARAM = "api_key"

SUPPORTED_SCRIPT_EXTENSIONS = (".py", ".js")
NODE_COMMAND = "node"


def python_command() -> str:
    """Interpreter used to spawn Python server scripts."""
    return "python" if sys.platform == "win32" else "python3"
