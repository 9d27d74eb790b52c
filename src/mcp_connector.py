from dataclasses import dataclass, field
from contextlib import AsyncExitStack
from typing import Any, Optional, Union, assert_never

from mcp import ClientSession, StdioServerParameters
from mcp.client.sse import sse_client
from mcp.client.stdio import stdio_client
from mcp.types import Implementation

from config import (
    logger,
    CLIENT_NAME,
    CLIENT_VERSION,
    NODE_COMMAND,
    SUPPORTED_SCRIPT_EXTENSIONS,
    python_command,
)
from connection import (
    ConnectionConfig,
    LocalProcessConfig,
    RemoteStreamConfig,
    as_connection_config,
)
from errors import ConnectionFailed, NotConnected, ToolInvocationError, UnsupportedScriptType
from utils.formatting import normalize_tool_content


@dataclass(frozen=True)
class ToolDescriptor:
    """One invocable tool as advertised to the model."""

    name: str
    description: Optional[str] = None
    parameters: dict = field(default_factory=dict)

    def to_function_schema(self) -> dict:
        function = {"name": self.name, "parameters": self.parameters}
        if self.description is not None:
            function["description"] = self.description
        return {"type": "function", "function": function}


@dataclass(frozen=True)
class ToolResult:
    content: str


def build_server_params(script_path: str) -> StdioServerParameters:
    """
    Build the subprocess command for a local server script.

    Args:
        script_path: Path to the server script (.py or .js)

    Raises:
        UnsupportedScriptType: If the script is neither .py nor .js
    """
    if not script_path.endswith(SUPPORTED_SCRIPT_EXTENSIONS):
        raise UnsupportedScriptType(
            f"Server script must be a .py or .js file: {script_path}"
        )

    command = python_command() if script_path.endswith(".py") else NODE_COMMAND
    return StdioServerParameters(command=command, args=[script_path], env=None)


class MCPConnector:
    """Owns one live connection to an MCP server."""

    def __init__(self):
        self.session: Optional[ClientSession] = None
        self.exit_stack = AsyncExitStack()
        self.tools: list[ToolDescriptor] = []

    @property
    def is_connected(self) -> bool:
        return self.session is not None

    def _open_transport(self, config: ConnectionConfig):
        match config:
            case LocalProcessConfig(script_path=script_path):
                return stdio_client(build_server_params(script_path))
            case RemoteStreamConfig():
                try:
                    url = config.url()
                except ValueError as e:
                    raise ConnectionFailed(str(e)) from e
                return sse_client(url)
            case _:
                assert_never(config)

    async def connect(self, config: Union[str, ConnectionConfig]) -> list[ToolDescriptor]:
        """Connect to an MCP server and fetch its tool catalog.

        Args:
            config: Server script path, or a LocalProcessConfig/RemoteStreamConfig

        Returns:
            The tool catalog reported by the server
        """
        config = as_connection_config(config)
        transport = self._open_transport(config)

        if self.is_connected:
            logger.info("Closing existing MCP connection before reconnecting")
            await self.close()

        logger.info(f"Connecting to MCP server: {config}")
        try:
            read_stream, write_stream = await self.exit_stack.enter_async_context(
                transport
            )
            session = await self.exit_stack.enter_async_context(
                ClientSession(
                    read_stream,
                    write_stream,
                    client_info=Implementation(name=CLIENT_NAME, version=CLIENT_VERSION),
                )
            )
            await session.initialize()
            self.session = session
            await self.refresh_tools()
        except Exception as e:
            logger.error(f"Connection failed: {e}", exc_info=True)
            await self._discard_partial_connection()
            raise ConnectionFailed(f"Failed to connect to MCP server: {e}") from e

        return self.tools

    async def _discard_partial_connection(self):
        try:
            await self.close()
        except Exception as e:
            logger.warning(f"Error while releasing failed connection: {e}")

    def _require_session(self) -> ClientSession:
        if self.session is None:
            raise NotConnected("Not connected to an MCP server; call connect() first")
        return self.session

    async def refresh_tools(self) -> list[ToolDescriptor]:
        """Query the server's tool list and replace the cached catalog."""
        session = self._require_session()
        response = await session.list_tools()
        self.tools = [
            ToolDescriptor(
                name=tool.name,
                description=tool.description,
                parameters=tool.inputSchema,
            )
            for tool in response.tools
        ]
        logger.info(f"Fetched {len(self.tools)} tools from MCP server")
        return self.tools

    async def list_tools(self) -> list[ToolDescriptor]:
        return await self.refresh_tools()

    def get_tools(self) -> list[ToolDescriptor]:
        """Cached catalog from the last connect or refresh."""
        self._require_session()
        return list(self.tools)

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> ToolResult:
        """Invoke a tool and normalize its content to a string.

        Raises:
            NotConnected: If called before connect
            ToolInvocationError: If the server reports an error or the transport fails
        """
        session = self._require_session()
        logger.info(f"Calling tool {name}")
        try:
            result = await session.call_tool(name, arguments)
        except Exception as e:
            logger.error(f"Error calling tool {name}: {e}", exc_info=True)
            raise ToolInvocationError(f"Tool '{name}' failed: {e}") from e

        content = normalize_tool_content(result.content)
        if getattr(result, "isError", False) is True:
            raise ToolInvocationError(f"Tool '{name}' reported an error: {content}")

        return ToolResult(content=content)

    async def close(self):
        """Release the transport and session. Safe to call more than once."""
        try:
            await self.exit_stack.aclose()
        finally:
            self.exit_stack = AsyncExitStack()
            self.session = None
            self.tools = []
