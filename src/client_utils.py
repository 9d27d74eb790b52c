import json
from enum import Enum
from typing import Any, Optional, Union

from config import logger
from connection import ConnectionConfig
from errors import InvalidToolArguments
from mcp_connector import MCPConnector
from model_interactor import ModelInteractor
from utils.async_utils import read_console_line
from utils.formatting import format_tool_call_marker


class ClientState(Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


def parse_tool_arguments(tool_name: str, raw_arguments: Optional[str]) -> dict[str, Any]:
    """Decode the JSON argument string the model produced for a tool call."""
    if not raw_arguments:
        return {}
    try:
        tool_args = json.loads(raw_arguments)
    except json.JSONDecodeError as e:
        raise InvalidToolArguments(
            f"Model sent invalid JSON arguments for tool '{tool_name}': {raw_arguments!r}"
        ) from e
    if not isinstance(tool_args, dict):
        raise InvalidToolArguments(
            f"Arguments for tool '{tool_name}' must be a JSON object, got {raw_arguments!r}"
        )
    return tool_args


def _assistant_tool_call_message(content: Optional[str], tool_call) -> dict[str, Any]:
    return {
        "role": "assistant",
        "content": content,
        "tool_calls": [
            {
                "id": tool_call.id,
                "type": "function",
                "function": {
                    "name": tool_call.function.name,
                    "arguments": tool_call.function.arguments,
                },
            }
        ],
    }


class MCPClient:
    def __init__(self, connector: MCPConnector, model_interactor: ModelInteractor):
        self.connector = connector
        self.model_interactor = model_interactor
        self.state = ClientState.DISCONNECTED

    async def connect_to_server(self, config: Union[str, ConnectionConfig]):
        """Connect to an MCP server and cache its tools

        Args:
            config: Path to the server script (.py or .js) or a connection config
        """
        try:
            tools = await self.connector.connect(config)
        except Exception:
            logger.error("Failed to connect to MCP server")
            await self.connector.close()
            self.state = ClientState.DISCONNECTED
            raise

        self.state = ClientState.CONNECTED
        print("\nConnected to server with tools:", [tool.name for tool in tools])

    async def process_query(self, query: str) -> str:
        """
        Answer one user query, running any tools the model asks for.

        Each call starts a new conversation holding only this query; earlier
        turns are not sent to the model.

        Args:
            query: Query to process

        Returns:
            Assistant text, tool-call markers and follow-up answers, one per line
        """
        messages: list[dict[str, Any]] = [{"role": "user", "content": query}]
        tools = self.connector.get_tools()

        if tools:
            response = await self.model_interactor.chat(
                messages, tools=tools, tool_choice="auto"
            )
        else:
            response = await self.model_interactor.chat(messages)

        final_text = []
        if response.content:
            final_text.append(response.content)

        for index, tool_call in enumerate(response.tool_calls or []):
            tool_name = tool_call.function.name
            tool_args = parse_tool_arguments(tool_name, tool_call.function.arguments)

            final_text.append(format_tool_call_marker(tool_name, tool_args))

            result = await self.connector.call_tool(tool_name, tool_args)

            # One assistant/tool pair per round; the text goes with the first
            messages.append(
                _assistant_tool_call_message(
                    response.content if index == 0 else None, tool_call
                )
            )
            messages.append(
                {
                    "role": "tool",
                    "tool_call_id": tool_call.id,
                    "name": tool_name,
                    "content": result.content,
                }
            )

            follow_up = await self.model_interactor.chat(messages)
            if follow_up.content:
                final_text.append(follow_up.content)

        return "\n".join(final_text)

    async def chat_loop(self):
        """Run an interactive chat loop until the user types 'quit'"""
        print("\nMCP client started!")
        print("Type your queries or 'quit' to exit.")

        while True:
            try:
                query = await read_console_line("\nQuery: ")
            except EOFError:
                break

            if query.strip().lower() == "quit":
                break

            response = await self.process_query(query)
            print("\n" + response)

    async def cleanup(self):
        """Clean up resources"""
        try:
            await self.connector.close()
        finally:
            self.state = ClientState.DISCONNECTED
