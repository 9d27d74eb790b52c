"""
Demo MCP server exposing a weather lookup and an echo tool.

Runs over stdio by default so the chat client can spawn it as a local
script; ``--sse`` serves it over SSE for the remote connection kind.
"""

import sys
import asyncio
import logging

from mcp.server import Server
from mcp.server.sse import SseServerTransport
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent
from mcp.shared.exceptions import McpError
from mcp.types import ErrorData, INTERNAL_ERROR
from starlette.applications import Starlette
from starlette.routing import Route, Mount
from starlette.requests import Request
from starlette.responses import Response

from config import MCP_PORT, API_KEY_QUERY_PARAM
from env_config import get_server_api_key
from tools.weather_tools import get_weather, echo

# Logs go to stderr; stdout carries the stdio protocol
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

mcp = Server("WeatherDemoServer")


def get_tool_definitions() -> list[Tool]:
    """Return all available tool definitions."""
    return [
        Tool(
            name="get_weather",
            description=(
                "Gets the current weather for a city: condition, temperature in "
                "Celsius and relative humidity."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "city": {
                        "type": "string",
                        "description": "City name (e.g., 'Paris')",
                    },
                },
                "required": ["city"],
            },
        ),
        Tool(
            name="echo",
            description="Returns the given message unchanged.",
            inputSchema={
                "type": "object",
                "properties": {
                    "message": {
                        "type": "string",
                        "description": "Text to echo back",
                    },
                },
                "required": ["message"],
            },
        ),
    ]


@mcp.list_tools()
async def handle_list_tools() -> list[Tool]:
    """Handle list_tools request."""
    return get_tool_definitions()


@mcp.call_tool()
async def handle_call_tool(name: str, arguments: dict | None) -> list[TextContent]:
    """
    Route tool execution requests to their implementations.

    Raises:
        McpError: For unknown tools, invalid parameters or execution failures
    """
    args = arguments or {}
    try:
        if name == "get_weather":
            return await get_weather(args)
        elif name == "echo":
            return await echo(args)
        else:
            raise ValueError(f"Unknown tool: {name}")

    except McpError:
        raise
    except ValueError as e:
        logger.error(f"Unknown tool requested: {name}")
        raise McpError(ErrorData(code=INTERNAL_ERROR, message=str(e))) from e
    except Exception as e:
        logger.error(f"Error executing tool {name}: {e}", exc_info=True)
        raise McpError(
            ErrorData(
                code=INTERNAL_ERROR,
                message=f"Tool execution failed: {str(e)}",
            )
        ) from e


sse = SseServerTransport("/messages/")


def is_authorized(request: Request) -> bool:
    """When MCP_SERVER_API_KEY is set, the api_key query parameter must match it."""
    expected = get_server_api_key()
    if not expected:
        return True
    return request.query_params.get(API_KEY_QUERY_PARAM) == expected


async def handle_sse(request: Request):
    if not is_authorized(request):
        logger.warning("Rejected SSE connection with missing or invalid API key")
        return Response("Unauthorized", status_code=401)

    async with sse.connect_sse(
        request.scope, request.receive, request._send
    ) as streams:
        await mcp.run(streams[0], streams[1], mcp.create_initialization_options())

    # Return empty response to avoid NoneType error
    return Response()


app = Starlette(
    routes=[
        Route("/sse", endpoint=handle_sse, methods=["GET"]),
        Mount("/messages/", app=sse.handle_post_message),
    ]
)


async def run_stdio():
    async with stdio_server() as (read_stream, write_stream):
        await mcp.run(read_stream, write_stream, mcp.create_initialization_options())


if __name__ == "__main__":
    if "--sse" in sys.argv[1:]:
        import uvicorn

        logger.info(f"Starting demo MCP server on port {MCP_PORT}")
        logger.info(f"SSE endpoint: http://0.0.0.0:{MCP_PORT}/sse")
        uvicorn.run(app, host="0.0.0.0", port=MCP_PORT)
    else:
        asyncio.run(run_stdio())
