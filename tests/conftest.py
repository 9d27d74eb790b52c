"""
Pytest configuration and shared fixtures for the MCP chat client tests
"""

import copy
import pytest
import sys
import os
from contextlib import asynccontextmanager
from types import SimpleNamespace

from mcp.types import Tool

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from mcp_connector import ToolDescriptor, ToolResult


# ==================== MCP SDK fakes ====================


class FakeSession:
    """Stands in for mcp.ClientSession; records calls and closes."""

    def __init__(self, tools=None, call_result=None, initialize_error=None):
        self.tools = tools or []
        self.call_result = call_result
        self.initialize_error = initialize_error
        self.call_error = None
        self.calls = []
        self.entered = False
        self.closed = False

    async def __aenter__(self):
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.closed = True
        return False

    async def initialize(self):
        if self.initialize_error is not None:
            raise self.initialize_error

    async def list_tools(self):
        return SimpleNamespace(tools=self.tools)

    async def call_tool(self, name, arguments):
        self.calls.append((name, arguments))
        if self.call_error is not None:
            raise self.call_error
        return self.call_result


class FakeTransport:
    """Async context manager factory yielding a (read, write) stream pair."""

    def __init__(self, error=None):
        self.error = error
        self.opened = False
        self.closed = False

    @asynccontextmanager
    async def __call__(self, *args, **kwargs):
        if self.error is not None:
            raise self.error
        self.opened = True
        try:
            yield ("read-stream", "write-stream")
        finally:
            self.closed = True


@pytest.fixture
def server_tools():
    """Tools as reported by an MCP server"""
    return [
        Tool(
            name="get_weather",
            description="Gets the current weather for a city",
            inputSchema={
                "type": "object",
                "properties": {"city": {"type": "string"}},
                "required": ["city"],
            },
        ),
        Tool(
            name="echo",
            inputSchema={
                "type": "object",
                "properties": {"message": {"type": "string"}},
            },
        ),
    ]


@pytest.fixture
def fake_session(server_tools):
    return FakeSession(
        tools=server_tools,
        call_result=SimpleNamespace(content="hello", isError=False),
    )


@pytest.fixture
def fake_transport():
    return FakeTransport()


# ==================== Client-level fakes ====================


def make_tool_call(call_id, name, arguments):
    return SimpleNamespace(
        id=call_id,
        type="function",
        function=SimpleNamespace(name=name, arguments=arguments),
    )


def make_message(content=None, tool_calls=None):
    return SimpleNamespace(role="assistant", content=content, tool_calls=tool_calls)


class FakeModel:
    """Returns queued messages and snapshots every outgoing conversation."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.requests = []

    async def chat(self, messages, **options):
        self.requests.append({"messages": copy.deepcopy(messages), **options})
        return self.responses.pop(0)


class FakeConnector:
    """In-memory connector with a fixed catalog and canned tool results."""

    def __init__(self, tools=None, results=None, events=None):
        self.tools = tools if tools is not None else []
        self.results = results or {}
        self.events = events if events is not None else []
        self.connected = False
        self.close_count = 0
        self.connect_error = None

    async def connect(self, config):
        if self.connect_error is not None:
            raise self.connect_error
        self.connected = True
        return self.tools

    def get_tools(self):
        return list(self.tools)

    async def call_tool(self, name, arguments):
        self.events.append(("call_tool", name, arguments))
        return ToolResult(content=self.results.get(name, ""))

    async def close(self):
        self.close_count += 1
        self.connected = False


@pytest.fixture
def weather_tool():
    return ToolDescriptor(
        name="get_weather",
        description="Gets the current weather for a city",
        parameters={"type": "object", "properties": {"city": {"type": "string"}}},
    )


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that mock all dependencies"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that may require external services"
    )
