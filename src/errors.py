"""
Exception taxonomy for the MCP chat client.

Every error raised by the connector, the model interactor and the client
derives from ``MCPClientError`` so the CLI can report them uniformly.
Errors from the underlying SDKs are chained with ``raise ... from``.
"""


class MCPClientError(Exception):
    """Base class for all client errors."""


class MissingCredential(MCPClientError):
    """No API key was supplied explicitly or through the environment."""


class UnsupportedScriptType(MCPClientError):
    """Server script is neither a .py nor a .js file."""


class ConnectionFailed(MCPClientError):
    """Transport setup or the MCP handshake did not complete."""


class NotConnected(MCPClientError):
    """An operation needing a live MCP session was called before connect."""


class ToolInvocationError(MCPClientError):
    """The server reported a tool error or the transport dropped mid-call."""


class InvalidToolArguments(ToolInvocationError):
    """The model produced tool arguments that are not a JSON object."""


class ModelRequestError(MCPClientError):
    """The chat-completion request failed (transport, auth, rate limit...)."""
