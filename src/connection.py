"""
Connection configuration for MCP servers.

A connection is either a local server script spawned as a subprocess and
spoken to over stdio, or a remote SSE endpoint. The two kinds form a closed
union; code that branches on them uses ``match`` with ``assert_never`` so a
new kind cannot be left unhandled.
"""

from dataclasses import dataclass, field
from typing import Optional, Union
from urllib.parse import urlencode, urlsplit, urlunsplit, parse_qsl

from config import API_KEY_QUERY_PARAM


@dataclass(frozen=True)
class LocalProcessConfig:
    script_path: str


@dataclass(frozen=True)
class RemoteStreamConfig:
    endpoint: str
    api_key: Optional[str] = field(default=None, repr=False)

    def url(self) -> str:
        """Endpoint URL with the API key, if any, appended as a query parameter."""
        parts = urlsplit(self.endpoint)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"Invalid endpoint URL: {self.endpoint!r}")
        if not self.api_key:
            return self.endpoint

        query = parse_qsl(parts.query, keep_blank_values=True)
        query.append((API_KEY_QUERY_PARAM, self.api_key))
        return urlunsplit(parts._replace(query=urlencode(query)))


ConnectionConfig = Union[LocalProcessConfig, RemoteStreamConfig]


def as_connection_config(config: Union[str, ConnectionConfig]) -> ConnectionConfig:
    """Accept the legacy bare-path form and treat it as a local script."""
    if isinstance(config, str):
        return LocalProcessConfig(script_path=config)
    return config


def parse_connection_descriptor(
    descriptor: str, api_key: Optional[str] = None
) -> ConnectionConfig:
    """
    Build a connection config from a command-line descriptor.

    Args:
        descriptor: Server script path, or an http(s) URL of an SSE endpoint
        api_key: Optional API key, only used for remote endpoints

    Returns:
        RemoteStreamConfig for http(s) URLs, LocalProcessConfig otherwise
    """
    if descriptor.lower().startswith(("http://", "https://")):
        return RemoteStreamConfig(endpoint=descriptor, api_key=api_key or None)
    return LocalProcessConfig(script_path=descriptor)
