import json
from typing import Any

from pydantic import BaseModel
from mcp.types import TextContent


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", exclude_none=True)
    if isinstance(value, dict):
        return {str(k): _to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    return value


def normalize_tool_content(content: Any) -> str:
    """
    Flatten a tool result's content to the string shown to the model.

    Strings pass through unchanged, lists and objects (including MCP content
    blocks) are serialized to compact JSON. Anything else, including
    containers holding values JSON cannot encode, becomes "".
    The structure of the original result is not preserved.
    """
    if isinstance(content, str):
        return content
    if isinstance(content, (list, tuple, dict, BaseModel)):
        try:
            return json.dumps(
                _to_jsonable(content), separators=(",", ":"), ensure_ascii=False
            )
        except (TypeError, ValueError):
            return ""
    return ""


def format_tool_call_marker(tool_name: str, tool_args: dict) -> str:
    """User-visible marker inserted into the answer before a tool runs."""
    args_json = json.dumps(tool_args, separators=(",", ":"), ensure_ascii=False)
    return f"[called tool {tool_name} with args {args_json}]"


def format_tool_response(data: dict, success: bool = True) -> list[TextContent]:
    """Wrap a tool payload as a single JSON text block."""
    result = {"success": success, **data}
    return [TextContent(type="text", text=json.dumps(result, indent=2))]


def format_error_response(error_code: str, message: str, **kwargs) -> list[TextContent]:
    return format_tool_response(
        {"error": error_code, "message": message, **kwargs}, success=False
    )
