from config import logger
from mcp.types import TextContent
from mcp.shared.exceptions import McpError
from mcp.types import ErrorData, INVALID_PARAMS

from utils.formatting import format_tool_response, format_error_response

# Canned observations so the demo server needs no network access
_WEATHER = {
    "paris": {"condition": "light rain", "temperature_c": 14, "humidity": 81},
    "london": {"condition": "overcast", "temperature_c": 12, "humidity": 77},
    "new york": {"condition": "sunny", "temperature_c": 22, "humidity": 48},
    "tokyo": {"condition": "partly cloudy", "temperature_c": 19, "humidity": 63},
    "sydney": {"condition": "clear", "temperature_c": 25, "humidity": 55},
}


async def get_weather(arguments: dict) -> list[TextContent]:
    """Returns the current weather for a city."""
    city = (arguments.get("city") or "").strip()
    if not city:
        raise McpError(
            ErrorData(code=INVALID_PARAMS, message="'city' parameter is required")
        )

    observation = _WEATHER.get(city.lower())
    if observation is None:
        logger.info(f"No weather data for {city}")
        return format_error_response(
            "unknown_city", f"No weather data for '{city}'", known_cities=sorted(_WEATHER)
        )

    logger.info(f"Retrieved weather for {city}")
    return format_tool_response({"city": city, **observation})


async def echo(arguments: dict) -> list[TextContent]:
    """Echoes the message back unchanged."""
    message = arguments.get("message")
    if message is None:
        raise McpError(
            ErrorData(code=INVALID_PARAMS, message="'message' parameter is required")
        )
    return [TextContent(type="text", text=str(message))]
