import sys
import asyncio
import logging

from client_utils import MCPClient
from connection import parse_connection_descriptor
from env_config import (
    mcp_env_loader,
    get_log_level,
    get_model_name,
    get_openai_base_url,
    get_server_api_key,
)
from errors import MCPClientError
from mcp_connector import MCPConnector
from model_interactor import ModelInteractor

USAGE = "Usage: mcp-chat <path_to_server_script | http(s)://sse_endpoint>"


def configure_logging():
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


async def main(argv: list[str]) -> int:
    if len(argv) < 2:
        print(USAGE)
        return 0

    model_interactor = ModelInteractor.from_environment(
        model=get_model_name(), base_url=get_openai_base_url()
    )
    config = parse_connection_descriptor(argv[1], api_key=get_server_api_key())

    client = MCPClient(MCPConnector(), model_interactor)
    try:
        await client.connect_to_server(config)
        await client.chat_loop()
    finally:
        await client.cleanup()
    return 0


def run():
    mcp_env_loader()
    configure_logging()
    try:
        exit_code = asyncio.run(main(sys.argv))
    except MCPClientError as e:
        logging.getLogger("mcp_chat").error(str(e))
        print(f"\nError: {e}", file=sys.stderr)
        exit_code = 1
    except KeyboardInterrupt:
        exit_code = 130
    sys.exit(exit_code)


if __name__ == "__main__":
    run()
