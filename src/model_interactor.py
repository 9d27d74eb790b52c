from typing import Any, Iterable, Optional, Union

import openai
from openai import AsyncOpenAI
from openai.types.chat import ChatCompletionMessage

from config import logger, DEFAULT_MODEL
from env_config import resolve_openai_api_key
from errors import MissingCredential, ModelRequestError
from mcp_connector import ToolDescriptor

ToolChoice = Union[str, dict]


class ModelInteractor:
    """Single entry point to the chat-completion API."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_MODEL,
        base_url: Optional[str] = None,
    ):
        if not api_key:
            raise MissingCredential(
                "OPENAI_API_KEY is not set in the environment or passed explicitly"
            )

        self.model = model
        # Retries are disabled: callers see the first failure as-is
        self.client = AsyncOpenAI(api_key=api_key, base_url=base_url, max_retries=0)

    @classmethod
    def from_environment(
        cls,
        model: str = DEFAULT_MODEL,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
    ) -> "ModelInteractor":
        """Build an interactor, falling back to OPENAI_API_KEY when no key is given."""
        return cls(resolve_openai_api_key(api_key), model=model, base_url=base_url)

    async def chat(
        self,
        messages: list[dict[str, Any]],
        tools: Optional[Iterable[ToolDescriptor]] = None,
        tool_choice: Optional[ToolChoice] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> ChatCompletionMessage:
        """
        Send the conversation to the model and return its next message.

        Args:
            messages: Full conversation so far (must not be empty)
            tools: Tools advertised to the model as callable functions
            tool_choice: "none", "auto", or a forced-function dict
            temperature: Sampling temperature
            max_tokens: Maximum tokens for the response

        Returns:
            The first choice's message; may carry content, tool_calls, or both

        Raises:
            ModelRequestError: On any API failure (transport, auth, rate limit)
        """
        if not messages:
            raise ValueError("messages must contain at least one message")

        request: dict[str, Any] = {"model": self.model, "messages": messages}
        if tools is not None:
            request["tools"] = [tool.to_function_schema() for tool in tools]
        if tool_choice is not None:
            request["tool_choice"] = tool_choice
        if temperature is not None:
            request["temperature"] = temperature
        if max_tokens is not None:
            request["max_tokens"] = max_tokens

        try:
            response = await self.client.chat.completions.create(**request)
        except openai.OpenAIError as e:
            logger.error(f"Model request failed: {e}")
            raise ModelRequestError(f"Model request failed: {e}") from e

        return response.choices[0].message
