"""LLM backend abstraction — unified via litellm.

Every backend exposes the same three capabilities:

    complete(prompt)                  -> str
    chat_complete(messages)           -> str
    select_tool(messages, tool_specs) -> str | ToolCall

A backend implements whichever subset its model API supports and raises
``UnsupportedOperationError`` for the rest. Calls either return content or
fail with ``BackendConnectionError`` (transport failure) or
``InvalidResponseError`` (no usable content). Backends never retry; retry
policy belongs to the run loop.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from thinkact.errors import BackendConnectionError, InvalidResponseError
from thinkact.llm.message import Message, ToolCall

if TYPE_CHECKING:
    from litellm import ModelResponse

logger = logging.getLogger(__name__)

ToolSpec = dict[str, Any]


@dataclass
class BackendConfig:
    """Configuration for an LLM backend."""

    model: str
    temperature: float | None = None
    max_tokens: int | None = None


@runtime_checkable
class LLMBackend(Protocol):
    """Protocol for LLM backends."""

    async def complete(self, prompt: str) -> str:
        """Single-prompt text completion."""
        ...

    async def chat_complete(self, messages: list[Message]) -> str:
        """Multi-turn chat completion returning assistant text."""
        ...

    async def select_tool(
        self, messages: list[Message], tool_specs: list[ToolSpec]
    ) -> str | ToolCall:
        """Chat completion with tools. Returns text or a structured tool call."""
        ...


# ---------------------------------------------------------------------------
# litellm backend
# ---------------------------------------------------------------------------


@dataclass
class LiteLLMBackend:
    """Unified LLM backend using litellm.

    litellm handles provider detection from the model string prefix
    (e.g. "anthropic/claude-...", "gemini/gemini-...", "openai/gpt-...")
    and reads API keys from environment variables automatically.
    """

    _config: BackendConfig

    @property
    def config(self) -> BackendConfig:
        return self._config

    async def complete(self, prompt: str) -> str:
        return await self.chat_complete([Message.user(prompt)])

    async def chat_complete(self, messages: list[Message]) -> str:
        response = await self._acompletion(messages)
        text = _message_text(response)
        if not text:
            raise InvalidResponseError(
                f"{self._config.model} returned an empty completion"
            )
        return text

    async def select_tool(
        self, messages: list[Message], tool_specs: list[ToolSpec]
    ) -> str | ToolCall:
        response = await self._acompletion(messages, tools=tool_specs or None)
        tool_call = _first_tool_call(response)
        if tool_call is not None:
            return tool_call
        text = _message_text(response)
        if not text:
            raise InvalidResponseError(
                f"{self._config.model} returned neither text nor a tool call"
            )
        return text

    async def _acompletion(
        self, messages: list[Message], tools: list[ToolSpec] | None = None
    ) -> ModelResponse:
        import litellm

        kwargs: dict[str, Any] = {
            "model": self._config.model,
            "messages": [m.to_openai_dict() for m in messages],
        }
        if tools:
            kwargs["tools"] = tools
        if self._config.temperature is not None:
            kwargs["temperature"] = self._config.temperature
        if self._config.max_tokens is not None:
            kwargs["max_tokens"] = self._config.max_tokens

        try:
            return await litellm.acompletion(**kwargs)
        except (ConnectionError, TimeoutError, OSError) as e:
            raise BackendConnectionError(f"{self._config.model}: {e}") from e
        except _litellm_transport_errors(litellm) as e:
            raise BackendConnectionError(f"{self._config.model}: {e}") from e
        except _litellm_rejections(litellm) as e:
            raise InvalidResponseError(
                f"{self._config.model} rejected the request: {e}"
            ) from e


def _litellm_transport_errors(litellm: Any) -> tuple[type[BaseException], ...]:
    """litellm exception types for failures that may clear up on a retry."""
    return (
        litellm.APIConnectionError,
        litellm.APIError,
        litellm.Timeout,
        litellm.RateLimitError,
        litellm.ServiceUnavailableError,
        litellm.InternalServerError,
        litellm.OpenAIError,
    )


def _litellm_rejections(litellm: Any) -> tuple[type[BaseException], ...]:
    """litellm exception types for requests the vendor will keep refusing."""
    return (
        litellm.AuthenticationError,
        litellm.PermissionDeniedError,
        litellm.NotFoundError,
        litellm.BadRequestError,
        litellm.UnprocessableEntityError,
        litellm.APIResponseValidationError,
        litellm.BudgetExceededError,
    )


def _message_text(response: Any) -> str:
    """Extract assistant text from a litellm ModelResponse."""
    choices = getattr(response, "choices", None)
    if not choices:
        raise InvalidResponseError("Response contained no choices")
    message = getattr(choices[0], "message", None)
    if message is None:
        raise InvalidResponseError("Response choice contained no message")
    return (getattr(message, "content", None) or "").strip()


def _first_tool_call(response: Any) -> ToolCall | None:
    """Extract the first tool call from a litellm ModelResponse, if any.

    litellm responses have the same shape as OpenAI ChatCompletion objects:
      response.choices[0].message.tool_calls[i].{id, function.name, function.arguments}
    """
    choices = getattr(response, "choices", None)
    if not choices:
        raise InvalidResponseError("Response contained no choices")
    message = getattr(choices[0], "message", None)
    tool_calls = getattr(message, "tool_calls", None) if message else None
    if not tool_calls:
        return None
    if len(tool_calls) > 1:
        logger.info("Model returned %d tool calls, using the first", len(tool_calls))
    tc = tool_calls[0]
    function = getattr(tc, "function", None)
    if function is None:
        return None
    return ToolCall(
        name=getattr(function, "name", None) or "",
        arguments=getattr(function, "arguments", None) or "",
        id=getattr(tc, "id", None) or "",
    )


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def create_backend(
    model: str,
    temperature: float | None = None,
    max_tokens: int | None = None,
) -> LLMBackend:
    """Create a LiteLLM backend.

    Args:
        model: Model name with provider prefix (e.g. "openai/gpt-4o",
               "anthropic/claude-sonnet-4-5-20250929"). litellm detects the
               provider from the prefix and reads API keys from env vars.
        temperature: Sampling temperature.
        max_tokens: Max output tokens.
    """
    config = BackendConfig(model=model, temperature=temperature, max_tokens=max_tokens)
    return LiteLLMBackend(_config=config)
