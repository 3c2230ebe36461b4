"""Tests for thinkact.llm (LiteLLMBackend, create_backend, ScriptedBackend)."""

from __future__ import annotations

from collections.abc import Callable
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import httpx
import litellm
import pytest

from thinkact.agent.agent import ReActAgent
from thinkact.agent.loop import TurnOutcome, run
from thinkact.errors import (
    BackendConnectionError,
    BackendError,
    InvalidResponseError,
    UnsupportedOperationError,
)
from thinkact.llm.message import Message, ToolCall
from thinkact.llm.mock import ScriptedBackend
from thinkact.llm.provider import (
    BackendConfig,
    LiteLLMBackend,
    LLMBackend,
    create_backend,
)
from thinkact.tool.registry import ToolRegistry

TOOL_SPECS = [
    {
        "type": "function",
        "function": {"name": "add", "description": "Add", "parameters": {}},
    }
]


def _response(content: str | None = None, tool_calls: list | None = None) -> SimpleNamespace:
    message = SimpleNamespace(content=content, tool_calls=tool_calls)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _tool_call(name: str, arguments: str, tc_id: str = "call_1") -> SimpleNamespace:
    return SimpleNamespace(
        id=tc_id, function=SimpleNamespace(name=name, arguments=arguments)
    )


# ---------------------------------------------------------------------------
# create_backend
# ---------------------------------------------------------------------------


class TestCreateBackend:
    def test_returns_litellm_backend(self) -> None:
        backend = create_backend("test/model")
        assert isinstance(backend, LiteLLMBackend)
        assert isinstance(backend, LLMBackend)

    def test_config_propagated(self) -> None:
        backend = create_backend("openai/gpt-4o-mini", temperature=0.2, max_tokens=512)
        assert backend.config == BackendConfig(  # type: ignore[attr-defined]
            model="openai/gpt-4o-mini", temperature=0.2, max_tokens=512
        )


# ---------------------------------------------------------------------------
# LiteLLMBackend — content
# ---------------------------------------------------------------------------


class TestLiteLLMBackend:
    async def test_chat_complete(self) -> None:
        mock = AsyncMock(return_value=_response("  Thought: hi\nFinal Answer: 4 "))
        with patch("litellm.acompletion", mock):
            backend = create_backend("test/model", temperature=0.0)
            text = await backend.chat_complete([Message.user("q")])
        assert text == "Thought: hi\nFinal Answer: 4"
        kwargs = mock.call_args.kwargs
        assert kwargs["model"] == "test/model"
        assert kwargs["messages"] == [{"role": "user", "content": "q"}]
        assert kwargs["temperature"] == 0.0
        assert "max_tokens" not in kwargs
        assert "tools" not in kwargs

    async def test_complete_wraps_prompt(self) -> None:
        mock = AsyncMock(return_value=_response("ok"))
        with patch("litellm.acompletion", mock):
            text = await create_backend("test/model").complete("prompt")
        assert text == "ok"
        assert mock.call_args.kwargs["messages"] == [{"role": "user", "content": "prompt"}]

    async def test_select_tool_returns_tool_call(self) -> None:
        mock = AsyncMock(
            return_value=_response(None, [_tool_call("add", '{"a": 1, "b": 2}')])
        )
        with patch("litellm.acompletion", mock):
            result = await create_backend("test/model").select_tool(
                [Message.user("q")], TOOL_SPECS
            )
        assert result == ToolCall(name="add", arguments='{"a": 1, "b": 2}', id="call_1")
        assert mock.call_args.kwargs["tools"] == TOOL_SPECS

    async def test_select_tool_uses_first_call(self) -> None:
        calls = [_tool_call("add", "{}", "c1"), _tool_call("sub", "{}", "c2")]
        with patch("litellm.acompletion", AsyncMock(return_value=_response(None, calls))):
            result = await create_backend("test/model").select_tool([], TOOL_SPECS)
        assert isinstance(result, ToolCall)
        assert result.name == "add"

    async def test_select_tool_returns_text(self) -> None:
        with patch("litellm.acompletion", AsyncMock(return_value=_response("4"))):
            result = await create_backend("test/model").select_tool([], TOOL_SPECS)
        assert result == "4"


# ---------------------------------------------------------------------------
# LiteLLMBackend — failure contract
# ---------------------------------------------------------------------------


class TestLiteLLMBackendErrors:
    @pytest.mark.parametrize(
        "error", [ConnectionError("refused"), TimeoutError("slow"), OSError("net")]
    )
    async def test_transport_errors_wrapped(self, error: Exception) -> None:
        mock = AsyncMock(side_effect=error)
        with patch("litellm.acompletion", mock):
            with pytest.raises(BackendConnectionError) as exc_info:
                await create_backend("test/model").chat_complete([])
        assert exc_info.value.__cause__ is error
        assert mock.call_count == 1  # no retries inside the backend

    async def test_empty_content(self) -> None:
        with patch("litellm.acompletion", AsyncMock(return_value=_response("   "))):
            with pytest.raises(InvalidResponseError):
                await create_backend("test/model").chat_complete([])

    async def test_no_choices(self) -> None:
        response = SimpleNamespace(choices=[])
        with patch("litellm.acompletion", AsyncMock(return_value=response)):
            with pytest.raises(InvalidResponseError):
                await create_backend("test/model").chat_complete([])

    async def test_select_tool_nothing_usable(self) -> None:
        with patch("litellm.acompletion", AsyncMock(return_value=_response(None, []))):
            with pytest.raises(InvalidResponseError):
                await create_backend("test/model").select_tool([], TOOL_SPECS)

    async def test_unrelated_errors_propagate(self) -> None:
        with patch("litellm.acompletion", AsyncMock(side_effect=RuntimeError("bug"))):
            with pytest.raises(RuntimeError, match="bug"):
                await create_backend("test/model").chat_complete([])


def _http_response(status: int) -> httpx.Response:
    return httpx.Response(
        status_code=status, request=httpx.Request("POST", "https://example.test")
    )


def _vendor(cls: type[Exception], **kwargs: object) -> Exception:
    return cls(message="boom", llm_provider="openai", model="test/model", **kwargs)


RETRYABLE_VENDOR_ERRORS = [
    lambda: _vendor(litellm.InternalServerError),
    lambda: _vendor(litellm.RateLimitError),
    lambda: _vendor(litellm.ServiceUnavailableError),
    lambda: _vendor(litellm.APIConnectionError),
    lambda: _vendor(litellm.Timeout),
]

REFUSED_VENDOR_ERRORS = [
    lambda: _vendor(litellm.NotFoundError),
    lambda: _vendor(litellm.AuthenticationError),
    lambda: _vendor(litellm.BadRequestError),
    lambda: _vendor(litellm.PermissionDeniedError, response=_http_response(403)),
    lambda: _vendor(litellm.UnprocessableEntityError, response=_http_response(422)),
    lambda: _vendor(litellm.APIResponseValidationError),
    lambda: litellm.BudgetExceededError(current_cost=2.0, max_budget=1.0),
]


class TestLiteLLMVendorErrors:
    @pytest.mark.parametrize("make_error", RETRYABLE_VENDOR_ERRORS)
    async def test_retryable_become_connection_errors(
        self, make_error: Callable[[], Exception]
    ) -> None:
        error = make_error()
        with patch("litellm.acompletion", AsyncMock(side_effect=error)):
            with pytest.raises(BackendConnectionError) as exc_info:
                await create_backend("test/model").chat_complete([])
        assert exc_info.value.__cause__ is error

    @pytest.mark.parametrize("make_error", REFUSED_VENDOR_ERRORS)
    async def test_refusals_become_invalid_responses(
        self, make_error: Callable[[], Exception]
    ) -> None:
        error = make_error()
        with patch("litellm.acompletion", AsyncMock(side_effect=error)):
            with pytest.raises(InvalidResponseError) as exc_info:
                await create_backend("test/model").select_tool([], TOOL_SPECS)
        assert exc_info.value.__cause__ is error

    @pytest.mark.parametrize(
        "make_error", [REFUSED_VENDOR_ERRORS[0], RETRYABLE_VENDOR_ERRORS[0]]
    )
    async def test_run_stops_with_error_outcome(
        self, make_error: Callable[[], Exception]
    ) -> None:
        registry = ToolRegistry()
        registry.register_function("add", "Add two numbers", lambda a, b: a + b)
        agent = ReActAgent(backend=create_backend("test/model"), tools=registry)
        with patch("litellm.acompletion", AsyncMock(side_effect=make_error())):
            result = await run(agent, "q", verbose=False)
        assert result.outcome is TurnOutcome.ERROR
        assert isinstance(result.error, BackendError)
        assert result.answer is None
        assert result.steps == []


# ---------------------------------------------------------------------------
# ScriptedBackend
# ---------------------------------------------------------------------------


class TestScriptedBackend:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(ScriptedBackend(), LLMBackend)

    async def test_replays_in_order(self) -> None:
        backend = ScriptedBackend.from_responses(["one", "two"])
        assert await backend.chat_complete([Message.user("a")]) == "one"
        assert await backend.complete("b") == "two"
        assert backend.remaining == 0
        assert backend.calls[1] == [Message.user("b")]

    async def test_raises_scripted_exception(self) -> None:
        backend = ScriptedBackend.from_responses([BackendConnectionError("down")])
        with pytest.raises(BackendConnectionError):
            await backend.chat_complete([])

    async def test_exhausted(self) -> None:
        with pytest.raises(InvalidResponseError):
            await ScriptedBackend().chat_complete([])

    async def test_repeat_last(self) -> None:
        backend = ScriptedBackend.from_responses(["a", "b"], repeat_last=True)
        results = [await backend.chat_complete([]) for _ in range(4)]
        assert results == ["a", "b", "b", "b"]

    async def test_tool_call_only_from_select_tool(self) -> None:
        call = ToolCall(name="add", arguments="{}")
        backend = ScriptedBackend.from_responses([call, call])
        assert await backend.select_tool([], TOOL_SPECS) == call
        assert backend.tool_specs_seen == [TOOL_SPECS]
        with pytest.raises(InvalidResponseError):
            await backend.chat_complete([])

    async def test_unsupported_capability(self) -> None:
        backend = ScriptedBackend(script=["x"], capabilities=frozenset({"select_tool"}))
        with pytest.raises(UnsupportedOperationError):
            await backend.chat_complete([])
        assert backend.remaining == 1
        assert await backend.select_tool([], TOOL_SPECS) == "x"
