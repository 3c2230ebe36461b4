"""Scripted backend — replays canned responses, for tests and demos."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from thinkact.errors import InvalidResponseError, UnsupportedOperationError
from thinkact.llm.message import Message, ToolCall
from thinkact.llm.provider import ToolSpec

logger = logging.getLogger(__name__)

ScriptItem = str | ToolCall | BaseException


@dataclass
class ScriptedBackend:
    """Backend that returns preset responses in order.

    Each script item is a text response, a ``ToolCall``, or an exception
    instance to raise. Every capability consumes from the same script, and
    every call's input is recorded in ``calls`` for later inspection.
    ``capabilities`` limits which operations are exposed, to stand in for a
    model API that only offers some of them.

    Usage:
        backend = ScriptedBackend([
            'Thought: I should add\\nAction: add\\nAction Input: {"a": 2, "b": 2}',
            "Thought: done\\nFinal Answer: 4",
        ])
    """

    script: list[ScriptItem] = field(default_factory=list)
    repeat_last: bool = False
    calls: list[list[Message]] = field(default_factory=list)
    tool_specs_seen: list[list[ToolSpec]] = field(default_factory=list)
    capabilities: frozenset[str] = frozenset({"complete", "chat_complete", "select_tool"})

    @classmethod
    def from_responses(
        cls, responses: Iterable[ScriptItem], repeat_last: bool = False
    ) -> ScriptedBackend:
        return cls(script=list(responses), repeat_last=repeat_last)

    @property
    def remaining(self) -> int:
        return len(self.script)

    async def complete(self, prompt: str) -> str:
        self._require("complete")
        item = self._next([Message.user(prompt)])
        if isinstance(item, ToolCall):
            raise InvalidResponseError("Scripted tool call returned from complete()")
        return item

    async def chat_complete(self, messages: list[Message]) -> str:
        self._require("chat_complete")
        item = self._next(messages)
        if isinstance(item, ToolCall):
            raise InvalidResponseError("Scripted tool call returned from chat_complete()")
        return item

    async def select_tool(
        self, messages: list[Message], tool_specs: list[ToolSpec]
    ) -> str | ToolCall:
        self._require("select_tool")
        self.tool_specs_seen.append(list(tool_specs))
        return self._next(messages)

    def _require(self, operation: str) -> None:
        if operation not in self.capabilities:
            raise UnsupportedOperationError(
                f"Scripted backend does not support {operation}()"
            )

    def _next(self, messages: list[Message]) -> str | ToolCall:
        self.calls.append(list(messages))
        if not self.script:
            raise InvalidResponseError("Scripted backend has no responses left")
        if self.repeat_last and len(self.script) == 1:
            item = self.script[0]
        else:
            item = self.script.pop(0)
        if isinstance(item, BaseException):
            raise item
        logger.debug("Scripted response #%d", len(self.calls))
        return item
