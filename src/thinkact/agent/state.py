"""Execution state — the query and its append-only step history."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from thinkact.agent.decision import ParseFailure, ToolInvocation
from thinkact.tool.outcome import ToolOutcome


@dataclass(frozen=True)
class ExecutionStep:
    """One recorded action and what came back from it."""

    decision: ToolInvocation | ParseFailure
    observation: str
    outcome: ToolOutcome | None = None

    @property
    def is_error(self) -> bool:
        if isinstance(self.decision, ParseFailure):
            return True
        return self.outcome is not None and self.outcome.is_error


class ExecutionState:
    """Query, context, and ordered history for a single run.

    History only grows: steps are appended and never replaced or removed.
    """

    def __init__(self, query: str, context: Mapping[str, Any] | None = None) -> None:
        self._query = query
        self._context = MappingProxyType(dict(context or {}))
        self._history: list[ExecutionStep] = []

    @property
    def query(self) -> str:
        return self._query

    @property
    def context(self) -> Mapping[str, Any]:
        return self._context

    @property
    def history(self) -> tuple[ExecutionStep, ...]:
        return tuple(self._history)

    def append(self, step: ExecutionStep) -> None:
        self._history.append(step)

    def __len__(self) -> int:
        return len(self._history)

    def __getitem__(self, index: int) -> ExecutionStep:
        return self._history[index]

    def __repr__(self) -> str:
        return f"ExecutionState(query={self._query!r}, steps={len(self._history)})"
