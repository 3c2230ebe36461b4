"""Typed decisions parsed from a single model response."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ToolInvocation:
    """The model asked to call tool ``name`` with ``arguments``."""

    name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    thought: str = ""


@dataclass(frozen=True)
class FinalAnswer:
    """The model produced its answer. Terminal."""

    content: str
    thought: str = ""


@dataclass(frozen=True)
class ParseFailure:
    """The response could not be interpreted. ``raw`` is kept verbatim."""

    reason: str
    raw: str = ""


Decision = ToolInvocation | FinalAnswer | ParseFailure
