"""Tool outcomes and the canonical observations fed back to the model.

Every outcome renders to exactly one observation string. Failure outcomes
use fixed wording: the raw error stays on the outcome for logging but is
never echoed to the model.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, ClassVar

from pydantic import BaseModel

from thinkact.tool.truncation import truncate_output

NOT_FOUND_OBSERVATION = "Tool is not found. Please check the tool name and retry."
INVALID_INPUT_OBSERVATION = (
    "Tool execution failed due to invalid inputs. Retry with correct inputs."
)
EXECUTION_ERROR_OBSERVATION = "Tool execution failed. Retry with correct inputs."
EMPTY_RESULT_OBSERVATION = (
    "Tool didn't return anything. Probably it is successful. "
    "Should we verify using another tool?"
)


@dataclass(frozen=True)
class Success:
    """The tool ran and returned ``value``."""

    value: Any = None
    is_error: ClassVar[bool] = False

    @property
    def observation(self) -> str:
        text = render_value(self.value)
        if not text.strip():
            return EMPTY_RESULT_OBSERVATION
        return truncate_output(text)


@dataclass(frozen=True)
class NotFound:
    """No tool is registered under ``name``."""

    name: str = ""
    is_error: ClassVar[bool] = True
    observation: ClassVar[str] = NOT_FOUND_OBSERVATION


@dataclass(frozen=True)
class InvalidInput:
    """Arguments could not be coerced to the tool's parameter model."""

    message: str = ""
    is_error: ClassVar[bool] = True
    observation: ClassVar[str] = INVALID_INPUT_OBSERVATION


@dataclass(frozen=True)
class ExecutionError:
    """The tool raised while running."""

    message: str = ""
    is_error: ClassVar[bool] = True
    observation: ClassVar[str] = EXECUTION_ERROR_OBSERVATION


ToolOutcome = Success | NotFound | InvalidInput | ExecutionError


def render_value(value: Any) -> str:
    """Render a tool's return value as text for the model."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, BaseModel):
        return value.model_dump_json()
    if isinstance(value, (dict, list, tuple)):
        try:
            return json.dumps(value, default=str)
        except (TypeError, ValueError):
            return str(value)
    return str(value)
