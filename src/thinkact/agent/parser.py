"""Response parsing — raw backend output to a typed Decision.

Two strategies:

Free text, a strict line grammar:

    Thought: <reasoning>
    Final Answer: <content>

or

    Thought: <reasoning>
    Action: <tool name>
    Action Input: <JSON object>

Structured, a ``ToolCall`` from a function-calling backend, or plain text
taken as the final answer.

Neither parser raises. Anything that does not fit becomes a ``ParseFailure``.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from typing import Any

from thinkact.agent.decision import Decision, FinalAnswer, ParseFailure, ToolInvocation
from thinkact.llm.message import ToolCall

logger = logging.getLogger(__name__)

THOUGHT = "Thought"
ACTION = "Action"
ACTION_INPUT = "Action Input"
FINAL_ANSWER = "Final Answer"

LINE_BREAK = re.compile(r"\r?\n")

PARSE_FAILURE_OBSERVATION = (
    "Your response did not follow the required format. Reply with exactly two lines:\n"
    "Thought: <your reasoning>\n"
    "Final Answer: <the answer>\n"
    "or exactly three lines:\n"
    "Thought: <your reasoning>\n"
    "Action: <tool name>\n"
    "Action Input: <arguments as a JSON object>"
)


def parse_react(raw: Any) -> Decision:
    """Parse a free-text Thought/Action/Final Answer response."""
    if not isinstance(raw, str):
        return ParseFailure(
            reason=f"Expected a text response, got {type(raw).__name__}",
            raw=repr(raw),
        )

    # Only \n and \r\n end a line
    lines = LINE_BREAK.split(raw.strip())

    thought = _labeled(lines[0], THOUGHT) if lines else None
    if thought is None:
        return ParseFailure(reason=f"First line must start with '{THOUGHT}:'", raw=raw)

    if len(lines) == 2:
        content = _labeled(lines[1], FINAL_ANSWER)
        if content is None:
            return ParseFailure(
                reason=f"Second line must start with '{FINAL_ANSWER}:'", raw=raw
            )
        return FinalAnswer(content=content, thought=thought)

    if len(lines) == 3:
        name = _labeled(lines[1], ACTION)
        if not name:
            return ParseFailure(
                reason=f"Second line must be '{ACTION}: <tool name>'", raw=raw
            )
        action_input = _labeled(lines[2], ACTION_INPUT)
        if action_input is None:
            return ParseFailure(
                reason=f"Third line must start with '{ACTION_INPUT}:'", raw=raw
            )
        arguments, error = _json_object(action_input)
        if arguments is None:
            return ParseFailure(reason=f"{ACTION_INPUT} {error}", raw=raw)
        return ToolInvocation(name=name, arguments=arguments, thought=thought)

    return ParseFailure(
        reason=f"Expected 2 or 3 lines, got {len(lines)}",
        raw=raw,
    )


def parse_structured(raw: Any) -> Decision:
    """Parse output from a function-calling backend.

    A ``ToolCall`` (or a ``{"name", "arguments"}`` mapping) becomes a
    ``ToolInvocation``. Non-empty text becomes a ``FinalAnswer``.
    """
    if isinstance(raw, ToolCall):
        name, arguments = raw.name, raw.arguments
    elif isinstance(raw, Mapping) and "name" in raw:
        name, arguments = raw.get("name"), raw.get("arguments", {})
    elif isinstance(raw, str):
        content = raw.strip()
        if not content:
            return ParseFailure(reason="Empty response", raw=raw)
        return FinalAnswer(content=content)
    else:
        return ParseFailure(
            reason=f"Unrecognized response type {type(raw).__name__}",
            raw=repr(raw),
        )

    if not isinstance(name, str) or not name.strip():
        return ParseFailure(reason="Tool call has no name", raw=repr(raw))

    if isinstance(arguments, Mapping):
        parsed: dict[str, Any] | None = dict(arguments)
        error = ""
    elif isinstance(arguments, str):
        parsed, error = _json_object(arguments) if arguments.strip() else ({}, "")
    else:
        parsed, error = None, f"has unsupported type {type(arguments).__name__}"

    if parsed is None:
        return ParseFailure(reason=f"Tool call arguments {error}", raw=repr(raw))
    return ToolInvocation(name=name.strip(), arguments=parsed)


def _labeled(line: str, label: str) -> str | None:
    """Return the text after ``label:`` or None if the line has another label."""
    prefix = f"{label}:"
    if not line.startswith(prefix):
        return None
    return line[len(prefix) :].strip()


def _json_object(text: str) -> tuple[dict[str, Any] | None, str]:
    """Decode a JSON object. Returns (value, "") or (None, error description)."""
    try:
        value = json.loads(text)
    except json.JSONDecodeError as e:
        logger.debug("Invalid JSON arguments %r: %s", text[:200], e)
        return None, f"is not valid JSON: {e.msg}"
    if value is None:
        return {}, ""
    if not isinstance(value, dict):
        return None, f"must be a JSON object, got {type(value).__name__}"
    return value, ""
