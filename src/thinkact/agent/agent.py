"""Agent definitions — how a strategy prompts the model and reads its reply.

An agent is anything with ``tools``, ``select_next_tool(state)`` and
``parse_response(raw)``. Two strategies are provided:

- ``ReActAgent``: free-text Thought/Action/Action Input via ``chat_complete``.
- ``FunctionCallingAgent``: structured tool calls via ``select_tool``.

Either can be configured from a markdown file with YAML frontmatter:

    ---
    kind: react
    tools: [calculator]
    max_iter: 8
    ---

    You are a careful research assistant...
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field, fields
from typing import Any, Literal, Protocol, runtime_checkable

from thinkact.agent.decision import Decision, FinalAnswer, ParseFailure, ToolInvocation
from thinkact.agent.parser import (
    ACTION,
    ACTION_INPUT,
    FINAL_ANSWER,
    THOUGHT,
    parse_react,
    parse_structured,
)
from thinkact.agent.state import ExecutionState
from thinkact.llm.message import Message, ToolCall
from thinkact.llm.provider import LLMBackend
from thinkact.tool.registry import ToolRegistry

AgentKind = Literal["react", "function"]

REACT_SYSTEM_PROMPT = """\
Answer the user's question. You may use the following tools:

{tools}

Reply with exactly three lines to use a tool:
{thought}: <your reasoning>
{action}: <tool name>
{action_input}: <arguments as a JSON object>

When you know the answer, reply with exactly two lines:
{thought}: <your reasoning>
{final_answer}: <the answer>

After each tool call you will receive an Observation with its result."""

FUNCTION_SYSTEM_PROMPT = """\
Answer the user's question. Call one of the provided tools when you need more \
information. When you know the answer, reply with the answer as plain text."""


@runtime_checkable
class Agent(Protocol):
    """What the step executor needs from an agent."""

    tools: ToolRegistry

    async def select_next_tool(self, state: ExecutionState) -> str | ToolCall:
        """Ask the model what to do next given everything so far."""
        ...

    def parse_response(self, raw: Any) -> Decision:
        """Turn the model's raw reply into a Decision. Must not raise."""
        ...


@dataclass
class AgentConfig:
    """Settings from an agent file's YAML frontmatter. Unset fields defer to the run config."""

    kind: AgentKind | None = None
    tools: list[str] = field(default_factory=list)
    max_iter: int | None = None

    @classmethod
    def from_markdown(cls, path: str) -> tuple[AgentConfig, str]:
        """Load config and system prompt from a markdown file with YAML frontmatter.

        Raises:
            ValueError: The frontmatter has unknown keys or a bad ``max_iter``.
        """
        with open(path, "r") as f:
            content = f.read()

        config_dict, prompt = _parse_frontmatter(content)
        unknown = sorted(set(config_dict) - {fld.name for fld in fields(cls)})
        if unknown:
            raise ValueError(f"{path}: unknown agent file keys: {', '.join(unknown)}")

        max_iter = config_dict.get("max_iter")
        if max_iter is not None and (
            isinstance(max_iter, bool) or not isinstance(max_iter, int) or max_iter < 1
        ):
            raise ValueError(f"{path}: max_iter must be a positive integer, got {max_iter!r}")

        return cls(**config_dict), prompt.strip()


@dataclass
class ReActAgent:
    """Free-text agent: the model writes Thought/Action/Action Input lines."""

    backend: LLMBackend
    tools: ToolRegistry
    system_prompt: str = ""

    async def select_next_tool(self, state: ExecutionState) -> str:
        return await self.backend.chat_complete(self.build_messages(state))

    def parse_response(self, raw: Any) -> Decision:
        return parse_react(raw)

    def build_messages(self, state: ExecutionState) -> list[Message]:
        """Serialize query, context and history into a conversation."""
        system = REACT_SYSTEM_PROMPT.format(
            tools=self.tools.describe() or "(no tools available)",
            thought=THOUGHT,
            action=ACTION,
            action_input=ACTION_INPUT,
            final_answer=FINAL_ANSWER,
        )
        if self.system_prompt:
            system = f"{self.system_prompt}\n\n{system}"

        messages = [Message.system(system), Message.user(format_query(state))]
        for step in state.history:
            messages.append(Message.assistant(_react_text(step.decision)))
            messages.append(Message.user(f"Observation: {step.observation}"))
        return messages


@dataclass
class FunctionCallingAgent:
    """Structured agent: the backend returns native tool calls."""

    backend: LLMBackend
    tools: ToolRegistry
    system_prompt: str = ""

    async def select_next_tool(self, state: ExecutionState) -> str | ToolCall:
        return await self.backend.select_tool(
            self.build_messages(state), self.tools.get_specs()
        )

    def parse_response(self, raw: Any) -> Decision:
        return parse_structured(raw)

    def build_messages(self, state: ExecutionState) -> list[Message]:
        system = FUNCTION_SYSTEM_PROMPT
        if self.system_prompt:
            system = f"{self.system_prompt}\n\n{system}"

        # Tool call round-trips are replayed as plain text so the
        # conversation stays valid for every backend.
        messages = [Message.system(system), Message.user(format_query(state))]
        for step in state.history:
            decision = step.decision
            if isinstance(decision, ToolInvocation):
                call = f"Calling tool {decision.name} with {json.dumps(decision.arguments)}"
            else:
                call = decision.raw
            messages.append(Message.assistant(call))
            messages.append(Message.user(f"Observation: {step.observation}"))
        return messages


def build_agent(
    backend: LLMBackend,
    tools: ToolRegistry,
    kind: AgentKind = "react",
    system_prompt: str = "",
) -> Agent:
    """Create an agent of the given kind."""
    if kind == "react":
        return ReActAgent(backend=backend, tools=tools, system_prompt=system_prompt)
    if kind == "function":
        return FunctionCallingAgent(
            backend=backend, tools=tools, system_prompt=system_prompt
        )
    raise ValueError(f"Unknown agent kind: {kind!r} (expected 'react' or 'function')")


def format_query(state: ExecutionState) -> str:
    """Render the query and any context as the opening user message."""
    if not state.context:
        return state.query
    context = json.dumps(dict(state.context), indent=2, default=str)
    return f"{state.query}\n\nContext:\n{context}"


def _react_text(decision: ToolInvocation | ParseFailure | FinalAnswer) -> str:
    """Reconstruct what the model said for a recorded decision."""
    if isinstance(decision, ToolInvocation):
        return (
            f"{THOUGHT}: {decision.thought}\n"
            f"{ACTION}: {decision.name}\n"
            f"{ACTION_INPUT}: {json.dumps(decision.arguments)}"
        )
    if isinstance(decision, FinalAnswer):
        return f"{THOUGHT}: {decision.thought}\n{FINAL_ANSWER}: {decision.content}"
    return decision.raw


def _parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Parse YAML frontmatter from markdown content.

    Returns (config_dict, body_text).
    """
    import yaml  # lazy import — only needed when loading agents

    pattern = re.compile(r"^---\s*\n(.*?)\n---\s*\n(.*)", re.DOTALL)
    match = pattern.match(content)

    if not match:
        return {}, content

    frontmatter = match.group(1)
    body = match.group(2)

    config = yaml.safe_load(frontmatter) or {}
    if not isinstance(config, dict):
        raise ValueError("Agent frontmatter must be a YAML mapping")

    return config, body
