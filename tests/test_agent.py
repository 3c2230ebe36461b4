"""Tests for thinkact.agent.agent (strategies, prompts, markdown definitions)."""

from __future__ import annotations

import pytest

from thinkact.agent.agent import (
    Agent,
    AgentConfig,
    FunctionCallingAgent,
    ReActAgent,
    build_agent,
    format_query,
)
from thinkact.agent.decision import FinalAnswer, ParseFailure, ToolInvocation
from thinkact.agent.parser import PARSE_FAILURE_OBSERVATION
from thinkact.agent.state import ExecutionState, ExecutionStep
from thinkact.llm.message import ToolCall
from thinkact.llm.mock import ScriptedBackend
from thinkact.tool.outcome import Success
from thinkact.tool.registry import ToolRegistry


def _tools() -> ToolRegistry:
    registry = ToolRegistry()
    registry.register_function("add", "Add two numbers", lambda a, b: a + b)
    return registry


def _state_with_history() -> ExecutionState:
    state = ExecutionState("What is 2+2?")
    state.append(
        ExecutionStep(
            ToolInvocation(name="add", arguments={"a": 2, "b": 2}, thought="add them"),
            "4",
            Success(value=4),
        )
    )
    state.append(
        ExecutionStep(ParseFailure(reason="bad", raw="oops"), PARSE_FAILURE_OBSERVATION)
    )
    return state


class TestReActAgent:
    def test_is_agent(self) -> None:
        assert isinstance(ReActAgent(backend=ScriptedBackend(), tools=_tools()), Agent)

    def test_initial_messages(self) -> None:
        agent = ReActAgent(backend=ScriptedBackend(), tools=_tools(), system_prompt="Be brief.")
        messages = agent.build_messages(ExecutionState("What is 2+2?"))
        assert [m.role for m in messages] == ["system", "user"]
        assert messages[0].content.startswith("Be brief.\n\n")
        assert "- add(a: any, b: any): Add two numbers" in messages[0].content
        assert "Action Input:" in messages[0].content
        assert messages[1].content == "What is 2+2?"

    def test_history_replayed(self) -> None:
        agent = ReActAgent(backend=ScriptedBackend(), tools=_tools())
        messages = agent.build_messages(_state_with_history())
        assert [m.role for m in messages] == [
            "system", "user", "assistant", "user", "assistant", "user",
        ]
        assert messages[2].content == (
            'Thought: add them\nAction: add\nAction Input: {"a": 2, "b": 2}'
        )
        assert messages[3].content == "Observation: 4"
        assert messages[4].content == "oops"
        assert messages[5].content == f"Observation: {PARSE_FAILURE_OBSERVATION}"

    def test_no_tools(self) -> None:
        agent = ReActAgent(backend=ScriptedBackend(), tools=ToolRegistry())
        assert "(no tools available)" in agent.build_messages(ExecutionState("q"))[0].content

    async def test_select_next_tool_uses_chat(self) -> None:
        backend = ScriptedBackend(script=["Thought: t\nFinal Answer: a"])
        agent = ReActAgent(backend=backend, tools=_tools())
        raw = await agent.select_next_tool(ExecutionState("q"))
        assert agent.parse_response(raw) == FinalAnswer(content="a", thought="t")


class TestFunctionCallingAgent:
    async def test_select_next_tool_sends_specs(self) -> None:
        call = ToolCall(name="add", arguments='{"a": 1, "b": 1}')
        backend = ScriptedBackend(script=[call])
        agent = FunctionCallingAgent(backend=backend, tools=_tools())
        raw = await agent.select_next_tool(ExecutionState("q"))
        assert raw == call
        assert backend.tool_specs_seen[0][0]["function"]["name"] == "add"
        assert agent.parse_response(raw) == ToolInvocation(name="add", arguments={"a": 1, "b": 1})

    def test_history_replayed_as_text(self) -> None:
        agent = FunctionCallingAgent(backend=ScriptedBackend(), tools=_tools())
        messages = agent.build_messages(_state_with_history())
        assert messages[2].content == 'Calling tool add with {"a": 2, "b": 2}'
        assert messages[3].content == "Observation: 4"
        assert messages[4].content == "oops"


class TestBuildAgent:
    def test_kinds(self) -> None:
        backend, tools = ScriptedBackend(), _tools()
        assert isinstance(build_agent(backend, tools, "react"), ReActAgent)
        assert isinstance(build_agent(backend, tools, "function"), FunctionCallingAgent)

    def test_unknown_kind(self) -> None:
        with pytest.raises(ValueError, match="Unknown agent kind"):
            build_agent(ScriptedBackend(), _tools(), "planner")  # type: ignore[arg-type]


class TestFormatQuery:
    def test_plain(self) -> None:
        assert format_query(ExecutionState("q")) == "q"

    def test_with_context(self) -> None:
        text = format_query(ExecutionState("q", {"city": "Oslo"}))
        assert text == 'q\n\nContext:\n{\n  "city": "Oslo"\n}'


class TestAgentConfigFromMarkdown:
    def test_frontmatter(self, tmp_path) -> None:
        path = tmp_path / "math.md"
        path.write_text(
            "---\n"
            "kind: function\n"
            "tools: [calculator]\n"
            "max_iter: 3\n"
            "---\n"
            "\n"
            "You are a careful mathematician.\n"
        )
        config, prompt = AgentConfig.from_markdown(str(path))
        assert config.kind == "function"
        assert config.tools == ["calculator"]
        assert config.max_iter == 3
        assert prompt == "You are a careful mathematician."

    def test_no_frontmatter(self, tmp_path) -> None:
        path = tmp_path / "plain.md"
        path.write_text("Just a prompt.")
        config, prompt = AgentConfig.from_markdown(str(path))
        assert config == AgentConfig()
        assert config.kind is None
        assert config.max_iter is None
        assert prompt == "Just a prompt."

    def test_unknown_key(self, tmp_path) -> None:
        path = tmp_path / "bad.md"
        path.write_text("---\nmodel: gpt-4o\nflavour: spicy\n---\nprompt\n")
        with pytest.raises(ValueError, match="flavour, model"):
            AgentConfig.from_markdown(str(path))

    @pytest.mark.parametrize("value", ["0", "-2", "many", "true"])
    def test_bad_max_iter(self, tmp_path, value: str) -> None:
        path = tmp_path / "bad.md"
        path.write_text(f"---\nmax_iter: {value}\n---\nprompt\n")
        with pytest.raises(ValueError, match="max_iter"):
            AgentConfig.from_markdown(str(path))
