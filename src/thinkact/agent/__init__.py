"""Agent system — decisions, parsing, state, step executor and run loop."""

from thinkact.agent.agent import (
    Agent,
    AgentConfig,
    FunctionCallingAgent,
    ReActAgent,
    build_agent,
)
from thinkact.agent.decision import Decision, FinalAnswer, ParseFailure, ToolInvocation
from thinkact.agent.executor import StepExecutor, StepResult, StepState
from thinkact.agent.loop import RunResult, TurnOutcome, run, run_sync
from thinkact.agent.parser import parse_react, parse_structured
from thinkact.agent.state import ExecutionState, ExecutionStep

__all__ = [
    "Agent",
    "AgentConfig",
    "FunctionCallingAgent",
    "ReActAgent",
    "build_agent",
    "Decision",
    "FinalAnswer",
    "ParseFailure",
    "ToolInvocation",
    "StepExecutor",
    "StepResult",
    "StepState",
    "RunResult",
    "TurnOutcome",
    "run",
    "run_sync",
    "parse_react",
    "parse_structured",
    "ExecutionState",
    "ExecutionStep",
]
