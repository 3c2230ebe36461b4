"""thinkact — a reason/act/observe tool-use loop for language models."""

from thinkact.agent import (
    AgentConfig,
    ExecutionState,
    FunctionCallingAgent,
    ReActAgent,
    RunResult,
    StepExecutor,
    TurnOutcome,
    build_agent,
    run,
    run_sync,
)
from thinkact.llm import ScriptedBackend, create_backend
from thinkact.tool import ToolRegistry

__version__ = "0.1.0"

__all__ = [
    "AgentConfig",
    "ExecutionState",
    "FunctionCallingAgent",
    "ReActAgent",
    "RunResult",
    "StepExecutor",
    "TurnOutcome",
    "build_agent",
    "run",
    "run_sync",
    "ScriptedBackend",
    "create_backend",
    "ToolRegistry",
]
