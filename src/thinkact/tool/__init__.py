"""Tool system — base classes, outcomes, registry, and output truncation."""

from thinkact.tool.base import BaseTool, FunctionTool
from thinkact.tool.outcome import (
    ExecutionError,
    InvalidInput,
    NotFound,
    Success,
    ToolOutcome,
)
from thinkact.tool.registry import ToolRegistry
from thinkact.tool.truncation import truncate_output

__all__ = [
    "BaseTool",
    "FunctionTool",
    "ExecutionError",
    "InvalidInput",
    "NotFound",
    "Success",
    "ToolOutcome",
    "ToolRegistry",
    "truncate_output",
]
