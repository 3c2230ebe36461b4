"""Built-in general-purpose tools."""

from thinkact.tool.base import BaseTool
from thinkact.tool.builtin.calculator import CalculatorTool
from thinkact.tool.builtin.clock import CurrentTimeTool
from thinkact.tool.builtin.think import ThinkTool

__all__ = [
    "CalculatorTool",
    "CurrentTimeTool",
    "ThinkTool",
    "builtin_tools",
]


def builtin_tools() -> list[BaseTool]:
    """Fresh instances of every built-in tool."""
    return [CalculatorTool(), CurrentTimeTool(), ThinkTool()]
