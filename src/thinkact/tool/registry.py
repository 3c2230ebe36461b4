"""Tool registry — register, look up, and execute tools by name."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable

from pydantic import BaseModel

from thinkact.tool.base import BaseTool, FunctionTool
from thinkact.tool.outcome import NotFound, ToolOutcome

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Registry of available tools.

    Tools are registered before a run and treated as read-only while it
    executes, so independent runs may share one registry.
    """

    def __init__(self) -> None:
        self._tools: dict[str, BaseTool] = {}

    def register(self, tool: BaseTool) -> None:
        """Register a tool instance. An existing name is overwritten."""
        if tool.name in self._tools:
            logger.warning("Tool %s already registered, overwriting", tool.name)
        self._tools[tool.name] = tool

    def register_many(self, tools: list[BaseTool]) -> None:
        """Register multiple tools."""
        for tool in tools:
            self.register(tool)

    def register_function(
        self,
        name: str,
        description: str,
        fn: Callable[..., Any],
        param_model: type[BaseModel] | None = None,
    ) -> FunctionTool:
        """Wrap a plain callable as a tool and register it."""
        tool = FunctionTool(name, description, fn, param_model)
        self.register(tool)
        return tool

    def get(self, name: str) -> BaseTool | None:
        """Get a tool by name."""
        return self._tools.get(name)

    def get_specs(self, names: list[str] | None = None) -> list[dict[str, Any]]:
        """Get OpenAI tool specs, optionally filtered by name.

        Args:
            names: If provided, only return specs for these tools.
                   If None, return all.
        """
        tools = self._tools.values()
        if names is not None:
            tools = [t for t in tools if t.name in names]
        return [t.to_openai_spec() for t in tools]

    def describe(self) -> str:
        """Describe all tools, one per line, for free-text prompts."""
        return "\n".join(f"- {t.describe()}" for t in self._tools.values())

    def names(self) -> list[str]:
        """Get all registered tool names."""
        return list(self._tools.keys())

    def subset(self, names: list[str]) -> ToolRegistry:
        """Create a new registry with only the specified tools."""
        reg = ToolRegistry()
        for name in names:
            tool = self._tools.get(name)
            if tool:
                reg.register(tool)
            else:
                logger.warning("Tool %s not found in registry", name)
        return reg

    def execute(self, name: str, arguments: Mapping[str, Any]) -> ToolOutcome:
        """Execute a tool by name.

        Never raises for tool-side problems: an unknown name, bad arguments,
        and errors raised by the tool all come back as typed outcomes.
        """
        tool = self._tools.get(name)
        if tool is None:
            logger.info(
                "Unknown tool %r requested. Available tools: %s",
                name,
                ", ".join(self.names()),
            )
            return NotFound(name=name)

        outcome = tool(arguments)
        logger.debug("Tool %s -> %s", name, type(outcome).__name__)
        return outcome

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools
