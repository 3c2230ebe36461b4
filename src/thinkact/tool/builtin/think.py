"""Think tool — scratchpad for reasoning without acting."""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, Field

from thinkact.tool.base import BaseTool


class ThinkParams(BaseModel):
    thought: str = Field(
        description=(
            "Your internal reasoning. Use this to plan, break the question "
            "down, or check an intermediate result before acting."
        )
    )


class ThinkTool(BaseTool[ThinkParams]):
    """Scratchpad for internal reasoning.

    The thought is recorded in the execution history but no side effects
    occur. Returns nothing, so the model sees the empty-result observation.
    """

    name: ClassVar[str] = "think"
    description: ClassVar[str] = (
        "Think through the problem and plan your approach. "
        "No side effects — just records your reasoning."
    )
    param_model: ClassVar[type[BaseModel]] = ThinkParams

    def execute(self, params: ThinkParams) -> None:
        return None
