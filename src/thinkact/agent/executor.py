"""Step executor — one reason+act cycle per call.

    AWAITING_REASONING --reason()--> AWAITING_ACTION --act()--> COMPLETED
            ^                                            |
            +---------------- tool / parse failure ------+
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any

from thinkact.agent.agent import Agent
from thinkact.agent.decision import Decision, FinalAnswer, ParseFailure, ToolInvocation
from thinkact.agent.parser import PARSE_FAILURE_OBSERVATION
from thinkact.agent.state import ExecutionState, ExecutionStep
from thinkact.errors import InvalidStateError, TaskCompletedError
from thinkact.tool.outcome import ToolOutcome

logger = logging.getLogger(__name__)


class StepState(enum.Enum):
    AWAITING_REASONING = "awaiting_reasoning"
    AWAITING_ACTION = "awaiting_action"
    COMPLETED = "completed"


@dataclass(frozen=True)
class StepResult:
    """What one step did."""

    iteration: int
    decision: Decision
    observation: str = ""
    outcome: ToolOutcome | None = None
    is_error: bool = False

    @property
    def is_final(self) -> bool:
        return isinstance(self.decision, FinalAnswer)

    @property
    def answer(self) -> str | None:
        if isinstance(self.decision, FinalAnswer):
            return self.decision.content
        return None


class StepExecutor:
    """Drives an agent over an ``ExecutionState`` one step at a time.

    This is an explicit cursor: ``has_next()`` tells whether another step
    can run, ``next()`` runs exactly one. Once the agent gives a final answer
    ``next()`` returns None on every call.
    """

    def __init__(self, agent: Agent, state: ExecutionState) -> None:
        self._agent = agent
        self._state = state
        self._status = StepState.AWAITING_REASONING
        self._iteration = 0

    @property
    def state(self) -> ExecutionState:
        return self._state

    @property
    def status(self) -> StepState:
        return self._status

    @property
    def iteration(self) -> int:
        return self._iteration

    def has_next(self) -> bool:
        return self._status is not StepState.COMPLETED

    async def next(self) -> StepResult | None:
        """Run one reason+act cycle. Backend errors propagate."""
        if self._status is StepState.COMPLETED:
            return None
        raw = await self.reason()
        return self.act(raw)

    async def reason(self) -> Any:
        """Ask the agent for its next raw response.

        On a backend error the executor stays in AWAITING_REASONING, so the
        same step can be retried.
        """
        if self._status is StepState.COMPLETED:
            raise TaskCompletedError("Task is already completed")
        if self._status is StepState.AWAITING_ACTION:
            raise InvalidStateError("reason() called twice without act()")

        raw = await self._agent.select_next_tool(self._state)
        self._status = StepState.AWAITING_ACTION
        return raw

    def act(self, raw: Any) -> StepResult:
        """Parse a raw response and carry out the decision."""
        if self._status is StepState.COMPLETED:
            raise TaskCompletedError("Task is already completed")
        if self._status is not StepState.AWAITING_ACTION:
            raise InvalidStateError("act() called before reason()")

        self._iteration += 1
        decision = self._parse(raw)

        if isinstance(decision, FinalAnswer):
            self._status = StepState.COMPLETED
            logger.info("Step %d: final answer", self._iteration)
            return StepResult(iteration=self._iteration, decision=decision)

        self._status = StepState.AWAITING_REASONING

        if isinstance(decision, ToolInvocation):
            outcome = self._agent.tools.execute(decision.name, decision.arguments)
            observation = outcome.observation
            self._state.append(ExecutionStep(decision, observation, outcome))
            logger.info(
                "Step %d: %s -> %s",
                self._iteration,
                decision.name,
                type(outcome).__name__,
            )
            return StepResult(
                iteration=self._iteration,
                decision=decision,
                observation=observation,
                outcome=outcome,
                is_error=outcome.is_error,
            )

        self._state.append(ExecutionStep(decision, PARSE_FAILURE_OBSERVATION))
        logger.info("Step %d: unparseable response (%s)", self._iteration, decision.reason)
        return StepResult(
            iteration=self._iteration,
            decision=decision,
            observation=PARSE_FAILURE_OBSERVATION,
            is_error=True,
        )

    def _parse(self, raw: Any) -> Decision:
        try:
            return self._agent.parse_response(raw)
        except Exception as e:
            logger.error("Agent parser raised: %s", e, exc_info=True)
            return ParseFailure(reason=f"Parser error: {e}", raw=str(raw))
