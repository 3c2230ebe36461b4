"""The run loop — drive the step executor until an answer or the budget runs out."""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from thinkact.agent.agent import Agent
from thinkact.agent.executor import StepExecutor, StepResult
from thinkact.agent.state import ExecutionState
from thinkact.errors import BackendConnectionError, BackendError

if TYPE_CHECKING:
    from rich.console import Console

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITER = 5

RETRY_WAIT = wait_exponential(multiplier=1, min=1, max=30)


class TurnOutcome(enum.Enum):
    """Why did the run end?"""

    COMPLETE = "complete"  # Agent gave a final answer
    MAX_STEPS = "max_steps"  # Hit the iteration budget
    ERROR = "error"  # Fatal backend failure


@dataclass
class RunResult:
    """Trace and answer of one run."""

    steps: list[StepResult] = field(default_factory=list)
    answer: str | None = None
    outcome: TurnOutcome = TurnOutcome.MAX_STEPS
    error: BackendError | None = None
    state: ExecutionState | None = None

    @property
    def completed(self) -> bool:
        return self.outcome is TurnOutcome.COMPLETE


async def run(
    agent: Agent,
    query: str,
    max_iter: int = DEFAULT_MAX_ITER,
    context: Mapping[str, Any] | None = None,
    verbose: bool = True,
    *,
    on_step: Callable[[StepResult], None] | None = None,
    retry_attempts: int = 1,
    console: Console | None = None,
) -> RunResult:
    """Run an agent on a query.

    Each iteration is one reason+act cycle. The run ends on the first of:
    a final answer, ``max_iter`` iterations, or a backend failure. Tool and
    parse failures do not end the run; they are fed back to the model.

    Args:
        agent: Agent to drive (backend + tool registry + parsing strategy).
        query: Natural-language question.
        max_iter: Iteration budget.
        context: Optional free-form context shown to the model with the query.
        verbose: Print a trace of each iteration.
        on_step: Callback after each step, including the final one.
        retry_attempts: Attempts per reasoning call when the backend fails to
            connect. 1 means no retry.
        console: Console for the verbose trace (stderr by default).

    Returns:
        The non-final steps in order, plus the answer if one was given.
        On backend failure ``error`` holds the exception and ``answer`` is None.
    """
    if max_iter < 1:
        raise ValueError(f"max_iter must be at least 1, got {max_iter}")
    if retry_attempts < 1:
        raise ValueError(f"retry_attempts must be at least 1, got {retry_attempts}")

    state = ExecutionState(query, context)
    executor = StepExecutor(agent, state)
    result = RunResult(state=state)

    trace = None
    if verbose:
        from thinkact.display import RunTrace

        trace = RunTrace(console)
        trace.start(query, max_iter)

    while executor.has_next() and executor.iteration < max_iter:
        iteration = executor.iteration + 1
        logger.info("Iteration %d/%d", iteration, max_iter)
        if trace:
            trace.iteration(iteration, max_iter)

        try:
            raw = await _reason(executor, retry_attempts)
        except BackendError as e:
            logger.error(
                "Backend failure at iteration %d: %s", iteration, e, exc_info=True
            )
            if trace:
                trace.fatal(e)
            result.outcome = TurnOutcome.ERROR
            result.error = e
            return result

        step = executor.act(raw)
        if trace:
            trace.step(step)
        if on_step:
            on_step(step)

        if step.is_final:
            result.answer = step.answer
            result.outcome = TurnOutcome.COMPLETE
            logger.info("Completed after %d iterations", iteration)
            if trace and step.answer is not None:
                trace.answer(step.answer)
            return result

        result.steps.append(step)

    logger.warning("Hit max iterations (%d) without an answer", max_iter)
    if trace:
        trace.exhausted(max_iter)
    return result


def run_sync(agent: Agent, query: str, *args: Any, **kwargs: Any) -> RunResult:
    """Blocking wrapper around ``run`` for callers without an event loop."""
    return asyncio.run(run(agent, query, *args, **kwargs))


async def _reason(executor: StepExecutor, attempts: int) -> Any:
    """Call ``executor.reason()``, retrying connection failures."""
    retrying = AsyncRetrying(
        retry=retry_if_exception_type(BackendConnectionError),
        stop=stop_after_attempt(attempts),
        wait=RETRY_WAIT,
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async for attempt in retrying:
        with attempt:
            return await executor.reason()
