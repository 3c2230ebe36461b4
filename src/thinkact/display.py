# display.py
# Verbose run trace. Diagnostic output only; nothing parses it.
#
# Colour language:
#   cyan    — run boundaries
#   magenta — model decisions (Thought / Action)
#   green   — successful observations and the final answer
#   yellow  — recoverable failures fed back to the model
#   red     — fatal errors

from __future__ import annotations

import json

from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.text import Text

from thinkact.agent.decision import ParseFailure, ToolInvocation
from thinkact.agent.executor import StepResult
from thinkact.errors import BackendError


def _mono(value: str, max_len: int = 400) -> str:
    if len(value) > max_len:
        return value[:max_len] + "…"
    return value


class RunTrace:
    """Prints each iteration of a run to a rich console."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(stderr=True)

    def start(self, query: str, max_iter: int) -> None:
        self.console.print(Rule(f"[cyan]query[/cyan] [dim](max {max_iter} iterations)[/dim]"))
        self.console.print(Text(query, style="bold"))

    def iteration(self, number: int, max_iter: int) -> None:
        self.console.print(Rule(f"[cyan]iteration {number}/{max_iter}[/cyan]", style="dim"))

    def step(self, result: StepResult) -> None:
        decision = result.decision

        if isinstance(decision, ToolInvocation):
            if decision.thought:
                self.console.print(Text(f"Thought: {decision.thought}", style="magenta"))
            self.console.print(
                Text.assemble(
                    ("Tool: ", "bold magenta"),
                    (decision.name, "magenta"),
                    ("  ", ""),
                    (json.dumps(decision.arguments, default=str), "dim"),
                )
            )

        if isinstance(decision, ParseFailure):
            self._error_block("parse failure", decision.reason, _mono(decision.raw))
        elif result.is_error and result.outcome is not None:
            detail = getattr(result.outcome, "message", "") or getattr(result.outcome, "name", "")
            self._error_block(type(result.outcome).__name__, str(detail), result.observation)
        elif not result.is_final:
            self.console.print(Text(f"Observation: {_mono(result.observation)}", style="green"))

    def answer(self, content: str) -> None:
        self.console.print(
            Panel(content, title="[bold green]answer[/bold green]", border_style="green")
        )

    def exhausted(self, max_iter: int) -> None:
        self.console.print(
            Text(f"Stopped after {max_iter} iterations without an answer.", style="yellow")
        )

    def fatal(self, error: BackendError) -> None:
        self.console.print(
            Panel(
                f"{type(error).__name__}: {error}",
                title="[bold red]backend failure[/bold red]",
                border_style="red",
            )
        )

    def _error_block(self, title: str, detail: str, body: str) -> None:
        self.console.print(
            Panel(
                f"[dim]{detail}[/dim]\n{body}" if detail else body,
                title=f"[bold yellow]{title}[/bold yellow]",
                border_style="yellow",
            )
        )
