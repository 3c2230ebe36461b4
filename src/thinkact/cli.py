"""CLI entry point for thinkact."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

import typer

from thinkact.config import ThinkactConfig

if TYPE_CHECKING:
    from thinkact.tool.registry import ToolRegistry

app = typer.Typer(
    name="thinkact",
    help="Answer questions with a language model that can call tools.",
    no_args_is_help=True,
)


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


@app.command()
def ask(
    query: str = typer.Argument(help="The question to answer."),
    model: str | None = typer.Option(
        None, "--model", "-m", help="Model in litellm format, e.g. openai/gpt-4o-mini."
    ),
    max_iter: int | None = typer.Option(
        None, "--max-iter", "-n", help="Iteration budget.", min=1
    ),
    agent_kind: str | None = typer.Option(
        None, "--agent", "-a", help="'react' (free text) or 'function' (native tool calls)."
    ),
    context: str | None = typer.Option(
        None, "--context", help="JSON object passed to the model alongside the query."
    ),
    verbose: bool | None = typer.Option(
        None, "--verbose/--quiet", help="Print the iteration trace."
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging."),
    config_file: str | None = typer.Option(
        None, "--config", "-c", help="Path to a JSON config file."
    ),
) -> None:
    """Run the agent on QUERY and print the answer."""
    from thinkact.agent.agent import AgentConfig, build_agent
    from thinkact.agent.loop import TurnOutcome, run_sync
    from thinkact.llm.provider import create_backend

    setup_logging(debug)
    try:
        config = ThinkactConfig.load(config_file)
        agent_config, system_prompt = (
            AgentConfig.from_markdown(config.agent_file)
            if config.agent_file
            else (AgentConfig(), "")
        )
    except (OSError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)

    # Explicit flags > agent file > env vars > config file
    if agent_config.kind:
        config.run.agent = agent_config.kind
    if agent_config.max_iter is not None:
        config.run.max_iter = agent_config.max_iter

    if model:
        config.llm.model = model
    if max_iter is not None:
        config.run.max_iter = max_iter
    if agent_kind:
        config.run.agent = agent_kind  # type: ignore[assignment]
    if verbose is not None:
        config.run.verbose = verbose

    context_data = None
    if context:
        try:
            context_data = json.loads(context)
        except json.JSONDecodeError as e:
            typer.echo(f"Error: --context is not valid JSON: {e}", err=True)
            raise typer.Exit(2)
        if not isinstance(context_data, dict):
            typer.echo("Error: --context must be a JSON object", err=True)
            raise typer.Exit(2)

    registry = _builtin_registry()
    if agent_config.tools:
        registry = registry.subset(agent_config.tools)

    backend = create_backend(
        model=config.llm.model,
        temperature=config.llm.temperature,
        max_tokens=config.llm.max_tokens,
    )
    try:
        agent = build_agent(
            backend, registry, kind=config.run.agent, system_prompt=system_prompt
        )
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)

    result = run_sync(
        agent,
        query,
        max_iter=config.run.max_iter,
        context=context_data,
        verbose=config.run.verbose,
        retry_attempts=config.run.retry_attempts,
    )

    if result.outcome is TurnOutcome.ERROR:
        typer.echo(f"Error: {result.error}", err=True)
        raise typer.Exit(1)
    if result.answer is None:
        typer.echo(
            f"No answer after {config.run.max_iter} iterations.", err=True
        )
        raise typer.Exit(3)
    typer.echo(result.answer)


@app.command()
def tools() -> None:
    """List the built-in tools."""
    registry = _builtin_registry()
    typer.echo(registry.describe())


def _builtin_registry() -> ToolRegistry:
    from thinkact.tool.builtin import builtin_tools
    from thinkact.tool.registry import ToolRegistry

    registry = ToolRegistry()
    registry.register_many(builtin_tools())
    return registry


def main() -> None:
    app()


if __name__ == "__main__":
    main()
