"""Configuration — Pydantic models for thinkact settings."""

from __future__ import annotations

import json
import os
from typing import Any, Literal

from pydantic import BaseModel, Field


class LLMConfig(BaseModel):
    """LLM backend configuration.

    Model names use litellm's provider-prefix format:
        "openai/gpt-4o-mini"
        "anthropic/claude-sonnet-4-5-20250929"
        "ollama/llama3.1"

    API keys are read from env vars automatically by litellm
    (OPENAI_API_KEY, ANTHROPIC_API_KEY, GEMINI_API_KEY).
    """

    model: str = Field(default="openai/gpt-4o-mini")
    temperature: float | None = Field(default=None)
    max_tokens: int | None = Field(default=None)


class RunConfig(BaseModel):
    """Run loop configuration."""

    max_iter: int = Field(default=5, ge=1, description="Iteration budget per query")
    verbose: bool = Field(default=True, description="Print a trace of each iteration")
    agent: Literal["react", "function"] = Field(
        default="react",
        description="'react' for free-text Thought/Action, 'function' for native tool calls",
    )
    retry_attempts: int = Field(
        default=1,
        ge=1,
        description="Attempts per reasoning call on backend connection failure",
    )


class ThinkactConfig(BaseModel):
    """Top-level thinkact configuration."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    run: RunConfig = Field(default_factory=RunConfig)
    agent_file: str | None = Field(
        default=None, description="Markdown agent definition with YAML frontmatter"
    )

    @classmethod
    def load(cls, config_path: str | None = None) -> ThinkactConfig:
        """Load config from file, env vars, or defaults.

        Priority: env vars > config file > defaults.

        Raises:
            ValueError: The config file is not valid JSON, or a value fails
                validation (pydantic.ValidationError).

        Env vars:
            THINKACT_MODEL      - Override model (litellm format with provider prefix)
            THINKACT_MAX_ITER   - Override iteration budget
            THINKACT_AGENT      - Override agent kind ("react" or "function")
        """
        from dotenv import find_dotenv, load_dotenv

        load_dotenv(find_dotenv(usecwd=True))

        config_data: dict[str, Any] = {}

        if config_path and os.path.exists(config_path):
            with open(config_path) as f:
                config_data = json.load(f)

        llm = config_data.get("llm", {})
        run = config_data.get("run", {})

        env_model = os.environ.get("THINKACT_MODEL")
        if env_model:
            llm["model"] = env_model

        env_max_iter = os.environ.get("THINKACT_MAX_ITER")
        if env_max_iter:
            run["max_iter"] = env_max_iter

        env_agent = os.environ.get("THINKACT_AGENT")
        if env_agent:
            run["agent"] = env_agent.lower()

        if llm:
            config_data["llm"] = llm
        if run:
            config_data["run"] = run

        return cls.model_validate(config_data)
