"""LLM abstraction layer — one backend protocol, unified via litellm."""

from thinkact.llm.message import Message, ToolCall
from thinkact.llm.mock import ScriptedBackend
from thinkact.llm.provider import (
    BackendConfig,
    LiteLLMBackend,
    LLMBackend,
    ToolSpec,
    create_backend,
)

__all__ = [
    "Message",
    "ToolCall",
    "ScriptedBackend",
    "BackendConfig",
    "LiteLLMBackend",
    "LLMBackend",
    "ToolSpec",
    "create_backend",
]
