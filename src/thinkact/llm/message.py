"""Message types for the LLM abstraction."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ToolCall:
    """A structured tool call returned by a backend.

    ``arguments`` is the raw JSON string the model produced. It is parsed by
    the response parser, not here, so malformed JSON surfaces as a typed
    parse failure instead of an exception.
    """

    name: str
    arguments: str = ""
    id: str = ""


@dataclass(frozen=True)
class Message:
    """A single conversation message."""

    role: Role
    content: str = ""

    # --- Convenience constructors ---

    @classmethod
    def system(cls, text: str) -> Message:
        return cls(role="system", content=text)

    @classmethod
    def user(cls, text: str) -> Message:
        return cls(role="user", content=text)

    @classmethod
    def assistant(cls, text: str) -> Message:
        return cls(role="assistant", content=text)

    def to_openai_dict(self) -> dict[str, Any]:
        """Convert to OpenAI API format."""
        return {"role": self.role, "content": self.content}
