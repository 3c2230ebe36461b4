"""Base tool classes with Pydantic parameter validation."""

from __future__ import annotations

import inspect
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Callable, ClassVar, Generic, TypeVar, get_type_hints

from pydantic import BaseModel, ConfigDict, ValidationError, create_model

from thinkact.tool.outcome import ExecutionError, InvalidInput, Success, ToolOutcome

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class BaseTool(ABC, Generic[T]):
    """Base class for all tools.

    Tools are synchronous functions: structured input -> value.
    Each tool declares its parameters as a Pydantic model (the type parameter T).

    Usage:
        class AddParams(BaseModel):
            a: float
            b: float

        class AddTool(BaseTool[AddParams]):
            name = "add"
            description = "Add two numbers"
            param_model = AddParams

            def execute(self, params: AddParams) -> float:
                return params.a + params.b
    """

    name: ClassVar[str]
    description: ClassVar[str]
    param_model: ClassVar[type[BaseModel]]

    def __call__(self, arguments: Mapping[str, Any]) -> ToolOutcome:
        """Validate arguments and execute, classifying any failure."""
        if not isinstance(arguments, Mapping):
            return InvalidInput(
                message=f"Expected an argument mapping, got {type(arguments).__name__}"
            )

        try:
            params = self.param_model.model_validate(dict(arguments))
        except ValidationError as e:
            logger.info("Tool %s rejected arguments: %s", self.name, e)
            return InvalidInput(message=str(e))

        try:
            value = self.execute(params)  # type: ignore[arg-type]
        except Exception as e:
            logger.error("Tool %s execution error: %s", self.name, e, exc_info=True)
            return ExecutionError(message=f"{type(e).__name__}: {e}")

        return Success(value=value)

    @abstractmethod
    def execute(self, params: T) -> Any:
        """Execute the tool with validated parameters."""
        ...

    def to_openai_spec(self) -> dict[str, Any]:
        """Convert to OpenAI function tool specification."""
        schema = self.param_model.model_json_schema()
        # Strip the title and $defs that Pydantic adds — LLMs don't need them
        schema.pop("title", None)
        schema.pop("$defs", None)

        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": schema,
            },
        }

    def describe(self) -> str:
        """One-line description with argument names, for text prompts."""
        props = self.param_model.model_json_schema().get("properties", {})
        args = ", ".join(
            f"{k}: {v.get('type', 'any')}" for k, v in props.items()
        )
        return f"{self.name}({args}): {self.description}"


class FunctionTool(BaseTool[BaseModel]):
    """A tool wrapping a plain callable.

    If no parameter model is given, one is derived from the callable's
    signature, so ``def add(a: int, b: int)`` accepts ``{"a": 2, "b": "2"}``
    and rejects ``{"a": 2}``.
    """

    def __init__(
        self,
        name: str,
        description: str,
        fn: Callable[..., Any],
        param_model: type[BaseModel] | None = None,
    ) -> None:
        self.name = name  # type: ignore[misc]
        self.description = description  # type: ignore[misc]
        self.fn = fn
        self.param_model = param_model or model_from_signature(name, fn)  # type: ignore[misc]

    def execute(self, params: BaseModel) -> Any:
        kwargs = {field: getattr(params, field) for field in type(params).model_fields}
        if params.model_extra:
            kwargs.update(params.model_extra)
        return self.fn(**kwargs)

    def __repr__(self) -> str:
        return f"FunctionTool(name={self.name!r})"


def model_from_signature(name: str, fn: Callable[..., Any]) -> type[BaseModel]:
    """Build a Pydantic parameter model from a callable's signature.

    Unannotated parameters accept any value. ``**kwargs`` allows extra keys;
    otherwise unknown keys are rejected.
    """
    model_name = "".join(part.capitalize() for part in name.split("_")) + "Params"

    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        # Builtins without introspectable signatures take anything
        return create_model(model_name, __config__=ConfigDict(extra="allow"))

    try:
        hints = get_type_hints(fn)
    except Exception:
        hints = {}

    fields: dict[str, Any] = {}
    extra = "forbid"
    for pname, param in sig.parameters.items():
        if param.kind is inspect.Parameter.VAR_KEYWORD:
            extra = "allow"
            continue
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            continue
        annotation = hints.get(pname, Any)
        default = ... if param.default is inspect.Parameter.empty else param.default
        fields[pname] = (annotation, default)

    return create_model(model_name, __config__=ConfigDict(extra=extra), **fields)
