"""Calculator tool — safe arithmetic evaluation."""

from __future__ import annotations

import ast
import math
import operator
from typing import Any, Callable, ClassVar

from pydantic import BaseModel, Field

from thinkact.tool.base import BaseTool

_BIN_OPS: dict[type[ast.operator], Callable[[Any, Any], Any]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: operator.pow,
}

_UNARY_OPS: dict[type[ast.unaryop], Callable[[Any], Any]] = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}

_FUNCTIONS: dict[str, Callable[..., Any]] = {
    "abs": abs,
    "round": round,
    "min": min,
    "max": max,
    "sqrt": math.sqrt,
    "log": math.log,
    "exp": math.exp,
}

_CONSTANTS = {"pi": math.pi, "e": math.e}

MAX_EXPONENT = 1000
MAX_RESULT_DIGITS = 1000


class CalculatorParams(BaseModel):
    expression: str = Field(
        description="Arithmetic expression, e.g. '(2 + 3) * 4' or 'sqrt(16)'."
    )


class CalculatorTool(BaseTool[CalculatorParams]):
    """Evaluate arithmetic without ``eval``.

    Only numeric literals, + - * / // % **, parentheses, and a handful of
    math functions are accepted. Anything else raises ``ValueError``, which
    the registry reports as an execution error.
    """

    name: ClassVar[str] = "calculator"
    description: ClassVar[str] = (
        "Evaluate an arithmetic expression. Supports + - * / // % **, "
        "parentheses, abs, round, min, max, sqrt, log, exp, pi and e."
    )
    param_model: ClassVar[type[BaseModel]] = CalculatorParams

    def execute(self, params: CalculatorParams) -> int | float:
        tree = ast.parse(params.expression.strip(), mode="eval")
        result = _eval(tree.body)
        if isinstance(result, float) and result.is_integer():
            return int(result)
        return result


def _eval(node: ast.AST) -> Any:
    if isinstance(node, ast.Constant) and isinstance(node.value, (int, float)):
        if isinstance(node.value, bool):
            raise ValueError("Booleans are not numbers here")
        return node.value
    if isinstance(node, ast.Name) and node.id in _CONSTANTS:
        return _CONSTANTS[node.id]
    if isinstance(node, ast.BinOp) and type(node.op) in _BIN_OPS:
        left, right = _eval(node.left), _eval(node.right)
        if isinstance(node.op, ast.Pow):
            _check_power(left, right)
        return _BIN_OPS[type(node.op)](left, right)
    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
        return _UNARY_OPS[type(node.op)](_eval(node.operand))
    if (
        isinstance(node, ast.Call)
        and isinstance(node.func, ast.Name)
        and node.func.id in _FUNCTIONS
        and not node.keywords
    ):
        return _FUNCTIONS[node.func.id](*(_eval(arg) for arg in node.args))
    raise ValueError(f"Unsupported expression: {ast.dump(node)[:80]}")


def _check_power(base: Any, exponent: Any) -> None:
    """Reject powers whose result would be too large to compute quickly."""
    if abs(exponent) > MAX_EXPONENT:
        raise ValueError(f"Exponent {exponent} is too large")
    magnitude = abs(base)
    if magnitude > 1 and abs(exponent) * math.log10(magnitude) > MAX_RESULT_DIGITS:
        raise ValueError(f"Power result would exceed {MAX_RESULT_DIGITS} digits")
