"""
Expression Evaluator for templated property values.

Evaluates the JSON Logic trees produced by ExpressionParser. Typing is
strict: operands are never coerced, and any mismatch is an error rather
than a False result.
"""

from __future__ import annotations

import math
from typing import Any, Callable, Dict, List, Optional

from ..exceptions import ExpressionEvaluationError
from .parser import ExpressionParser


def render_value(value: Any) -> str:
    """
    Render a value as expression text.

    Booleans render as ``true``/``false``, None as empty text, and floats
    with an integral value drop their fraction so ``8.0`` renders as ``8``.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _truncated_div(left: int, right: int) -> int:
    # Integer division truncates toward zero
    quotient = abs(left) // abs(right)
    return quotient if (left >= 0) == (right >= 0) else -quotient


class ExpressionEvaluator:
    """
    Evaluator for substituted property-value expressions.

    Supports:
    - Logical: or, and, !
    - Comparison: ==, !=, <, <=, >, >=
    - Arithmetic: +, -, *, /, %, unary neg/pos
    - String concatenation with +
    """

    COMPARISONS: Dict[str, Callable[[Any, Any], bool]] = {
        "==": lambda a, b: a == b,
        "!=": lambda a, b: a != b,
        "<": lambda a, b: a < b,
        "<=": lambda a, b: a <= b,
        ">": lambda a, b: a > b,
        ">=": lambda a, b: a >= b,
    }

    def __init__(self) -> None:
        self._expression: Optional[str] = None

    def evaluate_text(self, expression: str) -> Any:
        """
        Parse and evaluate an expression.

        Args:
            expression: The expression text.

        Returns:
            The evaluation result.

        Raises:
            ExpressionEvaluationError: On syntax or type errors.
        """
        logic = ExpressionParser().parse(expression)
        self._expression = expression
        try:
            return self.evaluate(logic)
        finally:
            self._expression = None

    def evaluate(self, logic: Any) -> Any:
        """
        Evaluate a JSON Logic expression.

        Args:
            logic: The JSON Logic expression or a bare literal.

        Returns:
            The evaluation result.
        """
        if not isinstance(logic, dict):
            return logic

        if len(logic) != 1:
            raise self._error(f"Malformed expression node: {logic!r}")

        operator = list(logic.keys())[0]
        args = logic[operator]

        if operator == "or":
            return self._eval_or(args)

        if operator == "and":
            return self._eval_and(args)

        if operator == "!":
            value = self.evaluate(args)
            if not isinstance(value, bool):
                raise self._type_error("!", value)
            return not value

        if operator in self.COMPARISONS:
            return self._eval_comparison(operator, args)

        if operator in ("neg", "pos"):
            value = self.evaluate(args)
            if not _is_number(value):
                raise self._type_error("-" if operator == "neg" else "+", value)
            return -value if operator == "neg" else value

        if operator in ("+", "-", "*", "/", "%"):
            return self._eval_arithmetic(operator, args)

        raise self._error(f"Unknown operator: {operator}")

    def _eval_or(self, args: List) -> bool:
        """Evaluate || with short-circuit."""
        for arg in args:
            value = self.evaluate(arg)
            if not isinstance(value, bool):
                raise self._type_error("||", value)
            if value:
                return True
        return False

    def _eval_and(self, args: List) -> bool:
        """Evaluate && with short-circuit."""
        for arg in args:
            value = self.evaluate(arg)
            if not isinstance(value, bool):
                raise self._type_error("&&", value)
            if not value:
                return False
        return True

    def _eval_comparison(self, operator: str, args: List) -> bool:
        """Evaluate a comparison between operands of the same kind."""
        left = self.evaluate(args[0])
        right = self.evaluate(args[1])

        if _is_number(left) and _is_number(right):
            pass
        elif isinstance(left, str) and isinstance(right, str):
            pass
        elif isinstance(left, bool) and isinstance(right, bool) and operator in ("==", "!="):
            pass
        else:
            raise self._type_error(operator, left, right)

        return self.COMPARISONS[operator](left, right)

    def _eval_arithmetic(self, operator: str, args: List) -> Any:
        """Evaluate a binary arithmetic operator."""
        left = self.evaluate(args[0])
        right = self.evaluate(args[1])

        if operator == "+" and isinstance(left, str) and isinstance(right, str):
            return left + right

        if not (_is_number(left) and _is_number(right)):
            raise self._type_error(operator, left, right)

        if operator == "+":
            return left + right
        if operator == "-":
            return left - right
        if operator == "*":
            return left * right

        if right == 0:
            raise self._error("Division by zero")

        both_int = isinstance(left, int) and isinstance(right, int)

        if operator == "/":
            if both_int:
                return _truncated_div(left, right)
            return left / right

        if not both_int:
            raise self._type_error(operator, left, right)
        return left - right * _truncated_div(left, right)

    def _type_error(self, operator: str, *operands: Any) -> ExpressionEvaluationError:
        kinds = ", ".join(type(o).__name__ for o in operands)
        return self._error(f"Operator '{operator}' not defined for ({kinds})")

    def _error(self, message: str) -> ExpressionEvaluationError:
        return ExpressionEvaluationError(message, expression=self._expression)


def evaluate_expression(expression: str) -> Any:
    """Parse and evaluate an expression with a fresh evaluator."""
    return ExpressionEvaluator().evaluate_text(expression)
