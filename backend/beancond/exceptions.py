"""
Condition Engine Errors.

Every error raised while building or evaluating conditions derives from
ConditionError. These are configuration or programming errors: they abort
the current registration pass and are never turned into a False result.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping


class ConditionError(Exception):
    """Base exception for the condition engine."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class MalformedChainError(ConditionError, ValueError):
    """Raised when a chain ends with an operator that has no condition after it."""


class EmptyGroupError(ConditionError, ValueError):
    """Raised when a condition group is constructed without members."""


class UnknownOperatorError(ConditionError, ValueError):
    """Raised when an operator is outside its enumeration."""


class InvalidConditionError(ConditionError, TypeError):
    """Raised when something other than a Condition is given as one."""


class UnimplementedFeatureError(ConditionError, NotImplementedError):
    """Raised when a reserved condition kind is evaluated."""


class ExpressionEvaluationError(ConditionError, ValueError):
    """Raised when the embedded evaluator rejects an expression."""

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        position: int | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if expression is not None:
            ctx.setdefault("expression", expression)
        if position is not None:
            ctx.setdefault("position", position)
        super().__init__(message, context=ctx)
        self.expression = expression
        self.position = position


class PropertySourceError(ConditionError, ValueError):
    """Raised when a property file cannot be read into a flat mapping."""


class DeclarationError(ConditionError, ValueError):
    """Raised when a declarative condition cannot be turned into a Conditional."""


__all__ = [
    "ConditionError",
    "MalformedChainError",
    "EmptyGroupError",
    "UnknownOperatorError",
    "InvalidConditionError",
    "UnimplementedFeatureError",
    "ExpressionEvaluationError",
    "PropertySourceError",
    "DeclarationError",
]
