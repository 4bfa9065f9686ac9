"""
Condition Primitives.

Each condition is a boolean predicate over a ConditionContext:
- FunctionCondition: delegates to a callable
- NotCondition: negates another condition
- PropertyCondition / MissingPropertyCondition: property prefix presence
- PropertyValueCondition: literal or templated property value match
- BeanCondition / MissingBeanCondition: bean presence
- ExpressionCondition: reserved, always fails
- ProfileCondition: active profile match
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable

import structlog

from .context import ConditionContext
from .exceptions import UnimplementedFeatureError
from .logic import ExpressionEvaluator, render_value

logger = structlog.get_logger(__name__)

ConditionFunc = Callable[[ConditionContext], bool]

# Replaced by the actual property value in templated expected values
TEMPLATE_MARKER = "$"


class Condition(ABC):
    """A predicate deciding whether something should be activated."""

    @abstractmethod
    def matches(self, context: ConditionContext) -> bool:
        """Return True if the condition holds in the given context."""


@dataclass(frozen=True)
class FunctionCondition(Condition):
    """Condition backed by a callable."""

    fn: ConditionFunc

    def matches(self, context: ConditionContext) -> bool:
        return self.fn(context)


@dataclass(frozen=True)
class NotCondition(Condition):
    """Negation of another condition."""

    condition: Condition

    def matches(self, context: ConditionContext) -> bool:
        return not self.condition.matches(context)


@dataclass(frozen=True)
class PropertyCondition(Condition):
    """Matches when at least one property exists under the prefix."""

    name: str

    def matches(self, context: ConditionContext) -> bool:
        return len(context.properties_with_prefix(self.name)) > 0


@dataclass(frozen=True)
class MissingPropertyCondition(Condition):
    """Matches when no property exists under the prefix."""

    name: str

    def matches(self, context: ConditionContext) -> bool:
        return len(context.properties_with_prefix(self.name)) == 0


@dataclass(frozen=True)
class PropertyValueCondition(Condition):
    """
    Matches a property against an expected value.

    The expected value is compared in one of three ways:
    - Not a string: same type and equal to the property value.
    - String without ``$``: the property value is a string equal to it.
    - String with ``$``: every ``$`` is replaced by the property value's
      text and the result is evaluated; it matches when that evaluates to
      ``true``. For example ``"$>=4"`` with a value of 8 evaluates ``8>=4``.

    A missing property never matches.

    Raises:
        ExpressionEvaluationError: If a templated expression is invalid.
    """

    name: str
    having_value: Any

    def matches(self, context: ConditionContext) -> bool:
        value, found = context.property_value(self.name, None)
        if not found:
            return False

        expected = self.having_value

        if not isinstance(expected, str):
            return type(value) is type(expected) and value == expected

        if TEMPLATE_MARKER not in expected:
            return isinstance(value, str) and value == expected

        expression = expected.replace(TEMPLATE_MARKER, render_value(value))
        result = ExpressionEvaluator().evaluate_text(expression)
        logger.debug(f"Property {self.name}: {expression} -> {render_value(result)}")
        return render_value(result) == "true"


@dataclass(frozen=True)
class BeanCondition(Condition):
    """Matches when the selector resolves to a bean."""

    selector: Any

    def matches(self, context: ConditionContext) -> bool:
        _, found = context.find_bean(self.selector)
        return found


@dataclass(frozen=True)
class MissingBeanCondition(Condition):
    """Matches when the selector does not resolve to a bean."""

    selector: Any

    def matches(self, context: ConditionContext) -> bool:
        _, found = context.find_bean(self.selector)
        return not found


@dataclass(frozen=True)
class ExpressionCondition(Condition):
    """Reserved for general expressions. Evaluating it always fails."""

    expression: str

    def matches(self, context: ConditionContext) -> bool:
        raise UnimplementedFeatureError(
            "Expression conditions are not implemented",
            context={"expression": self.expression},
        )


@dataclass(frozen=True)
class ProfileCondition(Condition):
    """Matches the active profile. An empty profile matches any."""

    profile: str

    def matches(self, context: ConditionContext) -> bool:
        if self.profile and self.profile != context.active_profile():
            return False
        return True
