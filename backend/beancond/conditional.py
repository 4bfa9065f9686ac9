"""
Condition Chains.

A Conditional builds a left-to-right chain of conditions joined by OR and
AND. There is no precedence or grouping: each node is evaluated as
``condition op rest_of_chain``, and the walk stops as soon as a node's
result decides the outcome (true before OR, false before AND).

Example:
    cond = (
        Conditional()
        .on_property("cache.enabled")
        .and_()
        .on_missing_bean("legacyCache")
        .or_()
        .on_profile("dev")
    )
    cond.matches(context)

Once handed to a consumer a Conditional must not be mutated. Finished
chains can be evaluated concurrently, builders are not thread safe.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

import structlog

from .conditions import (
    BeanCondition,
    Condition,
    ConditionFunc,
    ExpressionCondition,
    FunctionCondition,
    MissingBeanCondition,
    MissingPropertyCondition,
    NotCondition,
    ProfileCondition,
    PropertyCondition,
    PropertyValueCondition,
)
from .context import ConditionContext
from .exceptions import MalformedChainError, UnknownOperatorError

logger = structlog.get_logger(__name__)


class ChainOp(str, Enum):
    """How a chain node combines with the rest of the chain."""
    OR = "or"
    AND = "and"


class ConditionNode:
    """
    One link of a chain, evaluated as ``condition op next``.

    The operator of the last node is unused.
    """

    def __init__(
        self,
        condition: Optional[Condition] = None,
        op: Optional[ChainOp] = None,
        next: Optional["ConditionNode"] = None,
    ):
        self.condition = condition
        self.op = op
        self.next = next

    def matches(self, context: ConditionContext) -> bool:
        """
        Evaluate the chain starting at this node.

        Raises:
            MalformedChainError: If an operator is not followed by a condition.
            UnknownOperatorError: If a node carries an operator other than OR/AND.
        """
        node = self

        # A node without condition only exists as an empty chain
        if node.condition is None:
            if node.next is not None:
                raise MalformedChainError(
                    "Operator must follow a condition",
                    context={"operator": repr(node.op)},
                )
            return True

        while True:
            if node.next is not None and node.next.condition is None:
                raise MalformedChainError(
                    "Operator must be followed by a condition",
                    context={"operator": repr(node.op), "after": repr(node.condition)},
                )

            result = node.condition.matches(context)

            if node.next is None:
                return result

            if node.op == ChainOp.OR:
                if result:
                    logger.debug(f"Short-circuit OR after {node.condition!r}")
                    return True
            elif node.op == ChainOp.AND:
                if not result:
                    logger.debug(f"Short-circuit AND after {node.condition!r}")
                    return False
            else:
                raise UnknownOperatorError(
                    f"Unknown chain operator: {node.op!r}",
                    context={"operator": repr(node.op)},
                )

            node = node.next


class Conditional(Condition):
    """
    Fluent builder and owner of a condition chain.

    A new Conditional is empty and matches any context. Conditions are
    attached with on_* methods and joined with or_() / and_(); attaching
    two conditions without an operator between them joins them with AND.
    """

    def __init__(self) -> None:
        node = ConditionNode()
        self._head = node
        self._curr = node

    def empty(self) -> bool:
        """Return True if no condition has been attached yet."""
        return self._head is self._curr and self._head.condition is None

    def matches(self, context: ConditionContext) -> bool:
        return self._head.matches(context)

    def _join(self, op: ChainOp) -> "Conditional":
        node = ConditionNode()
        self._curr.op = op
        self._curr.next = node
        self._curr = node
        return self

    def or_(self) -> "Conditional":
        """Join the next condition with OR: ``chain || next``."""
        return self._join(ChainOp.OR)

    def and_(self) -> "Conditional":
        """Join the next condition with AND: ``chain && next``."""
        return self._join(ChainOp.AND)

    def on_condition(self, condition: Condition) -> "Conditional":
        """Attach a condition, joining with AND if one is already pending."""
        if self._curr.condition is not None:
            self.and_()
        self._curr.condition = condition
        return self

    def on_condition_not(self, condition: Condition) -> "Conditional":
        """Attach the negation of a condition."""
        return self.on_condition(NotCondition(condition))

    def on_property(self, name: str) -> "Conditional":
        return self.on_condition(PropertyCondition(name))

    def on_missing_property(self, name: str) -> "Conditional":
        return self.on_condition(MissingPropertyCondition(name))

    def on_property_value(self, name: str, having_value: Any) -> "Conditional":
        return self.on_condition(PropertyValueCondition(name, having_value))

    def on_bean(self, selector: Any) -> "Conditional":
        return self.on_condition(BeanCondition(selector))

    def on_missing_bean(self, selector: Any) -> "Conditional":
        return self.on_condition(MissingBeanCondition(selector))

    def on_expression(self, expression: str) -> "Conditional":
        return self.on_condition(ExpressionCondition(expression))

    def on_matches(self, fn: ConditionFunc) -> "Conditional":
        return self.on_condition(FunctionCondition(fn))

    def on_profile(self, profile: str) -> "Conditional":
        return self.on_condition(ProfileCondition(profile))

    def __repr__(self) -> str:
        parts = []
        node: Optional[ConditionNode] = self._head
        while node is not None:
            parts.append(repr(node.condition) if node.condition is not None else "<pending>")
            if node.next is not None:
                parts.append(node.op.value if isinstance(node.op, ChainOp) else repr(node.op))
            node = node.next
        return f"Conditional({' '.join(parts)})"
