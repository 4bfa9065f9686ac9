"""
Condition Groups.

A group applies one operator (ANY, ALL or NONE) to a fixed set of
conditions. Unlike a chain it has no ordering semantics beyond stopping
early once the outcome is known.
"""

from __future__ import annotations

from collections import abc
from enum import Enum
from typing import Iterable, Tuple, Union

from .conditions import Condition
from .context import ConditionContext
from .exceptions import EmptyGroupError, InvalidConditionError, UnknownOperatorError


class GroupOp(str, Enum):
    """How a group combines its members."""
    ANY = "any"    # at least one matches
    ALL = "all"    # every one matches
    NONE = "none"  # no one matches


class ConditionGroup(Condition):
    """
    Condition combining several conditions with one operator.

    Raises:
        EmptyGroupError: If constructed without conditions.
        InvalidConditionError: If a member is not a Condition.
        UnknownOperatorError: If the operator is not a GroupOp.
    """

    def __init__(self, op: Union[GroupOp, str], *conditions: Union[Condition, Iterable[Condition]]):
        """
        Initialize the group.

        Args:
            op: A GroupOp or its value ("any", "all", "none").
            conditions: Member conditions, given individually or as one iterable.
        """
        if len(conditions) == 1 and isinstance(conditions[0], abc.Iterable) and not isinstance(conditions[0], str):
            conditions = tuple(conditions[0])

        if not conditions:
            raise EmptyGroupError(
                "Condition group needs at least one condition",
                context={"operator": repr(op)},
            )

        for index, member in enumerate(conditions):
            if not isinstance(member, Condition):
                raise InvalidConditionError(
                    f"Group member {index} is not a Condition: {type(member).__name__}",
                    context={"index": index, "type": type(member).__name__},
                )

        try:
            self.op = GroupOp(op.lower() if isinstance(op, str) else op)
        except ValueError:
            raise UnknownOperatorError(
                f"Unknown group operator: {op!r}",
                context={"operator": repr(op)},
            ) from None

        self.conditions: Tuple[Condition, ...] = tuple(conditions)

    def matches(self, context: ConditionContext) -> bool:
        if self.op is GroupOp.ANY:
            return any(c.matches(context) for c in self.conditions)

        if self.op is GroupOp.ALL:
            return all(c.matches(context) for c in self.conditions)

        if self.op is GroupOp.NONE:
            return not any(c.matches(context) for c in self.conditions)

        raise UnknownOperatorError(f"Unknown group operator: {self.op!r}")

    def __repr__(self) -> str:
        return f"ConditionGroup({self.op.value}, {list(self.conditions)!r})"
