"""
Declarative Conditions.

Builds a Conditional from a YAML or dict declaration:

```yaml
when:
  - property: cache.enabled
  - and
  - property_value: {name: cache.size, having_value: "$>=128"}
  - or
  - group:
      op: none
      conditions:
        - bean: legacyCache
        - not: {profile: prod}
```

Steps are either ``and`` / ``or`` or a mapping with exactly one condition
kind. ``function`` steps name a predicate from the ``functions`` mapping
passed to build_conditional.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Literal, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .conditional import Conditional
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
from .exceptions import DeclarationError
from .group import ConditionGroup, GroupOp


class PropertyValueDecl(BaseModel):
    """Declaration of a property value match."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    having_value: Any


class GroupDecl(BaseModel):
    """Declaration of a condition group."""

    model_config = ConfigDict(extra="forbid")

    op: GroupOp
    conditions: List["ConditionDecl"] = Field(min_length=1)

    @field_validator("op", mode="before")
    @classmethod
    def _lower_op(cls, v: Any) -> Any:
        return v.lower() if isinstance(v, str) else v


class ConditionDecl(BaseModel):
    """Declaration of a single condition; exactly one kind must be set."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    property_: Optional[str] = Field(default=None, alias="property", min_length=1)
    missing_property: Optional[str] = Field(default=None, min_length=1)
    property_value: Optional[PropertyValueDecl] = None
    bean: Optional[str] = Field(default=None, min_length=1)
    missing_bean: Optional[str] = Field(default=None, min_length=1)
    profile: Optional[str] = None
    expression: Optional[str] = None
    function: Optional[str] = Field(default=None, min_length=1)
    not_: Optional["ConditionDecl"] = Field(default=None, alias="not")
    group: Optional[GroupDecl] = None

    @model_validator(mode="after")
    def _exactly_one_kind(self) -> "ConditionDecl":
        kinds = self.kinds()
        if len(kinds) != 1:
            raise ValueError(
                f"exactly one condition kind must be set, got {len(kinds)}: {kinds}"
            )
        return self

    def kinds(self) -> List[str]:
        """Names of the condition kinds that are set."""
        return [
            name for name in type(self).model_fields
            if getattr(self, name) is not None
        ]


GroupDecl.model_rebuild()
ConditionDecl.model_rebuild()


class ConditionalDecl(BaseModel):
    """Declaration of a whole chain."""

    model_config = ConfigDict(extra="forbid")

    when: List[Union[Literal["and", "or"], ConditionDecl]]

    @field_validator("when", mode="before")
    @classmethod
    def _lower_operators(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [s.lower() if isinstance(s, str) else s for s in v]
        return v


def _to_condition(decl: ConditionDecl, functions: Mapping[str, ConditionFunc]) -> Condition:
    """Turn one validated declaration into a Condition."""
    if decl.property_ is not None:
        return PropertyCondition(decl.property_)
    if decl.missing_property is not None:
        return MissingPropertyCondition(decl.missing_property)
    if decl.property_value is not None:
        return PropertyValueCondition(decl.property_value.name, decl.property_value.having_value)
    if decl.bean is not None:
        return BeanCondition(decl.bean)
    if decl.missing_bean is not None:
        return MissingBeanCondition(decl.missing_bean)
    if decl.profile is not None:
        return ProfileCondition(decl.profile)
    if decl.expression is not None:
        return ExpressionCondition(decl.expression)
    if decl.function is not None:
        if decl.function not in functions:
            raise DeclarationError(
                f"Unknown condition function: {decl.function}",
                context={"function": decl.function, "available": sorted(functions)},
            )
        return FunctionCondition(functions[decl.function])
    if decl.not_ is not None:
        return NotCondition(_to_condition(decl.not_, functions))
    return ConditionGroup(
        decl.group.op,
        [_to_condition(c, functions) for c in decl.group.conditions],
    )


def build_conditional(
    declaration: Union[List[Any], Dict[str, Any]],
    functions: Optional[Mapping[str, ConditionFunc]] = None,
) -> Conditional:
    """
    Build a Conditional from a declaration.

    Args:
        declaration: A list of steps, or a mapping with a ``when`` list.
        functions: Named predicates available to ``function`` steps.

    Returns:
        The built Conditional. Operator placement is checked when it is
        evaluated, not here.

    Raises:
        DeclarationError: If the declaration is malformed or names an
            unknown function.
    """
    if isinstance(declaration, list):
        declaration = {"when": declaration}

    try:
        parsed = ConditionalDecl.model_validate(declaration)
    except ValidationError as e:
        raise DeclarationError(
            f"Invalid condition declaration: {e}",
            context={
                "errors": [
                    {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
                    for err in e.errors()
                ],
            },
        ) from e

    functions = functions or {}
    conditional = Conditional()

    for step in parsed.when:
        if step == "and":
            conditional.and_()
        elif step == "or":
            conditional.or_()
        else:
            conditional.on_condition(_to_condition(step, functions))

    return conditional


def load_conditional(
    path: Union[str, Path],
    functions: Optional[Mapping[str, ConditionFunc]] = None,
) -> Conditional:
    """
    Load a Conditional from a YAML file.

    Raises:
        DeclarationError: If the file is missing, not valid YAML, or holds
            an invalid declaration.
    """
    path = Path(path)
    if not path.exists():
        raise DeclarationError(f"Condition file not found: {path}", context={"path": str(path)})

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise DeclarationError(f"Invalid YAML in {path}: {e}", context={"path": str(path)}) from e

    if not isinstance(data, (list, dict)):
        raise DeclarationError(
            f"Condition file {path} must contain a list or a mapping",
            context={"path": str(path)},
        )

    return build_conditional(data, functions)
