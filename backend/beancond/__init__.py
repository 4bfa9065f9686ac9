"""
beancond: conditional activation of beans.

This package decides whether a declared bean or optional argument is
activated, based on configuration properties, registered beans and the
active profile of a runtime context.
"""

from .conditions import (
    Condition,
    ConditionFunc,
    FunctionCondition,
    NotCondition,
    PropertyCondition,
    MissingPropertyCondition,
    PropertyValueCondition,
    BeanCondition,
    MissingBeanCondition,
    ExpressionCondition,
    ProfileCondition,
)
from .group import ConditionGroup, GroupOp
from .conditional import ChainOp, ConditionNode, Conditional
from .context import ConditionContext, StaticContext
from .properties import load_properties
from .declarative import build_conditional, load_conditional
from .exceptions import (
    ConditionError,
    MalformedChainError,
    EmptyGroupError,
    UnknownOperatorError,
    InvalidConditionError,
    UnimplementedFeatureError,
    ExpressionEvaluationError,
    PropertySourceError,
    DeclarationError,
)

__version__ = "1.0.0"
__all__ = [
    # Primitives
    "Condition",
    "ConditionFunc",
    "FunctionCondition",
    "NotCondition",
    "PropertyCondition",
    "MissingPropertyCondition",
    "PropertyValueCondition",
    "BeanCondition",
    "MissingBeanCondition",
    "ExpressionCondition",
    "ProfileCondition",
    # Groups
    "ConditionGroup",
    "GroupOp",
    # Chains
    "ChainOp",
    "ConditionNode",
    "Conditional",
    # Context
    "ConditionContext",
    "StaticContext",
    "load_properties",
    # Declarative
    "build_conditional",
    "load_conditional",
    # Errors
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
