"""
Logic engine for templated property values.

Provides expression parsing and evaluation for PropertyValue templates.
"""

from .parser import ExpressionParser
from .evaluator import ExpressionEvaluator, evaluate_expression, render_value

__all__ = ["ExpressionParser", "ExpressionEvaluator", "evaluate_expression", "render_value"]
