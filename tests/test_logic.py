"""
Tests for the expression parser and evaluator.
"""

import pytest

from backend.beancond.exceptions import ExpressionEvaluationError
from backend.beancond.logic import (
    ExpressionEvaluator,
    ExpressionParser,
    evaluate_expression,
    render_value,
)


class TestExpressionParser:
    """Tests for ExpressionParser."""

    def test_comparison(self):
        """Test a single comparison."""
        assert ExpressionParser().parse("8>=4") == {">=": [8, 4]}

    def test_precedence(self):
        """Test arithmetic binds tighter than comparison, && tighter than ||."""
        logic = ExpressionParser().parse("1 + 2 * 3 == 7 || false && true")
        assert logic == {
            "or": [
                {"==": [{"+": [1, {"*": [2, 3]}]}, 7]},
                {"and": [False, True]},
            ]
        }

    def test_parentheses(self):
        """Test parentheses override precedence."""
        assert ExpressionParser().parse("(1 + 2) * 3") == {"*": [{"+": [1, 2]}, 3]}

    def test_unary(self):
        """Test unary operators."""
        assert ExpressionParser().parse("!true") == {"!": True}
        assert ExpressionParser().parse("-2") == {"neg": 2}

    def test_literals(self):
        """Test literal kinds."""
        parser = ExpressionParser()
        assert parser.parse("42") == 42
        assert parser.parse("2.5") == 2.5
        assert parser.parse("'a b'") == "a b"
        assert parser.parse('"quote\\"d"') == 'quote"d'
        assert parser.parse("false") is False

    @pytest.mark.parametrize("expression", [
        "",
        "   ",
        "8 >",
        "8 >> 4",
        "(1 + 2",
        "1 + 2)",
        "1 < 2 < 3",
        "abc > 4",
        "8 # 4",
    ])
    def test_invalid(self, expression):
        """Test malformed expressions are rejected."""
        with pytest.raises(ExpressionEvaluationError):
            ExpressionParser().parse(expression)

    def test_error_position(self):
        """Test errors report where they occurred."""
        with pytest.raises(ExpressionEvaluationError) as exc_info:
            ExpressionParser().parse("1 + foo")
        assert exc_info.value.position == 4
        assert "foo" in str(exc_info.value)

    def test_validate(self):
        """Test validate returns a status tuple."""
        parser = ExpressionParser()
        assert parser.validate("1 < 2") == (True, None)
        valid, message = parser.validate("1 <")
        assert valid is False
        assert message


class TestExpressionEvaluator:
    """Tests for ExpressionEvaluator."""

    @pytest.mark.parametrize("expression,expected", [
        ("5>3", True),
        ("5<3", False),
        ("8>=8", True),
        ("8<=7", False),
        ("8==8", True),
        ("8!=8", False),
        ("2.5 < 3", True),
        ("'abc' < 'abd'", True),
        ("'a' + 'b' == 'ab'", True),
        ("true == false", False),
        ("!(1 > 2)", True),
        ("1 < 2 && 2 < 3", True),
        ("1 > 2 || 2 > 3", False),
    ])
    def test_boolean_results(self, expression, expected):
        """Test comparison and logical results."""
        assert evaluate_expression(expression) is expected

    @pytest.mark.parametrize("expression,expected", [
        ("1 + 2 * 3", 7),
        ("7 / 2", 3),
        ("-7 / 2", -3),
        ("7 % 3", 1),
        ("-7 % 3", -1),
        ("7.0 / 2", 3.5),
        ("-(2 - 5)", 3),
    ])
    def test_arithmetic(self, expression, expected):
        """Test arithmetic with integer truncation."""
        assert evaluate_expression(expression) == expected

    @pytest.mark.parametrize("expression", [
        "8 == '8'",
        "true < false",
        "true + 1",
        "1 && true",
        "!1",
        "-'a'",
        "'a' * 2",
        "7.5 % 2",
        "1 / 0",
        "1 % 0",
    ])
    def test_type_errors(self, expression):
        """Test mismatched operands raise instead of coercing."""
        with pytest.raises(ExpressionEvaluationError) as exc_info:
            evaluate_expression(expression)
        assert exc_info.value.expression == expression

    def test_short_circuit_skips_type_error(self):
        """Test || does not evaluate its right side once true."""
        assert evaluate_expression("true || 1 + 'a' == 2") is True

    def test_unknown_operator_node(self):
        """Test hand-built trees with unknown operators are rejected."""
        with pytest.raises(ExpressionEvaluationError):
            ExpressionEvaluator().evaluate({"xor": [True, False]})

    def test_literal_passthrough(self):
        """Test literals evaluate to themselves."""
        assert ExpressionEvaluator().evaluate(3) == 3


class TestRenderValue:
    """Tests for render_value."""

    @pytest.mark.parametrize("value,expected", [
        (True, "true"),
        (False, "false"),
        (None, ""),
        (8, "8"),
        (8.0, "8"),
        (2.5, "2.5"),
        ("text", "text"),
    ])
    def test_render(self, value, expected):
        """Test textual forms used for template substitution."""
        assert render_value(value) == expected
