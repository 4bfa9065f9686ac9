"""
Expression Parser for templated property values.

Parses the small expression language used after template substitution
into JSON Logic format.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from ..exceptions import ExpressionEvaluationError


@dataclass
class Token:
    """A lexical token."""
    kind: str
    value: Any
    position: int


class ExpressionParser:
    """
    Parser for substituted property-value expressions.

    Converts expressions like:
        "8>=4"
        "(8 % 2 == 0) && 8 < 16"

    Into JSON Logic format:
        {">=": [8, 4]}
        {"and": [{"==": [{"%": [8, 2]}, 0]}, {"<": [8, 16]}]}
    """

    # Lowest to highest precedence
    LOGICAL_OPS = {
        "||": "or",
        "&&": "and",
    }

    COMPARISON_OPS = ("==", "!=", "<=", ">=", "<", ">")

    ADDITIVE_OPS = ("+", "-")

    MULTIPLICATIVE_OPS = ("*", "/", "%")

    UNARY_OPS = {
        "!": "!",
        "-": "neg",
        "+": "pos",
    }

    LITERALS = {
        "true": True,
        "false": False,
    }

    _TOKEN_RE = re.compile(
        r"""
        (?P<ws>\s+)
        |(?P<float>\d+\.\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?|\d+[eE][+-]?\d+)
        |(?P<int>\d+)
        |(?P<string>"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*')
        |(?P<ident>[A-Za-z_][A-Za-z0-9_]*)
        |(?P<op>\|\||&&|==|!=|<=|>=|[<>!+\-*/%()])
        """,
        re.VERBOSE,
    )

    def parse(self, expression: str) -> Any:
        """
        Parse an expression into JSON Logic.

        Args:
            expression: The expression to parse.

        Returns:
            JSON Logic representation, or a bare literal.

        Raises:
            ExpressionEvaluationError: If the expression is not well formed.
        """
        if not isinstance(expression, str):
            raise ExpressionEvaluationError(
                f"Expected string expression, got {type(expression).__name__}",
                expression=repr(expression),
            )

        if not expression.strip():
            raise ExpressionEvaluationError("Empty expression", expression=expression)

        self._expression = expression
        self._tokens = self._tokenize(expression)
        self._index = 0

        logic = self._parse_or()

        token = self._peek()
        if token is not None:
            raise self._error(f"Unexpected token '{token.value}'", token.position)

        return logic

    def _tokenize(self, expression: str) -> List[Token]:
        """Split an expression into tokens."""
        tokens = []
        pos = 0

        while pos < len(expression):
            match = self._TOKEN_RE.match(expression, pos)
            if match is None:
                raise ExpressionEvaluationError(
                    f"Invalid character '{expression[pos]}'",
                    expression=expression,
                    position=pos,
                )

            kind = match.lastgroup
            text = match.group(kind)

            if kind == "float":
                tokens.append(Token("literal", float(text), pos))
            elif kind == "int":
                tokens.append(Token("literal", int(text), pos))
            elif kind == "string":
                tokens.append(Token("literal", self._unquote(text), pos))
            elif kind == "ident":
                if text not in self.LITERALS:
                    raise ExpressionEvaluationError(
                        f"Undefined identifier: {text}",
                        expression=expression,
                        position=pos,
                    )
                tokens.append(Token("literal", self.LITERALS[text], pos))
            elif kind == "op":
                tokens.append(Token("op", text, pos))

            pos = match.end()

        return tokens

    @staticmethod
    def _unquote(text: str) -> str:
        """Strip quotes and resolve backslash escapes."""
        body = text[1:-1]
        return re.sub(r"\\(.)", lambda m: {"n": "\n", "t": "\t"}.get(m.group(1), m.group(1)), body)

    def _peek(self) -> Optional[Token]:
        if self._index < len(self._tokens):
            return self._tokens[self._index]
        return None

    def _accept(self, *ops: str) -> Optional[Token]:
        """Consume the next token if it is one of the given operators."""
        token = self._peek()
        if token is not None and token.kind == "op" and token.value in ops:
            self._index += 1
            return token
        return None

    def _error(self, message: str, position: int) -> ExpressionEvaluationError:
        return ExpressionEvaluationError(message, expression=self._expression, position=position)

    def _parse_or(self) -> Any:
        """Parse || expressions."""
        parts = [self._parse_and()]
        while self._accept("||"):
            parts.append(self._parse_and())
        if len(parts) > 1:
            return {self.LOGICAL_OPS["||"]: parts}
        return parts[0]

    def _parse_and(self) -> Any:
        """Parse && expressions."""
        parts = [self._parse_comparison()]
        while self._accept("&&"):
            parts.append(self._parse_comparison())
        if len(parts) > 1:
            return {self.LOGICAL_OPS["&&"]: parts}
        return parts[0]

    def _parse_comparison(self) -> Any:
        """Parse a single, non-associative comparison."""
        left = self._parse_additive()
        token = self._accept(*self.COMPARISON_OPS)
        if token is None:
            return left

        right = self._parse_additive()
        if self._accept(*self.COMPARISON_OPS):
            raise self._error("Comparisons cannot be chained", token.position)
        return {token.value: [left, right]}

    def _parse_additive(self) -> Any:
        left = self._parse_multiplicative()
        while True:
            token = self._accept(*self.ADDITIVE_OPS)
            if token is None:
                return left
            left = {token.value: [left, self._parse_multiplicative()]}

    def _parse_multiplicative(self) -> Any:
        left = self._parse_unary()
        while True:
            token = self._accept(*self.MULTIPLICATIVE_OPS)
            if token is None:
                return left
            left = {token.value: [left, self._parse_unary()]}

    def _parse_unary(self) -> Any:
        token = self._accept(*self.UNARY_OPS)
        if token is not None:
            return {self.UNARY_OPS[token.value]: self._parse_unary()}
        return self._parse_value()

    def _parse_value(self) -> Any:
        """Parse a literal or a parenthesized expression."""
        token = self._peek()

        if token is None:
            raise self._error("Unexpected end of expression", len(self._expression))

        if token.kind == "literal":
            self._index += 1
            return token.value

        if self._accept("("):
            inner = self._parse_or()
            if not self._accept(")"):
                raise self._error("Missing closing parenthesis", token.position)
            return inner

        raise self._error(f"Unexpected token '{token.value}'", token.position)

    def validate(self, expression: str) -> Tuple[bool, Optional[str]]:
        """
        Validate an expression without evaluating it.

        Returns:
            Tuple of (is_valid, error_message).
        """
        try:
            self.parse(expression)
            return True, None
        except ExpressionEvaluationError as e:
            return False, str(e)

