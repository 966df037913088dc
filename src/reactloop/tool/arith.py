"""Arithmetic expression parser for the calculator tool.

Grammar (numbers, unary sign, four operators, parentheses)::

    expr   := term (("+" | "-") term)*
    term   := factor (("*" | "/") factor)*
    factor := ("+" | "-") factor | NUMBER | "(" expr ")"

Evaluation is exact (``fractions.Fraction``); the result is an ``int`` when
integral and a ``float`` otherwise.
"""

from __future__ import annotations

import re
from fractions import Fraction

from reactloop.errors import ArithmeticSyntaxError

_TOKEN_RE = re.compile(r"\s*(?:(\d+\.\d*|\.\d+|\d+)|(.))", re.DOTALL)

MAX_DEPTH = 100


def tokenize(text: str) -> list[str]:
    """Split an expression into number and operator tokens."""
    tokens: list[str] = []
    pos = 0
    text = text.rstrip()
    while pos < len(text):
        m = _TOKEN_RE.match(text, pos)
        if m is None:
            raise ArithmeticSyntaxError(f"Unexpected input at {pos}")
        number, op = m.groups()
        if number is not None:
            tokens.append(number)
        elif op in "+-*/()":
            tokens.append(op)
        else:
            raise ArithmeticSyntaxError(f"Unexpected character {op!r} at {m.start(2)}")
        pos = m.end()
    return tokens


class _Parser:
    def __init__(self, tokens: list[str]) -> None:
        self.tokens = tokens
        self.pos = 0
        self.depth = 0

    def peek(self) -> str | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def take(self) -> str:
        tok = self.peek()
        if tok is None:
            raise ArithmeticSyntaxError("Unexpected end of expression")
        self.pos += 1
        return tok

    def expr(self) -> Fraction:
        value = self.term()
        while self.peek() in ("+", "-"):
            if self.take() == "+":
                value += self.term()
            else:
                value -= self.term()
        return value

    def term(self) -> Fraction:
        value = self.factor()
        while self.peek() in ("*", "/"):
            op = self.take()
            rhs = self.factor()
            if op == "*":
                value *= rhs
            elif rhs == 0:
                raise ArithmeticSyntaxError("Division by zero")
            else:
                value /= rhs
        return value

    def factor(self) -> Fraction:
        self.depth += 1
        if self.depth > MAX_DEPTH:
            raise ArithmeticSyntaxError("Expression nested too deeply")
        try:
            tok = self.take()
            if tok == "+":
                return self.factor()
            if tok == "-":
                return -self.factor()
            if tok == "(":
                value = self.expr()
                if self.take() != ")":
                    raise ArithmeticSyntaxError("Expected ')'")
                return value
            if tok in "*/)":
                raise ArithmeticSyntaxError(f"Unexpected {tok!r}")
            return Fraction(tok)
        finally:
            self.depth -= 1


def evaluate(text: str) -> int | float:
    """Evaluate an arithmetic expression.

    Raises:
        ArithmeticSyntaxError: On anything outside the grammar, an empty
            expression, division by zero, or a number too large to convert.
    """
    tokens = tokenize(text)
    if not tokens:
        raise ArithmeticSyntaxError("Empty expression")

    parser = _Parser(tokens)
    try:
        value = parser.expr()
        if parser.peek() is not None:
            raise ArithmeticSyntaxError(f"Unexpected {parser.peek()!r}")

        if value.denominator == 1:
            return int(value)
        return float(value)
    except (OverflowError, ValueError) as e:
        raise ArithmeticSyntaxError(f"Number out of range: {e}") from e
