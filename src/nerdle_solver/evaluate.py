"""
evaluate.py

Evaluator for Nerdle-style arithmetic.

Supported syntax:
- digits 0-9
- parentheses
- squares ² and cubes ³ (s and c are accepted as ASCII aliases)
- multiplication * and division /
- addition + and subtraction -

Nerdle allows fractions in the middle of a calculation as long as the final
answer is a whole number, so evaluation is done in two passes: a fast pass on
checked 32-bit integers, and, only when that pass hits a division with a
remainder, a second pass on exact rationals.
"""

from __future__ import annotations

from fractions import Fraction
from typing import Union

INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1

DIGITS = "0123456789"
POWERS = {"²": 2, "s": 2, "³": 3, "c": 3}

# longer literals are out of range before int() ever sees them
_MAX_LITERAL_DIGITS = len(str(INT_MAX))

Number = Union[int, Fraction]


class EvalError(ValueError):
    """An expression or equation that does not evaluate."""


class ArithmeticOverflow(EvalError):
    """Overflow, division by zero, or an out-of-range literal."""


class NonIntegerResult(EvalError):
    """The rational pass finished but the answer is a fraction."""


class EquationSyntaxError(EvalError):
    """Unparseable input or characters left over after a full expression."""


class EquationMismatch(EvalError):
    """Both sides of an equation evaluate, but to different values."""


class _NonIntegerDivision(Exception):
    # internal signal from the integer pass, never escapes evaluate()
    pass


class IntegerBackend:
    """Checked 32-bit integer arithmetic. Inexact division is signalled, not truncated."""

    name = "integer"

    def _checked(self, v: int) -> int:
        if v < INT_MIN or v > INT_MAX:
            raise ArithmeticOverflow(f"{v} does not fit in 32 bits")
        return v

    def from_int(self, i: int) -> int:
        return self._checked(i)

    def add(self, a: int, b: int) -> int:
        return self._checked(a + b)

    def sub(self, a: int, b: int) -> int:
        return self._checked(a - b)

    def mul(self, a: int, b: int) -> int:
        return self._checked(a * b)

    def div(self, a: int, b: int) -> int:
        if b == 0:
            raise ArithmeticOverflow("division by zero")
        if a % b != 0:
            raise _NonIntegerDivision()
        return self._checked(a // b)

    def pow(self, a: int, exponent: int) -> int:
        acc = self.from_int(1)
        for _ in range(exponent):
            acc = self.mul(acc, a)
        return acc

    def to_int(self, v: int) -> int:
        return v


class RationalBackend(IntegerBackend):
    """Exact reduced fractions whose numerator and denominator stay in 32 bits."""

    name = "rational"

    def _checked(self, v: Number) -> Fraction:
        v = Fraction(v)
        if not (INT_MIN <= v.numerator <= INT_MAX) or v.denominator > INT_MAX:
            raise ArithmeticOverflow(f"{v} does not fit in a 32-bit rational")
        return v

    def div(self, a: Fraction, b: Fraction) -> Fraction:
        if b == 0:
            raise ArithmeticOverflow("division by zero")
        return self._checked(a / b)

    def to_int(self, v: Fraction) -> int:
        if v.denominator != 1:
            raise NonIntegerResult(f"result {v} is not a whole number")
        return v.numerator


INTEGER = IntegerBackend()
RATIONAL = RationalBackend()


class _Parser:
    """Recursive descent over one expression, computing as it goes.

    expr     := term (('+'|'-') term)*
    term     := exponent (('*'|'/') exponent)*
    exponent := factor ('²'|'³')*
    factor   := digits | '(' expr ')'
    """

    def __init__(self, text: str, backend: IntegerBackend):
        self.text = text
        self.pos = 0
        self.backend = backend

    def _peek(self) -> str:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1
        if self.pos < len(self.text):
            return self.text[self.pos]
        return ""

    def parse(self) -> Number:
        value = self._expr()
        ch = self._peek()
        if ch:
            raise EquationSyntaxError(f"unexpected {ch!r} at position {self.pos} in {self.text!r}")
        return value

    def _expr(self) -> Number:
        value = self._term()
        while self._peek() in ("+", "-"):
            op = self.text[self.pos]
            self.pos += 1
            rhs = self._term()
            value = self.backend.add(value, rhs) if op == "+" else self.backend.sub(value, rhs)
        return value

    def _term(self) -> Number:
        value = self._exponent()
        while self._peek() in ("*", "/"):
            op = self.text[self.pos]
            self.pos += 1
            rhs = self._exponent()
            value = self.backend.mul(value, rhs) if op == "*" else self.backend.div(value, rhs)
        return value

    def _exponent(self) -> Number:
        value = self._factor()
        while self._peek() in POWERS:
            value = self.backend.pow(value, POWERS[self.text[self.pos]])
            self.pos += 1
        return value

    def _factor(self) -> Number:
        ch = self._peek()
        if ch and ch in DIGITS:
            start = self.pos
            while self.pos < len(self.text) and self.text[self.pos] in DIGITS:
                self.pos += 1
            literal = self.text[start:self.pos]
            if len(literal.lstrip("0")) > _MAX_LITERAL_DIGITS:
                raise ArithmeticOverflow(f"literal {literal[:12]}... does not fit in 32 bits")
            return self.backend.from_int(int(literal))
        if ch == "(":
            self.pos += 1
            value = self._expr()
            if self._peek() != ")":
                raise EquationSyntaxError(f"missing ')' at position {self.pos} in {self.text!r}")
            self.pos += 1
            return value
        if not ch:
            raise EquationSyntaxError(f"unexpected end of input in {self.text!r}")
        raise EquationSyntaxError(f"unexpected {ch!r} at position {self.pos} in {self.text!r}")


def _evaluate_with(expr: str, backend: IntegerBackend) -> int:
    return backend.to_int(_Parser(expr, backend).parse())


def evaluate(expr: str) -> int:
    """Evaluate an arithmetic string to an integer, or raise an EvalError."""
    try:
        return _evaluate_with(expr, INTEGER)
    except _NonIntegerDivision:
        # intermediate fraction: redo the whole thing exactly
        return _evaluate_with(expr, RATIONAL)


def check_equation(equation: str) -> int:
    """
    Validate a full equation like "12+35=47" and return its value.

    The right side must be plain decimal digits with no leading zero, and
    the left side must evaluate to it.
    """
    if equation.count("=") != 1:
        raise EquationSyntaxError(f"{equation!r} must contain exactly one '='")
    left, right = equation.split("=")
    right = right.strip()
    if not right or any(ch not in DIGITS for ch in right):
        raise EquationSyntaxError(f"right side of {equation!r} must be a whole number")
    if len(right) > 1 and right[0] == "0":
        raise EquationSyntaxError(f"right side of {equation!r} has a leading zero")
    value = evaluate(left)
    if str(value) != right:
        raise EquationMismatch(f"{left.strip()} is {value}, not {right}")
    return value
