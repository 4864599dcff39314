"""Evaluation of integer expressions in ``#if`` directives."""

from __future__ import annotations

import string
import warnings

from ncc16.macros import MacroTable

_DIGITS = frozenset(string.digits)
_HEX_DIGITS = frozenset(string.hexdigits)
_IDENT_START = frozenset(string.ascii_letters + "_")
_IDENT_CHARS = frozenset(string.ascii_letters + string.digits + "_")
_SPACE = frozenset(" \t\n\r\v\f")

_TYPE_SIZES = {
    "char": 1,
    "unsigned char": 1,
    "short": 2,
    "unsigned short": 2,
    "int": 2,
    "unsigned int": 2,
    "long": 2,
    "unsigned long": 2,
}


class ExpressionError(ValueError):
    """Raised for a malformed or unevaluable preprocessor expression."""


def _wrap(value: int) -> int:
    """Reduce a value to a signed 32-bit integer."""
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _atoi(text: str) -> int:
    """Leading integer of ``text``: optional spaces and sign, then digits."""
    stripped = text.lstrip(" \t\n\r\v\f")
    sign = 1
    if stripped[:1] in ("+", "-"):
        sign = -1 if stripped[0] == "-" else 1
        stripped = stripped[1:]
    digits = ""
    for char in stripped:
        if char not in _DIGITS:
            break
        digits += char
    return _wrap(sign * int(digits)) if digits else 0


def sizeof_type(type_name: str) -> int:
    """Size in bytes of a type name on the 16-bit target."""
    size = _TYPE_SIZES.get(type_name)
    if size is not None:
        return size
    if "*" in type_name:
        return 2
    if type_name == "void":
        return 0
    warnings.warn(
        f"Unknown type '{type_name}' in sizeof(), assuming 2 bytes",
        stacklevel=2,
    )
    return 2


def _truncating_div(left: int, right: int) -> int:
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


def _truncating_mod(left: int, right: int) -> int:
    return left - right * _truncating_div(left, right)


class _Evaluator:
    def __init__(self, text: str, macros: MacroTable | None) -> None:
        self.text = text
        self.pos = 0
        self.macros = macros

    def peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        return self.text[index] if index < len(self.text) else ""

    def skip_space(self) -> None:
        while self.peek() and self.peek() in _SPACE:
            self.pos += 1

    def starts_with(self, word: str) -> bool:
        return self.text.startswith(word, self.pos)

    def identifier(self) -> str:
        start = self.pos
        while self.peek() and self.peek() in _IDENT_CHARS:
            self.pos += 1
        return self.text[start:self.pos]

    def expression(self) -> int:
        return self.conditional()

    def conditional(self) -> int:
        condition = self.logical_or()
        self.skip_space()
        if self.peek() != "?":
            return condition
        self.pos += 1
        true_value = self.expression()
        self.skip_space()
        if self.peek() != ":":
            raise ExpressionError("Missing ':' in conditional expression")
        self.pos += 1
        false_value = self.conditional()
        return true_value if condition else false_value

    def logical_or(self) -> int:
        left = self.logical_and()
        while True:
            self.skip_space()
            if self.starts_with("||"):
                self.pos += 2
                right = self.logical_and()
                left = int(bool(left) or bool(right))
            else:
                return left

    def logical_and(self) -> int:
        left = self.bit_or()
        while True:
            self.skip_space()
            if self.starts_with("&&"):
                self.pos += 2
                right = self.bit_or()
                left = int(bool(left) and bool(right))
            else:
                return left

    def bit_or(self) -> int:
        left = self.bit_xor()
        while True:
            self.skip_space()
            if self.peek() == "|" and self.peek(1) != "|":
                self.pos += 1
                left = _wrap(left | self.bit_xor())
            else:
                return left

    def bit_xor(self) -> int:
        left = self.bit_and()
        while True:
            self.skip_space()
            if self.peek() == "^":
                self.pos += 1
                left = _wrap(left ^ self.bit_and())
            else:
                return left

    def bit_and(self) -> int:
        left = self.equality()
        while True:
            self.skip_space()
            if self.peek() == "&" and self.peek(1) != "&":
                self.pos += 1
                left = _wrap(left & self.equality())
            else:
                return left

    def equality(self) -> int:
        left = self.relational()
        while True:
            self.skip_space()
            if self.starts_with("=="):
                self.pos += 2
                left = int(left == self.relational())
            elif self.starts_with("!="):
                self.pos += 2
                left = int(left != self.relational())
            else:
                return left

    def relational(self) -> int:
        left = self.shift()
        while True:
            self.skip_space()
            if self.starts_with("<="):
                self.pos += 2
                left = int(left <= self.shift())
            elif self.starts_with(">="):
                self.pos += 2
                left = int(left >= self.shift())
            elif self.peek() == "<" and self.peek(1) != "<":
                self.pos += 1
                left = int(left < self.shift())
            elif self.peek() == ">" and self.peek(1) != ">":
                self.pos += 1
                left = int(left > self.shift())
            else:
                return left

    def shift(self) -> int:
        left = self.additive()
        while True:
            self.skip_space()
            if self.starts_with("<<"):
                self.pos += 2
                left = _wrap(left << (self.additive() & 31))
            elif self.starts_with(">>"):
                self.pos += 2
                left = _wrap(left >> (self.additive() & 31))
            else:
                return left

    def additive(self) -> int:
        left = self.term()
        while True:
            self.skip_space()
            if self.peek() == "+":
                self.pos += 1
                left = _wrap(left + self.term())
            elif self.peek() == "-":
                self.pos += 1
                left = _wrap(left - self.term())
            else:
                return left

    def term(self) -> int:
        left = self.factor()
        while True:
            self.skip_space()
            op = self.peek()
            if op == "*":
                self.pos += 1
                left = _wrap(left * self.factor())
            elif op in ("/", "%"):
                self.pos += 1
                right = self.factor()
                if right == 0:
                    kind = "Division" if op == "/" else "Modulo"
                    raise ExpressionError(
                        f"{kind} by zero in preprocessor expression")
                if op == "/":
                    left = _wrap(_truncating_div(left, right))
                else:
                    left = _wrap(_truncating_mod(left, right))
            else:
                return left

    def keyword_follows(self, word: str) -> bool:
        if not self.starts_with(word):
            return False
        after = self.peek(len(word))
        return after == "(" or (after != "" and after in _SPACE)

    def factor(self) -> int:
        self.skip_space()
        char = self.peek()
        if char == "(":
            self.pos += 1
            value = self.expression()
            self.skip_space()
            if self.peek() != ")":
                raise ExpressionError(
                    "Missing closing parenthesis in expression")
            self.pos += 1
            return value
        if char and char in _DIGITS:
            return self.number()
        if self.keyword_follows("defined"):
            self.pos += len("defined")
            return self.defined()
        if self.keyword_follows("sizeof"):
            self.pos += len("sizeof")
            return self.sizeof()
        if char and char in _IDENT_START:
            name = self.identifier()
            value = self.macros.value(name) if self.macros else None
            return _atoi(value) if value is not None else 0
        if char == "!":
            self.pos += 1
            return int(not self.factor())
        if char == "~":
            self.pos += 1
            return _wrap(~self.factor())
        if char == "-":
            self.pos += 1
            return _wrap(-self.factor())
        shown = char if char else "end of expression"
        raise ExpressionError(
            f"Unexpected character in preprocessor expression: {shown}")

    def number(self) -> int:
        base, digits = 10, _DIGITS
        if self.peek() == "0" and self.peek(1) in ("x", "X"):
            self.pos += 2
            base, digits = 16, _HEX_DIGITS
        start = self.pos
        while self.peek() and self.peek() in digits:
            self.pos += 1
        text = self.text[start:self.pos]
        return _wrap(int(text, base)) if text else 0

    def defined(self) -> int:
        self.skip_space()
        parenthesised = self.peek() == "("
        if parenthesised:
            self.pos += 1
            self.skip_space()
        name = self.identifier()
        if parenthesised:
            self.skip_space()
            if self.peek() != ")":
                raise ExpressionError(
                    "Missing closing parenthesis in defined() operator")
            self.pos += 1
        return int(self.macros is not None and self.macros.is_defined(name))

    def sizeof(self) -> int:
        self.skip_space()
        if self.peek() != "(":
            raise ExpressionError("Expected opening parenthesis after sizeof")
        self.pos += 1
        self.skip_space()
        end = self.text.find(")", self.pos)
        if end < 0:
            raise ExpressionError(
                "Missing closing parenthesis in sizeof() operator")
        type_name = self.text[self.pos:end]
        self.pos = end + 1
        return sizeof_type(type_name)


def evaluate(expr: str, macros: MacroTable | None = None) -> int:
    """Evaluate an ``#if`` expression as a signed 32-bit integer.

    Identifiers are replaced by the leading integer of their macro value,
    or 0 when undefined. Text after a complete expression is ignored.
    """
    return _Evaluator(expr, macros).expression()