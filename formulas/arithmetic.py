"""Restricted arithmetic expression parser.

Formulas are authored by admins and must never reach a general-purpose code
execution path. After variable substitution the remaining text is parsed by a
small recursive-descent parser that accepts only:

- decimal numbers (`12`, `4.87`, `.5`),
- binary `+ - * /` and unary `+ -`,
- parentheses,
- the functions `MAX`, `MIN`, `ROUND` and `ABS`.

Grammar::

    expr    := term (("+" | "-") term)*
    term    := unary (("*" | "/") unary)*
    unary   := ("+" | "-") unary | primary
    primary := NUMBER | NAME "(" expr ("," expr)* ")" | "(" expr ")"

Division by zero yields a non-finite float instead of raising so callers can
map it to "not applicable".
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Final


class FormulaSyntaxError(ValueError):
    """Raised when substituted formula text is not valid arithmetic."""


@dataclass(frozen=True, slots=True)
class _Token:
    kind: str
    text: str
    position: int


def _max(*args: float) -> float:
    finite = [arg for arg in args if not math.isnan(arg)]
    return max(finite) if finite else math.nan


def _min(*args: float) -> float:
    finite = [arg for arg in args if not math.isnan(arg)]
    return min(finite) if finite else math.nan


def _round(value: float) -> float:
    if not math.isfinite(value):
        return value
    return float(math.floor(abs(value) + 0.5)) * (1 if value >= 0 else -1)


FUNCTIONS: Final[dict[str, tuple[Callable[..., float], int | None]]] = {
    "MAX": (_max, None),
    "MIN": (_min, None),
    "ROUND": (_round, 1),
    "ABS": (abs, 1),
}


@dataclass(frozen=True, slots=True)
class Number:
    value: float


@dataclass(frozen=True, slots=True)
class UnaryOp:
    op: str
    operand: Node


@dataclass(frozen=True, slots=True)
class BinaryOp:
    op: str
    left: Node
    right: Node


@dataclass(frozen=True, slots=True)
class Call:
    name: str
    args: tuple[Node, ...]


Node = Number | UnaryOp | BinaryOp | Call


def tokenize(text: str) -> list[_Token]:
    """Split arithmetic text into tokens, rejecting anything else."""

    tokens: list[_Token] = []
    i = 0
    length = len(text)
    while i < length:
        char = text[i]
        if char.isspace():
            i += 1
            continue
        if char.isdigit() or char == ".":
            start = i
            seen_dot = False
            while i < length and (text[i].isdigit() or text[i] == "."):
                if text[i] == ".":
                    if seen_dot:
                        raise FormulaSyntaxError(f"Invalid number at position {start + 1}.")
                    seen_dot = True
                i += 1
            literal = text[start:i]
            if literal == ".":
                raise FormulaSyntaxError(f"Invalid number at position {start + 1}.")
            tokens.append(_Token("number", literal, start))
            continue
        if char.isalpha():
            start = i
            while i < length and (text[i].isalnum() or text[i] == "_"):
                i += 1
            tokens.append(_Token("name", text[start:i], start))
            continue
        if char in "+-*/(),":
            tokens.append(_Token(char, char, i))
            i += 1
            continue
        raise FormulaSyntaxError(f"Unexpected character {char!r} at position {i + 1}.")
    return tokens


def check_parentheses(text: str) -> None:
    """Raise FormulaSyntaxError when parentheses are unbalanced."""

    depth = 0
    for char in text:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                raise FormulaSyntaxError("Unbalanced parentheses: closing parenthesis without opening.")
    if depth > 0:
        raise FormulaSyntaxError("Unbalanced parentheses: unclosed opening parenthesis.")


class _Parser:
    """Recursive-descent parser over a token list."""

    def __init__(self, tokens: list[_Token]) -> None:
        self._tokens = tokens
        self._pos = 0

    def parse(self) -> Node:
        if not self._tokens:
            raise FormulaSyntaxError("Formula is empty.")
        node = self._expr()
        if self._pos < len(self._tokens):
            token = self._tokens[self._pos]
            raise FormulaSyntaxError(f"Unexpected {token.text!r} at position {token.position + 1}.")
        return node

    def _peek(self) -> _Token | None:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def _next(self) -> _Token:
        token = self._peek()
        if token is None:
            raise FormulaSyntaxError("Unexpected end of formula.")
        self._pos += 1
        return token

    def _expect(self, kind: str) -> None:
        token = self._next()
        if token.kind != kind:
            raise FormulaSyntaxError(f"Expected {kind!r} at position {token.position + 1}, got {token.text!r}.")

    def _expr(self) -> Node:
        node = self._term()
        while (token := self._peek()) is not None and token.kind in ("+", "-"):
            self._pos += 1
            node = BinaryOp(token.kind, node, self._term())
        return node

    def _term(self) -> Node:
        node = self._unary()
        while (token := self._peek()) is not None and token.kind in ("*", "/"):
            self._pos += 1
            node = BinaryOp(token.kind, node, self._unary())
        return node

    def _unary(self) -> Node:
        token = self._peek()
        if token is not None and token.kind in ("+", "-"):
            self._pos += 1
            return UnaryOp(token.kind, self._unary())
        return self._primary()

    def _primary(self) -> Node:
        token = self._next()
        if token.kind == "number":
            return Number(float(token.text))
        if token.kind == "(":
            node = self._expr()
            self._expect(")")
            return node
        if token.kind == "name":
            name = token.text.upper()
            if name not in FUNCTIONS:
                raise FormulaSyntaxError(f"Unknown function {token.text!r} at position {token.position + 1}.")
            self._expect("(")
            args = [self._expr()]
            while (sep := self._peek()) is not None and sep.kind == ",":
                self._pos += 1
                args.append(self._expr())
            self._expect(")")
            arity = FUNCTIONS[name][1]
            if arity is not None and len(args) != arity:
                raise FormulaSyntaxError(f"{name} expects {arity} argument(s), got {len(args)}.")
            return Call(name, tuple(args))
        raise FormulaSyntaxError(f"Unexpected {token.text!r} at position {token.position + 1}.")


def parse_expression(text: str) -> Node:
    """Parse arithmetic text into an expression tree.

    Raises:
        FormulaSyntaxError: For unbalanced parentheses, unexpected characters or
            tokens, unknown functions, or an empty expression.
    """

    check_parentheses(text)
    return _Parser(tokenize(text)).parse()


def evaluate_node(node: Node) -> float:
    """Evaluate an expression tree to a float (possibly non-finite)."""

    if isinstance(node, Number):
        return node.value
    if isinstance(node, UnaryOp):
        operand = evaluate_node(node.operand)
        return -operand if node.op == "-" else operand
    if isinstance(node, BinaryOp):
        left = evaluate_node(node.left)
        right = evaluate_node(node.right)
        if node.op == "+":
            return left + right
        if node.op == "-":
            return left - right
        if node.op == "*":
            return left * right
        if right == 0:
            if left == 0 or math.isnan(left):
                return math.nan
            return math.copysign(math.inf, left)
        return left / right
    if isinstance(node, Call):
        func, _arity = FUNCTIONS[node.name]
        return float(func(*(evaluate_node(arg) for arg in node.args)))
    raise TypeError(f"Unsupported node: {node!r}")


def evaluate_expression(text: str) -> float:
    """Parse and evaluate arithmetic text."""

    return evaluate_node(parse_expression(text))
