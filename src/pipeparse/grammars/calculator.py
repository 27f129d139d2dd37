"""
A calculator for arithmetic expressions.

Supports `+`, `-`, `*`, `/`, parentheses and unary minus, with the usual precedence. Operators are left associative.

```
evaluate("1 + 2 * (3 - 1)")     # Ok(5)
evaluate("1 / 0")               # Custom("Division by zero.")
```

The grammar only builds an expression tree (`BinaryOperation`, `Negation` and plain numbers).
The tree is computed after the whole input has been parsed, so errors like division by zero don't get mixed up with syntax errors.
"""

from __future__ import annotations
from typing import Callable

from dataclasses import dataclass
import functools
import logging
import operator

from pipeparse import *
from pipeparse.general import identity

logger = logging.getLogger(__name__)

Number = int | float

OPERATORS: dict[str, Callable[[Number, Number], Number]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": operator.truediv,
}


@dataclass(frozen=True)
class BinaryOperation:
    op: str
    left: Expression
    right: Expression

@dataclass(frozen=True)
class Negation:
    operand: Expression

Expression = Number | BinaryOperation | Negation


def compute(tree: Expression) -> Number:
    """Computes the value of an expression tree. Raises `ZeroDivisionError` when dividing by zero."""
    match tree:
        case BinaryOperation(op, left, right):
            return OPERATORS[op](compute(left), compute(right))
        case Negation(operand):
            return -compute(operand)
        case _:
            return tree

def _compute_result(tree: Expression) -> Ok[Number] | ParseFailure:
    try:
        return Ok(compute(tree))
    except ZeroDivisionError:
        return Custom("Division by zero.")

def _fold(first: Expression, operations: list[tuple[str, Expression]]) -> Expression:
    tree = first
    for op, operand in operations:
        tree = BinaryOperation(op, tree, operand)
    return tree

def _operator(*symbols: str) -> Parser[str]:
    return one_of([string(s) for s in symbols])

def _chain(operand: Parser[Expression], *symbols: str) -> Parser[Expression]:
    """`operand`s separated by any of the operator `symbols`, folded from the left."""
    operation = (
        succeed2(lambda op, value: (op, value))
        .drop(spaces)
        .keep(_operator(*symbols))
        .drop(spaces)
        .keep(operand)
    )
    return (
        succeed2(_fold)
        .keep(operand)
        .keep(many(operation, succeed(None)))
    )

def factor() -> Parser[Expression]:
    """A number, a parenthesized expression or a negated factor."""
    parenthesized = (
        succeed(identity)
        .drop(string("("))
        .drop(spaces)
        .keep(lazy(expression))
        .drop(spaces)
        .drop(string(")"))
    )
    negated = succeed(Negation).drop(string("-")).keep(lazy(factor))
    return one_of([float_number, integer_number, parenthesized, negated])

def term() -> Parser[Expression]:
    return _chain(factor(), "*", "/")

@functools.cache
def expression() -> Parser[Expression]:
    return _chain(term(), "+", "-")

@functools.cache
def calculation() -> Parser[Number]:
    """A single expression spanning the whole input, optionally surrounded by spaces, computed."""
    return (
        succeed(identity)
        .drop(spaces)
        .keep(expression())
        .drop(spaces)
        .drop(eof)
        .then(lambda tree: from_result(_compute_result(tree)))
    )

def evaluate(text: str) -> Ok[Number] | ParseFailure:
    """Evaluates `text`, which must contain exactly one expression."""
    logger.debug("Evaluating %r", text)
    return run(text, calculation())
