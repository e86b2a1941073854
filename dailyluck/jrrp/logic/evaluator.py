# dailyluck/jrrp/logic/evaluator.py
"""
Integer evaluator for the expressions the generator produces.

Grammar: non-negative integer literals, ``+ - * / & | ^ << >>`` and
parentheses. Infix tokens go through a shunting-yard pass into RPN, then
a single-stack RPN evaluation. ``/`` is floor division.

Inputs are always self-generated, so anything malformed is a generator
bug and raises ExpressionError instead of being recovered.
"""
from __future__ import annotations

import re
from typing import Callable, Dict, List

# Higher binds tighter; every operator is left-associative.
PRECEDENCE: Dict[str, int] = {
    "<<": 5, ">>": 5,
    "*": 4, "/": 4,
    "+": 3, "-": 3,
    "&": 2, "|": 2, "^": 2,
}

_TOKEN_SPLIT_RE = re.compile(r"(<<|>>|[-+*/()&|^<>])")


class ExpressionError(ValueError):
    """A self-generated expression could not be evaluated."""


def _divide(a: int, b: int) -> int:
    if b == 0:
        raise ExpressionError("division by zero")
    return a // b


def _shift_left(a: int, b: int) -> int:
    if b < 0:
        raise ExpressionError("negative shift count")
    return a << b


def _shift_right(a: int, b: int) -> int:
    if b < 0:
        raise ExpressionError("negative shift count")
    return a >> b


BINARY_OPS: Dict[str, Callable[[int, int], int]] = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "*": lambda a, b: a * b,
    "/": _divide,
    "&": lambda a, b: a & b,
    "|": lambda a, b: a | b,
    "^": lambda a, b: a ^ b,
    "<<": _shift_left,
    ">>": _shift_right,
}


def _is_number(tok: str) -> bool:
    return tok.isascii() and tok.isdigit()


def tokenize(expr: str) -> List[str]:
    """Split around operators and parentheses, drop empty tokens."""
    return _TOKEN_SPLIT_RE.sub(r" \1 ", expr).split()


def to_rpn(tokens: List[str]) -> List[str]:
    output: List[str] = []
    stack: List[str] = []
    for tok in tokens:
        if _is_number(tok):
            output.append(tok)
        elif tok == "(":
            stack.append(tok)
        elif tok == ")":
            while stack and stack[-1] != "(":
                output.append(stack.pop())
            if not stack:
                raise ExpressionError("unbalanced ')'")
            stack.pop()
        elif tok in PRECEDENCE:
            while stack and stack[-1] != "(" and PRECEDENCE[stack[-1]] >= PRECEDENCE[tok]:
                output.append(stack.pop())
            stack.append(tok)
        else:
            raise ExpressionError(f"unknown token {tok!r}")
    while stack:
        tok = stack.pop()
        if tok == "(":
            raise ExpressionError("unbalanced '('")
        output.append(tok)
    return output


def eval_rpn(rpn: List[str]) -> int:
    stack: List[int] = []
    for tok in rpn:
        if _is_number(tok):
            stack.append(int(tok))
            continue
        op = BINARY_OPS.get(tok)
        if op is None:
            raise ExpressionError(f"unknown operator {tok!r}")
        if len(stack) < 2:
            raise ExpressionError(f"operator {tok!r} is missing an operand")
        b = stack.pop()
        a = stack.pop()
        stack.append(op(a, b))
    if len(stack) != 1:
        raise ExpressionError(f"expression left {len(stack)} values on the stack")
    return stack[0]


def evaluate(expr: str) -> int:
    return eval_rpn(to_rpn(tokenize(expr)))
