"""Textual forms of parsed expressions.

``to_infix`` re-prints an expression as source text: parenthesised groups
come from ``Grouping`` nodes, so re-parsing the output yields an equal
tree. ``to_prefix`` is the fully parenthesised debug form used by the
``parse`` command.
"""

from __future__ import annotations

import math

from lox.ast_nodes import (
    Assign,
    Binary,
    Expr,
    Grouping,
    Literal,
    Logical,
    Unary,
    Variable,
)
from lox.values import stringify

_OVERFLOW_LITERAL = "1" + "0" * 309


def to_infix(expr: Expr) -> str:
    if isinstance(expr, Literal):
        if isinstance(expr.value, str):
            return f'"{expr.value}"'
        if isinstance(expr.value, float) and math.isinf(expr.value):
            # Only an overflowing literal parses to inf; this lexes back to it
            return _OVERFLOW_LITERAL
        return stringify(expr.value)
    if isinstance(expr, Grouping):
        return f"({to_infix(expr.expression)})"
    if isinstance(expr, Unary):
        return f"{expr.op}{to_infix(expr.operand)}"
    if isinstance(expr, (Binary, Logical)):
        return f"{to_infix(expr.left)} {expr.op} {to_infix(expr.right)}"
    if isinstance(expr, Variable):
        return expr.name
    if isinstance(expr, Assign):
        return f"{expr.name} = {to_infix(expr.value)}"
    raise TypeError(f"unknown expression node: {type(expr).__name__}")


def to_prefix(expr: Expr) -> str:
    if isinstance(expr, Literal):
        return stringify(expr.value)
    if isinstance(expr, Grouping):
        return f"(group {to_prefix(expr.expression)})"
    if isinstance(expr, Unary):
        return f"({expr.op} {to_prefix(expr.operand)})"
    if isinstance(expr, (Binary, Logical)):
        return f"({expr.op} {to_prefix(expr.left)} {to_prefix(expr.right)})"
    if isinstance(expr, Variable):
        return expr.name
    if isinstance(expr, Assign):
        return f"(= {expr.name} {to_prefix(expr.value)})"
    raise TypeError(f"unknown expression node: {type(expr).__name__}")
