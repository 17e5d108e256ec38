"""AST node definitions for the Lox language.

Nodes are immutable and own their children. Spans are excluded from
equality so trees built from different source text compare structurally.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from lox.source import Span
from lox.values import Value


def _span():
    return field(default=None, compare=False, repr=False)


# ── Expressions ──────────────────────────────────────────────────


@dataclass(frozen=True)
class Literal:
    value: Value
    span: Span | None = _span()


@dataclass(frozen=True)
class Grouping:
    expression: Expr
    span: Span | None = _span()


@dataclass(frozen=True)
class Unary:
    op: str
    operand: Expr
    span: Span | None = _span()


@dataclass(frozen=True)
class Binary:
    left: Expr
    op: str
    right: Expr
    span: Span | None = _span()


@dataclass(frozen=True)
class Logical:
    left: Expr
    op: str  # "and" or "or"
    right: Expr
    span: Span | None = _span()


@dataclass(frozen=True)
class Variable:
    name: str
    span: Span | None = _span()


@dataclass(frozen=True)
class Assign:
    name: str
    value: Expr
    span: Span | None = _span()


Expr = Union[Literal, Grouping, Unary, Binary, Logical, Variable, Assign]


# ── Statements ───────────────────────────────────────────────────


@dataclass(frozen=True)
class ExprStmt:
    expression: Expr
    span: Span | None = _span()


@dataclass(frozen=True)
class Print:
    expression: Expr
    span: Span | None = _span()


@dataclass(frozen=True)
class Var:
    name: str
    initializer: Expr | None
    span: Span | None = _span()


@dataclass(frozen=True)
class Block:
    statements: list[Stmt]
    span: Span | None = _span()


@dataclass(frozen=True)
class If:
    condition: Expr
    then_branch: Stmt
    else_branch: Stmt | None
    span: Span | None = _span()


@dataclass(frozen=True)
class While:
    condition: Expr
    body: Stmt
    span: Span | None = _span()


Stmt = Union[ExprStmt, Print, Var, Block, If, While]
