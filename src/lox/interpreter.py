"""Tree-walking evaluator for Lox statements and expressions."""

from __future__ import annotations

import difflib
import math
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager

import click

from lox.ast_nodes import (
    Assign,
    Binary,
    Block,
    Expr,
    ExprStmt,
    Grouping,
    If,
    Literal,
    Logical,
    Print,
    Stmt,
    Unary,
    Var,
    Variable,
    While,
)
from lox.environment import Environment
from lox.errors import LoxRuntimeError
from lox.source import Span
from lox.values import Value, is_truthy, kind_of, stringify, values_equal

OutputSink = Callable[[str], None]

_UNKNOWN = Span("<unknown>", 0, 0, 0, 0)

_ARITHMETIC: dict[str, Callable[[float, float], Value]] = {
    '+': lambda a, b: a + b,
    '-': lambda a, b: a - b,
    '*': lambda a, b: a * b,
    '<': lambda a, b: a < b,
    '<=': lambda a, b: a <= b,
    '>': lambda a, b: a > b,
    '>=': lambda a, b: a >= b,
}


def _divide(a: float, b: float) -> float:
    # Python raises on float division by zero; follow IEEE-754 instead
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


@contextmanager
def depth_guard(span: Span | None) -> Iterator[None]:
    """Report Python stack exhaustion as a runtime error at *span*."""
    try:
        yield
    except RecursionError:
        raise LoxRuntimeError("nesting too deep to evaluate", span or _UNKNOWN) from None


class Interpreter:
    """Executes statements against a chain of environments.

    *output* receives one line of text per ``print``. *environment* is the
    global scope; pass the same one across calls to keep bindings alive
    between runs, as a REPL does.
    """

    def __init__(
        self,
        output: OutputSink | None = None,
        environment: Environment | None = None,
    ) -> None:
        self.output: OutputSink = output or click.echo
        self.globals = environment if environment is not None else Environment()
        self.environment = self.globals

    # ── Statements ───────────────────────────────────────────────

    def interpret(self, statements: Iterable[Stmt]) -> None:
        """Run a program. The first runtime error propagates and stops it."""
        for stmt in statements:
            with depth_guard(stmt.span):
                self.execute(stmt)

    def execute(self, stmt: Stmt) -> None:
        if isinstance(stmt, Print):
            self.output(stringify(self.evaluate(stmt.expression)))
        elif isinstance(stmt, ExprStmt):
            self.evaluate(stmt.expression)
        elif isinstance(stmt, Var):
            value = None
            if stmt.initializer is not None:
                value = self.evaluate(stmt.initializer)
            self.environment.define(stmt.name, value)
        elif isinstance(stmt, Block):
            self.execute_block(stmt.statements, Environment(self.environment))
        elif isinstance(stmt, If):
            if is_truthy(self.evaluate(stmt.condition)):
                self.execute(stmt.then_branch)
            elif stmt.else_branch is not None:
                self.execute(stmt.else_branch)
        elif isinstance(stmt, While):
            while is_truthy(self.evaluate(stmt.condition)):
                self.execute(stmt.body)
        else:
            raise TypeError(f"unknown statement node: {type(stmt).__name__}")

    def execute_block(self, statements: list[Stmt], scope: Environment) -> None:
        previous = self.environment
        self.environment = scope
        try:
            for stmt in statements:
                self.execute(stmt)
        finally:
            self.environment = previous

    # ── Expressions ──────────────────────────────────────────────

    def evaluate(self, expr: Expr) -> Value:
        if isinstance(expr, Literal):
            return expr.value
        if isinstance(expr, Grouping):
            return self.evaluate(expr.expression)
        if isinstance(expr, Unary):
            return self._eval_unary(expr)
        if isinstance(expr, Binary):
            return self._eval_binary(expr)
        if isinstance(expr, Logical):
            return self._eval_logical(expr)
        if isinstance(expr, Variable):
            try:
                return self.environment.get(expr.name)
            except KeyError:
                raise self._undefined(expr.name, expr.span) from None
        if isinstance(expr, Assign):
            value = self.evaluate(expr.value)
            try:
                self.environment.assign(expr.name, value)
            except KeyError:
                raise self._undefined(expr.name, expr.span) from None
            return value
        raise TypeError(f"unknown expression node: {type(expr).__name__}")

    def _eval_unary(self, expr: Unary) -> Value:
        operand = self.evaluate(expr.operand)
        if expr.op == '!':
            return not is_truthy(operand)
        if not isinstance(operand, float):
            raise LoxRuntimeError(
                f"operand of '-' must be a number, found {kind_of(operand)}",
                expr.span or _UNKNOWN,
            )
        return -operand

    def _eval_binary(self, expr: Binary) -> Value:
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        op = expr.op

        if op == '==':
            return values_equal(left, right)
        if op == '!=':
            return not values_equal(left, right)

        left_kind, right_kind = kind_of(left), kind_of(right)
        if left_kind == right_kind == "number":
            if op == '/':
                return _divide(left, right)
            return _ARITHMETIC[op](left, right)
        if left_kind == right_kind == "string" and op == '+':
            return left + right

        raise LoxRuntimeError(
            f"unsupported operand kinds for '{op}': {left_kind} and {right_kind}",
            expr.span or _UNKNOWN,
        )

    def _eval_logical(self, expr: Logical) -> Value:
        left = self.evaluate(expr.left)
        if expr.op == 'or':
            if is_truthy(left):
                return left
        elif not is_truthy(left):
            return left
        return self.evaluate(expr.right)

    def _undefined(self, name: str, span: Span | None) -> LoxRuntimeError:
        error = LoxRuntimeError(f"undefined variable '{name}'", span or _UNKNOWN)
        close = difflib.get_close_matches(name, self.environment.names(), n=1)
        if close:
            error.notes.append(f"did you mean '{close[0]}'?")
        return error
