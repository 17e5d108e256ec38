"""Shared test helpers for the Lox interpreter test suite."""

from __future__ import annotations

from lox.ast_nodes import Expr, Stmt
from lox.errors import ErrorCollector
from lox.interpreter import Interpreter
from lox.lexer import Lexer
from lox.parser import Parser
from lox.tokens import Token


def lex(source: str) -> tuple[list[Token], ErrorCollector]:
    """Lex source, returning the tokens and the collector."""
    errors = ErrorCollector()
    tokens = Lexer(source, errors, "<test>").lex()
    return tokens, errors


def parse(source: str) -> list[Stmt]:
    """Lex and parse a program, asserting the lexer recorded nothing."""
    tokens, errors = lex(source)
    assert not errors.had_error, errors.entries()
    return Parser(tokens, "<test>").parse()


def parse_expr(source: str) -> Expr:
    """Lex and parse a single expression."""
    tokens, errors = lex(source)
    assert not errors.had_error, errors.entries()
    return Parser(tokens, "<test>").parse_expression()


def run(source: str) -> list[str]:
    """Run a program and return the printed lines. Runtime errors propagate."""
    lines: list[str] = []
    Interpreter(output=lines.append).interpret(parse(source))
    return lines


def evaluate(source: str):
    """Evaluate one expression in a fresh interpreter."""
    return Interpreter(output=lambda _: None).evaluate(parse_expr(source))
