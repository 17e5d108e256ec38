"""Source → tokens → statements → execution, with error collection."""

from __future__ import annotations

from dataclasses import dataclass, field

from lox.ast_nodes import Expr, Stmt
from lox.errors import Diagnostic, ErrorCollector, ErrorKind, LoxRuntimeError, LoxSyntaxError
from lox.interpreter import Interpreter, depth_guard
from lox.lexer import Lexer
from lox.parser import Parser
from lox.values import Value

EXIT_OK = 0
EXIT_DATA_ERROR = 65  # lex or syntax error
EXIT_SOFTWARE = 70    # runtime error


def exit_code_for(errors: ErrorCollector) -> int:
    if errors.has(ErrorKind.LEX, ErrorKind.SYNTAX):
        return EXIT_DATA_ERROR
    if errors.has(ErrorKind.RUNTIME):
        return EXIT_SOFTWARE
    return EXIT_OK


@dataclass
class RunResult:
    """Outcome of running one source text."""

    ok: bool
    exit_code: int
    diagnostics: list[Diagnostic] = field(default_factory=list)
    statements: list[Stmt] = field(default_factory=list)


def parse_program(source: str, errors: ErrorCollector, filename: str = "<stdin>") -> list[Stmt] | None:
    """Lex and parse a whole program. Returns None if any error was recorded."""
    tokens = Lexer(source, errors, filename).lex()
    try:
        statements = Parser(tokens, filename).parse()
    except LoxSyntaxError as e:
        errors.add(e)
        return None
    if errors.had_error:
        return None
    return statements


def parse_expression(source: str, errors: ErrorCollector, filename: str = "<stdin>") -> Expr | None:
    """Lex and parse a single expression. Returns None if any error was recorded."""
    tokens = Lexer(source, errors, filename).lex()
    try:
        expr = Parser(tokens, filename).parse_expression()
    except LoxSyntaxError as e:
        errors.add(e)
        return None
    if errors.had_error:
        return None
    return expr


def evaluate_source(
    source: str,
    interpreter: Interpreter,
    errors: ErrorCollector,
    filename: str = "<stdin>",
) -> Value:
    """Parse and evaluate one expression. Errors are recorded, not raised."""
    expr = parse_expression(source, errors, filename)
    if expr is None:
        return None
    try:
        with depth_guard(expr.span):
            return interpreter.evaluate(expr)
    except LoxRuntimeError as e:
        errors.add(e)
        return None


def run_source(
    source: str,
    interpreter: Interpreter,
    errors: ErrorCollector | None = None,
    filename: str = "<stdin>",
) -> RunResult:
    """Run a program against *interpreter*.

    Nothing executes if lexing or parsing recorded an error. A runtime
    error stops the run; output printed before it is kept.
    """
    if errors is None:
        errors = ErrorCollector()
    statements = parse_program(source, errors, filename)
    if statements is not None:
        try:
            interpreter.interpret(statements)
        except LoxRuntimeError as e:
            errors.add(e)
    code = exit_code_for(errors)
    return RunResult(
        ok=code == EXIT_OK,
        exit_code=code,
        diagnostics=list(errors),
        statements=statements or [],
    )
