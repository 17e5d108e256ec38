"""Lox interpreter CLI."""

from __future__ import annotations

from dataclasses import dataclass, fields, is_dataclass
from pathlib import Path

import click

from lox import __version__
from lox.config import LoxConfig, resolve_config
from lox.errors import DiagnosticRenderer, ErrorCollector
from lox.interpreter import Interpreter
from lox.lexer import Lexer
from lox.printer import to_prefix
from lox.runner import (
    EXIT_OK,
    evaluate_source,
    exit_code_for,
    parse_expression,
    parse_program,
    run_source,
)
from lox.values import stringify


@dataclass
class _Context:
    config: LoxConfig
    color: bool

    def report(self, errors: ErrorCollector, filename: str, source: str) -> None:
        """Write every recorded diagnostic to stderr."""
        renderer = DiagnosticRenderer(color=self.color, sources={filename: source})
        for diag in errors:
            if self.config.diagnostics.style == "plain":
                click.echo(diag.plain(), err=True)
            else:
                click.echo(renderer.render(diag), err=True)


def _read(file: str) -> tuple[str, str]:
    return Path(file).read_text(), str(file)


def _finish(errors: ErrorCollector) -> None:
    code = exit_code_for(errors)
    if code != EXIT_OK:
        raise SystemExit(code)


@click.group()
@click.version_option(__version__, prog_name="lox")
@click.option("--no-color", is_flag=True, help="Disable colored diagnostics.")
@click.pass_context
def main(ctx: click.Context, no_color: bool) -> None:
    """The Lox scripting language interpreter."""
    try:
        config = resolve_config()
    except ValueError as e:
        raise click.ClickException(f"invalid config: {e}") from e
    ctx.obj = _Context(config=config, color=config.diagnostics.color and not no_color)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def tokenize(obj: _Context, file: str) -> None:
    """Print the token stream of a source file."""
    source, filename = _read(file)
    errors = ErrorCollector()
    tokens = Lexer(source, errors, filename).lex()
    obj.report(errors, filename, source)
    for tok in tokens:
        click.echo(f"{tok.kind.name} {tok.lexeme} {tok.literal_text()}")
    _finish(errors)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def parse(obj: _Context, file: str) -> None:
    """Parse a single expression and print its prefix form."""
    source, filename = _read(file)
    errors = ErrorCollector()
    expr = parse_expression(source, errors, filename)
    obj.report(errors, filename, source)
    if expr is not None:
        click.echo(to_prefix(expr))
    _finish(errors)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def evaluate(obj: _Context, file: str) -> None:
    """Evaluate a single expression and print its value."""
    source, filename = _read(file)
    errors = ErrorCollector()
    value = evaluate_source(source, Interpreter(), errors, filename)
    obj.report(errors, filename, source)
    if not errors.had_error:
        click.echo(stringify(value))
    _finish(errors)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def run(obj: _Context, file: str) -> None:
    """Run a Lox program."""
    source, filename = _read(file)
    errors = ErrorCollector()
    run_source(source, Interpreter(), errors, filename)
    obj.report(errors, filename, source)
    _finish(errors)


@main.command()
@click.pass_obj
def repl(obj: _Context) -> None:
    """Start an interactive session."""
    interpreter = Interpreter()
    prompt = obj.config.repl.prompt
    while True:
        try:
            line = click.prompt(prompt, default="", show_default=False, prompt_suffix="")
        except click.Abort:
            click.echo()
            break
        if line.strip() in ("exit", "quit"):
            break
        if not line.strip():
            continue

        errors = ErrorCollector()
        if obj.config.repl.echo_values:
            # A bare expression is evaluated and its value echoed
            trial = ErrorCollector()
            if parse_expression(line, trial, "<repl>") is not None:
                value = evaluate_source(line, interpreter, errors, "<repl>")
                if not errors.had_error:
                    click.echo(stringify(value))
                obj.report(errors, "<repl>", line)
                continue

        run_source(line, interpreter, errors, "<repl>")
        obj.report(errors, "<repl>", line)


@main.command()
def lsp() -> None:
    """Start the Lox language server."""
    from lox.lsp import main as lsp_main

    lsp_main()


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def view(obj: _Context, file: str) -> None:
    """View the AST of a Lox source file."""
    source, filename = _read(file)
    errors = ErrorCollector()
    statements = parse_program(source, errors, filename)
    if statements is None:
        obj.report(errors, filename, source)
        _finish(errors)
        return

    click.echo("Program")
    for stmt in statements:
        _dump_ast(stmt, 1)


def _dump_ast(node: object, depth: int) -> None:
    """Print one node per line, children indented under their field name."""
    indent = "  " * depth
    if not is_dataclass(node):
        click.echo(f"{indent}{type(node).__name__}: {node!r}")
        return

    click.echo(f"{indent}{type(node).__name__}")
    for f in fields(node):
        if f.name == "span":
            continue
        value = getattr(node, f.name)
        if isinstance(value, list) and not value:
            click.echo(f"{indent}  {f.name}: []")
        elif isinstance(value, list) or is_dataclass(value):
            click.echo(f"{indent}  {f.name}:")
            for child in value if isinstance(value, list) else [value]:
                _dump_ast(child, depth + 2)
        elif value is not None or f.name == "value":
            # A nil literal still shows its value
            click.echo(f"{indent}  {f.name}: {value!r}")
