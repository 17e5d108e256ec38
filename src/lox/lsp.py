"""Lox Language Server: pygls-based LSP for .lox files.

Provides diagnostics, hover, completion and document symbols via stdio
transport.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from lsprotocol import types as lsp
from pygls.lsp.server import LanguageServer

from lox import __version__
from lox.ast_nodes import Block, If, Stmt, Var, While
from lox.errors import Diagnostic, ErrorCollector, LoxSyntaxError, Severity
from lox.lexer import Lexer
from lox.parser import Parser
from lox.source import Span
from lox.tokens import KEYWORDS, Token

# ── Conversion helpers ────────────────────────────────────────────

_SEVERITY_MAP = {
    Severity.ERROR: lsp.DiagnosticSeverity.Error,
    Severity.WARNING: lsp.DiagnosticSeverity.Warning,
    Severity.NOTE: lsp.DiagnosticSeverity.Information,
}

_KEYWORD_COMPLETIONS = sorted(KEYWORDS.keys())

_KEYWORD_DOCS = {
    "and": "Logical and. Returns the left operand if it is falsy, else the right.",
    "or": "Logical or. Returns the left operand if it is truthy, else the right.",
    "var": "Declares a variable in the current scope.",
    "print": "Evaluates an expression and prints its value on its own line.",
    "if": "Runs a statement when the condition is truthy.",
    "else": "Alternative branch of the nearest unmatched `if`.",
    "while": "Repeats a statement while the condition is truthy.",
    "for": "`for (init; condition; increment) body`, run as a while loop.",
    "nil": "The absence of a value. Falsy.",
    "true": "Boolean true.",
    "false": "Boolean false. Falsy.",
}


def span_to_range(span: Span) -> lsp.Range:
    """Convert a 1-indexed Lox Span to a 0-indexed LSP Range."""
    return lsp.Range(
        start=lsp.Position(line=span.start_line - 1, character=span.start_col - 1),
        end=lsp.Position(line=span.end_line - 1, character=span.end_col),
    )


def _to_lsp_diag(d: Diagnostic) -> lsp.Diagnostic:
    span_range = lsp.Range(start=lsp.Position(line=0, character=0), end=lsp.Position(line=0, character=0))
    if d.labels:
        span_range = span_to_range(d.labels[0].span)
    return lsp.Diagnostic(
        range=span_range,
        severity=_SEVERITY_MAP[d.severity],
        source="lox",
        code=d.code,
        message=d.message,
    )


# ── Per-document state ────────────────────────────────────────────


@dataclass
class DocumentState:
    """Cached analysis results for a single open document."""

    source: str = ""
    tokens: list[Token] = field(default_factory=list)
    statements: list[Stmt] | None = None
    declarations: list[Var] = field(default_factory=list)
    diagnostics: list[lsp.Diagnostic] = field(default_factory=list)


def _collect_declarations(statements: list[Stmt], out: list[Var]) -> None:
    for stmt in statements:
        if isinstance(stmt, Var):
            out.append(stmt)
        elif isinstance(stmt, Block):
            _collect_declarations(stmt.statements, out)
        elif isinstance(stmt, If):
            branches = [stmt.then_branch]
            if stmt.else_branch is not None:
                branches.append(stmt.else_branch)
            _collect_declarations(branches, out)
        elif isinstance(stmt, While):
            _collect_declarations([stmt.body], out)


def analyze(uri: str, source: str) -> DocumentState:
    """Lex and parse *source*, collecting diagnostics and declarations."""
    ds = DocumentState(source=source)
    errors = ErrorCollector()
    ds.tokens = Lexer(source, errors, uri).lex()
    try:
        ds.statements = Parser(ds.tokens, uri).parse()
    except LoxSyntaxError as e:
        errors.add(e)
    if ds.statements is not None:
        _collect_declarations(ds.statements, ds.declarations)
    ds.diagnostics = [_to_lsp_diag(d) for d in errors]
    return ds


def get_word_at(source: str, line: int, character: int) -> str:
    """Extract the word at the given 0-indexed position."""
    lines = source.splitlines()
    if line < 0 or line >= len(lines):
        return ""
    text = lines[line]
    if character < 0 or character >= len(text):
        # Cursor may sit just past the end of a word
        if 0 < character <= len(text):
            character -= 1
        else:
            return ""

    start = character
    while start > 0 and (text[start - 1].isalnum() or text[start - 1] == "_"):
        start -= 1
    end = character
    while end < len(text) and (text[end].isalnum() or text[end] == "_"):
        end += 1
    return text[start:end]


def find_declaration(ds: DocumentState, name: str, line: int) -> Var | None:
    """The last declaration of *name* at or before 0-indexed *line*, else the first."""
    matches = [d for d in ds.declarations if d.name == name]
    if not matches:
        return None
    before = [d for d in matches if d.span is not None and d.span.start_line - 1 <= line]
    return before[-1] if before else matches[0]


def hover_text(ds: DocumentState, line: int, character: int) -> str | None:
    word = get_word_at(ds.source, line, character)
    if not word:
        return None
    if word in KEYWORDS:
        doc = _KEYWORD_DOCS.get(word, "Reserved word.")
        return f"**keyword** `{word}`\n\n{doc}"
    decl = find_declaration(ds, word, line)
    if decl is not None and decl.span is not None:
        return f"**var** `{word}` declared on line {decl.span.start_line}"
    return None


def document_symbols(statements: list[Stmt]) -> list[lsp.DocumentSymbol]:
    symbols: list[lsp.DocumentSymbol] = []
    for stmt in statements:
        if isinstance(stmt, Var) and stmt.span is not None:
            rng = span_to_range(stmt.span)
            symbols.append(lsp.DocumentSymbol(
                name=stmt.name,
                kind=lsp.SymbolKind.Variable,
                range=rng,
                selection_range=rng,
            ))
        elif isinstance(stmt, Block):
            children = document_symbols(stmt.statements)
            if children and stmt.span is not None:
                rng = span_to_range(stmt.span)
                symbols.append(lsp.DocumentSymbol(
                    name="block",
                    kind=lsp.SymbolKind.Namespace,
                    range=rng,
                    selection_range=rng,
                    children=children,
                ))
            else:
                symbols.extend(children)
        elif isinstance(stmt, If):
            branches = [stmt.then_branch]
            if stmt.else_branch is not None:
                branches.append(stmt.else_branch)
            symbols.extend(document_symbols(branches))
        elif isinstance(stmt, While):
            symbols.extend(document_symbols([stmt.body]))
    return symbols


def completion_items(ds: DocumentState | None) -> list[lsp.CompletionItem]:
    items = [
        lsp.CompletionItem(label=kw, kind=lsp.CompletionItemKind.Keyword)
        for kw in _KEYWORD_COMPLETIONS
    ]
    if ds is not None:
        seen: set[str] = set()
        for decl in ds.declarations:
            if decl.name in seen:
                continue
            seen.add(decl.name)
            items.append(lsp.CompletionItem(label=decl.name, kind=lsp.CompletionItemKind.Variable))
    return items


# ── Server ────────────────────────────────────────────────────────

server = LanguageServer(
    "lox-lsp", __version__,
    text_document_sync_kind=lsp.TextDocumentSyncKind.Full,
)
_state: dict[str, DocumentState] = {}


def _publish(uri: str, source: str) -> None:
    ds = analyze(uri, source)
    _state[uri] = ds
    server.text_document_publish_diagnostics(lsp.PublishDiagnosticsParams(
        uri=uri,
        diagnostics=ds.diagnostics,
    ))


@server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
def did_open(params: lsp.DidOpenTextDocumentParams) -> None:
    _publish(params.text_document.uri, params.text_document.text)


@server.feature(lsp.TEXT_DOCUMENT_DID_CHANGE)
def did_change(params: lsp.DidChangeTextDocumentParams) -> None:
    # Full sync: the last change carries the whole document
    source = params.content_changes[-1].text if params.content_changes else ""
    _publish(params.text_document.uri, source)


@server.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)
def did_close(params: lsp.DidCloseTextDocumentParams) -> None:
    _state.pop(params.text_document.uri, None)


@server.feature(lsp.TEXT_DOCUMENT_HOVER)
def hover(params: lsp.HoverParams) -> lsp.Hover | None:
    ds = _state.get(params.text_document.uri)
    if ds is None:
        return None
    text = hover_text(ds, params.position.line, params.position.character)
    if text is None:
        return None
    return lsp.Hover(contents=lsp.MarkupContent(kind=lsp.MarkupKind.Markdown, value=text))


@server.feature(lsp.TEXT_DOCUMENT_COMPLETION)
def completion(params: lsp.CompletionParams) -> lsp.CompletionList:
    ds = _state.get(params.text_document.uri)
    return lsp.CompletionList(is_incomplete=False, items=completion_items(ds))


@server.feature(lsp.TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def document_symbol(params: lsp.DocumentSymbolParams) -> list[lsp.DocumentSymbol]:
    ds = _state.get(params.text_document.uri)
    if ds is None or ds.statements is None:
        return []
    return document_symbols(ds.statements)


# ── Entry point ──────────────────────────────────────────────────


def main() -> None:
    """Start the Lox language server on stdio."""
    server.start_io()
