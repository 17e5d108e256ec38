"""Lexer for the Lox scripting language.

Produces a stream of tokens from source text. Lexical errors are recorded
on the caller's :class:`~lox.errors.ErrorCollector` and scanning carries
on, so the returned stream is always complete and ends with EOF.
"""

from __future__ import annotations

from lox.errors import ErrorCollector, ErrorKind
from lox.source import Span
from lox.tokens import EQUAL_SUFFIXED, KEYWORDS, SINGLE_CHAR_TOKENS, Token, TokenKind


def _is_ident_start(ch: str) -> bool:
    return ch.isascii() and (ch.isalpha() or ch == '_')


def _is_ident_char(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch == '_')


def _is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


class Lexer:
    """Tokenizes Lox source code."""

    def __init__(self, source: str, errors: ErrorCollector, filename: str = "<stdin>") -> None:
        self.source = source
        self.errors = errors
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.col = 1
        self.tokens: list[Token] = []

    def lex(self) -> list[Token]:
        """Tokenize the entire source and return the token list."""
        while self.pos < len(self.source):
            ch = self.source[self.pos]
            if ch in (' ', '\t', '\r', '\n'):
                self._advance()
            elif ch == '/' and self._peek(1) == '/':
                self._skip_line_comment()
            elif ch == '"':
                self._lex_string()
            elif _is_digit(ch):
                self._lex_number()
            elif _is_ident_start(ch):
                self._lex_identifier()
            else:
                self._lex_operator_or_punct()

        self._emit(TokenKind.EOF, "", None, self.line, self.col)
        return self.tokens

    # ── Helpers ───────────────────────────────────────────────────

    def _peek(self, offset: int = 0) -> str:
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return ch

    def _emit(
        self,
        kind: TokenKind,
        lexeme: str,
        literal: float | str | None,
        start_line: int,
        start_col: int,
    ) -> Token:
        end_col = self.col - 1 if self.col > 1 else 1
        span = Span(self.filename, start_line, start_col, self.line, end_col)
        tok = Token(kind, lexeme, literal, span)
        self.tokens.append(tok)
        return tok

    def _error(self, message: str, line: int, col: int) -> None:
        span = Span(self.filename, line, col, line, col)
        self.errors.report(ErrorKind.LEX, message, span)

    # ── Comments ─────────────────────────────────────────────────

    def _skip_line_comment(self) -> None:
        while self.pos < len(self.source) and self.source[self.pos] != '\n':
            self._advance()

    # ── Strings ──────────────────────────────────────────────────

    def _lex_string(self) -> None:
        start_line = self.line
        start_col = self.col
        self._advance()  # skip opening "
        text = []
        while self.pos < len(self.source) and self.source[self.pos] != '"':
            text.append(self._advance())

        if self.pos >= len(self.source):
            self._error("Unterminated string.", start_line, start_col)
            return

        self._advance()  # skip closing "
        value = ''.join(text)
        self._emit(TokenKind.STRING, f'"{value}"', value, start_line, start_col)

    # ── Numbers ──────────────────────────────────────────────────

    def _lex_number(self) -> None:
        start_line = self.line
        start_col = self.col
        text = []
        while self.pos < len(self.source) and _is_digit(self.source[self.pos]):
            text.append(self._advance())

        # A single decimal point, which may be trailing: "1." is a number
        if self.pos < len(self.source) and self.source[self.pos] == '.':
            text.append(self._advance())
            while self.pos < len(self.source) and _is_digit(self.source[self.pos]):
                text.append(self._advance())

        lexeme = ''.join(text)
        self._emit(TokenKind.NUMBER, lexeme, float(lexeme), start_line, start_col)

    # ── Identifiers and Keywords ─────────────────────────────────

    def _lex_identifier(self) -> None:
        start_line = self.line
        start_col = self.col
        text = []
        while self.pos < len(self.source) and _is_ident_char(self.source[self.pos]):
            text.append(self._advance())
        word = ''.join(text)
        kind = KEYWORDS.get(word, TokenKind.IDENTIFIER)
        self._emit(kind, word, None, start_line, start_col)

    # ── Operators and Punctuation ────────────────────────────────

    def _lex_operator_or_punct(self) -> None:
        start_line = self.line
        start_col = self.col
        ch = self._advance()

        if ch in EQUAL_SUFFIXED:
            bare, with_equal = EQUAL_SUFFIXED[ch]
            if self._peek() == '=':
                self._advance()
                self._emit(with_equal, ch + '=', None, start_line, start_col)
            else:
                self._emit(bare, ch, None, start_line, start_col)
            return

        match ch:
            case '/':
                self._emit(TokenKind.SLASH, '/', None, start_line, start_col)
            case _ if ch in SINGLE_CHAR_TOKENS:
                self._emit(SINGLE_CHAR_TOKENS[ch], ch, None, start_line, start_col)
            case _:
                self._error(f"Unexpected character: '{ch}'", start_line, start_col)
