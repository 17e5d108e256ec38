"""Tests for the Lox lexer."""

from __future__ import annotations

import pytest

from lox.errors import ErrorKind
from lox.tokens import KEYWORDS, TokenKind
from tests.helpers import lex


def kinds(source: str) -> list[TokenKind]:
    """Helper: lex source and return just the token kinds, excluding EOF."""
    tokens, _ = lex(source)
    return [t.kind for t in tokens if t.kind != TokenKind.EOF]


def pairs(source: str) -> list[tuple[TokenKind, str]]:
    """Helper: (kind, lexeme) pairs, excluding EOF."""
    tokens, _ = lex(source)
    return [(t.kind, t.lexeme) for t in tokens if t.kind != TokenKind.EOF]


class TestLexerBasic:
    def test_empty_source(self):
        tokens, errors = lex("")
        assert len(tokens) == 1
        assert tokens[0].kind == TokenKind.EOF
        assert not errors.had_error

    def test_single_char_tokens(self):
        assert kinds("+ - * / ( ) { } ; , .") == [
            TokenKind.PLUS, TokenKind.MINUS, TokenKind.STAR, TokenKind.SLASH,
            TokenKind.LEFT_PAREN, TokenKind.RIGHT_PAREN,
            TokenKind.LEFT_BRACE, TokenKind.RIGHT_BRACE,
            TokenKind.SEMICOLON, TokenKind.COMMA, TokenKind.DOT,
        ]

    def test_brackets(self):
        assert kinds("[]") == [TokenKind.LEFT_BRACKET, TokenKind.RIGHT_BRACKET]

    def test_two_char_operators(self):
        assert kinds("== != <= >= = ! < >") == [
            TokenKind.EQUAL_EQUAL, TokenKind.BANG_EQUAL,
            TokenKind.LESS_EQUAL, TokenKind.GREATER_EQUAL,
            TokenKind.EQUAL, TokenKind.BANG, TokenKind.LESS, TokenKind.GREATER,
        ]

    def test_operators_without_spaces(self):
        assert kinds("!==") == [TokenKind.BANG_EQUAL, TokenKind.EQUAL]
        assert kinds("<==") == [TokenKind.LESS_EQUAL, TokenKind.EQUAL]

    def test_keywords(self):
        for word, kind in KEYWORDS.items():
            assert pairs(word) == [(kind, word)], f"keyword {word} should lex to one token"

    def test_keyword_prefix_is_identifier(self):
        assert pairs("orchid variable") == [
            (TokenKind.IDENTIFIER, "orchid"),
            (TokenKind.IDENTIFIER, "variable"),
        ]

    def test_identifiers_with_underscores_and_digits(self):
        assert pairs("_var var1 var_name") == [
            (TokenKind.IDENTIFIER, "_var"),
            (TokenKind.IDENTIFIER, "var1"),
            (TokenKind.IDENTIFIER, "var_name"),
        ]

    def test_statement(self):
        assert kinds("var x = 42; if (x > 0) { print x; }") == [
            TokenKind.VAR, TokenKind.IDENTIFIER, TokenKind.EQUAL, TokenKind.NUMBER,
            TokenKind.SEMICOLON, TokenKind.IF, TokenKind.LEFT_PAREN,
            TokenKind.IDENTIFIER, TokenKind.GREATER, TokenKind.NUMBER,
            TokenKind.RIGHT_PAREN, TokenKind.LEFT_BRACE, TokenKind.PRINT,
            TokenKind.IDENTIFIER, TokenKind.SEMICOLON, TokenKind.RIGHT_BRACE,
        ]

    def test_exactly_one_eof(self):
        tokens, _ = lex("var a = 1;\n@\n\"open")
        assert [t.kind for t in tokens].count(TokenKind.EOF) == 1
        assert tokens[-1].kind == TokenKind.EOF


class TestLexerLiterals:
    def test_integer(self):
        tokens, _ = lex("42")
        assert tokens[0].kind == TokenKind.NUMBER
        assert tokens[0].lexeme == "42"
        assert tokens[0].literal == 42.0

    def test_decimal(self):
        tokens, _ = lex("3.14 0.5")
        assert [(t.lexeme, t.literal) for t in tokens[:-1]] == [("3.14", 3.14), ("0.5", 0.5)]

    def test_trailing_point_belongs_to_number(self):
        tokens, _ = lex("1.")
        assert tokens[0].lexeme == "1."
        assert tokens[0].literal == 1.0

    def test_overflowing_number_is_infinite(self):
        tokens, errors = lex("1" + "0" * 400)
        assert tokens[0].literal == float("inf")
        assert tokens[0].literal_text() == "inf"
        assert not errors.had_error

    def test_literal_text(self):
        tokens, _ = lex('"hi" 42 3.14 x')
        assert [t.literal_text() for t in tokens] == ["hi", "42.0", "3.14", "null", "null"]

    def test_double_dot(self):
        tokens, errors = lex("1..2")
        assert [(t.kind, t.lexeme) for t in tokens] == [
            (TokenKind.NUMBER, "1."),
            (TokenKind.DOT, "."),
            (TokenKind.NUMBER, "2"),
            (TokenKind.EOF, ""),
        ]
        assert not errors.had_error

    def test_number_followed_by_identifier(self):
        assert pairs("42abc") == [(TokenKind.NUMBER, "42"), (TokenKind.IDENTIFIER, "abc")]

    def test_string(self):
        tokens, _ = lex('"hello"')
        assert tokens[0].kind == TokenKind.STRING
        assert tokens[0].lexeme == '"hello"'
        assert tokens[0].literal == "hello"

    def test_empty_string(self):
        tokens, _ = lex('""')
        assert tokens[0].literal == ""

    def test_multiline_string(self):
        tokens, errors = lex('"This is a\nstring with a newline" x')
        assert tokens[0].literal == "This is a\nstring with a newline"
        assert tokens[1].line == 2
        assert not errors.had_error

    def test_keyword_tokens_have_no_literal(self):
        tokens, _ = lex("true nil x")
        assert all(t.literal is None for t in tokens)


class TestLexerComments:
    def test_line_comment(self):
        assert kinds("// This is a comment\nvar x = 42; // Another comment\nx;") == [
            TokenKind.VAR, TokenKind.IDENTIFIER, TokenKind.EQUAL, TokenKind.NUMBER,
            TokenKind.SEMICOLON, TokenKind.IDENTIFIER, TokenKind.SEMICOLON,
        ]

    def test_comment_at_end_of_input(self):
        assert kinds("x // trailing") == [TokenKind.IDENTIFIER]

    def test_single_slash_is_division(self):
        assert kinds("a / b") == [TokenKind.IDENTIFIER, TokenKind.SLASH, TokenKind.IDENTIFIER]


class TestLexerLines:
    def test_lines_advance_on_newline(self):
        tokens, _ = lex("a\nb\n\nc")
        assert [t.line for t in tokens] == [1, 2, 4, 4]

    def test_comments_count_lines(self):
        tokens, _ = lex("// one\n// two\nx")
        assert tokens[0].line == 3

    def test_columns(self):
        tokens, _ = lex("var answer = 42;")
        name = tokens[1]
        assert (name.span.start_col, name.span.end_col) == (5, 10)


class TestLexerErrors:
    def test_unexpected_characters(self):
        tokens, errors = lex("@ # $ % ^ &")
        assert [t.kind for t in tokens] == [TokenKind.EOF]
        assert errors.entries() == [
            ("Unexpected character: '@'", 1),
            ("Unexpected character: '#'", 1),
            ("Unexpected character: '$'", 1),
            ("Unexpected character: '%'", 1),
            ("Unexpected character: '^'", 1),
            ("Unexpected character: '&'", 1),
        ]
        assert all(d.kind == ErrorKind.LEX for d in errors)

    def test_scanning_continues_after_error(self):
        assert pairs("a @ b") == [(TokenKind.IDENTIFIER, "a"), (TokenKind.IDENTIFIER, "b")]

    def test_non_ascii_letter_is_unexpected(self):
        tokens, errors = lex("é")
        assert errors.entries() == [("Unexpected character: 'é'", 1)]

    def test_unterminated_string(self):
        tokens, errors = lex('"hello" "world" "unterminated string')
        assert [t.literal for t in tokens[:-1]] == ["hello", "world"]
        assert tokens[-1].kind == TokenKind.EOF
        assert errors.entries() == [("Unterminated string.", 1)]

    def test_unterminated_string_reports_start_line(self):
        _, errors = lex('x\n"starts here\nand\nkeeps going')
        assert errors.entries() == [("Unterminated string.", 2)]

    def test_error_line(self):
        _, errors = lex("var a;\n\n  @")
        assert errors.diagnostics[0].line == 3
        assert errors.diagnostics[0].labels[0].span.start_col == 3


class TestLexStability:
    @pytest.mark.parametrize("source", [
        "var a = 1; { a = a + 2.5; } print a;",
        'print "hi" or 2; print nil or "yes";',
        "for (var i = 0; i < 3; i = i + 1) print i;",
        "if (a >= b) print !c; else print -d != e <= f;",
        "x = (1 + 2) * 3 / 4 - 5 == 6 and y;",
    ])
    def test_relex_joined_lexemes(self, source):
        tokens, _ = lex(source)
        rejoined = " ".join(t.lexeme for t in tokens if t.kind != TokenKind.EOF)
        assert kinds(rejoined) == [t.kind for t in tokens if t.kind != TokenKind.EOF]
