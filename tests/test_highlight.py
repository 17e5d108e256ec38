"""Tests for the Pygments lexer."""

from __future__ import annotations

from pygments.token import Comment, Keyword, Name, Number, Operator, Punctuation, String

from lox.highlight import LoxLexer


def tokens(source: str) -> list[tuple[object, str]]:
    return [(tok, text) for tok, text in LoxLexer().get_tokens(source) if text.strip()]


class TestLoxLexer:
    def test_declaration(self):
        assert tokens("var x = 1.5;") == [
            (Keyword.Declaration, "var"),
            (Name, "x"),
            (Operator, "="),
            (Number, "1.5"),
            (Punctuation, ";"),
        ]

    def test_keywords_and_constants(self):
        result = tokens("if (nil or true) print false;")
        assert (Keyword, "if") in result
        assert (Keyword, "or") in result
        assert (Keyword, "print") in result
        assert (Keyword.Constant, "nil") in result
        assert (Keyword.Constant, "true") in result
        assert (Keyword.Constant, "false") in result

    def test_keyword_prefix_is_name(self):
        assert tokens("orchid") == [(Name, "orchid")]

    def test_string_and_comment(self):
        assert tokens('print "a // b"; // note') == [
            (Keyword, "print"),
            (String, '"a // b"'),
            (Punctuation, ";"),
            (Comment.Single, "// note"),
        ]

    def test_two_char_operators(self):
        ops = [text for tok, text in tokens("a <= b != c") if tok is Operator]
        assert ops == ["<=", "!="]

    def test_metadata(self):
        assert LoxLexer.name == "Lox"
        assert "lox" in LoxLexer.aliases
        assert "*.lox" in LoxLexer.filenames
