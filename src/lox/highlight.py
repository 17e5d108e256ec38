"""Pygments lexer for the Lox scripting language."""

from pygments.lexer import RegexLexer, words
from pygments.token import (
    Comment,
    Keyword,
    Name,
    Number,
    Operator,
    Punctuation,
    String,
    Text,
)


class LoxLexer(RegexLexer):
    """Pygments lexer for the Lox scripting language."""

    name = "Lox"
    aliases = ["lox"]
    filenames = ["*.lox"]
    mimetypes = ["text/x-lox"]

    tokens = {
        "root": [
            (r"\s+", Text),
            (r"//.*$", Comment.Single),
            # Strings have no escapes and may span lines
            (r'"[^"]*"', String),
            (r"[0-9]+(\.[0-9]*)?", Number),
            (words(("var", "class", "fun"), prefix=r"\b", suffix=r"\b"), Keyword.Declaration),
            (
                words(
                    ("if", "else", "while", "for", "print", "return", "and", "or"),
                    prefix=r"\b",
                    suffix=r"\b",
                ),
                Keyword,
            ),
            (words(("this", "super"), prefix=r"\b", suffix=r"\b"), Keyword.Pseudo),
            (r"\b(true|false|nil)\b", Keyword.Constant),
            # Operators (two-char before single-char)
            (r"==|!=|<=|>=", Operator),
            (r"[+\-*/<>=!.]", Operator),
            (r"[A-Za-z_][A-Za-z0-9_]*", Name),
            (r"[(),;\[\]{}]", Punctuation),
        ],
    }
