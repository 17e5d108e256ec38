"""Tests for the infix and prefix expression printers."""

from __future__ import annotations

import pytest

from lox.ast_nodes import Binary, Grouping, Literal, Unary
from lox.printer import to_infix, to_prefix
from tests.helpers import parse_expr


class TestInfix:
    def test_built_tree(self):
        expr = Binary(
            Binary(Grouping(Binary(Literal(5.0), "+", Literal(2.0))), "*", Unary("-", Literal(6.0))),
            "==",
            Literal(9.0),
        )
        assert to_infix(expr) == "(5 + 2) * -6 == 9"

    def test_strings_are_quoted(self):
        assert to_infix(parse_expr('"a" + "b"')) == '"a" + "b"'

    def test_keywords(self):
        assert to_infix(parse_expr("nil or true and false")) == "nil or true and false"

    def test_assignment(self):
        assert to_infix(parse_expr("a = b = 1")) == "a = b = 1"

    @pytest.mark.parametrize("source", [
        "(5 + 2) * -6 == 9",
        "1 - (2 - 3)",
        "!(a and b) or c",
        '"x" + (y = "z")',
        "-(-1.5) >= 0.25 / 4",
        "a = (b) != nil",
    ])
    def test_reparse_gives_equal_tree(self, source):
        expr = parse_expr(source)
        assert parse_expr(to_infix(expr)) == expr


class TestPrefix:
    @pytest.mark.parametrize("source,expected", [
        ("1 + 2 * 3", "(+ 1 (* 2 3))"),
        ("(1)", "(group 1)"),
        ("-x", "(- x)"),
        ("!true", "(! true)"),
        ('"hello"', "hello"),
        ("nil", "nil"),
        ("2.5", "2.5"),
        ("a = 1", "(= a 1)"),
        ("a and b", "(and a b)"),
    ])
    def test_forms(self, source, expected):
        assert to_prefix(parse_expr(source)) == expected


class TestOverflowingLiterals:
    def test_overflow_parses_to_infinity(self):
        assert parse_expr("1" + "0" * 400) == Literal(float("inf"))

    def test_reparse_gives_equal_tree(self):
        expr = parse_expr("1" + "0" * 400 + " + 1")
        text = to_infix(expr)
        assert "inf" not in text
        assert parse_expr(text) == expr

    def test_prefix_shows_inf(self):
        assert to_prefix(parse_expr("1" + "0" * 400)) == "inf"
