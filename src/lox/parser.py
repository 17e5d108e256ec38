"""Parser for the Lox scripting language.

Recursive descent for statements and precedence climbing over a
binding-power table for binary operators. The first grammar violation
raises :class:`~lox.errors.LoxSyntaxError`; there is no recovery.
"""

from __future__ import annotations

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
from lox.errors import LoxSyntaxError
from lox.source import Span
from lox.tokens import Token, TokenKind

# ── Binding powers ──────────────────────────────────────────────

# (left_bp, right_bp) for infix operators; left < right gives left associativity
_INFIX_BP: dict[TokenKind, tuple[int, int]] = {
    TokenKind.OR: (1, 2),
    TokenKind.AND: (3, 4),
    TokenKind.EQUAL_EQUAL: (5, 6),
    TokenKind.BANG_EQUAL: (5, 6),
    TokenKind.LESS: (7, 8),
    TokenKind.LESS_EQUAL: (7, 8),
    TokenKind.GREATER: (7, 8),
    TokenKind.GREATER_EQUAL: (7, 8),
    TokenKind.PLUS: (9, 10),
    TokenKind.MINUS: (9, 10),
    TokenKind.STAR: (11, 12),
    TokenKind.SLASH: (11, 12),
}

_LOGICAL = frozenset({TokenKind.AND, TokenKind.OR})

_PREFIX = frozenset({TokenKind.BANG, TokenKind.MINUS})


class Parser:
    """Parses a list of tokens into Lox statements."""

    def __init__(self, tokens: list[Token], filename: str = "<stdin>") -> None:
        self.tokens = tokens
        self.pos = 0
        self.filename = filename

    # ── Token access ─────────────────────────────────────────────

    def _current(self) -> Token:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return self.tokens[-1]  # EOF

    def _at(self, kind: TokenKind) -> bool:
        return self._current().kind == kind

    def _advance(self) -> Token:
        tok = self._current()
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return tok

    def _match(self, kind: TokenKind) -> Token | None:
        if self._at(kind):
            return self._advance()
        return None

    def _expect(self, kind: TokenKind, what: str) -> Token:
        if self._at(kind):
            return self._advance()
        raise self._error(f"expected {what}, found {self._current().describe()}")

    def _error(self, message: str, token: Token | None = None) -> LoxSyntaxError:
        tok = token or self._current()
        return LoxSyntaxError(message, tok.span)

    def _too_deep(self) -> LoxSyntaxError:
        return self._error("expression nested too deeply")

    def _span(self, start: Span | None, end: Span | None) -> Span | None:
        if start is None or end is None:
            return start or end
        return start.to(end)

    def _previous_span(self) -> Span:
        return self.tokens[max(self.pos - 1, 0)].span

    # ── Top-level parsing ────────────────────────────────────────

    def parse(self) -> list[Stmt]:
        """Parse the entire token stream into a list of statements."""
        statements: list[Stmt] = []
        try:
            while not self._at(TokenKind.EOF):
                statements.append(self._parse_declaration())
        except RecursionError:
            raise self._too_deep() from None
        return statements

    def parse_expression(self) -> Expr:
        """Parse a single expression that spans the whole token stream."""
        try:
            expr = self._parse_expression()
        except RecursionError:
            raise self._too_deep() from None
        self._expect(TokenKind.EOF, "end of input")
        return expr

    # ── Statements ───────────────────────────────────────────────

    def _parse_declaration(self) -> Stmt:
        if self._at(TokenKind.VAR):
            return self._parse_var_decl()
        return self._parse_statement()

    def _parse_var_decl(self) -> Var:
        start = self._advance().span  # 'var'
        name_tok = self._expect(TokenKind.IDENTIFIER, "variable name")
        initializer = None
        if self._match(TokenKind.EQUAL):
            initializer = self._parse_expression()
        end = self._expect(TokenKind.SEMICOLON, "';' after variable declaration").span
        return Var(name_tok.lexeme, initializer, self._span(start, end))

    def _parse_statement(self) -> Stmt:
        match self._current().kind:
            case TokenKind.IF:
                return self._parse_if()
            case TokenKind.WHILE:
                return self._parse_while()
            case TokenKind.FOR:
                return self._parse_for()
            case TokenKind.PRINT:
                return self._parse_print()
            case TokenKind.LEFT_BRACE:
                return self._parse_block()
            case _:
                return self._parse_expr_stmt()

    def _parse_if(self) -> If:
        start = self._advance().span  # 'if'
        self._expect(TokenKind.LEFT_PAREN, "'(' after 'if'")
        condition = self._parse_expression()
        self._expect(TokenKind.RIGHT_PAREN, "')' after if condition")
        then_branch = self._parse_statement()
        else_branch = None
        # Greedy: an 'else' belongs to the innermost 'if' still being parsed
        if self._match(TokenKind.ELSE):
            else_branch = self._parse_statement()
        return If(condition, then_branch, else_branch, self._span(start, self._previous_span()))

    def _parse_while(self) -> While:
        start = self._advance().span  # 'while'
        self._expect(TokenKind.LEFT_PAREN, "'(' after 'while'")
        condition = self._parse_expression()
        self._expect(TokenKind.RIGHT_PAREN, "')' after while condition")
        body = self._parse_statement()
        return While(condition, body, self._span(start, self._previous_span()))

    def _parse_for(self) -> Stmt:
        """Parse a ``for`` loop, desugared into a block and a while loop."""
        start = self._advance().span  # 'for'
        self._expect(TokenKind.LEFT_PAREN, "'(' after 'for'")

        initializer: Stmt | None
        if self._match(TokenKind.SEMICOLON):
            initializer = None
        elif self._at(TokenKind.VAR):
            initializer = self._parse_var_decl()
        else:
            initializer = self._parse_expr_stmt()

        condition = None
        if not self._at(TokenKind.SEMICOLON):
            condition = self._parse_expression()
        cond_end = self._expect(TokenKind.SEMICOLON, "';' after loop condition").span

        increment = None
        if not self._at(TokenKind.RIGHT_PAREN):
            increment = self._parse_expression()
        self._expect(TokenKind.RIGHT_PAREN, "')' after for clauses")

        body = self._parse_statement()
        span = self._span(start, self._previous_span())

        if increment is not None:
            body = Block([body, ExprStmt(increment, increment.span)], body.span)
        if condition is None:
            condition = Literal(True, cond_end)
        loop: Stmt = While(condition, body, span)
        if initializer is not None:
            loop = Block([initializer, loop], span)
        return loop

    def _parse_print(self) -> Print:
        start = self._advance().span  # 'print'
        value = self._parse_expression()
        end = self._expect(TokenKind.SEMICOLON, "';' after value").span
        return Print(value, self._span(start, end))

    def _parse_block(self) -> Block:
        start = self._advance().span  # '{'
        statements: list[Stmt] = []
        while not self._at(TokenKind.RIGHT_BRACE) and not self._at(TokenKind.EOF):
            statements.append(self._parse_declaration())
        end = self._expect(TokenKind.RIGHT_BRACE, "'}' after block").span
        return Block(statements, self._span(start, end))

    def _parse_expr_stmt(self) -> ExprStmt:
        expr = self._parse_expression()
        end = self._expect(TokenKind.SEMICOLON, "';' after expression").span
        return ExprStmt(expr, self._span(expr.span, end))

    # ── Expressions ──────────────────────────────────────────────

    def _parse_expression(self) -> Expr:
        return self._parse_assignment()

    def _parse_assignment(self) -> Expr:
        """Assignment is right-associative and binds loosest."""
        target = self._parse_binary(0)
        equals = self._match(TokenKind.EQUAL)
        if equals is None:
            return target
        value = self._parse_assignment()
        if isinstance(target, Variable):
            return Assign(target.name, value, self._span(target.span, value.span))
        raise self._error("invalid assignment target", equals)

    def _parse_binary(self, min_bp: int) -> Expr:
        """Precedence climbing over the binding-power table."""
        left = self._parse_unary()

        while True:
            tok = self._current()
            if tok.kind not in _INFIX_BP:
                break
            left_bp, right_bp = _INFIX_BP[tok.kind]
            if left_bp < min_bp:
                break
            op_tok = self._advance()
            right = self._parse_binary(right_bp)
            span = self._span(left.span, right.span)
            if op_tok.kind in _LOGICAL:
                left = Logical(left, op_tok.lexeme, right, span)
            else:
                left = Binary(left, op_tok.lexeme, right, span)

        return left

    def _parse_unary(self) -> Expr:
        tok = self._current()
        if tok.kind in _PREFIX:
            self._advance()
            operand = self._parse_unary()
            return Unary(tok.lexeme, operand, self._span(tok.span, operand.span))
        return self._parse_primary()

    def _parse_primary(self) -> Expr:
        tok = self._current()

        match tok.kind:
            case TokenKind.TRUE:
                self._advance()
                return Literal(True, tok.span)
            case TokenKind.FALSE:
                self._advance()
                return Literal(False, tok.span)
            case TokenKind.NIL:
                self._advance()
                return Literal(None, tok.span)
            case TokenKind.NUMBER | TokenKind.STRING:
                self._advance()
                return Literal(tok.literal, tok.span)
            case TokenKind.IDENTIFIER:
                self._advance()
                return Variable(tok.lexeme, tok.span)
            case TokenKind.LEFT_PAREN:
                self._advance()
                inner = self._parse_expression()
                end = self._expect(TokenKind.RIGHT_PAREN, "')' after expression").span
                return Grouping(inner, self._span(tok.span, end))

        raise self._error(f"expected expression, found {tok.describe()}")
