"""
niftel Language Parser

Parses niftel tokens into a list of statement nodes.

This module implements a recursive-descent parser with one token of lookahead.
It consumes the flat `Token` list produced by the lexer and builds the closed
set of `Stmt`/`Expr` nodes defined in `niftel_ast`.

Grammar
-------
    Program     := Statement*
    Statement   := VarStmt | IfStmt | ForStmt | CommandStmt
    VarStmt     := "var" IDENT "=" Expression
    IfStmt      := "if" Expression Block ( "else" ( IfStmt | Block ) )?
    ForStmt     := "for" IDENT "in" Expression Block
    Block       := "{" Statement* "}"
    CommandStmt := IDENT Expression*
    Expression  := Equality
    Equality    := Comparison ( ("==" | "!=") Comparison )*
    Comparison  := Term ( (">" | ">=" | "<" | "<=") Term )*
    Term        := Factor ( ("+" | "-") Factor )*
    Factor      := Unary ( ("*" | "/") Unary )*
    Unary       := ( "!" | "-" ) Unary | Primary
    Primary     := NUMBER | STRING | "true" | "false" | "nil" | IDENT
                 | "(" Expression ")"

Parser Behavior
---------------
- Fail-fast: the first grammar violation raises `ParseError` and no partial
  AST is returned.
- Command arguments are read greedily and stop at `}`, end of input, or any
  reserved word, so `run a b var x = 1` is two statements.
- `else if` is parsed as a nested IfStmt inside the else-body.
- Binary operators are left-associative; prefix operators nest to the right.
- An `ERROR` token from the lexer is always an unexpected token.

Raises
------
ParseError
    A `SyntaxError` subclass carrying `message` and `line`.
"""

from __future__ import annotations

import logging

from niftel.niftel_ast import (
    BinaryExpr,
    CommandStmt,
    Expr,
    ForStmt,
    IfStmt,
    LiteralExpr,
    Stmt,
    UnaryExpr,
    VariableExpr,
    VarStmt,
)
from niftel.niftel_constants import (
    BANG,
    BANG_EQUAL,
    ELSE,
    EOF,
    EQUAL,
    EQUAL_EQUAL,
    ERROR,
    FALSE,
    FOR,
    GREATER,
    GREATER_EQUAL,
    IDENT,
    IF,
    IN,
    LBRACE,
    LESS,
    LESS_EQUAL,
    LPAREN,
    MINUS,
    NIL,
    NUMBER,
    PLUS,
    RBRACE,
    RPAREN,
    SLASH,
    STAR,
    STRING,
    TRUE,
    VAR,
    reserved_kinds,
)
from niftel.niftel_lexer import Token

logger = logging.getLogger(__name__)


class ParseError(SyntaxError):
    """Raised on the first grammar violation.

    Attributes:
        message (str): What was expected or found.
        line (int): Line of the offending token.
    """

    def __init__(self, message: str, line: int) -> None:
        super().__init__(message)
        self.message = message
        self.line = line
        self.lineno = line

    def __str__(self) -> str:
        return f"{self.message} at line {self.line}"


class Parser:
    """
    niftel Parser Class

    Transforms a token list into top-level statements. A parser instance is
    single-use: call `parse()` once.

    Attributes
    ----------
    tokens : list[Token]
        The input token stream, guaranteed to end with an 'EOF' token.
    position : int
        Current index into the token stream.
    """

    def __init__(self, tokens: list[Token]) -> None:
        self.tokens: list[Token] = list(tokens)
        if not self.tokens or self.tokens[-1].kind != EOF:
            line = self.tokens[-1].line if self.tokens else 1
            self.tokens.append(Token(EOF, "", line=line))
        self.position: int = 0

    # Token cursor

    def current(self) -> Token:
        return self.tokens[self.position]

    def previous(self) -> Token:
        return self.tokens[self.position - 1]

    def is_at_end(self) -> bool:
        return self.current().kind == EOF

    def advance(self) -> Token:
        if not self.is_at_end():
            self.position += 1
        return self.previous()

    def check(self, *kinds: str) -> bool:
        return self.current().kind in kinds

    def match(self, *kinds: str) -> Token | None:
        if self.check(*kinds):
            return self.advance()
        return None

    def consume(self, kind: str, message: str) -> Token:
        if self.check(kind):
            return self.advance()
        raise ParseError(message, self.current().line)

    def unexpected(self) -> ParseError:
        tok = self.current()
        if tok.kind == EOF:
            return ParseError("Unexpected end of input", tok.line)
        if tok.kind == ERROR:
            return ParseError(
                f"Unexpected token '{tok.lexeme}' ({tok.message})", tok.line
            )
        return ParseError(f"Unexpected token '{tok.lexeme}'", tok.line)

    # Statements

    def parse(self) -> list[Stmt]:
        """Parse a full niftel program and return its top-level statements."""
        statements: list[Stmt] = []
        try:
            while not self.is_at_end():
                statements.append(self.parse_statement())
        except RecursionError as e:
            raise ParseError("Program nested too deeply", self.current().line) from e
        logger.debug("parsed %d top-level statements", len(statements))
        return statements

    def parse_statement(self) -> Stmt:
        """Dispatch on the first token of a statement."""
        if self.match(VAR):
            return self.parse_var()
        if self.match(IF):
            return self.parse_if()
        if self.match(FOR):
            return self.parse_for()
        if self.check(IDENT):
            return self.parse_command()
        raise self.unexpected()

    def parse_var(self) -> VarStmt:
        name = self.consume(IDENT, "Expected variable name after 'var'")
        self.consume(EQUAL, "Expected '=' after variable name")
        value = self.parse_expression()
        return VarStmt(name, value)

    def parse_if(self) -> IfStmt:
        """Parse the rest of an `if` after its keyword, including any else chain."""
        condition = self.parse_expression()
        then_body = self.parse_block()

        else_body: list[Stmt] | None = None
        if self.match(ELSE):
            if self.match(IF):
                else_body = [self.parse_if()]
            else:
                else_body = self.parse_block()

        return IfStmt(condition, then_body, else_body)

    def parse_for(self) -> ForStmt:
        iterator = self.consume(IDENT, "Expected loop variable after 'for'")
        self.consume(IN, "Expected 'in' after loop variable")
        iterable = self.parse_expression()
        body = self.parse_block()
        return ForStmt(iterator, iterable, body)

    def parse_block(self) -> list[Stmt]:
        """Parse a `{}`-enclosed list of statements."""
        self.consume(LBRACE, "Expected '{' before block")
        stmts: list[Stmt] = []
        while not self.check(RBRACE) and not self.is_at_end():
            stmts.append(self.parse_statement())
        self.consume(RBRACE, "Expected '}' after block")
        return stmts

    def parse_command(self) -> CommandStmt:
        name = self.consume(IDENT, "Expected command name")
        args: list[Expr] = []
        while not self.check(RBRACE, EOF, *reserved_kinds):
            args.append(self.parse_expression())
        return CommandStmt(name, args)

    # Expressions

    def parse_expression(self) -> Expr:
        return self.parse_equality()

    def parse_equality(self) -> Expr:
        expr = self.parse_comparison()
        while self.check(EQUAL_EQUAL, BANG_EQUAL):
            operator = self.advance()
            expr = BinaryExpr(expr, operator, self.parse_comparison())
        return expr

    def parse_comparison(self) -> Expr:
        expr = self.parse_term()
        while self.check(GREATER, GREATER_EQUAL, LESS, LESS_EQUAL):
            operator = self.advance()
            expr = BinaryExpr(expr, operator, self.parse_term())
        return expr

    def parse_term(self) -> Expr:
        expr = self.parse_factor()
        while self.check(PLUS, MINUS):
            operator = self.advance()
            expr = BinaryExpr(expr, operator, self.parse_factor())
        return expr

    def parse_factor(self) -> Expr:
        expr = self.parse_unary()
        while self.check(STAR, SLASH):
            operator = self.advance()
            expr = BinaryExpr(expr, operator, self.parse_unary())
        return expr

    def parse_unary(self) -> Expr:
        operator = self.match(BANG, MINUS)
        if operator:
            return UnaryExpr(operator, self.parse_unary())
        return self.parse_primary()

    def parse_primary(self) -> Expr:
        if self.match(FALSE):
            return LiteralExpr(False)
        if self.match(TRUE):
            return LiteralExpr(True)
        if self.match(NIL):
            return LiteralExpr(None)
        if self.match(NUMBER, STRING):
            return LiteralExpr(self.previous().literal)
        if self.match(IDENT):
            return VariableExpr(self.previous())
        if self.match(LPAREN):
            expr = self.parse_expression()
            self.consume(RPAREN, "Expected ')' after expression")
            return expr
        raise self.unexpected()


def parse(tokens: list[Token]) -> list[Stmt]:
    """Parse a token list into top-level statements."""
    return Parser(tokens).parse()


__all__ = ["ParseError", "Parser", "parse"]
