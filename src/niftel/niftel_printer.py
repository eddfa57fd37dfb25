"""
Renders niftel ASTs as text.

This module is the presentation side of the front end. The parser hands a
finished statement list to one of these printers; none of them touch the
scanner or parser.

Classes:
    Printer: Base class that dispatches nodes to `visit_<kind>` methods.
    SourcePrinter: Emits canonical niftel source that parses back to the same tree.
    TreePrinter: Emits an indented one-node-per-line dump for debugging.

Functions:
    dump_json(statements): Serializes statements through `ASTNode.to_dict()`.

Raises:
    NotImplementedError: If a printer has no `visit_*` method for a node kind.
"""

from __future__ import annotations

import json
import math
from decimal import Decimal
from typing import Any

from niftel.niftel_ast import (
    ASTNode,
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
    BANG_EQUAL,
    EQUAL_EQUAL,
    GREATER,
    GREATER_EQUAL,
    LESS,
    LESS_EQUAL,
    MINUS,
    PLUS,
    SLASH,
    STAR,
)

# Binding strength of each binary operator tier, loosest first.
PRECEDENCE: dict[str, int] = {
    EQUAL_EQUAL: 1,
    BANG_EQUAL: 1,
    GREATER: 2,
    GREATER_EQUAL: 2,
    LESS: 2,
    LESS_EQUAL: 2,
    PLUS: 3,
    MINUS: 3,
    STAR: 4,
    SLASH: 4,
}
UNARY_PRECEDENCE = 5
ATOM_PRECEDENCE = 6


def format_literal(value: Any) -> str:
    """Formats a literal value the way the scanner would read it back."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isinf(value):
            # Overflows back to infinity when scanned.
            return ("-" if value < 0 else "") + "1" + "0" * 309
        if value.is_integer():
            return str(int(value))
        # The scanner has no exponent syntax.
        return format(Decimal(repr(value)), "f")
    return f'"{value}"'


class Printer:
    """Base printer with `visit_<kind>` dispatch and an output line buffer.

    Attributes:
        lines (list[str]): Accumulated output lines.
        indent (int): Current indentation level.
    """

    indent_unit = "    "

    def __init__(self) -> None:
        self.lines: list[str] = []
        self.indent = 0

    def indent_str(self) -> str:
        return self.indent_unit * self.indent

    def emit(self, text: str) -> None:
        self.lines.append(f"{self.indent_str()}{text}")

    def visit(self, node: ASTNode) -> Any:
        method_name = f"visit_{node.kind}"
        method = getattr(self, method_name, None)
        if method is None:
            raise NotImplementedError(
                f"{type(self).__name__} has no method for node kind '{node.kind}'"
            )
        return method(node)

    def format(self, statements: list[Stmt]) -> str:
        """Renders a statement list and returns the output as one string."""
        self.lines = []
        self.indent = 0
        for stmt in statements:
            self.visit(stmt)
        return "\n".join(self.lines)


class SourcePrinter(Printer):
    """Emits canonical niftel source.

    Parentheses are added only where operator precedence or the greedy
    command-argument rule would otherwise change how the text re-parses.
    """

    # Statements write lines; expressions return strings.

    def visit_var(self, node: VarStmt) -> None:
        self.emit(f"var {node.name.lexeme} = {self.expr(node.value)}")

    def visit_command(self, node: CommandStmt) -> None:
        parts = [node.name.lexeme]
        for i, arg in enumerate(node.args):
            text = self.expr(arg)
            # A leading '-' would be read as subtraction from the previous argument.
            if i > 0 and text.startswith("-"):
                text = f"({text})"
            parts.append(text)
        self.emit(" ".join(parts))

    def visit_for(self, node: ForStmt) -> None:
        self.emit(
            f"for {node.iterator.lexeme} in {self.expr(node.iterable)} {{"
        )
        self.block(node.body)
        self.emit("}")

    def visit_if(self, node: IfStmt, prefix: str = "") -> None:
        self.emit(f"{prefix}if {self.expr(node.condition)} {{")
        self.block(node.then_body)
        if node.else_body is None:
            self.emit("}")
        elif node.is_else_if:
            chained = node.else_body[0]
            assert isinstance(chained, IfStmt)  # for mypy
            self.visit_if(chained, prefix="} else ")
        else:
            self.emit("} else {")
            self.block(node.else_body)
            self.emit("}")

    def block(self, body: list[Stmt]) -> None:
        self.indent += 1
        for stmt in body:
            self.visit(stmt)
        self.indent -= 1

    def expr(self, node: Expr, min_precedence: int = 0) -> str:
        text, precedence = self.visit(node)
        if precedence < min_precedence:
            return f"({text})"
        return str(text)

    def visit_literal(self, node: LiteralExpr) -> tuple[str, int]:
        return format_literal(node.value), ATOM_PRECEDENCE

    def visit_variable(self, node: VariableExpr) -> tuple[str, int]:
        return node.name.lexeme, ATOM_PRECEDENCE

    def visit_unary(self, node: UnaryExpr) -> tuple[str, int]:
        operators = []
        operand: Expr = node
        while isinstance(operand, UnaryExpr):
            operators.append(operand.operator.lexeme)
            operand = operand.operand
        text = self.expr(operand, UNARY_PRECEDENCE)
        return f"{''.join(operators)}{text}", UNARY_PRECEDENCE

    def visit_binary(self, node: BinaryExpr) -> tuple[str, int]:
        precedence = PRECEDENCE[node.operator.kind]
        # Same-tier operators chain down the left side; unwind them in a loop.
        chain = []
        left: Expr = node
        while isinstance(left, BinaryExpr) and PRECEDENCE[left.operator.kind] == precedence:
            chain.append(left)
            left = left.left
        parts = [self.expr(left, precedence)]
        for link in reversed(chain):
            parts.append(link.operator.lexeme)
            parts.append(self.expr(link.right, precedence + 1))
        return " ".join(parts), precedence


class TreePrinter(Printer):
    """Emits an indented tree, one node per line.

    Expression `visit_*` methods return a label and the child expressions to
    print beneath it; `expression()` walks them with an explicit stack.
    """

    def header(self, text: str, node: ASTNode) -> None:
        line = node.line
        self.emit(text if line is None else f"{text} (line {line})")

    def children(self, label: str, nodes: list[Stmt]) -> None:
        self.emit(f"{label}:")
        self.indent += 1
        for child in nodes:
            self.visit(child)
        self.indent -= 1

    def expression(self, node: Expr) -> None:
        pending: list[tuple[Expr, int]] = [(node, self.indent)]
        while pending:
            expr, level = pending.pop()
            label, operands = self.visit(expr)
            self.lines.append(f"{self.indent_unit * level}{label}")
            pending.extend((operand, level + 1) for operand in reversed(operands))

    def visit_var(self, node: VarStmt) -> None:
        self.header(f"VarStmt {node.name.lexeme}", node)
        self.indent += 1
        self.expression(node.value)
        self.indent -= 1

    def visit_if(self, node: IfStmt) -> None:
        self.header("IfStmt", node)
        self.indent += 1
        self.emit("condition:")
        self.indent += 1
        self.expression(node.condition)
        self.indent -= 1
        self.children("then", node.then_body)
        if node.else_body is not None:
            self.children("else", node.else_body)
        self.indent -= 1

    def visit_for(self, node: ForStmt) -> None:
        self.header(f"ForStmt {node.iterator.lexeme}", node)
        self.indent += 1
        self.emit("in:")
        self.indent += 1
        self.expression(node.iterable)
        self.indent -= 1
        self.children("body", node.body)
        self.indent -= 1

    def visit_command(self, node: CommandStmt) -> None:
        self.header(f"CommandStmt {node.name.lexeme}", node)
        self.indent += 1
        for arg in node.args:
            self.expression(arg)
        self.indent -= 1

    def visit_literal(self, node: LiteralExpr) -> tuple[str, list[Expr]]:
        return f"Literal {format_literal(node.value)}", []

    def visit_variable(self, node: VariableExpr) -> tuple[str, list[Expr]]:
        return f"Variable {node.name.lexeme}", []

    def visit_unary(self, node: UnaryExpr) -> tuple[str, list[Expr]]:
        return f"Unary {node.operator.lexeme}", [node.operand]

    def visit_binary(self, node: BinaryExpr) -> tuple[str, list[Expr]]:
        return f"Binary {node.operator.lexeme}", [node.left, node.right]


def _finite(data: Any) -> Any:
    """Replaces infinite numbers in serialized nodes, in place, with integers JSON can hold."""
    stack = [data]
    while stack:
        item = stack.pop()
        entries = item.items() if isinstance(item, dict) else enumerate(item)
        for key, value in list(entries):
            if isinstance(value, (dict, list)):
                stack.append(value)
            elif isinstance(value, float) and math.isinf(value):
                item[key] = int(format_literal(value))
    return data


def dump_json(statements: list[Stmt], indent: int | None = 2) -> str:
    """Serializes statements through `ASTNode.to_dict()`.

    Number literals too large for a float are written as the integer
    `10**309`, which overflows back to infinity when scanned.
    """
    data = _finite([stmt.to_dict() for stmt in statements])
    return json.dumps(data, indent=indent, allow_nan=False)


PRINTERS: dict[str, type[Printer]] = {
    "source": SourcePrinter,
    "tree": TreePrinter,
}


def render(statements: list[Stmt], fmt: str = "tree") -> str:
    """Renders statements in one of the formats 'tree', 'source' or 'json'.

    Raises:
        ValueError: If the format is not supported, or the tree is nested
            too deeply to render.
    """
    fmt = fmt.lower()
    if fmt != "json" and fmt not in PRINTERS:
        raise ValueError(f"Unknown output format: {fmt!r}")
    try:
        if fmt == "json":
            return dump_json(statements)
        return PRINTERS[fmt]().format(statements)
    except RecursionError as e:
        raise ValueError("Program nested too deeply to render") from e


__all__ = [
    "Printer",
    "SourcePrinter",
    "TreePrinter",
    "dump_json",
    "format_literal",
    "render",
]
