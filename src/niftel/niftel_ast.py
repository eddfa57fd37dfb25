"""
Defines the abstract syntax tree (AST) node structure for the niftel language.

Classes:
    ASTNode:
        Base of every node. Provides structural equality, a readable repr,
        `to_dict()` serialization and a `line` derived from stored tokens.

    Stmt / Expr:
        Markers for the two closed node families.

    VarStmt, IfStmt, ForStmt, CommandStmt:
        The statement variants.

    LiteralExpr, VariableExpr, UnaryExpr, BinaryExpr:
        The expression variants.

    ASTDict:
        TypedDict shape of a serialized node, suitable for JSON output or debugging.

Ownership is strictly hierarchical: each node owns its children and no node is
shared between two parents. Nodes keep the tokens that name them (identifiers,
operators), so a node's source line is always recoverable from its subtree.

Example:
    node = VarStmt(Token("IDENT", "x"), LiteralExpr(1.0))
"""

from __future__ import annotations

from typing import Any, TypedDict, Union

from niftel.niftel_lexer import Token

LiteralValue = Union[float, str, bool, None]
"""Decoded literal: number, text, boolean or nil."""


class ASTDict(TypedDict, total=False):
    """
    TypedDict representation of an ASTNode used for serialization.

    Fields:
        kind (str): The node kind (e.g. "var", "if", "binary").
        line (int | None): Source line derived from the node's tokens.
        name (str): Identifier text for var/for/command/variable nodes.
        operator (str): Operator lexeme for unary/binary nodes.
        value (Any): Literal value, or the serialized initializer of a var.
        condition, iterable, operand, left, right (ASTDict): Child expressions.
        then_body, else_body, body (list[ASTDict]): Child statements.
        args (list[ASTDict]): Command arguments.
    """

    kind: str
    line: int | None
    name: str
    operator: str
    value: Any
    condition: "ASTDict"
    iterable: "ASTDict"
    operand: "ASTDict"
    left: "ASTDict"
    right: "ASTDict"
    then_body: list["ASTDict"]
    else_body: list["ASTDict"] | None
    body: list["ASTDict"]
    args: list["ASTDict"]


_Serialized = tuple[Any, "int | None"]


def _serialize(value: Any, done: dict[int, _Serialized]) -> _Serialized:
    """Returns the serialized form of a field value and the first line inside it."""
    if isinstance(value, ASTNode):
        return done[id(value)]
    if isinstance(value, Token):
        return value.lexeme, value.line
    if isinstance(value, list):
        items = [done[id(v)] for v in value]
        lines = [line for _, line in items if line is not None]
        return [data for data, _ in items], (lines[0] if lines else None)
    return value, None


def _child_nodes(node: ASTNode) -> list[ASTNode]:
    children: list[ASTNode] = []
    for name in node.fields:
        value = getattr(node, name)
        if isinstance(value, ASTNode):
            children.append(value)
        elif isinstance(value, list):
            children.extend(value)
    return children


class ASTNode:
    """
    Base class for every niftel AST node.

    Subclasses declare their child slots in `fields`; equality, repr,
    serialization and line lookup are all driven from that tuple.

    A left-associative chain such as `a + a + ... + a` parses in a loop but
    builds a tree as deep as the chain is long, so equality, `line` and
    `to_dict()` walk the tree with an explicit stack instead of recursing.

    Attributes:
        kind (str): Short node name used by printers and `to_dict()`.
        fields (tuple[str, ...]): Names of the node's child attributes, in
            source order.
    """

    kind: str = "node"
    fields: tuple[str, ...] = ()

    @property
    def line(self) -> int | None:
        """First source line found among the tokens stored in this subtree."""
        stack: list[Any] = [self]
        while stack:
            item = stack.pop()
            if isinstance(item, Token):
                return item.line
            if isinstance(item, ASTNode):
                stack.extend(reversed([getattr(item, name) for name in item.fields]))
            elif isinstance(item, list):
                stack.extend(reversed(item))
        return None

    def __repr__(self) -> str:
        parts = [f"{name}={getattr(self, name)!r}" for name in self.fields]
        return f"{type(self).__name__}({', '.join(parts)})"

    def same_shape(self, other: Any) -> bool:
        """Compares this node alone, ignoring its children."""
        return type(self) is type(other)

    def __eq__(self, other: Any) -> bool:
        pairs: list[tuple[Any, Any]] = [(self, other)]
        while pairs:
            left, right = pairs.pop()
            if isinstance(left, ASTNode):
                if not left.same_shape(right):
                    return False
                pairs.extend((getattr(left, n), getattr(right, n)) for n in left.fields)
            elif isinstance(left, list):
                if not isinstance(right, list) or len(left) != len(right):
                    return False
                pairs.extend(zip(left, right))
            elif isinstance(right, (ASTNode, list)) or left != right:
                return False
        return True

    __hash__ = None  # type: ignore[assignment]

    def to_dict(self) -> ASTDict:
        # Post-order: every child is serialized before its parent.
        done: dict[int, _Serialized] = {}
        stack: list[tuple[ASTNode, bool]] = [(self, False)]
        while stack:
            node, expanded = stack.pop()
            if not expanded:
                stack.append((node, True))
                stack.extend((child, False) for child in _child_nodes(node))
                continue
            data: dict[str, Any] = {"kind": node.kind, "line": None}
            line: int | None = None
            for name in node.fields:
                data[name], value_line = _serialize(getattr(node, name), done)
                if line is None:
                    line = value_line
            data["line"] = line
            done[id(node)] = (data, line)
        return done[id(self)][0]  # type: ignore[return-value]


class Stmt(ASTNode):
    """Marker base for statement nodes."""


class Expr(ASTNode):
    """Marker base for expression nodes."""


# Statements


class VarStmt(Stmt):
    """`var <name> = <value>`"""

    kind = "var"
    fields = ("name", "value")

    def __init__(self, name: Token, value: Expr) -> None:
        self.name = name
        self.value = value


class IfStmt(Stmt):
    """`if <condition> { ... } else ...`

    `else_body` is None when there is no else-clause. An `else if` is stored
    as an else-body holding exactly one nested IfStmt.
    """

    kind = "if"
    fields = ("condition", "then_body", "else_body")

    def __init__(
        self,
        condition: Expr,
        then_body: list[Stmt],
        else_body: list[Stmt] | None = None,
    ) -> None:
        self.condition = condition
        self.then_body = then_body
        self.else_body = else_body

    @property
    def is_else_if(self) -> bool:
        """True when the else-clause is a single chained IfStmt."""
        return (
            self.else_body is not None
            and len(self.else_body) == 1
            and isinstance(self.else_body[0], IfStmt)
        )


class ForStmt(Stmt):
    """`for <iterator> in <iterable> { ... }`"""

    kind = "for"
    fields = ("iterator", "iterable", "body")

    def __init__(self, iterator: Token, iterable: Expr, body: list[Stmt]) -> None:
        self.iterator = iterator
        self.iterable = iterable
        self.body = body


class CommandStmt(Stmt):
    """A bare identifier followed by zero or more argument expressions."""

    kind = "command"
    fields = ("name", "args")

    def __init__(self, name: Token, args: list[Expr]) -> None:
        self.name = name
        self.args = args


# Expressions


class LiteralExpr(Expr):
    kind = "literal"
    fields = ("value",)

    def __init__(self, value: LiteralValue) -> None:
        self.value = value

    def same_shape(self, other: Any) -> bool:
        # True == 1.0 in Python; literals of different tags are never equal.
        return super().same_shape(other) and type(self.value) is type(other.value)


class VariableExpr(Expr):
    kind = "variable"
    fields = ("name",)

    def __init__(self, name: Token) -> None:
        self.name = name


class UnaryExpr(Expr):
    kind = "unary"
    fields = ("operator", "operand")

    def __init__(self, operator: Token, operand: Expr) -> None:
        self.operator = operator
        self.operand = operand


class BinaryExpr(Expr):
    kind = "binary"
    fields = ("left", "operator", "right")

    def __init__(self, left: Expr, operator: Token, right: Expr) -> None:
        self.left = left
        self.operator = operator
        self.right = right


__all__ = [
    "ASTDict",
    "ASTNode",
    "BinaryExpr",
    "CommandStmt",
    "Expr",
    "ForStmt",
    "IfStmt",
    "LiteralExpr",
    "LiteralValue",
    "Stmt",
    "UnaryExpr",
    "VarStmt",
    "VariableExpr",
]
