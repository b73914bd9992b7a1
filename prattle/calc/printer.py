"""
Source printer for calc expression trees.

Renders a tree as fully parenthesized calc source. Parsing the output again
yields an equal tree.

Author: xwest
"""

from typing import Any

from .ast_nodes import (
    BinaryOp, Expr, ExprVisitor, Ident, Int, TernaryOp, TernaryOpKind, UnaryOp,
)


class SourcePrinter(ExprVisitor):
    """Visitor producing fully parenthesized calc source."""

    def visit_int(self, node: Int) -> str:
        return str(node.value)

    def visit_ident(self, node: Ident) -> str:
        return node.name

    def visit_unary(self, node: UnaryOp) -> str:
        operand = node.operand.accept(self)
        symbol = node.op.symbol
        if node.op.fixity == "prefix":
            return f"({symbol} {operand})"
        if node.op.fixity == "postfix":
            return f"({operand} {symbol})"
        # Spaces keep nested bars apart: | | x | | rather than ||x||
        return f"{symbol} {operand} {symbol}"

    def visit_binary(self, node: BinaryOp) -> str:
        return f"({node.lhs.accept(self)} {node.op.symbol} {node.rhs.accept(self)})"

    def visit_ternary(self, node: TernaryOp) -> str:
        first, second, third = (child.accept(self) for child in node.children())
        if node.op is TernaryOpKind.LET:
            return f"({first} := {second} in {third})"
        return f"(if {first} then {second} else {third})"


def to_source(expr: Expr) -> str:
    """Render ``expr`` as fully parenthesized source text."""
    return expr.accept(SourcePrinter())


def dump(expr: Any, indent: int = 0) -> str:
    """Indented, one-node-per-line rendering of a tree for debugging."""
    pad = "  " * indent
    if isinstance(expr, Int):
        return f"{pad}Int({expr.value})"
    if isinstance(expr, Ident):
        return f"{pad}Ident({expr.name})"
    lines = [f"{pad}{type(expr).__name__}({expr.op.name})"]
    lines.extend(dump(child, indent + 1) for child in expr.children())
    return "\n".join(lines)
