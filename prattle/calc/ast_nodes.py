"""
Expression tree for the calc reference grammar.

Nodes are immutable and compare structurally, so two parses of equivalent
input produce equal trees. Each node supports the visitor pattern.

Author: xwest
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, List


class UnaryOpKind(Enum):
    """Unary operators: value is the symbol, fixity says where it goes."""
    NEG = ("-", "prefix")
    NOT = ("!", "prefix")
    TRY = ("?", "postfix")
    ABS = ("|", "circumfix")
    NORM = ("||", "circumfix")

    @property
    def symbol(self) -> str:
        return self.value[0]

    @property
    def fixity(self) -> str:
        return self.value[1]


class BinaryOpKind(Enum):
    """Binary infix operators."""
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "mod"
    POW = "^"
    EQ = "="

    @property
    def symbol(self) -> str:
        return self.value


class TernaryOpKind(Enum):
    """Mixfix operators with three operands."""
    IF_THEN_ELSE = "if"   # if c then a else b, or a when c else b
    LET = ":="            # x := value in body


class ExprVisitor(ABC):
    """Visitor interface for calc expression trees."""

    @abstractmethod
    def visit_int(self, node: "Int") -> Any:
        pass

    @abstractmethod
    def visit_ident(self, node: "Ident") -> Any:
        pass

    @abstractmethod
    def visit_unary(self, node: "UnaryOp") -> Any:
        pass

    @abstractmethod
    def visit_binary(self, node: "BinaryOp") -> Any:
        pass

    @abstractmethod
    def visit_ternary(self, node: "TernaryOp") -> Any:
        pass


class Expr(ABC):
    """Base class for all expression nodes."""

    @abstractmethod
    def accept(self, visitor: ExprVisitor) -> Any:
        """Accept a visitor (visitor pattern)."""

    @abstractmethod
    def children(self) -> List["Expr"]:
        """Get all child nodes."""


@dataclass(frozen=True)
class Int(Expr):
    """Integer literal."""
    value: int

    def accept(self, visitor: ExprVisitor) -> Any:
        return visitor.visit_int(self)

    def children(self) -> List[Expr]:
        return []


@dataclass(frozen=True)
class Ident(Expr):
    """Identifier reference."""
    name: str

    def accept(self, visitor: ExprVisitor) -> Any:
        return visitor.visit_ident(self)

    def children(self) -> List[Expr]:
        return []


@dataclass(frozen=True)
class UnaryOp(Expr):
    """Prefix, postfix or circumfix operation."""
    op: UnaryOpKind
    operand: Expr

    def accept(self, visitor: ExprVisitor) -> Any:
        return visitor.visit_unary(self)

    def children(self) -> List[Expr]:
        return [self.operand]


@dataclass(frozen=True)
class BinaryOp(Expr):
    """Infix operation."""
    op: BinaryOpKind
    lhs: Expr
    rhs: Expr

    def accept(self, visitor: ExprVisitor) -> Any:
        return visitor.visit_binary(self)

    def children(self) -> List[Expr]:
        return [self.lhs, self.rhs]


@dataclass(frozen=True)
class TernaryOp(Expr):
    """
    Mixfix operation.

    For IF_THEN_ELSE the operands are (condition, then, else) whichever
    surface form was used; for LET they are (target, value, body).
    """
    op: TernaryOpKind
    first: Expr
    second: Expr
    third: Expr

    def accept(self, visitor: ExprVisitor) -> Any:
        return visitor.visit_ternary(self)

    def children(self) -> List[Expr]:
        return [self.first, self.second, self.third]
