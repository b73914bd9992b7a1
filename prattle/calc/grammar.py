"""
calc expression grammar.

A complete PrattParser implementation over the token trees produced by the
calc lexer. It exercises every operator shape the engine supports:

    1 - 2 - 3              left-associative infix
    2 ^ 3 ^ 2              right-associative infix
    a = b                  non-associative infix
    -x, !x                 prefix
    x?                     postfix
    |x|, ||x||             circumfix
    if c then a else b     prefix ternary
    a when c else b        infix ternary
    x := 1 in x + 1        postfix ternary
    a mod b / mod          token that is both a leaf and an infix operator
    (a + b)                group, parsed by a nested call

Author: xwest
"""

from enum import IntEnum
from typing import Dict, List, Optional, Tuple

from ..config import ParserConfig
from ..engine import PrattParser
from ..errors import TrailingInput
from ..precedence import Affix, Associativity, Op
from ..stream import TokenStream
from .ast_nodes import (
    BinaryOp, BinaryOpKind, Expr, Ident, Int, TernaryOp, TernaryOpKind,
    UnaryOp, UnaryOpKind,
)
from .errors import GrammarError
from .lexer import tokenize_string
from .tokens import TokenTree, TokenType


class Level(IntEnum):
    """Declared precedence levels of the calc operators."""
    NONE = 0            # | ||
    CONDITIONAL = 1     # if, when, :=
    EQUALITY = 2        # =
    TERM = 3            # + -
    FACTOR = 4          # * / mod
    POSTFIX = 5         # ?
    UNARY = 6           # - !
    POWER = 7           # ^


class ExprParser(PrattParser):
    """Pratt grammar building calc expression trees."""

    def __init__(self, config: Optional[ParserConfig] = None):
        super().__init__(config)
        self._init_operator_table()

    def _init_operator_table(self):
        """Initialize operator descriptors and node kinds."""
        P, K = TokenType.PUNCT, TokenType.KEYWORD

        self.operators: Dict[Tuple[TokenType, str], Op] = {
            (P, "="): Op.infix(Level.EQUALITY, Associativity.NEITHER),
            (P, "+"): Op.infix(Level.TERM),
            (P, "-"): Op.either(Op.prefix(Level.UNARY), Op.infix(Level.TERM)),
            (P, "*"): Op.infix(Level.FACTOR),
            (P, "/"): Op.infix(Level.FACTOR),
            (K, "mod"): Op.either(Op.nilfix(), Op.infix(Level.FACTOR)),
            (P, "?"): Op.postfix(Level.POSTFIX),
            (P, "!"): Op.prefix(Level.UNARY),
            (P, "^"): Op.infix(Level.POWER, Associativity.RIGHT),
            # Lowest level so that the bars enclose a whole expression
            (P, "|"): Op.circumfix(Level.NONE, "|"),
            (P, "||"): Op.circumfix(Level.NONE, "||"),
            (K, "if"): Op.ternary(Affix.PREFIX, Level.CONDITIONAL, ("then", "else")),
            (K, "when"): Op.ternary(Affix.INFIX, Level.CONDITIONAL, ("else",),
                                    Associativity.RIGHT),
            (P, ":="): Op.ternary(Affix.POSTFIX, Level.CONDITIONAL, ("in",),
                                  Associativity.RIGHT),
            (K, "then"): Op.interfix(),
            (K, "else"): Op.interfix(),
            (K, "in"): Op.interfix(),
        }

        self.unary_ops: Dict[str, UnaryOpKind] = {
            "-": UnaryOpKind.NEG,
            "!": UnaryOpKind.NOT,
            "?": UnaryOpKind.TRY,
            "|": UnaryOpKind.ABS,
            "||": UnaryOpKind.NORM,
        }

        self.binary_ops: Dict[str, BinaryOpKind] = {kind.symbol: kind for kind in BinaryOpKind}

    # Query information about an operator
    def query(self, token: TokenTree) -> Op:
        if token.type in (TokenType.LITERAL, TokenType.IDENT, TokenType.GROUP):
            return Op.nilfix()
        op = self.operators.get((token.type, token.lexeme))
        if op is None:
            raise GrammarError(f"Unknown operator {token.lexeme!r}")
        return op

    def is_follow(self, token: TokenTree, expected: str) -> bool:
        return token.type in (TokenType.PUNCT, TokenType.KEYWORD) and token.lexeme == expected

    # Construct a nullary expression, e.g. a number
    def nullary(self, token: TokenTree) -> Expr:
        if token.type is TokenType.LITERAL:
            return Int(int(token.lexeme))
        if token.type in (TokenType.IDENT, TokenType.KEYWORD):
            return Ident(token.lexeme)
        if token.type is TokenType.GROUP:
            return self.parse_group(token.children)
        raise GrammarError(f"Expected an operand, found {token.lexeme!r}")

    # Construct a unary expression, e.g. -1, 1? or |1|
    def unary(self, token: TokenTree, operand: Expr) -> Expr:
        kind = self.unary_ops.get(token.lexeme)
        if kind is None:
            raise GrammarError(f"{token.lexeme!r} is not a unary operator")
        return UnaryOp(kind, operand)

    # Construct a binary expression, e.g. 1 + 1
    def binary(self, token: TokenTree, lhs: Expr, rhs: Expr) -> Expr:
        kind = self.binary_ops.get(token.lexeme)
        if kind is None:
            raise GrammarError(f"{token.lexeme!r} is not a binary operator")
        return BinaryOp(kind, lhs, rhs)

    # Construct a ternary expression, e.g. if a then b else c
    def ternary(self, token: TokenTree, first: Expr, second: Expr, third: Expr) -> Expr:
        if token.lexeme == "if":
            return TernaryOp(TernaryOpKind.IF_THEN_ELSE, first, second, third)
        if token.lexeme == "when":
            # value when condition else alternative
            return TernaryOp(TernaryOpKind.IF_THEN_ELSE, second, first, third)
        if token.lexeme == ":=":
            if not isinstance(first, Ident):
                raise GrammarError("Only an identifier can be bound with ':='")
            return TernaryOp(TernaryOpKind.LET, first, second, third)
        raise GrammarError(f"{token.lexeme!r} is not a ternary operator")

    def parse_group(self, children: Tuple[TokenTree, ...]) -> Expr:
        """Parse the contents of a parenthesized group, which must be one expression."""
        tail = TokenStream(children)
        expr = self.parse(tail)
        if not tail.is_at_end():
            raise TrailingInput(tail.peek())
        return expr


def parse_tokens(tokens: List[TokenTree], config: Optional[ParserConfig] = None) -> Expr:
    """Parse already tokenized input."""
    return ExprParser(config).parse(tokens)


def parse_string(source: str, config: Optional[ParserConfig] = None,
                 filename: str = "<string>") -> Expr:
    """
    Convenience function to parse an expression string.

    Raises:
        LexerError: If the text cannot be tokenized
        PrattError: If the tokens do not form an expression
    """
    return parse_tokens(tokenize_string(source, filename), config)
