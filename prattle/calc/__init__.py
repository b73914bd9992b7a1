"""
calc - reference expression grammar for the prattle engine

A small arithmetic and conditional expression language used to exercise
every operator shape the engine supports, and to show how a grammar plugs
into it: the lexer groups parentheses into token trees, ExprParser
classifies tokens and builds the tree, SourcePrinter renders it back.

Author: xwest
"""

from .ast_nodes import (
    BinaryOp, BinaryOpKind, Expr, ExprVisitor, Ident, Int, TernaryOp,
    TernaryOpKind, UnaryOp, UnaryOpKind,
)
from .errors import GrammarError, LexerError
from .grammar import ExprParser, Level, parse_string, parse_tokens
from .lexer import Lexer, tokenize_string
from .printer import SourcePrinter, dump, to_source
from .tokens import SourceLocation, TokenTree, TokenType

__all__ = [
    # Grammar
    "ExprParser", "Level", "parse_string", "parse_tokens",

    # Lexer
    "Lexer", "tokenize_string", "TokenTree", "TokenType", "SourceLocation",

    # Expression tree
    "Expr", "ExprVisitor", "Int", "Ident", "UnaryOp", "BinaryOp", "TernaryOp",
    "UnaryOpKind", "BinaryOpKind", "TernaryOpKind",

    # Printing
    "SourcePrinter", "to_source", "dump",

    # Error handling
    "LexerError", "GrammarError",
]
