"""
Token definitions for the calc reference grammar.

The calc lexer produces token trees rather than flat tokens: everything
between a pair of parentheses is collected into a single GROUP token, which
the grammar parses recursively. This mirrors how a grammar generator hands
pre-grouped input to a Pratt parser.

Author: xwest
"""

from enum import Enum, auto
from dataclasses import dataclass, field
from typing import Tuple


class TokenType(Enum):
    """Kinds of token tree produced by the calc lexer."""
    GROUP = auto()      # ( ... )
    LITERAL = auto()    # 42
    IDENT = auto()      # x, result_1
    KEYWORD = auto()    # if, then, else, when, in, mod
    PUNCT = auto()      # + - * / ^ = ? ! | || := ( )


KEYWORDS = frozenset({"if", "then", "else", "when", "in", "mod"})

# Longest first so that "||" wins over "|" and ":=" is not split
PUNCTUATION = ("||", ":=", "+", "-", "*", "/", "^", "=", "?", "!", "|", "(", ")")


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source text.

    Used for error reporting only; it never takes part in token equality.
    """
    filename: str
    line: int
    column: int
    offset: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"


@dataclass(frozen=True)
class TokenTree:
    """
    A token, or a parenthesized group of token trees.

    Two token trees are equal when they have the same type, text and
    children, wherever they came from.
    """
    type: TokenType
    lexeme: str
    children: Tuple["TokenTree", ...] = ()
    location: SourceLocation = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        if self.type is TokenType.GROUP:
            return "(" + " ".join(str(child) for child in self.children) + ")"
        return self.lexeme

    def __repr__(self) -> str:
        if self.type is TokenType.GROUP:
            return f"Group({list(self.children)!r})"
        return f"{self.type.name.capitalize()}({self.lexeme!r})"

    @property
    def is_group(self) -> bool:
        return self.type is TokenType.GROUP


def group(*children: TokenTree) -> TokenTree:
    return TokenTree(TokenType.GROUP, "()", tuple(children))


def literal(text: str) -> TokenTree:
    return TokenTree(TokenType.LITERAL, text)


def ident(text: str) -> TokenTree:
    return TokenTree(TokenType.IDENT, text)


def keyword(text: str) -> TokenTree:
    return TokenTree(TokenType.KEYWORD, text)


def punct(text: str) -> TokenTree:
    return TokenTree(TokenType.PUNCT, text)
