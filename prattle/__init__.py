"""
prattle - a reusable Pratt parsing engine

Builds expression trees from a flat token stream by top-down operator
precedence (Pratt) parsing. The grammar is supplied by the caller: it
classifies each token with an operator descriptor and constructs the tree
nodes, the engine does the binding-power bookkeeping.

Architecture:
    prattle/
    ├── precedence.py    # Precedence, Associativity, Arity, Affix, Op
    ├── stream.py        # Single-lookahead token stream
    ├── engine.py        # PrattParser: parse/nud/led/binding powers
    ├── errors.py        # PrattError hierarchy
    ├── config.py        # ParserConfig policies
    ├── calc/            # Reference expression grammar (lexer, tree, printer)
    └── cli.py           # Command-line front end for the reference grammar

Author: xwest
License: MIT
"""

from ._version import __version__
from .config import DEFAULT_CONFIG, ParserConfig
from .engine import PrattParser
from .errors import (
    EmptyInput, MissingInterfix, NestingTooDeep, PrattError, TrailingInput,
    UnexpectedArity, UnexpectedInfix, UnexpectedInterfix, UnexpectedNilfix,
    UnexpectedPostfix, UnexpectedPrefix, UserError,
)
from .precedence import Affix, Arity, Associativity, Op, Precedence, combine_affixes
from .stream import TokenStream

__author__ = "xwest"
__license__ = "MIT"

__all__ = [
    # Engine
    "PrattParser",
    "TokenStream",
    "ParserConfig",
    "DEFAULT_CONFIG",

    # Operator descriptors
    "Precedence", "Associativity", "Arity", "Affix", "Op", "combine_affixes",

    # Error handling
    "PrattError", "EmptyInput", "UnexpectedNilfix", "UnexpectedPrefix",
    "UnexpectedInfix", "UnexpectedPostfix", "UnexpectedInterfix",
    "UnexpectedArity", "MissingInterfix", "TrailingInput", "NestingTooDeep",
    "UserError",

    # Version info
    "__version__",
    "__author__",
    "__license__",
]
