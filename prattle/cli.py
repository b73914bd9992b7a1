"""
Command-line front end for the calc reference grammar.

Parses one expression and prints the resulting tree:

    prattle "1 + 2 * 3"
    prattle --tokens "if a then b else c"
    prattle --source "-1? * !2 ^ 3"

Author: xwest
"""

import argparse
import logging
import sys
from typing import List, Optional

from ._version import __version__
from .calc import LexerError, dump, parse_tokens, to_source, tokenize_string
from .config import ParserConfig
from .errors import PrattError


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prattle",
        description="Parse a calc expression with the prattle Pratt engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    prattle "1 - 2 - 3"                        # Left-associative chain
    prattle "if a then if b then c else d else e"
    prattle --require-end "1 = 2 = 3"          # Rejected: '=' does not chain
        """
    )

    parser.add_argument('expression',
                        help='Expression text to parse')
    parser.add_argument('--tokens', action='store_true',
                        help='Also print the token trees produced by the lexer')
    parser.add_argument('--source', action='store_true',
                        help='Print fully parenthesized source instead of the tree')
    parser.add_argument('--strict', action='store_true',
                        help='Treat missing then/else/in/closing bars as errors')
    parser.add_argument('--require-end', action='store_true',
                        help='Reject input left over after the expression')
    parser.add_argument('--max-depth', type=int, default=200,
                        help='Maximum operand nesting depth (default: 200)')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log every nud/led dispatch')
    parser.add_argument('--version', action='version',
                        version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )

    try:
        config = ParserConfig(
            strict_interfix=args.strict,
            require_end=args.require_end,
            max_depth=args.max_depth,
        )
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    try:
        tokens = tokenize_string(args.expression, "<argv>")
        if args.tokens:
            print(f"Tokens: {tokens!r}")
        expr = parse_tokens(tokens, config)
    except LexerError as e:
        print(e, file=sys.stderr, end="")
        return 1
    except PrattError as e:
        print(e.render(), file=sys.stderr, end="")
        return 1

    print(to_source(expr) if args.source else dump(expr))
    return 0


if __name__ == "__main__":
    sys.exit(main())
