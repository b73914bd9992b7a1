"""
Engine configuration.

Policies that change how strictly the engine treats its input. Grammars
pass a ParserConfig to PrattParser; everything defaults to the permissive
behaviour.

Author: xwest
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ParserConfig:
    """Options controlling a PrattParser."""

    # Raise MissingInterfix when a mixfix operator's separator is absent,
    # instead of treating the separator as optional.
    strict_interfix: bool = False

    # Raise TrailingInput when parse() stops before the end of the stream.
    require_end: bool = False

    # Nesting levels allowed before NestingTooDeep is raised. Each operand
    # level counts one, a nested parse() from a callback (a group) counts
    # three. If the interpreter stack runs out first, NestingTooDeep is
    # raised all the same.
    max_depth: int = 200

    def __post_init__(self):
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")


DEFAULT_CONFIG = ParserConfig()
