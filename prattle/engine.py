"""
prattle Pratt Engine

Implements top-down operator precedence (Pratt) parsing over an opaque
token stream. The engine never looks at token text: a grammar subclasses
PrattParser, classifies each token with ``query`` and builds the output tree
through the ``nullary``/``unary``/``binary``/``ternary`` callbacks.

Key Features:
- Left, right and non-associative infix operators
- Prefix, postfix and circumfix unary operators
- Mixfix ternary operators (``if a then b else c``, ``a ? b : c``,
  ``x := v in body``) with optional or mandatory separators
- Tokens with both a leading and a continuation role (composite affixes)
- Linear time, no backtracking: every token is consumed at most once

Author: xwest
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, Optional, Union

from .config import DEFAULT_CONFIG, ParserConfig
from .errors import (
    EmptyInput, MissingInterfix, NestingTooDeep, PrattError, TrailingInput,
    UnexpectedArity, UnexpectedInfix, UnexpectedInterfix, UnexpectedNilfix,
    UnexpectedPostfix, UnexpectedPrefix, UserError,
)
from .precedence import Affix, Arity, Associativity, Op, Precedence
from .stream import TokenStream

logger = logging.getLogger(__name__)

StopPredicate = Callable[[Any], bool]


class PrattParser(ABC):
    """
    Pratt parsing engine.

    Subclass it once per grammar and implement the five callbacks. Any
    exception a callback raises is reported as UserError, except PrattError
    itself, which passes through unchanged so that callbacks can parse
    nested groups with ``self.parse(...)``.

    An instance is re-entrant (callbacks may call back into it) but must not
    be shared between threads.
    """

    # Extra nesting levels charged when a callback re-enters parse(), e.g.
    # for a parenthesized group. That path runs through about three times
    # as many interpreter frames as an operand level.
    NESTED_PARSE_COST = 2

    def __init__(self, config: Optional[ParserConfig] = None):
        self.config = config if config is not None else DEFAULT_CONFIG
        self._depth = 0

    # Grammar callbacks

    @abstractmethod
    def query(self, token: Any) -> Op:
        """Classify a token. Must not depend on how often it is called."""

    @abstractmethod
    def nullary(self, token: Any) -> Any:
        """Build a leaf, e.g. a literal, an identifier or a parsed group."""

    @abstractmethod
    def unary(self, op: Any, operand: Any) -> Any:
        """Build a prefix, postfix or circumfix node."""

    @abstractmethod
    def binary(self, op: Any, lhs: Any, rhs: Any) -> Any:
        """Build an infix node."""

    @abstractmethod
    def ternary(self, op: Any, first: Any, second: Any, third: Any) -> Any:
        """Build a mixfix node from the token that introduced it."""

    def is_follow(self, token: Any, expected: Any) -> bool:
        """Check if ``token`` is the separator an operator's follow set expects."""
        return token == expected

    # Entry points

    def parse(self, tokens: Union[Iterable[Any], TokenStream]) -> Any:
        """
        Parse an expression at minimum precedence.

        Args:
            tokens: Any iterable of tokens, or a TokenStream to continue

        Returns:
            The tree built by the grammar callbacks

        Raises:
            PrattError: If the input is empty or malformed. With
                ``require_end`` set, tokens left over after the expression
                raise TrailingInput; otherwise they stay in the stream.
        """
        tail = tokens if isinstance(tokens, TokenStream) else TokenStream(tokens)
        node = self.parse_until(tail)
        if self.config.require_end and not tail.is_at_end():
            raise TrailingInput(tail.peek())
        return node

    def parse_until(self, tokens: Union[Iterable[Any], TokenStream],
                    rbp: int = Precedence.MIN,
                    stop: Optional[StopPredicate] = None) -> Any:
        """
        Parse an expression that binds tighter than ``rbp``.

        ``stop`` lets an outer grammar keep tokens it owns: the engine stops
        in front of any token for which it returns True, at every nesting
        level, and leaves that token in the stream.
        """
        tail = tokens if isinstance(tokens, TokenStream) else TokenStream(tokens)
        cost = self.NESTED_PARSE_COST if self._depth else 0
        self._depth += cost
        try:
            return self.parse_input(tail, Precedence(rbp), stop)
        finally:
            self._depth -= cost

    def parse_input(self, tail: TokenStream, rbp: Precedence,
                    stop: Optional[StopPredicate] = None) -> Any:
        """Precedence-climbing loop."""
        if self._at_boundary(tail, stop):
            raise EmptyInput()
        if self._depth >= self.config.max_depth:
            raise NestingTooDeep(self.config.max_depth)

        self._depth += 1
        try:
            head = tail.next()
            info = self._query(head).leading()
            nbp = self.nbp(info)
            node = self.nud(head, tail, info, stop)
            while not self._at_boundary(tail, stop):
                info = self._query(tail.peek())
                lbp = self.lbp(info)
                if rbp < lbp < nbp:
                    head = tail.next()
                    info = info.continuing()
                    nbp = self.nbp(info)
                    node = self.led(head, tail, info, node, stop)
                else:
                    break
            return node
        finally:
            self._depth -= 1

    # Denotations

    def nud(self, head: Any, tail: TokenStream, info: Op,
            stop: Optional[StopPredicate] = None) -> Any:
        """Null-Denotation: ``head`` starts a new expression."""
        info = info.leading()
        affix, arity = info.affix, info.arity
        logger.debug("nud %s/%s %r", affix.name, arity.name, head)

        if affix is Affix.NILFIX:
            if arity is Arity.NULLARY:
                return self._call(self.nullary, head)
        elif affix is Affix.PREFIX:
            if arity is Arity.UNARY:
                rhs = self.parse_input(tail, info.precedence.normalize().lower(), stop)
                return self._call(self.unary, head, rhs)
            if arity is Arity.TERNARY:
                first = self.parse_input(tail, Precedence.MIN, stop)
                self.eat_interfix(tail, info, 0, stop)
                second = self.parse_input(tail, Precedence.MIN, stop)
                self.eat_interfix(tail, info, 1, stop)
                third = self.parse_input(tail, info.precedence.normalize().lower(), stop)
                return self._call(self.ternary, head, first, second, third)
        elif affix is Affix.CIRCUMFIX:
            if arity is Arity.UNARY:
                inner = self.parse_input(tail, info.precedence.normalize().lower(), stop)
                self.eat_interfix(tail, info, 0, stop)
                return self._call(self.unary, head, inner)
        elif affix is Affix.POSTFIX:
            raise UnexpectedPostfix(head)
        elif affix is Affix.INFIX:
            raise UnexpectedInfix(head)
        elif affix is Affix.INTERFIX:
            raise UnexpectedInterfix(head)
        raise UnexpectedArity(head, info)

    def led(self, head: Any, tail: TokenStream, info: Op, lhs: Any,
            stop: Optional[StopPredicate] = None) -> Any:
        """Left-Denotation: ``head`` continues the expression ``lhs``."""
        info = info.continuing()
        affix, arity = info.affix, info.arity
        logger.debug("led %s/%s %r", affix.name, arity.name, head)

        if affix is Affix.POSTFIX:
            if arity is Arity.UNARY:
                return self._call(self.unary, head, lhs)
            if arity is Arity.TERNARY:
                mid = self.parse_input(tail, Precedence.MIN, stop)
                self.eat_interfix(tail, info, 0, stop)
                rhs = self.parse_input(tail, self.rbp(info), stop)
                return self._call(self.ternary, head, lhs, mid, rhs)
        elif affix is Affix.INFIX:
            if arity is Arity.BINARY:
                rhs = self.parse_input(tail, self.rbp(info), stop)
                return self._call(self.binary, head, lhs, rhs)
            if arity is Arity.TERNARY:
                mid = self.parse_input(tail, Precedence.MIN, stop)
                self.eat_interfix(tail, info, 0, stop)
                rhs = self.parse_input(tail, self.rbp(info), stop)
                return self._call(self.ternary, head, lhs, mid, rhs)
        elif affix is Affix.NILFIX:
            raise UnexpectedNilfix(head)
        elif affix is Affix.PREFIX:
            raise UnexpectedPrefix(head)
        elif affix.is_separator:
            raise UnexpectedInterfix(head)
        raise UnexpectedArity(head, info)

    def eat_interfix(self, tail: TokenStream, info: Op, index: int,
                     stop: Optional[StopPredicate] = None) -> Any:
        """
        Consume the separator ``info.follow[index]`` if it is next.

        A token matches when the grammar classifies it as Interfix or
        Circumfix and ``is_follow`` accepts it. When the op declares no
        follow entry at ``index`` only an Interfix token matches, so a
        circumfix token opening the next operand stays in the stream. A
        missing separator is tolerated unless ``strict_interfix`` is set and
        the op declared one. Returns the consumed token, or None.
        """
        expects = info.expects(index)
        expected = info.follow[index] if expects else None
        found = None
        if not self._at_boundary(tail, stop):
            found = tail.peek()
            affix = self._query(found).affix
            if expects:
                matches = affix.is_separator and self._call(self.is_follow, found, expected)
            else:
                matches = affix is Affix.INTERFIX
            if matches:
                logger.debug("interfix %r", found)
                return tail.next()
        if expects and self.config.strict_interfix:
            raise MissingInterfix(expected, found)
        return None

    # Binding powers
    #
    #              <lbp>   <rbp>         <nbp>
    # Nilfix:       MIN  |   -          |  MAX
    # Prefix:       MIN  |  bp-1        |  MAX
    # Circumfix:    MIN  |  bp-1        |  MAX
    # Interfix:     MIN  |   -          |  MAX
    # Postfix:       bp  |  assoc (3ary)|  MAX
    # InfixL:        bp  |   bp         | bp+1
    # InfixR:        bp  |  bp-1        | bp+1
    # InfixN:        bp  |  bp+1        |   bp

    def lbp(self, info: Op) -> Precedence:
        """Left-Binding-Power"""
        info = info.continuing()
        if info.affix in (Affix.POSTFIX, Affix.INFIX):
            return info.precedence.normalize()
        return Precedence.MIN

    def nbp(self, info: Op) -> Precedence:
        """Next-Binding-Power"""
        if info.affix is Affix.INFIX:
            precedence = info.precedence.normalize()
            if info.associativity is Associativity.NEITHER:
                return precedence
            return precedence.raise_()
        return Precedence.MAX

    def rbp(self, info: Op) -> Precedence:
        """Right-Binding-Power of an operand to the right of a continuation."""
        precedence = info.precedence.normalize()
        if info.associativity is Associativity.RIGHT:
            return precedence.lower()
        if info.associativity is Associativity.NEITHER:
            return precedence.raise_()
        return precedence

    # Utility methods

    def _at_boundary(self, tail: TokenStream, stop: Optional[StopPredicate]) -> bool:
        if tail.is_at_end():
            return True
        return stop is not None and bool(self._call(stop, tail.peek()))

    def _query(self, token: Any) -> Op:
        return self._call(self.query, token)

    def _call(self, callback: Callable[..., Any], *args: Any) -> Any:
        try:
            return callback(*args)
        except PrattError:
            raise
        except RecursionError as error:
            # The interpreter stack ran out before max_depth was reached
            raise NestingTooDeep(self.config.max_depth, self._depth) from error
        except Exception as error:
            raise UserError(error) from error
