"""
Token stream with single-token lookahead.

The engine only ever pulls the next token or peeks at it. TokenStream
adapts any iterable (a list, a generator, a lexer) to that interface without
materialising it.

Author: xwest
"""

from typing import Any, Iterable, Iterator

_EMPTY = object()


class TokenStream:
    """Forward-only cursor over a sequence of tokens."""

    def __init__(self, tokens: Iterable[Any]):
        self._tokens: Iterator[Any] = iter(tokens)
        self._lookahead: Any = _EMPTY
        self.position = 0  # tokens consumed so far

    def _fill(self):
        if self._lookahead is _EMPTY:
            self._lookahead = next(self._tokens, _EMPTY)

    def is_at_end(self) -> bool:
        """Check if every token has been consumed."""
        self._fill()
        return self._lookahead is _EMPTY

    def peek(self, default: Any = None) -> Any:
        """Return the next token without consuming it."""
        self._fill()
        if self._lookahead is _EMPTY:
            return default
        return self._lookahead

    def next(self, default: Any = None) -> Any:
        """Consume and return the next token."""
        self._fill()
        token = self._lookahead
        if token is _EMPTY:
            return default
        self._lookahead = _EMPTY
        self.position += 1
        return token

    def __iter__(self) -> "TokenStream":
        return self

    def __next__(self) -> Any:
        if self.is_at_end():
            raise StopIteration
        return self.next()

    def __repr__(self) -> str:
        return f"TokenStream(position={self.position})"
