"""
Error handling for the prattle engine.

Every failure the engine reports is an exception deriving from PrattError.
Each class carries a stable code and a help text, so callers can report a
diagnostic without matching on message strings. The first error aborts the
parse; the engine never recovers or returns a partial tree.

Author: xwest
"""

from typing import Any, Dict, Optional, Type


class PrattError(Exception):
    """
    Base class for every error raised by the engine.

    Subclasses set ``code`` and ``help_text``.
    """

    code = "E000"
    help_text: Optional[str] = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message

    def render(self) -> str:
        """Multi-line diagnostic including the error code and help text."""
        result = f"ERROR[{self.code}]: {self.message}\n"
        if self.help_text:
            result += f"  help: {self.help_text}\n"
        return result


class EmptyInput(PrattError):
    """No token was available where an operand is required."""

    code = "E001"
    help_text = "An operand is missing, e.g. after a prefix or infix operator."

    def __init__(self):
        super().__init__("Pratt parser was called with empty input.")


class UnexpectedAffix(PrattError):
    """A token's affix does not fit the position it was found in."""

    expected = ""
    found = ""

    def __init__(self, token: Any):
        self.token = token
        super().__init__(f"Expected {self.expected}, found {self.found} {token!r}")


class UnexpectedNilfix(UnexpectedAffix):
    code = "E002"
    expected = "Infix or Postfix"
    found = "Nilfix"
    help_text = "Two operands follow each other without an operator between them."


class UnexpectedPrefix(UnexpectedAffix):
    code = "E003"
    expected = "Infix or Postfix"
    found = "Prefix"
    help_text = "A prefix operator follows an operand without an infix operator between them."


class UnexpectedInfix(UnexpectedAffix):
    code = "E004"
    expected = "Nilfix or Prefix"
    found = "Infix"
    help_text = "An infix operator is missing its left operand."


class UnexpectedPostfix(UnexpectedAffix):
    code = "E005"
    expected = "Nilfix or Prefix"
    found = "Postfix"
    help_text = "A postfix operator is missing its operand."


class UnexpectedInterfix(UnexpectedAffix):
    code = "E006"
    expected = "an operand or operator"
    found = "Interfix"
    help_text = "A separator token appears outside the operator it belongs to."


class UnexpectedArity(PrattError):
    """The affix/arity pairing of an operator has no parse rule."""

    code = "E007"
    help_text = ("Supported shapes are Nilfix/Nullary, Prefix/Unary, Prefix/Ternary, "
                 "Circumfix/Unary, Postfix/Unary, Postfix/Ternary, Infix/Binary "
                 "and Infix/Ternary.")

    def __init__(self, token: Any, op: Any):
        self.token = token
        self.op = op
        super().__init__(
            f"No parse rule for {op.affix.name} {op.arity.name} operator {token!r}"
        )


class MissingInterfix(PrattError):
    """A mixfix operator's separator token is absent (strict policy only)."""

    code = "E008"
    help_text = "Add the separator, or disable strict_interfix to make it optional."

    def __init__(self, expected: Any, found: Any):
        self.expected = expected
        self.found = found
        wanted = "a separator" if expected is None else repr(expected)
        got = "end of input" if found is None else repr(found)
        super().__init__(f"Expected {wanted}, found {got}")


class TrailingInput(PrattError):
    """The parse finished before the stream was exhausted (require_end only)."""

    code = "E009"
    help_text = ("The remaining tokens cannot continue the expression, e.g. a second "
                 "use of a non-associative operator.")

    def __init__(self, token: Any):
        self.token = token
        super().__init__(f"Unexpected trailing input starting at {token!r}")


class NestingTooDeep(PrattError):
    """
    The expression nests deeper than ParserConfig.max_depth, or deep enough
    to exhaust the interpreter stack first. ``depth`` is set in the latter
    case.
    """

    code = "E010"
    help_text = "Raise ParserConfig.max_depth together with sys.setrecursionlimit()."

    def __init__(self, limit: int, depth: Optional[int] = None):
        self.limit = limit
        self.depth = depth
        if depth is None:
            message = f"Expression nesting exceeds the limit of {limit} levels"
        else:
            message = (f"Expression nesting exhausted the Python stack at {depth} "
                       f"levels (limit {limit})")
        super().__init__(message)


class UserError(PrattError):
    """
    Wraps an exception raised by a grammar callback.

    The original exception is kept in ``error`` and chained as
    ``__cause__``.
    """

    code = "E100"
    help_text = "Raised by the grammar while classifying a token or building a node."

    def __init__(self, error: BaseException):
        self.error = error
        super().__init__(str(error) or type(error).__name__)


PRATT_ERROR_CODES: Dict[str, Type[PrattError]] = {
    cls.code: cls
    for cls in (
        EmptyInput, UnexpectedNilfix, UnexpectedPrefix, UnexpectedInfix,
        UnexpectedPostfix, UnexpectedInterfix, UnexpectedArity, MissingInterfix,
        TrailingInput, NestingTooDeep, UserError,
    )
}
