"""
Error handling for the calc reference grammar.

LexerError reports text the lexer cannot turn into tokens; it carries a
Diagnostic with the source location. GrammarError is raised by the grammar
callbacks and reaches callers of the engine wrapped in
prattle.errors.UserError.

Author: xwest
"""

from dataclasses import dataclass
from typing import List, Optional

from .tokens import SourceLocation


@dataclass
class Diagnostic:
    """A located message with optional help and suggestions."""
    message: str
    location: SourceLocation
    severity: str  # "error", "warning"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        result = f"{self.severity.upper()}: {self.message}\n"
        result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class LexerError(Exception):
    """Raised when the calc lexer meets text it cannot tokenize."""

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.location

    def __str__(self) -> str:
        return str(self.diagnostic)


class GrammarError(Exception):
    """Raised by a calc grammar callback for a token it cannot handle."""


LEXER_ERROR_CODES = {
    "L001": "Invalid character",
    "L002": "Unbalanced parenthesis",
}


def create_invalid_character_error(char: str, location: SourceLocation) -> LexerError:
    """Create an error for a character that starts no token."""
    return LexerError(
        message=f"Invalid character '{char}'",
        location=location,
        code="L001",
        help_text="Operators are + - * / ^ = ? ! | || := and the keywords if then else when in mod.",
    )


def create_unclosed_group_error(open_location: SourceLocation,
                                current_location: SourceLocation) -> LexerError:
    """Create an error for a '(' that is never closed."""
    return LexerError(
        message="Unclosed delimiter '('",
        location=current_location,
        code="L002",
        help_text=f"The opening '(' at {open_location} was never closed.",
        suggestions=["Add a closing ')'"],
    )


def create_unopened_group_error(location: SourceLocation) -> LexerError:
    """Create an error for a ')' without a matching '('."""
    return LexerError(
        message="Unmatched closing delimiter ')'",
        location=location,
        code="L002",
        suggestions=["Remove the ')' or add a matching '('"],
    )
