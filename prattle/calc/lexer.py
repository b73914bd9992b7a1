"""
calc Lexer - turns expression text into token trees

Parentheses never reach the Pratt engine: the lexer folds each balanced
pair into one GROUP token whose children are the tokens in between.

Author: xwest
"""

import re
from typing import List, Tuple

from .tokens import KEYWORDS, PUNCTUATION, SourceLocation, TokenTree, TokenType
from .errors import (
    create_invalid_character_error, create_unclosed_group_error,
    create_unopened_group_error,
)


class Lexer:
    """
    calc lexical analyzer.

    Converts source text into a list of token trees, skipping whitespace
    and ``//`` line comments.
    """

    def __init__(self, source: str, filename: str = "<unknown>"):
        """
        Initialize the lexer with source text.

        Args:
            source: Expression text
            filename: Name used in error locations
        """
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1

        self._compile_patterns()

    def _compile_patterns(self):
        """Compile regex patterns used by the lexer."""
        self.integer_pattern = re.compile(r'[0-9][0-9_]*')
        self.identifier_pattern = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')

    def tokenize(self) -> List[TokenTree]:
        """
        Tokenize the entire source.

        Returns:
            Top-level token trees (no EOF marker)

        Raises:
            LexerError: On an invalid character or unbalanced parentheses
        """
        self.pos = 0
        self.line = 1
        self.column = 1

        # Each open group: (location of its '(', tokens collected so far)
        stack: List[Tuple[SourceLocation, List[TokenTree]]] = []
        tokens: List[TokenTree] = []

        while True:
            self._skip_whitespace_and_comments()
            if self.pos >= len(self.source):
                break

            token = self._next_token()
            if token.type is TokenType.PUNCT and token.lexeme == "(":
                stack.append((token.location, tokens))
                tokens = []
            elif token.type is TokenType.PUNCT and token.lexeme == ")":
                if not stack:
                    raise create_unopened_group_error(token.location)
                open_location, outer = stack.pop()
                outer.append(TokenTree(TokenType.GROUP, "()", tuple(tokens), open_location))
                tokens = outer
            else:
                tokens.append(token)

        if stack:
            raise create_unclosed_group_error(stack[-1][0], self._location())

        return tokens

    def _next_token(self) -> TokenTree:
        """Get the next token from the source."""
        location = self._location()
        current_char = self.source[self.pos]

        match = self.integer_pattern.match(self.source, self.pos)
        if match:
            self._advance_by(len(match.group()))
            return TokenTree(TokenType.LITERAL, match.group(), location=location)

        match = self.identifier_pattern.match(self.source, self.pos)
        if match:
            text = match.group()
            self._advance_by(len(text))
            token_type = TokenType.KEYWORD if text in KEYWORDS else TokenType.IDENT
            return TokenTree(token_type, text, location=location)

        for op in PUNCTUATION:
            if self.source.startswith(op, self.pos):
                self._advance_by(len(op))
                return TokenTree(TokenType.PUNCT, op, location=location)

        raise create_invalid_character_error(current_char, location)

    def _skip_whitespace_and_comments(self):
        """Skip whitespace and comments."""
        while self.pos < len(self.source):
            if self.source[self.pos].isspace():
                self._advance()
                continue

            # Skip line comments //
            if self.source.startswith('//', self.pos):
                while self.pos < len(self.source) and self.source[self.pos] != '\n':
                    self._advance()
                continue

            break

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line, self.column, self.pos)

    def _advance(self):
        """Advance position by one character, updating line/column."""
        if self.pos < len(self.source):
            if self.source[self.pos] == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def _advance_by(self, count: int):
        """Advance position by multiple characters."""
        for _ in range(count):
            self._advance()


def tokenize_string(source: str, filename: str = "<string>") -> List[TokenTree]:
    """
    Convenience function to tokenize a source string.

    Raises:
        LexerError: If lexing fails
    """
    return Lexer(source, filename).tokenize()
