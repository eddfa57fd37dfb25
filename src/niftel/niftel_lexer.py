"""
Lexical analyzer for the niftel scripting language.

This module converts raw source text into a flat token stream:

Classes:
    CharacterStream: Stream abstraction for reading characters with line tracking.
    Token: Immutable record of one token with kind, lexeme, decoded literal and line.
    Lexer: Converts a CharacterStream into a sequence of tokens.

Features:
    - Skips spaces, tabs, carriage returns and newlines
    - Recognizes `==`, `!=`, `<=`, `>=` by peeking one character ahead
    - Recognizes:
        * Identifiers, reserved words and the literals `true`/`false`/`nil`
        * Numbers (`123`, `3.14`), decoded to float
        * Strings delimited by `"`, decoded without escape processing
        * Single-character operators and delimiters

Errors:
    The lexer never raises on bad input. Unterminated strings and unknown
    characters come back as in-band `ERROR` tokens carrying a message, and
    scanning always finishes with exactly one `EOF` token.

Example:
    >>> [tok.kind for tok in scan("var x = 1")]
    ['VAR', 'IDENT', 'EQUAL', 'NUMBER', 'EOF']

Exports:
    - CharacterStream
    - Token
    - Lexer
    - scan
"""

from __future__ import annotations

import logging
from typing import Any

from niftel.niftel_constants import (
    EOF,
    ERROR,
    IDENT,
    NUMBER,
    STRING,
    double_char_tokens,
    keyword_tokens,
    literal_keywords,
    single_char_tokens,
)

logger = logging.getLogger(__name__)


class CharacterStream:
    """
    A utility for reading characters from a string source with line tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1):
        self.source = source
        self.position = position
        self.line = line

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Returns:
            str: The next character.

        Raises:
            EOFError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise EOFError(
                f"Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """
        Returns the character at the given offset without advancing.

        Returns:
            str: The character at the offset, or an empty string if out of bounds.
        """
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class Token:
    """Represents a single lexical token in the niftel language.

    Tokens are created once by the lexer and never mutated afterwards.

    Attributes:
        kind (str): The token kind (e.g. 'IDENT', 'NUMBER', 'EOF').
        lexeme (str): The exact source text of the token.
        literal (float | str | None): Decoded value for numbers and strings.
        line (int): The 1-based line on which the token ends.
        message (str | None): Description of the problem for 'ERROR' tokens.
    """

    __slots__ = ("kind", "lexeme", "literal", "line", "message")

    kind: str
    lexeme: str
    literal: float | str | None
    line: int
    message: str | None

    def __init__(
        self,
        kind: str,
        lexeme: str,
        literal: float | str | None = None,
        line: int = 1,
        message: str | None = None,
    ) -> None:
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "lexeme", lexeme)
        object.__setattr__(self, "literal", literal)
        object.__setattr__(self, "line", line)
        object.__setattr__(self, "message", message)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"Token is immutable; cannot set {name!r}")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"Token is immutable; cannot delete {name!r}")

    def __repr__(self) -> str:
        if self.kind == ERROR:
            return f"Token({self.kind}, {self.message!r}, line={self.line})"
        if self.literal is not None:
            return f"Token({self.kind}, {self.lexeme!r}, {self.literal!r}, line={self.line})"
        return f"Token({self.kind}, {self.lexeme!r}, line={self.line})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.kind == other.kind
            and self.lexeme == other.lexeme
            and type(self.literal) is type(other.literal)
            and self.literal == other.literal
            and self.line == other.line
            and self.message == other.message
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.lexeme, self.literal, self.line, self.message))


def is_alpha(ch: str) -> bool:
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z") or ch == "_"


def is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def is_alphanumeric(ch: str) -> bool:
    return is_alpha(ch) or is_digit(ch)


class Lexer:
    """Lexical analyzer for the niftel language.

    The Lexer takes a CharacterStream and converts it into Token objects, one
    per call to `next_token()`.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream
        self.start = 0

    def peek(self, offset: int = 0) -> str:
        return self.stream.peek(offset)

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        """Skips spaces, tabs, carriage returns and newlines."""
        while not self.stream.end_of_file() and self.peek() in " \r\t\n":
            self.advance()

    def make_token(
        self, kind: str, literal: float | str | None = None
    ) -> Token:
        lexeme = self.stream.source[self.start : self.stream.position]
        return Token(kind, lexeme, literal, self.stream.line)

    def error_token(self, message: str) -> Token:
        lexeme = self.stream.source[self.start : self.stream.position]
        return Token(ERROR, lexeme, line=self.stream.line, message=message)

    def identifier(self) -> Token:
        while is_alphanumeric(self.peek()):
            self.advance()
        text = self.stream.source[self.start : self.stream.position]
        if text in keyword_tokens:
            return self.make_token(keyword_tokens[text])
        if text in literal_keywords:
            return self.make_token(literal_keywords[text])
        return self.make_token(IDENT)

    def number(self) -> Token:
        while is_digit(self.peek()):
            self.advance()
        # A trailing '.' without a digit after it is left for the next token.
        if self.peek() == "." and is_digit(self.peek(1)):
            self.advance()
            while is_digit(self.peek()):
                self.advance()
        text = self.stream.source[self.start : self.stream.position]
        return self.make_token(NUMBER, float(text))

    def string(self) -> Token:
        while not self.stream.end_of_file() and self.peek() != '"':
            self.advance()
        if self.stream.end_of_file():
            return self.error_token("unterminated string")
        self.advance()  # closing quote
        value = self.stream.source[self.start + 1 : self.stream.position - 1]
        return self.make_token(STRING, value)

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Returns:
            Token: The next token. Once the input is exhausted every call
            returns an 'EOF' token with an empty lexeme.
        """
        self.skip_whitespace()
        self.start = self.stream.position

        if self.stream.end_of_file():
            return Token(EOF, "", line=self.stream.line)

        ch = self.advance()

        if is_alpha(ch):
            return self.identifier()
        if is_digit(ch):
            return self.number()
        if ch == '"':
            return self.string()

        pair = ch + self.peek()
        if pair in double_char_tokens:
            self.advance()
            return self.make_token(double_char_tokens[pair])
        if ch in single_char_tokens:
            return self.make_token(single_char_tokens[ch])

        return self.error_token(f"unexpected character '{ch}'")

    def tokens(self) -> list[Token]:
        """Drains the stream into a list ending with exactly one 'EOF' token."""
        result: list[Token] = []
        while True:
            tok = self.next_token()
            result.append(tok)
            if tok.kind == EOF:
                break
        logger.debug("scanned %d tokens", len(result))
        return result


def scan(source: str) -> list[Token]:
    """Scans a complete source string into a token list."""
    return Lexer(CharacterStream(source)).tokens()


__all__ = ["CharacterStream", "Lexer", "Token", "scan"]
