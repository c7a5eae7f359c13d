"""
Lexical analyzer for the nibbl programming language.

This module turns raw source text into tokens, one token per call:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: Immutable lexical token with type, literal text, and source location.
    Lexer: Pull-based scanner producing Tokens from a CharacterStream on demand.

Features:
    - Skips whitespace (space, tab, carriage return, newline)
    - Longest-match recognition of operators, so `==` wins over `=`
    - Recognizes:
        * Identifiers and keywords (`fn`, `let`, `true`, `false`, `if`, `else`, `return`)
        * Integer literals (digit runs; signs belong to the parser)
        * Operators and punctuation
    - Unknown characters become ILLEGAL tokens instead of raising

Example:
    >>> lexer = Lexer(CharacterStream("let x = 5;"))
    >>> lexer.next_token()
    Token(LET, 'let')

Exports:
    - CharacterStream
    - Token
    - Lexer
    - token_hashmap
"""

import string
from typing import Any

from nibbl.nibbl_constants import MAX_OPERATOR_LENGTH, TokenType, token_hashmap

LETTERS = frozenset(string.ascii_letters + "_")
DIGITS = frozenset(string.digits)
WHITESPACE = frozenset(" \t\r\n")


class CharacterStream:
    """
    A utility for reading characters from a string source with line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

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
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character `offset` places ahead without advancing, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def current(self) -> str | None:
        return self.source[self.position] if self.position < len(self.source) else None

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class Token:
    """A single lexical token.

    Tokens are values: once built, their attributes cannot be reassigned.

    Attributes:
        type (TokenType): The token kind.
        literal (str): The exact source text matched ("" for EOF).
        line (int): The 1-based line number where the token starts.
        col (int): The 1-based column number where the token starts.
    """

    __slots__ = ("type", "literal", "line", "col")

    type: TokenType
    literal: str
    line: int
    col: int

    def __init__(self, type_: TokenType, literal: str, line: int = 0, col: int = 0):
        object.__setattr__(self, "type", type_)
        object.__setattr__(self, "literal", literal)
        object.__setattr__(self, "line", line)
        object.__setattr__(self, "col", col)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"Token is immutable, cannot set {name!r}")

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.literal!r})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.literal == other.literal
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.type, self.literal, self.line, self.col))


class Lexer:
    """Lexical analyzer for the nibbl language.

    Tokens are produced lazily: each `next_token()` call consumes exactly the
    characters of the token it returns. Nothing is buffered.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    def peek(self) -> str:
        return self.stream.current() or ""

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        while not self.stream.end_of_file() and self.peek() in WHITESPACE:
            self.advance()

    def match_operator(self) -> Token | None:
        """Attempts to match the longest valid operator from the current position.

        Returns:
            Token | None: A Token if a match is found, otherwise None.
        """
        line, col = self.stream.line, self.stream.column
        max_token = None
        match_len = 0
        candidate = ""

        for i in range(MAX_OPERATOR_LENGTH):
            ch = self.stream.peek(i)
            if ch == "":
                break
            candidate += ch
            if candidate in token_hashmap:
                max_token = candidate
                match_len = i + 1

        if max_token:
            for _ in range(match_len):
                self.advance()
            return Token(token_hashmap[max_token], max_token, line, col)

        return None

    def read_while(self, allowed: frozenset[str]) -> str:
        text = ""
        while not self.stream.end_of_file() and self.peek() in allowed:
            text += self.advance()
        return text

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Once the input is exhausted every call returns an EOF token.
        """
        self.skip_whitespace()

        line, col = self.stream.line, self.stream.column
        if self.stream.end_of_file():
            return Token(TokenType.EOF, "", line, col)

        ch = self.peek()

        # 1. Identifier or keyword
        if ch in LETTERS:
            ident = self.read_while(LETTERS | DIGITS)
            return Token(token_hashmap.get(ident, TokenType.IDENT), ident, line, col)

        # 2. Integer
        if ch in DIGITS:
            return Token(TokenType.INT, self.read_while(DIGITS), line, col)

        # 3. Operator or punctuation
        token = self.match_operator()
        if token:
            return token

        # 4. Unknown character
        return Token(TokenType.ILLEGAL, self.advance(), line, col)


__all__ = ["CharacterStream", "Lexer", "Token", "token_hashmap"]
