"""
Token vocabulary and fixed settings for the nibbl language.

Exports:
    - TokenType: closed enumeration of every token kind the lexer can produce
    - token_hashmap: literal text → TokenType for keywords, operators and punctuation
    - keywords: the reserved words (subset of token_hashmap)
    - PROGRAM, VERSION: names printed by the REPL banner
    - MAX_SOURCE_SIZE_ENV: environment variable read by the CLI input-size guard
"""

from enum import Enum

PROGRAM = "nibbl"
VERSION = "0.1"

MAX_SOURCE_SIZE_ENV = "NIBBL_MAX_SOURCE_SIZE"


class TokenType(str, Enum):
    """Kinds of tokens. The value is the name used in parser error messages."""

    EOF = "EOF"
    ILLEGAL = "ILLEGAL"

    # Identifiers + literals
    IDENT = "IDENT"
    INT = "INT"

    # Operators
    ASSIGN = "ASSIGN"
    PLUS = "PLUS"
    MINUS = "MINUS"
    BANG = "BANG"
    ASTERISK = "ASTERISK"
    SLASH = "SLASH"
    LT = "LT"
    GT = "GT"
    EQ = "EQ"
    NOT_EQ = "NOT_EQ"

    # Delimiters
    COMMA = "COMMA"
    SEMICOLON = "SEMICOLON"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    LBRACE = "LBRACE"
    RBRACE = "RBRACE"

    # Keywords
    FUNCTION = "FUNCTION"
    LET = "LET"
    TRUE = "TRUE"
    FALSE = "FALSE"
    IF = "IF"
    ELSE = "ELSE"
    RETURN = "RETURN"

    def __str__(self) -> str:
        return self.value


keywords: dict[str, TokenType] = {
    "fn": TokenType.FUNCTION,
    "let": TokenType.LET,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "return": TokenType.RETURN,
}

operator_tokens: dict[str, TokenType] = {
    "=": TokenType.ASSIGN,
    "==": TokenType.EQ,
    "!": TokenType.BANG,
    "!=": TokenType.NOT_EQ,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.ASTERISK,
    "/": TokenType.SLASH,
    "<": TokenType.LT,
    ">": TokenType.GT,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
}

token_hashmap: dict[str, TokenType] = {**keywords, **operator_tokens}

# Longest entry in operator_tokens; bounds the lexer's operator lookahead.
MAX_OPERATOR_LENGTH = max(len(op) for op in operator_tokens)

__all__ = [
    "MAX_OPERATOR_LENGTH",
    "MAX_SOURCE_SIZE_ENV",
    "PROGRAM",
    "TokenType",
    "VERSION",
    "keywords",
    "operator_tokens",
    "token_hashmap",
]
