"""Lexer tokens."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Final

from dqdlpy.text import Pos


class TokenKind(IntEnum):
    # -------------------------
    # Special / sentinels
    # -------------------------
    ILLEGAL = 0  # scan error, text carries the message
    EOF = 1

    # -------------------------
    # Identifiers / literals
    # -------------------------
    IDENT = 10
    NUMBER = 11
    STRING = 12  # quoted string, quotes kept
    COMMENT = 13  # `#` to end of line

    # -------------------------
    # Keywords
    # -------------------------
    BETWEEN = 20
    AND = 21
    OR = 22
    IN = 23
    MATCHES = 24
    NOW = 25  # `now()`, parens included
    DAYS = 26
    HOURS = 27
    WITH = 28
    THRESHOLD = 29
    TRUE = 30
    FALSE = 31
    RULES = 32

    # -------------------------
    # Operators
    # -------------------------
    EQUAL = 40  # =
    GREATER_THAN = 41  # >
    LESS_THAN = 42  # <
    GREATER_EQUAL = 43  # >=
    LESS_EQUAL = 44  # <=
    PLUS = 45  # +
    MINUS = 46  # -
    MULTIPLY = 47  # *
    DIVIDE = 48  # /

    # -------------------------
    # Punctuation
    # -------------------------
    LEFT_PAREN = 50  # (
    RIGHT_PAREN = 51  # )
    LEFT_BRACKET = 52  # [
    RIGHT_BRACKET = 53  # ]
    COMMA = 54  # ,

    @property
    def display(self) -> str:
        """Spelling of the kind as used in syntax error messages."""
        return _DISPLAY.get(self, "unknown token")

    @property
    def is_expression_start(self) -> bool:
        return self in (
            TokenKind.BETWEEN,
            TokenKind.IN,
            TokenKind.MATCHES,
            TokenKind.EQUAL,
            TokenKind.GREATER_THAN,
            TokenKind.LESS_THAN,
            TokenKind.GREATER_EQUAL,
            TokenKind.LESS_EQUAL,
        )

    @property
    def is_parameter_acceptable(self) -> bool:
        return self in (
            TokenKind.NUMBER,
            TokenKind.STRING,
            TokenKind.TRUE,
            TokenKind.FALSE,
            TokenKind.NOW,
        )

    @property
    def is_comparison(self) -> bool:
        return self in (
            TokenKind.EQUAL,
            TokenKind.GREATER_THAN,
            TokenKind.LESS_THAN,
            TokenKind.GREATER_EQUAL,
            TokenKind.LESS_EQUAL,
        )

    @property
    def is_terminal(self) -> bool:
        """No token follows an EOF or ILLEGAL token."""
        return self in (TokenKind.EOF, TokenKind.ILLEGAL)


_DISPLAY: Final[dict[TokenKind, str]] = {
    TokenKind.ILLEGAL: "ILLEGAL",
    TokenKind.EOF: "EOF",
    TokenKind.IDENT: "IDENT",
    TokenKind.COMMENT: "COMMENT",
    TokenKind.NUMBER: "NUMBER",
    TokenKind.STRING: "STRING",
    TokenKind.BETWEEN: "between",
    TokenKind.AND: "and",
    TokenKind.OR: "or",
    TokenKind.IN: "in",
    TokenKind.MATCHES: "matches",
    TokenKind.NOW: "now()",
    TokenKind.DAYS: "days",
    TokenKind.HOURS: "hours",
    TokenKind.WITH: "with",
    TokenKind.THRESHOLD: "threshold",
    TokenKind.TRUE: "true",
    TokenKind.FALSE: "false",
    TokenKind.RULES: "Rules",
    TokenKind.EQUAL: "=",
    TokenKind.GREATER_THAN: ">",
    TokenKind.LESS_THAN: "<",
    TokenKind.GREATER_EQUAL: ">=",
    TokenKind.LESS_EQUAL: "<=",
    TokenKind.PLUS: "+",
    TokenKind.MINUS: "-",
    TokenKind.MULTIPLY: "*",
    TokenKind.DIVIDE: "/",
    TokenKind.LEFT_PAREN: "(",
    TokenKind.RIGHT_PAREN: ")",
    TokenKind.LEFT_BRACKET: "[",
    TokenKind.RIGHT_BRACKET: "]",
    TokenKind.COMMA: ",",
}

KEYWORDS: Final[dict[str, TokenKind]] = {
    "between": TokenKind.BETWEEN,
    "and": TokenKind.AND,
    "or": TokenKind.OR,
    "in": TokenKind.IN,
    "matches": TokenKind.MATCHES,
    "now": TokenKind.NOW,
    "hours": TokenKind.HOURS,
    "days": TokenKind.DAYS,
    "with": TokenKind.WITH,
    "threshold": TokenKind.THRESHOLD,
    "true": TokenKind.TRUE,
    "false": TokenKind.FALSE,
    "Rules": TokenKind.RULES,
}


def lookup_ident(ident: str) -> TokenKind:
    """Map a letter run to its keyword kind, or IDENT when it is not a keyword."""
    return KEYWORDS.get(ident, TokenKind.IDENT)


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexed token.

    `text` is the raw source slice, except for ILLEGAL tokens where it is the scan
    error message.
    """

    kind: TokenKind
    text: str
    start: Pos
    end: Pos

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, start={self.start}, end={self.end}, text={self.text!r})"
