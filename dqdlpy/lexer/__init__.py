"""Lexer."""

from dqdlpy.lexer.lexer import Lexer, LexerCheckpoint, dump_tokens, token_text
from dqdlpy.lexer.stream import LexMode, TokenStream
from dqdlpy.lexer.tokens import KEYWORDS, Token, TokenKind, lookup_ident

__all__ = [
    "KEYWORDS",
    "LexMode",
    "Lexer",
    "LexerCheckpoint",
    "Token",
    "TokenKind",
    "TokenStream",
    "dump_tokens",
    "lookup_ident",
    "token_text",
]
