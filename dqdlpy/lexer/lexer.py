"""Lexer."""

import threading
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from dqdlpy.diagnostics.codes import (
    LEXER_CANCELED,
    LEXER_INVALID_NUMBER,
    LEXER_MALFORMED_NOW,
    LEXER_UNRECOGNIZED_CHARACTER,
    LEXER_UNTERMINATED_STRING,
)
from dqdlpy.lexer.tokens import Token, TokenKind, lookup_ident
from dqdlpy.text import Pos

EOF_CHAR = ""

type StateFn = Callable[[], StateFn | None]


@dataclass(frozen=True, slots=True)
class LexerCheckpoint:
    """Cursor state before the most recent `_next` call."""

    position: int
    line: int
    column: int


class Lexer:
    """State-machine scanner producing DQDL tokens.

    Whitespace is skipped, comments are emitted as COMMENT tokens. The stream ends with
    exactly one EOF token, or with one ILLEGAL token carrying the scan error message.
    """

    def __init__(self, name: str, source: str) -> None:
        self._name = name
        self._source = source
        self._start = Pos(0, 1, 1)
        self._position = 0
        self._line = 1
        self._column = 1
        self._previous = LexerCheckpoint(0, 1, 1)
        self._pending: Token | None = None
        self._done = False

    @property
    def name(self) -> str:
        """Name used only for error reports."""
        return self._name

    @property
    def source(self) -> str:
        """Original source text."""
        return self._source

    @property
    def current_pos(self) -> Pos:
        return Pos(self._position, self._line, self._column)

    @property
    def is_eof(self) -> bool:
        return self._position >= len(self._source)

    def tokens(self, cancel: threading.Event | None = None) -> Iterator[Token]:
        """Run the state machine, yielding each token as soon as it is scanned.

        `cancel` is checked before every scan step. Once it is set the stream ends with
        a single ILLEGAL `canceled` token.
        """
        if self._done:
            raise RuntimeError(f"lexer {self._name!r} has already been run")
        self._done = True

        state: StateFn | None = self._lex_rule
        while state is not None:
            if cancel is not None and cancel.is_set():
                yield self._error_token(LEXER_CANCELED.message)
                return
            state = state()
            if self._pending is not None:
                token, self._pending = self._pending, None
                yield token

    def lex(self) -> list[Token]:
        return list(self.tokens())

    # -------------------------
    # States
    # -------------------------

    def _lex_rule(self) -> StateFn | None:
        while True:
            ch = self._next()
            if ch == EOF_CHAR:
                self._emit(TokenKind.EOF)
                return None
            if _is_space(ch):
                self._ignore()
                continue
            if _is_letter(ch):
                self._backup()
                return self._lex_identifier
            if ch == '"':
                return self._lex_string
            if _is_digit(ch):
                self._backup()
                return self._lex_number
            if ch == "#":
                return self._lex_comment

            if ch in (">", "<"):
                if self._accept("="):
                    self._emit(TokenKind.GREATER_EQUAL if ch == ">" else TokenKind.LESS_EQUAL)
                else:
                    self._emit(TokenKind.GREATER_THAN if ch == ">" else TokenKind.LESS_THAN)
                return self._lex_rule

            kind = _PUNCTUATION.get(ch)
            if kind is None:
                return self._errorf(LEXER_UNRECOGNIZED_CHARACTER.format(char=_describe_char(ch)))
            self._emit(kind)
            return self._lex_rule

    def _lex_comment(self) -> StateFn | None:
        # Consume until end of line, do not consume the newline itself.
        while True:
            ch = self._next()
            if ch == "\n" or ch == EOF_CHAR:
                self._backup()
                self._emit(TokenKind.COMMENT)
                return self._lex_rule

    def _lex_identifier(self) -> StateFn | None:
        while _is_letter(self._next()):
            pass
        self._backup()

        kind = lookup_ident(self._source[self._start.index : self._position])
        if kind == TokenKind.NOW:
            # The literal of NOW includes its parentheses.
            if self._next() != "(" or self._next() != ")":
                return self._errorf(LEXER_MALFORMED_NOW.message)
        self._emit(kind)
        return self._lex_rule

    def _lex_string(self) -> StateFn | None:
        while True:
            ch = self._next()
            if ch == EOF_CHAR:
                return self._errorf(LEXER_UNTERMINATED_STRING.message)
            if ch == '"':
                self._emit(TokenKind.STRING)
                return self._lex_rule

    def _lex_number(self) -> StateFn | None:
        saw_dot = False
        while True:
            ch = self._next()
            if _is_digit(ch):
                continue
            if ch == ".":
                if saw_dot:
                    return self._errorf(LEXER_INVALID_NUMBER.message)
                saw_dot = True
                continue
            if _is_letter(ch):
                return self._errorf(LEXER_INVALID_NUMBER.message)
            self._backup()
            self._emit(TokenKind.NUMBER)
            return self._lex_rule

    # -------------------------
    # Cursor
    # -------------------------

    def _next(self) -> str:
        self._previous = LexerCheckpoint(self._position, self._line, self._column)
        if self.is_eof:
            return EOF_CHAR
        ch = self._source[self._position]
        self._position += 1
        if ch == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1
        return ch

    def _backup(self) -> None:
        """Undo the most recent `_next`. Only one step of history is kept."""
        self._position = self._previous.position
        self._line = self._previous.line
        self._column = self._previous.column

    def _accept(self, valid: str) -> bool:
        ch = self._next()
        if ch != EOF_CHAR and ch in valid:
            return True
        self._backup()
        return False

    def _ignore(self) -> None:
        self._start = self.current_pos

    def _emit(self, kind: TokenKind) -> None:
        end = self.current_pos
        self._pending = Token(kind, self._source[self._start.index : end.index], self._start, end)
        self._start = end

    def _error_token(self, message: str) -> Token:
        return Token(TokenKind.ILLEGAL, message, self._start, self.current_pos)

    def _errorf(self, message: str) -> None:
        self._pending = self._error_token(message)
        return None


_PUNCTUATION: dict[str, TokenKind] = {
    "(": TokenKind.LEFT_PAREN,
    ")": TokenKind.RIGHT_PAREN,
    "[": TokenKind.LEFT_BRACKET,
    "]": TokenKind.RIGHT_BRACKET,
    ",": TokenKind.COMMA,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.MULTIPLY,
    "/": TokenKind.DIVIDE,
    "=": TokenKind.EQUAL,
}


def _is_space(ch: str) -> bool:
    return ch == " " or ch == "\t" or ch == "\n"


def _is_letter(ch: str) -> bool:
    return "a" <= ch <= "z" or "A" <= ch <= "Z"


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _describe_char(ch: str) -> str:
    code = f"U+{ord(ch):04X}"
    if ch.isprintable():
        return f"{code} '{ch}'"
    return code


def dump_tokens(tokens: list[Token]) -> None:
    """Print token list with kind, positions, and text for debugging."""
    for i, tok in enumerate(tokens):
        print(f"{i:03d} {tok.kind.name:<14} start={tok.start} end={tok.end} text={tok.text!r}")


def token_text(source: str, token: Token) -> str:
    """Slice the source text covered by `token`. Empty for EOF and ILLEGAL."""
    if token.kind.is_terminal:
        return ""
    return source[token.start.index : token.end.index]
