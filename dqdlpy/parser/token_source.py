"""Token source with unlimited pushback in front of the token stream."""

from dqdlpy.diagnostics import DqdlSyntaxError
from dqdlpy.diagnostics.codes import LEXER_SCAN_ERROR
from dqdlpy.lexer import Token, TokenKind, TokenStream


class TokenSource:
    """Bridge between token stream and parser.

    Pushed-back tokens are returned before new ones, last pushed first. EOF is sticky:
    once the stream has produced it, every further pop returns it again. ILLEGAL tokens
    are raised as syntax errors instead of being returned.
    """

    def __init__(self, stream: TokenStream, *, snippet_width: int = 20) -> None:
        self._stream = stream
        self._stack: list[Token] = []
        self._eof: Token | None = None
        self._snippet_width = snippet_width

    @property
    def text(self) -> str:
        return self._stream.lexer.source

    @property
    def stream(self) -> TokenStream:
        return self._stream

    def pop(self) -> Token:
        if self._stack:
            return self._stack.pop()
        if self._eof is not None:
            return self._eof

        token = self._stream.next()
        if token is None:
            raise RuntimeError("token stream closed before EOF")
        if token.kind == TokenKind.ILLEGAL:
            raise DqdlSyntaxError.from_spec(
                LEXER_SCAN_ERROR,
                self.text,
                token.start,
                snippet_width=self._snippet_width,
                message=token.text,
            )
        if token.kind == TokenKind.EOF:
            self._eof = token
        return token

    def push(self, token: Token) -> None:
        self._stack.append(token)
