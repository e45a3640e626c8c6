"""Recursive-descent parser core."""

from dqdlpy.ast import Comment, CommentGroup
from dqdlpy.diagnostics import DqdlSyntaxError
from dqdlpy.diagnostics.codes import DiagnosticSpec
from dqdlpy.lexer import Token, TokenKind
from dqdlpy.parser.options import ParserOptions
from dqdlpy.parser.token_source import TokenSource
from dqdlpy.text import Pos


class Parser:
    """Token access and error reporting for the grammar routines."""

    def __init__(self, source: TokenSource, options: ParserOptions | None = None) -> None:
        self._source = source
        self._options = options or ParserOptions()

    @property
    def source(self) -> TokenSource:
        return self._source

    @property
    def options(self) -> ParserOptions:
        return self._options

    @property
    def text(self) -> str:
        return self._source.text

    def pop(self) -> Token:
        return self._source.pop()

    def push(self, token: Token) -> None:
        self._source.push(token)

    def peek(self) -> Token:
        token = self._source.pop()
        self._source.push(token)
        return token

    def at(self, kind: TokenKind) -> bool:
        return self.peek().kind == kind

    def error(self, spec: DiagnosticSpec, pos: Pos, **values: object) -> DqdlSyntaxError:
        """Build the syntax error for `spec` located at `pos`. The caller raises it."""
        return DqdlSyntaxError.from_spec(
            spec,
            self.text,
            pos,
            snippet_width=self._options.snippet_width,
            **values,
        )

    def parse_line_comments(self, pos: Pos) -> CommentGroup | None:
        """Collect the comments trailing the token at `pos`.

        The first comment must sit on the same line as `pos`. Each following one must be
        on the next line and in the same column as the previous comment.
        """
        comments: list[Comment] = []
        while True:
            token = self.pop()
            if token.kind != TokenKind.COMMENT:
                self.push(token)
                break
            if token.start.line != pos.line:
                if not comments:
                    self.push(token)
                    break
                last = comments[-1].pos
                if last.line + 1 != token.start.line or last.column != token.start.column:
                    self.push(token)
                    break
            comments.append(Comment(token.start, token.text))
        return CommentGroup.of(comments)

    def pop_with_line_comments(self) -> tuple[Token, CommentGroup | None]:
        token = self.pop()
        if token.kind == TokenKind.EOF:
            return token, None
        return token, self.parse_line_comments(token.start)
