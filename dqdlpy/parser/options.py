"""Parser configuration options."""

from dataclasses import dataclass

from dqdlpy.lexer import LexMode


@dataclass(frozen=True, slots=True)
class ParserOptions:
    """Knobs controlling how a parse is scheduled and how errors are rendered."""

    lex_mode: LexMode = LexMode.THREADED
    snippet_width: int = 20
    name: str | None = None

    def __post_init__(self) -> None:
        if self.snippet_width < 1:
            raise ValueError("snippet_width must be >= 1")

    @staticmethod
    def for_mode(mode: LexMode) -> "ParserOptions":
        return ParserOptions(lex_mode=mode)
