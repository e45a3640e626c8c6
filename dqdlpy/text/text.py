from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True, slots=True, order=True)
class Pos:
    """
    Coordinate of a code point in the source text.

    `index` is a Python string index (code points), `line` and `column` are 1-based.
    A line of 0 marks the invalid position, see `NO_POS`.
    """

    index: int = 0
    line: int = 0
    column: int = 0

    def __post_init__(self):
        if self.index < 0:
            raise ValueError("Pos index cannot be negative")

    @property
    def is_valid(self) -> bool:
        """Check if the position points somewhere in the source."""
        return self.line > 0

    def add_column(self, n: int) -> "Pos":
        """Derive the position `n` code points further on the same line."""
        return Pos(self.index + n, self.line, self.column + n)

    def add_line(self, n: int) -> "Pos":
        """Derive the position at the start of the line `n` lines further."""
        return Pos(self.index + n, self.line + n, 1)

    def __str__(self) -> str:
        if not self.is_valid:
            return "-"
        if self.column == 0:
            return f"{self.line}"
        return f"{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"Pos({self.index}, {self.line}, {self.column})"


NO_POS: Final[Pos] = Pos()
"""Sentinel for "no position"."""


def near_snippet(source: str, pos: Pos, width: int = 20) -> str:
    """Get the source excerpt shown in syntax errors.

    Starts one code point before `pos`, stops at the end of that line and is cut to
    `width` code points with a trailing ellipsis.
    """
    text = source if pos.index - 1 < 0 else source[pos.index - 1 :]
    newline = text.find("\n")
    if newline >= 0:
        text = text[:newline]
    if len(text) > width:
        text = text[:width] + "..."
    return text
