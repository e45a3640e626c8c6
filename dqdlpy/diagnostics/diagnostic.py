"""Diagnostics core types."""

from dataclasses import dataclass

from dqdlpy.diagnostics.codes import Severity
from dqdlpy.text import Pos


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic emitted by the lexer and parser."""

    code: str
    message: str
    pos: Pos
    snippet: str
    severity: Severity = "error"
    hint: str | None = None
    category: str | None = None

    def render(self) -> str:
        return f"syntax error near {self.pos} `{self.snippet}`, {self.message}"
