"""Exceptions raised by the parse entry points."""

from __future__ import annotations

from dqdlpy.diagnostics.codes import PARSER_NO_RULES_FOUND, DiagnosticSpec
from dqdlpy.diagnostics.diagnostic import Diagnostic
from dqdlpy.text import Pos, near_snippet


class ParseError(Exception):
    """Base class for every failure surfaced by `parse_rule`/`parse_ruleset`/`parse_file`."""


class DqdlSyntaxError(ParseError):
    """Scan or grammar error located in the source text."""

    def __init__(self, diagnostic: Diagnostic) -> None:
        super().__init__(diagnostic.render())
        self.diagnostic = diagnostic

    @property
    def code(self) -> str:
        return self.diagnostic.code

    @property
    def pos(self) -> Pos:
        return self.diagnostic.pos

    @property
    def message(self) -> str:
        return self.diagnostic.message

    @classmethod
    def from_spec(
        cls,
        spec: DiagnosticSpec,
        source: str,
        pos: Pos,
        *,
        snippet_width: int = 20,
        **values: object,
    ) -> DqdlSyntaxError:
        return cls(
            Diagnostic(
                code=spec.code,
                message=spec.format(**values),
                pos=pos,
                snippet=near_snippet(source, pos, snippet_width),
                severity=spec.severity,
                hint=spec.hint,
                category=spec.category,
            )
        )


class NoRulesFoundError(ParseError):
    """The input holds nothing that parses as a ruleset."""

    code = PARSER_NO_RULES_FOUND.code

    def __init__(self) -> None:
        super().__init__(PARSER_NO_RULES_FOUND.message)
